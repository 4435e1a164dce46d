"""
Watermark Pipeline V1.0
=======================
Decode -> normalize orientation -> composite -> encode, using PIL/Pillow.

Technical Notes:
- Each call works on its own buffers, so one Watermarker may serve
  independent requests concurrently (only the font cache is shared)
- Arguments are validated before any decoding happens
- A call either returns a complete EncodedImage or raises a WatermarkError
"""

import logging
from pathlib import Path
from typing import Optional, Tuple, Union

from PIL import Image

from .compositor import Compositor, CompositorConfig
from .encoder import EncodedImage, OutputFormat, decode, encode
from .errors import ArgumentError
from .fonts import FontCache
from .models import ImageWatermark, Padding, RGBAColor, TextWatermark, WatermarkRequest
from .orientation import normalize, read_orientation

logger = logging.getLogger(__name__)

ImageSource = Union[bytes, str, Path]


class Watermarker:
    """
    Stamps text or image watermarks onto photos and re-encodes them.

    The font cache lives for the lifetime of the instance; everything else
    is created per call.
    """

    def __init__(self, font_path: Optional[str] = None, config: Optional[CompositorConfig] = None):
        """
        Initialize the Watermarker.

        Args:
            font_path: Optional path to a custom TTF font file.
                      If None, a system font or Pillow's default is used.
            config: Compositor margins and shadow settings.
        """
        self.fonts = FontCache(font_path)
        self.compositor = Compositor(config=config, fonts=self.fonts)

    @staticmethod
    def validate(request: WatermarkRequest) -> OutputFormat:
        """
        Check a request before any image is decoded.

        The request itself is left untouched.

        Returns:
            The parsed output format.

        Raises:
            ArgumentError: On a missing or wrongly typed field.
            UnsupportedFormat: If the output format is unknown.
        """
        if not isinstance(request, (TextWatermark, ImageWatermark)):
            raise ArgumentError(f"Unknown watermark request: {type(request).__name__}")

        output_format = OutputFormat.parse(request.output_format)

        if isinstance(request.quality, bool) or not isinstance(request.quality, (int, float)):
            raise ArgumentError("quality must be a number")

        if isinstance(request, TextWatermark):
            if not isinstance(request.text, str):
                raise ArgumentError("text must be a string")
            if request.font_size <= 0:
                raise ArgumentError(f"Font size must be positive, got {request.font_size}")
        elif not isinstance(request.watermark_source, Image.Image):
            raise ArgumentError("Image watermark requires a decoded watermark_source")

        return output_format

    def _upright(self, image: Image.Image, request: WatermarkRequest) -> Image.Image:
        if request.rotate_angle is not None:
            return normalize(image, angle=request.rotate_angle)
        if request.auto_rotate:
            return normalize(image, orientation=read_orientation(image))
        return image

    def process_image_object(self, image: Image.Image, request: WatermarkRequest) -> Image.Image:
        """
        Apply a watermark to an already decoded image.

        Useful for chaining with other processing steps. The orientation
        policy of the request is applied first.

        Returns:
            New RGBA image with the watermark applied.
        """
        self.validate(request)
        return self._watermark(image, request)

    def _watermark(self, image: Image.Image, request: WatermarkRequest) -> Image.Image:
        upright = self._upright(image, request)
        if upright.mode != "RGBA":
            upright = upright.convert("RGBA")

        return self.compositor.composite(upright, request)

    def process(self, source: ImageSource, request: WatermarkRequest) -> EncodedImage:
        """
        Run the full pipeline on encoded input.

        Args:
            source: Encoded image bytes or a path to the source photo.
            request: TextWatermark or ImageWatermark.

        Returns:
            EncodedImage holding the output bytes and format.

        Raises:
            ArgumentError, UnsupportedFormat: Before decoding.
            DecodeError: If the source cannot be read.
            InvalidDimensions: For a non-positive overlay size.
            EncodeError: If serialization fails.
        """
        output_format = self.validate(request)

        image = decode(source)
        result = self._watermark(image, request)

        encoded = encode(result, output_format, request.quality)
        logger.info(
            "Watermarked %dx%d image as %s (%d bytes)",
            result.width, result.height, encoded.format.name, len(encoded.data)
        )
        return encoded


# Convenience function for simple usage
def add_text_watermark(
        source: ImageSource,
        text: str,
        font_size: int = 40,
        text_color: RGBAColor = (255, 255, 255, 255),
        background_color: Optional[RGBAColor] = None,
        padding: Optional[Padding] = None,
        position: Optional[Tuple[int, int]] = None,
        output_format: Union[str, OutputFormat] = OutputFormat.PNG,
        quality: int = 100,
        auto_rotate: bool = True
) -> bytes:
    """
    Convenience function to stamp text onto an image.

    Args:
        source: Source image bytes or path.
        text: Watermark text.
        font_size: Font size in pixels.
        text_color: RGBA text color.
        background_color: Optional RGBA color of the box behind the text.
        padding: Background box padding.
        position: Optional (x, y) of the block's top-left corner.
        output_format: "png", "jpeg" or "jpg".
        quality: JPEG quality (0-100).
        auto_rotate: Apply the source's EXIF orientation first.

    Returns:
        The encoded image bytes.
    """
    x, y = position if position is not None else (None, None)
    request = TextWatermark(
        text=text,
        font_size=font_size,
        text_color=text_color,
        background_color=background_color,
        padding=padding or Padding(),
        x=x,
        y=y,
        output_format=OutputFormat.parse(output_format),
        quality=quality,
        auto_rotate=auto_rotate,
    )
    return Watermarker().process(source, request).data
