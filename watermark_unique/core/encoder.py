"""
Image Codec
===========
Decoding of source images and encoding of composited results via Pillow.

Technical Notes:
- PNG is lossless, quality is ignored
- JPEG has no alpha channel, so RGBA buffers are flattened onto white
- Quality is clamped to [0, 100], never rejected
- Unknown output formats are rejected with UnsupportedFormat
"""

import logging
from dataclasses import dataclass
from enum import Enum
from io import BytesIO
from pathlib import Path
from typing import Union

from PIL import Image, UnidentifiedImageError

from .errors import DecodeError, EncodeError, UnsupportedFormat

logger = logging.getLogger(__name__)


class OutputFormat(Enum):
    """Supported output encodings."""

    PNG = "png"
    JPEG = "jpeg"

    @classmethod
    def parse(cls, name) -> "OutputFormat":
        """
        Resolve a caller supplied format name.

        Accepts "png", "jpeg" and "jpg" in any case.

        Raises:
            UnsupportedFormat: For anything else.
        """
        if isinstance(name, OutputFormat):
            return name
        if not isinstance(name, str):
            raise UnsupportedFormat(name)

        key = name.strip().lower()
        if key == "png":
            return cls.PNG
        if key in ("jpeg", "jpg"):
            return cls.JPEG
        raise UnsupportedFormat(name)

    @property
    def extension(self) -> str:
        return self.value

    @property
    def pil_format(self) -> str:
        return self.name


@dataclass(frozen=True)
class EncodedImage:
    """Encoded output bytes plus the format they were written in."""
    data: bytes
    format: OutputFormat

    @property
    def extension(self) -> str:
        return self.format.extension


def clamp_quality(quality: int) -> int:
    """Clamp a JPEG quality value into [0, 100]."""
    return max(0, min(100, int(quality)))


def decode(source: Union[bytes, str, Path]) -> Image.Image:
    """
    Decode raw bytes or an image file into a fully loaded Pillow image.

    Args:
        source: Encoded image bytes or a path to an image file.

    Returns:
        The decoded image, in whatever mode the file uses.

    Raises:
        DecodeError: If the data is missing, truncated or not an image.
    """
    try:
        if isinstance(source, (bytes, bytearray)):
            image = Image.open(BytesIO(source))
        else:
            image = Image.open(Path(source))
        try:
            image.load()
        except Exception:
            image.close()
            raise
    except (OSError, UnidentifiedImageError, ValueError) as e:
        raise DecodeError(f"Cannot decode image: {e}", original_error=e) from e

    logger.debug("Decoded %s image %dx%d", image.format, *image.size)
    return image


def encode(image: Image.Image, output_format, quality: int = 100) -> EncodedImage:
    """
    Serialize a pixel buffer as PNG or JPEG.

    Args:
        image: The composited image.
        output_format: OutputFormat or a format name ("png", "jpeg", "jpg").
        quality: JPEG quality, clamped to [0, 100]. Ignored for PNG.

    Returns:
        EncodedImage with the bytes and the format actually used.

    Raises:
        UnsupportedFormat: If the format is not PNG or JPEG.
        EncodeError: If Pillow fails to write the data.
    """
    output_format = OutputFormat.parse(output_format)
    buffer = BytesIO()

    try:
        if output_format is OutputFormat.JPEG:
            quality = clamp_quality(quality)
            if image.mode in ("RGBA", "LA", "P"):
                rgba = image.convert("RGBA")
                flattened = Image.new("RGB", rgba.size, (255, 255, 255))
                flattened.paste(rgba, mask=rgba.split()[3])
            else:
                flattened = image.convert("RGB")
            flattened.save(buffer, format=output_format.pil_format, quality=quality)
        else:
            image.save(buffer, format=output_format.pil_format)
    except (OSError, ValueError) as e:
        raise EncodeError(f"Cannot encode image as {output_format.name}: {e}", original_error=e) from e

    data = buffer.getvalue()
    logger.debug("Encoded %s, %d bytes", output_format.name, len(data))
    return EncodedImage(data=data, format=output_format)
