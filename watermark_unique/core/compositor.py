"""
Watermark Compositor
====================
Draws a wrapped text block or a scaled overlay image onto an upright photo.

Technical Notes:
- Origin is top-left, y grows downward
- Text is drawn on a transparent RGBA layer, then alpha-composited so
  translucent text and background colors blend with the photo
- Overlay images are scaled into a fresh buffer and pasted opaquely
- The canvas size never changes
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from PIL import Image, ImageDraw

from .errors import ArgumentError, InvalidDimensions
from .fonts import FontCache
from .layout import FontMetrics, TextLine, wrap
from .models import ImageWatermark, RGBAColor, TextWatermark, WatermarkRequest

logger = logging.getLogger(__name__)


@dataclass
class CompositorConfig:
    """Anchoring and decoration defaults for the compositor."""
    margin_left: int = 5
    margin_bottom: int = 5
    shadow: bool = False
    shadow_offset: Tuple[int, int] = (3, 3)
    shadow_color: RGBAColor = (0, 0, 0, 255)


@dataclass(frozen=True)
class TextBlock:
    """Placement of a wrapped text block on a canvas."""
    lines: Tuple[TextLine, ...]
    x: int
    y: int
    left_pad: int = 0
    top_pad: int = 0
    right_pad: int = 0
    bottom_pad: int = 0

    @property
    def content_width(self) -> int:
        return max((line.width for line in self.lines), default=0)

    @property
    def total_height(self) -> int:
        return sum(line.height for line in self.lines)

    @property
    def background_box(self) -> Tuple[int, int, int, int]:
        """(left, top, right, bottom) of the padded background, right/bottom exclusive."""
        return (
            self.x - self.left_pad,
            self.y - self.top_pad,
            self.x + self.content_width + self.right_pad,
            self.y + self.total_height + self.bottom_pad,
        )


class Compositor:
    """
    Stamps watermark requests onto RGBA pixel buffers.

    Args:
        config: Margins and shadow settings. Defaults to CompositorConfig().
        fonts: Font cache used to draw and measure text.
    """

    def __init__(self, config: Optional[CompositorConfig] = None, fonts: Optional[FontCache] = None):
        self.config = config or CompositorConfig()
        self.fonts = fonts or FontCache()

    def layout_text(
            self,
            canvas_size: Tuple[int, int],
            request: TextWatermark,
            metrics: FontMetrics
    ) -> TextBlock:
        """
        Wrap and anchor the request's text on a canvas of ``canvas_size``.

        The block sits ``margin_left`` from the left edge and
        ``margin_bottom`` above the bottom edge unless the request gives an
        explicit ``x`` or ``y``.
        """
        width, height = canvas_size
        pad = request.padding

        max_width = width - pad.left - pad.right
        lines: List[TextLine] = wrap(request.text, max_width, metrics)
        total_height = sum(line.height for line in lines)

        x = request.x if request.x is not None else self.config.margin_left
        y = request.y if request.y is not None else height - total_height - self.config.margin_bottom

        return TextBlock(
            lines=tuple(lines),
            x=int(x),
            y=int(y),
            left_pad=pad.left,
            top_pad=pad.top,
            right_pad=pad.right,
            bottom_pad=pad.bottom,
        )

    def _composite_text(self, base: Image.Image, request: TextWatermark) -> Image.Image:
        if request.font_size <= 0:
            raise ArgumentError(f"Font size must be positive, got {request.font_size}")

        metrics = self.fonts.metrics(request.font_size)
        block = self.layout_text(base.size, request, metrics)

        if not block.lines:
            return base

        if base.mode != "RGBA":
            base = base.convert("RGBA")

        layer = Image.new("RGBA", base.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(layer)

        if request.background_color is not None:
            left, top, right, bottom = block.background_box
            draw.rectangle((left, top, right - 1, bottom - 1), fill=tuple(request.background_color))

        y = block.y
        for line in block.lines:
            if self.config.shadow:
                dx, dy = self.config.shadow_offset
                draw.text(
                    (block.x + dx, y + dy), line.text,
                    font=metrics.font, fill=tuple(self.config.shadow_color)
                )
            draw.text((block.x, y), line.text, font=metrics.font, fill=tuple(request.text_color))
            y += line.height

        logger.debug(
            "Drew %d text line(s) at (%d, %d), block %dx%d",
            len(block.lines), block.x, block.y, block.content_width, block.total_height
        )
        return Image.alpha_composite(base, layer)

    def _composite_image(self, base: Image.Image, request: ImageWatermark) -> Image.Image:
        if request.target_width <= 0 or request.target_height <= 0:
            raise InvalidDimensions(request.target_width, request.target_height)
        if not isinstance(request.watermark_source, Image.Image):
            raise ArgumentError("Image watermark requires a decoded watermark_source")

        # resize() returns a new buffer, the caller's source stays untouched
        overlay = request.watermark_source.convert("RGBA").resize(
            (request.target_width, request.target_height),
            Image.Resampling.BILINEAR
        )

        if request.x is not None:
            x = request.x
        else:
            x = self.config.margin_left
        if request.y is not None:
            y = request.y
        else:
            y = base.height - request.target_height - self.config.margin_bottom

        result = base.convert("RGBA") if base.mode != "RGBA" else base.copy()
        result.paste(overlay, (int(x), int(y)))

        logger.debug(
            "Pasted %dx%d overlay at (%d, %d)",
            request.target_width, request.target_height, x, y
        )
        return result

    def composite(self, base: Image.Image, request: WatermarkRequest) -> Image.Image:
        """
        Apply a watermark request to ``base``.

        Args:
            base: Upright source image. Never modified in place.
            request: TextWatermark or ImageWatermark.

        Returns:
            An image the same size as ``base``. Text that wraps to no lines
            returns ``base`` itself.

        Raises:
            InvalidDimensions: If an overlay target size is not positive.
            ArgumentError: For an unknown request type or missing overlay.
        """
        if isinstance(request, TextWatermark):
            return self._composite_text(base, request)
        if isinstance(request, ImageWatermark):
            return self._composite_image(base, request)
        raise ArgumentError(f"Unknown watermark request: {type(request).__name__}")
