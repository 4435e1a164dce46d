"""
Font Loading and Metrics
========================
Resolves a drawable font per size and measures text with it.

The layout engine only depends on ``measure(text) -> (width, height)``, so any
object with that method can stand in for a real font in tests.
"""

import logging
from pathlib import Path
from typing import Optional, Tuple, Union

from PIL import ImageFont

logger = logging.getLogger(__name__)

PillowFont = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]

# Tried in order when no custom font is configured
SYSTEM_FONT_CANDIDATES = (
    "msyh.ttc",                                          # Windows
    "/System/Library/Fonts/PingFang.ttc",                # macOS
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",   # Linux
)


class PillowFontMetrics:
    """
    Measures text with a Pillow font.

    Width runs from the drawing origin to the right edge of the ink, so text
    drawn at x never passes x + width. Height is the font line height
    (ascent + descent), identical for every line.
    """

    def __init__(self, font: PillowFont):
        self.font = font
        if hasattr(font, "getmetrics"):
            ascent, descent = font.getmetrics()
            self._line_height = ascent + descent
        else:
            # Bitmap fonts have no metrics table
            bbox = font.getbbox("Ay")
            self._line_height = bbox[3] - bbox[1]

    @property
    def line_height(self) -> int:
        return self._line_height

    def measure(self, text: str) -> Tuple[int, int]:
        if not text:
            return 0, self._line_height
        bbox = self.font.getbbox(text)
        return max(0, bbox[2]), self._line_height


class FontCache:
    """
    Per-size cache of loaded fonts.

    Args:
        font_path: Optional path to a TTF/OTF font. Falls back to the
                   system candidates, then to Pillow's bundled font.
    """

    def __init__(self, font_path: Optional[str] = None):
        self._font_path = font_path
        self._cached_fonts: dict[int, PillowFont] = {}

    def _load(self, size: int) -> PillowFont:
        if self._font_path and Path(self._font_path).exists():
            return ImageFont.truetype(self._font_path, size)

        for candidate in SYSTEM_FONT_CANDIDATES:
            try:
                return ImageFont.truetype(candidate, size)
            except OSError:
                continue

        logger.debug("No system font found, using Pillow default at size %d", size)
        return ImageFont.load_default(size=size)

    def get_font(self, size: int) -> PillowFont:
        """Get or create the font for ``size`` pixels."""
        if size not in self._cached_fonts:
            self._cached_fonts[size] = self._load(size)
        return self._cached_fonts[size]

    def metrics(self, size: int) -> PillowFontMetrics:
        """Font metrics for ``size`` pixels, backed by the cached font."""
        return PillowFontMetrics(self.get_font(size))

    def clear(self):
        self._cached_fonts.clear()
