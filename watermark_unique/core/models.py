"""
Watermark Request Models
========================
Plain dataclasses describing a single watermark call.

A pixel buffer is a Pillow ``Image`` in RGBA mode; no wrapper type is used.
Coordinates use a top-left origin with y increasing downward.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from PIL import Image

from .encoder import OutputFormat

RGBAColor = Tuple[int, int, int, int]


def color_from_argb(value: int) -> RGBAColor:
    """
    Unpack a 32-bit ARGB integer (0xAARRGGBB) into an RGBA tuple.

    Negative values (signed 32-bit ints from other runtimes) are accepted.
    """
    value = int(value) & 0xFFFFFFFF
    return (
        (value >> 16) & 0xFF,
        (value >> 8) & 0xFF,
        value & 0xFF,
        (value >> 24) & 0xFF,
    )


@dataclass(frozen=True)
class Padding:
    """Background box padding around a text block, in pixels.

    Negative sides are clamped to 0 so the box only ever grows outward.
    """
    top: int = 0
    bottom: int = 0
    left: int = 0
    right: int = 0

    def __post_init__(self):
        for side in ("top", "bottom", "left", "right"):
            object.__setattr__(self, side, max(0, int(getattr(self, side))))

    @classmethod
    def from_optional(
            cls,
            top: Optional[float] = None,
            bottom: Optional[float] = None,
            left: Optional[float] = None,
            right: Optional[float] = None
    ) -> "Padding":
        """Build a Padding where any missing side is 0."""
        return cls(
            top=int(top or 0),
            bottom=int(bottom or 0),
            left=int(left or 0),
            right=int(right or 0),
        )


@dataclass
class WatermarkRequest:
    """
    Output and placement controls shared by both watermark kinds.

    Rotation policy: an explicit ``rotate_angle`` (clockwise degrees) wins,
    otherwise ``auto_rotate`` uses the EXIF orientation of the source,
    otherwise the source is used as decoded.
    """
    output_format: OutputFormat = OutputFormat.PNG
    quality: int = 100
    x: Optional[int] = None
    y: Optional[int] = None
    rotate_angle: Optional[float] = None
    auto_rotate: bool = False


@dataclass
class TextWatermark(WatermarkRequest):
    """Text stamped in a wrapped block, bottom-left by default."""
    text: str = ""
    font_size: int = 40
    text_color: RGBAColor = (255, 255, 255, 255)
    background_color: Optional[RGBAColor] = None
    padding: Padding = field(default_factory=Padding)


@dataclass
class ImageWatermark(WatermarkRequest):
    """An overlay image scaled to ``target_width x target_height``."""
    watermark_source: Optional[Image.Image] = None
    target_width: int = 0
    target_height: int = 0
