"""
Core Module - Pure Image Logic
==============================
This module contains no Qt dependencies.
All watermark processing steps are implemented here.
"""

from .compositor import Compositor, CompositorConfig, TextBlock
from .encoder import EncodedImage, OutputFormat, clamp_quality, decode, encode
from .errors import (
    ArgumentError, DecodeError, EncodeError, InvalidDimensions,
    UnsupportedFormat, WatermarkError, WriteError
)
from .fonts import FontCache, PillowFontMetrics
from .layout import TextLine, wrap
from .models import ImageWatermark, Padding, TextWatermark, WatermarkRequest, color_from_argb
from .orientation import Orientation, normalize, read_orientation
from .watermarker import Watermarker, add_text_watermark

__all__ = [
    "Watermarker",
    "add_text_watermark",
    "Compositor",
    "CompositorConfig",
    "TextBlock",
    "EncodedImage",
    "OutputFormat",
    "clamp_quality",
    "decode",
    "encode",
    "FontCache",
    "PillowFontMetrics",
    "TextLine",
    "wrap",
    "ImageWatermark",
    "Padding",
    "TextWatermark",
    "WatermarkRequest",
    "color_from_argb",
    "Orientation",
    "normalize",
    "read_orientation",
    "WatermarkError",
    "ArgumentError",
    "DecodeError",
    "EncodeError",
    "InvalidDimensions",
    "UnsupportedFormat",
    "WriteError",
]
