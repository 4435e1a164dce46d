"""
Watermark Unique Package
========================
Stamps a text or image watermark onto a photo and re-encodes the result.

Modules:
    - core: Pure image pipeline (no Qt dependencies)
    - workers: Request handling and QThread workers for async processing

Usage:
    from watermark_unique.core import Watermarker, TextWatermark
    from watermark_unique.workers import build_job, WatermarkWorker
"""

__version__ = "1.0.0"
__app_name__ = "Watermark Unique"

# Core exports
from .core import (
    Watermarker, TextWatermark, ImageWatermark, Padding, OutputFormat,
    EncodedImage, Orientation, WatermarkError
)
# Worker exports
from .workers import (
    WatermarkWorker, WatermarkJob, WatermarkResult, OutputNaming, build_job, run_job
)

__all__ = [
    # Version info
    "__version__",
    "__app_name__",

    # Core
    "Watermarker",
    "TextWatermark",
    "ImageWatermark",
    "Padding",
    "OutputFormat",
    "EncodedImage",
    "Orientation",
    "WatermarkError",

    # Workers
    "WatermarkWorker",
    "WatermarkJob",
    "WatermarkResult",
    "OutputNaming",
    "build_job",
    "run_job",
]
