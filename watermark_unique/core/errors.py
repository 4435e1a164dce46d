"""
Watermark Errors
================
Exception hierarchy for the watermark pipeline.

Every error carries a short ``code`` that callers surface as-is:

- WatermarkError (base)
    - ArgumentError        ARGUMENT_ERROR
    - InvalidDimensions    ARGUMENT_ERROR
    - DecodeError          PROCESSING_ERROR
    - EncodeError          PROCESSING_ERROR
    - UnsupportedFormat    UNSUPPORTED_FORMAT
    - WriteError           WRITE_ERROR
"""

from typing import Optional


class WatermarkError(Exception):
    """
    Base class for all watermark pipeline errors.

    Args:
        message: Human readable description.
        original_error: The underlying exception, if any.
    """

    code = "PROCESSING_ERROR"

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ArgumentError(WatermarkError):
    """A required field is missing or has the wrong type."""

    code = "ARGUMENT_ERROR"


class InvalidDimensions(WatermarkError):
    """Overlay target width or height is not positive."""

    code = "ARGUMENT_ERROR"

    def __init__(self, width: int, height: int):
        super().__init__(
            f"Watermark size must be positive, got {width}x{height}"
        )
        self.width = width
        self.height = height


class DecodeError(WatermarkError):
    """Source or watermark image could not be read."""

    code = "PROCESSING_ERROR"


class EncodeError(WatermarkError):
    """The codec failed while serializing the result."""

    code = "PROCESSING_ERROR"


class UnsupportedFormat(WatermarkError):
    """Output format is not PNG or JPEG."""

    code = "UNSUPPORTED_FORMAT"

    def __init__(self, image_format):
        super().__init__(f"Unsupported image format: {image_format!r}")
        self.image_format = image_format


class WriteError(WatermarkError):
    """Encoded bytes could not be written to disk."""

    code = "WRITE_ERROR"
