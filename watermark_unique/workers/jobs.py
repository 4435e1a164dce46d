"""
Watermark Jobs
==============
Caller-side handling around the core pipeline: argument parsing, loading the
overlay image, and persisting the encoded result.

Request schema (method-channel style dictionaries):

    addTextWatermark:  filePath, text, textSize, color, quality, imageFormat
                       [x, y, backgroundTextColor, backgroundTextPadding*,
                        rotateAngle, isNeedRotate, outputNaming]
    addImageWatermark: filePath, watermarkImagePath, watermarkWidth,
                       watermarkHeight, quality, imageFormat
                       [x, y, rotateAngle, isNeedRotate, outputNaming]

Naming Convention:
- unique (default): {uuid}.{ext} next to the source
- replace: {source_stem}.{ext}, the source file is removed if renamed
"""

import logging
import os
import tempfile
import uuid
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from watermark_unique.core.encoder import EncodedImage, OutputFormat, decode
from watermark_unique.core.errors import ArgumentError, WatermarkError, WriteError
from watermark_unique.core.models import (
    ImageWatermark, Padding, TextWatermark, WatermarkRequest, color_from_argb
)
from watermark_unique.core.watermarker import Watermarker

logger = logging.getLogger(__name__)

ADD_TEXT_WATERMARK = "addTextWatermark"
ADD_IMAGE_WATERMARK = "addImageWatermark"


class OutputNaming(Enum):
    UNIQUE = "unique"
    REPLACE = "replace"


@dataclass
class WatermarkJob:
    """One watermark call plus where its output goes."""
    source_path: Path
    request: WatermarkRequest
    watermark_path: Optional[Path] = None
    output_naming: OutputNaming = OutputNaming.UNIQUE
    output_dir: Optional[Path] = None


@dataclass
class WatermarkResult:
    """Outcome of a single job."""
    source_path: Path
    output_path: Optional[Path] = None
    output_format: Optional[OutputFormat] = None
    success: bool = False
    error_code: str = ""
    error_message: str = ""


def _get(arguments: Dict[str, Any], key: str, kind: str, required: bool = False):
    value = arguments.get(key)
    if value is None:
        if required:
            raise ArgumentError(f"Missing argument: {key}")
        return None

    if kind == "str":
        valid = isinstance(value, str)
    elif kind == "bool":
        valid = isinstance(value, bool)
    elif kind == "int":
        valid = isinstance(value, int) and not isinstance(value, bool)
    else:
        valid = isinstance(value, (int, float)) and not isinstance(value, bool)

    if not valid:
        raise ArgumentError(f"Invalid argument {key}: expected {kind}, got {type(value).__name__}")
    return value


def _common_fields(arguments: Dict[str, Any]) -> Dict[str, Any]:
    rotate_angle = _get(arguments, "rotateAngle", "number")
    is_need_rotate = _get(arguments, "isNeedRotate", "bool")
    x = _get(arguments, "x", "number")
    y = _get(arguments, "y", "number")

    return dict(
        output_format=OutputFormat.parse(_get(arguments, "imageFormat", "str", required=True)),
        quality=int(_get(arguments, "quality", "number", required=True)),
        x=int(x) if x is not None else None,
        y=int(y) if y is not None else None,
        rotate_angle=float(rotate_angle) if rotate_angle is not None else None,
        auto_rotate=True if is_need_rotate is None else is_need_rotate,
    )


def _output_naming(arguments: Dict[str, Any]) -> OutputNaming:
    name = _get(arguments, "outputNaming", "str")
    if name is None:
        return OutputNaming.UNIQUE
    try:
        return OutputNaming(name.lower())
    except ValueError:
        raise ArgumentError(f"Invalid argument outputNaming: {name!r}") from None


def build_job(method: str, arguments: Dict[str, Any]) -> WatermarkJob:
    """
    Validate caller arguments and build a job, before any decoding.

    Args:
        method: "addTextWatermark" or "addImageWatermark".
        arguments: Caller supplied fields.

    Raises:
        ArgumentError: Unknown method, missing or wrongly typed field.
        UnsupportedFormat: Unknown imageFormat.
    """
    if not isinstance(arguments, dict):
        raise ArgumentError("Missing arguments")

    source_path = Path(_get(arguments, "filePath", "str", required=True))

    if method == ADD_TEXT_WATERMARK:
        background = _get(arguments, "backgroundTextColor", "int")
        request = TextWatermark(
            text=_get(arguments, "text", "str", required=True),
            font_size=int(_get(arguments, "textSize", "number", required=True)),
            text_color=color_from_argb(_get(arguments, "color", "int", required=True)),
            background_color=color_from_argb(background) if background is not None else None,
            padding=Padding.from_optional(
                top=_get(arguments, "backgroundTextPaddingTop", "number"),
                bottom=_get(arguments, "backgroundTextPaddingBottom", "number"),
                left=_get(arguments, "backgroundTextPaddingLeft", "number"),
                right=_get(arguments, "backgroundTextPaddingRight", "number"),
            ),
            **_common_fields(arguments)
        )
        watermark_path = None
    elif method == ADD_IMAGE_WATERMARK:
        watermark_path = Path(_get(arguments, "watermarkImagePath", "str", required=True))
        request = ImageWatermark(
            target_width=int(_get(arguments, "watermarkWidth", "number", required=True)),
            target_height=int(_get(arguments, "watermarkHeight", "number", required=True)),
            **_common_fields(arguments)
        )
    else:
        raise ArgumentError(f"Unknown method: {method}")

    return WatermarkJob(
        source_path=source_path,
        request=request,
        watermark_path=watermark_path,
        output_naming=_output_naming(arguments),
    )


def _target_path(job: WatermarkJob, encoded: EncodedImage) -> Path:
    directory = job.output_dir or job.source_path.parent
    if job.output_naming is OutputNaming.REPLACE:
        return directory / f"{job.source_path.stem}.{encoded.extension}"
    return directory / f"{uuid.uuid4()}.{encoded.extension}"


def write_output(job: WatermarkJob, encoded: EncodedImage) -> Path:
    """
    Atomically write encoded bytes according to the job's naming policy.

    Returns:
        Absolute path of the written file.

    Raises:
        WriteError: If the directory or file cannot be written.
    """
    target = _target_path(job, encoded).absolute()
    temp_name = None

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
                dir=target.parent, suffix=".tmp", delete=False
        ) as handle:
            temp_name = handle.name
            handle.write(encoded.data)
        os.replace(temp_name, target)
        temp_name = None

        # A replace only renames within the source's own folder
        source = job.source_path.absolute()
        renamed = source.parent == target.parent and source != target
        if job.output_naming is OutputNaming.REPLACE and renamed and source.exists():
            source.unlink()
    except OSError as e:
        raise WriteError(f"Error writing file {target}: {e}", original_error=e) from e
    finally:
        if temp_name is not None and os.path.exists(temp_name):
            os.unlink(temp_name)

    return target


def run_job(job: WatermarkJob, watermarker: Optional[Watermarker] = None) -> WatermarkResult:
    """
    Execute one job end to end. Never raises; failures land in the result.

    Args:
        job: The job to run.
        watermarker: Shared pipeline instance (a new one if None).

    Returns:
        WatermarkResult with the output path or the error code and message.
    """
    watermarker = watermarker or Watermarker()
    result = WatermarkResult(source_path=job.source_path)

    try:
        request = job.request
        if job.watermark_path is not None:
            request = replace(request, watermark_source=decode(job.watermark_path))

        encoded = watermarker.process(job.source_path, request)

        result.output_path = write_output(job, encoded)
        result.output_format = encoded.format
        result.success = True
        logger.info("Wrote %s", result.output_path)

    except WatermarkError as e:
        result.error_code = e.code
        result.error_message = e.message
        logger.warning("Job for %s failed [%s]: %s", job.source_path, e.code, e.message)

    except Exception as e:
        result.error_code = "PROCESSING_ERROR"
        result.error_message = str(e)
        logger.exception("Unexpected error processing %s", job.source_path)

    return result
