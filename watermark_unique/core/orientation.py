"""
Orientation Normalizer
======================
Turns a decoded photo upright before anything is drawn on it.

Two mutually exclusive paths:
- EXIF orientation tag: exact 90 degree transposes
- Explicit angle: free rotation on an expanded canvas so no corner is clipped
"""

import logging
from enum import IntEnum
from typing import Optional

from PIL import ExifTags, Image

from .errors import ArgumentError

logger = logging.getLogger(__name__)


class Orientation(IntEnum):
    """
    EXIF orientation values that need a rotation.

    The name gives the clockwise rotation that makes the content upright.
    Mirrored values (2, 4, 5, 7) are treated as NORMAL.
    """
    NORMAL = 1
    ROTATE_180 = 3
    ROTATE_90 = 6
    ROTATE_270 = 8


# Pillow's transpose constants rotate counter-clockwise
_TRANSPOSES = {
    Orientation.ROTATE_90: Image.Transpose.ROTATE_270,
    Orientation.ROTATE_180: Image.Transpose.ROTATE_180,
    Orientation.ROTATE_270: Image.Transpose.ROTATE_90,
}


def read_orientation(image: Image.Image) -> Orientation:
    """
    Read the EXIF orientation of a decoded image.

    Returns NORMAL when the tag is absent, unreadable or unsupported.
    """
    try:
        value = image.getexif().get(ExifTags.Base.Orientation)
    except (AttributeError, KeyError, ValueError, OSError):
        return Orientation.NORMAL

    try:
        return Orientation(value)
    except ValueError:
        return Orientation.NORMAL


def _rotate_by_angle(image: Image.Image, angle: float) -> Image.Image:
    """Rotate clockwise around the centre, growing the canvas to fit."""
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    # Pillow takes counter-clockwise degrees
    return image.rotate(
        -angle,
        resample=Image.Resampling.BICUBIC,
        expand=True,
        fillcolor=(0, 0, 0, 0)
    )


def normalize(
        image: Image.Image,
        orientation: Optional[Orientation] = None,
        angle: Optional[float] = None
) -> Image.Image:
    """
    Produce an upright pixel buffer.

    Args:
        image: Decoded source image. Never modified.
        orientation: EXIF orientation tag to undo.
        angle: Explicit clockwise rotation in degrees.

    Returns:
        The rotated image, or ``image`` itself when no rotation applies.

    Raises:
        ArgumentError: If both an orientation tag and an angle are given.
    """
    if orientation is not None and angle is not None:
        raise ArgumentError("Pass either an orientation tag or an explicit angle, not both")

    if angle is not None:
        if angle % 360 == 0:
            return image
        logger.debug("Rotating %dx%d image by %.2f degrees", *image.size, angle)
        return _rotate_by_angle(image, angle)

    if orientation is None:
        return image

    try:
        orientation = Orientation(orientation)
    except ValueError:
        return image

    transpose = _TRANSPOSES.get(orientation)
    if transpose is None:
        return image

    logger.debug("Applying EXIF orientation %s", orientation.name)
    return image.transpose(transpose)
