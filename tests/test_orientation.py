"""
Tests for orientation normalization.

Run with: python -m pytest tests/test_orientation.py -v
"""

import sys
from io import BytesIO
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import numpy as np
import pytest
from PIL import ExifTags, Image

from watermark_unique.core.encoder import decode
from watermark_unique.core.errors import ArgumentError
from watermark_unique.core.orientation import Orientation, normalize, read_orientation


def create_test_image(width: int = 40, height: int = 20) -> Image.Image:
    """Create an RGBA gradient where every pixel is distinct."""
    yy, xx = np.mgrid[0:height, 0:width]
    arr = np.stack([
        xx * 255 // max(width - 1, 1),
        yy * 255 // max(height - 1, 1),
        (xx + yy) % 256,
        np.full_like(xx, 255),
    ], axis=-1).astype(np.uint8)
    return Image.fromarray(arr)


def jpeg_with_orientation(value: int, width: int = 80, height: int = 40) -> bytes:
    img = Image.new("RGB", (width, height), (200, 50, 50))
    exif = Image.Exif()
    exif[ExifTags.Base.Orientation] = value
    buffer = BytesIO()
    img.save(buffer, format="JPEG", exif=exif.tobytes())
    return buffer.getvalue()


def test_four_quarter_turns_restore_original():
    original = create_test_image()
    image = original
    for _ in range(4):
        image = normalize(image, orientation=Orientation.ROTATE_90)

    assert image.size == original.size
    assert np.array_equal(np.asarray(image), np.asarray(original))


def test_quarter_turn_is_clockwise():
    original = create_test_image()
    rotated = normalize(original, orientation=Orientation.ROTATE_90)

    assert rotated.size == (20, 40)
    # (x, y) -> (H - 1 - y, x)
    assert rotated.getpixel((19, 0)) == original.getpixel((0, 0))
    assert rotated.getpixel((0, 39)) == original.getpixel((39, 19))


def test_half_and_three_quarter_turns():
    original = create_test_image()

    half = normalize(original, orientation=Orientation.ROTATE_180)
    assert half.size == original.size
    assert half.getpixel((39, 19)) == original.getpixel((0, 0))

    three_quarter = normalize(original, orientation=Orientation.ROTATE_270)
    assert three_quarter.size == (20, 40)
    assert three_quarter.getpixel((0, 39)) == original.getpixel((0, 0))


def test_normal_and_missing_rotation_pass_through():
    original = create_test_image()

    assert normalize(original) is original
    assert normalize(original, orientation=Orientation.NORMAL) is original
    assert normalize(original, orientation=2) is original
    assert normalize(original, angle=0) is original
    assert normalize(original, angle=360) is original


def test_explicit_quarter_angle_matches_tag():
    original = create_test_image()

    by_angle = normalize(original, angle=90)
    by_tag = normalize(original, orientation=Orientation.ROTATE_90)

    assert by_angle.size == by_tag.size
    assert np.array_equal(np.asarray(by_angle), np.asarray(by_tag))


def test_arbitrary_angle_expands_canvas():
    original = Image.new("RGBA", (100, 50), (10, 20, 30, 255))
    rotated = normalize(original, angle=45)

    expected = (100 + 50) * np.cos(np.pi / 4)
    assert abs(rotated.width - expected) <= 2
    assert abs(rotated.height - expected) <= 2
    # Corners are outside the rotated content
    assert rotated.getpixel((0, 0))[3] == 0
    # Centre keeps the source color
    cx, cy = rotated.width // 2, rotated.height // 2
    centre = rotated.getpixel((cx, cy))
    assert all(abs(a - b) <= 1 for a, b in zip(centre, (10, 20, 30, 255)))


def test_tag_and_angle_together_are_rejected():
    with pytest.raises(ArgumentError):
        normalize(create_test_image(), orientation=Orientation.ROTATE_90, angle=90)


def test_normalize_does_not_modify_input():
    original = create_test_image()
    before = np.asarray(original).copy()

    normalize(original, orientation=Orientation.ROTATE_180)
    normalize(original, angle=30)

    assert np.array_equal(np.asarray(original), before)


def test_read_orientation_from_exif():
    assert read_orientation(decode(jpeg_with_orientation(6))) is Orientation.ROTATE_90
    assert read_orientation(decode(jpeg_with_orientation(3))) is Orientation.ROTATE_180
    assert read_orientation(decode(jpeg_with_orientation(8))) is Orientation.ROTATE_270


def test_read_orientation_defaults_to_normal():
    assert read_orientation(create_test_image()) is Orientation.NORMAL
    assert read_orientation(decode(jpeg_with_orientation(2))) is Orientation.NORMAL
