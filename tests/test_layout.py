"""
Tests for the text layout engine.

Run with: python -m pytest tests/test_layout.py -v
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from watermark_unique.core.fonts import FontCache, PillowFontMetrics
from watermark_unique.core.layout import TextLine, wrap


class FixedWidthMetrics:
    """Every character is ``char_width`` pixels wide, every line the same height."""

    def __init__(self, char_width: int = 10, line_height: int = 20):
        self.char_width = char_width
        self.line_height = line_height

    def measure(self, text: str):
        return len(text) * self.char_width, self.line_height


SAMPLE_TEXTS = [
    "Hello World",
    "The quick brown fox jumps over the lazy dog",
    "a bb ccc dddd eeeee ffffff ggggggg",
    "supercalifragilisticexpialidocious is long",
    "  spaced   out\ttext\nwith newlines  ",
]


def test_hello_world_wraps_into_two_lines():
    lines = wrap("Hello World", 60, FixedWidthMetrics())

    assert [line.text for line in lines] == ["Hello", "World"]
    assert lines[0] == TextLine("Hello", 50, 20)
    assert lines[1] == TextLine("World", 50, 20)


def test_text_that_fits_stays_on_one_line():
    lines = wrap("Hello World", 110, FixedWidthMetrics())

    assert [line.text for line in lines] == ["Hello World"]
    assert lines[0].width == 110


def test_oversized_word_gets_its_own_line():
    lines = wrap("a verylongword b", 50, FixedWidthMetrics())

    assert [line.text for line in lines] == ["a", "verylongword", "b"]
    assert lines[1].width == 120


def test_oversized_first_word_is_not_split():
    lines = wrap("supercalifragilistic ok", 50, FixedWidthMetrics())

    assert [line.text for line in lines] == ["supercalifragilistic", "ok"]


def test_empty_and_blank_text_give_no_lines():
    metrics = FixedWidthMetrics()

    assert wrap("", 100, metrics) == []
    assert wrap("   \t\n ", 100, metrics) == []


def test_whitespace_runs_collapse():
    lines = wrap("  Hello \n\t World  ", 1000, FixedWidthMetrics())

    assert [line.text for line in lines] == ["Hello World"]


def test_wrap_is_deterministic():
    metrics = FixedWidthMetrics()
    for text in SAMPLE_TEXTS:
        for max_width in (30, 70, 150, 400):
            assert wrap(text, max_width, metrics) == wrap(text, max_width, metrics)


def test_lines_respect_width_unless_single_word():
    metrics = FixedWidthMetrics()
    for text in SAMPLE_TEXTS:
        for max_width in (30, 70, 150, 400):
            for line in wrap(text, max_width, metrics):
                if line.width > max_width:
                    assert " " not in line.text
                    assert metrics.measure(line.text)[0] > max_width


def test_wrap_keeps_every_word_in_order():
    metrics = FixedWidthMetrics()
    for text in SAMPLE_TEXTS:
        for max_width in (30, 70, 150, 400):
            lines = wrap(text, max_width, metrics)
            assert " ".join(line.text for line in lines).split() == text.split()


def test_wrap_with_real_font_metrics():
    metrics = FontCache().metrics(24)
    assert isinstance(metrics, PillowFontMetrics)

    text = "Watermarks are stamped onto the bottom left corner of each photo"
    max_width = 180
    lines = wrap(text, max_width, metrics)

    assert len(lines) > 1
    assert " ".join(line.text for line in lines) == text
    for line in lines:
        assert line.height == metrics.line_height
        assert (line.width, line.height) == metrics.measure(line.text)
        if " " in line.text:
            assert line.width <= max_width
