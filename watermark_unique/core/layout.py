"""
Text Layout Engine
==================
Greedy word wrapping against measured font widths.

Words are maximal runs of non-whitespace. A word that alone is wider than
the limit goes on its own line unbroken; there is no hyphenation.
"""

from dataclasses import dataclass
from typing import List, Protocol, Tuple


class FontMetrics(Protocol):
    def measure(self, text: str) -> Tuple[int, int]:
        ...


@dataclass(frozen=True)
class TextLine:
    """One wrapped line with its measured size."""
    text: str
    width: int
    height: int


def wrap(text: str, max_width: float, metrics: FontMetrics) -> List[TextLine]:
    """
    Wrap ``text`` into lines no wider than ``max_width``.

    Args:
        text: Text to wrap. Runs of whitespace collapse to single spaces.
        max_width: Maximum line width in pixels.
        metrics: Anything providing ``measure(text) -> (width, height)``.

    Returns:
        Lines in top-to-bottom order. Empty or blank text gives ``[]``.
    """
    lines: List[TextLine] = []
    current = ""
    current_size = (0, 0)

    for word in text.split():
        candidate = f"{current} {word}" if current else word
        candidate_size = metrics.measure(candidate)

        if candidate_size[0] <= max_width:
            current, current_size = candidate, candidate_size
        elif current:
            lines.append(TextLine(current, *current_size))
            current, current_size = word, metrics.measure(word)
        else:
            # Oversized single word
            lines.append(TextLine(word, *candidate_size))

    if current:
        lines.append(TextLine(current, *current_size))

    return lines
