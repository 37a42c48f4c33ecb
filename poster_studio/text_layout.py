"""
Text layout: paragraph splitting, greedy word-wrap and vertical placement.

Measurement is injected as a callable so layout stays independent of any
font backend. Horizontal alignment is left to the renderer.
"""

from dataclasses import dataclass
from typing import Callable, List, Sequence

Measure = Callable[[str], float]

PARAGRAPH_GAP = 0.5  # Extra line heights between paragraphs


@dataclass
class WrappedLine:
    """A produced line and the paragraph it came from."""
    text: str
    paragraph: int


@dataclass
class PlacedLine:
    """A line with its vertical anchor position."""
    text: str
    y: float


def split_paragraphs(text: str) -> List[str]:
    return text.split("\n")


def wrap_paragraph(paragraph: str, max_width: float, measure: Measure) -> List[str]:
    """
    Greedily pack words of one paragraph into lines.

    Words are split on single spaces. A word starts a new line only if the
    current line is non-empty, so a single word wider than ``max_width``
    is emitted unbroken.
    """
    lines = []
    line = ""

    for word in paragraph.split(" "):
        candidate = f"{line} {word}" if line else word
        if measure(candidate) > max_width and line:
            lines.append(line)
            line = word
        else:
            line = candidate

    if line:
        lines.append(line)
    return lines


def wrap_and_measure(text: str, max_width: float, measure: Measure) -> List[WrappedLine]:
    """
    Wrap every paragraph of ``text`` against ``max_width``.

    Args:
        text: Raw text; explicit newlines separate paragraphs
        max_width: Pixel budget per line
        measure: Returns the rendered width of a string

    Returns:
        Lines in order, tagged with their paragraph index
    """
    if not text:
        return []

    wrapped = []
    for index, paragraph in enumerate(split_paragraphs(text)):
        for line in wrap_paragraph(paragraph, max_width, measure):
            wrapped.append(WrappedLine(text=line, paragraph=index))
    return wrapped


def layout_vertical(
    lines: Sequence[WrappedLine],
    start_y: float,
    line_height: float,
) -> List[PlacedLine]:
    """
    Assign a baseline to each wrapped line.

    Lines advance by ``line_height``; each paragraph boundary adds half a
    line height, so consecutive paragraphs are ``1.5 * line_height`` apart.
    Empty paragraphs produce no line but still add their gap.
    """
    return [
        PlacedLine(
            text=line.text,
            y=start_y + index * line_height + line.paragraph * PARAGRAPH_GAP * line_height,
        )
        for index, line in enumerate(lines)
    ]


def simple_lines(text: str, start_y: float, line_spacing: float) -> List[PlacedLine]:
    """Non-wrapping mode: one line per explicit line break, evenly spaced."""
    return [
        PlacedLine(text=line, y=start_y + index * line_spacing)
        for index, line in enumerate(split_paragraphs(text))
    ]
