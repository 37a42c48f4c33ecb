import pytest

from poster_studio.text_layout import (
    layout_vertical,
    simple_lines,
    split_paragraphs,
    wrap_and_measure,
    wrap_paragraph,
)


def char_width(text):
    # One pixel per character keeps expectations readable
    return len(text)


def test_split_paragraphs_on_newlines():
    assert split_paragraphs("a\nb\n\nc") == ["a", "b", "", "c"]


def test_wrap_greedy_packing():
    lines = wrap_paragraph("the quick brown fox jumps", 10, char_width)
    assert lines == ["the quick", "brown fox", "jumps"]


def test_wrap_allows_exact_fit():
    assert wrap_paragraph("abcde fghij", 11, char_width) == ["abcde fghij"]
    assert wrap_paragraph("abcde fghij", 10, char_width) == ["abcde", "fghij"]


def test_wrap_keeps_unbreakable_word_whole():
    lines = wrap_paragraph("a supercalifragilistic b", 5, char_width)
    assert lines == ["a", "supercalifragilistic", "b"]


def test_wrap_single_oversized_word():
    assert wrap_paragraph("supercalifragilistic", 5, char_width) == ["supercalifragilistic"]


def test_wrap_lines_respect_budget_and_keep_words():
    text = "Wanting to know or learn something new about the world every single day"
    lines = wrap_paragraph(text, 18, char_width)

    for line in lines:
        assert char_width(line) <= 18 or " " not in line
    assert " ".join(lines).split(" ") == text.split(" ")


def test_wrap_and_measure_tags_paragraphs():
    lines = wrap_and_measure("one two\nthree", 100, char_width)
    assert [(l.text, l.paragraph) for l in lines] == [("one two", 0), ("three", 1)]


def test_wrap_and_measure_empty_text():
    assert wrap_and_measure("", 100, char_width) == []


def test_paragraph_gap_is_one_and_a_half_lines():
    lines = wrap_and_measure("Hello\nWorld", 1000, char_width)
    placed = layout_vertical(lines, 100, 40)

    assert [p.text for p in placed] == ["Hello", "World"]
    assert placed[0].y == 100
    assert placed[1].y - placed[0].y == pytest.approx(1.5 * 40)


def test_lines_within_paragraph_advance_by_line_height():
    lines = wrap_and_measure("aa bb cc", 2, char_width)
    placed = layout_vertical(lines, 0, 25)
    assert [p.y for p in placed] == [0, 25, 50]


def test_empty_paragraph_still_adds_gap():
    lines = wrap_and_measure("A\n\nB", 100, char_width)
    placed = layout_vertical(lines, 100, 40)
    assert [p.text for p in placed] == ["A", "B"]
    assert placed[1].y == pytest.approx(100 + 40 + 2 * 20)


def test_simple_lines_scenario():
    placed = simple_lines("Hello\nWorld", 150, 48 * 1.2)
    assert [p.text for p in placed] == ["Hello", "World"]
    assert placed[0].y == 150
    assert placed[1].y == pytest.approx(207.6)
