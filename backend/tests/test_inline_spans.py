"""Tests for bold/underline span splitting."""

from __future__ import annotations

from promo_report.document_models import Span
from promo_report.inline_spans import paragraph_from_line, split_spans


def test_plain_line_is_single_span() -> None:
    assert split_spans("No formatting here") == [Span(text="No formatting here")]


def test_bold_and_underline_regions() -> None:
    assert split_spans("**Dior** offers __cash__ bonus") == [
        Span(text="Dior", bold=True),
        Span(text=" offers "),
        Span(text="cash", bold=True, underline=True),
        Span(text=" bonus"),
    ]


def test_unterminated_marker_keeps_rest_literal() -> None:
    assert split_spans("Total **40% growth") == [Span(text="Total **40% growth")]


def test_unterminated_marker_swallows_later_regions() -> None:
    assert split_spans("a **b __c__") == [Span(text="a **b __c__")]


def test_regions_do_not_nest() -> None:
    assert split_spans("**a __b** c__") == [
        Span(text="a __b", bold=True),
        Span(text=" c__"),
    ]


def test_empty_regions_are_skipped() -> None:
    assert split_spans("x****y") == [Span(text="x"), Span(text="y")]
    assert split_spans("****") == [Span(text="")]


def test_spans_reconstruct_line_without_markers() -> None:
    line = "Revenue grew **40%** last __quarter__ and **more**"

    text = "".join(span.text for span in split_spans(line))

    assert text == line.replace("**", "").replace("__", "")


def test_many_regions_do_not_exhaust_recursion() -> None:
    line = "**x** " * 5000

    spans = split_spans(line)

    assert len(spans) == 10000
    assert sum(span.bold for span in spans) == 5000


def test_paragraph_from_line_text() -> None:
    paragraph = paragraph_from_line("A **B** C")

    assert paragraph.text == "A B C"
    assert len(paragraph.spans) == 3
