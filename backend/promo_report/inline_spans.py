"""Split a line of model output into bold/underline spans."""
from __future__ import annotations

import re

from .document_models import Paragraph, Span

_OPENING_MARKER_RE = re.compile(r"\*\*|__")
_MARKER_WIDTH = 2


def _region_span(marker: str, text: str) -> Span:
    # "__" regions are rendered bold as well as underlined.
    return Span(text=text, bold=True, underline=marker == "__")


def split_spans(line: str) -> list[Span]:
    """Return the spans of ``line`` in order.

    ``**text**`` becomes a bold span and ``__text__`` a bold, underlined span.
    Regions never nest: the first opening marker starts a region and the next
    occurrence of the same marker closes it. When a marker is never closed the
    rest of the line, markers included, is kept as plain text.
    """

    spans: list[Span] = []
    remainder = line
    while remainder:
        match = _OPENING_MARKER_RE.search(remainder)
        if match is None:
            spans.append(Span(text=remainder))
            break

        marker = match.group(0)
        start = match.start()
        end = remainder.find(marker, start + _MARKER_WIDTH)
        if end == -1:
            spans.append(Span(text=remainder))
            break

        if start:
            spans.append(Span(text=remainder[:start]))
        inner = remainder[start + _MARKER_WIDTH : end]
        if inner:
            spans.append(_region_span(marker, inner))
        remainder = remainder[end + _MARKER_WIDTH :]

    return spans or [Span(text="")]


def paragraph_from_line(line: str) -> Paragraph:
    """Wrap the spans of a single line into a :class:`Paragraph`."""

    return Paragraph(spans=tuple(split_spans(line)))


__all__ = ["paragraph_from_line", "split_spans"]
