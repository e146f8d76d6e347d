"""Document block definitions produced by the markdown converter."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Union

ListOrdinal = Literal["bullet", "numbered"]
HeadingLevel = Literal[1, 2, 3]


@dataclass(frozen=True, slots=True)
class Span:
    """Inline run of text sharing the same formatting.

    Parameters
    ----------
    text:
        Text content with the formatting markers removed.
    bold:
        Whether the run is rendered in bold.
    underline:
        Whether the run is underlined. ``__text__`` regions are both bold and
        underlined.
    """

    text: str
    bold: bool = False
    underline: bool = False


@dataclass(frozen=True, slots=True)
class Heading:
    level: HeadingLevel
    text: str


@dataclass(frozen=True, slots=True)
class Paragraph:
    spans: tuple[Span, ...]

    @property
    def text(self) -> str:
        return "".join(span.text for span in self.spans)


@dataclass(frozen=True, slots=True)
class ListItem:
    text: str
    ordinal: ListOrdinal = "bullet"
    indent_level: int = 0


@dataclass(frozen=True, slots=True)
class Table:
    """Markdown table with a header row and possibly ragged data rows."""

    headers: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]


@dataclass(frozen=True, slots=True)
class Spacer:
    """Blank line kept to preserve vertical rhythm."""


Block = Union[Heading, Paragraph, ListItem, Table, Spacer]


__all__ = [
    "Block",
    "Heading",
    "HeadingLevel",
    "ListItem",
    "ListOrdinal",
    "Paragraph",
    "Spacer",
    "Span",
    "Table",
]
