"""Helpers for assembling table blocks and their row shading."""
from __future__ import annotations

from enum import Enum
from typing import Callable, Sequence

from .document_models import Table


class RowShade(str, Enum):
    """Background style of a rendered table row."""

    HEADER = "header"
    EVEN = "even"
    ODD = "odd"


ShadingPolicy = Callable[[int], RowShade]


def alternating_shading(row_index: int) -> RowShade:
    """Shade data rows by index parity."""

    return RowShade.EVEN if row_index % 2 == 0 else RowShade.ODD


def build_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> Table:
    """Return a :class:`Table` block for the collected header and data rows.

    Rows are kept in source order and are not padded or truncated to the
    header width.
    """

    return Table(
        headers=tuple(headers),
        rows=tuple(tuple(row) for row in rows),
    )


def column_count(table: Table) -> int:
    """Return the widest row of ``table``, header included."""

    return max((len(row) for row in (table.headers, *table.rows)), default=0)


__all__ = [
    "RowShade",
    "ShadingPolicy",
    "alternating_shading",
    "build_table",
    "column_count",
]
