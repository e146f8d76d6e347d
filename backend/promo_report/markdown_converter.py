"""Convert markdown-like analysis text into document blocks.

The converter makes a single forward pass over the lines of the model output.
Every line ends up in exactly one block or is folded into the pending table
state, so malformed input never raises.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field

from .document_models import Block, Heading, ListItem, Spacer
from .inline_spans import paragraph_from_line
from .table_builder import build_table

_HEADING_PREFIXES: tuple[tuple[str, int], ...] = (
    ("# ", 1),
    ("## ", 2),
    ("### ", 3),
)
_BULLET_PREFIXES: tuple[tuple[str, int], ...] = (
    ("- ", 0),
    ("  - ", 1),
    ("    - ", 2),
)
_NUMBERED_RE = re.compile(r"^\d+\.\s+(.*)$")
_TABLE_SEPARATOR = "---"


@dataclass(slots=True)
class TableState:
    """Pending table data collected while inside a table context."""

    in_table: bool = False
    headers: list[str] = field(default_factory=list)
    rows: list[list[str]] = field(default_factory=list)

    def flush(self, blocks: list[Block]) -> None:
        """Emit the pending table, if complete, and leave table context."""

        if self.headers and self.rows:
            blocks.append(build_table(self.headers, self.rows))
        self.in_table = False
        self.headers = []
        self.rows = []


def _split_cells(line: str) -> list[str]:
    return [cell.strip() for cell in line.split("|") if cell.strip()]


def _heading(line: str) -> Heading | None:
    for prefix, level in _HEADING_PREFIXES:
        if line.startswith(prefix):
            return Heading(level=level, text=line[len(prefix):].strip())
    return None


def _list_item(raw_line: str, line: str) -> ListItem | None:
    for prefix, indent in _BULLET_PREFIXES:
        if raw_line.startswith(prefix):
            return ListItem(text=raw_line[len(prefix):].strip(), ordinal="bullet", indent_level=indent)

    match = _NUMBERED_RE.match(line)
    if match:
        return ListItem(text=match.group(1).strip(), ordinal="numbered", indent_level=0)
    return None


def _consume_table_row(state: TableState, line: str) -> None:
    if not state.in_table:
        state.in_table = True
        state.headers = _split_cells(line)
    elif _TABLE_SEPARATOR in line:
        return
    else:
        state.rows.append(_split_cells(line))


def _classify(state: TableState, raw_line: str, blocks: list[Block]) -> None:
    line = raw_line.strip()

    if state.in_table and not line.startswith("|"):
        state.flush(blocks)

    heading = _heading(line)
    if heading is not None:
        blocks.append(heading)
        return

    if line.startswith("|") and line.endswith("|"):
        _consume_table_row(state, line)
        return

    item = _list_item(raw_line.rstrip(), line)
    if item is not None:
        blocks.append(item)
        return

    if not line:
        blocks.append(Spacer())
        return

    blocks.append(paragraph_from_line(line))


def _split_lines(text: str) -> list[str]:
    # Only "\n" ends a line; other Unicode line breaks may sit inside a cell.
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def convert(text: str) -> list[Block]:
    """Return the ordered document blocks described by ``text``."""

    blocks: list[Block] = []
    state = TableState()
    for raw_line in _split_lines(text):
        _classify(state, raw_line, blocks)
    if state.in_table:
        state.flush(blocks)
    return blocks


__all__ = ["TableState", "convert"]
