"""Render converted analysis blocks into a DOCX report."""
from __future__ import annotations

import logging
from datetime import datetime
from io import BytesIO
from pathlib import Path
from typing import Iterable, Sequence

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.image.exceptions import UnrecognizedImageError
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Inches, Pt, RGBColor
from docx.table import _Cell

from .document_models import Block, Heading, ListItem, Paragraph, Spacer, Span, Table
from .inline_spans import split_spans
from .table_builder import RowShade, ShadingPolicy, alternating_shading, column_count

logger = logging.getLogger(__name__)

HEADING_COLOR = "2E5A88"
APPENDIX_HEADING = "Source Images"
APPENDIX_IMAGE_WIDTH = Inches(6)

SHADE_FILLS: dict[RowShade, str] = {
    RowShade.HEADER: "EEEEEE",
    RowShade.EVEN: "FFFFFF",
    RowShade.ODD: "F2F2F2",
}

_HEADING_SIZES = {"Heading 1": Pt(14), "Heading 2": Pt(12)}
_LIST_STYLES = {
    "bullet": ("List Bullet", "List Bullet 2", "List Bullet 3"),
    "numbered": ("List Number", "List Number 2", "List Number 3"),
}


def _remove_placeholder_paragraph(document: Document) -> None:
    """Remove the placeholder paragraph that python-docx creates by default."""

    if document.paragraphs:
        paragraph = document.paragraphs[0]
        element = paragraph._element  # type: ignore[attr-defined]
        parent = element.getparent()
        if parent is not None:
            parent.remove(element)


def _configure_styles(document: Document) -> None:
    for name, size in _HEADING_SIZES.items():
        font = document.styles[name].font
        font.size = size
        font.bold = True
        font.color.rgb = RGBColor.from_string(HEADING_COLOR)


def _add_runs(paragraph, spans: Iterable[Span]) -> None:
    for span in spans:
        run = paragraph.add_run(span.text)
        if span.bold:
            run.bold = True
        if span.underline:
            run.underline = True


def _shade_cell(cell: _Cell, fill: str) -> None:
    tc_pr = cell._tc.get_or_add_tcPr()
    shd = OxmlElement("w:shd")
    shd.set(qn("w:val"), "clear")
    shd.set(qn("w:color"), "auto")
    shd.set(qn("w:fill"), fill)
    tc_pr.append(shd)


def _mark_header_row(row) -> None:
    tr_pr = row._tr.get_or_add_trPr()
    header = OxmlElement("w:tblHeader")
    header.set(qn("w:val"), "true")
    tr_pr.append(header)


def _fill_cell(cell: _Cell, value: str, *, header: bool) -> None:
    paragraph = cell.paragraphs[0]
    spans = split_spans(value)
    if header:
        spans = [Span(span.text, bold=True, underline=span.underline) for span in spans]
        paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
    _add_runs(paragraph, spans)


def _append_table(document: Document, table: Table, shading: ShadingPolicy) -> None:
    columns = column_count(table)
    if columns == 0:
        return

    docx_table = document.add_table(rows=len(table.rows) + 1, cols=columns)
    docx_table.style = "Table Grid"

    header_row = docx_table.rows[0]
    _mark_header_row(header_row)
    for column_index, cell in enumerate(header_row.cells):
        value = table.headers[column_index] if column_index < len(table.headers) else ""
        _fill_cell(cell, value, header=True)
        _shade_cell(cell, SHADE_FILLS[RowShade.HEADER])

    for row_index, row in enumerate(table.rows):
        fill = SHADE_FILLS[shading(row_index)]
        for column_index, cell in enumerate(docx_table.rows[row_index + 1].cells):
            value = row[column_index] if column_index < len(row) else ""
            _fill_cell(cell, value, header=False)
            _shade_cell(cell, fill)


def _append_heading(document: Document, heading: Heading) -> None:
    if heading.level < 3:
        document.add_heading(heading.text, level=heading.level)
        return
    # No third heading style in the report; level 3 is bold body text.
    paragraph = document.add_paragraph()
    paragraph.add_run(heading.text).bold = True


def _restarted_numbering(document: Document, style_name: str) -> tuple[int, int] | None:
    """Add a ``w:num`` for the style's list that starts again at 1.

    Returns ``(numId, ilvl)``, or ``None`` when the style carries no numbering.
    """

    p_pr = document.styles[style_name].element.pPr
    style_num_pr = p_pr.numPr if p_pr is not None else None
    if style_num_pr is None or style_num_pr.numId is None:
        return None

    numbering = document.part.numbering_part.element
    abstract_id = numbering.num_having_numId(style_num_pr.numId.val).abstractNumId.val
    ilvl = style_num_pr.ilvl.val if style_num_pr.ilvl is not None else 0
    num = numbering.add_num(abstract_id)
    num.add_lvlOverride(ilvl=ilvl).add_startOverride(1)
    return num.numId, ilvl


def _append_list_item(
    document: Document,
    item: ListItem,
    numbering: dict[str, tuple[int, int] | None],
) -> None:
    styles = _LIST_STYLES[item.ordinal]
    level = min(max(item.indent_level, 0), len(styles) - 1)
    style_name = styles[level]
    paragraph = document.add_paragraph(style=style_name)
    _add_runs(paragraph, split_spans(item.text))

    if item.ordinal != "numbered":
        return
    if style_name not in numbering:
        numbering[style_name] = _restarted_numbering(document, style_name)
    restart = numbering[style_name]
    if restart is None:
        return
    num_id, ilvl = restart
    num_pr = paragraph._p.get_or_add_pPr().get_or_add_numPr()
    num_pr.get_or_add_ilvl().val = ilvl
    num_pr.get_or_add_numId().val = num_id


def render_blocks(
    document: Document,
    blocks: Iterable[Block],
    *,
    shading: ShadingPolicy = alternating_shading,
) -> None:
    """Append ``blocks`` to ``document`` in order.

    Every run of consecutive numbered items is numbered from 1.
    """

    numbering: dict[str, tuple[int, int] | None] = {}
    for block in blocks:
        if not (isinstance(block, ListItem) and block.ordinal == "numbered"):
            numbering = {}

        if isinstance(block, Heading):
            _append_heading(document, block)
        elif isinstance(block, Paragraph):
            _add_runs(document.add_paragraph(), block.spans)
        elif isinstance(block, ListItem):
            _append_list_item(document, block, numbering)
        elif isinstance(block, Table):
            _append_table(document, block, shading)
        elif isinstance(block, Spacer):
            document.add_paragraph()


def _append_image_appendix(document: Document, images: Sequence[tuple[str, Path]]) -> None:
    document.add_page_break()
    document.add_heading(APPENDIX_HEADING, level=1)
    for name, path in images:
        document.add_heading(name, level=2)
        try:
            document.add_picture(str(path), width=APPENDIX_IMAGE_WIDTH)
        except (UnrecognizedImageError, OSError) as exc:
            logger.warning("Could not embed image '%s' into report: %s", name, exc)
            document.add_paragraph(f"(image {name} could not be embedded)")


def build_report(
    blocks: Iterable[Block],
    *,
    title: str,
    image_count: int,
    generated_at: datetime,
    images: Sequence[tuple[str, Path]] = (),
) -> bytes:
    """Create the DOCX report and return its binary content."""

    document = Document()
    _remove_placeholder_paragraph(document)
    _configure_styles(document)

    title_paragraph = document.add_heading(title, level=1)
    title_paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER

    for line in (
        f"Generated on: {generated_at:%Y-%m-%d %H:%M:%S}",
        f"Number of images analyzed: {image_count}",
    ):
        document.add_paragraph(line).alignment = WD_ALIGN_PARAGRAPH.RIGHT
    document.add_paragraph()

    render_blocks(document, blocks)

    if images:
        _append_image_appendix(document, images)

    buffer = BytesIO()
    document.save(buffer)
    return buffer.getvalue()


__all__ = ["SHADE_FILLS", "build_report", "render_blocks"]
