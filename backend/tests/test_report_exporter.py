"""Tests for rendering blocks into a DOCX report."""

from __future__ import annotations

from datetime import datetime
from io import BytesIO
from pathlib import Path

import pytest
from docx import Document
from docx.oxml.ns import qn

from promo_report.document_models import Heading, ListItem, Paragraph, Spacer, Span, Table
from promo_report.markdown_converter import convert
from promo_report.report_exporter import SHADE_FILLS, build_report, render_blocks
from promo_report.table_builder import RowShade


def _read(payload: bytes):
    return Document(BytesIO(payload))


def _fill(cell) -> str:
    return cell._tc.tcPr.find(qn("w:shd")).get(qn("w:fill"))


@pytest.fixture
def generated_at() -> datetime:
    return datetime(2024, 5, 1, 9, 30, 0)


def test_report_contains_title_and_metadata(generated_at: datetime) -> None:
    payload = build_report([], title="Test Report", image_count=2, generated_at=generated_at)

    texts = [paragraph.text for paragraph in _read(payload).paragraphs]

    assert texts[0] == "Test Report"
    assert "Generated on: 2024-05-01 09:30:00" in texts
    assert "Number of images analyzed: 2" in texts


def test_table_rendering(generated_at: datetime) -> None:
    table = Table(headers=("Brand", "Type"), rows=(("Dior", "Cash"), ("Chanel",), ("Celine", "Product")))

    document = _read(build_report([table], title="T", image_count=0, generated_at=generated_at))

    (docx_table,) = document.tables
    header = docx_table.rows[0].cells
    assert [cell.text for cell in header] == ["Brand", "Type"]
    assert header[0].paragraphs[0].runs[0].bold is True
    assert _fill(header[0]) == SHADE_FILLS[RowShade.HEADER]

    assert [cell.text for cell in docx_table.rows[2].cells] == ["Chanel", ""]
    assert _fill(docx_table.rows[1].cells[0]) == SHADE_FILLS[RowShade.EVEN]
    assert _fill(docx_table.rows[2].cells[0]) == SHADE_FILLS[RowShade.ODD]
    assert _fill(docx_table.rows[3].cells[1]) == SHADE_FILLS[RowShade.EVEN]


def test_table_cells_render_spans() -> None:
    document = Document()
    table = Table(headers=("**Brand**", "Type"), rows=(("**Dior**", "__Cash__ back"),))

    render_blocks(document, [table])

    header, row = document.tables[0].rows
    assert header.cells[0].text == "Brand"
    assert header.cells[0].paragraphs[0].runs[0].bold is True
    runs = row.cells[0].paragraphs[0].runs
    assert [run.text for run in runs] == ["Dior"]
    assert runs[0].bold is True
    cash, back = row.cells[1].paragraphs[0].runs
    assert (cash.text, cash.bold, cash.underline) == ("Cash", True, True)
    assert (back.text, back.bold) == (" back", None)


def test_custom_shading_policy() -> None:
    document = Document()
    table = Table(headers=("A",), rows=(("1",), ("2",)))

    render_blocks(document, [table], shading=lambda index: RowShade.ODD)

    rows = document.tables[0].rows
    assert _fill(rows[1].cells[0]) == _fill(rows[2].cells[0]) == SHADE_FILLS[RowShade.ODD]


def test_block_styles() -> None:
    document = Document()
    blocks = [
        Heading(level=1, text="Summary"),
        Heading(level=2, text="Details"),
        Heading(level=3, text="Note"),
        Paragraph(spans=(Span("plain "), Span("bold", bold=True), Span("under", bold=True, underline=True))),
        ListItem(text="first", ordinal="bullet", indent_level=0),
        ListItem(text="nested **key**", ordinal="bullet", indent_level=1),
        ListItem(text="step", ordinal="numbered", indent_level=0),
        Spacer(),
    ]

    render_blocks(document, blocks)

    by_text = {paragraph.text: paragraph for paragraph in document.paragraphs if paragraph.text}
    assert by_text["Summary"].style.name == "Heading 1"
    assert by_text["Details"].style.name == "Heading 2"
    assert by_text["Note"].style.name == "Normal"
    assert by_text["Note"].runs[0].bold is True

    runs = by_text["plain boldunder"].runs
    assert [run.text for run in runs] == ["plain ", "bold", "under"]
    assert runs[0].bold is None
    assert runs[1].bold is True
    assert runs[2].underline is True

    assert by_text["first"].style.name == "List Bullet"
    assert by_text["nested key"].style.name == "List Bullet 2"
    assert by_text["nested key"].runs[1].bold is True
    assert by_text["step"].style.name == "List Number"
    assert document.paragraphs[-1].text == ""


def _num_id(paragraph) -> int:
    return paragraph._p.pPr.numPr.numId.val


def test_separate_numbered_lists_restart() -> None:
    document = Document()

    render_blocks(document, convert("1. a\n2. b\n\nBetween\n\n1. c\n2. d"))

    items = [paragraph for paragraph in document.paragraphs if paragraph.style.name == "List Number"]
    assert [paragraph.text for paragraph in items] == ["a", "b", "c", "d"]
    first, second, third, fourth = (_num_id(paragraph) for paragraph in items)
    assert first == second
    assert third == fourth
    assert first != third

    numbering = document.part.numbering_part.element
    for num_id in (first, third):
        override = numbering.num_having_numId(num_id).find(qn("w:lvlOverride"))
        assert override.find(qn("w:startOverride")).get(qn("w:val")) == "1"


def test_converted_analysis_renders(generated_at: datetime) -> None:
    analysis = "# Findings\n| Brand | Type |\n| --- | --- |\n| Dior | Cash |\n\n1. Match the cash incentive"

    document = _read(build_report(convert(analysis), title="T", image_count=1, generated_at=generated_at))

    assert len(document.tables) == 1
    assert any(paragraph.text == "Match the cash incentive" for paragraph in document.paragraphs)


def test_image_appendix(tmp_path: Path, png_file: Path, generated_at: datetime) -> None:
    broken = tmp_path / "broken.png"
    broken.write_bytes(b"not an image")

    document = _read(
        build_report(
            [],
            title="T",
            image_count=2,
            generated_at=generated_at,
            images=[("promo.png", png_file), ("broken.png", broken)],
        )
    )

    texts = [paragraph.text for paragraph in document.paragraphs]
    assert "Source Images" in texts
    assert "promo.png" in texts
    assert "(image broken.png could not be embedded)" in texts
    assert len(document.inline_shapes) == 1
