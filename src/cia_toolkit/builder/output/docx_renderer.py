"""
Module: builder.output.docx_renderer

Purpose:
    Render a PaperModel and its WeightageTable to an editable DOCX
    document with python-docx. Consumes the same rendered-block nodes and
    section layout as the PDF renderer, so both outputs carry the same
    text, order and merged cells.

Key Functions:
    - render_docx(): Main rendering function, returns DOCX bytes

Dependencies:
    - python-docx: Document generation
    - builder.images.provider: PNG conversion for formats Word cannot embed

Used By:
    - builder.controller: Pipeline orchestration
"""

from __future__ import annotations

import logging
from io import BytesIO
from typing import Optional, Sequence

from docx import Document
from docx.enum.table import WD_CELL_VERTICAL_ALIGNMENT, WD_TABLE_ALIGNMENT
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.image.exceptions import UnrecognizedImageError
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Cm, Pt

from cia_toolkit.core.models import ImageAsset, PaperModel, WeightageTable
from cia_toolkit.text.blocks import Figure, IndexedRow, Node, TextLine, compose_alternative, compose_question
from cia_toolkit.text.notation import InlineRun

from ..config import BuilderConfig
from ..images import ImageDecodeError, to_png_bytes
from ..layout import sections
from ..layout.config import LayoutConfig
from ..layout.sections import CellSpan

logger = logging.getLogger(__name__)

# Formats python-docx can embed directly
EMBEDDABLE_FORMATS = {"png", "jpeg", "gif", "bmp", "tiff"}

GRID_STYLE = "Table Grid"
NESTED_MARGIN_TWIPS = 20
GRID_MARGIN_TWIPS = 108  # Table Grid default left/right cell padding
TWIPS_PER_CM = 1440 / 2.54
SUMMARY_FONT_PT = 9


# ─────────────────────────────────────────────────────────────────────────────
# Low-level OOXML helpers
# ─────────────────────────────────────────────────────────────────────────────

def remove_cell_borders(cell) -> None:
    """Remove all borders from a table cell."""
    tcPr = cell._tc.get_or_add_tcPr()
    tcBorders = OxmlElement("w:tcBorders")
    for border_name in ("top", "left", "bottom", "right"):
        border_elem = OxmlElement(f"w:{border_name}")
        border_elem.set(qn("w:val"), "nil")
        tcBorders.append(border_elem)
    tcPr.append(tcBorders)


def set_cell_margins(cell, twips: int) -> None:
    """Set uniform inner cell padding (twips)."""
    tcPr = cell._tc.get_or_add_tcPr()
    tcMar = OxmlElement("w:tcMar")
    for side in ("top", "left", "bottom", "right"):
        margin = OxmlElement(f"w:{side}")
        margin.set(qn("w:w"), str(twips))
        margin.set(qn("w:type"), "dxa")
        tcMar.append(margin)
    tcPr.append(tcMar)


def _set_row_flag(row, tag: str) -> None:
    trPr = row._tr.get_or_add_trPr()
    flag = OxmlElement(tag)
    flag.set(qn("w:val"), "true")
    trPr.append(flag)


def mark_header_row(row) -> None:
    """Repeat this row at the top of every page the table spans."""
    _set_row_flag(row, "w:tblHeader")


def keep_row_intact(row) -> None:
    """Do not split this row across pages."""
    _set_row_flag(row, "w:cantSplit")


def inner_width_cm(width_cm: float, margin_twips: int) -> float:
    """Width left for content once a cell's left and right padding is taken off."""
    return max(width_cm - 2 * margin_twips / TWIPS_PER_CM, 0.5)


def _set_column_widths(table, widths_cm: Sequence[float]) -> None:
    table.autofit = False
    for row in table.rows:
        for idx, width in enumerate(widths_cm):
            row.cells[idx].width = Cm(width)


def _apply_spans(table, spans: Sequence[CellSpan]) -> None:
    for span in spans:
        top_left = table.cell(span.start_row, span.start_col)
        top_left.merge(table.cell(span.end_row, span.end_col))


# ─────────────────────────────────────────────────────────────────────────────
# Text helpers
# ─────────────────────────────────────────────────────────────────────────────

def add_runs(paragraph, runs: Sequence[InlineRun], size_pt: Optional[float] = None) -> None:
    """Append styled runs to a paragraph (superscript/subscript as run styling)."""
    for inline in runs:
        run = paragraph.add_run(inline.text)
        if inline.style == "superscript":
            run.font.superscript = True
        elif inline.style == "subscript":
            run.font.subscript = True
        if size_pt:
            run.font.size = Pt(size_pt)


def _first_paragraph(cell):
    """Reuse the empty paragraph every new cell starts with."""
    paragraph = cell.paragraphs[-1]
    if paragraph.text or paragraph.runs:
        return cell.add_paragraph()
    return paragraph


def set_cell_text(
    cell,
    text: str,
    *,
    bold: bool = False,
    size_pt: Optional[float] = None,
    align=WD_ALIGN_PARAGRAPH.CENTER,
) -> None:
    paragraph = _first_paragraph(cell)
    paragraph.alignment = align
    paragraph.paragraph_format.space_after = Pt(0)
    if text:
        run = paragraph.add_run(text)
        run.bold = bold
        if size_pt:
            run.font.size = Pt(size_pt)
    cell.vertical_alignment = WD_CELL_VERTICAL_ALIGNMENT.CENTER


# ─────────────────────────────────────────────────────────────────────────────
# Nodes -> cell content
# ─────────────────────────────────────────────────────────────────────────────

def _picture_stream(image: ImageAsset) -> Optional[BytesIO]:
    if not image.data:
        logger.warning("Skipping image with no data in DOCX")
        return None
    if image.probed and image.format in EMBEDDABLE_FORMATS:
        return BytesIO(image.data)
    try:
        return BytesIO(to_png_bytes(image))
    except ImageDecodeError as e:
        logger.warning(f"Skipping image python-docx cannot embed ({image.format or 'unknown'}): {e}")
        return None


def _add_figure(cell, figure: Figure, width_cm: float, layout: LayoutConfig) -> None:
    stream = _picture_stream(figure.image)
    if stream is None:
        return
    w_cm, h_cm = figure.image.size_cm(min(layout.image_max_width_cm, width_cm), layout.image_max_height_cm, layout.image_dpi)
    paragraph = cell.add_paragraph()
    paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
    try:
        paragraph.add_run().add_picture(stream, width=Cm(w_cm), height=Cm(h_cm))
    except UnrecognizedImageError as e:
        logger.warning(f"Skipping image python-docx cannot embed: {e}")
        paragraph._p.getparent().remove(paragraph._p)


def _drop_trailing_empty_paragraph(cell) -> None:
    """Remove an empty last paragraph so nested tables stack without gaps."""
    last = cell._tc[-1]
    if last.tag == qn("w:p") and not last.xpath("./w:r"):
        cell._tc.remove(last)


def _add_indexed_row(cell, row: IndexedRow, width_cm: float, layout: LayoutConfig) -> None:
    """Borderless nested index | body | marks table."""
    index_w = layout.index_column_cm
    marks_w = layout.marks_column_cm
    body_w = max(width_cm - index_w - marks_w, 1.0)

    _drop_trailing_empty_paragraph(cell)
    table = cell.add_table(rows=1, cols=3)
    _set_column_widths(table, (index_w, body_w, marks_w))
    index_cell, body_cell, marks_cell = table.rows[0].cells
    for inner in (index_cell, body_cell, marks_cell):
        remove_cell_borders(inner)
        set_cell_margins(inner, NESTED_MARGIN_TWIPS)

    set_cell_text(index_cell, row.index, align=WD_ALIGN_PARAGRAPH.LEFT)
    index_cell.vertical_alignment = WD_CELL_VERTICAL_ALIGNMENT.TOP
    write_nodes(body_cell, row.body, inner_width_cm(body_w, NESTED_MARGIN_TWIPS), layout)
    set_cell_text(marks_cell, row.marks_label)
    marks_cell.vertical_alignment = WD_CELL_VERTICAL_ALIGNMENT.TOP


def write_nodes(cell, nodes: Sequence[Node], width_cm: float, layout: LayoutConfig) -> None:
    """
    Write rendered-block nodes into a table cell.

    IndexedRow bodies recurse into nested tables, mirroring the PDF layout.
    """
    for node in nodes:
        if isinstance(node, TextLine):
            paragraph = _first_paragraph(cell)
            paragraph.alignment = WD_ALIGN_PARAGRAPH.JUSTIFY
            paragraph.paragraph_format.space_after = Pt(0)
            add_runs(paragraph, node.runs)
        elif isinstance(node, IndexedRow):
            _add_indexed_row(cell, node, width_cm, layout)
        elif isinstance(node, Figure):
            _add_figure(cell, node, width_cm, layout)


# ─────────────────────────────────────────────────────────────────────────────
# Sections
# ─────────────────────────────────────────────────────────────────────────────

def _setup_document(config: BuilderConfig, paper: PaperModel):
    layout = config.layout
    doc = Document()

    section = doc.sections[0]
    section.page_width = Cm(layout.page_width_cm)
    section.page_height = Cm(layout.page_height_cm)
    for side in ("left_margin", "right_margin", "top_margin", "bottom_margin"):
        setattr(section, side, Cm(layout.margin_cm))

    normal = doc.styles["Normal"]
    normal.font.name = layout.docx_font_name
    normal.font.size = Pt(layout.font_size_pt)
    normal.element.get_or_add_rPr().get_or_add_rFonts().set(qn("w:eastAsia"), layout.docx_font_name)

    props = doc.core_properties
    props.title = f"{paper.header.course_code} CIA {paper.header.assessment_numeral}"
    props.author = config.institution.name
    return doc


def _add_centered(doc, text: str, *, bold: bool, size_pt: float, space_before_pt: float = 0, space_after_pt: float = 0):
    paragraph = doc.add_paragraph()
    paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
    paragraph.paragraph_format.space_before = Pt(space_before_pt)
    paragraph.paragraph_format.space_after = Pt(space_after_pt)
    run = paragraph.add_run(text)
    run.bold = bold
    run.font.size = Pt(size_pt)
    return paragraph


def _add_reg_no_strip(doc, layout: LayoutConfig) -> None:
    table = doc.add_table(rows=1, cols=layout.reg_no_boxes + 1)
    table.style = GRID_STYLE
    table.alignment = WD_TABLE_ALIGNMENT.RIGHT
    _set_column_widths(table, (2.0,) + (layout.reg_no_box_cm,) * layout.reg_no_boxes)
    label = table.cell(0, 0)
    remove_cell_borders(label)
    set_cell_text(label, sections.REG_NO_LABEL, bold=True, align=WD_ALIGN_PARAGRAPH.RIGHT)


def _add_header(doc, paper: PaperModel, config: BuilderConfig) -> None:
    layout = config.layout
    _add_reg_no_strip(doc, layout)
    for line in sections.header_lines(paper, config.institution, layout.font_size_pt):
        _add_centered(doc, line.text, bold=line.bold, size_pt=line.size_pt, space_before_pt=line.space_before_pt)

    rows = sections.metadata_rows(paper, config.duration_label)
    table = doc.add_table(rows=len(rows), cols=2)
    half = layout.content_width_cm / 2
    _set_column_widths(table, (half, half))
    for r, (left, right) in enumerate(rows):
        set_cell_text(table.cell(r, 0), left, bold=True, align=WD_ALIGN_PARAGRAPH.LEFT)
        set_cell_text(table.cell(r, 1), right, bold=True, align=WD_ALIGN_PARAGRAPH.RIGHT)


def _add_part_heading(doc, title: str, instruction: str, layout: LayoutConfig, bold_instruction: bool) -> None:
    _add_centered(doc, title, bold=True, size_pt=layout.font_size_pt + 1, space_before_pt=14)
    _add_centered(doc, instruction, bold=bold_instruction, size_pt=layout.font_size_pt, space_after_pt=8)


def _add_grid_table(doc, rows: int, headings: Sequence[str], widths_cm: Sequence[float]):
    table = doc.add_table(rows=rows, cols=len(headings))
    table.style = GRID_STYLE
    table.alignment = WD_TABLE_ALIGNMENT.CENTER
    _set_column_widths(table, widths_cm)
    mark_header_row(table.rows[0])
    for c, heading in enumerate(headings):
        set_cell_text(table.cell(0, c), heading, bold=True)
    return table


def _add_part_a(doc, paper: PaperModel, config: BuilderConfig) -> None:
    layout = config.layout
    widths = layout.column_widths_cm(layout.part_a_columns)
    table = _add_grid_table(doc, len(paper.part_a) + 1, sections.PART_A_HEADINGS, widths)
    body_width = inner_width_cm(widths[1], GRID_MARGIN_TWIPS)

    for r, question in enumerate(paper.part_a, start=1):
        set_cell_text(table.cell(r, 0), question.number)
        write_nodes(table.cell(r, 1), compose_question(question, config.notation), body_width, layout)
        set_cell_text(table.cell(r, 2), question.category)
        set_cell_text(table.cell(r, 3), question.level)


def _add_part_b(doc, paper: PaperModel, config: BuilderConfig) -> None:
    layout = config.layout
    widths = layout.column_widths_cm(layout.part_b_columns)
    row_count = 1 + sections.ROWS_PER_GROUP * len(paper.part_b)
    table = _add_grid_table(doc, row_count, sections.PART_B_HEADINGS, widths)
    _apply_spans(table, sections.part_b_spans(len(paper.part_b)))
    body_width = inner_width_cm(widths[2], GRID_MARGIN_TWIPS)

    for i, group in enumerate(paper.part_b):
        top = 1 + i * sections.ROWS_PER_GROUP
        set_cell_text(table.cell(top, 0), group.number, bold=True)
        set_cell_text(table.cell(top, 1), sections.ALTERNATIVE_LABELS["a"])
        write_nodes(table.cell(top, 2), compose_alternative(group.a, config.notation), body_width, layout)
        set_cell_text(table.cell(top, 3), group.a.category)
        set_cell_text(table.cell(top, 4), group.a.level)
        set_cell_text(table.cell(top + 1, 1), sections.OR_LABEL)
        set_cell_text(table.cell(top + 2, 1), sections.ALTERNATIVE_LABELS["b"])
        write_nodes(table.cell(top + 2, 2), compose_alternative(group.b, config.notation), body_width, layout)
        for row in table.rows[top:top + sections.ROWS_PER_GROUP]:
            keep_row_intact(row)


def _add_weightage(doc, weightage: WeightageTable, config: BuilderConfig) -> None:
    layout = config.layout
    grid = sections.weightage_grid(weightage, config.taxonomy)
    column_count = len(grid.rows[0])
    fractions = layout.weightage_columns
    if len(fractions) != column_count:
        fractions = tuple(1.0 / column_count for _ in range(column_count))

    title = _add_centered(doc, sections.WEIGHTAGE_TITLE, bold=True, size_pt=layout.font_size_pt, space_before_pt=20, space_after_pt=6)
    title.runs[0].underline = True
    title.paragraph_format.keep_with_next = True

    table = doc.add_table(rows=len(grid.rows), cols=column_count)
    table.style = GRID_STYLE
    table.alignment = WD_TABLE_ALIGNMENT.CENTER
    _set_column_widths(table, layout.column_widths_cm(fractions))
    _apply_spans(table, grid.spans)

    last_row = len(grid.rows) - 1
    spanned = {(s.start_row + dr, s.start_col + dc)
               for s in grid.spans
               for dr in range(s.end_row - s.start_row + 1)
               for dc in range(s.end_col - s.start_col + 1)
               if (dr, dc) != (0, 0)}
    for r, row in enumerate(grid.rows):
        for c, text in enumerate(row):
            if (r, c) in spanned:
                continue
            bold = r in (0, last_row) or c in (0, 1, column_count - 2, column_count - 1)
            align = WD_ALIGN_PARAGRAPH.LEFT if (c == 0 and 0 < r < last_row) else WD_ALIGN_PARAGRAPH.CENTER
            set_cell_text(table.cell(r, c), text, bold=bold, size_pt=SUMMARY_FONT_PT, align=align)

    # Keep the whole summary on one page
    for row in table.rows:
        keep_row_intact(row)
        for cell in row.cells:
            for paragraph in cell.paragraphs:
                paragraph.paragraph_format.keep_with_next = True


# ─────────────────────────────────────────────────────────────────────────────
# Entry point
# ─────────────────────────────────────────────────────────────────────────────

def render_docx(paper: PaperModel, weightage: WeightageTable, config: BuilderConfig) -> bytes:
    """
    Render the paper to DOCX bytes.

    Args:
        paper: Document model
        weightage: Aggregated weightage table
        config: Builder configuration (layout, institution, notation)

    Returns:
        DOCX document bytes (a zip package)

    Example:
        >>> data = render_docx(paper, compute_weightage(paper), BuilderConfig())
        >>> data[:2]
        b'PK'
    """
    layout = config.layout
    doc = _setup_document(config, paper)

    (part_a_title, part_a_instruction), (part_b_title, part_b_instruction) = sections.part_titles(config.pattern)

    _add_header(doc, paper, config)
    _add_part_heading(doc, part_a_title, part_a_instruction, layout, bold_instruction=False)
    _add_part_a(doc, paper, config)
    _add_part_heading(doc, part_b_title, part_b_instruction, layout, bold_instruction=True)
    _add_part_b(doc, paper, config)
    _add_weightage(doc, weightage, config)

    buffer = BytesIO()
    doc.save(buffer)
    data = buffer.getvalue()
    logger.info(f"Rendered DOCX ({len(data)} bytes)")
    return data
