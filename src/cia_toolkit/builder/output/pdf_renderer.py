"""
Module: builder.output.pdf_renderer

Purpose:
    Render a PaperModel and its WeightageTable to a print-ready A4 PDF
    using ReportLab platypus. Question text arrives as rendered-block
    nodes (text.blocks); this module only decides how each node is drawn.

Key Functions:
    - render_pdf(): Main rendering function, returns PDF bytes

Dependencies:
    - reportlab: PDF generation (platypus tables and paragraphs)
    - text.blocks: Shared node representation
    - builder.layout.sections: Shared section content and spans

Used By:
    - builder.controller: Pipeline orchestration
"""

from __future__ import annotations

import logging
from io import BytesIO
from typing import List, Sequence, Tuple
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY, TA_LEFT, TA_RIGHT
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import cm
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import (
    Flowable,
    Image as RLImage,
    KeepTogether,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from cia_toolkit.core.models import PaperModel, WeightageTable
from cia_toolkit.text.blocks import Figure, IndexedRow, Node, TextLine, compose_alternative, compose_question
from cia_toolkit.text.notation import InlineRun

from ..config import BuilderConfig
from ..layout import sections
from ..layout.config import LayoutConfig
from ..layout.sections import CellSpan

logger = logging.getLogger(__name__)

HEADER_BACKGROUND = colors.HexColor("#f8f8f8")
LABEL_BACKGROUND = colors.HexColor("#fcfcfc")
TOTALS_BACKGROUND = colors.HexColor("#f2f2f2")
GRID_WIDTH = 0.75
CELL_PADDING = 4
NESTED_PADDING = 1


# ─────────────────────────────────────────────────────────────────────────────
# Styles
# ─────────────────────────────────────────────────────────────────────────────

class _Styles:
    """Paragraph styles derived from one LayoutConfig."""

    def __init__(self, layout: LayoutConfig):
        size = layout.font_size_pt
        regular, bold = layout.font_name, layout.bold_font_name
        leading = size * 1.25

        self.body = ParagraphStyle("Body", fontName=regular, fontSize=size, leading=leading, alignment=TA_JUSTIFY)
        self.cell = ParagraphStyle("Cell", parent=self.body, alignment=TA_CENTER)
        self.cell_bold = ParagraphStyle("CellBold", parent=self.cell, fontName=bold)
        self.heading = ParagraphStyle("Heading", parent=self.cell_bold, fontSize=size - 1, leading=(size - 1) * 1.2)
        self.meta_left = ParagraphStyle("MetaLeft", parent=self.body, fontName=bold, alignment=TA_LEFT)
        self.meta_right = ParagraphStyle("MetaRight", parent=self.meta_left, alignment=TA_RIGHT)
        self.part_title = ParagraphStyle(
            "PartTitle", parent=self.cell_bold, fontSize=size + 1, leading=(size + 1) * 1.2, spaceBefore=14,
        )
        self.instruction = ParagraphStyle("Instruction", parent=self.cell, spaceAfter=8)
        self.instruction_bold = ParagraphStyle("InstructionBold", parent=self.instruction, fontName=bold)
        self.summary = ParagraphStyle("Summary", parent=self.cell, fontSize=9, leading=11)
        self.summary_bold = ParagraphStyle("SummaryBold", parent=self.summary, fontName=bold)
        self.summary_label = ParagraphStyle("SummaryLabel", parent=self.summary_bold, alignment=TA_LEFT)
        self.summary_title = ParagraphStyle("SummaryTitle", parent=self.cell_bold, spaceBefore=20, spaceAfter=6)
        self.regular = regular
        self.bold = bold

    def header_line(self, line: sections.HeaderLine) -> ParagraphStyle:
        return ParagraphStyle(
            f"Header{line.size_pt:g}",
            parent=self.cell,
            fontName=self.bold if line.bold else self.regular,
            fontSize=line.size_pt,
            leading=line.size_pt * 1.2,
            spaceBefore=line.space_before_pt,
        )


def _register_fonts(layout: LayoutConfig) -> None:
    """Register TrueType fonts when the layout names font files."""
    for name, path in ((layout.font_name, layout.font_path), (layout.bold_font_name, layout.bold_font_path)):
        if path and name not in pdfmetrics.getRegisteredFontNames():
            pdfmetrics.registerFont(TTFont(name, str(path)))
            logger.debug(f"Registered font {name} from {path}")


# ─────────────────────────────────────────────────────────────────────────────
# Inline markup
# ─────────────────────────────────────────────────────────────────────────────

def _escape_html(text: str) -> str:
    """Escape &, < and > so Paragraph treats them as literal text."""
    return escape(text or "")


def runs_to_markup(runs: Sequence[InlineRun]) -> str:
    """
    Convert styled runs to ReportLab paragraph markup.

    Example:
        >>> runs_to_markup((InlineRun("x"), InlineRun("2", "superscript")))
        'x<sup>2</sup>'
    """
    parts = []
    for run in runs:
        text = _escape_html(run.text)
        if run.style == "superscript":
            parts.append(f"<sup>{text}</sup>")
        elif run.style == "subscript":
            parts.append(f"<sub>{text}</sub>")
        else:
            parts.append(text)
    return "".join(parts)


# ─────────────────────────────────────────────────────────────────────────────
# Nodes -> flowables
# ─────────────────────────────────────────────────────────────────────────────

def _figure_flowable(figure: Figure, width: float, layout: LayoutConfig) -> Flowable | None:
    image = figure.image
    if not image.data:
        logger.warning("Skipping image with no data in PDF")
        return None
    try:
        # Probe eagerly so unsupported formats fail here, not during build
        ImageReader(BytesIO(image.data)).getSize()
    except Exception as e:
        logger.warning(f"Skipping image ReportLab cannot embed ({image.format or 'unknown'}): {e}")
        return None

    max_width_cm = min(layout.image_max_width_cm, width / cm)
    w_cm, h_cm = image.size_cm(max_width_cm, layout.image_max_height_cm, layout.image_dpi)
    return RLImage(
        BytesIO(image.data),
        width=w_cm * cm,
        height=h_cm * cm,
        mask="auto" if image.needs_alpha else None,
        hAlign="CENTER",
    )


def _indexed_row_table(row: IndexedRow, width: float, styles: _Styles, layout: LayoutConfig) -> Table:
    """Borderless three-column index | body | marks table."""
    index_w = layout.index_column_cm * cm
    marks_w = layout.marks_column_cm * cm
    body_w = max(width - index_w - marks_w, cm)

    body = nodes_to_flowables(row.body, body_w - 2 * NESTED_PADDING, styles, layout)
    table = Table(
        [[
            Paragraph(_escape_html(row.index), styles.body),
            body or "",
            Paragraph(_escape_html(row.marks_label), styles.cell),
        ]],
        colWidths=[index_w, body_w, marks_w],
    )
    table.setStyle(TableStyle([
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("LEFTPADDING", (0, 0), (-1, -1), NESTED_PADDING),
        ("RIGHTPADDING", (0, 0), (-1, -1), NESTED_PADDING),
        ("TOPPADDING", (0, 0), (-1, -1), NESTED_PADDING),
        ("BOTTOMPADDING", (0, 0), (-1, -1), NESTED_PADDING),
    ]))
    return table


def nodes_to_flowables(
    nodes: Sequence[Node],
    width: float,
    styles: _Styles,
    layout: LayoutConfig,
) -> List[Flowable]:
    """
    Convert rendered-block nodes to flowables fitting ``width`` points.

    IndexedRow bodies recurse, so nested sub-items indent one column.
    """
    flowables: List[Flowable] = []
    for node in nodes:
        if isinstance(node, TextLine):
            flowables.append(Paragraph(runs_to_markup(node.runs), styles.body))
        elif isinstance(node, IndexedRow):
            flowables.append(_indexed_row_table(node, width, styles, layout))
        elif isinstance(node, Figure):
            figure = _figure_flowable(node, width, layout)
            if figure is not None:
                flowables.append(Spacer(1, 2))
                flowables.append(figure)
    return flowables


# ─────────────────────────────────────────────────────────────────────────────
# Sections
# ─────────────────────────────────────────────────────────────────────────────

def _span_commands(spans: Sequence[CellSpan]) -> List[Tuple]:
    return [("SPAN", (s.start_col, s.start_row), (s.end_col, s.end_row)) for s in spans]


def _grid_style(extra: Sequence[Tuple] = ()) -> TableStyle:
    return TableStyle([
        ("GRID", (0, 0), (-1, -1), GRID_WIDTH, colors.black),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_BACKGROUND),
        ("LEFTPADDING", (0, 0), (-1, -1), CELL_PADDING),
        ("RIGHTPADDING", (0, 0), (-1, -1), CELL_PADDING),
        *extra,
    ])


def _reg_no_strip(styles: _Styles, layout: LayoutConfig) -> Table:
    label_w = 2.0 * cm
    box = layout.reg_no_box_cm * cm
    table = Table(
        [[Paragraph(sections.REG_NO_LABEL, styles.meta_left)] + [""] * layout.reg_no_boxes],
        colWidths=[label_w] + [box] * layout.reg_no_boxes,
        rowHeights=[box],
        hAlign="RIGHT",
    )
    commands = [("VALIGN", (0, 0), (-1, -1), "MIDDLE")]
    if layout.reg_no_boxes:
        commands.append(("GRID", (1, 0), (-1, 0), 1, colors.black))
    table.setStyle(TableStyle(commands))
    return table


def _header_section(paper: PaperModel, config: BuilderConfig, styles: _Styles) -> List[Flowable]:
    layout = config.layout
    story: List[Flowable] = [_reg_no_strip(styles, layout), Spacer(1, 6)]
    for line in sections.header_lines(paper, config.institution, layout.font_size_pt):
        story.append(Paragraph(_escape_html(line.text), styles.header_line(line)))
    story.append(Spacer(1, 8))

    half = layout.content_width_cm * cm / 2
    meta = Table(
        [
            [Paragraph(_escape_html(left), styles.meta_left), Paragraph(_escape_html(right), styles.meta_right)]
            for left, right in sections.metadata_rows(paper, config.duration_label)
        ],
        colWidths=[half, half],
    )
    meta.setStyle(TableStyle([
        ("LEFTPADDING", (0, 0), (-1, -1), 0),
        ("RIGHTPADDING", (0, 0), (-1, -1), 0),
    ]))
    story.append(meta)
    return story


def _headings(labels: Sequence[str], styles: _Styles) -> List[Paragraph]:
    return [Paragraph(_escape_html(label), styles.heading) for label in labels]


def _part_a_table(paper: PaperModel, config: BuilderConfig, styles: _Styles) -> Table:
    layout = config.layout
    widths = [w * cm for w in layout.column_widths_cm(layout.part_a_columns)]
    content_w = widths[1] - 2 * CELL_PADDING

    rows: List[list] = [_headings(sections.PART_A_HEADINGS, styles)]
    for question in paper.part_a:
        rows.append([
            Paragraph(_escape_html(question.number), styles.cell),
            nodes_to_flowables(compose_question(question, config.notation), content_w, styles, layout) or "",
            Paragraph(_escape_html(question.category), styles.cell),
            Paragraph(_escape_html(question.level), styles.cell),
        ])

    return Table(rows, colWidths=widths, repeatRows=1, style=_grid_style())


def _part_b_table(paper: PaperModel, config: BuilderConfig, styles: _Styles) -> Table:
    layout = config.layout
    widths = [w * cm for w in layout.column_widths_cm(layout.part_b_columns)]
    content_w = widths[2] - 2 * CELL_PADDING

    def content(alternative) -> list:
        return nodes_to_flowables(compose_alternative(alternative, config.notation), content_w, styles, layout) or ""

    rows: List[list] = [_headings(sections.PART_B_HEADINGS, styles)]
    for group in paper.part_b:
        rows.append([
            Paragraph(_escape_html(group.number), styles.cell_bold),
            Paragraph(sections.ALTERNATIVE_LABELS["a"], styles.cell),
            content(group.a),
            Paragraph(_escape_html(group.a.category), styles.cell),
            Paragraph(_escape_html(group.a.level), styles.cell),
        ])
        rows.append(["", Paragraph(sections.OR_LABEL, styles.cell), "", "", ""])
        rows.append([
            "",
            Paragraph(sections.ALTERNATIVE_LABELS["b"], styles.cell),
            content(group.b),
            "",
            "",
        ])

    spans = sections.part_b_spans(len(paper.part_b))
    return Table(rows, colWidths=widths, repeatRows=1, style=_grid_style(_span_commands(spans)))


def _weightage_widths(layout: LayoutConfig, column_count: int) -> List[float]:
    fractions = layout.weightage_columns
    if len(fractions) != column_count:
        fractions = tuple(1.0 / column_count for _ in range(column_count))
    return [w * cm for w in layout.column_widths_cm(fractions)]


def _weightage_section(weightage: WeightageTable, config: BuilderConfig, styles: _Styles) -> KeepTogether:
    grid = sections.weightage_grid(weightage, config.taxonomy)
    column_count = len(grid.rows[0])
    last_row = len(grid.rows) - 1

    rows = []
    for r, row in enumerate(grid.rows):
        cells = []
        for c, text in enumerate(row):
            if r == 0 or r == last_row:
                style = styles.summary_bold
            elif c == 0:
                style = styles.summary_label
            else:
                style = styles.summary_bold if c in (1, column_count - 2, column_count - 1) else styles.summary
            cells.append(Paragraph(_escape_html(text), style))
        rows.append(cells)

    extra = _span_commands(grid.spans) + [
        ("BACKGROUND", (1, 1), (1, last_row - 1), LABEL_BACKGROUND),
        ("BACKGROUND", (0, last_row), (-1, last_row), TOTALS_BACKGROUND),
        ("LEFTPADDING", (0, 0), (-1, -1), 2),
        ("RIGHTPADDING", (0, 0), (-1, -1), 2),
    ]
    table = Table(rows, colWidths=_weightage_widths(config.layout, column_count), style=_grid_style(extra))
    title = Paragraph(f"<u>{_escape_html(sections.WEIGHTAGE_TITLE)}</u>", styles.summary_title)
    return KeepTogether([title, table])


def _part_heading(title: str, instruction: str, styles: _Styles, bold_instruction: bool) -> List[Flowable]:
    return [
        Paragraph(_escape_html(title), styles.part_title),
        Paragraph(_escape_html(instruction), styles.instruction_bold if bold_instruction else styles.instruction),
    ]


# ─────────────────────────────────────────────────────────────────────────────
# Entry point
# ─────────────────────────────────────────────────────────────────────────────

def render_pdf(paper: PaperModel, weightage: WeightageTable, config: BuilderConfig) -> bytes:
    """
    Render the paper to PDF bytes.

    Built with ReportLab's invariant mode, so rendering the same model
    twice yields byte-identical output.

    Args:
        paper: Document model
        weightage: Aggregated weightage table
        config: Builder configuration (layout, institution, notation)

    Returns:
        PDF document bytes

    Example:
        >>> data = render_pdf(paper, compute_weightage(paper), BuilderConfig())
        >>> data[:5]
        b'%PDF-'
    """
    layout = config.layout
    _register_fonts(layout)
    styles = _Styles(layout)

    buffer = BytesIO()
    margin = layout.margin_cm * cm
    doc = SimpleDocTemplate(
        buffer,
        pagesize=(layout.page_width_cm * cm, layout.page_height_cm * cm),
        leftMargin=margin,
        rightMargin=margin,
        topMargin=margin,
        bottomMargin=margin,
        title=f"{paper.header.course_code} CIA {paper.header.assessment_numeral}",
        author=config.institution.name,
        invariant=1,
    )

    (part_a_title, part_a_instruction), (part_b_title, part_b_instruction) = sections.part_titles(config.pattern)

    story: List[Flowable] = []
    story.extend(_header_section(paper, config, styles))
    story.extend(_part_heading(part_a_title, part_a_instruction, styles, bold_instruction=False))
    story.append(_part_a_table(paper, config, styles))
    story.extend(_part_heading(part_b_title, part_b_instruction, styles, bold_instruction=True))
    story.append(_part_b_table(paper, config, styles))
    story.append(_weightage_section(weightage, config, styles))

    doc.build(story)
    data = buffer.getvalue()
    logger.info(f"Rendered PDF ({len(data)} bytes)")
    return data
