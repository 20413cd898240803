"""
Module: builder.layout.sections

Purpose:
    Target-neutral content and grid geometry of every fixed section of
    the paper (header, metadata block, table headings, Part B row spans,
    weightage grid). Both renderers read these so the two outputs cannot
    disagree on wording, order or merged cells.

Key Functions:
    - header_lines(): Ordered header lines with size and emphasis
    - metadata_rows(): Date/Session and Time/Maximum Marks rows
    - part_b_spans(): Merged cells of the Part B table
    - weightage_grid(): Rows and merged cells of the weightage table

Key Classes:
    - HeaderLine: One centred header line
    - CellSpan: Rectangular merged cell range (inclusive)
    - Grid: Rows of cell text plus merged ranges

Used By:
    - builder.output.pdf_renderer
    - builder.output.docx_renderer
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from cia_toolkit.common import PaperPattern, Taxonomy
from cia_toolkit.core.models import PaperModel, WeightageTable

from .config import InstitutionConfig

REG_NO_LABEL = "Reg. No."
ASSESSMENT_TITLE = "Continuous Internal Assessment"
PART_A_INSTRUCTION = "Answer All the questions"
PART_B_INSTRUCTION = "Answer either (a) or (b) in each Question"
OR_LABEL = "Or"
WEIGHTAGE_TITLE = "Weightage of CO"

PART_A_HEADINGS = ("Q. No.", "Questions", "CO", "BTL")
PART_B_HEADINGS = ("Q. No.", "", "Questions", "CO", "BTL")
ALTERNATIVE_LABELS = {"a": "(a)", "b": "(b)"}

ROWS_PER_GROUP = 3  # (a), Or, (b)
ROWS_PER_LEVEL = 2  # Q. No., Marks


@dataclass(frozen=True)
class HeaderLine:
    """One centred header line."""
    text: str
    size_pt: float
    bold: bool = True
    space_before_pt: float = 0.0


@dataclass(frozen=True)
class CellSpan:
    """Merged cell range, inclusive on both ends: (col, row) to (col, row)."""
    start_col: int
    start_row: int
    end_col: int
    end_row: int


@dataclass(frozen=True)
class Grid:
    """Plain-text table: rows of cell strings and merged ranges."""
    rows: Tuple[Tuple[str, ...], ...]
    spans: Tuple[CellSpan, ...] = ()
    header_rows: int = 1


def header_lines(
    paper: PaperModel,
    institution: InstitutionConfig,
    body_size_pt: float = 11.0,
) -> Tuple[HeaderLine, ...]:
    """
    Header lines in print order.

    Example:
        >>> [line.text for line in header_lines(paper, InstitutionConfig())][3]
        'Continuous Internal Assessment – II'
    """
    header = paper.header
    lines = [
        HeaderLine(institution.name.upper(), 16.0),
        HeaderLine(institution.autonomy, 13.0),
        HeaderLine(institution.address, body_size_pt),
        HeaderLine(f"{ASSESSMENT_TITLE} – {header.assessment_numeral}", 12.0, space_before_pt=6.0),
        HeaderLine(f"{header.academic_year} – {header.semester_type}", body_size_pt, space_before_pt=4.0),
        HeaderLine(header.programme, body_size_pt, space_before_pt=2.0),
        HeaderLine(header.semester_label, body_size_pt),
        HeaderLine(header.course_line.upper(), 12.0, space_before_pt=8.0),
    ]
    if header.common_to:
        lines.append(HeaderLine(f"Common To: {header.common_to}", body_size_pt))
    if header.permitting_notes:
        lines.append(HeaderLine(f"({header.permitting_notes})", body_size_pt))
    return tuple(lines)


def metadata_rows(paper: PaperModel, duration_label: str) -> Tuple[Tuple[str, str], ...]:
    """Two-column metadata block; the right column is right-aligned."""
    header = paper.header
    return (
        (f"Date : {header.display_date}", f"Session : {header.session}"),
        (f"Time : {duration_label}", f"Maximum Marks : {paper.total_marks}"),
    )


def part_titles(pattern: PaperPattern) -> Tuple[Tuple[str, str], Tuple[str, str]]:
    """((Part A title, instruction), (Part B title, instruction))."""
    return (
        (pattern.part_a_title, PART_A_INSTRUCTION),
        (pattern.part_b_title, PART_B_INSTRUCTION),
    )


def part_b_spans(group_count: int, header_rows: int = 1) -> Tuple[CellSpan, ...]:
    """
    Merged cells of the Part B table.

    Each group occupies three rows: (a), Or, (b). Q. No., CO and BTL span
    all three; the Or label spans the (a)/(b) and Questions columns.
    """
    spans = []
    for i in range(group_count):
        top = header_rows + i * ROWS_PER_GROUP
        bottom = top + ROWS_PER_GROUP - 1
        spans.extend((
            CellSpan(0, top, 0, bottom),
            CellSpan(1, top + 1, 2, top + 1),
            CellSpan(3, top, 3, bottom),
            CellSpan(4, top, 4, bottom),
        ))
    return tuple(spans)


def weightage_grid(table: WeightageTable, taxonomy: Taxonomy) -> Grid:
    """
    Rows and merged cells of the weightage table.

    Layout:
        header:  BTL | "" | CO1..COn | Total Marks | Total Marks (%)
        level:   label | Q. No. | numbers... | "" | percentage
                 (label)| Marks  | marks...   | row total | (percentage)
        totals:  Total Marks (2 cols) | column totals... | grand | 100

    Zero values render blank (see WeightageTable display accessors).
    """
    categories = table.categories
    rows = [("BTL", "") + tuple(categories) + ("Total Marks", "Total Marks (%)")]
    spans = []
    last_col = len(categories) + 3

    for level in table.levels:
        top = len(rows)
        rows.append(
            (taxonomy.level_label(level), "Q. No.")
            + tuple(table.question_text(level, co) for co in categories)
            + ("", table.row_percentage_text(level))
        )
        rows.append(
            ("", "Marks")
            + tuple(table.marks_text(level, co) for co in categories)
            + (table.row_total_text(level), "")
        )
        spans.append(CellSpan(0, top, 0, top + 1))
        spans.append(CellSpan(last_col, top, last_col, top + 1))

    totals_row = len(rows)
    rows.append(
        ("Total Marks", "")
        + tuple(table.column_total_text(co) for co in categories)
        + (table.grand_total_text(), table.percentage_reference_text())
    )
    spans.append(CellSpan(0, totals_row, 1, totals_row))

    return Grid(rows=tuple(rows), spans=tuple(spans))
