"""
Module: weightage

Purpose:
    Cross-tabulation of marks by cognitive level (rows) and outcome
    category (columns), with the display accessors both renderers use.

Display contract:
    Absence renders blank, presence renders the number, a zero is never
    printed. Percentages use two decimals.

Key Classes:
    - WeightageCell: Question numbers and marks for one (level, category)
    - WeightageTable: All cells plus totals

Used By:
    - builder.weightage: compute_weightage() creates tables
    - builder.layout.sections: Summary table rows
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Tuple


@dataclass(frozen=True)
class WeightageCell:
    """
    One (level, category) cell.

    Attributes:
        questions: De-duplicated question numbers in insertion order
        marks: Marks attributed to this cell
    """
    questions: Tuple[str, ...] = ()
    marks: int = 0

    def __post_init__(self) -> None:
        if self.marks < 0:
            raise ValueError(f"Cell marks cannot be negative: {self.marks}")

    def add(self, number: str, marks: int) -> WeightageCell:
        """Return a new cell with ``number`` appended (once) and marks added."""
        questions = self.questions if number in self.questions else self.questions + (number,)
        return WeightageCell(questions=questions, marks=self.marks + marks)


EMPTY_CELL = WeightageCell()


def _format_number(value: int) -> str:
    return str(value) if value else ""


@dataclass(frozen=True)
class WeightageTable:
    """
    Marks cross-tabulated by level x category.

    Attributes:
        levels: Level tags in row order
        categories: Category tags in column order
        cells: (level, category) -> WeightageCell, only populated cells

    Example:
        >>> table.marks_text("L1", "CO1")
        '12'
        >>> table.row_percentage_text("L1")
        '20.00'
    """
    levels: Tuple[str, ...]
    categories: Tuple[str, ...]
    cells: Mapping[Tuple[str, str], WeightageCell] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for level, category in self.cells:
            if level not in self.levels or category not in self.categories:
                raise ValueError(f"Cell outside table: ({level}, {category})")
        object.__setattr__(self, "cells", MappingProxyType(dict(self.cells)))

    # ─────────────────────────────────────────────────────────────────────────
    # Totals
    # ─────────────────────────────────────────────────────────────────────────

    def cell(self, level: str, category: str) -> WeightageCell:
        return self.cells.get((level, category), EMPTY_CELL)

    def row_total(self, level: str) -> int:
        return sum(self.cell(level, co).marks for co in self.categories)

    def column_total(self, category: str) -> int:
        return sum(self.cell(lvl, category).marks for lvl in self.levels)

    @property
    def grand_total(self) -> int:
        return sum(c.marks for c in self.cells.values())

    def row_percentage(self, level: str) -> float:
        grand = self.grand_total
        if not grand:
            return 0.0
        return self.row_total(level) / grand * 100

    # ─────────────────────────────────────────────────────────────────────────
    # Display accessors
    # ─────────────────────────────────────────────────────────────────────────

    def question_text(self, level: str, category: str) -> str:
        return ",".join(self.cell(level, category).questions)

    def marks_text(self, level: str, category: str) -> str:
        return _format_number(self.cell(level, category).marks)

    def row_total_text(self, level: str) -> str:
        return _format_number(self.row_total(level))

    def column_total_text(self, category: str) -> str:
        return _format_number(self.column_total(category))

    def grand_total_text(self) -> str:
        return _format_number(self.grand_total)

    def row_percentage_text(self, level: str) -> str:
        if not self.row_total(level):
            return ""
        return f"{self.row_percentage(level):.2f}"

    def percentage_reference_text(self) -> str:
        """The "100" under the percentage column, only for a non-empty table."""
        return "100" if self.grand_total else ""
