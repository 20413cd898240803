"""
Module: builder.weightage

Purpose:
    Cross-tabulate a paper's marks by cognitive level and outcome
    category.

Rules:
    - Each short-answer question adds its marks and number to its cell.
    - Each group's alternative "a" adds its marks with the group number.
    - Alternative "b" only adds its group number, at zero marks, and only
      when its category or level differs from "a" (both alternatives are
      then indexed, but marks are counted once per group).
    - Tags outside the taxonomy are skipped with a warning.

Key Functions:
    - compute_weightage(): PaperModel -> WeightageTable

Used By:
    - builder.controller
"""

from __future__ import annotations

import logging
from typing import Dict, Tuple

from cia_toolkit.common import DEFAULT_TAXONOMY, Taxonomy
from cia_toolkit.core.models import PaperModel, WeightageCell, WeightageTable

logger = logging.getLogger(__name__)


def compute_weightage(paper: PaperModel, taxonomy: Taxonomy = DEFAULT_TAXONOMY) -> WeightageTable:
    """
    Aggregate marks into a level x category table.

    Args:
        paper: Document model
        taxonomy: Row (level) and column (category) enumeration

    Returns:
        WeightageTable

    Example:
        >>> table = compute_weightage(paper)
        >>> table.grand_total
        60
    """
    cells: Dict[Tuple[str, str], WeightageCell] = {}

    def attribute(level: str, category: str, number: str, marks: int) -> None:
        if level not in taxonomy.level_tags or category not in taxonomy.categories:
            logger.warning(f"Skipping Q{number}: tag ({category}, {level}) not in taxonomy")
            return
        key = (level, category)
        cells[key] = cells.get(key, WeightageCell()).add(number, marks)

    for question in paper.part_a:
        attribute(question.level, question.category, question.number, question.marks.value)

    for group in paper.part_b:
        a, b = group.a, group.b
        attribute(a.level, a.category, group.number, a.marks.value)
        if (b.category, b.level) != (a.category, a.level):
            attribute(b.level, b.category, group.number, 0)

    table = WeightageTable(
        levels=taxonomy.level_tags,
        categories=taxonomy.categories,
        cells=cells,
    )
    logger.debug(f"Weightage: {len(cells)} populated cells, {table.grand_total} marks")
    return table
