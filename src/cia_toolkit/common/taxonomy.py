"""
Module: common.taxonomy

Purpose:
    Course-outcome (CO) categories and Bloom's taxonomy levels (BTL)
    used to tag questions. Injected into the model builder (for
    validation) and the weightage aggregator (for table shape).

Key Classes:
    - Taxonomy: Immutable category/level enumeration

Used By:
    - builder.assembly: Tag validation
    - builder.weightage: Cross-tabulation rows and columns
    - builder.layout.sections: Weightage table header
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Taxonomy:
    """
    Category and level enumerations (immutable).

    Attributes:
        categories: Outcome category tags in column order.
        levels: (tag, name) pairs in row order.
        short_answer_levels: Levels allowed for Part A questions.

    Example:
        >>> DEFAULT_TAXONOMY.level_label("L3")
        'Apply (L3)'
    """

    categories: Tuple[str, ...] = ("CO1", "CO2", "CO3", "CO4", "CO5")
    levels: Tuple[Tuple[str, str], ...] = (
        ("L1", "Remember"),
        ("L2", "Understand"),
        ("L3", "Apply"),
        ("L4", "Analyze"),
    )
    short_answer_levels: Tuple[str, ...] = ("L1", "L2")

    def __post_init__(self) -> None:
        if not self.categories:
            raise ValueError("Taxonomy needs at least one category")
        if not self.levels:
            raise ValueError("Taxonomy needs at least one level")
        unknown = [lvl for lvl in self.short_answer_levels if lvl not in self.level_tags]
        if unknown:
            raise ValueError(f"short_answer_levels not in levels: {unknown}")

    @property
    def level_tags(self) -> Tuple[str, ...]:
        return tuple(tag for tag, _ in self.levels)

    def level_label(self, tag: str) -> str:
        """Row label shown in the weightage table."""
        for level_tag, name in self.levels:
            if level_tag == tag:
                return f"{name} ({tag})"
        return tag


DEFAULT_TAXONOMY = Taxonomy()
