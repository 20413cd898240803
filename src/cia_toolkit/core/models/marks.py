"""
Module: marks

Purpose:
    Mark values carried by questions, subdivisions and alternatives,
    tagged with their origin so author-typed subdivision marks can be
    told apart from the fixed values the paper pattern hands out.

Key Functions:
    - Marks.explicit(value): Typed against a subdivision, e.g. "(8)"
    - Marks.implicit(value): Fixed by the pattern (2 per Part A question,
      16 per flat alternative)
    - Marks.aggregate(parts): Total of a subdivided alternative

Used By:
    - core.models.questions
    - builder.assembly
    - core.utils.serialization (markSource in paper.json)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal, Protocol

MarkSource = Literal["explicit", "aggregate", "implicit"]
MARK_SOURCES = ("explicit", "aggregate", "implicit")


class _Marked(Protocol):
    marks: "Marks"


@dataclass(frozen=True, slots=True)
class Marks:
    """
    A non-negative mark value and its origin (immutable).

    Attributes:
        value: Marks awarded
        source: "explicit" when typed by the author, "implicit" when fixed
            by the paper pattern, "aggregate" when summed from subdivisions

    Example:
        >>> Marks.explicit(8) + Marks.explicit(8)
        Marks(value=16, source='aggregate')
    """

    value: int
    source: MarkSource

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"Marks must be an integer, got {self.value!r}")
        if self.value < 0:
            raise ValueError(f"Negative marks are not allowed: {self.value}")
        if self.source not in MARK_SOURCES:
            raise ValueError(f"Unknown mark source {self.source!r}, expected one of {MARK_SOURCES}")

    @classmethod
    def explicit(cls, value: int) -> Marks:
        return cls(value, "explicit")

    @classmethod
    def implicit(cls, value: int) -> Marks:
        return cls(value, "implicit")

    @classmethod
    def aggregate(cls, parts: Iterable[_Marked]) -> Marks:
        """Sum the marks of ``parts``; nothing to sum gives zero."""
        return cls(sum(part.marks.value for part in parts), "aggregate")

    def __add__(self, other: Marks) -> Marks:
        if isinstance(other, Marks):
            return Marks(self.value + other.value, "aggregate")
        return NotImplemented

    def __str__(self) -> str:
        return str(self.value)
