"""Question paper pattern: how many questions each part has and what they carry.

Centralises the counts and fixed mark values that the model builder,
the weightage aggregator and both renderers would otherwise hard-code.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PaperPattern:
    """Shape of a CIA paper (immutable)."""

    part_a_count: int = 6  # Short-answer questions
    part_a_marks: int = 2  # Marks per short-answer question
    part_b_count: int = 3  # Either/or groups
    part_b_marks: int = 16  # Marks for a flat alternative
    part_b_first_number: int = 7  # Part B numbering continues after Part A

    def __post_init__(self) -> None:
        for name in ("part_a_count", "part_a_marks", "part_b_count", "part_b_marks"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive: {getattr(self, name)}")

    @property
    def part_a_total(self) -> int:
        return self.part_a_count * self.part_a_marks

    @property
    def part_b_total(self) -> int:
        return self.part_b_count * self.part_b_marks

    @property
    def part_a_title(self) -> str:
        """Heading like 'PART-A (6 x 2 = 12 Marks)'."""
        return f"PART-A ({self.part_a_count} x {self.part_a_marks} = {self.part_a_total} Marks)"

    @property
    def part_b_title(self) -> str:
        return f"PART-B ({self.part_b_count} x {self.part_b_marks} = {self.part_b_total} Marks)"


DEFAULT_PATTERN = PaperPattern()
