"""
Module: paper

Purpose:
    PaperModel - the validated document model both renderers and the
    weightage aggregator consume. Built once per submission.

Key Classes:
    - PaperModel: Header plus Part A questions and Part B groups

Used By:
    - builder.assembly: Creates it
    - builder.weightage, builder.output: Read it
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Tuple

from .header import Header
from .questions import EitherOrGroup, ShortAnswerQuestion


@dataclass(frozen=True)
class PaperModel:
    """
    Immutable exam paper document.

    Attributes:
        header: Paper metadata
        part_a: Short-answer questions in display order
        part_b: Either/or groups in display order

    Note:
        ``total_marks`` is always calculated, never stored. Only
        alternative "a" of each group counts, since the examinee answers
        one alternative per group.
    """
    header: Header
    part_a: Tuple[ShortAnswerQuestion, ...]
    part_b: Tuple[EitherOrGroup, ...]

    @property
    def part_a_marks(self) -> int:
        return sum(q.marks.value for q in self.part_a)

    @property
    def part_b_marks(self) -> int:
        return sum(group.a.marks.value for group in self.part_b)

    @property
    def total_marks(self) -> int:
        return self.part_a_marks + self.part_b_marks

    def iter_images(self) -> Iterator:
        """Yield every ImageAsset in display order."""
        for question in self.part_a:
            yield from question.images
        for group in self.part_b:
            for _, alternative in group.alternatives:
                if alternative.is_subdivided:
                    for sub in alternative.subdivisions:
                        yield from sub.images
                yield from alternative.images
