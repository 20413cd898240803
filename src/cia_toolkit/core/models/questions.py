"""
Module: questions

Purpose:
    Question dataclasses for both parts of the paper. Part B alternatives
    are a tagged variant: a FlatAlternative carries one text block worth
    the full pattern marks, a SubdividedAlternative carries a non-empty
    tuple of explicitly marked Subdivisions.

Key Classes:
    - ShortAnswerQuestion: Part A question (fixed marks)
    - Subdivision: Labelled, separately marked sub-part
    - FlatAlternative / SubdividedAlternative: The two Alternative shapes
    - EitherOrGroup: Question slot with alternatives "a" and "b"

Invariants:
    - SubdividedAlternative.subdivisions is never empty
    - SubdividedAlternative marks = sum of subdivision marks
    - FlatAlternative marks = the pattern's full marks (16 by default)

Used By:
    - builder.assembly: Creates these from the payload
    - builder.weightage: Reads category/level/marks
    - text.blocks: Composes render nodes
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

from .images import ImageAsset
from .marks import Marks


@dataclass(frozen=True)
class ShortAnswerQuestion:
    """
    Part A short-answer question.

    Attributes:
        number: Display number ("1".."6")
        text: Raw question text
        category: Outcome category tag ("CO1".."CO5")
        level: Cognitive level tag ("L1", "L2")
        images: Figures shown below the text
        marks: Fixed by the pattern (2 by default)
    """
    number: str
    text: str
    category: str
    level: str
    images: Tuple[ImageAsset, ...] = ()
    marks: Marks = Marks.implicit(2)


@dataclass(frozen=True)
class Subdivision:
    """
    Explicit sub-part of an alternative, e.g. "i) Explain ... (8)".

    Attributes:
        label: Index token as typed ("i)", "(a)")
        text: Raw sub-part text
        marks: Explicit marks for this sub-part
        images: Figures shown below this sub-part
    """
    label: str
    text: str
    marks: Marks
    images: Tuple[ImageAsset, ...] = ()


@dataclass(frozen=True)
class FlatAlternative:
    """Alternative answered as a single block for the full marks."""
    text: str
    category: str
    level: str
    images: Tuple[ImageAsset, ...] = ()
    marks: Marks = Marks.implicit(16)

    @property
    def is_subdivided(self) -> bool:
        return False


@dataclass(frozen=True)
class SubdividedAlternative:
    """
    Alternative split into explicitly marked subdivisions.

    Attributes:
        subdivisions: Non-empty tuple of Subdivision in display order
        category: Outcome category shared by all subdivisions
        level: Cognitive level shared by all subdivisions
        stem: Optional lead-in text shown above the subdivisions
        images: Figures shown after the last subdivision
    """
    subdivisions: Tuple[Subdivision, ...]
    category: str
    level: str
    stem: str = ""
    images: Tuple[ImageAsset, ...] = ()

    def __post_init__(self) -> None:
        if not self.subdivisions:
            raise ValueError("SubdividedAlternative needs at least one subdivision")

    @property
    def marks(self) -> Marks:
        return Marks.aggregate(self.subdivisions)

    @property
    def is_subdivided(self) -> bool:
        return True


Alternative = Union[FlatAlternative, SubdividedAlternative]


@dataclass(frozen=True)
class EitherOrGroup:
    """
    Part B question slot: the examinee answers exactly one of a or b.

    Alternative "a" is the canonical branch for weightage.
    """
    number: str
    a: Alternative
    b: Alternative

    @property
    def alternatives(self) -> Tuple[Tuple[str, Alternative], ...]:
        """(label, alternative) pairs in display order."""
        return (("a", self.a), ("b", self.b))
