"""
Core Models Package

Immutable, validated data models that serve as the single source of truth
for a CIA paper. All models are frozen dataclasses: built once from the
submitted payload, then only read by the aggregator and the renderers.

| Model | Role |
|-------|------|
| `Marks` | Mark value plus where it came from |
| `Header` | Paper metadata and derived display fields |
| `ShortAnswerQuestion` | Part A question |
| `FlatAlternative` / `SubdividedAlternative` | Part B alternative shapes |
| `EitherOrGroup` | Part B question slot |
| `PaperModel` | Whole document |
| `WeightageTable` | Level x category cross-tabulation |
"""

from .marks import Marks
from .header import Header
from .images import ImageAsset
from .questions import (
    Alternative,
    EitherOrGroup,
    FlatAlternative,
    ShortAnswerQuestion,
    SubdividedAlternative,
    Subdivision,
)
from .paper import PaperModel
from .weightage import WeightageCell, WeightageTable

__all__ = [
    "Marks",
    "Header",
    "ImageAsset",
    "Alternative",
    "EitherOrGroup",
    "FlatAlternative",
    "ShortAnswerQuestion",
    "SubdividedAlternative",
    "Subdivision",
    "PaperModel",
    "WeightageCell",
    "WeightageTable",
]
