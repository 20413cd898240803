"""
Module: common

Purpose:
    Shared, immutable configuration tables used by more than one stage
    of the pipeline (paper pattern and CO/BTL taxonomy).
"""

from .pattern import PaperPattern, DEFAULT_PATTERN
from .taxonomy import Taxonomy, DEFAULT_TAXONOMY

__all__ = [
    "PaperPattern",
    "DEFAULT_PATTERN",
    "Taxonomy",
    "DEFAULT_TAXONOMY",
]
