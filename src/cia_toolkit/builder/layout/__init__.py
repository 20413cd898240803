"""
Layout Package

Layout configuration and the shared section content both renderers draw.
"""

from .config import InstitutionConfig, LayoutConfig
from .sections import (
    CellSpan,
    Grid,
    HeaderLine,
    header_lines,
    metadata_rows,
    part_b_spans,
    part_titles,
    weightage_grid,
)

__all__ = [
    "InstitutionConfig",
    "LayoutConfig",
    "CellSpan",
    "Grid",
    "HeaderLine",
    "header_lines",
    "metadata_rows",
    "part_b_spans",
    "part_titles",
    "weightage_grid",
]
