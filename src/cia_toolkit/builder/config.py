"""
Module: builder.config

Purpose:
    Configuration dataclasses for the paper building pipeline. Immutable
    configuration with validation on construction.

Key Classes:
    - BuilderConfig: Main configuration for building papers

Dependencies:
    - dataclasses (std)
    - pathlib (std)

Used By:
    - builder.controller: Main build controller
    - cia_toolkit.cli: Built from command line options
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from cia_toolkit.common import DEFAULT_PATTERN, DEFAULT_TAXONOMY, PaperPattern, Taxonomy
from cia_toolkit.text.config import DEFAULT_NOTATION, NotationTables

from .layout.config import InstitutionConfig, LayoutConfig


@dataclass(frozen=True)
class BuilderConfig:
    """
    Configuration for building papers (immutable).

    Attributes:
        output_dir: Artifact root; None keeps artifacts in memory only
        institution: Fixed header lines
        layout: Page and table layout shared by both renderers
        pattern: Question counts and fixed marks
        taxonomy: Allowed CO/BTL tags and weightage table shape
        notation: Glyph tables for the notation translator
        parallel_render: Render PDF and DOCX on two worker threads
        render_timeout_s: Upper bound for both renders together
        duration_label: Text after "Time :" in the metadata block
        base_name: File stem for the artifacts (defaults to the paper id)

    Example:
        >>> config = BuilderConfig(output_dir=Path("generated"))
        >>> config.pattern.part_b_marks
        16
    """

    # Output
    output_dir: Optional[Path] = None
    base_name: Optional[str] = None

    # Document shape
    institution: InstitutionConfig = field(default_factory=InstitutionConfig)
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    pattern: PaperPattern = DEFAULT_PATTERN
    taxonomy: Taxonomy = DEFAULT_TAXONOMY
    notation: NotationTables = DEFAULT_NOTATION
    duration_label: str = "2 Hrs."

    # Rendering
    parallel_render: bool = True
    render_timeout_s: float = 60.0

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.render_timeout_s <= 0:
            raise ValueError(f"render_timeout_s must be positive: {self.render_timeout_s}")
        if self.output_dir is not None and not isinstance(self.output_dir, Path):
            object.__setattr__(self, "output_dir", Path(self.output_dir))
