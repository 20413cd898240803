"""
Module: builder

Purpose:
    Paper building pipeline: turns a submitted payload into a validated
    document model, aggregates the CO/BTL weightage and renders the same
    model to a fixed-layout PDF and an editable DOCX.

Key Functions:
    - build_paper_model(): Payload -> PaperModel
    - compute_weightage(): PaperModel -> WeightageTable
    - build_paper(): Main entry point (validate, render, store)

Key Classes:
    - BuilderConfig: Configuration for building
    - BuildResult: Complete build result

Dependencies:
    - reportlab: PDF rendering
    - python-docx: DOCX rendering
    - PIL: Image probing and conversion
    - portalocker: Registry index locking

Used By:
    - cia_toolkit.cli: Command line interface
"""

from .config import BuilderConfig
from .layout.config import InstitutionConfig, LayoutConfig
from .assembly import build_paper_model
from .weightage import compute_weightage
from .controller import build_paper, BuildResult, BuildError, RenderFailure

__all__ = [
    # Config
    "BuilderConfig",
    "InstitutionConfig",
    "LayoutConfig",
    # Model
    "build_paper_model",
    "compute_weightage",
    # Controller
    "build_paper",
    "BuildResult",
    "BuildError",
    "RenderFailure",
]
