"""
Module: builder.controller

Purpose:
    Orchestrate the complete paper building pipeline.
    Validate -> Assemble -> Aggregate -> Render (PDF + DOCX) -> Store

Key Functions:
    - build_paper(): Main entry point for building a paper

Key Classes:
    - BuildResult: Complete build result
    - BuildError: Exception for build failures
    - RenderFailure: A renderer raised or timed out

Dependencies:
    - builder.assembly: Payload -> PaperModel
    - builder.weightage: PaperModel -> WeightageTable
    - builder.output: Renderers and registry

Used By:
    - cia_toolkit.cli: Command line integration
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

from cia_toolkit.core.models import PaperModel, WeightageTable
from cia_toolkit.core.utils import serialize_paper_summary, serialize_weightage

from .assembly import build_paper_model
from .config import BuilderConfig
from .output.docx_renderer import render_docx
from .output.pdf_renderer import render_pdf
from .output.registry import PaperRegistry, RegistryError, make_paper_id
from .weightage import compute_weightage

logger = logging.getLogger(__name__)

Renderer = Callable[[PaperModel, WeightageTable, BuilderConfig], bytes]


class BuildError(Exception):
    """Error during build pipeline."""
    pass


class RenderFailure(BuildError):
    """A renderer raised or did not finish in time; no artifacts were kept."""

    def __init__(self, message: str, target: str = ""):
        super().__init__(message)
        self.target = target


@dataclass(frozen=True)
class BuildResult:
    """
    Complete build result (immutable).

    Attributes:
        paper_id: Timestamped id (also the artifact directory name)
        paper: Document model
        weightage: Level x category table
        pdf_bytes / docx_bytes: Rendered artifacts
        pdf_path / docx_path: Written files (None when not stored)
        metadata: Build metadata (also written as paper.json)
        warnings: Recoverable problems found while building

    Example:
        >>> result = build_paper(payload, BuilderConfig(output_dir=Path("generated")))
        >>> print(f"Build timestamp: {result.metadata['generated_at']}")
    """
    paper_id: str
    paper: PaperModel
    weightage: WeightageTable
    pdf_bytes: bytes = field(repr=False)
    docx_bytes: bytes = field(repr=False)
    pdf_path: Optional[Path] = None
    docx_path: Optional[Path] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    warnings: Tuple[str, ...] = ()


def build_paper(
    payload: Dict[str, Any],
    config: BuilderConfig = BuilderConfig(),
    *,
    now: Optional[datetime] = None,
) -> BuildResult:
    """
    Build a paper from a submitted payload.

    Args:
        payload: Decoded JSON payload (camelCase keys)
        config: Builder configuration
        now: Clock override for ids and metadata (tests)

    Returns:
        BuildResult with both artifacts (and their paths when
        ``config.output_dir`` is set)

    Raises:
        ValidationError: If the payload is invalid (nothing rendered)
        RenderFailure: If either renderer fails or times out
        BuildError: If artifacts cannot be stored
    """
    start = time.perf_counter()
    now = now or datetime.now()

    paper = build_paper_model(payload, pattern=config.pattern, taxonomy=config.taxonomy)
    header = paper.header
    logger.info(f"Starting build for {header.course_code} CIA {header.assessment_numeral}")

    weightage = compute_weightage(paper, config.taxonomy)
    logger.info(f"Weightage computed: {weightage.grand_total} marks across {len(weightage.cells)} cells")

    warnings = _collect_warnings(paper, weightage)
    for warning in warnings:
        logger.warning(warning)

    pdf_bytes, docx_bytes = _render_all(paper, weightage, config)

    registry = PaperRegistry(config.output_dir) if config.output_dir else None
    paper_id = registry.allocate_id(header, now) if registry else make_paper_id(header, now)
    name = config.base_name or _artifact_name(paper)
    metadata = _build_metadata(paper_id, paper, weightage, config, now, warnings)

    pdf_path = docx_path = None
    if registry:
        try:
            record = registry.save(paper_id, header, name, pdf_bytes, docx_bytes, metadata, now=now)
        except RegistryError as e:
            raise BuildError(f"Failed to store artifacts: {e}") from e
        pdf_path, docx_path = record.pdf_path, record.docx_path

    elapsed = time.perf_counter() - start
    logger.info(f"Paper generation completed in {elapsed:.2f}s")

    return BuildResult(
        paper_id=paper_id,
        paper=paper,
        weightage=weightage,
        pdf_bytes=pdf_bytes,
        docx_bytes=docx_bytes,
        pdf_path=pdf_path,
        docx_path=docx_path,
        metadata=metadata,
        warnings=tuple(warnings),
    )


# ─────────────────────────────────────────────────────────────────────────────
# Rendering
# ─────────────────────────────────────────────────────────────────────────────

RENDERERS: Dict[str, Renderer] = {
    "pdf": render_pdf,
    "docx": render_docx,
}


def _render_all(
    paper: PaperModel,
    weightage: WeightageTable,
    config: BuilderConfig,
) -> Tuple[bytes, bytes]:
    """Run both renderers; both must succeed or RenderFailure is raised."""
    if not config.parallel_render:
        outputs = {target: _run_renderer(target, fn, paper, weightage, config) for target, fn in RENDERERS.items()}
        return outputs["pdf"], outputs["docx"]

    executor = ThreadPoolExecutor(max_workers=len(RENDERERS), thread_name_prefix="render")
    try:
        futures: Dict[str, Future] = {
            target: executor.submit(_run_renderer, target, fn, paper, weightage, config)
            for target, fn in RENDERERS.items()
        }
        done, pending = wait(futures.values(), timeout=config.render_timeout_s, return_when=FIRST_EXCEPTION)
        for future in done:
            # Re-raise the first renderer failure
            future.result()
        if pending:
            late = [t for t, f in futures.items() if f in pending]
            raise RenderFailure(
                f"Rendering timed out after {config.render_timeout_s:.0f}s: {', '.join(late)}",
                target=late[0],
            )
        return futures["pdf"].result(), futures["docx"].result()
    finally:
        executor.shutdown(wait=False, cancel_futures=True)


def _run_renderer(
    target: str,
    fn: Renderer,
    paper: PaperModel,
    weightage: WeightageTable,
    config: BuilderConfig,
) -> bytes:
    try:
        return fn(paper, weightage, config)
    except Exception as e:
        raise RenderFailure(f"{target.upper()} rendering failed: {e}", target=target) from e


# ─────────────────────────────────────────────────────────────────────────────
# Metadata
# ─────────────────────────────────────────────────────────────────────────────

def _artifact_name(paper: PaperModel) -> str:
    header = paper.header
    code = "".join(ch for ch in header.course_code if ch.isalnum()) or "paper"
    return f"{code}_CIA{header.assessment_numeral}"


def _collect_warnings(paper: PaperModel, weightage: WeightageTable) -> list[str]:
    warnings = []
    placeholders = sum(1 for image in paper.iter_images() if not image.probed)
    if placeholders:
        warnings.append(f"{placeholders} image(s) could not be decoded; placeholder size used")
    if weightage.grand_total != paper.total_marks:
        warnings.append(
            f"Weightage total {weightage.grand_total} differs from paper total {paper.total_marks}"
        )
    return warnings


def _build_metadata(
    paper_id: str,
    paper: PaperModel,
    weightage: WeightageTable,
    config: BuilderConfig,
    now: datetime,
    warnings: list[str],
) -> Dict[str, Any]:
    """
    Build metadata dictionary for a generated paper.

    Example:
        >>> metadata = _build_metadata(paper_id, paper, weightage, config, now, [])
        >>> metadata['total_marks']
        60
    """
    from cia_toolkit import __version__

    return {
        "paper_id": paper_id,
        "generated_at": now.isoformat(),
        "builder_version": __version__,
        "institution": config.institution.name,
        "total_marks": paper.total_marks,
        "paper": serialize_paper_summary(paper),
        "weightage": serialize_weightage(weightage),
        "warnings": list(warnings),
    }
