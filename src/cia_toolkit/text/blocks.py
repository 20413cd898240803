"""
Module: text.blocks

Purpose:
    Target-neutral rendered-block representation. Question text goes
    through normalisation, glyph substitution and segmentation exactly
    once here; both renderers walk the resulting nodes and only decide
    how each node is drawn.

Key Classes:
    - TextLine: One paragraph of styled runs
    - IndexedRow: index | body | marks row (body may nest further rows)
    - Figure: An image shown below its owning text

Key Functions:
    - compose_text(): Raw text -> nodes
    - compose_question(): ShortAnswerQuestion -> nodes
    - compose_alternative(): Part B alternative -> nodes

Used By:
    - builder.output.pdf_renderer
    - builder.output.docx_renderer
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

from ..core.models.images import ImageAsset
from ..core.models.questions import Alternative, ShortAnswerQuestion
from .config import DEFAULT_NOTATION, NotationTables
from .normalizer import normalize_text
from .notation import InlineRun, split_scripts, substitute_glyphs
from .segmenter import segment


@dataclass(frozen=True)
class TextLine:
    """A paragraph of styled runs."""
    runs: Tuple[InlineRun, ...]

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)


@dataclass(frozen=True)
class Figure:
    """Image centred below the text that owns it."""
    image: ImageAsset


@dataclass(frozen=True)
class IndexedRow:
    """
    Three-column row: index | body | marks.

    Attributes:
        index: Index token ("i)", "(a)") or ""
        body: Nested nodes (lines, figures or further rows)
        marks: Digits of the marks value, or ""
    """
    index: str
    body: Tuple["Node", ...]
    marks: str = ""

    @property
    def marks_label(self) -> str:
        """Marks as printed in the narrow column, e.g. "(8)"."""
        return f"({self.marks})" if self.marks else ""


Node = Union[TextLine, IndexedRow, Figure]


def compose_text(raw: str, tables: NotationTables = DEFAULT_NOTATION) -> Tuple[Node, ...]:
    """
    Turn raw question text into nodes.

    Unmarked text yields a single TextLine; every segment with an index
    or marks becomes an IndexedRow.

    Example:
        >>> nodes = compose_text("i) First part (8) ii) Second part (8)")
        >>> [(n.index, n.marks) for n in nodes]
        [('i)', '8'), ('ii)', '8')]
    """
    text = substitute_glyphs(normalize_text(raw), tables)
    nodes = []
    for seg in segment(text):
        line = TextLine(split_scripts(seg.content))
        if seg.is_plain:
            nodes.append(line)
        else:
            nodes.append(IndexedRow(seg.index, (line,), seg.marks))
    return tuple(nodes)


def _figures(images: Tuple[ImageAsset, ...]) -> Tuple[Figure, ...]:
    return tuple(Figure(image) for image in images)


def compose_question(
    question: ShortAnswerQuestion,
    tables: NotationTables = DEFAULT_NOTATION,
) -> Tuple[Node, ...]:
    """Nodes for a Part A question: its text, then its figures."""
    return compose_text(question.text, tables) + _figures(question.images)


def compose_alternative(
    alternative: Alternative,
    tables: NotationTables = DEFAULT_NOTATION,
) -> Tuple[Node, ...]:
    """
    Nodes for a Part B alternative.

    A flat alternative is composed like a Part A question. A subdivided
    one yields the stem (if any), one IndexedRow per subdivision and then
    the alternative-level figures. Subdivision text is segmented again,
    so inline markers inside a subdivision nest one level deeper.
    """
    if not alternative.is_subdivided:
        return compose_text(alternative.text, tables) + _figures(alternative.images)

    nodes = list(compose_text(alternative.stem, tables))
    for sub in alternative.subdivisions:
        body = compose_text(sub.text, tables) + _figures(sub.images)
        nodes.append(IndexedRow(sub.label, body, str(sub.marks.value)))
    nodes.extend(_figures(alternative.images))
    return tuple(nodes)
