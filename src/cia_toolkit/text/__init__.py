"""
Text Processing Package

Pure functions that turn author-typed question text into display nodes:

1. normalizer: whitespace and stray CO/BTL tags
2. notation: Greek names, roots, operators, fractions, ^ and _
3. segmenter: inline sub-items into (index, content, marks) lines
4. blocks: target-neutral nodes both renderers consume
"""

from .config import DEFAULT_NOTATION, NotationTables
from .normalizer import normalize_text
from .notation import InlineRun, NotationError, substitute_glyphs, translate
from .segmenter import Segment, segment
from .blocks import Figure, IndexedRow, TextLine, compose_alternative, compose_question, compose_text

__all__ = [
    "DEFAULT_NOTATION",
    "NotationTables",
    "normalize_text",
    "InlineRun",
    "NotationError",
    "substitute_glyphs",
    "translate",
    "Segment",
    "segment",
    "Figure",
    "IndexedRow",
    "TextLine",
    "compose_alternative",
    "compose_question",
    "compose_text",
]
