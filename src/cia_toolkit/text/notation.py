"""
Module: text.notation

Purpose:
    Translate the shorthand authors type for mathematics (Greek letter
    names, sqrt(), sum/int, common fractions, ^ and _) into display
    glyphs and styled runs. The rules are target-neutral; renderers only
    decide how a superscript or subscript run is emitted.

Key Functions:
    - substitute_glyphs(): Rules 1-4, string -> string
    - split_scripts(): Rule 5, string -> InlineRun tuple
    - translate(): substitute_glyphs() followed by split_scripts()

Key Classes:
    - InlineRun: Text run with plain/superscript/subscript style
    - NotationError: Unrecoverable construct (handled locally)

Rule order matters: glyphs are substituted before exponents so that
"alpha^2" becomes "α" followed by a superscript "2". Roots are resolved
before the word rules, and names only match as whole identifiers
(letters, digits and "_" all extend a word), so "my_alpha" and "x_int"
are left alone and a second pass never finds new names.

Known limitation:
    sqrt() does not support nested parentheses; the argument stops at
    the first ")" so "sqrt((x+1)*2)" becomes "√(x+1*2)".
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal, Tuple

from .config import DEFAULT_NOTATION, NotationTables

logger = logging.getLogger(__name__)

RunStyle = Literal["plain", "superscript", "subscript"]

SQRT_OPEN = "sqrt("
SCRIPT_RE = re.compile(r"([\^_])([^\W_]+)")


class NotationError(Exception):
    """Raised for notation that cannot be translated (e.g. unterminated sqrt)."""
    pass


@dataclass(frozen=True)
class InlineRun:
    """
    One styled run of display text.

    Attributes:
        text: Text to display (already glyph-substituted).
        style: "plain", "superscript" or "subscript".
    """
    text: str
    style: RunStyle = "plain"

    def __post_init__(self) -> None:
        if self.style not in ("plain", "superscript", "subscript"):
            raise ValueError(f"Invalid run style: {self.style}")


@lru_cache(maxsize=8)
def _word_pattern(words: Tuple[str, ...]) -> re.Pattern:
    # Longest first so alternation never settles on a prefix
    ordered = sorted(words, key=len, reverse=True)
    alternation = "|".join(re.escape(w) for w in ordered)
    return re.compile(rf"(?<!\w)({alternation})(?!\w)")


def _replace_words(text: str, table) -> str:
    if not table:
        return text
    pattern = _word_pattern(tuple(table.keys()))
    return pattern.sub(lambda m: table[m.group(1)], text)


def _replace_root(text: str, glyph: str, start: int) -> Tuple[str, int]:
    """
    Replace the sqrt( ... ) construct beginning at ``start``.

    Returns the new text and the position just after the glyph, so a
    "sqrt(" inside the argument is resolved on the same pass.

    Raises:
        NotationError: If the construct has no closing parenthesis or
            an empty argument.
    """
    arg_start = start + len(SQRT_OPEN)
    close = text.find(")", arg_start)
    if close == -1:
        raise NotationError(f"Unterminated sqrt( at position {start}")
    if close == arg_start:
        raise NotationError(f"Empty sqrt() at position {start}")
    return text[:start] + glyph + text[arg_start:close] + text[close + 1:], start + len(glyph)


def _replace_roots(text: str, glyph: str) -> str:
    pos = text.find(SQRT_OPEN)
    while pos != -1:
        try:
            text, resume = _replace_root(text, glyph, pos)
        except NotationError as e:
            # Leave the construct as literal text and carry on
            logger.debug(f"Notation kept literal: {e}")
            resume = pos + len(SQRT_OPEN)
        pos = text.find(SQRT_OPEN, resume)
    return text


def substitute_glyphs(text: str, tables: NotationTables = DEFAULT_NOTATION) -> str:
    """
    Apply glyph rules 1-4 (roots, then Greek, operators, fractions).

    Args:
        text: Normalised question text.
        tables: Glyph tables to apply.

    Returns:
        Text with shorthand replaced by glyphs. Idempotent on its output.

    Example:
        >>> substitute_glyphs("alpha + sqrt(x+1) = 1/2")
        'α + √x+1 = ½'
    """
    if not text:
        return ""
    result = _replace_roots(text, tables.root_glyph)
    result = _replace_words(result, tables.greek)
    result = _replace_words(result, tables.operators)
    for literal, glyph in tables.fractions.items():
        result = result.replace(literal, glyph)
    return result


def split_scripts(text: str) -> Tuple[InlineRun, ...]:
    """
    Apply rule 5: split ^token / _token into superscript / subscript runs.

    Example:
        >>> split_scripts("x^2")
        (InlineRun(text='x', style='plain'), InlineRun(text='2', style='superscript'))
    """
    runs = []
    last_end = 0
    for match in SCRIPT_RE.finditer(text):
        if match.start() > last_end:
            runs.append(InlineRun(text[last_end:match.start()]))
        style: RunStyle = "superscript" if match.group(1) == "^" else "subscript"
        runs.append(InlineRun(match.group(2), style))
        last_end = match.end()
    if last_end < len(text):
        runs.append(InlineRun(text[last_end:]))
    return tuple(runs)


def translate(text: str, tables: NotationTables = DEFAULT_NOTATION) -> Tuple[InlineRun, ...]:
    """
    Translate normalised text into styled runs (all five rules, in order).

    Example:
        >>> [r.text for r in translate("alpha^2")]
        ['α', '2']
    """
    return split_scripts(substitute_glyphs(text, tables))


def plain_text(runs: Tuple[InlineRun, ...]) -> str:
    """Concatenate run text, dropping styles (for logging and tests)."""
    return "".join(run.text for run in runs)
