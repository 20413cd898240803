"""
Module: text.segmenter

Purpose:
    Split a block of question text that has several sub-items pasted
    inline ("i) ... (4) ii) ... (4)") into one line per item, and pull
    a leading index token and a trailing "(N)" marks value off each line.

Key Functions:
    - segment(): Text -> tuple of Segment(index, content, marks)
    - split_lines(): Insert breaks before mid-string markers

Key Classes:
    - Segment: Immutable (index, content, marks) triple

Precedence rules:
    1. A marker is a single letter, a 1-2 digit number or a 1-4 letter
       roman numeral followed by ")" or wrapped in parentheses, or a 1-2
       digit number followed by "." (case-insensitive). It must have
       whitespace on both sides to count mid-string.
    2. A parenthesised integer such as "(8)" directly followed by another
       marker closes the previous item as its marks value; no break is
       inserted before it.
    3. Every other mid-string marker starts a new line.
    4. Per line, a leading marker becomes the index and a trailing
       whitespace + "(N)" becomes the marks.

Known ambiguities (heuristic by nature, exercised in tests):
    - "version 2. Then" splits before "2.".
    - "compare (a) and (b)" splits before each parenthesised letter.
    - "(5) steps" mid-sentence is read as an index.

Used By:
    - text.blocks: compose_text()
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Tuple

MARKER = r"(?:\(?(?:[a-z]|\d{1,2}|[ivx]{1,4})\)|\d{1,2}\.)"

MID_MARKER_RE = re.compile(rf"(?<=\s)({MARKER})(?=\s)", re.IGNORECASE)
INDEX_RE = re.compile(rf"^({MARKER})\s+", re.IGNORECASE)
MARKS_RE = re.compile(r"\s+\((\d+)\)$")
MARKS_TOKEN_RE = re.compile(r"\(\d+\)")


@dataclass(frozen=True)
class Segment:
    """
    One line of segmented question text.

    Attributes:
        index: Leading index token such as "i)" or "(a)", or "".
        content: Line text without index and marks.
        marks: Digits of a trailing "(N)" marks value, or "".

    Example:
        >>> Segment("i)", "First part", "8").is_plain
        False
    """
    index: str
    content: str
    marks: str = ""

    @property
    def is_plain(self) -> bool:
        """True when the line has neither index nor marks."""
        return not self.index and not self.marks


def _closes_previous_item(text: str, match: re.Match, starts: set) -> bool:
    """True when ``match`` is a "(N)" immediately followed by another marker."""
    if not MARKS_TOKEN_RE.fullmatch(match.group(1)):
        return False
    rest = text[match.end():]
    next_start = match.end() + (len(rest) - len(rest.lstrip()))
    return next_start in starts


def split_lines(text: str) -> List[str]:
    """
    Break ``text`` before each mid-string marker.

    Args:
        text: Normalised single-line text.

    Returns:
        Non-empty, stripped lines in order.

    Example:
        >>> split_lines("i) First part (8) ii) Second part (8)")
        ['i) First part (8)', 'ii) Second part (8)']
    """
    candidates = list(MID_MARKER_RE.finditer(text))
    starts = {m.start() for m in candidates}

    breaks = [
        m.start() for m in candidates
        if not _closes_previous_item(text, m, starts)
    ]

    lines = []
    previous = 0
    for pos in breaks + [len(text)]:
        line = text[previous:pos].strip()
        if line:
            lines.append(line)
        previous = pos
    return lines


def _parse_line(line: str) -> Segment:
    index = ""
    content = line

    index_match = INDEX_RE.match(content)
    if index_match:
        index = index_match.group(1)
        content = content[index_match.end():]

    marks = ""
    marks_match = MARKS_RE.search(content)
    if marks_match:
        marks = marks_match.group(1)
        content = content[:marks_match.start()]

    return Segment(index=index, content=content.strip(), marks=marks)


def segment(text: str) -> Tuple[Segment, ...]:
    """
    Segment normalised text into (index, content, marks) triples.

    Args:
        text: Normalised, glyph-substituted question text.

    Returns:
        Tuple of Segment in reading order; empty for empty text.

    Example:
        >>> [(s.index, s.content, s.marks) for s in segment("i) First part (8) ii) Second part (8)")]
        [('i)', 'First part', '8'), ('ii)', 'Second part', '8')]
    """
    if not text:
        return ()
    return tuple(_parse_line(line) for line in split_lines(text))
