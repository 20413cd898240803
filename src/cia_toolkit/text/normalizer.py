"""
Module: text.normalizer

Purpose:
    Collapse incidental whitespace in question text and strip CO/BTL tags
    that were pasted onto the end of the text body by mistake.

Key Functions:
    - normalize_text(): Pure, idempotent normalisation

Used By:
    - text.blocks: First stage of compose_text()
"""

from __future__ import annotations

import re
from typing import Optional

WHITESPACE_RE = re.compile(r"\s+")
TRAILING_TAGS_RE = re.compile(r"\s+CO\d+\s+L\d+$")


def normalize_text(text: Optional[str]) -> str:
    """
    Normalise raw question text.

    Args:
        text: Raw text as typed or pasted by the author (may be None).

    Returns:
        Trimmed text with every whitespace run (line breaks included)
        collapsed to one space and trailing "CO<n> L<n>" tags removed.

    Example:
        >>> normalize_text("  Define\\n entropy.   CO2  L1 ")
        'Define entropy.'
    """
    if not text:
        return ""

    result = WHITESPACE_RE.sub(" ", text).strip()

    # Repeat so doubled pastes ("... CO1 L1 CO1 L1") normalise in one pass
    while True:
        stripped = TRAILING_TAGS_RE.sub("", result)
        if stripped == result:
            return result
        result = stripped.strip()
