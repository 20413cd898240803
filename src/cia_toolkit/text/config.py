"""
Module: text.config

Purpose:
    Immutable lookup tables for the math notation translator. Both
    renderers (and any future target) share one instance so glyph
    choices cannot drift between outputs.

Key Classes:
    - NotationTables: Greek names, word operators and fraction literals

Used By:
    - text.notation: Glyph substitution
    - builder.config.BuilderConfig: Injected per build
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


def _frozen(mapping: dict) -> Mapping[str, str]:
    return MappingProxyType(dict(mapping))


GREEK_LETTERS = _frozen({
    "alpha": "α", "beta": "β", "gamma": "γ", "delta": "δ", "epsilon": "ε",
    "zeta": "ζ", "eta": "η", "theta": "θ", "iota": "ι", "kappa": "κ",
    "lambda": "λ", "mu": "μ", "nu": "ν", "xi": "ξ", "omicron": "ο",
    "pi": "π", "rho": "ρ", "sigma": "σ", "tau": "τ", "upsilon": "υ",
    "phi": "φ", "chi": "χ", "psi": "ψ", "omega": "ω",
})

WORD_OPERATORS = _frozen({
    "sum": "∑",
    "int": "∫",
})

FRACTIONS = _frozen({
    "1/2": "½",
    "1/4": "¼",
    "3/4": "¾",
})

ROOT_GLYPH = "√"


@dataclass(frozen=True)
class NotationTables:
    """
    Glyph tables for notation translation (immutable).

    Attributes:
        greek: Spelled-out Greek letter name -> glyph (whole word, case-sensitive).
        operators: Word operator -> glyph (whole word).
        fractions: Literal fraction -> single glyph (exact substring).
        root_glyph: Glyph that replaces ``sqrt(``...``)``.
    """

    greek: Mapping[str, str] = field(default_factory=lambda: GREEK_LETTERS)
    operators: Mapping[str, str] = field(default_factory=lambda: WORD_OPERATORS)
    fractions: Mapping[str, str] = field(default_factory=lambda: FRACTIONS)
    root_glyph: str = ROOT_GLYPH

    def __hash__(self) -> int:
        return hash((
            tuple(self.greek.items()),
            tuple(self.operators.items()),
            tuple(self.fractions.items()),
            self.root_glyph,
        ))


DEFAULT_NOTATION = NotationTables()
