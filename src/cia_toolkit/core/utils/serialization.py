"""
Serialization Utilities

To/from JSON-ready dict conversion for the models written next to the
rendered artifacts (`paper.json`) and into the registry index.

- Headers round-trip through `serialize_header` and `deserialize_header`
  because the registry index is read back; the rest is written only
- Header keys use the same camelCase names as the submitted payload
- Never store calculated values that follow from the cells
  (row totals, percentages)
"""

from __future__ import annotations

from typing import Any

from ..models.header import Header
from ..models.paper import PaperModel
from ..models.questions import EitherOrGroup, ShortAnswerQuestion
from ..models.weightage import WeightageTable


# ─────────────────────────────────────────────────────────────────────────────
# Header
# ─────────────────────────────────────────────────────────────────────────────

HEADER_FIELDS = (
    ("academicYear", "academic_year"),
    ("ciaType", "assessment_index"),
    ("courseCode", "course_code"),
    ("courseTitle", "course_title"),
    ("programme", "programme"),
    ("semester", "semester"),
    ("date", "date"),
    ("session", "session"),
    ("commonTo", "common_to"),
    ("permittingNotes", "permitting_notes"),
)


def serialize_header(header: Header) -> dict[str, Any]:
    """
    Serialize a Header to payload-style camelCase keys.

    Example:
        >>> serialize_header(header)["courseCode"]
        'CCS336'
    """
    return {key: getattr(header, attr) for key, attr in HEADER_FIELDS}


def deserialize_header(data: dict[str, Any]) -> Header:
    """
    Deserialize a Header; optional fields default to "".

    Raises:
        ValueError: If a required field is missing
    """
    missing = [key for key, attr in HEADER_FIELDS[:8] if key not in data]
    if missing:
        raise ValueError(f"Header missing required fields: {missing}")
    return Header(**{attr: str(data.get(key) or "") for key, attr in HEADER_FIELDS})


# ─────────────────────────────────────────────────────────────────────────────
# Weightage
# ─────────────────────────────────────────────────────────────────────────────

def serialize_weightage(table: WeightageTable) -> dict[str, Any]:
    """Serialize populated cells plus table shape."""
    return {
        "levels": list(table.levels),
        "categories": list(table.categories),
        "cells": [
            {
                "level": level,
                "category": category,
                "questions": list(table.cell(level, category).questions),
                "marks": table.cell(level, category).marks,
            }
            for level in table.levels
            for category in table.categories
            if (level, category) in table.cells
        ],
    }


# ─────────────────────────────────────────────────────────────────────────────
# Paper summary
# ─────────────────────────────────────────────────────────────────────────────

def _question_summary(question: ShortAnswerQuestion) -> dict[str, Any]:
    return {
        "qNo": question.number,
        "co": question.category,
        "btl": question.level,
        "marks": question.marks.value,
        "images": len(question.images),
    }


def _group_summary(group: EitherOrGroup) -> dict[str, Any]:
    summary: dict[str, Any] = {"qNo": group.number}
    for label, alternative in group.alternatives:
        entry = {
            "co": alternative.category,
            "btl": alternative.level,
            "marks": alternative.marks.value,
            "markSource": alternative.marks.source,
        }
        if alternative.is_subdivided:
            entry["subdivisions"] = [
                {"label": sub.label, "marks": sub.marks.value}
                for sub in alternative.subdivisions
            ]
        summary[label] = entry
    return summary


def serialize_paper_summary(paper: PaperModel) -> dict[str, Any]:
    """
    Structural summary of a paper (tags and marks, no question text).

    Note:
        total_marks IS included here for human readers of paper.json; it
        is never read back.
    """
    return {
        "header": serialize_header(paper.header),
        "totalMarks": paper.total_marks,
        "partA": [_question_summary(q) for q in paper.part_a],
        "partB": [_group_summary(g) for g in paper.part_b],
    }
