"""
Module: header

Purpose:
    Header dataclass - paper metadata shown at the top of both outputs,
    with the display-only fields derived from it (roman assessment
    index, even/odd semester, day-first date).

Key Classes:
    - Header: Immutable header metadata

Key Functions:
    - assessment_numeral(): "1".."3" -> "I".."III", others unchanged
    - classify_semester(): "Even Semester" / "Odd Semester"
    - reverse_iso_date(): "2026-02-18" -> "18-02-2026"

Used By:
    - builder.assembly: Builds Header from the payload
    - builder.layout.sections: Header lines for both renderers
"""

from __future__ import annotations

import re
from dataclasses import dataclass

ROMAN_NUMERALS = {"1": "I", "2": "II", "3": "III"}

EVEN_SEMESTER_WORDS = ("second", "fourth", "sixth", "eighth")
EVEN_WORDS_RE = re.compile(r"\b(?:" + "|".join(EVEN_SEMESTER_WORDS) + r")\b", re.IGNORECASE)
NUMBER_RE = re.compile(r"(\d+)(?:st|nd|rd|th)?\b", re.IGNORECASE)

EVEN_SEMESTER = "Even Semester"
ODD_SEMESTER = "Odd Semester"


def assessment_numeral(index: str) -> str:
    """Map assessment index 1-3 to a roman numeral; pass anything else through."""
    return ROMAN_NUMERALS.get(index.strip(), index)


def classify_semester(semester: str) -> str:
    """
    Classify free-text semester labels as even or odd.

    A label is even when it names an even ordinal ("Fourth") or its last
    number is even ("Semester 6", "4th Semester"); everything else is odd.

    Example:
        >>> classify_semester("Fourth")
        'Even Semester'
        >>> classify_semester("Third")
        'Odd Semester'
    """
    if EVEN_WORDS_RE.search(semester):
        return EVEN_SEMESTER
    numbers = NUMBER_RE.findall(semester)
    if numbers and int(numbers[-1]) % 2 == 0:
        return EVEN_SEMESTER
    return ODD_SEMESTER


def reverse_iso_date(value: str) -> str:
    """Turn YYYY-MM-DD into DD-MM-YYYY; other shapes pass through unchanged."""
    parts = value.split("-")
    if len(parts) == 3:
        return "-".join(reversed(parts))
    return value


@dataclass(frozen=True)
class Header:
    """
    Paper header metadata (immutable once submitted).

    Attributes:
        academic_year: e.g. "2025 – 26"
        assessment_index: "1", "2" or "3" (other values shown verbatim)
        course_code: e.g. "CCS336"
        course_title: e.g. "Cloud Services Management"
        programme: e.g. "B.E. Computer Science and Engineering"
        semester: Free text, e.g. "Fourth"
        date: ISO date "YYYY-MM-DD"
        session: e.g. "FN"
        common_to: Optional "Common To" line
        permitting_notes: Optional note printed in parentheses
    """
    academic_year: str
    assessment_index: str
    course_code: str
    course_title: str
    programme: str
    semester: str
    date: str
    session: str
    common_to: str = ""
    permitting_notes: str = ""

    @property
    def assessment_numeral(self) -> str:
        return assessment_numeral(self.assessment_index)

    @property
    def semester_type(self) -> str:
        return classify_semester(self.semester)

    @property
    def display_date(self) -> str:
        return reverse_iso_date(self.date)

    @property
    def semester_label(self) -> str:
        """Semester text with " Semester" appended unless already present."""
        if "semester" in self.semester.lower():
            return self.semester
        return f"{self.semester} Semester"

    @property
    def course_line(self) -> str:
        return f"{self.course_code} – {self.course_title}"
