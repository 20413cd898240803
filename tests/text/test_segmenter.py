"""
Unit Tests for Structural Segmentation

Splitting inline sub-items into lines and pulling index/marks off each
line. The heuristic ambiguities are pinned here so behaviour changes are
deliberate.
"""

import pytest

from cia_toolkit.text.segmenter import Segment, segment, split_lines


def _triples(text):
    return [(s.index, s.content, s.marks) for s in segment(text)]


class TestSplitLines:
    """Tests for split_lines()."""

    def test_split_when_two_items_then_break_before_second(self):
        assert split_lines("i) First part (8) ii) Second part (8)") == [
            "i) First part (8)",
            "ii) Second part (8)",
        ]

    def test_split_when_marks_token_followed_by_marker_then_stays_with_previous(self):
        """'(4)' closes item a) instead of starting a new line."""
        assert split_lines("a) Alpha (4) b) Beta (4)") == ["a) Alpha (4)", "b) Beta (4)"]

    def test_split_when_no_markers_then_single_line(self):
        assert split_lines("Explain virtualisation.") == ["Explain virtualisation."]

    def test_split_when_marker_not_surrounded_by_spaces_then_not_split(self):
        assert split_lines("f(x) and g(x)") == ["f(x) and g(x)"]

    def test_split_when_numbered_items_then_split_before_each(self):
        assert split_lines("1. Load 2. Store 3. Halt") == ["1. Load", "2. Store", "3. Halt"]


class TestSegment:
    """Tests for segment()."""

    def test_segment_when_two_marked_items_then_two_triples(self):
        assert _triples("i) First part (8) ii) Second part (8)") == [
            ("i)", "First part", "8"),
            ("ii)", "Second part", "8"),
        ]

    def test_segment_when_plain_text_then_single_plain_segment(self):
        segments = segment("Define cloud computing.")
        assert segments == (Segment("", "Define cloud computing.", ""),)
        assert segments[0].is_plain

    def test_segment_when_empty_then_empty_tuple(self):
        assert segment("") == ()

    def test_segment_when_only_trailing_marks_then_marks_extracted(self):
        assert _triples("Explain the architecture (16)") == [("", "Explain the architecture", "16")]

    def test_segment_when_parenthesised_letters_then_index_kept_verbatim(self):
        assert _triples("(a) Draw it (6) (b) Label it (10)") == [
            ("(a)", "Draw it", "6"),
            ("(b)", "Label it", "10"),
        ]

    def test_segment_when_uppercase_roman_then_recognised(self):
        assert [s.index for s in segment("I) One II) Two")] == ["I)", "II)"]

    def test_segment_when_stem_precedes_items_then_stem_is_plain(self):
        assert _triples("Consider a VM: i) Boot it (4) ii) Stop it (4)") == [
            ("", "Consider a VM:", ""),
            ("i)", "Boot it", "4"),
            ("ii)", "Stop it", "4"),
        ]

    def test_segment_when_marked_line_then_not_plain(self):
        assert not Segment("i)", "text", "").is_plain
        assert not Segment("", "text", "8").is_plain


class TestSegmentAmbiguities:
    """Known misreadings of ordinary prose (heuristic by nature)."""

    @pytest.mark.parametrize("text, expected", [
        (
            "Install version 2. Then reboot",
            [("", "Install version", ""), ("2.", "Then reboot", "")],
        ),
        (
            "compare (a) and (b) results",
            [("", "compare", ""), ("(a)", "and", ""), ("(b)", "results", "")],
        ),
        (
            "Follow the (5) steps",
            [("", "Follow the", ""), ("(5)", "steps", "")],
        ),
    ])
    def test_segment_when_prose_looks_like_markers_then_split(self, text, expected):
        assert _triples(text) == expected
