"""
Unit Tests for Paper Model Assembly

Payload dict -> PaperModel, including defaults, alternative variants and
image decoding.
"""

import pytest

from cia_toolkit.builder.assembly import build_paper_model
from cia_toolkit.common import PaperPattern
from cia_toolkit.core.models import FlatAlternative, Marks, SubdividedAlternative
from cia_toolkit.core.schemas import ValidationError


class TestBuildPaperModel:
    """Tests for build_paper_model()."""

    # ─────────────────────────────────────────────────────────────────────────
    # Header and numbering
    # ─────────────────────────────────────────────────────────────────────────

    def test_build_when_valid_then_header_populated(self, paper):
        header = paper.header
        assert header.course_code == "CCS336"
        assert header.assessment_numeral == "II"
        assert header.display_date == "18-02-2026"

    def test_build_when_header_padded_then_trimmed(self, payload):
        payload["header"]["courseTitle"] = "  Cloud Services Management  "
        paper = build_paper_model(payload)
        assert paper.header.course_title == "Cloud Services Management"

    def test_build_when_optional_header_fields_missing_then_blank(self, payload):
        paper = build_paper_model(payload)
        assert paper.header.common_to == ""
        assert paper.header.permitting_notes == ""

    def test_build_when_cia_type_omitted_then_blank_index(self, payload):
        del payload["header"]["ciaType"]
        assert build_paper_model(payload).header.assessment_index == ""

    def test_build_when_numbers_omitted_then_sequential_defaults(self, payload):
        for item in payload["partA"] + payload["partB"]:
            item.pop("qNo")
        paper = build_paper_model(payload)
        assert [q.number for q in paper.part_a] == ["1", "2", "3", "4", "5", "6"]
        assert [g.number for g in paper.part_b] == ["7", "8", "9"]

    def test_build_when_numbers_given_as_strings_then_kept(self, payload):
        payload["partB"][0]["qNo"] = "7"
        assert build_paper_model(payload).part_b[0].number == "7"

    # ─────────────────────────────────────────────────────────────────────────
    # Marks and alternatives
    # ─────────────────────────────────────────────────────────────────────────

    def test_build_when_part_a_then_implicit_pattern_marks(self, paper):
        assert all(q.marks == Marks.implicit(2) for q in paper.part_a)

    def test_build_when_no_subdivisions_then_flat_alternative(self, paper):
        alt = paper.part_b[0].a
        assert isinstance(alt, FlatAlternative)
        assert alt.marks == Marks.implicit(16)

    def test_build_when_empty_subdivision_list_then_flat_alternative(self, payload):
        payload["partB"][0]["a"]["subdivisions"] = []
        assert isinstance(build_paper_model(payload).part_b[0].a, FlatAlternative)

    def test_build_when_subdivisions_then_explicit_marks_parsed(self, paper):
        alt = paper.part_b[1].a
        assert isinstance(alt, SubdividedAlternative)
        assert [s.marks for s in alt.subdivisions] == [Marks.explicit(8), Marks.explicit(8)]
        assert alt.marks.value == 16

    def test_build_when_subdivided_text_then_used_as_stem(self, payload):
        payload["partB"][1]["a"]["text"] = "Consider an e-commerce site."
        alt = build_paper_model(payload).part_b[1].a
        assert alt.stem == "Consider an e-commerce site."

    def test_build_when_text_null_then_empty_string(self, payload):
        payload["partB"][0]["b"]["text"] = None
        assert build_paper_model(payload).part_b[0].b.text == ""

    def test_build_when_custom_pattern_then_marks_follow_pattern(self, payload):
        pattern = PaperPattern(part_a_marks=3, part_b_marks=14)
        payload["partB"][1]["a"]["marks"] = 14
        payload["partB"][1]["a"]["subdivisions"][1]["marks"] = 6
        paper = build_paper_model(payload, pattern=pattern)
        assert paper.part_a[0].marks.value == 3
        assert paper.part_b[0].a.marks.value == 14
        assert paper.part_b[1].a.marks == Marks.aggregate(paper.part_b[1].a.subdivisions)

    def test_build_when_subdivisions_fall_short_of_pattern_then_rejected(self, payload):
        del payload["partB"][1]["a"]["marks"]
        payload["partB"][1]["a"]["subdivisions"][1]["marks"] = 4
        with pytest.raises(ValidationError, match="Subdivision total 12"):
            build_paper_model(payload)

    def test_build_when_sample_then_total_sixty(self, paper):
        assert paper.total_marks == 60

    # ─────────────────────────────────────────────────────────────────────────
    # Images and validation
    # ─────────────────────────────────────────────────────────────────────────

    def test_build_when_images_then_decoded_with_dimensions(self, payload, png_data_uri):
        payload["partA"][0]["images"] = [png_data_uri]
        payload["partB"][1]["a"]["subdivisions"][1]["images"] = [png_data_uri]
        paper = build_paper_model(payload)
        image = paper.part_a[0].images[0]
        assert (image.format, image.width, image.height, image.probed) == ("png", 80, 40, True)
        assert len(paper.part_b[1].a.subdivisions[1].images) == 1

    def test_build_when_image_undecodable_then_placeholder(self, payload):
        payload["partA"][0]["images"] = ["data:image/png;base64,????"]
        image = build_paper_model(payload, default_image_size=(40, 30)).part_a[0].images[0]
        assert not image.probed
        assert (image.width, image.height) == (40, 30)

    def test_build_when_payload_invalid_then_validation_error(self, payload):
        payload["partA"][0]["btl"] = "L4"
        with pytest.raises(ValidationError):
            build_paper_model(payload)
