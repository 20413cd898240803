"""
Unit Tests for Rendered-Block Composition

The target-neutral node trees both renderers consume.
"""

from cia_toolkit.core.models import (
    FlatAlternative,
    ImageAsset,
    Marks,
    ShortAnswerQuestion,
    SubdividedAlternative,
    Subdivision,
)
from cia_toolkit.text.blocks import (
    Figure,
    IndexedRow,
    TextLine,
    compose_alternative,
    compose_question,
    compose_text,
)


IMAGE = ImageAsset(b"fake", "png", 10, 10)


def _sub(label, text, marks, images=()):
    return Subdivision(label=label, text=text, marks=Marks.explicit(marks), images=images)


class TestComposeText:
    """Tests for compose_text()."""

    def test_compose_when_plain_text_then_single_text_line(self):
        nodes = compose_text("Define cloud.")
        assert len(nodes) == 1
        assert isinstance(nodes[0], TextLine)
        assert nodes[0].text == "Define cloud."

    def test_compose_when_empty_then_no_nodes(self):
        assert compose_text("") == ()

    def test_compose_when_inline_items_then_indexed_rows(self):
        nodes = compose_text("i) First part (8) ii) Second part (8)")
        assert [(n.index, n.marks, n.marks_label) for n in nodes] == [
            ("i)", "8", "(8)"),
            ("ii)", "8", "(8)"),
        ]
        assert nodes[0].body[0].text == "First part"

    def test_compose_when_notation_then_glyphs_and_styles_applied(self):
        (line,) = compose_text("x^2 + alpha")
        assert [(r.text, r.style) for r in line.runs] == [
            ("x", "plain"),
            ("2", "superscript"),
            (" + α", "plain"),
        ]

    def test_compose_when_raw_text_untidy_then_normalised_first(self):
        (line,) = compose_text("  Define\n entropy.  CO2 L1")
        assert line.text == "Define entropy."


class TestComposeQuestion:
    """Tests for compose_question()."""

    def test_compose_question_when_images_then_figures_follow_text(self):
        question = ShortAnswerQuestion("1", "Label the diagram.", "CO1", "L1", images=(IMAGE, IMAGE))
        nodes = compose_question(question)
        assert isinstance(nodes[0], TextLine)
        assert nodes[1:] == (Figure(IMAGE), Figure(IMAGE))


class TestComposeAlternative:
    """Tests for compose_alternative()."""

    def test_flat_when_composed_then_same_as_question_text(self):
        alt = FlatAlternative("Explain SaaS.", "CO1", "L3")
        nodes = compose_alternative(alt)
        assert [n.text for n in nodes] == ["Explain SaaS."]

    def test_subdivided_when_composed_then_one_row_per_subdivision(self):
        alt = SubdividedAlternative(
            subdivisions=(_sub("i)", "Explain scaling.", 8), _sub("ii)", "Compare models.", 8)),
            category="CO2",
            level="L3",
        )
        nodes = compose_alternative(alt)
        assert all(isinstance(n, IndexedRow) for n in nodes)
        assert [(n.index, n.marks) for n in nodes] == [("i)", "8"), ("ii)", "8")]

    def test_subdivided_when_stem_then_stem_first(self):
        alt = SubdividedAlternative(
            subdivisions=(_sub("a)", "Boot it.", 6),),
            category="CO2",
            level="L3",
            stem="Consider a VM.",
        )
        nodes = compose_alternative(alt)
        assert isinstance(nodes[0], TextLine)
        assert nodes[0].text == "Consider a VM."
        assert nodes[1].index == "a)"

    def test_subdivided_when_images_then_subdivision_figures_nested_and_own_figures_last(self):
        alt = SubdividedAlternative(
            subdivisions=(_sub("i)", "Draw.", 16, images=(IMAGE,)),),
            category="CO2",
            level="L3",
            images=(IMAGE,),
        )
        nodes = compose_alternative(alt)
        row, trailing = nodes
        assert row.body[-1] == Figure(IMAGE)
        assert trailing == Figure(IMAGE)

    def test_subdivided_when_subdivision_has_inline_items_then_nested_rows(self):
        """Subdivision text is segmented again, one level deeper."""
        alt = SubdividedAlternative(
            subdivisions=(_sub("i)", "a) Define (2) b) Explain (6)", 8),),
            category="CO2",
            level="L3",
        )
        (row,) = compose_alternative(alt)
        assert row.marks == "8"
        assert [(n.index, n.marks) for n in row.body] == [("a)", "2"), ("b)", "6")]
