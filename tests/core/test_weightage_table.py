"""
Unit Tests for WeightageTable Model

Totals, percentages and the blank-for-zero display contract.
"""

import pytest

from cia_toolkit.core.models.weightage import WeightageCell, WeightageTable

LEVELS = ("L1", "L2", "L3", "L4")
CATEGORIES = ("CO1", "CO2", "CO3", "CO4", "CO5")


def make_table(cells):
    return WeightageTable(levels=LEVELS, categories=CATEGORIES, cells=cells)


class TestWeightageCell:
    """Tests for WeightageCell.add()."""

    def test_add_when_new_number_then_appended(self):
        cell = WeightageCell().add("1", 2).add("3", 2)
        assert cell.questions == ("1", "3")
        assert cell.marks == 4

    def test_add_when_repeated_number_then_listed_once(self):
        cell = WeightageCell().add("8", 16).add("8", 0)
        assert cell.questions == ("8",)
        assert cell.marks == 16

    def test_add_when_called_then_original_unchanged(self):
        cell = WeightageCell()
        cell.add("1", 2)
        assert cell == WeightageCell()

    def test_init_when_negative_marks_then_raises(self):
        with pytest.raises(ValueError, match="cannot be negative"):
            WeightageCell(marks=-2)


class TestWeightageTable:
    """Tests for totals and display accessors."""

    @pytest.fixture
    def table(self):
        return make_table({
            ("L1", "CO1"): WeightageCell(("1", "2"), 4),
            ("L1", "CO2"): WeightageCell(("3",), 2),
            ("L3", "CO1"): WeightageCell(("7",), 16),
            ("L4", "CO2"): WeightageCell(("8",), 0),
        })

    def test_init_when_cell_outside_taxonomy_then_raises(self):
        with pytest.raises(ValueError, match="Cell outside table"):
            make_table({("L9", "CO1"): WeightageCell(("1",), 2)})

    def test_cells_when_built_then_read_only(self, table):
        with pytest.raises(TypeError):
            table.cells[("L2", "CO1")] = WeightageCell()  # type: ignore[index]

    def test_totals_when_computed_then_consistent(self, table):
        assert table.row_total("L1") == 6
        assert table.column_total("CO1") == 20
        assert table.grand_total == 22
        assert sum(table.row_total(lvl) for lvl in LEVELS) == table.grand_total

    def test_cell_when_absent_then_empty(self, table):
        assert table.cell("L2", "CO5") == WeightageCell()

    def test_marks_text_when_zero_then_blank(self, table):
        """A zero-mark cell shows its question number but no marks."""
        assert table.question_text("L4", "CO2") == "8"
        assert table.marks_text("L4", "CO2") == ""

    def test_question_text_when_several_then_comma_joined(self, table):
        assert table.question_text("L1", "CO1") == "1,2"

    def test_row_percentage_when_row_has_marks_then_two_decimals(self, table):
        assert table.row_percentage_text("L3") == "72.73"

    def test_row_percentage_when_row_empty_then_blank(self, table):
        assert table.row_percentage_text("L2") == ""
        assert table.row_total_text("L2") == ""

    def test_column_total_text_when_empty_then_blank(self, table):
        assert table.column_total_text("CO5") == ""

    def test_reference_when_non_empty_table_then_hundred(self, table):
        assert table.grand_total_text() == "22"
        assert table.percentage_reference_text() == "100"

    def test_empty_table_when_rendered_then_all_blank(self):
        table = make_table({})
        assert table.grand_total == 0
        assert table.row_percentage("L1") == 0.0
        assert table.grand_total_text() == ""
        assert table.percentage_reference_text() == ""
