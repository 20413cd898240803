"""
Unit Tests for Marks Model

Mark values, their origin and how subdivision marks are totalled.
"""

import pytest

from cia_toolkit.core.models.marks import Marks
from cia_toolkit.core.models.questions import Subdivision


class TestMarks:
    """Tests for Marks dataclass."""

    # ─────────────────────────────────────────────────────────────────────────
    # Validation
    # ─────────────────────────────────────────────────────────────────────────

    def test_init_when_negative_value_then_raises(self):
        with pytest.raises(ValueError, match="Negative marks"):
            Marks(-1, "explicit")

    def test_init_when_unknown_source_then_raises(self):
        with pytest.raises(ValueError, match="Unknown mark source"):
            Marks(5, "inferred")  # type: ignore[arg-type]

    @pytest.mark.parametrize("value", [8.0, "8", True])
    def test_init_when_not_an_integer_then_type_error(self, value):
        with pytest.raises(TypeError, match="must be an integer"):
            Marks(value, "explicit")  # type: ignore[arg-type]

    def test_init_when_frozen_then_immutable(self):
        m = Marks.explicit(5)
        with pytest.raises(AttributeError):
            m.value = 10  # type: ignore

    # ─────────────────────────────────────────────────────────────────────────
    # Factories
    # ─────────────────────────────────────────────────────────────────────────

    def test_explicit_when_called_then_source_is_explicit(self):
        assert Marks.explicit(3) == Marks(3, "explicit")

    def test_implicit_when_called_then_source_is_implicit(self):
        assert Marks.implicit(16) == Marks(16, "implicit")

    def test_aggregate_when_subdivisions_given_then_sums_values(self):
        parts = [
            Subdivision("i)", "one", Marks.explicit(10)),
            Subdivision("ii)", "two", Marks.explicit(6)),
        ]
        assert Marks.aggregate(parts) == Marks(16, "aggregate")

    def test_aggregate_when_generator_then_consumed_once(self):
        parts = (Subdivision(f"{i})", "x", Marks.explicit(4)) for i in range(4))
        assert Marks.aggregate(parts).value == 16

    def test_aggregate_when_empty_then_zero(self):
        assert Marks.aggregate([]) == Marks(0, "aggregate")

    # ─────────────────────────────────────────────────────────────────────────
    # Operators
    # ─────────────────────────────────────────────────────────────────────────

    def test_add_when_two_marks_then_aggregate_total(self):
        assert Marks.explicit(8) + Marks.implicit(2) == Marks(10, "aggregate")

    def test_add_when_not_marks_then_type_error(self):
        with pytest.raises(TypeError):
            Marks.explicit(8) + 2  # type: ignore[operator]

    def test_str_when_called_then_bare_value(self):
        assert str(Marks.explicit(8)) == "8"
