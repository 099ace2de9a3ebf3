"""
Unit tests for symmetry classes and transform tables.
"""

import pytest

from tilecollapse.core.errors import ConfigurationError
from tilecollapse.core.symmetry import (
    SYMMETRY_CLASSES,
    TRANSFORM_SLOTS,
    get_symmetry,
    transform_table,
)


class TestSymmetryClasses:
    """Tests for the symmetry class table."""

    @pytest.mark.parametrize(
        "symbol,cardinality",
        [("X", 1), ("I", 2), ("\\", 2), ("L", 4), ("T", 4), ("F", 8)],
    )
    def test_cardinality(self, symbol, cardinality):
        assert get_symmetry(symbol).cardinality == cardinality

    def test_unknown_symbol_raises(self):
        with pytest.raises(ConfigurationError, match="Unknown symmetry 'Q'"):
            get_symmetry("Q")

    @pytest.mark.parametrize("symbol", list(SYMMETRY_CLASSES))
    def test_four_rotations_are_identity(self, symbol):
        symmetry = get_symmetry(symbol)
        for variant in range(symmetry.cardinality):
            v = variant
            for _ in range(4):
                v = symmetry.rotate(v)
            assert v == variant

    @pytest.mark.parametrize("symbol", list(SYMMETRY_CLASSES))
    def test_reflection_is_an_involution(self, symbol):
        symmetry = get_symmetry(symbol)
        for variant in range(symmetry.cardinality):
            assert symmetry.reflect(symmetry.reflect(variant)) == variant

    @pytest.mark.parametrize("symbol", list(SYMMETRY_CLASSES))
    def test_transforms_stay_in_range(self, symbol):
        symmetry = get_symmetry(symbol)
        for variant in range(symmetry.cardinality):
            assert all(0 <= v < symmetry.cardinality for v in transform_table(symmetry, variant))


class TestTransformTable:
    """Tests for transform_table."""

    def test_has_eight_slots(self):
        assert len(transform_table(get_symmetry("T"), 0)) == TRANSFORM_SLOTS

    def test_slot_zero_is_identity(self):
        symmetry = get_symmetry("F")
        for variant in range(8):
            assert transform_table(symmetry, variant)[0] == variant

    def test_x_maps_everything_to_itself(self):
        assert transform_table(get_symmetry("X"), 0) == (0,) * 8

    def test_l_tile(self):
        assert transform_table(get_symmetry("L"), 0) == (0, 1, 2, 3, 1, 0, 3, 2)

    def test_t_tile(self):
        assert transform_table(get_symmetry("T"), 0) == (0, 1, 2, 3, 0, 3, 2, 1)

    def test_f_tile(self):
        assert transform_table(get_symmetry("F"), 0) == (0, 1, 2, 3, 4, 5, 6, 7)

    def test_i_tile_second_variant(self):
        assert transform_table(get_symmetry("I"), 1) == (1, 0, 1, 0, 1, 0, 1, 0)
