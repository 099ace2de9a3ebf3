"""
Unit tests for the pattern selector.
"""

import pytest

from tilecollapse.core.pattern_selector import PatternStrategy, select_pattern
from tilecollapse.core.rng import make_rng

ALL = [True, True, True]


class TestWeighted:
    """Tests for weighted selection."""

    def test_single_candidate(self):
        choice = select_pattern(PatternStrategy.WEIGHTED, [0.0, 0.0, 1.0], make_rng(0), [0, 0, 0], ALL)
        assert choice == 2

    def test_all_zero(self):
        choice = select_pattern(PatternStrategy.WEIGHTED, [0.0, 0.0, 0.0], make_rng(0), [0, 0, 0], ALL)
        assert choice == -1


class TestLeastUsed:
    """Tests for least-used selection."""

    def test_picks_least_used(self):
        choice = select_pattern(PatternStrategy.LEAST_USED, [1.0, 1.0, 1.0], make_rng(0), [0, 5, 5], ALL)
        assert choice == 0

    def test_ties_are_random(self):
        picks = {
            select_pattern(PatternStrategy.LEAST_USED, [1.0, 1.0, 1.0], make_rng(seed), [2, 0, 0], ALL)
            for seed in range(30)
        }
        assert picks == {1, 2}

    def test_ignores_zero_weight_tiles(self):
        choice = select_pattern(PatternStrategy.LEAST_USED, [0.0, 1.0, 1.0], make_rng(0), [0, 3, 4], ALL)
        assert choice == 1

    def test_ignores_unavailable_tiles(self):
        availability = [False, True, True]
        choice = select_pattern(
            PatternStrategy.LEAST_USED, [1.0, 1.0, 1.0], make_rng(0), [0, 4, 3], availability
        )
        assert choice == 2

    def test_nothing_qualifies(self):
        choice = select_pattern(
            PatternStrategy.LEAST_USED, [0.0, 1.0, 0.0], make_rng(0), [0, 0, 0], [True, False, True]
        )
        assert choice == -1

    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_deterministic_for_seed(self, seed):
        first = select_pattern(PatternStrategy.LEAST_USED, [1.0] * 3, make_rng(seed), [0, 0, 0], ALL)
        second = select_pattern(PatternStrategy.LEAST_USED, [1.0] * 3, make_rng(seed), [0, 0, 0], ALL)
        assert first == second
