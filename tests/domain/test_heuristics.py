"""Tests for distance metrics."""

import math

import pytest

from gridrl.domain.heuristics import (
    manhattan_distance, euclidean_distance, chebyshev_distance, get_heuristic
)
from gridrl.domain.errors import ConfigError


class TestDistances:

    def test_manhattan(self):
        assert manhattan_distance((0, 0), (3, 4)) == 7

    def test_euclidean(self):
        assert euclidean_distance((0, 0), (3, 4)) == 5.0
        assert math.isclose(euclidean_distance((1, 1), (2, 2)), math.sqrt(2))

    def test_chebyshev(self):
        assert chebyshev_distance((0, 0), (3, 4)) == 4

    def test_symmetric_and_zero_on_diagonal(self):
        for metric in (manhattan_distance, euclidean_distance, chebyshev_distance):
            assert metric((2, 5), (5, 2)) == metric((5, 2), (2, 5))
            assert metric((3, 3), (3, 3)) == 0


class TestGetHeuristic:

    def test_lookup(self):
        assert get_heuristic("chebyshev") is chebyshev_distance

    def test_unknown_method(self):
        with pytest.raises(ConfigError) as exc_info:
            get_heuristic("octile")
        assert "octile" in str(exc_info.value)
