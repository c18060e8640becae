"""Tests for utilities.layers."""

from __future__ import annotations

from crossweave.utilities.layers import (
    cyclic_layer_mapping,
    direction,
    physical_layer_for,
    strictly_between,
)


class TestPhysicalLayer:
    def test_cyclic(self):
        assert [physical_layer_for(i, 3) for i in range(7)] == [0, 1, 2, 0, 1, 2, 0]

    def test_non_positive_layer_count_is_single_layer(self):
        assert physical_layer_for(5, 0) == 0

    def test_mapping(self):
        assert cyclic_layer_mapping(5, 2) == (0, 1, 0, 1, 0)
        assert cyclic_layer_mapping(0, 2) == ()


class TestDirection:
    def test_signs(self):
        assert direction(1, 4) == 1
        assert direction(4, 1) == -1
        assert direction(2, 2) == 0


class TestStrictlyBetween:
    def test_either_order(self):
        assert list(strictly_between(1, 4)) == [2, 3]
        assert list(strictly_between(4, 1)) == [2, 3]

    def test_adjacent_or_equal(self):
        assert list(strictly_between(2, 3)) == []
        assert list(strictly_between(2, 2)) == []
