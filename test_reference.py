"""
test_reference.py

Tests for the reference swap implementation.
"""

import pytest

from pairswap.linked_list import build, flatten, node_ids
from pairswap.reference import expected_result, swap_pairs


class TestSwapPairs:
    """Test swap_pairs on concrete lists."""

    def test_empty(self):
        assert swap_pairs(None) is None

    def test_single_returns_same_node(self):
        head = build([1])
        assert swap_pairs(head) is head
        assert flatten(head) == [1]

    def test_two(self):
        assert flatten(swap_pairs(build([1, 2]))) == [2, 1]

    def test_three(self):
        assert flatten(swap_pairs(build([1, 2, 3]))) == [2, 1, 3]

    def test_four(self):
        assert flatten(swap_pairs(build([1, 2, 3, 4]))) == [2, 1, 4, 3]

    def test_swaps_nodes_not_values(self):
        """Node identities move, values stay with their nodes."""
        head = build([1, 2, 3, 4], namespace="r")
        result = swap_pairs(head)
        assert result is head.next
        assert node_ids(result) == ["r-1", "r-0", "r-3", "r-2"]


class TestExpectedResult:
    """Test expected_result."""

    @pytest.mark.parametrize("values,expected", [
        ([], []),
        ([1], [1]),
        ([1, 2], [2, 1]),
        ([1, 2, 3], [2, 1, 3]),
        ([1, 2, 3, 4], [2, 1, 4, 3]),
        ([1, 2, 3, 4, 5], [2, 1, 4, 3, 5]),
        ([9, 9, 8, 8], [9, 9, 8, 8]),
    ])
    def test_known_results(self, values, expected):
        assert expected_result(values) == expected

    def test_swapping_twice_restores(self):
        """Swapping pairs is an involution."""
        values = [3, 1, 4, 1, 5, 9, 2, 6]
        assert expected_result(expected_result(values)) == values
