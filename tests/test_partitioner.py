"""Tests for splitting permutations into pools."""

from __future__ import annotations

import random

import pytest

from mmpa import InvalidPoolSizeError, partition, pool_count


def test_partition_keeps_order_and_puts_remainder_last() -> None:
    pools = partition([4, 2, 0, 6, 1, 5, 3], 3)
    assert pools == [[4, 2, 0], [6, 1, 5], [3]]


def test_partition_exact_multiple_has_no_short_pool() -> None:
    pools = partition(range(10), 5)
    assert pools == [[0, 1, 2, 3, 4], [5, 6, 7, 8, 9]]


@pytest.mark.parametrize("n,k", [(1, 1), (7, 1), (7, 7), (10, 3), (23, 5), (100, 8)])
def test_every_subject_in_exactly_one_pool(n: int, k: int) -> None:
    order = list(range(n))
    random.Random(n * 31 + k).shuffle(order)

    pools = partition(order, k)

    assert len(pools) == pool_count(n, k)
    assert all(1 <= len(p) <= k for p in pools)
    assert sorted(i for p in pools for i in p) == list(range(n))


@pytest.mark.parametrize("k", [0, -3])
def test_non_positive_pool_size_raises(k: int) -> None:
    with pytest.raises(InvalidPoolSizeError, match="pool size"):
        partition([0, 1, 2], k)
    with pytest.raises(ValueError):
        pool_count(3, k)


def test_pool_count_is_ceiling() -> None:
    assert pool_count(10, 5) == 2
    assert pool_count(11, 5) == 3
    assert pool_count(1, 5) == 1
