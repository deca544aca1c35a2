"""Tests for TileSelector."""
from __future__ import annotations

import random
from collections import Counter

from tick_reveal import TileSelector


class TestSelect:
    def test_single_tile_always_zero(self) -> None:
        sel = TileSelector(random.Random(1))
        assert all(sel.select(1, excluding=0) == 0 for _ in range(100))
        assert sel.select(1) == 0

    def test_zero_tiles_returns_zero(self) -> None:
        assert TileSelector(random.Random(1)).select(0) == 0

    def test_never_repeats_previous(self) -> None:
        sel = TileSelector(random.Random(7))
        last = None
        for _ in range(10_000):
            index = sel.select(5, excluding=last)
            assert index != last
            assert 0 <= index < 5
            last = index

    def test_two_tiles_alternate(self) -> None:
        sel = TileSelector(random.Random(3))
        picks = [sel.select(2, excluding=i % 2) for i in range(50)]
        assert picks == [(i + 1) % 2 for i in range(50)]

    def test_no_exclusion_covers_range(self) -> None:
        sel = TileSelector(random.Random(11))
        counts = Counter(sel.select(4) for _ in range(2_000))
        assert set(counts) == {0, 1, 2, 3}

    def test_excluding_out_of_range_ignored(self) -> None:
        sel = TileSelector(random.Random(5))
        assert all(0 <= sel.select(3, excluding=9) < 3 for _ in range(100))

    def test_same_seed_same_picks(self) -> None:
        a = TileSelector(random.Random(42))
        b = TileSelector(random.Random(42))
        assert [a.select(6) for _ in range(30)] == [b.select(6) for _ in range(30)]

    def test_reseed_replays(self) -> None:
        sel = TileSelector()
        sel.seed(99)
        first = [sel.select(8) for _ in range(20)]
        sel.seed(99)
        assert [sel.select(8) for _ in range(20)] == first


class TestSelectBatch:
    def test_complement_used(self) -> None:
        """4 tiles excluding {1, 3}, k=2 -> exactly {0, 2}."""
        sel = TileSelector(random.Random(0))
        for _ in range(20):
            batch = sel.select_batch(4, 2, {1, 3})
            assert sorted(batch) == [0, 2]

    def test_falls_back_to_full_range(self) -> None:
        sel = TileSelector(random.Random(0))
        batch = sel.select_batch(4, 3, {0, 1})
        assert len(batch) == 3
        assert len(set(batch)) == 3
        assert all(0 <= i < 4 for i in batch)

    def test_distinct_and_avoids_excluded(self) -> None:
        sel = TileSelector(random.Random(2))
        for _ in range(200):
            batch = sel.select_batch(10, 3, [0, 1, 2])
            assert len(set(batch)) == 3
            assert not set(batch) & {0, 1, 2}

    def test_k_capped_at_tile_count(self) -> None:
        sel = TileSelector(random.Random(0))
        assert sorted(sel.select_batch(3, 10)) == [0, 1, 2]

    def test_zero_k_empty(self) -> None:
        assert TileSelector(random.Random(0)).select_batch(5, 0) == []


class TestShuffled:
    def test_is_permutation(self) -> None:
        sel = TileSelector(random.Random(4))
        assert sorted(sel.shuffled(9)) == list(range(9))

    def test_empty_and_single(self) -> None:
        sel = TileSelector(random.Random(4))
        assert sel.shuffled(0) == []
        assert sel.shuffled(1) == [0]

    def test_order_varies(self) -> None:
        sel = TileSelector(random.Random(4))
        orders = {tuple(sel.shuffled(6)) for _ in range(20)}
        assert len(orders) > 1
