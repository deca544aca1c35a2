"""TileSelector — pseudo-random tile choice for pulses."""
from __future__ import annotations

import random as _random_mod
from typing import Iterable


class TileSelector:
    """Picks tile indices from an injected random source.

    Pulse picks never land on the same tile twice in a row (unless there
    is only one tile). The picks know nothing about the rigged target.
    """

    def __init__(self, rng: _random_mod.Random | None = None) -> None:
        self._rng = rng if rng is not None else _random_mod.Random()

    @property
    def random(self) -> _random_mod.Random:
        return self._rng

    def seed(self, seed: int) -> None:
        """Reseed the random source for deterministic replay."""
        self._rng.seed(seed)

    def select(self, tile_count: int, excluding: int | None = None) -> int:
        """Draw an index in ``[0, tile_count)`` different from ``excluding``."""
        if tile_count <= 1:
            return 0
        while True:
            index = self._rng.randrange(tile_count)
            if excluding is None or index != excluding:
                return index

    def select_batch(
        self, tile_count: int, k: int, exclude: Iterable[int] = ()
    ) -> list[int]:
        """Draw ``k`` distinct indices, avoiding ``exclude`` when possible.

        Falls back to the full range when fewer than ``k`` indices remain
        after exclusion. ``k`` is capped at ``tile_count``.
        """
        k = min(k, tile_count)
        if k <= 0:
            return []
        excluded = set(exclude)
        candidates = [i for i in range(tile_count) if i not in excluded]
        if len(candidates) < k:
            candidates = list(range(tile_count))
        return self._rng.sample(candidates, k)

    def shuffled(self, tile_count: int) -> list[int]:
        """All indices in Fisher-Yates shuffled order."""
        indices = list(range(tile_count))
        for i in range(tile_count - 1, 0, -1):
            j = self._rng.randint(0, i)
            indices[i], indices[j] = indices[j], indices[i]
        return indices
