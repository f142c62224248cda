"""Uniform random reviewer selection.

The randomness source is pluggable so production can use system entropy
while tests pass a seeded (or scripted) ``random.Random``.
"""
import random
from typing import Iterable, Optional


class CandidateSelector:
    """Picks reviewers from an eligible pool without replacement.

    Usage:
        selector = CandidateSelector(seed=42)
        reviewers = selector.select({"u2", "u3", "u4"}, 2)
    """

    def __init__(self, rng: Optional[random.Random] = None, seed: Optional[int] = None):
        self._rng = rng if rng is not None else random.Random(seed)

    def select(self, candidates: Iterable[str], count: int) -> list[str]:
        """Choose up to ``count`` distinct candidates uniformly at random.

        Args:
            candidates: Eligible user ids. Order and duplicates are ignored.
            count: Maximum number of ids to return.

        Returns:
            ``min(count, len(pool))`` distinct ids. An empty pool yields an
            empty list; whether that is fatal is up to the caller.

        Raises:
            ValueError: If count is negative
        """
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")

        # Sorted so that a seeded rng always sees the same population
        pool = sorted(set(candidates))
        if not pool or count == 0:
            return []

        return self._rng.sample(pool, min(count, len(pool)))

    def select_one(self, candidates: Iterable[str]) -> Optional[str]:
        """Choose a single candidate, or None if the pool is empty."""
        chosen = self.select(candidates, 1)
        return chosen[0] if chosen else None
