"""
Deterministic RNG: seeded random wrapper.

All randomness in the demo generator passes through a single
DeterministicRNG instance. Identical seed gives an identical call
sequence and identical generated data (ids aside).
"""

from __future__ import annotations

import random
from typing import List, Sequence, TypeVar

T = TypeVar("T")


class DeterministicRNG:
    """Local seeded RNG. No global random state touched."""

    def __init__(self, seed: int) -> None:
        self._rng = random.Random(seed)

    def rand_int(self, low: int, high: int) -> int:
        """Return random integer in [low, high] inclusive."""
        return self._rng.randint(low, high)

    def rand_choice(self, seq: Sequence[T]) -> T:
        """Pick one element from a non-empty sequence."""
        return self._rng.choice(seq)

    def sample(self, seq: Sequence[T], k: int) -> List[T]:
        """k distinct elements, keeping their order in *seq*."""
        k = max(0, min(k, len(seq)))
        picked = set(self._rng.sample(range(len(seq)), k))
        return [item for i, item in enumerate(seq) if i in picked]
