"""Deterministic 32-bit random streams for solver restarts.

Each restart owns its own generators, derived from the restart index. The
generator is Mulberry32 with exact unsigned 32-bit overflow arithmetic, so a
given seed yields the same stream as the browser edition.
"""

from __future__ import annotations

from typing import List, MutableSequence, TypeVar

T = TypeVar("T")

_MASK32 = 0xFFFFFFFF
_GOLDEN = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0


def _imul(a: int, b: int) -> int:
    """Multiply two 32-bit values, keeping the low 32 bits."""
    return (a * b) & _MASK32


class Mulberry32:
    """Seeded pseudo-random generator producing floats in ``[0, 1)``.

    Usage:
        rng = Mulberry32(7)
        values = [rng.random() for _ in range(3)]
    """

    def __init__(self, seed: int) -> None:
        """Initialize the generator.

        Args:
            seed: Integer seed; only its low 32 bits after offsetting matter.
        """
        self.seed = seed
        self._state = (seed + _GOLDEN) & _MASK32

    def next_uint32(self) -> int:
        """Advance the state and return the next unsigned 32-bit value."""
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK32
        self._state = t
        return (t ^ (t >> 14)) & _MASK32

    def random(self) -> float:
        """Return the next float in ``[0, 1)``."""
        return self.next_uint32() / _TWO_POW_32

    def shuffle(self, items: MutableSequence[T]) -> None:
        """Shuffle ``items`` in place (Fisher-Yates, last index first)."""
        for i in range(len(items) - 1, 0, -1):
            j = int(self.random() * (i + 1))
            items[i], items[j] = items[j], items[i]


def shuffled(items: List[T], seed: int) -> List[T]:
    """Return a copy of ``items`` shuffled by a fresh generator seeded with ``seed``."""
    result = list(items)
    Mulberry32(seed).shuffle(result)
    return result


class SeedManager:
    """Hands out the random streams used by one restart.

    A restart uses two independent generators, both seeded from the restart
    index: one breaks ties between equally weighted edges, the other orders
    the nodes left over after edge processing. When fixed groups are present
    the leftover ordering is seeded with ``restart + fixed_shuffle_offset``.

    Usage:
        seeds = SeedManager()
        tiebreak = seeds.tiebreak_rng(3)
        order = seeds.leftover_order(["a", "b", "c"], 3, with_fixed=False)
    """

    def __init__(self, fixed_shuffle_offset: int = 1000) -> None:
        self.fixed_shuffle_offset = fixed_shuffle_offset

    def tiebreak_rng(self, restart: int) -> Mulberry32:
        """Return the edge tie-break generator for ``restart``."""
        return Mulberry32(restart)

    def leftover_seed(self, restart: int, with_fixed: bool) -> int:
        """Return the seed used to order leftover nodes for ``restart``."""
        if with_fixed:
            return restart + self.fixed_shuffle_offset
        return restart

    def leftover_order(self, ids: List[T], restart: int, with_fixed: bool) -> List[T]:
        """Return ``ids`` in the seeded order leftover nodes are visited."""
        return shuffled(ids, self.leftover_seed(restart, with_fixed))
