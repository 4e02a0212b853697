"""Deterministic pseudo-random source for measurement outcomes."""

from __future__ import annotations

DEFAULT_SEED = 0x853C49E6748FEA9B

_MASK64 = (1 << 64) - 1
_MAX_U64 = float(_MASK64)


class Xorshift64:
    """Marsaglia xorshift64 generator (shifts 13, 7, 17).

    The whole sequence is determined by the seed, so two generators built
    with the same seed produce identical draws. Zero is the one state the
    recurrence never leaves, so it is rejected as a seed.
    """

    def __init__(self, seed: int = DEFAULT_SEED):
        self._seed = self._check_seed(seed)
        self._state = self._seed

    @staticmethod
    def _check_seed(seed: int) -> int:
        seed = int(seed) & _MASK64
        if seed == 0:
            raise ValueError("xorshift64 seed must be non-zero")
        return seed

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def state(self) -> int:
        return self._state

    def reseed(self, seed: int | None = None):
        """Restarts the sequence from ``seed`` (default: the original seed)."""
        if seed is not None:
            self._seed = self._check_seed(seed)
        self._state = self._seed

    def next_u64(self) -> int:
        x = self._state
        x ^= (x << 13) & _MASK64
        x ^= x >> 7
        x ^= (x << 17) & _MASK64
        self._state = x
        return x

    def random(self) -> float:
        """Uniform float in [0, 1].

        The top value 1.0 is reachable through float rounding of draws near
        2^64 - 1. With r == 1.0, ``StateVector.measure`` picks outcome 1,
        or outcome 0 when the 1 branch holds no amplitude.
        """
        return self.next_u64() / _MAX_U64

    def __repr__(self) -> str:
        return f"Xorshift64(seed={self._seed:#x})"
