"""Measurement records and sampling histograms."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable


@dataclass
class MeasurementResult:
    """Classical register after one execution; one slot per classical bit.

    Slots never written by a measurement keep their initial value 0.
    """
    bits: list[int] = field(default_factory=list)

    @classmethod
    def zeros(cls, num_clbits: int) -> MeasurementResult:
        return cls([0] * num_clbits)

    def bitstring(self) -> str:
        """Classical bits in index order, bit 0 first."""
        return "".join(str(b) for b in self.bits)

    def as_int(self) -> int:
        """Register value with classical bit 0 as the least significant bit."""
        value = 0
        for i, bit in enumerate(self.bits):
            if bit:
                value |= 1 << i
        return value

    def __len__(self) -> int:
        return len(self.bits)

    def __getitem__(self, index: int) -> int:
        return self.bits[index]

    def __setitem__(self, index: int, value: int):
        self.bits[index] = value


class Counts(dict):
    """Histogram of measured bitstrings to occurrence counts."""

    def __init__(self, data: dict[str, int] | None = None, shots: int | None = None):
        super().__init__(data or {})
        self._shots = shots

    @property
    def shots(self) -> int:
        """Number of shots taken (defaults to the sum of the counts)."""
        if self._shots is not None:
            return self._shots
        return sum(self.values())

    def increment(self, outcome: str, amount: int = 1):
        self[outcome] = self.get(outcome, 0) + amount

    def probability(self, outcome: str) -> float:
        total = self.shots
        if total == 0:
            return 0.0
        return self.get(outcome, 0) / total

    def probabilities(self) -> dict[str, float]:
        return {k: self.probability(k) for k in self}

    def most_likely(self) -> str | None:
        """Most frequent outcome; ties go to the lexicographically smallest."""
        if not self:
            return None
        return min(self, key=lambda k: (-self[k], k))

    def marginal(self, clbits: Iterable[int]) -> Counts:
        """Counts restricted to the given classical bits, in the order given."""
        clbits = list(clbits)
        result = Counts(shots=self._shots)
        for outcome, count in self.items():
            key = "".join(outcome[c] for c in clbits)
            result.increment(key, count)
        return result

    def as_sorted_items(self) -> list[tuple[str, int]]:
        return sorted(self.items())

    def __repr__(self) -> str:
        return f"Counts({dict(self)!r}, shots={self.shots})"


def index_to_bitstring(index: int, width: int) -> str:
    """Renders a basis index with qubit 0 first, matching Counts keys."""
    return "".join(str((index >> q) & 1) for q in range(width))
