"""Core quantum state representation using state vectors."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .complex_math import EPSILON
from .errors import (
    CircuitTooLargeError, DuplicateQubitError, InvalidProbabilityError,
    QubitMismatchError, QubitOutOfRangeError, StateDimensionError,
    StateNotNormalizedError,
)
from .gates import X_MATRIX

# 2^30 complex128 amplitudes is 16 GiB.
MAX_QUBITS = 30


class StateVector:
    """Represents an n-qubit quantum state as a complex numpy array.

    Bit ``q`` of a basis index is the value of qubit ``q`` (qubit 0 is the
    least significant bit), so ``|q2 q1 q0>`` reads right to left.

    Gate kernels work in place on numpy views of the amplitude array
    reshaped to ``(2,) * n``; only the amplitudes that differ in the
    targeted bits are combined and no 2^n x 2^n matrix is ever built.
    """

    def __init__(self, num_qubits: int):
        if num_qubits < 1:
            raise ValueError(f"num_qubits must be >= 1, got {num_qubits}")
        if num_qubits > MAX_QUBITS:
            raise CircuitTooLargeError(num_qubits, MAX_QUBITS)
        self._num_qubits = num_qubits
        self._data = np.zeros(2 ** num_qubits, dtype=np.complex128)
        self._data[0] = 1.0 + 0.0j  # |00...0>

    # --- Construction ---

    @classmethod
    def from_amplitudes(cls, amplitudes: Sequence[complex] | np.ndarray,
                        tolerance: float = EPSILON) -> StateVector:
        """Builds a state from raw amplitudes.

        Raises:
            StateDimensionError: length is not a power of two (>= 2).
            StateNotNormalizedError: sum of |a|^2 differs from 1 by more
                than ``tolerance``.
        """
        data = np.array(amplitudes, dtype=np.complex128).ravel()
        length = len(data)
        if length < 2 or length & (length - 1):
            expected = 2 if length < 2 else 1 << length.bit_length()
            raise StateDimensionError(expected, length)
        num_qubits = length.bit_length() - 1
        if num_qubits > MAX_QUBITS:
            raise CircuitTooLargeError(num_qubits, MAX_QUBITS)
        norm = float(np.vdot(data, data).real)
        if abs(norm - 1.0) > tolerance:
            raise StateNotNormalizedError(norm)
        return cls._wrap(num_qubits, data)

    @classmethod
    def uniform(cls, num_qubits: int) -> StateVector:
        """Equal superposition over all basis states."""
        sv = cls(num_qubits)
        sv._data[:] = 1.0 / np.sqrt(sv.dimension)
        return sv

    @classmethod
    def basis(cls, num_qubits: int, index: int) -> StateVector:
        """Computational basis state ``|index>``."""
        sv = cls(num_qubits)
        if index < 0 or index >= sv.dimension:
            raise ValueError(
                f"Basis index {index} out of range [0, {sv.dimension - 1}]")
        sv._data[0] = 0.0
        sv._data[index] = 1.0 + 0.0j
        return sv

    @classmethod
    def from_initial_states(cls, initial_states: Sequence[int]) -> StateVector:
        """Create a StateVector from a list of per-qubit initial states (0 or 1).

        Args:
            initial_states: List of 0s and 1s, one per qubit, qubit 0 first.
                            E.g. [1, 0, 0] creates |001> (index 1).
        """
        index = 0
        for q, bit in enumerate(initial_states):
            if bit:
                index |= 1 << q
        return cls.basis(len(initial_states), index)

    @classmethod
    def _wrap(cls, num_qubits: int, data: np.ndarray) -> StateVector:
        sv = cls.__new__(cls)
        sv._num_qubits = num_qubits
        sv._data = np.ascontiguousarray(data, dtype=np.complex128)
        return sv

    # --- Queries ---

    @property
    def num_qubits(self) -> int:
        return self._num_qubits

    @property
    def dimension(self) -> int:
        return len(self._data)

    @property
    def data(self) -> np.ndarray:
        """Read-only view of the amplitude array."""
        view = self._data.view()
        view.flags.writeable = False
        return view

    def amplitudes(self) -> np.ndarray:
        """Copy of the amplitudes in basis-index order."""
        return self._data.copy()

    def amplitude(self, index: int) -> complex:
        return complex(self._data[index])

    def probability(self, index: int) -> float:
        a = self._data[index]
        return float(a.real * a.real + a.imag * a.imag)

    def probabilities(self) -> np.ndarray:
        """Returns |amplitude|^2 for each basis state."""
        return self._data.real ** 2 + self._data.imag ** 2

    def norm_sqr(self) -> float:
        return float(np.vdot(self._data, self._data).real)

    def is_normalized(self, tolerance: float = EPSILON) -> bool:
        return abs(self.norm_sqr() - 1.0) <= tolerance

    def normalize(self):
        """Rescales the amplitudes to unit norm."""
        norm = self.norm_sqr()
        if norm <= 0.0:
            raise StateNotNormalizedError(norm)
        self._data /= np.sqrt(norm)

    # --- Index helpers ---

    def _check_qubits(self, *qubits: int):
        for q in qubits:
            if q < 0 or q >= self._num_qubits:
                raise QubitOutOfRangeError(q, self._num_qubits)
        if len(set(qubits)) != len(qubits):
            for i, q in enumerate(qubits):
                if q in qubits[:i]:
                    raise DuplicateQubitError(q)

    def _tensor(self) -> np.ndarray:
        # A view: writes through it land in self._data.
        return self._data.reshape((2,) * self._num_qubits)

    def _index(self, fixed: dict[int, int]) -> tuple:
        """Index tuple selecting the sub-array where each qubit in ``fixed``
        takes the given bit value. Qubit q lives on tensor axis n-1-q.

        Length-one slices keep every axis, so indexing always yields a view.
        """
        idx: list = [slice(None)] * self._num_qubits
        for q, bit in fixed.items():
            idx[self._num_qubits - 1 - q] = slice(bit, bit + 1)
        return tuple(idx)

    @staticmethod
    def _apply_pair(a0: np.ndarray, a1: np.ndarray, matrix: np.ndarray):
        m00, m01 = matrix[0, 0], matrix[0, 1]
        m10, m11 = matrix[1, 0], matrix[1, 1]
        if m01 == 0 and m10 == 0:
            a0 *= m00
            a1 *= m11
            return
        new0 = m00 * a0 + m01 * a1
        a1[...] = m10 * a0 + m11 * a1
        a0[...] = new0

    # --- Gate kernels ---

    def apply_single(self, qubit: int, matrix: np.ndarray):
        """Applies a 2x2 unitary to ``qubit`` in place.

        Every pair (i, i | 1<<qubit) with bit ``qubit`` of i clear becomes
        ``matrix @ (amp[i], amp[i | 1<<qubit])``.
        """
        self._check_qubits(qubit)
        _check_shape(matrix, 2)
        psi = self._tensor()
        self._apply_pair(psi[self._index({qubit: 0})],
                         psi[self._index({qubit: 1})], matrix)

    def apply_controlled(self, control: int, target: int, matrix: np.ndarray):
        """Applies a 2x2 unitary to ``target`` where ``control`` is 1.

        Amplitudes whose control bit is 0 are untouched.
        """
        self._check_qubits(control, target)
        _check_shape(matrix, 2)
        psi = self._tensor()
        self._apply_pair(psi[self._index({control: 1, target: 0})],
                         psi[self._index({control: 1, target: 1})], matrix)

    def apply_two(self, q0: int, q1: int, matrix: np.ndarray):
        """Applies a 4x4 unitary to the pair (q0, q1) in place.

        The 4x4 basis order is ``(i, i|mask0, i|mask1, i|mask0|mask1)``
        for every i with both bits clear, i.e. sub-basis position
        ``bit(q0) + 2 * bit(q1)``.
        """
        self._check_qubits(q0, q1)
        _check_shape(matrix, 4)
        psi = self._tensor()
        blocks = [psi[self._index({q0: k & 1, q1: k >> 1})] for k in range(4)]
        updated = np.tensordot(matrix, np.stack(blocks), axes=(1, 0))
        for k, block in enumerate(blocks):
            block[...] = updated[k]

    # --- Measurement ---

    def measure(self, qubit: int, r: float) -> int:
        """Measures ``qubit`` in the computational basis, collapsing the state.

        The outcome is 0 when ``r < p0`` (Born-rule weight of bit ``qubit``
        being 0) and 1 otherwise. The surviving branch is rescaled to unit
        norm and the other branch is zeroed. If the selected branch holds
        no amplitude at all (``r`` at the top of [0, 1], or ``p0`` rounded
        just below 1), the other outcome is taken; any branch with non-zero
        weight, however small, can be observed.

        Args:
            qubit: Qubit to measure.
            r: Uniform random draw in [0, 1].

        Returns:
            The outcome bit.
        """
        self._check_qubits(qubit)
        if not 0.0 <= r <= 1.0:
            raise InvalidProbabilityError(r)
        psi = self._tensor()
        branches = (psi[self._index({qubit: 0})], psi[self._index({qubit: 1})])
        # Both weights are summed from the amplitudes, so an empty branch is exactly 0.
        weights = tuple(float(np.vdot(b, b).real) for b in branches)

        outcome = 0 if r < weights[0] else 1
        if weights[outcome] <= 0.0:
            outcome = 1 - outcome

        branches[1 - outcome][...] = 0.0
        branches[outcome][...] *= 1.0 / np.sqrt(weights[outcome])
        return outcome

    def reset(self, qubit: int, r: float) -> int:
        """Forces ``qubit`` to |0>: measure, then flip if the outcome was 1.

        Returns the measured outcome.
        """
        outcome = self.measure(qubit, r)
        if outcome == 1:
            self.apply_single(qubit, X_MATRIX)
        return outcome

    def sample(self, r: float) -> int:
        """Draws one basis index by inverse CDF without collapsing the state."""
        if not 0.0 <= r <= 1.0:
            raise InvalidProbabilityError(r)
        cdf = np.cumsum(self.probabilities())
        index = int(np.searchsorted(cdf, r, side="right"))
        return min(index, self.dimension - 1)

    # --- Comparison ---

    def inner_product(self, other: StateVector) -> complex:
        """<self|other> = sum conj(a_i) * b_i."""
        if other._num_qubits != self._num_qubits:
            raise QubitMismatchError(self._num_qubits, other._num_qubits)
        return complex(np.vdot(self._data, other._data))

    def fidelity(self, other: StateVector) -> float:
        """|<self|other>|^2 for pure states."""
        overlap = self.inner_product(other)
        return overlap.real ** 2 + overlap.imag ** 2

    def copy(self) -> StateVector:
        """Deep copy of this state vector."""
        return StateVector._wrap(self._num_qubits, self._data.copy())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StateVector):
            return NotImplemented
        if other._num_qubits != self._num_qubits:
            return False
        diff = self._data - other._data
        return bool(np.all(np.abs(diff.real) < EPSILON)
                    and np.all(np.abs(diff.imag) < EPSILON))

    __hash__ = None

    def __repr__(self) -> str:
        return f"StateVector(num_qubits={self._num_qubits})"


def _check_shape(matrix: np.ndarray, size: int):
    if np.shape(matrix) != (size, size):
        raise ValueError(
            f"Expected a {size}x{size} matrix, got shape {np.shape(matrix)}")
