"""Quantum gate matrix definitions and GateDefinition dataclass."""

from __future__ import annotations

import numpy as np
from dataclasses import dataclass
from typing import Callable
from enum import Enum


class GateType(Enum):
    SINGLE = "single"
    CONTROLLED = "controlled"
    MULTI = "multi"
    MEASUREMENT = "measurement"
    RESET = "reset"
    BARRIER = "barrier"


@dataclass(frozen=True)
class GateDefinition:
    """Immutable definition of a quantum gate.

    ``matrix_func`` depends on the gate type: the 2x2 unitary for SINGLE
    gates, the 2x2 matrix applied to the target for CONTROLLED gates, the
    4x4 matrix for two-qubit MULTI gates. It is ``None`` for gates that
    have no direct matrix (decomposed, unsupported or non-unitary).
    """
    name: str
    display_name: str
    gate_type: GateType
    num_qubits: int
    num_params: int
    param_names: tuple[str, ...]
    matrix_func: Callable[..., np.ndarray] | None
    symbol: str
    num_controls: int = 0
    num_targets: int = 1

    @property
    def is_controlled(self) -> bool:
        return self.num_controls > 0

    @property
    def is_unitary(self) -> bool:
        return self.gate_type not in (
            GateType.MEASUREMENT, GateType.RESET, GateType.BARRIER)


# --- Fixed single-qubit gate matrices ---

I_MATRIX = np.eye(2, dtype=np.complex128)

X_MATRIX = np.array([[0, 1],
                      [1, 0]], dtype=np.complex128)

Y_MATRIX = np.array([[0, -1j],
                      [1j, 0]], dtype=np.complex128)

Z_MATRIX = np.array([[1, 0],
                      [0, -1]], dtype=np.complex128)

H_MATRIX = np.array([[1, 1],
                      [1, -1]], dtype=np.complex128) / np.sqrt(2)

S_MATRIX = np.array([[1, 0],
                      [0, 1j]], dtype=np.complex128)

S_DAG_MATRIX = np.array([[1, 0],
                          [0, -1j]], dtype=np.complex128)

T_MATRIX = np.array([[1, 0],
                      [0, np.exp(1j * np.pi / 4)]], dtype=np.complex128)

T_DAG_MATRIX = np.array([[1, 0],
                          [0, np.exp(-1j * np.pi / 4)]], dtype=np.complex128)

for _m in (I_MATRIX, X_MATRIX, Y_MATRIX, Z_MATRIX, H_MATRIX,
           S_MATRIX, S_DAG_MATRIX, T_MATRIX, T_DAG_MATRIX):
    _m.setflags(write=False)


# --- Parameterized single-qubit gate functions ---

def rx_matrix(theta: float) -> np.ndarray:
    c, s = np.cos(theta / 2), np.sin(theta / 2)
    return np.array([[c, -1j * s],
                      [-1j * s, c]], dtype=np.complex128)


def ry_matrix(theta: float) -> np.ndarray:
    c, s = np.cos(theta / 2), np.sin(theta / 2)
    return np.array([[c, -s],
                      [s, c]], dtype=np.complex128)


def rz_matrix(theta: float) -> np.ndarray:
    return np.array([[np.exp(-1j * theta / 2), 0],
                      [0, np.exp(1j * theta / 2)]], dtype=np.complex128)


def phase_matrix(theta: float) -> np.ndarray:
    return np.array([[1, 0],
                      [0, np.exp(1j * theta)]], dtype=np.complex128)


def u_matrix(theta: float, phi: float, lam: float) -> np.ndarray:
    """General single-qubit unitary U(theta, phi, lambda)."""
    c, s = np.cos(theta / 2), np.sin(theta / 2)
    return np.array([
        [c, -np.exp(1j * lam) * s],
        [np.exp(1j * phi) * s, np.exp(1j * (phi + lam)) * c]
    ], dtype=np.complex128)


# --- Fixed two-qubit gate matrices ---

# Basis order of the 4x4 sub-space is (|00>, q0=1, q1=1, both), see
# StateVector.apply_two. SWAP is symmetric under that relabelling.
SWAP_MATRIX = np.array([
    [1, 0, 0, 0],
    [0, 0, 1, 0],
    [0, 1, 0, 0],
    [0, 0, 0, 1]], dtype=np.complex128)
SWAP_MATRIX.setflags(write=False)


# --- Lambda wrappers for fixed matrices ---

def _const(matrix: np.ndarray) -> Callable[[], np.ndarray]:
    """Returns a no-arg callable that returns the given matrix."""
    def _fn() -> np.ndarray:
        return matrix
    return _fn
