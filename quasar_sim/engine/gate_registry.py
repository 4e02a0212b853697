"""Extensible gate registry using the Singleton pattern, plus gate lookups."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from .errors import NotSupportedError
from .gates import (
    GateDefinition, GateType, _const,
    I_MATRIX, X_MATRIX, Y_MATRIX, Z_MATRIX, H_MATRIX,
    S_MATRIX, S_DAG_MATRIX, T_MATRIX, T_DAG_MATRIX, SWAP_MATRIX,
    rx_matrix, ry_matrix, rz_matrix, phase_matrix, u_matrix,
)

_THETA = "θ"
_PHI = "φ"
_LAMBDA = "λ"


class GateRegistry:
    """Singleton registry mapping gate names to GateDefinition objects."""

    _instance: GateRegistry | None = None

    def __init__(self):
        self._gates: dict[str, GateDefinition] = {}
        self._aliases: dict[str, str] = {}

    @classmethod
    def instance(cls) -> GateRegistry:
        if cls._instance is None:
            cls._instance = cls()
            cls._instance._register_builtins()
        return cls._instance

    @classmethod
    def reset(cls):
        """Reset the singleton (for testing)."""
        cls._instance = None

    def _register_builtins(self):
        # Single-qubit fixed gates
        fixed = (
            ("I", "Identity", I_MATRIX, "I"),
            ("X", "Pauli-X", X_MATRIX, "X"),
            ("Y", "Pauli-Y", Y_MATRIX, "Y"),
            ("Z", "Pauli-Z", Z_MATRIX, "Z"),
            ("H", "Hadamard", H_MATRIX, "H"),
            ("S", "S Gate", S_MATRIX, "S"),
            ("S_DAG", "S† Gate", S_DAG_MATRIX, "S†"),
            ("T", "T Gate", T_MATRIX, "T"),
            ("T_DAG", "T† Gate", T_DAG_MATRIX, "T†"),
        )
        for name, display, matrix, symbol in fixed:
            self.register(GateDefinition(
                name=name, display_name=display, gate_type=GateType.SINGLE,
                num_qubits=1, num_params=0, param_names=(),
                matrix_func=_const(matrix), symbol=symbol))

        # Single-qubit parameterized gates
        self.register(GateDefinition(
            name="Rx", display_name="Rotation-X", gate_type=GateType.SINGLE,
            num_qubits=1, num_params=1, param_names=(_THETA,),
            matrix_func=rx_matrix, symbol="Rx"))

        self.register(GateDefinition(
            name="Ry", display_name="Rotation-Y", gate_type=GateType.SINGLE,
            num_qubits=1, num_params=1, param_names=(_THETA,),
            matrix_func=ry_matrix, symbol="Ry"))

        self.register(GateDefinition(
            name="Rz", display_name="Rotation-Z", gate_type=GateType.SINGLE,
            num_qubits=1, num_params=1, param_names=(_THETA,),
            matrix_func=rz_matrix, symbol="Rz"))

        self.register(GateDefinition(
            name="P", display_name="Phase Gate", gate_type=GateType.SINGLE,
            num_qubits=1, num_params=1, param_names=(_THETA,),
            matrix_func=phase_matrix, symbol="P"))

        self.register(GateDefinition(
            name="U", display_name="Universal U", gate_type=GateType.SINGLE,
            num_qubits=1, num_params=3, param_names=(_THETA, _PHI, _LAMBDA),
            matrix_func=u_matrix, symbol="U"))

        # Controlled gates: matrix_func yields the 2x2 matrix on the target
        controlled = (
            ("CX", "Controlled-X", X_MATRIX, "CX"),
            ("CY", "Controlled-Y", Y_MATRIX, "CY"),
            ("CZ", "Controlled-Z", Z_MATRIX, "CZ"),
            ("CH", "Controlled-H", H_MATRIX, "CH"),
        )
        for name, display, matrix, symbol in controlled:
            self.register(GateDefinition(
                name=name, display_name=display, gate_type=GateType.CONTROLLED,
                num_qubits=2, num_params=0, param_names=(),
                matrix_func=_const(matrix), symbol=symbol,
                num_controls=1, num_targets=1))

        self.register(GateDefinition(
            name="CP", display_name="Controlled-Phase", gate_type=GateType.CONTROLLED,
            num_qubits=2, num_params=1, param_names=(_THETA,),
            matrix_func=phase_matrix, symbol="CP",
            num_controls=1, num_targets=1))

        self.register(GateDefinition(
            name="CU", display_name="Controlled-U", gate_type=GateType.CONTROLLED,
            num_qubits=2, num_params=3, param_names=(_THETA, _PHI, _LAMBDA),
            matrix_func=None, symbol="CU",
            num_controls=1, num_targets=1))

        # Two-qubit gates
        self.register(GateDefinition(
            name="SWAP", display_name="SWAP", gate_type=GateType.MULTI,
            num_qubits=2, num_params=0, param_names=(),
            matrix_func=_const(SWAP_MATRIX), symbol="SW",
            num_controls=0, num_targets=2))

        self.register(GateDefinition(
            name="iSWAP", display_name="iSWAP", gate_type=GateType.MULTI,
            num_qubits=2, num_params=0, param_names=(),
            matrix_func=None, symbol="iSW",
            num_controls=0, num_targets=2))

        self.register(GateDefinition(
            name="SQRT_SWAP", display_name="√SWAP", gate_type=GateType.MULTI,
            num_qubits=2, num_params=0, param_names=(),
            matrix_func=None, symbol="√SW",
            num_controls=0, num_targets=2))

        # Three-qubit gates (applied through decompositions)
        self.register(GateDefinition(
            name="CCX", display_name="Toffoli (CCX)", gate_type=GateType.CONTROLLED,
            num_qubits=3, num_params=0, param_names=(),
            matrix_func=None, symbol="CCX",
            num_controls=2, num_targets=1))

        self.register(GateDefinition(
            name="CSWAP", display_name="Fredkin (CSWAP)", gate_type=GateType.CONTROLLED,
            num_qubits=3, num_params=0, param_names=(),
            matrix_func=None, symbol="CSW",
            num_controls=1, num_targets=2))

        # Non-unitary operations
        self.register(GateDefinition(
            name="Measure", display_name="Measurement", gate_type=GateType.MEASUREMENT,
            num_qubits=1, num_params=0, param_names=(),
            matrix_func=None, symbol="M"))

        self.register(GateDefinition(
            name="Reset", display_name="Reset", gate_type=GateType.RESET,
            num_qubits=1, num_params=0, param_names=(),
            matrix_func=None, symbol="|0⟩"))

        # Barrier spans an arbitrary set of qubits
        self.register(GateDefinition(
            name="Barrier", display_name="Barrier", gate_type=GateType.BARRIER,
            num_qubits=0, num_params=0, param_names=(),
            matrix_func=None, symbol="||", num_targets=0))

        for alias, name in (("CNOT", "CX"), ("Toffoli", "CCX"),
                            ("Fredkin", "CSWAP"), ("Phase", "P"),
                            ("U3", "U"), ("SDG", "S_DAG"), ("TDG", "T_DAG")):
            self.register_alias(alias, name)

    def register(self, gate_def: GateDefinition):
        self._gates[gate_def.name] = gate_def

    def register_alias(self, alias: str, name: str):
        if name not in self._gates:
            raise KeyError(f"Gate '{name}' not found in registry")
        self._aliases[alias] = name

    def canonical_name(self, name: str) -> str:
        """Resolve an alias (e.g. ``CNOT``) to its registered name."""
        name = self._aliases.get(name, name)
        if name not in self._gates:
            raise KeyError(f"Gate '{name}' not found in registry")
        return name

    def get(self, name: str) -> GateDefinition:
        return self._gates[self.canonical_name(name)]

    def all_gates(self) -> list[GateDefinition]:
        return list(self._gates.values())

    def single_qubit_gates(self) -> list[GateDefinition]:
        return [g for g in self._gates.values()
                if g.gate_type == GateType.SINGLE]

    def multi_qubit_gates(self) -> list[GateDefinition]:
        return [g for g in self._gates.values()
                if g.gate_type in (GateType.CONTROLLED, GateType.MULTI)]

    def parameterized_gates(self) -> list[GateDefinition]:
        return [g for g in self._gates.values() if g.num_params > 0]

    def gate_names(self) -> list[str]:
        return list(self._gates.keys())


@dataclass(frozen=True)
class Gate:
    """A gate identity: a catalog name plus its numeric parameters."""
    name: str
    params: tuple[float, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "name",
                           GateRegistry.instance().canonical_name(self.name))
        object.__setattr__(self, "params",
                           tuple(float(p) for p in self.params))

    @property
    def definition(self) -> GateDefinition:
        return GateRegistry.instance().get(self.name)

    def matrix(self) -> np.ndarray | None:
        return matrix_for(self)

    def __str__(self) -> str:
        if not self.params:
            return self.name
        return f"{self.name}({', '.join(angle_to_str(p) for p in self.params)})"


def matrix_for(gate: Gate) -> np.ndarray | None:
    """Returns the 2x2 matrix of a single-qubit gate, or None.

    None is returned for multi-qubit and non-unitary gates, and for a
    single-qubit gate carrying the wrong number of parameters.
    """
    gate_def = gate.definition
    if gate_def.gate_type != GateType.SINGLE:
        return None
    if len(gate.params) != gate_def.num_params:
        return None
    return gate_def.matrix_func(*gate.params)


def arity(name: str) -> int:
    return GateRegistry.instance().get(name).num_qubits


def is_controlled(name: str) -> bool:
    return GateRegistry.instance().get(name).is_controlled


def is_unitary(name: str) -> bool:
    return GateRegistry.instance().get(name).is_unitary


_SELF_INVERSE = {"I", "X", "Y", "Z", "H", "CX", "CY", "CZ", "CH",
                 "SWAP", "CCX", "CSWAP", "Barrier"}
_DAGGER_PAIRS = {"S": "S_DAG", "S_DAG": "S", "T": "T_DAG", "T_DAG": "T"}
_ANGLE_GATES = {"Rx", "Ry", "Rz", "P", "CP"}


def adjoint(gate: Gate) -> Gate:
    """Returns the inverse gate. Raises NotSupportedError where none exists."""
    name = gate.name
    if name in _SELF_INVERSE:
        return gate
    if name in _DAGGER_PAIRS:
        return Gate(_DAGGER_PAIRS[name])
    if name in _ANGLE_GATES:
        return Gate(name, tuple(-p for p in gate.params))
    if name in ("U", "CU") and len(gate.params) == 3:
        theta, phi, lam = gate.params
        return Gate(name, (-theta, -lam, -phi))
    if name == "iSWAP" or name == "SQRT_SWAP":
        raise NotSupportedError(f"inverse of {name}")
    raise NotSupportedError(f"inverse of non-unitary operation {name}")


def angle_to_str(theta: float) -> str:
    """Renders common multiples of pi compactly, e.g. ``pi/2``."""
    for denom in (1, 2, 3, 4, 8):
        ratio = theta * denom / math.pi
        if abs(ratio - round(ratio)) < 1e-9 and round(ratio) != 0:
            num = int(round(ratio))
            head = "pi" if num == 1 else "-pi" if num == -1 else f"{num}pi"
            return head if denom == 1 else f"{head}/{denom}"
    return f"{theta:.4g}"
