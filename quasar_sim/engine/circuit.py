"""Quantum circuit data model and fluent builder."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Sequence

from .errors import (
    ClassicalBitOutOfRangeError, CircuitTooLargeError, DuplicateQubitError,
    InvalidGateParamsError, QubitMismatchError, QubitOutOfRangeError,
)
from .gate_registry import Gate, adjoint
from .gates import GateType
from .state_vector import MAX_QUBITS

CIRCUIT_FORMAT_VERSION = "1.0"


@dataclass(frozen=True)
class Instruction:
    """A gate placed on specific qubits.

    For controlled gates the controls come first and the target last.
    ``clbits`` is only populated for measurements.
    """
    gate: Gate
    qubits: tuple[int, ...]
    clbits: tuple[int, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "qubits", tuple(int(q) for q in self.qubits))
        object.__setattr__(self, "clbits", tuple(int(c) for c in self.clbits))

    @property
    def name(self) -> str:
        return self.gate.name

    def to_dict(self) -> dict:
        d = {
            "name": self.gate.name,
            "qubits": list(self.qubits),
        }
        if self.gate.params:
            d["params"] = list(self.gate.params)
        if self.clbits:
            d["clbits"] = list(self.clbits)
        return d

    @classmethod
    def from_dict(cls, data: dict) -> Instruction:
        return cls(
            gate=Gate(data["name"], tuple(data.get("params", ()))),
            qubits=tuple(data["qubits"]),
            clbits=tuple(data.get("clbits", ())),
        )

    def __str__(self) -> str:
        text = f"{self.gate} q{list(self.qubits)}"
        if self.clbits:
            text += f" -> c{list(self.clbits)}"
        return text


class QuantumCircuit:
    """An ordered list of instructions over ``num_qubits`` qubits.

    Builder methods validate their arguments and return ``self`` so calls
    can be chained::

        bell = QuantumCircuit(2).h(0).cx(0, 1).measure_all()
    """

    def __init__(self, num_qubits: int, num_clbits: int = 0,
                 name: str | None = None):
        if num_qubits < 1:
            raise ValueError(f"num_qubits must be >= 1, got {num_qubits}")
        if num_qubits > MAX_QUBITS:
            raise CircuitTooLargeError(num_qubits, MAX_QUBITS)
        if num_clbits < 0:
            raise ValueError(f"num_clbits must be >= 0, got {num_clbits}")
        self.num_qubits = num_qubits
        self.num_clbits = num_clbits
        self.name = name
        self.instructions: list[Instruction] = []

    # --- Core append path ---

    def append(self, instruction: Instruction) -> QuantumCircuit:
        """Validates and appends a prepared instruction."""
        self.validate_instruction(instruction)
        self.instructions.append(instruction)
        return self

    def add_gate(self, name: str, qubits: Sequence[int],
                 params: Sequence[float] = (),
                 clbits: Sequence[int] = ()) -> QuantumCircuit:
        return self.append(Instruction(Gate(name, tuple(params)),
                                       tuple(qubits), tuple(clbits)))

    def validate_instruction(self, instruction: Instruction):
        """Raises if the instruction does not fit this circuit."""
        gate_def = instruction.gate.definition
        for q in instruction.qubits:
            if q < 0 or q >= self.num_qubits:
                raise QubitOutOfRangeError(q, self.num_qubits)
        seen: set[int] = set()
        for q in instruction.qubits:
            if q in seen:
                raise DuplicateQubitError(q)
            seen.add(q)
        for c in instruction.clbits:
            if c < 0 or c >= self.num_clbits:
                raise ClassicalBitOutOfRangeError(c, self.num_clbits)
        if gate_def.num_qubits and len(instruction.qubits) != gate_def.num_qubits:
            raise InvalidGateParamsError(
                gate_def.name,
                f"expected {gate_def.num_qubits} qubit(s), "
                f"got {len(instruction.qubits)}")
        if len(instruction.gate.params) != gate_def.num_params:
            raise InvalidGateParamsError(
                gate_def.name,
                f"expected {gate_def.num_params} parameter(s), "
                f"got {len(instruction.gate.params)}")
        if instruction.clbits and gate_def.gate_type != GateType.MEASUREMENT:
            raise InvalidGateParamsError(
                gate_def.name, "only measurements write classical bits")

    # --- Single-qubit gates ---

    def i(self, q: int) -> QuantumCircuit:
        return self.add_gate("I", [q])

    def x(self, q: int) -> QuantumCircuit:
        return self.add_gate("X", [q])

    def y(self, q: int) -> QuantumCircuit:
        return self.add_gate("Y", [q])

    def z(self, q: int) -> QuantumCircuit:
        return self.add_gate("Z", [q])

    def h(self, q: int) -> QuantumCircuit:
        return self.add_gate("H", [q])

    def s(self, q: int) -> QuantumCircuit:
        return self.add_gate("S", [q])

    def sdg(self, q: int) -> QuantumCircuit:
        return self.add_gate("S_DAG", [q])

    def t(self, q: int) -> QuantumCircuit:
        return self.add_gate("T", [q])

    def tdg(self, q: int) -> QuantumCircuit:
        return self.add_gate("T_DAG", [q])

    def rx(self, q: int, theta: float) -> QuantumCircuit:
        return self.add_gate("Rx", [q], [theta])

    def ry(self, q: int, theta: float) -> QuantumCircuit:
        return self.add_gate("Ry", [q], [theta])

    def rz(self, q: int, theta: float) -> QuantumCircuit:
        return self.add_gate("Rz", [q], [theta])

    def p(self, q: int, theta: float) -> QuantumCircuit:
        return self.add_gate("P", [q], [theta])

    def u(self, q: int, theta: float, phi: float, lam: float) -> QuantumCircuit:
        return self.add_gate("U", [q], [theta, phi, lam])

    # --- Two- and three-qubit gates ---

    def cx(self, control: int, target: int) -> QuantumCircuit:
        return self.add_gate("CX", [control, target])

    def cy(self, control: int, target: int) -> QuantumCircuit:
        return self.add_gate("CY", [control, target])

    def cz(self, control: int, target: int) -> QuantumCircuit:
        return self.add_gate("CZ", [control, target])

    def ch(self, control: int, target: int) -> QuantumCircuit:
        return self.add_gate("CH", [control, target])

    def cp(self, control: int, target: int, theta: float) -> QuantumCircuit:
        return self.add_gate("CP", [control, target], [theta])

    def cu(self, control: int, target: int,
           theta: float, phi: float, lam: float) -> QuantumCircuit:
        return self.add_gate("CU", [control, target], [theta, phi, lam])

    def swap(self, q0: int, q1: int) -> QuantumCircuit:
        return self.add_gate("SWAP", [q0, q1])

    def iswap(self, q0: int, q1: int) -> QuantumCircuit:
        return self.add_gate("iSWAP", [q0, q1])

    def sqrt_swap(self, q0: int, q1: int) -> QuantumCircuit:
        return self.add_gate("SQRT_SWAP", [q0, q1])

    def ccx(self, c1: int, c2: int, target: int) -> QuantumCircuit:
        return self.add_gate("CCX", [c1, c2, target])

    def cswap(self, control: int, t1: int, t2: int) -> QuantumCircuit:
        return self.add_gate("CSWAP", [control, t1, t2])

    # --- Non-unitary operations ---

    def measure(self, q: int, c: int) -> QuantumCircuit:
        return self.add_gate("Measure", [q], clbits=[c])

    def measure_all(self) -> QuantumCircuit:
        """Measures qubit q into classical bit q, adding bits as needed."""
        self.num_clbits = max(self.num_clbits, self.num_qubits)
        for q in range(self.num_qubits):
            self.measure(q, q)
        return self

    def reset(self, q: int) -> QuantumCircuit:
        return self.add_gate("Reset", [q])

    def barrier(self, *qubits: int) -> QuantumCircuit:
        """Adds a barrier; with no arguments it spans every qubit."""
        if not qubits:
            qubits = tuple(range(self.num_qubits))
        return self.add_gate("Barrier", qubits)

    # --- Whole-circuit operations ---

    def compose(self, other: QuantumCircuit) -> QuantumCircuit:
        """Appends ``other``'s instructions in place."""
        if other.num_qubits > self.num_qubits:
            raise QubitMismatchError(self.num_qubits, other.num_qubits)
        self.num_clbits = max(self.num_clbits, other.num_clbits)
        for instruction in other.instructions:
            self.append(instruction)
        return self

    def repeat(self, times: int) -> QuantumCircuit:
        """Returns a new circuit with the body repeated ``times`` times."""
        if times < 0:
            raise ValueError(f"times must be >= 0, got {times}")
        result = QuantumCircuit(self.num_qubits, self.num_clbits, self.name)
        result.instructions = list(self.instructions) * times
        return result

    def inverse(self) -> QuantumCircuit:
        """Returns the adjoint circuit (inverted gates in reverse order).

        Raises NotSupportedError if the circuit contains measurement or
        reset, which have no inverse.
        """
        result = QuantumCircuit(self.num_qubits, self.num_clbits,
                                f"{self.name}_dg" if self.name else None)
        for instruction in reversed(self.instructions):
            result.instructions.append(Instruction(
                adjoint(instruction.gate), instruction.qubits))
        return result

    def depth(self) -> int:
        """Length of the critical path; barriers do not add depth."""
        levels = [0] * self.num_qubits
        clbit_levels = [0] * self.num_clbits
        for instruction in self.instructions:
            if instruction.name == "Barrier":
                continue
            level = max([levels[q] for q in instruction.qubits]
                        + [clbit_levels[c] for c in instruction.clbits]) + 1
            for q in instruction.qubits:
                levels[q] = level
            for c in instruction.clbits:
                clbit_levels[c] = level
        return max(levels, default=0)

    def count_gates(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for instruction in self.instructions:
            counts[instruction.name] = counts.get(instruction.name, 0) + 1
        return counts

    def gate_count(self) -> int:
        return len(self.instructions)

    def has_measurements(self) -> bool:
        return any(inst.name == "Measure" for inst in self.instructions)

    def clear(self):
        self.instructions.clear()

    def copy(self) -> QuantumCircuit:
        result = QuantumCircuit(self.num_qubits, self.num_clbits, self.name)
        result.instructions = list(self.instructions)
        return result

    def __len__(self) -> int:
        return len(self.instructions)

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self.instructions)

    def __repr__(self) -> str:
        label = f"name={self.name!r}, " if self.name else ""
        return (f"QuantumCircuit({label}num_qubits={self.num_qubits}, "
                f"num_clbits={self.num_clbits}, gates={len(self.instructions)})")

    def to_dict(self) -> dict:
        d = {
            "version": CIRCUIT_FORMAT_VERSION,
            "num_qubits": self.num_qubits,
            "num_clbits": self.num_clbits,
            "gates": [inst.to_dict() for inst in self.instructions],
        }
        if self.name:
            d["name"] = self.name
        return d

    @classmethod
    def from_dict(cls, data: dict) -> QuantumCircuit:
        circuit = cls(
            num_qubits=data["num_qubits"],
            num_clbits=data.get("num_clbits", 0),
            name=data.get("name"),
        )
        for g_data in data["gates"]:
            circuit.append(Instruction.from_dict(g_data))
        return circuit
