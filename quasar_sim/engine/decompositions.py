"""Composite gates expressed as sequences of elementary gates.

Each decomposition is a tuple of ``(gate_name, roles)`` steps where
``roles`` index into the qubit list of the composite instruction. For CCX
the roles are (control1, control2, target); for CSWAP they are
(control, target1, target2).
"""

from __future__ import annotations

from typing import Sequence

from .circuit import Instruction
from .gate_registry import Gate, GateRegistry

Step = tuple[str, tuple[int, ...]]

# Clifford+T Toffoli. The step order is fixed so amplitudes agree
# bit-for-bit with reference outputs.
TOFFOLI_STEPS: tuple[Step, ...] = (
    ("H", (2,)),
    ("CX", (1, 2)),
    ("T_DAG", (2,)),
    ("CX", (0, 2)),
    ("T", (2,)),
    ("CX", (1, 2)),
    ("T_DAG", (2,)),
    ("CX", (0, 2)),
    ("T", (1,)),
    ("T", (2,)),
    ("H", (2,)),
    ("CX", (0, 1)),
    ("T", (0,)),
    ("T_DAG", (1,)),
    ("CX", (0, 1)),
)

FREDKIN_STEPS: tuple[Step, ...] = (
    ("CX", (2, 1)),
    ("CCX", (0, 1, 2)),
    ("CX", (2, 1)),
)

_DECOMPOSITIONS: dict[str, tuple[Step, ...]] = {
    "CCX": TOFFOLI_STEPS,
    "CSWAP": FREDKIN_STEPS,
}


def register_decomposition(name: str, steps: Sequence[Step]):
    """Registers (or replaces) the decomposition used for a composite gate.

    Every step must name a catalog gate without parameters, give it the
    qubit count it takes, and use distinct roles of the composite gate.
    A step may not lead back to ``name`` through other decompositions.

    Raises:
        ValueError: a step fails any of these checks.
    """
    registry = GateRegistry.instance()
    name = registry.canonical_name(name)
    num_roles = registry.get(name).num_qubits
    checked: list[Step] = []
    for step_name, roles in steps:
        roles = tuple(roles)
        try:
            step_def = registry.get(step_name)
        except KeyError:
            raise ValueError(
                f"Decomposition of {name} uses unknown gate {step_name!r}") from None
        if step_def.num_params:
            raise ValueError(
                f"Decomposition step {step_def.name} needs "
                f"{step_def.num_params} parameter(s); steps carry none")
        if step_def.num_qubits and len(roles) != step_def.num_qubits:
            raise ValueError(
                f"Decomposition step {step_def.name}{roles} needs "
                f"{step_def.num_qubits} qubit(s)")
        if any(r < 0 or r >= num_roles for r in roles):
            raise ValueError(
                f"Decomposition step {step_def.name}{roles} uses a role outside "
                f"0..{num_roles - 1}")
        if len(set(roles)) != len(roles):
            raise ValueError(
                f"Decomposition step {step_def.name}{roles} repeats a role")
        if _reaches(step_def.name, name):
            raise ValueError(
                f"Decomposition of {name} refers back to itself via {step_def.name}")
        checked.append((step_def.name, roles))
    _DECOMPOSITIONS[name] = tuple(checked)


def _reaches(start: str, target: str) -> bool:
    """True if expanding ``start`` would eventually produce ``target``."""
    pending = [start]
    seen: set[str] = set()
    while pending:
        current = pending.pop()
        if current == target:
            return True
        if current in seen:
            continue
        seen.add(current)
        pending.extend(step for step, _ in _DECOMPOSITIONS.get(current, ()))
    return False


def is_composite(name: str) -> bool:
    return name in _DECOMPOSITIONS


def decomposition(name: str) -> tuple[Step, ...]:
    return _DECOMPOSITIONS[name]


def expand(instruction: Instruction) -> list[Instruction]:
    """Expands a composite instruction into elementary instructions.

    Nested composites (CSWAP uses CCX) are expanded recursively. An
    elementary instruction is returned unchanged as a one-element list.
    """
    if not is_composite(instruction.name):
        return [instruction]
    result: list[Instruction] = []
    for step_name, roles in _DECOMPOSITIONS[instruction.name]:
        qubits = tuple(instruction.qubits[r] for r in roles)
        result.extend(expand(Instruction(Gate(step_name), qubits)))
    return result
