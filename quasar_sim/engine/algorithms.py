"""Built-in quantum algorithm circuit templates."""

from __future__ import annotations

import math
from typing import Callable

from .circuit import QuantumCircuit

DJ_ORACLES = ("constant_zero", "constant_one", "balanced_parity")


class AlgorithmTemplate:
    """Factory for common quantum algorithm circuits.

    Measured templates write qubit q into classical bit q, so the sampled
    bitstrings list qubit 0 first.
    """

    @staticmethod
    def bell_state() -> QuantumCircuit:
        """Bell state |Phi+> = (|00> + |11>) / sqrt(2)."""
        return QuantumCircuit(2, name="bell").h(0).cx(0, 1).measure_all()

    @staticmethod
    def ghz_state(num_qubits: int = 3) -> QuantumCircuit:
        """GHZ state (|00...0> + |11...1>) / sqrt(2)."""
        if num_qubits < 2:
            raise ValueError(f"GHZ needs at least 2 qubits, got {num_qubits}")
        circuit = QuantumCircuit(num_qubits, name="ghz").h(0)
        for i in range(1, num_qubits):
            circuit.cx(i - 1, i)
        return circuit.measure_all()

    @staticmethod
    def qft(num_qubits: int) -> QuantumCircuit:
        """Quantum Fourier Transform (unmeasured), CP ladder plus final swaps."""
        circuit = QuantumCircuit(num_qubits, name="qft")
        for j in reversed(range(num_qubits)):
            circuit.h(j)
            for k in reversed(range(j)):
                circuit.cp(k, j, math.pi / 2 ** (j - k))
        for i in range(num_qubits // 2):
            circuit.swap(i, num_qubits - 1 - i)
        return circuit

    @staticmethod
    def inverse_qft(num_qubits: int) -> QuantumCircuit:
        circuit = AlgorithmTemplate.qft(num_qubits).inverse()
        circuit.name = "iqft"
        return circuit

    @staticmethod
    def grover_search(num_qubits: int = 3,
                      marked_state: int | None = None) -> QuantumCircuit:
        """Grover's search for ``marked_state`` over 2 or 3 qubits.

        ``marked_state`` defaults to the all-ones basis state.

        The oracle flips the phase of the marked basis state and the
        diffusion operator reflects about the uniform superposition; both
        use a multi-controlled Z (CZ, or H-CCX-H on three qubits).
        """
        if num_qubits not in (2, 3):
            raise ValueError(f"grover_search supports 2 or 3 qubits, got {num_qubits}")
        if marked_state is None:
            marked_state = 2 ** num_qubits - 1
        if not 0 <= marked_state < 2 ** num_qubits:
            raise ValueError(f"marked_state {marked_state} out of range")
        circuit = QuantumCircuit(num_qubits, name="grover")
        qubits = range(num_qubits)
        for q in qubits:
            circuit.h(q)

        for _ in range(grover_iterations(num_qubits)):
            # Oracle
            for q in qubits:
                if not (marked_state >> q) & 1:
                    circuit.x(q)
            _multi_controlled_z(circuit)
            for q in qubits:
                if not (marked_state >> q) & 1:
                    circuit.x(q)
            # Diffusion
            for q in qubits:
                circuit.h(q)
                circuit.x(q)
            _multi_controlled_z(circuit)
            for q in qubits:
                circuit.x(q)
                circuit.h(q)

        return circuit.measure_all()

    @staticmethod
    def deutsch_jozsa(num_qubits: int = 3,
                      oracle: str = "balanced_parity") -> QuantumCircuit:
        """Deutsch-Jozsa on ``num_qubits`` query qubits plus one ancilla.

        The query register reads all zeros iff the oracle is constant.
        Only the query qubits are measured.
        """
        if oracle not in DJ_ORACLES:
            raise ValueError(f"Unknown oracle {oracle!r}; expected one of {DJ_ORACLES}")
        ancilla = num_qubits
        circuit = QuantumCircuit(num_qubits + 1, num_qubits, name="deutsch_jozsa")
        circuit.x(ancilla)
        for q in range(num_qubits + 1):
            circuit.h(q)
        if oracle == "constant_one":
            circuit.x(ancilla)
        elif oracle == "balanced_parity":
            for q in range(num_qubits):
                circuit.cx(q, ancilla)
        for q in range(num_qubits):
            circuit.h(q)
            circuit.measure(q, q)
        return circuit

    @staticmethod
    def bernstein_vazirani(secret: int, num_qubits: int = 4) -> QuantumCircuit:
        """Recovers ``secret`` (bit q of the secret on qubit q) in one query."""
        if not 0 <= secret < 2 ** num_qubits:
            raise ValueError(f"secret {secret} does not fit in {num_qubits} bits")
        ancilla = num_qubits
        circuit = QuantumCircuit(num_qubits + 1, num_qubits, name="bernstein_vazirani")
        circuit.x(ancilla)
        for q in range(num_qubits + 1):
            circuit.h(q)
        for q in range(num_qubits):
            if (secret >> q) & 1:
                circuit.cx(q, ancilla)
        for q in range(num_qubits):
            circuit.h(q)
            circuit.measure(q, q)
        return circuit


def grover_iterations(num_qubits: int) -> int:
    """floor(pi/4 * sqrt(N)), at least one."""
    return max(1, int(math.pi / 4 * math.sqrt(2 ** num_qubits)))


def grover_success_probability(num_qubits: int) -> float:
    n_states = 2 ** num_qubits
    theta = math.asin(1 / math.sqrt(n_states))
    return math.sin((2 * grover_iterations(num_qubits) + 1) * theta) ** 2


def is_constant(query_bits: str) -> bool:
    """Deutsch-Jozsa verdict from the measured query register."""
    return set(query_bits) <= {"0"}


def _multi_controlled_z(circuit: QuantumCircuit):
    if circuit.num_qubits == 2:
        circuit.cz(0, 1)
    else:
        circuit.h(2).ccx(0, 1, 2).h(2)


TEMPLATES: dict[str, Callable[[int | None], QuantumCircuit]] = {
    "bell": lambda n: AlgorithmTemplate.bell_state(),
    "ghz": lambda n: AlgorithmTemplate.ghz_state(n or 3),
    "qft": lambda n: AlgorithmTemplate.qft(n or 3),
    "grover": lambda n: AlgorithmTemplate.grover_search(n or 3),
    "deutsch_jozsa": lambda n: AlgorithmTemplate.deutsch_jozsa(n or 3),
    "bernstein_vazirani": lambda n: AlgorithmTemplate.bernstein_vazirani(
        0b1011 % 2 ** (n or 4), n or 4),
}


def build_template(name: str, num_qubits: int | None = None) -> QuantumCircuit:
    if name not in TEMPLATES:
        raise KeyError(f"Unknown template {name!r}; available: {', '.join(TEMPLATES)}")
    return TEMPLATES[name](num_qubits)
