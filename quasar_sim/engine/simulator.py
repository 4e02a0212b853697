"""Quantum circuit simulator - applies circuits to state vectors."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generator

from .circuit import Instruction, QuantumCircuit
from .decompositions import expand, is_composite
from .errors import (
    CircuitTooLargeError, InvalidGateParamsError, NotSupportedError,
    QubitMismatchError,
)
from .gate_registry import matrix_for
from .gates import GateType
from .measurement import Counts, MeasurementResult
from .random_source import DEFAULT_SEED, Xorshift64
from .state_vector import MAX_QUBITS, StateVector

logger = logging.getLogger(__name__)


@dataclass
class SimulationResult:
    """Result of a full simulation run."""
    final_state: StateVector
    measurement_counts: Counts
    num_shots: int
    seed: int | None = None


class Simulator:
    """Executes a QuantumCircuit on a StateVector.

    Measurement and reset outcomes come from a xorshift64 generator owned
    by the simulator instance. Without an explicit seed the generator
    starts from a fixed default, so runs are reproducible either way.
    """

    def __init__(self, seed: int | None = None):
        self._seed = seed
        self._rng = Xorshift64(DEFAULT_SEED if seed is None else seed)

    @property
    def seed(self) -> int | None:
        return self._seed

    @property
    def rng(self) -> Xorshift64:
        return self._rng

    # --- Public entry points ---

    def run(self, circuit: QuantumCircuit) -> StateVector:
        """Executes the circuit from |0...0> and returns the final state."""
        state, _ = self._execute(circuit, StateVector(circuit.num_qubits))
        return state

    def run_from_state(self, circuit: QuantumCircuit,
                       initial_state: StateVector) -> StateVector:
        """Executes the circuit on a copy of ``initial_state``."""
        if initial_state.num_qubits != circuit.num_qubits:
            raise QubitMismatchError(circuit.num_qubits, initial_state.num_qubits)
        state, _ = self._execute(circuit, initial_state.copy())
        return state

    def run_with_measurements(
            self, circuit: QuantumCircuit) -> tuple[StateVector, MeasurementResult]:
        """Executes the circuit and also returns the classical register."""
        return self._execute(circuit, StateVector(circuit.num_qubits))

    def sample(self, circuit: QuantumCircuit, shots: int) -> Counts:
        """Runs the whole circuit ``shots`` times and histograms the results.

        Each shot re-executes every instruction from |0...0>, so the cost is
        O(shots * circuit cost). If the simulator was given a seed, the
        generator restarts from it first and the histogram is reproducible
        across calls.

        Returns:
            Counts keyed by classical-bit bitstrings (bit 0 first).
        """
        if shots < 0:
            raise ValueError(f"shots must be >= 0, got {shots}")
        self.validate(circuit)
        if self._seed is not None:
            self._rng.reseed()

        counts = Counts(shots=shots)
        for _ in range(shots):
            _, record = self._execute(circuit, StateVector(circuit.num_qubits),
                                      validate=False)
            counts.increment(record.bitstring())

        logger.debug("Sampled %d shots of %r: %d distinct outcomes",
                     shots, circuit, len(counts))
        return counts

    def run_step_by_step(
            self, circuit: QuantumCircuit
    ) -> Generator[tuple[StateVector, int], None, None]:
        """Yields (state_vector, instruction_index) after each instruction.

        The first item is the initial state with index -1.
        """
        self.validate(circuit)
        state = StateVector(circuit.num_qubits)
        record = MeasurementResult.zeros(circuit.num_clbits)
        yield state.copy(), -1
        for idx, instruction in enumerate(circuit.instructions):
            self._apply_instruction(state, instruction, record)
            yield state.copy(), idx

    def execute(self, circuit: QuantumCircuit, shots: int) -> SimulationResult:
        """Final state plus a sampled histogram in one call.

        A circuit without measurements is sampled as if every qubit were
        measured into the classical bit of the same index.
        """
        final_state = self.run(circuit)
        sampled = circuit
        if shots and not circuit.has_measurements():
            sampled = circuit.copy().measure_all()
        counts = self.sample(sampled, shots) if shots else Counts(shots=0)
        return SimulationResult(
            final_state=final_state,
            measurement_counts=counts,
            num_shots=shots,
            seed=self._seed,
        )

    # --- Execution ---

    def validate(self, circuit: QuantumCircuit):
        """Checks the whole circuit before any amplitude is touched."""
        if circuit.num_qubits > MAX_QUBITS:
            raise CircuitTooLargeError(circuit.num_qubits, MAX_QUBITS)
        for instruction in circuit.instructions:
            circuit.validate_instruction(instruction)

    def _execute(self, circuit: QuantumCircuit, state: StateVector,
                 validate: bool = True) -> tuple[StateVector, MeasurementResult]:
        if validate:
            self.validate(circuit)
            logger.debug("Running %r", circuit)
        record = MeasurementResult.zeros(circuit.num_clbits)
        for instruction in circuit.instructions:
            self._apply_instruction(state, instruction, record)
        return state, record

    def _apply_instruction(self, state: StateVector, instruction: Instruction,
                           record: MeasurementResult):
        """Apply a single instruction, expanding composite gates first."""
        if is_composite(instruction.name):
            for step in expand(instruction):
                self._apply_elementary(state, step, record)
        else:
            self._apply_elementary(state, instruction, record)

    def _apply_elementary(self, state: StateVector, instruction: Instruction,
                          record: MeasurementResult):
        gate = instruction.gate
        gate_def = gate.definition
        qubits = instruction.qubits
        gate_type = gate_def.gate_type

        if gate_type == GateType.SINGLE:
            matrix = matrix_for(gate)
            if matrix is None:
                raise InvalidGateParamsError(
                    gate.name, f"expected {gate_def.num_params} parameter(s)")
            state.apply_single(qubits[0], matrix)

        elif (gate_type == GateType.CONTROLLED and gate_def.num_qubits == 2
              and gate_def.matrix_func is not None):
            state.apply_controlled(qubits[0], qubits[1],
                                   gate_def.matrix_func(*gate.params))

        elif (gate_type == GateType.MULTI and gate_def.num_qubits == 2
              and gate_def.matrix_func is not None):
            state.apply_two(qubits[0], qubits[1],
                            gate_def.matrix_func(*gate.params))

        elif gate_type == GateType.MEASUREMENT:
            outcome = state.measure(qubits[0], self._rng.random())
            if instruction.clbits:
                record[instruction.clbits[0]] = outcome

        elif gate_type == GateType.RESET:
            state.reset(qubits[0], self._rng.random())

        elif gate_type == GateType.BARRIER:
            pass

        else:
            raise NotSupportedError(f"gate {gate.name}")
