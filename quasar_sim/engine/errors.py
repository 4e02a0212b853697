"""Exception hierarchy for the simulator.

Every error derives from :class:`SimulatorError` and from the builtin
exception it most resembles, so callers can catch either.
"""

from __future__ import annotations


class SimulatorError(Exception):
    """Base class for all simulator errors."""


class QubitOutOfRangeError(SimulatorError, ValueError):
    def __init__(self, qubit: int, max_qubits: int):
        self.qubit = qubit
        self.max_qubits = max_qubits
        super().__init__(
            f"Qubit index {qubit} out of range (circuit has {max_qubits} qubits)")


class ClassicalBitOutOfRangeError(SimulatorError, ValueError):
    def __init__(self, clbit: int, max_clbits: int):
        self.clbit = clbit
        self.max_clbits = max_clbits
        super().__init__(
            f"Classical bit index {clbit} out of range "
            f"(circuit has {max_clbits} classical bits)")


class QubitMismatchError(SimulatorError, ValueError):
    def __init__(self, expected: int, got: int):
        self.expected = expected
        self.got = got
        super().__init__(f"Qubit count mismatch: expected {expected}, got {got}")


class DuplicateQubitError(SimulatorError, ValueError):
    def __init__(self, qubit: int):
        self.qubit = qubit
        super().__init__(f"Qubit {qubit} appears more than once in one instruction")


class CircuitTooLargeError(SimulatorError, ValueError):
    def __init__(self, qubits: int, max_qubits: int):
        self.qubits = qubits
        self.max_qubits = max_qubits
        super().__init__(
            f"Circuit too large: {qubits} qubits (maximum {max_qubits})")


class StateDimensionError(SimulatorError, ValueError):
    """Amplitude vector length is not the expected power of two."""

    def __init__(self, expected: int, got: int):
        self.expected = expected
        self.got = got
        super().__init__(f"Invalid state dimension: expected {expected}, got {got}")


class StateNotNormalizedError(SimulatorError, ValueError):
    def __init__(self, norm: float):
        self.norm = norm
        super().__init__(f"State is not normalized (norm^2 = {norm})")


class InvalidProbabilityError(SimulatorError, ValueError):
    def __init__(self, value: float):
        self.value = value
        super().__init__(f"Invalid probability: {value}")


class NotSupportedError(SimulatorError, NotImplementedError):
    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Operation not supported: {operation}")


class InvalidGateParamsError(NotSupportedError):
    """A gate was given the wrong number of parameters for its shape."""

    def __init__(self, gate: str, message: str):
        self.gate = gate
        self.message = message
        SimulatorError.__init__(self, f"Invalid parameters for gate {gate}: {message}")
        self.operation = gate


class SimulationError(SimulatorError, RuntimeError):
    def __init__(self, message: str):
        self.message = message
        super().__init__(f"Simulation error: {message}")


class BackendError(SimulatorError, RuntimeError):
    """Failure reported by an alternative execution backend."""

    def __init__(self, backend: str, message: str):
        self.backend = backend
        self.message = message
        super().__init__(f"Backend error ({backend}): {message}")
