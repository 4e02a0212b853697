"""Physics self-check harness.

Runs identities that any correct state-vector simulator must satisfy and
prints a PASS/FAIL line for each. Used by ``quasar-sim verify``.
"""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass, field
from typing import Callable, TextIO

from quasar_sim.engine.circuit import QuantumCircuit
from quasar_sim.engine.simulator import Simulator
from quasar_sim.engine.state_vector import StateVector

TOLERANCE = 1e-10
SAMPLING_SHOTS = 10_000
SAMPLING_SEED = 42


@dataclass
class VerificationReport:
    """Collects PASS/FAIL results and echoes them to ``stream``."""
    stream: TextIO = field(default_factory=lambda: sys.stdout)
    passed: int = 0
    failed: int = 0
    failures: list[str] = field(default_factory=list)
    tolerance: float = TOLERANCE

    def section(self, title: str):
        print(f"\n{title}", file=self.stream)
        print("-" * 40, file=self.stream)

    def report(self, name: str, passed: bool, details: str = ""):
        status = "PASS" if passed else "FAIL"
        if passed:
            self.passed += 1
        else:
            self.failed += 1
            self.failures.append(name)
        print(f"  [{status}] {name}", file=self.stream)
        if details and not passed:
            print(f"         {details}", file=self.stream)

    @property
    def ok(self) -> bool:
        return self.failed == 0


# =========================================================================
# Checks
# =========================================================================

def check_normalization(report: VerificationReport):
    report.section("Normalization")
    circuits = {
        "empty": QuantumCircuit(3),
        "all-H": QuantumCircuit(3).h(0).h(1).h(2),
        "Bell": QuantumCircuit(2).h(0).cx(0, 1),
        "GHZ": QuantumCircuit(3).h(0).cx(0, 1).cx(1, 2),
        "rotations": (QuantumCircuit(3).rx(0, 0.3).ry(1, 1.2).rz(2, 2.1)
                      .cz(0, 1).u(2, 0.4, 0.5, 0.6).ccx(0, 1, 2)),
    }
    for name, circuit in circuits.items():
        total = float(Simulator().run(circuit).probabilities().sum())
        report.report(f"{name}: sum of probabilities = 1",
                      abs(total - 1.0) < report.tolerance, f"got {total:.12f}")


def check_involutions(report: VerificationReport):
    report.section("Involutions")
    state = Simulator().run(QuantumCircuit(1).h(0).h(0))
    report.report("H.H|0> = |0>",
                  state.probability(0) > 1.0 - report.tolerance
                  and state.probability(1) < 1e-3,
                  f"P(0)={state.probability(0):.6f}")
    state = Simulator().run(QuantumCircuit(1).x(0).x(0))
    report.report("X.X|0> = |0>", state.probability(0) > 1.0 - report.tolerance,
                  f"P(0)={state.probability(0):.6f}")
    state = Simulator().run(QuantumCircuit(1).rx(0, 2 * math.pi))
    report.report("Rx(2pi)|0> = -|0>", state.probability(0) >= 0.999,
                  f"P(0)={state.probability(0):.6f}")


def check_entanglement(report: VerificationReport):
    report.section("Entanglement")
    probs = Simulator().run(QuantumCircuit(2).h(0).cx(0, 1)).probabilities()
    expected = [0.5, 0.0, 0.0, 0.5]
    report.report("Bell probabilities [0.5, 0, 0, 0.5]",
                  all(abs(p - e) < report.tolerance for p, e in zip(probs, expected)),
                  f"got {probs.tolist()}")
    probs = Simulator().run(QuantumCircuit(3).h(0).cx(0, 1).cx(1, 2)).probabilities()
    report.report("GHZ weight on |000> and |111>",
                  probs[0] >= 0.49 and probs[7] >= 0.49
                  and all(probs[i] <= 0.01 for i in range(1, 7)),
                  f"got {probs.tolist()}")


def _basis_circuit(num_qubits: int, index: int) -> QuantumCircuit:
    circuit = QuantumCircuit(num_qubits)
    for q in range(num_qubits):
        if (index >> q) & 1:
            circuit.x(q)
    return circuit


def check_truth_tables(report: VerificationReport):
    report.section("Truth tables")
    for index in range(4):
        control = index & 1
        expected = index ^ (control << 1)
        state = Simulator().run(_basis_circuit(2, index).cx(0, 1))
        report.report(f"CX |{index:02b}> -> |{expected:02b}>",
                      state.probability(expected) > 0.99,
                      f"P={state.probability(expected):.6f}")
    for index in range(8):
        both = (index & 1) and (index >> 1) & 1
        expected = index ^ (4 if both else 0)
        state = Simulator().run(_basis_circuit(3, index).ccx(0, 1, 2))
        report.report(f"CCX |{index:03b}> -> |{expected:03b}>",
                      state.probability(expected) > 0.99,
                      f"P={state.probability(expected):.6f}")
    state = Simulator().run(QuantumCircuit(2).x(0).swap(0, 1))
    report.report("SWAP |01> -> |10>", state.probability(0b10) > 0.99,
                  f"P={state.probability(0b10):.6f}")


def check_superposition(report: VerificationReport):
    report.section("Superposition")
    state = Simulator().run(QuantumCircuit(1).h(0))
    reference = StateVector.uniform(1)
    report.report("H|0> is the exact equal superposition",
                  abs(state.fidelity(reference) - 1.0) < report.tolerance,
                  f"P(0)={state.probability(0):.12f}")


def check_sampling(report: VerificationReport):
    report.section("Sampling")
    circuit = QuantumCircuit(2).h(0).cx(0, 1).measure_all()
    counts = Simulator(seed=SAMPLING_SEED).sample(circuit, SAMPLING_SHOTS)
    half = SAMPLING_SHOTS // 2
    report.report(f"Bell sampling over {SAMPLING_SHOTS} shots matches Born rule",
                  abs(counts.get("00", 0) - half) < 300
                  and abs(counts.get("11", 0) - half) < 300
                  and counts.get("01", 0) == 0 and counts.get("10", 0) == 0,
                  f"got {dict(counts)}")


CHECKS: tuple[Callable[[VerificationReport], None], ...] = (
    check_normalization,
    check_involutions,
    check_entanglement,
    check_truth_tables,
    check_superposition,
    check_sampling,
)


def run_all(stream: TextIO | None = None,
            tolerance: float = TOLERANCE) -> VerificationReport:
    """Runs every check; amplitude comparisons use ``tolerance``."""
    report = VerificationReport(stream=stream or sys.stdout, tolerance=tolerance)
    for check in CHECKS:
        check(report)
    print(f"\n{report.passed} passed, {report.failed} failed", file=report.stream)
    return report
