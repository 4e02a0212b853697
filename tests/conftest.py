"""Shared fixtures for the test suite."""

from __future__ import annotations

import numpy as np
import pytest

from quasar_sim.engine.circuit import QuantumCircuit
from quasar_sim.engine.simulator import Simulator


@pytest.fixture
def sim() -> Simulator:
    return Simulator(seed=42)


@pytest.fixture
def bell_circuit() -> QuantumCircuit:
    return QuantumCircuit(2).h(0).cx(0, 1)


@pytest.fixture
def measured_bell() -> QuantumCircuit:
    return QuantumCircuit(2).h(0).cx(0, 1).measure_all()


@pytest.fixture
def random_amplitudes():
    """Deterministic normalized amplitudes for a given qubit count."""
    def _make(num_qubits: int, seed: int = 7) -> np.ndarray:
        rng = np.random.default_rng(seed)
        dim = 2 ** num_qubits
        amps = rng.normal(size=dim) + 1j * rng.normal(size=dim)
        return amps / np.linalg.norm(amps)
    return _make


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    """Points the home directory (and thus the config dir) at tmp_path."""
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path
