import json
import math

import pytest

from quasar_sim.core.serialization import CircuitSerializer
from quasar_sim.engine.circuit import QuantumCircuit
from quasar_sim.engine.errors import QubitOutOfRangeError


def test_save_and_load(tmp_path):
    circuit = QuantumCircuit(3, name="demo").h(0).cp(0, 2, math.pi / 8).ccx(0, 1, 2)
    circuit.measure_all()
    path = tmp_path / f"demo{CircuitSerializer.FILE_EXTENSION}"
    CircuitSerializer.save(circuit, path)

    loaded = CircuitSerializer.load(path)
    assert loaded.name == "demo"
    assert loaded.num_clbits == 3
    assert loaded.instructions == circuit.instructions


def test_file_format(tmp_path):
    data = json.loads(CircuitSerializer.dumps(QuantumCircuit(1).rx(0, 0.5)))
    assert data["version"] == CircuitSerializer.FILE_VERSION
    assert data["gates"] == [{"name": "Rx", "qubits": [0], "params": [0.5]}]


def test_rejects_unknown_version():
    text = json.dumps({"version": "9.9", "num_qubits": 1, "gates": []})
    with pytest.raises(ValueError):
        CircuitSerializer.loads(text)


def test_rejects_invalid_instruction():
    text = json.dumps({"version": "1.0", "num_qubits": 1,
                       "gates": [{"name": "X", "qubits": [3]}]})
    with pytest.raises(QubitOutOfRangeError):
        CircuitSerializer.loads(text)
