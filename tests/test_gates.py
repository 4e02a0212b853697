import math

import numpy as np
import pytest

from quasar_sim.engine.errors import NotSupportedError
from quasar_sim.engine.gate_registry import (
    Gate, GateRegistry, adjoint, angle_to_str, arity, is_controlled,
    is_unitary, matrix_for,
)
from quasar_sim.engine.gates import GateType, u_matrix

SINGLE_GATES = [
    Gate("I"), Gate("X"), Gate("Y"), Gate("Z"), Gate("H"),
    Gate("S"), Gate("S_DAG"), Gate("T"), Gate("T_DAG"),
    Gate("Rx", (0.7,)), Gate("Ry", (1.3,)), Gate("Rz", (-2.1,)),
    Gate("P", (0.4,)), Gate("U", (0.3, 1.1, -0.6)),
]


@pytest.mark.parametrize("gate", SINGLE_GATES, ids=str)
def test_single_qubit_matrices_are_unitary(gate):
    m = matrix_for(gate)
    assert m.shape == (2, 2)
    assert np.allclose(m @ m.conj().T, np.eye(2), atol=1e-12)


@pytest.mark.parametrize("gate", SINGLE_GATES, ids=str)
def test_adjoint_is_conjugate_transpose(gate):
    assert np.allclose(matrix_for(adjoint(gate)), matrix_for(gate).conj().T,
                       atol=1e-12)


def test_exact_matrix_values():
    assert np.array_equal(matrix_for(Gate("Y")), np.array([[0, -1j], [1j, 0]]))
    assert np.allclose(matrix_for(Gate("T")),
                       [[1, 0], [0, np.exp(1j * np.pi / 4)]])
    assert np.allclose(matrix_for(Gate("Rz", (math.pi,))), [[-1j, 0], [0, 1j]])


def test_u_matrix_entries():
    theta, phi, lam = 0.9, 0.2, 1.4
    m = u_matrix(theta, phi, lam)
    assert m[0, 0] == pytest.approx(math.cos(theta / 2))
    assert m[0, 1] == pytest.approx(-np.exp(1j * lam) * math.sin(theta / 2))
    assert m[1, 0] == pytest.approx(np.exp(1j * phi) * math.sin(theta / 2))
    assert m[1, 1] == pytest.approx(np.exp(1j * (phi + lam)) * math.cos(theta / 2))


def test_no_direct_matrix_for_multi_qubit_or_bad_params():
    assert matrix_for(Gate("CX")) is None
    assert matrix_for(Gate("CCX")) is None
    assert matrix_for(Gate("Measure")) is None
    assert matrix_for(Gate("Rx")) is None


def test_metadata():
    assert arity("H") == 1
    assert arity("SWAP") == 2
    assert arity("CCX") == 3
    assert arity("Barrier") == 0
    assert is_controlled("CX")
    assert is_controlled("CSWAP")
    assert not is_controlled("SWAP")
    assert is_unitary("CCX")
    for name in ("Measure", "Reset", "Barrier"):
        assert not is_unitary(name)


def test_aliases_resolve_to_canonical_names():
    assert Gate("CNOT").name == "CX"
    assert Gate("Toffoli").name == "CCX"
    assert Gate("Fredkin").name == "CSWAP"
    assert Gate("U3", (0, 0, 0)).name == "U"
    assert Gate("Phase", (1.0,)) == Gate("P", (1.0,))


def test_unknown_gate():
    with pytest.raises(KeyError):
        Gate("FOO")
    with pytest.raises(KeyError):
        GateRegistry.instance().get("FOO")


def test_registry_queries():
    registry = GateRegistry.instance()
    names = registry.gate_names()
    for name in ("I", "U", "CP", "CU", "iSWAP", "SQRT_SWAP", "CSWAP", "Reset"):
        assert name in names
    assert all(g.gate_type == GateType.SINGLE for g in registry.single_qubit_gates())
    assert {g.name for g in registry.parameterized_gates()} == {
        "Rx", "Ry", "Rz", "P", "U", "CP", "CU"}
    assert registry.get("CU").num_params == 3


def test_registry_reset_rebuilds_builtins():
    GateRegistry.reset()
    assert GateRegistry.instance().get("H").display_name == "Hadamard"


def test_adjoint_of_non_unitary_fails():
    with pytest.raises(NotSupportedError):
        adjoint(Gate("Measure"))
    with pytest.raises(NotSupportedError):
        adjoint(Gate("iSWAP"))


def test_gate_str():
    assert str(Gate("H")) == "H"
    assert str(Gate("Rx", (math.pi / 2,))) == "Rx(pi/2)"
    assert angle_to_str(-math.pi) == "-pi"
    assert angle_to_str(0.123) == "0.123"
