import pytest

from quasar_sim.engine.errors import (
    BackendError, InvalidGateParamsError, NotSupportedError, QubitOutOfRangeError,
    SimulationError, SimulatorError, StateNotNormalizedError,
)


@pytest.mark.parametrize("error,builtin", [
    (QubitOutOfRangeError(4, 2), ValueError),
    (StateNotNormalizedError(0.5), ValueError),
    (NotSupportedError("gate iSWAP"), NotImplementedError),
    (InvalidGateParamsError("Rx", "expected 1 parameter(s)"), NotImplementedError),
    (SimulationError("diverged"), RuntimeError),
    (BackendError("gpu", "device lost"), RuntimeError),
])
def test_errors_share_a_base_and_a_builtin(error, builtin):
    assert isinstance(error, SimulatorError)
    assert isinstance(error, builtin)


def test_messages_carry_context():
    assert "gpu" in str(BackendError("gpu", "device lost"))
    assert "diverged" in str(SimulationError("diverged"))
    assert isinstance(InvalidGateParamsError("Rx", "bad"), NotSupportedError)
