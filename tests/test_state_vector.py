import math

import numpy as np
import pytest

from quasar_sim.engine.errors import (
    CircuitTooLargeError, DuplicateQubitError, InvalidProbabilityError,
    QubitMismatchError, QubitOutOfRangeError, StateDimensionError,
    StateNotNormalizedError,
)
from quasar_sim.engine.gates import H_MATRIX, SWAP_MATRIX, X_MATRIX, Z_MATRIX
from quasar_sim.engine.state_vector import MAX_QUBITS, StateVector

# 4x4 CNOT in the apply_two sub-basis (position = bit(q0) + 2*bit(q1)),
# first qubit as control.
CNOT_SUBBASIS = np.array([
    [1, 0, 0, 0],
    [0, 0, 0, 1],
    [0, 0, 1, 0],
    [0, 1, 0, 0]], dtype=np.complex128)


def test_initial_state_is_all_zeros():
    sv = StateVector(3)
    assert sv.dimension == 8
    assert sv.probability(0) == 1.0
    assert sv.probabilities().sum() == pytest.approx(1.0)


def test_qubit_zero_is_least_significant_bit():
    sv = StateVector(3)
    sv.apply_single(0, X_MATRIX)
    assert sv.probability(0b001) == pytest.approx(1.0)
    sv.apply_single(2, X_MATRIX)
    assert sv.probability(0b101) == pytest.approx(1.0)


def test_from_initial_states_uses_lsb_order():
    sv = StateVector.from_initial_states([1, 0, 0])
    assert sv.probability(1) == 1.0


def test_apply_single_on_one_qubit_register():
    sv = StateVector(1)
    sv.apply_single(0, H_MATRIX)
    assert np.allclose(sv.amplitudes(), [1 / math.sqrt(2)] * 2)
    sv.apply_single(0, Z_MATRIX)
    assert np.allclose(sv.amplitudes(), [1 / math.sqrt(2), -1 / math.sqrt(2)])


def test_apply_single_only_touches_target_pairs(random_amplitudes):
    amps = random_amplitudes(3)
    sv = StateVector.from_amplitudes(amps)
    sv.apply_single(1, X_MATRIX)
    expected = amps.copy()
    for i in range(8):
        if not i & 0b010:
            expected[i], expected[i | 0b010] = amps[i | 0b010], amps[i]
    assert np.allclose(sv.amplitudes(), expected)


def test_apply_controlled_skips_control_zero(random_amplitudes):
    amps = random_amplitudes(3, seed=3)
    sv = StateVector.from_amplitudes(amps)
    sv.apply_controlled(2, 0, X_MATRIX)
    expected = amps.copy()
    for i in range(8):
        if i & 0b100 and not i & 0b001:
            expected[i], expected[i | 1] = amps[i | 1], amps[i]
    assert np.allclose(sv.amplitudes(), expected)


def test_apply_two_basis_order():
    sv = StateVector.basis(2, 0b01)
    sv.apply_two(0, 1, CNOT_SUBBASIS)
    assert sv.probability(0b11) == pytest.approx(1.0)

    sv = StateVector.basis(2, 0b10)
    sv.apply_two(1, 0, CNOT_SUBBASIS)
    assert sv.probability(0b11) == pytest.approx(1.0)


def test_apply_two_swap_on_non_adjacent_qubits(random_amplitudes):
    amps = random_amplitudes(3, seed=11)
    sv = StateVector.from_amplitudes(amps)
    sv.apply_two(0, 2, SWAP_MATRIX)
    expected = amps.copy()
    expected[0b001], expected[0b100] = amps[0b100], amps[0b001]
    expected[0b011], expected[0b110] = amps[0b110], amps[0b011]
    assert np.allclose(sv.amplitudes(), expected)


def test_measure_collapses_and_renormalizes():
    sv = StateVector.uniform(1)
    assert sv.measure(0, 0.3) == 0
    assert sv.amplitude(0) == pytest.approx(1.0)
    assert sv.amplitude(1) == 0

    sv = StateVector.uniform(1)
    assert sv.measure(0, 0.7) == 1
    assert sv.probability(1) == pytest.approx(1.0)


def test_measure_keeps_entangled_partner():
    sv = StateVector.from_amplitudes([1 / math.sqrt(2), 0, 0, 1 / math.sqrt(2)])
    assert sv.measure(0, 0.9) == 1
    assert sv.probability(0b11) == pytest.approx(1.0)
    assert sv.is_normalized()


def test_measure_at_top_of_interval_never_picks_empty_branch():
    sv = StateVector(1)
    assert sv.measure(0, 1.0) == 0
    assert sv.probability(0) == pytest.approx(1.0)


def test_measure_can_observe_tiny_branch():
    sv = StateVector.from_amplitudes([math.sqrt(1e-13), math.sqrt(1 - 1e-13)])
    assert sv.measure(0, 1e-14) == 0
    assert sv.probability(0) == pytest.approx(1.0)
    assert sv.probability(1) == 0.0

    sv = StateVector.from_amplitudes([math.sqrt(1 - 1e-13), math.sqrt(1e-13)])
    assert sv.measure(0, 1.0 - 1e-14) == 1
    assert sv.probability(1) == pytest.approx(1.0)


def test_reset_forces_zero_and_preserves_rest():
    sv = StateVector.basis(1, 1)
    assert sv.reset(0, 0.5) == 1
    assert sv.probability(0) == pytest.approx(1.0)

    bell = StateVector.from_amplitudes([1 / math.sqrt(2), 0, 0, 1 / math.sqrt(2)])
    bell.reset(0, 0.9)
    assert bell.probability(0b10) == pytest.approx(1.0)


def test_sample_inverse_cdf_without_collapse():
    sv = StateVector.from_amplitudes([0.5, math.sqrt(0.75)])
    before = sv.amplitudes()
    assert sv.sample(0.1) == 0
    assert sv.sample(0.25) == 1
    assert sv.sample(0.99) == 1
    assert sv.sample(1.0) == 1
    assert np.array_equal(sv.amplitudes(), before)


def test_inner_product_and_fidelity():
    zero = StateVector(1)
    plus = StateVector.uniform(1)
    assert zero.inner_product(plus) == pytest.approx(1 / math.sqrt(2))
    assert zero.fidelity(plus) == pytest.approx(0.5)
    assert plus.fidelity(plus) == pytest.approx(1.0)
    with pytest.raises(QubitMismatchError):
        zero.inner_product(StateVector(2))


def test_approximate_equality_and_copy():
    a = StateVector.uniform(2)
    b = a.copy()
    assert a == b
    b.apply_single(0, Z_MATRIX)
    assert a != b
    assert a == StateVector.uniform(2)


def test_data_view_is_read_only():
    sv = StateVector(1)
    with pytest.raises(ValueError):
        sv.data[0] = 0.0


def test_normalize():
    sv = StateVector.uniform(1)
    sv._data *= 2.0
    assert not sv.is_normalized()
    sv.normalize()
    assert sv.is_normalized()


def test_from_amplitudes_rejects_bad_input():
    with pytest.raises(StateDimensionError):
        StateVector.from_amplitudes([1, 0, 0])
    with pytest.raises(StateDimensionError):
        StateVector.from_amplitudes([1])
    with pytest.raises(StateNotNormalizedError):
        StateVector.from_amplitudes([1, 1])


def test_size_limits():
    with pytest.raises(CircuitTooLargeError):
        StateVector(MAX_QUBITS + 1)
    with pytest.raises(ValueError):
        StateVector(0)


def test_kernels_check_indices():
    sv = StateVector(2)
    with pytest.raises(QubitOutOfRangeError):
        sv.apply_single(2, X_MATRIX)
    with pytest.raises(QubitOutOfRangeError):
        sv.apply_controlled(-1, 0, X_MATRIX)
    with pytest.raises(DuplicateQubitError):
        sv.apply_controlled(1, 1, X_MATRIX)
    with pytest.raises(DuplicateQubitError):
        sv.apply_two(0, 0, SWAP_MATRIX)
    with pytest.raises(InvalidProbabilityError):
        sv.measure(0, 1.5)
    with pytest.raises(ValueError):
        sv.apply_single(0, SWAP_MATRIX)
