import pytest

from quasar_sim.engine.measurement import Counts, MeasurementResult, index_to_bitstring


def test_measurement_result_rendering():
    result = MeasurementResult([1, 0, 1, 1])
    assert result.bitstring() == "1011"
    assert result.as_int() == 0b1101
    assert len(result) == 4
    assert MeasurementResult.zeros(3).bits == [0, 0, 0]


def test_counts_queries():
    counts = Counts({"00": 30, "11": 60, "01": 10})
    assert counts.shots == 100
    assert counts.probability("11") == pytest.approx(0.6)
    assert counts.probability("10") == 0.0
    assert counts.most_likely() == "11"
    assert counts.as_sorted_items()[0] == ("00", 30)


def test_counts_marginal():
    counts = Counts({"010": 5, "011": 3, "110": 2}, shots=10)
    assert counts.marginal([1]) == {"1": 10}
    assert counts.marginal([2, 0]) == {"00": 5, "10": 3, "01": 2}


def test_most_likely_tie_and_empty():
    assert Counts({"10": 5, "01": 5}).most_likely() == "01"
    assert Counts().most_likely() is None
    assert Counts().probability("0") == 0.0


def test_index_to_bitstring_lists_qubit_zero_first():
    assert index_to_bitstring(1, 3) == "100"
    assert index_to_bitstring(6, 3) == "011"
