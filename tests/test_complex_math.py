import math

import pytest

from quasar_sim.engine import complex_math as cm


def test_norm_and_magnitude():
    assert cm.norm_sqr(3 + 4j) == 25.0
    assert cm.magnitude(3 + 4j) == 5.0


def test_polar_and_arg():
    z = cm.from_polar(2.0, math.pi / 2)
    assert cm.approx_eq(z, 2j)
    assert cm.arg(1j) == pytest.approx(math.pi / 2)
    assert cm.arg(-1 + 0j) == pytest.approx(math.pi)


def test_conj_and_exp():
    assert cm.conj(1 + 2j) == 1 - 2j
    assert cm.approx_eq(cm.cexp(1j * math.pi), -1 + 0j)


def test_tolerant_comparisons():
    assert cm.approx_eq(1 + 1j, 1 + 1j + 1e-12)
    assert not cm.approx_eq(1 + 1j, 1 + 1.001j)
    assert cm.is_zero(1e-12 + 1e-12j)
    assert not cm.is_zero(1e-6)


def test_inv_sqrt_2():
    assert cm.INV_SQRT_2 ** 2 == pytest.approx(0.5)


def test_division_by_zero_is_not_masked():
    with pytest.raises(ZeroDivisionError):
        (1 + 1j) / complex(0, 0)
