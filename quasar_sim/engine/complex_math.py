"""Scalar complex helpers used by gate math and state comparisons.

Amplitudes are plain Python ``complex`` values (``np.complex128`` inside
arrays). The builtin type already supplies the field operations; the
functions here fill in the rest. Division by a zero-norm value is a
precondition violation and raises ``ZeroDivisionError`` as usual.
"""

from __future__ import annotations

import cmath
import math

EPSILON = 1e-10
INV_SQRT_2 = 1.0 / math.sqrt(2.0)


def conj(z: complex) -> complex:
    return complex(z).conjugate()


def norm_sqr(z: complex) -> float:
    """|z|^2 without the square root; prefer this for magnitude comparisons."""
    return z.real * z.real + z.imag * z.imag


def magnitude(z: complex) -> float:
    return math.sqrt(norm_sqr(z))


def arg(z: complex) -> float:
    return math.atan2(z.imag, z.real)


def from_polar(r: float, theta: float) -> complex:
    return complex(r * math.cos(theta), r * math.sin(theta))


def cexp(z: complex) -> complex:
    return cmath.exp(z)


def approx_eq(a: complex, b: complex, eps: float = EPSILON) -> bool:
    """Component-wise comparison within ``eps``."""
    return abs(a.real - b.real) < eps and abs(a.imag - b.imag) < eps


def is_zero(z: complex, eps: float = EPSILON) -> bool:
    return norm_sqr(z) < eps * eps
