"""
Aberrated Gaussian Beam Expansions.

This module evaluates the field of a fundamental Gaussian beam in the
paraxial-correction expansions used for DDA illumination:

- L- approximation: G. Gouesbet, B. Maheu, G. Grehan, J.Opt.Soc.Am.A 5,
  1427-1443 (1988), Eq.(22)
- 3rd order: L. W. Davis, Phys.Rev.A 19, 1177-1179 (1979), Eqs.(15a),(15b),
  with "Q" changed to "Q^2" in (15a)
- 5th order: J. P. Barton and D. R. Alexander, J.Appl.Phys. 66, 2800-2802
  (1989), Eqs.(25)-(28)

All expressions are complex conjugates of the published ones, matching the
exp(-i*omega*t) time dependence. Coordinates are scaled: transverse ones by
1/w0 and the longitudinal one by 1/(k*w0^2). Functions accept numpy arrays
and evaluate all dipoles at once.
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
from numpy.typing import NDArray

Weights = Tuple[NDArray, NDArray, NDArray]


def fundamental_amplitude(rho2: NDArray, z: NDArray) -> Tuple[NDArray, NDArray]:
    """
    Scalar amplitude of the lowest-order beam.

    Args:
        rho2: Squared scaled transverse distance from the beam axis
        z: Scaled longitudinal coordinate

    Returns:
        Tuple of (Q, psi0), where Q = 1/(2z - i) and psi0 = -iQ exp(iQ rho^2)
    """
    q = 1.0 / (2 * np.asarray(z, dtype=np.float64) - 1j)
    psi0 = -1j * q * np.exp(1j * q * rho2)
    return q, psi0


def _radial_ratios(x: NDArray, y: NDArray, rho2: NDArray) -> Tuple[NDArray, NDArray]:
    """x^2/rho^2 and x*y/rho^2, set to zero on the beam axis."""
    on_axis = rho2 == 0
    safe_rho2 = np.where(on_axis, 1.0, rho2)
    x2_s = np.where(on_axis, 0.0, x * x / safe_rho2)
    xy_s = np.where(on_axis, 0.0, x * y / safe_rho2)
    return x2_s, xy_s


def _common_terms(
    x: NDArray, rho2: NDArray, q: NDArray, s: float, s2: float
) -> Tuple[NDArray, NDArray, NDArray, NDArray]:
    q2 = q * q
    t4 = s2 * rho2 * q2  # (s*rho*Q)^2
    t5 = 1j * rho2 * q
    t6 = rho2 * rho2 * q2
    t7 = x * s * q
    return t4, t5, t6, t7


def lminus_weights(
    x: NDArray, y: NDArray, rho2: NDArray, q: NDArray, s: float, s2: Optional[float] = None
) -> Weights:
    """Weights of (ex, ey, ez) for the L- approximation: the field is along ex."""
    shape = np.shape(rho2)
    zeros = np.zeros(shape, dtype=np.complex128)
    return np.ones(shape, dtype=np.complex128), zeros, zeros.copy()


def davis3_weights(
    x: NDArray, y: NDArray, rho2: NDArray, q: NDArray, s: float, s2: Optional[float] = None
) -> Weights:
    """
    Weights of (ex, ey, ez) for the 3rd-order Davis beam.

    t1 = 1 + s^2(-4Q^2 x^2 - iQ^3 rho^4)
    t2 = 0
    t3 = -s(2Qx) + s^3(8Q^3 rho^2 x + 2iQ^4 rho^4 x - 4iQ^2 x)
    """
    x2_s, _ = _radial_ratios(x, y, rho2)
    if s2 is None:
        s2 = s * s
    t4, t5, t6, t7 = _common_terms(x, rho2, q, s, s2)
    t1 = 1 - t4 * (4 * x2_s + t5)
    t2 = np.zeros(np.shape(rho2), dtype=np.complex128)
    t3 = 2 * t7 * (-1 + 1j * q * s2 * (-4 * t5 + t6 - 2))
    return t1, t2, t3


def barton5_weights(
    x: NDArray, y: NDArray, rho2: NDArray, q: NDArray, s: float, s2: Optional[float] = None
) -> Weights:
    """
    Weights of (ex, ey, ez) for the 5th-order Barton-Alexander beam.

    t1 = 1 + s^2(-rho^2 Q^2 - i rho^4 Q^3 - 2Q^2 x^2)
           + s^4[2rho^4 Q^4 + 3i rho^6 Q^5 - 0.5 rho^8 Q^6 + x^2(8rho^2 Q^4 + 2i rho^4 Q^5)]
    t2 = s^2(-2Q^2 xy) + s^4[xy(8rho^2 Q^4 + 2i rho^4 Q^5)]
    t3 = s(-2Qx) + s^3[(6rho^2 Q^3 + 2i rho^4 Q^4)x]
           + s^5[(-20rho^4 Q^5 - 10i rho^6 Q^6 + rho^8 Q^7)x]
    """
    x2_s, xy_s = _radial_ratios(x, y, rho2)
    if s2 is None:
        s2 = s * s
    t4, t5, t6, t7 = _common_terms(x, rho2, q, s, s2)
    t8 = 8 + 2 * t5
    t1 = 1 + t4 * (-1 - 2 * x2_s - t5 + t4 * (2 + 3 * t5 - 0.5 * t6 + x2_s * t8))
    t2 = xy_s * t4 * (-2 + t4 * t8)
    t3 = t7 * (-2 + t4 * (6 + 2 * t5 + t4 * (-20 - 10 * t5 + t6)))
    return t1, t2, t3
