"""
Fresnel Coefficients at a Planar Interface.

This module implements the reflection and transmission amplitudes used for
a plane wave hitting the substrate, together with the small vector helpers
needed to build the secondary-wave polarizations.

All wavevector components are expressed in units of the vacuum wavenumber.
"""

from __future__ import annotations

import cmath
import math
from typing import Union

import numpy as np
from numpy.typing import ArrayLike, NDArray

Number = Union[float, complex]


def sqrt_cut(value: Number) -> complex:
    """
    Complex square root with explicit handling of the branch cut.

    For purely real arguments the result does not depend on the sign of the
    zero imaginary part: non-negative values give a real root and negative
    values give ``i*sqrt(-value)``, so that evanescent waves decay. Other
    arguments use the principal branch.

    Args:
        value: Real or complex number

    Returns:
        Square root as a complex number
    """
    value = complex(value)
    if value.imag == 0:
        if value.real >= 0:
            return complex(math.sqrt(value.real), 0.0)
        return complex(0.0, math.sqrt(-value.real))
    return cmath.sqrt(value)


def fresnel_rs(ki: Number, kt: Number) -> complex:
    """Reflection coefficient for s-polarized (perpendicular) wave."""
    return complex((ki - kt) / (ki + kt))


def fresnel_ts(ki: Number, kt: Number) -> complex:
    """Transmission coefficient for s-polarized (perpendicular) wave."""
    return complex(2 * ki / (ki + kt))


def fresnel_rp(ki: Number, kt: Number, mr: Number) -> complex:
    """
    Reflection coefficient for p-polarized (parallel) wave.

    Args:
        ki: Normal component of the incident wavevector
        kt: Normal component of the transmitted wavevector
        mr: Ratio of refractive indices (transmitted / incident medium)
    """
    mr2 = mr * mr
    return complex((mr2 * ki - kt) / (mr2 * ki + kt))


def fresnel_tp(ki: Number, kt: Number, mr: Number) -> complex:
    """
    Transmission coefficient for p-polarized (parallel) wave.

    Args:
        ki: Normal component of the incident wavevector
        kt: Normal component of the transmitted wavevector
        mr: Ratio of refractive indices (transmitted / incident medium)
    """
    mr2 = mr * mr
    return complex(2 * mr * ki / (mr2 * ki + kt))


def reflect(vector: ArrayLike) -> NDArray:
    """Mirror a vector about the XY plane (the substrate interface)."""
    result = np.array(vector, copy=True)
    result[2] = -result[2]
    return result


def inverse_reflect(vector: ArrayLike) -> NDArray:
    """
    Mirror a vector about the XY plane and invert it.

    Gives the reflected p-polarization vector for a unit reflection
    coefficient: (-v_x, -v_y, v_z).
    """
    result = np.array(vector, copy=True)
    result[0] = -result[0]
    result[1] = -result[1]
    return result


def normalize(vector: ArrayLike) -> NDArray:
    """Return the vector divided by its Euclidean norm."""
    vector = np.asarray(vector, dtype=np.float64)
    return vector / np.linalg.norm(vector)
