"""
Physics helpers for incident-beam generation.

This module provides Fresnel coefficients for the substrate interface and
the aberrated Gaussian beam expansions.
"""

from .fresnel import (
    fresnel_rp,
    fresnel_rs,
    fresnel_tp,
    fresnel_ts,
    inverse_reflect,
    normalize,
    reflect,
    sqrt_cut,
)
from .gaussian import (
    barton5_weights,
    davis3_weights,
    fundamental_amplitude,
    lminus_weights,
)

__all__ = [
    # Interface optics
    "sqrt_cut",
    "fresnel_rs",
    "fresnel_ts",
    "fresnel_rp",
    "fresnel_tp",
    "reflect",
    "inverse_reflect",
    "normalize",
    # Gaussian beams
    "fundamental_amplitude",
    "lminus_weights",
    "davis3_weights",
    "barton5_weights",
]
