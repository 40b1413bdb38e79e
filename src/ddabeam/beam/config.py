"""
Incident Beam Configuration.

This module defines the user-facing description of the incident beam and
of the optional substrate, as parsed from the command line.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

from ..exceptions import BeamConfigurationError


class BeamType(Enum):
    """Closed set of supported incident-beam models."""

    PLANE = "plane"
    LMINUS = "lminus"
    DAVIS3 = "davis3"
    BARTON5 = "barton5"
    READ = "read"

    @property
    def is_gaussian(self) -> bool:
        """Whether this is one of the Gaussian beam orders."""
        return self in GAUSSIAN_TYPES

    @classmethod
    def from_name(cls, name: str) -> "BeamType":
        """Parse beam type from its command-line name (case-insensitive)."""
        try:
            return cls(name.lower())
        except ValueError:
            names = ", ".join(t.value for t in cls)
            raise BeamConfigurationError(f"Unknown beam type '{name}' (expected one of: {names})") from None


GAUSSIAN_TYPES = frozenset([BeamType.LMINUS, BeamType.DAVIS3, BeamType.BARTON5])


class IncPol(Enum):
    """Incident polarization selector; Y is s- and X is p-polarization w.r.t. the substrate."""

    X = "X"
    Y = "Y"


@dataclass(frozen=True)
class BeamConfiguration:
    """
    Parsed beam parameters.

    Attributes:
        beam_type: Incident beam model
        params: Numeric parameters; for Gaussian beams (width,) or
            (width, x0, y0, z0) with the beam center in the laboratory frame
        sources: Field files for the read beam, Y polarization first
    """

    beam_type: BeamType = BeamType.PLANE
    params: Tuple[float, ...] = ()
    sources: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", tuple(float(p) for p in self.params))
        object.__setattr__(self, "sources", tuple(str(s) for s in self.sources))

        name = self.beam_type.value
        if self.beam_type == BeamType.PLANE:
            allowed = (0,)
        elif self.beam_type.is_gaussian:
            allowed = (1, 4)
        else:
            allowed = (0,)
            if len(self.sources) not in (1, 2):
                raise BeamConfigurationError(
                    f"Beam '{name}' requires one or two field files, got {len(self.sources)}"
                )
        if len(self.params) not in allowed:
            expected = " or ".join(str(n) for n in allowed)
            raise BeamConfigurationError(
                f"Beam '{name}' requires {expected} numeric parameters, got {len(self.params)}"
            )
        if self.sources and self.beam_type != BeamType.READ:
            raise BeamConfigurationError(f"Beam '{name}' does not accept field files")

    @property
    def width(self) -> float:
        """Gaussian beam width (waist radius)."""
        return self.params[0]

    @property
    def center(self) -> Tuple[float, float, float]:
        """Gaussian beam center in the laboratory frame (origin if not given)."""
        if len(self.params) == 4:
            return self.params[1], self.params[2], self.params[3]
        return 0.0, 0.0, 0.0

    @classmethod
    def from_args(cls, name: str, *values: str) -> "BeamConfiguration":
        """
        Build configuration from command-line style arguments.

        Args:
            name: Beam type name, e.g. "davis3"
            values: Remaining arguments, numbers or (for "read") file names

        Returns:
            Validated beam configuration
        """
        beam_type = BeamType.from_name(name)
        if beam_type == BeamType.READ:
            return cls(beam_type=beam_type, sources=tuple(values))
        try:
            params = tuple(float(v) for v in values)
        except ValueError:
            raise BeamConfigurationError(f"Non-numeric parameter for beam '{name}': {values}") from None
        return cls(beam_type=beam_type, params=params)


@dataclass(frozen=True)
class SubstrateConfig:
    """
    Planar substrate below the particle.

    The interface is the plane z = -height in the laboratory frame; the
    ambient medium above it is vacuum.

    Attributes:
        height: Height of the coordinate origin above the interface
        refractive_index: Substrate index; None for infinite contrast
            (perfect reflector)
    """

    height: float = 0.0
    refractive_index: Optional[complex] = None

    def __post_init__(self) -> None:
        if self.refractive_index is not None:
            object.__setattr__(self, "refractive_index", complex(self.refractive_index))

    @property
    def is_perfect_reflector(self) -> bool:
        """Whether the substrate has infinite contrast."""
        return self.refractive_index is None

    @classmethod
    def from_args(cls, values: Sequence[str]) -> "SubstrateConfig":
        """Parse "HEIGHT M_RE M_IM" or "HEIGHT inf"."""
        if len(values) == 2 and values[1].lower() == "inf":
            return cls(height=float(values[0]))
        if len(values) != 3:
            raise BeamConfigurationError(
                f"Substrate requires 'HEIGHT M_RE M_IM' or 'HEIGHT inf', got {list(values)}"
            )
        try:
            height, m_re, m_im = (float(v) for v in values)
        except ValueError:
            raise BeamConfigurationError(f"Non-numeric substrate parameters: {list(values)}") from None
        if not math.isfinite(m_re) or not math.isfinite(m_im):
            return cls(height=height)
        return cls(height=height, refractive_index=complex(m_re, m_im))
