"""
Incident Beam Initialization.

This module validates the beam parameters, derives the constants used by
the field generator, narrows the problem symmetries broken by the beam,
and produces the beam description for the run log.
"""

from __future__ import annotations

import logging

import numpy as np

from ..exceptions import BeamConfigurationError, BeamError
from ..physics import normalize, reflect, sqrt_cut
from .config import BeamConfiguration, BeamType
from .state import (
    BeamSetup,
    FileBeamState,
    GaussianBeamState,
    PhysicalState,
    PlaneWaveState,
    SubstratePlaneWaveState,
    SymmetryFlags,
)

logger = logging.getLogger(__name__)

_GAUSSIAN_TITLES = {
    BeamType.LMINUS: "L- approximation",
    BeamType.DAVIS3: "3rd order approximation, by Davis",
    BeamType.BARTON5: "5th order approximation, by Barton",
}


def _fmt(value: float) -> str:
    return f"{value:.10g}"


class BeamInitializer:
    """
    One-time setup of the incident beam for a given configuration.

    Must be run after the parameters are parsed and before any structure
    depending on the problem symmetries is built; it has to be re-run when
    the propagation direction changes relative to the substrate.

    Attributes:
        config: Beam configuration
        state: Physical state (wavenumber, directions, substrate)
    """

    def __init__(self, config: BeamConfiguration, state: PhysicalState):
        """
        Initialize beam setup.

        Args:
            config: Parsed beam configuration
            state: Physical state of the problem
        """
        self.config = config
        self.state = state

    def initialize(self, symmetry: SymmetryFlags) -> BeamSetup:
        """
        Derive beam constants and narrow the symmetry flags.

        Args:
            symmetry: Symmetry flags of the problem, cleared in place

        Returns:
            Beam setup for the field generator

        Raises:
            BeamConfigurationError: If the configuration is invalid
            BeamError: If the beam type is unknown
        """
        beam_type = self.config.beam_type
        if beam_type == BeamType.PLANE:
            setup = self._init_plane()
        elif beam_type in _GAUSSIAN_TITLES:
            setup = self._init_gaussian(symmetry)
        elif beam_type == BeamType.READ:
            setup = self._init_read(symmetry)
        else:
            raise BeamError(f"Unknown type of incident beam ({beam_type})")

        if setup.description:
            logger.info(f"Incident beam: {setup.description}")
        return setup

    def _describe(self, text: str) -> str:
        """Description is only produced on the coordinating process."""
        return text if self.state.is_root else ""

    def _init_plane(self) -> BeamSetup:
        substrate = self.state.substrate
        description = self._describe("plane wave")
        if substrate is None:
            return BeamSetup(derived=PlaneWaveState(), description=description)

        if self.state.rotation is not None:
            raise BeamConfigurationError(
                "Particle orientation cannot be combined with a substrate, since the "
                "interface is fixed in the laboratory frame"
            )

        prop = self.state.prop_lab
        msub = substrate.refractive_index
        transverse2 = prop[0] ** 2 + prop[1] ** 2
        kt = None
        kt_vec = None

        if prop[2] > 0:
            logger.debug("Plane wave comes from the substrate side")
            if substrate.is_perfect_reflector:
                raise BeamConfigurationError(
                    "Beam cannot come from a perfectly reflecting substrate; "
                    "the propagation direction must have negative z-component"
                )
            ki = msub * prop[2]
            kt = sqrt_cut(1 - msub * msub * transverse2)
            kt_vec = np.array([msub * prop[0], msub * prop[1], kt], dtype=np.complex128)
        elif prop[2] < 0:
            logger.debug("Plane wave comes from above the substrate")
            ki = complex(-prop[2])
            if not substrate.is_perfect_reflector:
                kt = sqrt_cut(msub * msub - transverse2)
                kt_vec = np.array([prop[0], prop[1], -kt], dtype=np.complex128)
        else:
            raise BeamConfigurationError(
                "Ambiguous setting of beam propagating along the surface. Please specify the "
                "incident direction to have (arbitrary) small positive or negative z-component"
            )

        transmitted = None
        if kt_vec is not None and np.any(kt_vec.real != 0):
            transmitted = normalize(kt_vec.real)
        elif kt_vec is not None:
            logger.warning("Transmitted wave is purely evanescent; its propagation direction is undefined")

        derived = SubstratePlaneWaveState(
            from_below=bool(prop[2] > 0),
            ki=complex(ki),
            kt=kt,
            kt_vec=kt_vec,
            reflected_direction=reflect(prop),
            transmitted_direction=transmitted,
            substrate=substrate,
        )
        return BeamSetup(derived=derived, description=description)

    def _init_gaussian(self, symmetry: SymmetryFlags) -> BeamSetup:
        beam_type = self.config.beam_type
        if self.state.substrate is not None:
            raise BeamConfigurationError("Currently, Gaussian incident beam is not supported with a substrate")

        w0 = self.config.width
        if not w0 > 0:
            raise BeamConfigurationError(f"beam width ({_fmt(w0)}) must be positive")

        center_lab = np.array(self.config.center, dtype=np.float64)
        asymmetric = bool(np.any(center_lab != 0))
        if asymmetric:
            if center_lab[0] != 0:
                symmetry.clear("x", "r")
            if center_lab[1] != 0:
                symmetry.clear("y", "r")
            if center_lab[2] != 0:
                symmetry.clear("z")
            logger.debug(f"Beam center offset breaks symmetries, remaining: {symmetry.as_dict()}")
            center = self.state.to_particle_frame(center_lab)
        else:
            center = np.zeros(3)

        s = 1 / (self.state.wavenumber * w0)
        scale_x = 1 / w0
        derived = GaussianBeamState(
            beam_type=beam_type,
            width=w0,
            s=s,
            s2=s * s,
            scale_x=scale_x,
            scale_z=s * scale_x,  # 1/(k*w0^2)
            center_lab=center_lab,
            center=center,
            asymmetric=asymmetric,
        )

        description = f"Gaussian beam ({_GAUSSIAN_TITLES[beam_type]})\n"
        description += f"\tWidth={_fmt(w0)} (confinement factor s={_fmt(s)})\n"
        if asymmetric:
            description += "\tCenter position: " + " ".join(_fmt(c) for c in center_lab)
        else:
            description += "\tCenter is in the origin"

        return BeamSetup(derived=derived, description=self._describe(description))

    def _init_read(self, symmetry: SymmetryFlags) -> BeamSetup:
        # no structural assumption about the supplied field is safe
        symmetry.clear_all()
        sources = self.config.sources
        if len(sources) == 1:
            description = f"specified by file '{sources[0]}'"
        else:
            description = f"specified by files '{sources[0]}' and '{sources[1]}'"
        return BeamSetup(derived=FileBeamState(sources=sources), description=self._describe(description))


def initialize_beam(
    config: BeamConfiguration,
    state: PhysicalState,
    symmetry: SymmetryFlags,
) -> BeamSetup:
    """
    Convenience function for beam initialization.

    Args:
        config: Beam configuration
        state: Physical state
        symmetry: Symmetry flags, narrowed in place

    Returns:
        Beam setup for the field generator
    """
    return BeamInitializer(config, state).initialize(symmetry)
