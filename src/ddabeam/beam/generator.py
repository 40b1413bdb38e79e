"""
Incident Field Generation.

This module fills the incident electric field at every local dipole for
the beam prepared by BeamInitializer. It is called at least once per
incident polarization, every time the propagation direction or particle
orientation changes.
"""

from __future__ import annotations

import cmath
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from ..exceptions import BeamConfigurationError, BeamError
from ..io import FieldReader, TextFieldReader
from ..physics import (
    barton5_weights,
    davis3_weights,
    fresnel_rp,
    fresnel_rs,
    fresnel_tp,
    fresnel_ts,
    fundamental_amplitude,
    inverse_reflect,
    lminus_weights,
)
from .config import BeamType, IncPol
from .state import (
    BeamSetup,
    FileBeamState,
    GaussianBeamState,
    PhysicalState,
    PlaneWaveState,
    SubstratePlaneWaveState,
)

logger = logging.getLogger(__name__)

_GAUSSIAN_WEIGHTS = {
    BeamType.LMINUS: lminus_weights,
    BeamType.DAVIS3: davis3_weights,
    BeamType.BARTON5: barton5_weights,
}


@dataclass
class SecondaryWaves:
    """
    Complex amplitudes of the waves produced by the substrate.

    Phases are relative to the particle origin. When the substrate index is
    complex the transmitted wave is inhomogeneous and its polarization
    vector e is normalized so that (e, e) = 1 rather than ||e|| = 1, which
    matches the transmission coefficients used; the transmitted amplitude
    is then not simply the ratio of field magnitudes.

    Attributes:
        reflected: Reflected wave amplitude and polarization
        transmitted: Transmitted wave amplitude and polarization
            (None for a perfect reflector)
    """

    reflected: NDArray
    transmitted: Optional[NDArray]


class BeamFieldGenerator:
    """
    Generator of the incident field on dipoles.

    The beam reference frame has ez along the propagation direction and ex
    along the incident polarization; ey completes the right-handed triple.

    Attributes:
        state: Physical state (dipole coordinates, directions)
        setup: Result of beam initialization
        reader: Source of externally supplied fields
        secondary_waves: Reflected/transmitted amplitudes of the last call
            that used the substrate; stale after other calls
    """

    def __init__(
        self,
        state: PhysicalState,
        setup: BeamSetup,
        reader: Optional[FieldReader] = None,
    ):
        """
        Initialize generator.

        Args:
            state: Physical state consistent with the one used for initialization
            setup: Beam setup produced by BeamInitializer
            reader: Field reader for file-supplied beams (text files by default)
        """
        self.state = state
        self.setup = setup
        self.reader = reader or TextFieldReader()
        self.secondary_waves: Optional[SecondaryWaves] = None

    def beam_frame(self, which: IncPol) -> Tuple[NDArray, NDArray]:
        """
        Polarization axes of the beam frame.

        Args:
            which: Incident polarization

        Returns:
            Tuple of (ex, ey)
        """
        if which == IncPol.Y:
            return self.state.inc_pol_y, -self.state.inc_pol_x
        return self.state.inc_pol_x, self.state.inc_pol_y

    def generate(self, which: IncPol, out: Optional[NDArray] = None) -> NDArray:
        """
        Generate the incident field at every dipole.

        Args:
            which: Incident polarization
            out: Optional buffer of shape (N, 3), complex; fully overwritten

        Returns:
            Incident field, ordered as the dipole coordinates

        Raises:
            BeamError: If the beam setup is inconsistent
            FieldFileError: If an externally supplied field cannot be read
        """
        n_dipoles = self.state.n_dipoles
        if out is None:
            out = np.empty((n_dipoles, 3), dtype=np.complex128)
        elif out.shape != (n_dipoles, 3):
            raise BeamError(f"Field buffer shape {out.shape} does not match {n_dipoles} dipoles")

        ex, ey = self.beam_frame(which)
        derived = self.setup.derived

        if isinstance(derived, PlaneWaveState):
            out[:] = self._phase(self.state.prop)[:, None] * ex
        elif isinstance(derived, SubstratePlaneWaveState):
            if derived.from_below:
                self._substrate_from_below(derived, which, ex, ey, out)
            else:
                self._substrate_from_above(derived, which, ex, ey, out)
        elif isinstance(derived, GaussianBeamState):
            self._gaussian(derived, ex, ey, out)
        elif isinstance(derived, FileBeamState):
            out[:] = self._read(derived, which)
        else:
            raise BeamError(f"Unknown type of incident beam ({type(derived).__name__})")

        return out

    def _phase(self, direction: NDArray) -> NDArray:
        """exp(ik r.direction) for every dipole."""
        return np.exp(1j * self.state.wavenumber * (self.state.dipole_coords @ direction))

    def _substrate_from_below(
        self,
        derived: SubstratePlaneWaveState,
        which: IncPol,
        ex: NDArray,
        ey: NDArray,
        out: NDArray,
    ) -> None:
        """
        Beam comes from the substrate; only the transmitted wave reaches the dipoles.

        The original beam is exp(ik*msub*r.a)/sqrt(Re(msub)), normalized to
        the irradiance of a unit-amplitude wave in vacuum.
        """
        k = self.state.wavenumber
        msub = derived.substrate.refractive_index
        hsub = derived.substrate.height
        ki, kt = derived.ki, derived.kt

        if which == IncPol.Y:  # s-polarized
            e_refl = ex.astype(np.complex128)
            e_tran = ex.astype(np.complex128)
            rc = fresnel_rs(ki, kt)
            tc = fresnel_ts(ki, kt)
        else:  # p-polarized
            e_refl = inverse_reflect(ex).astype(np.complex128)
            e_tran = np.cross(ey, derived.kt_vec)
            rc = fresnel_rp(ki, kt, 1 / msub)
            tc = fresnel_tp(ki, kt, 1 / msub)

        # phase shift due to the origin at height hsub
        norm = 1 / np.sqrt(msub.real)
        e_refl = e_refl * (rc * cmath.exp(-2j * k * ki * hsub) * norm)
        e_tran = e_tran * (tc * cmath.exp(1j * k * (kt - ki) * hsub) * norm)
        self.secondary_waves = SecondaryWaves(reflected=e_refl, transmitted=e_tran)

        phase = np.exp(1j * k * (self.state.dipole_coords @ derived.kt_vec))
        out[:] = phase[:, None] * e_tran

    def _substrate_from_above(
        self,
        derived: SubstratePlaneWaveState,
        which: IncPol,
        ex: NDArray,
        ey: NDArray,
        out: NDArray,
    ) -> None:
        """Beam comes from above; dipoles see the incident plus the reflected wave."""
        k = self.state.wavenumber
        substrate = derived.substrate
        msub = substrate.refractive_index
        hsub = substrate.height
        perfect = substrate.is_perfect_reflector
        ki, kt = derived.ki, derived.kt
        e_tran = None

        if which == IncPol.Y:  # s-polarized
            e_refl = ex.astype(np.complex128)
            if perfect:
                rc = -1.0
            else:
                e_tran = ex.astype(np.complex128)
                rc = fresnel_rs(ki, kt)
                tc = fresnel_ts(ki, kt)
        else:  # p-polarized
            e_refl = inverse_reflect(ex).astype(np.complex128)
            if perfect:
                rc = 1.0
            else:
                # normalized by ||kt_vec|| = msub
                e_tran = np.cross(ey, derived.kt_vec) / msub
                rc = fresnel_rp(ki, kt, msub)
                tc = fresnel_tp(ki, kt, msub)

        # phase shift due to the origin at height hsub
        e_refl = e_refl * (rc * cmath.exp(2j * k * ki * hsub))
        if e_tran is not None:
            e_tran = e_tran * (tc * cmath.exp(1j * k * (ki - kt) * hsub))
        self.secondary_waves = SecondaryWaves(reflected=e_refl, transmitted=e_tran)

        incident = self._phase(self.state.prop)
        reflected = self._phase(derived.reflected_direction)
        out[:] = incident[:, None] * ex + reflected[:, None] * e_refl

    def _gaussian(
        self,
        derived: GaussianBeamState,
        ex: NDArray,
        ey: NDArray,
        out: NDArray,
    ) -> None:
        """Gaussian beam of any order, in the beam's scaled coordinates."""
        prop = self.state.prop
        r1 = self.state.dipole_coords - derived.center
        x = (r1 @ ex) * derived.scale_x
        y = (r1 @ ey) * derived.scale_x
        z0 = r1 @ prop
        z = z0 * derived.scale_z
        rho2 = x * x + y * y

        q, psi0 = fundamental_amplitude(rho2, z)
        # carrier phase uses the non-scaled longitudinal coordinate
        ctemp = np.exp(1j * self.state.wavenumber * z0) * psi0

        weights = _GAUSSIAN_WEIGHTS.get(derived.beam_type)
        if weights is None:
            raise BeamError("Inconsistency in beam definition")
        t1, t2, t3 = weights(x, y, rho2, q, derived.s, derived.s2)

        out[:] = ctemp[:, None] * (t1[:, None] * ex + t2[:, None] * ey + t3[:, None] * prop)

    def _read(self, derived: FileBeamState, which: IncPol) -> NDArray:
        if which == IncPol.Y:
            source = derived.sources[0]
        elif len(derived.sources) > 1:
            source = derived.sources[1]
        else:
            raise BeamConfigurationError(
                "Incident field for X polarization requires a second field file"
            )
        logger.debug(f"Reading incident field ({which.value} polarization) from {source}")
        return self.reader.read(source, self.state.dipole_coords)


def generate_field(
    state: PhysicalState,
    setup: BeamSetup,
    which: IncPol = IncPol.Y,
    reader: Optional[FieldReader] = None,
) -> NDArray:
    """
    Convenience function for field generation.

    Args:
        state: Physical state
        setup: Beam setup from BeamInitializer
        which: Incident polarization
        reader: Field reader for file-supplied beams

    Returns:
        Incident field, shape (N, 3)
    """
    return BeamFieldGenerator(state, setup, reader=reader).generate(which)
