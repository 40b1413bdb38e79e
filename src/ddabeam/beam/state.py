"""
Physical State and Derived Beam State.

This module holds the context the beam code reads (wavenumber, incident
directions, dipole coordinates), the narrowing-only symmetry record, and
one derived-state dataclass per beam model.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.spatial.transform import Rotation

from ..exceptions import BeamError
from .config import BeamType, SubstrateConfig

_FLAG_NAMES = ("x", "y", "z", "r")


def polarization_basis(prop: ArrayLike) -> Tuple[NDArray, NDArray]:
    """
    Default incident polarization basis for a propagation direction.

    Returns theta-hat and phi-hat of the spherical frame aligned with prop,
    so that inc_pol_x x inc_pol_y = prop. For prop along z the basis is
    ((prop_z, 0, 0), (0, 1, 0)).

    Args:
        prop: Unit propagation direction

    Returns:
        Tuple of (inc_pol_x, inc_pol_y)
    """
    prop = np.asarray(prop, dtype=np.float64)
    if abs(prop[2]) >= 1:
        return np.array([prop[2], 0.0, 0.0]), np.array([0.0, 1.0, 0.0])
    sin_theta = np.sqrt(1 - prop[2] ** 2)
    inc_pol_x = np.array(
        [prop[0] * prop[2] / sin_theta, prop[1] * prop[2] / sin_theta, -sin_theta]
    )
    inc_pol_y = np.array([-prop[1] / sin_theta, prop[0] / sin_theta, 0.0])
    return inc_pol_x, inc_pol_y


@dataclass(frozen=True)
class PhysicalState:
    """
    Process-wide physical state read by the beam code.

    Vectors without a suffix are in the particle reference frame, in which
    dipole coordinates are given.

    Attributes:
        wavenumber: Wavenumber of the incident light in the ambient medium
        prop: Propagation direction
        inc_pol_x: Incident polarization X (p-polarization)
        inc_pol_y: Incident polarization Y (s-polarization)
        dipole_coords: Coordinates of local dipoles, shape (N, 3)
        prop_lab: Propagation direction in the laboratory frame
        rotation: Lab-to-particle rotation (None for the default orientation)
        substrate: Optional substrate configuration
        is_root: Whether this process produces descriptive output
    """

    wavenumber: float
    prop: NDArray
    inc_pol_x: NDArray
    inc_pol_y: NDArray
    dipole_coords: NDArray
    prop_lab: Optional[NDArray] = None
    rotation: Optional[Rotation] = None
    substrate: Optional[SubstrateConfig] = None
    is_root: bool = True

    def __post_init__(self) -> None:
        for name in ("prop", "inc_pol_x", "inc_pol_y"):
            object.__setattr__(self, name, np.asarray(getattr(self, name), dtype=np.float64))
        coords = np.asarray(self.dipole_coords, dtype=np.float64).reshape(-1, 3)
        object.__setattr__(self, "dipole_coords", coords)
        if self.prop_lab is None:
            object.__setattr__(self, "prop_lab", self.prop.copy())
        else:
            object.__setattr__(self, "prop_lab", np.asarray(self.prop_lab, dtype=np.float64))

    @property
    def n_dipoles(self) -> int:
        """Number of locally owned dipoles."""
        return self.dipole_coords.shape[0]

    def to_particle_frame(self, vector: ArrayLike) -> NDArray:
        """Transform a laboratory-frame vector into the particle frame."""
        vector = np.asarray(vector, dtype=np.float64)
        if self.rotation is None:
            return vector.copy()
        return self.rotation.apply(vector)

    @classmethod
    def from_direction(
        cls,
        wavenumber: float,
        dipole_coords: ArrayLike,
        prop: Sequence[float] = (0.0, 0.0, 1.0),
        orientation: Optional[Sequence[float]] = None,
        substrate: Optional[SubstrateConfig] = None,
        is_root: bool = True,
    ) -> "PhysicalState":
        """
        Build state from a laboratory propagation direction.

        Args:
            wavenumber: Wavenumber of the incident light
            dipole_coords: Dipole coordinates, shape (N, 3)
            prop: Propagation direction in the laboratory frame (normalized here)
            orientation: Particle Euler angles (alpha, beta, gamma) in degrees,
                zyz convention; None keeps the particle frame equal to the lab one
            substrate: Optional substrate
            is_root: Whether this process produces descriptive output

        Returns:
            Physical state with the default polarization basis
        """
        prop_lab = np.asarray(prop, dtype=np.float64)
        prop_lab = prop_lab / np.linalg.norm(prop_lab)
        pol_x, pol_y = polarization_basis(prop_lab)

        rotation = None
        if orientation is not None and any(angle != 0 for angle in orientation):
            rotation = Rotation.from_euler("ZYZ", list(orientation), degrees=True).inv()
            prop_particle = rotation.apply(prop_lab)
            pol_x = rotation.apply(pol_x)
            pol_y = rotation.apply(pol_y)
        else:
            prop_particle = prop_lab.copy()

        return cls(
            wavenumber=float(wavenumber),
            prop=prop_particle,
            inc_pol_x=pol_x,
            inc_pol_y=pol_y,
            dipole_coords=np.asarray(dipole_coords, dtype=np.float64),
            prop_lab=prop_lab,
            rotation=rotation,
            substrate=substrate,
            is_root=is_root,
        )


@dataclass
class SymmetryFlags:
    """
    Symmetries of the whole problem, used to reduce the computational grid.

    Flags start true and may only be cleared; every factor breaking a
    symmetry (shape, beam, substrate) clears the corresponding flag.

    Attributes:
        x: Reflection over the YZ plane
        y: Reflection over the XZ plane
        z: Reflection over the XY plane
        r: Rotation by 90 degrees about the z axis
    """

    x: bool = True
    y: bool = True
    z: bool = True
    r: bool = True

    def __setattr__(self, name: str, value: bool) -> None:
        if name in _FLAG_NAMES and value and not getattr(self, name, True):
            raise BeamError(f"Symmetry flag '{name}' cannot be restored once cleared")
        super().__setattr__(name, bool(value))

    def clear(self, *names: str) -> None:
        """Clear the given flags ("x", "y", "z", "r")."""
        for name in names:
            if name not in _FLAG_NAMES:
                raise BeamError(f"Unknown symmetry flag '{name}'")
            setattr(self, name, False)

    def clear_all(self) -> None:
        """Clear every symmetry flag."""
        self.clear(*_FLAG_NAMES)

    def as_dict(self) -> dict:
        """Flags as a name -> value mapping."""
        return {name: getattr(self, name) for name in _FLAG_NAMES}


@dataclass(frozen=True)
class PlaneWaveState:
    """Plane wave in free space; needs no derived constants."""

    beam_type: BeamType = field(default=BeamType.PLANE, init=False)


@dataclass(frozen=True)
class SubstratePlaneWaveState:
    """
    Plane wave in the presence of a substrate.

    Wavevector components are in units of the vacuum wavenumber.

    Attributes:
        from_below: Whether the beam comes from the substrate side
        ki: Normal component of the incident wavevector (absolute value)
        kt: Normal component of the transmitted wavevector; None for a perfect reflector
        kt_vec: Full transmitted wavevector; None for a perfect reflector
        reflected_direction: Propagation direction of the reflected wave
        transmitted_direction: Real unit propagation direction of the
            transmitted wave; None for a perfect reflector or when the
            transmitted wave is purely evanescent (real part of kt_vec is zero)
        substrate: Substrate the constants were derived for
    """

    from_below: bool
    ki: complex
    kt: Optional[complex]
    kt_vec: Optional[NDArray]
    reflected_direction: NDArray
    transmitted_direction: Optional[NDArray]
    substrate: SubstrateConfig
    beam_type: BeamType = field(default=BeamType.PLANE, init=False)


@dataclass(frozen=True)
class GaussianBeamState:
    """
    Gaussian beam of one of the three orders.

    Attributes:
        beam_type: Order of the approximation
        width: Beam width (waist radius)
        s: Confinement factor 1/(k*w0)
        s2: Square of the confinement factor
        scale_x: Multiplier for transverse coordinates, 1/w0
        scale_z: Multiplier for the longitudinal coordinate, 1/(k*w0^2)
        center_lab: Beam center in the laboratory frame
        center: Beam center in the particle frame
        asymmetric: Whether the beam center differs from the origin
    """

    beam_type: BeamType
    width: float
    s: float
    s2: float
    scale_x: float
    scale_z: float
    center_lab: NDArray
    center: NDArray
    asymmetric: bool


@dataclass(frozen=True)
class FileBeamState:
    """Incident field supplied by files (Y polarization first)."""

    sources: Tuple[str, ...]
    beam_type: BeamType = field(default=BeamType.READ, init=False)


DerivedBeamState = Union[PlaneWaveState, SubstratePlaneWaveState, GaussianBeamState, FileBeamState]


@dataclass(frozen=True)
class BeamSetup:
    """
    Result of beam initialization.

    Attributes:
        derived: Constants used by the field generator
        description: Human-readable beam description (empty on non-root processes)
    """

    derived: DerivedBeamState
    description: str = ""

    @property
    def asymmetric(self) -> bool:
        """Whether the beam center is shifted from the origin."""
        return bool(getattr(self.derived, "asymmetric", False))

    @property
    def center(self) -> NDArray:
        """Beam center in the particle frame (origin for beams without one)."""
        center = getattr(self.derived, "center", None)
        if center is None:
            return np.zeros(3)
        return np.asarray(center, dtype=np.float64)
