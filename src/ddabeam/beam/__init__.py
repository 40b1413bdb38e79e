"""
Incident beam module.

This module provides beam configuration, the one-time beam initialization
(derived constants and symmetry narrowing) and the generation of the
incident field on dipoles.
"""

from .config import GAUSSIAN_TYPES, BeamConfiguration, BeamType, IncPol, SubstrateConfig
from .generator import BeamFieldGenerator, SecondaryWaves, generate_field
from .initializer import BeamInitializer, initialize_beam
from .state import (
    BeamSetup,
    DerivedBeamState,
    FileBeamState,
    GaussianBeamState,
    PhysicalState,
    PlaneWaveState,
    SubstratePlaneWaveState,
    SymmetryFlags,
    polarization_basis,
)

__all__ = [
    # Configuration
    "BeamType",
    "GAUSSIAN_TYPES",
    "BeamConfiguration",
    "SubstrateConfig",
    "IncPol",
    # State
    "PhysicalState",
    "SymmetryFlags",
    "polarization_basis",
    "BeamSetup",
    "DerivedBeamState",
    "PlaneWaveState",
    "SubstratePlaneWaveState",
    "GaussianBeamState",
    "FileBeamState",
    # Initialization
    "BeamInitializer",
    "initialize_beam",
    # Generation
    "BeamFieldGenerator",
    "SecondaryWaves",
    "generate_field",
]
