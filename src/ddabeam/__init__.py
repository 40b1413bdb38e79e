"""
ddabeam - Incident beams for the discrete-dipole approximation.

This package provides tools for:
- Plane-wave illumination, optionally above or below a planar substrate
- Gaussian beams in the L-, 3rd-order (Davis) and 5th-order (Barton) approximations
- Incident fields supplied by external files
- Tracking of problem symmetries broken by the incident beam

Example Usage:
    >>> from ddabeam.beam import BeamConfiguration, PhysicalState, SymmetryFlags
    >>> from ddabeam.beam import BeamInitializer, BeamFieldGenerator, IncPol
    >>> config = BeamConfiguration.from_args("davis3", "2.0")
    >>> state = PhysicalState.from_direction(1.0, [[0.0, 0.0, 0.0]])
    >>> setup = BeamInitializer(config, state).initialize(SymmetryFlags())
    >>> field = BeamFieldGenerator(state, setup).generate(IncPol.Y)
"""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING, Any

__version__ = "0.1.0"

# Lazy imports keep `import ddabeam` cheap for the CLI
_LAZY_IMPORTS = {
    # Beam module
    "BeamType": "ddabeam.beam",
    "BeamConfiguration": "ddabeam.beam",
    "SubstrateConfig": "ddabeam.beam",
    "IncPol": "ddabeam.beam",
    "PhysicalState": "ddabeam.beam",
    "SymmetryFlags": "ddabeam.beam",
    "BeamSetup": "ddabeam.beam",
    "BeamInitializer": "ddabeam.beam",
    "BeamFieldGenerator": "ddabeam.beam",
    "SecondaryWaves": "ddabeam.beam",
    "initialize_beam": "ddabeam.beam",
    "generate_field": "ddabeam.beam",

    # IO module
    "FieldReader": "ddabeam.io",
    "TextFieldReader": "ddabeam.io",
    "write_field": "ddabeam.io",

    # Exceptions
    "BeamError": "ddabeam.exceptions",
    "BeamConfigurationError": "ddabeam.exceptions",
    "FieldFileError": "ddabeam.exceptions",
}

# Submodules
_SUBMODULES = frozenset([
    "beam",
    "physics",
    "io",
    "cli",
    "exceptions",
])


def __getattr__(name: str) -> Any:
    """Lazy import handler for package attributes."""
    if name in _LAZY_IMPORTS:
        module = importlib.import_module(_LAZY_IMPORTS[name])
        return getattr(module, name)

    if name in _SUBMODULES:
        return importlib.import_module(f"ddabeam.{name}")

    raise AttributeError(f"module 'ddabeam' has no attribute '{name}'")


def __dir__() -> list[str]:
    """Return available attributes for autocomplete."""
    return list(_LAZY_IMPORTS.keys()) + list(_SUBMODULES) + ["__version__"]


if TYPE_CHECKING:
    from ddabeam.beam import (
        BeamConfiguration,
        BeamFieldGenerator,
        BeamInitializer,
        BeamSetup,
        BeamType,
        IncPol,
        PhysicalState,
        SecondaryWaves,
        SubstrateConfig,
        SymmetryFlags,
        generate_field,
        initialize_beam,
    )
    from ddabeam.exceptions import BeamConfigurationError, BeamError, FieldFileError
    from ddabeam.io import FieldReader, TextFieldReader, write_field


__all__ = [
    # Version info
    "__version__",
    # Beam
    "BeamType",
    "BeamConfiguration",
    "SubstrateConfig",
    "IncPol",
    "PhysicalState",
    "SymmetryFlags",
    "BeamSetup",
    "BeamInitializer",
    "BeamFieldGenerator",
    "SecondaryWaves",
    "initialize_beam",
    "generate_field",
    # IO
    "FieldReader",
    "TextFieldReader",
    "write_field",
    # Exceptions
    "BeamError",
    "BeamConfigurationError",
    "FieldFileError",
]
