"""
Exceptions raised by the beam generation code.

All of them are fatal for a run: they signal a configuration or model
error, never a transient condition.
"""

from __future__ import annotations

from typing import Optional


class BeamError(Exception):
    """Base class for incident-beam errors (also used for internal inconsistencies)."""


class BeamConfigurationError(BeamError, ValueError):
    """Invalid combination of beam parameters, substrate, or geometry."""


class FieldFileError(BeamError, IOError):
    """
    Failure to read or write a field or dipole-coordinate file.

    Attributes:
        path: File the error refers to (if known)
    """

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message)
