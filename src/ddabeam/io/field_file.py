"""
Incident Field Files.

This module reads and writes the incident field on dipoles in the text
format shared with the run output: a header line followed by one row per
dipole with coordinates, squared field norm, and the real and imaginary
parts of the three field components.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

import numpy as np
from numpy.typing import NDArray

from ..exceptions import FieldFileError

logger = logging.getLogger(__name__)

FIELD_HEADER = "x y z |E|^2 Ex.r Ex.i Ey.r Ey.i Ez.r Ez.i"
N_COLUMNS = 10


class FieldReader(ABC):
    """
    Abstract source of an externally supplied incident field.

    Implementations return one complex 3-vector per dipole, ordered as the
    given coordinates, and raise FieldFileError on any failure.
    """

    @abstractmethod
    def read(self, source: str, coordinates: NDArray) -> NDArray:
        """
        Read the incident field for the given dipoles.

        Args:
            source: Identifier of the field source (file name)
            coordinates: Dipole coordinates, shape (N, 3)

        Returns:
            Complex field, shape (N, 3)
        """
        pass


class TextFieldReader(FieldReader):
    """
    Reader of text field files.

    The coordinates stored in the file must match the dipole coordinates
    of the current run, in the same order.
    """

    def __init__(self, rtol: float = 1e-5, atol: float = 1e-8):
        """
        Initialize reader.

        Args:
            rtol: Relative tolerance for coordinate comparison
            atol: Absolute tolerance for coordinate comparison
        """
        self.rtol = rtol
        self.atol = atol

    def read(self, source: str, coordinates: NDArray) -> NDArray:
        path = Path(source)
        if not path.is_file():
            raise FieldFileError("field file not found", path=str(path))

        try:
            data = np.loadtxt(path, skiprows=1, ndmin=2)
        except ValueError as e:
            raise FieldFileError(f"could not parse field file ({e})", path=str(path)) from e
        except OSError as e:
            raise FieldFileError(f"could not read field file ({e})", path=str(path)) from e

        coordinates = np.asarray(coordinates, dtype=np.float64).reshape(-1, 3)
        n_dipoles = coordinates.shape[0]
        if n_dipoles == 0 and data.size == 0:
            return np.zeros((0, 3), dtype=np.complex128)
        if data.shape[1] != N_COLUMNS:
            raise FieldFileError(
                f"expected {N_COLUMNS} columns, found {data.shape[1]}", path=str(path)
            )
        if data.shape[0] != n_dipoles:
            raise FieldFileError(
                f"number of rows ({data.shape[0]}) differs from number of dipoles ({n_dipoles})",
                path=str(path),
            )
        close = np.isclose(data[:, :3], coordinates, rtol=self.rtol, atol=self.atol)
        if not close.all():
            mismatch = int(np.argmax(~close.all(axis=1)))
            raise FieldFileError(
                f"dipole coordinates do not match the particle (first mismatch at row {mismatch + 2})",
                path=str(path),
            )

        field = data[:, 4::2] + 1j * data[:, 5::2]
        logger.debug(f"Read incident field for {n_dipoles} dipoles from {path}")
        return field.astype(np.complex128)


def write_field(path: Union[str, Path], coordinates: NDArray, field: NDArray) -> Path:
    """
    Write field on dipoles to a text file.

    Args:
        path: Output file
        coordinates: Dipole coordinates, shape (N, 3)
        field: Complex field, shape (N, 3)

    Returns:
        Path of the written file
    """
    path = Path(path)
    coordinates = np.asarray(coordinates, dtype=np.float64).reshape(-1, 3)
    field = np.asarray(field, dtype=np.complex128).reshape(-1, 3)

    table = np.empty((coordinates.shape[0], N_COLUMNS), dtype=np.float64)
    table[:, :3] = coordinates
    table[:, 3] = np.sum(np.abs(field) ** 2, axis=1)
    table[:, 4::2] = field.real
    table[:, 5::2] = field.imag

    try:
        np.savetxt(path, table, fmt="%.10g", header=FIELD_HEADER, comments="")
    except OSError as e:
        raise FieldFileError(f"could not write field file ({e})", path=str(path)) from e
    logger.info(f"Saved field for {coordinates.shape[0]} dipoles to {path}")
    return path
