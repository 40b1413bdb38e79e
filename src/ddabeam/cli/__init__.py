"""
Command-line interface for ddabeam.

Provides the CLI tool for incident beam generation.
"""

from . import generate

__all__ = [
    "generate",
]
