"""API pública del núcleo molecular.

Reexpone las clases base del modelo para facilitar importaciones.
"""

from core.errors import (
    GraphLookupError,
    MalformedRecordError,
    MolError,
    MolFormatError,
    MolParseError,
    OutOfRangeError,
)
from core.geometry import SpareDirection
from core.model import Atom, Bond, BondStereo, MolGraph, MolGraphBuilder

__all__ = [
    "Atom",
    "Bond",
    "BondStereo",
    "GraphLookupError",
    "MalformedRecordError",
    "MolError",
    "MolFormatError",
    "MolGraph",
    "MolGraphBuilder",
    "MolParseError",
    "OutOfRangeError",
    "SpareDirection",
]
