"""API pública de cálculos químicos auxiliares."""

from .valence import implicit_hydrogens, TYPICAL_VALENCE

__all__ = [
    "implicit_hydrogens",
    "TYPICAL_VALENCE",
]
