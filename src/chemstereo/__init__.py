"""Detección de carbonos quirales sobre grafos moleculares finalizados.

Heurística local de comparación de cadenas (no es una ordenación CIP):
- Solo carbonos con cuatro sustituyentes por enlace simple.
- Un H implícito o terminal puede ocupar la cuarta posición.
- Las ramas se comparan por elemento, orden de enlace, H y número de
  sustituyentes, nivel a nivel hasta agotar la profundidad `ttl`.
"""

from .chiral import compare_chains, find_chiral_carbons, is_chiral_carbon
from .options import ChiralOptions

__all__ = ["compare_chains", "find_chiral_carbons", "is_chiral_carbon", "ChiralOptions"]
