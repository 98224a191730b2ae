"""Detección de carbonos quirales por comparación recursiva de cadenas.

Un carbono es estereocentro si sus cuatro sustituyentes son distintos dos a
dos. Dos ramas se consideran equivalentes cuando coinciden en orden de
enlace, elemento, número de H y número de sustituyentes pesados, y además
cada sustituyente de la primera encuentra alguno equivalente en la segunda
(emparejamiento existencial, no biyectivo). La recursión se corta con un
presupuesto `ttl`; al agotarse, las ramas se dan por equivalentes, lo que
evita ciclos infinitos en anillos a costa de perder algún centro en anillos
grandes o cadenas largas.
"""

from __future__ import annotations

import logging
import math
from itertools import combinations
from typing import List, Optional, Sequence, Set, Tuple

from core.model import Bond, MolGraph
from .options import ChiralOptions

logger = logging.getLogger(__name__)


def initial_ttl(graph: MolGraph, options: Optional[ChiralOptions] = None) -> int:
    """Profundidad máxima de comparación: floor(ttl_base + sqrt(n_átomos))."""
    options = options or ChiralOptions()
    return int(math.floor(options.ttl_base + math.sqrt(graph.atom_count)))


def _is_terminal_hydrogen(graph: MolGraph, atom_id: int, options: ChiralOptions) -> bool:
    atom = graph.get_atom(atom_id)
    return atom.element == options.hydrogen_symbol and len(graph.bonds_of(atom_id)) == 1


def _split_substituents(
    graph: MolGraph,
    atom_id: int,
    came_from: Optional[int],
    options: ChiralOptions,
) -> Tuple[List[Bond], int]:
    """Separa los enlaces pesados de los H terminales.

    Args:
        graph: Grafo finalizado.
        atom_id: Átomo cuyos sustituyentes se clasifican.
        came_from: Átomo desde el que se llegó; su enlace se ignora.
        options: Opciones del análisis.

    Returns:
        Tupla `(enlaces_pesados, total_h)` donde `total_h` suma los H
        almacenados en el átomo y los H terminales enlazados.
    """
    hydrogens = graph.get_atom(atom_id).hydrogen_count
    heavy: List[Bond] = []
    for bond in graph.bonds_of(atom_id):
        other = bond.other(atom_id)
        if other == came_from:
            continue
        if _is_terminal_hydrogen(graph, other, options):
            hydrogens += 1
        else:
            heavy.append(bond)
    return heavy, hydrogens


def _chains_equivalent(
    graph: MolGraph,
    center1: int,
    center2: int,
    bond1: Bond,
    bond2: Bond,
    ttl: int,
    options: ChiralOptions,
) -> bool:
    if bond1.order != bond2.order:
        return False

    far1 = bond1.other(center1)
    far2 = bond2.other(center2)
    if graph.get_atom(far1).element != graph.get_atom(far2).element:
        return False

    heavy1, hydrogens1 = _split_substituents(graph, far1, center1, options)
    heavy2, hydrogens2 = _split_substituents(graph, far2, center2, options)
    if hydrogens1 != hydrogens2 or len(heavy1) != len(heavy2):
        return False

    if ttl < 0:
        return True

    for sub1 in heavy1:
        if not any(
            _chains_equivalent(graph, far1, far2, sub1, sub2, ttl - 1, options)
            for sub2 in heavy2
        ):
            return False
    return True


def compare_chains(
    graph: MolGraph,
    center_id: int,
    bond1_id: int,
    bond2_id: int,
    options: Optional[ChiralOptions] = None,
) -> bool:
    """Indica si dos ramas que parten de un mismo centro son equivalentes.

    Args:
        graph: Grafo finalizado.
        center_id: Átomo común a ambos enlaces.
        bond1_id: Enlace de la primera rama.
        bond2_id: Enlace de la segunda rama.
        options: Opciones del análisis.

    Returns:
        `True` si las ramas no se distinguen dentro del presupuesto `ttl`.
    """
    options = options or ChiralOptions()
    return _chains_equivalent(
        graph,
        center_id,
        center_id,
        graph.get_bond(bond1_id),
        graph.get_bond(bond2_id),
        initial_ttl(graph, options),
        options,
    )


# La comparación no es simétrica; con tres ramas el último par se evalúa
# desde la tercera.
_THREE_BRANCH_PAIRS = ((0, 1), (0, 2), (2, 1))


def _comparison_pairs(count: int) -> Sequence[Tuple[int, int]]:
    if count == 3:
        return _THREE_BRANCH_PAIRS
    return list(combinations(range(count), 2))


def is_chiral_carbon(
    graph: MolGraph,
    atom_id: int,
    options: Optional[ChiralOptions] = None,
) -> bool:
    """Evalúa si un átomo es un carbono quiral.

    Solo se aceptan dos formas: cuatro sustituyentes pesados sin H, o tres
    sustituyentes pesados y exactamente un H (implícito o terminal).

    Args:
        graph: Grafo finalizado.
        atom_id: Índice del átomo.
        options: Opciones del análisis.

    Returns:
        `True` si ningún par de sustituyentes es equivalente.
    """
    options = options or ChiralOptions()
    if graph.get_atom(atom_id).element != options.carbon_symbol:
        return False
    if any(bond.order != 1 for bond in graph.bonds_of(atom_id)):
        return False

    heavy, hydrogens = _split_substituents(graph, atom_id, None, options)
    if not ((len(heavy) == 4 and hydrogens == 0) or (len(heavy) == 3 and hydrogens == 1)):
        return False

    ttl = initial_ttl(graph, options)
    for i, j in _comparison_pairs(len(heavy)):
        bond1, bond2 = heavy[i], heavy[j]
        if _chains_equivalent(graph, atom_id, atom_id, bond1, bond2, ttl, options):
            return False
    return True


def find_chiral_carbons(graph: MolGraph, options: Optional[ChiralOptions] = None) -> Set[int]:
    """Devuelve los índices de todos los carbonos quirales del grafo."""
    options = options or ChiralOptions()
    chiral = {atom.id for atom in graph.atoms if is_chiral_carbon(graph, atom.id, options)}
    logger.debug("Found %d chiral carbons in %r", len(chiral), graph)
    return chiral
