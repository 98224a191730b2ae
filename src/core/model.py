"""Modelos de datos base del lector molecular.

Este módulo concentra las estructuras que representan el grafo molecular
(átomos y enlaces). La construcción ocurre en dos fases: `MolGraphBuilder`
acepta átomos, enlaces y las modificaciones de los bloques de propiedades;
`MolGraphBuilder.finalize` calcula los datos derivados una sola vez y
entrega un `MolGraph` inmutable que el resto de la aplicación (análisis de
quiralidad, etiquetas, puente con RDKit) consulta sin modificarlo.

Los átomos y enlaces se identifican por su índice 1-based (`id`), estable
durante toda la vida del grafo.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple, Union

from chemcalc.valence import implicit_hydrogens
from core.errors import GraphLookupError, OutOfRangeError
from core.geometry import (
    SpareDirection,
    axis_clearances,
    bond_axis_angle,
    choose_spare_direction,
    distance,
    is_linear_pair,
)

logger = logging.getLogger(__name__)

VALID_BOND_ORDERS = (1, 2, 3)


class BondStereo(str, Enum):
    """Categorías de estereoquímica declaradas en un enlace."""
    NONE = "none"
    UP = "up"
    DOWN = "down"  # cuña hacia abajo o doble enlace cis/trans sin definir


@dataclass(frozen=True)
class Atom:
    """Representa un átomo en el grafo molecular."""
    id: int
    element: str
    x: float
    y: float
    z: float = 0.0
    charge: int = 0
    isotope: int = 0
    unpaired_electrons: int = 0
    hydrogen_count: int = 0
    map_number: int = 0
    explicit_show: bool = False
    spare_direction: SpareDirection = SpareDirection.UNSPECIFIED

    @property
    def xy(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class Bond:
    """Representa un enlace químico entre dos átomos (a1 = origen, a2 = destino)."""
    id: int
    a1_id: int
    a2_id: int
    order: int = 1
    stereo: BondStereo = BondStereo.NONE

    def other(self, atom_id: int) -> int:
        """Devuelve el extremo opuesto a `atom_id`."""
        return self.a2_id if self.a1_id == atom_id else self.a1_id

    def touches(self, atom_id: int) -> bool:
        return self.a1_id == atom_id or self.a2_id == atom_id


class MolGraph:
    """Grafo molecular finalizado de solo lectura."""

    def __init__(
        self,
        atoms: Sequence[Atom],
        bonds: Sequence[Bond],
        average_bond_length: float = 0.0,
    ) -> None:
        """Registra átomos y enlaces y construye el índice de adyacencia.

        Args:
            atoms: Átomos ordenados por `id` (1..n).
            bonds: Enlaces ordenados por `id` (1..m).
            average_bond_length: Longitud media de enlace ya calculada.

        Raises:
            GraphLookupError: Si algún enlace apunta a un átomo inexistente.
        """
        self.atoms: Tuple[Atom, ...] = tuple(atoms)
        self.bonds: Tuple[Bond, ...] = tuple(bonds)
        self.average_bond_length = average_bond_length
        self._bbox: Optional[Tuple[float, float, float, float]] = None
        self._bonds_by_atom: Dict[int, Tuple[Bond, ...]] = _index_bonds(self.atoms, self.bonds)

    def __repr__(self) -> str:
        return f"MolGraph(atoms={len(self.atoms)}, bonds={len(self.bonds)})"

    @property
    def atom_count(self) -> int:
        return len(self.atoms)

    @property
    def bond_count(self) -> int:
        return len(self.bonds)

    def get_atom(self, atom_id: int) -> Atom:
        """Obtiene un átomo por su índice 1-based.

        Args:
            atom_id: Índice del átomo.

        Returns:
            El átomo correspondiente.

        Raises:
            GraphLookupError: Si el índice está fuera de rango.
        """
        if 0 < atom_id <= len(self.atoms):
            return self.atoms[atom_id - 1]
        raise GraphLookupError(f"Atoms: get {atom_id}, totalAtoms={len(self.atoms)}")

    def get_bond(self, bond_id: int) -> Bond:
        """Obtiene un enlace por su índice 1-based.

        Raises:
            GraphLookupError: Si el índice está fuera de rango.
        """
        if 0 < bond_id <= len(self.bonds):
            return self.bonds[bond_id - 1]
        raise GraphLookupError(f"Bonds: get {bond_id}, totalBonds={len(self.bonds)}")

    def bonds_of(self, atom_id: int) -> Tuple[Bond, ...]:
        """Devuelve los enlaces declarados de un átomo, en orden de declaración.

        Raises:
            GraphLookupError: Si el índice está fuera de rango.
        """
        try:
            return self._bonds_by_atom[atom_id]
        except KeyError:
            raise GraphLookupError(
                f"bonds_of: get {atom_id}, totalAtoms={len(self.atoms)}"
            ) from None

    def neighbors(self, atom_id: int) -> List[int]:
        return [bond.other(atom_id) for bond in self.bonds_of(atom_id)]

    def bond_order_sum(self, atom_id: int) -> int:
        return sum(bond.order for bond in self.bonds_of(atom_id))

    def index_of(self, item: Union[Atom, Bond]) -> Optional[int]:
        """Devuelve el índice de un átomo o enlace si pertenece a este grafo.

        El índice viaja con el objeto (`item.id`); solo se verifica que el
        objeto sea exactamente el almacenado en esa posición.
        """
        pool = self.atoms if isinstance(item, Atom) else self.bonds
        if 0 < item.id <= len(pool) and pool[item.id - 1] is item:
            return item.id
        return None

    def nearest_atom_id(self, x: float, y: float, tolerance: float) -> Optional[int]:
        """Busca el átomo más cercano a un punto.

        Se recorren todos los átomos; ante empates gana el primero.

        Args:
            x: Coordenada X del punto.
            y: Coordenada Y del punto.
            tolerance: Distancia máxima aceptada.

        Returns:
            El índice del átomo, o `None` si el grafo está vacío o el más
            cercano queda fuera de la tolerancia.
        """
        if not self.atoms:
            return None
        best_id = self.atoms[0].id
        best = _squared_distance(self.atoms[0], x, y)
        for atom in self.atoms[1:]:
            current = _squared_distance(atom, x, y)
            if current < best:
                best = current
                best_id = atom.id
        if best > tolerance * tolerance:
            return None
        return best_id

    def _bounding_box(self) -> Tuple[float, float, float, float]:
        if self._bbox is None:
            if not self.atoms:
                self._bbox = (0.0, 0.0, 0.0, 0.0)
            else:
                xs = [atom.x for atom in self.atoms]
                ys = [atom.y for atom in self.atoms]
                self._bbox = (min(xs), min(ys), max(xs), max(ys))
        return self._bbox

    @property
    def min_x(self) -> float:
        return self._bounding_box()[0]

    @property
    def min_y(self) -> float:
        return self._bounding_box()[1]

    @property
    def max_x(self) -> float:
        return self._bounding_box()[2]

    @property
    def max_y(self) -> float:
        return self._bounding_box()[3]

    @property
    def range_x(self) -> float:
        return self.max_x - self.min_x

    @property
    def range_y(self) -> float:
        return self.max_y - self.min_y


class MolGraphBuilder:
    """Fase mutable de construcción de un `MolGraph`."""

    def __init__(self) -> None:
        """Inicializa listas vacías de átomos y enlaces."""
        self._atoms: List[Atom] = []
        self._bonds: List[Bond] = []
        self._graph: Optional[MolGraph] = None

    @property
    def atom_count(self) -> int:
        return len(self._atoms)

    @property
    def bond_count(self) -> int:
        return len(self._bonds)

    @property
    def finalized(self) -> bool:
        return self._graph is not None

    def add_atom(
        self,
        element: str,
        x: float,
        y: float,
        z: float = 0.0,
        charge: int = 0,
        isotope: int = 0,
        unpaired_electrons: int = 0,
        hydrogen_count: int = 0,
        map_number: int = 0,
        explicit_show: bool = False,
    ) -> Atom:
        """Crea y registra un átomo con el siguiente índice libre.

        Args:
            element: Símbolo del elemento químico (p. ej., "C", "Cl", "R1").
            x: Coordenada X.
            y: Coordenada Y.
            z: Coordenada Z (0 en dibujos 2D).
            charge: Carga formal del átomo.
            isotope: Número másico (0 = abundancia natural).
            unpaired_electrons: Electrones desapareados.
            hydrogen_count: H fijados de antemano; 0 deja que se calculen.
            map_number: Índice de mapeo de reacción.
            explicit_show: Si el símbolo debe mostrarse siempre.

        Returns:
            El átomo creado.

        Side Effects:
            Modifica la lista interna de átomos.
        """
        self._check_open()
        if hydrogen_count < 0:
            raise ValueError(f"hydrogen_count must be >= 0, got {hydrogen_count}")
        atom = Atom(
            id=len(self._atoms) + 1,
            element=element,
            x=x,
            y=y,
            z=z,
            charge=charge,
            isotope=isotope,
            unpaired_electrons=unpaired_electrons,
            hydrogen_count=hydrogen_count,
            map_number=map_number,
            explicit_show=explicit_show,
        )
        self._atoms.append(atom)
        return atom

    def add_bond(
        self,
        a1_id: int,
        a2_id: int,
        order: int = 1,
        stereo: BondStereo = BondStereo.NONE,
    ) -> Bond:
        """Crea y registra un enlace entre dos átomos existentes.

        Args:
            a1_id: Índice del átomo de origen.
            a2_id: Índice del átomo de destino.
            order: Orden de enlace (1, 2, 3).
            stereo: Estereoquímica declarada.

        Returns:
            El enlace creado.

        Raises:
            OutOfRangeError: Si algún extremo no existe.
            ValueError: Si ambos extremos coinciden o el orden no es válido.
        """
        self._check_open()
        self.get_atom(a1_id)
        self.get_atom(a2_id)
        if a1_id == a2_id:
            raise ValueError(f"bond endpoints must differ, got {a1_id}-{a2_id}")
        if order not in VALID_BOND_ORDERS:
            raise ValueError(f"unsupported bond order {order}")
        bond = Bond(id=len(self._bonds) + 1, a1_id=a1_id, a2_id=a2_id, order=order, stereo=stereo)
        self._bonds.append(bond)
        return bond

    def get_atom(self, atom_id: int) -> Atom:
        if 0 < atom_id <= len(self._atoms):
            return self._atoms[atom_id - 1]
        raise OutOfRangeError(f"Atoms: get {atom_id}, totalAtoms={len(self._atoms)}")

    def get_bond(self, bond_id: int) -> Bond:
        if 0 < bond_id <= len(self._bonds):
            return self._bonds[bond_id - 1]
        raise OutOfRangeError(f"Bonds: get {bond_id}, totalBonds={len(self._bonds)}")

    def update_atom(
        self,
        atom_id: int,
        element: Optional[str] = None,
        charge: Optional[int] = None,
        isotope: Optional[int] = None,
        unpaired_electrons: Optional[int] = None,
        hydrogen_count: Optional[int] = None,
        explicit_show: Optional[bool] = None,
    ) -> Atom:
        """Actualiza propiedades de un átomo existente.

        Solo se modifican los argumentos distintos de `None`.

        Returns:
            El átomo actualizado.

        Raises:
            OutOfRangeError: Si el índice no existe.
            RuntimeError: Si el grafo ya fue finalizado.
        """
        self._check_open()
        atom = self.get_atom(atom_id)
        changes = {
            name: value
            for name, value in (
                ("element", element),
                ("charge", charge),
                ("isotope", isotope),
                ("unpaired_electrons", unpaired_electrons),
                ("hydrogen_count", hydrogen_count),
                ("explicit_show", explicit_show),
            )
            if value is not None
        }
        atom = replace(atom, **changes)
        self._atoms[atom_id - 1] = atom
        return atom

    def update_bond(self, bond_id: int, stereo: Optional[BondStereo] = None) -> Bond:
        """Actualiza la estereoquímica declarada de un enlace existente."""
        self._check_open()
        bond = self.get_bond(bond_id)
        if stereo is not None:
            bond = replace(bond, stereo=stereo)
            self._bonds[bond_id - 1] = bond
        return bond

    def finalize(self) -> MolGraph:
        """Calcula los datos derivados y devuelve el grafo inmutable.

        Para cada átomo: H implícitos (si no se fijaron), etiqueta forzada en
        carbonos casi lineales y dirección libre para etiquetas. Después, la
        longitud media de enlace.

        Returns:
            El `MolGraph` finalizado. Llamadas posteriores devuelven el mismo
            objeto sin recalcular nada.
        """
        if self._graph is not None:
            return self._graph

        bonds_by_atom = _index_bonds(self._atoms, self._bonds)
        atoms: List[Atom] = []
        for atom in self._atoms:
            bonds = bonds_by_atom[atom.id]
            changes: Dict[str, object] = {}
            if atom.hydrogen_count == 0:
                changes["hydrogen_count"] = implicit_hydrogens(
                    atom.element,
                    sum(bond.order for bond in bonds),
                    charge=atom.charge,
                    unpaired=atom.unpaired_electrons,
                )
            if atom.element == "C" and len(bonds) == 2:
                angle1 = bond_axis_angle(self._xy(bonds[0].a1_id), self._xy(bonds[0].a2_id))
                angle2 = bond_axis_angle(self._xy(bonds[1].a1_id), self._xy(bonds[1].a2_id))
                if is_linear_pair(angle1, angle2):
                    changes["explicit_show"] = True
            clearances = axis_clearances(
                atom.xy, [self._xy(bond.other(atom.id)) for bond in bonds]
            )
            changes["spare_direction"] = choose_spare_direction(clearances)
            atoms.append(replace(atom, **changes))

        average = 0.0
        if self._bonds:
            total = sum(
                distance(self._xy(bond.a1_id), self._xy(bond.a2_id)) for bond in self._bonds
            )
            average = total / len(self._bonds)

        self._graph = MolGraph(atoms, self._bonds, average_bond_length=average)
        logger.debug(
            "Finalized graph: %d atoms, %d bonds, average bond length %.4f",
            len(atoms),
            len(self._bonds),
            average,
        )
        return self._graph

    def _xy(self, atom_id: int) -> Tuple[float, float]:
        return self._atoms[atom_id - 1].xy

    def _check_open(self) -> None:
        if self._graph is not None:
            raise RuntimeError("MolGraphBuilder already finalized")


def _index_bonds(
    atoms: Sequence[Atom], bonds: Sequence[Bond]
) -> Dict[int, Tuple[Bond, ...]]:
    index: Dict[int, List[Bond]] = {atom.id: [] for atom in atoms}
    for bond in bonds:
        for atom_id in (bond.a1_id, bond.a2_id):
            if atom_id not in index:
                raise GraphLookupError(
                    f"Bond {bond.id} references atom {atom_id}, totalAtoms={len(atoms)}"
                )
            index[atom_id].append(bond)
    return {atom_id: tuple(found) for atom_id, found in index.items()}


def _squared_distance(atom: Atom, x: float, y: float) -> float:
    dx = atom.x - x
    dy = atom.y - y
    return dx * dx + dy * dy
