from __future__ import annotations

from typing import Dict, List, Tuple

from rdkit import Chem

from core.model import BondStereo, MolGraph

_BOND_TYPES = {
    1: Chem.BondType.SINGLE,
    2: Chem.BondType.DOUBLE,
    3: Chem.BondType.TRIPLE,
}

_BOND_DIRS = {
    BondStereo.UP: Chem.BondDir.BEGINWEDGE,
    BondStereo.DOWN: Chem.BondDir.BEGINDASH,
}


_PERIODIC_TABLE = Chem.GetPeriodicTable()
_ELEMENT_SYMBOLS = frozenset(_PERIODIC_TABLE.GetElementSymbol(n) for n in range(1, 119))


def _rdkit_atom(element: str) -> Chem.Atom:
    if element in _ELEMENT_SYMBOLS:
        return Chem.Atom(element)
    return Chem.Atom(0)


def molgraph_to_rdkit_with_map(molgraph: MolGraph, sanitize: bool = True):
    """Convierte un grafo finalizado en un `Chem.Mol` de RDKit.

    Los símbolos que no son elementos (grupos `R<n>`, alias como `NMe2`,
    símbolos vacíos) se traducen a átomos comodín (número atómico 0). Los H
    implícitos calculados al finalizar se fijan como H explícitos del átomo
    para que RDKit no los vuelva a inferir.

    Returns:
        Tupla `(mol, id_map)` donde `id_map` traduce índice del grafo ->
        índice 0-based de RDKit.
    """
    rw = Chem.RWMol()
    id_map: Dict[int, int] = {}

    for atom in molgraph.atoms:
        rd_atom = _rdkit_atom(atom.element)
        rd_atom.SetFormalCharge(atom.charge)
        if atom.isotope:
            rd_atom.SetIsotope(atom.isotope)
        if atom.unpaired_electrons:
            rd_atom.SetNumRadicalElectrons(atom.unpaired_electrons)
        rd_atom.SetNumExplicitHs(atom.hydrogen_count)
        rd_atom.SetNoImplicit(True)
        if atom.map_number:
            rd_atom.SetAtomMapNum(atom.map_number)
        id_map[atom.id] = rw.AddAtom(rd_atom)

    for bond in molgraph.bonds:
        begin = id_map[bond.a1_id]
        end = id_map[bond.a2_id]
        # Robust check: don't add bond if it already exists in RDKit mol
        if rw.GetBondBetweenAtoms(begin, end) is not None:
            continue
        rw.AddBond(begin, end, _BOND_TYPES.get(bond.order, Chem.BondType.SINGLE))
        bond_dir = _BOND_DIRS.get(bond.stereo)
        if bond_dir is not None and bond.order == 1:
            rw.GetBondBetweenAtoms(begin, end).SetBondDir(bond_dir)

    mol = rw.GetMol()
    conf = Chem.Conformer(mol.GetNumAtoms())
    for atom_id, idx in id_map.items():
        atom = molgraph.get_atom(atom_id)
        conf.SetAtomPosition(idx, (atom.x, atom.y, atom.z))
    mol.AddConformer(conf, assignId=True)
    if sanitize:
        Chem.SanitizeMol(mol)
    return mol, id_map


def molgraph_to_rdkit(molgraph: MolGraph, sanitize: bool = True):
    mol, _ = molgraph_to_rdkit_with_map(molgraph, sanitize=sanitize)
    return mol


def molgraph_to_smiles(molgraph: MolGraph) -> str:
    mol = molgraph_to_rdkit(molgraph)
    return Chem.MolToSmiles(mol, canonical=True)


def rdkit_chiral_centers(molgraph: MolGraph) -> List[Tuple[int, str]]:
    """Centros quirales según RDKit, con índices del grafo.

    Incluye centros sin asignar (etiqueta "?"), que son los comparables con
    el análisis por cadenas de `chemstereo`.
    """
    mol, id_map = molgraph_to_rdkit_with_map(molgraph)
    rd_to_graph_id = {rd_idx: g_id for g_id, rd_idx in id_map.items()}
    centers = Chem.FindMolChiralCenters(mol, includeUnassigned=True)
    return sorted((rd_to_graph_id[idx], label) for idx, label in centers)
