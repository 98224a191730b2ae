import os
import sys
import unittest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from chemio.molfile import parse_molfile
from chemio.rdkit_io import molgraph_to_rdkit_with_map, molgraph_to_smiles, rdkit_chiral_centers
from chemstereo import find_chiral_carbons
from core.model import MolGraphBuilder

import molblocks


class RdkitRoundtripTest(unittest.TestCase):
    def test_molfile_to_smiles(self):
        graph = parse_molfile(molblocks.ETHANE)
        smiles = molgraph_to_smiles(graph)

        self.assertIn(smiles, {"CC", "C-C"})

    def test_hydrogens_and_charges_are_transferred(self):
        text = molblocks.molblock(
            [("C", 0.0, 0.0), ("O", 1.0, 0.0)],
            [(1, 2)],
            [molblocks.property_line("CHG", [(2, -1)])],
        )
        mol, id_map = molgraph_to_rdkit_with_map(parse_molfile(text))
        oxygen = mol.GetAtomWithIdx(id_map[2])
        self.assertEqual(oxygen.GetFormalCharge(), -1)
        self.assertEqual(mol.GetAtomWithIdx(id_map[1]).GetTotalNumHs(), 3)
        self.assertEqual(oxygen.GetTotalNumHs(), 0)

    def test_non_element_symbols_become_dummy_atoms(self):
        builder = MolGraphBuilder()
        builder.add_atom("C", 0.0, 0.0)
        builder.add_atom("NMe2", 1.0, 0.0)
        builder.add_atom("R1", -1.0, 0.0)
        builder.add_atom("", 0.0, 1.0)
        builder.add_bond(1, 2)
        builder.add_bond(1, 3)
        builder.add_bond(1, 4)
        mol, id_map = molgraph_to_rdkit_with_map(builder.finalize())
        self.assertEqual(mol.GetAtomWithIdx(id_map[1]).GetAtomicNum(), 6)
        for atom_id in (2, 3, 4):
            self.assertEqual(mol.GetAtomWithIdx(id_map[atom_id]).GetAtomicNum(), 0)

    def test_chiral_centers_agree_with_rdkit(self):
        """Cross-check the chain heuristic against RDKit on simple acyclic cases."""
        for block in (
            molblocks.CHFCLBR,
            molblocks.BUTAN_2_OL,
            molblocks.PROPAN_2_OL,
            molblocks.METHYLHEXANE,
            molblocks.METHYLPENTANE,
        ):
            graph = parse_molfile(block)
            expected = {atom_id for atom_id, _ in rdkit_chiral_centers(graph)}
            self.assertEqual(find_chiral_carbons(graph), expected)


if __name__ == "__main__":
    unittest.main()
