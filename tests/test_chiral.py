"""Pruebas unitarias para test_chiral."""

import os
import sys
import unittest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from chemio.molfile import parse_molfile
from chemstereo import ChiralOptions, compare_chains, find_chiral_carbons, is_chiral_carbon
from chemstereo.chiral import initial_ttl
from core.model import MolGraphBuilder

import molblocks


def build_graph(atoms, bonds=()):
    """Función de prueba auxiliar para construir un grafo finalizado.

    Args:
        atoms: Lista de símbolos; las coordenadas se reparten en una línea.
        bonds: Tuplas `(a1, a2)` o `(a1, a2, orden)`.

    Returns:
        El grafo finalizado.
    """
    builder = MolGraphBuilder()
    for n, element in enumerate(atoms):
        builder.add_atom(element, float(n), 0.0)
    for bond in bonds:
        builder.add_bond(*bond)
    return builder.finalize()


# C1(H)(OH) con rama A = CH(Et)2 (enlace 2) y rama B = CH(Et)(Pr) (enlace 3).
BRANCHED_ATOMS = ["C", "O", "C", "C"] + ["C"] * 9
BRANCHED_BONDS = [
    (1, 2), (1, 3), (1, 4),
    (3, 5), (5, 6), (3, 7), (7, 8),
    (4, 9), (9, 10), (4, 11), (11, 12), (12, 13),
]


class ChiralCarbonTest(unittest.TestCase):
    """Casos de prueba para ChiralCarbonTest."""

    def test_methane_is_not_chiral(self):
        graph = build_graph(["C"])
        self.assertEqual(find_chiral_carbons(graph), set())

    def test_ethane_is_not_chiral(self):
        graph = parse_molfile(molblocks.ETHANE)
        self.assertEqual(find_chiral_carbons(graph), set())

    def test_bromochlorofluoromethane(self):
        """Verifica un centro con tres halógenos distintos y un H implícito."""
        graph = parse_molfile(molblocks.CHFCLBR)
        self.assertEqual(graph.get_atom(1).hydrogen_count, 1)
        self.assertEqual(find_chiral_carbons(graph), {1})

    def test_four_distinct_heavy_substituents(self):
        graph = build_graph(["C", "F", "Cl", "Br", "I"], [(1, 2), (1, 3), (1, 4), (1, 5)])
        self.assertEqual(graph.get_atom(1).hydrogen_count, 0)
        self.assertTrue(is_chiral_carbon(graph, 1))

    def test_explicit_terminal_hydrogen_counts_as_fourth_substituent(self):
        graph = build_graph(["C", "F", "Cl", "Br", "H"], [(1, 2), (1, 3), (1, 4), (1, 5)])
        self.assertEqual(graph.get_atom(1).hydrogen_count, 0)
        self.assertEqual(find_chiral_carbons(graph), {1})

    def test_two_hydrogens_are_rejected(self):
        graph = build_graph(["C", "F", "Cl"], [(1, 2), (1, 3)])
        self.assertFalse(is_chiral_carbon(graph, 1))

    def test_multiple_bond_is_rejected(self):
        graph = build_graph(["C", "O", "Cl", "Br"], [(1, 2, 2), (1, 3), (1, 4)])
        self.assertFalse(is_chiral_carbon(graph, 1))

    def test_non_carbon_is_rejected(self):
        graph = build_graph(["Si", "F", "Cl", "Br", "I"], [(1, 2), (1, 3), (1, 4), (1, 5)])
        self.assertFalse(is_chiral_carbon(graph, 1))

    def test_butan_2_ol(self):
        graph = parse_molfile(molblocks.BUTAN_2_OL)
        self.assertEqual(find_chiral_carbons(graph), {2})

    def test_propan_2_ol_has_twin_methyls(self):
        graph = parse_molfile(molblocks.PROPAN_2_OL)
        self.assertEqual(find_chiral_carbons(graph), set())

    def test_chains_distinguished_deeper(self):
        """Verifica que etilo y propilo se distinguen en el segundo nivel."""
        graph = parse_molfile(molblocks.METHYLHEXANE)
        self.assertEqual(find_chiral_carbons(graph), {3})

    def test_identical_chains_are_never_chiral(self):
        graph = parse_molfile(molblocks.METHYLPENTANE)
        self.assertEqual(find_chiral_carbons(graph), set())

    def test_coordinates_do_not_matter(self):
        builder = MolGraphBuilder()
        positions = [(0.0, 0.0), (5.0, 1.0), (5.3, 2.7), (-0.2, 9.0), (-4.0, -4.0), (-8.0, -2.0), (0.1, -1.0)]
        for x, y in positions:
            builder.add_atom("C", x, y)
        for a1, a2 in [(1, 2), (2, 3), (1, 4), (4, 5), (1, 6)]:
            builder.add_bond(a1, a2)
        graph = builder.finalize()
        # C1: dos etilos, un metilo y un H; el séptimo átomo queda aislado.
        self.assertFalse(is_chiral_carbon(graph, 1))

    def test_ring_substituents(self):
        """Verifica anillos: la recursión termina y respeta la simetría."""
        self.assertEqual(find_chiral_carbons(parse_molfile(molblocks.METHYLCYCLOHEXANE)), set())
        self.assertEqual(find_chiral_carbons(parse_molfile(molblocks.DIMETHYLCYCLOHEXANE)), {1, 2})

    def test_three_branch_pairs_follow_fixed_order(self):
        """Verifica que el último par de tres ramas se compara desde la tercera."""
        graph = build_graph(BRANCHED_ATOMS, BRANCHED_BONDS)
        self.assertTrue(is_chiral_carbon(graph, 1))
        self.assertEqual(find_chiral_carbons(graph), {1, 4})

    def test_graph_is_not_modified(self):
        graph = parse_molfile(molblocks.BUTAN_2_OL)
        before = (graph.atoms, graph.bonds)
        find_chiral_carbons(graph)
        self.assertEqual((graph.atoms, graph.bonds), before)


class CompareChainsTest(unittest.TestCase):
    """Casos de prueba para la comparación de ramas."""

    def test_initial_ttl(self):
        self.assertEqual(initial_ttl(build_graph(["C"] * 9)), 6)
        self.assertEqual(initial_ttl(build_graph(["C"] * 10)), 6)
        self.assertEqual(initial_ttl(build_graph(["C"] * 10), ChiralOptions(ttl_base=0)), 3)

    def test_twin_methyls_are_equivalent(self):
        graph = parse_molfile(molblocks.PROPAN_2_OL)
        self.assertTrue(compare_chains(graph, 2, 1, 2))
        self.assertFalse(compare_chains(graph, 2, 1, 3))

    def test_element_mismatch(self):
        graph = build_graph(["C", "F", "Cl"], [(1, 2), (1, 3)])
        self.assertFalse(compare_chains(graph, 1, 1, 2))

    def test_bond_order_mismatch(self):
        graph = build_graph(["C", "C", "C", "C"], [(1, 2, 2), (1, 3), (3, 4)])
        self.assertFalse(compare_chains(graph, 1, 1, 2))

    def test_matching_is_existential(self):
        """Verifica que cada rama de A basta con que encuentre pareja en B."""
        graph = build_graph(BRANCHED_ATOMS, BRANCHED_BONDS)
        # Los dos etilos de A se emparejan con el etilo de B; el propilo de B no.
        self.assertTrue(compare_chains(graph, 1, 2, 3))
        self.assertFalse(compare_chains(graph, 1, 3, 2))

    def test_exhausted_budget_counts_as_equivalent(self):
        """Verifica que con `ttl` negativo solo cuenta el primer nivel."""
        graph = parse_molfile(molblocks.METHYLHEXANE)
        shallow = ChiralOptions(ttl_base=-10)
        # Enlaces 2 (C2-C3) y 3 (C3-C4): etilo frente a propilo.
        self.assertFalse(compare_chains(graph, 3, 2, 3))
        self.assertTrue(compare_chains(graph, 3, 2, 3, shallow))
        self.assertEqual(find_chiral_carbons(graph, shallow), set())


if __name__ == "__main__":
    unittest.main()
