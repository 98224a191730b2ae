"""Cálculo de hidrógenos implícitos según valencias típicas."""

from __future__ import annotations

from typing import Dict

# Valencias típicas usadas para inferir H implícitos. Los elementos que no
# aparecen aquí (incluidos "H" y los grupos genéricos "R<n>") no reciben H.
TYPICAL_VALENCE: Dict[str, int] = {
    "C": 4,
    "N": 3,
    "P": 3,
    "O": 2,
    "S": 2,
    "F": 1,
    "Cl": 1,
    "Br": 1,
    "I": 1,
}

# En estos elementos la carga resta valencia sea cual sea su signo; en N, P,
# O y S una carga positiva añade un hidrógeno (NH4+, H3O+).
_ABS_CHARGE_ELEMENTS = frozenset({"C", "F", "Cl", "Br", "I"})


def implicit_hydrogens(
    element: str,
    bond_order_sum: int,
    charge: int = 0,
    unpaired: int = 0,
) -> int:
    """Calcula los hidrógenos implícitos de un átomo.

    Args:
        element: Símbolo del elemento.
        bond_order_sum: Suma de órdenes de los enlaces declarados del átomo.
        charge: Carga formal.
        unpaired: Electrones desapareados (radical).

    Returns:
        Número de H implícitos estimados (>= 0).

    Side Effects:
        No tiene efectos laterales.
    """
    typical = TYPICAL_VALENCE.get(element)
    if typical is None:
        return 0
    if element in _ABS_CHARGE_ELEMENTS:
        implicit = typical - unpaired - abs(charge) - bond_order_sum
    else:
        implicit = typical - unpaired + charge - bond_order_sum
    if implicit < 0:
        return 0
    return int(implicit)
