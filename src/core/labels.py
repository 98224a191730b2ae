"""Reglas de etiquetado de átomos independientes del motor de dibujo.

Deciden qué texto acompaña a cada átomo de un grafo finalizado; medir
fuentes y pintar queda fuera de este módulo.
"""

from __future__ import annotations

from typing import Optional, Tuple

from core.geometry import SpareDirection
from core.model import Atom


def should_show_label(atom: Atom, show_carbon: bool = False) -> bool:
    """Indica si el símbolo del átomo debe dibujarse.

    Los carbonos neutros, sin radical y sin marca explícita se representan
    solo con los enlaces.

    Args:
        atom: Átomo de un grafo finalizado.
        show_carbon: Si se muestran etiquetas de carbono implícito.

    Returns:
        `True` si la etiqueta es visible.
    """
    if atom.element != "C" or show_carbon:
        return True
    return atom.charge != 0 or atom.unpaired_electrons != 0 or atom.explicit_show


def charge_text(charge: int) -> str:
    """Formatea una carga formal como superíndice ("+", "2+", "-", "3-")."""
    if charge == 0:
        return ""
    sign = "+" if charge > 0 else "-"
    magnitude = abs(charge)
    if magnitude == 1:
        return sign
    return f"{magnitude}{sign}"


def hydrogen_label(atom: Atom) -> Optional[Tuple[str, SpareDirection]]:
    """Texto y lado de los hidrógenos implícitos de un átomo.

    Returns:
        `None` si el átomo no lleva H; si no, `("H", lado)` o `("H3", lado)`.
        Sin dirección calculada se coloca a la derecha.
    """
    count = atom.hydrogen_count
    if count <= 0:
        return None
    text = "H" if count == 1 else f"H{count}"
    side = atom.spare_direction
    if side == SpareDirection.UNSPECIFIED:
        side = SpareDirection.RIGHT
    return text, side
