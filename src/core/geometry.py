"""
Utilidades geométricas usadas al finalizar un grafo molecular.
"""
from __future__ import annotations

import math
from enum import Enum
from typing import Dict, Iterable, Tuple

Point = Tuple[float, float]

# Holgura inicial de cada eje cuando el átomo no tiene enlaces.
_FULL_CLEARANCE = 6.28

# Umbrales (radianes) que favorecen colocar los H a la derecha o a la izquierda.
RIGHT_CLEARANCE_MIN = 1.0
LEFT_CLEARANCE_MIN = 1.4

LINEAR_TOLERANCE_DEG = 10.0


class SpareDirection(str, Enum):
    """Dirección con más espacio libre alrededor de un átomo."""
    UNSPECIFIED = "unspecified"
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"


# Prioridad de desempate entre ejes (primero gana).
_PRIORITY = (
    SpareDirection.RIGHT,
    SpareDirection.LEFT,
    SpareDirection.BOTTOM,
    SpareDirection.TOP,
)


def bond_axis_angle(p_from: Point, p_to: Point) -> float:
    """Devuelve la dirección de un enlace reducida al intervalo [0, π).

    La orientación del enlace se ignora: A→B y B→A dan el mismo valor.
    """
    angle = math.atan2(p_from[1] - p_to[1], p_from[0] - p_to[0])
    return angle % math.pi


def is_linear_pair(
    angle1: float,
    angle2: float,
    tolerance_deg: float = LINEAR_TOLERANCE_DEG,
) -> bool:
    """Indica si dos direcciones de enlace son casi colineales.

    Args:
        angle1: Dirección del primer enlace en [0, π).
        angle2: Dirección del segundo enlace en [0, π).
        tolerance_deg: Diferencia máxima en grados.

    Returns:
        `True` si la diferencia angular es menor que la tolerancia.
    """
    return abs(angle1 - angle2) < math.radians(tolerance_deg)


def axis_clearances(origin: Point, neighbors: Iterable[Point]) -> Dict[SpareDirection, float]:
    """Calcula la holgura angular de cada eje respecto a los enlaces del átomo.

    Args:
        origin: Coordenadas del átomo central.
        neighbors: Coordenadas de los átomos enlazados.

    Returns:
        Diccionario eje -> desviación mínima (radianes) de cualquier enlace.
    """
    right = left = top = bottom = _FULL_CLEARANCE
    for x, y in neighbors:
        angle = math.atan2(y - origin[1], x - origin[0])
        right = min(right, abs(angle))
        left = min(left, abs(angle - math.pi), abs(angle + math.pi))
        top = min(top, abs(angle - math.pi / 2))
        bottom = min(bottom, abs(angle + math.pi / 2))
    return {
        SpareDirection.RIGHT: right,
        SpareDirection.LEFT: left,
        SpareDirection.BOTTOM: bottom,
        SpareDirection.TOP: top,
    }


def choose_spare_direction(clearances: Dict[SpareDirection, float]) -> SpareDirection:
    """Elige el lado donde colocar etiquetas auxiliares (p. ej., los H).

    Se prefiere la derecha y luego la izquierda si tienen holgura suficiente;
    si no, gana el eje más despejado con prioridad derecha > izquierda >
    abajo > arriba.
    """
    if clearances[SpareDirection.RIGHT] > RIGHT_CLEARANCE_MIN:
        return SpareDirection.RIGHT
    if clearances[SpareDirection.LEFT] > LEFT_CLEARANCE_MIN:
        return SpareDirection.LEFT
    best = max(clearances[direction] for direction in _PRIORITY)
    for direction in _PRIORITY:
        if clearances[direction] == best:
            return direction
    return SpareDirection.UNSPECIFIED


def distance(p0: Point, p1: Point) -> float:
    return math.hypot(p1[0] - p0[0], p1[1] - p0[1])
