"""Opciones de configuración para el análisis de centros quirales."""

from dataclasses import dataclass


@dataclass
class ChiralOptions:
    """Opciones de control de la comparación de cadenas."""

    # Profundidad base de recursión; se suma sqrt(número de átomos).
    ttl_base: int = 3
    # Elemento candidato a estereocentro.
    carbon_symbol: str = "C"
    # Símbolo de los hidrógenos terminales que cuentan como H implícitos.
    hydrogen_symbol: str = "H"
