"""Excepciones del modelo molecular y del lector de tablas de conexión."""

from __future__ import annotations

from typing import Optional


class MolError(Exception):
    """Base de todos los errores del núcleo molecular."""


class MolParseError(MolError):
    """Error fatal al leer un registro MDL; nunca se devuelve un grafo parcial.

    Attributes:
        line_number: Línea (1-based) donde se detectó el problema, si se conoce.
        reason: Mensaje sin el sufijo de línea.
    """

    def __init__(self, message: str, line_number: Optional[int] = None) -> None:
        self.reason = message
        self.line_number = line_number
        if line_number is not None:
            message = f"{message} (line {line_number})"
        super().__init__(message)


class MolFormatError(MolParseError):
    """No se encontró la cabecera `V2000` en la entrada."""


class MalformedRecordError(MolParseError):
    """Línea demasiado corta o campo numérico ilegible."""


class OutOfRangeError(MolParseError, IndexError):
    """Índice de átomo o enlace fuera del rango declarado."""


class GraphLookupError(MolError, LookupError):
    """Consulta de un átomo o enlace inexistente en un grafo ya construido."""
