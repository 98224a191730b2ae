"""Contenedores SDF: separación de registros, datos asociados y carga de archivos."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, List, Union

from core.errors import MolFormatError, MolParseError
from core.model import MolGraph
from chemio.molfile import END_TAG, parse_molfile, split_lines

logger = logging.getLogger(__name__)

RECORD_DELIMITER = "$$$$"


def split_sdf(text: str) -> List[str]:
    """Separa un flujo SDF en registros individuales.

    Args:
        text: Contenido SDF (uno o varios registros separados por `$$$$`).

    Returns:
        Lista de registros como texto; los registros en blanco se descartan.
    """
    records: List[str] = []
    current: List[str] = []
    for line in split_lines(text):
        if line.rstrip() == RECORD_DELIMITER:
            records.append("\n".join(current))
            current = []
        else:
            current.append(line)
    records.append("\n".join(current))
    return [record for record in records if record.strip()]


def parse_sdf(text: str) -> List[MolGraph]:
    """Lee todos los registros de un flujo SDF.

    Args:
        text: Contenido SDF.

    Returns:
        Un grafo finalizado por registro, en orden.

    Raises:
        MolParseError: Si algún registro es inválido; el mensaje indica el
            número de registro (1-based).
    """
    graphs: List[MolGraph] = []
    for number, record in enumerate(split_sdf(text), start=1):
        try:
            graphs.append(parse_molfile(record))
        except MolFormatError as exc:
            logger.warning("SDF record %d has no V2000 header", number)
            raise MolFormatError(f"record {number}: {exc.reason}", exc.line_number) from exc
        except MolParseError as exc:
            raise type(exc)(f"record {number}: {exc.reason}", exc.line_number) from exc
    return graphs


def read_sdf_properties(record: str) -> Dict[str, str]:
    """Extrae los campos de datos (`> <NOMBRE>`) que siguen a `M  END`.

    Args:
        record: Texto de un único registro SDF.

    Returns:
        Diccionario nombre -> valor; los valores de varias líneas se unen
        con saltos de línea.
    """
    properties: Dict[str, str] = {}
    lines = split_lines(record)
    in_data = False
    name = None
    values: List[str] = []
    for line in lines:
        if not in_data:
            in_data = line.startswith(END_TAG)
            continue
        if name is None:
            if line.startswith(">") and "<" in line and ">" in line[line.index("<"):]:
                start = line.index("<") + 1
                name = line[start:line.index(">", start)]
                values = []
            continue
        if line.strip() == "":
            properties[name] = "\n".join(values)
            name = None
        else:
            values.append(line)
    if name is not None:
        properties[name] = "\n".join(values)
    return properties


def load_molfile(path: Union[str, os.PathLike]) -> MolGraph:
    """Lee un archivo `.mol` o `.sdf` y devuelve el grafo de su primer registro.

    Raises:
        MolFormatError: Si el archivo no contiene ningún registro.
    """
    text = Path(path).read_text(encoding="utf-8", errors="replace")
    records = split_sdf(text)
    if not records:
        raise MolFormatError(f"V2000 tag not found in empty file {path}")
    return parse_molfile(records[0])
