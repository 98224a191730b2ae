"""Lectura de tablas de conexión MDL MOL V2000.

El formato es de columnas fijas: cada campo se recorta por posición y no
por separadores. Tras los bloques de átomos y enlaces pueden venir líneas de
propiedades (`M  CHG`, `M  ISO`, ...) y alias de átomo (`A  `) que ajustan
átomos o enlaces ya declarados, hasta la línea `M  END`.

Cualquier violación estructural aborta la lectura: nunca se devuelve un
grafo parcial.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Tuple

from core.errors import MalformedRecordError, MolFormatError, OutOfRangeError
from core.model import BondStereo, MolGraph, MolGraphBuilder

logger = logging.getLogger(__name__)

V2000_TAG = "V2000"
V2000_TAG_COLUMN = 34
END_TAG = "M  END"
ALIAS_PREFIX = "A  "

MIN_HEADER_LENGTH = 39
MIN_ATOM_LINE_LENGTH = 39
MIN_BOND_LINE_LENGTH = 12
MAP_NUMBER_LINE_LENGTH = 63

# Código de carga del bloque de átomos -> (carga formal, electrones desapareados).
CHARGE_CODES: Dict[int, Tuple[int, int]] = {
    1: (3, 0),
    2: (2, 0),
    3: (1, 0),
    4: (0, 2),
    5: (-1, 0),
    6: (-2, 0),
    7: (-3, 0),
}

BOND_STEREO_CODES: Dict[int, BondStereo] = {
    1: BondStereo.UP,
    6: BondStereo.DOWN,
}

# `M  ZBO` guarda directamente la categoría (1 = arriba, 2 = abajo).
PROPERTY_STEREO_CODES: Dict[int, BondStereo] = {
    1: BondStereo.UP,
    2: BondStereo.DOWN,
}

_PropertyHandler = Callable[[MolGraphBuilder, int, int], None]

PROPERTY_HANDLERS: Dict[str, _PropertyHandler] = {
    "M  CHG": lambda builder, pos, val: builder.update_atom(pos, charge=val),
    "M  RAD": lambda builder, pos, val: builder.update_atom(pos, unpaired_electrons=val),
    "M  ISO": lambda builder, pos, val: builder.update_atom(pos, isotope=val),
    "M  RGP": lambda builder, pos, val: builder.update_atom(pos, element=f"R{val}"),
    "M  HYD": lambda builder, pos, val: builder.update_atom(pos, explicit_show=True),
    "M  ZCH": lambda builder, pos, val: builder.update_atom(pos, charge=val),
    "M  ZBO": lambda builder, pos, val: builder.update_bond(
        pos, stereo=PROPERTY_STEREO_CODES.get(val, BondStereo.NONE)
    ),
}

PROPERTY_PREFIX_LENGTH = 6
PROPERTY_ENTRY_WIDTH = 8


def _field(line: str, start: int, end: int) -> str:
    return line[start:end].strip()


def _parse_int(
    text: str,
    line_number: int,
    what: str,
    default: Optional[int] = None,
) -> int:
    if not text and default is not None:
        return default
    try:
        return int(text)
    except ValueError as exc:
        raise MalformedRecordError(f"Invalid MDL MOL: {what} {text!r}", line_number) from exc


def _parse_float(text: str, line_number: int, what: str) -> float:
    try:
        return float(text)
    except ValueError as exc:
        raise MalformedRecordError(f"Invalid MDL MOL: {what} {text!r}", line_number) from exc


def split_lines(text: str) -> List[str]:
    """Normaliza los finales de línea (`\\r\\n`, `\\r`) y separa en líneas."""
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def find_header(lines: List[str]) -> int:
    """Localiza la línea de recuentos con la marca `V2000` en la columna 34.

    Args:
        lines: Líneas del registro.

    Returns:
        Índice 0-based de la línea de cabecera.

    Raises:
        MolFormatError: Si ninguna línea lleva la marca.
    """
    for index, line in enumerate(lines):
        if len(line) >= MIN_HEADER_LENGTH and line.startswith(V2000_TAG, V2000_TAG_COLUMN):
            return index
    raise MolFormatError("V2000 tag not found")


def decode_charge_code(code: int) -> Tuple[int, int]:
    """Traduce el código de carga del bloque de átomos a (carga, radical)."""
    return CHARGE_CODES.get(code, (0, 0))


def _line_at(lines: List[str], index: int, what: str) -> str:
    if index >= len(lines):
        raise MalformedRecordError(f"Invalid MDL MOL: missing {what}", index + 1)
    return lines[index]


def _read_atom(builder: MolGraphBuilder, line: str, line_number: int) -> None:
    if len(line) < MIN_ATOM_LINE_LENGTH:
        raise MalformedRecordError("Invalid MDL MOL: atom line", line_number)
    x = _parse_float(_field(line, 0, 10), line_number, "atom x")
    y = _parse_float(_field(line, 10, 20), line_number, "atom y")
    z = _parse_float(_field(line, 20, 30), line_number, "atom z")
    element = _field(line, 31, 34)
    code = _parse_int(_field(line, 36, 39), line_number, "charge code", default=0)
    map_number = 0
    if len(line) >= MAP_NUMBER_LINE_LENGTH:
        map_number = _parse_int(_field(line, 60, 63), line_number, "map number", default=0)
    charge, unpaired = decode_charge_code(code)
    builder.add_atom(
        element,
        x,
        y,
        z,
        charge=charge,
        unpaired_electrons=unpaired,
        map_number=map_number,
    )


def _read_bond(builder: MolGraphBuilder, line: str, line_number: int) -> None:
    if len(line) < MIN_BOND_LINE_LENGTH:
        raise MalformedRecordError("Invalid MDL MOL: bond line", line_number)
    a1_id = _parse_int(_field(line, 0, 3), line_number, "bond origin")
    a2_id = _parse_int(_field(line, 3, 6), line_number, "bond target")
    bond_type = _parse_int(_field(line, 6, 9), line_number, "bond type")
    stereo_code = _parse_int(_field(line, 9, 12), line_number, "bond stereo", default=0)
    if a1_id == a2_id:
        raise MalformedRecordError("Invalid MDL MOL: bond line", line_number)
    atom_count = builder.atom_count
    if not (1 <= a1_id <= atom_count and 1 <= a2_id <= atom_count):
        raise OutOfRangeError("Invalid MDL MOL: bond line", line_number)
    order = bond_type if bond_type in (1, 2, 3) else 1
    builder.add_bond(a1_id, a2_id, order, BOND_STEREO_CODES.get(stereo_code, BondStereo.NONE))


def _apply_property(
    builder: MolGraphBuilder,
    handler: _PropertyHandler,
    line: str,
    line_number: int,
) -> None:
    count = _parse_int(_field(line, 6, 9), line_number, "M-block count")
    for entry in range(count):
        start = 9 + entry * PROPERTY_ENTRY_WIDTH
        position = _parse_int(_field(line, start, start + 4), line_number, "M-block position")
        value = _parse_int(_field(line, start + 4, start + 8), line_number, "M-block value")
        if position < 1:
            raise OutOfRangeError("Invalid MDL MOL: M-block", line_number)
        try:
            handler(builder, position, value)
        except OutOfRangeError as exc:
            raise OutOfRangeError(f"Invalid MDL MOL: M-block, {exc}", line_number) from exc


def _alias_target(line: str, atom_count: int) -> Optional[int]:
    if not line.startswith(ALIAS_PREFIX) or len(line) < 6:
        return None
    try:
        target = int(_field(line, 3, 6))
    except ValueError:
        return None
    if 1 <= target <= atom_count:
        return target
    return None


def _read_properties(builder: MolGraphBuilder, lines: List[str], start: int) -> None:
    index = start
    while index < len(lines):
        line = lines[index]
        if line.startswith(END_TAG):
            break
        handler = PROPERTY_HANDLERS.get(line[:PROPERTY_PREFIX_LENGTH])
        if handler is not None:
            _apply_property(builder, handler, line, index + 1)
        else:
            target = _alias_target(line, builder.atom_count)
            if target is not None:
                index += 1
                if index >= len(lines):
                    break
                builder.update_atom(target, element=lines[index])
            elif line.strip():
                logger.debug("Ignoring property line %d: %r", index + 1, line)
        index += 1


def parse_molfile(text: str) -> MolGraph:
    """Lee un registro MDL MOL / SDF V2000 y devuelve el grafo finalizado.

    Args:
        text: Contenido completo del registro.

    Returns:
        El `MolGraph` con H implícitos, direcciones libres y longitud media
        de enlace ya calculados.

    Raises:
        MolFormatError: Si no aparece la cabecera `V2000`.
        MalformedRecordError: Si una línea es corta o un campo no es numérico.
        OutOfRangeError: Si un enlace o una propiedad apunta fuera de rango.
    """
    lines = split_lines(text)
    header = find_header(lines)
    header_line = lines[header]
    atom_count = _parse_int(_field(header_line, 0, 3), header + 1, "atom count")
    bond_count = _parse_int(_field(header_line, 3, 6), header + 1, "bond count")
    logger.debug(
        "V2000 header at line %d: %d atoms, %d bonds", header + 1, atom_count, bond_count
    )

    builder = MolGraphBuilder()
    for offset in range(atom_count):
        index = header + 1 + offset
        _read_atom(builder, _line_at(lines, index, "atom line"), index + 1)
    for offset in range(bond_count):
        index = header + 1 + atom_count + offset
        _read_bond(builder, _line_at(lines, index, "bond line"), index + 1)

    _read_properties(builder, lines, header + 1 + atom_count + bond_count)
    return builder.finalize()
