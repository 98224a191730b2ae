"""Entrada de estructuras químicas: MDL MOL V2000, SDF y puente con RDKit."""

from .molfile import parse_molfile
from .sdf import load_molfile, parse_sdf, read_sdf_properties, split_sdf

__all__ = ["parse_molfile", "load_molfile", "parse_sdf", "read_sdf_properties", "split_sdf"]
