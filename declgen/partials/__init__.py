"""Marker-delimited partial file assembly."""

from .assembler import PartialAssembler, PartialKind, assemble_partial
from .markers import START_TOKEN, STOP_TOKEN, PartialMarkers

__all__ = [
    "PartialAssembler",
    "PartialKind",
    "PartialMarkers",
    "START_TOKEN",
    "STOP_TOKEN",
    "assemble_partial",
]
