"""Core Game of Life engine."""

from .errors import LifeError, DimensionError, FormatError, SelectionError
from .grid import Grid
from .batch import SimulationBatch, MAX_SELECTABLE
from .codec import GridSnapshot, encode, decode
from .patterns import Pattern, PatternLibrary

__all__ = [
    "LifeError",
    "DimensionError",
    "FormatError",
    "SelectionError",
    "Grid",
    "SimulationBatch",
    "MAX_SELECTABLE",
    "GridSnapshot",
    "encode",
    "decode",
    "Pattern",
    "PatternLibrary",
]
