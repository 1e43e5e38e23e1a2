"""Conway's Game of Life engine running batches of independent grids."""

__version__ = "0.1.0"

from .core.errors import LifeError, DimensionError, FormatError, SelectionError
from .core.grid import Grid
from .core.batch import SimulationBatch
from .core.patterns import Pattern, PatternLibrary

__all__ = [
    "LifeError",
    "DimensionError",
    "FormatError",
    "SelectionError",
    "Grid",
    "SimulationBatch",
    "Pattern",
    "PatternLibrary",
]
