"""Common Game of Life patterns used to seed grids."""

from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from .errors import DimensionError
from .grid import ALIVE_CELL, Grid


class Pattern:
    """Represents a Game of Life pattern as a set of living cells."""

    def __init__(
        self,
        name: str,
        cells: List[Tuple[int, int]],
        description: str = "",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize a pattern.

        Args:
            name: Pattern name
            cells: List of (row, column) coordinates for living cells
            description: Optional description
            metadata: Optional metadata dictionary
        """
        self.name = name
        self.cells = cells
        self.description = description
        self.metadata = metadata or {}

    @classmethod
    def from_lines(cls, name: str, lines: Sequence[str], description: str = "") -> "Pattern":
        """Create a pattern from rows drawn with '+' for living cells."""
        cells = [(r, c) for r, line in enumerate(lines) for c, glyph in enumerate(line) if glyph == ALIVE_CELL]
        return cls(name, cells, description)

    @classmethod
    def from_grid(cls, grid: Grid, name: str, description: str = "") -> "Pattern":
        """Create pattern from current grid state.

        Args:
            grid: Source grid
            name: Pattern name
            description: Optional description

        Returns:
            New Pattern instance
        """
        cells = [(r, c) for r in range(grid.rows) for c in range(grid.columns) if grid.is_alive(r, c)]
        metadata = {"source_grid_size": grid.shape, "generation": grid.generation}
        return cls(name, cells, description, metadata)

    @property
    def population(self) -> int:
        return len(self.cells)

    def get_bounding_box(self) -> Tuple[int, int, int, int]:
        """Get bounding box of the pattern.

        Returns:
            Tuple of (min_row, min_col, max_row, max_col)
        """
        if not self.cells:
            return (0, 0, 0, 0)

        rows, cols = zip(*self.cells)
        return (min(rows), min(cols), max(rows), max(cols))

    @property
    def size(self) -> Tuple[int, int]:
        """Pattern extent as (rows, columns), (0, 0) when empty."""
        if not self.cells:
            return (0, 0)
        min_r, min_c, max_r, max_c = self.get_bounding_box()
        return (max_r - min_r + 1, max_c - min_c + 1)

    def to_cells(self, rows: Optional[int] = None, columns: Optional[int] = None,
                 offset_row: int = 0, offset_col: int = 0) -> np.ndarray:
        """Draw the pattern into a dead boolean matrix.

        Cells that fall outside the matrix are dropped. Without explicit
        dimensions the matrix is just large enough to hold the shifted pattern.
        """
        if rows is None or columns is None:
            _, _, max_r, max_c = self.get_bounding_box()
            fit_rows, fit_cols = (max_r + 1 + offset_row, max_c + 1 + offset_col) if self.cells else (0, 0)
            rows = fit_rows if rows is None else rows
            columns = fit_cols if columns is None else columns

        if rows < 0 or columns < 0:
            raise DimensionError(f"Pattern target must be non-negative, got {rows}x{columns}")

        matrix = np.zeros((rows, columns), dtype=bool)
        for r, c in self.cells:
            r, c = r + offset_row, c + offset_col
            if 0 <= r < matrix.shape[0] and 0 <= c < matrix.shape[1]:
                matrix[r, c] = True
        return matrix

    def to_grid(self, rows: Optional[int] = None, columns: Optional[int] = None,
                offset_row: int = 0, offset_col: int = 0, generation: int = 1) -> Grid:
        """Create a grid seeded with this pattern.

        Args:
            rows: Grid rows (defaults to fit the pattern)
            columns: Grid columns (defaults to fit the pattern)
            offset_row: Vertical offset
            offset_col: Horizontal offset
            generation: Generation number of the new grid

        Returns:
            New Grid instance
        """
        return Grid.from_cells(self.to_cells(rows, columns, offset_row, offset_col), generation)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "cells": self.cells,
            "description": self.description,
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Pattern":
        # JSON turns coordinate tuples into lists
        cells = [tuple(cell) for cell in data["cells"]]

        return cls(
            name=data["name"],
            cells=cells,
            description=data.get("description", ""),
            metadata=data.get("metadata", {}),
        )


class PatternLibrary:
    """Manages a collection of named patterns."""

    def __init__(self) -> None:
        self._patterns: Dict[str, Pattern] = {}
        self._load_builtin_patterns()

    def _load_builtin_patterns(self) -> None:
        """Load built-in common patterns."""
        # Still life patterns
        self.add_pattern(Pattern.from_lines("Block", ["++", "++"], "2x2 still life block"))
        self.add_pattern(Pattern.from_lines("Beehive", [" ++ ", "+  +", " ++ "], "Beehive still life"))

        # Oscillators
        self.add_pattern(Pattern.from_lines("Blinker", [" + ", " + ", " + "], "Period-2 oscillator"))
        self.add_pattern(
            Pattern.from_lines("Toad", ["  + ", "+  +", "+  +", " +  "], "Period-2 oscillator")
        )

        # Spaceships
        self.add_pattern(
            Pattern.from_lines("Glider", ["+ + ", " ++ ", " +  "], "Moves one cell diagonally every 4 generations")
        )

    def add_pattern(self, pattern: Pattern) -> None:
        """Add a pattern, replacing any pattern with the same name."""
        self._patterns[pattern.name] = pattern

    def get_pattern(self, name: str) -> Optional[Pattern]:
        """Look up a pattern by name, ignoring case.

        Returns:
            Pattern instance or None if not found
        """
        if name in self._patterns:
            return self._patterns[name]
        for pattern_name, pattern in self._patterns.items():
            if pattern_name.lower() == name.lower():
                return pattern
        return None

    def list_patterns(self) -> List[str]:
        """Get list of all pattern names."""
        return list(self._patterns.keys())
