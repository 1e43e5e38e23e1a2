"""Grid data structure for the Game of Life."""

from numbers import Integral
from typing import Any, List, Optional, Tuple

import numpy as np
import torch
import torch.nn.functional as F

from .errors import DimensionError

ALIVE_CELL = "+"
DEAD_CELL = " "


class Grid:
    """A finite rectangular field of cells evolving under the B3/S23 rule.

    Cells outside the field are permanently dead, so the grid behaves like an
    island surrounded by an empty border. The next generation is computed into
    a scratch buffer of the same size which then swaps places with the
    current cells.
    """

    def __init__(self, rows: int, columns: int) -> None:
        """Initialize an all-dead grid.

        Args:
            rows: Number of rows
            columns: Number of columns

        Raises:
            DimensionError: If either dimension is negative or not an integer
        """
        for name, value in (("rows", rows), ("columns", columns)):
            if not isinstance(value, Integral):
                raise DimensionError(f"{name} must be an integer, got {value!r}")
            if value < 0:
                raise DimensionError(f"{name} must be non-negative, got {value}")

        self._rows = int(rows)
        self._columns = int(columns)
        self._cells = np.zeros((self._rows, self._columns), dtype=bool)
        self._buffer = np.zeros((self._rows, self._columns), dtype=bool)
        self._generation = 1
        self._alive_count = 0
        self._active = False

        # Reused for every neighbour count
        self._torch_input = torch.zeros(1, 1, self._rows, self._columns, dtype=torch.float32)
        self._torch_kernel = (
            torch.tensor([[1, 1, 1], [1, 0, 1], [1, 1, 1]], dtype=torch.float32).unsqueeze(0).unsqueeze(0)
        )

    @classmethod
    def from_cells(cls, cells: Any, generation: int = 1) -> "Grid":
        """Create a grid that adopts an existing cell matrix.

        A writeable boolean numpy array is taken over without copying, so the
        caller must not keep mutating it afterwards.

        Args:
            cells: Two-dimensional matrix of cell states (row-major)
            generation: Generation number of the supplied state

        Returns:
            New Grid instance

        Raises:
            DimensionError: If cells is not a rectangular two-dimensional matrix
        """
        try:
            matrix = np.asarray(cells, dtype=bool)
        except (TypeError, ValueError) as exc:
            raise DimensionError(f"Cells must form a rectangular matrix: {exc}") from exc

        if matrix.ndim == 1 and matrix.size == 0:
            matrix = matrix.reshape(0, 0)
        if matrix.ndim != 2:
            raise DimensionError(f"Cells must be two-dimensional, got {matrix.ndim} dimension(s)")
        if not matrix.flags.writeable:
            matrix = matrix.copy()

        grid = cls(*matrix.shape)
        grid._cells = matrix
        grid._generation = int(generation)
        grid._alive_count = int(np.count_nonzero(matrix))
        return grid

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def columns(self) -> int:
        return self._columns

    @property
    def shape(self) -> Tuple[int, int]:
        """Grid dimensions as (rows, columns)."""
        return (self._rows, self._columns)

    @property
    def generation(self) -> int:
        """Current generation number."""
        return self._generation

    @property
    def alive_count(self) -> int:
        """Number of living cells."""
        return self._alive_count

    @property
    def active(self) -> bool:
        """Whether the most recent step changed at least one cell.

        False until the first step. A batch counts such grids as active
        anyway, see SimulationBatch.active_count.
        """
        return self._active

    @property
    def cells(self) -> np.ndarray:
        """Read-only view of the current generation."""
        view = self._cells.view()
        view.flags.writeable = False
        return view

    def is_alive(self, r: int, c: int) -> bool:
        """Get the state of a cell, treating anything off the grid as dead.

        Args:
            r: Row coordinate
            c: Column coordinate

        Returns:
            True if the cell exists and is alive
        """
        if r < 0 or c < 0 or r >= self._rows or c >= self._columns:
            return False
        return bool(self._cells[r, c])

    def count_nearby(self, r: int, c: int) -> int:
        """Count living cells in the Moore neighbourhood of a cell.

        Args:
            r: Row coordinate
            c: Column coordinate

        Returns:
            Number of living neighbours (0-8)
        """
        count = 0
        for dr in [-1, 0, 1]:
            for dc in [-1, 0, 1]:
                if dr == 0 and dc == 0:
                    continue
                if self.is_alive(r + dr, c + dc):
                    count += 1
        return count

    def count_all_neighbors(self) -> np.ndarray:
        """Count neighbours for every cell with a zero-padded convolution.

        Returns:
            Array of shape (rows, columns) where each entry equals
            count_nearby() for that cell
        """
        if self._cells.size == 0:
            return np.zeros(self.shape, dtype=np.int8)

        self._torch_input[0, 0] = torch.from_numpy(self._cells.astype(np.float32))
        # Zero padding gives the dead border
        neighbors = F.conv2d(self._torch_input, self._torch_kernel, padding=1)
        return torch.round(neighbors[0, 0]).to(torch.int8).numpy()

    def step(self) -> None:
        """Advance the grid by exactly one generation."""
        self._generation += 1

        neighbors = self.count_all_neighbors()
        buffer = self._buffer

        # n == 3: birth or survival, n == 2: keep current state, else dead
        buffer[:] = neighbors == 3
        keep = neighbors == 2
        buffer[keep] = self._cells[keep]

        self._alive_count = int(np.count_nonzero(buffer))
        self._active = bool(np.any(buffer != self._cells))

        self._cells, self._buffer = buffer, self._cells

    def adopt_state(self, cells: np.ndarray, generation: int, active: bool) -> None:
        """Overwrite the grid with a state computed elsewhere.

        Used to bring back the result of a step run on a copy of this grid,
        e.g. in a worker process.

        Raises:
            DimensionError: If cells does not match the grid shape
        """
        if cells.shape != self.shape:
            raise DimensionError(f"Cells shape {cells.shape} doesn't match grid {self.shape}")
        self._cells[:] = cells
        self._generation = int(generation)
        self._alive_count = int(np.count_nonzero(self._cells))
        self._active = bool(active)

    def randomize(self, rng: np.random.Generator, probability: float = 0.5) -> None:
        """Randomly populate the grid.

        Args:
            rng: Random source, e.g. numpy.random.default_rng(seed)
            probability: Chance each cell will be alive (0.0 to 1.0)
        """
        self._cells[:] = rng.random(self.shape) < probability
        self._alive_count = int(np.count_nonzero(self._cells))

    def bounding_box(self) -> Optional[Tuple[int, int, int, int]]:
        """Get bounding box of living cells.

        Returns:
            Tuple of (min_row, min_col, max_row, max_col) or None if no living cells
        """
        living_rows, living_cols = np.nonzero(self._cells)
        if len(living_rows) == 0:
            return None

        return (
            int(living_rows.min()),
            int(living_cols.min()),
            int(living_rows.max()),
            int(living_cols.max()),
        )

    def to_list(self) -> List[List[bool]]:
        """Convert the current generation to nested lists of booleans."""
        return self._cells.tolist()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return (
            self.shape == other.shape
            and self._generation == other._generation
            and np.array_equal(self._cells, other._cells)
        )

    def __repr__(self) -> str:
        return (
            f"Grid(rows={self._rows}, columns={self._columns}, "
            f"generation={self._generation}, alive={self._alive_count})"
        )

    def __str__(self) -> str:
        """Rows of '+' for living and ' ' for dead cells."""
        return "\n".join("".join(ALIVE_CELL if alive else DEAD_CELL for alive in row) for row in self._cells)
