"""Batch of independent Game of Life grids advanced in lockstep."""

import logging
from concurrent.futures import Executor
from numbers import Integral
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .errors import SelectionError
from .grid import Grid

logger = logging.getLogger(__name__)

MAX_SELECTABLE = 8


def _advance(grid: Grid) -> Tuple[np.ndarray, int, bool]:
    """Step a grid and return its new (cells, generation, active) state.

    Runs inside executor workers. A process pool steps a pickled copy, so the
    caller has to write the result back into its own grid.
    """
    grid.step()
    return grid.cells, grid.generation, grid.active


class SimulationBatch:
    """Ordered collection of grids that advance one generation per call.

    Grids share no state, so stepping them in any order (or concurrently)
    gives the same result. Indices are 0-based throughout. A bounded subset of
    indices can be selected for display.
    """

    def __init__(self, grids: Optional[Iterable[Grid]] = None, max_selectable: int = MAX_SELECTABLE) -> None:
        """Initialize a batch.

        Args:
            grids: Optional initial grids, kept in the given order
            max_selectable: Maximum number of grids that can be selected for display
        """
        self.max_selectable = max_selectable
        self._grids: List[Grid] = []
        self._selection: Tuple[int, ...] = ()

        # Every grid counts as active until a step shows it has settled
        self._active_count = 0
        self._total_alive = 0

        for grid in grids or ():
            self.add_grid(grid)

    @classmethod
    def create_random(
        cls,
        count: int,
        rows: int,
        columns: int,
        rng: np.random.Generator,
        probability: float = 0.5,
    ) -> "SimulationBatch":
        """Create a batch of randomly populated grids.

        Args:
            count: Number of grids
            rows: Rows per grid
            columns: Columns per grid
            rng: Random source shared by all grids
            probability: Chance each cell will be alive

        Returns:
            New SimulationBatch
        """
        batch = cls()
        for _ in range(count):
            batch.add_random(rows, columns, rng, probability)
        logger.debug("Created %d random %dx%d grids", count, rows, columns)
        return batch

    @property
    def grids(self) -> Tuple[Grid, ...]:
        return tuple(self._grids)

    @property
    def active_count(self) -> int:
        """Number of grids that changed during the last step.

        Before the first step every grid is counted, even though Grid.active
        is still False for each of them.
        """
        return self._active_count

    @property
    def total_alive(self) -> int:
        """Living cells summed over all grids."""
        return self._total_alive

    @property
    def selection(self) -> Tuple[int, ...]:
        """Indices currently selected for display, in selection order."""
        return self._selection

    def __len__(self) -> int:
        return len(self._grids)

    def __iter__(self) -> Iterator[Grid]:
        return iter(self._grids)

    def __getitem__(self, index: int) -> Grid:
        return self._grids[index]

    def add_grid(self, grid: Grid) -> None:
        """Append an existing grid to the batch."""
        self._grids.append(grid)
        self._active_count += 1
        self._total_alive += grid.alive_count

    def add_random(
        self, rows: int, columns: int, rng: np.random.Generator, probability: float = 0.5
    ) -> Grid:
        """Create a randomized grid and append it.

        Args:
            rows: Number of rows
            columns: Number of columns
            rng: Random source
            probability: Chance each cell will be alive

        Returns:
            The new grid
        """
        grid = Grid(rows, columns)
        grid.randomize(rng, probability)
        self.add_grid(grid)
        return grid

    def step_all(self, executor: Optional[Executor] = None) -> None:
        """Advance every grid by one generation and refresh the aggregates.

        Args:
            executor: Optional executor used to step the grids concurrently.
                Thread and process pools both work. Each grid is submitted
                exactly once and its result is written back here.
        """
        if executor is None:
            for grid in self._grids:
                grid.step()
        else:
            # list() waits for completion and re-raises worker errors
            results = list(executor.map(_advance, self._grids))
            for grid, (cells, generation, active) in zip(self._grids, results):
                grid.adopt_state(cells, generation, active)

        self._active_count = sum(1 for grid in self._grids if grid.active)
        self._total_alive = sum(grid.alive_count for grid in self._grids)

    def set_selection(self, indices: Sequence[int]) -> None:
        """Replace the display selection.

        Args:
            indices: 0-based grid indices, in display order

        Raises:
            SelectionError: If the count is outside 1..max_selectable, or any
                index is not an integer in range or is repeated. The current
                selection is left unchanged.
        """
        indices = list(indices)
        if not indices:
            raise SelectionError("At least one grid must be selected", [0])
        if len(indices) > self.max_selectable:
            raise SelectionError(
                f"At most {self.max_selectable} grids can be selected, got {len(indices)}",
                [len(indices)],
            )

        invalid = [
            index
            for index in indices
            if not isinstance(index, Integral) or isinstance(index, bool) or not 0 <= index < len(self._grids)
        ]
        if invalid:
            raise SelectionError(
                f"Grid indices out of range 0-{len(self._grids) - 1}: {', '.join(map(str, invalid))}",
                invalid,
            )

        seen = set()
        duplicates = []
        for index in indices:
            if index in seen:
                duplicates.append(index)
            seen.add(index)
        if duplicates:
            raise SelectionError(
                f"Grid indices selected more than once: {', '.join(map(str, duplicates))}",
                duplicates,
            )

        self._selection = tuple(int(index) for index in indices)

    def selected(self) -> List[Grid]:
        """Grids at the selected indices, in selection order."""
        return [self._grids[index] for index in self._selection]

    def get_statistics(self) -> Dict[str, Any]:
        """Get batch statistics.

        Returns:
            Dictionary with batch-level aggregates and a summary per grid
        """
        cell_count = sum(grid.rows * grid.columns for grid in self._grids)
        return {
            "grid_count": len(self._grids),
            "active_count": self._active_count,
            "total_alive": self._total_alive,
            "population_density": self._total_alive / cell_count if cell_count else 0.0,
            "selection": list(self._selection),
            "grids": [
                {
                    "index": index,
                    "grid_size": grid.shape,
                    "generation": grid.generation,
                    "population": grid.alive_count,
                    "active": grid.active,
                    "bounding_box": grid.bounding_box(),
                }
                for index, grid in enumerate(self._grids)
            ],
        }
