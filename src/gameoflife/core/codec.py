"""Snapshot codec for saving and restoring simulation batches.

Two interchangeable representations are supported:

Text::

    <count>
    <rows> <columns> <generation>
    <rows lines of exactly <columns> characters, '+' alive and ' ' dead>
    ... repeated <count> times ...

A legacy single-grid file omits the ``<count>`` line; it is detected on load
by a three-field first line.

JSON: a list of ``{"rows", "columns", "generation", "cells"}`` objects where
``cells`` is a list of rows of booleans.

The codec only works on in-memory strings; reading and writing files is up to
the caller.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

import numpy as np

from .batch import SimulationBatch
from .errors import DimensionError, FormatError
from .grid import ALIVE_CELL, DEAD_CELL, Grid

logger = logging.getLogger(__name__)

FORMATS = ("text", "json")


@dataclass
class GridSnapshot:
    """Persisted state of a single grid."""

    cells: np.ndarray
    generation: int


Snapshot = List[GridSnapshot]


def encode(batch: SimulationBatch) -> Snapshot:
    """Capture the state of every grid, in batch order.

    Cells are copied so the snapshot stays valid while the batch keeps running.
    """
    return [GridSnapshot(np.array(grid.cells, dtype=bool), grid.generation) for grid in batch]


def decode(snapshot: Snapshot) -> SimulationBatch:
    """Rebuild a batch from a snapshot.

    Raises:
        FormatError: If any entry does not describe a valid grid. No batch is
            returned in that case.
    """
    grids = []
    for position, entry in enumerate(snapshot):
        try:
            grids.append(Grid.from_cells(entry.cells, entry.generation))
        except DimensionError as exc:
            raise FormatError(f"Grid {position}: {exc}") from exc

    logger.debug("Decoded %d grid(s)", len(grids))
    return SimulationBatch(grids)


# Text format


def dumps_text(batch: SimulationBatch, legacy: bool = False) -> str:
    """Serialize a batch to the text format.

    Args:
        batch: Batch to serialize
        legacy: Write the single-grid format without a count line

    Raises:
        FormatError: If legacy is requested for a batch that does not hold
            exactly one grid
    """
    snapshot = encode(batch)
    lines: List[str] = []

    if legacy:
        if len(snapshot) != 1:
            raise FormatError(f"Single-grid format holds exactly one grid, batch has {len(snapshot)}")
    else:
        lines.append(str(len(snapshot)))

    for entry in snapshot:
        rows, columns = entry.cells.shape
        lines.append(f"{rows} {columns} {entry.generation}")
        for row in entry.cells:
            lines.append("".join(ALIVE_CELL if alive else DEAD_CELL for alive in row))

    return "\n".join(lines) + "\n"


def loads_text(text: str) -> SimulationBatch:
    """Parse the text format (multi-grid or legacy single-grid).

    Raises:
        FormatError: On any structural problem in the input
    """
    lines = text.splitlines()
    if not lines:
        raise FormatError("Input is empty")

    header = lines[0].split()
    if len(header) == 3:
        count, position = 1, 0
    elif len(header) == 1:
        count = _parse_int(header[0], "grid count", 1)
        if count < 0:
            raise FormatError(f"Line 1: grid count must be non-negative, got {count}")
        position = 1
    else:
        raise FormatError(f"Line 1: expected a grid count or a grid header, got {lines[0]!r}")

    snapshot = []
    for _ in range(count):
        entry, position = _read_grid(lines, position)
        snapshot.append(entry)

    for number in range(position, len(lines)):
        if lines[number].strip():
            raise FormatError(f"Line {number + 1}: unexpected content after {count} grid(s)")

    return decode(snapshot)


def _parse_int(value: str, name: str, line_number: int) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise FormatError(f"Line {line_number}: {name} is not a number: {value!r}") from exc


def _read_grid(lines: List[str], position: int) -> Tuple[GridSnapshot, int]:
    """Read one header plus its rows starting at lines[position].

    Returns:
        The snapshot entry and the position of the next unread line
    """
    if position >= len(lines):
        raise FormatError(f"Line {position + 1}: missing grid header")

    line_number = position + 1
    fields = lines[position].split()
    if len(fields) != 3:
        raise FormatError(f"Line {line_number}: expected '<rows> <columns> <generation>', got {lines[position]!r}")

    rows = _parse_int(fields[0], "rows", line_number)
    columns = _parse_int(fields[1], "columns", line_number)
    generation = _parse_int(fields[2], "generation", line_number)
    if rows < 0 or columns < 0:
        raise FormatError(f"Line {line_number}: dimensions must be non-negative, got {rows}x{columns}")

    # Row count and lengths are checked before the matrix is allocated
    available = len(lines) - position - 1
    if available < rows:
        raise FormatError(f"Line {line_number}: expected {rows} rows, found {available}")
    row_lines = lines[position + 1 : position + 1 + rows]
    for index, line in enumerate(row_lines, start=position + 1):
        if len(line) != columns:
            raise FormatError(f"Line {index + 1}: expected {columns} cells, got {len(line)}")

    cells = np.zeros((rows, columns), dtype=bool)
    for r, line in enumerate(row_lines):
        index = position + 1 + r
        for c, glyph in enumerate(line):
            if glyph == ALIVE_CELL:
                cells[r, c] = True
            elif glyph != DEAD_CELL:
                raise FormatError(f"Line {index + 1}: invalid cell {glyph!r} at column {c + 1}")

    return GridSnapshot(cells, generation), position + 1 + rows


# Structured (JSON) format


def to_structured(batch: SimulationBatch) -> List[Dict[str, Any]]:
    """Convert a batch to a JSON-compatible list of dictionaries."""
    return [
        {
            "rows": int(entry.cells.shape[0]),
            "columns": int(entry.cells.shape[1]),
            "generation": entry.generation,
            "cells": entry.cells.tolist(),
        }
        for entry in encode(batch)
    ]


def from_structured(data: Any) -> SimulationBatch:
    """Rebuild a batch from the structured representation.

    Raises:
        FormatError: If the data does not match the expected layout
    """
    if not isinstance(data, list):
        raise FormatError(f"Expected a list of grids, got {type(data).__name__}")

    snapshot = [_read_structured_grid(position, item) for position, item in enumerate(data)]
    return decode(snapshot)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _read_structured_grid(position: int, item: Any) -> GridSnapshot:
    if not isinstance(item, dict):
        raise FormatError(f"Grid {position}: expected an object, got {type(item).__name__}")
    if "cells" not in item or "generation" not in item:
        raise FormatError(f"Grid {position}: 'cells' and 'generation' are required")

    generation = item["generation"]
    if not _is_int(generation):
        raise FormatError(f"Grid {position}: generation must be an integer, got {generation!r}")

    cells = item["cells"]
    if not isinstance(cells, list) or not all(isinstance(row, list) for row in cells):
        raise FormatError(f"Grid {position}: cells must be a list of rows")

    rows = item.get("rows", len(cells))
    columns = item.get("columns", len(cells[0]) if cells else 0)
    if not _is_int(rows) or not _is_int(columns) or rows < 0 or columns < 0:
        raise FormatError(f"Grid {position}: invalid dimensions {rows!r}x{columns!r}")
    if len(cells) != rows:
        raise FormatError(f"Grid {position}: expected {rows} rows, got {len(cells)}")

    for r, row in enumerate(cells):
        if len(row) != columns:
            raise FormatError(f"Grid {position}: row {r} has {len(row)} cells, expected {columns}")
        if not all(isinstance(value, bool) for value in row):
            raise FormatError(f"Grid {position}: row {r} contains non-boolean cells")

    matrix = np.array(cells, dtype=bool).reshape(rows, columns)
    return GridSnapshot(matrix, generation)


def dumps_json(batch: SimulationBatch, indent: int = 2) -> str:
    """Serialize a batch to JSON."""
    return json.dumps(to_structured(batch), indent=indent)


def loads_json(text: str) -> SimulationBatch:
    """Parse a JSON document produced by dumps_json."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise FormatError(f"Invalid JSON: {exc}") from exc
    return from_structured(data)


# Format selection


def format_for_path(path: Union[str, Path]) -> str:
    """Pick the storage format from a file name: '.json' is JSON, anything else text."""
    return "json" if Path(path).suffix.lower() == ".json" else "text"


def dumps(batch: SimulationBatch, fmt: str = "text") -> str:
    """Serialize a batch in the named format."""
    if fmt == "text":
        return dumps_text(batch)
    if fmt == "json":
        return dumps_json(batch)
    raise ValueError(f"Unknown format {fmt!r}, expected one of {', '.join(FORMATS)}")


def loads(text: str, fmt: str = "text") -> SimulationBatch:
    """Parse a batch from the named format."""
    if fmt == "text":
        return loads_text(text)
    if fmt == "json":
        return loads_json(text)
    raise ValueError(f"Unknown format {fmt!r}, expected one of {', '.join(FORMATS)}")
