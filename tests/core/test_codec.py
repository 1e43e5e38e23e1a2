"""Tests for the snapshot codec."""

import json

import numpy as np
import pytest

from gameoflife.core import codec
from gameoflife.core.batch import SimulationBatch
from gameoflife.core.errors import FormatError
from gameoflife.core.grid import Grid


def sample_batch():
    rng = np.random.default_rng(8)
    batch = SimulationBatch.create_random(3, 5, 4, rng)
    batch.add_random(2, 7, rng)
    for _ in range(3):
        batch.step_all()
    batch.add_grid(Grid(0, 3))
    return batch


def assert_same_batch(restored, original):
    assert len(restored) == len(original)
    for loaded, grid in zip(restored, original):
        assert loaded.shape == grid.shape
        assert loaded.generation == grid.generation
        assert np.array_equal(loaded.cells, grid.cells)
        assert loaded.alive_count == grid.alive_count


class TestSnapshot:
    """Test cases for encode and decode."""

    def test_encode(self):
        """Test each grid maps to its cells and generation."""
        batch = SimulationBatch([Grid.from_cells([[True, False]], generation=5), Grid(1, 1)])
        snapshot = codec.encode(batch)

        assert len(snapshot) == 2
        assert snapshot[0].generation == 5
        assert snapshot[0].cells.tolist() == [[True, False]]
        assert snapshot[1].generation == 1

    def test_encode_copies_cells(self):
        """Test the snapshot does not change when the batch keeps running."""
        batch = SimulationBatch([Grid.from_cells([[False, True, False]] * 3)])
        snapshot = codec.encode(batch)
        batch.step_all()
        batch.step_all()
        batch.step_all()
        assert snapshot[0].cells.tolist() == [[False, True, False]] * 3

    def test_round_trip(self):
        """Test decode(encode(batch)) restores every grid."""
        batch = sample_batch()
        assert_same_batch(codec.decode(codec.encode(batch)), batch)

    def test_decode_invalid_entry(self):
        """Test a malformed entry aborts the whole decode."""
        snapshot = [
            codec.GridSnapshot(np.zeros((2, 2), dtype=bool), 1),
            codec.GridSnapshot(np.zeros((2, 2, 2), dtype=bool), 1),
        ]
        with pytest.raises(FormatError):
            codec.decode(snapshot)


class TestTextFormat:
    """Test cases for the text format."""

    def test_dumps_text(self):
        """Test the documented layout."""
        batch = SimulationBatch(
            [
                Grid.from_cells([[True, False], [False, True]], generation=3),
                Grid.from_cells([[False, False, True]], generation=10),
            ]
        )
        assert codec.dumps_text(batch) == "2\n2 2 3\n+ \n +\n1 3 10\n  +\n"

    def test_dumps_text_legacy(self):
        """Test the single-grid format omits the count line."""
        batch = SimulationBatch([Grid.from_cells([[True, True]], generation=2)])
        assert codec.dumps_text(batch, legacy=True) == "1 2 2\n++\n"

    def test_dumps_text_legacy_requires_one_grid(self):
        """Test the single-grid format cannot hold several grids."""
        with pytest.raises(FormatError):
            codec.dumps_text(sample_batch(), legacy=True)

    def test_round_trip(self):
        """Test text round trip keeps dimensions, generations and cells."""
        batch = sample_batch()
        assert_same_batch(codec.loads_text(codec.dumps_text(batch)), batch)

    def test_loads_text(self):
        """Test parsing a multi-grid file."""
        batch = codec.loads_text("2\n3 3 4\n + \n + \n + \n2 2 1\n++\n++\n")
        assert len(batch) == 2
        assert batch[0].generation == 4
        assert batch[0].alive_count == 3
        assert batch[1].shape == (2, 2)
        assert batch[1].alive_count == 4
        assert batch.active_count == 2
        assert batch.total_alive == 7

    def test_loads_legacy(self):
        """Test parsing the single-grid format."""
        batch = codec.loads_text("3 3 0\n   \n+++\n   \n")
        assert len(batch) == 1
        assert batch[0].generation == 0
        assert str(batch[0]) == "   \n+++\n   "

    def test_loads_windows_line_endings(self):
        """Test CRLF line endings are accepted."""
        batch = codec.loads_text("1\r\n1 2 1\r\n+ \r\n")
        assert batch[0].to_list() == [[True, False]]

    def test_loads_empty_batch(self):
        """Test a zero count gives an empty batch."""
        assert len(codec.loads_text("0\n")) == 0

    def test_loads_ignores_trailing_blank_lines(self):
        """Test blank lines after the last grid are ignored."""
        batch = codec.loads_text("1\n1 1 1\n+\n\n\n")
        assert len(batch) == 1

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "x\n",
            "1 2\n",
            "1\nthree 3 1\n+++\n+++\n+++\n",
            "1\n3 3 g\n+++\n+++\n+++\n",
            "1\n1 1\n+\n",
            "-1\n",
            "1\n-1 2 1\n",
            "1\n3 2 1\n++\n++\n",
            "1\n2 3 1\n+++\n++\n",
            "1\n2 3 1\n+++\n++++\n",
            "1\n1 3 1\n+*+\n",
            "2\n1 1 1\n+\n",
            "1\n1 1 1\n+\n1 1 1\n+\n",
            "1 1 1\n+\nextra\n",
            "1\n10000000 10000000 1\n",
            "1\n1 10000000000 1\n+\n",
        ],
        ids=[
            "empty",
            "bad-count",
            "bad-first-line",
            "non-numeric-rows",
            "non-numeric-generation",
            "short-header",
            "negative-count",
            "negative-rows",
            "missing-rows",
            "short-row",
            "long-row",
            "invalid-glyph",
            "fewer-grids-than-count",
            "more-grids-than-count",
            "legacy-trailing-content",
            "huge-header-without-rows",
            "huge-column-count",
        ],
    )
    def test_malformed(self, text):
        """Test malformed input raises FormatError."""
        with pytest.raises(FormatError):
            codec.loads_text(text)

    def test_format_error_names_line(self):
        """Test error messages point at the offending line."""
        with pytest.raises(FormatError, match="Line 4"):
            codec.loads_text("1\n3 3 1\n+++\n+x+\n+++\n")


class TestStructuredFormat:
    """Test cases for the JSON format."""

    def test_to_structured(self):
        """Test the structured layout."""
        batch = SimulationBatch([Grid.from_cells([[True, False]], generation=6)])
        assert codec.to_structured(batch) == [
            {"rows": 1, "columns": 2, "generation": 6, "cells": [[True, False]]}
        ]

    def test_dumps_json_is_valid_json(self):
        """Test the JSON output parses with the standard library."""
        data = json.loads(codec.dumps_json(sample_batch()))
        assert isinstance(data, list)
        assert len(data) == 5

    def test_round_trip(self):
        """Test JSON round trip keeps dimensions, generations and cells."""
        batch = sample_batch()
        assert_same_batch(codec.loads_json(codec.dumps_json(batch)), batch)

    def test_loads_without_dimensions(self):
        """Test rows and columns are optional."""
        batch = codec.loads_json('[{"cells": [[true, false], [true, true]], "generation": 9}]')
        assert batch[0].shape == (2, 2)
        assert batch[0].generation == 9
        assert batch[0].alive_count == 3

    @pytest.mark.parametrize(
        "text",
        [
            "not json",
            '{"cells": [], "generation": 1}',
            "[1]",
            '[{"cells": [[true]]}]',
            '[{"generation": 1}]',
            '[{"cells": [[true]], "generation": "1"}]',
            '[{"cells": [[true]], "generation": true}]',
            '[{"cells": [true], "generation": 1}]',
            '[{"cells": [[true], [true, false]], "generation": 1}]',
            '[{"cells": [[1, 0]], "generation": 1}]',
            '[{"rows": 2, "cells": [[true]], "generation": 1}]',
            '[{"rows": 1, "columns": 2, "cells": [[true]], "generation": 1}]',
            '[{"rows": -1, "columns": 0, "cells": [], "generation": 1}]',
        ],
    )
    def test_malformed(self, text):
        """Test malformed JSON raises FormatError."""
        with pytest.raises(FormatError):
            codec.loads_json(text)


class TestFormatSelection:
    """Test cases for choosing a format by name or path."""

    def test_format_for_path(self):
        """Test the format follows the file extension."""
        assert codec.format_for_path("save.json") == "json"
        assert codec.format_for_path("SAVE.JSON") == "json"
        assert codec.format_for_path("save.txt") == "text"
        assert codec.format_for_path("save") == "text"

    @pytest.mark.parametrize("fmt", codec.FORMATS)
    def test_dumps_loads(self, fmt):
        """Test the named format round trips."""
        batch = sample_batch()
        assert_same_batch(codec.loads(codec.dumps(batch, fmt), fmt), batch)

    def test_unknown_format(self):
        """Test unknown format names are rejected."""
        with pytest.raises(ValueError):
            codec.dumps(SimulationBatch(), "yaml")
        with pytest.raises(ValueError):
            codec.loads("", "yaml")
