#!/usr/bin/env python3
"""
Example usage of the gameoflife package.
"""

import numpy as np

from gameoflife import PatternLibrary, SimulationBatch
from gameoflife.core import codec


def main():
    """Demonstrate programmatic usage of the gameoflife package."""
    # Place a glider in the middle of a 12x12 grid
    library = PatternLibrary()
    glider = library.get_pattern("Glider")

    if glider:
        grid = glider.to_grid(12, 12, offset_row=4, offset_col=4)

        print("Initial state:")
        print(grid)
        print(f"Population: {grid.alive_count}")
        print()

        for _ in range(4):
            grid.step()
            print(f"Generation {grid.generation}:")
            print(grid)
            print(f"Population: {grid.alive_count}")
            print()

    # Run a batch of random games side by side
    rng = np.random.default_rng(42)
    batch = SimulationBatch.create_random(50, 10, 10, rng, probability=0.3)
    batch.set_selection([0, 1])

    for _ in range(20):
        batch.step_all()
        if batch.active_count == 0:
            break

    stats = batch.get_statistics()
    print("Batch statistics:")
    for key in ("grid_count", "active_count", "total_alive", "population_density", "selection"):
        print(f"  {key}: {stats[key]}")

    # Snapshots can be written and read back as text or JSON
    restored = codec.loads_json(codec.dumps_json(batch))
    print(f"Restored {len(restored)} games at generation {restored[0].generation}")


if __name__ == "__main__":
    main()
