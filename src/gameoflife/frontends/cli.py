"""Command-line interface for running batches of Game of Life simulations."""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Callable, List, Optional

import numpy as np

from ..core import codec
from ..core.batch import MAX_SELECTABLE, SimulationBatch
from ..core.errors import LifeError, SelectionError
from ..core.grid import Grid
from ..core.patterns import PatternLibrary
from ..logging_config import setup_logging
from .controller import ControllerState, PauseOption, SimulationConfig, SimulationController

logger = logging.getLogger(__name__)

CLEAR_SCREEN = "\033[2J\033[H"


def format_grid(grid: Grid) -> str:
    """Format a grid the way the console shows it.

    Args:
        grid: Grid to format

    Returns:
        Grid rows followed by the live cell count and generation
    """
    lines = [str(grid), "", f"Count of live cells: {grid.alive_count}", f"Step: {grid.generation}"]
    if grid.rows == 0:
        lines = lines[1:]
    return "\n".join(lines)


def format_batch(batch: SimulationBatch) -> str:
    """Format the batch header and every selected grid (numbered from 1)."""
    parts = [f"Active games: {batch.active_count}/{len(batch)}, total alive cells: {batch.total_alive}"]
    for index in batch.selection:
        parts.append(f"\nGame #{index + 1}")
        parts.append(format_grid(batch[index]))
    return "\n".join(parts)


class CLIGameOfLife:
    """Command-line interface for running Game of Life batches."""

    def __init__(self, output: Callable[[str], None] = print) -> None:
        self.pattern_library = PatternLibrary()
        self.output = output

    def create_batch(self, config: SimulationConfig) -> SimulationBatch:
        """Create a new batch from a configuration.

        Grids are seeded with the configured pattern (centered) when one is
        given, otherwise populated randomly.

        Raises:
            ValueError: If the pattern is unknown
        """
        if config.pattern:
            pattern = self.pattern_library.get_pattern(config.pattern)
            if pattern is None:
                raise ValueError(
                    f"Pattern '{config.pattern}' not found. "
                    f"Available patterns: {', '.join(self.pattern_library.list_patterns())}"
                )
            pattern_rows, pattern_cols = pattern.size
            offset_row = max(0, (config.rows - pattern_rows) // 2)
            offset_col = max(0, (config.columns - pattern_cols) // 2)
            batch = SimulationBatch(
                pattern.to_grid(config.rows, config.columns, offset_row, offset_col) for _ in range(config.count)
            )
            logger.info("Seeded %d grid(s) with pattern '%s'", config.count, pattern.name)
            return batch

        rng = np.random.default_rng(config.seed)
        return SimulationBatch.create_random(config.count, config.rows, config.columns, rng, config.probability)

    def load_batch(self, path: str, fmt: Optional[str] = None) -> SimulationBatch:
        """Load a batch from a file.

        Args:
            path: File to read
            fmt: 'text' or 'json' (defaults to the file extension)
        """
        fmt = fmt or codec.format_for_path(path)
        text = Path(path).read_text(encoding="utf-8")
        batch = codec.loads(text, fmt)
        logger.info("Loaded %d grid(s) from %s (%s)", len(batch), path, fmt)
        return batch

    def save_batch(self, batch: SimulationBatch, path: str, fmt: Optional[str] = None) -> None:
        """Save a batch to a file.

        Args:
            batch: Batch to save
            path: File to write
            fmt: 'text' or 'json' (defaults to the file extension)
        """
        fmt = fmt or codec.format_for_path(path)
        Path(path).write_text(codec.dumps(batch, fmt), encoding="utf-8")
        logger.info("Saved %d grid(s) to %s (%s)", len(batch), path, fmt)

    def render(self, batch: SimulationBatch, clear_screen: bool = False) -> None:
        if clear_screen:
            self.output(CLEAR_SCREEN)
        self.output(format_batch(batch))

    def run(
        self,
        batch: SimulationBatch,
        config: SimulationConfig,
        input_func: Callable[[str], str] = input,
        sleep: Callable[[float], None] = time.sleep,
    ) -> SimulationController:
        """Run the batch until the user exits or a stop condition is met.

        One generation is computed per interval. Ctrl+C pauses the simulation
        and opens the pause menu.

        Args:
            batch: Batch to run
            config: Session configuration
            input_func: Reads a line of user input
            sleep: Waits for the given number of seconds

        Returns:
            The controller in its final (exited) state
        """
        controller = SimulationController(
            batch,
            on_render=lambda b: self.render(b, config.clear_screen),
            on_save=lambda b: self.save_batch(b, config.save_path, config.save_format),
        )

        controller.render()
        self.output("Press Ctrl+C to pause...")

        while not controller.exited:
            try:
                if controller.state is ControllerState.PAUSED:
                    self._pause_menu(controller, input_func)
                    continue

                sleep(config.interval)
                controller.tick()

                if config.max_generations is not None and controller.ticks >= config.max_generations:
                    self.output(f"Reached {controller.ticks} generation(s)")
                    controller.exit()
                elif config.stop_when_stable and batch.active_count == 0:
                    self.output("All games are stable")
                    controller.exit()
            except KeyboardInterrupt:
                if controller.state is ControllerState.PAUSED:
                    controller.exit()
                else:
                    controller.pause()

        if config.save_on_exit:
            self.save_batch(batch, config.save_path, config.save_format)
            self.output(f"Games saved to {config.save_path}")

        self.output("Exiting...")
        return controller

    def _pause_menu(self, controller: SimulationController, input_func: Callable[[str], str]) -> None:
        """Show the pause menu and apply one command."""
        self.output("Paused: [c]ontinue, [s]ave, [g]ames to display, [e]xit")
        try:
            choice = input_func("> ").strip().lower()
        except EOFError:
            controller.exit()
            return

        try:
            option = PauseOption(choice[:1])
        except ValueError:
            self.output(f"Unknown option: {choice!r}")
            return

        if option is PauseOption.CHANGE_SELECTION:
            self._ask_selection(controller, input_func)
            return

        controller.handle(option)
        if option is PauseOption.SAVE:
            self.output("Game successfully saved!")

    def _ask_selection(self, controller: SimulationController, input_func: Callable[[str], str]) -> None:
        batch = controller.batch
        prompt = (
            f"Select up to {batch.max_selectable} games (1-{len(batch)}) to display, separated by a space: "
        )
        try:
            numbers = parse_selection(input_func(prompt))
        except EOFError:
            controller.exit()
            return
        except ValueError as e:
            self.output(f"Error: {e}")
            return

        try:
            controller.handle(PauseOption.CHANGE_SELECTION, [number - 1 for number in numbers])
        except SelectionError as e:
            self.output(f"Error: {numbered_selection_error(batch, numbers, e)}")

    def list_patterns(self) -> None:
        """List available patterns."""
        self.output("Available patterns:")
        for name in self.pattern_library.list_patterns():
            pattern = self.pattern_library.get_pattern(name)
            rows, cols = pattern.size
            self.output(f"  {name}: {rows}x{cols}, {pattern.population} cells")
            if pattern.description:
                self.output(f"    {pattern.description}")


def parse_selection(text: str) -> List[int]:
    """Parse a space or comma separated list of 1-based game numbers.

    Raises:
        ValueError: If any entry is not an integer
    """
    entries = text.replace(",", " ").split()
    numbers = []
    for entry in entries:
        try:
            numbers.append(int(entry))
        except ValueError:
            raise ValueError(f"Invalid game number: {entry!r}") from None
    return numbers


def numbered_selection_error(batch: SimulationBatch, numbers: List[int], error: SelectionError) -> SelectionError:
    """Restate a selection error in terms of the 1-based game numbers the user typed."""
    if not numbers or len(numbers) > batch.max_selectable:
        return error
    invalid = list(dict.fromkeys(number for number in numbers if number - 1 in error.invalid))
    return SelectionError(
        f"Invalid game numbers {', '.join(map(str, invalid))} (choose up to {batch.max_selectable} "
        f"different games from 1-{len(batch)})",
        invalid,
    )


def select_games(batch: SimulationBatch, numbers: List[int]) -> None:
    """Select games for display by their 1-based numbers.

    Raises:
        SelectionError: With the offending 1-based numbers
    """
    try:
        batch.set_selection([number - 1 for number in numbers])
    except SelectionError as e:
        raise numbered_selection_error(batch, numbers, e) from None


def default_selection(batch: SimulationBatch) -> List[int]:
    """First grids of the batch, up to the selection limit (0-based)."""
    return list(range(min(len(batch), batch.max_selectable)))


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Run batches of Conway's Game of Life simulations in the console",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run 100 random 20x20 games, showing games 1, 5 and 7
  gameoflife --rows 20 --columns 20 --count 100 --display 1 5 7

  # Reproducible run of 50 generations, saved to a text file at the end
  gameoflife --seed 42 --max-generations 50 --save games.txt --save-on-exit

  # Run a glider until every game stops changing
  gameoflife --pattern Glider --until-stable --interval 0.2

  # Continue previously saved games
  gameoflife --load save.json
        """,
    )

    # Grid configuration
    parser.add_argument("-r", "--rows", type=int, default=10, help="Rows per grid (default: 10)")
    parser.add_argument("-c", "--columns", type=int, default=10, help="Columns per grid (default: 10)")
    parser.add_argument("-n", "--count", type=int, default=1, help="Number of games to generate (default: 1)")
    parser.add_argument(
        "-p",
        "--population",
        type=float,
        default=0.5,
        help="Chance each cell starts alive, 0.0-1.0 (default: 0.5)",
    )
    parser.add_argument("--seed", type=int, help="Random seed for reproducible games")
    parser.add_argument("--pattern", type=str, help="Seed every game with a named pattern instead of random cells")
    parser.add_argument(
        "--max-size",
        type=int,
        default=20,
        help="Upper bound for rows and columns (default: 20)",
    )
    parser.add_argument(
        "--max-count",
        type=int,
        default=1000,
        help="Upper bound for the number of games (default: 1000)",
    )

    # Persistence
    parser.add_argument("-l", "--load", type=str, metavar="FILE", help="Load games from a save file")
    parser.add_argument(
        "-s",
        "--save",
        type=str,
        default="save.json",
        metavar="FILE",
        help="File used when saving games (default: save.json)",
    )
    parser.add_argument(
        "--format",
        choices=codec.FORMATS,
        help="Save file format (default: from file extension, .json is JSON, anything else text)",
    )
    parser.add_argument("--save-on-exit", action="store_true", help="Save all games when the session ends")

    # Simulation control
    parser.add_argument(
        "-d",
        "--display",
        type=int,
        nargs="+",
        metavar="N",
        help=f"Game numbers to display, up to {MAX_SELECTABLE} (default: the first games)",
    )
    parser.add_argument(
        "-i",
        "--interval",
        type=float,
        default=1.0,
        help="Seconds between generations (default: 1.0)",
    )
    parser.add_argument(
        "-m",
        "--max-generations",
        type=int,
        help="Stop after this many generations (default: run until exit)",
    )
    parser.add_argument("--until-stable", action="store_true", help="Stop once no game changes any more")
    parser.add_argument("--clear", action="store_true", help="Clear the screen between generations")

    # Output configuration
    parser.add_argument("--list-patterns", action="store_true", help="List available patterns and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print detailed diagnostic information")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING, or DEBUG with --verbose)",
    )
    parser.add_argument("--log-file", type=str, help="Also write log messages to this file")

    return parser


def validate_args(args: argparse.Namespace) -> bool:
    """Validate command-line arguments.

    Args:
        args: Parsed arguments

    Returns:
        True if arguments are valid
    """
    errors = []

    if not args.load:
        if not 1 <= args.rows <= args.max_size:
            errors.append(f"Rows must be between 1 and {args.max_size}")

        if not 1 <= args.columns <= args.max_size:
            errors.append(f"Columns must be between 1 and {args.max_size}")

        if not 1 <= args.count <= args.max_count:
            errors.append(f"Number of games must be between 1 and {args.max_count}")

        if not 0.0 <= args.population <= 1.0:
            errors.append("Population rate must be between 0.0 and 1.0")

    if args.interval < 0:
        errors.append("Interval must be non-negative")

    if args.max_generations is not None and args.max_generations <= 0:
        errors.append("Max generations must be positive")

    if args.display is not None and len(args.display) > MAX_SELECTABLE:
        errors.append(f"At most {MAX_SELECTABLE} games can be displayed")

    if errors:
        print("Error: Invalid arguments:")
        for error in errors:
            print(f"  - {error}")
        return False

    return True


def config_from_args(args: argparse.Namespace) -> SimulationConfig:
    return SimulationConfig(
        rows=args.rows,
        columns=args.columns,
        count=args.count,
        probability=args.population,
        seed=args.seed,
        pattern=args.pattern,
        selection=args.display,
        interval=args.interval,
        max_generations=args.max_generations,
        stop_when_stable=args.until_stable,
        save_path=args.save,
        save_format=args.format,
        save_on_exit=args.save_on_exit,
        clear_screen=args.clear,
    )


def main() -> int:
    """Main entry point for CLI interface.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = create_parser()
    args = parser.parse_args()

    if args.log_level:
        level = getattr(logging, args.log_level)
    else:
        level = logging.DEBUG if args.verbose else logging.WARNING
    setup_logging(level, args.log_file)

    cli = CLIGameOfLife()

    if args.list_patterns:
        cli.list_patterns()
        return 0

    if not validate_args(args):
        return 1

    config = config_from_args(args)

    try:
        if args.load:
            batch = cli.load_batch(args.load, args.format)
        else:
            batch = cli.create_batch(config)

        if config.selection:
            select_games(batch, config.selection)
        elif len(batch) > 0:
            batch.set_selection(default_selection(batch))

        cli.run(batch, config)
        return 0

    except KeyboardInterrupt:
        print("\nSimulation interrupted by user")
        return 1
    except (LifeError, OSError) as e:
        print(f"Error: {e}")
        return 1
    except Exception as e:
        print(f"Error: {e}")
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
