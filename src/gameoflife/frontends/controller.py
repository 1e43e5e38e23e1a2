"""Run/pause/exit control for an interactive simulation session."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence

from ..core.batch import SimulationBatch

logger = logging.getLogger(__name__)


@dataclass
class SimulationConfig:
    """Configuration for a simulation session."""
    rows: int = 10
    columns: int = 10
    count: int = 1
    probability: float = 0.5
    seed: Optional[int] = None
    pattern: Optional[str] = None
    selection: Optional[List[int]] = None  # 1-based game numbers
    interval: float = 1.0
    max_generations: Optional[int] = None
    stop_when_stable: bool = False
    save_path: str = "save.json"
    save_format: Optional[str] = None
    save_on_exit: bool = False
    clear_screen: bool = False


class ControllerState(Enum):
    RUNNING = "running"
    PAUSED = "paused"
    EXITED = "exited"


class PauseOption(Enum):
    """Choices offered while the simulation is paused."""
    CONTINUE = "c"
    SAVE = "s"
    CHANGE_SELECTION = "g"
    EXIT = "e"


class SimulationController:
    """State machine driving a batch from ticks and user commands.

    The controller knows nothing about wall-clock time or the console; the
    caller decides when a tick has elapsed and which command the user gave.
    """

    def __init__(
        self,
        batch: SimulationBatch,
        on_render: Optional[Callable[[SimulationBatch], None]] = None,
        on_save: Optional[Callable[[SimulationBatch], None]] = None,
    ) -> None:
        """Initialize the controller in the running state.

        Args:
            batch: Batch to advance
            on_render: Called with the batch after every step
            on_save: Called with the batch when the user asks to save
        """
        self.batch = batch
        self.on_render = on_render
        self.on_save = on_save
        self.state = ControllerState.RUNNING
        self.ticks = 0

    @property
    def exited(self) -> bool:
        return self.state is ControllerState.EXITED

    def render(self) -> None:
        if self.on_render is not None:
            self.on_render(self.batch)

    def tick(self) -> bool:
        """Handle an elapsed tick.

        Returns:
            True if the batch was advanced, False when paused or exited
        """
        if self.state is not ControllerState.RUNNING:
            return False

        self.batch.step_all()
        self.ticks += 1
        self.render()
        return True

    def pause(self) -> None:
        if self.state is ControllerState.RUNNING:
            self.state = ControllerState.PAUSED
            logger.debug("Paused after %d tick(s)", self.ticks)

    def resume(self) -> None:
        if self.state is ControllerState.PAUSED:
            self.state = ControllerState.RUNNING
            logger.debug("Resumed")

    def exit(self) -> None:
        self.state = ControllerState.EXITED

    def handle(self, option: PauseOption, selection: Optional[Sequence[int]] = None) -> ControllerState:
        """Apply a pause-menu command.

        Args:
            option: Command chosen by the user
            selection: New 0-based display selection for CHANGE_SELECTION

        Returns:
            The resulting state

        Raises:
            SelectionError: If the new selection is rejected; the state and
                the previous selection are left unchanged
        """
        if self.state is ControllerState.EXITED:
            return self.state

        if option is PauseOption.CONTINUE:
            self.resume()
        elif option is PauseOption.SAVE:
            if self.on_save is None:
                logger.warning("Save requested but no save handler is configured")
            else:
                self.on_save(self.batch)
        elif option is PauseOption.CHANGE_SELECTION:
            self.batch.set_selection(selection or [])
            self.resume()
        elif option is PauseOption.EXIT:
            self.exit()

        return self.state
