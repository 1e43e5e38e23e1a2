"""Frontend interfaces for the Game of Life engine."""

from .controller import ControllerState, PauseOption, SimulationConfig, SimulationController
from .cli import CLIGameOfLife

__all__ = ["ControllerState", "PauseOption", "SimulationConfig", "SimulationController", "CLIGameOfLife"]
