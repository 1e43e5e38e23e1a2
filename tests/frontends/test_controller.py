"""Tests for the simulation controller state machine."""

from unittest.mock import Mock

import pytest

from gameoflife.core.batch import SimulationBatch
from gameoflife.core.errors import SelectionError
from gameoflife.core.grid import Grid
from gameoflife.frontends.controller import (
    ControllerState,
    PauseOption,
    SimulationConfig,
    SimulationController,
)


def make_controller(**kwargs):
    batch = SimulationBatch([Grid.from_cells([[False, True, False]] * 3) for _ in range(3)])
    batch.set_selection([0])
    return SimulationController(batch, **kwargs)


class TestSimulationController:
    """Test cases for SimulationController."""

    def test_initial_state(self):
        """Test the controller starts running."""
        controller = make_controller()
        assert controller.state is ControllerState.RUNNING
        assert controller.ticks == 0
        assert not controller.exited

    def test_tick_steps_and_renders(self):
        """Test a tick advances the batch and renders it."""
        on_render = Mock()
        controller = make_controller(on_render=on_render)

        assert controller.tick() is True
        assert controller.ticks == 1
        assert all(grid.generation == 2 for grid in controller.batch)
        on_render.assert_called_once_with(controller.batch)

    def test_tick_ignored_while_paused(self):
        """Test ticks do nothing while paused."""
        on_render = Mock()
        controller = make_controller(on_render=on_render)
        controller.pause()

        assert controller.tick() is False
        assert controller.ticks == 0
        assert controller.batch[0].generation == 1
        on_render.assert_not_called()

    def test_pause_and_resume(self):
        """Test pausing and resuming."""
        controller = make_controller()
        controller.pause()
        assert controller.state is ControllerState.PAUSED
        controller.resume()
        assert controller.state is ControllerState.RUNNING
        controller.tick()
        assert controller.ticks == 1

    def test_continue(self):
        """Test the continue option resumes."""
        controller = make_controller()
        controller.pause()
        assert controller.handle(PauseOption.CONTINUE) is ControllerState.RUNNING

    def test_save_stays_paused(self):
        """Test saving calls the handler and keeps the menu open."""
        on_save = Mock()
        controller = make_controller(on_save=on_save)
        controller.pause()

        assert controller.handle(PauseOption.SAVE) is ControllerState.PAUSED
        on_save.assert_called_once_with(controller.batch)

    def test_save_without_handler(self):
        """Test saving without a handler is harmless."""
        controller = make_controller()
        controller.pause()
        assert controller.handle(PauseOption.SAVE) is ControllerState.PAUSED

    def test_change_selection(self):
        """Test changing the displayed games resumes the simulation."""
        controller = make_controller()
        controller.pause()

        assert controller.handle(PauseOption.CHANGE_SELECTION, [2, 1]) is ControllerState.RUNNING
        assert controller.batch.selection == (2, 1)

    def test_change_selection_rejected(self):
        """Test an invalid selection keeps the state and previous selection."""
        controller = make_controller()
        controller.pause()

        with pytest.raises(SelectionError):
            controller.handle(PauseOption.CHANGE_SELECTION, [5])
        assert controller.state is ControllerState.PAUSED
        assert controller.batch.selection == (0,)

    def test_exit(self):
        """Test exiting ends the session for good."""
        controller = make_controller()
        controller.pause()

        assert controller.handle(PauseOption.EXIT) is ControllerState.EXITED
        assert controller.exited
        assert controller.tick() is False
        assert controller.handle(PauseOption.CONTINUE) is ControllerState.EXITED
        controller.resume()
        assert controller.exited

    def test_exit_while_running(self):
        """Test the session can be ended without pausing first."""
        controller = make_controller()
        controller.exit()
        assert controller.state is ControllerState.EXITED


class TestSimulationConfig:
    """Test cases for SimulationConfig."""

    def test_defaults(self):
        """Test default configuration values."""
        config = SimulationConfig()
        assert config.rows == 10
        assert config.columns == 10
        assert config.count == 1
        assert config.probability == 0.5
        assert config.interval == 1.0
        assert config.max_generations is None
        assert config.save_path == "save.json"
        assert config.selection is None
