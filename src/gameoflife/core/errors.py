"""Exceptions raised by the Game of Life engine."""

from typing import Iterable, Tuple


class LifeError(Exception):
    """Base class for all engine errors."""


class DimensionError(LifeError, ValueError):
    """Raised when a grid is constructed with invalid dimensions."""


class FormatError(LifeError, ValueError):
    """Raised when stored grid data is structurally invalid."""


class SelectionError(LifeError, ValueError):
    """Raised when a display selection is rejected.

    Attributes:
        invalid: The offending values (indices, or the requested count when
            too many or too few indices were given)
    """

    def __init__(self, message: str, invalid: Iterable = ()) -> None:
        super().__init__(message)
        self.invalid: Tuple = tuple(invalid)
