"""
Exceptions raised by the Minesweeper engine.
"""
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .cell import Cell


class MinesweeperError(Exception):
    """Base class for all engine errors."""


class GameAlreadyStartedError(MinesweeperError):
    """Grid or difficulty changed after it was committed."""

    def __init__(self) -> None:
        super().__init__("Game already started. Try setting a new board.")


class UnspecifiedDifficultyError(MinesweeperError):
    """Game played before a difficulty was set."""

    def __init__(self) -> None:
        super().__init__(
            "Difficulty was not specified. "
            "Call set_difficulty() before calling play()."
        )


class UnspecifiedGridError(MinesweeperError):
    """Game played before a grid was set."""

    def __init__(self) -> None:
        super().__init__(
            "Grid was not specified. "
            "Pass a Grid or call set_grid() before calling play()."
        )


class GameNotStartedError(MinesweeperError):
    """Cell visited before play() succeeded."""

    def __init__(self) -> None:
        super().__init__("Game not started. Call play() before visiting cells.")


class ExplodedError(MinesweeperError):
    """
    A bomb was visited.

    Attributes:
        x: Column of the detonated cell.
        y: Row of the detonated cell.
        revealed: The detonated cell followed by every other bomb.
    """

    def __init__(
        self, x: int, y: int, revealed: Optional[List["Cell"]] = None
    ) -> None:
        super().__init__(f"Game over at X={x} Y={y}")
        self.x = x
        self.y = y
        self.revealed = revealed or []
