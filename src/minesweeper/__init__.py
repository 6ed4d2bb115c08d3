"""
Minesweeper engine.

Provides board generation, cell visiting with flood-fill and chorded
reveal, flagging, and win/lose events for embedding applications.
"""
from .cell import Cell, CellKind
from .board import Board, Difficulty, Grid
from .history import Action, History, Record
from .events import Event, EventChannel
from .errors import (
    MinesweeperError,
    GameAlreadyStartedError,
    GameNotStartedError,
    UnspecifiedDifficultyError,
    UnspecifiedGridError,
    ExplodedError,
)
from .game import Game, new_game
from .environment import MinesweeperEnv

__all__ = [
    "Cell",
    "CellKind",
    "Board",
    "Difficulty",
    "Grid",
    "Action",
    "History",
    "Record",
    "Event",
    "EventChannel",
    "MinesweeperError",
    "GameAlreadyStartedError",
    "GameNotStartedError",
    "UnspecifiedDifficultyError",
    "UnspecifiedGridError",
    "ExplodedError",
    "Game",
    "new_game",
    "MinesweeperEnv",
]
