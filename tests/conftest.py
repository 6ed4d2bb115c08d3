"""
Pytest configuration and shared fixtures.
"""
import pytest
import sys
from pathlib import Path
from typing import Iterable, Tuple

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minesweeper import (
    Board, Cell, CellKind, Difficulty, EventChannel, Game, Grid, new_game,
)


SAMPLE_WIDTH = 10
SAMPLE_HEIGHT = 40


def build_board(width: int, height: int, bombs: Iterable[Tuple[int, int]]) -> Board:
    """Create a board with bombs at fixed (x, y) positions and tallied hints."""
    board = Board(Grid(width, height))
    for x, y in bombs:
        board.get_cell(x, y).kind = CellKind.BOMB
    board.tally_hints()
    return board


def rig_game(
    game: Game, bombs: Iterable[Tuple[int, int]]
) -> Game:
    """
    Replace the random layout of a started game with fixed bombs.

    The bomb count must match what the game's difficulty calls for.
    """
    for cell in game.board:
        cell.kind = CellKind.UNKNOWN
        cell.value = 0
    for x, y in bombs:
        game.board.get_cell(x, y).kind = CellKind.BOMB
    game.board.tally_hints()
    return game


# ============================================================================
# Game Fixtures
# ============================================================================

@pytest.fixture
def blank_game() -> Game:
    """Create a game with nothing configured."""
    game, _ = new_game()
    return game


@pytest.fixture
def sample_game() -> Game:
    """Create a 10x40 game with grid set but not started."""
    game, _ = new_game(Grid(SAMPLE_WIDTH, SAMPLE_HEIGHT))
    return game


@pytest.fixture
def easy_game(sample_game: Game) -> Game:
    """Create a started 10x40 easy game."""
    sample_game.set_difficulty(Difficulty.EASY)
    sample_game.play()
    return sample_game


@pytest.fixture
def rigged_game() -> Game:
    """
    Create a started 5x5 easy game with bombs at (4, 0) and (4, 4).

    Layout (x to the right, y down):
        . . . 1 *
        . . . 1 1
        . . . . .
        . . . 1 1
        . . . 1 *
    """
    game, _ = new_game(Grid(5, 5))
    game.set_difficulty(Difficulty.EASY)
    game.play()
    return rig_game(game, [(4, 0), (4, 4)])


@pytest.fixture
def rig():
    """Provide the rig_game helper to tests."""
    return rig_game


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def make_board():
    """Provide the build_board helper to tests."""
    return build_board


@pytest.fixture
def small_board() -> Board:
    """Create a 3x3 board with a single bomb in the center."""
    return build_board(3, 3, [(1, 1)])


@pytest.fixture
def empty_board() -> Board:
    """Create a 5x5 board without bombs."""
    return build_board(5, 5, [])


# ============================================================================
# Cell Fixtures
# ============================================================================

@pytest.fixture
def hidden_cell() -> Cell:
    """Create a hidden cell."""
    return Cell()


@pytest.fixture
def bomb_cell() -> Cell:
    """Create a cell containing a bomb."""
    return Cell(kind=CellKind.BOMB)


@pytest.fixture
def numbered_cell() -> Cell:
    """Create a visited cell with adjacent bombs."""
    cell = Cell(kind=CellKind.NUMBER, value=3)
    cell.visit()
    return cell


# ============================================================================
# Event Fixtures
# ============================================================================

@pytest.fixture
def channel() -> EventChannel:
    """Create an unresolved event channel."""
    return EventChannel()
