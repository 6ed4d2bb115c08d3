"""
Game session for Minesweeper engine.

Implements the configure-then-play lifecycle, cell visiting with
flood-fill and chorded reveal, flagging, and background win/lose
validation.
"""
import logging
import threading
from typing import List, Optional, Tuple, Union

import numpy as np

from .board import Board, Difficulty, Grid
from .cell import Cell
from .errors import (
    ExplodedError,
    GameAlreadyStartedError,
    GameNotStartedError,
    UnspecifiedDifficultyError,
    UnspecifiedGridError,
)
from .events import Event, EventChannel
from .history import Action, History, Record, prepend


logger = logging.getLogger(__name__)


# ============================================================================
# Game Class
# ============================================================================

class Game:
    """
    A single Minesweeper session.

    Lifecycle:
        1. Set a grid (constructor or set_grid) and a difficulty.
        2. Call play() to place bombs and tally hints.
        3. Call visit()/flag() until the event channel reports WIN or LOSE.

    visit() and flag() are serialized by one board-wide lock. Each
    mutating visit starts a background validator that publishes the
    terminal event to the channel returned by events.
    """

    def __init__(self, grid: Optional[Grid] = None) -> None:
        """
        Initialize the session.

        Args:
            grid: Optional board size; may also be given later via set_grid.
        """
        self._board: Optional[Board] = None
        self._difficulty: Optional[Difficulty] = None
        self._history: Optional[History] = None
        self._events = EventChannel()
        self._lock = threading.Lock()
        self._started = False

        if grid is not None:
            self.set_grid(grid.width, grid.height)

    # ========================================================================
    # Configuration
    # ========================================================================

    def set_grid(self, width: int, height: int) -> None:
        """
        Set the board size and allocate its cells.

        Raises:
            GameAlreadyStartedError: If a grid was already set.
            ValueError: If dimensions are not positive.
        """
        if self._board is not None:
            raise GameAlreadyStartedError()
        self._board = Board(Grid(width, height))

    def set_difficulty(self, difficulty: Union[Difficulty, float]) -> None:
        """
        Set the bomb density. May be changed until play() succeeds.

        Raises:
            GameAlreadyStartedError: If the game is already being played.
            ValueError: If difficulty is not a known level.
        """
        if self._started:
            raise GameAlreadyStartedError()
        self._difficulty = Difficulty(difficulty)

    def play(self) -> None:
        """
        Place bombs and tally hints.

        Raises:
            GameAlreadyStartedError: If play() already succeeded.
            UnspecifiedDifficultyError: If no difficulty was set.
            UnspecifiedGridError: If no grid was set.
        """
        with self._lock:
            if self._started:
                raise GameAlreadyStartedError()
            if self._difficulty is None:
                raise UnspecifiedDifficultyError()
            if self._board is None:
                raise UnspecifiedGridError()

            self._board.difficulty_multiplier = self._difficulty.multiplier
            self._board.place_bombs(self._board.total_bombs)
            self._board.tally_hints()
            self._started = True

        logger.debug(
            "Game started: %dx%d, %s",
            self._board.grid.width,
            self._board.grid.height,
            self._difficulty.name,
        )

    # ========================================================================
    # Game Actions
    # ========================================================================

    def flag(self, x: int, y: int) -> None:
        """
        Toggle the flag on an unvisited cell. Visited cells are left as is.

        Raises:
            UnspecifiedGridError: If no grid was set.
            ValueError: If the position is outside the board.
        """
        if self._board is None:
            raise UnspecifiedGridError()
        with self._lock:
            self._board.get_cell(x, y).toggle_flag()

    def visit(self, x: int, y: int) -> List[Cell]:
        """
        Visit the cell at (x, y).

        A visited number cell whose flagged neighbors match its value
        chords: every unflagged neighbor is visited. Otherwise a flagged
        or visited cell is ignored. A number cell reveals itself, a blank
        cell flood-fills to the surrounding number cells.

        Returns:
            Cells revealed by this call, the visited cell first.

        Raises:
            ExplodedError: If a bomb was visited. Its revealed attribute
                holds the bomb followed by every other bomb.
            UnspecifiedGridError: If no grid was set.
            UnspecifiedDifficultyError: If no difficulty was set.
            GameNotStartedError: If play() has not succeeded.
            ValueError: If the position is outside the board.
        """
        self._validate_game_environment()

        with self._lock:
            cell = self._board.get_cell(x, y)
            try:
                if cell.is_number and cell.visited:
                    revealed = self._chord(cell)
                else:
                    revealed = self._visit(cell)
            except ExplodedError:
                self._schedule_validation()
                raise

        if revealed:
            self._schedule_validation()
        return revealed

    def _validate_game_environment(self) -> None:
        """Ensure the game was configured and started."""
        if self._board is None:
            raise UnspecifiedGridError()
        if self._difficulty is None:
            raise UnspecifiedDifficultyError()
        if not self._started:
            raise GameNotStartedError()

    def _chord(self, cell: Cell) -> List[Cell]:
        """Visit unflagged neighbors if flagged count matches the hint."""
        flagged_count = 0
        to_visit = []
        for neighbor in self._board.neighbors(cell.x, cell.y):
            if neighbor.flagged:
                flagged_count += 1
            else:
                to_visit.append(neighbor)

        if flagged_count != cell.value:
            return []

        revealed: List[Cell] = []
        for neighbor in to_visit:
            revealed.extend(self._visit(neighbor))
        return revealed

    def _visit(self, cell: Cell) -> List[Cell]:
        """Reveal a single cell and handle consequences."""
        if not cell.visit():
            return []

        if cell.is_number:
            self._record(cell)
            return [cell]

        if cell.is_bomb:
            self._record(cell)
            bombs = [bomb for bomb in self._board.bomb_locations() if bomb is not cell]
            logger.debug("Bomb visited at (%d, %d)", cell.x, cell.y)
            raise ExplodedError(cell.x, cell.y, [cell] + bombs)

        self._record(cell)
        return self._flood_fill(cell)

    def _flood_fill(self, origin: Cell) -> List[Cell]:
        """
        Reveal every cell reachable from a blank origin.

        Blank cells are expanded, number cells are revealed but stop
        the fill. The origin must already be visited.
        """
        revealed = [origin]
        pending = [origin]
        while pending:
            current = pending.pop()
            for neighbor in self._board.neighbors(current.x, current.y):
                if neighbor.is_bomb or not neighbor.visit():
                    continue
                self._record(neighbor)
                revealed.append(neighbor)
                if neighbor.is_unknown:
                    pending.append(neighbor)

        logger.debug(
            "Flood fill from (%d, %d) revealed %d cells",
            origin.x, origin.y, len(revealed),
        )
        return revealed

    def _record(self, cell: Cell) -> None:
        """Prepend a visited cell to the move history."""
        if cell.is_bomb:
            action = Action.BOMB
        elif cell.is_number:
            action = Action.NUMBER
        else:
            action = Action.UNKNOWN
        self._history = prepend(self._history, Record(cell.position, action))

    # ========================================================================
    # Solution Validation
    # ========================================================================

    def _schedule_validation(self) -> None:
        """Start a background win/lose check without waiting for it."""
        if self._events.done:
            return
        threading.Thread(
            target=self._validate_solution,
            name="minesweeper-validator",
            daemon=True,
        ).start()

    def _validate_solution(self) -> None:
        """Publish the terminal event if the game has ended."""
        event = self.evaluate()
        if event is not None:
            self._events.publish(event)

    def evaluate(self) -> Optional[Event]:
        """
        Check the board for a terminal state.

        Returns:
            LOSE if any bomb was visited, WIN if every non-bomb cell was
            visited, None while the game is still in progress.
        """
        if not self._started:
            return None

        visited_count = 0
        for cell in self._board:
            if not cell.visited:
                continue
            if cell.is_bomb:
                return Event.LOSE
            visited_count += 1

        if visited_count == self._board.total_non_bombs:
            return Event.WIN
        return None

    # ========================================================================
    # State Accessors
    # ========================================================================

    @property
    def events(self) -> EventChannel:
        """Channel receiving the terminal event of this game."""
        return self._events

    @property
    def outcome(self) -> Optional[Event]:
        """Terminal event published so far, if any."""
        return self._events.poll()

    @property
    def grid(self) -> Optional[Grid]:
        """Board size, if set."""
        return self._board.grid if self._board is not None else None

    @property
    def difficulty(self) -> Optional[Difficulty]:
        """Difficulty level, if set."""
        return self._difficulty

    @property
    def started(self) -> bool:
        """Check if play() succeeded."""
        return self._started

    @property
    def board(self) -> Optional[Board]:
        """Underlying board, if a grid was set."""
        return self._board

    @property
    def history(self) -> Optional[History]:
        """Most recent node of the move history."""
        return self._history

    @property
    def last_action(self) -> Optional[Record]:
        """Most recent move, or None if nothing was visited yet."""
        if self._history is None:
            return None
        return self._history.record

    def get_cell(self, x: int, y: int) -> Cell:
        """Get cell at position."""
        if self._board is None:
            raise UnspecifiedGridError()
        return self._board.get_cell(x, y)

    def bomb_locations(self) -> List[Cell]:
        """Get every bomb cell, empty before a grid is set."""
        if self._board is None:
            return []
        return self._board.bomb_locations()

    def hint_locations(self) -> List[Cell]:
        """Get every hint cell, empty before a grid is set."""
        if self._board is None:
            return []
        return self._board.hint_locations()

    def get_observation(self) -> np.ndarray:
        """Get player-visible board state as numpy array."""
        if self._board is None:
            raise UnspecifiedGridError()
        return self._board.get_observation()


# ============================================================================
# Factory
# ============================================================================

def new_game(grid: Optional[Grid] = None) -> Tuple[Game, EventChannel]:
    """
    Create a separate game session.

    Args:
        grid: Optional board size.

    Returns:
        Tuple of (game, event channel).
    """
    game = Game(grid)
    return game, game.events
