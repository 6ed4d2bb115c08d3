"""
Board module for Minesweeper engine.

Implements the game board with cell allocation, bomb placement
and hint tallying.
"""
import logging
import math
import random
from dataclasses import dataclass, field
from enum import Enum
from fractions import Fraction
from typing import Iterator, List, Optional

import numpy as np

from .cell import Cell, CellKind


logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

# Forward scan steps allowed before a colliding draw is discarded
CONSECUTIVE_RANDOM_LIMIT = 3


class Difficulty(Enum):
    """Difficulty levels, valued by their bomb density multiplier."""

    EASY = 0.1
    MEDIUM = 0.2
    HARD = 0.5

    @property
    def multiplier(self) -> float:
        """Fraction of the board area covered by bombs."""
        return self.value

    def bomb_count(self, area: int) -> int:
        """Number of bombs placed on a board of the given area."""
        return bomb_count(area, self.value)


def bomb_count(area: int, multiplier: float) -> int:
    """
    Compute floor(area * multiplier) without float rounding error.

    The multiplier is read back from its shortest decimal form, so
    0.1 counts as exactly one tenth.
    """
    return math.floor(area * Fraction(str(multiplier)))


@dataclass(frozen=True)
class Grid:
    """
    Size of a Minesweeper board.

    Attributes:
        width: Number of columns.
        height: Number of rows.
    """

    width: int
    height: int

    def __post_init__(self) -> None:
        """Validate dimensions after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure dimensions are valid."""
        if self.width < 1 or self.height < 1:
            raise ValueError("Board dimensions must be positive")

    @property
    def area(self) -> int:
        """Total number of cells."""
        return self.width * self.height


# ============================================================================
# Board Class
# ============================================================================

@dataclass
class Board:
    """
    Minesweeper game board.

    Owns the grid of cells, places bombs and tallies the hint numbers.
    Cells are stored row-major and addressed by (x, y).
    """

    grid: Grid
    difficulty_multiplier: float = 0.0
    _cells: List[List[Cell]] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        """Allocate the cells after dataclass creation."""
        self._init_cells()

    # ========================================================================
    # Grid Initialization (Low-level)
    # ========================================================================

    def _init_cells(self) -> None:
        """Create unknown cells with their fixed coordinates."""
        self._cells = [
            [Cell(x=x, y=y) for x in range(self.grid.width)]
            for y in range(self.grid.height)
        ]

    def place_bombs(
        self, count: int, rng: Optional[random.Random] = None
    ) -> None:
        """
        Place bombs at random positions.

        A draw that lands on a bomb scans forward in row-major order
        (wrapping around) for a free cell. After CONSECUTIVE_RANDOM_LIMIT
        steps the draw is thrown away and a new one is made.

        Args:
            count: Number of bombs to place.
            rng: Source of randomness (default: OS entropy).
        """
        if count > self.area:
            raise ValueError(f"Too many bombs (max {self.area})")
        rng = rng or random.SystemRandom()
        for _ in range(count):
            while True:
                cell = self._find_free_cell(rng.randrange(self.area))
                if cell is not None:
                    cell.kind = CellKind.BOMB
                    break
        logger.debug(
            "Placed %d bombs on %dx%d board",
            count, self.grid.width, self.grid.height,
        )

    def _find_free_cell(self, index: int) -> Optional[Cell]:
        """Scan forward from a flat index for a cell without a bomb."""
        for step in range(CONSECUTIVE_RANDOM_LIMIT + 1):
            cell = self._cell_at_index((index + step) % self.area)
            if cell.is_unknown:
                return cell
        return None

    def _cell_at_index(self, index: int) -> Cell:
        """Map a row-major flat index to its cell."""
        return self._cells[index // self.grid.width][index % self.grid.width]

    def tally_hints(self) -> None:
        """Count neighboring bombs into every non-bomb cell."""
        for cell in self:
            if not cell.is_bomb:
                continue
            for neighbor in self.neighbors(cell.x, cell.y):
                if not neighbor.is_bomb:
                    neighbor.kind = CellKind.NUMBER
                    neighbor.value += 1

    # ========================================================================
    # Neighbor Utilities (Low-level)
    # ========================================================================

    def neighbors(self, x: int, y: int) -> List[Cell]:
        """
        Get the up to 8 cells surrounding a position.

        Args:
            x: Column of center cell.
            y: Row of center cell.

        Returns:
            List of neighboring cells inside the board.
        """
        neighbors = []
        for delta_y in (-1, 0, 1):
            for delta_x in (-1, 0, 1):
                if delta_x == 0 and delta_y == 0:
                    continue
                new_x = x + delta_x
                new_y = y + delta_y
                if self.is_valid_position(new_x, new_y):
                    neighbors.append(self._cells[new_y][new_x])
        return neighbors

    def is_valid_position(self, x: int, y: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= x < self.grid.width and 0 <= y < self.grid.height

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    def __iter__(self) -> Iterator[Cell]:
        """Iterate over all cells in row-major order."""
        for row in self._cells:
            yield from row

    @property
    def area(self) -> int:
        """Total number of cells."""
        return self.grid.area

    @property
    def total_bombs(self) -> int:
        """Number of bombs the difficulty calls for."""
        return bomb_count(self.area, self.difficulty_multiplier)

    @property
    def total_non_bombs(self) -> int:
        """Number of cells that must be visited to win."""
        return self.area - self.total_bombs

    def get_cell(self, x: int, y: int) -> Cell:
        """
        Get cell at position.

        Raises:
            ValueError: If the position is outside the board.
        """
        if not self.is_valid_position(x, y):
            raise ValueError(f"Position ({x}, {y}) is out of bounds")
        return self._cells[y][x]

    def bomb_locations(self) -> List[Cell]:
        """Get every bomb cell."""
        return [cell for cell in self if cell.is_bomb]

    def hint_locations(self) -> List[Cell]:
        """Get every cell carrying a hint number."""
        return [cell for cell in self if cell.is_number]

    def get_observation(self) -> np.ndarray:
        """
        Get player-visible board state as numpy array.

        Returns:
            2D numpy array of shape (height, width) where:
                -1 = hidden
                -2 = flagged
                0-8 = visited with adjacent count
                9 = visited bomb
        """
        obs = np.zeros((self.grid.height, self.grid.width), dtype=np.int8)
        for cell in self:
            obs[cell.y, cell.x] = cell.to_observation()
        return obs
