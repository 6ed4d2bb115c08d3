"""
Cell module for Minesweeper engine.

Represents individual cells on the game board with their content
(unknown/number/bomb), fixed grid position and player-facing flags.
"""
from enum import Enum, auto
from dataclasses import dataclass
from typing import Tuple


# ============================================================================
# Constants
# ============================================================================

class CellKind(Enum):
    """Possible contents of a cell."""

    UNKNOWN = auto()
    NUMBER = auto()
    BOMB = auto()


# ============================================================================
# Cell Data Class
# ============================================================================

@dataclass
class Cell:
    """
    Represents a single cell in the Minesweeper grid.

    Attributes:
        x: Column of the cell, fixed at board allocation.
        y: Row of the cell, fixed at board allocation.
        kind: Content of the cell.
        value: Count of bombs in neighboring cells (NUMBER cells only).
        visited: Whether the cell has been revealed.
        flagged: Whether the player marked the cell as a suspected bomb.
    """

    x: int = 0
    y: int = 0
    kind: CellKind = CellKind.UNKNOWN
    value: int = 0
    visited: bool = False
    flagged: bool = False

    def visit(self) -> bool:
        """
        Mark this cell as visited.

        Returns:
            True if cell was visited now, False if already visited
            or flagged.
        """
        if self.visited or self.flagged:
            return False
        self.visited = True
        return True

    def toggle_flag(self) -> bool:
        """
        Toggle flag on this cell.

        Returns:
            True if flag was toggled, False if cell is visited.
        """
        if self.visited:
            return False
        self.flagged = not self.flagged
        return True

    @property
    def position(self) -> Tuple[int, int]:
        """Get (x, y) position of the cell."""
        return self.x, self.y

    @property
    def is_unknown(self) -> bool:
        """Check if cell has no neighboring bombs."""
        return self.kind == CellKind.UNKNOWN

    @property
    def is_number(self) -> bool:
        """Check if cell carries a hint number."""
        return self.kind == CellKind.NUMBER

    @property
    def is_bomb(self) -> bool:
        """Check if cell is a bomb."""
        return self.kind == CellKind.BOMB

    @property
    def is_hidden(self) -> bool:
        """Check if cell can still be visited."""
        return not self.visited and not self.flagged

    def to_observation(self) -> int:
        """
        Convert cell to its player-visible value.

        Returns:
            -1: Hidden cell
            -2: Flagged cell
            0-8: Visited cell with adjacent bomb count
            9: Visited bomb (game over state)
        """
        if self.flagged:
            return -2
        if not self.visited:
            return -1
        if self.is_bomb:
            return 9
        return self.value
