"""
Gymnasium environment wrapper for Minesweeper engine.

Drives one game session per episode behind the standard RL interface.
"""
from typing import Any, Dict, Optional, Tuple, SupportsFloat

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .board import Difficulty, Grid
from .errors import ExplodedError
from .events import Event
from .game import Game, new_game


# ============================================================================
# Minesweeper Environment
# ============================================================================

class MinesweeperEnv(gym.Env):
    """
    Gymnasium environment for Minesweeper.

    Observation:
        2D array of shape (height, width) where:
        - -1 = hidden cell
        - -2 = flagged cell
        - 0-8 = visited cell with adjacent bomb count
        - 9 = visited bomb

    Actions:
        Discrete action space of size width * height.
        Action i visits the cell at (i % width, i // width).

    Rewards:
        - +1 for revealing a safe cell
        - +10 for winning the game
        - -10 for hitting a bomb
        - -0.1 for invalid action (already visited or flagged)
    """

    metadata = {"render_modes": []}

    def __init__(
        self,
        grid: Optional[Grid] = None,
        difficulty: Difficulty = Difficulty.EASY,
    ) -> None:
        """
        Initialize the Minesweeper environment.

        Args:
            grid: Board size (default: 9x9).
            difficulty: Bomb density of every episode.
        """
        super().__init__()

        self.grid = grid or Grid(9, 9)
        self.difficulty = Difficulty(difficulty)
        self.game: Optional[Game] = None

        self.observation_space = spaces.Box(
            low=-2,
            high=9,
            shape=(self.grid.height, self.grid.width),
            dtype=np.int8,
        )

        # One action per cell
        self.action_space = spaces.Discrete(self.grid.area)

        self._steps = 0
        self._total_safe_cells = (
            self.grid.area - self.difficulty.bomb_count(self.grid.area)
        )

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Start a new game for a new episode.

        Args:
            seed: Seeds the action space only; bomb placement is
                never reproducible.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        self.game, _ = new_game(self.grid)
        self.game.set_difficulty(self.difficulty)
        self.game.play()
        self._steps = 0

        return self.game.get_observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Execute one action in the environment.

        Args:
            action: Cell index to visit (y * width + x).

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        if self.game is None:
            raise RuntimeError("Call reset() before step()")

        x, y = self._action_to_position(action)
        self._steps += 1

        reward = self._calculate_reward(x, y)
        observation = self.game.get_observation()
        terminated = self.game.evaluate() is not None

        return observation, reward, terminated, False, self._get_info()

    def _action_to_position(self, action: int) -> Tuple[int, int]:
        """Convert flat action index to (x, y) position."""
        return int(action) % self.grid.width, int(action) // self.grid.width

    def _calculate_reward(self, x: int, y: int) -> float:
        """Visit a cell and score the result."""
        cell = self.game.get_cell(x, y)
        if not cell.is_hidden:
            return -0.1

        try:
            self.game.visit(x, y)
        except ExplodedError:
            return -10.0

        if self.game.evaluate() == Event.WIN:
            return 10.0
        return 1.0

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        revealed = sum(
            1 for cell in self.game.board if cell.visited and not cell.is_bomb
        )
        outcome = self.game.evaluate()

        return {
            "steps": self._steps,
            "revealed": revealed,
            "total_safe": self._total_safe_cells,
            "outcome": outcome.name if outcome else None,
            "valid_actions": int(self.get_action_mask().sum()),
        }

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of valid actions.

        Returns:
            Boolean array where True = cell can still be visited.
        """
        mask = np.zeros(self.action_space.n, dtype=bool)
        for cell in self.game.board:
            if cell.is_hidden:
                mask[cell.y * self.grid.width + cell.x] = True
        return mask
