"""Q-Learning algorithm implementation for the grid-world."""

from typing import List
import numpy as np

from .types import Position, Action, Cell, QValues
from .base import TabularEnvironment


class QLearningEnvironment(TabularEnvironment):
    """
    Off-policy TD control.

    Each cell holds its own QValues. The update bootstraps from the best
    action available in the successor state:

        Q(s,a) <- Q(s,a) + alpha * [r + gamma * max_a' Q(s',a') - Q(s,a)]

    where the max runs only over actions that stay on the grid from s'.
    A fresh action is selected on every step; nothing is carried over.
    """

    method = "qlearning"

    def _init_values(self) -> None:
        model = self.grid_model
        self.grid: List[List[Cell]] = [
            [Cell(kind=model.cell_kind((row, col)), q_values=QValues())
             for col in range(model.size)]
            for row in range(model.size)
        ]

    def get_grid(self) -> List[List[Cell]]:
        """Copies of every cell, so renderers cannot mutate the table."""
        return [[cell.copy() for cell in row] for row in self.grid]

    def get_q_value(self, pos: Position, action: Action) -> float:
        if not self.grid_model.in_bounds(pos):
            return 0.0
        return self.grid[pos[0]][pos[1]].q_values.get(action)

    def set_q_value(self, pos: Position, action: Action, value: float) -> None:
        if not self.grid_model.in_bounds(pos):
            raise IndexError(f"Position {pos} is outside the grid")
        self.grid[pos[0]][pos[1]].q_values.set(action, value)

    def _q_array(self) -> np.ndarray:
        return np.array([cell.q_values.as_array() for row in self.grid for cell in row])

    def _update(self, pos: Position, action: Action, next_pos: Position, reward: float) -> float:
        """Update Q-value using Q-learning update rule."""
        current_q = self.get_q_value(pos, action)
        next_q_max = self.get_max_valid_q_value(next_pos)

        target = reward + self.config.discount_factor * next_q_max
        delta = self.config.learning_rate * (target - current_q)
        self.set_q_value(pos, action, current_q + delta)
        return abs(delta)
