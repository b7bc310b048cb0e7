"""SARSA algorithm implementation for the grid-world."""

from typing import List
import numpy as np

from .types import Position, Action, ACTIONS, ACTION_TO_INT, ACTION_DELTAS
from .base import TabularEnvironment


class SARSAEnvironment(TabularEnvironment):
    """
    On-policy TD control.

    The value table is a flat array indexed by
    ``(row * grid_size + col) * 4 + action_index``. The next action is chosen
    with the behaviour policy before the update and is then executed on the
    following step:

        Q(s,a) <- Q(s,a) + alpha * [r + gamma * Q(s',a') - Q(s,a)]

    Unlike Q-Learning, moves onto hazard cells are never offered as valid
    actions, so the agent cannot choose to walk into a hazard.
    """

    method = "sarsa"

    def _init_values(self) -> None:
        size = self.grid_model.size
        self.q_table = np.zeros(size * size * len(ACTIONS), dtype=np.float64)

    def _on_position_reset(self) -> None:
        # Commit to the first action of the episode
        self.current_action: Action = self.choose_action(self.current_position)

    def get_current_action(self) -> Action:
        return self.current_action

    def _index(self, pos: Position, action: Action) -> int:
        state_index = pos[0] * self.grid_model.size + pos[1]
        return state_index * len(ACTIONS) + ACTION_TO_INT[action]

    def get_q_value(self, pos: Position, action: Action) -> float:
        if not self.grid_model.in_bounds(pos):
            return 0.0
        return float(self.q_table[self._index(pos, action)])

    def set_q_value(self, pos: Position, action: Action, value: float) -> None:
        if not self.grid_model.in_bounds(pos):
            raise IndexError(f"Position {pos} is outside the grid")
        self.q_table[self._index(pos, action)] = value

    def _q_array(self) -> np.ndarray:
        return self.q_table

    def get_valid_actions(self, pos: Position) -> List[Action]:
        """In-bounds actions whose destination is not a hazard."""
        actions = []
        for action in self.grid_model.valid_actions(pos):
            drow, dcol = ACTION_DELTAS[action]
            if not self.grid_model.is_hazard((pos[0] + drow, pos[1] + dcol)):
                actions.append(action)
        return actions

    def _select_step_action(self, pos: Position) -> Action:
        if self.current_action not in self.get_valid_actions(pos):
            # Stale commitment: current_position was changed directly
            self.current_action = self.choose_action(pos)
        return self.current_action

    def _update(self, pos: Position, action: Action, next_pos: Position, reward: float) -> float:
        """Update Q-value using the SARSA update rule."""
        next_action = self.choose_action(next_pos)
        if self.get_valid_actions(next_pos):
            next_q = self.get_q_value(next_pos, next_action)
        else:
            next_q = 0.0

        current_q = self.get_q_value(pos, action)
        target = reward + self.config.discount_factor * next_q
        delta = self.config.learning_rate * (target - current_q)
        self.set_q_value(pos, action, current_q + delta)

        self.current_action = next_action
        return abs(delta)
