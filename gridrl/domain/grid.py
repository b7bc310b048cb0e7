"""Static grid layout and cell classification."""

from typing import List
from .types import Position, Action, CellKind, RLConfig, ACTIONS, ACTION_DELTAS
from .errors import InvalidMoveError


class GridModel:
    """Classifies the cells of a square grid described by an RLConfig.

    Lookups are O(1): hazards are held in a frozenset taken from the config.
    The model is rebuilt whenever the owning environment's config changes.
    """

    def __init__(self, config: RLConfig):
        self.size = config.grid_size
        self.start = config.start_position
        self.goal = config.goal_position
        self.hazards = config.hazard_positions

    def in_bounds(self, pos: Position) -> bool:
        """Check if position is within grid bounds."""
        row, col = pos
        return 0 <= row < self.size and 0 <= col < self.size

    def is_goal(self, pos: Position) -> bool:
        return pos == self.goal

    def is_hazard(self, pos: Position) -> bool:
        return pos in self.hazards

    def is_terminal(self, pos: Position) -> bool:
        """An episode ends when the agent stands on the goal or a hazard."""
        return pos == self.goal or pos in self.hazards

    def cell_kind(self, pos: Position) -> CellKind:
        if pos == self.start:
            return "start"
        if pos == self.goal:
            return "goal"
        if pos in self.hazards:
            return "hazard"
        return "empty"

    def kinds(self) -> List[List[CellKind]]:
        """Return the cell kind of every cell, indexed [row][col]."""
        return [[self.cell_kind((row, col)) for col in range(self.size)]
                for row in range(self.size)]

    def positions(self):
        """Iterate over all positions in row-major order."""
        for row in range(self.size):
            for col in range(self.size):
                yield (row, col)

    def valid_actions(self, pos: Position) -> List[Action]:
        """
        Get actions that keep the agent on the grid, in canonical order.

        Hazards are not excluded: walking into one is a legal (terminal) move.
        """
        actions = []
        for action in ACTIONS:
            drow, dcol = ACTION_DELTAS[action]
            if self.in_bounds((pos[0] + drow, pos[1] + dcol)):
                actions.append(action)
        return actions

    def next_position(self, pos: Position, action: Action) -> Position:
        """
        Deterministic transition for a move.

        Raises:
            InvalidMoveError: If the move would leave the grid
        """
        drow, dcol = ACTION_DELTAS[action]
        next_pos = (pos[0] + drow, pos[1] + dcol)
        if not self.in_bounds(next_pos):
            raise InvalidMoveError(f"Moving {action} from {pos} leaves the {self.size}x{self.size} grid")
        return next_pos
