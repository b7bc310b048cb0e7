"""Reward shaping and running reward normalization."""

import math
from typing import Dict

from .types import Position, RLConfig, NormalizationMethod
from .heuristics import get_heuristic
from .errors import ConfigError


class RewardFunction:
    """Maps a transition to a scalar reward.

    The reward is the base reward of the destination cell (goal, hazard or
    step penalty plus any bonus island on that cell) plus an optional
    goal-directed heuristic term.
    """

    def __init__(self, config: RLConfig):
        self.config = config
        self.goal = config.goal_position
        self.hazards = config.hazard_positions
        # First entry wins if a position is listed twice
        self.bonuses: Dict[Position, float] = {}
        for rp in config.reward_positions:
            self.bonuses.setdefault(rp.position, rp.reward)
        self._distance = get_heuristic(config.heuristic_method)

    def base_reward(self, dest: Position) -> float:
        """Reward for arriving at a cell; goal and hazard take precedence over bonuses."""
        rewards = self.config.rewards
        if dest == self.goal:
            return rewards.goal
        if dest in self.hazards:
            return rewards.hazard
        return rewards.step + self.bonuses.get(dest, 0.0)

    def distance_to_goal(self, pos: Position) -> float:
        return self._distance(pos, self.goal)

    def heuristic_reward(self, src: Position, dest: Position) -> float:
        """Positive when the move gets closer to the goal, negative when it moves away."""
        if not self.config.use_directional_heuristics:
            return 0.0
        improvement = self.distance_to_goal(src) - self.distance_to_goal(dest)
        return improvement * self.config.heuristic_weight

    def reward(self, src: Position, dest: Position) -> float:
        return self.base_reward(dest) + self.heuristic_reward(src, dest)


class RewardNormalizer:
    """Normalizes rewards against the statistics of every reward seen so far.

    min-max scales into [0, 1] using the running minimum and maximum.
    z-score uses a running mean and population standard deviation
    (Welford's algorithm), so each call is O(1).
    Both return 0 while the spread of observed rewards is still zero.
    """

    def __init__(self, method: NormalizationMethod = "minmax"):
        if method not in ("minmax", "zscore"):
            raise ConfigError(f"Unknown normalization method: {method}")
        self.method = method
        self.reset()

    def reset(self) -> None:
        self.count = 0
        self.min_seen = math.inf
        self.max_seen = -math.inf
        self._mean = 0.0
        self._m2 = 0.0

    @property
    def mean(self) -> float:
        return self._mean

    @property
    def std(self) -> float:
        if self.count == 0:
            return 0.0
        return math.sqrt(self._m2 / self.count)

    def observe(self, reward: float) -> None:
        self.count += 1
        self.min_seen = min(self.min_seen, reward)
        self.max_seen = max(self.max_seen, reward)
        delta = reward - self._mean
        self._mean += delta / self.count
        self._m2 += delta * (reward - self._mean)

    def normalize(self, reward: float) -> float:
        """Record the reward, then normalize it against the updated statistics."""
        self.observe(reward)
        if self.method == "zscore":
            std = self.std
            return (reward - self._mean) / std if std > 0 else 0.0
        value_range = self.max_seen - self.min_seen
        return (reward - self.min_seen) / value_range if value_range > 0 else 0.0
