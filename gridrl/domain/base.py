"""Shared policy, statistics and episode loops for the tabular grid-world agents."""

import logging
from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Tuple, Callable, Any, Mapping, Union
import numpy as np

from .types import (
    Position, Action, RLConfig, StepResult, EpisodeResult,
    TrainingResult, ACTIONS
)
from .grid import GridModel
from .rewards import RewardFunction, RewardNormalizer
from .errors import ConfigError
from ..utils.rng import SeededRNG

logger = logging.getLogger(__name__)


class TabularEnvironment(ABC):
    """
    Grid-world environment owning a value table and an agent position.

    Subclasses choose how values are stored and how the temporal-difference
    target is formed; everything else (epsilon-greedy selection, reward
    shaping, episode and training loops, table statistics) lives here.
    """

    method: str = ""

    def __init__(self, config: RLConfig, rng: Optional[SeededRNG] = None):
        self.rng = rng if rng is not None else SeededRNG()
        self._apply_config(config)

    # ------------------------------------------------------------------
    # Storage and update hooks
    # ------------------------------------------------------------------

    @abstractmethod
    def _init_values(self) -> None:
        """(Re)create the value table with every entry at zero."""

    @abstractmethod
    def get_q_value(self, pos: Position, action: Action) -> float:
        """Get Q-value for state-action pair (0 outside the grid)."""

    @abstractmethod
    def set_q_value(self, pos: Position, action: Action, value: float) -> None:
        """Set Q-value for state-action pair."""

    @abstractmethod
    def _q_array(self) -> np.ndarray:
        """Every value in the table as a numpy array."""

    @abstractmethod
    def _update(self, pos: Position, action: Action, next_pos: Position, reward: float) -> float:
        """Apply the update rule for one transition and return |delta Q|."""

    def _select_step_action(self, pos: Position) -> Action:
        """Action executed by the next step from ``pos``."""
        return self.choose_action(pos)

    def _on_position_reset(self) -> None:
        """Called whenever the agent is placed back on the start cell."""

    # ------------------------------------------------------------------
    # Configuration and lifecycle
    # ------------------------------------------------------------------

    def _apply_config(self, config: RLConfig) -> None:
        if not isinstance(config, RLConfig):
            raise ConfigError(f"Expected an RLConfig, got {type(config).__name__}")
        self.config = config
        self.grid_model = GridModel(config)
        self.reward_fn = RewardFunction(config)
        self.normalizer = RewardNormalizer(config.normalization_method)
        self.epsilon = config.epsilon
        self.episode_count = 0
        self.total_steps = 0
        self._init_values()
        self.current_position: Position = config.start_position
        self._on_position_reset()

    def get_config(self) -> RLConfig:
        return self.config

    def update_config(self, config: Union[RLConfig, Mapping[str, Any]]) -> None:
        """Replace the whole configuration and reinitialize grid, values and statistics."""
        if isinstance(config, Mapping):
            config = RLConfig.from_dict(dict(config))
        self._apply_config(config)
        logger.debug(f"{self.method}: configuration replaced, {config.grid_size}x{config.grid_size} grid rebuilt")

    def reset(self) -> None:
        """Clear learned values, reward statistics and exploration decay."""
        self.normalizer.reset()
        self.epsilon = self.config.epsilon
        self.episode_count = 0
        self.total_steps = 0
        self._init_values()
        self.reset_position()
        logger.debug(f"{self.method}: environment reset")

    def reset_position(self) -> None:
        """Return the agent to the start cell without touching learned values."""
        self.current_position = self.config.start_position
        self._on_position_reset()

    def get_current_position(self) -> Position:
        return self.current_position

    def get_episode_count(self) -> int:
        """Episodes run since construction or the last reset."""
        return self.episode_count

    def get_total_steps(self) -> int:
        """Steps taken since construction or the last reset, across all episodes."""
        return self.total_steps

    def get_grid(self) -> List[List[Any]]:
        """Snapshot of the grid, indexed [row][col]."""
        return self.grid_model.kinds()

    def on_cell_click(self, pos: Position) -> None:
        """Hook for renderers; clicking a cell has no effect on the core."""
        logger.debug(f"{self.method}: cell {pos} clicked")

    # ------------------------------------------------------------------
    # Policy
    # ------------------------------------------------------------------

    def get_valid_actions(self, pos: Position) -> List[Action]:
        """Get list of valid actions from a position, in canonical order."""
        return self.grid_model.valid_actions(pos)

    def choose_action(self, pos: Position, epsilon: Optional[float] = None) -> Action:
        """Select action using epsilon-greedy policy over the valid actions.

        Falls back to the first canonical action when nothing is valid.
        """
        valid_actions = self.get_valid_actions(pos)
        if not valid_actions:
            return ACTIONS[0]

        if epsilon is None:
            epsilon = self.epsilon
        if self.rng.random() < epsilon:
            return self.rng.choice(valid_actions)
        return self._greedy_action(pos, valid_actions)

    def _greedy_action(self, pos: Position, valid_actions: List[Action]) -> Action:
        # np.argmax returns the first maximum, i.e. canonical tie-breaking
        q_values = [self.get_q_value(pos, action) for action in valid_actions]
        return valid_actions[int(np.argmax(q_values))]

    def get_best_valid_action(self, pos: Position) -> Optional[Action]:
        valid_actions = self.get_valid_actions(pos)
        if not valid_actions:
            return None
        return self._greedy_action(pos, valid_actions)

    def get_max_valid_q_value(self, pos: Position) -> float:
        """Maximum Q-value over valid actions only; 0 when nothing is valid."""
        valid_actions = self.get_valid_actions(pos)
        if not valid_actions:
            return 0.0
        return max(self.get_q_value(pos, action) for action in valid_actions)

    def get_policy(self) -> Dict[Position, Action]:
        """Greedy action for every cell that has at least one valid action."""
        policy = {}
        for pos in self.grid_model.positions():
            best = self.get_best_valid_action(pos)
            if best is not None:
                policy[pos] = best
        return policy

    def decay_epsilon(self) -> None:
        """Decay epsilon for less exploration over time."""
        self.epsilon = max(self.config.min_epsilon,
                           self.epsilon * self.config.epsilon_decay)

    # ------------------------------------------------------------------
    # Value table inspection
    # ------------------------------------------------------------------

    def get_q_values_for_position(self, pos: Position) -> Dict[Action, float]:
        return {action: self.get_q_value(pos, action) for action in ACTIONS}

    def get_min_q_value(self) -> float:
        return float(np.min(self._q_array()))

    def get_max_q_value(self) -> float:
        return float(np.max(self._q_array()))

    def get_average_q_value(self) -> float:
        return float(np.mean(self._q_array()))

    def get_state_value(self, pos: Position) -> float:
        """Maximum Q-value over all four actions at a cell."""
        if not self.grid_model.in_bounds(pos):
            return 0.0
        return max(self.get_q_values_for_position(pos).values())

    def get_min_state_value(self) -> float:
        return min(self.get_state_value(pos) for pos in self.grid_model.positions())

    def get_max_state_value(self) -> float:
        return max(self.get_state_value(pos) for pos in self.grid_model.positions())

    def get_heuristic_info(self, pos: Position) -> Dict[str, Any]:
        return {
            "distance_to_goal": self.reward_fn.distance_to_goal(pos),
            "use_heuristics": self.config.use_directional_heuristics,
            "method": self.config.heuristic_method,
            "weight": self.config.heuristic_weight,
        }

    # ------------------------------------------------------------------
    # Stepping and episodes
    # ------------------------------------------------------------------

    def step(self) -> Optional[StepResult]:
        """
        Take one action from the current position and learn from it.

        Returns:
            The step outcome, or None if the agent already stands on a
            terminal cell (or has no valid action to take)
        """
        return self._advance(normalize=False)

    def _advance(self, normalize: bool) -> Optional[StepResult]:
        pos = self.current_position
        if self.grid_model.is_terminal(pos):
            return None
        if not self.get_valid_actions(pos):
            logger.warning(f"{self.method}: agent at {pos} has no valid actions")
            return None

        action = self._select_step_action(pos)
        next_pos = self.grid_model.next_position(pos, action)
        reward = self.reward_fn.reward(pos, next_pos)

        normalized_reward = None
        learning_reward = reward
        if normalize:
            normalized_reward = self.normalizer.normalize(reward)
            learning_reward = normalized_reward

        value_change = self._update(pos, action, next_pos, learning_reward)

        self.current_position = next_pos
        self.total_steps += 1

        return StepResult(
            from_state=pos,
            action=action,
            to_state=next_pos,
            reward=reward,
            reached_goal=self.grid_model.is_goal(next_pos),
            hit_hazard=self.grid_model.is_hazard(next_pos),
            normalized_reward=normalized_reward,
            value_change=value_change
        )

    def run_episode(self) -> EpisodeResult:
        """Run one episode from the start cell with the current exploration rate."""
        return self._run_episode(normalize=False)

    def _run_episode(self, normalize: bool) -> EpisodeResult:
        self.reset_position()
        epsilon_used = self.epsilon
        max_steps = self.config.max_steps_per_episode

        history: List[StepResult] = []
        total_reward = 0.0
        total_normalized_reward = 0.0
        total_change = 0.0
        reached_goal = False
        hit_hazard = False

        while len(history) < max_steps:
            result = self._advance(normalize)
            if result is None:
                break

            history.append(result)
            total_reward += result.reward
            total_change += result.value_change
            if result.normalized_reward is not None:
                total_normalized_reward += result.normalized_reward

            if result.reached_goal or result.hit_hazard:
                reached_goal = result.reached_goal
                hit_hazard = result.hit_hazard
                break

        self.episode_count += 1
        steps = len(history)

        return EpisodeResult(
            episode_index=self.episode_count,
            step_count=steps,
            total_reward=total_reward,
            reached_goal=reached_goal,
            hit_hazard=hit_hazard,
            average_value_change=total_change / steps if steps else 0.0,
            history=history,
            reached_step_limit=steps >= max_steps and not (reached_goal or hit_hazard),
            total_normalized_reward=total_normalized_reward if normalize else None,
            epsilon_used=epsilon_used
        )

    def find_path(self) -> Tuple[List[Position], bool]:
        """
        Follow the greedy policy from the start cell without learning.

        Returns:
            Tuple of (visited positions including the start, reached_goal)
        """
        pos = self.config.start_position
        path = [pos]
        for _ in range(self.config.max_steps_per_episode):
            if self.grid_model.is_terminal(pos):
                break
            action = self.get_best_valid_action(pos)
            if action is None:
                break
            pos = self.grid_model.next_position(pos, action)
            path.append(pos)
        return path, self.grid_model.is_goal(pos)

    def run_multiple_episodes(self, count: int,
                              should_stop: Optional[Callable[[], bool]] = None) -> List[EpisodeResult]:
        """Run episodes back to back; ``should_stop`` is polled before each one."""
        results = []
        for _ in range(count):
            if should_stop is not None and should_stop():
                logger.info(f"{self.method}: stopped after {len(results)} of {count} episodes")
                break
            results.append(self.run_episode())
        return results

    def train(self, should_stop: Optional[Callable[[], bool]] = None) -> TrainingResult:
        """
        Full training loop.

        Exploration starts at the configured epsilon and decays after every
        episode. Training stops after ``max_episodes`` or as soon as the
        average |delta Q| of an episode drops below ``convergence_threshold``.
        Learned values carry over between episodes unless the config asks
        for ``reinitialize_each_episode``.
        """
        self.epsilon = self.config.epsilon
        episodes: List[EpisodeResult] = []
        converged = False

        for episode_num in range(self.config.max_episodes):
            if should_stop is not None and should_stop():
                logger.info(f"{self.method}: training stopped by caller at episode {episode_num}")
                break

            if self.config.reinitialize_each_episode:
                self._init_values()

            episode = self._run_episode(normalize=self.config.normalize_rewards)
            episodes.append(episode)
            self.decay_epsilon()

            if (episode_num + 1) % 50 == 0:
                recent = episodes[-50:]
                recent_success = sum(1 for ep in recent if ep.reached_goal) / len(recent)
                logger.info(
                    f"{self.method}: episode {episode_num + 1}: success rate {recent_success:.1%}, "
                    f"epsilon {self.epsilon:.3f}"
                )

            if episode.average_value_change < self.config.convergence_threshold:
                converged = True
                logger.info(
                    f"{self.method}: converged after {episode_num + 1} episodes "
                    f"(avg |dQ| {episode.average_value_change:.2e})"
                )
                break

        return TrainingResult(
            episodes=episodes,
            converged=converged,
            final_epsilon=self.epsilon
        )
