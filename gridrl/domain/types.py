"""Core type definitions for the tabular grid-world agents."""

from dataclasses import dataclass, field, fields, replace as dataclass_replace
from typing import Optional, Tuple, Literal, Dict, FrozenSet, List, Any
import numpy as np

from .errors import ConfigError, OutOfBoundsError

# Grid positions are (row, col), 0-indexed
Position = Tuple[int, int]

# Cell classification
CellKind = Literal["empty", "start", "goal", "hazard"]

# Actions the agent can take
Action = Literal["up", "down", "left", "right"]
ActionInt = Literal[0, 1, 2, 3]  # Numerical representation

# Distance metrics for the directional heuristic
HeuristicMethod = Literal["manhattan", "euclidean", "chebyshev"]

# Running reward normalization strategies
NormalizationMethod = Literal["minmax", "zscore"]

# Canonical action order; greedy ties are always broken by this order
ACTIONS: Tuple[Action, ...] = ("up", "down", "left", "right")

HEURISTIC_METHODS: Tuple[HeuristicMethod, ...] = ("manhattan", "euclidean", "chebyshev")
NORMALIZATION_METHODS: Tuple[NormalizationMethod, ...] = ("minmax", "zscore")


def as_position(value: Any) -> Position:
    """Coerce a (row, col) pair, list or {"row", "col"} mapping to a Position."""
    if isinstance(value, dict):
        return (int(value["row"]), int(value["col"]))
    row, col = value
    return (int(row), int(col))


@dataclass
class QValues:
    """Stores Q-values for all actions at a state."""
    up: float = 0.0
    down: float = 0.0
    left: float = 0.0
    right: float = 0.0

    def get(self, action: Action) -> float:
        """Get the Q-value of a single action."""
        return getattr(self, action)

    def set(self, action: Action, value: float) -> None:
        """Set the Q-value of a single action."""
        setattr(self, action, float(value))

    def as_array(self) -> np.ndarray:
        """Return Q-values as numpy array in canonical action order."""
        return np.array([self.up, self.down, self.left, self.right])

    def as_dict(self) -> Dict[Action, float]:
        return {action: self.get(action) for action in ACTIONS}

    def max_value(self) -> float:
        """Get the maximum Q-value."""
        return max(self.up, self.down, self.left, self.right)

    def best_action(self) -> Action:
        """Get the action with highest Q-value (first in canonical order on ties)."""
        return ACTIONS[int(np.argmax(self.as_array()))]


@dataclass
class Cell:
    """A single grid cell as held by the Q-Learning environment."""
    kind: CellKind
    q_values: QValues = field(default_factory=QValues)

    def copy(self) -> "Cell":
        return Cell(kind=self.kind, q_values=QValues(**self.q_values.as_dict()))


@dataclass(frozen=True)
class RewardPosition:
    """A bonus reward attached to a single non-terminal cell."""
    position: Position
    reward: float

    def __post_init__(self):
        object.__setattr__(self, "position", as_position(self.position))
        object.__setattr__(self, "reward", float(self.reward))


@dataclass(frozen=True)
class Rewards:
    """Reward magnitudes for reaching the goal, a hazard, or any other cell."""
    goal: float = 500.0
    hazard: float = -100.0
    step: float = -1.0


@dataclass(frozen=True)
class RLConfig:
    """Configuration for a grid-world learning run.

    Instances are immutable and always valid: positions are coerced to
    tuples and every parameter is checked on construction. Use
    :meth:`replace` to derive a modified copy.
    """
    grid_size: int = 8
    start_position: Position = (0, 0)
    goal_position: Position = (7, 7)
    hazard_positions: FrozenSet[Position] = frozenset()
    reward_positions: Tuple[RewardPosition, ...] = ()

    # Learning parameters
    learning_rate: float = 0.1  # alpha
    discount_factor: float = 0.9  # gamma
    epsilon: float = 0.1  # initial exploration rate
    epsilon_decay: float = 0.995  # multiplicative, per episode
    min_epsilon: float = 0.01

    rewards: Rewards = field(default_factory=Rewards)

    # Directional heuristics
    use_directional_heuristics: bool = False
    heuristic_weight: float = 0.1
    heuristic_method: HeuristicMethod = "manhattan"

    # Reward normalization (full training runs only)
    normalize_rewards: bool = False
    normalization_method: NormalizationMethod = "minmax"

    # Training limits
    convergence_threshold: float = 1e-4  # stop once avg |dQ| per episode drops below
    max_episodes: int = 1000
    max_steps_per_episode: int = 100
    reinitialize_each_episode: bool = False

    def __post_init__(self):
        object.__setattr__(self, "grid_size", int(self.grid_size))
        object.__setattr__(self, "start_position", as_position(self.start_position))
        object.__setattr__(self, "goal_position", as_position(self.goal_position))
        object.__setattr__(self, "hazard_positions",
                           frozenset(as_position(p) for p in self.hazard_positions))
        object.__setattr__(self, "reward_positions",
                           tuple(_as_reward_position(rp) for rp in self.reward_positions))
        if isinstance(self.rewards, dict):
            object.__setattr__(self, "rewards", Rewards(**self.rewards))
        self._validate()

    def _validate(self) -> None:
        if self.grid_size < 2:
            raise ConfigError(f"grid_size must be at least 2, got {self.grid_size}")

        self._check_bounds("start_position", self.start_position)
        self._check_bounds("goal_position", self.goal_position)
        for hazard in sorted(self.hazard_positions):
            self._check_bounds("hazard position", hazard)
        for reward_position in self.reward_positions:
            self._check_bounds("reward position", reward_position.position)

        if self.start_position == self.goal_position:
            raise ConfigError("Start and goal positions cannot be the same")
        if self.start_position in self.hazard_positions:
            raise ConfigError(f"Start position {self.start_position} is a hazard")
        if self.goal_position in self.hazard_positions:
            raise ConfigError(f"Goal position {self.goal_position} is a hazard")

        if not 0.0 < self.learning_rate <= 1.0:
            raise ConfigError(f"learning_rate must be in (0, 1], got {self.learning_rate}")
        if not 0.0 <= self.discount_factor <= 1.0:
            raise ConfigError(f"discount_factor must be in [0, 1], got {self.discount_factor}")
        if not 0.0 <= self.epsilon <= 1.0:
            raise ConfigError(f"epsilon must be in [0, 1], got {self.epsilon}")
        if not 0.0 < self.epsilon_decay <= 1.0:
            raise ConfigError(f"epsilon_decay must be in (0, 1], got {self.epsilon_decay}")
        if not 0.0 <= self.min_epsilon <= 1.0:
            raise ConfigError(f"min_epsilon must be in [0, 1], got {self.min_epsilon}")

        if self.heuristic_method not in HEURISTIC_METHODS:
            raise ConfigError(f"Unknown heuristic method: {self.heuristic_method}")
        if self.normalization_method not in NORMALIZATION_METHODS:
            raise ConfigError(f"Unknown normalization method: {self.normalization_method}")

        if self.convergence_threshold < 0:
            raise ConfigError(
                f"convergence_threshold must be non-negative, got {self.convergence_threshold}"
            )
        if self.max_episodes < 1:
            raise ConfigError(f"max_episodes must be positive, got {self.max_episodes}")
        if self.max_steps_per_episode < 1:
            raise ConfigError(
                f"max_steps_per_episode must be positive, got {self.max_steps_per_episode}"
            )

    def _check_bounds(self, name: str, position: Position) -> None:
        row, col = position
        if not (0 <= row < self.grid_size and 0 <= col < self.grid_size):
            raise OutOfBoundsError(name, position, self.grid_size)

    def replace(self, **changes) -> "RLConfig":
        """Return a new validated config with the given fields replaced."""
        return dataclass_replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to plain data (lists and dicts only)."""
        return {
            "grid_size": self.grid_size,
            "start_position": list(self.start_position),
            "goal_position": list(self.goal_position),
            "hazard_positions": [list(p) for p in sorted(self.hazard_positions)],
            "reward_positions": [
                {"position": list(rp.position), "reward": rp.reward}
                for rp in self.reward_positions
            ],
            "learning_rate": self.learning_rate,
            "discount_factor": self.discount_factor,
            "epsilon": self.epsilon,
            "epsilon_decay": self.epsilon_decay,
            "min_epsilon": self.min_epsilon,
            "rewards": {
                "goal": self.rewards.goal,
                "hazard": self.rewards.hazard,
                "step": self.rewards.step,
            },
            "use_directional_heuristics": self.use_directional_heuristics,
            "heuristic_weight": self.heuristic_weight,
            "heuristic_method": self.heuristic_method,
            "normalize_rewards": self.normalize_rewards,
            "normalization_method": self.normalization_method,
            "convergence_threshold": self.convergence_threshold,
            "max_episodes": self.max_episodes,
            "max_steps_per_episode": self.max_steps_per_episode,
            "reinitialize_each_episode": self.reinitialize_each_episode,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RLConfig":
        """Create a config from plain data, filling missing keys with defaults."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**data)


def _as_reward_position(value: Any) -> RewardPosition:
    if isinstance(value, RewardPosition):
        return value
    if isinstance(value, dict):
        return RewardPosition(position=value["position"], reward=value["reward"])
    position, reward = value
    return RewardPosition(position=position, reward=reward)


@dataclass
class StepResult:
    """Outcome of a single environment step."""
    from_state: Position
    action: Action
    to_state: Position
    reward: float
    reached_goal: bool
    hit_hazard: bool
    normalized_reward: Optional[float] = None
    value_change: float = 0.0  # |Q_new - Q_old| for the updated pair


@dataclass
class EpisodeResult:
    """Represents a single completed episode."""
    episode_index: int
    step_count: int
    total_reward: float
    reached_goal: bool
    hit_hazard: bool
    average_value_change: float
    history: List[StepResult] = field(default_factory=list)
    reached_step_limit: bool = False
    total_normalized_reward: Optional[float] = None
    epsilon_used: float = 0.0


@dataclass
class TrainingResult:
    """Result of a full training run."""
    episodes: List[EpisodeResult]
    converged: bool
    final_epsilon: float

    @property
    def total_episodes(self) -> int:
        return len(self.episodes)

    @property
    def successful_episodes(self) -> int:
        return sum(1 for ep in self.episodes if ep.reached_goal)

    @property
    def success_rate(self) -> float:
        """Calculate success rate."""
        return self.successful_episodes / self.total_episodes if self.total_episodes > 0 else 0.0

    @property
    def average_reward(self) -> float:
        if not self.episodes:
            return 0.0
        return sum(ep.total_reward for ep in self.episodes) / len(self.episodes)


# Action mappings
ACTION_TO_INT: Dict[Action, ActionInt] = {
    "up": 0,
    "down": 1,
    "left": 2,
    "right": 3
}

ACTION_DELTAS: Dict[Action, Position] = {
    "up": (-1, 0),
    "down": (1, 0),
    "left": (0, -1),
    "right": (0, 1)
}
