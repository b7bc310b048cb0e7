"""Tabular Q-Learning and SARSA agents on a configurable grid-world.

The package provides the environment mechanics (grid layout, reward shaping,
directional heuristics, reward normalization) and two interchangeable
learning strategies behind one environment interface.
"""

from .domain.types import RLConfig, Rewards, RewardPosition, StepResult, EpisodeResult, TrainingResult
from .domain.factory import create_environment, RLEnvironment, LEARNING_METHODS
from .domain.qlearning import QLearningEnvironment
from .domain.sarsa import SARSAEnvironment
from .utils.snapshot import HighscoreSnapshot, create_snapshot

__version__ = "1.0.0"

__all__ = [
    "RLConfig",
    "Rewards",
    "RewardPosition",
    "StepResult",
    "EpisodeResult",
    "TrainingResult",
    "create_environment",
    "RLEnvironment",
    "LEARNING_METHODS",
    "QLearningEnvironment",
    "SARSAEnvironment",
    "HighscoreSnapshot",
    "create_snapshot",
]
