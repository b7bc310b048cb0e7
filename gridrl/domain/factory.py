"""Learning-method selection and the capability surface shared by all environments."""

from typing import Protocol, Optional, List, Dict, Any, Callable, Literal, Type, runtime_checkable

from .types import Position, Action, RLConfig, StepResult, EpisodeResult, TrainingResult
from .base import TabularEnvironment
from .qlearning import QLearningEnvironment
from .sarsa import SARSAEnvironment
from .errors import UnknownMethodError
from ..utils.rng import SeededRNG

LearningMethod = Literal["qlearning", "sarsa"]


@runtime_checkable
class RLEnvironment(Protocol):
    """What renderers and training drivers may rely on, whatever the algorithm."""

    def step(self) -> Optional[StepResult]: ...
    def run_episode(self) -> EpisodeResult: ...
    def run_multiple_episodes(self, count: int,
                              should_stop: Optional[Callable[[], bool]] = None) -> List[EpisodeResult]: ...
    def train(self, should_stop: Optional[Callable[[], bool]] = None) -> TrainingResult: ...
    def reset(self) -> None: ...
    def reset_position(self) -> None: ...
    def get_grid(self) -> List[List[Any]]: ...
    def get_current_position(self) -> Position: ...
    def get_episode_count(self) -> int: ...
    def get_total_steps(self) -> int: ...
    def get_config(self) -> RLConfig: ...
    def update_config(self, config: RLConfig) -> None: ...
    def get_policy(self) -> Dict[Position, Action]: ...
    def get_valid_actions(self, pos: Position) -> List[Action]: ...
    def get_best_valid_action(self, pos: Position) -> Optional[Action]: ...
    def get_max_valid_q_value(self, pos: Position) -> float: ...
    def get_q_values_for_position(self, pos: Position) -> Dict[Action, float]: ...
    def get_min_q_value(self) -> float: ...
    def get_max_q_value(self) -> float: ...
    def get_average_q_value(self) -> float: ...


ENVIRONMENTS: Dict[str, Type[TabularEnvironment]] = {
    "qlearning": QLearningEnvironment,
    "sarsa": SARSAEnvironment,
}

LEARNING_METHODS: List[str] = list(ENVIRONMENTS)


def create_environment(method: LearningMethod, config: RLConfig,
                       rng: Optional[SeededRNG] = None) -> TabularEnvironment:
    """
    Construct the environment for a learning method.

    Raises:
        UnknownMethodError: If method is not one of LEARNING_METHODS
    """
    try:
        environment_cls = ENVIRONMENTS[method]
    except (KeyError, TypeError):
        raise UnknownMethodError(method) from None
    return environment_cls(config, rng=rng)
