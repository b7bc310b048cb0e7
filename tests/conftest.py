"""
Shared pytest fixtures for the grid-world tests.

This module provides:
- Small configuration factories
- Environment factories for both learning methods
- A scripted RNG for forcing exploration decisions
"""

from typing import Optional, Sequence

import pytest

from gridrl.domain.types import RLConfig, Rewards
from gridrl.domain.factory import create_environment
from gridrl.utils.rng import SeededRNG


class ScriptedRNG(SeededRNG):
    """RNG that replays fixed draws.

    ``random()`` pops from ``randoms`` and returns 1.0 (never explore) once
    they run out. ``choice()`` pops from ``choices`` and falls back to the
    first element of the sequence.
    """

    def __init__(self, randoms: Sequence[float] = (), choices: Sequence = ()):
        super().__init__(0)
        self._randoms = list(randoms)
        self._choices = list(choices)

    def random(self) -> float:
        return self._randoms.pop(0) if self._randoms else 1.0

    def choice(self, seq):
        if self._choices:
            wanted = self._choices.pop(0)
            assert wanted in seq, f"scripted choice {wanted} not in {seq}"
            return wanted
        return seq[0]


# =============================================================================
# CONFIGURATION FACTORIES
# =============================================================================

@pytest.fixture
def make_config():
    """Factory for small, fully greedy configurations.

    Returns:
        Callable accepting RLConfig field overrides
    """
    def _make_config(**overrides) -> RLConfig:
        params = dict(
            grid_size=3,
            start_position=(0, 0),
            goal_position=(2, 2),
            learning_rate=0.5,
            discount_factor=0.9,
            epsilon=0.0,
            epsilon_decay=1.0,
            min_epsilon=0.0,
            rewards=Rewards(goal=10, hazard=-10, step=-1),
            max_episodes=10,
            max_steps_per_episode=50,
        )
        params.update(overrides)
        return RLConfig(**params)

    return _make_config


@pytest.fixture
def two_by_two_config(make_config):
    """2x2 grid, start (0,0), goal (1,1), no hazards, greedy."""
    return make_config(grid_size=2, goal_position=(1, 1))


# =============================================================================
# ENVIRONMENT FACTORIES
# =============================================================================

@pytest.fixture
def make_env(make_config):
    """Factory for environments of either learning method.

    Returns:
        Callable (method, config=None, rng=None, **overrides) -> environment
    """
    def _make_env(method: str, config: Optional[RLConfig] = None,
                  rng: Optional[SeededRNG] = None, **overrides):
        if config is None:
            config = make_config(**overrides)
        return create_environment(method, config, rng=rng if rng is not None else SeededRNG(0))

    return _make_env


@pytest.fixture(params=["qlearning", "sarsa"])
def method(request):
    """Run a test once per learning method."""
    return request.param


@pytest.fixture
def scripted_rng():
    """Factory for ScriptedRNG instances."""
    return ScriptedRNG
