"""Tests for reward shaping and running normalization."""

import pytest

from gridrl.domain.rewards import RewardFunction, RewardNormalizer
from gridrl.domain.types import RLConfig, Rewards
from gridrl.domain.errors import ConfigError


@pytest.fixture
def make_reward_fn():
    def _make_reward_fn(**overrides):
        params = dict(
            grid_size=4,
            goal_position=(3, 3),
            hazard_positions=[(1, 1)],
            rewards=Rewards(goal=10, hazard=-10, step=-1),
        )
        params.update(overrides)
        return RewardFunction(RLConfig(**params))

    return _make_reward_fn


class TestBaseReward:
    """Destination cell determines the base reward."""

    def test_goal_hazard_step(self, make_reward_fn):
        reward_fn = make_reward_fn()
        assert reward_fn.base_reward((3, 3)) == 10
        assert reward_fn.base_reward((1, 1)) == -10
        assert reward_fn.base_reward((2, 0)) == -1

    def test_bonus_added_to_step_penalty(self, make_reward_fn):
        reward_fn = make_reward_fn(reward_positions=[((0, 2), 5.0)])
        assert reward_fn.base_reward((0, 2)) == 4.0

    def test_first_bonus_wins_on_duplicate_position(self, make_reward_fn):
        """A position listed twice keeps the bonus of its first entry."""
        reward_fn = make_reward_fn(reward_positions=[((0, 2), 5.0), ((0, 2), 50.0)])
        assert reward_fn.base_reward((0, 2)) == 4.0

    def test_goal_and_hazard_take_precedence_over_bonus(self, make_reward_fn):
        reward_fn = make_reward_fn(reward_positions=[((3, 3), 50.0), ((1, 1), 50.0)])
        assert reward_fn.base_reward((3, 3)) == 10
        assert reward_fn.base_reward((1, 1)) == -10

    def test_reward_independent_of_source(self, make_reward_fn):
        reward_fn = make_reward_fn()
        assert reward_fn.reward((2, 1), (2, 2)) == reward_fn.reward((1, 2), (2, 2))


class TestHeuristicReward:
    """Goal-directed shaping term."""

    def test_disabled_by_default(self, make_reward_fn):
        reward_fn = make_reward_fn()
        assert reward_fn.heuristic_reward((0, 0), (0, 1)) == 0.0

    def test_sign_follows_distance_change(self, make_reward_fn):
        """Moving one cell closer adds the weight, moving away subtracts it."""
        reward_fn = make_reward_fn(use_directional_heuristics=True, heuristic_weight=1.0)
        assert reward_fn.reward((0, 0), (0, 1)) == -1 + 1
        assert reward_fn.reward((0, 1), (0, 0)) == -1 - 1

    def test_weight_scales_term(self, make_reward_fn):
        reward_fn = make_reward_fn(use_directional_heuristics=True, heuristic_weight=0.25)
        assert reward_fn.heuristic_reward((2, 2), (2, 3)) == 0.25

    def test_distance_to_goal_uses_method(self, make_reward_fn):
        reward_fn = make_reward_fn(heuristic_method="chebyshev")
        assert reward_fn.distance_to_goal((0, 1)) == 3


class TestRewardNormalizer:
    """Running min-max and z-score normalization."""

    def test_minmax_sequence(self):
        normalizer = RewardNormalizer("minmax")
        assert [normalizer.normalize(r) for r in (1, 3, 2)] == [0.0, 1.0, 0.5]

    def test_zero_spread_gives_zero(self):
        for method in ("minmax", "zscore"):
            normalizer = RewardNormalizer(method)
            assert normalizer.normalize(7.0) == 0.0
            assert normalizer.normalize(7.0) == 0.0

    def test_zscore_sequence(self):
        normalizer = RewardNormalizer("zscore")
        assert normalizer.normalize(1.0) == 0.0
        # mean 2, population std 1
        assert normalizer.normalize(3.0) == pytest.approx(1.0)
        assert normalizer.mean == pytest.approx(2.0)
        assert normalizer.std == pytest.approx(1.0)

    def test_reset_clears_statistics(self):
        normalizer = RewardNormalizer("minmax")
        normalizer.normalize(-5.0)
        normalizer.normalize(5.0)
        normalizer.reset()
        assert normalizer.count == 0
        assert normalizer.normalize(2.0) == 0.0

    def test_unknown_method(self):
        with pytest.raises(ConfigError):
            RewardNormalizer("softmax")
