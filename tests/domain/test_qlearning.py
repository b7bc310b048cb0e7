"""Tests specific to the Q-Learning environment."""

import pytest

from gridrl.domain.types import Cell, ACTIONS


class TestQLearningUpdate:
    """Off-policy update rule."""

    def test_worked_example(self, make_env, two_by_two_config):
        """alpha 0.5, gamma 0.9: 5 + 0.5 * (-1 + 0.9 * 5 - 5) = 4.25."""
        env = make_env("qlearning", config=two_by_two_config)
        env.set_q_value((0, 0), "right", 5.0)
        env.set_q_value((0, 1), "down", 5.0)

        result = env.step()

        assert result.action == "right"
        assert result.to_state == (0, 1)
        assert result.reward == -1
        assert env.get_q_value((0, 0), "right") == pytest.approx(4.25)
        assert result.value_change == pytest.approx(0.75)

    def test_update_contracts_towards_target(self, make_env):
        """|Q_new - target| == (1 - alpha) * |Q_old - target|."""
        env = make_env("qlearning", learning_rate=0.3, discount_factor=0.8)
        values = iter([0.7, -1.2, 2.5, 0.4, -0.3, 1.9, 0.8, -2.2])
        for pos in [(0, 0), (1, 0), (0, 1)]:
            for action in env.get_valid_actions(pos):
                env.set_q_value(pos, action, next(values))

        action = env.choose_action((0, 0))
        next_pos = env.grid_model.next_position((0, 0), action)
        old = env.get_q_value((0, 0), action)
        target = -1 + 0.8 * env.get_max_valid_q_value(next_pos)

        env.step()

        new = env.get_q_value((0, 0), action)
        assert abs(new - target) == pytest.approx(0.7 * abs(old - target))

    def test_max_ignores_off_grid_actions(self, make_env, two_by_two_config):
        """The bootstrap max only covers actions that stay on the grid."""
        env = make_env("qlearning", config=two_by_two_config)
        env.set_q_value((0, 0), "right", 1.0)
        env.set_q_value((0, 1), "up", 50.0)
        env.set_q_value((0, 1), "right", 50.0)

        env.step()

        # target = -1 + 0.9 * 0
        assert env.get_q_value((0, 0), "right") == pytest.approx(0.0)


class TestQLearningHazards:

    def test_agent_can_step_into_hazard(self, make_env):
        env = make_env("qlearning", grid_size=2, goal_position=(1, 1), hazard_positions=[(0, 1)])
        assert env.get_valid_actions((0, 0)) == ["down", "right"]
        env.set_q_value((0, 0), "right", 5.0)

        result = env.step()

        assert result.hit_hazard
        assert result.reward == -10
        assert env.get_q_value((0, 0), "right") == pytest.approx(-2.5)
        assert env.step() is None

    def test_episode_ends_on_hazard(self, make_env):
        env = make_env("qlearning", grid_size=2, goal_position=(1, 1), hazard_positions=[(0, 1)])
        env.set_q_value((0, 0), "right", 5.0)
        episode = env.run_episode()
        assert episode.hit_hazard
        assert not episode.reached_goal
        assert episode.step_count == 1


class TestQLearningGrid:

    def test_grid_holds_cells(self, make_env):
        env = make_env("qlearning", hazard_positions=[(1, 1)])
        grid = env.get_grid()
        assert isinstance(grid[0][0], Cell)
        assert grid[0][0].kind == "start"
        assert grid[1][1].kind == "hazard"
        assert grid[2][2].kind == "goal"

    def test_grid_snapshot_is_a_copy(self, make_env):
        env = make_env("qlearning")
        grid = env.get_grid()
        grid[0][0].q_values.set("down", 99.0)
        assert env.get_q_value((0, 0), "down") == 0.0

    def test_values_stored_per_cell(self, make_env):
        env = make_env("qlearning")
        env.set_q_value((2, 1), "left", 1.5)
        assert env.grid[2][1].q_values.left == 1.5
        assert env._q_array().shape == (9, len(ACTIONS))
