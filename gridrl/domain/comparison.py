"""Side-by-side comparison of learning methods on one configuration."""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Dict, Any
import numpy as np

from .types import RLConfig, ACTIONS
from .factory import create_environment, LearningMethod
from ..utils.rng import SeededRNG

logger = logging.getLogger(__name__)


@dataclass
class QValueStats:
    min: float
    max: float
    mean: float
    std: float


@dataclass
class AlgorithmComparison:
    """Summary of running one learning method for a fixed number of episodes."""
    method: str
    episode_count: int
    total_reward: float
    average_steps: float
    success_rate: float
    convergence_rate: float
    final_q_value_stats: QValueStats


def convergence_rate(value_changes: Sequence[float], window: int = 10) -> float:
    """
    Relative drop in mean |delta Q| from the first to the last ``window`` episodes.

    Returns 0 when fewer than ``window`` episodes were run or the early
    episodes did not change any value.
    """
    if len(value_changes) < window:
        return 0.0
    changes = np.abs(np.asarray(value_changes, dtype=np.float64))
    early = float(changes[:window].mean())
    recent = float(changes[-window:].mean())
    return (early - recent) / early if early > 0 else 0.0


def q_value_stats(values: np.ndarray) -> QValueStats:
    return QValueStats(
        min=float(np.min(values)),
        max=float(np.max(values)),
        mean=float(np.mean(values)),
        std=float(np.std(values))
    )


def compare_algorithms(config: RLConfig, methods: Sequence[LearningMethod],
                       episodes: int = 100, seed: Optional[int] = None) -> List[AlgorithmComparison]:
    """Run every method on a fresh environment and collect comparable statistics."""
    results = []
    for method in methods:
        env = create_environment(method, config, rng=SeededRNG(seed))
        episode_results = env.run_multiple_episodes(episodes)

        successes = sum(1 for ep in episode_results if ep.reached_goal)
        total_reward = sum(ep.total_reward for ep in episode_results)
        total_steps = sum(ep.step_count for ep in episode_results)
        count = len(episode_results)

        all_q_values = np.array([
            env.get_q_value(pos, action)
            for pos in env.grid_model.positions()
            for action in ACTIONS
        ])

        comparison = AlgorithmComparison(
            method=method,
            episode_count=count,
            total_reward=total_reward,
            average_steps=total_steps / count if count else 0.0,
            success_rate=successes / count if count else 0.0,
            convergence_rate=convergence_rate([ep.average_value_change for ep in episode_results]),
            final_q_value_stats=q_value_stats(all_q_values)
        )
        logger.info(f"{method}: success rate {comparison.success_rate:.1%} over {count} episodes")
        results.append(comparison)

    return results


ALGORITHM_INFO: Dict[str, Dict[str, Any]] = {
    "qlearning": {
        "name": "Q-Learning",
        "description": "An off-policy temporal difference learning algorithm that learns "
                       "the optimal action-value function.",
        "formula": "Q(s,a) <- Q(s,a) + alpha[r + gamma max Q(s',a') - Q(s,a)]",
        "pros": [
            "Off-policy: can learn optimal policy while following exploratory policy",
            "Converges to optimal Q-values under certain conditions",
            "Simple to implement and understand",
            "Works well with discrete state-action spaces",
        ],
        "cons": [
            "Can overestimate Q-values due to max operator",
            "May converge slowly in some environments",
            "Requires sufficient exploration to find optimal policy",
        ],
        "best_for": [
            "Discrete state-action spaces",
            "When optimal policy is desired",
            "Environments with clear reward structure",
        ],
    },
    "sarsa": {
        "name": "SARSA",
        "description": "An on-policy temporal difference learning algorithm that learns "
                       "the action-value function for the current policy.",
        "formula": "Q(s,a) <- Q(s,a) + alpha[r + gamma Q(s',a') - Q(s,a)]",
        "pros": [
            "On-policy: learns the value of the policy being followed",
            "Generally more conservative around hazards",
            "Can be more stable in some environments",
            "Natural exploration-exploitation balance",
        ],
        "cons": [
            "May not converge to optimal policy",
            "Performance depends on exploration policy",
            "Can be slower to converge than Q-learning",
        ],
        "best_for": [
            "When safety is important",
            "Environments with hazards or penalties",
            "When following a specific policy is desired",
        ],
    },
}
