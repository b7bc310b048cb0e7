"""Background training driver for the grid-world agents."""

import argparse
import logging
import sys
from typing import Optional, Sequence

from .domain.factory import create_environment, LEARNING_METHODS
from .domain.comparison import compare_algorithms
from .utils.presets import get_preset, PRESETS
from .utils.rng import SeededRNG


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gridrl", description="Tabular RL training on a grid-world")
    parser.add_argument("--method", choices=LEARNING_METHODS, default="qlearning",
                        help="Learning method to train")
    parser.add_argument("--preset", choices=sorted(PRESETS), default="default",
                        help="Grid layout and hyperparameter preset")
    parser.add_argument("--episodes", type=int, help="Override the preset's max_episodes")
    parser.add_argument("--seed", type=int, help="Random seed for exploration and random layouts")
    parser.add_argument("--compare", action="store_true",
                        help="Compare all learning methods instead of training one")
    parser.add_argument("--verbose", action="store_true", help="Log training progress")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    try:
        config = get_preset(args.preset, seed=args.seed)
        if args.episodes is not None:
            config = config.replace(max_episodes=args.episodes)
    except ValueError as e:
        print(f"❌ Invalid configuration: {e}")
        return 2

    print("🧠 Grid-world RL training")
    print("=" * 50)
    print(f"📐 Grid: {config.grid_size}x{config.grid_size}, {len(config.hazard_positions)} hazards")
    print(f"🎯 Start: {config.start_position} → Goal: {config.goal_position}")

    if args.compare:
        episodes = args.episodes or 100
        print(f"\n⚖️  Comparing {', '.join(LEARNING_METHODS)} over {episodes} episodes...")
        for comparison in compare_algorithms(config, LEARNING_METHODS, episodes=episodes, seed=args.seed):
            stats = comparison.final_q_value_stats
            print(f"\n   {comparison.method}")
            print(f"      Success rate: {comparison.success_rate:.1%}")
            print(f"      Average steps: {comparison.average_steps:.1f}")
            print(f"      Total reward: {comparison.total_reward:.2f}")
            print(f"      Convergence rate: {comparison.convergence_rate:.3f}")
            print(f"      Q range: [{stats.min:.2f}, {stats.max:.2f}], mean {stats.mean:.2f}")
        return 0

    print(f"\n⚙️  Training Configuration:")
    print(f"   Method: {args.method}")
    print(f"   Episodes: {config.max_episodes}")
    print(f"   Learning rate: {config.learning_rate}")
    print(f"   Epsilon: {config.epsilon} → {config.min_epsilon}")

    env = create_environment(args.method, config, rng=SeededRNG(args.seed))

    print(f"\n🚀 Starting training...")
    try:
        result = env.train()
    except KeyboardInterrupt:
        print(f"\n⏹️  Training interrupted by user")
        return 1

    print(f"\n🎉 Training completed!")
    print(f"   Total episodes: {result.total_episodes}")
    print(f"   Successful episodes: {result.successful_episodes}")
    print(f"   Success rate: {result.success_rate:.1%}")
    print(f"   Average reward: {result.average_reward:.2f}")
    print(f"   Final epsilon: {result.final_epsilon:.3f}")
    print(f"   Converged: {result.converged}")

    print(f"\n🧪 Testing final policy...")
    path, reached_goal = env.find_path()
    if reached_goal:
        print(f"✅ Path found! Length: {len(path) - 1}")
    else:
        print(f"❌ No path found with final policy")

    return 0


if __name__ == "__main__":
    sys.exit(main())
