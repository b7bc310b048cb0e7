"""Preset grid-world configurations and seeded random layouts."""

import math
from typing import Optional, List, Dict, Callable

from ..domain.types import RLConfig, Rewards, RewardPosition, Position
from ..domain.errors import ConfigError
from .rng import SeededRNG


DEFAULT_CONFIG = RLConfig(
    grid_size=8,
    start_position=(0, 0),
    goal_position=(7, 7),
    hazard_positions=[(2, 2), (3, 4), (5, 3), (6, 6)],
    learning_rate=0.1,
    discount_factor=0.9,
    epsilon=0.1,
    epsilon_decay=0.995,
    min_epsilon=0.01,
    rewards=Rewards(goal=500, hazard=-100, step=-1),
    use_directional_heuristics=False,
    heuristic_weight=0.1,
    heuristic_method="manhattan",
    normalize_rewards=False,
    normalization_method="minmax",
    convergence_threshold=1e-4,
    max_episodes=1000,
    max_steps_per_episode=100
)

CHALLENGING_CONFIG = RLConfig(
    grid_size=10,
    start_position=(0, 0),
    goal_position=(5, 7),
    hazard_positions=[
        # Top-left bottleneck
        (1, 1), (1, 2), (2, 1),
        # Mid-grid traps leaving one winding corridor
        (3, 3), (3, 4), (4, 4), (4, 5), (5, 5), (5, 6), (6, 6),
        # Right-side detour
        (2, 8), (3, 8), (4, 8), (5, 8),
        # Bottom-right choke
        (8, 9), (9, 9),
        # Edge hazards to discourage hugging walls
        (0, 6), (0, 7), (6, 0), (7, 0), (9, 6), (9, 7), (6, 9), (7, 9),
    ],
    learning_rate=0.15,
    discount_factor=0.95,
    epsilon=0.2,
    epsilon_decay=0.998,
    min_epsilon=0.05,
    rewards=Rewards(goal=1000, hazard=-200, step=-2),
    use_directional_heuristics=True,
    heuristic_weight=0.2,
    heuristic_method="manhattan",
    normalize_rewards=True,
    normalization_method="minmax",
    convergence_threshold=1e-5,
    max_episodes=2000,
    max_steps_per_episode=200
)

# Hazard fences around three reward islands; a low discount makes the
# islands attractive local optima compared with the distant goal.
LOCAL_MINIMA_CONFIG = RLConfig(
    grid_size=10,
    start_position=(0, 0),
    goal_position=(9, 9),
    hazard_positions=[
        (1, 0),
        # Island 1 around (2, 2), entrances at (2, 3) and (2, 4)
        (1, 2), (2, 1), (3, 2), (1, 4), (3, 4),
        # Barrier row, gaps at (4, 3) and (4, 6)
        (4, 0), (4, 1), (4, 2), (4, 4), (4, 5), (4, 7), (4, 8),
        # Island 2 around (5, 5), entrances at (5, 6) and (6, 6)
        (5, 4), (6, 5), (5, 7), (7, 5),
        # Island 3 around (7, 2), entrances at (7, 3) and (8, 3)
        (6, 2), (7, 1), (8, 2), (6, 4), (8, 4),
        # Choke in front of the goal
        (8, 9), (9, 8),
        # Decoys
        (3, 7), (6, 7),
    ],
    reward_positions=[
        RewardPosition((2, 2), 30), RewardPosition((2, 3), 25), RewardPosition((3, 2), 25),
        RewardPosition((2, 4), 20), RewardPosition((3, 3), 15),
        RewardPosition((5, 5), 40), RewardPosition((5, 6), 35), RewardPosition((6, 5), 35),
        RewardPosition((6, 6), 30), RewardPosition((5, 7), 25),
        RewardPosition((7, 2), 35), RewardPosition((7, 3), 30), RewardPosition((8, 2), 30),
        RewardPosition((8, 3), 25), RewardPosition((7, 4), 20),
    ],
    rewards=Rewards(goal=500, hazard=-100, step=-2),
    learning_rate=0.1,
    discount_factor=0.8,
    epsilon=0.2,
    epsilon_decay=0.995,
    min_epsilon=0.01,
    use_directional_heuristics=True,
    heuristic_weight=0.2,
    heuristic_method="manhattan",
    normalize_rewards=True,
    normalization_method="minmax",
    convergence_threshold=1e-5,
    max_episodes=5000,
    max_steps_per_episode=200
)


def generate_random_hazards_config(seed: Optional[int] = None, grid_size: int = 10) -> RLConfig:
    """
    Generate a layout whose hazards cluster around two centres.

    Each cell becomes a hazard with probability given by the sum of two
    Gaussian bumps (sigma 1.5) centred at (3, 3) and (7, 7), capped at 0.7.
    The start is always (0, 0); the goal is drawn from the remaining free cells.

    Args:
        seed: Random seed for reproducibility
        grid_size: Side length of the grid

    Returns:
        A validated RLConfig
    """
    rng = SeededRNG(seed)
    start: Position = (0, 0)
    centres = [(3, 3), (7, 7)]
    stddev = 1.5

    hazards: List[Position] = []
    for row in range(grid_size):
        for col in range(grid_size):
            if (row, col) == start:
                continue
            prob = 0.0
            for centre_row, centre_col in centres:
                d2 = (row - centre_row) ** 2 + (col - centre_col) ** 2
                prob += math.exp(-d2 / (2 * stddev * stddev))
            if rng.random() < min(prob, 0.7):
                hazards.append((row, col))

    hazard_set = set(hazards)
    free_cells = [(row, col) for row in range(grid_size) for col in range(grid_size)
                  if (row, col) != start and (row, col) not in hazard_set]
    if free_cells:
        goal = rng.choice(free_cells)
    else:
        goal = (grid_size - 1, grid_size - 1)
        hazard_set.discard(goal)

    return RLConfig(
        grid_size=grid_size,
        start_position=start,
        goal_position=goal,
        hazard_positions=hazard_set,
        learning_rate=0.15,
        discount_factor=0.95,
        epsilon=0.2,
        epsilon_decay=0.998,
        min_epsilon=0.05,
        rewards=Rewards(goal=1000, hazard=-200, step=-2),
        use_directional_heuristics=True,
        heuristic_weight=0.2,
        heuristic_method="manhattan",
        normalize_rewards=True,
        normalization_method="minmax",
        convergence_threshold=1e-5,
        max_episodes=2000,
        max_steps_per_episode=200
    )


PRESETS: Dict[str, Callable[[Optional[int]], RLConfig]] = {
    "default": lambda seed: DEFAULT_CONFIG,
    "challenging": lambda seed: CHALLENGING_CONFIG,
    "local_minima": lambda seed: LOCAL_MINIMA_CONFIG,
    "random": lambda seed: generate_random_hazards_config(seed),
}


def get_preset(name: str, seed: Optional[int] = None) -> RLConfig:
    """
    Get a preset configuration by name.

    Raises:
        ConfigError: If the preset name is unknown
    """
    if name not in PRESETS:
        raise ConfigError(f"Unknown preset: {name}")
    return PRESETS[name](seed)
