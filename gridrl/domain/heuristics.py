"""Distance metrics for goal-directed reward shaping."""

import math
from typing import Callable, Dict
from .types import Position, HeuristicMethod
from .errors import ConfigError


def manhattan_distance(a: Position, b: Position) -> float:
    """
    Manhattan (L1) distance.
    Exact path length on an open grid with 4-directional movement.
    """
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def euclidean_distance(a: Position, b: Position) -> float:
    """Euclidean (L2) distance."""
    drow = a[0] - b[0]
    dcol = a[1] - b[1]
    return math.sqrt(drow * drow + dcol * dcol)


def chebyshev_distance(a: Position, b: Position) -> float:
    """Chebyshev (L-infinity) distance."""
    return max(abs(a[0] - b[0]), abs(a[1] - b[1]))


# Mapping from heuristic methods to functions
HEURISTICS: Dict[HeuristicMethod, Callable[[Position, Position], float]] = {
    "manhattan": manhattan_distance,
    "euclidean": euclidean_distance,
    "chebyshev": chebyshev_distance,
}


def get_heuristic(method: HeuristicMethod) -> Callable[[Position, Position], float]:
    """Get distance function by method name."""
    try:
        return HEURISTICS[method]
    except KeyError:
        raise ConfigError(f"Unknown heuristic method: {method}") from None
