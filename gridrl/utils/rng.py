"""Random number generation for exploration and preset generation."""

from typing import Optional, Sequence, TypeVar
import numpy as np

T = TypeVar("T")


class SeededRNG:
    """Seeded random number generator for reproducible runs.

    Each environment owns its own instance; nothing here touches the
    global ``random`` or ``numpy.random`` state.
    """

    def __init__(self, seed: Optional[int] = None):
        self._seed = seed
        self._rng = np.random.default_rng(seed)

    @property
    def seed(self) -> Optional[int]:
        """Get the current seed."""
        return self._seed

    def set_seed(self, seed: Optional[int]):
        """Restart the generator from a new seed."""
        self._seed = seed
        self._rng = np.random.default_rng(seed)

    def random(self) -> float:
        """Generate random float in [0, 1)."""
        return float(self._rng.random())

    def randint(self, a: int, b: int) -> int:
        """Generate random integer in [a, b]."""
        return int(self._rng.integers(a, b, endpoint=True))

    def choice(self, seq: Sequence[T]) -> T:
        """Choose a random element from a non-empty sequence."""
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[int(self._rng.integers(len(seq)))]
