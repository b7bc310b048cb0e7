"""Snapshot records handed to the highscore collaborator."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any

from ..domain.types import RLConfig


@dataclass
class HighscoreSnapshot:
    """An opaque record of one training run; the core never stores it."""
    name: str
    score: float  # total reward
    episodes: int
    config: RLConfig
    mode: str  # learning method tag, e.g. "qlearning"
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    def to_dict(self) -> Dict[str, Any]:
        """Convert snapshot to dictionary for serialization."""
        return {
            "name": self.name,
            "score": self.score,
            "episodes": self.episodes,
            "config": self.config.to_dict(),
            "mode": self.mode,
            "timestamp": self.timestamp,
            "version": "1.0"
        }


def create_snapshot(env, name: str, score: float, episodes: int) -> HighscoreSnapshot:
    """Build a snapshot of an environment's current configuration and method."""
    return HighscoreSnapshot(
        name=name,
        score=score,
        episodes=episodes,
        config=env.get_config(),
        mode=env.method
    )
