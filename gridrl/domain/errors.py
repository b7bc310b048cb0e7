"""Exception types raised by the grid-world core."""


class ConfigError(ValueError):
    """Raised when a configuration parameter is invalid."""


class OutOfBoundsError(ConfigError):
    """Raised when a configured position lies outside the grid."""

    def __init__(self, field: str, position, grid_size: int):
        self.field = field
        self.position = position
        self.grid_size = grid_size
        super().__init__(
            f"{field} {position} is outside the {grid_size}x{grid_size} grid"
        )


class UnknownMethodError(ValueError):
    """Raised by the environment factory for an unknown learning method."""

    def __init__(self, method):
        self.method = method
        super().__init__(f"Unknown learning method: {method}")


class InvalidMoveError(ValueError):
    """Raised when a move would take the agent off the grid."""
