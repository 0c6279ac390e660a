"""Shared type definitions for gridpath.

Enums and small aliases used across the grid, the search engine, and the
path toolkit.
"""

from __future__ import annotations

from enum import Enum, IntEnum

Coord = tuple[int, int]
Path = list[Coord]


class Direction(IntEnum):
    """Cardinal step directions in screen coordinates (y grows downwards)."""

    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3

    @property
    def offset(self) -> Coord:
        return _OFFSETS[self]

    @classmethod
    def from_offset(cls, dx: int, dy: int) -> Direction | None:
        """Direction of an orthogonal unit step, or None for anything else."""
        for direction in cls:
            if direction.offset == (dx, dy):
                return direction
        return None

    @classmethod
    def parse(cls, name: str) -> Direction:
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown direction '{name}'; use up, right, down or left") from None


_OFFSETS: dict[Direction, Coord] = {
    Direction.UP: (0, -1),
    Direction.RIGHT: (1, 0),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
}


class DiagonalMovement(Enum):
    ALWAYS = "always"
    NEVER = "never"
    IF_AT_MOST_ONE_OBSTACLE = "if-at-most-one-obstacle"
    ONLY_WHEN_NO_OBSTACLES = "only-when-no-obstacles"


class TieCase(IntEnum):
    """The six unordered pairs of cardinal directions that can tie."""

    UP_RIGHT = 0
    UP_DOWN = 1
    UP_LEFT = 2
    RIGHT_DOWN = 3
    LEFT_RIGHT = 4
    DOWN_LEFT = 5
