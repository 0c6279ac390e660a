"""Grid cell with the bookkeeping fields a search writes onto it."""

from __future__ import annotations

from dataclasses import dataclass

from gridpath.types import Coord, Direction


@dataclass(eq=False)
class Node:
    """A single grid cell.

    Everything except ``x`` and ``y`` is search-scoped: lazily set on first
    discovery, mutated during relaxation, and cleared by ``reset()``.
    ``parent`` holds the parent cell's coordinates, resolved through the
    owning grid, so clearing a node can never leave a dangling reference.
    """

    x: int
    y: int
    g: float = 0.0
    h: float | None = None
    f: float = 0.0
    opened: bool = False
    closed: bool = False
    parent: Coord | None = None
    direction: Direction | None = None
    last_turn: bool = False
    last_turn_x: int | None = None
    last_turn_y: int | None = None

    @property
    def coord(self) -> Coord:
        return (self.x, self.y)

    def reset(self) -> None:
        self.g = 0.0
        self.h = None
        self.f = 0.0
        self.opened = False
        self.closed = False
        self.parent = None
        self.direction = None
        self.last_turn = False
        self.last_turn_x = None
        self.last_turn_y = None
