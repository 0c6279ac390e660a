"""Walkability grid and node table shared by every search on it."""

from __future__ import annotations

import copy
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

import networkx as nx

from gridpath.grid.node import Node
from gridpath.types import Coord, DiagonalMovement

SQRT2 = math.sqrt(2)


@dataclass
class Grid:
    """2D grid of nodes plus a boolean matrix of blocked cells.

    Both tables are indexed ``[y][x]``. A grid is mutable shared state: one
    search at a time may run against it. Use ``clone()`` to give concurrent
    callers their own copy.
    """

    width: int
    height: int
    blocked: list[list[bool]]
    nodes: list[list[Node]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if len(self.blocked) != self.height or any(len(row) != self.width for row in self.blocked):
            raise ValueError(f"Blocked matrix does not match grid size {self.width}x{self.height}")
        self.nodes = [[Node(x, y) for x in range(self.width)] for y in range(self.height)]

    @classmethod
    def create(cls, width: int, height: int) -> Grid:
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid size must be positive, got {width}x{height}")
        blocked = [[False] * width for _ in range(height)]
        return cls(width=width, height=height, blocked=blocked)

    @classmethod
    def from_matrix(cls, matrix: Sequence[Sequence[object]]) -> Grid:
        """Build a grid from rows of cells; a truthy cell is blocked."""
        if not matrix or not matrix[0]:
            raise ValueError("Matrix must have at least one row and one column")
        width = len(matrix[0])
        for row_no, row in enumerate(matrix):
            if len(row) != width:
                raise ValueError(f"Row {row_no} has {len(row)} cells, expected {width}")
        blocked = [[bool(cell) for cell in row] for row in matrix]
        return cls(width=width, height=len(matrix), blocked=blocked)

    # ── Lookup ────────────────────────────────────────────────────────────────

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_node_at(self, x: int, y: int) -> Node:
        if not self.is_inside(x, y):
            raise ValueError(f"({x}, {y}) is outside the {self.width}x{self.height} grid")
        return self.nodes[y][x]

    def is_walkable_at(self, x: int, y: int) -> bool:
        if not self.is_inside(x, y):
            return False
        return not self.blocked[y][x]

    def set_walkable_at(self, x: int, y: int, walkable: bool) -> None:
        if not self.is_inside(x, y):
            raise ValueError(f"({x}, {y}) is outside the {self.width}x{self.height} grid")
        self.blocked[y][x] = not walkable

    def block_rect(self, x: int, y: int, w: int, h: int) -> None:
        """Mark all cells inside a rectangle as blocked."""
        for row in range(max(0, y), min(self.height, y + h)):
            for col in range(max(0, x), min(self.width, x + w)):
                self.blocked[row][col] = True

    def get_neighbors(self, node: Node, diagonal_movement: DiagonalMovement) -> list[Node]:
        """Walkable neighbours of ``node``.

        Orthogonal neighbours come first (up, right, down, left), then the
        diagonals (up-left, up-right, down-right, down-left) that the policy
        allows. Whether a diagonal may cut a corner depends on the two
        orthogonal cells it passes between.
        """
        x, y = node.x, node.y
        neighbors: list[Node] = []

        s0 = self.is_walkable_at(x, y - 1)
        if s0:
            neighbors.append(self.nodes[y - 1][x])
        s1 = self.is_walkable_at(x + 1, y)
        if s1:
            neighbors.append(self.nodes[y][x + 1])
        s2 = self.is_walkable_at(x, y + 1)
        if s2:
            neighbors.append(self.nodes[y + 1][x])
        s3 = self.is_walkable_at(x - 1, y)
        if s3:
            neighbors.append(self.nodes[y][x - 1])

        if diagonal_movement == DiagonalMovement.NEVER:
            return neighbors

        if diagonal_movement == DiagonalMovement.ONLY_WHEN_NO_OBSTACLES:
            d0, d1, d2, d3 = s3 and s0, s0 and s1, s1 and s2, s2 and s3
        elif diagonal_movement == DiagonalMovement.IF_AT_MOST_ONE_OBSTACLE:
            d0, d1, d2, d3 = s3 or s0, s0 or s1, s1 or s2, s2 or s3
        else:
            d0 = d1 = d2 = d3 = True

        if d0 and self.is_walkable_at(x - 1, y - 1):
            neighbors.append(self.nodes[y - 1][x - 1])
        if d1 and self.is_walkable_at(x + 1, y - 1):
            neighbors.append(self.nodes[y - 1][x + 1])
        if d2 and self.is_walkable_at(x + 1, y + 1):
            neighbors.append(self.nodes[y + 1][x + 1])
        if d3 and self.is_walkable_at(x - 1, y + 1):
            neighbors.append(self.nodes[y + 1][x - 1])

        return neighbors

    # ── Search bookkeeping ────────────────────────────────────────────────────

    def clean_up(self, dirty: Iterable[Coord], except_coord: Coord | None = None) -> None:
        """Reset the search fields of the listed nodes, skipping one protected cell."""
        for x, y in dirty:
            if (x, y) == except_coord:
                continue
            self.nodes[y][x].reset()

    def reset(self) -> None:
        for row in self.nodes:
            for node in row:
                node.reset()

    def clone(self) -> Grid:
        """Independent copy with fresh nodes and the same walkability."""
        return Grid(width=self.width, height=self.height, blocked=copy.deepcopy(self.blocked))

    # ── Export ────────────────────────────────────────────────────────────────

    def to_graph(self, diagonal_movement: DiagonalMovement = DiagonalMovement.NEVER) -> nx.Graph:
        """Connectivity of the walkable cells as a weighted networkx graph.

        Nodes are ``(x, y)`` tuples; each edge carries a ``weight`` of 1 for
        an orthogonal step and sqrt(2) for a diagonal one, using the same
        neighbour rules as the search.
        """
        g: nx.Graph = nx.Graph()
        for y in range(self.height):
            for x in range(self.width):
                if not self.blocked[y][x]:
                    g.add_node((x, y))
        for x, y in list(g.nodes):
            for neighbor in self.get_neighbors(self.nodes[y][x], diagonal_movement):
                weight = 1.0 if neighbor.x == x or neighbor.y == y else SQRT2
                g.add_edge((x, y), neighbor.coord, weight=weight)
        return g
