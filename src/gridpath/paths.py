"""Path toolkit: reconstruction, rasterisation and simplification.

All functions work on plain ``[(x, y), ...]`` lists and return new lists;
none of them mutates its input.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from gridpath.grid.grid import Grid
from gridpath.grid.node import Node
from gridpath.types import Coord, Path


@dataclass
class PathCandidate:
    """A complete path found by one refinement iteration."""

    path: Path
    f: float
    iteration: int = 1


def backtrace(grid: Grid, node: Node) -> Path:
    """Follow parent links from ``node`` back to the root; start-to-node order."""
    path: Path = [node.coord]
    while node.parent is not None:
        node = grid.get_node_at(*node.parent)
        path.append(node.coord)
    path.reverse()
    return path


def bi_backtrace(grid: Grid, node_a: Node, node_b: Node) -> Path:
    """Join the backtraces of two frontiers that met at ``node_a``/``node_b``."""
    path_a = backtrace(grid, node_a)
    path_b = backtrace(grid, node_b)
    path_b.reverse()
    return path_a + path_b


def path_length(path: Sequence[Coord]) -> float:
    total = 0.0
    for (ax, ay), (bx, by) in zip(path, path[1:]):
        total += math.sqrt((ax - bx) ** 2 + (ay - by) ** 2)
    return total


def interpolate(x0: int, y0: int, x1: int, y1: int) -> Path:
    """Cells on the line between two cells (Bresenham), both ends included."""
    line: Path = []
    dx = abs(x1 - x0)
    dy = abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx - dy

    while True:
        line.append((x0, y0))
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x0 += sx
        if e2 < dx:
            err += dx
            y0 += sy

    return line


def expand_path(path: Sequence[Coord]) -> Path:
    """Rasterise every segment of a compressed path into unit steps."""
    if len(path) < 2:
        return []

    expanded: Path = []
    for (x0, y0), (x1, y1) in zip(path, path[1:]):
        # Drop each segment's last cell; it opens the next segment.
        expanded.extend(interpolate(x0, y0, x1, y1)[:-1])
    expanded.append(tuple(path[-1]))
    return expanded


def smoothen_path(grid: Grid, path: Sequence[Coord]) -> Path:
    """String-pull ``path``: drop points that a straight walkable line can skip.

    The anchor starts at the first point. Each later point is tested by
    rasterising the line from the anchor; the first test that touches a
    blocked cell commits the previous point as the new anchor. The start and
    end of the path are always kept.
    """
    if len(path) < 3:
        return [tuple(p) for p in path]

    sx, sy = path[0]
    smoothed: Path = [(sx, sy)]

    for i in range(2, len(path)):
        ex, ey = path[i]
        line = interpolate(sx, sy, ex, ey)
        blocked = any(not grid.is_walkable_at(x, y) for x, y in line[1:])
        if blocked:
            sx, sy = path[i - 1]
            smoothed.append((sx, sy))

    smoothed.append(tuple(path[-1]))
    return smoothed


def _heading(dx: int, dy: int) -> Coord:
    g = math.gcd(dx, dy)
    if g == 0:
        return (0, 0)
    return (dx // g, dy // g)


def compress_path(path: Sequence[Coord]) -> Path:
    """Remove collinear intermediate points, keeping only direction changes."""
    if len(path) < 3:
        return [tuple(p) for p in path]

    result: Path = [tuple(path[0])]
    for i in range(1, len(path) - 1):
        prev = path[i - 1]
        curr = path[i]
        nxt = path[i + 1]
        incoming = _heading(curr[0] - prev[0], curr[1] - prev[1])
        outgoing = _heading(nxt[0] - curr[0], nxt[1] - curr[1])
        if incoming != outgoing:
            result.append(tuple(curr))
    result.append(tuple(path[-1]))
    return result


def best_path(candidates: Sequence[PathCandidate]) -> PathCandidate | None:
    """Candidate with the lowest f; the earliest wins an equal f."""
    best: PathCandidate | None = None
    for candidate in candidates:
        if best is None or candidate.f < best.f:
            best = candidate
    return best
