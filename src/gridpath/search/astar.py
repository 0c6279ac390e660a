"""Iterative A* with turn/momentum cost shaping and tie refinement.

One call to ``AStarFinder.find_path`` runs up to ``max_iterations`` A*
passes over the same grid. Each pass that reaches the goal records a
candidate path; before the next pass the first step of that path is blocked
so the search has to commit to a different opening move. The candidate with
the lowest terminal f wins. This is what makes start-node ties decidable:
the outcome of breaking a tie there can only be judged by comparing the
full paths each choice leads to.
"""

from __future__ import annotations

import logging
import time
from dataclasses import replace

from gridpath.config import SearchConfig
from gridpath.grid.grid import SQRT2, Grid
from gridpath.grid.node import Node
from gridpath.paths import PathCandidate, backtrace, best_path
from gridpath.search.open_list import OpenList
from gridpath.search.ties import resolve_ties
from gridpath.types import Coord, Direction, Path

logger = logging.getLogger(__name__)


class AStarFinder:
    """A* path finder over a ``Grid``.

    Keyword overrides are applied on top of ``config`` and the result is
    validated, so out-of-range penalties are clamped rather than silently
    breaking the ordering between move cost, turn penalty, momentum and the
    tie epsilon.
    """

    def __init__(self, config: SearchConfig | None = None, **overrides: object) -> None:
        base = config if config is not None else SearchConfig()
        if overrides:
            base = replace(base, **overrides)
        self.config = base.validated()

    def find_path(self, start_x: int, start_y: int, end_x: int, end_y: int, grid: Grid) -> Path:
        """Shortest path from start to end, both included.

        Returns ``[]`` when the goal is unreachable, when start and end are
        the same cell, or when the time limit expires before any path was
        found. The grid's walkability is restored before returning.

        Raises:
            ValueError: If start or end lies outside the grid.
        """
        cfg = self.config
        start = grid.get_node_at(start_x, start_y)
        end = grid.get_node_at(end_x, end_y)
        if start is end:
            return []

        deadline = None if cfg.time_limit is None else time.monotonic() + cfg.time_limit
        candidates: list[PathCandidate] = []
        blocked: list[Coord] = []
        dirty: list[Coord] = []

        try:
            for iteration in range(1, cfg.max_iterations + 1):
                dirty = []
                logger.debug("A* iteration %d/%d from %s to %s", iteration, cfg.max_iterations, start.coord, end.coord)
                reached = self._search(start, end, grid, dirty, deadline)
                if reached is None:
                    logger.warning(
                        "Time limit of %ss reached on iteration %d; returning best of %d candidate(s)",
                        cfg.time_limit,
                        iteration,
                        len(candidates),
                    )
                    break
                if not reached:
                    logger.debug("Open list exhausted on iteration %d", iteration)
                    break

                path = backtrace(grid, end)
                candidates.append(PathCandidate(path=path, f=end.f, iteration=iteration))
                logger.debug("Candidate %d: %d points, f=%s", iteration, len(path), end.f)

                if iteration == cfg.max_iterations:
                    break
                # Start and goal are adjacent: nothing to refine.
                if len(path) == 2:
                    break

                first_step = path[1]
                grid.set_walkable_at(*first_step, False)
                blocked.append(first_step)
                logger.debug("Blocking first step %s for the next iteration", first_step)
                grid.clean_up(dirty, except_coord=first_step)
                dirty = []
        finally:
            grid.clean_up(dirty)
            for x, y in blocked:
                grid.set_walkable_at(x, y, True)
                grid.nodes[y][x].reset()

        best = best_path(candidates)
        return best.path if best is not None else []

    def _search(self, start: Node, end: Node, grid: Grid, dirty: list[Coord], deadline: float | None) -> bool | None:
        """One A* pass. True when the goal was closed, False when the open
        list ran dry, None when the deadline passed. Every node touched is
        appended to ``dirty``."""
        cfg = self.config
        heuristic = cfg.resolved_heuristic
        open_list = OpenList()

        start.g = 0.0
        start.f = 0.0
        start.parent = None
        start.direction = None
        start.closed = False
        start.opened = True
        start.last_turn_x = start.x
        start.last_turn_y = start.y
        open_list.push(start)
        dirty.append(start.coord)

        at_start = True
        while not open_list.is_empty():
            if deadline is not None and time.monotonic() > deadline:
                return None

            node = open_list.pop_min()
            node.closed = True
            if node is end:
                return True

            added: list[Node] = []
            min_f: float | None = None

            for neighbor in grid.get_neighbors(node, cfg.diagonal_movement):
                if neighbor.closed:
                    continue

                dx = neighbor.x - node.x
                dy = neighbor.y - node.y
                ng = node.g + (1.0 if dx == 0 or dy == 0 else SQRT2)

                turned = False
                turn_x, turn_y = node.last_turn_x, node.last_turn_y
                if cfg.avoid_staircase:
                    if node.parent is not None:
                        px, py = node.parent
                        turned = (node.x - px, node.y - py) != (dx, dy)
                    if turned:
                        ng += cfg.turn_penalty
                        # The turn becomes the new momentum baseline; the
                        # discount already earned stays in g.
                        turn_x, turn_y = node.x, node.y
                    elif cfg.use_momentum:
                        ng -= cfg.momentum

                if neighbor.opened and ng >= neighbor.g:
                    continue

                neighbor.g = ng
                if neighbor.h is None:
                    neighbor.h = cfg.weight * heuristic(abs(neighbor.x - end.x), abs(neighbor.y - end.y))
                neighbor.f = neighbor.g + neighbor.h
                neighbor.parent = node.coord
                neighbor.direction = Direction.from_offset(dx, dy)
                neighbor.last_turn = turned
                neighbor.last_turn_x = turn_x
                neighbor.last_turn_y = turn_y

                if min_f is None or neighbor.f < min_f:
                    min_f = neighbor.f

                if not neighbor.opened:
                    neighbor.opened = True
                    open_list.push(neighbor)
                    added.append(neighbor)
                    dirty.append(neighbor.coord)
                else:
                    open_list.update_item(neighbor)

            if cfg.break_ties and min_f is not None and not (at_start and cfg.ignore_start_ties):
                keys = [n.f for n in added]
                resolve_ties(added, min_f, cfg.preferences, cfg.tie_epsilon)
                for n, key in zip(added, keys):
                    if n.f != key:
                        open_list.update_item(n)
            at_start = False

        return False


def find_path(
    start_x: int,
    start_y: int,
    end_x: int,
    end_y: int,
    grid: Grid,
    config: SearchConfig | None = None,
) -> Path:
    """Run ``AStarFinder(config).find_path`` in one call."""
    return AStarFinder(config).find_path(start_x, start_y, end_x, end_y, grid)
