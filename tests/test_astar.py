"""Tests for gridpath.search.astar: optimality, shaping, tie refinement and deadlines."""

from __future__ import annotations

import copy
import itertools
import logging
import math
import random
from types import SimpleNamespace

import networkx as nx
import pytest

from gridpath import AStarFinder, DiagonalMovement, Grid, SearchConfig, compress_path, find_path, path_length
from gridpath.search import astar
from gridpath.types import Direction, TieCase

# ─── Helpers ──────────────────────────────────────────────────────────────────


def assert_valid_path(grid: Grid, path: list[tuple[int, int]], diagonal: bool) -> None:
    """Every cell walkable, every step a single move of the allowed kind."""
    for x, y in path:
        assert grid.is_walkable_at(x, y), f"({x}, {y}) is blocked"
    for (ax, ay), (bx, by) in zip(path, path[1:]):
        dx, dy = abs(ax - bx), abs(ay - by)
        assert max(dx, dy) == 1
        if not diagonal:
            assert dx + dy == 1


def random_grid(seed: int, size: int = 8, density: float = 0.25) -> Grid:
    rng = random.Random(seed)
    matrix = [[rng.random() < density for _ in range(size)] for _ in range(size)]
    matrix[0][0] = False
    matrix[size - 1][size - 1] = False
    return Grid.from_matrix(matrix)


def tie_config(winner: Direction, **overrides: object) -> SearchConfig:
    return SearchConfig(break_ties=True, preferences={TieCase.UP_RIGHT: winner}, **overrides)


# ─── Scenarios ────────────────────────────────────────────────────────────────


class TestScenarios:
    def test_open_grid_diagonal(self):
        """5x5 open grid with diagonals: straight down the diagonal."""
        grid = Grid.create(5, 5)
        path = find_path(0, 0, 4, 4, grid, SearchConfig(diagonal_movement=DiagonalMovement.ALWAYS))
        assert path == [(0, 0), (1, 1), (2, 2), (3, 3), (4, 4)]
        assert path_length(path) == pytest.approx(4 * math.sqrt(2))

    def test_blocked_center_orthogonal(self):
        """3x3 grid with the center blocked: around the edge, length 4."""
        grid = Grid.from_matrix([[0, 0, 0], [0, 1, 0], [0, 0, 0]])
        path = find_path(0, 0, 2, 2, grid)
        assert len(path) == 5
        assert path[0] == (0, 0)
        assert path[-1] == (2, 2)
        assert (1, 1) not in path
        assert path_length(path) == pytest.approx(4.0)
        assert_valid_path(grid, path, diagonal=False)

    def test_straight_corridor(self):
        grid = Grid.create(1, 6)
        assert find_path(0, 0, 0, 5, grid) == [(0, y) for y in range(6)]

    def test_adjacent_goal(self):
        grid = Grid.create(3, 3)
        assert find_path(1, 1, 2, 1, grid) == [(1, 1), (2, 1)]


class TestDegenerate:
    def test_unreachable_goal(self):
        grid = Grid.from_matrix([[0, 1, 0], [0, 1, 0], [0, 1, 0]])
        assert find_path(0, 0, 2, 2, grid) == []

    def test_blocked_goal(self):
        grid = Grid.from_matrix([[0, 0], [0, 1]])
        assert find_path(0, 0, 1, 1, grid) == []

    def test_start_equals_end(self):
        assert find_path(2, 2, 2, 2, Grid.create(4, 4)) == []

    def test_out_of_bounds_fails_fast(self):
        with pytest.raises(ValueError, match="outside"):
            find_path(0, 0, 9, 9, Grid.create(3, 3))


# ─── Optimality ───────────────────────────────────────────────────────────────


class TestOptimality:
    @pytest.mark.parametrize("seed", range(12))
    @pytest.mark.parametrize(
        "diagonal",
        [
            DiagonalMovement.NEVER,
            DiagonalMovement.ALWAYS,
            DiagonalMovement.IF_AT_MOST_ONE_OBSTACLE,
            DiagonalMovement.ONLY_WHEN_NO_OBSTACLES,
        ],
    )
    def test_matches_networkx_shortest_path(self, seed, diagonal):
        grid = random_grid(seed)
        graph = grid.to_graph(diagonal)
        path = find_path(0, 0, 7, 7, grid, SearchConfig(diagonal_movement=diagonal))

        if not nx.has_path(graph, (0, 0), (7, 7)):
            assert path == []
            return

        expected = nx.shortest_path_length(graph, (0, 0), (7, 7), weight="weight")
        assert path[0] == (0, 0)
        assert path[-1] == (7, 7)
        assert path_length(path) == pytest.approx(expected)
        assert_valid_path(grid, path, diagonal=diagonal != DiagonalMovement.NEVER)
        for a, b in zip(path, path[1:]):
            assert graph.has_edge(a, b)

    def test_weighted_search_still_reaches_goal(self):
        grid = random_grid(3)
        path = find_path(0, 0, 7, 7, grid, SearchConfig(weight=3.0))
        graph = grid.to_graph()
        if nx.has_path(graph, (0, 0), (7, 7)):
            assert path[-1] == (7, 7)
            assert_valid_path(grid, path, diagonal=False)


# ─── Grid state ───────────────────────────────────────────────────────────────


class TestGridState:
    def test_walkability_restored_after_refinement(self):
        grid = Grid.from_matrix([[0, 0, 0, 0], [0, 1, 1, 0], [0, 0, 0, 0]])
        before = copy.deepcopy(grid.blocked)
        find_path(0, 0, 3, 2, grid, tie_config(Direction.UP))
        assert grid.blocked == before

    def test_nodes_clean_after_search(self):
        grid = Grid.create(4, 4)
        find_path(0, 0, 3, 3, grid)
        assert not any(grid.get_node_at(x, y).opened for x in range(4) for y in range(4))

    def test_repeated_searches_agree(self):
        grid = random_grid(7)
        first = find_path(0, 0, 7, 7, grid)
        assert all(find_path(0, 0, 7, 7, grid) == first for _ in range(3))


# ─── Shaping ──────────────────────────────────────────────────────────────────


class TestStaircase:
    def test_avoid_staircase_takes_one_turn(self):
        grid = Grid.create(5, 5)
        path = find_path(0, 0, 4, 4, grid, SearchConfig(avoid_staircase=True))
        assert path_length(path) == pytest.approx(8.0)
        assert len(compress_path(path)) == 3

    def test_fewer_turns_than_plain_search(self):
        grid = Grid.create(6, 6)
        plain = find_path(0, 0, 5, 5, grid)
        shaped = find_path(0, 0, 5, 5, grid, SearchConfig(avoid_staircase=True))
        assert path_length(shaped) == pytest.approx(path_length(plain))
        assert len(compress_path(shaped)) <= len(compress_path(plain))

    def test_turn_penalty_never_lengthens_path(self):
        grid = random_grid(5)
        graph = grid.to_graph()
        if not nx.has_path(graph, (0, 0), (7, 7)):
            pytest.skip("seed produced a disconnected grid")
        path = find_path(0, 0, 7, 7, grid, SearchConfig(avoid_staircase=True, turn_penalty=0.001))
        expected = nx.shortest_path_length(graph, (0, 0), (7, 7), weight="weight")
        assert path_length(path) == pytest.approx(expected)

    def test_momentum_keeps_shortest_length(self):
        grid = Grid.create(5, 5)
        cfg = SearchConfig(avoid_staircase=True, use_momentum=True)
        path = find_path(0, 0, 4, 4, grid, cfg)
        assert path[0] == (0, 0)
        assert path[-1] == (4, 4)
        assert path_length(path) == pytest.approx(8.0)
        assert_valid_path(grid, path, diagonal=False)


class TestMomentumArithmetic:
    """Goal g along an L-shaped corridor: 4 steps right, then 2 down."""

    CORRIDOR = [
        [0, 0, 0, 0, 0],
        [1, 1, 1, 1, 0],
        [1, 1, 1, 1, 0],
    ]

    def _goal_g(self, cfg: SearchConfig) -> float:
        grid = Grid.from_matrix(self.CORRIDOR)
        finder = AStarFinder(cfg)
        start, end = grid.get_node_at(0, 0), grid.get_node_at(4, 2)
        assert finder._search(start, end, grid, [], None) is True
        return end.g

    def test_turn_penalty_only(self):
        cfg = SearchConfig(avoid_staircase=True, turn_penalty=0.01)
        assert self._goal_g(cfg) == pytest.approx(6.01)

    def test_turn_keeps_discount_earned_before_it(self):
        """Five straight steps are discounted; the turn adds the penalty and nothing else."""
        cfg = SearchConfig(avoid_staircase=True, turn_penalty=0.01, use_momentum=True, momentum=0.001)
        assert self._goal_g(cfg) == pytest.approx(6.005)

    def test_momentum_needs_avoid_staircase(self):
        cfg = SearchConfig(use_momentum=True, momentum=0.001)
        assert self._goal_g(cfg) == pytest.approx(6.0)

    def test_corridor_path(self):
        grid = Grid.from_matrix(self.CORRIDOR)
        cfg = SearchConfig(avoid_staircase=True, use_momentum=True)
        path = find_path(0, 0, 4, 2, grid, cfg)
        assert compress_path(path) == [(0, 0), (4, 0), (4, 2)]


# ─── Tie breaking ─────────────────────────────────────────────────────────────


class TestTieBreaking:
    """Start (0, 1) and goal (1, 0) on a 2x2 grid: up-then-right or right-then-up."""

    UP_ROUTE = [(0, 1), (0, 0), (1, 0)]
    RIGHT_ROUTE = [(0, 1), (1, 1), (1, 0)]

    def test_prefer_up(self):
        grid = Grid.create(2, 2)
        assert find_path(0, 1, 1, 0, grid, tie_config(Direction.UP)) == self.UP_ROUTE

    def test_prefer_right(self):
        grid = Grid.create(2, 2)
        assert find_path(0, 1, 1, 0, grid, tie_config(Direction.RIGHT)) == self.RIGHT_ROUTE

    def test_repeated_runs_are_consistent(self):
        grid = Grid.create(2, 2)
        finder = AStarFinder(tie_config(Direction.UP))
        results = {tuple(finder.find_path(0, 1, 1, 0, grid)) for _ in range(5)}
        assert results == {tuple(self.UP_ROUTE)}

    def test_ignored_start_tie_falls_back_to_insertion_order(self):
        """Up is enumerated before right, so it wins when the start tie is skipped."""
        grid = Grid.create(2, 2)
        cfg = tie_config(Direction.RIGHT, ignore_start_ties=True)
        assert find_path(0, 1, 1, 0, grid, cfg) == self.UP_ROUTE

    def test_larger_grid_prefers_up_first(self):
        """Preferring up over right pushes the turn towards the start."""
        grid = Grid.create(4, 4)
        cfg = tie_config(Direction.UP, avoid_staircase=True)
        path = find_path(0, 3, 3, 0, grid, cfg)
        assert path_length(path) == pytest.approx(6.0)
        assert path[1] == (0, 2)

    @pytest.mark.parametrize(
        "winner,expected",
        [
            (Direction.UP, [(0, 2), (0, 1), (1, 0), (2, 0)]),
            (Direction.RIGHT, [(0, 2), (1, 2), (2, 1), (2, 0)]),
        ],
    )
    def test_diagonal_movement_with_blocked_center(self, winner, expected):
        """3x3 grid, center blocked: up-then-diagonal and right-then-diagonal cost the same."""
        grid = Grid.from_matrix([[0, 0, 0], [0, 1, 0], [0, 0, 0]])
        cfg = tie_config(winner, diagonal_movement=DiagonalMovement.ALWAYS)
        path = find_path(0, 2, 2, 0, grid, cfg)
        assert path == expected
        assert path_length(path) == pytest.approx(2 + math.sqrt(2))
        assert grid.is_walkable_at(0, 1) and grid.is_walkable_at(1, 2)

    def test_overrides_on_finder(self):
        finder = AStarFinder(SearchConfig(), diagonal_movement=DiagonalMovement.ALWAYS, turn_penalty=7.0)
        assert finder.config.diagonal_movement is DiagonalMovement.ALWAYS
        assert finder.config.turn_penalty == 0.001


# ─── Deadline ─────────────────────────────────────────────────────────────────


class TestTimeLimit:
    def test_expired_deadline_returns_empty(self, monkeypatch, caplog):
        clock = itertools.count(0, 10)
        monkeypatch.setattr(astar, "time", SimpleNamespace(monotonic=lambda: next(clock)))
        grid = Grid.create(10, 10)
        with caplog.at_level(logging.WARNING, logger="gridpath.search.astar"):
            path = find_path(0, 0, 9, 9, grid, SearchConfig(time_limit=1.0))
        assert path == []
        assert "Time limit" in caplog.text

    def test_generous_deadline_finds_path(self):
        grid = Grid.create(10, 10)
        path = find_path(0, 0, 9, 9, grid, SearchConfig(time_limit=60.0))
        assert path[-1] == (9, 9)
        assert path_length(path) == pytest.approx(18.0)
