"""gridpath: reproducible, shape-controllable A* paths on 2D grids."""

from gridpath.config import SearchConfig
from gridpath.grid import Grid, Node
from gridpath.paths import (
    PathCandidate,
    backtrace,
    best_path,
    bi_backtrace,
    compress_path,
    expand_path,
    interpolate,
    path_length,
    smoothen_path,
)
from gridpath.search.astar import AStarFinder, find_path
from gridpath.search.heuristic import chebyshev, euclidean, manhattan, octile
from gridpath.types import DiagonalMovement, Direction, TieCase

__all__ = [
    "AStarFinder",
    "DiagonalMovement",
    "Direction",
    "Grid",
    "Node",
    "PathCandidate",
    "SearchConfig",
    "TieCase",
    "backtrace",
    "best_path",
    "bi_backtrace",
    "chebyshev",
    "compress_path",
    "euclidean",
    "expand_path",
    "find_path",
    "interpolate",
    "manhattan",
    "octile",
    "path_length",
    "smoothen_path",
]
