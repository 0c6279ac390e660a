"""Grid storage: walkability, node table and neighbour enumeration."""

from gridpath.grid.grid import SQRT2, Grid
from gridpath.grid.node import Node

__all__ = [
    "SQRT2",
    "Grid",
    "Node",
]
