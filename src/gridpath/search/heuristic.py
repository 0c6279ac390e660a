"""Distance estimates over grid offsets.

Every heuristic takes the absolute offsets ``(dx, dy)`` between two cells.
"""

from __future__ import annotations

import math
from collections.abc import Callable

Heuristic = Callable[[float, float], float]

_F = math.sqrt(2) - 1


def manhattan(dx: float, dy: float) -> float:
    return dx + dy


def euclidean(dx: float, dy: float) -> float:
    return math.sqrt(dx * dx + dy * dy)


def octile(dx: float, dy: float) -> float:
    """Exact cost of an unobstructed 8-connected path."""
    return _F * dx + dy if dx < dy else _F * dy + dx


def chebyshev(dx: float, dy: float) -> float:
    return max(dx, dy)


HEURISTICS: dict[str, Heuristic] = {
    "manhattan": manhattan,
    "euclidean": euclidean,
    "octile": octile,
    "chebyshev": chebyshev,
}


def get_heuristic(name: str) -> Heuristic:
    try:
        return HEURISTICS[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown heuristic '{name}'; use one of: {', '.join(HEURISTICS)}") from None
