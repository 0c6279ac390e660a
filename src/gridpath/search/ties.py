"""Deterministic resolution of equal-f frontier ties.

When an expansion relaxes several neighbours to the same minimum f, the open
list alone cannot say which one the search should prefer. ``resolve_ties``
nudges one of them ahead by a tiny epsilon, according to a table that names
the winning direction for each of the six unordered direction pairs:

    UP_RIGHT    up    vs right
    UP_DOWN     up    vs down
    UP_LEFT     up    vs left
    RIGHT_DOWN  right vs down
    LEFT_RIGHT  left  vs right
    DOWN_LEFT   down  vs left

The epsilon must stay below the turn penalty so a nudge can never overturn
a difference introduced by turn or momentum shaping.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from itertools import combinations

from gridpath.grid.node import Node
from gridpath.types import Direction, TieCase

logger = logging.getLogger(__name__)

TiePreferences = tuple[Direction | None, ...]

NO_PREFERENCES: TiePreferences = (None,) * len(TieCase)

TIE_CASES: dict[frozenset[Direction], TieCase] = {
    frozenset((Direction.UP, Direction.RIGHT)): TieCase.UP_RIGHT,
    frozenset((Direction.UP, Direction.DOWN)): TieCase.UP_DOWN,
    frozenset((Direction.UP, Direction.LEFT)): TieCase.UP_LEFT,
    frozenset((Direction.RIGHT, Direction.DOWN)): TieCase.RIGHT_DOWN,
    frozenset((Direction.LEFT, Direction.RIGHT)): TieCase.LEFT_RIGHT,
    frozenset((Direction.DOWN, Direction.LEFT)): TieCase.DOWN_LEFT,
}

_IGNORE = {"", "ignore", "none"}


def tie_epsilon(turn_penalty: float) -> float:
    return turn_penalty / 100


def tie_case(a: Direction | None, b: Direction | None) -> TieCase | None:
    """Case for an unordered pair of directions; None for diagonals or equal directions."""
    if a is None or b is None:
        return None
    return TIE_CASES.get(frozenset((a, b)))


def _to_direction(value: object) -> Direction | None:
    if value is None or isinstance(value, Direction):
        return value
    if isinstance(value, str):
        if value.strip().lower() in _IGNORE:
            return None
        return Direction.parse(value)
    if isinstance(value, int) and not isinstance(value, bool):
        return Direction(value)
    raise ValueError(f"Cannot interpret {value!r} as a direction")


def _to_case(key: object) -> TieCase:
    if isinstance(key, TieCase):
        return key
    if isinstance(key, str):
        normalized = key.strip().upper().replace("-", "_").replace("/", "_")
        try:
            return TieCase[normalized]
        except KeyError:
            raise ValueError(f"Unknown tie case '{key}'; use one of: {', '.join(c.name for c in TieCase)}") from None
    if isinstance(key, int) and not isinstance(key, bool):
        return TieCase(key)
    raise ValueError(f"Cannot interpret {key!r} as a tie case")


def normalize_preferences(preferences: object) -> TiePreferences:
    """Turn any accepted preference spelling into a 6-tuple indexed by TieCase.

    Accepts None (no preferences), a 6-item sequence ordered like ``TieCase``,
    or a mapping from tie case to direction. Directions may be ``Direction``
    members, their 0-3 values, names such as ``"up"``, or ``"ignore"``/None.
    """
    if preferences is None:
        return NO_PREFERENCES
    if isinstance(preferences, Mapping):
        table: list[Direction | None] = list(NO_PREFERENCES)
        for key, value in preferences.items():
            table[_to_case(key)] = _to_direction(value)
        return tuple(table)
    if isinstance(preferences, Sequence) and not isinstance(preferences, str):
        if len(preferences) != len(TieCase):
            raise ValueError(f"Expected {len(TieCase)} tie preferences, got {len(preferences)}")
        return tuple(_to_direction(value) for value in preferences)
    raise ValueError(f"Cannot interpret {preferences!r} as tie preferences")


def _find_pair(candidates: Sequence[Node], min_f: float) -> tuple[Node, Node] | None:
    tied = [node for node in candidates if node.f == min_f]
    if len(tied) < 2:
        return None
    if len(tied) == 2:
        return tied[0], tied[1]
    # Three or more: pair up two that share a row or column, leaving the
    # diagonal outlier out.
    for a, b in combinations(tied, 2):
        if a.x == b.x or a.y == b.y:
            return a, b
    return None


def resolve_ties(
    candidates: Sequence[Node],
    min_f: float,
    preferences: TiePreferences,
    epsilon: float,
) -> None:
    """Nudge the preferred member of a tied pair ahead by ``epsilon``.

    Mutates the winner's ``g`` and ``f`` in place. Leaves everything alone
    when there is no tie, when the pair does not form one of the six cases,
    or when the table has no preference for that case or prefers a direction
    neither candidate moved in. Callers must reposition the winner in their
    open list.
    """
    pair = _find_pair(candidates, min_f)
    if pair is None:
        return
    a, b = pair
    case = tie_case(a.direction, b.direction)
    if case is None:
        return
    preferred = preferences[case]
    if preferred is None:
        return
    if a.direction == preferred:
        winner = a
    elif b.direction == preferred:
        winner = b
    else:
        return
    winner.g -= epsilon
    winner.f = winner.g + (winner.h or 0.0)
    logger.debug("Tie %s at f=%s broken towards %s (%d, %d)", case.name, min_f, preferred.name, winner.x, winner.y)
