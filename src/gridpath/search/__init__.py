"""Search collaborators: open list, heuristics and tie resolution.

The finder itself lives in ``gridpath.search.astar``; it depends on
``gridpath.config``, which in turn needs the modules exported here.
"""

from gridpath.search.heuristic import HEURISTICS, chebyshev, euclidean, get_heuristic, manhattan, octile
from gridpath.search.open_list import OpenList
from gridpath.search.ties import TIE_CASES, TiePreferences, normalize_preferences, resolve_ties, tie_case, tie_epsilon

__all__ = [
    "HEURISTICS",
    "TIE_CASES",
    "OpenList",
    "TiePreferences",
    "chebyshev",
    "euclidean",
    "get_heuristic",
    "manhattan",
    "normalize_preferences",
    "octile",
    "resolve_ties",
    "tie_case",
    "tie_epsilon",
]
