"""Centralized search configuration for gridpath."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace

from gridpath.search.heuristic import Heuristic, get_heuristic, manhattan, octile
from gridpath.search.ties import TiePreferences, normalize_preferences, tie_epsilon
from gridpath.types import DiagonalMovement

logger = logging.getLogger(__name__)

DEFAULT_TURN_PENALTY = 0.001
DEFAULT_MOMENTUM = 0.0001


@dataclass
class SearchConfig:
    """Options for one A* search.

    ``turn_penalty`` must stay below the unit move cost and ``momentum``
    below ``turn_penalty``; ``validated()`` enforces both by clamping.
    ``heuristic`` may be a callable or a registered name; None picks
    manhattan without diagonal movement and octile with it.
    """

    diagonal_movement: DiagonalMovement = DiagonalMovement.NEVER
    heuristic: Heuristic | str | None = None
    weight: float = 1.0
    avoid_staircase: bool = False
    turn_penalty: float = DEFAULT_TURN_PENALTY
    use_momentum: bool = False
    momentum: float = DEFAULT_MOMENTUM
    break_ties: bool = False
    preferences: TiePreferences | Mapping[object, object] | Sequence[object] | None = None
    ignore_start_ties: bool = False
    time_limit: float | None = None

    def __post_init__(self) -> None:
        if isinstance(self.diagonal_movement, str):
            self.diagonal_movement = DiagonalMovement(self.diagonal_movement)
        if isinstance(self.heuristic, str):
            self.heuristic = get_heuristic(self.heuristic)
        self.preferences = normalize_preferences(self.preferences)

    @property
    def resolved_heuristic(self) -> Heuristic:
        if self.heuristic is not None:
            return self.heuristic
        # Manhattan overestimates once diagonal steps exist.
        return manhattan if self.diagonal_movement == DiagonalMovement.NEVER else octile

    @property
    def max_iterations(self) -> int:
        return 3 if self.break_ties and not self.ignore_start_ties else 2

    @property
    def tie_epsilon(self) -> float:
        return tie_epsilon(self.turn_penalty)

    def validated(self) -> SearchConfig:
        """Copy with out-of-range numbers clamped; each clamp is logged."""
        turn_penalty = self.turn_penalty
        if not 0 < turn_penalty < 1:
            logger.warning("turn_penalty %s outside (0, 1); using %s", turn_penalty, DEFAULT_TURN_PENALTY)
            turn_penalty = DEFAULT_TURN_PENALTY

        momentum = self.momentum
        if not 0 < momentum < 1:
            logger.warning("momentum %s outside (0, 1); using %s", momentum, DEFAULT_MOMENTUM)
            momentum = DEFAULT_MOMENTUM
        if momentum >= turn_penalty:
            clamped = turn_penalty / 10
            logger.warning("momentum %s not below turn_penalty %s; using %s", momentum, turn_penalty, clamped)
            momentum = clamped

        weight = self.weight
        if weight < 1:
            logger.warning("weight %s below 1; using 1", weight)
            weight = 1.0

        time_limit = self.time_limit
        if time_limit is not None and time_limit <= 0:
            logger.warning("time_limit %s is not positive; searching without a deadline", time_limit)
            time_limit = None

        return replace(self, turn_penalty=turn_penalty, momentum=momentum, weight=weight, time_limit=time_limit)
