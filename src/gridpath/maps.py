"""Text map reader for the command line.

A map is one row per line: ``.`` (or a space) is open, ``#`` is blocked,
``S`` and ``E`` mark the start and end cells. Blank lines at either end are
ignored; shorter rows are padded with open cells.
"""

from __future__ import annotations

from dataclasses import dataclass

from gridpath.grid.grid import Grid
from gridpath.types import Coord

OPEN_CHARS = {".", " "}
BLOCKED_CHARS = {"#"}
START_CHAR = "S"
END_CHAR = "E"


@dataclass
class TextMap:
    grid: Grid
    start: Coord
    end: Coord


def parse_map(text: str) -> TextMap:
    """Parse a text map into a grid plus its start and end cells.

    Raises:
        ValueError: If the map is empty, contains an unknown character, or
            does not have exactly one ``S`` and one ``E``.
    """
    lines = [line.rstrip("\r") for line in text.strip("\n").split("\n")]
    if not lines or not any(line.strip() for line in lines):
        raise ValueError("Map is empty")

    width = max(len(line) for line in lines)
    rows: list[list[bool]] = []
    starts: list[Coord] = []
    ends: list[Coord] = []

    for y, line in enumerate(lines):
        row: list[bool] = []
        for x, ch in enumerate(line.ljust(width, ".")):
            if ch in BLOCKED_CHARS:
                row.append(True)
                continue
            if ch == START_CHAR:
                starts.append((x, y))
            elif ch == END_CHAR:
                ends.append((x, y))
            elif ch not in OPEN_CHARS:
                raise ValueError(f"Unknown map character {ch!r} at line {y + 1}, column {x + 1}")
            row.append(False)
        rows.append(row)

    if len(starts) != 1:
        raise ValueError(f"Map must contain exactly one '{START_CHAR}', found {len(starts)}")
    if len(ends) != 1:
        raise ValueError(f"Map must contain exactly one '{END_CHAR}', found {len(ends)}")

    return TextMap(grid=Grid.from_matrix(rows), start=starts[0], end=ends[0])
