"""CLI entry point for gridpath."""

import logging
import sys

import click

from gridpath.config import DEFAULT_MOMENTUM, SearchConfig
from gridpath.maps import parse_map
from gridpath.paths import compress_path, expand_path, path_length, smoothen_path
from gridpath.search.astar import AStarFinder
from gridpath.search.heuristic import HEURISTICS
from gridpath.types import DiagonalMovement, TieCase

logger = logging.getLogger(__name__)

_DIAGONAL_CHOICES = [d.value for d in DiagonalMovement]
_CASE_NAMES = ", ".join(c.name.lower().replace("_", "-") for c in TieCase)


def _parse_preferences(items: tuple[str, ...]) -> dict[str, str]:
    prefs: dict[str, str] = {}
    for item in items:
        case, sep, direction = item.partition("=")
        if not sep or not case or not direction:
            raise ValueError(f"Bad --prefer value '{item}'; expected CASE=DIRECTION, e.g. up-right=up")
        prefs[case] = direction
    return prefs


@click.command()
@click.argument("input", required=False, type=click.Path(exists=True))
@click.option("--diagonal", "-d", "diagonal", type=click.Choice(_DIAGONAL_CHOICES), default="never", help="Diagonal movement policy")
@click.option("--heuristic", "heuristic", type=click.Choice(sorted(HEURISTICS)), default=None, help="Heuristic (default depends on --diagonal)")
@click.option("--weight", "-w", "weight", type=float, default=1.0, help="Heuristic weight (>= 1)")
@click.option("--avoid-staircase", is_flag=True, help="Penalise direction changes")
@click.option("--turn-penalty", type=float, default=0.001, help="Cost added per turn, in (0, 1)")
@click.option("--momentum", type=float, default=None, help="Reward per straight step; enables momentum")
@click.option("--break-ties", is_flag=True, help="Resolve equal-f ties with the preference table")
@click.option("--ignore-start-ties", is_flag=True, help="Skip tie resolution at the start cell")
@click.option("--prefer", "prefer", multiple=True, metavar="CASE=DIR", help=f"Tie preference; CASE is one of {_CASE_NAMES}")
@click.option(
    "--post",
    "post",
    type=click.Choice(["compress", "expand", "smoothen"]),
    default=None,
    help="Post-process the path: keep turn points, rasterise segments, or string-pull",
)
@click.option("--time-limit", type=float, default=None, help="Give up after this many seconds")
@click.option("--verbose", "-v", is_flag=True, help="Log search progress to stderr")
@click.option("--output", "-o", "output", type=str, default=None, help="Write output to this file instead of stdout")
def main(
    input: str | None,
    diagonal: str,
    heuristic: str | None,
    weight: float,
    avoid_staircase: bool,
    turn_penalty: float,
    momentum: float | None,
    break_ties: bool,
    ignore_start_ties: bool,
    prefer: tuple[str, ...],
    post: str | None,
    time_limit: float | None,
    verbose: bool,
    output: str | None,
) -> None:
    """Find a grid path through a text map ('#' blocked, 'S' start, 'E' end)."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if input:
        try:
            with open(input) as f:
                text = f.read()
        except OSError as e:
            click.echo(f"error: cannot read '{input}': {e}", err=True)
            sys.exit(1)
    else:
        text = sys.stdin.read()

    try:
        text_map = parse_map(text)
        config = SearchConfig(
            diagonal_movement=DiagonalMovement(diagonal),
            heuristic=heuristic,
            weight=weight,
            avoid_staircase=avoid_staircase,
            turn_penalty=turn_penalty,
            use_momentum=momentum is not None,
            momentum=momentum if momentum is not None else DEFAULT_MOMENTUM,
            break_ties=break_ties,
            preferences=_parse_preferences(prefer),
            ignore_start_ties=ignore_start_ties,
            time_limit=time_limit,
        )
    except ValueError as e:
        click.echo(f"error: {e}", err=True)
        sys.exit(1)

    grid = text_map.grid
    (sx, sy), (ex, ey) = text_map.start, text_map.end
    path = AStarFinder(config).find_path(sx, sy, ex, ey, grid)

    if not path:
        click.echo("error: no path found", err=True)
        sys.exit(2)

    if post == "compress":
        path = compress_path(path)
    elif post == "expand":
        path = expand_path(path)
    elif post == "smoothen":
        path = smoothen_path(grid, path)

    logger.info("%d points, length %.4f", len(path), path_length(path))
    rendered = "".join(f"{x},{y}\n" for x, y in path)

    if output:
        try:
            with open(output, "w") as f:
                f.write(rendered)
        except OSError as e:
            click.echo(f"error: cannot write '{output}': {e}", err=True)
            sys.exit(1)
    else:
        click.echo(rendered, nl=False)


if __name__ == "__main__":
    main()
