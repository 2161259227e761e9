from __future__ import annotations

import logging
from typing import List, Sequence

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from catan_randomizer.domain.board import CatanBoard
from catan_randomizer.domain.expansions import BASE_GAME, EXPANSIONS, get_board
from catan_randomizer.domain.hexes import Hex, HexType
from catan_randomizer.domain.pips import hex_to_pip_count, intersection_pip_counts, resource_probabilities
from catan_randomizer.shuffle.engine import ShufflingError, shuffle
from catan_randomizer.shuffle.types import MAX_RETRIES, BinaryConstraints, ShuffleConfig

HEX_COLORS = {
    HexType.MOUNTAIN: "grey62",
    HexType.SHEEP: "green_yellow",
    HexType.WOOD: "dark_green",
    HexType.HILLS: "dark_orange3",
    HexType.WHEAT: "gold1",
    HexType.DESERT: "khaki1",
}


def _number_label(hex_: Hex) -> str:
    if hex_.number is None:
        return "-"
    label = str(hex_.number)
    if hex_.second_number is not None:
        label += f" / {hex_.second_number}"
    if hex_.number in (6, 8):
        return f"[bold red]{label}[/bold red]"
    return label


def best_corner_pips(board: CatanBoard, hexes: Sequence[Hex], position: int) -> int:
    """Highest pip total among the intersections touching ``position``."""
    return max(intersection_pip_counts(board, hexes, position, only_higher=False), default=0)


def _layout_table(board: CatanBoard, hexes: Sequence[Hex]) -> Table:
    table = Table(title="Land hexes")
    table.add_column("Pos", justify="right")
    table.add_column("Terrain")
    table.add_column("Number", justify="right")
    table.add_column("Pips", justify="right")
    table.add_column("Corner", justify="right")
    table.add_column("Neighbors", style="dim")
    for position, hex_ in enumerate(hexes):
        if hex_.type in (HexType.SEA, HexType.FOG, HexType.LAKE):
            continue
        color = HEX_COLORS.get(hex_.type, "white")
        terrain = f"[{color}]{hex_.type.value}[/{color}]"
        if hex_.fixed:
            terrain += " (fixed)"
        neighbors = ", ".join(f"{direction}:{index}" for direction, index in board.neighbors[position].items())
        table.add_row(
            str(position),
            terrain,
            _number_label(hex_),
            str(hex_to_pip_count(hex_)),
            str(best_corner_pips(board, hexes, position)),
            neighbors,
        )
    return table


def _ports_table(hexes: Sequence[Hex]) -> Table:
    table = Table(title="Ports")
    table.add_column("Pos", justify="right")
    table.add_column("Type")
    table.add_column("Facing", justify="right")
    for position, hex_ in enumerate(hexes):
        if hex_.port is None:
            continue
        table.add_row(str(position), hex_.port.type.value, f"{int(hex_.port.orientation)}°")
    return table


def _probability_table(hexes: Sequence[Hex]) -> Table:
    table = Table(title="Production per roll")
    table.add_column("Resource")
    table.add_column("Chance", justify="right")
    for hex_type, chance in resource_probabilities(hexes).items():
        table.add_row(hex_type.value, f"{chance:.1%}")
    return table


def _expansion_names() -> List[str]:
    return list(EXPANSIONS.keys())


@click.command()
@click.option(
    "--board",
    "board_name",
    default=BASE_GAME,
    show_default=True,
    type=click.Choice(_expansion_names()),
    help="Board to randomize.",
)
@click.option(
    "--allow-adjacent-six-eight",
    is_flag=True,
    default=False,
    help="Allow 6 and 8 chits on neighboring hexes.",
)
@click.option(
    "--allow-adjacent-two-twelve",
    is_flag=True,
    default=False,
    help="Allow 2 and 12 chits on neighboring hexes.",
)
@click.option(
    "--allow-adjacent-pairs",
    is_flag=True,
    default=False,
    help="Allow the same number on neighboring hexes.",
)
@click.option("--seed", default=None, type=int, help="Seed for a reproducible layout.")
@click.option(
    "--max-retries",
    default=MAX_RETRIES,
    show_default=True,
    type=click.IntRange(0, None),
    help="Full restarts allowed per phase before giving up.",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log shuffle progress.")
def main(
    board_name: str,
    allow_adjacent_six_eight: bool,
    allow_adjacent_two_twelve: bool,
    allow_adjacent_pairs: bool,
    seed: int | None,
    max_retries: int,
    verbose: bool,
):
    """
    Shuffle a Catan board and print the resulting layout.

    Terrain, number chits and ports are randomized while keeping fixed hexes in
    place and respecting the adjacency rules that were not explicitly allowed.
    """
    console = Console()
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )

    board = get_board(board_name)
    constraints = BinaryConstraints(
        no_adjacent_six_eight=not allow_adjacent_six_eight,
        no_adjacent_two_twelve=not allow_adjacent_two_twelve,
        no_adjacent_pairs=not allow_adjacent_pairs,
    )
    try:
        hexes = shuffle(board, constraints, seed=seed, config=ShuffleConfig(max_retries=max_retries))
    except ShufflingError as exc:
        raise click.ClickException(str(exc)) from exc

    console.print(f"[green]Shuffled[/green] {board_name} (seed={seed if seed is not None else 'random'})")
    console.print(_layout_table(board, hexes))
    console.print(_ports_table(hexes))
    console.print(_probability_table(hexes))


if __name__ == "__main__":
    main()
