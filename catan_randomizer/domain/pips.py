from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Sequence

from .hexes import RESOURCE_PRODUCING_TYPES, NUMBER_CHIT_VALUES, Hex, HexType

if TYPE_CHECKING:
    from .board import CatanBoard

DICE_COMBINATIONS = 36

# Corners of a hex named by the two neighbors sharing it.
_LOWER_CORNERS = (("sw", "se"), ("se", "e"))
_UPPER_CORNERS = (("e", "ne"), ("ne", "nw"), ("nw", "w"), ("w", "sw"))
# (neighbors to inspect, corner to add) for corners touching a fixed-number group.
_FIXED_GROUP_CORNERS = (
    (("ne",), ("e", "ne")),
    (("ne", "nw"), ("ne", "nw")),
    (("nw", "w"), ("nw", "w")),
    (("w",), ("w", "sw")),
)


def number_to_pip_count(number: int) -> int:
    if number not in NUMBER_CHIT_VALUES:
        raise ValueError(f"{number} is not a valid number chit.")
    return 6 - abs(7 - number)


def hex_to_pip_count(hex_: Hex) -> int:
    if hex_.number is None:
        return 0
    total = number_to_pip_count(hex_.number)
    if hex_.second_number is not None:
        total += number_to_pip_count(hex_.second_number)
    return total


def resource_probabilities(hexes: Iterable[Hex]) -> Dict[HexType, float]:
    """Chance per roll that each resource type produces, from the first chit only."""
    totals: Dict[HexType, float] = {hex_type: 0.0 for hex_type in HexType if hex_type in RESOURCE_PRODUCING_TYPES}
    for hex_ in hexes:
        if hex_.type not in totals or hex_.number is None:
            continue
        totals[hex_.type] += number_to_pip_count(hex_.number) / DICE_COMBINATIONS
    return totals


def intersection_pip_counts(
    board: "CatanBoard",
    hexes: Sequence[Hex],
    at_index: int,
    *,
    only_higher: bool = True,
) -> List[int]:
    """Pip totals of the intersections around ``at_index``.

    With ``only_higher`` each intersection is reported once across the board:
    only the two lower corners are listed, plus any upper corner next to a hex
    whose numbers are pinned by ``fix_numbers_in_groups``.
    """
    neighbors = board.neighbors[at_index]
    corners: list[tuple[str, ...]] = list(_LOWER_CORNERS)
    if not only_higher:
        corners.extend(_UPPER_CORNERS)
    elif board.fix_numbers_in_groups:
        for to_check, to_add in _FIXED_GROUP_CORNERS:
            if any(_in_fixed_group(board, neighbors.get(direction)) for direction in to_check):
                corners.append(to_add)

    counts: List[int] = []
    for corner in corners:
        members = [at_index] + [neighbors[direction] for direction in corner if direction in neighbors]
        if len(members) > 1:
            counts.append(sum(hex_to_pip_count(hexes[index]) for index in members))
    return counts


def _in_fixed_group(board: "CatanBoard", index: Optional[int]) -> bool:
    if index is None:
        return False
    return board.is_number_fixed_group(board.recommended_layout[index].group)
