from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from catan_randomizer.domain.board import CatanBoard
from catan_randomizer.domain.hexes import NON_LAND_TYPES, Hex, HexType, Orientation

# Clockwise order starting from west.
PORT_DIRECTIONS: Tuple[str, ...] = ("w", "nw", "ne", "e", "se", "sw")

DIRECTION_TO_ORIENTATION: Dict[str, Orientation] = {
    "w": Orientation.W,
    "nw": Orientation.NW,
    "ne": Orientation.NE,
    "e": Orientation.E,
    "se": Orientation.SE,
    "sw": Orientation.SW,
}


def valid_port_orientations(position: int, hexes: Sequence[Hex], board: CatanBoard) -> List[Orientation]:
    """Facings at which a port could dock on the sea hex at ``position``.

    A facing must point at land, and neither hex beside it may already have a
    port docked on the same shoreline corner.
    """
    hex_ = hexes[position]
    if hex_.type is not HexType.SEA or hex_.port is not None:
        return []

    neighbors = board.neighbors[position]
    count = len(PORT_DIRECTIONS)
    orientations: List[Orientation] = []
    for index, heading in enumerate(PORT_DIRECTIONS):
        counter_clockwise = PORT_DIRECTIONS[(index + count - 1) % count]
        clockwise = PORT_DIRECTIONS[(index + 1) % count]

        target = neighbors.get(heading)
        if target is None or hexes[target].type in NON_LAND_TYPES:
            continue
        if _has_port_facing(hexes, neighbors.get(counter_clockwise), DIRECTION_TO_ORIENTATION[clockwise]):
            continue
        if _has_port_facing(hexes, neighbors.get(clockwise), DIRECTION_TO_ORIENTATION[counter_clockwise]):
            continue
        orientations.append(DIRECTION_TO_ORIENTATION[heading])
    return orientations


def _has_port_facing(hexes: Sequence[Hex], position: int | None, orientation: Orientation) -> bool:
    if position is None:
        return False
    port = hexes[position].port
    return port is not None and port.orientation == orientation
