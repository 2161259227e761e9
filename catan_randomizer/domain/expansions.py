from __future__ import annotations

from functools import lru_cache
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .board import EMPTY, BoardTemplate, CatanBoard, HexTemplate, TemplateCell, build_board
from .hexes import HexType, Orientation, Port, PortType

BASE_GAME = "Catan"
EXTENSION_5_6 = "Catan Extension 5-6 Player"

# Rows of a board shape: " " is an empty half column, "s" sea, "t" land.
_BASE_SHAPE = (
    "   ssss",
    "  sttts",
    " stttts",
    "sttttts",
    " stttts",
    "  sttts",
    "   ssss",
)

_EXTENSION_SHAPE = (
    "    ssss",
    "   sttts",
    "  stttts",
    " sttttts",
    "stttttts",
    " sttttts",
    "  stttts",
    "   sttts",
    "    ssss",
)

_BASE_TERRAIN = (
    HexType.WOOD,
    HexType.HILLS,
    HexType.SHEEP,
    HexType.WHEAT,
    HexType.MOUNTAIN,
    HexType.WOOD,
    HexType.SHEEP,
    HexType.WHEAT,
    HexType.HILLS,
    HexType.DESERT,
    HexType.MOUNTAIN,
    HexType.WOOD,
    HexType.SHEEP,
    HexType.WHEAT,
    HexType.HILLS,
    HexType.MOUNTAIN,
    HexType.WOOD,
    HexType.SHEEP,
    HexType.WHEAT,
)

_BASE_NUMBERS = (5, 2, 6, 3, 8, 10, 9, 12, 11, 4, 8, 10, 9, 4, 5, 6, 3, 11)

# Keyed by board position, value is the port type and the facing towards land.
_BASE_PORTS: Dict[int, Tuple[PortType, Orientation]] = {
    0: (PortType.ANY_3TO1, Orientation.SE),
    2: (PortType.GRAIN, Orientation.SW),
    8: (PortType.ORE, Orientation.SW),
    21: (PortType.ANY_3TO1, Orientation.W),
    32: (PortType.WOOL, Orientation.NW),
    35: (PortType.ANY_3TO1, Orientation.NW),
    33: (PortType.ANY_3TO1, Orientation.NE),
    22: (PortType.BRICK, Orientation.NE),
    9: (PortType.TIMBER, Orientation.SE),
}

_EXTENSION_TERRAIN = (
    HexType.WOOD,
    HexType.SHEEP,
    HexType.WHEAT,
    HexType.HILLS,
    HexType.MOUNTAIN,
    HexType.SHEEP,
    HexType.WOOD,
    HexType.WHEAT,
    HexType.DESERT,
    HexType.HILLS,
    HexType.MOUNTAIN,
    HexType.WOOD,
    HexType.SHEEP,
    HexType.WHEAT,
    HexType.WOOD,
    HexType.HILLS,
    HexType.MOUNTAIN,
    HexType.SHEEP,
    HexType.WHEAT,
    HexType.WOOD,
    HexType.DESERT,
    HexType.SHEEP,
    HexType.HILLS,
    HexType.WHEAT,
    HexType.MOUNTAIN,
    HexType.WOOD,
    HexType.SHEEP,
    HexType.WHEAT,
    HexType.HILLS,
    HexType.MOUNTAIN,
)

_EXTENSION_NUMBERS = (
    2, 5, 4, 6, 3, 9, 8, 11, 11, 10, 6, 3, 8, 4,
    8, 10, 11, 12, 10, 5, 4, 9, 5, 9, 12, 3, 2, 6,
)

_EXTENSION_PORTS: Dict[int, Tuple[PortType, Orientation]] = {
    0: (PortType.ANY_3TO1, Orientation.SE),
    2: (PortType.WOOL, Orientation.SW),
    8: (PortType.ANY_3TO1, Orientation.SW),
    21: (PortType.ORE, Orientation.W),
    36: (PortType.ANY_3TO1, Orientation.NW),
    47: (PortType.GRAIN, Orientation.W),
    49: (PortType.WOOL, Orientation.NE),
    43: (PortType.ANY_3TO1, Orientation.NE),
    30: (PortType.BRICK, Orientation.E),
    15: (PortType.ANY_3TO1, Orientation.E),
    4: (PortType.TIMBER, Orientation.SE),
}


def build_template(
    shape: Sequence[str],
    terrain: Sequence[HexType],
    numbers: Sequence[int],
    ports: Mapping[int, Tuple[PortType, Orientation]],
    *,
    fix_numbers_in_groups: Optional[Sequence[Optional[int]]] = None,
) -> BoardTemplate:
    """Lay terrain and numbers over a shape in reading order.

    Sea hexes are fixed and hold port slots whose position is locked and whose
    type is shuffled. Deserts take no number.
    """
    terrain_iter = iter(terrain)
    number_iter = iter(numbers)
    rows: List[List[TemplateCell]] = []
    position = 0
    for line in shape:
        row: List[TemplateCell] = []
        for symbol in line:
            if symbol == " ":
                row.append(EMPTY)
                continue
            if symbol == "s":
                port = None
                if position in ports:
                    port_type, orientation = ports[position]
                    port = Port(type=port_type, orientation=orientation)
                row.append(HexTemplate(type=HexType.SEA, fixed=True, port=port))
            elif symbol == "t":
                hex_type = next(terrain_iter, None)
                number = None if hex_type is HexType.DESERT else next(number_iter, None)
                if hex_type is None or (hex_type is not HexType.DESERT and number is None):
                    raise ValueError("Board shape has more land hexes than terrain or numbers supplied.")
                row.append(HexTemplate(type=hex_type, number=number))
            else:
                raise ValueError(f"Unknown board shape symbol {symbol!r}.")
            position += 1
        rows.append(row)

    if next(terrain_iter, None) is not None or next(number_iter, None) is not None:
        raise ValueError("Board shape has fewer land hexes than terrain or numbers supplied.")

    return BoardTemplate(board=rows, fix_numbers_in_groups=fix_numbers_in_groups)


EXPANSIONS: Dict[str, BoardTemplate] = {
    BASE_GAME: build_template(_BASE_SHAPE, _BASE_TERRAIN, _BASE_NUMBERS, _BASE_PORTS),
    EXTENSION_5_6: build_template(
        _EXTENSION_SHAPE,
        _EXTENSION_TERRAIN,
        _EXTENSION_NUMBERS,
        _EXTENSION_PORTS,
    ),
}


@lru_cache(maxsize=None)
def get_board(name: str = BASE_GAME) -> CatanBoard:
    if name not in EXPANSIONS:
        raise KeyError(f'Unrecognized expansion "{name}".')
    return build_board(EXPANSIONS[name])
