"""Board domain models and standard board templates."""

from .board import (
    BoardSpecError,
    BoardTemplate,
    CatanBoard,
    HexTemplate,
    build_board,
)
from .expansions import BASE_GAME, EXPANSIONS, EXTENSION_5_6, get_board
from .hexes import Hex, HexType, Orientation, Port, PortType
from .pips import hex_to_pip_count, intersection_pip_counts, number_to_pip_count, resource_probabilities

__all__ = [
    "BASE_GAME",
    "BoardSpecError",
    "BoardTemplate",
    "CatanBoard",
    "EXPANSIONS",
    "EXTENSION_5_6",
    "Hex",
    "HexTemplate",
    "HexType",
    "Orientation",
    "Port",
    "PortType",
    "build_board",
    "get_board",
    "hex_to_pip_count",
    "intersection_pip_counts",
    "number_to_pip_count",
    "resource_probabilities",
]
