"""Randomized, constraint-checked layouts for Catan-style hex boards."""

from .domain import BASE_GAME, EXTENSION_5_6, CatanBoard, Hex, build_board, get_board
from .shuffle import BinaryConstraints, ShuffleConfig, ShufflingError, generate, shuffle

__all__ = [
    "BASE_GAME",
    "EXTENSION_5_6",
    "BinaryConstraints",
    "CatanBoard",
    "Hex",
    "ShuffleConfig",
    "ShufflingError",
    "build_board",
    "generate",
    "get_board",
    "shuffle",
]
