"""Constraint-checked board shuffling."""

from .engine import (
    NumberShufflingError,
    PortShufflingError,
    ShufflingError,
    TerrainShufflingError,
    generate,
    shuffle,
)
from .groups import ExhaustedGroupError, HexGroups, ShuffleType
from .ports import valid_port_orientations
from .types import BinaryConstraints, ShuffleConfig

__all__ = [
    "BinaryConstraints",
    "ExhaustedGroupError",
    "HexGroups",
    "NumberShufflingError",
    "PortShufflingError",
    "ShuffleConfig",
    "ShuffleType",
    "ShufflingError",
    "TerrainShufflingError",
    "generate",
    "shuffle",
    "valid_port_orientations",
]
