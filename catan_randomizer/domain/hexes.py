from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional


class HexType(str, Enum):
    MOUNTAIN = "mountain"
    SHEEP = "sheep"
    WOOD = "wood"
    HILLS = "hills"
    WHEAT = "wheat"
    DESERT = "desert"
    SEA = "sea"
    FOG = "fog"
    LAKE = "lake"

    @property
    def produces_resource(self) -> bool:
        return self in RESOURCE_PRODUCING_TYPES


RESOURCE_PRODUCING_TYPES = frozenset(
    {
        HexType.MOUNTAIN,
        HexType.SHEEP,
        HexType.WOOD,
        HexType.HILLS,
        HexType.WHEAT,
    }
)

# Terrain a port dock can never attach to.
NON_LAND_TYPES = frozenset({HexType.SEA, HexType.FOG, HexType.LAKE})

NUMBER_CHIT_VALUES = (2, 3, 4, 5, 6, 8, 9, 10, 11, 12)


class PortType(str, Enum):
    ANY_3TO1 = "3:1"
    ORE = "ore"
    WOOL = "wool"
    TIMBER = "timber"
    BRICK = "brick"
    GRAIN = "grain"


class Orientation(IntEnum):
    """Port facing in degrees, measured from west-facing."""

    W = 0
    NW = 60
    NE = 120
    E = 180
    SE = 240
    SW = 300


@dataclass
class Port:
    type: PortType
    orientation: Orientation
    fixed: bool = False
    moveable: bool = False

    def __post_init__(self) -> None:
        self.type = PortType(self.type)
        self.orientation = Orientation(self.orientation)
        if self.fixed and self.moveable:
            raise ValueError("A port can be fixed or moveable, not both.")

    def clone(self) -> "Port":
        return Port(
            type=self.type,
            orientation=self.orientation,
            fixed=self.fixed,
            moveable=self.moveable,
        )


@dataclass
class Hex:
    type: HexType
    number: Optional[int] = None
    second_number: Optional[int] = None
    fixed: bool = False
    group: Optional[int] = None
    number_group: Optional[int] = None
    port: Optional[Port] = None
    ports_allowed: Optional[bool] = None

    def __post_init__(self) -> None:
        self.type = HexType(self.type)
        for value in (self.number, self.second_number):
            if value is not None and value not in NUMBER_CHIT_VALUES:
                raise ValueError(f"Invalid number chit value: {value}.")
        if self.second_number is not None and self.number is None:
            raise ValueError("A second number requires a first number.")
        if self.type is not HexType.SEA and (self.port is not None or self.ports_allowed is not None):
            raise ValueError(f"Only sea hexes can carry port settings, got {self.type.value}.")

    def clone(self) -> "Hex":
        return Hex(
            type=self.type,
            number=self.number,
            second_number=self.second_number,
            fixed=self.fixed,
            group=self.group,
            number_group=self.number_group,
            port=self.port.clone() if self.port is not None else None,
            ports_allowed=self.ports_allowed,
        )


def clone_layout(hexes: list[Hex]) -> list[Hex]:
    return [hex_.clone() for hex_ in hexes]
