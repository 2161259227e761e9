from __future__ import annotations

import random
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence

from catan_randomizer.domain.hexes import Hex

EXHAUSTED = -1


class ShuffleType(str, Enum):
    TERRAIN = "terrain"
    NUMBERS = "numbers"


class ExhaustedGroupError(RuntimeError):
    """Raised when drawing from a group with no unprocessed members."""


def shuffles_number(hex_: Hex) -> bool:
    """Whether the number phase may move this hex's chits.

    Fixed hexes keep their chits unless a number group lets them trade within it.
    """
    if hex_.number is None:
        return False
    return not hex_.fixed or hex_.number_group is not None


class HexGroup:
    """Positions sharing one group key, drained from the highest down."""

    def __init__(self, positions: Sequence[int]) -> None:
        self.positions: List[int] = list(positions)
        self._cursor = len(self.positions) - 1

    @property
    def head(self) -> int:
        """Next position to process, or -1 once exhausted."""
        if self._cursor < 0:
            return EXHAUSTED
        return self.positions[self._cursor]

    def draw(self, rng: random.Random) -> int:
        if self._cursor < 0:
            raise ExhaustedGroupError("Tried to draw a position from an exhausted hex group.")
        return self.positions[rng.randrange(self._cursor + 1)]

    def advance(self) -> int:
        self._cursor -= 1
        return self.head

    def reset(self) -> int:
        self._cursor = len(self.positions) - 1
        return self.head


class HexGroups:
    """Partition of shufflable positions into independently drawn groups.

    The active group is the one owning the highest unprocessed position, so
    draws always come from the group of the position being filled by a
    descending scan over the board.
    """

    def __init__(
        self,
        hexes: Sequence[Hex],
        shuffle_type: ShuffleType | str,
        skip_groups: Optional[Iterable[Optional[int]]] = None,
        *,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.shuffle_type = ShuffleType(shuffle_type)
        self._rng = rng if rng is not None else random.Random()
        skipped = set(skip_groups) if skip_groups is not None else set()

        members: Dict[Optional[int], List[int]] = {}
        for position, hex_ in enumerate(hexes):
            # Skipped ids name terrain groups, matching fix_numbers_in_groups.
            if hex_.group in skipped or not self._is_eligible(hex_):
                continue
            members.setdefault(self._group_key(hex_), []).append(position)

        self.groups: List[HexGroup] = [HexGroup(positions) for positions in members.values()]
        self._active = 0
        self._select_active()

    def _group_key(self, hex_: Hex) -> Optional[int]:
        if hex_.group is not None:
            return hex_.group
        if self.shuffle_type is ShuffleType.NUMBERS:
            return hex_.number_group
        return None

    def _is_eligible(self, hex_: Hex) -> bool:
        if self.shuffle_type is ShuffleType.TERRAIN:
            return not hex_.fixed
        return shuffles_number(hex_)

    @property
    def active_group(self) -> Optional[HexGroup]:
        if not self.groups:
            return None
        return self.groups[self._active]

    def draw(self) -> int:
        group = self.active_group
        if group is None:
            raise ExhaustedGroupError("There are no positions to shuffle.")
        return group.draw(self._rng)

    def advance(self) -> None:
        group = self.active_group
        if group is None:
            return
        group.advance()
        self._select_active()

    def reset(self) -> None:
        for group in self.groups:
            group.reset()
        self._select_active()

    def _select_active(self) -> None:
        if not self.groups:
            return
        # Highest head wins; max() keeps the first group on ties.
        self._active = max(range(len(self.groups)), key=lambda index: self.groups[index].head)
