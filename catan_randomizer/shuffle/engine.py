from __future__ import annotations

import logging
import random
from typing import Callable, List, Optional, Sequence

from catan_randomizer.domain.board import CatanBoard
from catan_randomizer.domain.hexes import Hex, HexType, Port, clone_layout
from catan_randomizer.domain.pips import hex_to_pip_count

from .groups import HexGroups, ShuffleType, shuffles_number
from .ports import valid_port_orientations
from .types import BinaryConstraints, ShuffleConfig

logger = logging.getLogger(__name__)

SIX_EIGHT = frozenset({6, 8})
TWO_TWELVE = frozenset({2, 12})


class ShufflingError(RuntimeError):
    """Raised when a phase cannot satisfy its constraints within its retry budget."""


class TerrainShufflingError(ShufflingError):
    pass


class NumberShufflingError(ShufflingError):
    pass


class PortShufflingError(ShufflingError):
    pass


Attempt = Callable[[], bool]


class _ShuffleRun:
    """State of a single shuffle call: random source, limits and retry count."""

    def __init__(
        self,
        board: CatanBoard,
        constraints: BinaryConstraints,
        rng: random.Random,
        config: ShuffleConfig,
    ) -> None:
        self.board = board
        self.constraints = constraints
        self.rng = rng
        self.config = config
        self.retries = 0

    def _place(self, attempt: Attempt) -> bool:
        for _ in range(self.config.tries_per_hex):
            if attempt():
                return True
        return False

    def _count_retry(self) -> bool:
        """Record a failed pass; False once the retry budget is spent."""
        self.retries += 1
        return self.retries <= self.config.max_retries

    def shuffle_terrain(self) -> List[Hex]:
        hexes = clone_layout(list(self.board.recommended_layout))
        groups = HexGroups(hexes, ShuffleType.TERRAIN, rng=self.rng)
        logger.debug("Shuffling terrain on %d hexes.", len(hexes))
        self.retries = 0

        while True:
            groups.reset()
            if self._terrain_pass(hexes, groups):
                logger.debug("Terrain shuffled after %d restarts.", self.retries)
                return hexes
            if not self._count_retry():
                logger.warning("Terrain shuffling gave up after %d restarts.", self.retries)
                raise TerrainShufflingError(
                    "Failed to find a terrain layout that falls within the specified constraints "
                    f"after {self.config.max_retries} attempts. This board may be over-constrained."
                )
            logger.debug("Restarting terrain shuffle (%d).", self.retries)

    def _terrain_pass(self, hexes: List[Hex], groups: HexGroups) -> bool:
        for position in range(len(hexes) - 1, -1, -1):
            if hexes[position].fixed:
                continue
            if not self._place(lambda: self._try_terrain_swap(hexes, groups, position)):
                return False
            groups.advance()
        return True

    def _try_terrain_swap(self, hexes: List[Hex], groups: HexGroups, position: int) -> bool:
        other = groups.draw()
        hexes[position], hexes[other] = hexes[other], hexes[position]
        # Terrain has no adjacency rules yet, so every swap is accepted.
        return True

    def shuffle_numbers(self, hexes: List[Hex]) -> List[Hex]:
        board = self.board
        if any(hex_.number_group is not None for hex_ in hexes):
            for hex_, recommended in zip(hexes, board.recommended_layout):
                hex_.number = recommended.number
                hex_.second_number = recommended.second_number
                hex_.number_group = recommended.number_group

        groups = HexGroups(hexes, ShuffleType.NUMBERS, board.fix_numbers_in_groups, rng=self.rng)
        logger.debug("Shuffling numbers.")
        self.retries = 0

        while True:
            groups.reset()
            if self._numbers_pass(hexes, groups):
                logger.debug("Numbers shuffled after %d restarts.", self.retries)
                return hexes
            if not self._count_retry():
                logger.warning("Number shuffling gave up after %d restarts.", self.retries)
                raise NumberShufflingError(
                    "Failed to place number chits within the specified constraints after "
                    f"{self.config.max_retries} attempts. Try allowing adjacent 6 & 8, 2 & 12 "
                    "or number pairs, or loosening the pip limits for this board."
                )
            logger.debug("Restarting number shuffle (%d).", self.retries)

    def _numbers_pass(self, hexes: List[Hex], groups: HexGroups) -> bool:
        board = self.board
        for position in range(len(hexes) - 1, -1, -1):
            hex_ = hexes[position]
            if board.is_number_fixed_group(hex_.group):
                recommended = board.recommended_layout[position]
                hex_.number = recommended.number
                hex_.second_number = recommended.second_number
                continue
            if not shuffles_number(hex_):
                continue
            if not self._place(lambda: self._try_number_swap(hexes, groups, position)):
                return False
            groups.advance()
        return True

    def _try_number_swap(self, hexes: List[Hex], groups: HexGroups, position: int) -> bool:
        other = groups.draw()
        current, drawn = hexes[position], hexes[other]
        current.number, drawn.number = drawn.number, current.number
        current.second_number, drawn.second_number = drawn.second_number, current.second_number
        return self._numbers_valid_at(hexes, position)

    def _numbers_valid_at(self, hexes: Sequence[Hex], position: int) -> bool:
        board = self.board
        hex_ = hexes[position]
        pips = hex_to_pip_count(hex_)
        if pips < board.min_pips(hex_.type) or pips > board.max_pips(hex_.type):
            return False
        if pips > board.max_pips_on_chits[position]:
            return False

        # Only neighbors whose numbers are already final are checked.
        settled = [
            hexes[neighbor]
            for neighbor in board.neighbors[position].values()
            if neighbor > position or self._number_is_pinned(hexes[neighbor])
        ]
        constraints = self.constraints
        if constraints.no_adjacent_six_eight and hex_.number in SIX_EIGHT:
            if any(neighbor.number in SIX_EIGHT for neighbor in settled):
                return False
        if constraints.no_adjacent_two_twelve and hex_.number in TWO_TWELVE:
            if any(neighbor.number in TWO_TWELVE for neighbor in settled):
                return False
        if constraints.no_adjacent_pairs:
            if any(neighbor.number == hex_.number for neighbor in settled):
                return False
        return True

    def _number_is_pinned(self, hex_: Hex) -> bool:
        if self.board.is_number_fixed_group(hex_.group):
            return True
        return hex_.number is not None and not shuffles_number(hex_)

    def shuffle_ports(self, hexes: List[Hex]) -> List[Hex]:
        board = self.board
        logger.debug("Shuffling ports.")
        for hex_, recommended in zip(hexes, board.recommended_layout):
            if recommended.port is not None and recommended.port.fixed:
                hex_.port = recommended.port.clone()

        pool = [
            hex_.port.clone()
            for hex_ in board.recommended_layout
            if hex_.port is not None and not hex_.port.fixed
        ]
        if not pool:
            return hexes

        self.rng.shuffle(pool)
        for hex_ in hexes:
            if hex_.port is not None and not hex_.port.fixed and not hex_.port.moveable:
                hex_.port.type = pool.pop().type
        if not pool:
            return hexes

        for hex_ in hexes:
            if hex_.port is not None and hex_.port.moveable:
                hex_.port = None
        candidates = [
            position
            for position, hex_ in enumerate(hexes)
            if hex_.type is HexType.SEA and hex_.port is None and hex_.ports_allowed is not False
        ]
        self.rng.shuffle(candidates)

        for position in candidates:
            orientations = valid_port_orientations(position, hexes, board)
            if not orientations:
                continue
            orientation = self.rng.choice(orientations)
            hexes[position].port = Port(type=pool.pop().type, orientation=orientation)
            if not pool:
                break

        if pool:
            logger.warning("%d ports could not be placed.", len(pool))
            raise PortShufflingError(
                f"Unable to assign all ports to sea hexes; {len(pool)} left over. This might happen "
                "if your board has too few sea hexes next to land, or too many of them forbid ports."
            )
        logger.debug("Ports shuffled.")
        return hexes


def shuffle(
    board: CatanBoard,
    constraints: Optional[BinaryConstraints] = None,
    *,
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
    config: Optional[ShuffleConfig] = None,
) -> List[Hex]:
    """Return a fresh randomized layout for ``board``.

    Terrain is shuffled first, then numbers (whose limits depend on terrain),
    then ports. ``board`` is never modified. Raises a ``ShufflingError``
    subclass naming the phase that could not be completed.
    """
    run = _ShuffleRun(
        board,
        constraints if constraints is not None else BinaryConstraints(),
        rng if rng is not None else random.Random(seed),
        config if config is not None else ShuffleConfig(),
    )
    hexes = run.shuffle_terrain()
    hexes = run.shuffle_numbers(hexes)
    return run.shuffle_ports(hexes)


generate = shuffle
