from __future__ import annotations

from dataclasses import dataclass

TRIES_PER_HEX = 10
MAX_RETRIES = 10_000


@dataclass(frozen=True)
class BinaryConstraints:
    no_adjacent_six_eight: bool = True
    no_adjacent_two_twelve: bool = True
    no_adjacent_pairs: bool = True


@dataclass(frozen=True)
class ShuffleConfig:
    tries_per_hex: int = TRIES_PER_HEX
    max_retries: int = MAX_RETRIES

    def __post_init__(self) -> None:
        if self.tries_per_hex < 1:
            raise ValueError("tries_per_hex must be at least 1.")
        if self.max_retries < 0:
            raise ValueError("max_retries must not be negative.")
