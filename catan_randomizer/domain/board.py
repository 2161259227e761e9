from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .hexes import RESOURCE_PRODUCING_TYPES, Hex, HexType

Direction = str
Neighbors = Mapping[Direction, int]

DEFAULT_MIN_PIPS = 1
DEFAULT_MAX_PIPS = 5
ALL_GROUPS = "all"

# Row/column offsets on the template grid, where every hex spans two columns.
_NEIGHBOR_OFFSETS: Dict[Direction, Tuple[int, int]] = {
    "nw": (-1, -1),
    "ne": (-1, 1),
    "e": (0, 2),
    "se": (1, 1),
    "sw": (1, -1),
    "w": (0, -1),
}

FixNumbersInGroup = Union[Optional[int], str]


class BoardSpecError(ValueError):
    """Raised when a board template violates the layout rules."""


@dataclass
class HexTemplate(Hex):
    max_pips_on_chit: int = DEFAULT_MAX_PIPS

    def to_hex(self) -> Hex:
        values = {item.name: getattr(self, item.name) for item in fields(Hex)}
        return Hex(**values).clone()


# Placeholder for a single empty half-hex column in a template row.
EMPTY = None

TemplateCell = Optional[HexTemplate]


@dataclass(frozen=True)
class BoardTemplate:
    board: Sequence[Sequence[TemplateCell]]
    horizontal: bool = False
    min_pips_on_hex_types: Mapping[HexType, int] = field(default_factory=dict)
    max_pips_on_hex_types: Mapping[HexType, int] = field(default_factory=dict)
    fix_numbers_in_groups: Optional[Sequence[FixNumbersInGroup]] = None


@dataclass(frozen=True)
class CatanBoard:
    recommended_layout: Tuple[Hex, ...]
    neighbors: Tuple[Neighbors, ...]
    max_pips_on_chits: Tuple[int, ...]
    min_pips_on_hex_types: Mapping[HexType, int] = field(default_factory=dict)
    max_pips_on_hex_types: Mapping[HexType, int] = field(default_factory=dict)
    fix_numbers_in_groups: Optional[Tuple[Optional[int], ...]] = None
    horizontal: bool = False

    def __post_init__(self) -> None:
        size = len(self.recommended_layout)
        if len(self.neighbors) != size or len(self.max_pips_on_chits) != size:
            raise BoardSpecError(
                f"Board arrays disagree on size: {size} hexes, {len(self.neighbors)} neighbor maps, "
                f"{len(self.max_pips_on_chits)} chit limits."
            )

    def __len__(self) -> int:
        return len(self.recommended_layout)

    def is_number_fixed_group(self, group: Optional[int]) -> bool:
        return self.fix_numbers_in_groups is not None and group in self.fix_numbers_in_groups

    def min_pips(self, hex_type: HexType) -> int:
        return self.min_pips_on_hex_types.get(hex_type, DEFAULT_MIN_PIPS)

    def max_pips(self, hex_type: HexType) -> int:
        return self.max_pips_on_hex_types.get(hex_type, DEFAULT_MAX_PIPS)


def build_board(template: BoardTemplate) -> CatanBoard:
    cells = [cell for row in template.board for cell in row if cell is not EMPTY]
    _validate_cells(cells)
    _validate_pip_limits(template)
    fix_numbers_in_groups = _resolve_fixed_number_groups(template.fix_numbers_in_groups, cells)

    return CatanBoard(
        recommended_layout=tuple(cell.to_hex() for cell in cells),
        neighbors=tuple(_build_neighbors(template.board)),
        max_pips_on_chits=tuple(cell.max_pips_on_chit for cell in cells),
        min_pips_on_hex_types=dict(template.min_pips_on_hex_types),
        max_pips_on_hex_types=dict(template.max_pips_on_hex_types),
        fix_numbers_in_groups=fix_numbers_in_groups,
        horizontal=template.horizontal,
    )


def _validate_cells(cells: Sequence[HexTemplate]) -> None:
    for cell in cells:
        if cell.port is not None and not cell.fixed:
            if cell.port.fixed:
                raise BoardSpecError(f"Fixed ports can't appear on non-fixed hexes: {cell}")
            if not cell.port.moveable:
                raise BoardSpecError(f"Unmoveable ports can't appear on non-fixed hexes: {cell}")
        if not DEFAULT_MIN_PIPS <= cell.max_pips_on_chit <= DEFAULT_MAX_PIPS:
            raise BoardSpecError(f"max_pips_on_chit must be between 1 and 5: {cell}")

    uses_group = any(cell.group is not None for cell in cells)
    uses_number_group = any(cell.number_group is not None for cell in cells)
    if uses_group and uses_number_group:
        raise BoardSpecError("Using group and number_group on the same board is not supported.")
    if uses_number_group and any(cell.number is None and not cell.fixed for cell in cells):
        raise BoardSpecError("When using number_group, all hexes which don't include a number must be fixed.")


def _validate_pip_limits(template: BoardTemplate) -> None:
    for label, limits in (
        ("min_pips_on_hex_types", template.min_pips_on_hex_types),
        ("max_pips_on_hex_types", template.max_pips_on_hex_types),
    ):
        for hex_type in limits:
            if HexType(hex_type) not in RESOURCE_PRODUCING_TYPES:
                raise BoardSpecError(f"{label} only applies to resource producing hexes, got {hex_type}.")


def _resolve_fixed_number_groups(
    requested: Optional[Sequence[FixNumbersInGroup]],
    cells: Sequence[HexTemplate],
) -> Optional[Tuple[Optional[int], ...]]:
    if requested is None:
        return None

    present = []
    for cell in cells:
        if cell.group not in present:
            present.append(cell.group)

    if ALL_GROUPS in requested:
        return tuple(present)

    missing = [group for group in requested if group not in present]
    if missing:
        raise BoardSpecError(
            f"The specified fix_numbers_in_groups contains groups to which no hex belongs: {missing}"
        )
    return tuple(requested)  # type: ignore[arg-type]


def _build_neighbors(rows: Sequence[Sequence[TemplateCell]]) -> List[Dict[Direction, int]]:
    # Expand every hex to two columns so diagonal neighbors sit at +/-1 column.
    grid: List[List[Optional[int]]] = []
    next_index = 0
    for row in rows:
        grid_row: List[Optional[int]] = []
        for cell in row:
            if cell is EMPTY:
                grid_row.append(None)
                continue
            grid_row.extend((next_index, next_index))
            next_index += 1
        grid.append(grid_row)

    neighbors: List[Dict[Direction, int]] = []
    for row_index, grid_row in enumerate(grid):
        col = 0
        while col < len(grid_row):
            if grid_row[col] is None:
                col += 1
                continue
            found: Dict[Direction, int] = {}
            for direction, (row_offset, col_offset) in _NEIGHBOR_OFFSETS.items():
                neighbor = _grid_lookup(grid, row_index + row_offset, col + col_offset)
                if neighbor is not None:
                    found[direction] = neighbor
            neighbors.append(found)
            col += 2
    return neighbors


def _grid_lookup(grid: Sequence[Sequence[Optional[int]]], row: int, col: int) -> Optional[int]:
    if row < 0 or row >= len(grid):
        return None
    if col < 0 or col >= len(grid[row]):
        return None
    return grid[row][col]
