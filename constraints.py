from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

Cell = Tuple[int, int]
Offset = Tuple[int, int]

SIZE = 9
BLOCK = 3


def offset(number: int, delta: int) -> Optional[int]:
    """Shift a coordinate or 0-based digit, or None if it leaves 0..8."""
    moved = number + delta
    if 0 <= moved < SIZE:
        return moved
    return None


def offset_pos(x: int, y: int, dx: int, dy: int) -> Optional[Cell]:
    nx = offset(x, dx)
    ny = offset(y, dy)
    if nx is None or ny is None:
        return None
    return nx, ny


def cell_name(x: int, y: int) -> str:
    """(0, 0) -> A1, (2, 4) -> C5"""
    return f"{chr(ord('A') + x)}{y + 1}"


ALL_CELLS: List[Cell] = [(x, y) for y in range(SIZE) for x in range(SIZE)]


@dataclass(frozen=True)
class UniqueRegion:
    name: str
    cells: Tuple[Cell, ...]


_BLOCK_NAMES = (
    "top left",
    "top",
    "top right",
    "left",
    "center",
    "right",
    "bottom left",
    "bottom",
    "bottom right",
)


def build_box_regions() -> List[UniqueRegion]:
    regions: List[UniqueRegion] = []
    for box_y in range(BLOCK):
        for box_x in range(BLOCK):
            cells = []
            for dy in range(BLOCK):
                for dx in range(BLOCK):
                    cells.append((box_x * BLOCK + dx, box_y * BLOCK + dy))
            name = _BLOCK_NAMES[box_y * BLOCK + box_x] + " block"
            regions.append(UniqueRegion(name, tuple(cells)))
    return regions


def build_row_regions() -> List[UniqueRegion]:
    return [
        UniqueRegion(f"row {y + 1}", tuple((x, y) for x in range(SIZE)))
        for y in range(SIZE)
    ]


def build_col_regions() -> List[UniqueRegion]:
    return [
        UniqueRegion(
            f"column {chr(ord('A') + x)}", tuple((x, y) for y in range(SIZE))
        )
        for x in range(SIZE)
    ]


# Enumeration order matters: the search breaks ties by this order.
UNIQUE_REGIONS: Tuple[UniqueRegion, ...] = tuple(
    build_box_regions() + build_row_regions() + build_col_regions()
)

KING_OFFSETS: Tuple[Offset, ...] = (
    (-1, 1),
    (0, 1),
    (1, 1),
    (1, 0),
    (1, -1),
    (0, -1),
    (-1, -1),
    (-1, 0),
)

KNIGHT_OFFSETS: Tuple[Offset, ...] = (
    (-1, 2),
    (1, 2),
    (2, 1),
    (2, -1),
    (1, -2),
    (-1, -2),
    (-2, -1),
    (-2, 1),
)

ORTHOGONAL_OFFSETS: Tuple[Offset, ...] = ((0, 1), (1, 0), (0, -1), (-1, 0))


@dataclass(frozen=True)
class PuzzleConfig:
    """Extra adjacency rules applied on top of rows, columns and blocks.

    ``anti_cells`` are offsets that may not repeat the committed digit.
    ``non_con_cells`` are offsets that may not hold the committed digit
    plus or minus one.
    """

    anti_cells: Tuple[Offset, ...] = ()
    non_con_cells: Tuple[Offset, ...] = ()

    @classmethod
    def from_rules(
        cls,
        anti_king: bool = False,
        anti_knight: bool = False,
        anti_consecutive: bool = False,
    ) -> "PuzzleConfig":
        anti_cells: List[Offset] = []
        non_con_cells: List[Offset] = []
        if anti_consecutive:
            non_con_cells.extend(ORTHOGONAL_OFFSETS)
        if anti_king:
            anti_cells.extend(KING_OFFSETS)
        if anti_knight:
            anti_cells.extend(KNIGHT_OFFSETS)
        return cls(tuple(anti_cells), tuple(non_con_cells))

    def anti_neighbors(self, cell: Cell) -> List[Cell]:
        return _neighbors(cell, self.anti_cells)

    def non_con_neighbors(self, cell: Cell) -> List[Cell]:
        return _neighbors(cell, self.non_con_cells)


def _neighbors(cell: Cell, offsets: Sequence[Offset]) -> List[Cell]:
    x, y = cell
    found = []
    for dx, dy in offsets:
        pos = offset_pos(x, y, dx, dy)
        if pos is not None:
            found.append(pos)
    return found

