from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple

from constraints import (
    SIZE,
    UNIQUE_REGIONS,
    PuzzleConfig,
    cell_name,
    offset,
    offset_pos,
)

logger = logging.getLogger(__name__)

Grid = List[List[int]]
Clue = Tuple[int, int, int]
Trace = Callable[[str], None]

ALL_DIGITS = 0b111111111


class CellState:
    """Bitset of the digits (0-based) still possible for one cell."""

    __slots__ = ("possibilities",)

    def __init__(self, possibilities: int = ALL_DIGITS) -> None:
        self.possibilities = possibilities

    @classmethod
    def completely_uncertain(cls) -> "CellState":
        return cls(ALL_DIGITS)

    @classmethod
    def certain(cls, number: int) -> "CellState":
        return cls(1 << number)

    def eliminate(self, number: int) -> bool:
        """Returns False if the given number was already eliminated."""
        prev = self.possibilities
        self.possibilities &= ~(1 << number)
        return self.possibilities != prev

    def could_contain(self, number: int) -> bool:
        return self.possibilities & (1 << number) != 0

    def count(self) -> int:
        return bin(self.possibilities).count("1")

    def is_certain(self) -> bool:
        return self.count() == 1

    def is_impossible(self) -> bool:
        return self.possibilities == 0

    def get_certain(self) -> Optional[int]:
        if self.is_certain():
            return self.possibilities.bit_length() - 1
        return None

    def copy(self) -> "CellState":
        return CellState(self.possibilities)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CellState):
            return NotImplemented
        return self.possibilities == other.possibilities

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"CellState({self.possibilities:#011b})"


@dataclass(frozen=True)
class Solution:
    """A fully determined board; ``grid[row][col]`` holds digits 1-9."""

    grid: Tuple[Tuple[int, ...], ...]

    def value(self, x: int, y: int) -> int:
        return self.grid[y][x]

    def is_consistent(self, config: Optional[PuzzleConfig] = None) -> bool:
        for region in UNIQUE_REGIONS:
            if len({self.value(x, y) for x, y in region.cells}) != SIZE:
                return False
        if config is None:
            return True
        for y in range(SIZE):
            for x in range(SIZE):
                val = self.value(x, y)
                for nx, ny in config.anti_neighbors((x, y)):
                    if self.value(nx, ny) == val:
                        return False
                for nx, ny in config.non_con_neighbors((x, y)):
                    if abs(self.value(nx, ny) - val) == 1:
                        return False
        return True


class SudokuState:
    """9x9 board of CellState, indexed ``cells[x][y]`` (column, row)."""

    def __init__(self, cells: Optional[List[List[CellState]]] = None) -> None:
        if cells is None:
            cells = [
                [CellState.completely_uncertain() for _ in range(SIZE)]
                for _ in range(SIZE)
            ]
        self.cells = cells

    def get(self, x: int, y: int) -> CellState:
        return self.cells[x][y]

    def clone(self) -> "SudokuState":
        return SudokuState([[cell.copy() for cell in col] for col in self.cells])

    def set_certain(
        self,
        certain_x: int,
        certain_y: int,
        number: int,
        config: PuzzleConfig,
        trace: Optional[Trace] = None,
        indent: str = "",
    ) -> None:
        """Commit ``number`` at the cell and cascade the eliminations it forces.

        Contradictions are left on the board; check ``is_impossible``
        afterwards.
        """
        indent += "  "

        def eliminate(x: int, y: int, number_to_eliminate: int, reason: str) -> None:
            if x == certain_x and y == certain_y:
                return
            cell = self.cells[x][y]
            if not cell.eliminate(number_to_eliminate):
                return
            if trace:
                trace(
                    f"{indent}{cell_name(certain_x, certain_y)} = {number + 1}, "
                    f"so {cell_name(x, y)} ({reason}) "
                    f"can't be {number_to_eliminate + 1}"
                )
            forced = cell.get_certain()
            if forced is not None:
                if trace:
                    trace(f"{indent}Therefore, {cell_name(x, y)} can only be {forced + 1}")
                self.set_certain(x, y, forced, config, trace, indent)

        for x in range(SIZE):
            eliminate(x, certain_y, number, "same row")

        for y in range(SIZE):
            eliminate(certain_x, y, number, "same column")

        block_x = certain_x // 3 * 3
        block_y = certain_y // 3 * 3
        for x in range(block_x, block_x + 3):
            for y in range(block_y, block_y + 3):
                eliminate(x, y, number, "same block")

        for offset_x, offset_y in config.anti_cells:
            pos = offset_pos(certain_x, certain_y, offset_x, offset_y)
            if pos is not None:
                eliminate(pos[0], pos[1], number, "near cell")

        for offset_x, offset_y in config.non_con_cells:
            pos = offset_pos(certain_x, certain_y, offset_x, offset_y)
            if pos is None:
                continue
            increment = offset(number, 1)
            if increment is not None:
                eliminate(pos[0], pos[1], increment, "direct neighbor")
            decrement = offset(number, -1)
            if decrement is not None:
                eliminate(pos[0], pos[1], decrement, "direct neighbor")

        self.cells[certain_x][certain_y] = CellState.certain(number)

    def seed(
        self,
        clues: Iterable[Clue],
        config: PuzzleConfig,
        trace: Optional[Trace] = None,
    ) -> None:
        for x, y, number in clues:
            if not (0 <= x < SIZE and 0 <= y < SIZE):
                raise ValueError(f"Clue outside the board: ({x}, {y})")
            if not 0 <= number < SIZE:
                raise ValueError(f"Clue digit out of range at {cell_name(x, y)}: {number}")
            self.set_certain(x, y, number, config, trace)

    def is_impossible(self) -> bool:
        return any(cell.is_impossible() for col in self.cells for cell in col)

    def is_solved(self) -> bool:
        return all(cell.is_certain() for col in self.cells for cell in col)

    def certain_count(self) -> int:
        return sum(1 for col in self.cells for cell in col if cell.is_certain())

    def to_solution(self) -> Solution:
        if self.is_impossible() or not self.is_solved():
            raise ValueError("Board is not a complete solution")
        return Solution(
            tuple(
                tuple(self.cells[x][y].get_certain() + 1 for x in range(SIZE))
                for y in range(SIZE)
            )
        )


class PuzzleFormatError(ValueError):
    pass


def parse_puzzle(text: str) -> List[Clue]:
    """Decode an 81-character puzzle string into 0-based ``(x, y, digit)`` clues.

    Whitespace is ignored. Digits 1-9 are givens; any other character
    ('0', '.', '_', ...) marks a blank cell.
    """
    chars = [ch for ch in text if not ch.isspace()]
    if len(chars) != SIZE * SIZE:
        raise PuzzleFormatError(
            f"Puzzle must have {SIZE * SIZE} cells, got {len(chars)}"
        )
    clues: List[Clue] = []
    for idx, ch in enumerate(chars):
        if ch in "123456789":
            clues.append((idx % SIZE, idx // SIZE, int(ch) - 1))
    return clues


_UNSUPPORTED_KEYS = ("diag_main", "diag_anti")


class PuzzleModel:
    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.grid: Grid = [[0 for _ in range(SIZE)] for _ in range(SIZE)]
        self.anti_knight: bool = False
        self.anti_king: bool = False
        self.anti_consecutive: bool = False

    def set_value(self, row: int, col: int, value: int) -> None:
        self.grid[row][col] = value

    def clues(self) -> List[Clue]:
        return [
            (c, r, self.grid[r][c] - 1)
            for r in range(SIZE)
            for c in range(SIZE)
            if self.grid[r][c]
        ]

    def config(self) -> PuzzleConfig:
        return PuzzleConfig.from_rules(
            anti_king=self.anti_king,
            anti_knight=self.anti_knight,
            anti_consecutive=self.anti_consecutive,
        )

    @classmethod
    def from_string(cls, text: str) -> "PuzzleModel":
        model = cls()
        for x, y, number in parse_puzzle(text):
            model.set_value(y, x, number + 1)
        return model

    @classmethod
    def from_json(cls, data: dict) -> "PuzzleModel":
        if not isinstance(data, dict):
            raise PuzzleFormatError("Puzzle file must hold a JSON object")
        grid = data.get("grid")
        if (
            not isinstance(grid, list)
            or len(grid) != SIZE
            or any(not isinstance(row, list) or len(row) != SIZE for row in grid)
        ):
            raise PuzzleFormatError("Invalid grid")
        model = cls()
        for r in range(SIZE):
            for c in range(SIZE):
                value = grid[r][c]
                if value is None:
                    value = 0
                # bool is an int subclass
                if isinstance(value, bool) or not isinstance(value, int):
                    raise PuzzleFormatError(
                        f"Invalid digit {value!r} at {cell_name(c, r)}"
                    )
                if not 0 <= value <= SIZE:
                    raise PuzzleFormatError(
                        f"Invalid digit {value} at {cell_name(c, r)}"
                    )
                model.grid[r][c] = value
        model.anti_knight = bool(data.get("anti_knight", False))
        model.anti_king = bool(data.get("anti_king", False))
        model.anti_consecutive = bool(data.get("anti_consecutive", False))
        for key in _UNSUPPORTED_KEYS:
            if data.get(key):
                logger.warning("Ignoring unsupported rule %r", key)
        if data.get("constraints"):
            logger.warning(
                "Ignoring %d unsupported variant constraints",
                len(data["constraints"]),
            )
        return model

    @classmethod
    def load(cls, path: str) -> "PuzzleModel":
        with open(path, "r") as f:
            data = json.load(f)
        return cls.from_json(data)
