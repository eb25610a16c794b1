from __future__ import annotations

import pytest

from constraints import UNIQUE_REGIONS, PuzzleConfig
from model import SudokuState

# Wikipedia's example puzzle and its unique solution.
CLASSIC_PUZZLE = (
    "530070000"
    "600195000"
    "098000060"
    "800060003"
    "400803001"
    "700020006"
    "060000280"
    "000419005"
    "000080079"
)

CLASSIC_SOLUTION = (
    (5, 3, 4, 6, 7, 8, 9, 1, 2),
    (6, 7, 2, 1, 9, 5, 3, 4, 8),
    (1, 9, 8, 3, 4, 2, 5, 6, 7),
    (8, 5, 9, 7, 6, 1, 4, 2, 3),
    (4, 2, 6, 8, 5, 3, 7, 9, 1),
    (7, 1, 3, 9, 2, 4, 8, 5, 6),
    (9, 6, 1, 5, 3, 7, 2, 8, 4),
    (2, 8, 7, 4, 1, 9, 6, 3, 5),
    (3, 4, 5, 2, 8, 6, 1, 7, 9),
)

# First entry of Gordon Royle's collection of 17-clue puzzles.
MINIMAL_PUZZLE = (
    "000000010"
    "400000000"
    "020000000"
    "000050407"
    "008000300"
    "001090000"
    "300400200"
    "050100000"
    "000806000"
)


# Two solutions differing only in A1, B1, A9 and B9.
TWO_SOLUTION_PUZZLE = (
    "000070000"
    "600105000"
    "098000060"
    "800060003"
    "400803001"
    "700020006"
    "060000280"
    "000419005"
    "000080079"
)


def regions_containing(cell):
    return [region for region in UNIQUE_REGIONS if cell in region.cells]


@pytest.fixture
def classic() -> PuzzleConfig:
    return PuzzleConfig()


@pytest.fixture
def board() -> SudokuState:
    return SudokuState()
