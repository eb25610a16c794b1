from __future__ import annotations

import solver
from conftest import (
    CLASSIC_PUZZLE,
    CLASSIC_SOLUTION,
    MINIMAL_PUZZLE,
    TWO_SOLUTION_PUZZLE,
)
from constraints import UNIQUE_REGIONS, PuzzleConfig
from model import SudokuState, parse_puzzle
from solver import SudokuSolver, applicable_cells


def clues_match(solution, clues):
    return all(solution.value(x, y) == number + 1 for x, y, number in clues)


def as_string(solution):
    return "".join(str(value) for row in solution.grid for value in row)


def test_select_on_empty_board_picks_first_region_and_digit():
    selection = SudokuSolver().select(SudokuState())
    assert selection.region is UNIQUE_REGIONS[0]
    assert selection.number == 0
    assert selection.count == 9


def test_select_prefers_fewest_candidates():
    state = SudokuState()
    # Leave only A1 and B1 open for a 1 in the top left block.
    for x, y in ((2, 0), (0, 1), (1, 1), (2, 1), (0, 2), (1, 2), (2, 2)):
        state.get(x, y).eliminate(0)
    selection = SudokuSolver().select(state)
    assert selection.region is UNIQUE_REGIONS[0]
    assert selection.cells == ((0, 0), (1, 0))


def test_applicable_cells_skips_certain_cells(classic):
    state = SudokuState()
    state.set_certain(0, 0, 3, classic)
    row = UNIQUE_REGIONS[9]
    assert (0, 0) not in applicable_cells(state, row, 3)
    assert applicable_cells(state, row, 3) == []
    assert len(applicable_cells(state, row, 4)) == 8


def test_select_returns_none_when_solved(classic):
    state = SudokuState()
    for y, row in enumerate(CLASSIC_SOLUTION):
        for x, value in enumerate(row):
            state.set_certain(x, y, value - 1, classic)
    assert SudokuSolver().select(state) is None


def test_classic_puzzle_has_unique_solution():
    result = SudokuSolver().solve(parse_puzzle(CLASSIC_PUZZLE))
    assert result.status == "solved"
    assert result.solutions_found == 1
    assert result.solution.grid == CLASSIC_SOLUTION


def test_minimal_puzzle_has_unique_solution(classic):
    clues = parse_puzzle(MINIMAL_PUZZLE)
    assert len(clues) == 17
    result = SudokuSolver(classic).solve(clues)
    assert result.solutions_found == 1
    solution = result.solution
    assert solution.is_consistent(classic)
    assert clues_match(solution, clues)


def test_search_emits_through_sink():
    solver = SudokuSolver()
    state = solver.seed(parse_puzzle(CLASSIC_PUZZLE))
    filled = state.certain_count()
    seen = []
    assert solver.search(state, seen.append) == 1
    assert seen[0].grid == CLASSIC_SOLUTION
    assert state.certain_count() == filled


def test_duplicate_clues_yield_no_solutions():
    solver = SudokuSolver()
    clues = [(0, 0, 4), (5, 0, 4)]
    result = solver.solve(clues)
    assert result.status == "no-solution"
    assert result.solutions == []
    state = SudokuState()
    state.seed(clues, solver.config)
    seen = []
    assert solver.search(state, seen.append) == 0
    assert seen == []


def test_seeded_row_constrains_every_solution(classic):
    clues = [(x, 0, (x * 4) % 9) for x in range(9)]
    seen = []
    solver = SudokuSolver(classic)
    assert solver.search(solver.seed(clues), seen.append, max_solutions=5) == 5
    assert len({solution.grid for solution in seen}) == 5
    for solution in seen:
        assert solution.is_consistent(classic)
        assert clues_match(solution, clues)


def test_max_solutions_reports_truncated():
    result = SudokuSolver().solve([], max_solutions=2)
    assert result.status == "truncated"
    assert result.solutions_found == 2
    assert result.solutions[0] != result.solutions[1]


def test_stopping_early_is_not_reported_as_solved():
    clues = parse_puzzle(TWO_SOLUTION_PUZZLE)
    result = SudokuSolver().solve(clues, max_solutions=1)
    assert result.status == "truncated"
    assert result.solutions_found == 1
    assert result.message == "Stopped after 1 solutions."
    full = SudokuSolver().solve(clues)
    assert full.status == "multiple"
    assert full.solutions_found == 2


def test_enumeration_order():
    result = SudokuSolver().solve(parse_puzzle(TWO_SOLUTION_PUZZLE))
    assert [as_string(solution) for solution in result.solutions] == [
        "345678912672195348198342567859761423"
        "426853791713924856961537284287419635534286179",
        "534678912672195348198342567859761423"
        "426853791713924856961537284287419635345286179",
    ]


def test_anti_king_solutions_respect_rule():
    config = PuzzleConfig.from_rules(anti_king=True)
    seen = []
    assert SudokuSolver(config).search(SudokuState(), seen.append, max_solutions=2) == 2
    for solution in seen:
        assert solution.is_consistent(config)


def test_explain_narrates_branching():
    lines = []
    SudokuSolver(trace=lines.append).solve([], max_solutions=1)
    assert lines[0].startswith("     A     B")
    assert lines[0].endswith("\n")
    assert "Multiple cells could contain the 1 in top left block" in lines
    assert "Assuming that A1 houses the 1 in top left block" in lines
    assert any(line.startswith("  A1 = 1, so ") for line in lines)


def test_trace_does_not_change_results():
    clues = parse_puzzle(CLASSIC_PUZZLE)
    quiet = SudokuSolver().solve(clues)
    narrated = SudokuSolver(trace=lambda line: None).solve(clues)
    assert quiet.solutions == narrated.solutions


def test_explain_names_single_candidate():
    state = SudokuState()
    for x, y in UNIQUE_REGIONS[0].cells[1:]:
        state.get(x, y).eliminate(0)
    lines = []
    SudokuSolver(trace=lines.append).search(state, lambda s: None, max_solutions=1)
    assert lines[0].endswith("\n")
    assert "Only A1 can contain the 1 in top left block => A1 must be 1" in lines


def test_progress_is_logged(monkeypatch, caplog):
    monkeypatch.setattr(solver, "PROGRESS_INTERVAL", 0)
    with caplog.at_level("INFO", logger="solver"):
        SudokuSolver().solve(parse_puzzle(CLASSIC_PUZZLE))
    assert "filled" in caplog.text
    assert "solutions found 1" in caplog.text
