from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Tuple

from constraints import SIZE, UNIQUE_REGIONS, Cell, PuzzleConfig, UniqueRegion, cell_name
from model import Clue, Solution, SudokuState, Trace
from render import format_candidates

logger = logging.getLogger(__name__)

SolutionHandler = Callable[[Solution], None]

PROGRESS_INTERVAL = 60


@dataclass
class SolverResult:
    status: str
    solutions: List[Solution] = field(default_factory=list)
    duration_ms: int = 0
    solutions_found: int = 0
    message: str = ""

    @property
    def solution(self) -> Optional[Solution]:
        return self.solutions[0] if self.solutions else None


@dataclass(frozen=True)
class Selection:
    region: UniqueRegion
    number: int
    cells: Tuple[Cell, ...]

    @property
    def count(self) -> int:
        return len(self.cells)


def applicable_cells(
    state: SudokuState, region: UniqueRegion, number: int
) -> List[Cell]:
    """Cells of ``region`` that could still take ``number`` and are not yet fixed."""
    return [
        (x, y)
        for x, y in region.cells
        if state.get(x, y).could_contain(number) and not state.get(x, y).is_certain()
    ]


class SudokuSolver:
    def __init__(
        self,
        config: Optional[PuzzleConfig] = None,
        trace: Optional[Trace] = None,
    ) -> None:
        self.config = config if config is not None else PuzzleConfig()
        self.trace = trace
        self._found = 0
        self.truncated = False
        self._start_time = 0.0
        self._last_report = 0.0

    def select(self, state: SudokuState) -> Optional[Selection]:
        """Find the (region, digit) pair with the fewest candidate cells."""
        best: Optional[Selection] = None
        for region in UNIQUE_REGIONS:
            for number in range(SIZE):
                cells = applicable_cells(state, region, number)
                if not cells:
                    continue
                if best is None or len(cells) < best.count:
                    best = Selection(region, number, tuple(cells))
        return best

    def seed(self, clues: Iterable[Clue]) -> SudokuState:
        state = SudokuState()
        state.seed(clues, self.config)
        return state

    def _report_progress(self, state: SudokuState) -> None:
        now = time.time()
        if now - self._last_report < PROGRESS_INTERVAL:
            return
        logger.info(
            "%ds elapsed; filled %d/81 cells; solutions found %d",
            int(now - self._start_time),
            state.certain_count(),
            self._found,
        )
        self._last_report = now

    def _explain_selection(self, state: SudokuState, selection: Selection) -> None:
        # blank line after the grid
        self.trace(format_candidates(state) + "\n")
        digit = selection.number + 1
        if selection.count == 1:
            x, y = selection.cells[0]
            self.trace(
                f"Only {cell_name(x, y)} can contain the {digit} in "
                f"{selection.region.name} => {cell_name(x, y)} must be {digit}"
            )
        else:
            self.trace(
                f"Multiple cells could contain the {digit} in {selection.region.name}"
            )

    def _search(
        self,
        state: SudokuState,
        handle_solution: SolutionHandler,
        max_solutions: Optional[int],
    ) -> bool:
        """Returns True once ``max_solutions`` have been emitted."""
        self._report_progress(state)
        selection = self.select(state)
        if selection is None:
            # Nothing left to place: every cell is certain.
            if state.is_solved() and not state.is_impossible():
                handle_solution(state.to_solution())
                self._found += 1
                if max_solutions is not None and self._found >= max_solutions:
                    self.truncated = True
                    return True
            return False

        if self.trace:
            self._explain_selection(state, selection)

        for x, y in selection.cells:
            if self.trace and selection.count > 1:
                self.trace(
                    f"Assuming that {cell_name(x, y)} houses the "
                    f"{selection.number + 1} in {selection.region.name}"
                )
            branch = state.clone()
            branch.set_certain(x, y, selection.number, self.config, self.trace)
            if branch.is_impossible():
                logger.debug(
                    "Backtrack: %s != %d", cell_name(x, y), selection.number + 1
                )
                continue
            if self._search(branch, handle_solution, max_solutions):
                return True
        return False

    def search(
        self,
        state: SudokuState,
        handle_solution: SolutionHandler,
        max_solutions: Optional[int] = None,
    ) -> int:
        """Enumerate every solution reachable from ``state``.

        Solutions are handed to ``handle_solution`` in search order and the
        number emitted is returned. ``state`` itself is not modified.
        ``truncated`` is set when ``max_solutions`` ended the enumeration.
        """
        self._found = 0
        self.truncated = False
        self._start_time = self._last_report = time.time()
        if state.is_impossible():
            return 0
        self._search(state.clone(), handle_solution, max_solutions)
        return self._found

    def solve(
        self,
        clues: Iterable[Clue],
        max_solutions: Optional[int] = None,
        handle_solution: Optional[SolutionHandler] = None,
    ) -> SolverResult:
        start = time.time()
        state = self.seed(clues)
        if state.is_impossible():
            duration_ms = int((time.time() - start) * 1000)
            return SolverResult(
                status="no-solution",
                duration_ms=duration_ms,
                message="Contradiction in givens or constraints.",
            )

        solutions: List[Solution] = []

        def collect(solution: Solution) -> None:
            solutions.append(solution)
            if handle_solution is not None:
                handle_solution(solution)

        logger.info("solve start")
        self.search(state, collect, max_solutions)
        duration_ms = int((time.time() - start) * 1000)
        logger.info(
            "solve end in %d ms; solutions found %d", duration_ms, len(solutions)
        )
        if not solutions:
            return SolverResult(
                status="no-solution",
                duration_ms=duration_ms,
                message="No solution found.",
            )
        if self.truncated:
            return SolverResult(
                status="truncated",
                solutions=solutions,
                duration_ms=duration_ms,
                solutions_found=len(solutions),
                message=f"Stopped after {len(solutions)} solutions.",
            )
        if len(solutions) > 1:
            return SolverResult(
                status="multiple",
                solutions=solutions,
                duration_ms=duration_ms,
                solutions_found=len(solutions),
                message="Multiple solutions exist.",
            )
        return SolverResult(
            status="solved",
            solutions=solutions,
            duration_ms=duration_ms,
            solutions_found=1,
            message="Solved successfully.",
        )
