from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from model import PuzzleModel, Solution
from render import format_solution
from solver import SudokuSolver

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="variant-sudoku",
        description="Enumerate every solution of a (variant) Sudoku puzzle.",
    )
    parser.add_argument(
        "puzzle",
        nargs="?",
        help="81 characters, row by row; 1-9 are givens, anything else is blank.",
    )
    parser.add_argument("--file", help="Load the puzzle from a JSON puzzle file.")
    parser.add_argument(
        "-e",
        "--explain",
        action="store_true",
        help="Narrate every elimination and guess.",
    )
    parser.add_argument("--anti-king", action="store_true")
    parser.add_argument("--anti-knight", action="store_true")
    parser.add_argument(
        "--non-con",
        action="store_true",
        help="Orthogonally adjacent cells may not hold consecutive digits.",
    )
    parser.add_argument(
        "--max-solutions",
        type=int,
        default=None,
        help="Stop after this many solutions.",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def load_model(parser: argparse.ArgumentParser, args: argparse.Namespace) -> PuzzleModel:
    if (args.puzzle is None) == (args.file is None):
        parser.error("give exactly one of PUZZLE or --file")
    try:
        if args.file:
            model = PuzzleModel.load(args.file)
        else:
            model = PuzzleModel.from_string(args.puzzle)
    except (OSError, ValueError) as e:
        parser.error(f"failed to load puzzle: {e}")
    model.anti_king = model.anti_king or args.anti_king
    model.anti_knight = model.anti_knight or args.anti_knight
    model.anti_consecutive = model.anti_consecutive or args.non_con
    return model


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        format="%(asctime)s %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
        level=logging.INFO if args.verbose else logging.WARNING,
    )
    if args.max_solutions is not None and args.max_solutions < 1:
        parser.error("--max-solutions must be positive")

    model = load_model(parser, args)
    solver = SudokuSolver(model.config(), trace=print if args.explain else None)

    def show(solution: Solution) -> None:
        print("A solution is:")
        print(format_solution(solution))

    print("Calculating solutions:")
    result = solver.solve(
        model.clues(), max_solutions=args.max_solutions, handle_solution=show
    )
    logger.info(result.message)
    if result.status == "truncated":
        print(f"Stopped after {result.solutions_found} solutions")
    else:
        print(f"There are {result.solutions_found} solutions")
    return 0


if __name__ == "__main__":
    sys.exit(main())
