from __future__ import annotations

from typing import List

from constraints import SIZE
from model import Solution, SudokuState

HEADER = "     A     B     C     D     E     F     G     H     I   "
FOOTER = "  +=====+=====+=====+=====+=====+=====+=====+=====+=====+"


def format_candidates(state: SudokuState) -> str:
    """Render every cell as a 3x3 block of its remaining candidates."""
    lines: List[str] = [HEADER]
    for y in range(SIZE):
        separator = "=" if y % 3 == 0 else "-"
        lines.append("  " + ("+" + separator * 5) * SIZE + "+")
        for band in range(3):
            prefix = f"{y + 1} " if band == 1 else "  "
            parts = []
            for x in range(SIZE):
                cell = state.get(x, y)
                digits = [
                    str(n + 1) if cell.could_contain(n) else " "
                    for n in range(band * 3, band * 3 + 3)
                ]
                parts.append(("‖" if x % 3 == 0 else "|") + " ".join(digits))
            lines.append(prefix + "".join(parts) + "‖")
    lines.append(FOOTER)
    return "\n".join(lines)


def format_solution(solution: Solution) -> str:
    lines: List[str] = []
    for y, row in enumerate(solution.grid):
        if y and y % 3 == 0:
            lines.append("------+-------+------")
        groups = [" ".join(str(v) for v in row[i : i + 3]) for i in range(0, SIZE, 3)]
        lines.append(" | ".join(groups))
    return "\n".join(lines)
