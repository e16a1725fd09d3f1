from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int] = (100, 300, 500, 800)
    soft_drop_per_cell: int = 1
    hard_drop_per_cell: int = 2

    def score_for_lines(self, lines: int) -> int:
        if lines <= 0:
            return 0
        if 1 <= lines <= 4:
            return self.line_clear_scores[lines - 1]
        # A tetromino completes at most four rows; hand-built grids can exceed it
        return self.line_clear_scores[-1] + (lines - 4) * 400

    def score_for_drop(self, cells: int, hard: bool) -> int:
        if cells <= 0:
            return 0
        per_cell = self.hard_drop_per_cell if hard else self.soft_drop_per_cell
        return cells * per_cell
