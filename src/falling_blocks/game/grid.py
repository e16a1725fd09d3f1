from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

import numpy as np

from .kicks import kick_offsets
from .pieces import BoardPosition, Piece, RotationDirection, minmax_x, skirt
from .rules import ScoringRules


logger = logging.getLogger(__name__)


class PlaceResult(Enum):
    OK = "ok"
    ROW_FILLED = "row_filled"
    OUT_OF_BOUNDS = "out_of_bounds"
    BAD = "bad"

    @property
    def is_legal(self) -> bool:
        return self in (PlaceResult.OK, PlaceResult.ROW_FILLED)


@dataclass
class BoardState:
    """Grid contents plus the caches kept in step with it.

    ``grid[y, x]`` is row-major with y=0 at the bottom, so the flat index of a
    cell is ``y * width + x``. ``row_score[y]`` counts filled cells in row y;
    ``col_score[x]`` is the height of the highest filled cell in column x plus
    one, or 0 for an empty column.
    """

    grid: np.ndarray
    row_score: np.ndarray
    col_score: np.ndarray
    score: int = 0
    lines_cleared: int = 0

    @classmethod
    def empty(cls, width: int, height: int) -> "BoardState":
        return cls(
            grid=np.zeros((height, width), dtype=np.bool_),
            row_score=np.zeros(height, dtype=np.int32),
            col_score=np.zeros(width, dtype=np.int32),
        )

    def copy(self) -> "BoardState":
        return BoardState(
            grid=self.grid.copy(),
            row_score=self.row_score.copy(),
            col_score=self.col_score.copy(),
            score=self.score,
            lines_cleared=self.lines_cleared,
        )


class Board:
    """Fixed-size well of cells with incremental row and column scores."""

    def __init__(self, width: int, height: int, rules: Optional[ScoringRules] = None) -> None:
        if int(width) <= 0 or int(height) <= 0:
            raise ValueError(f"Board dimensions must be positive, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.rules = rules or ScoringRules()
        self.state = BoardState.empty(self.width, self.height)
        self.saved_state: Optional[BoardState] = None

    def reset(self) -> None:
        self.state = BoardState.empty(self.width, self.height)
        self.saved_state = None

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def index(self, x: int, y: int) -> Optional[int]:
        if not self.is_inside(x, y):
            return None
        return y * self.width + x

    def try_place(self, piece: Piece, pos: Optional[BoardPosition] = None) -> PlaceResult:
        """Check the piece's four cells at ``pos`` without touching the grid."""
        pos = piece.position if pos is None else pos
        for cell in piece.cells_at(pos):
            if not self.is_inside(cell.x, cell.y):
                return PlaceResult.OUT_OF_BOUNDS
            if self.state.grid[cell.y, cell.x]:
                return PlaceResult.BAD
        return PlaceResult.OK

    def rows_filled_by(self, piece: Piece, pos: Optional[BoardPosition] = None) -> List[int]:
        """Rows that committing the piece at ``pos`` would complete."""
        pos = piece.position if pos is None else pos
        added: dict[int, int] = {}
        for cell in piece.cells_at(pos):
            if self.is_inside(cell.x, cell.y) and not self.state.grid[cell.y, cell.x]:
                added[cell.y] = added.get(cell.y, 0) + 1
        return sorted(y for y, n in added.items() if self.state.row_score[y] + n == self.width)

    def commit_piece(self, piece: Piece) -> Tuple[PlaceResult, Optional[List[int]]]:
        """Lock the piece into the grid.

        Returns the placement result and the sorted rows completed by this
        commit (``None`` when there are none). An illegal placement leaves the
        board untouched and is reported through the result alone.
        """
        result = self.try_place(piece)
        if result is not PlaceResult.OK:
            logger.warning("Cannot commit %s at %s: %s", piece.kind.name, piece.position, result.value)
            return result, None
        filled: List[int] = []
        for cell in piece.board_positions():
            self._mark(cell.x, cell.y)
            if self.state.row_score[cell.y] == self.width:
                filled.append(cell.y)
        logger.debug("Committed %s at %s, column heights %s", piece.kind.name, piece.position, self.column_heights())
        if not filled:
            return PlaceResult.OK, None
        return PlaceResult.ROW_FILLED, sorted(set(filled))

    def fill_cell(self, pos: BoardPosition) -> bool:
        if not self.is_inside(pos.x, pos.y) or self.state.grid[pos.y, pos.x]:
            return False
        self._mark(pos.x, pos.y)
        return True

    def _mark(self, x: int, y: int) -> None:
        self.state.grid[y, x] = True
        self.state.row_score[y] += 1
        self.state.col_score[x] = max(int(self.state.col_score[x]), y + 1)

    def calculate_drop(self, piece: Piece) -> Tuple[BoardPosition, PlaceResult]:
        """Lowest legal resting position straight below the piece.

        Uses the piece's skirt against the column heights when the piece sits
        above every column it spans. A piece already tucked under an overhang
        is stepped down one row at a time instead. Either way the landing
        spot is checked with ``try_place`` before it is returned.
        """
        start = piece.position
        current = self.try_place(piece, start)
        if current is not PlaceResult.OK:
            return start, current

        estimate = self._skirt_landing(piece)
        if estimate is None:
            landing = self._step_down(piece)
        else:
            landing = self._verify_landing(piece, estimate)

        result = PlaceResult.ROW_FILLED if self.rows_filled_by(piece, landing) else PlaceResult.OK
        logger.debug("Drop for %s from y=%d lands at y=%d (%s)", piece.kind.name, start.y, landing.y, result.value)
        return landing, result

    def _skirt_landing(self, piece: Piece) -> Optional[BoardPosition]:
        start = piece.position
        lo, _ = minmax_x(piece.kind, piece.rotation)
        landing_y = None
        for i, bottom in enumerate(skirt(piece.kind, piece.rotation)):
            x = start.x + lo + i
            height = int(self.state.col_score[x])
            if start.y + bottom < height:
                # Below this column's surface: col_score says nothing about the gap.
                return None
            required = height - bottom
            landing_y = required if landing_y is None else max(landing_y, required)
        if landing_y is None or landing_y > start.y:
            return None
        return BoardPosition(start.x, landing_y)

    def _verify_landing(self, piece: Piece, estimate: BoardPosition) -> BoardPosition:
        pos = estimate
        while pos.y < piece.position.y and self.try_place(piece, pos) is not PlaceResult.OK:
            pos = pos.offset(0, 1)
        return pos

    def _step_down(self, piece: Piece) -> BoardPosition:
        pos = piece.position
        while self.try_place(piece, pos.offset(0, -1)) is PlaceResult.OK:
            pos = pos.offset(0, -1)
        return pos

    def clear_rows(self, rows: Iterable[int]) -> int:
        """Remove the given rows and slide everything above them down."""
        cleared = set()
        for y in rows:
            y = int(y)
            if 0 <= y < self.height:
                cleared.add(y)
            else:
                logger.warning("Ignoring out-of-bounds row %d in clear_rows", y)
        if not cleared:
            return 0

        state = self.state
        lowest = min(cleared)
        prior_heights = state.col_score.copy()
        for y in cleared:
            state.grid[y, :] = False
            state.row_score[y] = 0

        # Each surviving row drops by the number of cleared rows below it.
        kept = [y for y in range(self.height) if y not in cleared]
        state.grid[: len(kept)] = state.grid[kept]
        state.grid[len(kept) :] = False
        state.row_score[: len(kept)] = state.row_score[kept]
        state.row_score[len(kept) :] = 0

        for x in range(self.width):
            top = min(max(int(prior_heights[x]), lowest + 1), self.height)
            state.col_score[x] = self._scan_column(x, top)
        return len(cleared)

    def _scan_column(self, x: int, top: int) -> int:
        for y in range(top - 1, -1, -1):
            if self.state.grid[y, x]:
                return y + 1
        return 0

    def try_rotation(self, piece: Piece, direction: RotationDirection) -> Optional[BoardPosition]:
        """Position at which the rotated piece fits, trying wall kicks in order."""
        rotated = piece.rotated(direction)
        for dx, dy in kick_offsets(piece.kind, piece.rotation, rotated.rotation):
            candidate = piece.position.offset(dx, dy)
            if self.try_place(rotated, candidate) is PlaceResult.OK:
                return candidate
        return None

    @property
    def has_saved_state(self) -> bool:
        return self.saved_state is not None

    def save_state(self) -> None:
        self.saved_state = self.state.copy()

    def resume_state(self) -> bool:
        if self.saved_state is None:
            return False
        self.state = self.saved_state.copy()
        return True

    @property
    def score(self) -> int:
        return self.state.score

    @property
    def lines_cleared(self) -> int:
        return self.state.lines_cleared

    def score_line_clear(self, count: int) -> int:
        gained = self.rules.score_for_lines(count)
        self.state.score += gained
        self.state.lines_cleared += max(0, count)
        return gained

    def score_drop(self, cells: int, hard: bool) -> int:
        gained = self.rules.score_for_drop(cells, hard)
        self.state.score += gained
        return gained

    def row_score(self, y: int) -> Optional[int]:
        if not 0 <= y < self.height:
            logger.warning("row_score: row %d outside 0..%d", y, self.height - 1)
            return None
        return int(self.state.row_score[y])

    def col_score(self, x: int) -> Optional[int]:
        if not 0 <= x < self.width:
            logger.warning("col_score: column %d outside 0..%d", x, self.width - 1)
            return None
        return int(self.state.col_score[x])

    def is_cell_filled(self, pos: BoardPosition) -> bool:
        if not self.is_inside(pos.x, pos.y):
            logger.warning("is_cell_filled: %s outside %dx%d board", pos, self.width, self.height)
            return False
        return bool(self.state.grid[pos.y, pos.x])

    def is_row_filled(self, y: int) -> bool:
        return self.row_score(y) == self.width

    def filled_rows(self) -> List[int]:
        return [int(y) for y in np.flatnonzero(self.state.row_score == self.width)]

    def midpoint_x(self) -> int:
        return self.width // 2

    def column_heights(self) -> List[int]:
        return [int(h) for h in self.state.col_score]

    def cells(self) -> np.ndarray:
        return self.state.grid.copy()
