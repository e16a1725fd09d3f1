from __future__ import annotations

from typing import Iterable, List

import numpy as np
import pytest

from falling_blocks.game import Board, BoardPosition


class FixedRandom:
    """Random source that hands out a fixed, repeating sequence of indices."""

    def __init__(self, values: Iterable[int]) -> None:
        self.values: List[int] = list(values)
        self.calls = 0

    def randrange(self, stop: int) -> int:
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value % stop


def expected_row_scores(board: Board) -> np.ndarray:
    return board.state.grid.sum(axis=1)


def expected_col_scores(board: Board) -> np.ndarray:
    heights = np.zeros(board.width, dtype=np.int64)
    for x in range(board.width):
        filled = np.flatnonzero(board.state.grid[:, x])
        heights[x] = int(filled.max()) + 1 if filled.size else 0
    return heights


def assert_scores_consistent(board: Board) -> None:
    np.testing.assert_array_equal(board.state.row_score, expected_row_scores(board))
    np.testing.assert_array_equal(board.state.col_score, expected_col_scores(board))


def fill(board: Board, cells: Iterable[tuple]) -> None:
    for x, y in cells:
        assert board.fill_cell(BoardPosition(x, y))


@pytest.fixture
def board() -> Board:
    return Board(10, 20)
