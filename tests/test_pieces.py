from __future__ import annotations

import pytest

from falling_blocks.game import BoardPosition, Piece, PieceType, RotationDirection
from falling_blocks.game.kicks import I_KICKS, JLSTZ_KICKS, kick_offsets
from falling_blocks.game.pieces import (
    get_rotation,
    max_y,
    min_y,
    minmax_x,
    rotation_count,
    skirt,
)


ALL_ROTATIONS = [(kind, rot) for kind in PieceType for rot in range(4)]


def test_every_type_has_four_rotations_of_four_distinct_cells():
    for kind in PieceType:
        assert rotation_count(kind) == 4
        for rot in range(4):
            cells = get_rotation(kind, rot)
            assert len(cells) == 4
            assert len(set(cells)) == 4


def test_rotation_index_wraps():
    assert get_rotation(PieceType.T, 5) == get_rotation(PieceType.T, 1)
    assert get_rotation(PieceType.T, -1) == get_rotation(PieceType.T, 3)


def test_o_rotations_share_a_footprint():
    assert len({frozenset(get_rotation(PieceType.O, r)) for r in range(4)}) == 1


@pytest.mark.parametrize("kind,rot", ALL_ROTATIONS)
def test_skirt_is_lowest_cell_per_column(kind, rot):
    lo, hi = minmax_x(kind, rot)
    values = skirt(kind, rot)
    assert len(values) == hi - lo + 1
    cells = get_rotation(kind, rot)
    for i, bottom in enumerate(values):
        assert bottom == min(dy for dx, dy in cells if dx == lo + i)


def test_skirt_examples():
    assert skirt(PieceType.T, 0) == (0, 0, 0)
    assert skirt(PieceType.T, 2) == (0, -1, 0)
    assert skirt(PieceType.I, 1) == (-2,)
    assert skirt(PieceType.O, 0) == (0, 0)
    assert skirt(PieceType.S, 0) == (0, 0, 1)


def test_vertical_extents():
    assert max_y(PieceType.I, 0) == 0
    assert min_y(PieceType.I, 1) == -2
    assert max_y(PieceType.T, 0) == 1
    assert minmax_x(PieceType.I, 0) == (-1, 2)


@pytest.mark.parametrize("kind", list(PieceType))
def test_clockwise_then_counter_clockwise_round_trips(kind):
    for start in range(4):
        piece = Piece(kind, rotation=start)
        piece.rotate(RotationDirection.CW)
        piece.rotate(RotationDirection.CW)
        piece.rotate(RotationDirection.CCW)
        assert piece.rotation == (start + 1) % 4
        piece.rotate(RotationDirection.CCW)
        assert piece.rotation == start


def test_four_turns_restore_the_rotation():
    piece = Piece(PieceType.L, rotation=2)
    for _ in range(4):
        piece.rotate()
    assert piece.rotation == 2


def test_rotated_returns_a_copy():
    piece = Piece(PieceType.J, position=BoardPosition(3, 4))
    turned = piece.rotated(RotationDirection.CCW)
    assert turned.rotation == 3
    assert piece.rotation == 0
    assert turned.position == piece.position
    assert turned.color == piece.color


def test_board_positions_follow_position():
    piece = Piece(PieceType.O, position=BoardPosition(2, 5))
    assert set(piece.board_positions()) == {
        BoardPosition(2, 5),
        BoardPosition(3, 5),
        BoardPosition(2, 6),
        BoardPosition(3, 6),
    }
    assert piece.cells_at(BoardPosition(0, 0))[0] == BoardPosition(0, 0)


def test_from_index_wraps_modulo_seven():
    assert PieceType.from_index(0) is PieceType.I
    assert PieceType.from_index(6) is PieceType.O
    assert PieceType.from_index(9) is PieceType.L


def test_kick_tables():
    assert kick_offsets(PieceType.O, 0, 1) == ((0, 0),)
    assert kick_offsets(PieceType.I, 0, 1) == I_KICKS[(0, 1)]
    assert kick_offsets(PieceType.T, 3, 0) == JLSTZ_KICKS[(3, 0)]
    assert kick_offsets(PieceType.S, 4, 5) == JLSTZ_KICKS[(0, 1)]
    assert kick_offsets(PieceType.Z, 0, 2) == ((0, 0),)
    for table in (I_KICKS, JLSTZ_KICKS):
        assert len(table) == 8
        assert all(offsets[0] == (0, 0) and len(offsets) == 5 for offsets in table.values())
