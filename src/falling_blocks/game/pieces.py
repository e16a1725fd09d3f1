from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Dict, List, Optional, Tuple


Offset = Tuple[int, int]
Rotation = Tuple[Offset, Offset, Offset, Offset]
Color = Tuple[int, int, int]


class PieceType(IntEnum):
    I = 0
    J = 1
    L = 2
    S = 3
    Z = 4
    T = 5
    O = 6

    @classmethod
    def from_index(cls, idx: int) -> "PieceType":
        return cls(int(idx) % len(cls))


class RotationDirection(IntEnum):
    CW = 1
    CCW = -1


# Pivot-relative offsets, y up. States run 0 -> R -> 2 -> L clockwise.
ROTATIONS: Dict[PieceType, Tuple[Rotation, ...]] = {
    PieceType.I: (
        ((-1, 0), (0, 0), (1, 0), (2, 0)),
        ((1, 1), (1, 0), (1, -1), (1, -2)),
        ((-1, -1), (0, -1), (1, -1), (2, -1)),
        ((0, 1), (0, 0), (0, -1), (0, -2)),
    ),
    PieceType.J: (
        ((-1, 1), (-1, 0), (0, 0), (1, 0)),
        ((1, 1), (0, 1), (0, 0), (0, -1)),
        ((1, -1), (1, 0), (0, 0), (-1, 0)),
        ((-1, -1), (0, -1), (0, 0), (0, 1)),
    ),
    PieceType.L: (
        ((1, 1), (-1, 0), (0, 0), (1, 0)),
        ((1, -1), (0, 1), (0, 0), (0, -1)),
        ((-1, -1), (1, 0), (0, 0), (-1, 0)),
        ((-1, 1), (0, -1), (0, 0), (0, 1)),
    ),
    PieceType.S: (
        ((0, 1), (1, 1), (-1, 0), (0, 0)),
        ((1, 0), (1, -1), (0, 1), (0, 0)),
        ((0, -1), (-1, -1), (1, 0), (0, 0)),
        ((-1, 0), (-1, 1), (0, -1), (0, 0)),
    ),
    PieceType.Z: (
        ((-1, 1), (0, 1), (0, 0), (1, 0)),
        ((1, 1), (1, 0), (0, 0), (0, -1)),
        ((1, -1), (0, -1), (0, 0), (-1, 0)),
        ((-1, -1), (-1, 0), (0, 0), (0, 1)),
    ),
    PieceType.T: (
        ((-1, 0), (0, 0), (1, 0), (0, 1)),
        ((0, 1), (0, 0), (0, -1), (1, 0)),
        ((-1, 0), (0, 0), (1, 0), (0, -1)),
        ((0, 1), (0, 0), (0, -1), (-1, 0)),
    ),
    # O never changes footprint; four identical states keep indexing uniform.
    PieceType.O: (
        ((0, 0), (1, 0), (0, 1), (1, 1)),
        ((0, 0), (1, 0), (0, 1), (1, 1)),
        ((0, 0), (1, 0), (0, 1), (1, 1)),
        ((0, 0), (1, 0), (0, 1), (1, 1)),
    ),
}


PIECE_COLORS: Dict[PieceType, Color] = {
    PieceType.I: (0, 240, 240),
    PieceType.J: (0, 0, 240),
    PieceType.L: (240, 160, 0),
    PieceType.S: (0, 240, 0),
    PieceType.Z: (240, 0, 0),
    PieceType.T: (160, 0, 240),
    PieceType.O: (240, 240, 0),
}


def rotation_count(kind: PieceType) -> int:
    return len(ROTATIONS[kind])


def get_rotation(kind: PieceType, index: int) -> Rotation:
    return ROTATIONS[kind][index % rotation_count(kind)]


def minmax_x(kind: PieceType, index: int) -> Tuple[int, int]:
    xs = [dx for dx, _ in get_rotation(kind, index)]
    return min(xs), max(xs)


def max_y(kind: PieceType, index: int) -> int:
    return max(dy for _, dy in get_rotation(kind, index))


def min_y(kind: PieceType, index: int) -> int:
    return min(dy for _, dy in get_rotation(kind, index))


def skirt(kind: PieceType, index: int) -> Tuple[int, ...]:
    """Lowest dy per column of the rotation, left to right from ``min_x``.

    The skirt is the contact surface of the piece: resting height against a
    stack is ``max(col_height[x] - skirt[i])`` over the spanned columns.
    """
    lo, hi = minmax_x(kind, index)
    lowest: Dict[int, int] = {}
    for dx, dy in get_rotation(kind, index):
        if dx not in lowest or dy < lowest[dx]:
            lowest[dx] = dy
    # Every tetromino rotation occupies each column of its span.
    return tuple(lowest[x] for x in range(lo, hi + 1))


@dataclass(frozen=True)
class BoardPosition:
    x: int
    y: int

    def offset(self, dx: int, dy: int) -> "BoardPosition":
        return BoardPosition(self.x + dx, self.y + dy)


@dataclass
class Piece:
    kind: PieceType
    rotation: int = 0
    position: BoardPosition = field(default_factory=lambda: BoardPosition(0, 0))
    color: Optional[Color] = None

    def __post_init__(self) -> None:
        self.rotation %= rotation_count(self.kind)
        if self.color is None:
            self.color = PIECE_COLORS[self.kind]

    def cells(self) -> Rotation:
        return get_rotation(self.kind, self.rotation)

    def rotate(self, direction: RotationDirection = RotationDirection.CW) -> Rotation:
        self.rotation = (self.rotation + int(direction)) % rotation_count(self.kind)
        return self.cells()

    def rotated(self, direction: RotationDirection = RotationDirection.CW) -> "Piece":
        return replace(self, rotation=(self.rotation + int(direction)) % rotation_count(self.kind))

    def cells_at(self, position: BoardPosition) -> List[BoardPosition]:
        return [position.offset(dx, dy) for dx, dy in self.cells()]

    def board_positions(self) -> List[BoardPosition]:
        return self.cells_at(self.position)
