from __future__ import annotations

from typing import Dict, Tuple

from .pieces import PieceType


KickOffset = Tuple[int, int]
KickTable = Dict[Tuple[int, int], Tuple[KickOffset, ...]]


# SRS offsets (dx, dy) with y up, tried in order for (from, to) rotation pairs.
JLSTZ_KICKS: KickTable = {
    (0, 1): ((0, 0), (-1, 0), (-1, 1), (0, -2), (-1, -2)),
    (1, 0): ((0, 0), (1, 0), (1, -1), (0, 2), (1, 2)),
    (1, 2): ((0, 0), (1, 0), (1, -1), (0, 2), (1, 2)),
    (2, 1): ((0, 0), (-1, 0), (-1, 1), (0, -2), (-1, -2)),
    (2, 3): ((0, 0), (1, 0), (1, 1), (0, -2), (1, -2)),
    (3, 2): ((0, 0), (-1, 0), (-1, -1), (0, 2), (-1, 2)),
    (3, 0): ((0, 0), (-1, 0), (-1, -1), (0, 2), (-1, 2)),
    (0, 3): ((0, 0), (1, 0), (1, 1), (0, -2), (1, -2)),
}

I_KICKS: KickTable = {
    (0, 1): ((0, 0), (-2, 0), (1, 0), (-2, -1), (1, 2)),
    (1, 0): ((0, 0), (2, 0), (-1, 0), (2, 1), (-1, -2)),
    (1, 2): ((0, 0), (-1, 0), (2, 0), (-1, 2), (2, -1)),
    (2, 1): ((0, 0), (1, 0), (-2, 0), (1, -2), (-2, 1)),
    (2, 3): ((0, 0), (2, 0), (-1, 0), (2, 1), (-1, -2)),
    (3, 2): ((0, 0), (-2, 0), (1, 0), (-2, -1), (1, 2)),
    (3, 0): ((0, 0), (1, 0), (-2, 0), (1, -2), (-2, 1)),
    (0, 3): ((0, 0), (-1, 0), (2, 0), (-1, 2), (2, -1)),
}

NO_KICKS: Tuple[KickOffset, ...] = ((0, 0),)


def kick_offsets(kind: PieceType, from_rot: int, to_rot: int) -> Tuple[KickOffset, ...]:
    if kind == PieceType.O:
        return NO_KICKS
    table = I_KICKS if kind == PieceType.I else JLSTZ_KICKS
    return table.get((from_rot % 4, to_rot % 4), NO_KICKS)
