"""Rules engine for a falling-block puzzle board.

Exports the core game engine and supporting classes:
- PieceType / Piece / BoardPosition: piece geometry and placed pieces
- Board: grid with row/column score caches, drops, clears and snapshots
- ScoringRules: scoring configuration and helpers
- GameTimer / GameTimers: pausable countdowns
- BoardInstance: per-board state machine driven by ``update``
"""

from .pieces import BoardPosition, Piece, PieceType, RotationDirection
from .grid import Board, BoardState, PlaceResult
from .rules import ScoringRules
from .timer import GameTimer, GameTimers
from .core import BoardInstance, GameConfig, GameState, PlayerInput, StateKind

__all__ = [
    "BoardPosition",
    "Piece",
    "PieceType",
    "RotationDirection",
    "Board",
    "BoardState",
    "PlaceResult",
    "ScoringRules",
    "GameTimer",
    "GameTimers",
    "BoardInstance",
    "GameConfig",
    "GameState",
    "PlayerInput",
    "StateKind",
]
