from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import List, Optional, Protocol

import numpy as np

from .grid import Board, PlaceResult
from .pieces import (
    BoardPosition,
    Color,
    Piece,
    PieceType,
    RotationDirection,
    max_y,
    minmax_x,
)
from .rules import ScoringRules
from .timer import GameTimers


logger = logging.getLogger(__name__)


class StateKind(Enum):
    READY = "ready"
    FALLING = "falling"
    LOCKING = "locking"
    CLEARING = "clearing"
    GAME_OVER = "game_over"
    FROZEN = "frozen"
    PAUSED = "paused"


@dataclass(frozen=True)
class GameState:
    """Current phase of a board plus the payload some phases carry.

    ``immediate`` and ``hard_drop`` only mean something for LOCKING and
    ``previous`` only for PAUSED. Use :meth:`is_kind` to ask about the phase
    alone and :meth:`matches` to compare phase and payload together.
    """

    kind: StateKind
    immediate: bool = False
    hard_drop: bool = False
    previous: Optional["GameState"] = None

    @classmethod
    def ready(cls) -> "GameState":
        return cls(StateKind.READY)

    @classmethod
    def falling(cls) -> "GameState":
        return cls(StateKind.FALLING)

    @classmethod
    def locking(cls, immediate: bool = False, hard_drop: bool = False) -> "GameState":
        return cls(StateKind.LOCKING, immediate=immediate, hard_drop=hard_drop)

    @classmethod
    def clearing(cls) -> "GameState":
        return cls(StateKind.CLEARING)

    @classmethod
    def game_over(cls) -> "GameState":
        return cls(StateKind.GAME_OVER)

    @classmethod
    def frozen(cls) -> "GameState":
        return cls(StateKind.FROZEN)

    @classmethod
    def paused(cls, previous: "GameState") -> "GameState":
        return cls(StateKind.PAUSED, previous=previous)

    def is_kind(self, kind: StateKind) -> bool:
        return self.kind is kind

    def matches(self, other: "GameState") -> bool:
        return (
            self.kind is other.kind
            and self.immediate == other.immediate
            and self.hard_drop == other.hard_drop
            and self.previous == other.previous
        )


class PlayerInput(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE = 2
    HARD_DROP = 3
    PAUSE = 4
    SAVE_STATE = 5
    RESUME_STATE = 6
    ROTATE_CCW = 7
    SOFT_DROP = 8


class RandomSource(Protocol):
    def randrange(self, stop: int) -> int:
        ...


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    cell_size: float = 32.0
    gravity_interval: float = 1.0
    lock_delay: float = 0.5
    clear_duration: float = 0.15
    slide_duration: float = 0.15
    game_over_duration: float = 1.0
    random_seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Board dimensions must be positive, got {self.width}x{self.height}")
        # Tallest and widest tetromino footprints are four cells.
        if self.width < 4 or self.height < 4:
            raise ValueError(f"Board must be at least 4x4 to fit every piece, got {self.width}x{self.height}")
        for name in ("cell_size", "gravity_interval", "lock_delay", "clear_duration", "slide_duration", "game_over_duration"):
            value = getattr(self, name)
            if not value > 0:
                raise ValueError(f"{name} must be positive, got {value!r}")


PAUSE_ONLY = frozenset({PlayerInput.PAUSE})
PLAY_INPUTS = frozenset(PlayerInput) - {PlayerInput.SAVE_STATE, PlayerInput.RESUME_STATE}
PAUSED_INPUTS = frozenset({PlayerInput.PAUSE, PlayerInput.SAVE_STATE, PlayerInput.RESUME_STATE})


class BoardInstance:
    """One playable board: owns the Board, the active piece and the timers.

    Call :meth:`update` once per frame. Everything the view needs afterwards
    is available through the read-only queries at the bottom of the class.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        board_id: str = "board",
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.board_id = board_id
        self.rng = random.Random(self.config.random_seed)
        self.board = Board(self.config.width, self.config.height, self.rules)
        self.timers = self._make_timers()
        self.state = GameState.ready()
        self.active_piece: Optional[Piece] = None
        self.rows_to_clear: Optional[List[int]] = None
        self._hard_drop_cells = 0
        self._sliding = False
        self._game_over_committed = False

    def _make_timers(self) -> GameTimers:
        return GameTimers(
            self.config.gravity_interval,
            self.config.lock_delay,
            self.config.clear_duration,
            self.config.slide_duration,
            self.config.game_over_duration,
        )

    def reset(self) -> None:
        self.board.reset()
        self.timers = self._make_timers()
        self.state = GameState.ready()
        self.active_piece = None
        self.rows_to_clear = None
        self._hard_drop_cells = 0
        self._sliding = False
        self._game_over_committed = False

    def update(self, dt: float, player_input: Optional[PlayerInput] = None, rng: Optional[RandomSource] = None) -> GameState:
        if dt < 0:
            raise ValueError(f"dt must be non-negative, got {dt!r}")
        kind = self.state.kind
        if kind is StateKind.READY:
            self._update_ready(dt, player_input, rng or self.rng)
        elif kind is StateKind.FALLING:
            self._update_falling(dt, player_input)
        elif kind is StateKind.LOCKING:
            self._update_locking(dt, player_input)
        elif kind is StateKind.CLEARING:
            self._update_clearing(dt, player_input)
        elif kind is StateKind.GAME_OVER:
            self._update_game_over(dt, player_input)
        elif kind is StateKind.FROZEN:
            self._handle_input(player_input, PAUSE_ONLY)
        elif kind is StateKind.PAUSED:
            self._handle_input(player_input, PAUSED_INPUTS)
        return self.state

    def _update_ready(self, dt: float, player_input: Optional[PlayerInput], rng: RandomSource) -> None:
        if self._handle_input(player_input, PAUSE_ONLY):
            return
        self._tick_slide(dt)
        if self.spawn_piece(rng):
            self._enter_falling()
        else:
            logger.info("[%s] Spawn blocked, game over with score %d", self.board_id, self.board.score)
            self.state = GameState.game_over()
            self.timers.game_over_animation.reset()

    def _update_falling(self, dt: float, player_input: Optional[PlayerInput]) -> None:
        if self._handle_input(player_input, PLAY_INPUTS):
            return
        self._tick_slide(dt)
        if self.timers.gravity.tick(dt) and not self._descend():
            self._enter_locking(hard_drop=False)

    def _update_locking(self, dt: float, player_input: Optional[PlayerInput]) -> None:
        if self.state.immediate:
            self._lock_active_piece()
            return
        if self._handle_input(player_input, PLAY_INPUTS):
            return
        piece = self.active_piece
        if piece is not None and self.board.try_place(piece, piece.position.offset(0, -1)) is PlaceResult.OK:
            self._enter_falling()
            return
        if self.timers.lock.tick(dt):
            self._lock_active_piece()

    def _update_clearing(self, dt: float, player_input: Optional[PlayerInput]) -> None:
        if self._handle_input(player_input, PAUSE_ONLY):
            return
        if self.timers.clear_animation.tick(dt):
            self._finish_clear()
            self.state = GameState.ready()

    def _update_game_over(self, dt: float, player_input: Optional[PlayerInput]) -> None:
        if not self._game_over_committed:
            self._force_commit()
        if self._handle_input(player_input, PAUSE_ONLY):
            return
        if self.timers.game_over_animation.tick(dt):
            self.state = GameState.frozen()

    def _enter_falling(self) -> None:
        self.timers.gravity.reset()
        self.timers.lock.reset()
        self.state = GameState.falling()

    def _enter_locking(self, hard_drop: bool) -> None:
        piece = self.active_piece
        immediate = piece is not None and bool(self.board.rows_filled_by(piece))
        if not self.state.is_kind(StateKind.LOCKING):
            self.timers.lock.reset()
        self.state = GameState.locking(immediate=immediate, hard_drop=hard_drop or self.state.hard_drop)

    def _lock_active_piece(self) -> None:
        piece = self.active_piece
        if piece is None:
            self.state = GameState.ready()
            return
        hard_drop = self.state.hard_drop
        _, self.rows_to_clear = self.board.commit_piece(piece)
        self.active_piece = None
        if hard_drop:
            self.board.score_drop(self._hard_drop_cells, hard=True)
        self._hard_drop_cells = 0
        if self.rows_to_clear:
            self.timers.clear_animation.reset()
            self.state = GameState.clearing()
        else:
            self.state = GameState.ready()

    def _finish_clear(self) -> None:
        rows = self.rows_to_clear or []
        self.rows_to_clear = None
        if not rows:
            return
        self.board.score_line_clear(len(rows))
        self.board.clear_rows(rows)
        self.timers.slide_animation.reset()
        self._sliding = True
        logger.debug("[%s] Cleared rows %s, score %d", self.board_id, rows, self.board.score)

    def _force_commit(self) -> None:
        self._game_over_committed = True
        piece = self.active_piece
        self.active_piece = None
        if piece is None:
            return
        for cell in piece.board_positions():
            self.board.fill_cell(cell)

    def _tick_slide(self, dt: float) -> None:
        if self._sliding and self.timers.slide_animation.tick(dt):
            self._sliding = False

    def _handle_input(self, player_input: Optional[PlayerInput], allowed: frozenset) -> bool:
        """Apply one input. Returns True when it moved the board to another phase."""
        if player_input is None or player_input not in allowed:
            return False
        before = self.state
        if player_input == PlayerInput.LEFT:
            self._shift(-1)
        elif player_input == PlayerInput.RIGHT:
            self._shift(1)
        elif player_input == PlayerInput.ROTATE:
            self._rotate(RotationDirection.CW)
        elif player_input == PlayerInput.ROTATE_CCW:
            self._rotate(RotationDirection.CCW)
        elif player_input == PlayerInput.SOFT_DROP:
            self._soft_drop()
        elif player_input == PlayerInput.HARD_DROP:
            self._hard_drop()
        elif player_input == PlayerInput.PAUSE:
            self._toggle_pause()
        elif player_input == PlayerInput.SAVE_STATE:
            self._save_state()
        elif player_input == PlayerInput.RESUME_STATE:
            self._resume_state()
        return not self.state.matches(before)

    def _shift(self, dx: int) -> bool:
        piece = self.active_piece
        if piece is None:
            return False
        return self._move_to(piece.position.offset(dx, 0))

    def _move_to(self, pos: BoardPosition) -> bool:
        piece = self.active_piece
        if piece is None or self.board.try_place(piece, pos) is not PlaceResult.OK:
            return False
        piece.position = pos
        return True

    def _rotate(self, direction: RotationDirection) -> bool:
        piece = self.active_piece
        if piece is None:
            return False
        pos = self.board.try_rotation(piece, direction)
        if pos is None:
            return False
        piece.rotate(direction)
        piece.position = pos
        return True

    def _descend(self) -> bool:
        piece = self.active_piece
        if piece is None:
            return False
        return self._move_to(piece.position.offset(0, -1))

    def _soft_drop(self) -> None:
        if self._descend():
            self.board.score_drop(1, hard=False)
            self.timers.gravity.reset()
        elif self.state.is_kind(StateKind.FALLING):
            self._enter_locking(hard_drop=False)

    def _hard_drop(self) -> None:
        piece = self.active_piece
        if piece is None:
            return
        landing, result = self.board.calculate_drop(piece)
        if not result.is_legal:
            logger.warning("[%s] Hard drop failed for %s at %s: %s", self.board_id, piece.kind.name, piece.position, result.value)
            return
        self._hard_drop_cells += piece.position.y - landing.y
        piece.position = landing
        logger.debug("[%s] Hard drop: %s to y=%d", self.board_id, piece.kind.name, landing.y)
        self._enter_locking(hard_drop=True)

    def _toggle_pause(self) -> None:
        if self.state.is_kind(StateKind.PAUSED):
            self.state = self.state.previous or GameState.ready()
            self.timers.resume_all()
        else:
            self.state = GameState.paused(self.state)
            self.timers.pause_all()

    def _save_state(self) -> None:
        self._finish_clear()
        self.board.save_state()
        self._restart_from_checkpoint()

    def _resume_state(self) -> None:
        self.rows_to_clear = None
        if not self.board.resume_state():
            logger.warning("[%s] No saved state to resume", self.board_id)
        self._restart_from_checkpoint()

    def _restart_from_checkpoint(self) -> None:
        self.active_piece = None
        self._hard_drop_cells = 0
        self._sliding = False
        self._game_over_committed = False
        self.timers.reset_all()
        self.timers.resume_all()
        self.state = GameState.ready()

    def spawn_position(self, kind: PieceType) -> BoardPosition:
        lo, hi = minmax_x(kind, 0)
        span = hi - lo + 1
        x = self.board.midpoint_x() - span // 2 - lo
        y = self.board.height - max_y(kind, 0) - 1
        return BoardPosition(x, y)

    def spawn_piece(self, rng: RandomSource) -> bool:
        kind = PieceType.from_index(rng.randrange(len(PieceType)))
        piece = Piece(kind, position=self.spawn_position(kind))
        # Kept even when blocked so the view can draw the piece that ended the game.
        self.active_piece = piece
        result = self.board.try_place(piece)
        logger.debug("[%s] Spawned %s at %s: %s", self.board_id, kind.name, piece.position, result.value)
        return result is PlaceResult.OK

    @property
    def score(self) -> int:
        return self.board.score

    def active_cells(self) -> List[BoardPosition]:
        if self.active_piece is None:
            return []
        return [c for c in self.active_piece.board_positions() if self.board.is_inside(c.x, c.y)]

    def active_color(self) -> Optional[Color]:
        return None if self.active_piece is None else self.active_piece.color

    def cells(self) -> np.ndarray:
        return self.board.cells()

    def column_heights(self) -> List[int]:
        return self.board.column_heights()

    def clear_progress(self) -> float:
        return self.timers.clear_animation.progress()

    def slide_progress(self) -> float:
        return self.timers.slide_animation.progress() if self._sliding else 0.0

    def game_over_progress(self) -> float:
        return self.timers.game_over_animation.progress()

    def get_state(self) -> np.ndarray:
        # Locked cells as 1, the active piece overlaid as -1; row 0 is the bottom
        state = self.board.cells().astype(np.int8)
        for cell in self.active_cells():
            state[cell.y, cell.x] = -1
        return state
