from __future__ import annotations

import random
from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from falling_blocks.game import BoardInstance, GameConfig, PlayerInput, StateKind


STATE_KINDS = list(StateKind)


def action_to_input(action: int) -> Optional[PlayerInput]:
    """Action 0 is "no input"; action i maps to ``PlayerInput(i - 1)``."""
    action = int(action)
    if action <= 0:
        return None
    return PlayerInput(action - 1)


class FallingBlocksEnv(gym.Env):
    """One board ticked by a fixed ``step_dt`` per environment step.

    Reward is the change in the board's score. The episode terminates once the
    board reaches game over and is truncated after ``max_episode_steps``.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        step_dt: float = 1.0 / 30.0,
        max_episode_steps: int = 10000,
    ) -> None:
        super().__init__()
        if step_dt < 0:
            raise ValueError(f"step_dt must be non-negative, got {step_dt!r}")
        self.game = BoardInstance(config)
        self.render_mode = render_mode
        self.step_dt = float(step_dt)
        self.max_episode_steps = int(max_episode_steps)
        self._rng = random.Random()
        self._steps = 0

        h, w = self.game.config.height, self.game.config.width
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=-1, high=1, shape=(h, w), dtype=np.int8),
                "state": spaces.Discrete(len(STATE_KINDS)),
            }
        )
        self.action_space = spaces.Discrete(len(PlayerInput) + 1)

    def _get_obs(self) -> Dict[str, Any]:
        return {
            "grid": self.game.get_state(),
            "state": STATE_KINDS.index(self.game.state.kind),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.game.score,
            "lines_cleared": self.game.board.lines_cleared,
            "state": self.game.state.kind.value,
            "steps": self._steps,
        }

    def _is_over(self) -> bool:
        kind = self.game.state.kind
        if kind is StateKind.PAUSED and self.game.state.previous is not None:
            kind = self.game.state.previous.kind
        return kind in (StateKind.GAME_OVER, StateKind.FROZEN)

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self._rng = random.Random(int(self.np_random.integers(0, 2**31 - 1)))
        self.game.reset()
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        before = self.game.score
        self.game.update(self.step_dt, action_to_input(action), self._rng)
        self._steps += 1
        reward = float(self.game.score - before)
        terminated = self._is_over()
        truncated = self._steps >= self.max_episode_steps
        return self._get_obs(), reward, terminated, truncated, self._get_info()

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        state = self.game.get_state()
        cell = 12
        h, w = state.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        color = self.game.active_color() or (70, 200, 120)
        for y in range(h):
            # Images run top to bottom; board row 0 is the floor.
            row = h - 1 - y
            for x in range(w):
                v = int(state[y, x])
                rgb = (30, 30, 36) if v == 0 else ((200, 200, 200) if v > 0 else color)
                img[row * cell : (row + 1) * cell, x * cell : (x + 1) * cell, :] = rgb
        return img

    def close(self) -> None:
        pass
