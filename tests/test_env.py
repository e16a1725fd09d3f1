from __future__ import annotations

import gymnasium as gym
import numpy as np

from falling_blocks.env import ENV_ID, FallingBlocksEnv, action_to_input
from falling_blocks.game import BoardPosition, GameConfig, PlayerInput
from falling_blocks.rl.random_agent import run_random


HARD_DROP = int(PlayerInput.HARD_DROP) + 1


def test_action_mapping():
    assert action_to_input(0) is None
    assert action_to_input(1) is PlayerInput.LEFT
    assert action_to_input(HARD_DROP) is PlayerInput.HARD_DROP
    assert action_to_input(len(PlayerInput)) is PlayerInput.SOFT_DROP


def test_registered_env_resets_to_empty_board():
    env = gym.make(ENV_ID)
    obs, info = env.reset(seed=0)
    assert obs["grid"].shape == (20, 10)
    assert obs["grid"].dtype == np.int8
    assert not obs["grid"].any()
    assert info["score"] == 0
    assert env.action_space.n == len(PlayerInput) + 1
    env.close()


def test_hard_dropping_in_place_ends_the_episode_with_positive_reward():
    env = FallingBlocksEnv()
    env.reset(seed=3)
    total = 0.0
    terminated = False
    for step in range(3000):
        action = HARD_DROP if step % 2 else 0
        obs, reward, terminated, truncated, info = env.step(action)
        total += reward
        assert not truncated
        if terminated:
            break
    assert terminated
    assert total > 0
    assert total == info["score"]
    assert obs["grid"].any()


def test_same_seed_replays_the_same_episode():
    grids = []
    for _ in range(2):
        env = FallingBlocksEnv()
        env.reset(seed=11)
        for step in range(200):
            obs, *_ = env.step(HARD_DROP if step % 3 == 0 else 0)
        grids.append(obs["grid"])
    np.testing.assert_array_equal(grids[0], grids[1])


def test_truncates_after_max_episode_steps():
    env = FallingBlocksEnv(max_episode_steps=5)
    env.reset(seed=0)
    for _ in range(4):
        assert env.step(0)[3] is False
    assert env.step(0)[3] is True


def test_rgb_render_is_upright():
    env = FallingBlocksEnv(GameConfig(width=4, height=6), render_mode="rgb_array")
    env.reset(seed=0)
    env.game.board.fill_cell(BoardPosition(0, 0))
    img = env.render()
    assert img.shape == (6 * 12, 4 * 12, 3)
    # Board row 0 is drawn in the bottom band of the image.
    assert tuple(img[-1, 0]) == (200, 200, 200)
    assert tuple(img[0, 0]) == (30, 30, 36)
    assert FallingBlocksEnv().render() is None


def test_random_agent_runs():
    assert isinstance(run_random(steps=100, seed=0), float)
