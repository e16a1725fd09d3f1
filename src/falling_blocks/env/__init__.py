"""Gymnasium environments for the falling-block board."""

from __future__ import annotations

from gymnasium.envs.registration import register

from .falling_blocks_env import FallingBlocksEnv, action_to_input

# Register the default 10x20 board
register(
    id="FallingBlocks-10x20-v0",
    entry_point="falling_blocks.env.falling_blocks_env:FallingBlocksEnv",
)

ENV_ID = "FallingBlocks-10x20-v0"

__all__ = ["ENV_ID", "FallingBlocksEnv", "action_to_input"]
