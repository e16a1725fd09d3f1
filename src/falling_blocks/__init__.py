"""Falling-block puzzle rules engine with a gymnasium adapter."""

from .game import BoardInstance, GameConfig, GameState, PlayerInput, StateKind

__version__ = "0.1.0"

__all__ = ["BoardInstance", "GameConfig", "GameState", "PlayerInput", "StateKind", "__version__"]
