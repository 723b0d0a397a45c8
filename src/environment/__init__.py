"""Reinforcement learning environment for Falling Blocks."""
from .falling_blocks_env import FallingBlocksEnv, ACTION_COMMANDS

__all__ = [
    "FallingBlocksEnv",
    "ACTION_COMMANDS",
]
