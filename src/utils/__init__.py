"""Utility functions for Falling Blocks."""
from .config import load_config, load_engine_config
from .logger import GameLogger, MetricsTracker, read_games

__all__ = [
    "load_config",
    "load_engine_config",
    "GameLogger",
    "MetricsTracker",
    "read_games",
]
