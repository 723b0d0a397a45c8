"""Game engine module for Falling Blocks."""
from .shapes import Kind, SOLID_KINDS, get_offsets, get_color, get_kind_by_name, random_kind
from .piece import Piece
from .field import Field
from .engine import (
    GameEngine, GameStatus, GameSnapshot, Command, EngineConfig,
    MoveResult, SimulatedClock,
)

__all__ = [
    "Kind",
    "SOLID_KINDS",
    "get_offsets",
    "get_color",
    "get_kind_by_name",
    "random_kind",
    "Piece",
    "Field",
    "GameEngine",
    "GameStatus",
    "GameSnapshot",
    "Command",
    "EngineConfig",
    "MoveResult",
    "SimulatedClock",
]
