"""
Tetromino Shape Catalog.

This module defines the 7 tetromino kinds plus the EMPTY sentinel.
Each kind is represented as 4 (dx, dy) offsets around the rotation anchor,
with y increasing upward.
"""
from enum import IntEnum
from typing import Dict, List, Tuple
import numpy as np


Offset = Tuple[int, int]


class Kind(IntEnum):
    """Piece identity. EMPTY marks unoccupied cells and "no active piece"."""
    EMPTY = 0
    I = 1
    O = 2
    T = 3
    J = 4
    L = 5
    S = 6
    Z = 7


# =============================================================================
# OFFSET TABLES
# =============================================================================

SHAPES: Dict[Kind, Tuple[Offset, ...]] = {
    Kind.I: ((0, -1), (0, 0), (0, 1), (0, 2)),    # vertical bar
    Kind.O: ((0, 0), (1, 0), (0, 1), (1, 1)),     # square
    Kind.T: ((-1, 0), (0, 0), (1, 0), (0, -1)),   # T pointing down
    Kind.J: ((-1, -1), (0, -1), (0, 0), (0, 1)),
    Kind.L: ((1, -1), (0, -1), (0, 0), (0, 1)),
    Kind.S: ((0, -1), (0, 0), (-1, 0), (-1, 1)),
    Kind.Z: ((0, -1), (0, 0), (1, 0), (1, 1)),
    Kind.EMPTY: ((0, 0), (0, 0), (0, 0), (0, 0)),
}

# Render-only attribute, passed through to whoever draws the field
COLORS: Dict[Kind, Tuple[int, int, int]] = {
    Kind.I: (102, 224, 255),
    Kind.O: (255, 224, 102),
    Kind.T: (200, 119, 255),
    Kind.J: (106, 119, 255),
    Kind.L: (255, 158, 94),
    Kind.S: (94, 224, 142),
    Kind.Z: (255, 102, 119),
    Kind.EMPTY: (0, 0, 0),
}

# Kinds that can be dealt during play
SOLID_KINDS: List[Kind] = [k for k in Kind if k != Kind.EMPTY]
NUM_KINDS: int = len(SOLID_KINDS)

assert NUM_KINDS == 7, f"Expected 7 tetrominoes, got {NUM_KINDS}"


def get_offsets(kind: Kind) -> Tuple[Offset, ...]:
    """Get the spawn-orientation offsets of a kind."""
    return SHAPES[Kind(kind)]


def get_color(kind: Kind) -> Tuple[int, int, int]:
    """Get the display color of a kind."""
    return COLORS[Kind(kind)]


def get_kind_by_name(name: str) -> Kind:
    """Get a kind by its letter ("I", "O", ...)."""
    key = name.upper()
    if key not in Kind.__members__:
        raise ValueError(f"Unknown kind: {name}. Valid kinds: {list(Kind.__members__)}")
    return Kind[key]


def random_kind(rng: np.random.Generator) -> Kind:
    """
    Pick one of the 7 solid kinds with uniform probability.

    Args:
        rng: Random source owned by the caller (never a global generator)

    Returns:
        A solid Kind, never EMPTY
    """
    return SOLID_KINDS[int(rng.integers(NUM_KINDS))]
