"""
Falling Piece Model.

A piece is a kind placed at an anchor (x, y) with its current rotation
stored as 4 relative offsets. Every transform returns a new piece; legality
is checked by the Field, never here.
"""
from dataclasses import dataclass
from typing import Tuple

from .shapes import Kind, Offset, get_offsets


Cell = Tuple[int, int]


@dataclass(frozen=True)
class Piece:
    """Represents a tetromino instance on the field."""
    kind: Kind
    offsets: Tuple[Offset, ...]  # Immutable tuple of (dx, dy) offsets
    x: int
    y: int

    @classmethod
    def spawn(cls, kind: Kind, x: int, y: int) -> "Piece":
        """
        Create a piece whose topmost cell sits exactly on row y.

        Args:
            kind: Kind to spawn
            x: Anchor column
            y: Row the highest cell should occupy

        Returns:
            New piece in spawn orientation
        """
        offsets = get_offsets(kind)
        top = max(dy for _, dy in offsets)
        return cls(Kind(kind), offsets, x, y - top)

    @classmethod
    def empty(cls) -> "Piece":
        """The "no active piece" sentinel."""
        return cls(Kind.EMPTY, get_offsets(Kind.EMPTY), 0, 0)

    def is_empty(self) -> bool:
        return self.kind == Kind.EMPTY

    def cell(self, i: int) -> Cell:
        """Absolute coordinate of offset i."""
        dx, dy = self.offsets[i]
        return self.x + dx, self.y + dy

    @property
    def cells(self) -> Tuple[Cell, ...]:
        """All 4 absolute coordinates."""
        return tuple((self.x + dx, self.y + dy) for dx, dy in self.offsets)

    def translate(self, dx: int, dy: int) -> "Piece":
        return Piece(self.kind, self.offsets, self.x + dx, self.y + dy)

    def left(self) -> "Piece":
        return self.translate(-1, 0)

    def right(self) -> "Piece":
        return self.translate(1, 0)

    def down(self) -> "Piece":
        return self.translate(0, -1)

    def rotate_clockwise(self) -> "Piece":
        """Rotate a quarter turn clockwise about the anchor: (dx, dy) -> (dy, -dx)."""
        offsets = tuple((dy, -dx) for dx, dy in self.offsets)
        return Piece(self.kind, offsets, self.x, self.y)

    def rotate_counterclockwise(self) -> "Piece":
        """Rotate a quarter turn counterclockwise about the anchor: (dx, dy) -> (-dy, dx)."""
        offsets = tuple((-dy, dx) for dx, dy in self.offsets)
        return Piece(self.kind, offsets, self.x, self.y)

    def __repr__(self) -> str:
        if self.is_empty():
            return "Piece(EMPTY)"
        return f"Piece({self.kind.name} at ({self.x}, {self.y}))"
