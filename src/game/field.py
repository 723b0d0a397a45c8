"""
Playing Field Module.

This module implements the playing field with:
- width x height grid of settled kinds (10x22 by default)
- Bounds and occupancy queries
- Piece placement validation and locking
- Row compaction (line clearing)
- Height map and hole counting for reward shaping
"""
from typing import List
import numpy as np

from .piece import Piece
from .shapes import Kind


class Field:
    """
    Represents the playing field.

    The grid is a 2D numpy array of shape (height, width) indexed [y, x],
    where row 0 is the bottom row and each cell holds a Kind value:
    - 0 = empty cell
    - 1..7 = cell settled by a piece of that kind
    """

    DEFAULT_WIDTH = 10
    DEFAULT_HEIGHT = 22

    def __init__(self, width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT):
        """Initialize an empty field."""
        if width < 4 or height < 4:
            raise ValueError(f"Field must be at least 4x4, got {width}x{height}")
        self.width = width
        self.height = height
        self.grid = np.zeros((height, width), dtype=np.int8)
        self._total_blocks = 0

    def copy(self) -> "Field":
        """Create a deep copy of this field."""
        new_field = Field(self.width, self.height)
        new_field.grid = self.grid.copy()
        new_field._total_blocks = self._total_blocks
        return new_field

    def reset(self) -> None:
        """Clear the field."""
        self.grid.fill(0)
        self._total_blocks = 0

    @property
    def total_blocks(self) -> int:
        """Return total number of occupied cells."""
        return self._total_blocks

    def get_cell(self, x: int, y: int) -> Kind:
        """Get the kind settled in a cell."""
        return Kind(int(self.grid[y, x]))

    def in_bounds(self, x: int, y: int) -> bool:
        """Check if coordinates are within field bounds."""
        return 0 <= x < self.width and 0 <= y < self.height

    def is_occupied(self, x: int, y: int) -> bool:
        """Check if an in-bounds cell holds a settled block."""
        return self.grid[y, x] != 0

    def can_place(self, piece: Piece) -> bool:
        """
        Check if a piece fits at its current position.

        This is the single gate for spawning, moving and rotating: the caller
        installs the piece as active only when this returns True.

        Args:
            piece: Candidate piece

        Returns:
            True if all 4 cells are in bounds and unoccupied
        """
        width, height = self.width, self.height
        grid = self.grid
        for x, y in piece.cells:
            # Check bounds (inlined for speed)
            if x < 0 or x >= width or y < 0 or y >= height:
                return False
            if grid[y, x] != 0:
                return False
        return True

    def lock(self, piece: Piece) -> None:
        """
        Write a piece's kind into its 4 cells.

        Args:
            piece: Piece whose position is already known to be legal

        Raises:
            ValueError: If the piece is the empty sentinel or leaves the field
        """
        if piece.is_empty():
            raise ValueError("Cannot lock the empty piece")
        for x, y in piece.cells:
            if not self.in_bounds(x, y):
                raise ValueError(f"Cannot lock {piece!r}: cell ({x}, {y}) is out of bounds")

        for x, y in piece.cells:
            if self.grid[y, x] == 0:
                self._total_blocks += 1
            self.grid[y, x] = int(piece.kind)

    def find_complete_lines(self) -> List[int]:
        """Return indices of rows with every column occupied, bottom first."""
        full = np.all(self.grid != 0, axis=1)
        return [int(y) for y in np.flatnonzero(full)]

    def clear_completed_lines(self) -> int:
        """
        Remove every complete row and compact the field.

        Each removed row drops all rows above it by one; vacated rows at the
        top are filled with EMPTY. Rows below a cleared row are untouched.

        Returns:
            Number of rows cleared in this pass
        """
        rows = self.find_complete_lines()
        lines = len(rows)
        if lines == 0:
            return 0

        kept = np.delete(self.grid, rows, axis=0)
        self.grid = np.vstack([
            kept,
            np.zeros((lines, self.width), dtype=np.int8),
        ])
        self._total_blocks -= lines * self.width
        return lines

    def get_height_map(self) -> np.ndarray:
        """
        Get the height of each column (one above its topmost occupied cell).
        Useful for heuristic evaluation.
        """
        heights = np.zeros(self.width, dtype=np.int32)
        for x in range(self.width):
            occupied = np.flatnonzero(self.grid[:, x])
            if occupied.size:
                heights[x] = occupied[-1] + 1
        return heights

    def count_holes(self) -> int:
        """
        Count empty cells that have an occupied cell somewhere above them
        in the same column. These can only be reached by clearing lines.
        """
        heights = self.get_height_map()
        holes = 0
        for x in range(self.width):
            column = self.grid[:heights[x], x]
            holes += int(np.count_nonzero(column == 0))
        return holes

    def get_state(self) -> np.ndarray:
        """Get the field grid as a numpy array."""
        return self.grid.copy()

    def set_state(self, state: np.ndarray) -> None:
        """Set the field grid from a numpy array."""
        if state.shape != (self.height, self.width):
            raise ValueError(
                f"Expected grid of shape {(self.height, self.width)}, got {state.shape}"
            )
        self.grid = state.astype(np.int8, copy=True)
        self._total_blocks = int(np.count_nonzero(self.grid))

    def to_tensor(self) -> np.ndarray:
        """Convert field occupancy to a float tensor for neural network input."""
        return (self.grid != 0).astype(np.float32)

    def __repr__(self) -> str:
        return f"Field(width={self.width}, height={self.height}, blocks={self._total_blocks})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Field):
            return False
        return np.array_equal(self.grid, other.grid)

    def __hash__(self) -> int:
        return hash(self.grid.tobytes())
