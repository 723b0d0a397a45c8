"""
Tests for the playing field.
"""
import pytest
import numpy as np
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from game.field import Field
from game.piece import Piece
from game.shapes import Kind, SOLID_KINDS


def fill_row(grid: np.ndarray, y: int, kind: Kind = Kind.I, skip=()) -> None:
    """Occupy every column of a row except those in skip."""
    for x in range(grid.shape[1]):
        if x not in skip:
            grid[y, x] = int(kind)


class TestFieldBasics:
    """Test basic field operations."""

    def test_field_creation(self):
        """Default field is 10x22 and empty."""
        field = Field()
        assert field.width == 10
        assert field.height == 22
        assert field.grid.shape == (22, 10)
        assert field.total_blocks == 0
        assert np.all(field.grid == 0)

    def test_field_custom_size(self):
        """Custom sizes are honoured."""
        field = Field(width=6, height=12)
        assert field.grid.shape == (12, 6)

    def test_field_too_small(self):
        """Fields smaller than a tetromino are rejected."""
        with pytest.raises(ValueError):
            Field(width=3, height=10)

    def test_field_reset(self):
        """Reset empties the grid."""
        field = Field()
        field.lock(Piece.spawn(Kind.O, 0, 1))
        field.reset()
        assert field.total_blocks == 0
        assert np.all(field.grid == 0)

    def test_field_copy(self):
        """Copies are independent."""
        field = Field()
        field.lock(Piece.spawn(Kind.O, 0, 1))

        copy = field.copy()
        assert copy == field

        copy.lock(Piece.spawn(Kind.O, 4, 1))
        assert field.total_blocks == 4
        assert copy.total_blocks == 8
        assert copy != field


class TestBoundsAndOccupancy:
    """Test bounds and occupancy queries."""

    def test_in_bounds(self):
        """Corners are inside, one past them is not."""
        field = Field()
        assert field.in_bounds(0, 0)
        assert field.in_bounds(9, 21)
        assert not field.in_bounds(-1, 0)
        assert not field.in_bounds(10, 0)
        assert not field.in_bounds(0, 22)
        assert not field.in_bounds(0, -1)

    def test_is_occupied(self):
        """Occupancy reflects locked cells only."""
        field = Field()
        assert not field.is_occupied(5, 0)
        field.lock(Piece.spawn(Kind.O, 5, 1))
        assert field.is_occupied(5, 0)
        assert field.is_occupied(6, 1)
        assert not field.is_occupied(7, 0)


class TestCanPlace:
    """Test the placement gate."""

    def test_can_place_empty_field(self):
        """Spawn positions fit on an empty field."""
        field = Field()
        for kind in SOLID_KINDS:
            assert field.can_place(Piece.spawn(kind, 5, 21))

    def test_out_of_bounds_left_right(self):
        """Pieces hanging over a wall are rejected."""
        field = Field()
        assert not field.can_place(Piece.spawn(Kind.O, 9, 21))
        assert not field.can_place(Piece.spawn(Kind.T, 0, 21))

    def test_out_of_bounds_top_bottom(self):
        """Pieces above the top or below the floor are rejected."""
        field = Field()
        assert not field.can_place(Piece.spawn(Kind.O, 5, 22))
        assert not field.can_place(Piece.spawn(Kind.O, 5, 1).down())

    def test_collision(self):
        """Overlapping a settled cell is rejected."""
        field = Field()
        field.lock(Piece.spawn(Kind.O, 5, 1))
        assert not field.can_place(Piece.spawn(Kind.O, 6, 2))
        assert field.can_place(Piece.spawn(Kind.O, 5, 3))

    def test_rejection_does_not_mutate(self):
        """A failed check leaves the field untouched."""
        field = Field()
        field.lock(Piece.spawn(Kind.O, 5, 1))
        before = field.get_state()

        field.can_place(Piece.spawn(Kind.O, 5, 1))
        field.can_place(Piece.spawn(Kind.O, 20, 1))

        assert np.array_equal(field.grid, before)

    def test_matches_cellwise_definition(self):
        """can_place agrees with per-cell bounds and occupancy checks."""
        rng = np.random.default_rng(7)
        field = Field()
        state = np.where(rng.random((22, 10)) < 0.3, int(Kind.S), 0).astype(np.int8)
        field.set_state(state)

        for _ in range(300):
            kind = SOLID_KINDS[int(rng.integers(len(SOLID_KINDS)))]
            piece = Piece.spawn(kind, int(rng.integers(-2, 12)), int(rng.integers(-2, 24)))
            expected = all(
                field.in_bounds(x, y) and not field.is_occupied(x, y)
                for x, y in piece.cells
            )
            assert field.can_place(piece) == expected


class TestLock:
    """Test locking pieces into the field."""

    def test_lock_writes_kind(self):
        """Locked cells hold the piece's kind."""
        field = Field()
        field.lock(Piece.spawn(Kind.O, 5, 1))

        for x, y in [(5, 0), (6, 0), (5, 1), (6, 1)]:
            assert field.get_cell(x, y) == Kind.O
        assert field.total_blocks == 4

    def test_lock_empty_piece(self):
        """The sentinel cannot be locked."""
        field = Field()
        with pytest.raises(ValueError):
            field.lock(Piece.empty())

    def test_lock_out_of_bounds(self):
        """Locking outside the field is a caller error and writes nothing."""
        field = Field()
        with pytest.raises(ValueError):
            field.lock(Piece.spawn(Kind.O, 9, 1))
        assert field.total_blocks == 0


class TestLineClearing:
    """Test row compaction."""

    def test_no_lines(self):
        """Nothing to clear returns 0."""
        field = Field()
        field.lock(Piece.spawn(Kind.O, 5, 1))
        assert field.clear_completed_lines() == 0
        assert field.total_blocks == 4

    def test_clear_bottom_row(self):
        """Rows above a cleared row drop by one."""
        field = Field()
        grid = np.zeros((22, 10), dtype=np.int8)
        fill_row(grid, 0)
        grid[1, 0] = int(Kind.T)
        grid[2, 3] = int(Kind.Z)
        field.set_state(grid)

        assert field.find_complete_lines() == [0]
        assert field.clear_completed_lines() == 1

        assert field.get_cell(0, 0) == Kind.T
        assert field.get_cell(3, 1) == Kind.Z
        assert field.total_blocks == 2
        assert np.all(field.grid[21] == 0)

    def test_rows_below_untouched(self):
        """Only rows above the cleared one move."""
        field = Field()
        grid = np.zeros((22, 10), dtype=np.int8)
        grid[0, 1] = int(Kind.S)
        grid[1, 2] = int(Kind.L)
        fill_row(grid, 2)
        grid[3, 4] = int(Kind.O)
        grid[21, 9] = int(Kind.J)
        field.set_state(grid)

        assert field.clear_completed_lines() == 1

        assert np.array_equal(field.grid[0], grid[0])
        assert np.array_equal(field.grid[1], grid[1])
        assert field.get_cell(4, 2) == Kind.O
        assert field.get_cell(9, 20) == Kind.J
        assert np.all(field.grid[21] == 0)

    def test_clear_multiple_rows(self):
        """Non-adjacent complete rows are cleared in one pass."""
        field = Field()
        grid = np.zeros((22, 10), dtype=np.int8)
        fill_row(grid, 0)
        grid[1, 5] = int(Kind.T)
        fill_row(grid, 2)
        field.set_state(grid)

        assert field.clear_completed_lines() == 2
        assert field.get_cell(5, 0) == Kind.T
        assert field.total_blocks == 1
        assert np.all(field.grid[1:] == 0)

    def test_clear_four_rows(self):
        """Four stacked rows clear together."""
        field = Field()
        grid = np.zeros((22, 10), dtype=np.int8)
        for y in range(4):
            fill_row(grid, y)
        grid[4, 0] = int(Kind.I)
        field.set_state(grid)

        assert field.clear_completed_lines() == 4
        assert field.get_cell(0, 0) == Kind.I
        assert field.total_blocks == 1

    def test_partial_row_not_cleared(self):
        """A row with one gap stays."""
        field = Field()
        grid = np.zeros((22, 10), dtype=np.int8)
        fill_row(grid, 0, skip=(7,))
        field.set_state(grid)

        assert field.clear_completed_lines() == 0
        assert np.array_equal(field.grid, grid)


class TestFieldAnalysis:
    """Test analysis helpers."""

    def test_height_map(self):
        """Height is one above the topmost settled cell."""
        field = Field()
        field.lock(Piece.spawn(Kind.O, 5, 1))
        heights = field.get_height_map()

        assert heights[5] == 2
        assert heights[6] == 2
        assert heights[0] == 0

    def test_count_holes(self):
        """Covered empty cells count as holes."""
        field = Field()
        grid = np.zeros((22, 10), dtype=np.int8)
        grid[2, 0] = int(Kind.I)
        field.set_state(grid)

        assert field.count_holes() == 2

    def test_to_tensor(self):
        """Tensor is a float occupancy mask."""
        field = Field()
        field.lock(Piece.spawn(Kind.O, 0, 1))
        tensor = field.to_tensor()

        assert tensor.dtype == np.float32
        assert tensor.sum() == 4.0

    def test_set_state_wrong_shape(self):
        """Grids of the wrong size are rejected."""
        field = Field()
        with pytest.raises(ValueError):
            field.set_state(np.zeros((10, 10), dtype=np.int8))
