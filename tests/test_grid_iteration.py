"""Tests for row, column and cell iteration.

Covers read-only and writable iterators, row/column range checks and
restartability of iteration.
"""

import pytest
from flatgrid import Cell, Grid


@pytest.fixture
def grid():
    """4x3 grid holding its own linear offsets."""
    return Grid.from_vec(list(range(12)), 4)


class TestCellIteration:
    """Test whole-grid iteration."""

    def test_iter_row_major(self, grid):
        """iter visits row 0 left to right, then row 1, ..."""
        assert list(grid.iter()) == list(range(12))

    def test_iter_restartable(self, grid):
        """Calling iter again starts over."""
        assert list(grid.iter()) == list(grid.iter())
        assert list(grid) == list(range(12))

    def test_iter_mut(self, grid):
        """Writable handles cover every cell and write through."""
        for cell in grid.iter_mut():
            cell.value = cell.value * 2

        assert grid.flatten() == [value * 2 for value in range(12)]

    def test_iter_mut_yields_cells(self, grid):
        cells = list(grid.iter_mut())

        assert all(isinstance(cell, Cell) for cell in cells)
        assert [cell.offset for cell in cells] == list(range(12))

    def test_enumerate(self, grid):
        """enumerate pairs coordinates with values."""
        pairs = list(grid.enumerate())

        assert pairs[0] == ((0, 0), 0)
        assert pairs[5] == ((1, 1), 5)
        assert pairs[-1] == ((3, 2), 11)

    def test_iter_empty(self):
        """Empty grids yield nothing."""
        assert list(Grid.new(0, 0).iter()) == []


class TestRowIteration:
    """Test row views."""

    @pytest.mark.parametrize("row", [0, 1, 2])
    def test_iter_row_matches_buffer(self, grid, row):
        """A row is the contiguous slice [row*width, row*width+width)."""
        values = list(grid.iter_row(row))

        assert len(values) == grid.width
        assert values == grid.flatten()[row * 4:row * 4 + 4]

    def test_iter_row_mut(self, grid):
        """Writing through a row touches only that row."""
        for cell in grid.iter_row_mut(1):
            cell.value = -1

        assert grid.flatten() == [0, 1, 2, 3, -1, -1, -1, -1, 8, 9, 10, 11]

    def test_row_out_of_range(self, grid):
        """Rows outside [0, height) raise IndexError."""
        with pytest.raises(IndexError, match="Row 3 out of range"):
            grid.iter_row(3)

        with pytest.raises(IndexError):
            grid.iter_row(-1)

        with pytest.raises(IndexError):
            grid.iter_row_mut(3)


class TestColumnIteration:
    """Test strided column views."""

    @pytest.mark.parametrize("col", [0, 1, 2, 3])
    def test_iter_col_matches_buffer(self, grid, col):
        """A column is every width-th element starting at col."""
        values = list(grid.iter_col(col))

        assert len(values) == grid.height
        assert values == grid.flatten()[col::4]

    def test_iter_col_mut(self, grid):
        """Writing through a column touches only that column."""
        for cell in grid.iter_col_mut(2):
            cell.value = None

        assert grid.flatten() == [0, 1, None, 3, 4, 5, None, 7, 8, 9, None, 11]

    def test_col_positions(self, grid):
        """Column handles report their coordinates."""
        positions = [cell.position for cell in grid.iter_col_mut(1)]
        assert positions == [(1, 0), (1, 1), (1, 2)]

    def test_col_out_of_range(self, grid):
        """Columns outside [0, width) raise IndexError."""
        with pytest.raises(IndexError, match="Column 4 out of range"):
            grid.iter_col(4)

        with pytest.raises(IndexError):
            grid.iter_col(-1)

        with pytest.raises(IndexError):
            grid.iter_col_mut(4)

    def test_single_row_column(self):
        """Columns of a one-row grid have a single element."""
        grid = Grid.from_vec(["a", "b", "c"], 3)
        assert list(grid.iter_col(1)) == ["b"]
