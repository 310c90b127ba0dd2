"""Dense 2D grid stored in a single row-major list.

Cell (x, y) lives at linear offset ``x + y * width`` of the backing buffer.
Rows are contiguous slices of the buffer, columns are strided with stride
``width``. The grid owns its buffer; iterators and ``Cell`` handles borrow it
and are invalidated (``GridBorrowError``) by ``set``, fill, clear and
consuming operations.
"""

import copy
import itertools
import logging
from typing import (Any, Callable, Generic, Iterable, Iterator, List, Optional,
                    Sequence, Tuple, TypeVar)

import numpy as np

from .cell import Cell
from .config import GridConfig
from .errors import GridBorrowError

logger = logging.getLogger(__name__)

T = TypeVar('T')
U = TypeVar('U')


class Grid(Generic[T]):
    """Fixed-size 2D grid of arbitrary values.

    Attributes:
        width: Number of columns
        height: Number of rows
        data: Row-major backing list, ``len(data) == width * height``
        config: Bounds and borrow-tracking behaviour
    """

    def __init__(self, width: int, height: int, data: Optional[List[T]] = None,
                 *, config: Optional[GridConfig] = None):
        """Initialize grid over an existing buffer.

        Prefer the ``new``, ``init`` and ``from_vec`` constructors.

        Args:
            width: Grid width (cells)
            height: Grid height (cells)
            data: Row-major buffer taken over by the grid; all ``None`` if omitted
            config: Behaviour switches (``GridConfig.standard()`` if omitted)

        Raises:
            ValueError: If dimensions are negative or data length doesn't match
        """
        if width < 0 or height < 0:
            raise ValueError(f"Grid dimensions must be non-negative, got {width}x{height}")

        if data is None:
            data = [None] * (width * height)
        elif len(data) != width * height:
            raise ValueError(f"Buffer length {len(data)} doesn't match grid size {width}x{height}")

        self.width = width
        self.height = height
        self.data = data
        self.config = config if config is not None else GridConfig.standard()
        self._generation = 0

        logger.debug(f"Created grid {width}x{height}")

    # Construction

    @classmethod
    def new(cls, width: int, height: int, default: Optional[Callable[[], T]] = None,
            *, config: Optional[GridConfig] = None) -> 'Grid[T]':
        """Create a grid with every cell set to a default value.

        Args:
            width: Grid width (cells)
            height: Grid height (cells)
            default: Zero-argument factory called once per cell (e.g. ``int``,
                ``list``); cells are ``None`` when omitted
            config: Behaviour switches

        Returns:
            Grid: New fully-initialized grid
        """
        if default is None:
            return cls(width, height, config=config)
        return cls(width, height, [default() for _ in range(width * height)], config=config)

    @classmethod
    def init(cls, width: int, height: int, value: T,
             *, config: Optional[GridConfig] = None) -> 'Grid[T]':
        """Create a grid with every cell holding a copy of ``value``.

        Each cell gets its own shallow copy, so mutable values are not shared.
        """
        return cls(width, height, [copy.copy(value) for _ in range(width * height)], config=config)

    @classmethod
    def from_vec(cls, values: Iterable[T], width: int,
                 *, config: Optional[GridConfig] = None) -> 'Grid[T]':
        """Create a grid from a row-major sequence.

        Height is derived as ``len(values) // width``.

        Args:
            values: Row-major cell values (materialised into a list the grid owns)
            width: Grid width, must be positive

        Returns:
            Grid: New grid over the values

        Raises:
            ValueError: If width is not positive or the length is not an exact
                multiple of width. This is a caller bug; values are never
                truncated or padded.
        """
        data = list(values)
        if width <= 0:
            raise ValueError(f"Grid width must be positive, got {width}")
        if len(data) % width != 0:
            raise ValueError(f"Sequence length {len(data)} is not a multiple of width {width}")
        return cls(width, len(data) // width, data, config=config)

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence[T]],
                  *, config: Optional[GridConfig] = None) -> 'Grid[T]':
        """Create a grid from a list of equal-length rows.

        Raises:
            ValueError: If rows have different lengths
        """
        rows = [list(row) for row in rows]
        width = len(rows[0]) if rows else 0
        for y, row in enumerate(rows):
            if len(row) != width:
                raise ValueError(f"Row {y} has length {len(row)}, expected {width}")
        data = [value for row in rows for value in row]
        return cls(width, len(rows), data, config=config)

    @classmethod
    def from_array(cls, array: np.ndarray,
                   *, config: Optional[GridConfig] = None) -> 'Grid':
        """Create a grid from a 2D numpy array of shape (height, width).

        Raises:
            ValueError: If the array is not two-dimensional
        """
        array = np.asarray(array)
        if array.ndim != 2:
            raise ValueError(f"Array must be 2D, got shape {array.shape}")
        height, width = array.shape
        return cls(width, height, array.ravel().tolist(), config=config)

    # Access

    def _offset(self, x: int, y: int) -> Optional[int]:
        """Linear offset of (x, y), or None if it falls outside the grid."""
        if self.config.strict_bounds:
            if not (0 <= x < self.width and 0 <= y < self.height):
                return None
            return x + y * self.width

        # Only the linear offset is checked: x past the row end aliases into the next row
        if x < 0 or y < 0:
            return None
        offset = x + y * self.width
        if offset >= len(self.data):
            return None
        return offset

    def get(self, x: int, y: int, default: Optional[T] = None) -> Optional[T]:
        """Get cell value at coordinates.

        With the standard config only the linear offset ``x + y * width`` is
        bounds-checked, so on a 3x2 grid ``get(3, 0)`` returns cell (0, 1)
        while ``get(0, 2)`` is absent. Use ``GridConfig.strict()`` to reject
        any ``x >= width``.

        Args:
            x: X coordinate (column)
            y: Y coordinate (row)
            default: Returned when the location is absent

        Returns:
            Cell value, or ``default`` if out of bounds
        """
        offset = self._offset(x, y)
        if offset is None:
            return default
        return self.data[offset]

    def get_mut(self, x: int, y: int) -> Optional[Cell]:
        """Get a writable handle on the cell at coordinates.

        Same bounds semantics as ``get``.

        Returns:
            Cell handle, or None if out of bounds
        """
        offset = self._offset(x, y)
        if offset is None:
            return None
        return Cell(self, offset, self._borrow())

    def get_unchecked(self, x: int, y: int) -> T:
        """Get cell value without bounds checking.

        The caller guarantees ``0 <= x < width`` and ``0 <= y < height``.
        Otherwise the result is unspecified: another cell, or an IndexError
        from the buffer.
        """
        return self.data[x + y * self.width]

    def get_unchecked_mut(self, x: int, y: int) -> Cell:
        """Writable handle on a cell without bounds checking.

        Same caller contract as ``get_unchecked``.
        """
        return Cell(self, x + y * self.width, self._borrow())

    def set(self, x: int, y: int, value: T) -> None:
        """Set cell value at coordinates.

        Invalidates live iterators and cell handles; write through a
        ``Cell`` to update the grid while iterating.

        Raises:
            IndexError: If coordinates are out of bounds
        """
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Coordinates ({x}, {y}) out of bounds for {self.width}x{self.height} grid")
        self.data[x + y * self.width] = value
        self._invalidate()

    def size(self) -> Tuple[int, int]:
        """Get (width, height)."""
        return (self.width, self.height)

    def rows(self) -> int:
        """Number of rows (== height)."""
        return self.height

    def cols(self) -> int:
        """Number of columns (== width)."""
        return self.width

    def is_empty(self) -> bool:
        """Check if the backing buffer holds no cells."""
        return not self.data

    # Borrow tracking

    def _borrow(self) -> Optional[int]:
        if not self.config.track_borrows:
            return None
        return self._generation

    def _check_generation(self, generation: Optional[int]) -> None:
        if generation is not None and generation != self._generation:
            raise GridBorrowError("Grid was filled, cleared or consumed while a view was live")

    def _invalidate(self) -> None:
        self._generation += 1

    def _tracked(self, items: Iterator[Any]) -> Iterator[Any]:
        """Wrap an iterator so it fails once the grid is invalidated.

        The generation is captured here, at call time, not on first ``next``.
        """
        generation = self._borrow()
        if generation is None:
            return items
        return self._checked(items, generation)

    def _checked(self, items: Iterator[Any], generation: int) -> Iterator[Any]:
        for item in items:
            self._check_generation(generation)
            yield item
        self._check_generation(generation)

    def _cells(self, offsets: Iterable[int]) -> Iterator[Cell]:
        generation = self._borrow()
        cells = (Cell(self, offset, generation) for offset in offsets)
        if generation is None:
            return cells
        return self._checked(cells, generation)

    # Iteration

    def _row_range(self, row: int) -> range:
        if not (0 <= row < self.height):
            raise IndexError(f"Row {row} out of range for grid with {self.height} rows")
        start = row * self.width
        return range(start, start + self.width)

    def _col_range(self, col: int) -> range:
        if not (0 <= col < self.width):
            raise IndexError(f"Column {col} out of range for grid with {self.width} columns")
        return range(col, len(self.data), self.width)

    def iter(self) -> Iterator[T]:
        """Iterate cell values in row-major order."""
        return self._tracked(iter(self.data))

    def iter_mut(self) -> Iterator[Cell]:
        """Iterate writable cell handles in row-major order."""
        return self._cells(range(len(self.data)))

    def iter_row(self, row: int) -> Iterator[T]:
        """Iterate the ``width`` values of one row, left to right.

        Raises:
            IndexError: If row is not in ``[0, height)``
        """
        offsets = self._row_range(row)
        return self._tracked(itertools.islice(self.data, offsets.start, offsets.stop))

    def iter_row_mut(self, row: int) -> Iterator[Cell]:
        """Iterate writable handles on one row.

        Raises:
            IndexError: If row is not in ``[0, height)``
        """
        return self._cells(self._row_range(row))

    def iter_col(self, col: int) -> Iterator[T]:
        """Iterate the ``height`` values of one column, top to bottom.

        Raises:
            IndexError: If col is not in ``[0, width)``
        """
        offsets = self._col_range(col)
        return self._tracked(itertools.islice(self.data, offsets.start, None, offsets.step))

    def iter_col_mut(self, col: int) -> Iterator[Cell]:
        """Iterate writable handles on one column.

        Raises:
            IndexError: If col is not in ``[0, width)``
        """
        return self._cells(self._col_range(col))

    def enumerate(self) -> Iterator[Tuple[Tuple[int, int], T]]:
        """Iterate ``((x, y), value)`` pairs in row-major order."""
        width = self.width
        items = (((offset % width, offset // width), value)
                 for offset, value in enumerate(self.data))
        return self._tracked(items)

    # Bulk operations

    def fill(self, value: T) -> None:
        """Overwrite every cell with a copy of ``value``."""
        self.data[:] = [copy.copy(value) for _ in range(len(self.data))]
        self._invalidate()

    def fill_with(self, producer: Callable[[], T]) -> None:
        """Overwrite every cell with ``producer()``, called once per cell in row-major order."""
        for offset in range(len(self.data)):
            self.data[offset] = producer()
        self._invalidate()

    def map(self, transform: Callable[[T], U]) -> 'Grid[U]':
        """Consume the grid, applying ``transform`` to every cell.

        Cells are passed to ``transform`` in row-major order. The source grid
        is left empty (0x0) afterwards and its views are invalidated.

        Returns:
            Grid: New grid of the same size holding the transformed values
        """
        width, height = self.width, self.height
        data = [transform(value) for value in self.data]
        self._release()
        logger.debug(f"Mapped grid {width}x{height}")
        return Grid(width, height, data, config=self.config)

    def flatten(self) -> List[T]:
        """Backing buffer in row-major order (not a copy).

        Writes through the returned list must not change its length.
        """
        return self.data

    def into_vec(self) -> List[T]:
        """Consume the grid, returning its backing buffer.

        The source grid is left empty (0x0) afterwards.
        """
        data = self.data
        self._release()
        logger.debug(f"Released buffer of {len(data)} cells")
        return data

    def clear(self) -> None:
        """Reset to a 0x0 grid with an empty buffer."""
        self.width = 0
        self.height = 0
        self.data.clear()
        self._invalidate()
        logger.debug("Cleared grid")

    def _release(self) -> None:
        """Put the grid in the moved-from state without touching the old buffer."""
        self.width = 0
        self.height = 0
        self.data = []
        self._invalidate()

    def copy(self) -> 'Grid[T]':
        """Create an independent grid holding the same cell values."""
        return Grid(self.width, self.height, list(self.data), config=self.config)

    def to_array(self, dtype: Any = None) -> np.ndarray:
        """Get grid as a numpy array of shape (height, width).

        Intended for scalar cells; the array holds a copy of the values.
        """
        return np.array(self.data, dtype=dtype).reshape(self.height, self.width)

    # Merge

    def or_(self, other: 'Grid[Optional[T]]') -> 'Grid[Optional[T]]':
        """Merge two same-sized grids of optional values, cell by cell.

        Each result cell is this grid's cell unless it is None, in which case
        it is ``other``'s cell (which may itself be None). Both operands are
        consumed.

        Raises:
            ValueError: If the grids differ in width or height
        """
        if self.size() != other.size():
            raise ValueError(f"Cannot merge {self.width}x{self.height} grid "
                             f"with {other.width}x{other.height} grid")

        width, height = self.width, self.height
        data = [mine if mine is not None else theirs
                for mine, theirs in zip(self.data, other.data)]
        self._release()
        other._release()
        logger.debug(f"Merged grids {width}x{height}")
        return Grid(width, height, data, config=self.config)

    # Python protocols

    def __or__(self, other: object) -> 'Grid':
        if not isinstance(other, Grid):
            return NotImplemented
        return self.or_(other)

    def __getitem__(self, key: Tuple[int, int]) -> T:
        """Access cell value using grid[x, y] syntax."""
        x, y = key
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Coordinates ({x}, {y}) out of bounds for {self.width}x{self.height} grid")
        return self.data[x + y * self.width]

    def __setitem__(self, key: Tuple[int, int], value: T) -> None:
        """Set cell value using grid[x, y] = value syntax."""
        x, y = key
        self.set(x, y, value)

    def __len__(self) -> int:
        return len(self.data)

    def __iter__(self) -> Iterator[T]:
        return self.iter()

    def __eq__(self, other: object) -> bool:
        """Check equality with another grid."""
        if not isinstance(other, Grid):
            return False
        return (self.width == other.width and
                self.height == other.height and
                self.data == other.data)

    def __str__(self) -> str:
        """String representation showing cell values."""
        lines = []
        for y in range(min(10, self.height)):  # Show first 10 rows
            cells = [str(value) for value in itertools.islice(self.iter_row(y), 20)]
            line = ' '.join(cells)
            if self.width > 20:
                line += ' ...'
            lines.append(line)

        if self.height > 10:
            lines.append('...')

        return '\n'.join(lines)

    def __repr__(self) -> str:
        return f"Grid({self.width}x{self.height}, cells={len(self.data)})"
