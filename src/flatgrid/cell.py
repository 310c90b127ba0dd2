"""Mutable handle onto a single grid slot."""

from typing import Any, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .grid import Grid


class Cell:
    """Read/write access to one slot of a grid's backing buffer.

    Returned by ``get_mut``, ``get_unchecked_mut`` and the ``*_mut`` iterators.
    Writes go straight into the grid's buffer. A handle is invalidated by any
    bulk or consuming operation on its grid (see ``GridBorrowError``).
    """

    __slots__ = ("_grid", "offset", "_generation")

    def __init__(self, grid: 'Grid', offset: int, generation: Optional[int] = None):
        self._grid = grid
        self.offset = offset
        self._generation = generation

    @property
    def value(self) -> Any:
        self._grid._check_generation(self._generation)
        return self._grid.data[self.offset]

    @value.setter
    def value(self, new_value: Any) -> None:
        self._grid._check_generation(self._generation)
        self._grid.data[self.offset] = new_value

    def get(self) -> Any:
        """Current value of the slot."""
        return self.value

    def set(self, new_value: Any) -> None:
        """Overwrite the slot."""
        self.value = new_value

    @property
    def position(self):
        """(x, y) coordinate of the slot."""
        width = self._grid.width
        if width == 0:
            return (self.offset, 0)
        return (self.offset % width, self.offset // width)

    def __repr__(self) -> str:
        data = self._grid.data
        if self.offset < len(data):
            return f"Cell(offset={self.offset}, value={data[self.offset]!r})"
        return f"Cell(offset={self.offset})"
