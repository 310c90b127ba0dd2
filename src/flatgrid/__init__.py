"""
flatgrid: dense 2D grids over a single row-major buffer

Cell (x, y) is stored at offset ``x + y * width`` of one Python list.
Provides checked and unchecked cell access, row/column/cell iteration,
fill and map transformations, and merging of optional-valued grids.
"""

from .cell import Cell
from .config import GridConfig
from .errors import GridBorrowError
from .grid import Grid

__version__ = "0.1.0"

__all__ = [
    'Cell',
    'Grid',
    'GridBorrowError',
    'GridConfig',
]
