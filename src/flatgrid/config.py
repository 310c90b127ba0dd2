"""Grid behaviour switches.

Grids default to the standard preset: linear-offset bounds checking in
``get``/``get_mut`` and runtime borrow tracking for views.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class GridConfig:
    """Parameters controlling checked access and view tracking.

    Attributes:
        strict_bounds: Check ``0 <= x < width and 0 <= y < height`` in
            ``get``/``get_mut`` instead of only the linear offset. With the
            default (False) an ``x`` past the row end aliases into the next row.
        track_borrows: Invalidate live iterators and cell handles when the
            grid is filled, cleared or consumed.
    """

    strict_bounds: bool = False
    track_borrows: bool = True

    @classmethod
    def standard(cls) -> 'GridConfig':
        """Default configuration (offset-only bounds, tracked borrows)."""
        return cls()

    @classmethod
    def strict(cls) -> 'GridConfig':
        """Per-axis bounds checking in ``get``/``get_mut``."""
        return cls(strict_bounds=True)
