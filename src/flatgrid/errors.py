"""Exceptions raised by flatgrid.

Precondition violations use the built-in ``ValueError`` and ``IndexError``;
the only library-specific error is the one signalling an invalidated view.
"""


class GridBorrowError(RuntimeError):
    """A view outlived a direct write, bulk or consuming change to its grid.

    Raised by iterators and ``Cell`` handles on their next step or access
    after ``set``, ``fill``, ``fill_with``, ``clear``, ``map``, ``into_vec`` or ``or_``
    ran against the grid they were taken from.
    """
