from __future__ import annotations

from typing import Iterable, Optional

import numpy as np

from .shapes import Color, Shape


class Board:
    """Square grid of cells for block placement.

    The grid uses 0 for empty cells and a positive ``Color`` value for
    occupied cells. The board never validates placements itself; callers go
    through ``rules.can_place`` first.
    """

    def __init__(self, size: int = 8) -> None:
        self.size = int(size)
        self.grid = np.zeros((self.size, self.size), dtype=np.int8)

    def reset(self) -> None:
        self.grid.fill(0)

    def is_in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def cell_at(self, row: int, col: int) -> Optional[Color]:
        """Color of the block at (row, col), or None when empty"""
        v = int(self.grid[row, col])
        return Color(v) if v else None

    def is_empty(self, row: int, col: int) -> bool:
        return self.grid[row, col] == 0

    def place(self, shape: Shape, row: int, col: int) -> int:
        """
        Write the shape's filled cells and return how many were written.
        Assumes position is already validated.
        """
        value = int(shape.color)
        for i, j in shape.cells:
            self.grid[row + i, col + j] = value
        return shape.size

    def clear_cells(self, rows: Iterable[int], cols: Iterable[int]) -> int:
        """Empty every cell in any of ``rows`` or ``cols``; returns cells emptied"""
        mask = np.zeros_like(self.grid, dtype=np.bool_)
        mask[list(rows), :] = True
        mask[:, list(cols)] = True
        emptied = int(np.count_nonzero(self.grid[mask]))
        self.grid[mask] = 0
        return emptied

    def filled_count(self) -> int:
        return int(np.count_nonzero(self.grid))

    def get_filled_ratio(self) -> float:
        return self.filled_count() / float(self.size * self.size)

    def clone(self) -> "Board":
        """Create an independent copy of the board"""
        new_board = Board(self.size)
        new_board.grid = self.grid.copy()
        return new_board

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.size == other.size and bool(np.array_equal(self.grid, other.grid))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Board(size={self.size}, filled={self.filled_count()})"
