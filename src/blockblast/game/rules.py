from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Sequence, Tuple

import numpy as np

from .board import Board
from .shapes import Color, Shape

if TYPE_CHECKING:
    from .core import GameConfig


Lines = Tuple[Tuple[int, ...], Tuple[int, ...]]


def can_place(board: Board, shape: Shape, start_row: int, start_col: int) -> bool:
    """Check whether every filled cell of ``shape`` lands in bounds on an empty cell.

    Pure; safe to call speculatively for previews and game-over search.
    """
    grid = board.grid
    size = board.size
    for i, j in shape.cells:
        row = start_row + i
        col = start_col + j
        if row < 0 or row >= size or col < 0 or col >= size:
            return False
        if grid[row, col] != 0:
            return False
    return True


def valid_placements(board: Board, shape: Shape) -> List[Tuple[int, int]]:
    """All (row, col) offsets where ``shape`` can be placed"""
    return [
        (row, col)
        for row in range(board.size)
        for col in range(board.size)
        if can_place(board, shape, row, col)
    ]


def detect_full_lines(board: Board) -> Lines:
    """Indices of fully occupied rows and columns, each sorted ascending"""
    filled = board.grid != 0
    rows = tuple(int(r) for r in np.flatnonzero(np.all(filled, axis=1)))
    cols = tuple(int(c) for c in np.flatnonzero(np.all(filled, axis=0)))
    return rows, cols


def is_game_over(board: Board, tray: Sequence[Shape]) -> bool:
    # An empty tray is awaiting refill, never terminal.
    if len(tray) == 0:
        return False
    for shape in tray:
        for row in range(board.size):
            for col in range(board.size):
                if can_place(board, shape, row, col):
                    return False
    return True


@dataclass(frozen=True)
class ClearEvent:
    """Outcome of one placement that completed at least one line.

    ``score`` is the clearing bonus only, not the placement points.
    """

    rows: Tuple[int, ...]
    cols: Tuple[int, ...]
    color: Color
    combo: int
    score: int


@dataclass
class ScoringRules:
    placement_points: int = 1
    line_clear_points: int = 10

    @classmethod
    def from_config(cls, config: GameConfig) -> "ScoringRules":
        return cls(placement_points=config.placement_points, line_clear_points=config.line_clear_points)

    def placement_score(self, cells_placed: int) -> int:
        return int(cells_placed * self.placement_points)

    def clear_bonus(self, combo: int) -> int:
        if combo <= 0:
            return 0
        return int(combo * self.line_clear_points)

    def score_for_placement(self, cells_placed: int, combo: int) -> Tuple[int, int]:
        """(base, bonus) for a single placement"""
        return self.placement_score(cells_placed), self.clear_bonus(combo)
