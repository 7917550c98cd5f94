from __future__ import annotations

from typing import Sequence

import numpy as np

from blockblast.game import Board, Color, Shape, ShapeCatalog, ShapeTemplate, ShapeType


def board_from_art(rows: Sequence[str], color: Color = Color.RED) -> Board:
    """Build a board from rows like "##..####" ('#' filled, '.' empty)."""
    board = Board(len(rows))
    for r, line in enumerate(rows):
        assert len(line) == board.size, f"row {r} has width {len(line)}"
        for c, ch in enumerate(line):
            if ch == "#":
                board.grid[r, c] = int(color)
    return board


def make_shape(matrix, color: Color = Color.GREEN, kind: ShapeType = ShapeType.SINGLE, shape_id: str = "test-1") -> Shape:
    return Shape(id=shape_id, kind=kind, matrix=np.array(matrix, dtype=np.int8), color=color)


def single_template_catalog(matrix, kind: ShapeType = ShapeType.SINGLE, color: Color = Color.GREEN, seed: int = 0) -> ShapeCatalog:
    template = ShapeTemplate(kind, np.array(matrix, dtype=np.int8), color)
    return ShapeCatalog(templates=[template], seed=seed)
