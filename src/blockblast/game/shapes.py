from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np


class Color(IntEnum):
    """Block colors. Zero is reserved for empty board cells."""

    YELLOW = 1
    BLUE = 2
    GREEN = 3
    RED = 4
    ORANGE = 5
    PURPLE = 6
    CYAN = 7


COLOR_HEX: Dict[Color, str] = {
    Color.YELLOW: "#ffff00",
    Color.BLUE: "#00f0ff",
    Color.GREEN: "#00ff41",
    Color.RED: "#ff003c",
    Color.ORANGE: "#ffbd00",
    Color.PURPLE: "#bf00ff",
    Color.CYAN: "#00ffff",
}


class ShapeType(IntEnum):
    """Enumeration of catalog shape types (fixed orientation)"""
    SINGLE = 0
    LINE2_H = 1
    LINE2_V = 2
    LINE3_H = 3
    LINE3_V = 4
    LINE4_H = 5
    LINE4_V = 6
    SQUARE = 7
    CORNER_NE = 8  # missing top-right cell
    CORNER_NW = 9
    CORNER_SE = 10
    CORNER_SW = 11
    T_DOWN = 12
    T_UP = 13
    T_RIGHT = 14
    T_LEFT = 15


Matrix = np.ndarray


def _matrix(rows: Sequence[Sequence[int]]) -> Matrix:
    m = np.array(rows, dtype=np.int8)
    m.setflags(write=False)
    return m


@dataclass(frozen=True, eq=False)
class ShapeTemplate:
    kind: ShapeType
    matrix: Matrix
    color: Color


SHAPE_TEMPLATES: Tuple[ShapeTemplate, ...] = (
    ShapeTemplate(ShapeType.SINGLE, _matrix([[1]]), Color.YELLOW),
    ShapeTemplate(ShapeType.LINE2_H, _matrix([[1, 1]]), Color.BLUE),
    ShapeTemplate(ShapeType.LINE2_V, _matrix([[1], [1]]), Color.BLUE),
    ShapeTemplate(ShapeType.LINE3_H, _matrix([[1, 1, 1]]), Color.GREEN),
    ShapeTemplate(ShapeType.LINE3_V, _matrix([[1], [1], [1]]), Color.GREEN),
    ShapeTemplate(ShapeType.LINE4_H, _matrix([[1, 1, 1, 1]]), Color.RED),
    ShapeTemplate(ShapeType.LINE4_V, _matrix([[1], [1], [1], [1]]), Color.RED),
    ShapeTemplate(ShapeType.SQUARE, _matrix([[1, 1], [1, 1]]), Color.ORANGE),
    ShapeTemplate(ShapeType.CORNER_NE, _matrix([[1, 0], [1, 1]]), Color.PURPLE),
    ShapeTemplate(ShapeType.CORNER_NW, _matrix([[0, 1], [1, 1]]), Color.PURPLE),
    ShapeTemplate(ShapeType.CORNER_SE, _matrix([[1, 1], [1, 0]]), Color.PURPLE),
    ShapeTemplate(ShapeType.CORNER_SW, _matrix([[1, 1], [0, 1]]), Color.PURPLE),
    ShapeTemplate(ShapeType.T_DOWN, _matrix([[1, 1, 1], [0, 1, 0]]), Color.CYAN),
    ShapeTemplate(ShapeType.T_UP, _matrix([[0, 1, 0], [1, 1, 1]]), Color.CYAN),
    ShapeTemplate(ShapeType.T_RIGHT, _matrix([[1, 0], [1, 1], [1, 0]]), Color.CYAN),
    ShapeTemplate(ShapeType.T_LEFT, _matrix([[0, 1], [1, 1], [0, 1]]), Color.CYAN),
)


@dataclass(frozen=True, eq=False)
class Shape:
    """A pre-oriented polyomino instance living in the tray.

    Identity is the ``id``; two shapes of the same kind are different tray
    entries. The matrix is a read-only copy and is never mutated.
    """

    id: str
    kind: ShapeType
    matrix: Matrix
    color: Color
    cells: Tuple[Tuple[int, int], ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        m = np.array(self.matrix, dtype=np.int8)
        if m.ndim != 2 or m.size == 0:
            raise ValueError(f"shape matrix must be a non-empty 2D array, got shape {m.shape}")
        if not np.isin(m, (0, 1)).all():
            raise ValueError("shape matrix entries must be 0 or 1")
        if not m.any():
            raise ValueError("shape matrix must contain at least one filled cell")
        m.setflags(write=False)
        object.__setattr__(self, "matrix", m)
        cells = tuple((int(i), int(j)) for i, j in np.argwhere(m))
        object.__setattr__(self, "cells", cells)

    @property
    def size(self) -> int:
        """Number of filled cells."""
        return len(self.cells)

    @property
    def height(self) -> int:
        return int(self.matrix.shape[0])

    @property
    def width(self) -> int:
        return int(self.matrix.shape[1])


class ShapeCatalog:
    """Static shape templates plus a seeded sampler for tray refills"""

    def __init__(
        self,
        templates: Optional[Sequence[ShapeTemplate]] = None,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
    ) -> None:
        self.templates: Tuple[ShapeTemplate, ...] = tuple(templates) if templates is not None else SHAPE_TEMPLATES
        if not self.templates:
            raise ValueError("shape catalog needs at least one template")
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self._ids = itertools.count(1)

    def reseed(self, seed: Optional[int]) -> None:
        """Restart the template draws from ``seed``; ids keep counting up"""
        self.rng = np.random.default_rng(seed)

    def make_shape(self, template: ShapeTemplate) -> Shape:
        """Instantiate a template with a fresh identifier"""
        return Shape(
            id=f"{template.kind.name.lower()}-{next(self._ids)}",
            kind=template.kind,
            matrix=template.matrix,
            color=template.color,
        )

    def sample(self, count: int) -> List[Shape]:
        """Draw ``count`` shapes uniformly with replacement"""
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        picks = self.rng.integers(0, len(self.templates), size=count)
        return [self.make_shape(self.templates[int(i)]) for i in picks]

    def template_for(self, kind: ShapeType) -> ShapeTemplate:
        for template in self.templates:
            if template.kind == kind:
                return template
        raise KeyError(kind)
