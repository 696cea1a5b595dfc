from __future__ import annotations

import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Optional, Tuple

import numpy as np


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


Shape = np.ndarray
Color = Tuple[int, int, int]


def _shape(rows: List[List[int]]) -> Shape:
    arr = np.array(rows, dtype=np.int8)
    arr.setflags(write=False)
    return arr


BASE_SHAPES: Dict[TetrominoType, Shape] = {
    TetrominoType.I: _shape([[1, 1, 1, 1]]),
    TetrominoType.O: _shape([[1, 1], [1, 1]]),
    TetrominoType.T: _shape([[0, 1, 0], [1, 1, 1]]),
    TetrominoType.S: _shape([[0, 1, 1], [1, 1, 0]]),
    TetrominoType.Z: _shape([[1, 1, 0], [0, 1, 1]]),
    TetrominoType.J: _shape([[1, 0, 0], [1, 1, 1]]),
    TetrominoType.L: _shape([[0, 0, 1], [1, 1, 1]]),
}

COLORS: Dict[TetrominoType, Color] = {
    TetrominoType.I: (0, 240, 240),
    TetrominoType.O: (240, 240, 0),
    TetrominoType.T: (160, 0, 240),
    TetrominoType.S: (0, 240, 0),
    TetrominoType.Z: (240, 0, 0),
    TetrominoType.J: (0, 0, 240),
    TetrominoType.L: (240, 160, 0),
}


def color_for_value(v: int) -> Color:
    """RGB for a board value; negative values mark the falling piece."""
    try:
        return COLORS[TetrominoType(abs(v))]
    except ValueError:
        return (20, 20, 26)


def rotate_shape(shape: Shape) -> Shape:
    # transpose, then reverse each row: a clockwise quarter turn
    return np.ascontiguousarray(shape.T[:, ::-1])


@dataclass
class Piece:
    kind: TetrominoType
    shape: Shape
    x: int = 0
    y: int = 0

    @property
    def color(self) -> int:
        return int(self.kind)

    @property
    def width(self) -> int:
        return int(self.shape.shape[1])

    @property
    def height(self) -> int:
        return int(self.shape.shape[0])

    def cells_at(self, origin_x: int, origin_y: int, shape: Optional[Shape] = None) -> List[Tuple[int, int]]:
        s = self.shape if shape is None else shape
        h, w = s.shape
        cells: List[Tuple[int, int]] = []
        for dy in range(h):
            for dx in range(w):
                if s[dy, dx]:
                    cells.append((origin_x + dx, origin_y + dy))
        return cells

    def cells(self) -> List[Tuple[int, int]]:
        return self.cells_at(self.x, self.y)


class PieceCatalog:
    """The seven tetrominoes and a uniform random source of new pieces."""

    def __init__(self, columns: int = 10, rng: Optional[random.Random] = None) -> None:
        self.columns = columns
        self.rng = rng or random.Random()
        self.kinds = list(TetrominoType)

    def create(self, kind: TetrominoType) -> Piece:
        shape = BASE_SHAPES[kind].copy()
        x = self.columns // 2 - shape.shape[1] // 2
        return Piece(kind=kind, shape=shape, x=x, y=0)

    def random_piece(self) -> Piece:
        return self.create(self.rng.choice(self.kinds))
