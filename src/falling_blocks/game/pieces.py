from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntEnum
from typing import List, Tuple

import numpy as np


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    L = 6
    J = 7

    @classmethod
    def from_index(cls, index: int) -> "TetrominoType":
        """Map a 0-based draw (0..6) onto a kind, in I, O, T, S, Z, L, J order."""
        return cls(index + 1)


Shape = np.ndarray


def _frozen(shape: Shape) -> Shape:
    out = np.array(shape, dtype=np.int8, copy=True)
    out.setflags(write=False)
    return out


def rotate_cw(shape: Shape) -> Shape:
    """Rotate clockwise: ``new[j][rows-1-i] = old[i][j]``; a (rows, cols) matrix becomes (cols, rows)."""
    return _frozen(np.rot90(shape, 1, axes=(1, 0)))


def rotate_ccw(shape: Shape) -> Shape:
    """Rotate counter-clockwise: ``new[cols-1-j][i] = old[i][j]``. Exact inverse of `rotate_cw`."""
    return _frozen(np.rot90(shape, 1, axes=(0, 1)))


BASE_SHAPES = {
    TetrominoType.I: _frozen([[1, 1, 1, 1]]),
    TetrominoType.O: _frozen([[1, 1], [1, 1]]),
    TetrominoType.T: _frozen([[0, 1, 0], [1, 1, 1]]),
    TetrominoType.S: _frozen([[0, 1, 1], [1, 1, 0]]),
    TetrominoType.Z: _frozen([[1, 1, 0], [0, 1, 1]]),
    TetrominoType.L: _frozen([[1, 0, 0], [1, 1, 1]]),
    TetrominoType.J: _frozen([[0, 0, 1], [1, 1, 1]]),
}


@dataclass(frozen=True, eq=False)
class Piece:
    """A tetromino on the board.

    `shape` is the current rotation's matrix and is the source of truth;
    `rotation` (0..3) is only a counter. (`x`, `y`) is the top-left corner of
    the shape's bounding box in board coordinates. Moves and rotations return
    new pieces so a rejected candidate can simply be dropped.
    """

    kind: TetrominoType
    shape: Shape
    x: int
    y: int
    rotation: int = 0

    @classmethod
    def spawn(cls, kind: TetrominoType, board_width: int) -> "Piece":
        return cls(kind=kind, shape=BASE_SHAPES[kind], x=board_width // 2 - 1, y=0)

    @property
    def height(self) -> int:
        return int(self.shape.shape[0])

    @property
    def width(self) -> int:
        return int(self.shape.shape[1])

    def moved(self, dx: int, dy: int) -> "Piece":
        return replace(self, x=self.x + dx, y=self.y + dy)

    def rotated(self, clockwise: bool = True) -> "Piece":
        if clockwise:
            return replace(self, shape=rotate_cw(self.shape), rotation=(self.rotation + 1) % 4)
        return replace(self, shape=rotate_ccw(self.shape), rotation=(self.rotation - 1) % 4)

    def cells(self) -> List[Tuple[int, int]]:
        cells: List[Tuple[int, int]] = []
        for dy in range(self.height):
            for dx in range(self.width):
                if self.shape[dy, dx]:
                    cells.append((self.x + dx, self.y + dy))
        return cells
