from __future__ import annotations

from enum import IntEnum

import numpy as np

from .pieces import Piece


class CellState(IntEnum):
    EMPTY = 0
    ACTIVE = 1  # falling piece, only ever present in overlays
    LOCKED = 2


class GameGrid:
    """Row-major playfield of locked cells, origin top-left.

    The stored array only holds EMPTY and LOCKED; the falling piece is drawn
    on top of a copy (see `FallingBlocksGame.get_state`). Any non-zero cell
    counts as filled.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"grid dimensions must be positive, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def reset(self) -> None:
        self.grid.fill(CellState.EMPTY)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def collides(self, piece: Piece) -> bool:
        """True if any set cell of `piece` is below the floor, past a wall, or on a filled cell.

        Cells above row 0 are treated as free; pieces never move upward.
        """
        for x, y in piece.cells():
            if y >= self.height or x < 0 or x >= self.width:
                return True
            if y >= 0 and self.grid[y, x] != CellState.EMPTY:
                return True
        return False

    def merge(self, piece: Piece) -> int:
        """Lock `piece` into the grid at its current position and return the number of cells written.

        The position must already have passed `collides`.
        """
        written = 0
        for x, y in piece.cells():
            if y >= 0:
                self.grid[y, x] = CellState.LOCKED
                written += 1
        return written

    def filled_rows(self) -> np.ndarray:
        return np.where(np.all(self.grid != CellState.EMPTY, axis=1))[0]

    def clear_lines(self) -> int:
        full_rows = self.filled_rows()
        if full_rows.size == 0:
            return 0
        num = int(full_rows.size)
        # Drop full rows and pad with empty rows at the top
        kept = np.delete(self.grid, full_rows, axis=0)
        new_rows = np.zeros((num, self.width), dtype=np.int8)
        self.grid = np.vstack((new_rows, kept))
        return num

    def get_max_height(self) -> int:
        # y=0 is top; find first non-empty from top
        non_empty_rows = np.where(np.any(self.grid != CellState.EMPTY, axis=1))[0]
        if non_empty_rows.size == 0:
            return 0
        return self.height - int(non_empty_rows[0])

    def count_holes(self) -> int:
        holes = 0
        for x in range(self.width):
            seen_block = False
            for cell in self.grid[:, x]:
                if cell != CellState.EMPTY:
                    seen_block = True
                elif seen_block:
                    holes += 1
        return holes

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
