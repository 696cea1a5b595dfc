from __future__ import annotations

from typing import List, Tuple

import numpy as np


EMPTY = 0

# (col, row, color)
CellPaint = Tuple[int, int, int]


class Board:
    """Fixed-size playfield of locked cells.

    Cells hold 0 when empty or the colour tag (tetromino index) of the piece
    that locked there. Row 0 is the top of the board.
    """

    def __init__(self, rows: int = 20, columns: int = 10) -> None:
        if rows <= 0 or columns <= 0:
            raise ValueError(f"board size must be positive, got {rows}x{columns}")
        self._rows = int(rows)
        self._columns = int(columns)
        self.grid = np.zeros((self._rows, self._columns), dtype=np.int8)

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def columns(self) -> int:
        return self._columns

    def reset(self) -> None:
        self.grid.fill(EMPTY)

    def is_inside(self, col: int, row: int) -> bool:
        return 0 <= col < self._columns and 0 <= row < self._rows

    def _check(self, row: int, col: int) -> None:
        if not self.is_inside(col, row):
            raise IndexError(f"cell ({row}, {col}) is outside the board")

    def get_cell(self, row: int, col: int) -> int:
        self._check(row, col)
        return int(self.grid[row, col])

    def set_cell(self, row: int, col: int, color: int) -> None:
        self._check(row, col)
        self.grid[row, col] = color

    def is_empty(self, row: int, col: int) -> bool:
        return self.get_cell(row, col) == EMPTY

    def is_row_full(self, row: int) -> bool:
        return bool(np.all(self.grid[row] != EMPTY))

    def clear_completed_rows(self) -> int:
        """Remove full rows, shifting everything above them down.

        Scans from the bottom up. After a removal the same index is checked
        again, since the row that slid into it has not been evaluated yet.
        """
        cleared = 0
        row = self._rows - 1
        while row >= 0:
            if self.is_row_full(row):
                self.grid[1 : row + 1] = self.grid[0:row].copy()
                self.grid[0] = EMPTY
                cleared += 1
            else:
                row -= 1
        return cleared

    def occupied_cells(self) -> List[CellPaint]:
        rows, cols = np.nonzero(self.grid)
        return [(int(c), int(r), int(self.grid[r, c])) for r, c in zip(rows, cols)]

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
