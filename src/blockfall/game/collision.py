from __future__ import annotations

from typing import Optional

from .grid import EMPTY, Board
from .pieces import Piece, Shape


def collides(board: Board, piece: Piece, dx: int = 0, dy: int = 0, shape: Optional[Shape] = None) -> bool:
    """Return True if `piece` moved by (dx, dy), optionally with `shape`, overlaps walls, floor or locked cells.

    Cells above the top edge (row < 0) are still checked against the side
    walls but never against board contents.
    """
    for col, row in piece.cells_at(piece.x + dx, piece.y + dy, shape):
        if col < 0 or col >= board.columns or row >= board.rows:
            return True
        if row < 0:
            continue
        if board.grid[row, col] != EMPTY:
            return True
    return False
