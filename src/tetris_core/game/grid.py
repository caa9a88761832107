from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from .pieces import Piece, Position


class Board:
    """Fixed-size grid of locked cells.

    The grid uses 0 for empty cells and the piece kind's token (1-7) for
    occupied cells. Row 0 is the top. Boards are treated as values: every
    transformation returns a new Board and leaves the original untouched.
    """

    def __init__(self, grid: np.ndarray) -> None:
        assert grid.ndim == 2, f"board grid must be 2-D, got shape {grid.shape}"
        self.grid = grid
        self.height, self.width = (int(n) for n in grid.shape)

    @classmethod
    def create_empty(cls, width: int = 10, height: int = 20) -> "Board":
        return cls(np.zeros((int(height), int(width)), dtype=np.int8))

    @property
    def shape(self) -> Tuple[int, int]:
        return self.height, self.width

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def cell(self, x: int, y: int) -> int:
        return int(self.grid[y, x])

    def is_occupied(self, x: int, y: int) -> bool:
        return self.grid[y, x] != 0

    def copy(self) -> "Board":
        return Board(self.grid.copy())

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()

    def get_max_height(self) -> int:
        # y=0 is top; find first non-empty from top
        non_empty_rows = np.where(np.any(self.grid != 0, axis=1))[0]
        if non_empty_rows.size == 0:
            return 0
        return self.height - int(non_empty_rows[0])

    def count_holes(self) -> int:
        holes = 0
        for x in range(self.width):
            seen_block = False
            for cell in self.grid[:, x]:
                if cell != 0:
                    seen_block = True
                elif seen_block:
                    holes += 1
        return holes

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return np.array_equal(self.grid, other.grid)

    def __repr__(self) -> str:
        return f"Board(width={self.width}, height={self.height}, filled={int(np.count_nonzero(self.grid))})"


def is_valid(board: Board, piece: Piece, position: Optional[Position] = None) -> bool:
    """Whether ``piece`` may sit at ``position`` (default: its own position).

    Cells above the top edge are allowed so pieces can spawn and rotate
    partially out of view.
    """
    x0, y0 = position if position is not None else piece.position
    for x, y in piece.cells_at(x0, y0):
        if x < 0 or x >= board.width or y >= board.height:
            return False
        if y >= 0 and board.grid[y, x] != 0:
            return False
    return True


def merge(board: Board, piece: Piece) -> Board:
    """Stamp the piece's in-bounds cells onto a copy of ``board``."""
    merged = board.copy()
    for x, y in piece.cells():
        if merged.is_inside(x, y):
            merged.grid[y, x] = piece.token
    return merged


def clear_lines(board: Board) -> Tuple[Board, int]:
    """Remove full rows and pad with empty rows at the top."""
    full = np.all(board.grid != 0, axis=1)
    cleared = int(full.sum())
    if cleared == 0:
        return board.copy(), 0
    survivors = board.grid[~full]
    new_rows = np.zeros((cleared, board.width), dtype=board.grid.dtype)
    return Board(np.vstack((new_rows, survivors))), cleared
