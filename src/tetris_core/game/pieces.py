from __future__ import annotations

import random
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Dict, List, Optional, Tuple

import numpy as np


class TetrominoType(IntEnum):
    I = 1
    J = 2
    L = 3
    O = 4
    S = 5
    T = 6
    Z = 7


Shape = np.ndarray
Position = Tuple[int, int]


# Square bounding boxes so that rotating four times is the identity.
BASE_SHAPES: Dict[TetrominoType, Shape] = {
    TetrominoType.I: np.array([[0, 0, 0, 0], [1, 1, 1, 1], [0, 0, 0, 0], [0, 0, 0, 0]], dtype=np.int8),
    TetrominoType.J: np.array([[1, 0, 0], [1, 1, 1], [0, 0, 0]], dtype=np.int8),
    TetrominoType.L: np.array([[0, 0, 1], [1, 1, 1], [0, 0, 0]], dtype=np.int8),
    TetrominoType.O: np.array([[1, 1], [1, 1]], dtype=np.int8),
    TetrominoType.S: np.array([[0, 1, 1], [1, 1, 0], [0, 0, 0]], dtype=np.int8),
    TetrominoType.T: np.array([[0, 1, 0], [1, 1, 1], [0, 0, 0]], dtype=np.int8),
    TetrominoType.Z: np.array([[1, 1, 0], [0, 1, 1], [0, 0, 0]], dtype=np.int8),
}

COLORS: Dict[TetrominoType, str] = {
    TetrominoType.I: "#00f0f0",
    TetrominoType.J: "#0000f0",
    TetrominoType.L: "#f0a000",
    TetrominoType.O: "#f0f000",
    TetrominoType.S: "#00f000",
    TetrominoType.T: "#a000f0",
    TetrominoType.Z: "#f00000",
}


def base_shape(kind: TetrominoType) -> Shape:
    shape = BASE_SHAPES[kind].copy()
    shape.flags.writeable = False
    return shape


def spawn_position(kind: TetrominoType, board_width: int) -> Position:
    """Center the shape horizontally on the board, top row on row 0."""
    w = BASE_SHAPES[kind].shape[1]
    return board_width // 2 - w // 2, 0


@dataclass(frozen=True, eq=False)
class Piece:
    kind: TetrominoType
    shape: Shape
    x: int = 0
    y: int = 0

    @classmethod
    def spawn(cls, kind: TetrominoType, board_width: int) -> "Piece":
        x, y = spawn_position(kind, board_width)
        return cls(kind=kind, shape=base_shape(kind), x=x, y=y)

    @property
    def position(self) -> Position:
        return self.x, self.y

    @property
    def color(self) -> str:
        return COLORS[self.kind]

    @property
    def token(self) -> int:
        """Value stamped into the board for this piece's cells."""
        return int(self.kind)

    def moved(self, dx: int, dy: int) -> "Piece":
        return replace(self, x=self.x + dx, y=self.y + dy)

    def at(self, position: Position) -> "Piece":
        x, y = position
        return replace(self, x=x, y=y)

    def cells_at(self, origin_x: int, origin_y: int) -> List[Tuple[int, int]]:
        h, w = self.shape.shape
        cells: List[Tuple[int, int]] = []
        for dy in range(h):
            for dx in range(w):
                if self.shape[dy, dx]:
                    cells.append((origin_x + dx, origin_y + dy))
        return cells

    def cells(self) -> List[Tuple[int, int]]:
        return self.cells_at(self.x, self.y)


def rotate(piece: Piece) -> Piece:
    """Rotate the shape 90 degrees clockwise around the matrix's own center.

    Transposing and then reversing every row is the same turn as
    ``np.rot90(shape, k=-1)``. Position, kind and color are unchanged, and the
    result is a new piece so a rejected rotation leaves ``piece`` untouched.
    """
    turned = np.ascontiguousarray(piece.shape.T[:, ::-1])
    turned.flags.writeable = False
    return replace(piece, shape=turned)


class PieceGenerator:
    """Draws pieces of uniformly random kind at the spawn position."""

    def __init__(self, rng: Optional[random.Random] = None, board_width: int = 10) -> None:
        self.rng = rng or random.Random()
        self.board_width = int(board_width)

    def random_piece(self) -> Piece:
        kind = self.rng.choice(list(TetrominoType))
        return Piece.spawn(kind, self.board_width)
