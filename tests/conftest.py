from __future__ import annotations

import itertools
from typing import Iterable

import numpy as np
import pytest

from tetris_core.game import Board, GameConfig, TetrisGame, TetrominoType


class ScriptedRandom:
    """Stands in for random.Random, handing out kinds in a fixed cycle."""

    def __init__(self, kinds: Iterable[TetrominoType]) -> None:
        self._kinds = itertools.cycle(list(kinds))

    def choice(self, seq):
        return next(self._kinds)

    def seed(self, a=None) -> None:
        pass


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start_ms: int = 0) -> None:
        self.now_ms = start_ms

    def advance_ms(self, ms: int) -> None:
        self.now_ms += ms

    def __call__(self) -> float:
        return self.now_ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_game():
    def _make(*kinds: TetrominoType, start: bool = True) -> TetrisGame:
        game = TetrisGame(GameConfig(), rng=ScriptedRandom(kinds or [TetrominoType.O]))
        if start:
            game.start()
        return game

    return _make


def board_from_rows(rows: dict, width: int = 10, height: int = 20) -> Board:
    """Build a board where ``rows`` maps a row index to its 0/token values."""
    grid = np.zeros((height, width), dtype=np.int8)
    for y, values in rows.items():
        grid[y, :] = values
    return Board(grid)
