from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Dict, Optional

import numpy as np
from loguru import logger

from .gravity import Clock, GravityScheduler
from .grid import Board, clear_lines, is_valid, merge
from .pieces import Piece, PieceGenerator, rotate
from .rules import ScoringRules


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE = 2
    SOFT_DROP = 3
    HARD_DROP = 4
    NONE = 5
    START = 6
    TOGGLE_PAUSE = 7


# Reference bindings for an input layer; the engine never reads keys itself.
DEFAULT_KEY_BINDINGS: Dict[str, Action] = {
    "ArrowLeft": Action.LEFT,
    "ArrowRight": Action.RIGHT,
    "ArrowUp": Action.ROTATE,
    "ArrowDown": Action.SOFT_DROP,
    " ": Action.HARD_DROP,
}


class GameStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    random_seed: Optional[int] = None
    gravity_ms: int = 1000
    tick_ms: int = 50

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"board size must be positive, got {self.width}x{self.height}")
        if self.gravity_ms <= 0 or self.tick_ms <= 0:
            raise ValueError(f"gravity periods must be positive, got gravity_ms={self.gravity_ms} tick_ms={self.tick_ms}")


@dataclass(frozen=True, eq=False)
class GameSnapshot:
    """Read-only view of the game handed to renderers after every action."""

    board: np.ndarray
    current_piece: Optional[Piece]
    next_piece: Optional[Piece]
    score: int
    lines_cleared_total: int
    paused: bool
    game_over: bool
    status: GameStatus


class TetrisGame:
    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.rng = rng or random.Random(self.config.random_seed)
        self.generator = PieceGenerator(self.rng, self.config.width)
        self.board = Board.create_empty(self.config.width, self.config.height)
        self.current_piece: Optional[Piece] = None
        self.next_piece: Optional[Piece] = None
        self.score = 0
        self.lines_cleared_total = 0
        self.game_over = False
        self.paused = False

    @property
    def status(self) -> GameStatus:
        if self.current_piece is None:
            return GameStatus.IDLE
        if self.game_over:
            return GameStatus.GAME_OVER
        if self.paused:
            return GameStatus.PAUSED
        return GameStatus.RUNNING

    @property
    def running(self) -> bool:
        return self.status is GameStatus.RUNNING

    def start(self) -> None:
        self.board = Board.create_empty(self.config.width, self.config.height)
        self.current_piece = self.generator.random_piece()
        self.next_piece = self.generator.random_piece()
        self.score = 0
        self.lines_cleared_total = 0
        self.game_over = False
        self.paused = False
        logger.info(
            f"Game started on {self.config.width}x{self.config.height} board "
            f"with {self.current_piece.kind.name}, next {self.next_piece.kind.name}"
        )

    def toggle_pause(self) -> None:
        if self.status in (GameStatus.RUNNING, GameStatus.PAUSED):
            self.paused = not self.paused

    def _try_commit(self, candidate: Piece) -> bool:
        if is_valid(self.board, candidate):
            self.current_piece = candidate
            return True
        return False

    def _move(self, dx: int, dy: int) -> bool:
        if not self.running:
            return False
        return self._try_commit(self.current_piece.moved(dx, dy))

    def move_left(self) -> None:
        self._move(-1, 0)

    def move_right(self) -> None:
        self._move(1, 0)

    def rotate(self) -> None:
        if not self.running:
            return
        self._try_commit(rotate(self.current_piece))

    def move_down(self) -> None:
        if not self.running:
            return
        if not self._try_commit(self.current_piece.moved(0, 1)):
            self._lock_piece(self.current_piece)

    def hard_drop(self) -> None:
        if not self.running:
            return
        piece = self.current_piece
        rows = 0
        while is_valid(self.board, piece.moved(0, 1)):
            piece = piece.moved(0, 1)
            rows += 1
        self._lock_piece(piece, bonus=self.rules.hard_drop_bonus(rows))

    def _lock_piece(self, piece: Piece, bonus: int = 0) -> None:
        assert self.next_piece is not None
        merged = merge(self.board, piece)
        cleared_board, lines = clear_lines(merged)
        promoted = self.next_piece
        if not is_valid(cleared_board, promoted):
            # The merge stands but nothing else from this lock is applied.
            self.board = merged
            self.current_piece = piece
            self.game_over = True
            logger.info(f"Game over: {promoted.kind.name} cannot spawn, final score {self.score}")
            return
        gained = self.rules.score_for(lines) + bonus
        self.board = cleared_board
        self.current_piece = promoted
        self.next_piece = self.generator.random_piece()
        self.score += gained
        self.lines_cleared_total += lines
        logger.trace(f"Locked {piece.kind.name} at {piece.position}: {lines} lines, +{gained} points")

    def step(self, action: Action) -> GameSnapshot:
        action = Action(action)
        if action == Action.START:
            self.start()
        elif action == Action.TOGGLE_PAUSE:
            self.toggle_pause()
        elif action == Action.LEFT:
            self.move_left()
        elif action == Action.RIGHT:
            self.move_right()
        elif action == Action.ROTATE:
            self.rotate()
        elif action == Action.SOFT_DROP:
            self.move_down()
        elif action == Action.HARD_DROP:
            self.hard_drop()
        elif action == Action.NONE:
            pass
        return self.snapshot()

    def snapshot(self) -> GameSnapshot:
        board = self.board.clone_state()
        board.flags.writeable = False
        return GameSnapshot(
            board=board,
            current_piece=self.current_piece,
            next_piece=self.next_piece,
            score=self.score,
            lines_cleared_total=self.lines_cleared_total,
            paused=self.paused,
            game_over=self.game_over,
            status=self.status,
        )

    def get_state(self) -> np.ndarray:
        # Overlay current piece on a copy of the grid for observation
        state = self.board.clone_state()
        if self.current_piece is not None and not self.game_over:
            for x, y in self.current_piece.cells():
                if self.board.is_inside(x, y):
                    # Use negative to indicate falling piece overlay
                    state[y, x] = -self.current_piece.token
        return state


class GameSession:
    """A game paired with the gravity scheduler that drives it.

    The scheduler is armed exactly while the game is running.
    """

    def __init__(self, game: Optional[TetrisGame] = None, clock: Optional[Clock] = None) -> None:
        self.game = game or TetrisGame()
        self.gravity = GravityScheduler(self.game.config.gravity_ms, self.game.config.tick_ms, clock)

    def _sync_gravity(self) -> None:
        if self.game.running:
            self.gravity.arm()
        else:
            self.gravity.disarm()

    def dispatch(self, action: Action) -> GameSnapshot:
        if action == Action.START:
            self.gravity.disarm()
        snapshot = self.game.step(action)
        self._sync_gravity()
        return snapshot

    def tick(self) -> GameSnapshot:
        if self.gravity.tick():
            self.game.move_down()
            self._sync_gravity()
        return self.game.snapshot()

    def close(self) -> None:
        self.gravity.disarm()
