"""Game module for the tetris_core engine.

Exports the core game engine and supporting classes:
- Board: Grid representation, placement checks and line clearing
- Piece: Tetromino piece with clockwise rotation
- TetrominoType: Enum of available piece types
- PieceGenerator: Uniform random piece source
- ScoringRules: Line-clear and hard-drop scoring
- GravityScheduler: Timed descent of the falling piece
- TetrisGame: Game state machine
- GameSession: Game driven by its gravity scheduler
"""

from loguru import logger

from .grid import Board, clear_lines, is_valid, merge
from .pieces import COLORS, Piece, PieceGenerator, TetrominoType, rotate
from .rules import ScoringRules, score_for
from .gravity import GravityScheduler
from .core import (
    DEFAULT_KEY_BINDINGS,
    Action,
    GameConfig,
    GameSession,
    GameSnapshot,
    GameStatus,
    TetrisGame,
)

__all__ = [
    "Board",
    "clear_lines",
    "is_valid",
    "merge",
    "COLORS",
    "Piece",
    "PieceGenerator",
    "TetrominoType",
    "rotate",
    "ScoringRules",
    "score_for",
    "GravityScheduler",
    "DEFAULT_KEY_BINDINGS",
    "Action",
    "GameConfig",
    "GameSession",
    "GameSnapshot",
    "GameStatus",
    "TetrisGame",
]

# Library code stays quiet until an entry point calls logger.enable("tetris_core").
logger.disable("tetris_core")
