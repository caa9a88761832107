from __future__ import annotations

import numpy as np
import pytest

from conftest import board_from_rows
from tetris_core.game import Board, Piece, TetrominoType, clear_lines, is_valid, merge

FULL = [1] * 10


def test_create_empty():
    board = Board.create_empty()
    assert board.shape == (20, 10)
    assert not np.any(board.grid)
    assert board.cell(0, 0) == 0


def test_copy_is_independent():
    board = Board.create_empty()
    other = board.copy()
    other.grid[5, 5] = 3
    assert board.cell(5, 5) == 0
    assert other.is_occupied(5, 5)


def test_board_rejects_wrong_dimensionality():
    with pytest.raises(AssertionError):
        Board(np.zeros(10, dtype=np.int8))


class TestIsValid:
    def test_spawn_on_empty_board(self):
        board = Board.create_empty()
        for kind in TetrominoType:
            assert is_valid(board, Piece.spawn(kind, 10))

    def test_walls_and_floor(self):
        board = Board.create_empty()
        piece = Piece.spawn(TetrominoType.O, 10)
        assert not is_valid(board, piece, (-1, 0))
        assert not is_valid(board, piece, (9, 0))
        assert is_valid(board, piece, (8, 18))
        assert not is_valid(board, piece, (8, 19))

    def test_cells_above_top_are_allowed(self):
        board = Board.create_empty()
        piece = Piece.spawn(TetrominoType.O, 10)
        assert is_valid(board, piece, (4, -1))
        assert is_valid(board, piece, (4, -5))

    def test_empty_shape_cells_do_not_collide(self):
        # The I piece's top row is empty, so it may overlap a filled row 0.
        board = board_from_rows({0: FULL})
        piece = Piece.spawn(TetrominoType.I, 10)
        assert is_valid(board, piece)
        assert not is_valid(board, piece, (3, -1))

    def test_occupied_cell(self):
        board = board_from_rows({19: [0, 0, 0, 0, 5, 0, 0, 0, 0, 0]})
        piece = Piece.spawn(TetrominoType.O, 10)
        assert not is_valid(board, piece, (4, 18))
        assert is_valid(board, piece, (6, 18))

    def test_defaults_to_piece_position(self):
        board = Board.create_empty()
        assert not is_valid(board, Piece.spawn(TetrominoType.O, 10).at((-3, 0)))


class TestMerge:
    def test_stamps_token_on_copy(self):
        board = Board.create_empty()
        piece = Piece.spawn(TetrominoType.O, 10).at((0, 18))
        merged = merge(board, piece)
        assert not np.any(board.grid)
        for x, y in [(0, 18), (1, 18), (0, 19), (1, 19)]:
            assert merged.cell(x, y) == int(TetrominoType.O)
        assert int(np.count_nonzero(merged.grid)) == 4

    def test_drops_cells_above_board(self):
        board = Board.create_empty()
        piece = Piece.spawn(TetrominoType.O, 10).at((4, -1))
        merged = merge(board, piece)
        assert int(np.count_nonzero(merged.grid)) == 2
        assert merged.cell(4, 0) == merged.cell(5, 0) == int(TetrominoType.O)


class TestClearLines:
    def test_no_full_rows(self):
        board = board_from_rows({19: [1] * 9 + [0]})
        cleared, lines = clear_lines(board)
        assert lines == 0
        assert cleared == board
        assert cleared is not board

    def test_single_row(self):
        board = board_from_rows({18: [2] + [0] * 9, 19: FULL})
        cleared, lines = clear_lines(board)
        assert lines == 1
        assert cleared.shape == (20, 10)
        assert cleared.grid[19].tolist() == [2] + [0] * 9
        assert not np.any(cleared.grid[:19])

    def test_keeps_order_of_survivors(self):
        row_a = [3] + [0] * 9
        row_b = [0] * 9 + [4]
        board = board_from_rows({15: row_a, 16: FULL, 17: row_b, 18: FULL, 19: FULL})
        cleared, lines = clear_lines(board)
        assert lines == 3
        assert cleared.shape == (20, 10)
        assert cleared.grid[18].tolist() == row_a
        assert cleared.grid[19].tolist() == row_b
        assert not np.any(cleared.grid[:18])

    def test_four_lines(self):
        board = board_from_rows({y: FULL for y in range(16, 20)})
        cleared, lines = clear_lines(board)
        assert lines == 4
        assert not np.any(cleared.grid)

    def test_original_is_untouched(self):
        board = board_from_rows({19: FULL})
        clear_lines(board)
        assert board.grid[19].tolist() == FULL


def test_stack_statistics():
    board = board_from_rows({17: [1] + [0] * 9, 19: [1] + [0] * 9})
    assert board.get_max_height() == 3
    assert board.count_holes() == 1
