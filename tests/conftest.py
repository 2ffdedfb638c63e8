"""Shared fixtures for the Sudoku tests."""

import pytest

from sudoku.board import Board
from sudoku.pool import BoardPool

EASY_PUZZLE = "530070000600195000098000060800060003400803001700020006060000280000419005000080079"
EASY_SOLUTION = "534678912672195348198342567859761423426853791713924856961537284287419635345286179"

HARD_PUZZLE = "800000000003600000070090200050007000000045700000100030001000068008500010090000400"

# The easy solution with a 6/7 rectangle in rows 0 and 3 left open
TWO_SOLUTION_PUZZLE = (
    "534008912"
    "672195348"
    "198342567"
    "859001423"
    "426853791"
    "713924856"
    "961537284"
    "287419635"
    "345286179"
)
SECOND_SOLUTION = EASY_SOLUTION.replace("534678912", "534768912").replace(
    "859761423", "859671423"
)

# [0,8] must be 9 for its row, but box 2 already holds a 9
CONTRADICTION_PUZZLE = "123456780" + "000000009" + "0" * 63


@pytest.fixture
def pool() -> BoardPool:
    return BoardPool()


@pytest.fixture
def board(pool: BoardPool) -> Board:
    return pool.acquire()


@pytest.fixture
def make_board(pool: BoardPool):
    """Factory reading a puzzle into a fresh pooled board."""

    def _make(puzzle: str, **settings) -> Board:
        board = pool.acquire()
        for name, value in settings.items():
            setattr(board, name, value)
        board.read(puzzle)
        return board

    return _make
