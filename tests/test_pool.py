import pytest

from conftest import EASY_PUZZLE
from sudoku.board import Board, BoardContractError
from sudoku.geometry import N_CELLS
from sudoku.pool import BoardPool


def test_acquire_creates_then_reuses(pool: BoardPool):
    board = pool.acquire()
    assert board.pool is pool
    assert pool.stats.created == 1

    board.read(EASY_PUZZLE)
    board.dead = True
    board.destroy()
    assert board.in_pool
    assert len(pool) == 1

    again = pool.acquire()
    assert again is board
    assert not again.in_pool
    assert again.undetermined_count == N_CELLS
    assert not again.dead
    assert str(again) == "0" * N_CELLS
    assert pool.stats.reused == 1
    assert len(pool) == 0


def test_release_returns_solutions(pool: BoardPool):
    board = pool.acquire()
    for number in (1, 2):
        solution = pool.acquire()
        solution.place(0, number)
        board.add_solution(solution)

    board.destroy()
    assert len(pool) == 3
    assert pool.stats.released == 3
    assert board.solution_count == 0


def test_release_twice_raises(pool: BoardPool):
    board = pool.acquire()
    board.destroy()
    with pytest.raises(BoardContractError):
        pool.release(board)


def test_release_to_foreign_pool_raises(pool: BoardPool):
    with pytest.raises(BoardContractError):
        pool.release(BoardPool().acquire())
    with pytest.raises(BoardContractError):
        pool.release(Board())


def test_board_without_pool():
    board = Board()
    dup = board.duplicate()
    assert dup.pool is None
    board.add_solution(dup)
    board.destroy()
    assert board.solution_count == 0
