import pytest

from conftest import EASY_PUZZLE
from sudoku.bits import NUMBER_SET_MASK, number_to_set
from sudoku.board import Board, BoardContractError
from sudoku.geometry import N_CELLS, UnitKind


def digits(*numbers: int) -> int:
    result = 0
    for number in numbers:
        result |= number_to_set(number)
    return result


def test_fresh_board(board: Board):
    assert board.undetermined_count == N_CELLS
    assert not board.dead
    assert not board.is_done
    assert board.possible_set(0) == NUMBER_SET_MASK
    assert str(board) == "0" * N_CELLS


def test_place_updates_units(board: Board):
    board.place(0, 5)
    assert board.numbers[0] == 5
    assert board[0, 0] == 5
    assert board.taken[UnitKind.ROW][0] & number_to_set(5)
    assert board.taken[UnitKind.COL][0] & number_to_set(5)
    assert board.taken[UnitKind.BOX][0] & number_to_set(5)
    assert not board.empty[UnitKind.ROW][0] & 1
    assert board.undetermined_count == N_CELLS - 1
    assert not board.possible_set(1) & number_to_set(5)
    assert not board.possible_set(9) & number_to_set(5)
    assert board.possible_set(80) & number_to_set(5)


def test_place_contract(board: Board):
    board.place(0, 5)
    with pytest.raises(BoardContractError):
        board.possible_set(0)
    with pytest.raises(BoardContractError):
        board.place(0, 6)
    with pytest.raises(BoardContractError):
        board.place(1, 5)  # not a candidate
    with pytest.raises(BoardContractError):
        board.place(2, 0)


def test_reserve_narrows(board: Board):
    assert board.reserve(10, digits(1, 2)) is True
    assert board.possible_set(10) == digits(1, 2)
    assert board.reserve(10, digits(1, 2)) is False
    assert board.reserve(10, digits(2)) is True
    assert board.possible_set(10) == digits(2)


def test_reserve_widening_raises(board: Board):
    board.reserve(10, digits(1, 2))
    with pytest.raises(BoardContractError):
        board.reserve(10, digits(1, 2, 3))


def test_reserve_filled_cell_raises(board: Board):
    board.place(10, 1)
    with pytest.raises(BoardContractError):
        board.reserve(10, digits(1))


def test_reserve_to_nothing_kills_board(board: Board):
    board.place(0, 1)
    assert board.reserve(1, digits(1)) is False
    assert board.dead
    assert board.is_done


def test_reserve_drops_taken_digits(board: Board):
    board.place(0, 1)
    assert board.reserve(1, digits(1, 2, 3)) is True
    assert board.possible_set(1) == digits(2, 3)


def test_reserve_singleton_marks_units_dirty(board: Board):
    for kind in UnitKind:
        board.dirty[kind] = 0
    board.reserve(40, digits(1, 7))
    assert not any(board.dirty)
    board.reserve(40, digits(7))
    assert board.dirty[UnitKind.ROW] == 1 << 4
    assert board.dirty[UnitKind.COL] == 1 << 4
    assert board.dirty[UnitKind.BOX] == 1 << 4


def test_place_narrows_peer_reservations(board: Board):
    board.reserve(1, digits(1, 2))
    board.reserve(9, digits(1, 3))
    board.reserve(80, digits(1, 4))
    board.place(0, 1)
    assert board.reserved[1] == digits(2)
    assert board.reserved[9] == digits(3)
    assert board.reserved[80] == digits(1, 4)
    assert not board.dead
    for idx in range(N_CELLS):
        if not board.numbers[idx]:
            assert not board.reserved[idx] & ~board.possible_set(idx)


def test_place_emptying_peer_reservation_kills_board(board: Board):
    board.reserve(1, digits(2))
    board.place(0, 2)
    assert board.reserved[1] == 0
    assert board.dead


def test_grid_rows(board: Board):
    board.read(EASY_PUZZLE)
    grid = board.grid()
    assert len(grid) == 9
    assert grid[0] == [5, 3, 0, 0, 7, 0, 0, 0, 0]
    assert grid[8][8] == 9


def test_read_round_trip(board: Board):
    assert board.read(EASY_PUZZLE) == 0
    assert str(board) == EASY_PUZZLE
    assert board[0] == 5
    assert board[1, 0] == 6
    assert board.undetermined_count == EASY_PUZZLE.count("0")


def test_read_skips_other_characters(board: Board):
    text = "\n".join(
        " ".join(EASY_PUZZLE[row * 9 : row * 9 + 9]).replace("0", ".") for row in range(9)
    )
    assert board.read("Puzzle:\n" + text) == 0
    assert str(board) == EASY_PUZZLE


def test_read_blanks(board: Board):
    assert board.read("?" * 40 + "." * 41) == 0
    assert board.undetermined_count == N_CELLS


def test_read_drops_conflicting_clue(board: Board):
    assert board.read("11" + "0" * 79) == 1
    assert board[0, 0] == 1
    assert board[0, 1] == 0
    assert not board.dead


def test_read_stops_after_grid(board: Board):
    board.read("0" * 81 + "5")
    assert board.undetermined_count == N_CELLS


def test_getitem_rejects_other_keys(board: Board):
    with pytest.raises(IndexError):
        board["a1"]


def test_duplicate_is_independent(board: Board):
    board.read(EASY_PUZZLE)
    board.reserve(2, digits(1, 2, 4))
    dup = board.duplicate()
    assert str(dup) == str(board)
    assert dup.possible_set(2) == board.possible_set(2)
    assert dup.pool is board.pool

    dup.place(2, 4)
    assert board[0, 2] == 0
    assert board.undetermined_count == dup.undetermined_count + 1
    assert board.possible_set(2) == digits(1, 2, 4)


def test_copy_from_keeps_settings(board: Board):
    other = Board()
    other.read(EASY_PUZZLE)
    board.nest_level = 2
    board.max_solutions = 0
    board.copy_from(other)
    assert str(board) == EASY_PUZZLE
    assert board.undetermined_count == other.undetermined_count
    assert board.nest_level == 2
    assert board.max_solutions == 0


def test_add_solution_rejects_duplicates(pool, board: Board):
    first = pool.acquire()
    first.read(EASY_PUZZLE)
    second = pool.acquire()
    second.read(EASY_PUZZLE)

    assert board.add_solution(first) is True
    assert board.add_solution(second) is False
    assert board.solution_count == 1
    assert second.in_pool
    assert board.is_solved
    assert board.is_done


def test_adopt_solutions(pool, board: Board):
    other = pool.acquire()
    solution = pool.acquire()
    solution.read(EASY_PUZZLE)
    other.add_solution(solution)

    board.adopt_solutions(other)
    assert board.solution_count == 1
    assert other.solution_count == 0
    assert next(iter(board.solutions.values())) is solution


def test_solution_cap(board: Board):
    board.max_solutions = 1
    assert not board.solution_cap_reached
    board.add_solution(Board())
    assert board.solution_cap_reached

    board.max_solutions = 0
    assert not board.solution_cap_reached


def test_debug_output(board: Board, capsys):
    board.debug_level = 1
    board.place(0, 5)
    board.debug(2, "not shown")
    assert capsys.readouterr().out == "    [0,0]  =  5\n"
