from sudoku.bits import number_to_set
from sudoku.board import Board
from sudoku.solver.chain import candidate_map, find_inconsistent_digits, solve_chains


def digits(*numbers: int) -> int:
    return sum(number_to_set(number) for number in numbers)


def reserve_box_triangle(board: Board) -> None:
    # [0,0], [0,1] and [1,1] all share box 0; the two pair cells leave only 3 for [0,0]
    board.reserve(0, digits(1, 2, 3))
    board.reserve(1, digits(1, 2))
    board.reserve(10, digits(1, 2))


def test_candidate_map(board: Board):
    reserve_box_triangle(board)
    board.place(80, 9)
    candidates, walkable = candidate_map(board, 2)
    assert candidates[0] == digits(1, 2, 3)
    assert candidates[80] == 0
    assert walkable.count() == 2
    assert walkable[1] and walkable[10]


def test_cycle_eliminates_start_digits(board: Board):
    reserve_box_triangle(board)
    candidates, walkable = candidate_map(board, 2)

    failing = find_inconsistent_digits(
        board, 0, max_hops=6, walkable=walkable, candidates=candidates
    )
    assert failing == digits(1, 2)


def test_short_walk_finds_nothing(board: Board):
    reserve_box_triangle(board)
    candidates, walkable = candidate_map(board, 2)

    failing = find_inconsistent_digits(
        board, 0, max_hops=2, walkable=walkable, candidates=candidates
    )
    assert failing == 0


def test_consistent_cycle(board: Board):
    # A 6/7 rectangle over rows 0 and 3 closes consistently for both digits
    board.reserve(3, digits(6, 7))
    board.reserve(4, digits(6, 7))
    board.reserve(30, digits(6, 7))
    board.reserve(31, digits(6, 7))
    candidates, walkable = candidate_map(board, 2)

    for start in (3, 4, 30, 31):
        failing = find_inconsistent_digits(
            board, start, max_hops=6, walkable=walkable, candidates=candidates
        )
        assert failing == 0


def test_solve_chains(board: Board):
    reserve_box_triangle(board)

    assert solve_chains(board, max_hops=6, max_candidates=2) >= 2
    assert board[0, 0] == 3
    assert board.possible_set(1) == digits(1, 2)
    assert board.possible_set(10) == digits(1, 2)
    assert not board.dead


def test_solve_chains_contradiction(board: Board):
    # Three cells of one box sharing two digits
    board.reserve(0, digits(1, 2))
    board.reserve(1, digits(1, 2))
    board.reserve(10, digits(1, 2))

    solve_chains(board, max_hops=6, max_candidates=2)
    assert board.dead
