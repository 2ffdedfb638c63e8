"""Solve pipeline: propagation, deduction to a fixed point, then forking search."""

from sudoku.bits import BIT_COUNT, iter_bits
from sudoku.board import Board
from sudoku.geometry import CELLS, N_CELLS
from sudoku.solver.chain import solve_chains
from sudoku.solver.config import config as solver_config
from sudoku.solver.eliminate import solve_eliminate
from sudoku.solver.propagate import drain_dirty
from sudoku.solver.rectangle import solve_rectangles


def _chains_enabled(board: Board) -> bool:
    if not solver_config.use_chains:
        return False
    max_nest_level = solver_config.chain_max_nest_level
    return max_nest_level < 0 or board.nest_level <= max_nest_level


def deduce(board: Board) -> int:
    """Run every deduction strategy until none of them changes the board.

    Rectangle elimination and the chain validator run only when enabled in the solver config;
    the chain validator is further limited to boards no deeper than `chain_max_nest_level`.

    Returns:
        The total number of changes.
    """
    total_changed = 0
    while not board.is_done:
        changed = solve_eliminate(board)
        if not board.is_done and solver_config.use_rectangles:
            changed += solve_rectangles(board)
        if not board.is_done and _chains_enabled(board):
            changed += solve_chains(board)
        total_changed += changed
        if not changed:
            break
    return total_changed


def find_cell_with_fewest_candidates(board: Board) -> int | None:
    """Find the unset cell with the fewest candidates, the first in scan order on ties.

    A cell without candidates marks the board dead.

    Returns:
        The cell index, or None if the board is dead or has no unset cell.
    """
    best_idx: int | None = None
    best_count = 10
    for idx in range(N_CELLS):
        if board.numbers[idx]:
            continue
        count = BIT_COUNT[board.possible_set(idx)]
        if count == 0:
            board.set_dead()
            return None
        if count < best_count:
            best_idx, best_count = idx, count
    return best_idx


def search(board: Board) -> int:
    """Resolve the remaining ambiguity by trying every candidate of one cell on a fork.

    Each fork is solved recursively.  A fork that ends up fully determined becomes a solution of
    `board`; the solutions a fork found itself are moved into `board`; every other fork is
    released.  Search stops once `board.max_solutions` solutions are held.  On the root board, a
    single solution is copied into the board itself.  If no candidate leads anywhere, the board
    is dead.

    Returns:
        The number of solutions held by `board`.
    """
    board.debug(2, "Solve hidden")

    idx = find_cell_with_fewest_candidates(board)
    if idx is None:
        return len(board.solutions)

    cell = CELLS[idx]
    for number in iter_bits(board.possible_set(idx)):
        board.debug(1, f"Trying solution [{cell.row},{cell.col}] = {number}")

        fork = board.duplicate()
        fork.nest_level = board.nest_level + 1
        fork.debug_level = 0
        if board.max_solutions:
            fork.max_solutions = board.max_solutions - len(board.solutions)
        fork.place(idx, number)
        solve(fork)

        if fork.undetermined_count == 0 and not fork.dead:
            board.debug(1, "Found hidden solution")
            board.add_solution(fork)
        elif fork.solutions:
            board.adopt_solutions(fork)
            fork.destroy()
        else:
            fork.destroy()

        if board.solution_cap_reached:
            break

    if not board.solutions:
        # Every candidate of the cell led to a contradiction
        board.set_dead()
    elif board.nest_level == 0 and len(board.solutions) == 1:
        _, solution = board.solutions.popitem()
        board.copy_from(solution)
        solution.destroy()

    return len(board.solutions)


def solve(board: Board) -> int:
    """Solve a board as far as possible.

    Dirty units are drained, the deduction strategies run to a fixed point, and if the board is
    still open and guessing is allowed, the search forks it.  Calling `solve` again on a dead or
    solved board changes nothing.

    Returns:
        The number of solutions held by the board, plus one if the board itself is fully
        determined.  0 for a contradictory board.
    """
    if not board.is_done:
        drain_dirty(board)
    if not board.is_done:
        deduce(board)
    if not board.is_done and board.guessing_allowed:
        search(board)

    if board.dead:
        return 0
    return len(board.solutions) + (1 if board.undetermined_count == 0 else 0)
