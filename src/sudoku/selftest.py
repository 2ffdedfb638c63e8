"""Built-in regression puzzles, run with `sudoku -t`."""

import sys
from typing import TextIO

from sudoku.pool import BoardPool
from sudoku.render import format_pretty, format_solutions
from sudoku.solver.solver import solve
from sudoku.util import is_valid_solution, matches_clues

BUILT_IN_PUZZLES: tuple[str, ...] = (
    # Solved by deduction alone
    "530070000600195000098000060800060003400803001700020006060000280000419005000080079",
    # Needs search
    "800000000003600000070090200050007000000045700000100030001000068008500010090000400",
    # 17 clues
    "000000010400000000020000000000050407008000300001090000300400200050100000000806000",
)


def run_built_in_tests(
    pool: BoardPool | None = None, *, debug_level: int = 1, out: TextIO | None = None
) -> int:
    """Solve every built-in puzzle and check each solution.

    Args:
        pool: Pool to take boards from. A new pool is used if None.
        debug_level: Diagnostic verbosity of the boards.
        out: Stream for the report. If None, `sys.stdout` is used.

    Returns:
        0 if every puzzle was solved correctly, -1 otherwise.
    """
    out = out or sys.stdout
    pool = pool or BoardPool()

    for i, puzzle in enumerate(BUILT_IN_PUZZLES):
        print(f"\n===== Test board {i} =====\n", file=out, flush=True)
        board = pool.acquire()
        board.debug_level = debug_level
        board.log = out
        board.read(puzzle)
        print("-------- Input --------", file=out)
        print(format_pretty(board), file=out)
        print("---Solve---", file=out, flush=True)

        solutions_count = solve(board)
        if solutions_count:
            print(f"Found {solutions_count} solution(s)", file=out)
        else:
            print("No solution found", file=out)
        print("-------- Output -------", file=out)
        print(format_solutions(board), file=out, flush=True)

        solved = [board] if board.undetermined_count == 0 else list(board.solutions.values())
        passed = bool(solved) and all(
            is_valid_solution(solution) and matches_clues(solution, puzzle) for solution in solved
        )
        board.destroy()
        if not passed:
            print(f"\nBuilt-in test {i} FAILED\n", file=out, flush=True)
            return -1

    print(f"\nAll {len(BUILT_IN_PUZZLES)} built-in tests PASS\n", file=out, flush=True)
    return 0
