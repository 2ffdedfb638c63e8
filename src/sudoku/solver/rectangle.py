"""Inter-box rectangle elimination.

Four unset cells at the corners of a rectangle spanning two bands and two stacks are examined
together.  When each corner has exactly two candidates and the four corners span only three
digits, a corner taking the digit shared by the opposite diagonal can force the remaining corner
to have no candidate left; that digit is removed from the corner.
"""

from sudoku.bits import BIT_COUNT, format_set
from sudoku.board import Board
from sudoku.geometry import cell_at
from sudoku.solver.propagate import drain_dirty

SEARCH_START_FOR_BOX: dict[int, tuple[int, int]] = {
    0: (3, 3),
    1: (3, 6),
    3: (6, 3),
    4: (6, 6),
}
"""First (row, col) of the opposite corner to search, for a first corner in rows/cols 0-5."""


def _eliminate_shared_digit(
    board: Board, idx: int, own_set: int, partner_set: int, common_set: int
) -> int:
    # `idx` and its diagonal partner see both corners of the other diagonal, which share the
    # single digit `common_set`.  If `idx` took that digit, the other diagonal would be forced
    # onto its two remaining digits, and a partner without the shared digit would be left empty.
    if (
        own_set & common_set
        and BIT_COUNT[own_set & ~common_set] == 1
        and not partner_set & common_set
    ):
        return board.reserve(idx, own_set & ~common_set, "rectangle")
    return 0


def analyze_rectangle(board: Board, idx1: int, idx2: int, idx3: int, idx4: int) -> int:
    """Analyze one rectangle of unset cells.

    Cells 1 and 2 form one diagonal, cells 3 and 4 the other.

    Returns:
        The number of cells whose candidates shrank.
    """
    set1 = board.possible_set(idx1)
    set2 = board.possible_set(idx2)
    set3 = board.possible_set(idx3)
    set4 = board.possible_set(idx4)
    common_set12 = set1 & set2
    common_set34 = set3 & set4

    board.debug(
        3,
        f"rectangle sets: {format_set(set1)} {format_set(set2)} "
        f"{format_set(set3)} {format_set(set4)}",
    )

    if not (
        BIT_COUNT[set1] == 2
        and BIT_COUNT[set2] == 2
        and BIT_COUNT[set3] == 2
        and BIT_COUNT[set4] == 2
        and BIT_COUNT[set1 | set2 | set3 | set4] == 3
    ):
        return 0

    changed = 0
    if BIT_COUNT[common_set34] == 1:
        changed += _eliminate_shared_digit(board, idx1, set1, set2, common_set34)
        if not board.dead:
            changed += _eliminate_shared_digit(board, idx2, set2, set1, common_set34)
    if BIT_COUNT[common_set12] == 1 and not board.dead:
        changed += _eliminate_shared_digit(board, idx3, set3, set4, common_set12)
        if not board.dead:
            changed += _eliminate_shared_digit(board, idx4, set4, set3, common_set12)
    return changed


def solve_rectangles_once(board: Board) -> int:
    """Examine every rectangle of unset cells once.

    Returns:
        The number of cells whose candidates shrank.
    """
    board.debug(2, "Solve tile interlock rectangle")

    changed = 0
    for row1 in range(6):
        for col1 in range(6):
            cell1 = cell_at(row1, col1)
            if board.numbers[cell1.index]:
                continue
            start_row, start_col = SEARCH_START_FOR_BOX[cell1.box]
            for row2 in range(start_row, 9):
                for col2 in range(start_col, 9):
                    idx2 = row2 * 9 + col2
                    idx3 = row2 * 9 + col1
                    idx4 = row1 * 9 + col2
                    if board.numbers[idx2] or board.numbers[idx3] or board.numbers[idx4]:
                        continue
                    board.debug(3, f"Found inter-box rectangle: [{row1},{col1}]-[{row2},{col2}]")
                    changed += analyze_rectangle(board, cell1.index, idx2, idx3, idx4)
                    if board.dead:
                        return changed
    return changed


def solve_rectangles(board: Board) -> int:
    """Repeat rectangle elimination, draining dirty units after each change, until stable.

    Returns:
        The total number of changes, including placements made while draining.
    """
    total_changed = 0
    while not board.is_done:
        changed = solve_rectangles_once(board)
        if board.is_done:
            total_changed += changed
            break
        if changed:
            changed += drain_dirty(board)
        total_changed += changed
        if not changed:
            break
    return total_changed
