"""Local propagation: place forced singles in the units touched since the last drain."""

from sudoku.bits import SINGLE_NUMBER, iter_bits
from sudoku.board import Board
from sudoku.geometry import UNIT_CELLS, UnitKind


def drain_dirty(board: Board) -> int:
    """Place every naked single reachable from the dirty units.

    Each dirty unit that still has unset cells is scanned; a cell left with a single candidate is
    placed, which marks its own units dirty in turn.  Draining stops when no unit is dirty or the
    board is done.  A cell without candidates marks the board dead.

    Returns:
        The number of digits placed.
    """
    placed = 0
    while not board.is_done:
        kind = next((kind for kind in UnitKind if board.dirty[kind]), None)
        if kind is None:
            break

        dirty_units = board.dirty[kind]
        board.dirty[kind] = 0
        for unit in iter_bits(dirty_units):
            unit_cells = UNIT_CELLS[kind][unit]
            for pos in iter_bits(board.empty[kind][unit]):
                idx = unit_cells[pos]
                if board.numbers[idx]:
                    continue  # placed earlier in this scan
                possible_set = board.possible_set(idx)
                if not possible_set:
                    board.set_dead()
                    return placed
                number = SINGLE_NUMBER[possible_set]
                if number:
                    board.place(idx, number)
                    placed += 1
                    if board.dead:
                        return placed
            if board.is_done:
                break

    if placed:
        board.debug(2, f"Drained dirty units: {placed} placed")
    return placed
