"""Bounded cycle/chain consistency check.

Starting from an unset cell, short cycles of unset cells are walked, where consecutive cells
share a unit and so must hold different digits.  For every candidate digit of the start cell,
the walk tracks which digits each cell along the path can still take.  If, once the cycle closes
back at the start, the last cell can only take the start digit itself, that start digit admits
no consistent assignment around the cycle and is eliminated.
"""

from bitarray import bitarray
from bitarray.util import zeros

from sudoku.bits import BIT_COUNT, iter_bits
from sudoku.board import Board
from sudoku.geometry import CELLS, N_CELLS, UNIT_CELLS, UnitKind
from sudoku.solver.config import config as solver_config
from sudoku.solver.propagate import drain_dirty

UnitRef = tuple[UnitKind, int]

MIN_CYCLE_LENGTH = 3
"""Shortest cycle (in cells) that can eliminate a digit."""


def _neighbors(
    board: Board, idx: int, arrival: UnitRef | None, start: int, walkable: bitarray
) -> list[tuple[int, UnitRef]]:
    """Get the cells a walk can move to from `idx`, never through the arrival unit.

    Returns:
        A list of `(neighbor_idx, (kind, unit))` tuples, one per neighbor, naming the first unit
        through which the neighbor was found.  Only walkable cells and the start cell qualify.
    """
    cell = CELLS[idx]
    found = 0
    result: list[tuple[int, UnitRef]] = []
    for kind in UnitKind:
        unit = cell.unit(kind)
        if arrival == (kind, unit):
            continue
        unit_cells = UNIT_CELLS[kind][unit]
        for pos in iter_bits(board.empty[kind][unit]):
            other = unit_cells[pos]
            if other == idx or found >> other & 1:
                continue
            if other == start or walkable[other]:
                found |= 1 << other
                result.append((other, (kind, unit)))
    return result


def _step(reach: int, node_set: int) -> int:
    """Digits of `node_set` that differ from at least one digit the predecessor can take."""
    if not reach:
        return 0
    if BIT_COUNT[reach] >= 2:
        return node_set
    return node_set & ~reach


def candidate_map(board: Board, max_candidates: int) -> tuple[list[int], bitarray]:
    """Snapshot the candidates of every cell for a round of walks.

    Returns:
        A tuple `(candidates, walkable)`: the candidate set of every cell (0 for set cells), and
        a bit per cell telling whether a walk may pass through it.
    """
    candidates = [0 if board.numbers[idx] else board.possible_set(idx) for idx in range(N_CELLS)]
    walkable = zeros(N_CELLS)
    for idx, possible_set in enumerate(candidates):
        if possible_set and BIT_COUNT[possible_set] <= max_candidates:
            walkable[idx] = 1
    return candidates, walkable


def find_inconsistent_digits(
    board: Board,
    start: int,
    *,
    max_hops: int,
    walkable: bitarray,
    candidates: list[int],
) -> int:
    """Walk the cycles through `start` and collect its candidates that cannot close any of them.

    Args:
        board: The board.
        start: Index of the unset start cell.
        max_hops: Maximum number of cells on a cycle, the start included.
        walkable: Cells that may appear on a cycle besides the start.
        candidates: Candidate set of every cell (0 for set cells).

    Returns:
        The number set of start digits with no consistent assignment around some cycle.
    """
    digits = list(iter_bits(candidates[start]))
    if len(digits) < 2:
        return 0
    all_digits = candidates[start]

    failing = 0
    # Stack entries: (node, arrival unit, path mask, path length, reach per start digit)
    stack: list[tuple[int, UnitRef | None, int, int, tuple[int, ...]]] = [
        (start, None, 1 << start, 1, tuple(1 << digit for digit in digits))
    ]
    while stack and failing != all_digits:
        node, arrival, path, length, reach = stack.pop()
        for neighbor, via in _neighbors(board, node, arrival, start, walkable):
            if neighbor == start:
                if length >= MIN_CYCLE_LENGTH:
                    for digit, last_reach in zip(digits, reach):
                        if not last_reach & ~(1 << digit):
                            failing |= 1 << digit
                continue
            if length >= max_hops or path >> neighbor & 1:
                continue
            neighbor_set = candidates[neighbor]
            stack.append(
                (
                    neighbor,
                    via,
                    path | (1 << neighbor),
                    length + 1,
                    tuple(_step(r, neighbor_set) for r in reach),
                )
            )
    return failing


def solve_chains(
    board: Board,
    *,
    max_hops: int | None = None,
    max_candidates: int | None = None,
) -> int:
    """Run the cycle check from every unset cell until a full pass changes nothing.

    Args:
        board: The board.
        max_hops: Maximum cycle length in cells. Defaults to `config.chain_max_hops`.
        max_candidates: Cells with more candidates are not walked through (the start cell is
            exempt). Defaults to `config.chain_max_candidates`.

    Returns:
        The total number of changes, including placements made while draining.
    """
    if max_hops is None:
        max_hops = solver_config.chain_max_hops
    if max_candidates is None:
        max_candidates = solver_config.chain_max_candidates

    board.debug(2, "Solve chains")

    total_changed = 0
    while not board.is_done:
        changed = 0
        candidates, walkable = candidate_map(board, max_candidates)
        for start in range(N_CELLS):
            if board.numbers[start]:
                continue

            failing = find_inconsistent_digits(
                board, start, max_hops=max_hops, walkable=walkable, candidates=candidates
            )
            if not failing:
                continue

            changed += board.reserve(start, candidates[start] & ~failing, "chain")
            if board.is_done:
                break
            changed += drain_dirty(board)
            if board.is_done:
                break
            candidates, walkable = candidate_map(board, max_candidates)

        total_changed += changed
        if not changed:
            break

    return total_changed
