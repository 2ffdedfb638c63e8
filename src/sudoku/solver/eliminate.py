"""Per-unit elimination strategies: singles, locked subsets and box/line reduction.

Every strategy works on one kind of unit at a time (rows, columns or boxes) and comes in two
flavours:

- *by number*: for each missing digit, find the positions where it can still go (hidden
  singles and hidden subsets);
- *by position*: for each unset cell, find the digits it can still take (naked singles and
  naked subsets).

In both flavours, candidates confined to the slice where two units intersect are removed from
the rest of the other unit (locked candidates).
"""

from collections.abc import Callable

from sudoku.bits import BIT_COUNT, LOWEST_BIT, SINGLE_NUMBER, format_set, iter_bits
from sudoku.board import Board
from sudoku.geometry import UNIT_CELLS, UnitKind, crossing_slices
from sudoku.solver.propagate import drain_dirty

Strategy = Callable[[Board, UnitKind], int]


def _unit_name(kind: UnitKind, unit: int) -> str:
    return f"{kind.name.lower()} {unit}"


def restrict_unit(
    board: Board,
    kind: UnitKind,
    unit: int,
    keep_index_set: int,
    number_set: int,
    reason: str,
) -> int:
    """Remove the digits in `number_set` from the unit's unset cells outside `keep_index_set`.

    Returns:
        The number of cells whose candidates shrank.
    """
    changed = 0
    unit_cells = UNIT_CELLS[kind][unit]
    for pos in iter_bits(board.empty[kind][unit] & ~keep_index_set):
        idx = unit_cells[pos]
        possible_set = board.possible_set(idx)
        if possible_set & number_set:
            changed += board.reserve(idx, possible_set & ~number_set, reason)
            if board.dead:
                break
    return changed


def lock_in_slices(
    board: Board,
    kind: UnitKind,
    unit: int,
    index_set: int,
    number_set: int,
    reason: str,
) -> int:
    """Apply locked-candidate elimination to the units crossing `unit` at `index_set`.

    If the positions in `index_set` all lie in the slice shared with a crossing unit, the digits
    in `number_set` must go in that slice, so they are removed from the rest of the crossing
    unit.

    Returns:
        The number of cells whose candidates shrank.
    """
    changed = 0
    for other_kind, other_unit, slice_index_set in crossing_slices(kind, unit, index_set):
        changed += restrict_unit(board, other_kind, other_unit, slice_index_set, number_set, reason)
        if board.dead:
            break
    return changed


def _reserve_positions(
    board: Board, kind: UnitKind, unit: int, index_set: int, number_set: int, reason: str
) -> int:
    # Restrict every unset cell at `index_set` to the digits of `number_set` it can still take.
    changed = 0
    unit_cells = UNIT_CELLS[kind][unit]
    for pos in iter_bits(index_set):
        idx = unit_cells[pos]
        if board.numbers[idx]:
            continue
        changed += board.reserve(idx, number_set & board.possible_set(idx), reason)
        if board.dead:
            break
    return changed


def _reserve_naked_group(
    board: Board, kind: UnitKind, unit: int, index_set: int, number_set: int, reason: str
) -> int:
    # The cells at `index_set` hold exactly the digits of `number_set`.
    changed = restrict_unit(board, kind, unit, index_set, number_set, reason)
    if not board.dead:
        changed += lock_in_slices(board, kind, unit, index_set, number_set, reason)
    return changed


def eliminate_by_number(board: Board, kind: UnitKind) -> int:
    """Find hidden singles, hidden subsets and locked candidates in every unit of a kind.

    For each digit missing from a unit, the positions where it remains legal are collected:

    - no position: the board is dead;
    - one position: the digit is placed there;
    - `k` digits sharing the same `k` positions: those positions are reserved for them;
    - three positions covered by the partially overlapping position sets of three digits: those
      positions are reserved for the three digits;
    - positions confined to one slice of a crossing unit: the digit is removed from the rest of
      the crossing unit.

    Returns:
        The number of placements and reservations that changed the board.
    """
    board.debug(2, f"Solve eliminate {kind.name.lower()}s by number")

    changed = 0
    for unit in range(9):
        unit_cells = UNIT_CELLS[kind][unit]
        prior_index_sets = [0] * 10

        for number in range(1, 10):
            number_set = 1 << number
            if board.taken[kind][unit] & number_set:
                continue

            index_set = 0
            for pos in iter_bits(board.empty[kind][unit]):
                if board.possible_set(unit_cells[pos]) & number_set:
                    index_set |= 1 << pos

            possibilities = BIT_COUNT[index_set]
            board.debug(
                3,
                f"{_unit_name(kind, unit)}, number {number}: "
                f"{possibilities} possibilities at {sorted(iter_bits(index_set))}",
            )
            if possibilities == 0:
                board.set_dead()
                return changed
            if possibilities == 1:
                board.place(unit_cells[LOWEST_BIT[index_set]], number)
                changed += 1
                if board.dead:
                    return changed
                continue

            prior_index_sets[number] = index_set

            group_number_set = number_set
            same_index_set_count = 0
            for other in range(1, number):
                if prior_index_sets[other] == index_set:
                    same_index_set_count += 1
                    group_number_set |= 1 << other

            if same_index_set_count + 1 == possibilities:
                changed += _reserve_positions(
                    board,
                    kind,
                    unit,
                    index_set,
                    group_number_set,
                    f"hidden subset {format_set(group_number_set)} in {_unit_name(kind, unit)}",
                )
                if board.dead:
                    return changed

            if possibilities > 3:
                continue

            # Partial matches catch {12}, {23}, {13} or {12}, {23}, {123}
            for i in range(1, number):
                if not prior_index_sets[i] & index_set:
                    continue
                joint_index_set = prior_index_sets[i] | index_set
                if BIT_COUNT[joint_index_set] != 3:
                    continue
                for j in range(i + 1, number):
                    if prior_index_sets[j] and joint_index_set | prior_index_sets[j] == joint_index_set:
                        triple = (1 << i) | (1 << j) | number_set
                        changed += _reserve_positions(
                            board,
                            kind,
                            unit,
                            joint_index_set,
                            triple,
                            f"hidden triple {format_set(triple)} in {_unit_name(kind, unit)}",
                        )
                        if board.dead:
                            return changed

            changed += lock_in_slices(
                board,
                kind,
                unit,
                index_set,
                number_set,
                f"locked {number} in {_unit_name(kind, unit)}",
            )
            if board.dead:
                return changed

    return changed


def _find_and_reserve_naked_group(
    board: Board,
    kind: UnitKind,
    unit: int,
    prior_number_sets: list[int],
    this_pos: int,
    possible_set: int,
) -> int:
    changed = 0
    possibilities = BIT_COUNT[possible_set]

    index_set = 1 << this_pos
    same_number_set_count = 0
    for i in range(this_pos):
        if prior_number_sets[i] == possible_set:
            same_number_set_count += 1
            index_set |= 1 << i

    if same_number_set_count + 1 == possibilities:
        changed += _reserve_naked_group(
            board,
            kind,
            unit,
            index_set,
            possible_set,
            f"naked subset {format_set(possible_set)} in {_unit_name(kind, unit)}",
        )
        if board.dead:
            return changed

    if possibilities > 3:
        return changed

    for i in range(this_pos):
        if not prior_number_sets[i] & possible_set:
            continue
        joint_number_set = prior_number_sets[i] | possible_set
        if BIT_COUNT[joint_number_set] != 3:
            continue
        for j in range(i + 1, this_pos):
            if prior_number_sets[j] and joint_number_set | prior_number_sets[j] == joint_number_set:
                changed += _reserve_naked_group(
                    board,
                    kind,
                    unit,
                    (1 << i) | (1 << j) | (1 << this_pos),
                    joint_number_set,
                    f"naked triple {format_set(joint_number_set)} in {_unit_name(kind, unit)}",
                )
                if board.dead:
                    return changed
                break

    return changed


def eliminate_by_position(board: Board, kind: UnitKind) -> int:
    """Find naked singles and naked subsets in every unit of a kind.

    For each unset cell of a unit, its candidates are collected:

    - no candidate: the board is dead;
    - one candidate: it is placed;
    - `k` cells sharing the same `k` candidates, or three cells whose partially overlapping
      candidate sets span three digits: those digits are removed from the other cells of the
      unit, and from the rest of a crossing unit when the cells share its slice.

    Returns:
        The number of placements and reservations that changed the board.
    """
    board.debug(2, f"Solve eliminate {kind.name.lower()}s by position")

    changed = 0
    for unit in range(9):
        unit_cells = UNIT_CELLS[kind][unit]
        prior_number_sets = [0] * 9

        for pos in range(9):
            idx = unit_cells[pos]
            if board.numbers[idx]:
                continue

            possible_set = board.possible_set(idx)
            possibilities = BIT_COUNT[possible_set]
            if possibilities == 0:
                board.set_dead()
                return changed
            if possibilities == 1:
                board.place(idx, SINGLE_NUMBER[possible_set])
                changed += 1
                if board.dead:
                    return changed
                continue

            prior_number_sets[pos] = possible_set
            changed += _find_and_reserve_naked_group(
                board, kind, unit, prior_number_sets, pos, possible_set
            )
            if board.dead:
                return changed

    return changed


STRATEGIES: tuple[tuple[Strategy, UnitKind], ...] = (
    (eliminate_by_number, UnitKind.BOX),
    (eliminate_by_number, UnitKind.ROW),
    (eliminate_by_number, UnitKind.COL),
    (eliminate_by_position, UnitKind.ROW),
    (eliminate_by_position, UnitKind.COL),
    (eliminate_by_position, UnitKind.BOX),
)
"""Elimination strategies in the order they run within a round."""


def solve_eliminate(board: Board) -> int:
    """Run the elimination strategies in rounds until a round changes nothing.

    Every strategy that changes the board is followed by a drain of the dirty units.

    Returns:
        The total number of changes, including placements made while draining.
    """
    board.debug(2, "Solve eliminate")

    total_changed = 0
    round_no = 0
    while not board.is_done:
        board.debug(2, f"  Round {round_no}:")
        round_no += 1

        changed = 0
        for strategy, kind in STRATEGIES:
            this_changed = strategy(board, kind)
            changed += this_changed
            if board.is_done:
                break
            if this_changed:
                changed += drain_dirty(board)
                if board.is_done:
                    break

        total_changed += changed
        if not changed:
            break

    return total_changed
