"""Fixed geometry of the 9x9 board: cells, units and the slices where units intersect."""

from enum import IntEnum
from typing import NamedTuple

from sudoku.bits import BOX_IN_LINE_MASKS, COL_IN_BOX_MASKS, ROW_IN_BOX_MASKS

N_CELLS = 81
"""Number of cells on the board."""


class UnitKind(IntEnum):
    """Enumeration for the three kinds of unit."""

    ROW = 0
    COL = 1
    BOX = 2


class Cell(NamedTuple):
    """Static description of a cell.

    The cell's number and reservation live in board-owned arrays, indexed by `index`.
    """

    index: int
    row: int
    col: int
    box: int
    index_in_box: int

    def unit(self, kind: UnitKind) -> int:
        """Return the id of the unit of the given kind that owns this cell."""
        if kind == UnitKind.ROW:
            return self.row
        if kind == UnitKind.COL:
            return self.col
        return self.box

    def position(self, kind: UnitKind) -> int:
        """Return the position of this cell within its unit of the given kind."""
        if kind == UnitKind.ROW:
            return self.col
        if kind == UnitKind.COL:
            return self.row
        return self.index_in_box


def box_of(row: int, col: int) -> int:
    """Return the box id of the cell at (row, col)."""
    return (row // 3) * 3 + col // 3


def _build_cells() -> tuple[Cell, ...]:
    next_free_idx = [0] * 9
    cells = []
    for row in range(9):
        for col in range(9):
            box = box_of(row, col)
            cells.append(Cell(row * 9 + col, row, col, box, next_free_idx[box]))
            next_free_idx[box] += 1
    return tuple(cells)


CELLS: tuple[Cell, ...] = _build_cells()
"""All cells in scan order (row-major)."""


def _build_unit_cells() -> tuple[tuple[tuple[int, ...], ...], ...]:
    units = [[[0] * 9 for _ in range(9)] for _ in UnitKind]
    for cell in CELLS:
        for kind in UnitKind:
            units[kind][cell.unit(kind)][cell.position(kind)] = cell.index
    return tuple(tuple(tuple(unit) for unit in by_kind) for by_kind in units)


UNIT_CELLS = _build_unit_cells()
"""`UNIT_CELLS[kind][unit][pos]` is the index of the cell at position `pos` of that unit."""


def cell_at(row: int, col: int) -> Cell:
    """Return the cell at (row, col)."""
    return CELLS[row * 9 + col]


def crossing_slices(kind: UnitKind, unit: int, index_set: int) -> list[tuple[UnitKind, int, int]]:
    """Find the units crossing `unit` that contain every position in `index_set`.

    When all positions of `index_set` (an index set within the unit) lie in the slice where the
    unit intersects another unit, that other unit is returned together with the index set of the
    same slice expressed in the other unit's own positions.

    Returns:
        A list of `(other_kind, other_unit, slice_index_set)` tuples (empty if the positions are
        spread over more than one slice).
    """
    slices: list[tuple[UnitKind, int, int]] = []
    if not index_set:
        return slices

    if kind == UnitKind.BOX:
        band, stack = divmod(unit, 3)
        for i in range(3):
            if index_set | ROW_IN_BOX_MASKS[i] == ROW_IN_BOX_MASKS[i]:
                slices.append((UnitKind.ROW, band * 3 + i, BOX_IN_LINE_MASKS[stack]))
            if index_set | COL_IN_BOX_MASKS[i] == COL_IN_BOX_MASKS[i]:
                slices.append((UnitKind.COL, stack * 3 + i, BOX_IN_LINE_MASKS[band]))
        return slices

    for i in range(3):
        if index_set | BOX_IN_LINE_MASKS[i] == BOX_IN_LINE_MASKS[i]:
            if kind == UnitKind.ROW:
                slices.append((UnitKind.BOX, box_of(unit, i * 3), ROW_IN_BOX_MASKS[unit % 3]))
            else:
                slices.append((UnitKind.BOX, box_of(i * 3, unit), COL_IN_BOX_MASKS[unit % 3]))
    return slices
