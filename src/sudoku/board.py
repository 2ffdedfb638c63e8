"""Board representation for the Sudoku engine."""

import sys
from array import array
from typing import TYPE_CHECKING, TextIO

from sortedcontainers import SortedDict

from sudoku.bits import (
    BIT_COUNT,
    INDEX_SET_MASK,
    available_from_taken,
    format_set,
    number_to_set,
)
from sudoku.geometry import CELLS, N_CELLS, UNIT_CELLS, Cell, UnitKind
from sudoku.solver.config import config as solver_config

if TYPE_CHECKING:
    from sudoku.pool import BoardPool

ROW, COL, BOX = UnitKind.ROW, UnitKind.COL, UnitKind.BOX


class BoardContractError(RuntimeError):
    """Exception raised when a board is queried or mutated against its contract.

    Examples are asking for the candidates of a filled cell, placing a digit that is not a
    candidate, or widening a cell's reservation.  These are programming errors, never puzzle
    contradictions.
    """

    pass


class Board:
    """Represents a Sudoku board together with its candidate-tracking state.

    Cell state is kept in board-owned arrays indexed by cell index (`row * 9 + col`).  Unit state
    is kept as 9-bit masks per unit kind, indexed by unit id.
    """

    def __init__(self, pool: "BoardPool | None" = None) -> None:
        self.pool: "BoardPool | None" = pool
        """Pool that supplies forks of this board and takes it back on `destroy`."""

        self.in_pool: bool = False
        """Whether the board currently sits on its pool's free list."""

        self.numbers: array[int] = array("B", bytes(N_CELLS))
        """Digit placed in each cell, 0 if unset."""

        self.reserved: array[int] = array("H", bytes(2 * N_CELLS))
        """Reservation (number set) of each cell, 0 if none.

        A non-zero reservation is always a subset of the digits available from the taken sets.
        """

        self.taken: list[array[int]] = [array("H", bytes(18)) for _ in UnitKind]
        """`taken[kind][unit]` is the number set of digits placed in that unit."""

        self.empty: list[array[int]] = [array("H", bytes(18)) for _ in UnitKind]
        """`empty[kind][unit]` is the index set of unset positions in that unit."""

        self.dirty: array[int] = array("H", bytes(2 * len(UnitKind)))
        """`dirty[kind]` is the index set of units of that kind touched since the last drain."""

        self.undetermined_count: int = N_CELLS
        """Number of unset cells."""

        self.dead: bool = False
        """Whether a contradiction was found on this board."""

        self.nest_level: int = 0
        """Search depth of this board (0 for the root board)."""

        self.debug_level: int = 0
        """Diagnostic verbosity of this board."""

        self.guessing_allowed: bool = True
        """Whether `solve` may fork the board when deduction stalls."""

        self.max_solutions: int = 1
        """Stop searching once this many solutions are held. 0 means no limit."""

        self.solutions: SortedDict = SortedDict()
        """Solutions found by searching from this board, keyed by `Board.key()`.

        Keying by grid content rejects duplicates and keeps iteration order independent of the
        order in which solutions were discovered.
        """

        self.log: TextIO | None = None
        """Stream for diagnostics. If None, `sys.stdout` is used."""

        self.reset()

    def reset(self) -> None:
        """Return the board to the empty initial state."""
        for idx in range(N_CELLS):
            self.numbers[idx] = 0
            self.reserved[idx] = 0
        for kind in UnitKind:
            for unit in range(9):
                self.taken[kind][unit] = 0
                self.empty[kind][unit] = INDEX_SET_MASK
            self.dirty[kind] = INDEX_SET_MASK
        self.undetermined_count = N_CELLS
        self.dead = False
        self.nest_level = 0
        self.debug_level = solver_config.debug_level
        self.guessing_allowed = solver_config.guessing_allowed
        self.max_solutions = solver_config.max_solutions
        self.solutions = SortedDict()
        self.log = None

    def copy_from(self, src: "Board") -> None:
        """Overwrite the grid state of this board with that of `src`.

        Copies cells, unit masks, the undetermined count and the dead flag.  The board's own
        settings (nest level, debug level, guessing, solution cap, log) and its solutions are
        left alone.
        """
        self.numbers[:] = src.numbers
        self.reserved[:] = src.reserved
        for kind in UnitKind:
            self.taken[kind][:] = src.taken[kind]
            self.empty[kind][:] = src.empty[kind]
        self.dirty[:] = src.dirty
        self.undetermined_count = src.undetermined_count
        self.dead = src.dead

    def duplicate(self) -> "Board":
        """Generate an independent copy of the board, without its solutions."""
        dup = self.pool.acquire() if self.pool is not None else Board()
        dup.copy_from(self)
        dup.nest_level = self.nest_level
        dup.debug_level = self.debug_level
        dup.guessing_allowed = self.guessing_allowed
        dup.max_solutions = self.max_solutions
        dup.log = self.log
        return dup

    def destroy(self) -> None:
        """Release the board and its solutions, back to the pool if it has one."""
        if self.pool is not None:
            self.pool.release(self)
            return
        for solution in self.solutions.values():
            solution.destroy()
        self.solutions.clear()

    def __str__(self) -> str:
        """Return the 81-character line encoding of the board ('0' for unset cells)."""
        return "".join(chr(48 + number) for number in self.numbers)

    def __getitem__(self, idx: int | tuple[int, int]) -> int:
        """Get the digit of a cell by 1D (row-major order) or 2D index, 0 if unset."""
        if isinstance(idx, int):
            return self.numbers[idx]
        if isinstance(idx, tuple) and len(idx) == 2:
            row, col = idx
            return self.numbers[row * 9 + col]
        raise IndexError("Invalid index type for Board.")

    def key(self) -> bytes:
        """Return the grid content as bytes, used to detect identical solutions."""
        return self.numbers.tobytes()

    def grid(self) -> list[list[int]]:
        """Return the digits as a list of 9 rows."""
        return [list(self.numbers[row * 9 : row * 9 + 9]) for row in range(9)]

    @property
    def is_done(self) -> bool:
        """Whether no further deduction should run on this board."""
        return self.dead or self.undetermined_count == 0 or len(self.solutions) > 0

    @property
    def is_solved(self) -> bool:
        """Whether the board is fully determined or holds at least one solution."""
        return self.undetermined_count == 0 or len(self.solutions) > 0

    @property
    def solution_count(self) -> int:
        """Number of solutions held by the board."""
        return len(self.solutions)

    @property
    def solution_cap_reached(self) -> bool:
        """Whether the board holds as many solutions as it is allowed to look for."""
        return 0 < self.max_solutions <= len(self.solutions)

    def debug(self, level: int, message: str) -> None:
        """Print a diagnostic message if the board's debug level is at least `level`."""
        if self.debug_level >= level:
            print(message, file=self.log or sys.stdout, flush=True)

    def set_dead(self) -> None:
        """Declare the board contradictory."""
        self.debug(1, "Board is declared dead!")
        self.dead = True

    def _available_set(self, cell: Cell) -> int:
        taken_set = self.taken[ROW][cell.row] | self.taken[COL][cell.col] | self.taken[BOX][cell.box]
        return available_from_taken(taken_set)

    def _mark_units_dirty(self, cell: Cell) -> None:
        self.dirty[ROW] |= 1 << cell.row
        self.dirty[COL] |= 1 << cell.col
        self.dirty[BOX] |= 1 << cell.box

    def possible_set(self, idx: int) -> int:
        """Return the number set of digits still legal for an unset cell.

        Raises:
            BoardContractError: If the cell is already set.
        """
        if self.numbers[idx]:
            cell = CELLS[idx]
            raise BoardContractError(
                f"Cell [{cell.row},{cell.col}] is already set to {self.numbers[idx]}."
            )
        available_set = self._available_set(CELLS[idx])
        reserved = self.reserved[idx]
        return available_set & reserved if reserved else available_set

    def place(self, idx: int, number: int) -> None:
        """Place a digit in an unset cell and update the unit masks.

        The digit is also dropped from the reservations of the unset cells sharing a unit with the
        cell.  A reservation left empty this way marks the board dead.

        Raises:
            BoardContractError: If the cell is already set or `number` is not one of its
                candidates.
        """
        cell = CELLS[idx]
        if not 1 <= number <= 9 or not self.possible_set(idx) & number_to_set(number):
            raise BoardContractError(
                f"Cannot place {number} at [{cell.row},{cell.col}]: not a candidate."
            )

        number_set = number_to_set(number)
        self.numbers[idx] = number
        self.reserved[idx] = 0

        self.taken[ROW][cell.row] |= number_set
        self.taken[COL][cell.col] |= number_set
        self.taken[BOX][cell.box] |= number_set
        self.empty[ROW][cell.row] &= ~(1 << cell.col)
        self.empty[COL][cell.col] &= ~(1 << cell.row)
        self.empty[BOX][cell.box] &= ~(1 << cell.index_in_box)
        self._mark_units_dirty(cell)
        self.undetermined_count -= 1

        self.debug(1, f"    [{cell.row},{cell.col}]  =  {number}")

        for kind, unit in ((ROW, cell.row), (COL, cell.col), (BOX, cell.box)):
            for peer in UNIT_CELLS[kind][unit]:
                reserved = self.reserved[peer]
                if not reserved & number_set:
                    continue
                reserved &= ~number_set
                self.reserved[peer] = reserved
                if not reserved and not self.dead:
                    self.set_dead()

    def reserve(self, idx: int, number_set: int, reason: str | None = None) -> bool:
        """Narrow the candidates of an unset cell to `number_set`.

        Digits no longer available from the taken sets are dropped from the request first.  An
        empty request is a puzzle contradiction and marks the board dead.

        Args:
            idx: Index of the cell.
            number_set: The digits the cell is restricted to.
            reason: Name of the deduction making the request, for diagnostics.

        Returns:
            True if the cell's candidate set shrank.

        Raises:
            BoardContractError: If the cell is already set, or the request would widen an
                existing reservation.
        """
        before = self.possible_set(idx)
        cell = CELLS[idx]
        if reason is not None:
            self.debug(2, f"{reason}: [{cell.row},{cell.col}] = {format_set(number_set)}")

        number_set &= self._available_set(cell)
        if not number_set:
            self.set_dead()
            return False

        reserved = self.reserved[idx]
        if reserved and number_set & ~reserved:
            raise BoardContractError(
                f"Reservation {format_set(number_set)} at [{cell.row},{cell.col}] widens "
                f"existing reservation {format_set(reserved)}."
            )

        self.reserved[idx] = number_set
        if number_set == before:
            return False

        if BIT_COUNT[number_set] == 1:
            self._mark_units_dirty(cell)
        self.debug(1, f"    [{cell.row},{cell.col}]  =  {format_set(number_set)}")
        return True

    def add_solution(self, solution: "Board") -> bool:
        """Add a solved board to this board's solutions, taking ownership of it.

        A solution identical to one already held is destroyed instead.

        Returns:
            True if the solution was added.
        """
        key = solution.key()
        if key in self.solutions:
            solution.destroy()
            return False
        self.solutions[key] = solution
        return True

    def adopt_solutions(self, other: "Board") -> None:
        """Move every solution held by `other` into this board's solutions."""
        while other.solutions:
            _, solution = other.solutions.popitem()
            self.add_solution(solution)

    def read(self, text: str) -> int:
        """Load clues from a text encoding.

        Characters '1'-'9' are clues, '0', '.' and '?' are blanks, and every other character is
        skipped.  The first 81 clue or blank characters fill the grid in row-major order.

        Returns:
            0 if every clue was placed, 1 if a clue conflicted with earlier ones and was dropped.
        """
        status = 0
        idx = 0
        for ch in text:
            if ch in ".?":
                ch = "0"
            if not "0" <= ch <= "9":
                continue

            number = ord(ch) - 48
            if number:
                if not self.numbers[idx] and self.possible_set(idx) & number_to_set(number):
                    self.place(idx, number)
                else:
                    status = 1
                    cell = CELLS[idx]
                    self.debug(
                        1, f"[{cell.row},{cell.col}] = {number} - Invalid assignment, ignoring it"
                    )

            idx += 1
            if idx == N_CELLS:
                break
        return status
