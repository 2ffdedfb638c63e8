"""Reusable pool of boards for forking search."""

from dataclasses import dataclass

from sudoku.board import Board, BoardContractError


@dataclass
class PoolStats:
    """Statistics collected by a board pool."""

    created: int = 0
    """Number of boards freshly allocated."""

    reused: int = 0
    """Number of boards handed out again from the free list."""

    released: int = 0
    """Number of boards returned to the pool."""


class BoardPool:
    """Free list of boards.

    A pool is an ordinary value owned by whoever starts solving (the command line, the built-in
    tests, a test case).  Every board it hands out remembers the pool, so forks made during
    search come from and go back to the same pool.  Not thread-safe.
    """

    def __init__(self) -> None:
        self._free: list[Board] = []
        self.stats: PoolStats = PoolStats()

    def __len__(self) -> int:
        """Return the number of boards waiting on the free list."""
        return len(self._free)

    def acquire(self) -> Board:
        """Get an empty board, reusing a released one when available."""
        if self._free:
            board = self._free.pop()
            board.reset()
            board.in_pool = False
            self.stats.reused += 1
        else:
            board = Board(pool=self)
            self.stats.created += 1
        return board

    def release(self, board: Board) -> None:
        """Return a board and every solution attached to it to the free list.

        Raises:
            BoardContractError: If the board belongs to another pool or was already released.
        """
        if board.pool is not self:
            raise BoardContractError("Board released to a pool it does not belong to.")
        if board.in_pool:
            raise BoardContractError("Board released twice.")

        for solution in board.solutions.values():
            self.release(solution)
        board.solutions.clear()

        board.in_pool = True
        self._free.append(board)
        self.stats.released += 1
