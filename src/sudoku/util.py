"""Utility functions for the Sudoku engine."""

import numpy as np
import numpy.typing as npt

from sudoku.board import Board

DIGITS = np.arange(1, 10)


def time_str(seconds: float) -> str:
    """Convert a time duration in seconds to a human-readable string.

    Args:
        seconds: Time duration in seconds.

    Returns:
        A string formatted as "HH:MM:SS.ss".
    """
    hours, rem = divmod(seconds, 3600)
    minutes, secs = divmod(rem, 60)
    return f"{int(hours):02}:{int(minutes):02}:{secs:05.2f}"


def int_comma(n: int) -> str:
    """Format an integer with commas as thousands separators."""
    return f"{n:,}"


def grid_array(board: Board | str) -> npt.NDArray[np.int_]:
    """Get the digits of a board, or of an 81-character line, as a 9x9 array (0 for unset)."""
    if isinstance(board, Board):
        return np.array(board.grid(), dtype=int)
    if len(board) != 81:
        raise ValueError(f"Expected 81 characters, got {len(board)}.")
    return np.array([int(ch) for ch in board], dtype=int).reshape(9, 9)


def is_valid_solution(board: Board | str) -> bool:
    """Check that every row, column and box holds each digit 1-9 exactly once."""
    grid = grid_array(board)
    boxes = grid.reshape(3, 3, 3, 3).swapaxes(1, 2).reshape(9, 9)
    return all(
        np.array_equal(np.sort(units, axis=1), np.tile(DIGITS, (9, 1)))
        for units in (grid, grid.T, boxes)
    )


def matches_clues(solution: Board | str, puzzle: Board | str) -> bool:
    """Check that a solution keeps every clue of the puzzle."""
    clues = grid_array(puzzle)
    mask = clues != 0
    return bool(np.array_equal(grid_array(solution)[mask], clues[mask]))
