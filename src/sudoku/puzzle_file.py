"""Loaders for puzzle files."""

from collections.abc import Iterable
from dataclasses import dataclass
from os import PathLike
from pathlib import Path

COMMENT_PREFIXES = ("#", ";", "!")
"""Lines starting with any of these are comments."""

MIN_BATCH_LINE_LENGTH = 8 * 8 + 1
"""Batch lines shorter than this (newline included) cannot hold a puzzle and are skipped."""


@dataclass
class BatchEntry:
    """One puzzle of a batch file."""

    line_no: int
    """1-based line number of the puzzle in its file."""

    text: str
    """The puzzle line, without its line terminator."""


def is_comment(line: str) -> bool:
    """Return whether a line is a comment line."""
    return line.startswith(COMMENT_PREFIXES)


def strip_comments(lines: Iterable[str]) -> str:
    """Join the non-comment lines of a puzzle into one text, keeping line terminators."""
    return "".join(line for line in lines if line and not is_comment(line))


def read_puzzle_text(puzzle_path: PathLike | str) -> str:
    """Read a whole-file puzzle with its comment lines removed.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    path = Path(puzzle_path)
    if not path.is_file():
        raise FileNotFoundError(f"Could not open file: {path}")
    with open(path, "r", encoding="utf-8") as f:
        return strip_comments(f)


def load_batch(batch_path: PathLike | str) -> list[BatchEntry]:
    """Load a batch file holding one puzzle per line.

    Comment lines and lines too short to hold a puzzle are skipped.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    path = Path(batch_path)
    if not path.is_file():
        raise FileNotFoundError(f"Could not open input file: {path}")

    entries = []
    with open(path, "r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            # Count a missing final newline as if it were there
            length = len(line) if line.endswith("\n") else len(line) + 1
            if length < MIN_BATCH_LINE_LENGTH or is_comment(line):
                continue
            entries.append(BatchEntry(line_no=line_no, text=line.rstrip("\r\n")))
    return entries
