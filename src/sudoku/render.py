"""Text renderings of a board."""

from sudoku.bits import available_from_taken, iter_bits
from sudoku.board import Board
from sudoku.geometry import CELLS, UnitKind

BOX_SEPARATOR_ROW = "-------+-------+-------"


def format_line(board: Board) -> str:
    """Format the board as one line of 81 digits, '0' for unset cells."""
    return str(board)


def format_simple(board: Board) -> str:
    """Format the board as 9 lines of 9 digits, '0' for unset cells."""
    line = str(board)
    return "\n".join(line[row * 9 : row * 9 + 9] for row in range(9))


def format_pretty(board: Board) -> str:
    """Format the board as a boxed grid, '.' for unset cells.

    Example row: ` 5 3 . | . 7 . | . . .`
    """
    lines = []
    for row in range(9):
        line = ""
        for col in range(9):
            number = board[row, col]
            line += f" {number if number else '.'}"
            if col in (2, 5):
                line += " |"
        lines.append(line)
        if row in (2, 5):
            lines.append(BOX_SEPARATOR_ROW)
    return "\n".join(lines)


def format_latex(board: Board) -> str:
    r"""Format the board as LaTeX `\setrow` commands, one per row, with blank cells left empty.

    Boxes are separated by extra spaces within a row and by an empty line between bands.
    """
    lines = []
    for row in range(9):
        line = "\\setrow "
        for col in range(9):
            number = board[row, col]
            line += f"{{{number if number else ' '}}}"
            if col in (2, 5):
                line += "  "
        lines.append(line)
        if row in (2, 5):
            lines.append("")
    return "\n".join(lines)


def format_possible(board: Board) -> str:
    """List the candidates of every unset cell, with the availability and reservation behind them.

    Example line: `[0,2] Possible: 1 2 4    (available: 1 2 4)`
    """
    lines = []
    for cell in CELLS:
        if board.numbers[cell.index]:
            continue
        possible = " ".join(str(n) for n in iter_bits(board.possible_set(cell.index)))
        taken_set = (
            board.taken[UnitKind.ROW][cell.row]
            | board.taken[UnitKind.COL][cell.col]
            | board.taken[UnitKind.BOX][cell.box]
        )
        available = "".join(f" {n}" for n in iter_bits(available_from_taken(taken_set)))
        line = f"[{cell.row},{cell.col}] Possible: {possible}    (available:{available}"
        reserved_set = board.reserved[cell.index]
        if reserved_set:
            line += "  reserved:" + "".join(f" {n}" for n in iter_bits(reserved_set))
        lines.append(line + ")")
    return "\n".join(lines)


def format_solutions(board: Board) -> str:
    """Format the solutions held by a board.

    A board without solutions is shown itself, followed by the candidates of its unset cells.
    """
    if not board.solutions:
        text = format_pretty(board)
        if board.undetermined_count:
            text += "\n" + format_possible(board)
        return text

    parts = [f"Number of solutions: {len(board.solutions)}"]
    parts.append("\n\n\n".join(format_pretty(solution) for solution in board.solutions.values()))
    return "\n".join(parts)
