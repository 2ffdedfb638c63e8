"""Sudoku Solver.

Solves 9x9 Sudoku puzzles with a bitmask-based candidate model.  Singles, locked subsets,
box/line reduction, inter-box rectangles and a bounded cycle check are applied until the board
stops changing; any remaining ambiguity is resolved by forking the board and searching.
"""

import argparse
import sys
from dataclasses import dataclass
from time import time
from typing import TextIO

from sudoku.board import Board
from sudoku.pool import BoardPool
from sudoku.puzzle_file import load_batch, read_puzzle_text, strip_comments
from sudoku.render import format_latex, format_line, format_pretty, format_simple, format_solutions
from sudoku.selftest import run_built_in_tests
from sudoku.solver.solver import solve
from sudoku.util import int_comma, time_str


@dataclass
class RunOptions:
    """Options shared by the input modes of the command line."""

    verbose_level: int = 0
    """Debug level of the boards; above 0, input and solutions are also reported."""

    quiet: bool = False
    """Suppress the batch summary."""

    pretty: bool = False
    """Print boards as a boxed grid."""

    latex: bool = False
    """Print boards as LaTeX rows."""

    find_all: bool = False
    """Look for every solution instead of stopping at the first."""

    guessing_allowed: bool = True
    """Fall back to search when deduction stalls."""

    output_path: str | None = None
    """Batch output file, one solved line per puzzle."""


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="sudoku",
        description=(
            "Solve Sudoku in file(s) or stdin if no file(s) given. "
            "Batch solve Sudokus using -f and -o with one Sudoku per line."
        ),
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", action="store_true", dest="verbose", help="Verbose")
    verbosity.add_argument("-q", action="store_true", dest="quiet", help="Quiet mode")
    parser.add_argument(
        "-d", type=int, dest="debug_level", metavar="LEVEL", help="Turn on debug level"
    )
    parser.add_argument(
        "-a", action="store_true", dest="find_all", help="Find all solutions not just the first"
    )
    parser.add_argument(
        "-n", action="store_false", dest="guessing_allowed", help="Deduction only, no guessing"
    )
    parser.add_argument(
        "-f", dest="input_file", metavar="FILE", help="Input file with one Sudoku per line"
    )
    parser.add_argument(
        "-o", dest="output_file", metavar="FILE", help="Output file with one Sudoku per line"
    )
    parser.add_argument(
        "-p", action="store_true", dest="pretty", help="Pretty print Sudoku instead of just numbers"
    )
    parser.add_argument("-x", action="store_true", dest="latex", help="Print latex code for Sudoku")
    parser.add_argument("-t", action="store_true", dest="run_tests", help="Run built-in tests")
    parser.add_argument("files", nargs="*", metavar="file", help="Files holding one Sudoku each")
    return parser


def parse_options(argv: list[str] | None = None) -> tuple[argparse.Namespace, RunOptions]:
    """Parse and cross-check the command line arguments.

    Exits through `parser.error` on invalid combinations.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    verbose_level = 0
    if args.verbose:
        verbose_level = 1
    if args.debug_level is not None:
        if args.quiet:
            parser.error("Option -d and -q can't be used together.")
        verbose_level = args.debug_level if args.debug_level > 0 else 1
    if args.output_file and not args.input_file:
        parser.error("Option -o filename can't be given without -f filename.")
    if args.input_file and args.files:
        parser.error("Option -f can't be used with arguments.")

    options = RunOptions(
        verbose_level=verbose_level,
        quiet=args.quiet,
        pretty=args.pretty,
        latex=args.latex,
        find_all=args.find_all,
        guessing_allowed=args.guessing_allowed,
        output_path=args.output_file,
    )
    return args, options


def new_board(pool: BoardPool, options: RunOptions, out: TextIO) -> Board:
    """Get a board from the pool, set up for the given options."""
    board = pool.acquire()
    board.debug_level = options.verbose_level
    board.guessing_allowed = options.guessing_allowed
    if options.find_all:
        board.max_solutions = 0
    board.log = out
    return board


def format_result(board: Board, options: RunOptions) -> str:
    """Format a solved board, or each of its solutions, in the selected format."""
    if options.pretty:
        fmt = format_pretty
    elif options.latex:
        fmt = format_latex
    else:
        fmt = format_simple
    boards = list(board.solutions.values()) or [board]
    return "\n\n".join(fmt(b) for b in boards)


def solve_and_report(board: Board, options: RunOptions, out: TextIO) -> int:
    """Solve a board that has been read, reporting input and solutions when verbose.

    Returns:
        The value returned by `solve`.
    """
    if options.verbose_level:
        print("-------- Input --------", file=out)
        print(format_pretty(board), file=out)
        if options.latex:
            print(format_latex(board), file=out)
        print("---Solve---", file=out, flush=True)

    start_time = time()
    solutions_count = solve(board)

    if options.verbose_level:
        if solutions_count:
            print(f"Found {solutions_count} solution(s)", file=out)
        else:
            print("No solution found", file=out)
        print(f"Time taken: {time_str(time() - start_time)}", file=out)
        print("-------- Output -------", file=out)
        print(format_solutions(board), file=out)
        print(file=out, flush=True)
    return solutions_count


def run_from_file(path: str, options: RunOptions, pool: BoardPool, out: TextIO) -> int:
    """Solve the puzzle held in one file and print the result.

    Returns:
        0 on success, 1 if the file could not be read.
    """
    try:
        text = read_puzzle_text(path)
    except FileNotFoundError as e:
        print(e, file=sys.stderr)
        return 1

    board = new_board(pool, options, out)
    board.read(text)
    solve_and_report(board, options, out)
    print(format_result(board, options), file=out, flush=True)
    board.destroy()
    return 0


def run_stdio(options: RunOptions, pool: BoardPool, stdin: TextIO, out: TextIO) -> int:
    """Solve the puzzle read from `stdin`, skipping comment lines, and print the result.

    Returns:
        0.
    """
    text = strip_comments(stdin)

    board = new_board(pool, options, out)
    board.read(text)
    solve_and_report(board, options, out)
    print(format_result(board, options), file=out, flush=True)
    board.destroy()
    return 0


def run_batch_from_file(input_path: str, options: RunOptions, pool: BoardPool, out: TextIO) -> int:
    """Solve every puzzle of a batch file, one per line.

    Each result is written as an 81-character line to the output file, if one is given.  Unless
    quiet, a summary of solved and unsolved puzzles is printed.

    Returns:
        0 on success, 1 if a file could not be opened.
    """
    try:
        entries = load_batch(input_path)
    except FileNotFoundError as e:
        print(e, file=sys.stderr)
        return 1

    fout: TextIO | None = None
    if options.output_path:
        try:
            fout = open(options.output_path, "w", encoding="utf-8")
        except OSError:
            print(f"Could not open output file: {options.output_path}", file=sys.stderr)
            return 1

    total_solved = 0
    total_unsolved = 0
    start_time = time()
    try:
        for entry in entries:
            board = new_board(pool, options, out)
            board.read(entry.text)
            if solve_and_report(board, options, out):
                total_solved += 1
            else:
                total_unsolved += 1
            if options.verbose_level:
                print("=====================\n", file=out, flush=True)
            if fout is not None:
                print(format_line(board), file=fout, flush=True)
            board.destroy()
    finally:
        if fout is not None:
            fout.close()

    if not options.quiet:
        if entries:
            print(
                f"Number of solved: {int_comma(total_solved)}  "
                f"Number of unsolved: {int_comma(total_unsolved)}",
                file=out,
            )
        else:
            print(f"No puzzles found in file: {input_path}", file=out)
        if options.verbose_level:
            print(f"Time taken: {time_str(time() - start_time)}", file=out)
        out.flush()
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the Sudoku solver.

    Returns:
        The process exit status.
    """
    args, options = parse_options(argv)
    out = sys.stdout
    pool = BoardPool()

    if args.run_tests:
        status = run_built_in_tests(pool, debug_level=max(options.verbose_level, 1), out=out)
        return 1 if status else 0

    status = 0
    if args.input_file:
        status = run_batch_from_file(args.input_file, options, pool, out)

    for path in args.files:
        if status:
            break
        status = run_from_file(path, options, pool, out)

    if not args.files and not args.input_file:
        status = run_stdio(options, pool, sys.stdin, out)

    if options.verbose_level > 1:
        stats = pool.stats
        print(
            f"Boards created: {int_comma(stats.created)}  reused: {int_comma(stats.reused)}",
            file=out,
            flush=True,
        )
    return status
