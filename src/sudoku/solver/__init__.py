"""Deduction strategies and search for the Sudoku engine."""
