"""Run the Sudoku solver with `python -m sudoku`."""

import sys

from sudoku import main

sys.exit(main())
