"""Sudoku solver configuration."""

from dotenv import find_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Determine the environment file path, or None if not found
ENV_FILE = find_dotenv() or None


class SolverConfig(BaseSettings):
    """Configuration settings for the Sudoku solver.

    Every field can be overridden with a `SUDOKU_`-prefixed environment variable.
    """

    max_solutions: int = 1
    """Stop searching once this many solutions are found. 0 means no limit. Default: 1."""

    guessing_allowed: bool = True
    """Whether to fall back to forking search when deduction stalls. Default: True."""

    debug_level: int = 0
    """Diagnostic verbosity of new boards (0 = silent, 3 = per-candidate detail). Default: 0."""

    use_rectangles: bool = True
    """Whether to run the inter-box rectangle elimination. Default: True."""

    use_chains: bool = True
    """Whether to run the bounded cycle/chain validator. Default: True."""

    chain_max_hops: int = 6
    """Maximum number of cells in a cycle examined by the chain validator. Default: 6."""

    chain_max_candidates: int = 2
    """Cells with more candidates than this are not walked through by the chain validator.

    The start cell of a walk is exempt.  Default: 2.
    """

    chain_max_nest_level: int = 0
    """Deepest search level at which the chain validator runs.

    Negative means every level.  Default: 0.
    """

    model_config = SettingsConfigDict(
        env_prefix="SUDOKU_",
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )


config = SolverConfig()
