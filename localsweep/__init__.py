"""
Minesweeper with a local-deduction solver

A square Minesweeper board plus a solver that plays it using:
- Deduction: single-constraint safe/mine inference from revealed counts
- Propagation: re-deduction around newly marked mines
- Probabilistic guessing: greedy local mine probabilities with a random
  fallback among cells no constraint touches
"""

from .engine import Cell, GameState, Minesweeper
from .errors import (
    GameOverError,
    InvalidMoveError,
    MinesweeperError,
    SolverStalledError,
)
from .solver import MinesweeperSolver, SolveOutcome
from .analysis import (
    LEVELS,
    format_solver_knowledge,
    plot_level_results,
    run_solver_single_test,
    run_solver_many_tests,
    run_solver_level_analysis,
)

__version__ = "1.0.0"

__all__ = [
    # Core classes
    "Cell",
    "GameState",
    "Minesweeper",
    "MinesweeperSolver",
    "SolveOutcome",
    # Errors
    "MinesweeperError",
    "InvalidMoveError",
    "GameOverError",
    "SolverStalledError",
    # Analysis functions
    "LEVELS",
    "format_solver_knowledge",
    "plot_level_results",
    "run_solver_single_test",
    "run_solver_many_tests",
    "run_solver_level_analysis",
]
