"""Analysis and benchmarking tools for the Minesweeper solver."""

from typing import Any, Dict, List, Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np

from .engine import COVERED, Minesweeper
from .solver import MinesweeperSolver, SolveOutcome

# Standard square presets: name -> (grid_size, mines_count)
LEVELS: Dict[str, Tuple[int, int]] = {
    "small": (8, 6),
    "medium": (10, 10),
    "large": (16, 40),
}


def format_solver_knowledge(
    solver: MinesweeperSolver, *, show_coords: bool = True
) -> str:
    """
    Format the solver's current view of the board as a human-readable string.

    Args:
        solver: Solver instance whose knowledge will be displayed.
        show_coords: If True, include row/column labels and a header.

    Returns:
        A text grid where covered cells are '.', cells marked as mines are
        'F', and revealed cells show their neighbor mine count.
    """
    n = solver.grid_size
    view = solver.game.snapshot()

    def cell_char(x: int, y: int) -> str:
        if solver.mine_marks[x, y]:
            return "F"
        v = int(view[x, y])
        if v == COVERED:
            return "."
        return str(v)

    lines: List[str] = []
    if show_coords:
        header = " ".join(f"{y:2d}" for y in range(n))
        lines.append("   " + header)
        lines.append("   " + "-" * (3 * n - 1))

    for x in range(n):
        row = " ".join(f" {cell_char(x, y)}" for y in range(n))
        lines.append(f"{x:2d} |" + row if show_coords else row)

    return "\n".join(lines)


def run_solver_single_test(
    grid_size: int,
    mines_count: int,
    *,
    seed: Optional[int] = None,
    show_boards: bool = False,
) -> Dict[str, Any]:
    """
    Run one end-to-end game with MinesweeperSolver on a fresh board.

    Args:
        grid_size: Side length of the board.
        mines_count: Total number of mines on the board.
        seed: Seed for both the board and the solver (solver gets seed + 1).
        show_boards: If True, print the underlying board and the solver's final
            knowledge state.

    Returns:
        The solver's payload augmented with "outcome".
    """
    game = Minesweeper(grid_size, mines_count, seed=seed)
    solver = MinesweeperSolver(game, seed=None if seed is None else seed + 1)

    outcome, payload = solver.solve()

    if show_boards:
        print("Underlying board (mines visible):")
        print(game.format_board(reveal_all=True))
        print()
        print("Solver knowledge (covered shown as '.'):")
        print(format_solver_knowledge(solver, show_coords=True))
        print()
        print(f"Finished with outcome {outcome.value}.")

    out = dict(payload)
    out["outcome"] = outcome
    return out


def run_solver_many_tests(
    grid_size: int,
    mines_count: int,
    runs: int,
    *,
    seed: Optional[int] = None,
) -> Dict[str, float]:
    """
    Run many independent solver games and return averaged metrics plus outcome rates.

    Args:
        grid_size: Side length of the board.
        mines_count: Total number of mines on the board.
        runs: Number of independent games to run.
        seed: Base seed; run i uses seed + 2 * i.

    Returns:
        Averages of numeric payload metrics (prefixed with "avg_"), plus:
        - win_rate
        - loss_rate
        - stall_rate
        - avg_guesses_total
        - guess_failure_rate
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")

    samples: Dict[str, List[float]] = {}
    counts = {outcome: 0 for outcome in SolveOutcome}
    total_guesses = 0.0

    for i in range(runs):
        payload = run_solver_single_test(
            grid_size, mines_count, seed=None if seed is None else seed + 2 * i
        )
        outcome = payload.pop("outcome")
        counts[outcome] += 1

        for k, v in payload.items():
            if isinstance(v, (int, float)) and not isinstance(v, bool):
                samples.setdefault(f"avg_{k}", []).append(float(v))

        total_guesses += float(
            payload["probability_guesses_count"] + payload["fallback_guesses_count"]
        )

    out: Dict[str, float] = {k: float(np.mean(v)) for k, v in samples.items()}
    out["win_rate"] = counts[SolveOutcome.WON] / runs
    out["loss_rate"] = counts[SolveOutcome.LOST] / runs
    out["stall_rate"] = counts[SolveOutcome.STALLED] / runs
    out["avg_guesses_total"] = total_guesses / runs
    # Every loss is caused by exactly one failed guess.
    out["guess_failure_rate"] = (
        counts[SolveOutcome.LOST] / total_guesses if total_guesses > 0 else 0.0
    )
    return out


def plot_level_results(results: Dict[str, Dict[str, float]], *, show: bool = True) -> Any:
    """
    Plot win rate and average guesses per level side by side.

    Returns:
        The matplotlib figure.
    """
    level_names = list(results.keys())
    x = np.arange(len(level_names))

    fig, (ax_win, ax_guess) = plt.subplots(1, 2, figsize=(10, 4))

    ax_win.bar(x, [results[n]["win_rate"] for n in level_names])
    ax_win.set_xticks(x)
    ax_win.set_xticklabels(level_names)
    ax_win.set_ylabel("Win rate")
    ax_win.set_ylim(0.0, 1.0)
    ax_win.set_title("Win rate by level")

    bar_w = 0.35
    ax_guess.bar(
        x - bar_w / 2,
        [results[n]["avg_probability_guesses_count"] for n in level_names],
        width=bar_w,
        label="lowest probability",
    )
    ax_guess.bar(
        x + bar_w / 2,
        [results[n]["avg_fallback_guesses_count"] for n in level_names],
        width=bar_w,
        label="fallback",
    )
    ax_guess.set_xticks(x)
    ax_guess.set_xticklabels(level_names)
    ax_guess.set_ylabel("Average guesses per game")
    ax_guess.set_title("Guesses by kind")
    ax_guess.legend()

    fig.tight_layout()
    if show:
        plt.show()
    return fig


def run_solver_level_analysis(
    runs: int,
    *,
    seed: Optional[int] = None,
    levels: Optional[Dict[str, Tuple[int, int]]] = None,
    show: bool = True,
) -> Dict[str, Dict[str, float]]:
    """
    Run aggregated solver tests on each level and plot summaries.

    Args:
        runs: Number of independent games to run per level.
        seed: Base seed passed to run_solver_many_tests().
        levels: Levels to run; defaults to LEVELS.
        show: If True, display the plots.

    Returns:
        Mapping from level name to statistics dict returned by run_solver_many_tests().
    """
    levels = LEVELS if levels is None else levels

    results: Dict[str, Dict[str, float]] = {}
    for level, (grid_size, mines_count) in levels.items():
        results[level] = run_solver_many_tests(grid_size, mines_count, runs, seed=seed)

    plot_level_results(results, show=show)
    return results
