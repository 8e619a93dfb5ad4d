"""Interactive console and batch mode for the board and the solver."""

import argparse
import logging
import sys
import time
from typing import List, Optional, TextIO

from .engine import Minesweeper
from .errors import InvalidMoveError
from .solver import MinesweeperSolver, SolveOutcome

DEFAULT_GRID_SIZE = 10
DEFAULT_MINES = 10

EXPOSE_CELL_CMD = "e"
QUIT_CMD = "quit"
EXPOSE_ALL_CMD = "expose_all"
SOLVE_CMD = "solve"

HELP_TEXT = """e X Y       -- exposes cell at row X column Y
expose_all  -- exposes every cell, ending the game.
solve       -- run the algorithmic solver on the current game.
quit        -- quits the console, ending the game."""


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="localsweep",
        description="Play Minesweeper on a square grid or let the solver play it.",
    )
    parser.add_argument(
        "--grid-size", type=int, default=DEFAULT_GRID_SIZE, help="Side length of the grid."
    )
    parser.add_argument(
        "--mines", type=int, default=DEFAULT_MINES, help="Number of mines on the board."
    )
    parser.add_argument(
        "--no-console",
        action="store_true",
        help="Batch mode: run the solver without the interactive prompt.",
    )
    parser.add_argument(
        "--runs", type=int, default=1, help="Number of games to solve in batch mode."
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed.")
    parser.add_argument("--verbose", action="store_true", help="Log game results.")
    parser.add_argument("--debug", action="store_true", help="Log solver deductions.")
    args = parser.parse_args(argv)

    if args.grid_size <= 0:
        parser.error("--grid-size must be positive")
    if not 0 <= args.mines < args.grid_size * args.grid_size:
        parser.error("--mines must be between 0 and grid-size^2 - 1")
    if args.runs <= 0:
        parser.error("--runs must be positive")
    return args


def _configure_logging(args: argparse.Namespace) -> None:
    if args.debug:
        level = logging.DEBUG
    elif args.verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(stream=sys.stderr, level=level)


def batch_mode_solver(
    grid_size: int,
    mines_count: int,
    runs: int = 1,
    seed: Optional[int] = None,
    out: Optional[TextIO] = None,
) -> List[SolveOutcome]:
    """Solve `runs` fresh boards, printing one result line each and a win rate when runs > 1."""
    out = out if out is not None else sys.stdout
    print(f"Grid size = {grid_size} number of mines: {mines_count}", file=out)
    outcomes: List[SolveOutcome] = []
    for run in range(runs):
        # Board i uses seed + 2 * i and its solver the next seed up.
        run_seed = None if seed is None else seed + 2 * run
        game = Minesweeper(grid_size, mines_count, seed=run_seed)
        solver = MinesweeperSolver(game, seed=None if run_seed is None else run_seed + 1)
        start = time.perf_counter()
        outcome, _ = solver.solve()
        total_ms = int((time.perf_counter() - start) * 1000)
        print(f"Result={outcome.value.upper()}, time={total_ms}", file=out)
        outcomes.append(outcome)

    if runs > 1:
        wins = sum(1 for o in outcomes if o is SolveOutcome.WON)
        print(f"Win rate: {wins}/{runs} ({wins / runs:.1%})", file=out)
    return outcomes


def run_solver_verbose(
    game: Minesweeper, seed: Optional[int] = None, out: Optional[TextIO] = None
) -> SolveOutcome:
    """Run the solver one move at a time, printing each move and the board after it."""
    out = out if out is not None else sys.stdout
    solver = MinesweeperSolver(game, seed=seed)
    while True:
        moves_before = len(solver.moves_sequence)
        ended = solver.step()
        if len(solver.moves_sequence) > moves_before:
            x, y, method = solver.moves_sequence[-1]
            print(f"Decided a move ({method}), uncover: {x} , {y}", file=out)
            print(game.format_board(), file=out)
        if ended:
            break

    assert solver.outcome is not None
    if solver.outcome is SolveOutcome.WON:
        print("Solver won!", file=out)
    elif solver.outcome is SolveOutcome.LOST:
        print("Solver lost!", file=out)
    else:
        print("Solver stalled!", file=out)
    return solver.outcome


def process_console_input(
    game: Minesweeper,
    stdin: Optional[TextIO] = None,
    out: Optional[TextIO] = None,
    seed: Optional[int] = None,
) -> None:
    """Read commands until the game ends, the user quits, or input runs out."""
    stdin = stdin if stdin is not None else sys.stdin
    out = out if out is not None else sys.stdout
    while True:
        print(f"\n{HELP_TEXT}", file=out)
        print("\n>> ", end="", file=out, flush=True)
        line = stdin.readline()
        if not line:
            print("Quitting..", file=out)
            return

        parts = line.replace(",", " ").split()
        if not parts:
            continue
        command = parts[0]

        if command == EXPOSE_CELL_CMD:
            if len(parts) < 3:
                print("Invalid arguments for expose cell. Example: e 3 5", file=out)
                continue
            try:
                x = int(parts[1])
                y = int(parts[2])
            except ValueError:
                print(f"Could not parse: {parts[1]} and {parts[2]}", file=out)
                continue
            try:
                ended = game.expose_cell(x, y)
            except InvalidMoveError as e:
                print(f"Rejected move: {e}", file=out)
                continue
            print(game.format_board(), file=out)
            if ended:
                print("Game ended.", file=out)
                print("You WON !" if game.has_won() else "You LOST !", file=out)
                return

        elif command == QUIT_CMD:
            print("Quitting..", file=out)
            return

        elif command == EXPOSE_ALL_CMD:
            game.expose_all()
            print("Exposing all cells. Game Over.", file=out)
            print(game.format_board(), file=out)
            return

        elif command == SOLVE_CMD:
            print("Running solver.", file=out)
            run_solver_verbose(game, seed=seed, out=out)
            return

        else:
            print(f"Unknown command: {command}", file=out)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    _configure_logging(args)

    if args.no_console:
        batch_mode_solver(args.grid_size, args.mines, runs=args.runs, seed=args.seed)
        return 0

    game = Minesweeper(args.grid_size, args.mines, seed=args.seed)
    print(
        f"Created board with gridsize = {game.grid_size} "
        f"and number of mines = {game.mines_count}"
    )
    print(game.format_board(color=sys.stdout.isatty()))
    process_console_input(game, seed=args.seed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
