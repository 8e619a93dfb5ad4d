"""Unit tests for the interactive console and batch mode."""

import io
import unittest
from contextlib import redirect_stderr, redirect_stdout

from localsweep.analysis import run_solver_single_test
from localsweep.console import (
    DEFAULT_GRID_SIZE,
    DEFAULT_MINES,
    batch_mode_solver,
    main,
    parse_args,
    process_console_input,
    run_solver_verbose,
)
from localsweep.engine import Minesweeper
from localsweep.solver import SolveOutcome


class TestParseArgs(unittest.TestCase):
    def test_defaults(self) -> None:
        args = parse_args([])
        self.assertEqual(args.grid_size, DEFAULT_GRID_SIZE)
        self.assertEqual(args.mines, DEFAULT_MINES)
        self.assertFalse(args.no_console)
        self.assertEqual(args.runs, 1)
        self.assertIsNone(args.seed)

    def test_flags(self) -> None:
        args = parse_args(
            ["--grid-size", "5", "--mines", "3", "--no-console", "--runs", "4", "--seed", "9"]
        )
        self.assertEqual((args.grid_size, args.mines, args.runs, args.seed), (5, 3, 4, 9))
        self.assertTrue(args.no_console)

    def test_rejects_too_many_mines(self) -> None:
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                parse_args(["--grid-size", "3", "--mines", "9"])

    def test_rejects_bad_grid_size(self) -> None:
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                parse_args(["--grid-size", "0"])


class TestBatchMode(unittest.TestCase):
    def test_prints_one_result_per_run(self) -> None:
        out = io.StringIO()
        outcomes = batch_mode_solver(6, 4, runs=3, seed=1, out=out)
        lines = out.getvalue().splitlines()
        self.assertEqual(lines[0], "Grid size = 6 number of mines: 4")
        self.assertEqual(sum(1 for line in lines if line.startswith("Result=")), 3)
        self.assertTrue(lines[-1].startswith("Win rate: "))
        self.assertEqual(len(outcomes), 3)

    def test_main_batch_mode(self) -> None:
        out = io.StringIO()
        with redirect_stdout(out):
            code = main(["--no-console", "--grid-size", "4", "--mines", "0", "--seed", "2"])
        self.assertEqual(code, 0)
        self.assertIn("Result=WON", out.getvalue())

    def test_seeded_runs_match_single_test_seeds(self) -> None:
        outcomes = batch_mode_solver(6, 5, runs=4, seed=7, out=io.StringIO())
        expected = [
            run_solver_single_test(6, 5, seed=7 + 2 * i)["outcome"] for i in range(4)
        ]
        self.assertEqual(outcomes, expected)


class TestConsole(unittest.TestCase):
    def test_expose_until_win(self) -> None:
        game = Minesweeper.from_mines(3, [(0, 0)])
        out = io.StringIO()
        process_console_input(game, stdin=io.StringIO("e 2 2\n"), out=out)
        self.assertTrue(game.has_won())
        self.assertIn("You WON !", out.getvalue())

    def test_expose_mine_loses(self) -> None:
        game = Minesweeper.from_mines(3, [(0, 0)])
        out = io.StringIO()
        process_console_input(game, stdin=io.StringIO("e 0 0\n"), out=out)
        self.assertTrue(game.is_game_over())
        self.assertIn("You LOST !", out.getvalue())

    def test_bad_commands_are_reported(self) -> None:
        game = Minesweeper.from_mines(3, [(0, 0)])
        out = io.StringIO()
        stdin = io.StringIO("e a b\ne 9 9\ne 1\nfoo\n\nquit\n")
        process_console_input(game, stdin=stdin, out=out)
        text = out.getvalue()
        self.assertIn("Could not parse: a and b", text)
        self.assertIn("Rejected move", text)
        self.assertIn("Invalid arguments", text)
        self.assertIn("Unknown command: foo", text)
        self.assertIn("Quitting..", text)
        self.assertFalse(game.is_game_over())

    def test_end_of_input_quits(self) -> None:
        game = Minesweeper.from_mines(3, [(0, 0)])
        out = io.StringIO()
        process_console_input(game, stdin=io.StringIO(""), out=out)
        self.assertIn("Quitting..", out.getvalue())

    def test_expose_all(self) -> None:
        game = Minesweeper.from_mines(3, [(0, 0)])
        out = io.StringIO()
        process_console_input(game, stdin=io.StringIO("expose_all\n"), out=out)
        self.assertTrue(game.is_game_over())
        self.assertFalse(game.has_won())
        self.assertIn("Exposing all cells. Game Over.", out.getvalue())

    def test_solve_command(self) -> None:
        game = Minesweeper(4, 0)
        out = io.StringIO()
        process_console_input(game, stdin=io.StringIO("solve\n"), out=out, seed=0)
        text = out.getvalue()
        self.assertIn("Running solver.", text)
        self.assertIn("Decided a move (fallback)", text)
        self.assertIn("Solver won!", text)

    def test_run_solver_verbose_reports_loss(self) -> None:
        game = Minesweeper.from_mines(3, [(0, 0)])
        game.expose_cell(1, 1)
        out = io.StringIO()
        outcome = run_solver_verbose(game, seed=0, out=out)
        # Every neighbor of (1, 1) ties at 1/8 and (0, 0) comes first.
        self.assertIs(outcome, SolveOutcome.LOST)
        self.assertIn("Solver lost!", out.getvalue())


if __name__ == "__main__":
    unittest.main()
