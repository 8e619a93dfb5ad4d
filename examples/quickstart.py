"""
Quickstart example for the Minesweeper solver.

This script demonstrates basic usage of the board and the solver.
"""

from localsweep import (
    LEVELS,
    Minesweeper,
    MinesweeperSolver,
    format_solver_knowledge,
    run_solver_many_tests,
)


def main():
    print("=" * 60)
    print("Minesweeper Solver - Quickstart Example")
    print("=" * 60)

    # Example 1: Solve a single game
    print("\n1. Solving a single game (10x10, 10 mines)...")
    print("-" * 60)

    game = Minesweeper(grid_size=10, mines_count=10, seed=7)
    solver = MinesweeperSolver(game, seed=8)
    outcome, payload = solver.solve()

    print(f"Result: {outcome.value.upper()}")
    print(f"Moves: {payload['reveal_moves_count']}")
    print(f"Cells uncovered: {payload['revealed_cells_count']}")
    print(f"Mines marked: {payload['markings_count']}")
    print(f"Safe deductions: {payload['inferred_safe_count']}")
    print(f"Mine deductions: {payload['inferred_mine_count']}")
    guesses = payload["probability_guesses_count"] + payload["fallback_guesses_count"]
    print(f"Guesses: {guesses}")

    # Example 2: Show final board state
    print("\n2. Final board state and solver knowledge:")
    print("-" * 60)
    print(game.format_board(reveal_all=True))
    print()
    print(format_solver_knowledge(solver))

    # Example 3: Step the solver by hand
    print("\n3. Stepping the solver one move at a time...")
    print("-" * 60)
    game = Minesweeper(grid_size=8, mines_count=6, seed=3)
    solver = MinesweeperSolver(game, seed=4)
    while not solver.step():
        x, y, method = solver.moves_sequence[-1]
        print(f"uncover ({x}, {y}) via {method}")
    print(f"Outcome: {solver.outcome.value}")

    # Example 4: Win rates per level
    print("\n4. Win rates by level (50 games each)...")
    print("-" * 60)
    for name, (n, m) in LEVELS.items():
        results = run_solver_many_tests(n, m, runs=50, seed=0)
        print(f"{name:8s} ({n}x{n}, {m:2d} mines): {results['win_rate']*100:5.1f}% win rate")

    print("\n" + "=" * 60)
    print("Done!")
    print("=" * 60)


if __name__ == "__main__":
    main()
