"""Minesweeper solver using local constraint deduction and a greedy probability fallback."""

import enum
import logging
import random
import time
from collections import deque
from typing import Any, Deque, Dict, List, Optional, Tuple, Union

import numpy as np

from .engine import COVERED, Minesweeper
from .errors import SolverStalledError
from .utils import get_neighborhoods

logger = logging.getLogger(__name__)

# Probabilities are compared as int(p * HIGH_MINE_PROB_INT) so that nearly
# equal floats fall into the same bucket.
HIGH_MINE_PROB_INT = 1000

# Marker for "no probability computed this step"; valid probabilities are <= 1.0.
UNASSIGNED_PROB = 1.1

Coord = Tuple[int, int]


class SolveOutcome(enum.Enum):
    """Terminal result of a solve."""

    WON = "won"
    LOST = "lost"
    STALLED = "stalled"


class MinesweeperSolver:
    """
    Step-wise Minesweeper solver bound to a single board.

    Every step rebuilds a snapshot of the visible board and runs:
    1. Deduction: each revealed numbered cell either proves its covered
       neighbors safe, proves them all mines, or assigns them a local mine
       probability.
    2. Propagation: newly marked mines trigger re-deduction of their revealed
       neighbors until nothing changes.
    3. Fallback: covered cells with no probability are scored together as
       HIGH_MINE_PROB_INT / count and one of them is picked uniformly at random.
    4. Move: a proven-safe cell if any, else the cheaper of the lowest
       probability unmarked cells and the random fallback cell.

    Mine marks persist across steps; everything else is reset per step.
    """

    def __init__(
        self,
        game: Minesweeper,
        *,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        record_steps: bool = False,
    ) -> None:
        """
        Initialize a solver for a specific board.

        Args:
            game: The board to play on.
            rng: Random source for the fallback cell choice.
            seed: Seed for a fresh random source when rng is not given.
            record_steps: If True, record a per-move board and marks snapshot
                for replay.
        """
        self.game = game
        self.grid_size: int = game.grid_size
        self.rng: random.Random = rng if rng is not None else random.Random(seed)
        self.record_steps = record_steps

        self._neighborhoods: Dict[Coord, Tuple[Coord, ...]] = get_neighborhoods(
            self.grid_size
        )

        n = self.grid_size
        # Visible board as of the current step (-1 = covered).
        self.snapshot_grid: np.ndarray = np.full((n, n), COVERED, dtype=np.int8)
        # Cells deduced to be mines; never reset.
        self.mine_marks: np.ndarray = np.zeros((n, n), dtype=bool)
        # Highest local mine probability seen this step per covered cell.
        self.mine_probabilities: np.ndarray = np.full(
            (n, n), UNASSIGNED_PROB, dtype=np.float64
        )

        self.min_mine_prob: int = HIGH_MINE_PROB_INT
        self.low_prob_cells: List[Coord] = []
        self.to_uncover: Deque[Coord] = deque()
        self.to_reprocess: Deque[Coord] = deque()

        self.random_probless_cell: Optional[Coord] = None
        self.num_probless_cells: int = 0

        self._outcome: Optional[SolveOutcome] = None

        # Metrics / counters (for analysis)
        self.steps_count: int = 0
        self.reveal_moves_count: int = 0
        self.inferred_safe_count: int = 0
        self.inferred_mine_count: int = 0
        self.probability_guesses_count: int = 0
        self.fallback_guesses_count: int = 0
        self.contradictions_count: int = 0

        self.moves_sequence: List[Tuple[int, int, str]] = []
        self.steps_history: List[Dict[str, Any]] = []

    @property
    def outcome(self) -> Optional[SolveOutcome]:
        """None while solving; the terminal outcome afterwards."""
        return self._outcome

    def neighbors(self, x: int, y: int) -> Tuple[Coord, ...]:
        """Return precomputed neighbor coordinates for a cell."""
        return self._neighborhoods[(x, y)]

    # -------------------------------------------------------------------------
    # Per-cell deduction
    # -------------------------------------------------------------------------

    def process_cell(self, x: int, y: int) -> None:
        """
        Apply the constraint of the revealed cell (x, y) to its covered neighbors.

        With k the revealed count, m the marked covered neighbors and a the
        unmarked covered ones:
        - k == m: all a cells are safe and queued for uncovering.
        - k == m + a: all a cells are marked as mines and their neighbors are
          queued for reprocessing.
        - otherwise each of the a cells gets probability (k - m) / a, keeping
          the highest estimate across constraints.
        """
        num_neighbor_mines = int(self.snapshot_grid[x, y])
        num_covered = 0
        num_marked = 0
        available: List[Coord] = []

        for nx, ny in self.neighbors(x, y):
            covered = bool(self.snapshot_grid[nx, ny] == COVERED)
            marked = bool(self.mine_marks[nx, ny])
            if marked and not covered:
                self.contradictions_count += 1
                logger.warning(
                    "Cell (%d, %d) was marked as a mine but is uncovered; ignoring the mark.",
                    nx,
                    ny,
                )
                marked = False
            num_covered += covered
            num_marked += marked
            if covered and not marked:
                available.append((nx, ny))

        logger.debug(
            "process_cell(%d, %d): mines=%d covered=%d marked=%d available=%d",
            x,
            y,
            num_neighbor_mines,
            num_covered,
            num_marked,
            len(available),
        )

        if num_neighbor_mines == num_marked:
            if available:
                self.inferred_safe_count += len(available)
                self.to_uncover.extend(available)
            return

        if num_neighbor_mines == num_covered:
            for nx, ny in available:
                self.mine_marks[nx, ny] = True
                self.inferred_mine_count += 1
                self.to_reprocess.extend(self.neighbors(nx, ny))
            return

        remaining_mines = num_neighbor_mines - num_marked
        if remaining_mines > 0 and available:
            prob = remaining_mines / len(available)
            for nx, ny in available:
                current = self.mine_probabilities[nx, ny]
                if current > 1.0:
                    self.mine_probabilities[nx, ny] = prob
                else:
                    self.mine_probabilities[nx, ny] = max(current, prob)
                self._update_low_prob_cells((nx, ny), self.mine_probabilities[nx, ny])

    def _update_low_prob_cells(self, cell: Coord, prob: float) -> None:
        prob_int = int(prob * HIGH_MINE_PROB_INT)
        if prob_int < self.min_mine_prob:
            self.low_prob_cells = [cell]
            self.min_mine_prob = prob_int
        elif prob_int == self.min_mine_prob:
            self.low_prob_cells.append(cell)

    # -------------------------------------------------------------------------
    # Step phases
    # -------------------------------------------------------------------------

    def _reset_step_state(self) -> None:
        self.game.update_snapshot(self.snapshot_grid)
        self.mine_probabilities.fill(UNASSIGNED_PROB)
        self.min_mine_prob = HIGH_MINE_PROB_INT
        self.low_prob_cells = []
        self.to_uncover.clear()
        self.to_reprocess.clear()

    def deduce(self) -> None:
        """Run the deduction on every revealed numbered cell, then propagate new mine marks."""
        for x in range(self.grid_size):
            for y in range(self.grid_size):
                if self.snapshot_grid[x, y] > 0:
                    self.process_cell(x, y)
                    self.mine_probabilities[x, y] = 0.0

        while self.to_reprocess:
            x, y = self.to_reprocess.popleft()
            if self.snapshot_grid[x, y] != COVERED:
                self.process_cell(x, y)

    def _prune_low_prob_cells(self) -> None:
        """
        Drop low probability candidates that propagation marked as mines.

        If none survive, rebuild the set from every covered, unmarked cell that
        has a probability, using the same scaled minimum and tie rule.
        """
        self.low_prob_cells = [
            (x, y) for x, y in self.low_prob_cells if not self.mine_marks[x, y]
        ]
        if self.low_prob_cells:
            return

        self.min_mine_prob = HIGH_MINE_PROB_INT
        for x in range(self.grid_size):
            for y in range(self.grid_size):
                if (
                    self.snapshot_grid[x, y] == COVERED
                    and not self.mine_marks[x, y]
                    and self.mine_probabilities[x, y] < 1.0
                ):
                    self._update_low_prob_cells((x, y), self.mine_probabilities[x, y])

    def _should_replace(self, n: int) -> bool:
        """Reservoir sampling of size 1: replace the current pick with probability 1/n."""
        return self.rng.randrange(n) == n - 1

    def _scan_probless_cells(self) -> Union[int, float]:
        """
        Pick one covered, unmarked cell without a probability uniformly at random.

        Returns:
            The fallback score int(HIGH_MINE_PROB_INT / count), or infinity when
            there is no such cell.
        """
        self.num_probless_cells = 0
        self.random_probless_cell = None
        sum_of_cells_with_prob = 0.0
        num_marked = 0

        for x in range(self.grid_size):
            for y in range(self.grid_size):
                if self.mine_marks[x, y]:
                    sum_of_cells_with_prob += 1.0
                    num_marked += 1
                elif self.snapshot_grid[x, y] == COVERED:
                    if self.mine_probabilities[x, y] < 1.0:
                        sum_of_cells_with_prob += float(self.mine_probabilities[x, y])
                    else:
                        self.num_probless_cells += 1
                        if self.random_probless_cell is None or self._should_replace(
                            self.num_probless_cells
                        ):
                            self.random_probless_cell = (x, y)

        remaining_mines = max(self.game.mines_count - sum_of_cells_with_prob, 1.0)
        logger.debug(
            "Marked mines: %d, cells without probability: %d, expected remaining mines: %.2f",
            num_marked,
            self.num_probless_cells,
            remaining_mines,
        )

        if self.num_probless_cells == 0:
            return float("inf")
        return int(HIGH_MINE_PROB_INT / self.num_probless_cells)

    def _select_move(self, probless_score: Union[int, float]) -> Optional[Tuple[Coord, str]]:
        """Choose the cell to uncover this step, or None if there is no candidate."""
        while self.to_uncover:
            x, y = self.to_uncover.popleft()
            if not self.mine_marks[x, y]:
                return (x, y), "safe"

        if self.low_prob_cells and probless_score >= self.min_mine_prob:
            for x, y in self.low_prob_cells:
                if not self.mine_marks[x, y]:
                    return (x, y), "low_probability"

        if self.random_probless_cell is not None:
            return self.random_probless_cell, "fallback"
        return None

    def _record_step(self, x: int, y: int, method: str) -> None:
        """Record a move for replay functionality."""
        if not self.record_steps:
            return
        self.steps_history.append({
            "cell": (x, y),
            "method": method,
            "step_number": len(self.steps_history),
            "board_snapshot": self.game.snapshot(),
            "mine_marks": self.mine_marks.copy(),
        })

    def _finish(self) -> None:
        self._outcome = SolveOutcome.WON if self.game.has_won() else SolveOutcome.LOST
        logger.info("Solver %s after %d moves.", self._outcome.value, self.reveal_moves_count)

    # -------------------------------------------------------------------------
    # Main solving loop
    # -------------------------------------------------------------------------

    def step(self) -> bool:
        """
        Run one solve step, exposing at most one cell.

        Returns:
            True once solving has ended (won, lost or stalled), else False.
        """
        if self._outcome is not None:
            return True
        if self.game.is_game_over():
            self._finish()
            return True

        self.steps_count += 1
        self._reset_step_state()
        self.deduce()
        self._prune_low_prob_cells()

        probless_score = self._scan_probless_cells()
        if probless_score < self.min_mine_prob:
            logger.debug(
                "Fallback score %s beats lowest probability %d.",
                probless_score,
                self.min_mine_prob,
            )
            self.low_prob_cells = []

        move = self._select_move(probless_score)
        if move is None:
            logger.warning("No candidate move on a board still in play; solver stalled.")
            self._outcome = SolveOutcome.STALLED
            return True

        (x, y), method = move
        if method == "low_probability":
            self.probability_guesses_count += 1
        elif method == "fallback":
            self.fallback_guesses_count += 1

        logger.debug("Decided a move (%s), uncover: %d, %d", method, x, y)
        self.moves_sequence.append((x, y, method))
        self.reveal_moves_count += 1
        ended = self.game.expose_cell(x, y)
        self._record_step(x, y, method)

        if ended:
            self._finish()
            return True
        return False

    def solve(self, raise_on_stall: bool = False) -> Tuple[SolveOutcome, Dict[str, Any]]:
        """
        Solve the game end-to-end by iterating steps until termination.

        Args:
            raise_on_stall: If True, raise SolverStalledError instead of
                returning a STALLED outcome.

        Returns:
            Tuple of (outcome, payload) where payload is the solver's metrics dictionary.
        """
        start = time.perf_counter()
        while not self.step():
            pass
        elapsed = time.perf_counter() - start

        assert self._outcome is not None
        if self._outcome is SolveOutcome.STALLED and raise_on_stall:
            raise SolverStalledError(
                f"Solver stalled after {self.reveal_moves_count} moves."
            )
        return self._outcome, self.metrics(elapsed)

    run_to_completion = solve

    def metrics(self, elapsed_seconds: float = 0.0) -> Dict[str, Any]:
        """Return the solver's metrics payload."""
        revealed_cells_count = sum(
            1
            for row in self.game.grid
            for cell in row
            if not cell.is_covered and not cell.is_mine
        )
        return {
            "steps_count": self.steps_count,
            "reveal_moves_count": self.reveal_moves_count,
            "revealed_cells_count": revealed_cells_count,
            "markings_count": int(self.mine_marks.sum()),
            "inferred_safe_count": self.inferred_safe_count,
            "inferred_mine_count": self.inferred_mine_count,
            "probability_guesses_count": self.probability_guesses_count,
            "fallback_guesses_count": self.fallback_guesses_count,
            "contradictions_count": self.contradictions_count,
            "moves_sequence": self.moves_sequence,
            "steps_history": self.steps_history,
            "elapsed_seconds": elapsed_seconds,
        }
