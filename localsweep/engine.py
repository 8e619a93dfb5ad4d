"""Minesweeper game engine: square board, random mine placement, flood-fill exposure."""

import enum
import logging
import random
from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, FrozenSet, Iterable, List, Optional, Set, Tuple

import numpy as np

from .errors import GameOverError, InvalidMoveError
from .utils import get_neighborhoods, is_valid

logger = logging.getLogger(__name__)

COVERED = -1


class GameState(enum.Enum):
    """Lifecycle of a board. WON and LOST are terminal."""

    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


@dataclass
class Cell:
    """A single square of the board."""

    x: int
    y: int
    is_mine: bool = False
    is_covered: bool = True
    neighbor_mine_count: int = 0

    def printable_char(self) -> str:
        """
        Character for this cell in text output.

        - 'X' : covered
        - 'M' : uncovered mine
        - '.' : uncovered, no neighboring mines
        - '1'..'8' : uncovered, that many neighboring mines
        """
        if self.is_covered:
            return "X"
        if self.is_mine:
            return "M"
        if self.neighbor_mine_count == 0:
            return "."
        return str(self.neighbor_mine_count)


class Minesweeper:
    """Square Minesweeper board with mines placed by rejection sampling at construction."""

    def __init__(
        self,
        grid_size: int,
        mines_count: int,
        *,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
    ) -> None:
        """
        Initialize a board and place its mines.

        Args:
            grid_size: Side length N of the N x N grid, must be > 0.
            mines_count: Number of mines, must satisfy 0 <= mines_count < N*N.
            rng: Random source used for mine placement.
            seed: Seed for a fresh random source when rng is not given.

        Raises:
            ValueError: If the grid size or the mine count is invalid.
        """
        if grid_size <= 0:
            raise ValueError("grid_size must be positive.")
        if mines_count < 0:
            raise ValueError("mines_count must be non-negative.")
        if mines_count >= grid_size * grid_size:
            raise ValueError("mines_count must be smaller than the number of cells.")

        self.grid_size: int = grid_size
        self.mines_count: int = mines_count
        self.rng: random.Random = rng if rng is not None else random.Random(seed)

        self.grid: List[List[Cell]] = [
            [Cell(x, y) for y in range(grid_size)] for x in range(grid_size)
        ]
        self.covered_count: int = grid_size * grid_size
        self.state: GameState = GameState.PLAYING

        self._neighborhoods: Dict[
            Tuple[int, int], Tuple[Tuple[int, int], ...]
        ] = get_neighborhoods(grid_size)

        self._place_mines()

    @classmethod
    def from_mines(
        cls, grid_size: int, mine_positions: Iterable[Tuple[int, int]]
    ) -> "Minesweeper":
        """
        Build a board with a fixed, known mine layout.

        Raises:
            ValueError: If a position is off the grid, repeated, or there are
                as many mines as cells.
        """
        positions = list(mine_positions)
        if grid_size <= 0:
            raise ValueError("grid_size must be positive.")
        if len(set(positions)) != len(positions):
            raise ValueError("Mine positions must be unique.")
        if len(positions) >= grid_size * grid_size:
            raise ValueError("mines_count must be smaller than the number of cells.")
        for x, y in positions:
            if not is_valid(x, y, grid_size):
                raise ValueError(f"Mine position ({x}, {y}) is outside the board.")

        game = cls(grid_size, 0)
        for x, y in positions:
            game._set_mine(x, y)
        game.mines_count = len(positions)
        return game

    # -------------------------------------------------------------------------
    # Mine placement
    # -------------------------------------------------------------------------

    def _place_mines(self) -> None:
        """Place mines by rejection sampling: pick random cells until enough distinct ones are mines."""
        placed = 0
        while placed < self.mines_count:
            x = self.rng.randrange(self.grid_size)
            y = self.rng.randrange(self.grid_size)
            if self.grid[x][y].is_mine:
                continue  # retry
            self._set_mine(x, y)
            placed += 1
        logger.debug(
            "Placed %d mines on a %dx%d grid.",
            self.mines_count,
            self.grid_size,
            self.grid_size,
        )

    def _set_mine(self, x: int, y: int) -> None:
        self.grid[x][y].is_mine = True
        for nx, ny in self.neighbors(x, y):
            self.grid[nx][ny].neighbor_mine_count += 1

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    def neighbors(self, x: int, y: int) -> Tuple[Tuple[int, int], ...]:
        """Return precomputed neighbor coordinates for a cell."""
        return self._neighborhoods[(x, y)]

    def is_valid(self, x: int, y: int) -> bool:
        """Return True if (x, y) lies on the board."""
        return is_valid(x, y, self.grid_size)

    def _cell(self, x: int, y: int) -> Cell:
        """Return the cell at (x, y), raising InvalidMoveError off the board."""
        if not self.is_valid(x, y):
            raise InvalidMoveError(f"Cell ({x}, {y}) is outside the board.")
        return self.grid[x][y]

    def is_covered(self, x: int, y: int) -> bool:
        """Return True if the cell at (x, y) is still covered."""
        return self._cell(x, y).is_covered

    def is_mine(self, x: int, y: int) -> bool:
        """Ground truth for (x, y). Not consulted by the solver."""
        return self._cell(x, y).is_mine

    def neighbor_mine_count(self, x: int, y: int) -> int:
        """Return the revealed neighbor-mine count of an uncovered cell."""
        cell = self._cell(x, y)
        if cell.is_covered:
            raise InvalidMoveError(f"Cell ({x}, {y}) is still covered.")
        return cell.neighbor_mine_count

    def mine_positions(self) -> FrozenSet[Tuple[int, int]]:
        """Return the coordinates of every mine (ground truth)."""
        return frozenset(
            (cell.x, cell.y) for row in self.grid for cell in row if cell.is_mine
        )

    def is_game_over(self) -> bool:
        """Return True once the game has been won or lost."""
        return self.state is not GameState.PLAYING

    def has_won(self) -> bool:
        """Whether the game was won. Meaningful only once is_game_over() is True."""
        return self.state is GameState.WON

    def update_snapshot(self, out: np.ndarray) -> None:
        """
        Write the visible board into a caller-supplied (N, N) integer array.

        Covered cells are written as -1, uncovered cells as their neighbor
        mine count. The board is not modified.
        """
        if out.shape != (self.grid_size, self.grid_size):
            raise ValueError(
                f"Snapshot array must have shape ({self.grid_size}, {self.grid_size}), "
                f"got {out.shape}."
            )
        for x in range(self.grid_size):
            for y in range(self.grid_size):
                cell = self.grid[x][y]
                out[x, y] = COVERED if cell.is_covered else cell.neighbor_mine_count

    def snapshot(self) -> np.ndarray:
        """Return a fresh int8 array of the visible board (-1 = covered)."""
        out = np.full((self.grid_size, self.grid_size), COVERED, dtype=np.int8)
        self.update_snapshot(out)
        return out

    # -------------------------------------------------------------------------
    # Moves
    # -------------------------------------------------------------------------

    def expose_cell(self, x: int, y: int) -> bool:
        """
        Expose the cell at (x, y) and return whether the game is now over.

        A mine ends the game as a loss and only that cell is uncovered. Any
        other cell is flood-filled: zero-count cells expose their neighbors
        until only numbered boundary cells remain. Exposing an already
        uncovered cell does nothing.

        Raises:
            InvalidMoveError: If (x, y) is outside the board.
            GameOverError: If the game has already ended.
        """
        cell = self._cell(x, y)
        if self.is_game_over():
            raise GameOverError(f"Cannot expose ({x}, {y}): the game is over.")

        if not cell.is_covered:
            return False

        if cell.is_mine:
            cell.is_covered = False
            self.covered_count -= 1
            self.state = GameState.LOST
            logger.info("Exposed a mine at (%d, %d). Game lost.", x, y)
            return True

        self.flood_fill(x, y)

        if self.covered_count == self.mines_count:
            self.state = GameState.WON
            logger.info("All safe cells exposed. Game won.")
            return True
        return False

    def flood_fill(self, x: int, y: int) -> List[Tuple[int, int]]:
        """
        Uncover the connected region starting at (x, y).

        Returns:
            The newly uncovered cells in exposure order.
        """
        frontier: Deque[Tuple[int, int]] = deque([(x, y)])
        visited: Set[Tuple[int, int]] = {(x, y)}
        uncovered: List[Tuple[int, int]] = []

        while frontier:
            cx, cy = frontier.popleft()
            cell = self.grid[cx][cy]
            if not cell.is_covered or cell.is_mine:
                continue

            cell.is_covered = False
            self.covered_count -= 1
            uncovered.append((cx, cy))

            if cell.neighbor_mine_count == 0:
                for nx, ny in self.neighbors(cx, cy):
                    if (nx, ny) in visited or not self.grid[nx][ny].is_covered:
                        continue
                    visited.add((nx, ny))
                    frontier.append((nx, ny))

        return uncovered

    def expose_all(self) -> None:
        """Uncover every cell and end the game as a loss."""
        for row in self.grid:
            for cell in row:
                cell.is_covered = False
        self.covered_count = 0
        self.state = GameState.LOST

    # -------------------------------------------------------------------------
    # Display methods
    # -------------------------------------------------------------------------

    _ANSI_RESET = "\033[0m"
    _ANSI_COORD = "\033[96m"
    _ANSI_MINE = "\033[91m"

    def _c(self, s: str, color: bool) -> str:
        """Wrap string in coordinate color."""
        return f"{self._ANSI_COORD}{s}{self._ANSI_RESET}" if color else s

    def _m(self, s: str, color: bool) -> str:
        """Wrap string in mine color (red)."""
        return f"{self._ANSI_MINE}{s}{self._ANSI_RESET}" if color else s

    def format_board(self, reveal_all: bool = False, color: bool = False) -> str:
        """
        Render the board as a multi-line string for terminal display.

        Args:
            reveal_all: If True, show mines and all underlying values.
            color: If True, add ANSI colors for labels and mines.

        Returns:
            A formatted multi-line string with row/column labels and the grid.
        """
        n = self.grid_size

        def cell_str(x: int, y: int) -> str:
            cell = self.grid[x][y]
            if reveal_all and cell.is_covered:
                cell = Cell(x, y, cell.is_mine, False, cell.neighbor_mine_count)
            ch = cell.printable_char()
            if ch == "M":
                return self._m(ch, color)
            return ch

        # Header: column numbers
        header_cells = " ".join(f"{y:2d}" for y in range(n))
        out = [self._c("   " + header_cells, color)]
        out.append(self._c("   " + "-" * (3 * n - 1), color))

        # Rows with the row number at left
        for x in range(n):
            row_cells = " ".join(f" {cell_str(x, y)}" for y in range(n))
            out.append(self._c(f"{x:2d} |", color) + row_cells)

        return "\n".join(out)

    def print_board(self) -> None:
        """Print the current visible board state to stdout."""
        print(self.format_board(reveal_all=False))

    def print_full_board(self) -> None:
        """Print the fully revealed underlying board to stdout (for debugging)."""
        print(self.format_board(reveal_all=True))
