"""Exceptions raised by the board and the solver."""


class MinesweeperError(Exception):
    """Base class for all localsweep errors."""


class InvalidMoveError(MinesweeperError, ValueError):
    """A move was rejected; the board state is unchanged."""


class GameOverError(InvalidMoveError):
    """A move was attempted on a board whose game has already ended."""


class SolverStalledError(MinesweeperError):
    """The solver found no candidate move while the game was still in play."""
