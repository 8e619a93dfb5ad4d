"""Grid geometry helpers shared by the board and the solver."""

from typing import Dict, List, Tuple

# Offsets in row-major order around a cell.
_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

# Module-level cache: grid_size -> {(x,y): ((nx,ny), ...), ...}
_NEIGHBORHOODS_CACHE: Dict[
    int, Dict[Tuple[int, int], Tuple[Tuple[int, int], ...]]
] = {}


def is_valid(x: int, y: int, grid_size: int) -> bool:
    """Return True if (x, y) lies inside a grid_size x grid_size grid."""
    return 0 <= x < grid_size and 0 <= y < grid_size


def get_neighborhoods(
    grid_size: int,
) -> Dict[Tuple[int, int], Tuple[Tuple[int, int], ...]]:
    """
    Precompute and cache 8-connected neighbor coordinates for every cell in a square grid.

    Args:
        grid_size: Side length of the grid. Must be positive.

    Returns:
        Mapping from each cell (x, y) to a tuple of valid neighboring
        coordinates (nx, ny) under 8-connectivity.

    Raises:
        ValueError: If grid_size is non-positive.
    """
    if grid_size <= 0:
        raise ValueError("grid_size must be positive.")

    cached = _NEIGHBORHOODS_CACHE.get(grid_size)
    if cached is not None:
        return cached

    neighborhoods: Dict[Tuple[int, int], Tuple[Tuple[int, int], ...]] = {}
    for x in range(grid_size):
        for y in range(grid_size):
            nbrs: List[Tuple[int, int]] = []
            for dx, dy in _OFFSETS:
                nx, ny = x + dx, y + dy
                if is_valid(nx, ny, grid_size):
                    nbrs.append((nx, ny))
            neighborhoods[(x, y)] = tuple(nbrs)

    _NEIGHBORHOODS_CACHE[grid_size] = neighborhoods
    return neighborhoods


def neighbors(x: int, y: int, grid_size: int) -> Tuple[Tuple[int, int], ...]:
    """Return the up-to-8 in-bounds neighbors of (x, y); empty if (x, y) is off the grid."""
    if not is_valid(x, y, grid_size):
        return ()
    return get_neighborhoods(grid_size)[(x, y)]
