"""Unit tests for grid geometry helpers."""

import unittest

from localsweep.utils import get_neighborhoods, is_valid, neighbors


class TestIsValid(unittest.TestCase):
    def test_inside(self) -> None:
        self.assertTrue(is_valid(0, 0, 3))
        self.assertTrue(is_valid(2, 2, 3))
        self.assertTrue(is_valid(1, 2, 3))

    def test_outside(self) -> None:
        self.assertFalse(is_valid(-1, 0, 3))
        self.assertFalse(is_valid(0, -1, 3))
        self.assertFalse(is_valid(3, 0, 3))
        self.assertFalse(is_valid(0, 3, 3))


class TestNeighbors(unittest.TestCase):
    def test_corner_cell(self) -> None:
        self.assertEqual(neighbors(0, 0, 3), ((0, 1), (1, 0), (1, 1)))

    def test_center_cell_row_major_order(self) -> None:
        self.assertEqual(
            neighbors(1, 1, 3),
            ((0, 0), (0, 1), (0, 2), (1, 0), (1, 2), (2, 0), (2, 1), (2, 2)),
        )

    def test_edge_cell(self) -> None:
        self.assertEqual(len(neighbors(0, 1, 3)), 5)
        self.assertEqual(len(neighbors(2, 1, 4)), 8)

    def test_single_cell_grid_has_no_neighbors(self) -> None:
        self.assertEqual(neighbors(0, 0, 1), ())

    def test_out_of_bounds_cell_has_no_neighbors(self) -> None:
        self.assertEqual(neighbors(5, 5, 3), ())
        self.assertEqual(neighbors(-1, 0, 3), ())

    def test_neighbors_are_symmetric(self) -> None:
        n = 5
        for x in range(n):
            for y in range(n):
                for nx, ny in neighbors(x, y, n):
                    self.assertIn((x, y), neighbors(nx, ny, n))


class TestGetNeighborhoods(unittest.TestCase):
    def test_covers_every_cell(self) -> None:
        hoods = get_neighborhoods(4)
        self.assertEqual(len(hoods), 16)
        self.assertEqual(sum(len(v) for v in hoods.values()), 84)

    def test_cached(self) -> None:
        self.assertIs(get_neighborhoods(6), get_neighborhoods(6))

    def test_non_positive_size(self) -> None:
        with self.assertRaises(ValueError):
            get_neighborhoods(0)
        with self.assertRaises(ValueError):
            get_neighborhoods(-2)


if __name__ == "__main__":
    unittest.main()
