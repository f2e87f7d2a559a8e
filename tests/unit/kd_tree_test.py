import random
import unittest


from rrtsim.algorithms.kd_tree import KDTree
from rrtsim.algorithms.rrt_tree import RRTTree


class TestKDTree(unittest.TestCase):
    def setUp(self):
        self.tree = KDTree(dimensions=2)

    def test_empty_tree(self):
        self.assertIsNone(self.tree.root)
        self.assertEqual(self.tree.query([0, 0], k=1), [])

    def test_add_single_point(self):
        self.tree.add(0, (1, 2))
        self.assertIsNotNone(self.tree.root)
        self.assertEqual(self.tree.root.index, 0)
        self.assertEqual(self.tree.root.point, (1.0, 2.0))
        self.assertEqual(self.tree.query([1, 2], k=1), [0])
        self.assertEqual(len(self.tree), 1)

    def test_add_multiple_points(self):
        for index, p in enumerate([(1, 1), (2, 2), (0, 3)]):
            self.tree.add(index, p)

        # Test structure
        self.assertEqual(self.tree.root.index, 0)
        self.assertEqual(self.tree.root.right.index, 1)
        self.assertEqual(self.tree.root.left.index, 2)
        self.assertEqual(self.tree.root.right.axis, 1)

    def test_query_k_nearest(self):
        for index, p in enumerate([(0, 0), (1, 1), (2, 2), (-1, -0.5)]):
            self.tree.add(index, p)

        # Query for 2 nearest to (0, 0)
        self.assertEqual(self.tree.query([0, 0], k=2), [0, 3])

        # Query for 1 nearest
        self.assertEqual(self.tree.query([0, 0], k=1), [0])

    def test_ties_go_to_lowest_index(self):
        for index, p in enumerate([(2, 0), (0, 2), (-2, 0), (0, -2)]):
            self.tree.add(index, p)
        self.assertEqual(self.tree.query([0, 0], k=1), [0])
        self.assertEqual(self.tree.query([0, 0], k=4), [0, 1, 2, 3])

    def test_invalid_k(self):
        with self.assertRaises(ValueError):
            self.tree.query([0, 0], k=0)
        with self.assertRaises(ValueError):
            self.tree.query([0, 0], k=-1)

    def test_invalid_dimension(self):
        with self.assertRaises(ValueError):
            self.tree.add(0, (1, 2, 3))

    def test_large_k(self):
        self.tree.add(0, (0, 0))
        self.tree.add(1, (1, 1))

        # Request more neighbors than points in tree
        self.assertEqual(self.tree.query([0, 0], k=5), [0, 1])

    def test_matches_linear_scan(self):
        rng = random.Random(4)
        rrt_tree = RRTTree((50.0, 50.0))
        self.tree.add(0, (50.0, 50.0))
        for _ in range(300):
            p = (rng.uniform(0, 100), rng.uniform(0, 100))
            index = rrt_tree.add(p, 0)
            self.tree.add(index, p)

        for _ in range(100):
            q = (rng.uniform(-10, 110), rng.uniform(-10, 110))
            self.assertEqual(self.tree.query(q, k=1)[0], rrt_tree.nearest(q))

    def test_monotone_insertion_order(self):
        # Points growing along the diagonal degenerate the tree into a single chain
        rrt_tree = RRTTree((0.0, 0.0))
        self.tree.add(0, (0.0, 0.0))
        for i in range(1, 3000):
            p = (i * 0.1, i * 0.1)
            index = rrt_tree.add(p, i - 1)
            self.tree.add(index, p)

        self.assertEqual(len(self.tree), 3000)
        self.assertEqual(self.tree.query((1000.0, 1000.0), k=1), [2999])
        self.assertEqual(self.tree.query((-5.0, -5.0), k=2), [0, 1])
        self.assertEqual(self.tree.query((150.02, 149.98), k=1), [1500])
        for q in [(10.0, 250.0), (299.0, 0.0), (123.45, 123.4)]:
            self.assertEqual(self.tree.query(q, k=1)[0], rrt_tree.nearest(q))


if __name__ == "__main__":
    unittest.main()
