import os
import random
import sys
import unittest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from b_tree import BTree
from tree_checks import validate_btree, tree_stats
from tree_steps import KIND_SPLIT, KIND_NEW_ROOT, KIND_INSERT, KIND_COMPARE


def kinds(tree, kind):
    return [op for op in tree.operations if op.kind == kind]


def leaf(*keys):
    return (tuple(keys), ())


class BTreeInsertTest(unittest.TestCase):
    def test_order_three_first_split(self):
        tree = BTree(3)
        for k in (1, 2, 3):
            tree.insert(k)
        self.assertEqual(tree.to_tuple(), ((2,), (leaf(1), leaf(3))))
        self.assertEqual(tree.get_height(), 2)
        self.assertEqual(len(kinds(tree, KIND_NEW_ROOT)), 1)
        split = kinds(tree, KIND_SPLIT)[0]
        self.assertEqual(split.key, 2)
        self.assertIn("middle key 2", split.description)

    def test_order_three_one_to_seven(self):
        tree = BTree(3)
        for k in range(1, 8):
            tree.insert(k)
            ok, errors = validate_btree(tree)
            self.assertTrue(ok, errors)
        expected = ((4,), (
            ((2,), (leaf(1), leaf(3))),
            ((6,), (leaf(5), leaf(7))),
        ))
        self.assertEqual(tree.to_tuple(), expected)
        self.assertEqual(len(kinds(tree, KIND_SPLIT)), 4)
        self.assertEqual(len(kinds(tree, KIND_NEW_ROOT)), 2)
        self.assertEqual(tree.get_height(), 3)
        self.assertEqual(tree.get_all_keys(), list(range(1, 8)))

    def test_new_root_logged_before_split(self):
        tree = BTree(3)
        for k in (1, 2, 3):
            tree.insert(k)
        seq = [op.kind for op in tree.operations
               if op.kind in (KIND_NEW_ROOT, KIND_SPLIT)]
        self.assertEqual(seq, [KIND_NEW_ROOT, KIND_SPLIT])

    def test_compare_per_internal_level(self):
        tree = BTree(3)
        for k in range(1, 8):
            tree.insert(k)
        before = len(tree.operations)
        tree.insert(0)
        compares = [op for op in tree.operations[before:]
                    if op.kind == KIND_COMPARE]
        self.assertEqual(len(compares), 2)

    def test_order_below_three_rejected(self):
        with self.assertRaises(ValueError):
            BTree(2)

    def test_random_sequences_keep_invariants(self):
        rng = random.Random(7)
        for order in (3, 4, 5, 7):
            for _ in range(5):
                keys = [rng.randint(0, 200) for _ in range(150)]
                tree = BTree(order)
                for k in keys:
                    tree.insert(k)
                    ok, errors = validate_btree(tree)
                    self.assertTrue(ok, errors)
                self.assertEqual(tree.get_all_keys(), sorted(keys))
                self.assertEqual(len(tree), len(keys))
                self.assertEqual(len(kinds(tree, KIND_INSERT)), len(keys))
                for k in set(keys):
                    self.assertIn(k, tree)

    def test_duplicates_are_kept(self):
        tree = BTree(3)
        for k in (5, 5, 5, 5):
            tree.insert(k)
        self.assertEqual(tree.get_all_keys(), [5, 5, 5, 5])
        ok, errors = validate_btree(tree)
        self.assertTrue(ok, errors)


class BTreeSurfaceTest(unittest.TestCase):
    def test_empty_tree(self):
        tree = BTree()
        tree.calculate_coordinates()
        self.assertEqual(tree.get_all_nodes(), [])
        self.assertEqual(tree.get_edges(), [])
        self.assertEqual(tree.get_height(), 0)
        self.assertEqual(len(tree), 0)
        self.assertNotIn(3, tree)

    def test_edges_and_stats(self):
        tree = BTree(3)
        for k in range(1, 8):
            tree.insert(k)
        nodes = tree.get_all_nodes()
        self.assertEqual(len(nodes), 7)
        self.assertEqual(len(tree.get_edges()), 6)
        self.assertEqual([n.keys for n in nodes],
                         [[4], [2], [1], [3], [6], [5], [7]])
        stats = tree_stats(tree)
        self.assertEqual(stats["nodes"], 7)
        self.assertEqual(stats["keys"], 7)
        self.assertEqual(stats["splits"], 4)
        self.assertEqual(stats["rotations"], 0)
        self.assertEqual(stats["steps"], len(tree.operations))


if __name__ == "__main__":
    unittest.main()
