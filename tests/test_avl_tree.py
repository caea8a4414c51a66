import os
import random
import sys
import unittest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from avl_tree import AVLTree, balance_factor, height
from tree_checks import validate_avl, validate_bst
from tree_steps import (
    KIND_INSERT, KIND_ROTATE_LEFT, KIND_ROTATE_RIGHT, KIND_BALANCE_CASE,
    KIND_UPDATE_HEIGHT, KIND_BALANCE_CHECK, KIND_DUPLICATE,
)


def kinds(tree, kind):
    return [op for op in tree.operations if op.kind == kind]


class AVLInsertTest(unittest.TestCase):
    def test_right_right_case_rotates_left_at_ten(self):
        tree = AVLTree()
        for k in (10, 20, 30):
            tree.insert(k)

        self.assertEqual(tree.root.key, 20)
        self.assertEqual(tree.root.left.key, 10)
        self.assertEqual(tree.root.right.key, 30)

        rotations = kinds(tree, KIND_ROTATE_LEFT)
        self.assertEqual(len(rotations), 1)
        self.assertEqual(rotations[0].key, 10)
        self.assertEqual(kinds(tree, KIND_ROTATE_RIGHT), [])

        cases = kinds(tree, KIND_BALANCE_CASE)
        self.assertEqual([c.case for c in cases], ["RR"])
        self.assertIn("Right Right Case detected at node 10",
                      cases[0].description)

    def test_case_record_precedes_rotation(self):
        tree = AVLTree()
        for k in (30, 10, 20):
            tree.insert(k)
        seq = [op.kind for op in tree.operations
               if op.kind in (KIND_BALANCE_CASE, KIND_ROTATE_LEFT,
                              KIND_ROTATE_RIGHT)]
        self.assertEqual(seq, [KIND_BALANCE_CASE, KIND_ROTATE_LEFT,
                               KIND_ROTATE_RIGHT])
        self.assertEqual(kinds(tree, KIND_BALANCE_CASE)[0].case, "LR")
        self.assertEqual(tree.to_tuple(),
                         (20, 2, (10, 1, None, None), (30, 1, None, None)))

    def test_left_left_and_right_left_cases(self):
        ll = AVLTree()
        for k in (30, 20, 10):
            ll.insert(k)
        self.assertEqual([c.case for c in kinds(ll, KIND_BALANCE_CASE)], ["LL"])
        self.assertEqual(kinds(ll, KIND_ROTATE_RIGHT)[0].key, 30)

        rl = AVLTree()
        for k in (10, 30, 20):
            rl.insert(k)
        self.assertEqual([c.case for c in kinds(rl, KIND_BALANCE_CASE)], ["RL"])
        self.assertEqual(rl.root.key, 20)

    def test_six_key_sequence_height_three(self):
        tree = AVLTree()
        for k in (10, 20, 30, 40, 50, 25):
            tree.insert(k)
            ok, _, errors = validate_avl(tree.root)
            self.assertTrue(ok, errors)
        self.assertEqual(tree.get_height(), 3)
        self.assertEqual(tree.root.key, 30)
        self.assertEqual(tree.get_all_keys(), [10, 20, 25, 30, 40, 50])

    def test_every_ancestor_logs_height_and_balance(self):
        tree = AVLTree()
        tree.insert(10)
        tree.insert(5)
        # inserting 5 visits only the root on the way back up
        self.assertEqual(len(kinds(tree, KIND_UPDATE_HEIGHT)), 1)
        self.assertEqual(len(kinds(tree, KIND_BALANCE_CHECK)), 1)
        self.assertIn("Updated height of node 10 to 2",
                      kinds(tree, KIND_UPDATE_HEIGHT)[0].description)

    def test_duplicate_is_ignored(self):
        tree = AVLTree()
        for k in (5, 3, 5):
            tree.insert(k)
        self.assertEqual(tree.get_all_keys(), [3, 5])
        self.assertEqual(len(kinds(tree, KIND_INSERT)), 2)
        self.assertEqual(len(kinds(tree, KIND_DUPLICATE)), 1)
        self.assertIn(5, tree)
        self.assertNotIn(4, tree)

    def test_random_sequences_keep_invariants(self):
        rng = random.Random(1234)
        for _ in range(20):
            keys = rng.sample(range(1000), 120)
            tree = AVLTree()
            for k in keys:
                tree.insert(k)
                ok, h, errors = validate_avl(tree.root)
                self.assertTrue(ok, errors)
                self.assertEqual(h, tree.get_height())
            ok, errors = validate_bst(tree.root)
            self.assertTrue(ok, errors)
            self.assertEqual(tree.get_all_keys(), sorted(keys))
            self.assertEqual(len(tree), len(keys))

    def test_helpers_on_absent_nodes(self):
        self.assertEqual(height(None), 0)
        self.assertEqual(balance_factor(None), 0)

    def test_node_ids_unique(self):
        tree = AVLTree()
        for k in range(20):
            tree.insert(k)
        ids = [n.id for n in tree.get_all_nodes()]
        self.assertEqual(len(ids), len(set(ids)))


class AVLSurfaceTest(unittest.TestCase):
    def test_empty_tree(self):
        tree = AVLTree()
        tree.calculate_coordinates()
        self.assertEqual(tree.get_all_nodes(), [])
        self.assertEqual(tree.get_edges(), [])
        self.assertEqual(tree.get_height(), 0)
        self.assertIsNone(tree.to_tuple())

    def test_nodes_preorder_and_edges_once(self):
        tree = AVLTree()
        for k in (10, 20, 30, 40, 50, 25):
            tree.insert(k)
        self.assertEqual([n.key for n in tree.get_all_nodes()],
                         [30, 20, 10, 25, 40, 50])
        pairs = [(e["source"].key, e["target"].key) for e in tree.get_edges()]
        self.assertEqual(sorted(pairs),
                         sorted([(30, 20), (20, 10), (20, 25), (30, 40),
                                 (40, 50)]))


if __name__ == "__main__":
    unittest.main()
