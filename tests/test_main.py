import argparse
import io
import os
import shutil
import sys
import tempfile
import unittest
from contextlib import redirect_stdout

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import main


class MainTest(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.mkdtemp()
        self.settings = os.path.join(self.tmp, "settings.json")

    def tearDown(self):
        shutil.rmtree(self.tmp, ignore_errors=True)

    def run_main(self, *args):
        out = io.StringIO()
        with redirect_stdout(out):
            code = main.main(list(args) + ["--settings", self.settings])
        return code, out.getvalue()

    def test_avl_log_and_nodes(self):
        code, out = self.run_main("avl", "10", "20", "30")
        self.assertEqual(code, 0)
        self.assertIn("Left rotation performed at node 10", out)
        self.assertIn("Nodes (3), edges (2)", out)
        self.assertIn("rotations=1", out)

    def test_step_replay(self):
        code, out = self.run_main("rb", "10", "20", "30", "--step", "0",
                                  "--quiet")
        self.assertEqual(code, 0)
        self.assertIn("Step 0: Initial state - empty tree", out)
        self.assertIn("Nodes (0), edges (0)", out)
        self.assertNotIn("insert-start", out)

    def test_btree_order(self):
        code, out = self.run_main("btree", "1", "2", "3", "4", "5", "6", "7",
                                  "--order", "3")
        self.assertEqual(code, 0)
        self.assertIn("splits=4", out)
        self.assertIn("height=3", out)

    def test_bad_order_and_step(self):
        with self.assertLogs("main", level="ERROR"):
            code, _ = self.run_main("btree", "1", "--order", "2")
        self.assertEqual(code, 2)
        with self.assertLogs("main", level="ERROR"):
            code, _ = self.run_main("avl", "1", "--step", "-1")
        self.assertEqual(code, 2)

    def test_order_zero_is_rejected(self):
        with self.assertLogs("main", level="ERROR"):
            code, _ = self.run_main("btree", "1", "--order", "0")
        self.assertEqual(code, 2)

    def test_float_keys(self):
        self.assertEqual(main.parse_key("3"), 3)
        self.assertEqual(main.parse_key("2.5"), 2.5)
        with self.assertRaises(argparse.ArgumentTypeError):
            main.parse_key("nan")

    def test_make_tree(self):
        self.assertEqual(main.make_tree("rb").ENGINE, "rb")
        self.assertEqual(main.make_tree("btree", 5).order, 5)
        with self.assertRaises(ValueError):
            main.make_tree("splay")


if __name__ == "__main__":
    unittest.main()
