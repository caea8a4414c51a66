import json
import os
import shutil
import sys
import tempfile
import unittest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from avl_tree import AVLTree
from settings import Settings, THEMES


class SettingsTest(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.mkdtemp()
        self.path = os.path.join(self.tmp, "treeviz.json")

    def tearDown(self):
        shutil.rmtree(self.tmp, ignore_errors=True)

    def test_defaults_without_file(self):
        s = Settings(self.path)
        self.assertEqual(s.theme, "dark")
        self.assertEqual(s.anim_speed, 600)
        self.assertEqual(s.btree_order, 3)
        self.assertEqual(s.get("BG"), THEMES["dark"]["BG"])

    def test_save_and_reload(self):
        s = Settings(self.path)
        s.theme = "light"
        s.btree_order = 5
        s.custom_colors = {"EDGE": "#123456"}
        s.layout = {"rb": {"vertical_spacing": 50}}
        self.assertTrue(s.save())

        loaded = Settings(self.path)
        self.assertEqual(loaded.theme, "light")
        self.assertEqual(loaded.btree_order, 5)
        self.assertEqual(loaded.get("EDGE"), "#123456")
        self.assertEqual(loaded.get("BG"), THEMES["light"]["BG"])
        self.assertEqual(loaded.layout_config("rb").vertical_spacing, 50)

    def test_corrupt_file_keeps_defaults(self):
        with open(self.path, "w") as f:
            f.write("{not json")
        with self.assertLogs("settings", level="WARNING"):
            s = Settings(self.path)
        self.assertEqual(s.theme, "dark")

    def write(self, data):
        with open(self.path, "w") as f:
            json.dump(data, f)

    def test_wrongly_typed_fields_keep_defaults(self):
        self.write({"anim_speed": "fast", "btree_order": "3",
                    "custom_colors": [1], "theme": ["dark"]})
        with self.assertLogs("settings", level="WARNING"):
            s = Settings(self.path)
        self.assertEqual(s.anim_speed, 600)
        self.assertEqual(s.btree_order, 3)
        self.assertEqual(s.custom_colors, {})
        self.assertEqual(s.theme, "dark")

    def test_non_object_layout_section_ignored(self):
        self.write({"layout": {"avl": [1, 2]}})
        s = Settings(self.path)
        with self.assertLogs("settings", level="WARNING"):
            config = s.layout_config("avl")
        self.assertEqual(config.origin_x, 300)

    def test_non_numeric_layout_value_ignored(self):
        self.write({"layout": {"avl": {"origin_x": "wide",
                                       "vertical_spacing": 50,
                                       "strategy": "spiral"}}})
        s = Settings(self.path)
        with self.assertLogs("settings", level="WARNING"):
            config = s.layout_config("avl")
        self.assertEqual(config.origin_x, 300)
        self.assertEqual(config.vertical_spacing, 50)
        self.assertEqual(config.strategy, "offset")

        tree = AVLTree()
        for k in (10, 20, 30):
            tree.insert(k)
        tree.calculate_coordinates(config)
        self.assertEqual(tree.root.x, 300)

    def test_non_object_file_keeps_defaults(self):
        with open(self.path, "w") as f:
            json.dump([1, 2, 3], f)
        with self.assertLogs("settings", level="WARNING"):
            s = Settings(self.path)
        self.assertEqual(s.btree_order, 3)

    def test_unknown_theme_falls_back(self):
        with open(self.path, "w") as f:
            json.dump({"theme": "neon"}, f)
        self.assertEqual(Settings(self.path).theme, "dark")

    def test_unknown_layout_option_ignored(self):
        s = Settings(self.path)
        s.layout = {"avl": {"bogus": 1, "origin_x": 10}}
        with self.assertLogs("settings", level="WARNING"):
            config = s.layout_config("avl")
        self.assertEqual(config.origin_x, 10)

    def test_unknown_engine(self):
        with self.assertRaises(KeyError):
            Settings(self.path).layout_config("splay")

    def test_save_failure_returns_false(self):
        s = Settings(os.path.join(self.tmp, "missing", "dir", "x.json"))
        with self.assertLogs("settings", level="WARNING"):
            self.assertFalse(s.save())

    def test_fps_follows_anim_speed(self):
        s = Settings(self.path)
        self.assertEqual(s.fps, 2)
        s.anim_speed = 100
        self.assertEqual(s.fps, 10)
        s.anim_speed = 5000
        self.assertEqual(s.fps, 1)


if __name__ == "__main__":
    unittest.main()
