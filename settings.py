"""
Persisted user preferences and colour themes.

Saved as JSON in the user's home directory so they survive across
sessions: theme choice, animation speed, per-colour overrides, the
B-Tree order and per-engine layout overrides.
"""

import json
import logging
import os

from tree_layout import LayoutConfig, LAYOUT_DEFAULTS, STRATEGIES

logger = logging.getLogger(__name__)


# ═════════════════════════════════════════════════════════════════
#  THEME DEFINITIONS
#  Two Catppuccin-inspired palettes.
# ═════════════════════════════════════════════════════════════════
THEMES = {
    # ── Dark theme (Catppuccin Mocha) ────────────────────────────
    "dark": {
        "BG": "#1e1e2e",               # Page / frame background
        "FG": "#cdd6f4",               # Primary foreground text
        "ACCENT": "#89b4fa",           # Titles
        "CANVAS_BG": "#1e1e2e",        # Tree-drawing area
        "NODE_RED_FILL": "#f38ba8",    # Fill for RED nodes
        "NODE_BLACK_FILL": "#585b70",  # Fill for BLACK nodes
        "NODE_AVL_FILL": "#89b4fa",    # Fill for AVL nodes
        "NODE_BOX_FILL": "#a6e3a1",    # Fill for B-Tree key boxes
        "NODE_TEXT": "#ffffff",        # Text inside nodes
        "NODE_BOX_TEXT": "#11111b",    # Text inside B-Tree boxes
        "EDGE": "#585b70",             # Lines connecting nodes
        "HIGHLIGHT": "#f9e2af",        # Node highlight ring colour
        "CASE_BG": "#313244",          # Step-description box fill
        "WATERMARK": "#555555",
    },
    # ── Light theme (Catppuccin Latte) ───────────────────────────
    "light": {
        "BG": "#eff1f5",
        "FG": "#4c4f69",
        "ACCENT": "#1e66f5",
        "CANVAS_BG": "#e6e9ef",
        "NODE_RED_FILL": "#d20f39",
        "NODE_BLACK_FILL": "#4c4f69",
        "NODE_AVL_FILL": "#1e66f5",
        "NODE_BOX_FILL": "#40a02b",
        "NODE_TEXT": "#ffffff",
        "NODE_BOX_TEXT": "#ffffff",
        "EDGE": "#8c8fa1",
        "HIGHLIGHT": "#df8e1d",
        "CASE_BG": "#bcc0cc",
        "WATERMARK": "#9ca0b0",
    },
}

DEFAULT_PATH = os.path.join(os.path.expanduser("~"), ".treeviz_v1.json")


class Settings:
    """
    Persistent user preferences manager.

    Attributes:
        theme         (str) : Active theme name ("dark" / "light").
        anim_speed    (int) : Milliseconds per animation step.
        custom_colors (dict): Key → hex overrides on top of the theme.
        btree_order   (int) : Order used when building B-Trees.
        layout        (dict): Engine → {LayoutConfig field: value}.

    Args:
        path (str|None): JSON file location; ``~/.treeviz_v1.json`` if None.
    """

    def __init__(self, path=None):
        self.path          = path or DEFAULT_PATH
        self.theme         = "dark"
        self.anim_speed    = 600
        self.custom_colors = {}
        self.btree_order   = 3
        self.layout        = {}
        self._load()

    # ── Load from disk ──────────────────────────────────────────
    def _load(self):
        """Read settings JSON (corrupt / missing file keeps defaults)."""
        if not os.path.exists(self.path):
            return
        try:
            with open(self.path) as f:
                d = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable settings file %s: %s",
                           self.path, e)
            return
        if not isinstance(d, dict):
            logger.warning("Ignoring settings file %s: not a JSON object",
                           self.path)
            return
        theme = d.get("theme", "dark")
        if not isinstance(theme, str) or theme not in THEMES:
            theme = "dark"
        self.theme         = theme
        self.anim_speed    = self._field(d, "anim_speed", int, 600)
        self.custom_colors = self._field(d, "custom_colors", dict, {})
        self.btree_order   = self._field(d, "btree_order", int, 3)
        self.layout        = self._field(d, "layout", dict, {})

    def _field(self, d, name, kind, default):
        """Value of ``d[name]`` if it has type ``kind``, else ``default``."""
        value = d.get(name, default)
        if isinstance(value, bool) or not isinstance(value, kind):
            logger.warning("Ignoring %s=%r in %s: expected %s",
                           name, value, self.path, kind.__name__)
            return default
        return value

    # ── Save to disk ────────────────────────────────────────────
    def save(self):
        """Write settings JSON; returns False (and logs) on failure."""
        try:
            with open(self.path, "w") as f:
                json.dump({"theme": self.theme,
                           "anim_speed": self.anim_speed,
                           "custom_colors": self.custom_colors,
                           "btree_order": self.btree_order,
                           "layout": self.layout}, f, indent=2)
        except OSError as e:
            logger.warning("Could not save settings to %s: %s", self.path, e)
            return False
        return True

    # ── Colour lookup ───────────────────────────────────────────
    def get(self, key):
        """
        Resolve a colour key to its hex value.

        Priority: custom_colors[key]  →  THEMES[theme][key]  →  "#ffffff"
        """
        if key in self.custom_colors:
            return self.custom_colors[key]
        return THEMES[self.theme].get(key, "#ffffff")

    # ── Layout lookup ───────────────────────────────────────────
    def layout_config(self, engine):
        """
        LayoutConfig for ``engine`` with the saved overrides applied.

        Unknown field names, non-numeric spacing values and unknown
        strategies in the saved overrides are dropped with a warning
        rather than failing the layout.
        """
        if engine not in LAYOUT_DEFAULTS:
            raise KeyError(f"unknown engine {engine!r}")
        section = self.layout.get(engine, {})
        if not isinstance(section, dict):
            logger.warning("Layout overrides for %s are not an object, ignored",
                           engine)
            section = {}
        overrides = {}
        for name, value in section.items():
            if name not in LayoutConfig.FIELDS:
                logger.warning("Unknown layout option %r for %s ignored",
                               name, engine)
            elif name == "strategy":
                if value in STRATEGIES:
                    overrides[name] = value
                else:
                    logger.warning("Unknown layout strategy %r for %s ignored",
                                   value, engine)
            elif isinstance(value, (int, float)) and not isinstance(value, bool):
                overrides[name] = value
            else:
                logger.warning("Layout option %s=%r for %s is not a number, "
                               "ignored", name, value, engine)
        return LayoutConfig(engine, **overrides)

    @property
    def fps(self):
        """Video frames per second matching the animation speed."""
        return max(1, round(1000 / max(1, self.anim_speed)))
