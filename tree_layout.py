"""
╔══════════════════════════════════════════════════════════════════╗
║        Balanced Tree Visualizer v1.0  -  NODE LAYOUT             ║
║                                                                  ║
║  Assigns pixel coordinates (x, y) to live tree nodes so that a   ║
║  renderer can draw them without overlap.                         ║
║                                                                  ║
║  Binary trees (AVL, Red-Black)                                   ║
║    offset : pre-order walk, child offset from its parent is      ║
║             ±2^max(0, K - depth) / scale,                        ║
║             scale = clamp(log2(n + 1), 1, 3)                     ║
║    level  : in-order slots per level across a fixed width        ║
║    then   : overlap-fixing pass per level                        ║
║                                                                  ║
║  Multiway trees (B-Tree)                                         ║
║    post-order walk, leaves left → right, parents centred over    ║
║    their first & last child, overlap pass, every level           ║
║    re-centred on origin_x.                                       ║
║                                                                  ║
║  Layout never raises: degenerate shapes only give wide or        ║
║  dense coordinates.                                              ║
╚══════════════════════════════════════════════════════════════════╝
"""

import math


# ═════════════════════════════════════════════════════════════════
#  PER-ENGINE DEFAULTS
#
#  Spacing values are pixels; start_position is in spacing units.
# ═════════════════════════════════════════════════════════════════
LAYOUT_DEFAULTS = {
    # ── AVL: tighter offsets, shifted right of the canvas origin ──
    "avl": {
        "start_depth": 0,
        "start_position": 0,
        "horizontal_spacing": 60,
        "vertical_spacing": 60,
        "top_margin": 40,
        "origin_x": 300,
        "depth_exponent": 2,
        "min_distance": 40,
        "strategy": "offset",
        "total_width": 800,
    },
    # ── Red-Black: one extra level of wide offsets ────────────────
    "rb": {
        "start_depth": 0,
        "start_position": 0,
        "horizontal_spacing": 80,
        "vertical_spacing": 80,
        "top_margin": 40,
        "origin_x": 400,
        "depth_exponent": 3,
        "min_distance": 40,
        "strategy": "offset",
        "total_width": 800,
    },
    # ── B-Tree: box widths grow with the key count ────────────────
    "btree": {
        "start_depth": 0,
        "start_position": 0,
        "horizontal_spacing": 80,
        "vertical_spacing": 80,
        "top_margin": 40,
        "origin_x": 400,
        "min_distance": 40,
        "key_width": 20,
        "min_node_width": 30,
        "node_gap": 10,
        "sibling_gap": 30,
        "sibling_gap_per_key": 15,
    },
}

STRATEGIES = ("offset", "level")


class LayoutConfig:
    """
    Named layout options for one engine.

    Built from ``LAYOUT_DEFAULTS[engine]`` with keyword overrides on
    top.  Fields that an engine's algorithm does not use are still
    present (taken from the AVL defaults) so every config answers
    every attribute:

        binary ("offset")  ignores total_width and the B-Tree box fields
        binary ("level")   ignores depth_exponent and the box fields
        B-Tree             ignores depth_exponent, strategy, total_width;
                           start_position * horizontal_spacing shifts
                           the centre line off origin_x

    Args:
        engine    (str): "avl", "rb" or "btree".
        overrides (dict): Field → value replacements.

    Raises:
        KeyError : Unknown engine name.
        TypeError: Unknown field name in ``overrides``.
    """
    __slots__ = ('engine', 'start_depth', 'start_position',
                 'horizontal_spacing', 'vertical_spacing', 'top_margin',
                 'origin_x', 'depth_exponent', 'min_distance', 'strategy',
                 'total_width', 'key_width', 'min_node_width', 'node_gap',
                 'sibling_gap', 'sibling_gap_per_key')

    FIELDS = __slots__[1:]

    def __init__(self, engine="avl", **overrides):
        values = dict(LAYOUT_DEFAULTS["avl"])
        values.update(LAYOUT_DEFAULTS["btree"])
        values.update(LAYOUT_DEFAULTS[engine])
        for name, value in overrides.items():
            if name not in self.FIELDS:
                raise TypeError(f"unknown layout option {name!r}")
            if value is not None:
                values[name] = value
        self.engine = engine
        for name in self.FIELDS:
            setattr(self, name, values[name])

    def replace(self, **overrides):
        """Copy of this config with some fields changed."""
        current = {name: getattr(self, name) for name in self.FIELDS}
        current.update({k: v for k, v in overrides.items() if v is not None})
        return LayoutConfig(self.engine, **current)

    def as_dict(self):
        return {name: getattr(self, name) for name in self.FIELDS}


def scale_factor(total_nodes):
    """Offset damping: clamp(log2(total_nodes + 1), 1, 3)."""
    return max(1.0, min(3.0, math.log2(total_nodes + 1)))


# ═════════════════════════════════════════════════════════════════
#  OVERLAP FIX
# ═════════════════════════════════════════════════════════════════

def group_by_level(nodes):
    """
    Group nodes by their y coordinate.

    Returns:
        dict[float, list]: y → nodes on that level, in input order.
    """
    levels = {}
    for node in nodes:
        levels.setdefault(node.y or 0, []).append(node)
    return levels


def fix_overlaps(nodes, min_distance):
    """
    Push nodes right until same-level neighbours are ``min_distance`` apart.

    Within each level nodes are sorted by x (stable, so ties keep the
    pre-order they were given in) and each node closer than
    ``min_distance`` to its left neighbour is moved to exactly
    ``min_distance`` from it.

    Args:
        nodes        (list) : Nodes with x / y already assigned.
        min_distance (float): Minimum horizontal gap in pixels.
    """
    for level in group_by_level(nodes).values():
        level.sort(key=lambda n: n.x or 0)
        for prev, cur in zip(level, level[1:]):
            if (cur.x or 0) - (prev.x or 0) < min_distance:
                cur.x = (prev.x or 0) + min_distance


# ═════════════════════════════════════════════════════════════════
#  BINARY LAYOUT
#
#  ``children(node)`` returns (left, right) with None for an absent
#  child, so sentinel handling stays inside the engine.
# ═════════════════════════════════════════════════════════════════

def layout_binary(root, config, children, nodes):
    """
    Position every node of a binary tree.

    Args:
        root     (node|None): Tree root (None for an empty tree).
        config   (LayoutConfig)
        children (callable) : node → (left|None, right|None).
        nodes    (list)     : All real nodes (pre-order).  Used for the
                              scale factor and the overlap pass.
    """
    if root is None:
        return
    if config.strategy == "level":
        _place_by_level(root, config, children)
    else:
        _place_by_offset(root, config.start_depth, config.start_position,
                         config, scale_factor(len(nodes)), children)
    fix_overlaps(nodes, config.min_distance)


def _place_by_offset(node, depth, position, config, scale, children):
    node.x = position * config.horizontal_spacing + config.origin_x
    node.y = depth * config.vertical_spacing + config.top_margin

    step = 2 ** max(0, config.depth_exponent - depth) / scale
    left, right = children(node)
    if left is not None:
        _place_by_offset(left, depth + 1, position - step,
                         config, scale, children)
    if right is not None:
        _place_by_offset(right, depth + 1, position + step,
                         config, scale, children)


def _place_by_level(root, config, children):
    """
    Evenly spread each level across total_width in in-order order.

    The span is centred on origin_x + start_position * horizontal_spacing,
    the x the offset strategy gives the root.
    """
    levels = []

    def _in(node, depth):
        if node is None:
            return
        left, right = children(node)
        _in(left, depth + 1)
        while len(levels) <= depth:
            levels.append([])
        levels[depth].append(node)
        _in(right, depth + 1)

    _in(root, 0)
    left_edge = (config.origin_x - config.total_width / 2
                 + config.start_position * config.horizontal_spacing)
    for depth, level in enumerate(levels):
        spacing = config.total_width / len(level)
        for i, node in enumerate(level):
            node.x = left_edge + (i + 0.5) * spacing
            node.y = ((depth + config.start_depth) * config.vertical_spacing
                      + config.top_margin)


# ═════════════════════════════════════════════════════════════════
#  MULTIWAY LAYOUT
# ═════════════════════════════════════════════════════════════════

def node_width(key_count, config):
    """Drawn width of a multiway node holding ``key_count`` keys."""
    return max(key_count * config.key_width, config.min_node_width)


def layout_multiway(root, config, nodes):
    """
    Position every node of a multiway tree (nodes expose .keys, .children).

    Args:
        root   (node)        : Tree root.
        config (LayoutConfig)
        nodes  (list)        : All nodes, pre-order.
    """
    if root is None or not nodes:
        return
    _assign_y(root, config.start_depth, config)
    centre = (config.origin_x
              + config.start_position * config.horizontal_spacing)
    _assign_x(root, centre, config)
    fix_overlaps(nodes, config.min_distance)
    center_levels(nodes, centre)


def _assign_y(node, depth, config):
    node.y = depth * config.vertical_spacing + config.top_margin
    for child in node.children:
        _assign_y(child, depth + 1, config)


def _assign_x(node, start_x, config):
    """
    Post-order placement.

    Returns:
        float: Next free x position to the right of this subtree.
    """
    if not node.children:
        node.x = start_x
        return start_x + node_width(len(node.keys), config) + config.node_gap

    current = _assign_x(node.children[0], start_x, config)
    for prev, child in zip(node.children, node.children[1:]):
        gap = max(config.sibling_gap,
                  len(prev.keys) * config.sibling_gap_per_key)
        current = _assign_x(child, current + gap, config)

    node.x = (node.children[0].x + node.children[-1].x) / 2
    return current


def center_levels(nodes, origin_x):
    """Shift each level so its extreme nodes are centred on ``origin_x``."""
    for level in group_by_level(nodes).values():
        xs = [n.x or 0 for n in level]
        offset = origin_x - (min(xs) + max(xs)) / 2
        for node in level:
            node.x = (node.x or 0) + offset
