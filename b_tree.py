"""
╔══════════════════════════════════════════════════════════════════╗
║        Balanced Tree Visualizer v1.0  -  B-TREE ENGINE           ║
║                                                                  ║
║  Multiway search tree bounded by ``order`` (max children).       ║
║  A node holds at most order - 1 keys.                            ║
║                                                                  ║
║  Insert                                                          ║
║  ──────                                                          ║
║  1. Descend from the root to a leaf, remembering the path.       ║
║  2. Put the key into the leaf at its sorted slot.                ║
║  3. While the current node overflows:                            ║
║       split at floor(len / 2), promote the middle key into the   ║
║       parent (a new root if there is none), move up one level.   ║
║                                                                  ║
║  Equal keys route RIGHT (bisect_right) in the descent and in     ║
║  the leaf slot; a promoted key lands between the two halves.     ║
╚══════════════════════════════════════════════════════════════════╝
"""

import bisect
import logging

from tree_layout import LayoutConfig, layout_multiway
from tree_steps import (
    StepRecorder, KIND_INSERT_START, KIND_INSERT, KIND_INSERT_COMPLETE,
    KIND_COMPARE, KIND_SPLIT, KIND_NEW_ROOT,
)

logger = logging.getLogger(__name__)

DEFAULT_ORDER = 3
MIN_ORDER     = 3


class BTreeNode:
    """
    A B-Tree node.

    Attributes:
        keys     (list[number])   : Ascending keys.
        children (list[BTreeNode]): Empty for a leaf, else len(keys) + 1.
        x, y     (float|None)     : Layout coordinates (box centre).
        id       (str)            : Stable identity for animation.
    """
    __slots__ = ('keys', 'children', 'x', 'y', 'id')

    def __init__(self, keys=None, children=None, node_id=None):
        self.keys     = keys if keys is not None else []
        self.children = children if children is not None else []
        self.x        = None
        self.y        = None
        self.id       = node_id

    @property
    def is_leaf(self):
        return not self.children

    def __repr__(self):
        return f"BTreeNode({self.keys})"


def _fmt(keys):
    return "[" + ", ".join(str(k) for k in keys) + "]"


class BTree(StepRecorder):
    """
    B-Tree with step recording.

    Args:
        order (int): Maximum number of children per node (>= 3).

    Raises:
        ValueError: ``order`` below 3 (a split would leave an empty half).
    """

    ENGINE = "btree"

    def __init__(self, order=DEFAULT_ORDER):
        if order < MIN_ORDER:
            raise ValueError(f"B-Tree order must be >= {MIN_ORDER}, got {order}")
        super().__init__()
        self.order    = order
        self.max_keys = order - 1
        self.root     = BTreeNode(node_id=self._new_id("root"))
        logger.info("Created B-Tree with order %d", order)

    # ─────────────────────────────────────────────────────────────
    #  INSERT
    # ─────────────────────────────────────────────────────────────

    def insert(self, key):
        """
        Insert ``key`` into its leaf and split overfull nodes upward.

        Args:
            key (number): Value to insert.
        """
        self._record(KIND_INSERT_START, f"Insert {key} into the tree",
                     key=key)

        # ── Descent: path holds (parent, child index) pairs ──
        path = []
        node = self.root
        while not node.is_leaf:
            i = bisect.bisect_right(node.keys, key)
            self._record(KIND_COMPARE,
                         f"{key} in node {_fmt(node.keys)} → child {i}",
                         node=node, highlight=list(node.keys))
            path.append((node, i))
            node = node.children[i]

        slot = bisect.bisect_right(node.keys, key)
        node.keys.insert(slot, key)
        self._record(KIND_INSERT,
                     f"Inserted key {key} into leaf, keys now {_fmt(node.keys)}",
                     key=key, node=node, highlight=[key])

        # ── Split cascade ──
        while len(node.keys) > self.max_keys:
            if path:
                parent, index = path.pop()
            else:
                parent, index = None, 0
            node = self._split(node, parent, index)

        self._record(KIND_INSERT_COMPLETE, f"Insertion of {key} complete",
                     key=key)

    def _split(self, node, parent, index):
        """
        Split ``node`` (child ``index`` of ``parent``) around its middle key.

        Args:
            node   (BTreeNode)     : Overfull node.
            parent (BTreeNode|None): Its parent; None when node is the root.
            index  (int)           : Position of node in parent.children.

        Returns:
            BTreeNode: The node that received the promoted key.
        """
        mid     = len(node.keys) // 2
        middle  = node.keys[mid]
        sibling = BTreeNode(node.keys[mid + 1:], node.children[mid + 1:],
                            node_id=self._new_id(middle))

        # node keeps the left half (and the children under it)
        del node.keys[mid:]
        del node.children[mid + 1:]

        if parent is None:
            parent = BTreeNode([], [node], node_id=self._new_id("root"))
            self.root = parent
            index = 0
            self._record(KIND_NEW_ROOT,
                         f"Root {_fmt(node.keys + [middle] + sibling.keys)} "
                         f"is full, creating new root",
                         key=middle, node=parent, highlight=[middle])

        # node sits between parent.keys[index - 1] and parent.keys[index],
        # so slot ``index`` is the sorted position of the middle key
        parent.keys.insert(index, middle)
        parent.children.insert(index + 1, sibling)

        self._record(KIND_SPLIT,
                     f"Split {_fmt(node.keys)} | {middle} | "
                     f"{_fmt(sibling.keys)}: middle key {middle} moved to "
                     f"parent",
                     key=middle, node=parent, highlight=[middle])
        return parent

    # ─────────────────────────────────────────────────────────────
    #  QUERIES
    # ─────────────────────────────────────────────────────────────

    def __contains__(self, key):
        node = self.root
        while True:
            i = bisect.bisect_left(node.keys, key)
            if i < len(node.keys) and node.keys[i] == key:
                return True
            if node.is_leaf:
                return False
            node = node.children[i]

    def __len__(self):
        return sum(len(n.keys) for n in self.get_all_nodes())

    def get_height(self):
        """Number of levels; 0 for an empty tree."""
        if not self.root.keys:
            return 0
        levels, node = 1, self.root
        while not node.is_leaf:
            node = node.children[0]
            levels += 1
        return levels

    def get_all_keys(self):
        """Merged in-order key sequence."""
        keys = []
        def _in(n):
            if n.is_leaf:
                keys.extend(n.keys)
                return
            for i, k in enumerate(n.keys):
                _in(n.children[i])
                keys.append(k)
            _in(n.children[-1])
        _in(self.root)
        return keys

    def to_tuple(self):
        """Nested (keys, children) tuple for shape comparison."""
        def _t(n):
            return (tuple(n.keys), tuple(_t(c) for c in n.children))
        return _t(self.root)

    # ─────────────────────────────────────────────────────────────
    #  VISUALISATION SURFACE
    # ─────────────────────────────────────────────────────────────

    def get_all_nodes(self):
        """Pre-order list of nodes; empty for an empty tree."""
        if not self.root.keys:
            return []
        nodes = []
        def _walk(n):
            nodes.append(n)
            for child in n.children:
                _walk(child)
        _walk(self.root)
        return nodes

    def get_edges(self):
        edges = []
        def _walk(n):
            for child in n.children:
                edges.append({"source": n, "target": child})
                _walk(child)
        _walk(self.root)
        return edges

    def calculate_coordinates(self, config=None, **overrides):
        """
        Populate x / y on every node.

        Args:
            config    (LayoutConfig|None): Base config (B-Tree defaults).
            overrides (dict)             : LayoutConfig field overrides.
        """
        config = (config or LayoutConfig(self.ENGINE)).replace(**overrides)
        layout_multiway(self.root, config, self.get_all_nodes())
