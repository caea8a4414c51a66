"""
╔══════════════════════════════════════════════════════════════════╗
║        Balanced Tree Visualizer v1.0  -  AVL ENGINE              ║
║                                                                  ║
║  Height-balanced BST with single / double rotations.  Every      ║
║  ancestor visited on the way back up from an insertion logs:     ║
║                                                                  ║
║    update-height → balance-check → [balance-case → rotate(s)]    ║
║                                                                  ║
║  Rotation pivots are named in the rotate-* records and both      ║
║  rotated nodes get their heights fixed immediately.              ║
╚══════════════════════════════════════════════════════════════════╝
"""

import logging

from tree_layout import LayoutConfig, layout_binary
from tree_steps import (
    StepRecorder, KIND_INSERT_START, KIND_INSERT, KIND_INSERT_COMPLETE,
    KIND_DUPLICATE, KIND_UPDATE_HEIGHT, KIND_BALANCE_CHECK,
    KIND_BALANCE_CASE, KIND_ROTATE_LEFT, KIND_ROTATE_RIGHT,
)

logger = logging.getLogger(__name__)


# ═════════════════════════════════════════════════════════════════
#  AVL NODE
# ═════════════════════════════════════════════════════════════════
class AVLNode:
    """
    A single AVL node.

    Attributes:
        key    (number)      : Node value.
        height (int)         : 1 + max(child heights); a leaf is 1.
        left   (AVLNode|None): Left child.
        right  (AVLNode|None): Right child.
        x, y   (float|None)  : Layout coordinates.
        id     (str)         : Stable identity for animation.
    """
    __slots__ = ('key', 'height', 'left', 'right', 'x', 'y', 'id')

    def __init__(self, key, node_id=None):
        self.key    = key
        self.height = 1
        self.left   = None
        self.right  = None
        self.x      = None
        self.y      = None
        self.id     = node_id

    def __repr__(self):
        return f"AVLNode({self.key}, h={self.height})"


def height(node):
    return node.height if node else 0


def balance_factor(node):
    """height(left) - height(right); 0 for an absent node."""
    if not node:
        return 0
    return height(node.left) - height(node.right)


def _fix_height(node):
    node.height = 1 + max(height(node.left), height(node.right))


# ═════════════════════════════════════════════════════════════════
#  AVL TREE
# ═════════════════════════════════════════════════════════════════
class AVLTree(StepRecorder):
    """
    AVL tree with step recording.

    Duplicate keys are ignored: the descent stops at the equal key,
    a "duplicate" record is logged and no "insert" record is, so a
    replay skips it too.

    Attributes:
        root       (AVLNode|None): Tree root.
        operations (list)        : Operation log.
    """

    ENGINE = "avl"

    def __init__(self):
        super().__init__()
        self.root = None

    # ─────────────────────────────────────────────────────────────
    #  ROTATIONS
    # ─────────────────────────────────────────────────────────────

    def _rotate_right(self, y):
        """
        Right-rotate at y; returns the new subtree root x.

        Before:       After:
            y           x
           / \\         / \\
          x   C       A   y
         / \\             / \\
        A   T2          T2  C
        """
        x  = y.left
        t2 = x.right

        x.right = y
        y.left  = t2

        _fix_height(y)
        _fix_height(x)

        self._record(KIND_ROTATE_RIGHT,
                     f"Right rotation performed at node {y.key}",
                     key=y.key, node=y, highlight=[y.key, x.key])
        return x

    def _rotate_left(self, x):
        """
        Left-rotate at x; returns the new subtree root y.

        Before:       After:
            x           y
           / \\         / \\
          A   y       x   C
             / \\     / \\
            T2  C   A   T2
        """
        y  = x.right
        t2 = y.left

        y.left  = x
        x.right = t2

        _fix_height(x)
        _fix_height(y)

        self._record(KIND_ROTATE_LEFT,
                     f"Left rotation performed at node {x.key}",
                     key=x.key, node=x, highlight=[x.key, y.key])
        return y

    # ─────────────────────────────────────────────────────────────
    #  INSERT
    # ─────────────────────────────────────────────────────────────

    def insert(self, key):
        """
        Insert ``key`` and rebalance every ancestor on the way up.

        Args:
            key (number): Value to insert.
        """
        self._record(KIND_INSERT_START, f"Starting insertion of value {key}",
                     key=key)
        self.root = self._insert(self.root, key)
        self._record(KIND_INSERT_COMPLETE, f"Insertion of {key} complete",
                     key=key)

    def _insert(self, node, key):
        # ── 1. Plain BST descent ──
        if node is None:
            new = AVLNode(key, self._new_id(key))
            self._record(KIND_INSERT, f"Inserted new node with value {key}",
                         key=key, node=new, highlight=[key])
            return new

        if key < node.key:
            node.left = self._insert(node.left, key)
        elif key > node.key:
            node.right = self._insert(node.right, key)
        else:
            self._record(KIND_DUPLICATE,
                         f"Value {key} already present, insertion ignored",
                         key=key, node=node, highlight=[key])
            return node

        # ── 2. Height of this ancestor ──
        _fix_height(node)
        self._record(KIND_UPDATE_HEIGHT,
                     f"Updated height of node {node.key} to {node.height}",
                     key=node.key, node=node)

        # ── 3. Balance factor ──
        balance = balance_factor(node)
        self._record(KIND_BALANCE_CHECK,
                     f"Checking balance factor of node {node.key}: {balance}",
                     key=node.key, node=node)

        # ── 4. At most one case fires per ancestor ──
        if balance > 1 and key < node.left.key:
            self._case("LL", "Left Left", node)
            return self._rotate_right(node)

        if balance > 1 and key > node.left.key:
            self._case("LR", "Left Right", node)
            node.left = self._rotate_left(node.left)
            return self._rotate_right(node)

        if balance < -1 and key > node.right.key:
            self._case("RR", "Right Right", node)
            return self._rotate_left(node)

        if balance < -1 and key < node.right.key:
            self._case("RL", "Right Left", node)
            node.right = self._rotate_right(node.right)
            return self._rotate_left(node)

        return node

    def _case(self, case, name, node):
        self._record(KIND_BALANCE_CASE,
                     f"{name} Case detected at node {node.key}",
                     key=node.key, node=node, case=case,
                     highlight=[node.key])

    # ─────────────────────────────────────────────────────────────
    #  QUERIES
    # ─────────────────────────────────────────────────────────────

    def __contains__(self, key):
        node = self.root
        while node is not None:
            if key == node.key:
                return True
            node = node.left if key < node.key else node.right
        return False

    def __len__(self):
        return len(self.get_all_nodes())

    def get_height(self):
        return height(self.root)

    def get_all_keys(self):
        """In-order keys."""
        keys = []
        def _in(n):
            if n is None:
                return
            _in(n.left); keys.append(n.key); _in(n.right)
        _in(self.root)
        return keys

    def to_tuple(self):
        """
        Nested (key, height, left, right) tuple for shape comparison.

        Two AVL trees are structurally identical iff their tuples match.
        """
        def _t(n):
            if n is None:
                return None
            return (n.key, n.height, _t(n.left), _t(n.right))
        return _t(self.root)

    # ─────────────────────────────────────────────────────────────
    #  VISUALISATION SURFACE
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def children(node):
        return node.left, node.right

    def get_all_nodes(self):
        """Pre-order list of nodes."""
        nodes = []
        def _walk(n):
            if n is None:
                return
            nodes.append(n)
            _walk(n.left)
            _walk(n.right)
        _walk(self.root)
        return nodes

    def get_edges(self):
        edges = []
        def _walk(n):
            for child in (n.left, n.right):
                if child is not None:
                    edges.append({"source": n, "target": child})
                    _walk(child)
        if self.root is not None:
            _walk(self.root)
        return edges

    def calculate_coordinates(self, config=None, **overrides):
        """
        Populate x / y on every node.

        Args:
            config    (LayoutConfig|None): Base config (AVL defaults if None).
            overrides (dict)             : e.g. start_depth, start_position,
                                           horizontal_spacing, vertical_spacing.
        """
        config = (config or LayoutConfig(self.ENGINE)).replace(**overrides)
        layout_binary(self.root, config, self.children, self.get_all_nodes())
