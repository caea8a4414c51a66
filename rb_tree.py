"""
╔══════════════════════════════════════════════════════════════════╗
║        Balanced Tree Visualizer v1.0  -  RED-BLACK ENGINE        ║
║                                                                  ║
║  CLRS Red-Black insert with a per-tree sentinel NIL.  Every      ║
║  sub-step (comparison, placement, case, colour flip, rotation)   ║
║  is logged so the fix-up can be replayed one step at a time.     ║
║                                                                  ║
║  Fix-up cases (parent P, uncle U, grandparent G):                ║
║    Case 1  U RED            → P,U BLACK; G RED; z ← G            ║
║    Case 2  U BLACK, z inner → rotate at P, fall into Case 3      ║
║    Case 3  U BLACK, z outer → P BLACK, G RED, rotate at G        ║
║                                                                  ║
║  Equal keys route RIGHT during the descent.                      ║
╚══════════════════════════════════════════════════════════════════╝
"""

import logging

from tree_layout import LayoutConfig, layout_binary
from tree_steps import (
    StepRecorder, KIND_INSERT_START, KIND_INSERT, KIND_INSERT_COMPLETE,
    KIND_COMPARE, KIND_CASE, KIND_COLOR_FLIP, KIND_RECOLOR,
    KIND_ROTATE_LEFT, KIND_ROTATE_RIGHT,
)

logger = logging.getLogger(__name__)

RED   = True          # RB-Tree color constant: RED   = True
BLACK = False         # RB-Tree color constant: BLACK = False


def color_name(color):
    return "RED" if color == RED else "BLACK"


# ═════════════════════════════════════════════════════════════════
#  RB NODE
# ═════════════════════════════════════════════════════════════════
class RBNode:
    """
    A single node in the Red-Black tree.

    Attributes:
        key    (number|None): Node value; None for the sentinel NIL.
        color  (bool)       : RED (True) or BLACK (False).
        left   (RBNode)     : Left child (or the tree's NIL).
        right  (RBNode)     : Right child (or the tree's NIL).
        parent (RBNode|None): Parent pointer (None for root).
        x, y   (float|None) : Layout coordinates.
        id     (str|None)   : Stable identity for animation.
    """
    __slots__ = ('key', 'color', 'left', 'right', 'parent', 'x', 'y', 'id')

    def __init__(self, key=None, color=BLACK, node_id=None):
        self.key    = key
        self.color  = color
        self.left   = None
        self.right  = None
        self.parent = None
        self.x      = None
        self.y      = None
        self.id     = node_id

    def __repr__(self):
        return f"RBNode({self.key}, {color_name(self.color)})"


# ═════════════════════════════════════════════════════════════════
#  RB TREE
# ═════════════════════════════════════════════════════════════════
class RBTree(StepRecorder):
    """
    Red-Black tree with step recording.

    The sentinel ``NIL`` is BLACK, built once per tree and never
    written to afterwards: rotations skip it when re-parenting and
    the fix-up only recolours real nodes.

    Attributes:
        NIL        (RBNode): Sentinel shared by all leaves of this tree.
        root       (RBNode): Root of the tree (NIL when empty).
        operations (list)  : Operation log.
    """

    ENGINE = "rb"

    def __init__(self):
        super().__init__()
        self.NIL       = RBNode(None, BLACK, node_id="nil")
        self.NIL.left  = self.NIL
        self.NIL.right = self.NIL
        self.root      = self.NIL

    def _key(self, node):
        return "NIL" if node is self.NIL else node.key

    # ─────────────────────────────────────────────────────────────
    #  ROTATIONS
    # ─────────────────────────────────────────────────────────────

    def _left_rotate(self, x):
        """
        Left-rotate subtree rooted at x.

        Before:       After:
            x           y
           / \\         / \\
          α   y       x   γ
             / \\     / \\
            β   γ   α   β
        """
        y       = x.right
        x.right = y.left
        if y.left is not self.NIL:
            y.left.parent = x

        y.parent = x.parent
        if x.parent is None:
            self.root = y
        elif x is x.parent.left:
            x.parent.left = y
        else:
            x.parent.right = y

        y.left   = x
        x.parent = y

        self._record(KIND_ROTATE_LEFT,
                     f"Left rotation performed at node {x.key}",
                     key=x.key, node=x, highlight=[x.key, y.key])

    def _right_rotate(self, y):
        """
        Right-rotate subtree rooted at y (mirror of left-rotate).

        Before:       After:
            y           x
           / \\         / \\
          x   γ       α   y
         / \\             / \\
        α   β           β   γ
        """
        x      = y.left
        y.left = x.right
        if x.right is not self.NIL:
            x.right.parent = y

        x.parent = y.parent
        if y.parent is None:
            self.root = x
        elif y is y.parent.left:
            y.parent.left = x
        else:
            y.parent.right = x

        x.right  = y
        y.parent = x

        self._record(KIND_ROTATE_RIGHT,
                     f"Right rotation performed at node {y.key}",
                     key=y.key, node=y, highlight=[y.key, x.key])

    # ─────────────────────────────────────────────────────────────
    #  INSERT
    # ─────────────────────────────────────────────────────────────

    def insert(self, key):
        """
        Insert ``key`` (CLRS RB-INSERT).

        Args:
            key (number): The value to insert.
        """
        self._record(KIND_INSERT_START, f"Starting insertion of value {key}",
                     key=key)

        z       = RBNode(key, RED, self._new_id(key))
        z.left  = self.NIL
        z.right = self.NIL

        # ── BST walk ──
        y = None
        x = self.root
        while x is not self.NIL:
            y = x
            if key < x.key:
                self._record(KIND_COMPARE, f"{key} < {x.key} → go LEFT",
                             key=x.key, node=x, highlight=[x.key])
                x = x.left
            else:
                self._record(KIND_COMPARE, f"{key} >= {x.key} → go RIGHT",
                             key=x.key, node=x, highlight=[x.key])
                x = x.right

        # ── Attach ──
        z.parent = y
        if y is None:
            self.root = z
            where = "as ROOT"
        elif key < y.key:
            y.left = z
            where = f"as LEFT child of {y.key}"
        else:
            y.right = z
            where = f"as RIGHT child of {y.key}"
        self._record(KIND_INSERT, f"Inserted RED node {key} {where}",
                     key=key, node=z, highlight=[key])

        if z.parent is None:
            z.color = BLACK
            self._record(KIND_RECOLOR,
                         f"Recolored root node {key} to BLACK",
                         key=key, node=z, case="case0", highlight=[key])
        elif z.parent.parent is not None:
            self._insert_fixup(z)

        self._record(KIND_INSERT_COMPLETE, f"Insertion of {key} complete",
                     key=key)

    # ─────────────────────────────────────────────────────────────
    #  INSERT FIXUP  (CLRS RB-INSERT-FIXUP)
    # ─────────────────────────────────────────────────────────────

    def _insert_fixup(self, z):
        """
        Restore RB properties after insertion.

        Iterates while z's parent is RED.  A RED parent is never the
        root, so the grandparent always exists inside the loop.

        Args:
            z (RBNode): The newly inserted node (starts RED).
        """
        while z.parent is not None and z.parent.color == RED:
            parent = z.parent
            grand  = parent.parent

            if parent is grand.left:
                uncle, mirror = grand.right, False
            else:
                uncle, mirror = grand.left, True
            tag = " (mirror)" if mirror else ""

            if uncle.color == RED:
                # ═══ CASE 1: uncle RED → push the violation up ═══
                self._record(KIND_CASE,
                             f"Case 1{tag}: uncle {uncle.key} is RED",
                             key=z.key, node=z, case="case1",
                             highlight=[z.key, parent.key, uncle.key,
                                        grand.key])
                parent.color = BLACK
                uncle.color  = BLACK
                grand.color  = RED
                self._record(KIND_COLOR_FLIP,
                             f"Color flip: parent {parent.key} and uncle "
                             f"{uncle.key} to BLACK, grandparent {grand.key} "
                             f"to RED",
                             key=grand.key, node=grand, case="case1",
                             highlight=[parent.key, uncle.key, grand.key])
                z = grand
                continue

            inner = z is (parent.left if mirror else parent.right)
            if inner:
                # ═══ CASE 2: straighten the zig-zag ═══
                self._record(KIND_CASE,
                             f"Case 2{tag}: uncle {self._key(uncle)} is "
                             f"BLACK, {z.key} is an inner grandchild",
                             key=z.key, node=z, case="case2",
                             highlight=[z.key, parent.key])
                z = parent
                if mirror:
                    self._right_rotate(z)
                else:
                    self._left_rotate(z)
                parent = z.parent

            # ═══ CASE 3: recolour + rotate grandparent (terminal) ═══
            self._record(KIND_CASE,
                         f"Case 3{tag}: uncle {self._key(uncle)} is BLACK, "
                         f"{z.key} is an outer grandchild",
                         key=z.key, node=z, case="case3",
                         highlight=[z.key, parent.key, grand.key])
            parent.color = BLACK
            grand.color  = RED
            self._record(KIND_RECOLOR,
                         f"Recolored parent {parent.key} to BLACK and "
                         f"grandparent {grand.key} to RED",
                         key=parent.key, node=parent, case="case3",
                         highlight=[parent.key, grand.key])
            if mirror:
                self._left_rotate(grand)
            else:
                self._right_rotate(grand)

        if self.root.color == RED:
            self._record(KIND_RECOLOR,
                         f"Recolored root node {self.root.key} to BLACK",
                         key=self.root.key, node=self.root, case="case0",
                         highlight=[self.root.key])
        self.root.color = BLACK

    # ─────────────────────────────────────────────────────────────
    #  QUERIES
    # ─────────────────────────────────────────────────────────────

    def __contains__(self, key):
        node = self.root
        while node is not self.NIL:
            if key == node.key:
                return True
            node = node.left if key < node.key else node.right
        return False

    def __len__(self):
        return len(self.get_all_nodes())

    def get_height(self):
        def _h(n):
            if n is self.NIL:
                return 0
            return 1 + max(_h(n.left), _h(n.right))
        return _h(self.root)

    def get_all_keys(self):
        """In-order traversal of all keys."""
        keys = []
        def _in(n):
            if n is self.NIL:
                return
            _in(n.left); keys.append(n.key); _in(n.right)
        _in(self.root)
        return keys

    def to_tuple(self):
        """
        Nested (key, color, left, right) tuple for shape comparison.

        None represents NIL / empty subtree.
        """
        def _t(n):
            if n is self.NIL:
                return None
            return (n.key, n.color, _t(n.left), _t(n.right))
        return _t(self.root)

    # ─────────────────────────────────────────────────────────────
    #  VISUALISATION SURFACE
    # ─────────────────────────────────────────────────────────────

    def children(self, node):
        left  = None if node.left is self.NIL else node.left
        right = None if node.right is self.NIL else node.right
        return left, right

    def get_all_nodes(self):
        """Pre-order list of real nodes (never NIL)."""
        nodes = []
        def _walk(n):
            if n is self.NIL:
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
                if child is not self.NIL:
                    edges.append({"source": n, "target": child})
                    _walk(child)
        if self.root is not self.NIL:
            _walk(self.root)
        return edges

    def calculate_coordinates(self, config=None, **overrides):
        """
        Populate x / y on every real node.

        Args:
            config    (LayoutConfig|None): Base config (RB defaults if None).
            overrides (dict)             : LayoutConfig field overrides.
        """
        config = (config or LayoutConfig(self.ENGINE)).replace(**overrides)
        root = None if self.root is self.NIL else self.root
        layout_binary(root, config, self.children, self.get_all_nodes())
