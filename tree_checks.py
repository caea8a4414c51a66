"""
Invariant checks and statistics for the three tree engines.

Validators return ``(ok, ..., errors)`` tuples where ``errors`` is a
list of human-readable strings, so a viewer can show what broke.
"""

from rb_tree import RED, BLACK
from tree_steps import (
    count_kinds, ROTATION_KINDS, RECOLOR_KINDS, KIND_SPLIT,
)


# ═════════════════════════════════════════════════════════════════
#  BST ORDER
# ═════════════════════════════════════════════════════════════════

def validate_bst(node, nil=None, min_val=float('-inf'), max_val=float('inf'),
                 allow_equal=False):
    """
    Validate BST ordering on a binary tree.

    Each key must satisfy ``min_val < key < max_val``.  With
    ``allow_equal`` the bounds are inclusive: the Red-Black engine
    accepts duplicates, and a rotation may carry an equal key to
    either side of its twin.

    Args:
        node (node|None): Subtree root.
        nil  (node|None): Sentinel standing for an absent child.

    Returns:
        (bool, list[str]): (is_valid, error_list)
    """
    if node is None or node is nil:
        return True, []

    errors = []
    if node.key < min_val or (node.key == min_val and not allow_equal):
        errors.append(f"BST violation: node {node.key} <= {min_val}")
    if node.key > max_val or (node.key == max_val and not allow_equal):
        errors.append(f"BST violation: node {node.key} >= {max_val}")

    _, lerr = validate_bst(node.left, nil, min_val, node.key, allow_equal)
    _, rerr = validate_bst(node.right, nil, node.key, max_val, allow_equal)
    errors.extend(lerr)
    errors.extend(rerr)
    return len(errors) == 0, errors


# ═════════════════════════════════════════════════════════════════
#  AVL
# ═════════════════════════════════════════════════════════════════

def validate_avl(node):
    """
    Check stored heights and balance factors of an AVL subtree.

    Returns:
        (bool, int, list[str]): (is_valid, true_height, error_list)
    """
    if node is None:
        return True, 0, []

    _, hl, lerr = validate_avl(node.left)
    _, hr, rerr = validate_avl(node.right)
    errors = lerr + rerr

    h = 1 + max(hl, hr)
    if node.height != h:
        errors.append(f"Height violation at node {node.key}: "
                      f"stored={node.height}, actual={h}")
    if abs(hl - hr) > 1:
        errors.append(f"Balance violation at node {node.key}: "
                      f"factor={hl - hr}")
    return len(errors) == 0, h, errors


# ═════════════════════════════════════════════════════════════════
#  RED-BLACK
# ═════════════════════════════════════════════════════════════════

def _validate_rb_node(node, nil, parent_color):
    if node is nil:
        return True, 1, []          # NIL leaves count as BLACK

    errors = []
    if node.color == RED and parent_color == RED:
        errors.append(
            f"Red violation: node {node.key} and its parent are both RED")

    _, bh_l, lerr = _validate_rb_node(node.left, nil, node.color)
    _, bh_r, rerr = _validate_rb_node(node.right, nil, node.color)
    errors.extend(lerr)
    errors.extend(rerr)

    if bh_l != bh_r:
        errors.append(f"Black-height violation at node {node.key}: "
                      f"left={bh_l}, right={bh_r}")

    bh = bh_l + (1 if node.color == BLACK else 0)
    return len(errors) == 0, bh, errors


def validate_rb(tree):
    """
    Validate the Red-Black properties of an RBTree.

    Checks:
        • Root is BLACK
        • No RED node has a RED child
        • Equal black-height on all root-to-NIL paths
        • NIL sentinel is still BLACK

    Returns:
        (bool, int, list[str]): (is_valid, black_height, error_list)
    """
    errors = []
    if tree.NIL.color != BLACK:
        errors.append("Sentinel NIL is not BLACK")
    if tree.root is not tree.NIL and tree.root.color != BLACK:
        errors.append(f"Root {tree.root.key} is not BLACK")
    _, bh, node_errors = _validate_rb_node(tree.root, tree.NIL, None)
    errors.extend(node_errors)
    return len(errors) == 0, bh, errors


def black_height(tree):
    """
    Black nodes on the left spine below the root, NIL included.

    Only meaningful when the tree satisfies the black-height property.
    """
    bh, node = 0, tree.root
    while node is not tree.NIL:
        node = node.left
        if node.color == BLACK:
            bh += 1
    return bh


def count_colors(tree):
    """
    Count BLACK and RED nodes of an RBTree.

    Returns:
        tuple[int, int]: (black_count, red_count).
    """
    nodes = tree.get_all_nodes()
    red = sum(1 for n in nodes if n.color == RED)
    return len(nodes) - red, red


# ═════════════════════════════════════════════════════════════════
#  B-TREE
# ═════════════════════════════════════════════════════════════════

def validate_btree(tree):
    """
    Validate B-Tree structure.

    Checks:
        • Keys inside each node are ascending
        • Internal nodes have len(keys) + 1 children
        • No node holds more than order - 1 keys; none is empty
          (except the root of an empty tree)
        • All leaves sit at the same depth
        • Keys respect the separator ranges of their ancestors

    Returns:
        (bool, list[str]): (is_valid, error_list)
    """
    errors = []
    leaf_depths = set()

    def _check(node, depth, low, high):
        keys = node.keys
        if any(a > b for a, b in zip(keys, keys[1:])):
            errors.append(f"Keys not sorted in node {keys}")
        if len(keys) > tree.max_keys:
            errors.append(f"Node {keys} holds {len(keys)} keys, "
                          f"max is {tree.max_keys}")
        if not keys and node is not tree.root:
            errors.append(f"Empty non-root node at depth {depth}")
        for k in keys:
            if (low is not None and k < low) or (high is not None and k > high):
                errors.append(f"Key {k} outside separator range "
                              f"[{low}, {high}]")
        if node.is_leaf:
            leaf_depths.add(depth)
            return
        if len(node.children) != len(keys) + 1:
            errors.append(f"Node {keys} has {len(node.children)} children, "
                          f"expected {len(keys) + 1}")
            return
        bounds = [low] + keys + [high]
        for i, child in enumerate(node.children):
            _check(child, depth + 1, bounds[i], bounds[i + 1])

    _check(tree.root, 0, None, None)
    if len(leaf_depths) > 1:
        errors.append(f"Leaves at different depths: {sorted(leaf_depths)}")
    return len(errors) == 0, errors


# ═════════════════════════════════════════════════════════════════
#  STATS
# ═════════════════════════════════════════════════════════════════

def tree_stats(tree):
    """
    Summary numbers for a stats panel or the PDF summary page.

    Returns:
        dict: nodes, keys, height, rotations, recolors, splits, steps.
    """
    kinds = count_kinds(tree.operations)
    return {
        "nodes":     len(tree.get_all_nodes()),
        "keys":      len(tree.get_all_keys()),
        "height":    tree.get_height(),
        "rotations": sum(kinds.get(k, 0) for k in ROTATION_KINDS),
        "recolors":  sum(kinds.get(k, 0) for k in RECOLOR_KINDS),
        "splits":    kinds.get(KIND_SPLIT, 0),
        "steps":     len(tree.operations),
    }
