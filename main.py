#!/usr/bin/env python3
"""
╔══════════════════════════════════════════════════════════════════╗
║        Balanced Tree Visualizer v1.0  -  Entry Point             ║
║                                                                  ║
║  Run     : python main.py avl 10 20 30 40 50 25                  ║
║            python main.py rb 10 20 30 --step 7 --png step7.png   ║
║            python main.py btree 1 2 3 4 5 6 7 --order 3          ║
║                                                                  ║
║  Description:                                                    ║
║    Builds the chosen tree from the given keys, prints the        ║
║    numbered operation log and the laid-out nodes, and can        ║
║    replay any step and export PNG / PDF / MP4 walkthroughs.      ║
║                                                                  ║
║  Architecture:                                                   ║
║    main.py ──► make_tree() ──► avl_tree / rb_tree / b_tree       ║
║            ──► tree_steps.replay()   (--step)                    ║
║            ──► tree_render           (--png / --pdf / --video)   ║
╚══════════════════════════════════════════════════════════════════╝
"""

import argparse
import functools
import logging
import sys

from avl_tree import AVLTree
from b_tree import BTree
from rb_tree import RBTree, color_name
from settings import Settings
from tree_checks import tree_stats
from tree_render import TreeImageRenderer, PDFExporter, VideoExporter
from tree_steps import replay, step_description

logger = logging.getLogger(__name__)

ENGINES = ("avl", "rb", "btree")


def make_tree(engine, order=3):
    """
    Build an empty engine by name.

    Args:
        engine (str): "avl", "rb" or "btree".
        order  (int): B-Tree order (ignored by the binary engines).
    """
    if engine == "avl":
        return AVLTree()
    if engine == "rb":
        return RBTree()
    if engine == "btree":
        return BTree(order)
    raise ValueError(f"unknown engine {engine!r}")


def parse_key(text):
    """argparse type for keys: int when integral, else float."""
    try:
        return int(text)
    except ValueError:
        pass
    try:
        value = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {text!r}")
    if value != value or value in (float("inf"), float("-inf")):
        raise argparse.ArgumentTypeError(f"not a finite number: {text!r}")
    return value


def describe_node(tree, node):
    """One line per node for the node listing."""
    pos = f"({node.x:.1f}, {node.y:.1f})"
    if tree.ENGINE == "avl":
        return f"{node.key:>8}  h={node.height}  {pos}"
    if tree.ENGINE == "rb":
        return f"{node.key:>8}  {color_name(node.color):<5}  {pos}"
    return f"{str(node.keys):>16}  {pos}"


def build_parser():
    parser = argparse.ArgumentParser(
        description="Build an AVL, Red-Black or B-Tree and show every "
                    "balancing step")
    parser.add_argument("engine", choices=ENGINES, help="Tree type")
    parser.add_argument("keys", nargs="*", type=parse_key,
                        help="Keys to insert, in order")
    parser.add_argument("--order", type=int, default=None,
                        help="B-Tree order (default: from settings, 3)")
    parser.add_argument("--step", type=int, default=None,
                        help="Show the tree as it stood after this step")
    parser.add_argument("--png", help="Write the shown tree as PNG")
    parser.add_argument("--pdf", help="Write a step-by-step PDF walkthrough")
    parser.add_argument("--video", help="Write a step-by-step MP4")
    parser.add_argument("--settings", default=None,
                        help="Settings JSON path (default ~/.treeviz_v1.json)")
    parser.add_argument("--quiet", action="store_true",
                        help="Do not print the operation log")
    parser.add_argument("--verbose", action="store_true",
                        help="Debug logging (every recorded step)")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")

    settings = Settings(args.settings)
    order = args.order if args.order is not None else settings.btree_order
    try:
        factory = functools.partial(make_tree, args.engine, order)
        tree = factory()
    except ValueError as e:
        logger.error("%s", e)
        return 2

    for key in args.keys:
        tree.insert(key)

    ops = tree.operations
    if not args.quiet:
        for i, op in enumerate(ops, start=1):
            print(f"{i:4d}  {op.kind:<16} {op.description}")

    shown = tree
    if args.step is not None:
        if args.step < 0:
            logger.error("--step must be >= 0")
            return 2
        shown = replay(factory, ops, args.step)
        print(f"\nStep {args.step}: {step_description(ops, args.step)}")

    shown.calculate_coordinates(settings.layout_config(shown.ENGINE))
    print(f"\nNodes ({len(shown.get_all_nodes())}), "
          f"edges ({len(shown.get_edges())}):")
    for node in shown.get_all_nodes():
        print("  " + describe_node(shown, node))
    stats = tree_stats(shown)
    print("\n" + ", ".join(f"{k}={v}" for k, v in stats.items()))

    ok = True
    if args.png:
        ok &= TreeImageRenderer(settings).render_png(shown, args.png)
    if args.pdf:
        ok &= PDFExporter(settings).export(factory, ops, args.pdf)
    if args.video:
        ok &= VideoExporter(settings).export(factory, ops, args.video)
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
