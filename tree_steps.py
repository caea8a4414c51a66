"""
╔══════════════════════════════════════════════════════════════════╗
║        Balanced Tree Visualizer v1.0  -  STEP RECORDING          ║
║                                                                  ║
║  Shared operation-log machinery for the three tree engines.      ║
║                                                                  ║
║  Every engine derives from StepRecorder and calls _record()      ║
║  for each structural event (placement, rotation, recolour,       ║
║  split, height update).  The resulting list is the ONLY medium   ║
║  for step-by-step playback: a viewer rebuilds the tree at step   ║
║  N by replaying the "insert" records of the first N steps into   ║
║  a fresh engine, never by rewinding or snapshotting.             ║
║                                                                  ║
║  Record Schema                                                   ║
║  ─────────────                                                   ║
║  { "kind"        : str,   # tag from the KIND_* constants        ║
║    "description" : str,   # human-readable text for the viewer   ║
║    "key"         : num?,  # subject key (promoted key, pivot…)   ║
║    "case"        : str?,  # balancing case id ("LL", "case1"…)   ║
║    "highlight"   : [num]  # keys a renderer may emphasise        ║
║  }                                                               ║
╚══════════════════════════════════════════════════════════════════╝
"""

import logging

logger = logging.getLogger(__name__)


# ═════════════════════════════════════════════════════════════════
#  RECORD KINDS
# ═════════════════════════════════════════════════════════════════
KIND_INSERT_START    = "insert-start"
KIND_INSERT          = "insert"           # replay key carrier
KIND_INSERT_COMPLETE = "insert-complete"
KIND_COMPARE         = "compare"
KIND_DUPLICATE       = "duplicate"
KIND_UPDATE_HEIGHT   = "update-height"
KIND_BALANCE_CHECK   = "balance-check"
KIND_BALANCE_CASE    = "balance-case"
KIND_ROTATE_LEFT     = "rotate-left"
KIND_ROTATE_RIGHT    = "rotate-right"
KIND_CASE            = "case"
KIND_COLOR_FLIP      = "color-flip"
KIND_RECOLOR         = "recolor"
KIND_SPLIT           = "split"
KIND_NEW_ROOT        = "new-root"

ROTATION_KINDS = (KIND_ROTATE_LEFT, KIND_ROTATE_RIGHT)
RECOLOR_KINDS  = (KIND_COLOR_FLIP, KIND_RECOLOR)

EMPTY_STEP_DESCRIPTION = "Initial state - empty tree"


class OperationRecord:
    """
    One logged structural event.

    Attributes:
        kind        (str)        : One of the KIND_* tags.
        description (str)        : Text shown by the step viewer.
        key         (number|None): Subject key of the event.
        node        (object|None): Live node the event concerns.  Only
                                   meaningful while the engine that
                                   produced it is alive.
        case        (str|None)   : Balancing case id, if any.
        highlight   (tuple)      : Keys a renderer may emphasise.
    """
    __slots__ = ('kind', 'description', 'key', 'node', 'case', 'highlight')

    def __init__(self, kind, description, key=None, node=None, case=None,
                 highlight=()):
        self.kind        = kind
        self.description = description
        self.key         = key
        self.node        = node
        self.case        = case
        self.highlight   = tuple(h for h in highlight if h is not None)

    def as_dict(self):
        """Plain-dict view used by the exporters (no live node refs)."""
        return {
            "kind":        self.kind,
            "description": self.description,
            "key":         self.key,
            "case":        self.case,
            "highlight":   list(self.highlight),
        }

    def __repr__(self):
        return f"OperationRecord({self.kind!r}, {self.description!r})"


# ═════════════════════════════════════════════════════════════════
#  STEP RECORDER
#
#  Base class for the engines.  Holds the append-only log and the
#  per-tree node-id counter.  The log is cleared only by building
#  a new engine.
# ═════════════════════════════════════════════════════════════════
class StepRecorder:
    """
    Append-only operation log shared by all tree engines.

    Attributes:
        operations (list[OperationRecord]): Every record since construction.
    """

    def __init__(self):
        self.operations = []
        self._next_id   = 0

    def _record(self, kind, description, key=None, node=None, case=None,
                highlight=None):
        """
        Append one record to ``self.operations``.

        Args:
            kind        (str)        : Record kind tag.
            description (str)        : Human-readable step text.
            key         (number|None): Subject key.
            node        (object|None): Subject node.
            case        (str|None)   : Case id.
            highlight   (list|None)  : Keys to emphasise.
        """
        rec = OperationRecord(kind, description, key=key, node=node,
                              case=case, highlight=highlight or ())
        self.operations.append(rec)
        logger.debug("[%s #%d] %s: %s", type(self).__name__,
                     len(self.operations), kind, description)
        return rec

    def _new_id(self, key):
        self._next_id += 1
        return f"node-{key}-{self._next_id}"


# ═════════════════════════════════════════════════════════════════
#  REPLAY
# ═════════════════════════════════════════════════════════════════

def insert_keys(operations, step=None):
    """
    Keys carried by the "insert" records among the first ``step`` records.

    Args:
        operations (list)    : Operation log.
        step       (int|None): Prefix length; None means the whole log.

    Returns:
        list: Keys in insertion order.
    """
    if step is None:
        step = len(operations)
    if step < 0:
        raise ValueError(f"step must be >= 0, got {step}")
    return [op.key for op in operations[:step] if op.kind == KIND_INSERT]


def replay(factory, operations, step=None):
    """
    Rebuild the tree as it stood after ``step`` records.

    A fresh engine is built with ``factory()`` and the keys of the
    "insert" records in the prefix are re-inserted in order.

    Args:
        factory    (callable): Zero-argument engine constructor.
        operations (list)    : Operation log of the original engine.
        step       (int|None): Number of records to honour.

    Returns:
        StepRecorder: The rebuilt engine.
    """
    tree = factory()
    for key in insert_keys(operations, step):
        tree.insert(key)
    return tree


def step_description(operations, step):
    """Description shown at 1-based ``step`` (step 0 is the empty tree)."""
    if step <= 0 or not operations:
        return EMPTY_STEP_DESCRIPTION
    step = min(step, len(operations))
    return operations[step - 1].description or f"Step {step}"


def count_kinds(operations):
    """Map each record kind to how often it occurs in ``operations``."""
    counts = {}
    for op in operations:
        counts[op.kind] = counts.get(op.kind, 0) + 1
    return counts
