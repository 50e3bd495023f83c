"""
pairswap — Step Tracer for Swapping Adjacent List Nodes
=======================================================

pairswap replays "swap every two adjacent nodes of a singly linked list"
one pointer operation at a time and returns a deterministic, ordered
trace of immutable snapshots. Each snapshot describes the list, the
pointers, the variables in scope and the source line being executed,
ready for a presentation layer to animate.

What's Public
-------------
Everything exported in ``__all__``:

- **List model**: ListNode, build, flatten, clone, length, freeze, thaw
- **Reference**: swap_pairs, expected_result
- **Formatting**: format_node and the ``null`` / ``Node(<int>)`` contract
- **Tracing**: generate_steps, StepTrace, Snapshot and its descriptors
- **Audit**: TraceAudit and its result types
- **Exceptions**: all coded errors

Example
-------
::

    from pairswap import generate_steps, TraceAudit

    trace = generate_steps([1, 2, 3, 4])
    for snapshot in trace:
        print(snapshot.line, snapshot.description)

    trace.final_values()          # [2, 1, 4, 3]
    TraceAudit(trace).assert_valid()
"""

__version__ = "1.0.0"

__all__ = [
    # --- Package Metadata ---
    "__version__",

    # --- Linked List Model ---
    "ListNode",
    "build",
    "flatten",
    "clone",
    "length",
    "iter_nodes",
    "node_ids",
    "collect_nodes",
    "has_cycle",
    "FrozenNode",
    "freeze",
    "thaw",

    # --- Reference Algorithm ---
    "swap_pairs",
    "expected_result",

    # --- Value Formatter ---
    "NULL_LITERAL",
    "NODE_PREFIX",
    "FORMATTED_VALUE_PATTERN",
    "format_node",
    "format_values",
    "is_formatted_value",
    "parse_formatted_value",

    # --- Snapshots ---
    "Snapshot",
    "VisualNode",
    "VisualEdge",
    "VariableBinding",
    "PointerHighlight",
    "PointerChange",
    "Operation",
    "NodeRole",
    "EdgeStatus",
    "SourceLine",
    "TOTAL_CODE_LINES",

    # --- Tracing ---
    "generate_steps",
    "StepTrace",
    "SENTINEL_ID",
    "SENTINEL_VALUE",
    "DEFAULT_NAMESPACE",

    # --- Audit ---
    "TraceAudit",
    "AuditStatus",
    "OracleCheck",
    "TraceValidation",
    "DeterminismCheck",
    "TraceExplanation",
    "expected_step_count",

    # --- Exceptions ---
    "PairSwapError",
    "InvalidValueError",
    "FormatError",
    "TraceValidationError",
    "TraceImmutabilityError",
    "TraceAuditError",
    "TraceConsistencyError",
    "OracleMismatchError",
]

from pairswap.audit import (
    AuditStatus,
    DeterminismCheck,
    OracleCheck,
    TraceAudit,
    TraceExplanation,
    TraceValidation,
    expected_step_count,
)
from pairswap.errors import (
    FormatError,
    InvalidValueError,
    OracleMismatchError,
    PairSwapError,
    TraceAuditError,
    TraceConsistencyError,
    TraceImmutabilityError,
    TraceValidationError,
)
from pairswap.formatting import (
    FORMATTED_VALUE_PATTERN,
    NODE_PREFIX,
    NULL_LITERAL,
    format_node,
    format_values,
    is_formatted_value,
    parse_formatted_value,
)
from pairswap.linked_list import (
    FrozenNode,
    ListNode,
    build,
    clone,
    collect_nodes,
    flatten,
    freeze,
    has_cycle,
    iter_nodes,
    length,
    node_ids,
    thaw,
)
from pairswap.reference import expected_result, swap_pairs
from pairswap.steps import (
    TOTAL_CODE_LINES,
    EdgeStatus,
    NodeRole,
    Operation,
    PointerChange,
    PointerHighlight,
    Snapshot,
    SourceLine,
    VariableBinding,
    VisualEdge,
    VisualNode,
)
from pairswap.trace import StepTrace
from pairswap.tracer import (
    DEFAULT_NAMESPACE,
    SENTINEL_ID,
    SENTINEL_VALUE,
    generate_steps,
)
