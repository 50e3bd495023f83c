"""
steps.py

Snapshot records emitted by the step tracer.

A Snapshot is one immutable, self-describing point in a trace: the list
as the algorithm would return it right now, display-ordered node and
edge descriptors for a renderer, the variables in scope and the source
line being executed.

Design Invariants:
- Pure data (no execution logic)
- Frozen after creation
- Deterministic serialization via to_dict()
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional, Tuple

from pairswap.linked_list import FrozenNode, ListNode, flatten, thaw

# =============================================================================
# Enumerations
# =============================================================================

class Operation(Enum):
    """Category of the checkpoint a snapshot was taken at."""
    INITIALIZE = "initialize"
    CONDITION_CHECK = "condition-check"
    POINTER_REWIRE = "pointer-rewire"
    SWAP_FINALIZED = "swap-finalized"
    POINTER_ADVANCE = "pointer-advance"
    TERMINATE = "terminate"


class NodeRole(Enum):
    """Highlight tag attached to a node or pointer."""
    BEING_INSPECTED = "being-inspected"
    TRAILING_POINTER = "trailing-pointer"
    TEMPORARY_POINTER = "temporary-pointer"
    SENTINEL = "sentinel"
    MID_SWAP = "mid-swap"


class EdgeStatus(Enum):
    """How a link changed at the step it is reported in."""
    UNCHANGED = "unchanged"
    NEWLY_ESTABLISHED = "newly-established"
    BEING_REMOVED = "being-removed"


class SourceLine(IntEnum):
    """Line numbers of the swap routine the trace is correlated with."""
    METHOD_START = 1
    CREATE_FAKE_HEAD = 2
    INIT_CURRENT_PREV = 3
    WHILE_CONDITION = 4
    PREV_NEXT_ASSIGN = 5
    TEMP_ASSIGN = 6
    CURRENT_NEXT_NEXT = 7
    CURRENT_NEXT_ASSIGN = 8
    PREV_ASSIGN = 9
    CURRENT_ASSIGN = 10
    WHILE_END = 11
    RETURN = 12
    METHOD_END = 13


TOTAL_CODE_LINES = len(SourceLine)


# =============================================================================
# Descriptors
# =============================================================================

@dataclass(frozen=True)
class VisualNode:
    """A node as it should appear on screen."""
    node_id: str
    value: int
    order: int  # left-to-right screen position
    role: Optional[NodeRole] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "node_id": self.node_id,
            "order": self.order,
            "role": self.role.value if self.role is not None else None,
            "value": self.value,
        }


@dataclass(frozen=True)
class VisualEdge:
    """A directed link between two visible nodes."""
    source_id: str
    target_id: str
    status: EdgeStatus = EdgeStatus.UNCHANGED

    @property
    def edge_id(self) -> str:
        return f"edge-{self.source_id}-{self.target_id}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "edge_id": self.edge_id,
            "source_id": self.source_id,
            "status": self.status.value,
            "target_id": self.target_id,
        }


@dataclass(frozen=True)
class VariableBinding:
    """A named variable and its formatted value at a source line."""
    name: str
    value: str
    line: int

    def to_dict(self) -> Dict[str, Any]:
        return {"line": self.line, "name": self.name, "value": self.value}


@dataclass(frozen=True)
class PointerHighlight:
    """Which node a pointer variable currently refers to."""
    pointer: str
    node_id: str
    role: NodeRole

    def to_dict(self) -> Dict[str, Any]:
        return {"node_id": self.node_id, "pointer": self.pointer, "role": self.role.value}


@dataclass(frozen=True)
class PointerChange:
    """
    A link rewired by a step.

    Unlike edges, pointer changes are reported even when the source is
    the sentinel, which is never drawn.
    """
    source_id: str
    target_id: Optional[str]
    label: str  # e.g. "prev.next"

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.label, "source_id": self.source_id, "target_id": self.target_id}


# =============================================================================
# Snapshot
# =============================================================================

@dataclass(frozen=True)
class Snapshot:
    """
    One point-in-time record of the traced algorithm.

    ``chain`` is the frozen form of what the algorithm would return if it
    stopped here. ``head`` rebuilds it as a fresh list on every access, so
    editing that list never reaches the snapshot. It may be cyclic during
    a swap; use ``values`` for a cycle-bounded reading.
    """
    step_index: int
    description: str
    chain: Tuple[FrozenNode, ...]
    nodes: Tuple[VisualNode, ...]
    edges: Tuple[VisualEdge, ...]
    line: int
    variables: Tuple[VariableBinding, ...]
    operation: Operation
    pointers: Tuple[PointerHighlight, ...] = ()
    pointer_changes: Tuple[PointerChange, ...] = ()

    @property
    def head(self) -> Optional[ListNode]:
        """A new list materialized from ``chain``."""
        return thaw(self.chain)

    @property
    def values(self) -> List[int]:
        """Flattened values of the materialized result."""
        return flatten(self.head)

    @property
    def display_order(self) -> Tuple[str, ...]:
        """Node ids in screen order."""
        return tuple(node.node_id for node in sorted(self.nodes, key=lambda n: n.order))

    def variable(self, name: str) -> Optional[VariableBinding]:
        """Return the binding for ``name``, or None if it is not in scope."""
        for binding in self.variables:
            if binding.name == name:
                return binding
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "description": self.description,
            "edges": [edge.to_dict() for edge in self.edges],
            "line": self.line,
            "nodes": [node.to_dict() for node in self.nodes],
            "operation": self.operation.value,
            "pointer_changes": [change.to_dict() for change in self.pointer_changes],
            "pointers": [pointer.to_dict() for pointer in self.pointers],
            "result": self.values,
            "step_index": self.step_index,
            "variables": [binding.to_dict() for binding in self.variables],
        }
