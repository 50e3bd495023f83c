"""
linked_list.py

Singly linked list model with stable node identity.

Each ListNode carries an opaque ``node_id`` that is independent of the
Python object holding it. Clones keep the ids of their originals, which
lets a tracer correlate the same logical node across the original list,
a working copy and every snapshot taken along the way.

All traversals are cycle-bounded: a walk stops as soon as it reaches a
node id it has already visited in that walk, so an accidentally cyclic
list is truncated instead of looping forever.
"""

import itertools
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from pairswap.errors import InvalidValueError

_node_counter = itertools.count()
_build_counter = itertools.count()


class ListNode:
    """A node with an integer value, an identity token and one outgoing link."""

    __slots__ = ('node_id', 'val', 'next')

    def __init__(
        self,
        val: int = 0,
        next: Optional["ListNode"] = None,
        node_id: Optional[str] = None,
    ):
        self.node_id = node_id if node_id is not None else f"node#{next_node_number()}"
        self.val = val
        self.next = next

    def __repr__(self) -> str:
        return f"ListNode(id={self.node_id!r}, val={self.val})"


def next_node_number() -> int:
    """Draw the next number from the process-wide node counter."""
    return next(_node_counter)


# =============================================================================
# Construction
# =============================================================================

def build(values: Iterable[int], *, namespace: Optional[str] = None) -> Optional[ListNode]:
    """
    Build a linked list from a sequence of integers.

    Node ``i`` gets the id ``"<namespace>-<i>"``. Without an explicit
    namespace a fresh one is drawn per call, so two lists built from the
    same values stay distinguishable.

    Args:
        values: Integers in list order
        namespace: Optional id prefix for deterministic ids

    Returns:
        Head node, or None for empty input

    Raises:
        InvalidValueError: If an element is not an int
    """
    if namespace is None:
        namespace = f"list{next(_build_counter)}"

    head: Optional[ListNode] = None
    tail: Optional[ListNode] = None

    for index, value in enumerate(values):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidValueError(type(value).__name__, index)

        node = ListNode(value, None, f"{namespace}-{index}")
        if tail is None:
            head = node
        else:
            tail.next = node
        tail = node

    return head


# =============================================================================
# Cycle-bounded traversal
# =============================================================================

def iter_nodes(head: Optional[ListNode]) -> Iterator[ListNode]:
    """Yield nodes in link order, stopping at None or at a revisited id."""
    visited = set()
    current = head
    while current is not None and current.node_id not in visited:
        visited.add(current.node_id)
        yield current
        current = current.next


def flatten(head: Optional[ListNode]) -> List[int]:
    """Return the values of the list in traversal order."""
    return [node.val for node in iter_nodes(head)]


def length(head: Optional[ListNode]) -> int:
    """Count the distinct nodes reachable from ``head``."""
    return sum(1 for _ in iter_nodes(head))


def node_ids(head: Optional[ListNode]) -> List[str]:
    """Return node ids in traversal order."""
    return [node.node_id for node in iter_nodes(head)]


def collect_nodes(head: Optional[ListNode]) -> Dict[str, ListNode]:
    """Map node id to node for every reachable node, in traversal order."""
    return {node.node_id: node for node in iter_nodes(head)}


def has_cycle(head: Optional[ListNode]) -> bool:
    """True if following links from ``head`` revisits a node."""
    last = None
    for last in iter_nodes(head):
        pass
    return last is not None and last.next is not None


# =============================================================================
# Frozen form and deep copy
# =============================================================================

@dataclass(frozen=True)
class FrozenNode:
    """
    Immutable record of one node in a frozen list.

    ``next_index`` is the position of the link target inside the same
    frozen tuple, or None when the link was absent or led outside it.
    """
    node_id: str
    val: int
    next_index: Optional[int]


def freeze(head: Optional[ListNode]) -> Tuple[FrozenNode, ...]:
    """
    Record the nodes reachable from ``head`` as an immutable tuple.

    Links are resolved by object identity, so a cycle back into the walk
    is kept, while a link to a distinct object that merely reuses a
    visited id is dropped.
    """
    nodes = list(iter_nodes(head))
    positions = {id(node): index for index, node in enumerate(nodes)}
    return tuple(
        FrozenNode(node.node_id, node.val, positions.get(id(node.next)))
        for node in nodes
    )


def thaw(frozen: Tuple[FrozenNode, ...]) -> Optional[ListNode]:
    """Rebuild a fresh, independent list from its frozen form."""
    nodes = [ListNode(record.val, None, record.node_id) for record in frozen]
    for node, record in zip(nodes, frozen):
        if record.next_index is not None:
            node.next = nodes[record.next_index]
    return nodes[0] if nodes else None


def clone(head: Optional[ListNode]) -> Optional[ListNode]:
    """
    Deep-copy a list, preserving node ids.

    Returns:
        Head of the copy, or None for an empty list
    """
    return thaw(freeze(head))
