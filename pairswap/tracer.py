"""
tracer.py

Step trace generator for swap-adjacent-pairs.

The swap is executed a second time over a working copy of the input,
instrumented at every checkpoint of its control flow. Each checkpoint
emits a Snapshot carrying its own frozen copy of the list, so no snapshot
shares mutable state with the working copy or with other snapshots.

Checkpoints per iteration, in order: loop test, ``prev.next`` rewire,
``temp`` save, swap (display order exchanged here and only here),
``current.next`` rewire, advance ``prev``, advance ``current``. Before the
loop come two initialize snapshots; after it, the failing loop test and
a terminate snapshot.
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from pairswap.formatting import format_node
from pairswap.linked_list import ListNode, build, clone, collect_nodes, freeze
from pairswap.steps import (
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

logger = logging.getLogger(__name__)

SENTINEL_ID = "fake_head"
SENTINEL_VALUE = 0
DEFAULT_NAMESPACE = "node"

_Link = Tuple[ListNode, Optional[ListNode]]


def generate_steps(values: Iterable[int], *, namespace: str = DEFAULT_NAMESPACE) -> StepTrace:
    """
    Replay the swap on ``values`` and return every intermediate snapshot.

    Args:
        values: Input integers in list order
        namespace: Id prefix for the traced nodes

    Returns:
        StepTrace whose last snapshot holds the swapped list

    Raises:
        InvalidValueError: If an element is not an int
    """
    values = tuple(values)
    head = build(values, namespace=namespace)

    if head is None:
        steps: Tuple[Snapshot, ...] = (Snapshot(
            step_index=0,
            description="List is empty, nothing to swap",
            chain=(),
            nodes=(),
            edges=(),
            line=int(SourceLine.RETURN),
            variables=(),
            operation=Operation.TERMINATE,
        ),)
    elif head.next is None:
        steps = (Snapshot(
            step_index=0,
            description="List has a single node, nothing to swap",
            chain=freeze(head),
            nodes=(VisualNode(head.node_id, head.val, 0),),
            edges=(),
            line=int(SourceLine.RETURN),
            variables=(),
            operation=Operation.TERMINATE,
        ),)
    else:
        steps = _SwapRecorder(clone(head)).run()

    trace = StepTrace(values, steps)
    logger.debug(
        "Traced %d values into %d steps (trace %s)",
        len(values), len(trace), trace.trace_id[:16],
    )
    return trace


class _SwapRecorder:
    """Runs the instrumented swap over a working copy and records snapshots."""

    def __init__(self, head: ListNode):
        self._nodes: Dict[str, ListNode] = collect_nodes(head)
        # Screen order; only _swap_display() may reorder it.
        self._display_order: List[str] = list(self._nodes)
        self._fake_head = ListNode(SENTINEL_VALUE, head, SENTINEL_ID)
        self._steps: List[Snapshot] = []
        self._temp_bound = False

    def run(self) -> Tuple[Snapshot, ...]:
        current: Optional[ListNode] = self._fake_head.next
        prev: ListNode = self._fake_head

        self._record(
            "Create sentinel fake_head in front of head",
            SourceLine.CREATE_FAKE_HEAD, Operation.INITIALIZE, current, prev,
        )
        self._record(
            "Initialize current = head, prev = fake_head",
            SourceLine.INIT_CURRENT_PREV, Operation.INITIALIZE, current, prev,
        )

        while current is not None and current.next is not None:
            next_node = current.next
            self._record(
                f"Check loop condition: current ({format_node(current)}) is not null "
                f"and current.next ({format_node(next_node)}) is not null",
                SourceLine.WHILE_CONDITION, Operation.CONDITION_CHECK, current, prev,
            )

            prev.next = next_node
            self._record(
                f"prev.next = current.next: prev now links to {format_node(next_node)}",
                SourceLine.PREV_NEXT_ASSIGN, Operation.POINTER_REWIRE, current, prev,
                established=[(prev, next_node)],
                removed=[(prev, current)],
                changes=[PointerChange(prev.node_id, next_node.node_id, "prev.next")],
            )

            temp = next_node.next
            self._temp_bound = True
            self._record(
                f"temp = current.next.next: save {format_node(temp)} in temp",
                SourceLine.TEMP_ASSIGN, Operation.POINTER_REWIRE, current, prev, temp,
            )

            next_node.next = current
            self._swap_display(current, next_node)
            self._record(
                f"current.next.next = current: {format_node(next_node)} now links to "
                f"{format_node(current)}, the two nodes swap places",
                SourceLine.CURRENT_NEXT_NEXT, Operation.SWAP_FINALIZED, current, prev, temp,
                established=[(next_node, current)],
                removed=[(next_node, temp)],
                changes=[PointerChange(next_node.node_id, current.node_id, "current.next.next")],
                swapping=(current, next_node),
            )

            current.next = temp
            self._record(
                f"current.next = temp: {format_node(current)} now links to {format_node(temp)}",
                SourceLine.CURRENT_NEXT_ASSIGN, Operation.POINTER_REWIRE, current, prev, temp,
                established=[(current, temp)],
                removed=[(current, next_node)],
                changes=[PointerChange(
                    current.node_id, temp.node_id if temp is not None else None, "current.next",
                )],
            )

            prev = current
            self._record(
                f"prev = current: move prev to {format_node(current)}",
                SourceLine.PREV_ASSIGN, Operation.POINTER_ADVANCE, current, prev, temp,
            )

            current = temp
            self._record(
                f"current = temp: move current to {format_node(temp)}",
                SourceLine.CURRENT_ASSIGN, Operation.POINTER_ADVANCE, current, prev, temp,
            )

        if current is None:
            reason = "Loop ends: current is null"
        else:
            reason = f"Loop ends: current ({format_node(current)}) has no next node"
        self._record(reason, SourceLine.WHILE_CONDITION, Operation.CONDITION_CHECK, current, prev)

        self._record_return(current, prev)
        return tuple(self._steps)

    # =========================================================================
    # Snapshot assembly
    # =========================================================================

    def _record(
        self,
        description: str,
        line: SourceLine,
        operation: Operation,
        current: Optional[ListNode],
        prev: ListNode,
        temp: Optional[ListNode] = None,
        *,
        established: Sequence[_Link] = (),
        removed: Sequence[_Link] = (),
        changes: Sequence[PointerChange] = (),
        swapping: Sequence[ListNode] = (),
    ) -> None:
        roles: Dict[str, NodeRole] = {}
        pointers: List[PointerHighlight] = []

        if current is not None:
            roles[current.node_id] = NodeRole.BEING_INSPECTED
            pointers.append(PointerHighlight("current", current.node_id, NodeRole.BEING_INSPECTED))
        if prev is self._fake_head:
            pointers.append(PointerHighlight("prev", SENTINEL_ID, NodeRole.SENTINEL))
        else:
            roles[prev.node_id] = NodeRole.TRAILING_POINTER
            pointers.append(PointerHighlight("prev", prev.node_id, NodeRole.TRAILING_POINTER))
        if temp is not None:
            roles[temp.node_id] = NodeRole.TEMPORARY_POINTER
            pointers.append(PointerHighlight("temp", temp.node_id, NodeRole.TEMPORARY_POINTER))
        for node in swapping:
            roles[node.node_id] = NodeRole.MID_SWAP

        self._append(
            description, line, operation, roles,
            self._bindings(line, current, prev, temp),
            tuple(pointers), established, removed, changes,
        )

    def _record_return(self, current: Optional[ListNode], prev: ListNode) -> None:
        result = self._fake_head.next
        variables = self._bindings(SourceLine.RETURN, current, prev, None)
        variables.append(VariableBinding("fake_head.next", format_node(result), int(SourceLine.RETURN)))
        self._append(
            "Return fake_head.next, swapping is complete",
            SourceLine.RETURN, Operation.TERMINATE, {}, variables, (), (), (), (),
        )

    def _bindings(
        self,
        line: SourceLine,
        current: Optional[ListNode],
        prev: ListNode,
        temp: Optional[ListNode],
    ) -> List[VariableBinding]:
        line = int(line)
        bindings = [
            VariableBinding("fake_head", format_node(self._fake_head), line),
            VariableBinding("current", format_node(current), line),
            VariableBinding("prev", format_node(prev), line),
        ]
        # temp stays listed once assigned; outside the loop body it reads null
        if self._temp_bound:
            bindings.append(VariableBinding("temp", format_node(temp), line))
        return bindings

    def _append(
        self,
        description: str,
        line: SourceLine,
        operation: Operation,
        roles: Dict[str, NodeRole],
        variables: List[VariableBinding],
        pointers: Tuple[PointerHighlight, ...],
        established: Sequence[_Link],
        removed: Sequence[_Link],
        changes: Sequence[PointerChange],
    ) -> None:
        nodes = tuple(
            VisualNode(node_id, self._nodes[node_id].val, order, roles.get(node_id))
            for order, node_id in enumerate(self._display_order)
        )
        self._steps.append(Snapshot(
            step_index=len(self._steps),
            description=description,
            chain=freeze(self._fake_head.next),
            nodes=nodes,
            edges=self._edges(established, removed),
            line=int(line),
            variables=tuple(variables),
            operation=operation,
            pointers=pointers,
            pointer_changes=tuple(changes),
        ))

    def _edges(
        self,
        established: Sequence[_Link],
        removed: Sequence[_Link],
    ) -> Tuple[VisualEdge, ...]:
        new_links = {
            (source.node_id, target.node_id)
            for source, target in established
            if target is not None
        }
        edges = []

        for node_id in self._display_order:
            target = self._nodes[node_id].next
            if target is None or target.node_id not in self._nodes:
                continue
            if (node_id, target.node_id) in new_links:
                status = EdgeStatus.NEWLY_ESTABLISHED
            else:
                status = EdgeStatus.UNCHANGED
            edges.append(VisualEdge(node_id, target.node_id, status))

        # The sentinel is never drawn, so links from it are left out.
        for source, target in removed:
            if target is None:
                continue
            if source.node_id in self._nodes and target.node_id in self._nodes:
                edges.append(VisualEdge(source.node_id, target.node_id, EdgeStatus.BEING_REMOVED))

        return tuple(edges)

    def _swap_display(self, first: ListNode, second: ListNode) -> None:
        order = self._display_order
        i = order.index(first.node_id)
        j = order.index(second.node_id)
        order[i], order[j] = order[j], order[i]
