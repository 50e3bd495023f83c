"""
reference.py

Direct implementation of swap-adjacent-pairs, used as the ground truth
that generated traces are checked against.
"""

from typing import Iterable, List, Optional

from pairswap.linked_list import ListNode, build, flatten


def swap_pairs(head: Optional[ListNode]) -> Optional[ListNode]:
    """Swap every two adjacent nodes in place and return the new head."""
    if head is None or head.next is None:
        return head

    fake_head = ListNode(0, head)
    current = head
    prev = fake_head

    while current is not None and current.next is not None:
        next_node = current.next
        prev.next = next_node
        temp = next_node.next
        next_node.next = current
        current.next = temp
        prev = current
        current = temp

    return fake_head.next


def expected_result(values: Iterable[int]) -> List[int]:
    """Values of the list built from ``values`` after swapping pairs."""
    return flatten(swap_pairs(build(values)))
