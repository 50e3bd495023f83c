"""
formatting.py

Display convention for node references.

``None`` renders as ``null`` and a node renders as ``Node(<value>)``.
Presentation layers pattern-match on these strings, so the convention
is part of the public contract.
"""

import re
from typing import Iterable, Optional

from pairswap.errors import FormatError
from pairswap.linked_list import ListNode

NULL_LITERAL = "null"
NODE_PREFIX = "Node"

FORMATTED_VALUE_PATTERN = re.compile(
    rf"^(?:{NULL_LITERAL}|{NODE_PREFIX}\((-?\d+)\))$"
)


def format_node(node: Optional[ListNode]) -> str:
    """Format a node reference, or its absence, for display."""
    if node is None:
        return NULL_LITERAL
    return f"{NODE_PREFIX}({node.val})"


def format_values(values: Iterable[int]) -> str:
    """Format a sequence of values as ``[1, 2, 3]``."""
    return "[" + ", ".join(str(v) for v in values) + "]"


def is_formatted_value(text: str) -> bool:
    """True if ``text`` follows the node formatting convention."""
    return FORMATTED_VALUE_PATTERN.match(text) is not None


def parse_formatted_value(text: str) -> Optional[int]:
    """
    Recover the integer embedded in a formatted value.

    Returns:
        The node value, or None for the absence literal

    Raises:
        FormatError: If ``text`` is not a formatted value
    """
    match = FORMATTED_VALUE_PATTERN.match(text)
    if match is None:
        raise FormatError(text)
    if match.group(1) is None:
        return None
    return int(match.group(1))
