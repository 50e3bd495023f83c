"""
trace.py

StepTrace — the immutable, ordered sequence of Snapshots produced for
one input.

Design Invariants:
- Immutable after creation
- Never empty (every input yields at least a terminate snapshot)
- Snapshot step_index equals its position
- Deterministic serialization (sorted keys, content-based hash)
"""

import hashlib
import json
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from pairswap.errors import TraceImmutabilityError, TraceValidationError
from pairswap.steps import Snapshot


class StepTrace:
    """
    Immutable, ordered record of the snapshots taken while replaying the
    swap on one input sequence.

    Example:
        trace = generate_steps([1, 2, 3, 4])
        for snapshot in trace:
            print(snapshot.step_index, snapshot.description)
        trace.final_values()  # [2, 1, 4, 3]
    """

    __slots__ = ('_input_values', '_steps', '_trace_id', '_frozen')

    def __init__(self, input_values: Iterable[int], steps: Tuple[Snapshot, ...]):
        """
        Create a StepTrace from generated snapshots.

        Args:
            input_values: The sequence the trace was generated from
            steps: Snapshots in order

        Raises:
            TraceValidationError: If steps is not a non-empty tuple of
                Snapshots numbered by position
        """
        object.__setattr__(self, '_frozen', False)

        if not isinstance(steps, tuple):
            raise TraceValidationError(f"steps must be tuple, got {type(steps).__name__}")
        if not steps:
            raise TraceValidationError("a trace holds at least one snapshot")

        for i, step in enumerate(steps):
            if not isinstance(step, Snapshot):
                raise TraceValidationError(
                    f"expected Snapshot, got {type(step).__name__}", index=i,
                )
            if step.step_index != i:
                raise TraceValidationError(
                    f"step_index {step.step_index} does not match position", index=i,
                )

        self._input_values = tuple(input_values)
        self._steps = steps
        self._trace_id = self._compute_trace_id()

        object.__setattr__(self, '_frozen', True)

    def __setattr__(self, name: str, value: Any) -> None:
        """Prevent mutation after construction."""
        if getattr(self, '_frozen', False):
            raise TraceImmutabilityError(f"set attribute '{name}'")
        object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        """Prevent deletion of attributes."""
        raise TraceImmutabilityError(f"delete attribute '{name}'")

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def trace_id(self) -> str:
        """Deterministic content-based hash of this trace."""
        return self._trace_id

    @property
    def input_values(self) -> Tuple[int, ...]:
        """The input sequence the trace was generated from."""
        return self._input_values

    @property
    def steps(self) -> Tuple[Snapshot, ...]:
        """Ordered tuple of snapshots."""
        return self._steps

    # =========================================================================
    # Length and Iteration
    # =========================================================================

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[Snapshot]:
        return iter(self._steps)

    def __getitem__(self, index: int) -> Snapshot:
        return self._steps[index]

    def first(self) -> Snapshot:
        """Return the first snapshot."""
        return self._steps[0]

    def last(self) -> Snapshot:
        """Return the final (terminate) snapshot."""
        return self._steps[-1]

    def final_values(self) -> List[int]:
        """Values of the list the traced algorithm returned."""
        return self.last().values

    # =========================================================================
    # Serialization
    # =========================================================================

    def _compute_trace_id(self) -> str:
        content = {
            "input": list(self._input_values),
            "steps": [step.to_dict() for step in self._steps],
        }
        json_str = json.dumps(content, sort_keys=True, ensure_ascii=False)
        return hashlib.sha256(json_str.encode('utf-8')).hexdigest()

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary representation.

        Keys are sorted for deterministic output.
        """
        return {
            "input": list(self._input_values),
            "result": self.final_values(),
            "step_count": len(self._steps),
            "steps": [step.to_dict() for step in self._steps],
            "trace_id": self._trace_id,
        }

    def to_json(self, *, indent: Optional[int] = None) -> str:
        """Serialize to a JSON string with sorted keys."""
        return json.dumps(
            self.to_dict(),
            sort_keys=True,
            ensure_ascii=False,
            indent=indent,
        )

    # =========================================================================
    # Equality and Hashing
    # =========================================================================

    def __eq__(self, other: object) -> bool:
        """Two traces are equal if their trace_ids are identical."""
        if not isinstance(other, StepTrace):
            return NotImplemented
        return self._trace_id == other._trace_id

    def __hash__(self) -> int:
        return hash(self._trace_id)

    # =========================================================================
    # String Representations
    # =========================================================================

    def __repr__(self) -> str:
        return f"StepTrace(id={self._trace_id[:16]}..., len={len(self)})"

    def __str__(self) -> str:
        lines = [f"StepTrace ({len(self)} steps):"]
        for step in self._steps:
            lines.append(f"  {step.step_index}. [{step.operation.value}] {step.description}")
        return "\n".join(lines)
