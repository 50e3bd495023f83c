"""
audit.py

Read-only audit of generated step traces.

Checks a StepTrace against its own structural invariants and against the
reference algorithm, verifies that regenerating it is deterministic, and
renders a human-readable account of what happened.

Design Invariants:
- Read-only (never mutates a trace)
- Deterministic analysis
- Oracle comparison uses the reference algorithm, never the tracer
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pairswap.errors import OracleMismatchError, TraceConsistencyError
from pairswap.formatting import format_values, is_formatted_value
from pairswap.reference import expected_result
from pairswap.steps import TOTAL_CODE_LINES, Operation
from pairswap.trace import StepTrace
from pairswap.tracer import generate_steps

logger = logging.getLogger(__name__)

STEPS_PER_PAIR = 7
FIXED_STEPS = 4  # two initialize, final loop test, terminate


def expected_step_count(size: int) -> int:
    """Number of snapshots a trace over ``size`` values must contain."""
    if size < 2:
        return 1
    return STEPS_PER_PAIR * (size // 2) + FIXED_STEPS


# =============================================================================
# Results
# =============================================================================

class AuditStatus(Enum):
    """Overall outcome of a trace validation."""
    VALID = "valid"
    INCONSISTENT = "inconsistent"
    ORACLE_MISMATCH = "oracle-mismatch"


@dataclass(frozen=True)
class OracleCheck:
    """Final traced list compared with the reference algorithm."""
    expected: Tuple[int, ...]
    actual: Tuple[int, ...]

    @property
    def is_match(self) -> bool:
        return self.expected == self.actual

    def to_dict(self) -> Dict[str, Any]:
        return {
            "actual": list(self.actual),
            "expected": list(self.expected),
            "is_match": self.is_match,
        }


@dataclass(frozen=True)
class TraceValidation:
    """Result of validating a trace."""
    status: AuditStatus
    issues: Tuple[str, ...]

    @property
    def is_valid(self) -> bool:
        """True if no issue was found."""
        return self.status == AuditStatus.VALID

    def to_dict(self) -> Dict[str, Any]:
        return {"issues": list(self.issues), "status": self.status.value}


@dataclass(frozen=True)
class DeterminismCheck:
    """Result of regenerating a trace and comparing hashes."""
    is_deterministic: bool
    trace_hash: str
    regenerated_hash: str
    expected_hash: Optional[str]
    differences: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "differences": list(self.differences),
            "expected_hash": self.expected_hash,
            "is_deterministic": self.is_deterministic,
            "regenerated_hash": self.regenerated_hash,
            "trace_hash": self.trace_hash,
        }


@dataclass(frozen=True)
class TraceExplanation:
    """Human-readable explanation of a trace."""
    summary: str
    input_values: Tuple[int, ...]
    result_values: Tuple[int, ...]
    step_count: int
    swap_count: int
    steps: Tuple[str, ...]

    def to_text(self) -> str:
        """Format as plain text."""
        lines = [self.summary, ""]
        lines.append(f"Input: {format_values(self.input_values)}")
        lines.append(f"Result: {format_values(self.result_values)}")
        lines.append(f"Steps: {self.step_count}")
        lines.append(f"Swaps: {self.swap_count}")
        lines.append("")
        lines.append("Step sequence:")
        for step in self.steps:
            lines.append(f"  {step}")
        return "\n".join(lines)


# =============================================================================
# TraceAudit
# =============================================================================

class TraceAudit:
    """
    Read-only audit tool for a StepTrace.

    Example:
        audit = TraceAudit.for_values([1, 2, 3])
        validation = audit.validate()
        if not validation.is_valid:
            print(validation.issues)
        print(audit.explain().to_text())
    """

    __slots__ = ('_trace',)

    def __init__(self, trace: StepTrace):
        self._trace = trace

    @classmethod
    def for_values(cls, values: Iterable[int]) -> "TraceAudit":
        """Generate a trace for ``values`` and audit it."""
        return cls(generate_steps(values))

    @property
    def trace(self) -> StepTrace:
        return self._trace

    # =========================================================================
    # Oracle
    # =========================================================================

    def verify_result(self) -> OracleCheck:
        """Compare the final snapshot with the reference algorithm."""
        return OracleCheck(
            expected=tuple(expected_result(self._trace.input_values)),
            actual=tuple(self._trace.final_values()),
        )

    # =========================================================================
    # Validation
    # =========================================================================

    def validate(self) -> TraceValidation:
        """
        Check every structural invariant of the trace.

        Checks for:
        - Step count and step indices
        - Line numbers of snapshots and variable bindings in range
        - Variable values following the formatting contract
        - First snapshot matching the input
        - Display order only changing at swap steps
        - Trace ending with a terminate snapshot
        - Final list matching the reference algorithm

        Returns:
            TraceValidation with status and issues
        """
        issues: List[str] = []
        issues.extend(self._check_shape())
        issues.extend(self._check_lines_and_variables())
        issues.extend(self._check_first_snapshot())
        issues.extend(self._check_display_order())

        oracle = self.verify_result()
        if issues:
            status = AuditStatus.INCONSISTENT
        elif not oracle.is_match:
            status = AuditStatus.ORACLE_MISMATCH
        else:
            status = AuditStatus.VALID
        if not oracle.is_match:
            issues.append(
                f"Final list {list(oracle.actual)} differs from reference {list(oracle.expected)}"
            )

        if issues:
            logger.warning(
                "Trace %s failed audit with %d issue(s): %s",
                self._trace.trace_id[:16], len(issues), issues[0],
            )
        return TraceValidation(status=status, issues=tuple(issues))

    def assert_valid(self) -> None:
        """
        Raise if the trace fails validation.

        Raises:
            OracleMismatchError: If only the final list is wrong
            TraceConsistencyError: If any structural check fails
        """
        validation = self.validate()
        if validation.status == AuditStatus.ORACLE_MISMATCH:
            oracle = self.verify_result()
            raise OracleMismatchError(list(oracle.expected), list(oracle.actual))
        if validation.status == AuditStatus.INCONSISTENT:
            raise TraceConsistencyError(validation.issues)

    def _check_shape(self) -> List[str]:
        issues = []
        steps = self._trace.steps
        expected = expected_step_count(len(self._trace.input_values))
        if len(steps) != expected:
            issues.append(f"Expected {expected} steps, found {len(steps)}")
        for i, step in enumerate(steps):
            if step.step_index != i:
                issues.append(f"Step {i} has step_index {step.step_index}")
        if steps[-1].operation != Operation.TERMINATE:
            issues.append(f"Last step is {steps[-1].operation.value}, not terminate")
        return issues

    def _check_lines_and_variables(self) -> List[str]:
        issues = []
        for step in self._trace:
            if not 1 <= step.line <= TOTAL_CODE_LINES:
                issues.append(f"Step {step.step_index} line {step.line} out of range")
            for binding in step.variables:
                if not 1 <= binding.line <= TOTAL_CODE_LINES:
                    issues.append(
                        f"Step {step.step_index} variable '{binding.name}' "
                        f"line {binding.line} out of range"
                    )
                if not is_formatted_value(binding.value):
                    issues.append(
                        f"Step {step.step_index} variable '{binding.name}' "
                        f"has malformed value {binding.value!r}"
                    )
        return issues

    def _check_first_snapshot(self) -> List[str]:
        issues = []
        values = list(self._trace.input_values)
        first = self._trace.first()
        if len(first.nodes) != len(values):
            issues.append(f"First step shows {len(first.nodes)} nodes for {len(values)} values")
        elif [node.value for node in first.nodes] != values:
            issues.append("First step node values do not match the input")
        if len(first.edges) != max(0, len(values) - 1):
            issues.append(f"First step has {len(first.edges)} edges for {len(values)} values")
        return issues

    def _check_display_order(self) -> List[str]:
        issues = []
        steps = self._trace.steps
        baseline = sorted(steps[0].display_order)

        for prev_step, step in zip(steps, steps[1:]):
            if sorted(step.display_order) != baseline:
                issues.append(f"Step {step.step_index} does not show the same set of nodes")
                continue
            changed = step.display_order != prev_step.display_order
            if changed and step.operation != Operation.SWAP_FINALIZED:
                issues.append(
                    f"Display order changed at step {step.step_index} "
                    f"({step.operation.value})"
                )

        last = steps[-1]
        shown = [node.value for node in sorted(last.nodes, key=lambda n: n.order)]
        if shown != last.values:
            issues.append("Final display order does not match the returned list")
        return issues

    # =========================================================================
    # Determinism Verification
    # =========================================================================

    def verify_determinism(self, expected_hash: Optional[str] = None) -> DeterminismCheck:
        """
        Regenerate the trace from its input and compare hashes.

        Args:
            expected_hash: Optional previously recorded trace_id

        Returns:
            DeterminismCheck with results
        """
        current = self._trace.trace_id
        regenerated = generate_steps(self._trace.input_values).trace_id
        differences = []

        if regenerated != current:
            differences.append(
                f"Regenerated hash differs: {regenerated[:16]}... vs {current[:16]}..."
            )
        if expected_hash is not None and expected_hash != current:
            differences.append(
                f"Hash mismatch: expected {expected_hash[:16]}..., got {current[:16]}..."
            )

        return DeterminismCheck(
            is_deterministic=not differences,
            trace_hash=current,
            regenerated_hash=regenerated,
            expected_hash=expected_hash,
            differences=tuple(differences),
        )

    # =========================================================================
    # Human-Readable Output
    # =========================================================================

    def explain(self) -> TraceExplanation:
        """Summarize the trace step by step."""
        trace = self._trace
        swaps = sum(1 for step in trace if step.operation == Operation.SWAP_FINALIZED)
        steps = tuple(
            f"{step.step_index:>3}. line {step.line:>2} [{step.operation.value}] {step.description}"
            for step in trace
        )
        return TraceExplanation(
            summary=f"Swap trace over {len(trace.input_values)} value(s) in {len(trace)} step(s)",
            input_values=trace.input_values,
            result_values=tuple(trace.final_values()),
            step_count=len(trace),
            swap_count=swaps,
            steps=steps,
        )

    def to_text(self) -> str:
        return self.explain().to_text()

    def to_markdown(self) -> str:
        """Generate a Markdown report of the trace."""
        explanation = self.explain()
        validation = self.validate()

        lines = ["# Swap Trace Report", ""]
        lines.append(f"**Summary:** {explanation.summary}")
        lines.append("")
        lines.append("## Statistics")
        lines.append(f"- Input: `{format_values(explanation.input_values)}`")
        lines.append(f"- Result: `{format_values(explanation.result_values)}`")
        lines.append(f"- Swaps: {explanation.swap_count}")
        lines.append(f"- Trace hash: `{self._trace.trace_id[:16]}...`")
        lines.append("")
        lines.append("## Validation")
        lines.append(f"- Status: **{validation.status.value.upper()}**")
        for issue in validation.issues:
            lines.append(f"- {issue}")
        lines.append("")
        lines.append("## Steps")
        lines.append("```")
        lines.extend(explanation.steps)
        lines.append("```")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"TraceAudit(trace={self._trace!r})"
