"""
test_audit.py

Tests for the TraceAudit tool.

Tests cover:
- Generated traces validating cleanly
- Detection of tampered traces
- Oracle mismatch reporting
- Determinism verification
- Human-readable explanations
"""

import dataclasses

import pytest

from pairswap.audit import (
    AuditStatus,
    TraceAudit,
    expected_step_count,
)
from pairswap.errors import OracleMismatchError, TraceConsistencyError
from pairswap.steps import Operation, VariableBinding
from pairswap.trace import StepTrace
from pairswap.tracer import generate_steps


def _tamper(trace, index, **changes):
    """Return a copy of ``trace`` with one snapshot replaced."""
    steps = list(trace.steps)
    steps[index] = dataclasses.replace(steps[index], **changes)
    return StepTrace(trace.input_values, tuple(steps))


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def sample_trace():
    return generate_steps([1, 2, 3, 4])


@pytest.fixture
def sample_audit(sample_trace):
    return TraceAudit(sample_trace)


# =============================================================================
# Validation
# =============================================================================

class TestValidTraces:
    """Generated traces pass every check."""

    @pytest.mark.parametrize("values", [
        [], [1], [1, 2], [1, 2, 3], [1, 2, 3, 4], [7, -7, 7, -7, 0], list(range(13)),
    ])
    def test_generated_traces_are_valid(self, values):
        validation = TraceAudit.for_values(values).validate()
        assert validation.is_valid, validation.issues
        assert validation.status == AuditStatus.VALID
        assert validation.issues == ()

    def test_assert_valid_passes(self, sample_audit):
        sample_audit.assert_valid()

    def test_validation_to_dict(self, sample_audit):
        assert sample_audit.validate().to_dict() == {"issues": [], "status": "valid"}


class TestTamperedTraces:
    """Inconsistent traces are reported."""

    def test_line_out_of_range(self, sample_trace):
        audit = TraceAudit(_tamper(sample_trace, 2, line=99))
        validation = audit.validate()
        assert validation.status == AuditStatus.INCONSISTENT
        assert any("line 99" in issue for issue in validation.issues)

    def test_malformed_variable(self, sample_trace):
        bad = (VariableBinding("current", "Node(x)", 4),)
        validation = TraceAudit(_tamper(sample_trace, 2, variables=bad)).validate()
        assert not validation.is_valid
        assert any("malformed" in issue for issue in validation.issues)

    def test_variable_line_out_of_range(self, sample_trace):
        bad = (VariableBinding("current", "Node(1)", 0),)
        validation = TraceAudit(_tamper(sample_trace, 2, variables=bad)).validate()
        assert any("variable 'current' line 0" in issue for issue in validation.issues)

    def test_display_order_moved_outside_swap(self, sample_trace):
        nodes = sample_trace[3].nodes
        reordered = tuple(
            dataclasses.replace(node, order=len(nodes) - 1 - node.order) for node in nodes
        )
        validation = TraceAudit(_tamper(sample_trace, 3, nodes=reordered)).validate()
        assert any("Display order changed at step 3" in issue for issue in validation.issues)

    def test_missing_terminate(self, sample_trace):
        trace = _tamper(sample_trace, len(sample_trace) - 1, operation=Operation.CONDITION_CHECK)
        validation = TraceAudit(trace).validate()
        assert any("not terminate" in issue for issue in validation.issues)

    def test_truncated_trace(self, sample_trace):
        trace = StepTrace(sample_trace.input_values, sample_trace.steps[:5])
        validation = TraceAudit(trace).validate()
        assert validation.status == AuditStatus.INCONSISTENT
        assert any("Expected 18 steps" in issue for issue in validation.issues)

    def test_assert_valid_raises_consistency_error(self, sample_trace):
        audit = TraceAudit(_tamper(sample_trace, 2, line=0))
        with pytest.raises(TraceConsistencyError) as exc_info:
            audit.assert_valid()
        assert exc_info.value.issues
        assert "P201" in str(exc_info.value)

    def test_failed_audit_is_logged(self, sample_trace, caplog):
        with caplog.at_level("WARNING", logger="pairswap.audit"):
            TraceAudit(_tamper(sample_trace, 2, line=0)).validate()
        assert "failed audit" in caplog.text


class TestOracle:
    """Comparison with the reference algorithm."""

    def test_verify_result_matches(self, sample_audit):
        check = sample_audit.verify_result()
        assert check.is_match
        assert check.expected == (2, 1, 4, 3)
        assert check.actual == (2, 1, 4, 3)

    def test_oracle_mismatch_reported(self, sample_audit, monkeypatch):
        monkeypatch.setattr("pairswap.audit.expected_result", lambda values: [4, 3, 2, 1])
        validation = sample_audit.validate()
        assert validation.status == AuditStatus.ORACLE_MISMATCH
        assert len(validation.issues) == 1

    def test_assert_valid_raises_oracle_error(self, sample_audit, monkeypatch):
        monkeypatch.setattr("pairswap.audit.expected_result", lambda values: [4, 3, 2, 1])
        with pytest.raises(OracleMismatchError) as exc_info:
            sample_audit.assert_valid()
        assert exc_info.value.expected == [4, 3, 2, 1]
        assert exc_info.value.actual == [2, 1, 4, 3]
        assert "P202" in str(exc_info.value)


class TestExpectedStepCount:

    @pytest.mark.parametrize("size,expected", [
        (0, 1), (1, 1), (2, 11), (3, 11), (4, 18), (5, 18), (10, 39),
    ])
    def test_counts(self, size, expected):
        assert expected_step_count(size) == expected


# =============================================================================
# Determinism Verification
# =============================================================================

class TestDeterminism:
    """Regenerating a trace reproduces its hash."""

    def test_regeneration_is_deterministic(self, sample_audit):
        check = sample_audit.verify_determinism()
        assert check.is_deterministic
        assert check.trace_hash == check.regenerated_hash
        assert check.differences == ()

    def test_expected_hash_match(self, sample_audit, sample_trace):
        assert sample_audit.verify_determinism(sample_trace.trace_id).is_deterministic

    def test_expected_hash_mismatch(self, sample_audit):
        check = sample_audit.verify_determinism("0" * 64)
        assert not check.is_deterministic
        assert any("Hash mismatch" in d for d in check.differences)

    def test_custom_namespace_does_not_regenerate(self):
        """Regeneration uses default ids, so a custom namespace differs."""
        check = TraceAudit(generate_steps([1, 2], namespace="other")).verify_determinism()
        assert not check.is_deterministic
        assert check.to_dict()["expected_hash"] is None


# =============================================================================
# Explanation
# =============================================================================

class TestExplanation:
    """Human-readable output."""

    def test_explain_counts(self, sample_audit):
        explanation = sample_audit.explain()
        assert explanation.step_count == 18
        assert explanation.swap_count == 2
        assert explanation.input_values == (1, 2, 3, 4)
        assert explanation.result_values == (2, 1, 4, 3)
        assert len(explanation.steps) == 18

    def test_explain_text(self, sample_audit):
        text = sample_audit.to_text()
        assert "Input: [1, 2, 3, 4]" in text
        assert "Result: [2, 1, 4, 3]" in text
        assert "[swap-finalized]" in text

    def test_explain_empty(self):
        explanation = TraceAudit.for_values([]).explain()
        assert explanation.swap_count == 0
        assert explanation.step_count == 1
        assert "0 value(s)" in explanation.summary

    def test_markdown(self, sample_audit):
        markdown = sample_audit.to_markdown()
        assert markdown.startswith("# Swap Trace Report")
        assert "**VALID**" in markdown
        assert "```" in markdown

    def test_repr(self, sample_audit):
        assert repr(sample_audit).startswith("TraceAudit(trace=StepTrace(")
