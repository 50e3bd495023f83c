"""
test_errors.py

Tests for the pairswap error taxonomy.
"""

import pytest

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


class TestErrorCodes:
    """Every error carries a stable code in its message."""

    @pytest.mark.parametrize("error,code", [
        (PairSwapError("boom"), "P000"),
        (InvalidValueError("str", 0), "P001"),
        (FormatError("x"), "P002"),
        (TraceValidationError("bad"), "P100"),
        (TraceImmutabilityError("set attribute 'x'"), "P101"),
        (TraceAuditError("bad"), "P200"),
        (TraceConsistencyError(["one"]), "P201"),
        (OracleMismatchError([1], [2]), "P202"),
    ])
    def test_code(self, error, code):
        assert error.error_code == code
        assert str(error).startswith(f"[{code}]")
        assert isinstance(error, PairSwapError)

    def test_format_matches_str(self):
        error = FormatError("abc")
        assert error.format() == str(error)


class TestHierarchy:
    """Audit errors share a base class."""

    def test_audit_errors(self):
        assert issubclass(TraceConsistencyError, TraceAuditError)
        assert issubclass(OracleMismatchError, TraceAuditError)


class TestMessages:
    """Messages carry the details callers need."""

    def test_invalid_value_location(self):
        assert "at index 4" in str(InvalidValueError("float", 4))
        assert "at index" not in str(InvalidValueError("float"))

    def test_consistency_summary(self):
        error = TraceConsistencyError(["first", "second", "third"])
        assert error.issues == ("first", "second", "third")
        assert "first (+2 more)" in str(error)

    def test_consistency_single_issue(self):
        assert "more" not in str(TraceConsistencyError(["only"]))

    def test_oracle_mismatch_lists(self):
        error = OracleMismatchError([2, 1], [1, 2])
        assert "[1, 2]" in str(error)
        assert "[2, 1]" in str(error)

    def test_immutability_operation(self):
        error = TraceImmutabilityError("delete attribute '_steps'")
        assert error.operation == "delete attribute '_steps'"
        assert "immutable" in str(error)
