"""
errors.py

Error taxonomy for pairswap.

Every operation over a finite integer sequence succeeds, so these errors
only surface on misuse: non-integer input, text outside the value
formatting contract, tampering with an immutable trace, or an audit that
finds a trace inconsistent with the reference algorithm.

Error codes:
- P0xx: input and formatting
- P1xx: StepTrace construction and immutability
- P2xx: trace audits
"""

from typing import List, Optional, Sequence, Tuple


class PairSwapError(Exception):
    """
    Base class for all pairswap errors.

    Carries a stable error code so callers can match on it without
    parsing the message.
    """

    def __init__(
        self,
        message: str,
        *,
        error_code: str = "P000",
    ):
        self.message = message
        self.error_code = error_code
        super().__init__(self.format())

    def format(self) -> str:
        """Format as human-readable error message."""
        return f"[{self.error_code}] {self.message}"


# =============================================================================
# Input and Formatting Errors (P0xx)
# =============================================================================

class InvalidValueError(PairSwapError):
    """Raised when a list is built from something other than integers."""

    def __init__(self, actual_type: str, index: Optional[int] = None):
        location = f" at index {index}" if index is not None else ""
        super().__init__(
            f"List values must be int{location}, got {actual_type}",
            error_code="P001",
        )
        self.actual_type = actual_type
        self.index = index


class FormatError(PairSwapError):
    """Raised when text does not follow the node formatting convention."""

    def __init__(self, text: str):
        super().__init__(
            f"Not a formatted node value: {text!r}",
            error_code="P002",
        )
        self.text = text


# =============================================================================
# StepTrace Errors (P1xx)
# =============================================================================

class TraceValidationError(PairSwapError):
    """Raised when a StepTrace cannot be constructed."""

    def __init__(self, message: str, index: Optional[int] = None):
        location = f" at index {index}" if index is not None else ""
        super().__init__(
            f"Trace validation failed{location}: {message}",
            error_code="P100",
        )
        self.index = index


class TraceImmutabilityError(PairSwapError):
    """Raised when attempting to mutate an immutable StepTrace."""

    def __init__(self, operation: str):
        super().__init__(
            f"Cannot {operation}: StepTrace is immutable after creation",
            error_code="P101",
        )
        self.operation = operation


# =============================================================================
# Audit Errors (P2xx)
# =============================================================================

class TraceAuditError(PairSwapError):
    """Base exception for trace audit failures."""

    def __init__(self, message: str, *, error_code: str = "P200"):
        super().__init__(f"Trace audit failed: {message}", error_code=error_code)


class TraceConsistencyError(TraceAuditError):
    """A trace violates one of its structural invariants."""

    def __init__(self, issues: Sequence[str]):
        self.issues: Tuple[str, ...] = tuple(issues)
        summary = self.issues[0] if self.issues else "unknown issue"
        more = f" (+{len(self.issues) - 1} more)" if len(self.issues) > 1 else ""
        super().__init__(f"{summary}{more}", error_code="P201")


class OracleMismatchError(TraceAuditError):
    """The final snapshot disagrees with the reference algorithm."""

    def __init__(self, expected: List[int], actual: List[int]):
        self.expected = list(expected)
        self.actual = list(actual)
        super().__init__(
            f"final list {self.actual} does not match reference result {self.expected}",
            error_code="P202",
        )
