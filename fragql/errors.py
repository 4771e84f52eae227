"""Custom exception hierarchy for fragql.

All public errors inherit from FragQLError so callers can catch the base
class for any fragql-specific failure.  Errors raised by a backend driver
are never wrapped; they reach the caller unchanged.
"""
from __future__ import annotations

from typing import Any


class FragQLError(Exception):
    """Base exception for all fragql errors."""


class StructuralError(FragQLError):
    """Raised when the composition primitives are used incorrectly.

    Correct use of the tag, ``build()`` and ``batch()`` can never produce
    this error, so it is not meant to be caught and recovered from.

    Args:
        message: Human-readable description.
        code: Machine-readable error code (e.g. SEGMENT_MISMATCH).
        details: Extra context describing the offending input.
    """

    def __init__(
        self,
        message: str,
        code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details: dict[str, Any] = details or {}

    def to_error_response(self) -> dict[str, Any]:
        """Returns a structured error response."""
        return {
            "error": self.code,
            "message": str(self),
            "details": self.details,
        }


class SegmentMismatchError(StructuralError):
    """Raised when a fragment does not have exactly one more segment than values."""

    def __init__(self, segment_count: int, value_count: int) -> None:
        super().__init__(
            f"A fragment needs {value_count + 1} literal segments for "
            f"{value_count} values, got {segment_count}.",
            code="SEGMENT_MISMATCH",
            details={"segments": segment_count, "values": value_count},
        )


class UncompiledBatchMemberError(StructuralError):
    """Raised when ``batch()`` receives something other than a compiled statement.

    The usual cause is a fragment that was never built.
    """

    def __init__(self, position: int, type_name: str) -> None:
        super().__init__(
            f"Batch member {position} is a {type_name}, not a compiled statement; "
            "call .build() on fragments first.",
            code="UNCOMPILED_BATCH_MEMBER",
            details={"position": position, "type": type_name},
        )


class UnboundStatementError(StructuralError):
    """Raised when executing a statement that has no executor attached."""

    def __init__(self, query: str) -> None:
        super().__init__(
            "Statement is not bound to an executor; create fragments through a sql tag.",
            code="UNBOUND_STATEMENT",
            details={"query": query},
        )


class BatchResultMismatchError(StructuralError):
    """Raised when a backend answers a batch with the wrong number of results."""

    def __init__(self, expected: int, received: int) -> None:
        super().__init__(
            f"Backend returned {received} batch results for {expected} statements.",
            code="BATCH_RESULT_MISMATCH",
            details={"expected": expected, "received": received},
        )


class TemplateFormatError(FragQLError, ValueError):
    """Raised when a ``str.format``-style template cannot be turned into a fragment.

    Args:
        message: Human-readable description.
        template: The template text that failed.
    """

    def __init__(self, message: str, template: str | None = None) -> None:
        super().__init__(message)
        self.template = template


class UnsupportedValueError(FragQLError, TypeError):
    """Raised when an interleaved value is not a primitive, fragment or join list.

    Args:
        value: The offending value.
    """

    def __init__(self, value: Any) -> None:
        super().__init__(
            f"Cannot bind a value of type {type(value).__name__!r}; expected "
            "str, int, float, bool, bytes, None, a fragment or a join list."
        )
        self.value = value


class PlaceholderStyleError(FragQLError):
    """Raised when no placeholder style is registered under the requested name."""
