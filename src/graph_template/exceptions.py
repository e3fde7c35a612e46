"""Exceptions raised by the query template and its connection wrapper."""

from typing import Any


class TemplateError(Exception):
    """Base exception for template errors."""

    pass


class GraphConnectionError(TemplateError):
    """Raised when no transaction can be obtained from the session."""

    pass


class QueryExecutionError(TemplateError):
    """Raised when the driver fails to run a Cypher query."""

    def __init__(self, query: str, original_error: Exception) -> None:
        self.query = query
        self.original_error = original_error
        super().__init__(f"Query failed: {original_error}")


class CardinalityError(TemplateError):
    """A single-result query produced the wrong number of records."""

    pass


class EmptyResultError(CardinalityError):
    """Raised when a single-result query returns no record."""

    def __init__(self, message: str = "empty") -> None:
        super().__init__(message)


class MultipleResultsError(CardinalityError):
    """Raised when a single-result query returns more than one record.

    The value mapped from the first record is kept on ``value`` so callers
    can still inspect it.
    """

    def __init__(self, value: Any = None, message: str = "multiple") -> None:
        self.value = value
        super().__init__(message)


class CommitError(TemplateError):
    """Raised when committing an owned transaction fails."""

    pass


class TransactionStateError(TemplateError):
    """Raised when a connection is asked for an impossible transaction step."""

    pass


__all__ = [
    "TemplateError",
    "GraphConnectionError",
    "QueryExecutionError",
    "CardinalityError",
    "EmptyResultError",
    "MultipleResultsError",
    "CommitError",
    "TransactionStateError",
]
