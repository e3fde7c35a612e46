"""Typed Cypher query helpers over the Neo4j Python driver."""

from .conn import Conn
from .exceptions import (
    CardinalityError,
    CommitError,
    EmptyResultError,
    GraphConnectionError,
    MultipleResultsError,
    QueryExecutionError,
    TemplateError,
    TransactionStateError,
)
from .template import Mapper, Request, Template, default_label

__version__ = "0.1.0"

__all__ = [
    "CardinalityError",
    "CommitError",
    "Conn",
    "EmptyResultError",
    "GraphConnectionError",
    "Mapper",
    "MultipleResultsError",
    "QueryExecutionError",
    "Request",
    "Template",
    "TemplateError",
    "TransactionStateError",
    "default_label",
]
