"""Query helpers that map Neo4j records to typed values."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Generic, Iterator, Mapping, Optional, TypeVar

from loguru import logger
from neo4j import Record, Result, ResultSummary
from neo4j.exceptions import DriverError, Neo4jError

from .conn import Conn
from .exceptions import EmptyResultError, MultipleResultsError, QueryExecutionError

T = TypeVar("T")

Mapper = Callable[[Record], T]


@dataclass(frozen=True)
class Request:
    """A Cypher query and the parameters bound to it."""

    query: str
    params: Optional[Mapping[str, Any]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.query or not self.query.strip():
            raise ValueError("Request query must not be empty")
        object.__setattr__(self, "params", MappingProxyType(dict(self.params or {})))


def default_label(entity: type) -> str:
    """Return the bare name of ``entity`` with its first letter upper-cased."""
    name = entity.__name__
    return name[:1].upper() + name[1:]


class Template(Generic[T]):
    """
    Runs Cypher against a ``Conn`` and maps each record through a callback.

    If the connection has no open transaction, one is started for the call and
    committed afterwards, or rolled back if anything fails. A transaction the
    caller opened is used as is and never finalised here.

    All Neo4j operations are logged at debug level.
    """

    def __init__(
        self,
        conn: Conn,
        label: Optional[str] = None,
        entity: Optional[type] = None,
    ) -> None:
        self._conn = conn
        if label is None and entity is not None:
            label = default_label(entity)
        self.label = label

    @property
    def conn(self) -> Conn:
        return self._conn

    def _run(self, tx, request: Request) -> Result:
        logger.debug(f"Executing query: {request.query[:100]}")
        try:
            return tx.run(request.query, dict(request.params))
        except (Neo4jError, DriverError) as exc:
            logger.debug(f"Query failed: {exc}")
            raise QueryExecutionError(request.query, exc) from exc

    def _next(self, records: Iterator[Record], request: Request) -> Optional[Record]:
        # Records are pulled lazily, so server errors can surface here too.
        try:
            return next(records, None)
        except (Neo4jError, DriverError) as exc:
            logger.debug(f"Query failed while fetching records: {exc}")
            raise QueryExecutionError(request.query, exc) from exc

    def query(
        self, request: Request, mapper: Mapper[T]
    ) -> tuple[list[T], Optional[ResultSummary]]:
        """
        Execute ``request`` and map every record via ``mapper``.

        Returns:
            The mapped values in the order the records were produced, and the
            query summary or ``None`` if it could not be obtained.

        Raises:
            GraphConnectionError: If no transaction could be obtained.
            QueryExecutionError: If the driver failed to run the query or to fetch
                its records.
            CommitError: If committing the owned transaction failed.
        """
        tx, created = self._conn.get_transaction()
        try:
            result = self._run(tx, request)
            records = iter(result)
            values = []
            record = self._next(records, request)
            while record is not None:
                values.append(mapper(record))
                record = self._next(records, request)
            try:
                summary = result.consume()
            except (Neo4jError, DriverError) as exc:
                logger.debug(f"Could not consume result summary: {exc}")
                summary = None
            if created:
                self._conn.commit()
        finally:
            if created:
                self._conn.release()

        logger.debug(f"Query mapped {len(values)} records")
        return values, summary

    def query_single(self, request: Request, mapper: Mapper[T]) -> T:
        """
        Like ``query``, but maps exactly one record.

        Raises:
            EmptyResultError: If the query returned no record.
            MultipleResultsError: If the query returned more than one record.
                The value mapped from the first record is on its ``value``.
        """
        tx, created = self._conn.get_transaction()
        try:
            records = iter(self._run(tx, request))
            record = self._next(records, request)
            if record is None:
                raise EmptyResultError()

            value = mapper(record)
            if self._next(records, request) is not None:
                raise MultipleResultsError(value)

            if created:
                self._conn.commit()
        finally:
            if created:
                self._conn.release()
        return value
