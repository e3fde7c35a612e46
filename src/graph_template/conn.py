"""Transaction bookkeeping on top of a Neo4j session."""

from contextlib import contextmanager
from typing import Iterator, Optional

from loguru import logger
from neo4j import Driver, Session, Transaction
from neo4j.exceptions import DriverError, Neo4jError

from .exceptions import CommitError, GraphConnectionError, TransactionStateError


class Conn:
    """
    Wraps a caller-owned ``Session`` and tracks its current transaction.

    A transaction opened through ``begin`` or ``transaction`` is ambient:
    templates running on this connection reuse it and leave finalisation to
    whoever opened it. When no transaction is open, ``get_transaction`` begins
    one and tells the caller it owns it.
    """

    def __init__(self, session: Session) -> None:
        self._session = session
        self._tx: Optional[Transaction] = None

    @classmethod
    @contextmanager
    def open(cls, driver: Driver, database: Optional[str] = None) -> Iterator["Conn"]:
        """Open a session on ``driver`` and close it when the block exits."""
        with driver.session(database=database) as session:
            conn = cls(session)
            try:
                yield conn
            finally:
                conn.release()

    @property
    def session(self) -> Session:
        return self._session

    @property
    def in_transaction(self) -> bool:
        return self._tx is not None and not self._tx.closed()

    def _begin(self) -> Transaction:
        try:
            self._tx = self._session.begin_transaction()
        except (Neo4jError, DriverError) as exc:
            logger.error(f"Could not begin Neo4j transaction: {exc}")
            raise GraphConnectionError(f"Could not begin transaction: {exc}") from exc
        return self._tx

    def get_transaction(self) -> tuple[Transaction, bool]:
        """
        Return the transaction to run queries in.

        Returns:
            A ``(transaction, created)`` pair. ``created`` is ``True`` when the
            transaction was begun by this call and must be finalised by the
            caller through ``commit`` and ``rollback``.

        Raises:
            GraphConnectionError: If the session cannot begin a transaction.
        """
        if self.in_transaction:
            return self._tx, False
        return self._begin(), True

    def begin(self) -> Transaction:
        """Start an ambient transaction shared by subsequent queries."""
        if self.in_transaction:
            raise TransactionStateError("A transaction is already open on this connection")
        return self._begin()

    def commit(self) -> None:
        if not self.in_transaction:
            raise TransactionStateError("No open transaction to commit")
        tx, self._tx = self._tx, None
        try:
            tx.commit()
        except (Neo4jError, DriverError) as exc:
            raise CommitError(f"Commit failed: {exc}") from exc

    def rollback(self) -> None:
        """Roll back the open transaction; a no-op when there is none."""
        if not self.in_transaction:
            self._tx = None
            return
        tx, self._tx = self._tx, None
        tx.rollback()

    def release(self) -> None:
        """Roll back any open transaction, logging instead of raising on failure."""
        try:
            self.rollback()
        except (Neo4jError, DriverError) as exc:
            logger.warning(f"Ignoring rollback failure during cleanup: {exc}")

    @contextmanager
    def transaction(self) -> Iterator[Transaction]:
        """Run a block in an ambient transaction, committing on success.

        A block that already committed or rolled back the transaction itself
        is left as it is.
        """
        tx = self.begin()
        try:
            yield tx
        except BaseException:
            self.release()
            raise
        if self._tx is tx and self.in_transaction:
            self.commit()
