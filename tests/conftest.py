"""Pytest configuration and shared Neo4j doubles for the test suite."""

import os
from unittest.mock import Mock

import pytest
from neo4j import Session, Transaction

from graph_template import Conn


class FakeResult:
    """Forward-only stand-in for ``neo4j.Result``."""

    def __init__(self, records, summary=None, consume_error=None, fetch_error=None):
        self._records = list(records)
        self._fetch_error = fetch_error
        self._summary = summary if summary is not None else Mock(name="summary")
        self._consume_error = consume_error

    def __iter__(self):
        while self._records:
            yield self._records.pop(0)
        if self._fetch_error is not None:
            raise self._fetch_error

    def consume(self):
        if self._consume_error is not None:
            raise self._consume_error
        return self._summary


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep NEO4J_* and GRAPH_TEMPLATE_* variables of the host out of settings."""
    for name in list(os.environ):
        if name.upper().startswith(("NEO4J_", "GRAPH_TEMPLATE_")):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_tx():
    """Build a mocked transaction whose ``run`` returns the given records."""

    def _make(records=(), **result_kwargs):
        tx = Mock(spec=Transaction)
        tx.closed.return_value = False
        tx.run.return_value = FakeResult(records, **result_kwargs)
        return tx

    return _make


@pytest.fixture
def tx(make_tx):
    return make_tx([{"name": "Ada"}, {"name": "Grace"}])


@pytest.fixture
def session(tx):
    session = Mock(spec=Session)
    session.begin_transaction.return_value = tx
    return session


@pytest.fixture
def conn(session):
    return Conn(session)


@pytest.fixture
def name_mapper():
    return lambda record: record["name"]
