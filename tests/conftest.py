"""
Shared pytest configuration and fixtures for all tests.

Key fixtures:
- fake_session_factory: builds FakeSession objects that mimic
  ``cassandra.cluster.Session.execute_async`` without a cluster.
"""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path so 'core', 'cql', 'client', 'utils' import without installation
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


def pytest_configure(config):
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: Unit tests - isolated function-level tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interactions")
    config.addinivalue_line("markers", "smoke: Smoke tests - basic functionality checks")
    config.addinivalue_line("markers", "edge_case: Edge case tests - boundary conditions")


class FakeResponseFuture:
    """Mock driver ResponseFuture that resolves as soon as callbacks are added."""

    def __init__(self, rows=None, error=None):
        self.rows = rows
        self.error = error

    def add_callbacks(self, callback, errback):
        if self.error is not None:
            errback(self.error)
        else:
            callback(self.rows)

    def clear_callbacks(self):
        pass


class FakeSession:
    """Mock driver Session recording every statement it is asked to run."""

    def __init__(self, rows=None, error=None, submit_error=None):
        self.rows = rows if rows is not None else []
        self.error = error
        self.submit_error = submit_error
        self.executed = []

    def execute_async(self, query, parameters=None):
        if self.submit_error is not None:
            raise self.submit_error
        self.executed.append((query, parameters))
        return FakeResponseFuture(self.rows, self.error)

    @property
    def statements(self):
        return [query for query, _ in self.executed]


@pytest.fixture
def fake_session_factory():
    """
    Factory for FakeSession objects.

    Usage:
        session = fake_session_factory(rows=[(3,)])
        session = fake_session_factory(error=RuntimeError("timeout"))
    """
    def factory(**kwargs):
        return FakeSession(**kwargs)

    return factory


@pytest.fixture
def fake_session(fake_session_factory):
    """FakeSession returning no rows."""
    return fake_session_factory()
