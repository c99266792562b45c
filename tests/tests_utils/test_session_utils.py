"""
=================================================
Pytest suite for utils/session_utils.py
=================================================

Test Coverage:
--------------
- execute_statement: result hand-off, parameters, server errors, submit errors
- _settle: late callbacks after the awaiting future is done
- Timed-out requests: callbacks detached, late results after loop close

How to Execute:
---------------
All tests:          pytest tests/tests_utils/test_session_utils.py -v
"""

import asyncio
import threading

import pytest

from utils.session_utils import StatementExecutionError, _settle, execute_statement

# ====================
# Mock Helper Classes
# ====================


class ThreadedResponseFuture:
    """Resolves its callbacks from another thread, like the driver's I/O loop."""

    def __init__(self, rows):
        self.rows = rows

    def add_callbacks(self, callback, errback):
        threading.Thread(target=callback, args=(self.rows,)).start()

    def clear_callbacks(self):
        pass


class ThreadedSession:
    def execute_async(self, query, parameters=None):
        return ThreadedResponseFuture([("from-thread",)])


class HeldResponseFuture:
    """Keeps its callbacks until the test fires them, like a slow server."""

    def __init__(self):
        self.callbacks = []
        self.cleared = False

    def add_callbacks(self, callback, errback):
        self.callbacks.append((callback, errback))

    def clear_callbacks(self):
        self.cleared = True


class HeldSession:
    def __init__(self):
        self.futures = []

    def execute_async(self, query, parameters=None):
        future = HeldResponseFuture()
        self.futures.append(future)
        return future


# ===============
# UNIT TESTS
# ===============


@pytest.mark.unit
def test_execute_statement_returns_rows(fake_session_factory):
    session = fake_session_factory(rows=[(1,), (2,)])

    rows = asyncio.run(execute_statement(session, "SELECT id FROM ks.t;"))

    assert rows == [(1,), (2,)]
    assert session.executed == [("SELECT id FROM ks.t;", None)]


@pytest.mark.unit
def test_execute_statement_passes_parameters(fake_session_factory):
    session = fake_session_factory()

    asyncio.run(execute_statement(session, "SELECT * FROM ks.t WHERE id = %s", ("7",)))

    assert session.executed == [("SELECT * FROM ks.t WHERE id = %s", ("7",))]


@pytest.mark.unit
def test_execute_statement_wraps_server_error(fake_session_factory):
    cause = RuntimeError("Unavailable")
    session = fake_session_factory(error=cause)

    with pytest.raises(StatementExecutionError, match="Unavailable") as exc_info:
        asyncio.run(execute_statement(session, "SELECT * FROM ks.t;"))

    assert exc_info.value.__cause__ is cause
    assert exc_info.value.statement == "SELECT * FROM ks.t;"


@pytest.mark.unit
def test_execute_statement_wraps_submit_error(fake_session_factory):
    cause = RuntimeError("Session is closed")
    session = fake_session_factory(submit_error=cause)

    with pytest.raises(StatementExecutionError, match="Failed to submit") as exc_info:
        asyncio.run(execute_statement(session, "SELECT 1;"))

    assert exc_info.value.__cause__ is cause


@pytest.mark.integration
def test_execute_statement_callback_from_other_thread():
    rows = asyncio.run(execute_statement(ThreadedSession(), "SELECT * FROM ks.t;"))

    assert rows == [("from-thread",)]


@pytest.mark.edge_case
def test_settle_ignores_late_results():
    """A result arriving after cancellation is dropped instead of raising InvalidStateError."""
    async def scenario():
        future = asyncio.get_running_loop().create_future()
        future.cancel()
        _settle(future, [("late",)], None, "SELECT 1;")
        _settle(future, None, RuntimeError("late"), "SELECT 1;")
        return future.cancelled()

    assert asyncio.run(scenario()) is True


@pytest.mark.edge_case
def test_timed_out_request_detaches_callbacks():
    session = HeldSession()

    with pytest.raises(asyncio.TimeoutError):
        asyncio.run(asyncio.wait_for(execute_statement(session, "SELECT * FROM ks.t;"), 0.01))

    assert session.futures[0].cleared is True


@pytest.mark.edge_case
def test_late_callbacks_after_loop_closed_are_dropped():
    """Results arriving after asyncio.run() has returned do not touch the closed loop."""
    session = HeldSession()

    with pytest.raises(asyncio.TimeoutError):
        asyncio.run(asyncio.wait_for(execute_statement(session, "SELECT * FROM ks.t;"), 0.01))

    callback, errback = session.futures[0].callbacks[0]
    callback([("row",)])
    errback(RuntimeError("Read timeout"))
