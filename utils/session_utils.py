"""
==========================================
Async statement execution over a session.
==========================================

Bridges the driver's callback-based ``Session.execute_async`` into an
awaitable so builders and helpers can be used from asyncio code.

The driver resolves its ``ResponseFuture`` on its own I/O thread; the
callbacks registered here hand the outcome back to the awaiting event loop
with ``loop.call_soon_threadsafe``. Any failure, at submission or from the
server, is raised as ``StatementExecutionError`` with the driver exception
chained as ``__cause__``. Nothing is retried.

Cancelling the awaiting task (or timing it out) detaches the callbacks from
the driver future. The request itself is not aborted, and a write may still
be applied.

Example:
    >>> rows = await execute_statement(session, "SELECT * FROM ks.users;")
    >>> rows = await execute_statement(
    ...     session, "SELECT * FROM ks.users WHERE id = %s", ('7',)
    ... )
"""

import asyncio
import logging
from typing import Any, Optional, Sequence

logger = logging.getLogger(__name__)


class StatementExecutionError(Exception):
    """Exception raised when a statement cannot be executed.

    Wraps connection, timeout and server-side failures from the session.
    The original driver exception is available as ``__cause__``.
    """

    def __init__(self, message: str, statement: Optional[str] = None):
        super().__init__(message)
        self.statement = statement


def _settle(future: asyncio.Future, rows: Any, error: Optional[BaseException], statement: str) -> None:
    """Resolve ``future`` on the event loop thread; late results are dropped."""
    if future.done():
        return

    if error is None:
        future.set_result(rows)
        return

    failure = StatementExecutionError(f"Statement failed: {error}", statement=statement)
    failure.__cause__ = error
    future.set_exception(failure)


def _detach(future: asyncio.Future, response_future: Any, statement: str) -> None:
    """Drop the driver callbacks once the awaiting side has given up."""
    if future.cancelled():
        logger.debug(f"Abandoned statement: {statement}")
        response_future.clear_callbacks()


async def execute_statement(
    session: Any,
    statement: str,
    parameters: Optional[Sequence[Any]] = None
) -> Any:
    """
    Execute one statement and await its result.

    Args:
        session: Object exposing ``execute_async(statement, parameters)``
            (``cassandra.cluster.Session``)
        statement: CQL text
        parameters: Optional bound parameters

    Returns:
        The rows handed to the response future's success callback (first
        page for paged reads). Left undecoded.

    Raises:
        StatementExecutionError: If submission fails or the server reports an error
    """
    loop = asyncio.get_running_loop()
    result: asyncio.Future = loop.create_future()

    def on_success(rows):
        if not loop.is_closed():
            loop.call_soon_threadsafe(_settle, result, rows, None, statement)

    def on_error(error):
        if not loop.is_closed():
            loop.call_soon_threadsafe(_settle, result, None, error, statement)

    logger.debug(f"Executing CQL: {statement}")
    try:
        response_future = session.execute_async(statement, parameters)
    except Exception as e:
        logger.error(f"❌ Failed to submit statement: {e}")
        raise StatementExecutionError(
            f"Failed to submit statement: {e}", statement=statement
        ) from e

    response_future.add_callbacks(on_success, on_error)
    result.add_done_callback(lambda done: _detach(done, response_future, statement))

    try:
        return await result
    except StatementExecutionError as e:
        logger.error(f"❌ {e}")
        raise
