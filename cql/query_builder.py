"""
=========================
CQL statement builder.
=========================

``QueryBuilder`` accumulates the parts of one statement through chained
calls and renders them with ``build()``. It is an immutable value: every
call returns a new builder, so a partially built chain can be reused or
shared between tasks without copying.

Rendering order:
    1. Verb (SELECT / INSERT INTO / INSERT IF NOT EXISTS / UPDATE / DELETE)
    2. Head: projection and ``FROM`` for SELECT, ``FROM`` for DELETE,
       target table (plus ``JSON '...'`` payload) for INSERT and UPDATE
    3. ``SET`` assignments (UPDATE only)
    4. ``WHERE`` conditions joined with AND
    5. ``ORDER BY``
    6. Raw trailing clauses
    7. ``USING`` options joined with AND
    8. Terminating ``;``

Nothing is validated unless ``build(strict=True)`` is requested; an odd
chain (ORDER BY on a DELETE, USING on a SELECT) renders odd text.

Terminal coroutines ``execute``, ``insert`` and ``insert_bulk`` send the
rendered text through the borrowed session, one request each.

Example:
    >>> builder = QueryBuilder(Operation.SELECT, 'ks', 'users')
    >>> builder.select(['name', 'age']).eq('id', '7').build()
    "SELECT name, age FROM ks.users WHERE id = '7';"
    >>>
    >>> QueryBuilder(Operation.SELECT, 'ks', 'users').update({'age': '30'}).eq('id', '1').build()
    "UPDATE ks.users SET age = '30' WHERE id = '1';"
    >>>
    >>> rows = await client.query('ks', 'users').gt('age', 20).clause('ALLOW FILTERING').execute()
"""

import json
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from cql import conditions as fragments
from cql.types import (
    Clause,
    InsertOption,
    JsonPayload,
    Operation,
    OrderDirection,
    RawClause,
)
from utils.session_utils import execute_statement

logger = logging.getLogger(__name__)


class QueryBuildError(Exception):
    """Exception raised for statements that cannot be built or sent.

    Raised by strict-mode validation and when a terminal call is made on a
    builder without a session.
    """
    pass


def serialize_payload(payload: Any) -> str:
    """
    Serialize documents for an ``INSERT ... JSON`` clause.

    Output is compact JSON. Values the json module cannot encode (UUID,
    datetime, Decimal) are written with ``str()``. Single quotes are
    doubled so the text stays a single CQL string literal.

    Args:
        payload: A document or list of documents

    Returns:
        Text to place between the quotes of ``JSON '...'``
    """
    text = json.dumps(payload, separators=(",", ":"), default=str)
    return text.replace("'", "''")


@dataclass(frozen=True)
class QueryBuilder:
    """
    Immutable builder for a single CQL statement against ``keyspace.table``.

    Attributes:
        operation: Statement kind; ``delete()``, ``update()`` and the insert
            coroutines replace it (last call wins)
        keyspace: Target keyspace
        table: Target table
        session: Borrowed driver session; never closed here. Only needed
            for the terminal coroutines.
        projection: Columns selected by a SELECT
        assignments: Rendered ``column = 'value'`` fragments for UPDATE
        conditions: Rendered WHERE predicates, AND-joined in call order
        clauses: Raw trailing clauses and at most one JSON payload
        order: Single ``(column, direction)`` pair or None
        insert_options: ``USING`` options in call order
    """

    operation: Operation
    keyspace: str
    table: str
    session: Any = field(default=None, repr=False, compare=False)
    projection: Tuple[str, ...] = ()
    assignments: Tuple[str, ...] = ()
    conditions: Tuple[str, ...] = ()
    clauses: Tuple[Clause, ...] = ()
    order: Optional[Tuple[str, OrderDirection]] = None
    insert_options: Tuple[InsertOption, ...] = ()

    @property
    def full_table_name(self) -> str:
        return f"{self.keyspace}.{self.table}"

    # ------------------------------------------------------------------
    # Statement shape
    # ------------------------------------------------------------------

    def select(self, columns: Iterable[str]) -> 'QueryBuilder':
        """Set the projection, replacing any previous one. Empty means ``*``."""
        return replace(self, projection=tuple(columns))

    def delete(self) -> 'QueryBuilder':
        """Turn the statement into a DELETE."""
        return replace(self, operation=Operation.DELETE)

    def update(self, values: Mapping[str, Any]) -> 'QueryBuilder':
        """
        Turn the statement into an UPDATE setting ``values``.

        Assignments are rendered in the mapping's iteration order and
        replace any earlier ``update()`` call.

        Args:
            values: Column name to new value

        Returns:
            New builder
        """
        return replace(
            self,
            operation=Operation.UPDATE,
            assignments=tuple(
                fragments.assignment(column, value) for column, value in values.items()
            ),
        )

    # ------------------------------------------------------------------
    # WHERE predicates
    # ------------------------------------------------------------------

    def where_condition(self, condition: str) -> 'QueryBuilder':
        """Append a raw predicate as given."""
        return replace(self, conditions=self.conditions + (condition,))

    def eq(self, column: str, value: Any) -> 'QueryBuilder':
        return self.where_condition(fragments.eq(column, value))

    def neq(self, column: str, value: Any) -> 'QueryBuilder':
        return self.where_condition(fragments.neq(column, value))

    def gt(self, column: str, value: Any) -> 'QueryBuilder':
        return self.where_condition(fragments.gt(column, value))

    def gte(self, column: str, value: Any) -> 'QueryBuilder':
        return self.where_condition(fragments.gte(column, value))

    def lt(self, column: str, value: Any) -> 'QueryBuilder':
        return self.where_condition(fragments.lt(column, value))

    def lte(self, column: str, value: Any) -> 'QueryBuilder':
        return self.where_condition(fragments.lte(column, value))

    def in_list(self, column: str, values: Iterable[Any]) -> 'QueryBuilder':
        return self.where_condition(fragments.in_list(column, values))

    def not_in_list(self, column: str, values: Iterable[Any]) -> 'QueryBuilder':
        return self.where_condition(fragments.not_in_list(column, values))

    def between(self, column: str, lower: Any, upper: Any) -> 'QueryBuilder':
        return self.where_condition(fragments.between(column, lower, upper))

    def not_between(self, column: str, lower: Any, upper: Any) -> 'QueryBuilder':
        return self.where_condition(fragments.not_between(column, lower, upper))

    def like(self, column: str, pattern: str) -> 'QueryBuilder':
        return self.where_condition(fragments.like(column, pattern))

    def is_null(self, column: str) -> 'QueryBuilder':
        return self.where_condition(fragments.is_null(column))

    def is_not_null(self, column: str) -> 'QueryBuilder':
        return self.where_condition(fragments.is_not_null(column))

    # ------------------------------------------------------------------
    # Trailing parts
    # ------------------------------------------------------------------

    def clause(self, clause: str) -> 'QueryBuilder':
        """Append a raw trailing clause such as ``ALLOW FILTERING`` or ``LIMIT 10``."""
        return replace(self, clauses=self.clauses + (RawClause(clause),))

    def order_by(self, column: str, direction: OrderDirection = OrderDirection.ASC) -> 'QueryBuilder':
        """
        Set the single ORDER BY column, replacing any previous one.

        ``direction`` may also be given as text in any case (``"desc"``).

        Raises:
            ValueError: If ``direction`` is neither ASC nor DESC
        """
        if not isinstance(direction, OrderDirection):
            direction = OrderDirection(str(direction).strip().upper())
        return replace(self, order=(column, direction))

    def insert_option(self, option: InsertOption) -> 'QueryBuilder':
        """Append a ``USING`` option (``UsingTTL`` or ``UsingTimestamp``)."""
        return replace(self, insert_options=self.insert_options + (option,))

    def with_json_payload(self, payload: Any) -> 'QueryBuilder':
        """
        Retag as INSERT and attach ``payload`` as the JSON document(s).

        Any earlier payload is replaced; raw clauses are kept in order.
        """
        raw_clauses = tuple(c for c in self.clauses if not isinstance(c, JsonPayload))
        return replace(
            self,
            operation=Operation.INSERT,
            clauses=(JsonPayload(serialize_payload(payload)),) + raw_clauses,
        )

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _json_payload(self) -> Optional[JsonPayload]:
        for clause in self.clauses:
            if isinstance(clause, JsonPayload):
                return clause
        return None

    def _raw_clauses(self) -> List[RawClause]:
        return [clause for clause in self.clauses if isinstance(clause, RawClause)]

    def _column_text(self) -> str:
        columns = self.assignments if self.operation is Operation.UPDATE else self.projection
        if columns:
            return ", ".join(columns)
        return "" if self.operation is Operation.DELETE else "*"

    def validate(self) -> None:
        """
        Check the accumulated parts against the operation.

        Raises:
            QueryBuildError: Listing every problem found
        """
        problems = []
        operation = self.operation

        if self.order is not None and operation is not Operation.SELECT:
            problems.append(f"ORDER BY is only valid for SELECT, not {operation.name}")
        if self.insert_options and operation is Operation.SELECT:
            problems.append("USING options are not valid for SELECT")
        if self.projection and operation is not Operation.SELECT:
            problems.append(f"column projection is ignored for {operation.name}")
        if operation is Operation.UPDATE and not self.assignments:
            problems.append("UPDATE requires at least one assignment")
        if operation in (Operation.UPDATE, Operation.DELETE) and not self.conditions:
            problems.append(f"{operation.name} requires a WHERE condition")
        if operation.is_insert and self._json_payload() is None:
            problems.append("INSERT requires a JSON payload")

        if problems:
            message = "; ".join(problems)
            logger.error(f"❌ Invalid {operation.name} on {self.full_table_name}: {message}")
            raise QueryBuildError(message)

    def build(self, strict: bool = False) -> str:
        """
        Render the statement text.

        Pure: calling it repeatedly on the same builder gives the same text.

        Args:
            strict: Run ``validate()`` first

        Returns:
            CQL statement ending with ``;``

        Raises:
            QueryBuildError: In strict mode, if the parts do not fit the operation
        """
        if strict:
            self.validate()

        operation = self.operation
        columns = self._column_text()

        if operation is Operation.SELECT:
            query = f"{operation.verb} {columns} FROM {self.full_table_name}"
        elif operation is Operation.DELETE:
            query = f"{operation.verb} FROM {self.full_table_name}"
        else:
            query = f"{operation.verb} {self.full_table_name}"
            payload = self._json_payload()
            if operation.is_insert and payload is not None:
                query += f" {payload.render()}"

        if operation is Operation.UPDATE and self.assignments:
            query += f" SET {columns}"

        if self.conditions:
            query += " WHERE " + " AND ".join(self.conditions)

        if self.order is not None:
            column, direction = self.order
            query += f" ORDER BY {column} {direction.value}"

        raw_clauses = self._raw_clauses()
        if raw_clauses:
            query += " " + " ".join(clause.render() for clause in raw_clauses)

        if self.insert_options:
            query += " USING " + " AND ".join(option.render() for option in self.insert_options)

        return query + ";"

    def __str__(self) -> str:
        return self.build()

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def _require_session(self) -> Any:
        if self.session is None:
            raise QueryBuildError(
                f"No session bound to builder for {self.full_table_name}; "
                f"create it through ScyllaClient.query() to execute"
            )
        return self.session

    async def execute(self, statement: Optional[str] = None) -> Any:
        """
        Send a rendered statement through the session, without bound parameters.

        Args:
            statement: Text to send; defaults to ``self.build()``

        Returns:
            Rows from the session, undecoded

        Raises:
            QueryBuildError: If the builder has no session
            StatementExecutionError: If the session call fails
        """
        session = self._require_session()
        if statement is None:
            statement = self.build()
        return await execute_statement(session, statement)

    async def insert(self, payload: Any) -> Any:
        """
        Insert one JSON document (or any JSON-serializable value) as a single statement.

        Args:
            payload: Document whose keys are column names

        Returns:
            Rows from the session (normally empty)

        Raises:
            QueryBuildError: If the builder has no session
            StatementExecutionError: If the session call fails
        """
        builder = self.with_json_payload(payload)
        statement = builder.build()
        logger.debug(f"Inserting JSON into {self.full_table_name}")
        return await builder.execute(statement)

    async def insert_bulk(self, records: Sequence[Mapping[str, Any]]) -> Any:
        """
        Insert all ``records`` with one ``INSERT ... JSON '[...]'`` statement.

        One round trip; on failure the whole batch is reported as failed
        with no per-record detail. Records are not checked locally.

        Args:
            records: Documents whose keys are column names

        Returns:
            Rows from the session (normally empty)

        Raises:
            QueryBuildError: If the builder has no session
            StatementExecutionError: If the session call fails
        """
        records = list(records)
        logger.info(f"Bulk inserting {len(records)} record(s) into {self.full_table_name}")
        builder = self.with_json_payload(records)
        return await builder.execute(builder.build())
