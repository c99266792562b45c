"""
===============================================
Per-table maintenance helpers.
===============================================

``Table`` bundles the one-shot statements that target a single table:
secondary indexes, column changes, truncation, row counting and duplicate
detection. Each call renders its text with ``cql.ddl`` or
``cql.common_queries`` and sends it through the borrowed session.

Example:
    >>> table = client.table('test_keyspace', 'test_table')
    >>> await table.create_index('by_name', 'name')
    >>> await table.create_column('email', 'text')
    >>> total = await table.count_rows()
    >>> has_dupes = await table.check_duplicates('email')
"""

import logging
from typing import Any

from cql import ddl
from cql.common_queries import check_duplicates_sql, count_rows_sql
from cql.query_builder import QueryBuilder
from cql.types import Operation
from utils.session_utils import execute_statement

logger = logging.getLogger(__name__)


class RowCountError(Exception):
    """Exception raised when a count query returns an unexpected shape.

    Distinct from ``StatementExecutionError``: the statement ran, but its
    result had no row or no count column to read.
    """
    pass


class Table:
    """Maintenance operations for ``keyspace.table``.

    Attributes:
        keyspace: Keyspace name
        table: Table name
        session: Borrowed driver session; never closed here
    """

    def __init__(self, keyspace: str, table: str, session: Any):
        self.keyspace = keyspace
        self.table = table
        self.session = session

    @property
    def full_table_name(self) -> str:
        return f"{self.keyspace}.{self.table}"

    def query(self) -> QueryBuilder:
        """Start a SELECT on this table."""
        return QueryBuilder(Operation.SELECT, self.keyspace, self.table, session=self.session)

    async def _run(self, statement: str) -> Any:
        return await execute_statement(self.session, statement)

    async def create_index(self, index_name: str, column: str) -> None:
        """Create a secondary index on ``column`` if it does not exist."""
        await self._run(ddl.create_index(index_name, self.keyspace, self.table, column))
        logger.info(f"✅ Index {index_name} on {self.full_table_name}({column}) ready")

    async def drop_index(self, index_name: str) -> None:
        await self._run(ddl.drop_index(self.keyspace, index_name))
        logger.info(f"Dropped index {self.keyspace}.{index_name}")

    async def create_column(self, column: str, cql_type: str) -> None:
        """Add ``column`` of type ``cql_type``."""
        await self._run(ddl.add_column(self.keyspace, self.table, column, cql_type))
        logger.info(f"✅ Added column {column} {cql_type} to {self.full_table_name}")

    async def delete_column(self, column: str) -> None:
        await self._run(ddl.drop_column(self.keyspace, self.table, column))
        logger.info(f"Dropped column {column} from {self.full_table_name}")

    async def truncate(self) -> None:
        """Remove every row; the schema is kept."""
        await self._run(ddl.truncate_table(self.keyspace, self.table))
        logger.info(f"Truncated {self.full_table_name}")

    async def count_rows(self) -> int:
        """
        Count the rows in the table.

        Returns:
            Row count

        Raises:
            StatementExecutionError: If the query fails
            RowCountError: If the result has no row or no count value
        """
        rows = await self._run(count_rows_sql(self.keyspace, self.table))
        rows = list(rows or [])
        if not rows:
            raise RowCountError(f"Count query on {self.full_table_name} returned no rows")

        try:
            count = rows[0][0]
        except (IndexError, KeyError, TypeError) as e:
            raise RowCountError(
                f"Count query on {self.full_table_name} returned an unexpected row: {rows[0]!r}"
            ) from e

        if count is None:
            raise RowCountError(f"Count query on {self.full_table_name} returned a null count")
        return int(count)

    async def check_duplicates(self, column: str) -> bool:
        """
        Check whether any value of ``column`` occurs in more than one row.

        Returns:
            True if at least one duplicated value was found

        Raises:
            StatementExecutionError: If the query fails
        """
        rows = await self._run(check_duplicates_sql(self.keyspace, self.table, column))
        duplicates = len(list(rows or []))
        if duplicates:
            logger.warning(f"⚠️  {duplicates} duplicated value(s) in {self.full_table_name}.{column}")
        return duplicates > 0
