"""
=========================================
ScyllaDB client facade.
=========================================

``ScyllaClient`` owns the driver cluster and session and hands out
builders bound to that session. The cluster is created lazily on first use
and shut down by ``close()`` (or on leaving a ``with`` block).

Connecting blocks. The client's own coroutines connect through
``connect_async()``, which runs the blocking work in the loop's default
executor. ``query()`` and ``table()`` are plain calls and connect inline, so
in async code ``await client.connect_async()`` before using them. Builders and
``Table`` helpers only borrow the session, so they must not be used after
the client is closed.

Example:
    >>> client = ScyllaClient(contact_points=['127.0.0.1'])
    >>> await client.create_keyspace('test_keyspace')
    >>> await client.create_table(
    ...     'test_keyspace', 'test_table',
    ...     partition_keys=['age'],
    ...     clustering_keys=[],
    ...     columns=[('age', 'int'), ('name', 'text'), ('score', 'double')],
    ... )
    >>> await client.query('test_keyspace', 'test_table').insert_bulk([
    ...     {'age': 33, 'name': 'Johnny Doe the first', 'score': 100.0},
    ...     {'age': 22, 'name': 'Johnny Doe the second', 'score': 88.5},
    ... ])
    >>> client.close()
"""

import asyncio
import logging
import threading
from typing import Any, List, Optional, Sequence, Tuple

from cassandra.cluster import Cluster, Session

from client.table import Table
from cql import ddl
from cql.query_builder import QueryBuilder
from cql.types import Operation, OrderDirection
from utils.cluster_utils import ClusterConnectionError, connect_session, create_cluster
from utils.session_utils import execute_statement

logger = logging.getLogger(__name__)


class ScyllaClient:
    """Entry point for building and running statements against one cluster.

    Attributes:
        contact_points: Hosts to contact (None uses config)
        port: Native protocol port (None uses config)
        username: Auth username (None uses config)
        password: Auth password (None uses config)
        keyspace: Keyspace the session starts in (None uses config)
    """

    def __init__(
        self,
        contact_points: Optional[List[str]] = None,
        port: Optional[int] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        keyspace: Optional[str] = None
    ):
        self.contact_points = contact_points
        self.port = port
        self.username = username
        self.password = password
        self.keyspace = keyspace

        self._cluster: Optional[Cluster] = None
        self._session: Optional[Session] = None
        self._lock = threading.Lock()

    def connect(self) -> Session:
        """
        Create the cluster and session if needed and return the session.

        Blocks until a host accepts the connection. A failed attempt leaves
        no cluster behind, so the next call starts fresh.

        Raises:
            ClusterConnectionError: If no host accepts the connection
        """
        with self._lock:
            if self._session is not None:
                return self._session

            if self._cluster is None:
                self._cluster = create_cluster(
                    contact_points=self.contact_points,
                    port=self.port,
                    username=self.username,
                    password=self.password
                )
            try:
                self._session = connect_session(self._cluster, keyspace=self.keyspace)
            except ClusterConnectionError:
                self._cluster.shutdown()
                self._cluster = None
                raise
            return self._session

    async def connect_async(self) -> Session:
        """Like ``connect()``, without blocking the running event loop."""
        if self._session is not None:
            return self._session
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.connect)

    @property
    def session(self) -> Session:
        return self.connect()

    def close(self) -> None:
        """Shut down the cluster. Safe to call more than once."""
        if self._cluster is not None:
            self._cluster.shutdown()
            logger.info("Cluster connection closed")
        self._cluster = None
        self._session = None

    def __enter__(self) -> 'ScyllaClient':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    # ------------------------------------------------------------------
    # Builders
    # ------------------------------------------------------------------

    def query(self, keyspace: str, table: str) -> QueryBuilder:
        """Start a statement on ``keyspace.table``; it begins as a SELECT."""
        return QueryBuilder(Operation.SELECT, keyspace, table, session=self.session)

    def table(self, keyspace: str, table: str) -> Table:
        return Table(keyspace, table, self.session)

    async def execute(self, statement: str, parameters: Optional[Sequence[Any]] = None) -> Any:
        """
        Execute arbitrary CQL, optionally with bound parameters.

        Args:
            statement: CQL text (``%s`` placeholders when ``parameters`` is given)
            parameters: Bound values

        Returns:
            Rows from the session, undecoded

        Raises:
            StatementExecutionError: If the statement fails
        """
        session = await self.connect_async()
        return await execute_statement(session, statement, parameters)

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------

    async def create_keyspace(
        self,
        keyspace: str,
        replication_class: str = 'NetworkTopologyStrategy',
        replication_factor: int = 1
    ) -> None:
        """Create ``keyspace`` if it does not exist."""
        await self.execute(ddl.create_keyspace(keyspace, replication_class, replication_factor))
        logger.info(f"✅ Keyspace {keyspace} ready")

    async def drop_keyspace(self, keyspace: str) -> None:
        await self.execute(ddl.drop_keyspace(keyspace))
        logger.info(f"Dropped keyspace {keyspace}")

    async def create_table(
        self,
        keyspace: str,
        table: str,
        partition_keys: Sequence[str],
        clustering_keys: Sequence[str],
        columns: Sequence[Tuple[str, str]],
        clustering_order: Optional[Sequence[Tuple[str, OrderDirection]]] = None,
        default_ttl: Optional[int] = None
    ) -> None:
        """
        Create a table if it does not exist.

        Args:
            keyspace: Keyspace name
            table: Table name
            partition_keys: Partition key columns
            clustering_keys: Clustering columns (may be empty)
            columns: ``(name, cql_type)`` pairs
            clustering_order: Optional ``(clustering column, direction)`` pairs
            default_ttl: Optional default TTL in seconds

        Raises:
            DDLError: If the table definition is malformed
            StatementExecutionError: If the statement fails
        """
        statement = ddl.create_table(
            keyspace,
            table,
            partition_keys,
            clustering_keys,
            columns,
            clustering_order=clustering_order,
            default_ttl=default_ttl
        )
        await self.execute(statement)
        logger.info(f"✅ Table {keyspace}.{table} ready")

    async def drop_table(self, keyspace: str, table: str) -> None:
        await self.execute(ddl.drop_table(keyspace, table))
        logger.info(f"Dropped table {keyspace}.{table}")
