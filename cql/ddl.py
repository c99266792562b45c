"""
====================================================
Data Definition Language (DDL) text for CQL schemas.
====================================================

Pure functions returning keyspace, table, index and column DDL. They only
build text; ``ScyllaClient`` and ``Table`` send it.

Functions:
    create_keyspace: CREATE KEYSPACE with a replication map
    drop_keyspace: DROP KEYSPACE
    create_table: CREATE TABLE with partition/clustering keys, ordering and TTL
    drop_table: DROP TABLE
    truncate_table: TRUNCATE TABLE
    create_index: CREATE INDEX on one column
    drop_index: DROP INDEX
    add_column: ALTER TABLE ... ADD
    drop_column: ALTER TABLE ... DROP

Example:
    >>> create_table(
    ...     keyspace='test_keyspace',
    ...     table='test_table',
    ...     partition_keys=['age'],
    ...     clustering_keys=[],
    ...     columns=[('age', 'int'), ('name', 'text'), ('score', 'double')],
    ... )
    'CREATE TABLE IF NOT EXISTS test_keyspace.test_table (age int, name text, score double, PRIMARY KEY ((age)));'
"""

import logging
from typing import Optional, Sequence, Tuple

from cql.types import OrderDirection

logger = logging.getLogger(__name__)


class DDLError(Exception):
    """Exception raised for DDL requests that cannot form a valid statement."""
    pass


def create_keyspace(
    keyspace: str,
    replication_class: str = 'NetworkTopologyStrategy',
    replication_factor: int = 1,
    if_not_exists: bool = True
) -> str:
    """Generate CREATE KEYSPACE statement.

    Args:
        keyspace: Keyspace name
        replication_class: Replication strategy class name
        replication_factor: Replicas per data center
        if_not_exists: Add IF NOT EXISTS

    Returns:
        CQL CREATE KEYSPACE statement

    Example:
        >>> create_keyspace('ks')
        "CREATE KEYSPACE IF NOT EXISTS ks WITH REPLICATION = {'class' : 'NetworkTopologyStrategy', 'replication_factor' : 1};"
    """
    sql_parts = ["CREATE KEYSPACE"]
    if if_not_exists:
        sql_parts.append("IF NOT EXISTS")
    sql_parts.append(keyspace)
    sql_parts.append(
        f"WITH REPLICATION = {{'class' : '{replication_class}', "
        f"'replication_factor' : {replication_factor}}}"
    )
    return " ".join(sql_parts) + ";"


def drop_keyspace(keyspace: str, if_exists: bool = True) -> str:
    """Generate DROP KEYSPACE statement."""
    if_exists_clause = " IF EXISTS" if if_exists else ""
    return f"DROP KEYSPACE{if_exists_clause} {keyspace};"


def create_table(
    keyspace: str,
    table: str,
    partition_keys: Sequence[str],
    clustering_keys: Sequence[str],
    columns: Sequence[Tuple[str, str]],
    clustering_order: Optional[Sequence[Tuple[str, OrderDirection]]] = None,
    default_ttl: Optional[int] = None,
    if_not_exists: bool = True
) -> str:
    """Generate CREATE TABLE statement.

    The primary key is always written with the partition keys in their own
    parentheses, so single and composite partition keys render the same way.

    Args:
        keyspace: Keyspace name
        table: Table name
        partition_keys: Partition key columns, in order
        clustering_keys: Clustering columns, in order (may be empty)
        columns: ``(name, cql_type)`` pairs for every column
        clustering_order: Optional ``(clustering column, direction)`` pairs
        default_ttl: Optional ``default_time_to_live`` in seconds
        if_not_exists: Add IF NOT EXISTS

    Returns:
        CQL CREATE TABLE statement

    Raises:
        DDLError: If columns or partition keys are missing, a key is not a
            declared column, or an ordering column is not a clustering key

    Example:
        >>> create_table(
        ...     'ks', 'events', ['user_id'], ['ts'],
        ...     [('user_id', 'uuid'), ('ts', 'timestamp'), ('kind', 'text')],
        ...     clustering_order=[('ts', OrderDirection.DESC)],
        ...     default_ttl=86400,
        ... )
        'CREATE TABLE IF NOT EXISTS ks.events (user_id uuid, ts timestamp, kind text, PRIMARY KEY ((user_id), ts)) WITH CLUSTERING ORDER BY (ts DESC) AND default_time_to_live = 86400;'
    """
    if not columns:
        raise DDLError(f"Table {keyspace}.{table} needs at least one column")
    if not partition_keys:
        raise DDLError(f"Table {keyspace}.{table} needs at least one partition key")

    column_names = [name for name, _ in columns]
    missing = [key for key in list(partition_keys) + list(clustering_keys) if key not in column_names]
    if missing:
        raise DDLError(f"Key column(s) not declared in {keyspace}.{table}: {', '.join(missing)}")

    sql_parts = ["CREATE TABLE"]
    if if_not_exists:
        sql_parts.append("IF NOT EXISTS")
    sql_parts.append(f"{keyspace}.{table}")

    column_defs = [f"{name} {cql_type}" for name, cql_type in columns]

    primary_key = f"({', '.join(partition_keys)})"
    if clustering_keys:
        primary_key += f", {', '.join(clustering_keys)}"
    column_defs.append(f"PRIMARY KEY ({primary_key})")

    sql = " ".join(sql_parts) + f" ({', '.join(column_defs)})"

    options = []
    if clustering_order:
        order_parts = []
        for column, direction in clustering_order:
            if column not in clustering_keys:
                raise DDLError(f"Clustering order column '{column}' is not a clustering key")
            order_parts.append(f"{column} {OrderDirection(direction).value}")
        options.append(f"CLUSTERING ORDER BY ({', '.join(order_parts)})")
    if default_ttl is not None:
        options.append(f"default_time_to_live = {default_ttl}")

    if options:
        sql += " WITH " + " AND ".join(options)

    return sql + ";"


def drop_table(keyspace: str, table: str, if_exists: bool = True) -> str:
    """Generate DROP TABLE statement."""
    if_exists_clause = " IF EXISTS" if if_exists else ""
    return f"DROP TABLE{if_exists_clause} {keyspace}.{table};"


def truncate_table(keyspace: str, table: str) -> str:
    return f"TRUNCATE TABLE {keyspace}.{table};"


def create_index(
    index_name: str,
    keyspace: str,
    table: str,
    column: str,
    if_not_exists: bool = True
) -> str:
    """Generate CREATE INDEX statement for a secondary index on one column.

    Example:
        >>> create_index('users_by_email', 'ks', 'users', 'email')
        'CREATE INDEX IF NOT EXISTS users_by_email ON ks.users (email);'
    """
    if_not_exists_clause = " IF NOT EXISTS" if if_not_exists else ""
    return f"CREATE INDEX{if_not_exists_clause} {index_name} ON {keyspace}.{table} ({column});"


def drop_index(keyspace: str, index_name: str, if_exists: bool = True) -> str:
    """Generate DROP INDEX statement. Indexes are keyspace-scoped."""
    if_exists_clause = " IF EXISTS" if if_exists else ""
    return f"DROP INDEX{if_exists_clause} {keyspace}.{index_name};"


def add_column(keyspace: str, table: str, column: str, cql_type: str) -> str:
    return f"ALTER TABLE {keyspace}.{table} ADD {column} {cql_type};"


def drop_column(keyspace: str, table: str, column: str) -> str:
    return f"ALTER TABLE {keyspace}.{table} DROP {column};"
