"""
======================================
CQL statement construction package.
======================================

Builds CQL text for ScyllaDB / Cassandra. Everything here is pure text
generation except the terminal coroutines on ``QueryBuilder``, which send
the rendered statement through a borrowed driver session.

Modules:
    types: Operation, OrderDirection, USING options and clause variants
    conditions: WHERE / SET fragment helpers
    query_builder: Immutable fluent ``QueryBuilder``
    ddl: Keyspace, table, index and column DDL
    common_queries: Row count and duplicate detection queries

Example:
    >>> from cql import Operation, QueryBuilder
    >>>
    >>> QueryBuilder(Operation.SELECT, 'ks', 'users') \\
    ...     .select(['name']) \\
    ...     .gt('age', 20) \\
    ...     .clause('ALLOW FILTERING') \\
    ...     .build()
    "SELECT name FROM ks.users WHERE age > '20' ALLOW FILTERING;"
"""

__version__ = "0.1.0"
__all__ = [
    # Types
    'Operation', 'OrderDirection', 'UsingTimestamp', 'UsingTTL',
    'RawClause', 'JsonPayload',
    # Builder
    'QueryBuilder', 'QueryBuildError', 'serialize_payload',
    # DDL
    'DDLError',
]

from .ddl import DDLError
from .query_builder import QueryBuildError, QueryBuilder, serialize_payload
from .types import (
    JsonPayload,
    Operation,
    OrderDirection,
    RawClause,
    UsingTimestamp,
    UsingTTL,
)
