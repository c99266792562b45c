"""
================================
ScyllaDB client package.
================================

Modules:
    scylla_client: ``ScyllaClient`` facade owning the cluster and session
    table: ``Table`` helper for index, column and row-count operations

Example:
    >>> from client import ScyllaClient
    >>>
    >>> with ScyllaClient() as client:
    ...     statement = client.query('ks', 'users').eq('id', '7').build()
"""

__version__ = "0.1.0"
__all__ = ['ScyllaClient', 'Table', 'RowCountError']

from .scylla_client import ScyllaClient
from .table import RowCountError, Table
