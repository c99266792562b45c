"""
===========================
Common table query helpers.
===========================

Fixed-shape queries used by ``client.table.Table``.

Functions:
    count_rows_sql: Total row count of a table
    check_duplicates_sql: Values of a column that occur more than once
"""


def count_rows_sql(keyspace: str, table: str) -> str:
    """
    Count every row of a table.

    The result is a single row whose first column holds the count. This is
    a full scan on the cluster; keep it to small tables and tests.
    """
    return f"SELECT COUNT(*) FROM {keyspace}.{table};"


def check_duplicates_sql(keyspace: str, table: str, column: str) -> str:
    """
    Find values of ``column`` shared by more than one row.

    Each returned row is one duplicated value with its count.
    """
    return (
        f"SELECT {column}, COUNT(*) FROM {keyspace}.{table} "
        f"GROUP BY {column} HAVING COUNT(*) > 1;"
    )
