"""
===============================
CQL predicate fragment helpers.
===============================

Pure functions that each render one predicate or assignment fragment.
``QueryBuilder`` calls these and appends the result to its WHERE list;
they can also be used on their own with ``QueryBuilder.where_condition``.

Values are written with ``str()`` and wrapped in single quotes. No further
escaping is done, so never pass untrusted input here; bind parameters
through ``ScyllaClient.execute`` instead.

Functions:
    eq, neq, gt, gte, lt, lte: Comparison against a quoted value
    in_list, not_in_list: ``IN (...)`` with values joined as given
    between, not_between: Inclusive range check
    like: Pattern match
    is_null, is_not_null: Null checks
    assignment: ``column = 'value'`` fragment for UPDATE ... SET

Example:
    >>> eq('id', 7)
    "id = '7'"
    >>> in_list('id', ['1', '2'])
    'id IN (1, 2)'
"""

from typing import Any, Iterable


def compare(column: str, operator: str, value: Any) -> str:
    """Render ``{column} {operator} '{value}'``."""
    return f"{column} {operator} '{value}'"


def eq(column: str, value: Any) -> str:
    return compare(column, "=", value)


def neq(column: str, value: Any) -> str:
    return compare(column, "!=", value)


def gt(column: str, value: Any) -> str:
    return compare(column, ">", value)


def gte(column: str, value: Any) -> str:
    return compare(column, ">=", value)


def lt(column: str, value: Any) -> str:
    return compare(column, "<", value)


def lte(column: str, value: Any) -> str:
    return compare(column, "<=", value)


def in_list(column: str, values: Iterable[Any]) -> str:
    """
    Render an ``IN`` predicate.

    Values are joined with ``', '`` exactly as given (not quoted), so text
    values must carry their own quotes: ``in_list('name', ["'a'", "'b'"])``.

    Args:
        column: Column name
        values: Values to match

    Returns:
        Fragment such as ``id IN (1, 2, 3)``
    """
    return f"{column} IN ({', '.join(str(value) for value in values)})"


def not_in_list(column: str, values: Iterable[Any]) -> str:
    return f"{column} NOT IN ({', '.join(str(value) for value in values)})"


def between(column: str, lower: Any, upper: Any) -> str:
    return f"{column} BETWEEN '{lower}' AND '{upper}'"


def not_between(column: str, lower: Any, upper: Any) -> str:
    return f"{column} NOT BETWEEN '{lower}' AND '{upper}'"


def like(column: str, pattern: str) -> str:
    return f"{column} LIKE '{pattern}'"


def is_null(column: str) -> str:
    return f"{column} IS NULL"


def is_not_null(column: str) -> str:
    return f"{column} IS NOT NULL"


def assignment(column: str, value: Any) -> str:
    """Render a SET fragment; same quoting as ``eq``."""
    return f"{column} = '{value}'"
