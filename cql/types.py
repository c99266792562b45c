"""
======================================
Closed value types for CQL statements.
======================================

Operation kinds, ordering directions, ``USING`` options and trailing
clause variants. Each type knows how to render itself as CQL text.

Types:
    Operation: Statement kind; the enum value is the rendered verb
    OrderDirection: ASC / DESC
    UsingTimestamp, UsingTTL: Write options rendered after ``USING``
    RawClause: Free-form text appended verbatim
    JsonPayload: Serialized document(s) for ``INSERT ... JSON '...'``

Example:
    >>> Operation.INSERT.value
    'INSERT INTO'
    >>> UsingTTL(300).render()
    'TTL 300'
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union


class Operation(str, Enum):
    """Statement kind. The value is the verb written at the start of the statement."""

    SELECT = "SELECT"
    INSERT = "INSERT INTO"
    INSERT_IF_NOT_EXISTS = "INSERT IF NOT EXISTS"
    UPDATE = "UPDATE"
    DELETE = "DELETE"

    @property
    def verb(self) -> str:
        return self.value

    @property
    def is_insert(self) -> bool:
        return self in (Operation.INSERT, Operation.INSERT_IF_NOT_EXISTS)


class OrderDirection(str, Enum):
    """Sort direction for ``ORDER BY``."""

    ASC = "ASC"
    DESC = "DESC"


@dataclass(frozen=True)
class UsingTimestamp:
    """``USING TIMESTAMP`` write option (microseconds since epoch)."""

    timestamp: int

    def render(self) -> str:
        return f"TIMESTAMP {self.timestamp}"


@dataclass(frozen=True)
class UsingTTL:
    """``USING TTL`` write option (seconds)."""

    ttl: int

    def render(self) -> str:
        return f"TTL {self.ttl}"


@dataclass(frozen=True)
class RawClause:
    """Free-form clause appended after WHERE / ORDER BY, e.g. ``ALLOW FILTERING``."""

    text: str

    def render(self) -> str:
        return self.text


@dataclass(frozen=True)
class JsonPayload:
    """Serialized JSON text for an ``INSERT ... JSON`` statement.

    ``text`` must already have single quotes doubled; see
    ``cql.query_builder.serialize_payload``.
    """

    text: str

    def render(self) -> str:
        return f"JSON '{self.text}'"


InsertOption = Union[UsingTimestamp, UsingTTL]
Clause = Union[RawClause, JsonPayload]
