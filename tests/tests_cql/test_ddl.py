"""
=====================================================
Pytest suite for cql/ddl.py and cql/common_queries.py
=====================================================

Sections:
---------
1. Unit tests - statement text per helper
2. Edge case tests - malformed table definitions

How to Execute:
---------------
All tests:          pytest tests/tests_cql/test_ddl.py -v
"""

import pytest

from cql import ddl
from cql.common_queries import check_duplicates_sql, count_rows_sql
from cql.ddl import DDLError
from cql.types import OrderDirection

COLUMNS = [("age", "int"), ("name", "text"), ("score", "double")]

# ===============
# 1. UNIT TESTS
# ===============


@pytest.mark.unit
def test_create_keyspace_defaults():
    assert ddl.create_keyspace("ks") == (
        "CREATE KEYSPACE IF NOT EXISTS ks WITH REPLICATION = "
        "{'class' : 'NetworkTopologyStrategy', 'replication_factor' : 1};"
    )


@pytest.mark.unit
def test_create_keyspace_custom_replication():
    sql = ddl.create_keyspace("ks", replication_class="SimpleStrategy", replication_factor=3, if_not_exists=False)

    assert sql == "CREATE KEYSPACE ks WITH REPLICATION = {'class' : 'SimpleStrategy', 'replication_factor' : 3};"


@pytest.mark.unit
def test_drop_keyspace():
    assert ddl.drop_keyspace("ks") == "DROP KEYSPACE IF EXISTS ks;"
    assert ddl.drop_keyspace("ks", if_exists=False) == "DROP KEYSPACE ks;"


@pytest.mark.unit
def test_create_table_single_partition_key():
    sql = ddl.create_table("test_keyspace", "test_table", ["age"], [], COLUMNS)

    assert sql == (
        "CREATE TABLE IF NOT EXISTS test_keyspace.test_table "
        "(age int, name text, score double, PRIMARY KEY ((age)));"
    )


@pytest.mark.unit
def test_create_table_composite_key_with_clustering():
    sql = ddl.create_table("ks", "t", ["age", "name"], ["score"], COLUMNS)

    assert sql == "CREATE TABLE IF NOT EXISTS ks.t (age int, name text, score double, PRIMARY KEY ((age, name), score));"


@pytest.mark.unit
def test_create_table_with_ordering_and_ttl():
    sql = ddl.create_table(
        "ks", "events", ["user_id"], ["ts"],
        [("user_id", "uuid"), ("ts", "timestamp"), ("kind", "text")],
        clustering_order=[("ts", OrderDirection.DESC)],
        default_ttl=86400,
    )

    assert sql == (
        "CREATE TABLE IF NOT EXISTS ks.events (user_id uuid, ts timestamp, kind text, "
        "PRIMARY KEY ((user_id), ts)) WITH CLUSTERING ORDER BY (ts DESC) "
        "AND default_time_to_live = 86400;"
    )


@pytest.mark.unit
def test_create_table_ttl_only():
    sql = ddl.create_table("ks", "t", ["age"], [], COLUMNS, default_ttl=60)

    assert sql.endswith("PRIMARY KEY ((age))) WITH default_time_to_live = 60;")


@pytest.mark.unit
def test_drop_and_truncate_table():
    assert ddl.drop_table("ks", "t") == "DROP TABLE IF EXISTS ks.t;"
    assert ddl.truncate_table("ks", "t") == "TRUNCATE TABLE ks.t;"


@pytest.mark.unit
def test_index_statements():
    assert ddl.create_index("by_name", "ks", "t", "name") == "CREATE INDEX IF NOT EXISTS by_name ON ks.t (name);"
    assert ddl.drop_index("ks", "by_name") == "DROP INDEX IF EXISTS ks.by_name;"


@pytest.mark.unit
def test_column_statements():
    assert ddl.add_column("ks", "t", "email", "text") == "ALTER TABLE ks.t ADD email text;"
    assert ddl.drop_column("ks", "t", "email") == "ALTER TABLE ks.t DROP email;"


@pytest.mark.unit
def test_common_queries():
    assert count_rows_sql("ks", "t") == "SELECT COUNT(*) FROM ks.t;"
    assert check_duplicates_sql("ks", "t", "email") == (
        "SELECT email, COUNT(*) FROM ks.t GROUP BY email HAVING COUNT(*) > 1;"
    )


# ====================
# 2. EDGE CASE TESTS
# ====================


@pytest.mark.edge_case
def test_create_table_requires_columns():
    with pytest.raises(DDLError, match="at least one column"):
        ddl.create_table("ks", "t", ["id"], [], [])


@pytest.mark.edge_case
def test_create_table_requires_partition_key():
    with pytest.raises(DDLError, match="partition key"):
        ddl.create_table("ks", "t", [], [], COLUMNS)


@pytest.mark.edge_case
def test_create_table_rejects_undeclared_keys():
    with pytest.raises(DDLError, match="missing_col"):
        ddl.create_table("ks", "t", ["age"], ["missing_col"], COLUMNS)


@pytest.mark.edge_case
def test_create_table_rejects_order_on_non_clustering_column():
    with pytest.raises(DDLError, match="not a clustering key"):
        ddl.create_table("ks", "t", ["age"], ["name"], COLUMNS, clustering_order=[("score", OrderDirection.ASC)])
