"""
===============================================
Comprehensive pytest suite for main.py
===============================================

Sections:
---------
1. Unit tests - argument parsing and helpers
2. CLI tests - main() dispatch and exit codes
3. Edge case tests - failures and interrupts

Available markers:
------------------
unit, integration, edge_case, smoke

How to Execute:
---------------
All tests:          pytest tests/test_main.py -v
By category:        pytest tests/test_main.py -m unit
"""

import asyncio
from unittest.mock import MagicMock, patch

import pytest

from main import build_parser, main, run_check, run_execute
from utils.cluster_utils import ClusterConnectionError
from utils.session_utils import StatementExecutionError

# ====================
# Mock Helper Classes
# ====================


class FakeClient:
    """Mock ScyllaClient recording calls and acting as a context manager."""

    def __init__(self, rows=None, error=None):
        self.rows = rows if rows is not None else []
        self.error = error
        self.executed = []
        self.keyspaces = []
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.closed = True
        return False

    async def execute(self, statement, parameters=None):
        if self.error is not None:
            raise self.error
        self.executed.append(statement)
        return self.rows

    async def create_keyspace(self, keyspace, replication_class='NetworkTopologyStrategy', replication_factor=1):
        if self.error is not None:
            raise self.error
        self.keyspaces.append((keyspace, replication_factor))


# ====================
# Fixtures
# ====================


@pytest.fixture(autouse=True)
def quiet_logging():
    """Keep main() from reconfiguring the root logger during tests."""
    with patch('main.setup_logging') as setup:
        yield setup


@pytest.fixture
def fake_client():
    client = FakeClient(rows=[(1,), (2,), (3,)])
    with patch('main.ScyllaClient', return_value=client):
        yield client


# ===============
# 1. UNIT TESTS
# ===============


@pytest.mark.unit
def test_parser_defaults():
    args = build_parser().parse_args([])

    assert args.check is False
    assert args.execute is None
    assert args.bootstrap is None
    assert args.replication_factor == 1
    assert args.verbose is False


@pytest.mark.unit
def test_parser_bootstrap_with_replication_factor():
    args = build_parser().parse_args(['--bootstrap', 'ks', '--replication-factor', '3'])

    assert args.bootstrap == 'ks'
    assert args.replication_factor == 3


@pytest.mark.unit
def test_run_check_waits_for_cluster():
    info = {'contact_points': ['127.0.0.1'], 'port': 9042, 'username': None, 'keyspace': None, 'request_timeout': 10}
    with patch('main.get_cluster_connection_info', return_value=info), \
            patch('main.wait_for_cluster', return_value=True) as wait:
        assert run_check(max_retries=2, retry_delay=0) is True

    wait.assert_called_once_with(max_retries=2, retry_delay=0)


@pytest.mark.unit
def test_run_execute_returns_row_count():
    client = FakeClient(rows=[('a',), ('b',)])

    assert asyncio.run(run_execute(client, "SELECT * FROM ks.t;")) == 2
    assert client.executed == ["SELECT * FROM ks.t;"]


# ===============
# 2. CLI TESTS
# ===============


@pytest.mark.smoke
def test_main_without_operation_returns_1(capsys):
    assert main([]) == 1
    assert '--check' in capsys.readouterr().out


@pytest.mark.integration
def test_main_check():
    with patch('main.run_check', return_value=True) as check:
        assert main(['--check']) == 0

    check.assert_called_once()


@pytest.mark.integration
def test_main_execute(fake_client):
    assert main(['--execute', 'SELECT * FROM ks.t;']) == 0

    assert fake_client.executed == ['SELECT * FROM ks.t;']
    assert fake_client.closed is True


@pytest.mark.integration
def test_main_bootstrap(fake_client):
    assert main(['--bootstrap', 'analytics', '--replication-factor', '3']) == 0

    assert fake_client.keyspaces == [('analytics', 3)]


@pytest.mark.integration
def test_main_verbose_sets_debug(quiet_logging):
    with patch('main.run_check', return_value=True):
        main(['--check', '--verbose'])

    quiet_logging.assert_called_once_with(log_level='DEBUG')


# ====================
# 3. EDGE CASE TESTS
# ====================


@pytest.mark.edge_case
def test_main_cluster_unavailable_returns_1():
    with patch('main.run_check', side_effect=ClusterConnectionError("no hosts")):
        assert main(['--check']) == 1


@pytest.mark.edge_case
def test_main_statement_failure_returns_1():
    client = FakeClient(error=StatementExecutionError("Statement failed: syntax error"))
    with patch('main.ScyllaClient', return_value=client):
        assert main(['--execute', 'SELEC oops;']) == 1

    assert client.closed is True


@pytest.mark.edge_case
def test_main_keyboard_interrupt_returns_130():
    with patch('main.run_check', side_effect=KeyboardInterrupt):
        assert main(['--check']) == 130


@pytest.mark.edge_case
def test_main_connect_failure_during_execute():
    client = MagicMock()
    client.__enter__.side_effect = ClusterConnectionError("Could not connect to cluster")
    with patch('main.ScyllaClient', return_value=client):
        assert main(['--execute', 'SELECT 1;']) == 1
