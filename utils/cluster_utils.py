"""
==================================================
Cluster connectivity utilities for ScyllaDB.
==================================================

Creates driver ``Cluster`` objects from configuration, opens sessions and
checks cluster availability with retries. Connection details live here so
the client facade and the CLI share one way of reaching the cluster.

Key Features:
    - Cluster construction from config with optional PlainText auth
    - Token-aware, DC-aware default execution profile
    - Session creation with default keyspace
    - Availability check and wait-with-retries
    - Connection info for display

Example:
    >>> from utils.cluster_utils import create_cluster, connect_session, wait_for_cluster
    >>>
    >>> wait_for_cluster(max_retries=5)
    >>> cluster = create_cluster()
    >>> session = connect_session(cluster, keyspace='ks')
"""

import logging
import time
from typing import Any, Dict, List, Optional

from cassandra import OperationTimedOut
from cassandra.auth import PlainTextAuthProvider
from cassandra.cluster import EXEC_PROFILE_DEFAULT, Cluster, ExecutionProfile, NoHostAvailable, Session
from cassandra.policies import DCAwareRoundRobinPolicy, TokenAwarePolicy

from core.config import config

logger = logging.getLogger(__name__)


class ClusterConnectionError(Exception):
    """Exception raised when the cluster cannot be reached."""
    pass


def create_cluster(
    contact_points: Optional[List[str]] = None,
    port: Optional[int] = None,
    username: Optional[str] = None,
    password: Optional[str] = None,
    protocol_version: Optional[int] = None,
    connect_timeout: Optional[int] = None,
    request_timeout: Optional[int] = None,
    local_dc: Optional[str] = None
) -> Cluster:
    """
    Build a driver ``Cluster`` without connecting.

    The default execution profile routes requests token-aware within the
    local datacenter and carries the per-request timeout.

    Args:
        contact_points: Hosts to contact (defaults to config)
        port: Native protocol port (defaults to config)
        username: Auth username (defaults to config; empty disables auth)
        password: Auth password (defaults to config)
        protocol_version: Protocol version (defaults to config)
        connect_timeout: Connection timeout in seconds (defaults to config)
        request_timeout: Default per-request timeout in seconds (defaults to config)
        local_dc: Preferred datacenter (defaults to config; None lets the driver pick)

    Returns:
        Configured Cluster

    Example:
        >>> cluster = create_cluster(contact_points=['10.0.0.1', '10.0.0.2'])
    """
    params = config.get_cluster_params()
    if contact_points is not None:
        params['contact_points'] = list(contact_points)
    if port is not None:
        params['port'] = port
    if protocol_version is not None:
        params['protocol_version'] = protocol_version
    if connect_timeout is not None:
        params['connect_timeout'] = connect_timeout

    username = username if username is not None else config.scylla_username
    password = password if password is not None else config.scylla_password
    if username and password:
        params['auth_provider'] = PlainTextAuthProvider(username=username, password=password)

    profile = ExecutionProfile(
        load_balancing_policy=TokenAwarePolicy(
            DCAwareRoundRobinPolicy(local_dc=local_dc or config.scylla_local_dc or '')
        ),
        request_timeout=request_timeout if request_timeout is not None else config.request_timeout
    )
    params['execution_profiles'] = {EXEC_PROFILE_DEFAULT: profile}

    return Cluster(**params)


def connect_session(cluster: Cluster, keyspace: Optional[str] = None) -> Session:
    """
    Open a session on ``cluster``.

    On failure the driver has already shut ``cluster`` down; build a new
    one before retrying.

    Args:
        cluster: Cluster from ``create_cluster``
        keyspace: Keyspace to switch to (defaults to config; None stays unbound)

    Returns:
        Connected Session

    Raises:
        ClusterConnectionError: If no host accepts the connection
    """
    keyspace = keyspace if keyspace is not None else config.scylla_keyspace
    try:
        session = cluster.connect(keyspace)
    except (NoHostAvailable, OperationTimedOut) as e:
        logger.error(f"❌ Could not connect to cluster: {e}")
        raise ClusterConnectionError(f"Could not connect to cluster: {e}") from e

    logger.info(f"✅ Connected to cluster{f' (keyspace {keyspace})' if keyspace else ''}")
    return session


def check_cluster_available(
    contact_points: Optional[List[str]] = None,
    port: Optional[int] = None,
    username: Optional[str] = None,
    password: Optional[str] = None,
    timeout: int = 5
) -> bool:
    """
    Check whether the cluster accepts a connection.

    Opens and immediately shuts down a throwaway cluster.

    Returns:
        True if a session could be opened, False otherwise
    """
    cluster = create_cluster(
        contact_points=contact_points,
        port=port,
        username=username,
        password=password,
        connect_timeout=timeout
    )
    try:
        cluster.connect()
        return True
    except (NoHostAvailable, OperationTimedOut) as e:
        logger.debug(f"Cluster not available: {e}")
        return False
    finally:
        cluster.shutdown()


def wait_for_cluster(
    contact_points: Optional[List[str]] = None,
    port: Optional[int] = None,
    username: Optional[str] = None,
    password: Optional[str] = None,
    max_retries: int = 10,
    retry_delay: int = 2,
    timeout: int = 5
) -> bool:
    """
    Wait for the cluster to accept connections.

    Args:
        contact_points: Hosts to contact (defaults to config)
        port: Native protocol port (defaults to config)
        username: Auth username (defaults to config)
        password: Auth password (defaults to config)
        max_retries: Maximum number of attempts
        retry_delay: Seconds between attempts
        timeout: Connection timeout per attempt in seconds

    Returns:
        True once the cluster is available

    Raises:
        ClusterConnectionError: If the cluster never becomes available

    Example:
        >>> wait_for_cluster(max_retries=5, retry_delay=3)
    """
    hosts = ', '.join(contact_points or config.scylla_contact_points)
    port = port or config.scylla_port

    logger.info(f"Waiting for cluster at {hosts} (port {port})...")

    for attempt in range(1, max_retries + 1):
        if check_cluster_available(contact_points, port, username, password, timeout):
            logger.info(f"✅ Cluster is available (attempt {attempt}/{max_retries})")
            return True

        if attempt < max_retries:
            logger.warning(
                f"⏳ Cluster not available yet (attempt {attempt}/{max_retries}), "
                f"retrying in {retry_delay}s..."
            )
            time.sleep(retry_delay)

    error_msg = f"Cluster at {hosts} (port {port}) did not become available after {max_retries} attempts"
    logger.error(f"❌ {error_msg}")
    raise ClusterConnectionError(error_msg)


def get_cluster_connection_info() -> Dict[str, Any]:
    """
    Get the configured connection details, without the password.

    Example:
        >>> info = get_cluster_connection_info()
        >>> print(f"{info['contact_points']}:{info['port']}")
    """
    return {
        'contact_points': list(config.scylla_contact_points),
        'port': config.scylla_port,
        'username': config.scylla_username or None,
        'keyspace': config.scylla_keyspace,
        'request_timeout': config.request_timeout,
    }
