"""
=============================================
Configuration management for the CQL client.
=============================================

Reads cluster and logging settings from environment variables (optionally
seeded from a ``.env`` file at the project root) and exposes them through a
module-level ``config`` singleton.

Settings:
    - Cluster contact points, port and credentials
    - Protocol version, driver timeouts and local datacenter
    - Default keyspace for new sessions
    - Log level and optional log file

Example:
    >>> from core.config import config
    >>>
    >>> params = config.get_cluster_params()
    >>> print(f"Contact points: {config.scylla_contact_points}")
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

env_path = Path(__file__).parent.parent / '.env'
load_dotenv(dotenv_path=env_path)


def _split_hosts(raw: str) -> List[str]:
    """Split a comma separated host list, dropping blanks."""
    return [host.strip() for host in raw.split(',') if host.strip()]


@dataclass
class ScyllaConfig:
    """Cluster connection settings.

    Attributes:
        contact_points: Hostnames or IPs used to discover the cluster
        port: Native protocol port
        username: Login for PlainText authentication (empty disables auth)
        password: Password for PlainText authentication
        keyspace: Keyspace the session switches to after connecting (optional)
        protocol_version: Native protocol version requested by the driver
        connect_timeout: Seconds allowed for the initial connection
        request_timeout: Default per-request timeout in seconds
        local_dc: Datacenter preferred by the load balancing policy (optional)
    """

    contact_points: List[str] = field(default_factory=lambda: ['127.0.0.1'])
    port: int = 9042
    username: str = ''
    password: str = ''
    keyspace: Optional[str] = None
    protocol_version: int = 4
    connect_timeout: int = 10
    request_timeout: int = 10
    local_dc: Optional[str] = None

    @property
    def uses_auth(self) -> bool:
        """True when both username and password are set."""
        return bool(self.username and self.password)

    def get_cluster_params(self) -> Dict[str, Any]:
        """Get keyword arguments for ``cassandra.cluster.Cluster``.

        Credentials are not included; they are wrapped in an auth provider
        by ``utils.cluster_utils.create_cluster``.

        Returns:
            Dictionary with keys: contact_points, port, protocol_version,
            connect_timeout
        """
        return {
            'contact_points': list(self.contact_points),
            'port': self.port,
            'protocol_version': self.protocol_version,
            'connect_timeout': self.connect_timeout,
        }


@dataclass
class ProjectConfig:
    """Project-level settings.

    Attributes:
        project_root: Absolute path to project root directory
        log_level: Root logging level name
        log_file: Optional log file name, written under ``logs_dir``
        logs_dir: Directory for log files
    """

    project_root: Path
    log_level: str
    log_file: Optional[str]
    logs_dir: Path


class Config:
    """Centralized configuration manager.

    Attributes:
        scylla: ScyllaConfig with cluster connection settings
        project: ProjectConfig with logging and path settings

    Example:
        >>> cfg = Config()
        >>> cfg.scylla_port
        9042
    """

    def __init__(self):
        """Build configuration from the current environment."""
        self.scylla = ScyllaConfig(
            contact_points=_split_hosts(os.getenv('SCYLLA_CONTACT_POINTS', '127.0.0.1')),
            port=int(os.getenv('SCYLLA_PORT', '9042')),
            username=os.getenv('SCYLLA_USERNAME', ''),
            password=os.getenv('SCYLLA_PASSWORD', ''),
            keyspace=os.getenv('SCYLLA_KEYSPACE') or None,
            protocol_version=int(os.getenv('SCYLLA_PROTOCOL_VERSION', '4')),
            connect_timeout=int(os.getenv('SCYLLA_CONNECT_TIMEOUT', '10')),
            request_timeout=int(os.getenv('SCYLLA_REQUEST_TIMEOUT', '10')),
            local_dc=os.getenv('SCYLLA_LOCAL_DC') or None,
        )

        project_root = Path(__file__).parent.parent
        self.project = ProjectConfig(
            project_root=project_root,
            log_level=os.getenv('LOG_LEVEL', 'INFO'),
            log_file=os.getenv('LOG_FILE') or None,
            logs_dir=project_root / 'logs',
        )

    @property
    def scylla_contact_points(self) -> List[str]:
        """Get cluster contact points."""
        return self.scylla.contact_points

    @property
    def scylla_port(self) -> int:
        """Get native protocol port."""
        return self.scylla.port

    @property
    def scylla_username(self) -> str:
        return self.scylla.username

    @property
    def scylla_password(self) -> str:
        return self.scylla.password

    @property
    def scylla_keyspace(self) -> Optional[str]:
        """Get default keyspace, or None when sessions start unbound."""
        return self.scylla.keyspace

    @property
    def request_timeout(self) -> int:
        return self.scylla.request_timeout

    @property
    def scylla_local_dc(self) -> Optional[str]:
        return self.scylla.local_dc

    def get_cluster_params(self) -> Dict[str, Any]:
        """Get ``Cluster`` keyword arguments.

        Example:
            >>> from cassandra.cluster import Cluster
            >>> cluster = Cluster(**config.get_cluster_params())
        """
        return self.scylla.get_cluster_params()


# Global configuration instance
config = Config()
