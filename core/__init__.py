"""
=======================================
Core infrastructure for the CQL client.
=======================================

Configuration and logging shared by every other package.

Modules:
    config: Cluster and logging settings from environment variables
    logger: Root logger setup and named logger helpers

Example:
    >>> from core.config import config
    >>> from core.logger import get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> logger.info(f"Contact points: {config.scylla_contact_points}")
"""

__version__ = "0.1.0"
__all__ = ['get_logger', 'setup_logging', 'config', 'Config']

from core.config import Config, config
from core.logger import get_logger, setup_logging
