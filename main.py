"""
============================================
Command-line entry point for the CQL client.
============================================

Thin wrapper over ``utils.cluster_utils`` and ``client.ScyllaClient`` for
quick checks against a cluster.

Usage:
    # Wait until the configured cluster accepts connections
    python main.py --check

    # Run one statement and report the row count
    python main.py --execute "SELECT * FROM ks.users;"

    # Create a keyspace
    python main.py --bootstrap ks --replication-factor 3

    # Any of the above with DEBUG logging
    python main.py --check --verbose

Exit codes:
    0 on success, 1 on failure, 130 when interrupted.
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from client import ScyllaClient
from core.logger import get_logger, setup_logging
from utils.cluster_utils import (
    ClusterConnectionError,
    get_cluster_connection_info,
    wait_for_cluster,
)
from utils.session_utils import StatementExecutionError

logger = get_logger(__name__)


def run_check(max_retries: int = 5, retry_delay: int = 2) -> bool:
    """Log the connection settings and wait for the cluster."""
    info = get_cluster_connection_info()
    logger.info(f"📍 Contact points: {', '.join(info['contact_points'])} (port {info['port']})")
    logger.info(f"👤 User: {info['username'] or '(no auth)'}")
    logger.info(f"🗄️  Keyspace: {info['keyspace'] or '(none)'}")
    return wait_for_cluster(max_retries=max_retries, retry_delay=retry_delay)


async def run_execute(client: ScyllaClient, statement: str) -> int:
    """Execute one statement and return the number of rows in the first page."""
    rows = await client.execute(statement)
    count = len(list(rows or []))
    logger.info(f"✅ Statement returned {count} row(s)")
    return count


async def run_bootstrap(client: ScyllaClient, keyspace: str, replication_factor: int) -> None:
    await client.create_keyspace(keyspace, replication_factor=replication_factor)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='CQL statement builder and ScyllaDB client',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument(
        '--check',
        action='store_true',
        help='Wait for the configured cluster to accept connections'
    )
    parser.add_argument(
        '--execute',
        metavar='CQL',
        help='Execute one CQL statement'
    )
    parser.add_argument(
        '--bootstrap',
        metavar='KEYSPACE',
        help='Create KEYSPACE if it does not exist'
    )
    parser.add_argument(
        '--replication-factor',
        type=int,
        default=1,
        help='Replication factor used by --bootstrap (default: 1)'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging (DEBUG level)'
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments, run the requested operation and return an exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(log_level='DEBUG' if args.verbose else None)

    if not (args.check or args.execute or args.bootstrap):
        parser.print_help()
        logger.warning("⚠️  No operation specified. Use --check, --execute or --bootstrap.")
        return 1

    try:
        if args.check:
            run_check()

        if args.execute or args.bootstrap:
            with ScyllaClient() as client:
                if args.bootstrap:
                    asyncio.run(run_bootstrap(client, args.bootstrap, args.replication_factor))
                if args.execute:
                    asyncio.run(run_execute(client, args.execute))

        return 0

    except ClusterConnectionError as e:
        logger.error(f"❌ Cluster unavailable: {e}")
        return 1
    except StatementExecutionError as e:
        logger.error(f"❌ Statement failed: {e}")
        return 1
    except KeyboardInterrupt:
        logger.warning("⚠️  Operation interrupted by user")
        return 130


if __name__ == '__main__':
    sys.exit(main())
