"""
==========================
Utility Functions Package.
==========================

Cluster connectivity and async statement execution shared by the client
facade, the query builder and the CLI.

Modules:
    cluster_utils: Cluster/session creation and availability checks
    session_utils: Awaitable execution over ``Session.execute_async``
"""

__version__ = "0.1.0"

# Note: No eager imports. cluster_utils loads the driver, which the pure
# builder path (cql -> utils.session_utils) does not need. Import directly:
#   from utils.cluster_utils import create_cluster, wait_for_cluster
#   from utils.session_utils import execute_statement, StatementExecutionError
