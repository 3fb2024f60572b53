"""dblink: a small object wrapper around one relational database connection.

dblink provides:
- ConnectionManager: open, ping, kill and close a single connection
- QueryExecutor: raw or ``?``-parameterized statements with typed binding
- Results as dict rows, a DataFrame, or affected-row / insert-id counts
- YAML configuration and a small CLI
"""

__version__ = "0.1.0"
__license__ = "MIT"

# Core exports
from dblink.exceptions import DblinkError, ConfigurationError, DatabaseError, ErrorKind
from dblink.db import ConnectionManager, QueryExecutor, OperationResult

__all__ = [
    "__version__",
    "DblinkError",
    "ConfigurationError",
    "DatabaseError",
    "ErrorKind",
    "ConnectionManager",
    "QueryExecutor",
    "OperationResult",
]
