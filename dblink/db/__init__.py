"""Database connectivity and query execution."""

from dblink.db.base import BaseAdapter
from dblink.db.binding import ParameterType, PreparedStatement, infer_parameter_type, prepare_statement
from dblink.db.connection import AdapterFactory, ConnectionManager
from dblink.db.query import QueryExecutor
from dblink.db.results import EffectResult, OperationResult, RowsResult, StatementResult
from dblink.db.adapters import (
    MySQLAdapter,
    PostgreSQLAdapter,
    SQLiteAdapter,
)

__all__ = [
    # Connection and execution
    "ConnectionManager",
    "QueryExecutor",
    "AdapterFactory",
    # Results
    "OperationResult",
    "RowsResult",
    "EffectResult",
    "StatementResult",
    # Binding
    "ParameterType",
    "PreparedStatement",
    "infer_parameter_type",
    "prepare_statement",
    # Database adapters
    "BaseAdapter",
    "MySQLAdapter",
    "PostgreSQLAdapter",
    "SQLiteAdapter",
]
