"""Database adapters for different database types."""

from dblink.db.adapters.mysql import MySQLAdapter
from dblink.db.adapters.postgresql import PostgreSQLAdapter
from dblink.db.adapters.sqlite import SQLiteAdapter

__all__ = [
    "MySQLAdapter",
    "PostgreSQLAdapter",
    "SQLiteAdapter",
]
