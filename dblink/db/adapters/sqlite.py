"""SQLite database adapter."""

from pathlib import Path
from typing import Any, Dict

from dblink.config.models import DatabaseConfig
from dblink.db.base import BaseAdapter
from dblink.exceptions import DatabaseError, ErrorKind

MEMORY_DATABASE = ":memory:"


class SQLiteAdapter(BaseAdapter):
    """SQLite database adapter.

    SQLite has no server session, so there is nothing to kill on close and
    no client character set to switch.
    """

    def __init__(self, config: DatabaseConfig) -> None:
        """Initialize SQLite adapter."""
        super().__init__(config)

        if not self.config.path:
            raise DatabaseError(
                "SQLite requires a database file path",
                kind=ErrorKind.CONNECT,
                database_type=self.config.type.value,
            )

    def get_driver_name(self) -> str:
        """Get the driver name for SQLite."""
        return "sqlite"

    def build_connection_string(self) -> str:
        """Build SQLite connection string.

        Relative paths are resolved against the working directory and the
        parent directory is created if needed.
        """
        if self.config.path == MEMORY_DATABASE:
            return "sqlite://"

        db_path = Path(self.config.path)
        if not db_path.is_absolute():
            db_path = Path.cwd() / db_path

        db_path.parent.mkdir(parents=True, exist_ok=True)

        return f"sqlite:///{db_path}"

    def _get_engine_options(self) -> Dict[str, Any]:
        """Get SQLite-specific engine options."""
        return {
            'connect_args': {
                'timeout': self.config.options.get('timeout', 30),
            }
        }
