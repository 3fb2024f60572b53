"""PostgreSQL database adapter."""

from typing import Any, Dict, Optional
from urllib.parse import quote_plus

from sqlalchemy.engine import Connection

from dblink.config.models import DatabaseConfig
from dblink.db.base import BaseAdapter
from dblink.exceptions import DatabaseError, ErrorKind


class PostgreSQLAdapter(BaseAdapter):
    """PostgreSQL database adapter."""

    def __init__(self, config: DatabaseConfig) -> None:
        """Initialize PostgreSQL adapter."""
        super().__init__(config)

        # Set default port if not specified
        if self.config.port is None:
            self.config.port = 5432

    def get_driver_name(self) -> str:
        """Get the driver name for PostgreSQL."""
        return "psycopg2"

    def build_connection_string(self) -> str:
        """Build PostgreSQL connection string.

        Raises:
            DatabaseError: If required configuration is missing.
        """
        if not all([self.config.host, self.config.database, self.config.username]):
            raise DatabaseError(
                "PostgreSQL requires host, database and username",
                kind=ErrorKind.CONNECT,
                database_type=self.config.type.value,
            )

        username_encoded = quote_plus(self.config.username)
        password_encoded = quote_plus(self.config.password or "")

        connection_string = (
            f"postgresql+psycopg2://{username_encoded}:{password_encoded}@"
            f"{self.config.host}:{self.config.port}/{self.config.database}"
        )

        sslmode = self.config.options.get('sslmode', 'prefer')
        return f"{connection_string}?sslmode={sslmode}"

    def _get_engine_options(self) -> Dict[str, Any]:
        """Get PostgreSQL-specific engine options."""
        return {
            'connect_args': {
                'connect_timeout': self.config.options.get('connect_timeout', 10),
                'application_name': self.config.options.get('application_name', 'dblink'),
            }
        }

    def session_id_query(self) -> Optional[str]:
        return "SELECT pg_backend_pid()"

    def kill_session(self, connection: Connection, session_id: Any) -> None:
        connection.exec_driver_sql("SELECT pg_terminate_backend(%s)", (int(session_id),))

    def set_character_set(self, connection: Connection, name: str) -> None:
        self.dbapi_connection(connection).set_client_encoding(self.validate_identifier(name))
