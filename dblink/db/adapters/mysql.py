"""MySQL database adapter."""

from typing import Any, Dict, Optional
from urllib.parse import quote_plus

from sqlalchemy.engine import Connection

from dblink.config.models import DatabaseConfig
from dblink.db.base import BaseAdapter
from dblink.exceptions import DatabaseError, ErrorKind


class MySQLAdapter(BaseAdapter):
    """MySQL/MariaDB adapter backed by PyMySQL."""

    def __init__(self, config: DatabaseConfig) -> None:
        """Initialize MySQL adapter."""
        super().__init__(config)

        # Set default port if not specified
        if self.config.port is None:
            self.config.port = 3306

    def get_driver_name(self) -> str:
        """Get the driver name for MySQL."""
        return "pymysql"

    def build_connection_string(self) -> str:
        """Build MySQL connection string.

        Returns:
            MySQL connection string.

        Raises:
            DatabaseError: If required configuration is missing.
        """
        if not all([self.config.host, self.config.database, self.config.username]):
            raise DatabaseError(
                "MySQL requires host, database and username",
                kind=ErrorKind.CONNECT,
                database_type=self.config.type.value,
            )

        # URL encode credentials to handle special characters
        username_encoded = quote_plus(self.config.username)
        password_encoded = quote_plus(self.config.password or "")

        connection_string = (
            f"mysql+pymysql://{username_encoded}:{password_encoded}@"
            f"{self.config.host}:{self.config.port}/{self.config.database}"
        )

        charset = self.config.options.get('charset', 'utf8mb4')
        return f"{connection_string}?charset={charset}"

    def _get_engine_options(self) -> Dict[str, Any]:
        """Get MySQL-specific engine options."""
        return {
            'connect_args': {
                'connect_timeout': self.config.options.get('connect_timeout', 10),
            }
        }

    def ping(self, connection: Connection) -> bool:
        """Use the protocol-level ping instead of a query round trip."""
        self.dbapi_connection(connection).ping(reconnect=False)
        return True

    def get_session_id(self, connection: Connection) -> Optional[Any]:
        """Get the server thread id PyMySQL received in the handshake."""
        return self.dbapi_connection(connection).thread_id()

    def kill_session(self, connection: Connection, session_id: Any) -> None:
        """Send COM_PROCESS_KILL for the given thread."""
        self.dbapi_connection(connection).kill(session_id)

    def set_character_set(self, connection: Connection, name: str) -> None:
        """Switch the client character set (``SET NAMES``)."""
        self.dbapi_connection(connection).set_character_set(self.validate_identifier(name))
