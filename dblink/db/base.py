"""Base dialect adapter for the single-connection wrapper."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.pool import NullPool

from dblink.config.models import DatabaseConfig
from dblink.exceptions import DatabaseError, ErrorKind

logger = logging.getLogger(__name__)


class BaseAdapter(ABC):
    """Base class for database adapters.

    An adapter knows how to reach one backend: how to build its URL and
    which driver calls answer "are you alive", "who am I on the server",
    "kill that session" and "switch the client character set".
    """

    def __init__(self, config: DatabaseConfig) -> None:
        """Initialize database adapter.

        Args:
            config: Database configuration.
        """
        self.config = config

    @abstractmethod
    def build_connection_string(self) -> str:
        """Build database connection string.

        Returns:
            Database connection string.
        """
        pass

    @abstractmethod
    def get_driver_name(self) -> str:
        """Get the driver name for this adapter.

        Returns:
            Driver name string.
        """
        pass

    def _get_engine_options(self) -> Dict[str, Any]:
        """Get database-specific engine options.

        Returns:
            Dictionary of engine options.
        """
        return {}

    def create_engine(self) -> Engine:
        """Create an engine that hands out exactly one unpooled connection.

        Raises:
            DatabaseError: If the URL cannot be built or the engine created.
        """
        try:
            connection_string = self.build_connection_string()

            engine_args = {
                'poolclass': NullPool,
                'isolation_level': 'AUTOCOMMIT',
                'echo': False,
            }
            engine_args.update(self._get_engine_options())

            return create_engine(connection_string, **engine_args)

        except DatabaseError:
            raise
        except Exception as e:
            raise DatabaseError(
                f"Failed to create database engine: {e}",
                kind=ErrorKind.CONNECT,
                database_type=self.config.type.value,
            ) from e

    @staticmethod
    def dbapi_connection(connection: Connection) -> Any:
        """Unwrap the raw DB-API connection behind a SQLAlchemy connection."""
        return connection.connection.dbapi_connection

    def ping(self, connection: Connection) -> bool:
        """Probe the server with a trivial round trip."""
        connection.exec_driver_sql("SELECT 1").close()
        return True

    def session_id_query(self) -> Optional[str]:
        """Query returning the server-side session identifier, if any."""
        return None

    def get_session_id(self, connection: Connection) -> Optional[Any]:
        """Get the server-side identifier of this connection's session."""
        query = self.session_id_query()
        if query is None:
            return None
        return connection.exec_driver_sql(query).scalar()

    def kill_session(self, connection: Connection, session_id: Any) -> None:
        """Ask the server to terminate a session. No-op for serverless backends."""
        pass

    def set_character_set(self, connection: Connection, name: str) -> None:
        """Set the client character set.

        Raises:
            DatabaseError: If the backend has no client character set.
        """
        raise DatabaseError(
            f"{self.config.type.value} does not support changing the client character set",
            kind=ErrorKind.CHARSET,
            database_type=self.config.type.value,
        )

    @staticmethod
    def validate_identifier(identifier: str) -> str:
        """Ensure a name is a plain identifier (letters, digits, underscores).

        Raises:
            DatabaseError: If the identifier is empty or contains other characters.
        """
        if not identifier:
            raise DatabaseError("Identifier cannot be empty", kind=ErrorKind.CHARSET)
        if not identifier[0].isalpha() and identifier[0] != '_':
            raise DatabaseError(f"Invalid identifier: {identifier}", kind=ErrorKind.CHARSET)
        for char in identifier[1:]:
            if not (char.isalnum() or char == '_'):
                raise DatabaseError(f"Invalid identifier: {identifier}", kind=ErrorKind.CHARSET)
        return identifier
