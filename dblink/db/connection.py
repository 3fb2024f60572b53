"""Single database connection lifecycle and adapter factory."""

import logging
from typing import Any, Dict, Optional, Type, Union

from pydantic import ValidationError
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from dblink.config.models import DatabaseConfig, DatabaseType
from dblink.db.adapters.mysql import MySQLAdapter
from dblink.db.adapters.postgresql import PostgreSQLAdapter
from dblink.db.adapters.sqlite import SQLiteAdapter
from dblink.db.base import BaseAdapter
from dblink.db.results import OperationResult
from dblink.exceptions import DatabaseError, ErrorKind

logger = logging.getLogger(__name__)


class AdapterFactory:
    """Factory for creating database adapters."""

    _adapters: Dict[DatabaseType, Type[BaseAdapter]] = {
        DatabaseType.MYSQL: MySQLAdapter,
        DatabaseType.POSTGRESQL: PostgreSQLAdapter,
        DatabaseType.SQLITE: SQLiteAdapter,
    }

    @classmethod
    def create_adapter(cls, config: DatabaseConfig) -> BaseAdapter:
        """Create a database adapter based on configuration.

        Raises:
            DatabaseError: If database type is not supported.
        """
        adapter_class = cls._adapters.get(config.type)
        if not adapter_class:
            supported_types = list(cls._adapters.keys())
            raise DatabaseError(
                f"Unsupported database type: {config.type}. "
                f"Supported types: {supported_types}",
                kind=ErrorKind.CONNECT,
            )

        return adapter_class(config)

    @classmethod
    def register_adapter(cls, db_type: DatabaseType, adapter_class: Type[BaseAdapter]) -> None:
        """Register a custom database adapter."""
        cls._adapters[db_type] = adapter_class

    @classmethod
    def get_supported_types(cls) -> list[DatabaseType]:
        """Get list of supported database types."""
        return list(cls._adapters.keys())


class ConnectionManager:
    """Owns exactly one connection to one database.

    Credentials can be changed at any time; they are only read by the next
    ``open()``. Operations report failure through ``OperationResult`` rather
    than raising, so callers check the returned value::

        manager = ConnectionManager("localhost", "app", "secret", "shop")
        if not manager.open():
            ...
    """

    def __init__(
        self,
        hostname: str,
        username: str,
        password: str,
        database: str,
        db_type: Union[DatabaseType, str] = DatabaseType.MYSQL,
        port: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._hostname = hostname
        self._username = username
        self._password = password
        self._database = database
        self.db_type = DatabaseType(db_type)
        self.port = port
        self.options = dict(options or {})

        self._adapter: Optional[BaseAdapter] = None
        self._engine: Optional[Engine] = None
        self._connection: Optional[Connection] = None

    @classmethod
    def from_config(cls, config: DatabaseConfig) -> "ConnectionManager":
        """Build a manager from a validated configuration entry."""
        database = config.path if config.type == DatabaseType.SQLITE else config.database
        return cls(
            hostname=config.host or "",
            username=config.username or "",
            password=config.password or "",
            database=database or "",
            db_type=config.type,
            port=config.port,
            options=config.options,
        )

    @property
    def hostname(self) -> str:
        return self._hostname

    @hostname.setter
    def hostname(self, hostname: str) -> None:
        self._hostname = hostname

    @property
    def username(self) -> str:
        return self._username

    @username.setter
    def username(self, username: str) -> None:
        self._username = username

    @property
    def password(self) -> str:
        return self._password

    @password.setter
    def password(self, password: str) -> None:
        self._password = password

    @property
    def database(self) -> str:
        return self._database

    @database.setter
    def database(self, database: str) -> None:
        self._database = database

    @property
    def adapter(self) -> Optional[BaseAdapter]:
        """Adapter of the current (or last) connection."""
        return self._adapter

    def get_connection(self) -> Optional[Connection]:
        """Get the raw SQLAlchemy connection, or None if never opened."""
        return self._connection

    def build_config(self) -> DatabaseConfig:
        """Validate the current credentials into a DatabaseConfig."""
        fields: Dict[str, Any] = {
            'type': self.db_type,
            'host': self._hostname or None,
            'port': self.port,
            'database': self._database or None,
            'username': self._username or None,
            'password': self._password,
            'options': self.options,
        }
        if self.db_type == DatabaseType.SQLITE:
            fields['path'] = self._database or None
        return DatabaseConfig(**fields)

    def is_connected(self) -> bool:
        """Check that a live connection exists.

        Returns:
            True if the handle exists, is a SQLAlchemy connection that has
            not been closed or invalidated, and answers a ping.
        """
        if not isinstance(self._connection, Connection) or self._adapter is None:
            return False
        if self._connection.closed or self._connection.invalidated:
            return False

        try:
            return self._adapter.ping(self._connection)
        except Exception as e:
            logger.debug("Ping failed for %s: %s", self._describe(), e)
            return False

    def open(self) -> OperationResult:
        """Open the connection unless one is already alive.

        Returns:
            Successful OperationResult if a live connection exists afterwards.
        """
        if self.is_connected():
            return OperationResult.ok()

        # Drop whatever is left of a dead handle before reconnecting.
        self._release()

        try:
            config = self.build_config()
            adapter = AdapterFactory.create_adapter(config)
            engine = adapter.create_engine()
        except ValidationError as e:
            return self._fail(DatabaseError(
                f"Invalid connection settings: {e}",
                kind=ErrorKind.CONNECT,
                database_type=self.db_type.value,
            ))
        except DatabaseError as e:
            return self._fail(e)

        try:
            connection = engine.connect()
        except SQLAlchemyError as e:
            engine.dispose()
            return self._fail(DatabaseError.from_driver_error(
                f"Failed to connect to {self._describe()}",
                e,
                kind=ErrorKind.CONNECT,
                database_type=self.db_type.value,
            ))

        self._adapter = adapter
        self._engine = engine
        self._connection = connection

        if not self.is_connected():
            return self._fail(DatabaseError(
                f"Connection to {self._describe()} is not responding",
                kind=ErrorKind.LIVENESS,
                database_type=self.db_type.value,
            ))

        logger.info("Connected to %s", self._describe())
        return OperationResult.ok()

    @property
    def session_id(self) -> Optional[Any]:
        """Server-side session (thread) identifier of the live connection."""
        if not self.is_connected():
            return None
        return self._adapter.get_session_id(self._connection)

    def load_character_set(self, name: str) -> OperationResult:
        """Set the client character set of the live connection."""
        if not self.is_connected():
            return self._fail(self._not_connected_error())

        try:
            self._adapter.set_character_set(self._connection, name)
        except DatabaseError as e:
            return self._fail(e)
        except Exception as e:
            return self._fail(DatabaseError.from_driver_error(
                f"Failed to load character set '{name}'",
                e,
                kind=ErrorKind.CHARSET,
                database_type=self.db_type.value,
            ))

        logger.debug("Loaded character set %s on %s", name, self._describe())
        return OperationResult.ok()

    def close(self) -> OperationResult:
        """Kill the server session, then close the connection locally.

        Closing a manager that is not connected is a successful no-op.
        """
        if not self.is_connected():
            self._release()
            return OperationResult.ok()

        try:
            session_id = self._adapter.get_session_id(self._connection)
            if session_id is not None:
                logger.debug("Killing session %s on %s", session_id, self._describe())
                self._adapter.kill_session(self._connection, session_id)
        except Exception as e:
            # Killing our own session usually errors mid-reply.
            logger.debug("Session kill on %s reported: %s", self._describe(), e)

        try:
            self._connection.close()
        except SQLAlchemyError as e:
            return self._fail(DatabaseError.from_driver_error(
                f"Failed to close connection to {self._describe()}",
                e,
                kind=ErrorKind.CLOSE,
                database_type=self.db_type.value,
            ))
        finally:
            self._release()

        logger.info("Closed connection to %s", self._describe())
        return OperationResult.ok()

    def _release(self) -> None:
        if self._connection is not None:
            try:
                self._connection.close()
            except SQLAlchemyError:
                logger.debug("Ignoring error while discarding connection", exc_info=True)
        if self._engine is not None:
            self._engine.dispose()
        self._connection = None
        self._engine = None

    def _not_connected_error(self) -> DatabaseError:
        return DatabaseError(
            f"Not connected to {self._describe()}",
            kind=ErrorKind.LIVENESS,
            database_type=self.db_type.value,
        )

    def _fail(self, error: DatabaseError) -> OperationResult:
        logger.warning("%s", error.message)
        return OperationResult.failed(error)

    def _describe(self) -> str:
        if self.db_type == DatabaseType.SQLITE:
            return f"sqlite:{self._database}"
        return f"{self.db_type.value}://{self._username}@{self._hostname}/{self._database}"

    def __enter__(self) -> "ConnectionManager":
        self.open().raise_for_error()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"ConnectionManager({self._describe()!r}, open={self._connection is not None})"
