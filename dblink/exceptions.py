"""Core exceptions for dblink."""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Where in the connection/statement lifecycle a failure happened."""
    CONNECT = "connect"
    LIVENESS = "liveness"
    PREPARE = "prepare"
    BIND = "bind"
    EXECUTE = "execute"
    CHARSET = "charset"
    CLOSE = "close"


class DblinkError(Exception):
    """Base exception for all dblink errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(DblinkError):
    """Raised when there's an error in configuration parsing or validation."""
    pass


class DatabaseError(DblinkError):
    """Raised (or carried by an OperationResult) when a database call fails."""

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.EXECUTE,
        database_type: Optional[str] = None,
        code: Optional[Any] = None,
        native_message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, details)
        self.kind = kind
        self.database_type = database_type
        self.code = code
        self.native_message = native_message

    @classmethod
    def from_driver_error(
        cls,
        message: str,
        error: BaseException,
        kind: ErrorKind,
        database_type: Optional[str] = None,
    ) -> "DatabaseError":
        """Build an error that keeps the driver's native code and message.

        SQLAlchemy wraps DB-API exceptions and exposes the original as
        ``orig``; the code lives in a different place for each driver.
        """
        native = getattr(error, "orig", None) or error
        code = None
        native_message = str(native)

        args = getattr(native, "args", ())
        if len(args) >= 2 and isinstance(args[0], int):
            # PyMySQL: (errno, message)
            code, native_message = args[0], str(args[1])
        elif getattr(native, "pgcode", None):
            code = native.pgcode
            native_message = (getattr(native, "pgerror", None) or native_message).strip()
        elif getattr(native, "sqlite_errorcode", None) is not None:
            code = native.sqlite_errorcode

        return cls(
            f"{message}: {native_message}",
            kind=kind,
            database_type=database_type,
            code=code,
            native_message=native_message,
        )

    def __repr__(self) -> str:
        return f"DatabaseError(kind={self.kind.value!r}, code={self.code!r}, message={self.message!r})"
