"""Result containers returned by connection and query operations."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from dblink.exceptions import DatabaseError


@dataclass(frozen=True)
class OperationResult:
    """Outcome of a connection or statement operation.

    Truthy when the operation succeeded, so it can stand in wherever a plain
    boolean was expected, while still carrying the driver diagnostic on
    failure.
    """

    success: bool
    error: Optional[DatabaseError] = None

    @classmethod
    def ok(cls) -> "OperationResult":
        return cls(success=True)

    @classmethod
    def failed(cls, error: DatabaseError) -> "OperationResult":
        return cls(success=False, error=error)

    def __bool__(self) -> bool:
        return self.success

    def raise_for_error(self) -> None:
        """Raise the carried error if the operation failed."""
        if self.error is not None:
            raise self.error


@dataclass(frozen=True)
class RowsResult:
    """A row-returning statement (SELECT, SHOW, EXPLAIN, DESCRIBE...)."""

    rows: List[Dict[str, Any]] = field(default_factory=list)
    columns: List[str] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)


@dataclass(frozen=True)
class EffectResult:
    """A side-effect-only statement (INSERT, UPDATE, DDL...)."""

    affected_rows: int = 0
    insert_id: int = 0


StatementResult = Union[RowsResult, EffectResult]
