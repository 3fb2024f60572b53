"""Statement execution against a ConnectionManager's connection."""

import logging
import time
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd
from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from dblink.config.models import DatabaseType
from dblink.db.binding import prepare_statement
from dblink.db.connection import ConnectionManager
from dblink.db.results import EffectResult, OperationResult, RowsResult, StatementResult
from dblink.exceptions import DatabaseError, ErrorKind

logger = logging.getLogger(__name__)

INSERT_KEYWORDS = ("INSERT", "REPLACE")


class QueryExecutor:
    """Runs one statement, raw or parameterized, and keeps its result.

    The executor borrows the ConnectionManager; it never opens or closes the
    connection, so the manager must stay open for as long as the executor is
    used. Statements with parameters use ``?`` placeholders::

        query = QueryExecutor(manager, "SELECT * FROM users WHERE id = ?", [42])
        rows = query.execute().get_result()

    ``execute()`` never raises for database failures; inspect ``status`` or
    call ``raise_for_status()``.
    """

    def __init__(
        self,
        connection: ConnectionManager,
        statement: str,
        parameters: Optional[Sequence[Any]] = None,
    ) -> None:
        self._connection = connection
        self._statement = statement
        self._parameters: List[Any] = list(parameters or [])
        self._status: Optional[OperationResult] = None
        self._reset()

    @property
    def connection(self) -> ConnectionManager:
        return self._connection

    @connection.setter
    def connection(self, connection: ConnectionManager) -> None:
        self._connection = connection

    @property
    def statement(self) -> str:
        return self._statement

    @statement.setter
    def statement(self, statement: str) -> None:
        self._statement = statement

    @property
    def parameters(self) -> List[Any]:
        return list(self._parameters)

    @parameters.setter
    def parameters(self, parameters: Optional[Sequence[Any]]) -> None:
        self._parameters = list(parameters or [])

    @property
    def num_rows(self) -> int:
        """Number of rows returned by the last statement."""
        return self._num_rows

    @property
    def affected_rows(self) -> int:
        """Number of rows affected by the last statement."""
        return self._affected_rows

    @property
    def insert_id(self) -> int:
        """Auto-generated id of the last INSERT or REPLACE, 0 for any other statement."""
        return self._insert_id

    @property
    def columns(self) -> List[str]:
        return list(self._columns)

    @property
    def execution_time(self) -> float:
        return self._execution_time

    @property
    def outcome(self) -> Optional[StatementResult]:
        """RowsResult or EffectResult of the last successful execution."""
        return self._outcome

    @property
    def status(self) -> Optional[OperationResult]:
        """Outcome of the last ``execute()``; None before the first one."""
        return self._status

    def is_parameterized(self) -> bool:
        """Detect if this is a parameterized (prepared) statement."""
        return len(self._parameters) > 0

    def has_result(self) -> bool:
        """Determine if rows were returned."""
        return len(self._result) > 0

    def get_result(self) -> List[Dict[str, Any]]:
        """Get the result rows as dictionaries, in server order."""
        return list(self._result)

    def get_result_frame(self) -> pd.DataFrame:
        """Get the result as a single DataFrame (columns kept when empty)."""
        if self._result:
            return pd.DataFrame(self._result, columns=self._columns)
        return pd.DataFrame(columns=self._columns)

    def execute(self) -> "QueryExecutor":
        """Execute the statement, replacing any previous result state.

        Returns:
            The executor itself, for chaining.
        """
        self._reset()
        start_time = time.time()

        if self.is_parameterized():
            self._status = self._prepare()
        else:
            self._status = self._query()

        self._execution_time = time.time() - start_time
        return self

    def raise_for_status(self) -> "QueryExecutor":
        """Raise the DatabaseError of the last execution, if any."""
        if self._status is not None:
            self._status.raise_for_error()
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert the current result state to a dictionary."""
        return {
            'statement': self._statement,
            'parameterized': self.is_parameterized(),
            'success': bool(self._status) if self._status is not None else None,
            'error': self._status.error.message if self._status is not None and self._status.error else None,
            'rows': self.get_result(),
            'columns': self.columns,
            'num_rows': self._num_rows,
            'affected_rows': self._affected_rows,
            'insert_id': self._insert_id,
            'execution_time': self._execution_time,
        }

    def _prepare(self) -> OperationResult:
        """Bind the parameters to the statement and execute it."""
        if not self._connection.is_connected():
            return self._fail(self._not_connected_error())

        try:
            prepared = prepare_statement(
                self._statement,
                self._parameters,
                mysql_syntax=self._connection.db_type == DatabaseType.MYSQL,
            )
        except DatabaseError as e:
            e.database_type = self._connection.db_type.value
            return self._fail(e)

        logger.debug("Executing prepared statement (%s): %s", prepared.type_tags, self._statement)

        try:
            result = self._connection.get_connection().execute(prepared.clause)
        except DBAPIError as e:
            return self._fail(self._driver_error("Statement execution failed", e, ErrorKind.EXECUTE))
        except SQLAlchemyError as e:
            # Raised before reaching the driver, while processing bound values.
            return self._fail(self._driver_error("Failed to bind parameters", e, ErrorKind.BIND))

        return self._store(result)

    def _query(self) -> OperationResult:
        """Send the statement text to the driver unchanged."""
        if not self._connection.is_connected():
            return self._fail(self._not_connected_error())

        logger.debug("Executing raw statement: %s", self._statement)

        try:
            result = self._connection.get_connection().exec_driver_sql(self._statement)
        except SQLAlchemyError as e:
            return self._fail(self._driver_error("Statement execution failed", e, ErrorKind.EXECUTE))

        return self._store(result)

    def _store(self, result: CursorResult) -> OperationResult:
        """Copy rows and counters out of the result, then release it."""
        try:
            rowcount = result.rowcount
            insert_id = (result.lastrowid or 0) if self._generates_insert_id() else 0

            if result.returns_rows:
                columns = list(result.keys())
                rows = [dict(row._mapping) for row in result]

                self._columns = columns
                self._result = rows
                self._num_rows = len(rows)
                self._affected_rows = rowcount if rowcount is not None and rowcount >= 0 else len(rows)
                self._insert_id = int(insert_id)
                self._outcome = RowsResult(rows=list(rows), columns=list(columns))
            else:
                self._affected_rows = rowcount if rowcount is not None and rowcount >= 0 else 0
                self._insert_id = int(insert_id)
                self._outcome = EffectResult(
                    affected_rows=self._affected_rows,
                    insert_id=self._insert_id,
                )
        except SQLAlchemyError as e:
            self._reset()
            return self._fail(self._driver_error("Failed to fetch result", e, ErrorKind.EXECUTE))
        finally:
            result.close()

        return OperationResult.ok()

    def _generates_insert_id(self) -> bool:
        # SQLite keeps lastrowid from earlier inserts on the same connection.
        words = self._statement.lstrip(" \t\r\n(").split(None, 1)
        return bool(words) and words[0].upper() in INSERT_KEYWORDS

    def _reset(self) -> None:
        self._result: List[Dict[str, Any]] = []
        self._columns: List[str] = []
        self._num_rows = 0
        self._affected_rows = 0
        self._insert_id = 0
        self._execution_time = 0.0
        self._outcome: Optional[StatementResult] = None

    def _driver_error(self, message: str, error: BaseException, kind: ErrorKind) -> DatabaseError:
        return DatabaseError.from_driver_error(
            message,
            error,
            kind=kind,
            database_type=self._connection.db_type.value,
        )

    def _not_connected_error(self) -> DatabaseError:
        return DatabaseError(
            "Cannot execute statement: connection is not open",
            kind=ErrorKind.LIVENESS,
            database_type=self._connection.db_type.value,
        )

    def _fail(self, error: DatabaseError) -> OperationResult:
        logger.warning("%s [%s]", error.message, error.kind.value)
        return OperationResult.failed(error)

    def __repr__(self) -> str:
        return f"QueryExecutor({self._statement!r}, parameters={len(self._parameters)})"
