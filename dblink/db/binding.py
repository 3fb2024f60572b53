"""Positional parameter binding for prepared statements.

Statements use ``?`` markers. Before execution each marker is rewritten into
a named SQLAlchemy bind parameter carrying a type inferred from the value,
so the driver encodes it the same way every time.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Sequence

from sqlalchemy import Float, Integer, LargeBinary, String, bindparam, text
from sqlalchemy.sql.elements import TextClause
from sqlalchemy.types import TypeEngine

from dblink.exceptions import DatabaseError, ErrorKind

MARKER = "?"
BYTES_LIKE = (bytes, bytearray, memoryview)


class ParameterType(str, Enum):
    """Wire type tag of a bound parameter."""
    INTEGER = "i"
    DOUBLE = "d"
    STRING = "s"
    BLOB = "b"


_SQL_TYPES = {
    ParameterType.INTEGER: Integer,
    ParameterType.DOUBLE: Float,
    ParameterType.STRING: String,
    ParameterType.BLOB: LargeBinary,
}


def infer_parameter_type(value: Any) -> ParameterType:
    """Infer the wire tag of a value.

    Checked in order integer, float, string; anything else gets the binary tag.
    ``bool`` is an ``int`` subclass and binds as an integer, never as binary,
    so ``True`` is sent as 1 rather than as the bytes of ``bytes(True)``.
    """
    if isinstance(value, int):
        return ParameterType.INTEGER
    elif isinstance(value, float):
        return ParameterType.DOUBLE
    elif isinstance(value, str):
        return ParameterType.STRING
    return ParameterType.BLOB


def sql_type_for(tag: ParameterType) -> TypeEngine:
    return _SQL_TYPES[tag]()


@dataclass(frozen=True)
class PreparedStatement:
    """A statement with its markers replaced by typed bind parameters."""

    clause: TextClause
    type_tags: str
    parameter_count: int


def find_markers(statement: str, mysql_syntax: bool = True) -> List[int]:
    """Return the offsets of ``?`` markers that are real placeholders.

    Markers inside quoted strings, quoted identifiers and comments are
    ignored. ``mysql_syntax`` enables ``#`` comments and backslash escapes
    inside literals.

    Raises:
        DatabaseError: (PREPARE) on an unterminated literal or comment.
    """
    positions: List[int] = []
    length = len(statement)
    i = 0

    while i < length:
        char = statement[i]

        if char in ("'", '"', '`'):
            i = _skip_quoted(statement, i, char, backslash_escapes=mysql_syntax)
            continue

        if (char == '-' and statement.startswith('--', i)) or (char == '#' and mysql_syntax):
            end = statement.find('\n', i)
            i = length if end == -1 else end + 1
            continue

        if char == '/' and statement.startswith('/*', i):
            end = statement.find('*/', i + 2)
            if end == -1:
                raise DatabaseError(
                    f"Unterminated block comment at offset {i}",
                    kind=ErrorKind.PREPARE,
                )
            i = end + 2
            continue

        if char == MARKER:
            positions.append(i)
        i += 1

    return positions


def _skip_quoted(statement: str, start: int, quote: str, backslash_escapes: bool) -> int:
    """Return the offset just past the literal opened at ``start``."""
    i = start + 1
    length = len(statement)

    while i < length:
        char = statement[i]
        if char == '\\' and backslash_escapes and quote != '`':
            i += 2
            continue
        if char == quote:
            # A doubled quote is an escaped quote.
            if i + 1 < length and statement[i + 1] == quote:
                i += 2
                continue
            return i + 1
        i += 1

    raise DatabaseError(
        f"Unterminated {quote} literal starting at offset {start}",
        kind=ErrorKind.PREPARE,
    )


def _escape_colons(segment: str) -> str:
    # text() treats ":name" as a bind parameter; literal colons must be escaped.
    return segment.replace(':', '\\:')


def prepare_statement(
    statement: str,
    parameters: Sequence[Any],
    mysql_syntax: bool = True,
) -> PreparedStatement:
    """Rewrite ``?`` markers into typed bind parameters.

    Args:
        statement: SQL text with positional ``?`` markers.
        parameters: Values, in marker order.
        mysql_syntax: Scan with MySQL lexical rules (``#`` comments,
            backslash escapes).

    Returns:
        PreparedStatement ready for ``Connection.execute``.

    Raises:
        DatabaseError: PREPARE if the statement cannot be scanned, BIND if the
            number of markers and values differ.
    """
    markers = find_markers(statement, mysql_syntax=mysql_syntax)
    if len(markers) != len(parameters):
        raise DatabaseError(
            f"Statement has {len(markers)} placeholder(s) but {len(parameters)} "
            f"parameter(s) were supplied",
            kind=ErrorKind.BIND,
        )

    pieces: List[str] = []
    binds = []
    tags = []
    previous = 0

    for index, (position, value) in enumerate(zip(markers, parameters)):
        segment = statement[previous:position]
        pieces.append(_escape_colons(segment))

        # The bind regex refuses names glued to a preceding word character.
        if segment and (segment[-1].isalnum() or segment[-1] in '_$:\\'):
            pieces.append(' ')

        name = f"p{index}"
        pieces.append(f":{name}")

        tag = infer_parameter_type(value)
        tags.append(tag.value)
        if tag is ParameterType.BLOB and not isinstance(value, BYTES_LIKE):
            # Dates, decimals and NULL are adapted by the dialect from the value.
            binds.append(bindparam(name, value))
        else:
            binds.append(bindparam(name, value, type_=sql_type_for(tag)))
        previous = position + 1

    pieces.append(_escape_colons(statement[previous:]))

    clause = text(''.join(pieces))
    if binds:
        clause = clause.bindparams(*binds)

    return PreparedStatement(
        clause=clause,
        type_tags=''.join(tags),
        parameter_count=len(binds),
    )
