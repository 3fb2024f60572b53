"""Tests for placeholder scanning and parameter type inference."""

from __future__ import annotations

import datetime
from decimal import Decimal

import pytest
from sqlalchemy import Float, Integer, LargeBinary, String

from dblink.db.binding import (
    ParameterType,
    find_markers,
    infer_parameter_type,
    prepare_statement,
    sql_type_for,
)
from dblink.exceptions import DatabaseError, ErrorKind


@pytest.mark.parametrize(
    "value, expected",
    [
        (7, ParameterType.INTEGER),
        (-1, ParameterType.INTEGER),
        (True, ParameterType.INTEGER),
        (2.5, ParameterType.DOUBLE),
        (float("nan"), ParameterType.DOUBLE),
        ("42", ParameterType.STRING),
        ("", ParameterType.STRING),
        (b"\x00", ParameterType.BLOB),
        (None, ParameterType.BLOB),
        (Decimal("1.5"), ParameterType.BLOB),
        (datetime.date(2024, 1, 1), ParameterType.BLOB),
        ([1, 2], ParameterType.BLOB),
    ],
)
def test_infer_parameter_type(value, expected) -> None:
    assert infer_parameter_type(value) is expected


def test_sql_types() -> None:
    assert isinstance(sql_type_for(ParameterType.INTEGER), Integer)
    assert isinstance(sql_type_for(ParameterType.DOUBLE), Float)
    assert isinstance(sql_type_for(ParameterType.STRING), String)
    assert isinstance(sql_type_for(ParameterType.BLOB), LargeBinary)


class TestFindMarkers:
    """Locating real ``?`` placeholders."""

    def test_plain_markers(self) -> None:
        statement = "SELECT * FROM t WHERE a = ? AND b = ?"
        assert find_markers(statement) == [26, 36]

    def test_markers_inside_literals_are_ignored(self) -> None:
        statement = "SELECT 'a?', \"b?\", `c?` FROM t WHERE d = ?"
        assert find_markers(statement) == [len(statement) - 1]

    def test_doubled_quotes(self) -> None:
        statement = "SELECT 'it''s ?' , ?"
        assert find_markers(statement) == [len(statement) - 1]

    def test_comments_are_ignored(self) -> None:
        statement = "SELECT ? -- what?\n, /* why? */ ? # how?\n"
        markers = find_markers(statement)
        assert len(markers) == 2

    def test_hash_is_not_a_comment_outside_mysql(self) -> None:
        statement = "SELECT 1 # ?"
        assert find_markers(statement, mysql_syntax=True) == []
        assert find_markers(statement, mysql_syntax=False) == [len(statement) - 1]

    def test_backslash_escapes_are_mysql_only(self) -> None:
        mysql = r"SELECT 'a\'?' , ?"
        assert find_markers(mysql, mysql_syntax=True) == [len(mysql) - 1]

        standard = "SELECT 'C:\\' , ?"
        assert find_markers(standard, mysql_syntax=False) == [len(standard) - 1]

    def test_unterminated_literal(self) -> None:
        with pytest.raises(DatabaseError) as excinfo:
            find_markers("SELECT 'abc")
        assert excinfo.value.kind == ErrorKind.PREPARE

    def test_unterminated_comment(self) -> None:
        with pytest.raises(DatabaseError) as excinfo:
            find_markers("SELECT 1 /* never closed ?")
        assert excinfo.value.kind == ErrorKind.PREPARE


class TestPrepareStatement:
    """Rewriting markers into typed bind parameters."""

    def test_type_tags_follow_parameter_order(self) -> None:
        prepared = prepare_statement(
            "INSERT INTO t VALUES (?, ?, ?, ?)",
            [1, 1.5, "x", object()],
        )

        assert prepared.type_tags == "idsb"
        assert prepared.parameter_count == 4

    def test_bind_parameters_carry_values_and_types(self) -> None:
        prepared = prepare_statement("SELECT * FROM t WHERE a = ? AND b = ?", [3, "y"])

        binds = prepared.clause._bindparams
        assert binds["p0"].value == 3
        assert isinstance(binds["p0"].type, Integer)
        assert binds["p1"].value == "y"
        assert isinstance(binds["p1"].type, String)

    def test_binary_fallback_types_only_bytes(self) -> None:
        prepared = prepare_statement("SELECT ?, ?, ?", [b"raw", datetime.date(2024, 1, 2), Decimal("1.5")])

        binds = prepared.clause._bindparams
        assert prepared.type_tags == "bbb"
        assert isinstance(binds["p0"].type, LargeBinary)
        assert not isinstance(binds["p1"].type, LargeBinary)
        assert not isinstance(binds["p2"].type, LargeBinary)
        assert binds["p1"].value == datetime.date(2024, 1, 2)

    def test_rewritten_text(self) -> None:
        prepared = prepare_statement("SELECT ? AS a, '1:2' AS b", [1])

        assert prepared.clause.text == "SELECT :p0 AS a, '1\\:2' AS b"

    def test_marker_glued_to_word_gets_separated(self) -> None:
        prepared = prepare_statement("SELECT 1 FROM t LIMIT?", [1])

        assert prepared.clause.text == "SELECT 1 FROM t LIMIT :p0"

    def test_count_mismatch(self) -> None:
        with pytest.raises(DatabaseError) as excinfo:
            prepare_statement("SELECT ?", [1, 2])

        assert excinfo.value.kind == ErrorKind.BIND
        assert "1 placeholder(s) but 2 parameter(s)" in excinfo.value.message
