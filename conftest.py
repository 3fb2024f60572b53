from __future__ import annotations

from pathlib import Path

import pytest

from dblink.db import ConnectionManager


@pytest.fixture
def sqlite_path(tmp_path: Path) -> Path:
    """Path of a fresh SQLite database file."""
    return tmp_path / "dblink_test.db"


@pytest.fixture
def sqlite_manager(sqlite_path: Path) -> ConnectionManager:
    """An open manager on a SQLite database with a small ``users`` table."""
    manager = ConnectionManager("", "", "", str(sqlite_path), db_type="sqlite")
    assert manager.open()

    connection = manager.get_connection()
    connection.exec_driver_sql(
        "CREATE TABLE users (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT NOT NULL, age INTEGER)"
    )
    connection.exec_driver_sql(
        "INSERT INTO users (name, age) VALUES ('Alice', 30), ('Bob', 25), ('Carol', 41)"
    )

    try:
        yield manager
    finally:
        manager.close()
