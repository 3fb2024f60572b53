"""Basic tests for the dblink package."""

import dblink
from dblink.db.results import OperationResult
from dblink.exceptions import DatabaseError, ErrorKind


class TestPackageBasics:
    """Test basic package functionality."""

    def test_package_version(self) -> None:
        """Test that package has a version."""
        assert isinstance(dblink.__version__, str)
        assert len(dblink.__version__) > 0

    def test_package_exports(self) -> None:
        """Test that package exports expected classes."""
        for name in ('DblinkError', 'ConfigurationError', 'DatabaseError', 'ConnectionManager', 'QueryExecutor'):
            assert hasattr(dblink, name)


class TestOperationResult:
    """Boolean-compatible results."""

    def test_truthiness(self) -> None:
        assert OperationResult.ok()
        assert not OperationResult.failed(DatabaseError("boom"))

    def test_raise_for_error(self) -> None:
        error = DatabaseError("boom", kind=ErrorKind.LIVENESS)

        OperationResult.ok().raise_for_error()
        try:
            OperationResult.failed(error).raise_for_error()
        except DatabaseError as exc:
            assert exc is error
        else:
            raise AssertionError("expected DatabaseError")


class TestDatabaseError:
    """Native diagnostic extraction."""

    def test_pymysql_style_arguments(self) -> None:
        class FakeOperationalError(Exception):
            pass

        wrapper = Exception("wrapped")
        wrapper.orig = FakeOperationalError(1045, "Access denied for user 'app'@'localhost'")

        error = DatabaseError.from_driver_error("Failed to connect", wrapper, kind=ErrorKind.CONNECT)

        assert error.code == 1045
        assert error.native_message == "Access denied for user 'app'@'localhost'"
        assert error.kind == ErrorKind.CONNECT
        assert error.message == "Failed to connect: Access denied for user 'app'@'localhost'"

    def test_plain_exception(self) -> None:
        error = DatabaseError.from_driver_error("Oops", ValueError("bad value"), kind=ErrorKind.BIND)

        assert error.code is None
        assert error.native_message == "bad value"
