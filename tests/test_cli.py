"""Tests for CLI commands."""

import re
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner, Result

import dblink
from dblink.cli.main import cli
from dblink.cli.utils import coerce_parameter


def strip_ansi(text: str) -> str:
    """Remove ANSI escape codes from text."""
    ansi_escape = re.compile(r'\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])')
    return ansi_escape.sub('', text)


def plain(text: str) -> str:
    """Strip ANSI codes and collapse the line wrapping rich applies."""
    return " ".join(strip_ansi(text).split())


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """A configuration file pointing at a fresh SQLite database."""
    path = tmp_path / "dblink.yaml"
    path.write_text(yaml.safe_dump({
        'databases': {
            'local': {'type': 'sqlite', 'path': str(tmp_path / "cli.db")},
        },
    }), encoding="utf-8")
    return path


def run(*args: str) -> Result:
    return CliRunner().invoke(cli, list(args))


class TestBasics:
    """Help and version output."""

    def test_help(self) -> None:
        result = run('--help')

        assert result.exit_code == 0
        assert 'dblink' in result.output

    def test_version(self) -> None:
        result = run('--version')

        assert result.exit_code == 0
        assert dblink.__version__ in result.output


class TestQueryCommand:
    """Running statements from the command line."""

    def test_round_trip(self, config_file: Path) -> None:
        created = run('--config', str(config_file), 'query', 'CREATE TABLE people (id INTEGER PRIMARY KEY, name TEXT)')
        inserted = run('--config', str(config_file), 'query', 'INSERT INTO people (name) VALUES (?)', '-p', 'Alice')
        selected = run('--config', str(config_file), 'query', 'SELECT id, name FROM people')

        assert created.exit_code == 0, created.output
        assert inserted.exit_code == 0, inserted.output
        assert 'affected rows: 1' in plain(inserted.output)
        assert 'insert id: 1' in plain(inserted.output)
        assert selected.exit_code == 0, selected.output
        assert 'Alice' in selected.output
        assert '1 row(s)' in plain(selected.output)

    def test_failure_exit_code(self, config_file: Path) -> None:
        result = run('--config', str(config_file), 'query', 'SELECT * FROM nowhere')

        assert result.exit_code == 1
        assert 'Query failed' in plain(result.output)

    def test_unknown_database(self, config_file: Path) -> None:
        result = run('--config', str(config_file), '--db', 'missing', 'query', 'SELECT 1')

        assert result.exit_code == 1
        assert "not found in configuration" in plain(result.output)


def test_ping(config_file: Path) -> None:
    result = run('--config', str(config_file), 'ping')

    assert result.exit_code == 0, result.output
    output = plain(result.output)
    assert 'sqlite' in output
    assert 'True' in output


def test_config_sample_and_validate(tmp_path: Path) -> None:
    sample = tmp_path / "sample.yaml"

    created = run('config', 'sample', str(sample))
    validated = run('config', 'validate', str(sample))

    assert created.exit_code == 0
    assert sample.exists()
    assert validated.exit_code == 0
    assert 'is valid' in plain(validated.output)


@pytest.mark.parametrize(
    "raw, expected",
    [("42", 42), ("-3", -3), ("2.5", 2.5), ("Alice", "Alice"), ("", "")],
)
def test_coerce_parameter(raw: str, expected) -> None:
    value = coerce_parameter(raw)

    assert value == expected
    assert type(value) is type(expected)


def test_config_validate_rejects_invalid_file(tmp_path: Path) -> None:
    path = tmp_path / "broken.yaml"
    path.write_text(yaml.safe_dump({'databases': {'main': {'type': 'oracle'}}}), encoding="utf-8")

    result = run('config', 'validate', str(path))

    assert result.exit_code == 1
    assert 'Configuration validation failed' in plain(result.output)
