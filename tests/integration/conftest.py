#!/usr/bin/env python3
"""
conftest.py
-----------
Shared fixtures for catalog integration tests.

Fixtures:
    runner: Click test runner
    cli_dirs: Temporary database and log locations
    invoke: Invoke the catalogdb CLI against the temporary database
"""
# --- Third-party imports ---
import pytest
from click.testing import CliRunner

# --- Local imports ---
from catalog.cli import cli


@pytest.fixture
def runner():
    """Create Click test runner."""
    return CliRunner()


@pytest.fixture
def cli_dirs(tmp_path):
    """Temporary database path and log directory."""
    return {
        "db_path": tmp_path / "catalog.db",
        "log_dir": tmp_path / "logs",
    }


@pytest.fixture
def invoke(runner, cli_dirs):
    """Invoke the CLI with the temporary database configuration."""

    def _invoke(args, **kwargs):
        base_args = [
            "--db-path", str(cli_dirs["db_path"]),
            "--log-dir", str(cli_dirs["log_dir"]),
        ]
        return runner.invoke(cli, base_args + list(args), obj={}, **kwargs)

    return _invoke
