"""Fixtures for end-to-end CLI tests.

Provides:
  - a test-only `log-demo` command registered on `lendkeep` for logging tests,
  - a CliRunner and an isolated filesystem per test,
  - `cli_env`: environment pointing LENDKEEP_DB_URL at a migrated SQLite file.
"""

import logging

import click
import pytest
from click.testing import CliRunner

from lendkeep.entrypoints.cli.main import lendkeep

# pylint: disable=redefined-outer-name

DEMO_LOGGER = "lendkeep.demo"
THIRD_PARTY_LOGGER = "some.thirdparty"


@click.command()
def log_demo():
    """Log one message per level on a LENDKEEP logger and a third-party one."""
    own = logging.getLogger(DEMO_LOGGER)
    other = logging.getLogger(THIRD_PARTY_LOGGER)
    own.debug("demo debug message")
    own.info("demo info message")
    other.debug("third-party debug message")
    other.info("third-party info message")
    own.warning("demo warning message")
    own.error("demo error message")
    own.critical("demo critical message")
    own.debug("demo trailing debug message")


def _unregister(group, name: str) -> None:
    """Drop `name` from the group and from any help sections click-extra keeps."""
    group.commands.pop(name, None)
    sections = [getattr(group, "_default_section", None)]
    sections += getattr(group, "_sections", [])
    for section in sections:
        getattr(section, "commands", {}).pop(name, None)


@pytest.fixture
def registered_log_demo():
    """Add `log-demo` to the top-level group for the duration of a test."""
    lendkeep.add_command(log_demo, name="log-demo")
    try:
        yield
    finally:
        _unregister(lendkeep, "log-demo")


@pytest.fixture
def runner():
    """Return a Click CliRunner for invoking CLI commands in tests."""
    return CliRunner()


@pytest.fixture
def fs(runner):
    """Run the test inside a temporary working directory."""
    with runner.isolated_filesystem():
        yield


@pytest.fixture
def cli_env(sqlite_url, sqlite_engine_file):  # pylint: disable=unused-argument
    """Environment for commands that need a migrated database.

    The flight recorder is switched off so tests do not write log files into
    the user's log directory.
    """
    return {
        "LENDKEEP_DB_URL": sqlite_url,
        "LENDKEEP_FLIGHT_RECORDER": "0",
        "LENDKEEP_LOAN_PERIOD_DAYS": "14",
        "LENDKEEP_MAX_EXTENSIONS": "2",
    }
