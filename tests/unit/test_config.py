"""Unit tests for lendkeep.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from lendkeep import config
from lendkeep.domain.policy import LendingPolicy

# pylint: disable=magic-value-comparison


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Start every test with no LENDKEEP_* settings."""
    for name in (
        config.DB_URL_ENVVAR,
        config.LOAN_PERIOD_ENVVAR,
        config.MAX_EXTENSIONS_ENVVAR,
        config.SWEEP_INTERVAL_ENVVAR,
    ):
        monkeypatch.delenv(name, raising=False)


def test_get_db_url_reads_env(monkeypatch):
    """The URL comes from LENDKEEP_DB_URL."""
    monkeypatch.setenv("LENDKEEP_DB_URL", "sqlite:///lend.db")
    assert config.get_db_url() == "sqlite:///lend.db"


def test_get_db_url_missing():
    """Unset URL raises DatabaseUrlNotSetError."""
    with pytest.raises(config.DatabaseUrlNotSetError):
        config.get_db_url()


def test_policy_defaults():
    """Without settings the policy is 14 days and 2 extensions."""
    assert config.get_lending_policy() == LendingPolicy(14, 2)


def test_policy_from_env(monkeypatch):
    """Both policy values can be overridden."""
    monkeypatch.setenv("LENDKEEP_LOAN_PERIOD_DAYS", "21")
    monkeypatch.setenv("LENDKEEP_MAX_EXTENSIONS", "0")
    assert config.get_lending_policy() == LendingPolicy(21, 0)


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("LENDKEEP_LOAN_PERIOD_DAYS", "two weeks"),
        ("LENDKEEP_LOAN_PERIOD_DAYS", "0"),
        ("LENDKEEP_MAX_EXTENSIONS", "-1"),
    ],
)
def test_policy_rejects_bad_values(monkeypatch, name, value):
    """Unparseable or out-of-range values raise InvalidSettingError."""
    monkeypatch.setenv(name, value)
    with pytest.raises(config.InvalidSettingError) as excinfo:
        config.get_lending_policy()
    assert excinfo.value.name == name
    assert value in str(excinfo.value)


def test_sweep_interval(monkeypatch):
    """Default one hour, overridable in seconds."""
    assert config.get_sweep_interval() == 3600.0
    monkeypatch.setenv("LENDKEEP_SWEEP_INTERVAL", "90.5")
    assert config.get_sweep_interval() == 90.5


@pytest.mark.parametrize("value", ["soon", "0", "-5"])
def test_sweep_interval_rejects_bad_values(monkeypatch, value):
    """The interval must be a positive number."""
    monkeypatch.setenv("LENDKEEP_SWEEP_INTERVAL", value)
    with pytest.raises(config.InvalidSettingError):
        config.get_sweep_interval()


def test_build_alembic_config_points_at_packaged_scripts():
    """The script location is the packaged migrations directory."""
    cfg = config.build_alembic_config("sqlite:///x.db")
    assert cfg.get_main_option("sqlalchemy.url") == "sqlite:///x.db"
    location = Path(cfg.get_main_option("script_location"))
    assert (location / "env.py").is_file()
    assert (location / "versions").is_dir()


def test_build_alembic_config_without_url():
    """No URL is set when none is given."""
    assert config.build_alembic_config().get_main_option("sqlalchemy.url") is None
