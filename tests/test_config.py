"""Tests for environment-driven configuration."""

from pathlib import Path

import pytest

from strava_distance.config import DEFAULT_PER_PAGE, DEFAULT_TIMEOUT, AppConfig
from strava_distance.exceptions import ConfigurationError

ENV_VARS = [
    "STRAVA_CLIENT_ID",
    "STRAVA_CLIENT_SECRET",
    "STRAVA_ACCESS_TOKEN",
    "STRAVA_PER_PAGE",
    "STRAVA_TIMEOUT",
    "STRAVA_MAX_RETRIES",
    "STRAVA_LOG_FILE",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = AppConfig.from_env()
    assert config == AppConfig()
    assert config.per_page == DEFAULT_PER_PAGE
    assert config.timeout == DEFAULT_TIMEOUT
    assert config.max_retries == 0
    assert config.log_file is None


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("STRAVA_CLIENT_ID", "123")
    monkeypatch.setenv("STRAVA_CLIENT_SECRET", "secret")
    monkeypatch.setenv("STRAVA_ACCESS_TOKEN", "tok")
    monkeypatch.setenv("STRAVA_PER_PAGE", "50")
    monkeypatch.setenv("STRAVA_TIMEOUT", "2.5")
    monkeypatch.setenv("STRAVA_MAX_RETRIES", "3")
    monkeypatch.setenv("STRAVA_LOG_FILE", "logs/run.log")

    config = AppConfig.from_env()

    assert config.client_id == "123"
    assert config.client_secret == "secret"
    assert config.access_token == "tok"
    assert config.per_page == 50
    assert config.timeout == 2.5
    assert config.max_retries == 3
    assert config.log_file == Path("logs/run.log")


def test_empty_strings_are_unset(monkeypatch):
    monkeypatch.setenv("STRAVA_ACCESS_TOKEN", "")
    monkeypatch.setenv("STRAVA_PER_PAGE", "  ")
    config = AppConfig.from_env()
    assert config.access_token is None
    assert config.per_page == DEFAULT_PER_PAGE


@pytest.mark.parametrize("name,value", [("STRAVA_PER_PAGE", "lots"), ("STRAVA_TIMEOUT", "1s"), ("STRAVA_MAX_RETRIES", "-1")])
def test_bad_numbers(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigurationError, match=name):
        AppConfig.from_env()


@pytest.mark.parametrize(
    "name,value", [("STRAVA_TIMEOUT", "0"), ("STRAVA_TIMEOUT", "0.0"), ("STRAVA_PER_PAGE", "0")]
)
def test_zero_is_rejected_where_positive_required(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigurationError, match="greater than zero"):
        AppConfig.from_env()


def test_zero_retries_is_allowed(monkeypatch):
    monkeypatch.setenv("STRAVA_MAX_RETRIES", "0")
    assert AppConfig.from_env().max_retries == 0
