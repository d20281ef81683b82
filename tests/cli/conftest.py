"""Shared fixtures for CLI tests."""

import pytest
from typer.testing import CliRunner

from splitfetch.cli.app import create_cli_app
from splitfetch.config.settings import Environment, LogLevel, Settings


@pytest.fixture
def cli_runner():
    """Provide Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def test_settings():
    """Provide test Settings with known values."""
    return Settings(
        environment=Environment.TESTING,
        log_level=LogLevel.CRITICAL,
        block_count=4,
        buffer_size=512,
        durable_writes=False,
    )


@pytest.fixture
def test_app(test_settings):
    """Provide CLI app with test settings injected."""
    return create_cli_app(settings=test_settings)


@pytest.fixture
def output_path(tmp_path):
    return tmp_path / "downloads" / "resource.bin"
