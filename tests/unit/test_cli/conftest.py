"""Fixtures for CLI tests."""

import json
import logging
import os
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from omnifocus_mcp.cli.main import cli
from omnifocus_mcp.core.omnifocus import OmniFocus


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    for key in list(os.environ):
        if key.startswith("OMNIFOCUS_MCP_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)
    yield
    package_logger = logging.getLogger("omnifocus_mcp")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def cli_runner():
    return CliRunner()


@pytest.fixture
def of_client():
    """Patch the facade every command builds from its config."""
    client = MagicMock(spec=OmniFocus)
    with patch.object(OmniFocus, "from_config", return_value=client):
        yield client


@pytest.fixture
def invoke(cli_runner):
    """Run ``of`` with *args* and return ``(result, parsed_envelope)``."""

    def _invoke(*args):
        result = cli_runner.invoke(cli, list(args))
        envelope = json.loads(result.stdout) if result.stdout.strip() else None
        return result, envelope

    return _invoke
