"""Shared fixtures for unified tool dispatch tests."""

from unittest.mock import MagicMock, patch

import pytest

from omnifocus_mcp.core.omnifocus import OmniFocus


@pytest.fixture
def mock_config():
    """Create a mock ServerConfig."""
    config = MagicMock()
    config.disabled_tools = []
    return config


@pytest.fixture
def mock_client():
    """Patch the facade every handler builds from its config."""
    client = MagicMock(spec=OmniFocus)
    with patch.object(OmniFocus, "from_config", return_value=client):
        yield client


@pytest.fixture
def task_model():
    from omnifocus_mcp.core.omnifocus import Task

    def _make(**overrides):
        return Task.model_validate({"id": "t1", "name": "Buy milk", **overrides})

    return _make
