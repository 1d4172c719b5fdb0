"""Shared fixtures for core OmniFocus layer tests."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from omnifocus_mcp.core.omnifocus import OmniFocus


@pytest.fixture
def now():
    return datetime(2024, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def runner():
    """A ScriptRunner stand-in; set ``runner.execute.return_value`` per test."""
    return MagicMock()


@pytest.fixture
def client(runner):
    return OmniFocus(runner=runner)


def task_record(**overrides):
    record = {
        "id": "t1",
        "name": "Buy milk",
        "note": None,
        "completed": False,
        "dropped": False,
        "effectivelyActive": True,
        "flagged": False,
        "project": None,
        "tags": [],
        "defer": None,
        "due": None,
        "estimatedMinutes": None,
        "completionDate": None,
        "added": "2024-06-01T09:00:00.000Z",
        "modified": "2024-06-01T09:00:00.000Z",
    }
    record.update(overrides)
    return record


@pytest.fixture
def make_task():
    """Factory for serialized task records as the bridge returns them."""
    return task_record
