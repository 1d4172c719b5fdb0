"""Shared dispatch contract tests for all unified tool routers.

Each router is described by a baseline entry; the tests are generated via
parametrize.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

from omnifocus_mcp.core.errors import (
    AmbiguousMatchError,
    BridgeTimeoutError,
    NotFoundError,
    PreconditionError,
)

# Each entry: (module_name, dispatch_fn_name, router_const_name, tool_name, valid_action)
DISPATCH_BASELINES = [
    ("task", "_dispatch_task_action", "_TASK_ROUTER", "task", "list"),
    ("inbox", "_dispatch_inbox_action", "_INBOX_ROUTER", "inbox", "count"),
    ("project", "_dispatch_project_action", "_PROJECT_ROUTER", "project", "list"),
    ("tag", "_dispatch_tag_action", "_TAG_ROUTER", "tag", "stats"),
    ("folder", "_dispatch_folder_action", "_FOLDER_ROUTER", "folder", "list"),
    ("perspective", "_dispatch_perspective_action", "_PERSPECTIVE_ROUTER", "perspective", "list"),
    ("discovery", "_dispatch_discover_action", "_DISCOVER_ROUTER", "discover", "describe"),
]

_BASELINE_IDS = [entry[0] for entry in DISPATCH_BASELINES]


def _import(module_name: str, attr: str):
    """Import *attr* from ``omnifocus_mcp.tools.unified.<module_name>``."""
    mod = __import__(f"omnifocus_mcp.tools.unified.{module_name}", fromlist=[attr])
    return getattr(mod, attr)


def assert_error_envelope(response: dict) -> None:
    """Assert response-v2 error envelope invariants."""
    assert isinstance(response, dict), "Response must be a dict"
    assert response["success"] is False
    assert isinstance(response["error"], str) and response["error"]
    assert isinstance(response["data"], dict)
    assert response["meta"]["version"] == "response-v2"
    assert "error_code" in response["data"]
    assert "error_type" in response["data"]


class TestUnsupportedActionEnvelope:
    """Every router produces a VALIDATION_ERROR envelope for unknown actions."""

    @pytest.mark.parametrize("module_name, dispatch_fn, router_const, tool_name, valid_action", DISPATCH_BASELINES, ids=_BASELINE_IDS)
    def test_unsupported_action(self, mock_config, module_name, dispatch_fn, router_const, tool_name, valid_action):
        result = _import(module_name, dispatch_fn)(action="nonexistent-action", payload={}, config=mock_config)
        assert_error_envelope(result)
        assert "unsupported" in result["error"].lower()
        assert tool_name in result["error"]
        assert result["data"]["error_code"] == "VALIDATION_ERROR"
        assert result["data"]["details"]["action"] == "nonexistent-action"
        assert valid_action in result["data"]["details"]["allowed_actions"]


class TestInternalErrorEnvelope:
    """Every router produces an INTERNAL_ERROR envelope for unexpected exceptions."""

    @pytest.mark.parametrize("module_name, dispatch_fn, router_const, tool_name, valid_action", DISPATCH_BASELINES, ids=_BASELINE_IDS)
    def test_internal_error(self, mock_config, module_name, dispatch_fn, router_const, tool_name, valid_action):
        with patch(f"omnifocus_mcp.tools.unified.{module_name}.{router_const}") as mock_router:
            mock_router.allowed_actions.return_value = [valid_action]
            mock_router.dispatch.side_effect = RuntimeError("boom")
            result = _import(module_name, dispatch_fn)(action=valid_action, payload={}, config=mock_config)

        assert_error_envelope(result)
        assert result["data"]["error_code"] == "INTERNAL_ERROR"
        assert result["data"]["error_type"] == "internal"
        assert result["data"]["details"] == {"action": valid_action, "error_type": "RuntimeError"}


class TestMappedErrors:
    """Domain exceptions keep their own code and HTTP analog."""

    @pytest.mark.parametrize(
        "exc, code, error_type, status",
        [
            (NotFoundError("Task not found: x"), "NOT_FOUND", "not_found", 404),
            (AmbiguousMatchError("Multiple tags named \"A\"", candidates=["X/A", "Y/A"]), "AMBIGUOUS_MATCH", "validation", 400),
            (PreconditionError("No OmniFocus window is open"), "PRECONDITION_FAILED", "unavailable", 503),
            (BridgeTimeoutError("too slow", timeout=30.0), "BRIDGE_TIMEOUT", "unavailable", 503),
        ],
    )
    def test_domain_error(self, mock_config, mock_client, exc, code, error_type, status):
        from omnifocus_mcp.tools.unified.task import _dispatch_task_action

        mock_client.get_task.side_effect = exc
        result = _dispatch_task_action(action="get", payload={"task_id": "x"}, config=mock_config)

        assert_error_envelope(result)
        assert result["error"] == str(exc)
        assert result["data"]["error_code"] == code
        assert result["data"]["error_type"] == error_type
        assert result["data"]["status_code"] == status

    def test_ambiguous_lists_candidates(self, mock_config, mock_client):
        from omnifocus_mcp.tools.unified.tag import _dispatch_tag_action

        mock_client.get_tag.side_effect = AmbiguousMatchError("Multiple tags", candidates=["Work/A", "Home/A"])
        result = _dispatch_tag_action(action="get", payload={"tag_id": "A"}, config=mock_config)
        assert result["data"]["details"]["candidates"] == ["Work/A", "Home/A"]
