"""Tests for server creation and tool registration."""

import inspect

from omnifocus_mcp.config import ServerConfig
from omnifocus_mcp.server import create_server

ALL_TOOLS = {"task", "inbox", "project", "tag", "folder", "perspective", "discover"}


def _tools(server):
    return {tool.name: tool for tool in server._tool_manager.list_tools()}


def test_all_tools_registered():
    server = create_server(ServerConfig())
    assert set(_tools(server)) == ALL_TOOLS


def test_disabled_tools_skipped():
    server = create_server(ServerConfig(disabled_tools=["perspective", "discover"]))
    assert set(_tools(server)) == ALL_TOOLS - {"perspective", "discover"}


def test_server_name_from_config():
    server = create_server(ServerConfig(server_name="of-test"))
    assert server.name == "of-test"


def test_task_tool_parameters():
    tool = _tools(create_server(ServerConfig()))["task"]
    properties = tool.parameters["properties"]
    for name in ("action", "task_id", "tags", "clear_defer", "clear_due", "estimated_minutes"):
        assert name in properties
    assert tool.parameters["required"] == ["action"]


def test_tool_wrapper_keeps_signature():
    tool = _tools(create_server(ServerConfig()))["project"]
    params = inspect.signature(tool.fn).parameters
    assert "config" not in params
    assert "project_id" in params
