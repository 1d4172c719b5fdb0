"""Tests for the discovery tool."""

from omnifocus_mcp.tools.unified.discovery import TOOL_ROUTERS, _dispatch_discover_action


def _call(action, config, **payload):
    return _dispatch_discover_action(action=action, payload=payload, config=config)


class TestDiscoverSearch:
    def test_matches_tool_action_and_summary(self, mock_config):
        result = _call("search", mock_config, pattern="STAT")
        pairs = {(m["tool"], m["action"]) for m in result["data"]["matches"]}
        assert {("task", "stats"), ("project", "stats"), ("tag", "stats")} <= pairs
        assert result["data"]["count"] == len(result["data"]["matches"])

    def test_summary_match(self, mock_config):
        result = _call("search", mock_config, pattern="window")
        assert any(m["tool"] == "perspective" for m in result["data"]["matches"])

    def test_invalid_regex(self, mock_config):
        result = _call("search", mock_config, pattern="[unclosed")
        assert result["success"] is False
        assert result["data"]["error_code"] == "INVALID_REGEX_PATTERN"
        assert result["data"]["details"]["field"] == "pattern"

    def test_pattern_required(self, mock_config):
        assert _call("search", mock_config)["data"]["error_code"] == "MISSING_REQUIRED"

    def test_disabled_tools_hidden(self, mock_config):
        mock_config.disabled_tools = ["tag"]
        result = _call("search", mock_config, pattern="stats")
        assert all(m["tool"] != "tag" for m in result["data"]["matches"])


class TestDiscoverDescribe:
    def test_describe_all(self, mock_config):
        result = _call("describe", mock_config)
        assert set(result["data"]["tools"]) == set(TOOL_ROUTERS)
        assert "list" in result["data"]["tools"]["task"]

    def test_describe_one(self, mock_config):
        result = _call("describe", mock_config, tool_name="inbox")
        assert result["data"]["tool"] == "inbox"
        assert list(result["data"]["actions"]) == ["list", "count"]

    def test_unknown_tool(self, mock_config):
        result = _call("describe", mock_config, tool_name="calendar")
        assert result["data"]["error_code"] == "NOT_FOUND"
        assert result["error"] == "Tool 'calendar' not found"
