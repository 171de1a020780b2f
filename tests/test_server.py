"""Tests for the MCP server tools.

Functions decorated with @mcp.tool() may be wrapped as FunctionTool objects,
so tool behaviour is tested through the module helpers they delegate to.
"""
from unittest.mock import MagicMock, patch

import pytest

import winget_mcp.server as server
from winget_mcp.config import Config
from winget_mcp.errors import (
    ErrorSignatureDetected,
    MalformedRow,
    MissingSeparator,
    WingetNotFoundError,
)
from winget_mcp.server import ToolError
from winget_mcp.winget_client import WingetClient


def _tool_description(tool) -> str:
    return getattr(tool, "description", None) or tool.__doc__ or ""


class TestDescribeError:
    """Failures become readable tool errors."""

    def test_error_signature(self):
        e = ErrorSignatureDetected("No package found matching input criteria.", 0)
        assert server._describe_error(e) == "winget reported: No package found matching input criteria."

    def test_parse_failure_names_reason(self):
        msg = server._describe_error(MissingSeparator("no dash separator line in 2 lines"))
        assert "missing_separator" in msg

    def test_malformed_row(self):
        msg = server._describe_error(MalformedRow("line 4: too short", line_index=4, line="x"))
        assert "malformed_row" in msg
        assert "line 4" in msg

    def test_invocation_error(self):
        assert "not found" in server._describe_error(WingetNotFoundError("winget executable not found: winget"))


class TestRunQuery:
    """Client calls are wrapped and failures converted."""

    def test_returns_records(self):
        records = [{"Name": "Git", "Id": "Git.Git"}]
        assert server._run_query("test", lambda: records) == records

    def test_winget_error_becomes_tool_error(self):
        def failing():
            raise ErrorSignatureDetected("Failed when searching source", 2)

        with pytest.raises(ToolError, match="Failed when searching source"):
            server._run_query("test", failing)

    def test_other_errors_propagate(self):
        def broken():
            raise KeyError("bug")

        with pytest.raises(KeyError):
            server._run_query("test", broken)


class TestValidateCount:

    def test_none_allowed(self):
        server._validate_count(None)

    def test_bounds(self):
        server._validate_count(1)
        server._validate_count(server.MAX_SEARCH_COUNT)
        with pytest.raises(ToolError):
            server._validate_count(0)
        with pytest.raises(ToolError):
            server._validate_count(server.MAX_SEARCH_COUNT + 1)


class TestGetClient:
    """Lazy client construction from config."""

    def test_builds_client_with_bundled_signatures(self, monkeypatch):
        config = Config(
            winget_path="winget.exe",
            command_timeout=12.0,
            error_signatures_path=None,
            accept_source_agreements=False,
            force_utf8_console=False,
            default_source="winget",
            log_level="INFO",
        )
        monkeypatch.setattr(server, "_client", None)
        with patch("winget_mcp.server.Config.load", return_value=config):
            client = server._get_client()
            assert server._get_client() is client

        assert isinstance(client, WingetClient)
        assert client.executable == "winget.exe"
        assert client.timeout == 12.0
        assert client.accept_source_agreements is False
        assert client.force_utf8 is False
        assert client.default_source == "winget"
        assert "No package found matching input criteria." in client.error_signatures

    def test_config_problems_logged(self, monkeypatch, caplog):
        config = Config(
            winget_path="winget",
            command_timeout=0,
            error_signatures_path=None,
            accept_source_agreements=True,
            force_utf8_console=False,
            default_source=None,
            log_level="INFO",
        )
        monkeypatch.setattr(server, "_client", None)
        monkeypatch.setattr("winget_mcp.config.shutil.which", lambda name: "/usr/bin/winget")
        with patch("winget_mcp.server.Config.load", return_value=config), \
             caplog.at_level("WARNING", logger="winget_mcp.server"):
            server._get_client()
        assert "command_timeout must be positive" in caplog.text

    def test_fake_client_used_by_queries(self, monkeypatch, list_records):
        fake = MagicMock()
        fake.list_upgrades.return_value = list_records
        monkeypatch.setattr(server, "_client", fake)

        records = server._run_query(
            "list_upgradable_packages",
            lambda: server._get_client().list_upgrades(include_unknown=True),
        )
        assert records == list_records
        fake.list_upgrades.assert_called_once_with(include_unknown=True)


class TestToolDescriptions:
    """Tool docstrings document their parameters for MCP clients."""

    def test_search_packages(self):
        desc = _tool_description(server.search_packages).lower()
        assert "query" in desc
        assert "exact" in desc
        assert "count" in desc

    def test_list_installed_packages(self):
        desc = _tool_description(server.list_installed_packages).lower()
        assert "installed" in desc
        assert "source" in desc

    def test_list_upgradable_packages(self):
        assert "include_unknown" in _tool_description(server.list_upgradable_packages)

    def test_list_sources(self):
        assert "source" in _tool_description(server.list_sources).lower()
