"""Tests for the console entry point wiring."""

from openclaw_mcp import __version__
from openclaw_mcp.bridge import McpBridge
from openclaw_mcp.server import build_bridge, main


class TestBuildBridge:
    """Environment configuration reaches the bridge and transport."""

    def test_entry_point_importable(self):
        assert callable(main)
        assert __version__

    def test_env_threaded_through(self, monkeypatch):
        monkeypatch.setenv("OPENCLAW_BIN", "my-openclaw")
        monkeypatch.setenv("OPENCLAW_SESSION_KEY", "agent:env:main")
        monkeypatch.setenv("OPENCLAW_CLI_TIMEOUT", "5")
        monkeypatch.setenv("OPENCLAW_MCP_VERBOSE", "0")

        bridge = build_bridge()

        assert isinstance(bridge, McpBridge)
        assert bridge.default_session_key == "agent:env:main"
        assert bridge._transport.bin == "my-openclaw"
        assert bridge._transport.timeout == 5.0
        assert bridge._verbose is False
        assert bridge._server_info.name == "openclaw-mcp"
