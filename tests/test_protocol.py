"""Tests for the MCP protocol wiring.

Drives the low-level server through an in-memory MCP client session, so the
tools/list and tools/call handlers are exercised exactly as a real client
would see them, without stdio.
Run with: uv run pytest tests/test_protocol.py -v
"""

from unittest.mock import AsyncMock

import pytest
from mcp import types
from mcp.shared.memory import create_connected_server_and_client_session

from openclaw_mcp.bridge import McpBridge
from openclaw_mcp.config import BridgeOptions, ServerInfo
from openclaw_mcp.protocol import create_server, to_mcp_content, to_mcp_result
from openclaw_mcp.types import Base64Source, CallResult, ImageBlock, TextBlock, UrlSource

SERVER_INFO = ServerInfo(name="openclaw-mcp-test", version="9.9.9")


@pytest.fixture
def transport():
    mock = AsyncMock()
    mock.request = AsyncMock()
    return mock


@pytest.fixture
def bridge(transport):
    return McpBridge(BridgeOptions(transport=transport, server_info=SERVER_INFO))


class TestConversion:
    """Bridge blocks to mcp.types models."""

    def test_text(self):
        content = to_mcp_content(TextBlock("hi"))

        assert isinstance(content, types.TextContent)
        assert content.text == "hi"

    def test_base64_image(self):
        content = to_mcp_content(ImageBlock(source=Base64Source(data="aGk=", media_type="image/png")))

        assert isinstance(content, types.ImageContent)
        assert content.data == "aGk="
        assert content.mimeType == "image/png"

    def test_url_image(self):
        content = to_mcp_content(ImageBlock(source=UrlSource(url="https://x.test/a.png"), media_type="image/png"))

        assert isinstance(content, types.ResourceLink)
        assert str(content.uri) == "https://x.test/a.png"
        assert content.mimeType == "image/png"

    def test_error_flag(self):
        result = to_mcp_result(CallResult.error("Unknown tool: x"))

        assert result.isError is True
        assert result.content[0].text == "Unknown tool: x"


class TestServerWiring:
    """tools/list and tools/call pass through unchanged."""

    def test_server_identity(self, bridge):
        server = create_server(bridge, SERVER_INFO)
        options = server.create_initialization_options()

        assert server.name == "openclaw-mcp-test"
        assert options.server_version == "9.9.9"

    @pytest.mark.asyncio
    async def test_list_tools(self, bridge):
        server = create_server(bridge, SERVER_INFO)

        async with create_connected_server_and_client_session(server) as client:
            result = await client.list_tools()

        assert [t.name for t in result.tools] == ["chat"]
        assert result.tools[0].inputSchema["required"] == ["message"]

    @pytest.mark.asyncio
    async def test_call_chat(self, bridge, transport):
        transport.request.return_value = {
            "message": {"content": [{"type": "text", "text": "Hello back!"}]},
        }
        server = create_server(bridge, SERVER_INFO)

        async with create_connected_server_and_client_session(server) as client:
            result = await client.call_tool("chat", {"message": "Hello"})

        assert result.isError is False
        assert result.content[0].text == "Hello back!"
        transport.request.assert_awaited_once_with(
            "chat.send",
            {"sessionKey": "agent:main:main", "message": "Hello"},
            expect_final=True,
        )

    @pytest.mark.asyncio
    async def test_call_unknown_tool(self, bridge, transport):
        server = create_server(bridge, SERVER_INFO)

        async with create_connected_server_and_client_session(server) as client:
            result = await client.call_tool("nonexistent", {})

        assert result.isError is True
        assert result.content[0].text == "Unknown tool: nonexistent"
        transport.request.assert_not_called()
