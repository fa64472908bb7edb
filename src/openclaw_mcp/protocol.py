"""
MCP protocol wiring for the bridge.

Builds a low-level ``mcp`` Server whose ``tools/list`` and ``tools/call``
handlers pass straight through to a bridge, converts bridge results into
``mcp.types`` models, and runs the server over stdio until a termination
signal arrives.

Shutdown: on SIGINT/SIGTERM the serving task is cancelled. In-flight tool
calls are dropped, not awaited.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
from typing import Any, Protocol

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from openclaw_mcp.config import LOGGER_NAME, ServerInfo
from openclaw_mcp.types import (
    Base64Source,
    CallResult,
    ContentBlock,
    ImageBlock,
    TextBlock,
    ToolDefinition,
    UrlSource,
)

logger = logging.getLogger(LOGGER_NAME)

DEFAULT_IMAGE_MIME = "application/octet-stream"


class ToolProvider(Protocol):
    def list_tools(self) -> list[ToolDefinition]: ...

    async def call_tool(self, name: str, args: dict[str, Any] | None = None) -> CallResult: ...


# =============================================================================
# Conversion
# =============================================================================


def to_mcp_tool(definition: ToolDefinition) -> types.Tool:
    data = definition.to_dict()
    return types.Tool(
        name=data["name"],
        description=data["description"],
        inputSchema=data["inputSchema"],
    )


def to_mcp_content(
    block: ContentBlock,
) -> types.TextContent | types.ImageContent | types.ResourceLink:
    if isinstance(block, TextBlock):
        return types.TextContent(type="text", text=block.text)

    if isinstance(block, ImageBlock) and isinstance(block.source, Base64Source):
        return types.ImageContent(
            type="image",
            data=block.source.data,
            mimeType=block.source.media_type or DEFAULT_IMAGE_MIME,
        )

    if isinstance(block, ImageBlock) and isinstance(block.source, UrlSource):
        return types.ResourceLink(
            type="resource_link",
            uri=block.source.url,
            name=block.source.url,
            mimeType=block.media_type,
        )

    raise TypeError(f"Unsupported content block: {block!r}")


def to_mcp_result(result: CallResult) -> types.CallToolResult:
    return types.CallToolResult(
        content=[to_mcp_content(block) for block in result.content],
        isError=result.is_error,
    )


# =============================================================================
# Server
# =============================================================================


def create_server(provider: ToolProvider, server_info: ServerInfo) -> Server:
    """Build an MCP server that forwards list/call to ``provider`` unchanged."""
    server: Server = Server(server_info.name, version=server_info.version)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [to_mcp_tool(t) for t in provider.list_tools()]

    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> types.CallToolResult:
        result = await provider.call_tool(name, arguments or {})
        return to_mcp_result(result)

    return server


async def serve_stdio(provider: ToolProvider, server_info: ServerInfo) -> None:
    """Run ``provider`` over MCP stdio until a termination signal or EOF."""
    server = create_server(provider, server_info)
    stop = asyncio.Event()

    loop = asyncio.get_running_loop()
    installed: list[signal.Signals] = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        # add_signal_handler is unavailable on Windows event loops
        with contextlib.suppress(NotImplementedError, RuntimeError):
            loop.add_signal_handler(sig, stop.set)
            installed.append(sig)

    try:
        async with stdio_server() as (read_stream, write_stream):
            run_task = asyncio.create_task(
                server.run(read_stream, write_stream, server.create_initialization_options())
            )
            stop_task = asyncio.create_task(stop.wait())
            done, _ = await asyncio.wait({run_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)

            if stop_task in done:
                logger.info("🛑 termination signal received, shutting down")
            for task in (run_task, stop_task):
                if not task.done():
                    task.cancel()
                    with contextlib.suppress(asyncio.CancelledError):
                        await task
            if run_task in done:
                run_task.result()
    finally:
        for sig in installed:
            loop.remove_signal_handler(sig)


__all__ = ["create_server", "serve_stdio", "to_mcp_content", "to_mcp_result", "to_mcp_tool"]
