"""
Bridge between MCP clients and the OpenClaw gateway.

The bridge owns the tool registry: the built-in ``chat`` tool plus whatever
the gateway advertises through ``tools.list``. The catalog is fetched lazily,
once, and a failed fetch leaves the bridge in chat-only mode. Every call is
routed by name to the chat path or the generic tool path, and every backend
failure comes back as an error-flagged result rather than an exception.

Usage:
    bridge = McpBridge(BridgeOptions(transport=..., server_info=...))
    await bridge.load_gateway_tools()
    await bridge.serve()
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from openclaw_mcp.config import LOGGER_NAME, BridgeOptions
from openclaw_mcp.content import normalize_content
from openclaw_mcp.protocol import serve_stdio
from openclaw_mcp.types import (
    CallResult,
    GatewayError,
    RegistryEntry,
    ToolDefinition,
    empty_object_schema,
)

logger = logging.getLogger(LOGGER_NAME)

CHAT_TOOL = "chat"
NO_RESPONSE = "(no response)"
LOG_MESSAGE_CHARS = 80


def _chat_definition(default_session_key: str) -> ToolDefinition:
    return ToolDefinition(
        name=CHAT_TOOL,
        description="Send a message to the OpenClaw assistant and get a response",
        input_schema={
            "type": "object",
            "properties": {
                "message": {"type": "string", "description": "The message to send"},
                "session": {
                    "type": "string",
                    "description": f"Session key (default: {default_session_key})",
                },
            },
            "required": ["message"],
        },
    )


@dataclass
class CatalogLoadState:
    """Single-flight latch for the one-time catalog fetch.

    The first caller stores the load task; everyone after awaits the same task
    or, once it has finished, returns straight away.
    """

    task: asyncio.Task[None] | None = None

    @property
    def loaded(self) -> bool:
        return self.task is not None


class McpBridge:
    """Registry, dispatch and MCP serving for the OpenClaw gateway."""

    def __init__(self, options: BridgeOptions):
        self._transport = options.transport
        self._server_info = options.server_info
        self._default_session_key = options.default_session_key
        self._verbose = options.verbose
        self._registry: dict[str, RegistryEntry] = {
            CHAT_TOOL: RegistryEntry(
                definition=_chat_definition(self._default_session_key),
                session_key=self._default_session_key,
            ),
        }
        self._catalog = CatalogLoadState()

    @property
    def default_session_key(self) -> str:
        return self._default_session_key

    @property
    def catalog_loaded(self) -> bool:
        return self._catalog.loaded

    def _log(self, msg: str, *args: Any) -> None:
        if self._verbose:
            logger.info(msg, *args)

    # ── Registry ──────────────────────────────────────────────────────────

    def list_tools(self) -> list[ToolDefinition]:
        """Return every registered tool in its public shape."""
        return [entry.definition for entry in self._registry.values()]

    async def load_gateway_tools(self) -> None:
        """Fetch the gateway catalog once. Never raises on fetch failure."""
        if self._catalog.task is None:
            self._catalog.task = asyncio.ensure_future(self._fetch_catalog())
        await asyncio.shield(self._catalog.task)

    async def _fetch_catalog(self) -> None:
        try:
            tool_list = await self._transport.request("tools.list", {})
            session_key, entries = self._parse_catalog(tool_list)
        except Exception as e:
            self._log_failure("tools.list", e)
            self._log("⚠️ tools.list not available, using chat-only mode")
            return

        for entry in entries:
            self._registry[entry.name] = entry
        self._log("📚 loaded %d tools from gateway (session: %s)", len(entries), session_key)

    def _parse_catalog(self, tool_list: Any) -> tuple[str, list[RegistryEntry]]:
        if tool_list is None:
            tool_list = {}
        if not isinstance(tool_list, dict):
            raise TypeError(f"tools.list returned {type(tool_list).__name__}, expected an object")

        session_key = tool_list.get("sessionKey") or self._default_session_key
        tools = tool_list.get("tools") or []
        if not isinstance(tools, list):
            raise TypeError(f"tools.list 'tools' is {type(tools).__name__}, expected a list")

        entries: list[RegistryEntry] = []
        for tool in tools:
            name = tool.get("name") if isinstance(tool, dict) else None
            if not isinstance(name, str) or not name:
                self._log("   skipping malformed tool descriptor: %r", tool)
                continue
            parameters = tool.get("parameters")
            entries.append(RegistryEntry(
                definition=ToolDefinition(
                    name=name,
                    description=tool.get("description") or "",
                    input_schema=parameters if isinstance(parameters, dict) and parameters else empty_object_schema(),
                ),
                session_key=session_key,
            ))
        return session_key, entries

    def _log_failure(self, method: str, error: Exception) -> None:
        if isinstance(error, GatewayError):
            self._log("❌ %s failed: %s", method, error.to_dict())
        else:
            self._log("❌ %s failed: %s", method, error)

    # ── Dispatch ──────────────────────────────────────────────────────────

    async def call_tool(self, name: str, args: dict[str, Any] | None = None) -> CallResult:
        """Route a tool call by name. Failures come back as error results."""
        args = args or {}
        if name == CHAT_TOOL:
            return await self._execute_chat(args)

        entry = self._registry.get(name)
        if entry is None:
            return CallResult.error(f"Unknown tool: {name}")
        return await self._execute_gateway_tool(entry, args)

    async def _execute_chat(self, args: dict[str, Any]) -> CallResult:
        message = args.get("message")
        if not isinstance(message, str) or not message:
            return CallResult.error("Error: message is required")

        session = args.get("session")
        session_key = session if isinstance(session, str) and session else self._default_session_key
        self._log("💬 chat: %s: %s", session_key, message[:LOG_MESSAGE_CHARS])

        try:
            result = await self._transport.request(
                "chat.send",
                {"sessionKey": session_key, "message": message},
                expect_final=True,
            )
            return CallResult.text(_first_text(result))
        except Exception as e:
            self._log_failure("chat.send", e)
            return CallResult.error(f"Error: {e}")

    async def _execute_gateway_tool(self, entry: RegistryEntry, args: dict[str, Any]) -> CallResult:
        self._log("🔧 tool: %s", entry.name)
        try:
            result = await self._transport.request(
                "tools.call",
                {"sessionKey": entry.session_key, "name": entry.name, "args": args},
            )
            return CallResult(content=normalize_content(_content_of(result)))
        except Exception as e:
            self._log_failure("tools.call", e)
            return CallResult.error(f"Error: {e}")

    # ── Serving ───────────────────────────────────────────────────────────

    async def serve(self) -> None:
        """Serve list/call over MCP stdio until SIGINT/SIGTERM."""
        self._log("🚀 server starting: %s v%s", self._server_info.name, self._server_info.version)
        await serve_stdio(self, self._server_info)
        self._log("server stopped")


def _first_text(result: Any) -> str:
    """First text item of a chat.send reply, or the no-response marker."""
    if result is None:
        return NO_RESPONSE
    if not isinstance(result, dict):
        raise TypeError(f"chat.send returned {type(result).__name__}, expected an object")
    message = result.get("message") or {}
    if not isinstance(message, dict):
        raise TypeError(f"chat.send 'message' is {type(message).__name__}, expected an object")
    content = message.get("content") or []
    if not isinstance(content, list):
        raise TypeError(f"chat.send 'content' is {type(content).__name__}, expected a list")
    for item in content:
        if isinstance(item, dict) and item.get("type") == "text":
            text = item.get("text")
            return NO_RESPONSE if text is None else str(text)
    return NO_RESPONSE


def _content_of(result: Any) -> list[Any]:
    if result is None:
        return []
    if not isinstance(result, dict):
        raise TypeError(f"tools.call returned {type(result).__name__}, expected an object")
    content = result.get("content")
    if content is None:
        return []
    if not isinstance(content, list):
        raise TypeError(f"tools.call 'content' is {type(content).__name__}, expected a list")
    return content


__all__ = ["CHAT_TOOL", "CatalogLoadState", "McpBridge"]
