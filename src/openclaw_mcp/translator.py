"""Tool executor for tools supplied directly rather than via a gateway catalog."""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from typing import Any

from openclaw_mcp.adapter import convert_tool_to_mcp
from openclaw_mcp.config import LOGGER_NAME
from openclaw_mcp.types import CallResult, TextBlock, ToolDefinition, ToolLike

logger = logging.getLogger(LOGGER_NAME)


def make_call_id() -> str:
    """Correlation id for a single call, ``mcp-<milliseconds>``."""
    return f"mcp-{time.time_ns() // 1_000_000}"


class ToolExecutor:
    """
    Executes in-memory tools by name.

    Each tool carries its own async ``execute(tool_call_id, args)`` action.
    Results are reduced to text blocks only.
    """

    def __init__(self, tools: Sequence[ToolLike]):
        self._tools = list(tools)
        self._by_name: dict[str, ToolLike] = {t.name: t for t in self._tools}

    def list_tools(self) -> list[ToolLike]:
        """Return the tool descriptors exactly as supplied."""
        return self._tools

    def list_definitions(self) -> list[ToolDefinition]:
        """Return the tools as MCP definitions."""
        return [convert_tool_to_mcp(t) for t in self._tools]

    async def execute_tool(self, name: str, args: dict[str, Any] | None = None) -> CallResult:
        tool = self._by_name.get(name)
        if tool is None:
            return CallResult.error(f"Unknown tool: {name}")

        call_id = make_call_id()
        logger.debug("🔧 %s (%s)", name, call_id)
        try:
            result = await tool.execute(call_id, args or {})
        except Exception as e:
            logger.exception("Tool %s failed: %s", name, e)
            return CallResult.error(f"Error: {e}")

        content = (result or {}).get("content") or []
        return CallResult(content=[TextBlock(_text_of(item)) for item in content])


def _text_of(item: Any) -> str:
    if isinstance(item, dict):
        return item.get("text") or ""
    return getattr(item, "text", None) or ""


__all__ = ["ToolExecutor", "make_call_id"]
