"""OpenClaw MCP Bridge

Exposes the OpenClaw assistant over the Model Context Protocol:
- chat: send a message to the assistant (built in)
- gateway tools: fetched once from the gateway catalog and proxied by name
"""

try:
    from importlib.metadata import PackageNotFoundError, version
except (ImportError, ModuleNotFoundError):
    __version__ = "0.0.0+unknown"
else:
    try:
        __version__ = version("openclaw-mcp")
    except PackageNotFoundError:
        __version__ = "0.0.0+unknown"

from openclaw_mcp.adapter import convert_tool_to_mcp
from openclaw_mcp.bridge import McpBridge
from openclaw_mcp.cli import CliTransport
from openclaw_mcp.config import BridgeOptions, ServerInfo
from openclaw_mcp.content import normalize_content
from openclaw_mcp.translator import ToolExecutor
from openclaw_mcp.types import (
    Base64Source,
    CallResult,
    CliError,
    ContentBlock,
    GatewayError,
    GatewayTransport,
    ImageBlock,
    LocalTool,
    RegistryEntry,
    TextBlock,
    ToolDefinition,
    ToolLike,
    UrlSource,
)

__all__ = [
    "__version__",
    "Base64Source",
    "BridgeOptions",
    "CallResult",
    "CliError",
    "CliTransport",
    "ContentBlock",
    "GatewayError",
    "GatewayTransport",
    "ImageBlock",
    "LocalTool",
    "McpBridge",
    "RegistryEntry",
    "ServerInfo",
    "TextBlock",
    "ToolDefinition",
    "ToolExecutor",
    "ToolLike",
    "UrlSource",
    "convert_tool_to_mcp",
    "normalize_content",
]
