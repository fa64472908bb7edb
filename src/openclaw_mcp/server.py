"""
OpenClaw MCP Server

Exposes the OpenClaw assistant to MCP clients over stdio:
- chat: send a message to the assistant and get its reply
- plus any tools the gateway advertises via tools.list

Architecture:
- CliTransport shells out to the ``openclaw`` binary per request
- McpBridge owns the tool registry and dispatch
- the low-level MCP server forwards tools/list and tools/call to the bridge
"""

import asyncio
import logging
import sys

from openclaw_mcp import __version__
from openclaw_mcp.bridge import McpBridge
from openclaw_mcp.cli import CliTransport
from openclaw_mcp.config import (
    LOGGER_NAME,
    SERVER_NAME,
    BridgeOptions,
    ServerInfo,
    get_cli_bin,
    get_cli_timeout,
    get_default_session_key,
    is_verbose,
)

logger = logging.getLogger(LOGGER_NAME)


def build_bridge() -> McpBridge:
    """Resolve configuration from the environment and wire up the bridge."""
    transport = CliTransport(bin=get_cli_bin(), timeout=get_cli_timeout())
    return McpBridge(
        BridgeOptions(
            transport=transport,
            server_info=ServerInfo(name=SERVER_NAME, version=__version__),
            default_session_key=get_default_session_key(),
            verbose=is_verbose(),
        )
    )


async def run() -> None:
    bridge = build_bridge()
    await bridge.load_gateway_tools()
    await bridge.serve()


def main() -> None:
    """Run the MCP server on stdio transport."""
    # stdout carries the MCP stream, so logs go to stderr
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    logger.info("🚀 Starting OpenClaw MCP Server v%s", __version__)
    logger.info("   Transport: stdio")

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        pass
    except Exception as e:
        logger.critical("Fatal: %s", e)
        sys.exit(1)


__all__ = ["build_bridge", "main", "run"]


if __name__ == "__main__":
    main()
