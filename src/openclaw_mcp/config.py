"""
Configuration management for the OpenClaw MCP bridge.

Runtime settings are loaded from environment variables with sensible defaults
and passed explicitly into the bridge and transports at construction time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from openclaw_mcp.types import GatewayTransport


LOGGER_NAME = "openclaw_mcp"


# =============================================================================
# Server Identity
# =============================================================================

SERVER_NAME = "openclaw-mcp"
PRODUCT_TAG = "OpenClaw"


# =============================================================================
# Sessions
# =============================================================================

DEFAULT_SESSION_KEY = "agent:main:main"
CLI_SESSION_KEY = "cli"


# =============================================================================
# CLI Transport
# =============================================================================

DEFAULT_CLI_BIN = "openclaw"
CLI_AGENT_TIMEOUT = 30  # seconds, passed to the agent via --timeout
DEFAULT_CLI_TIMEOUT = 35.0  # wall clock limit for the subprocess
MAX_CLI_OUTPUT = 10 * 1024 * 1024  # 10MB stdout cap

_FALSY = {"0", "false", "no", "off"}


# =============================================================================
# Getters
# =============================================================================


def get_cli_bin() -> str:
    """Get the OpenClaw binary name with env override support."""
    return os.environ.get("OPENCLAW_BIN") or DEFAULT_CLI_BIN


def get_default_session_key() -> str:
    """Get the default session key with env override support."""
    return os.environ.get("OPENCLAW_SESSION_KEY") or DEFAULT_SESSION_KEY


def get_cli_timeout() -> float:
    """Get the CLI wall clock timeout in seconds."""
    raw = os.environ.get("OPENCLAW_CLI_TIMEOUT")
    if not raw:
        return DEFAULT_CLI_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"OPENCLAW_CLI_TIMEOUT must be a number, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"OPENCLAW_CLI_TIMEOUT must be positive, got {raw!r}")
    return value


def is_verbose() -> bool:
    """Verbose diagnostics are on unless OPENCLAW_MCP_VERBOSE is falsy."""
    raw = os.environ.get("OPENCLAW_MCP_VERBOSE")
    if raw is None:
        return True
    return raw.strip().lower() not in _FALSY


# =============================================================================
# Bridge Configuration
# =============================================================================


@dataclass(frozen=True, slots=True)
class ServerInfo:
    """Identity reported to MCP clients during initialization."""

    name: str
    version: str


@dataclass(frozen=True, slots=True)
class BridgeOptions:
    """Construction-time configuration for McpBridge."""

    transport: GatewayTransport
    server_info: ServerInfo
    default_session_key: str = DEFAULT_SESSION_KEY
    verbose: bool = False
