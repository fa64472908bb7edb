"""
Data types for the OpenClaw MCP bridge.
"""

from __future__ import annotations

import copy
from collections.abc import Awaitable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, Union, runtime_checkable


# =============================================================================
# Exceptions
# =============================================================================


class GatewayError(Exception):
    """Base error for gateway transport failures.

    Transports raise these; the bridge catches them at the call boundary and
    turns them into error-flagged results.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "message": self.message,
            "details": self.details,
        }


class CliError(GatewayError):
    """Raised when the OpenClaw CLI cannot satisfy a request.

    ``stderr`` holds whatever the subprocess wrote to standard error, if a
    process was started at all.
    """

    def __init__(self, message: str, stderr: str = "", details: dict[str, Any] | None = None):
        super().__init__(message, details)
        self.stderr = stderr


# =============================================================================
# Transport Contracts
# =============================================================================


@runtime_checkable
class GatewayTransport(Protocol):
    """Anything that can perform a named gateway operation."""

    async def request(
        self,
        method: str,
        params: Mapping[str, Any] | None = None,
        *,
        expect_final: bool = False,
    ) -> dict[str, Any]: ...


class ToolLike(Protocol):
    """A locally defined tool carrying its own action."""

    name: str
    description: str | None
    parameters: Any

    def execute(self, tool_call_id: str, args: dict[str, Any]) -> Awaitable[dict[str, Any]]: ...


@dataclass(slots=True)
class LocalTool:
    """Plain ToolLike implementation for tools supplied in-process."""

    name: str
    execute: Any  # async (tool_call_id, args) -> {"content": [...]}
    description: str | None = None
    parameters: Any = None


# =============================================================================
# Tool Definitions
# =============================================================================


def empty_object_schema() -> dict[str, Any]:
    return {"type": "object", "properties": {}}


@dataclass(frozen=True, slots=True)
class ToolDefinition:
    """A tool as advertised to MCP clients."""

    name: str
    description: str
    input_schema: dict[str, Any] = field(default_factory=empty_object_schema)

    def to_dict(self) -> dict[str, Any]:
        """Public wire shape. The schema is copied so callers can't mutate it."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": copy.deepcopy(self.input_schema),
        }


@dataclass(frozen=True, slots=True)
class RegistryEntry:
    """A ToolDefinition plus the upstream session its calls are routed under."""

    definition: ToolDefinition
    session_key: str

    @property
    def name(self) -> str:
        return self.definition.name


# =============================================================================
# Content Blocks
# =============================================================================


@dataclass(frozen=True, slots=True)
class TextBlock:
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "text", "text": self.text}


@dataclass(frozen=True, slots=True)
class Base64Source:
    data: str
    media_type: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"type": "base64", "data": self.data, "mediaType": self.media_type}


@dataclass(frozen=True, slots=True)
class UrlSource:
    url: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "url", "url": self.url}


@dataclass(frozen=True, slots=True)
class ImageBlock:
    """An image, either inline (base64) or by reference (url).

    For base64 sources the media type travels inside the source; for url
    sources it sits on the block itself.
    """

    source: Base64Source | UrlSource
    media_type: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"type": "image", "source": self.source.to_dict()}
        if isinstance(self.source, UrlSource):
            result["mediaType"] = self.media_type
        return result


ContentBlock = Union[TextBlock, ImageBlock]


# =============================================================================
# Call Results
# =============================================================================


@dataclass(slots=True)
class CallResult:
    """Result of a tool call as returned to the MCP layer."""

    content: list[ContentBlock] = field(default_factory=list)
    is_error: bool = False

    @classmethod
    def text(cls, text: str) -> CallResult:
        return cls(content=[TextBlock(text)])

    @classmethod
    def error(cls, text: str) -> CallResult:
        return cls(content=[TextBlock(text)], is_error=True)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {"content": [block.to_dict() for block in self.content]}
        if self.is_error:
            result["isError"] = True
        return result
