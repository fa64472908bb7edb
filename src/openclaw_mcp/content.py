"""
Content normalization for gateway tool results.

Gateway tools answer with a loose list of content items discriminated by a
``type`` field. Before anything reaches the MCP client those items are
reduced to the two block shapes the bridge speaks: text and image. Shapes we
don't recognize are dumped as JSON text rather than dropped.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

from openclaw_mcp.types import Base64Source, ContentBlock, ImageBlock, TextBlock, UrlSource


def _dump(item: Any) -> str:
    """Serialize an unrecognized item, keeping key order as received."""
    try:
        return json.dumps(item, ensure_ascii=False)
    except (TypeError, ValueError):
        return json.dumps(item, ensure_ascii=False, default=str)


def normalize_item(item: Any) -> ContentBlock:
    """Map a single gateway content item to a ContentBlock."""
    if not isinstance(item, dict):
        return TextBlock(_dump(item))

    kind = item.get("type")

    if kind == "text":
        text = item.get("text")
        return TextBlock("" if text is None else str(text))

    if kind == "image":
        media_type = item.get("mimeType")
        if item.get("data"):
            return ImageBlock(source=Base64Source(data=item["data"], media_type=media_type))
        if item.get("url"):
            return ImageBlock(source=UrlSource(url=item["url"]), media_type=media_type)
        return TextBlock(f"[image: {media_type}]")

    return TextBlock(_dump(item))


def normalize_content(items: Iterable[Any] | None) -> list[ContentBlock]:
    """Normalize a gateway content list. ``None`` or empty yields ``[]``."""
    if not items:
        return []
    return [normalize_item(item) for item in items]


__all__ = ["normalize_content", "normalize_item"]
