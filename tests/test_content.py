"""
Unit tests for content.py - gateway content normalization.
"""

import json

from openclaw_mcp.content import normalize_content, normalize_item
from openclaw_mcp.types import Base64Source, ImageBlock, TextBlock, UrlSource


class TestTextItems:
    """Text items map to text blocks."""

    def test_text(self):
        assert normalize_item({"type": "text", "text": "hi"}) == TextBlock("hi")

    def test_missing_text_is_empty(self):
        """A text item without text becomes an empty string."""
        assert normalize_item({"type": "text"}) == TextBlock("")


class TestImageItems:
    """Image items keep their data or url, or degrade to a placeholder."""

    def test_inline_data(self):
        block = normalize_item({"type": "image", "data": "aGVsbG8=", "mimeType": "image/jpeg"})

        assert block == ImageBlock(source=Base64Source(data="aGVsbG8=", media_type="image/jpeg"))
        assert block.to_dict() == {
            "type": "image",
            "source": {"type": "base64", "data": "aGVsbG8=", "mediaType": "image/jpeg"},
        }

    def test_url(self):
        block = normalize_item({"type": "image", "url": "https://x.test/a.png", "mimeType": "image/png"})

        assert block == ImageBlock(source=UrlSource(url="https://x.test/a.png"), media_type="image/png")
        assert block.to_dict() == {
            "type": "image",
            "source": {"type": "url", "url": "https://x.test/a.png"},
            "mediaType": "image/png",
        }

    def test_data_wins_over_url(self):
        """Inline data takes precedence when both are present."""
        block = normalize_item({"type": "image", "data": "AAA=", "url": "https://x.test", "mimeType": "image/gif"})

        assert isinstance(block.source, Base64Source)

    def test_placeholder_without_data_or_url(self):
        """An image with only a media type degrades to text."""
        assert normalize_item({"type": "image", "mimeType": "image/png"}) == TextBlock("[image: image/png]")


class TestUnknownItems:
    """Unrecognized shapes are dumped as JSON text."""

    def test_unknown_type(self):
        block = normalize_item({"type": "unknown", "data": {"foo": "bar"}})

        assert isinstance(block, TextBlock)
        assert "foo" in block.text
        assert json.loads(block.text) == {"type": "unknown", "data": {"foo": "bar"}}

    def test_key_order_preserved(self):
        """Serialized fields keep the order they arrived in."""
        block = normalize_item({"type": "resource", "z": 1, "a": 2})

        assert block.text == '{"type": "resource", "z": 1, "a": 2}'

    def test_non_dict_item(self):
        """Bare values are dumped too, never raised on."""
        assert normalize_item("plain") == TextBlock('"plain"')


class TestNormalizeContent:
    """List-level behaviour."""

    def test_none_is_empty(self):
        assert normalize_content(None) == []

    def test_empty_is_empty(self):
        assert normalize_content([]) == []

    def test_order_preserved(self):
        """Items come out in the order they went in, duplicates included."""
        items = [
            {"type": "text", "text": "a"},
            {"type": "image", "mimeType": "image/png"},
            {"type": "text", "text": "a"},
        ]

        assert normalize_content(items) == [
            TextBlock("a"),
            TextBlock("[image: image/png]"),
            TextBlock("a"),
        ]

    def test_non_string_text_coerced(self):
        """Text values that aren't strings are stringified, not passed through."""
        assert normalize_item({"type": "text", "text": 5}) == TextBlock("5")
        assert normalize_item({"type": "text", "text": None}) == TextBlock("")
