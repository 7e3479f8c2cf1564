"""Front matter extraction for Stationery.

A document may carry a YAML block delimited by ``---`` lines. The pattern is
the Jekyll one and is deliberately not anchored to the start of the document:
the first ``---``...``---`` pair found anywhere is parsed as metadata, and
every such pair is removed from the body.

Key items:
- FrontMatter: Typed metadata parsed from the block.
- FrontMatterError: Raised for malformed blocks.
- extract_frontmatter: Split raw text into (FrontMatter, body).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

import yaml

FRONTMATTER_RE = re.compile(r"(---\s*\n.*?\n?)(---\s*\n?)", re.DOTALL)


class FrontMatterError(Exception):
    """Raised when a front matter block cannot be parsed."""


@dataclass(frozen=True)
class FrontMatter:
    """Metadata declared in a document's front matter block.

    Attributes:
        title: Page title.
        description: Short summary, used by the feed.
        image: Image URL for social cards.
        timestamp: ISO-8601 publication timestamp.
        tags: Tags in first-seen order.
        twitter: Author handle.
    """

    title: str = ""
    description: str = ""
    image: str = ""
    timestamp: str = ""
    tags: tuple[str, ...] = ()
    twitter: str = ""

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> FrontMatter:
        """Build front matter from parsed YAML, ignoring unknown keys."""
        return cls(
            title=_text(data.get("title")),
            description=_text(data.get("description")),
            image=_text(data.get("image")),
            timestamp=_text(data.get("timestamp")),
            tags=_tags(data.get("tags")),
            twitter=_text(data.get("twitter")),
        )


def _text(value: Any) -> str:
    if value is None:
        return ""
    # YAML turns unquoted timestamps into date objects
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (dict, list)):
        raise FrontMatterError(f"expected a string, got {type(value).__name__}")
    return str(value)


def _tags(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        raise FrontMatterError("tags must be a list")
    seen: list[str] = []
    for item in value:
        tag = _text(item)
        if not tag:
            continue
        # tags name files under tag/
        if "/" in tag or "\\" in tag or tag.strip(".") == "":
            raise FrontMatterError(f"invalid tag name: {tag!r}")
        if tag not in seen:
            seen.append(tag)
    return tuple(seen)


def extract_frontmatter(text: str) -> tuple[FrontMatter, str]:
    """Extract YAML front matter from content.

    Args:
        text: Raw file content.

    Returns:
        Tuple of (front matter, remaining body). Without a block the front
        matter is empty and the body is the text unchanged.

    Raises:
        FrontMatterError: If the block is not valid YAML or not a mapping.
    """
    match = FRONTMATTER_RE.search(text)
    if not match:
        return FrontMatter(), text
    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as exc:
        raise FrontMatterError(f"invalid front matter: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontMatterError("front matter must be a mapping")
    return FrontMatter.from_mapping(data), FRONTMATTER_RE.sub("", text)
