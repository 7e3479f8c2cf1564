"""RSS feed generation for Stationery.

The feed is built once per run from the sorted pages and written to
``index.rss``. It carries no build timestamp, so unchanged input gives a
byte-identical file.

Classes:
    Author: Feed or item author.
    FeedItem: One entry of the feed.
    Feed: In-memory RSS channel.
    RSSGenerator: Serializes and writes the feed.

Functions:
    build_feed: Create a Feed from pages and site configuration.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from email.utils import format_datetime
from pathlib import Path

from markupsafe import escape

from .config import SiteConfig
from .content import Page


@dataclass(frozen=True)
class Author:
    name: str = ""
    email: str = ""

    def __str__(self) -> str:
        if self.email and self.name:
            return f"{self.email} ({self.name})"
        return self.email or self.name


@dataclass(frozen=True)
class FeedItem:
    """One entry of the feed.

    Attributes:
        title: Page title.
        link: Absolute link to the page.
        description: Page description, or its title when it has none.
        author: Site-wide author.
        created: Page date.
    """

    title: str
    link: str
    description: str
    author: Author
    created: datetime


@dataclass
class Feed:
    """An RSS 2.0 channel.

    Attributes:
        title: Channel title.
        link: Site URL.
        description: Channel description.
        author: Managing editor.
        items: Entries, newest first.
    """

    title: str
    link: str
    description: str
    author: Author
    items: list[FeedItem] = field(default_factory=list)

    def add(self, item: FeedItem) -> None:
        self.items.append(item)

    def to_rss(self) -> str:
        """Serialize the feed as RSS 2.0 XML.

        Returns:
            RSS document text.
        """
        rss = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<rss version="2.0">',
            "  <channel>",
            f"    <title>{escape(self.title)}</title>",
            f"    <link>{escape(self.link)}</link>",
            f"    <description>{escape(self.description)}</description>",
        ]
        if str(self.author):
            rss.append(f"    <managingEditor>{escape(str(self.author))}</managingEditor>")
        for item in self.items:
            rss.append("    <item>")
            rss.append(f"      <title>{escape(item.title)}</title>")
            rss.append(f"      <link>{escape(item.link)}</link>")
            rss.append(f"      <description>{escape(item.description)}</description>")
            if str(item.author):
                rss.append(f"      <author>{escape(str(item.author))}</author>")
            rss.append(f"      <pubDate>{format_datetime(item.created)}</pubDate>")
            rss.append("    </item>")
        rss.append("  </channel>")
        rss.append("</rss>")
        return "\n".join(rss) + "\n"


def build_feed(pages: Iterable[Page], config: SiteConfig) -> Feed:
    """Create the site feed with one item per page, in the given order.

    Args:
        pages: Sorted pages.
        config: Site configuration with the feed metadata.

    Returns:
        Feed instance.
    """
    author = Author(name=config.name, email=config.email)
    feed = Feed(
        title=config.title,
        link=config.site_url,
        description=config.description,
        author=author,
    )
    for page in pages:
        feed.add(
            FeedItem(
                title=page.title,
                link=page.url,
                description=page.description or page.title,
                author=author,
                created=page.date,
            )
        )
    return feed


class RSSGenerator:
    """Writes the RSS feed to the output directory."""

    filename = "index.rss"

    def write(self, output_dir: Path, feed: Feed) -> Path:
        """Serialize and write the feed.

        Args:
            output_dir: Directory to write the feed file to.
            feed: Feed to write.

        Returns:
            Path of the written file.
        """
        output_path = output_dir / self.filename
        output_path.write_text(feed.to_rss(), encoding="utf-8")
        return output_path
