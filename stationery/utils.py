"""Utility functions for Stationery.

This module contains small helpers used throughout the Stationery codebase:
filename handling, URL joining, timestamp parsing and output directory setup.

Key functions:
    slug_from_name: Strip the extension from a filename.
    is_markdown: Check if a path is a Markdown file.
    join_root_url: Join a base URL with a path.
    parse_timestamp: Parse an RFC 3339 timestamp into an aware datetime.
    ensure_clean_dir: Ensure a directory exists and is empty.
"""

from __future__ import annotations

import re
import shutil
from datetime import datetime, timezone
from pathlib import Path

_FRACTION_RE = re.compile(r"(\d{2}:\d{2}:\d{2})\.(\d+)")


def slug_from_name(name: str) -> str:
    """Return a filename without its last extension.

    Args:
        name: Filename, with or without directories.

    Returns:
        The slug used as default title and output basename.

    Examples:
        >>> slug_from_name("zomg.md")
        'zomg'

        >>> slug_from_name("archive.tar.gz")
        'archive.tar'
    """
    return Path(name).stem


def is_markdown(path: Path) -> bool:
    """Check if a path is a Markdown file.

    Args:
        path: Path to check.

    Returns:
        True if the file has .md extension (case-insensitive).
    """
    return path.suffix.lower() == ".md"


def join_root_url(root_url: str, path: str) -> str:
    """Safely join a root URL and a path, avoiding double slashes.

    Args:
        root_url: Base URL (e.g., https://example.com/blog).
        path: Path beginning with or without a leading slash.

    Returns:
        Combined URL with proper slash handling.

    Examples:
        >>> join_root_url('https://example.com', '/about.html')
        'https://example.com/about.html'

        >>> join_root_url('https://example.com/', 'about.html')
        'https://example.com/about.html'
    """
    if not root_url:
        return path
    base = root_url.rstrip("/")
    suffix = path if path.startswith("/") else f"/{path}"
    return f"{base}{suffix}"


def parse_timestamp(value: str) -> datetime | None:
    """Parse an RFC 3339 timestamp.

    Date-only values and timestamps without an offset are taken as UTC so
    that every resolved page date is comparable with every other one.
    Fractional seconds of any length are accepted and kept to microseconds.

    Args:
        value: Timestamp text, e.g. ``2018-03-24T12:43:03Z``.

    Returns:
        Timezone-aware datetime, or None if the value is empty or invalid.
    """
    text = value.strip()
    if not text:
        return None
    if text[-1] in "zZ":
        text = f"{text[:-1]}+00:00"
    text = _FRACTION_RE.sub(_microseconds, text, count=1)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _microseconds(match: re.Match) -> str:
    digits = match.group(2)[:6].ljust(6, "0")
    return f"{match.group(1)}.{digits}"


def ensure_clean_dir(path: Path) -> None:
    """Ensure a directory exists and is empty.

    If the directory exists, removes all contents. Creates the
    directory if it doesn't exist.

    Args:
        path: Directory path to clean or create.
    """
    if path.exists():
        shutil.rmtree(path)
    path.mkdir(parents=True, exist_ok=True)
