"""Stationery static site generator.

This package turns a directory of Markdown documents into a static site:
one HTML page per document, a chronological index, one index per tag and
an RSS feed. Documents may start with a YAML front matter block and may
call template helpers inline before Markdown conversion.

The main entry point is the CLI module, which provides the ``build`` command.
"""

__all__ = ["__version__"]
__version__ = "0.3.0"
