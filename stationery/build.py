"""Site building functionality for Stationery.

This module contains the core logic for building a static site from source
files. It loads configuration, copies assets, renders every document,
writes the pages, and derives the feed, the index and the tag pages from
the same in-memory page list.

The build is sequential and fail-fast: the first error aborts the run and
files already written are left in place.

Key functions:
- build_site: Main function to build the entire site.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path

import click
from jinja2 import TemplateSyntaxError

from .assets import AssetPipeline
from .collections import TagIndex, build_tags_index, index_page, sort_pages, tag_pages
from .config import ConfigError, SiteConfig, load_config
from .content import FileContentLoader, Page, PageBuilder
from .extractors import FrontMatterError
from .feeds import RSSGenerator, build_feed
from .templates import TemplateEngine
from .utils import ensure_clean_dir


class BuildError(Exception):
    """Error during site build with file context.

    Attributes:
        source_path: Path to the file that caused the error.
        message: Human-readable error message.
        original_error: The original exception that was caught.
    """

    def __init__(
        self,
        source_path: Path,
        message: str,
        original_error: Exception | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.original_error = original_error
        super().__init__(f"{source_path}: {message}")


@dataclass
class BuildResult:
    """Result of a site build operation.

    Attributes:
        pages: Content pages, newest first.
        output_dir: Directory where the site was built.
        tags: Tag index built from the pages.
        written: Every file written, in order.
    """

    pages: list[Page]
    output_dir: Path
    tags: TagIndex
    written: list[Path] = field(default_factory=list)


def build_site(
    project_root: Path,
    config: SiteConfig | None = None,
    clean_output: bool = False,
    output_dir_override: Path | None = None,
) -> BuildResult:
    """Build the entire static site.

    Args:
        project_root: Root directory of the project.
        config: Configuration to use instead of reading ``.station.yml``.
        clean_output: Whether to wipe the output directory before building.
        output_dir_override: Optional path to write the build output instead of
            the configured output directory.

    Returns:
        BuildResult containing the pages, output directory and written files.

    Raises:
        BuildError: On the first failure of any step.
    """
    if config is None:
        try:
            config = load_config(project_root)
        except ConfigError as exc:
            raise BuildError(exc.path, exc.message, exc) from exc
    if output_dir_override is not None:
        config = _with_output(config, output_dir_override)
    output_dir = config.output

    try:
        if clean_output:
            ensure_clean_dir(output_dir)
        else:
            output_dir.mkdir(parents=True, exist_ok=True)
        copied = AssetPipeline(project_root, output_dir, config.assets).run()
    except OSError as exc:
        raise BuildError(output_dir, _format_error_message(exc), exc) from exc

    try:
        documents = FileContentLoader(config.source).load()
    except OSError as exc:
        raise BuildError(config.source, _format_error_message(exc), exc) from exc

    builder = PageBuilder(config)
    pages: list[Page] = []
    for document in documents:
        try:
            pages.append(builder.build(document))
        except Exception as exc:
            raise _page_error(document.path, exc) from exc
    pages = sort_pages(pages)

    engine = TemplateEngine(config)
    written = list(copied)
    for page in pages:
        written.append(_write(engine, page, page.source.path))

    try:
        feed_path = RSSGenerator().write(output_dir, build_feed(pages, config))
    except OSError as exc:
        raise BuildError(output_dir / RSSGenerator.filename, _format_error_message(exc), exc) from exc
    click.echo(f"Wrote: {feed_path}")
    written.append(feed_path)

    tags = build_tags_index(pages)
    for aggregate in [index_page(pages, config), *tag_pages(tags, config)]:
        written.append(_write(engine, aggregate, aggregate.destination))

    return BuildResult(pages=pages, output_dir=output_dir, tags=tags, written=written)


def _write(engine: TemplateEngine, page: Page, origin: Path) -> Path:
    """Render and write one page, reporting progress.

    Aggregate pages get their link listing rendered first.
    """
    try:
        if page.is_aggregate:
            engine.render_index(page)
        path = engine.write_page(page)
    except Exception as exc:
        raise _page_error(origin, exc) from exc
    click.echo(f"Wrote: {path}")
    return path


def _with_output(config: SiteConfig, output_dir: Path) -> SiteConfig:
    return replace(config, output=output_dir)


def _page_error(path: Path, exc: Exception) -> BuildError:
    if isinstance(exc, TemplateSyntaxError):
        return BuildError(path, f"Template syntax error on line {exc.lineno}: {exc.message}", exc)
    if isinstance(exc, FrontMatterError):
        return BuildError(path, f"Front matter error: {exc}", exc)
    return BuildError(path, _format_error_message(exc), exc)


def _format_error_message(exc: Exception) -> str:
    """Format an exception into a user-friendly error message.

    Args:
        exc: The exception to format.

    Returns:
        A human-readable error message.
    """
    error_type = type(exc).__name__
    error_msg = str(exc)

    if error_type == "UndefinedError":
        return f"Undefined variable: {error_msg}"
    if error_type == "SecurityError":
        return f"Unsafe template access: {error_msg}"
    if isinstance(exc, FileNotFoundError):
        return f"File not found: {exc.filename or error_msg}"

    return f"{error_type}: {error_msg}"
