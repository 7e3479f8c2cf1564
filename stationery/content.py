"""Content processing for Stationery.

This module handles loading source documents and turning them into Page
objects with rendered HTML, independent of any disk writes.

Key classes:
- SourceDocument: Raw bytes and modification time of one input file.
- Page: Dataclass representing a site page (content or aggregate).
- FileContentLoader: Discovers source documents.
- PageBuilder: Runs front matter extraction and content rendering.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from markupsafe import Markup

from .assets import AssetList
from .config import SiteConfig, SiteMeta
from .extractors import FrontMatter, extract_frontmatter
from .renderers import ContentRenderer, RenderContext
from .utils import is_markdown, join_root_url, parse_timestamp, slug_from_name


@dataclass(frozen=True)
class SourceDocument:
    """One input file, read once.

    Attributes:
        path: Path to the file.
        raw: File contents.
        modified: Last modification time (UTC).
    """

    path: Path
    raw: bytes
    modified: datetime

    @classmethod
    def read(cls, path: Path) -> SourceDocument:
        raw = path.read_bytes()
        modified = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
        return cls(path=path, raw=raw, modified=modified)

    @property
    def text(self) -> str:
        return self.raw.decode("utf-8")


@dataclass
class Page:
    """Represents a site page with its metadata and rendered content.

    Content pages come from a source document. Aggregate pages (the index
    and one page per tag) have no source and list their ``children``.

    Attributes:
        slug: Filename without extension; never changes once set.
        destination: Output file path.
        frontmatter: Parsed front matter.
        content: Rendered HTML, trusted by layouts.
        body: Body text left after front matter extraction.
        source: Source document, None for aggregate pages.
        children: Pages listed by an aggregate page.
        assets: Site-wide asset list, or None.
        root_url: Root URL of the published site, empty if unknown.
        layout: Layout template path, None for the built-in one.
        section: Output subdirectory of the page, empty for the root.
        site: Site-wide metadata that front matter overrides.
        created: Build time, the last-resort date.
    """

    slug: str
    destination: Path
    frontmatter: FrontMatter = field(default_factory=FrontMatter)
    content: Markup = field(default_factory=Markup)
    body: str = ""
    source: SourceDocument | None = None
    children: list[Page] = field(default_factory=list)
    assets: AssetList | None = None
    root_url: str = ""
    layout: Path | None = None
    section: str = ""
    site: SiteMeta = field(default_factory=SiteMeta)
    created: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def title(self) -> str:
        """Front matter title, the site title for aggregates, else the slug."""
        if self.frontmatter.title:
            return self.frontmatter.title
        if self.is_aggregate and self.site.title:
            return self.site.title
        return self.slug

    @property
    def description(self) -> str:
        return self.frontmatter.description or self.site.description

    @property
    def image(self) -> str:
        return self.frontmatter.image or self.site.image

    @property
    def twitter(self) -> str:
        return self.frontmatter.twitter or self.site.twitter

    @property
    def twitter_handle(self) -> str:
        """Author handle with a single leading ``@``, empty if unset."""
        handle = self.twitter.lstrip("@")
        return f"@{handle}" if handle else ""

    @property
    def tags(self) -> tuple[str, ...]:
        return self.frontmatter.tags

    @property
    def date(self) -> datetime:
        """Resolved date: front matter timestamp, then file mtime, then build time."""
        parsed = parse_timestamp(self.frontmatter.timestamp)
        if parsed is not None:
            return parsed
        if self.source is not None:
            return self.source.modified
        return self.created

    @property
    def location(self) -> str:
        """Output path relative to the output root, e.g. ``tag/go.html``."""
        filename = f"{self.slug}.html"
        return f"{self.section}/{filename}" if self.section else filename

    @property
    def relative_root(self) -> str:
        """Prefix leading from this page back to the output root."""
        if not self.section:
            return ""
        return "../" * len(Path(self.section).parts)

    @property
    def url(self) -> str:
        """Canonical link to the page.

        Without a site URL this is the absolute path of the output file.
        """
        if self.root_url:
            return join_root_url(self.root_url, self.location)
        return self.destination.resolve().as_posix()

    @property
    def output_root(self) -> Path:
        """Output directory the page's location is relative to."""
        root = self.destination.parent
        for _ in Path(self.section).parts:
            root = root.parent
        return root

    @property
    def image_url(self) -> str:
        """Absolute link to the social card image.

        Full URLs are used as is. Other values are taken relative to the
        output root, like every other site link.
        """
        image = self.image
        if not image or "://" in image:
            return image
        if self.root_url:
            return join_root_url(self.root_url, image)
        return (self.output_root / image.lstrip("/")).resolve().as_posix()

    @property
    def has_assets(self) -> bool:
        return bool(self.assets and self.assets.css)

    @property
    def is_aggregate(self) -> bool:
        return self.source is None

    def href(self, path: str) -> str:
        """Link to a path relative to the output root."""
        if self.root_url:
            return join_root_url(self.root_url, path)
        return f"{self.relative_root}{path}"

    def render_context(self) -> RenderContext:
        return RenderContext(
            slug=self.slug,
            title=self.title,
            description=self.description,
            tags=self.tags,
        )


class FileContentLoader:
    """Discovers source documents.

    Attributes:
        source: A directory of documents, or a single document.
    """

    def __init__(self, source: Path):
        self.source = source

    def iter_files(self) -> list[Path]:
        """List source files.

        A file source is used as is. For a directory, its Markdown files are
        returned sorted by name; subdirectories are not searched.

        Raises:
            FileNotFoundError: If the source does not exist.
        """
        if not self.source.exists():
            raise FileNotFoundError(f"Source not found: {self.source}")
        if self.source.is_file():
            return [self.source]
        return sorted(
            path for path in self.source.iterdir() if path.is_file() and is_markdown(path)
        )

    def load(self) -> list[SourceDocument]:
        return [SourceDocument.read(path) for path in self.iter_files()]


class PageBuilder:
    """Builds Page objects from source documents.

    Attributes:
        config: Site configuration.
        renderer: Content renderer for page bodies.
    """

    def __init__(self, config: SiteConfig, renderer: ContentRenderer | None = None):
        self.config = config
        self.renderer = renderer or ContentRenderer()

    def build(self, document: SourceDocument) -> Page:
        """Build a Page with rendered content from a source document.

        Raises:
            FrontMatterError: If the front matter block is malformed.
            jinja2.TemplateError: If the body template fails.
        """
        slug = slug_from_name(document.path.name)
        frontmatter, body = extract_frontmatter(document.text)
        page = Page(
            slug=slug,
            destination=self.config.output / f"{slug}.html",
            frontmatter=frontmatter,
            body=body,
            source=document,
            assets=self.config.assets,
            root_url=self.config.site_url,
            layout=self.config.layout,
            site=self.config.meta,
        )
        page.content = self.renderer.render(body, page.render_context())
        return page
