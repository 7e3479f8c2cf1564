"""Page ordering and aggregate pages for Stationery.

Everything here works on the in-memory pages of one build: the sorted page
list, the tag index built from it, and the synthetic index and tag pages
that list other pages.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from .config import SiteConfig
from .content import Page


def sort_pages(pages: Iterable[Page]) -> list[Page]:
    """Sort pages by resolved date, newest first.

    The relative order of pages with equal dates is not part of the contract.
    """
    return sorted(pages, key=lambda p: p.date, reverse=True)


class TagIndex(Mapping[str, tuple[Page, ...]]):
    """Mapping of tag name to the pages carrying it, in first-seen order."""

    def __init__(self, mapping: dict[str, list[Page]]):
        self._mapping = {k: tuple(v) for k, v in mapping.items()}

    def __getitem__(self, key: str) -> tuple[Page, ...]:
        return self._mapping[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._mapping)

    def __len__(self) -> int:
        return len(self._mapping)

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"TagIndex({len(self._mapping)} tags)"


def build_tags_index(pages: Iterable[Page]) -> TagIndex:
    """Build an index mapping tags to lists of pages containing that tag.

    Pages are visited in the given order, so buckets keep the order of the
    already sorted page list.

    Args:
        pages: Sorted pages.

    Returns:
        TagIndex of tag name to pages.
    """
    tags: dict[str, list[Page]] = {}
    for page in pages:
        for tag in page.tags:
            tags.setdefault(tag, []).append(page)
    return TagIndex(tags)


def index_page(pages: Iterable[Page], config: SiteConfig) -> Page:
    """Create the aggregate page listing every page at ``index.html``."""
    return Page(
        slug="index",
        destination=config.output / "index.html",
        children=list(pages),
        assets=config.assets,
        root_url=config.site_url,
        layout=config.index_layout,
        site=config.meta,
    )


def tag_pages(tag_index: TagIndex, config: SiteConfig) -> list[Page]:
    """Create one aggregate page per tag at ``tag/<tag>.html``."""
    return [
        Page(
            slug=tag,
            destination=config.output / "tag" / f"{tag}.html",
            children=list(pages),
            assets=config.assets,
            root_url=config.site_url,
            layout=config.index_layout,
            section="tag",
            site=config.meta,
        )
        for tag, pages in tag_index.items()
    ]
