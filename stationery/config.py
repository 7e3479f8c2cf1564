"""Site configuration for Stationery.

The configuration lives in ``.station.yml`` at the project root and is loaded
once into an immutable :class:`SiteConfig`, which is then handed to every
component that needs it.

Example::

    source: posts
    output: public
    layout: layouts/page.html
    index-layout: layouts/index.html
    site-url: https://example.com
    title: My log
    description: Things I wrote down
    twitter: janedoe
    image: images/avatar.jpg
    name: Jane Doe
    email: jane@example.com
    assets:
      css:
        - site.css
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .assets import ASSET_KINDS, AssetList

CONFIG_FILE = ".station.yml"

DEFAULT_CONFIG: dict[str, Any] = {
    "source": "src",
    "output": "out",
    "layout": None,
    "index_layout": None,
    "site_url": "",
    "title": "",
    "description": "",
    "twitter": "",
    "image": "",
    "name": "",
    "email": "",
    "assets": None,
}


class ConfigError(Exception):
    """Raised when the configuration file cannot be used.

    Attributes:
        path: Path to the configuration file.
        message: Human-readable error message.
    """

    def __init__(self, path: Path, message: str):
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


@dataclass(frozen=True)
class SiteMeta:
    """Site-wide page metadata that front matter can override.

    Attributes:
        title: Site title, used by the index and tag pages.
        description: Default page description.
        image: Default social card image, relative to the output root.
        twitter: Default author handle.
    """

    title: str = ""
    description: str = ""
    image: str = ""
    twitter: str = ""


@dataclass(frozen=True)
class SiteConfig:
    """Resolved, read-only site configuration.

    Attributes:
        source: Directory of markdown documents, or a single document.
        output: Output directory.
        layout: Layout template for content pages (None for the built-in one).
        index_layout: Layout template for index and tag pages.
        site_url: Root URL of the published site, empty if unknown.
        title: Site and feed title.
        description: Site and feed description.
        twitter: Default author handle for pages.
        image: Default social card image for pages.
        name: Author name used in the feed.
        email: Author email used in the feed.
        assets: Assets to copy and link, or None.
    """

    source: Path
    output: Path
    layout: Path | None = None
    index_layout: Path | None = None
    site_url: str = ""
    title: str = ""
    description: str = ""
    twitter: str = ""
    image: str = ""
    name: str = ""
    email: str = ""
    assets: AssetList | None = None

    @property
    def meta(self) -> SiteMeta:
        return SiteMeta(
            title=self.title,
            description=self.description,
            image=self.image,
            twitter=self.twitter,
        )


def load_config(project_root: Path, filename: str | Path | None = None) -> SiteConfig:
    """Load site configuration from ``.station.yml``.

    Args:
        project_root: Root directory of the project; relative paths in the
            configuration are resolved against it.
        filename: Optional configuration file to read instead of the default.
            Unlike the default file, it must exist.

    Returns:
        SiteConfig with defaults applied.

    Raises:
        ConfigError: If the file is not valid YAML or has wrongly typed values,
            or an explicitly named file is missing.
    """
    config_path = project_root / (filename or CONFIG_FILE)
    if filename and not config_path.is_file():
        raise ConfigError(config_path, "configuration file not found")
    values = DEFAULT_CONFIG.copy()
    if config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(config_path, f"invalid YAML: {exc}") from exc
        if not isinstance(loaded, dict):
            raise ConfigError(config_path, "expected a mapping at the top level")
        values.update({str(key).replace("-", "_"): value for key, value in loaded.items()})
    return parse_config(values, project_root, config_path)


def parse_config(values: dict[str, Any], project_root: Path, origin: Path) -> SiteConfig:
    """Build a SiteConfig from raw key/value data.

    Args:
        values: Configuration values with underscore keys.
        project_root: Directory relative paths are resolved against.
        origin: Where the values came from, for error messages.

    Returns:
        SiteConfig instance.
    """

    def text(key: str) -> str:
        value = values.get(key)
        if value is None:
            return ""
        if isinstance(value, (dict, list)):
            raise ConfigError(origin, f"'{key}' must be a string")
        return str(value)

    def path(key: str) -> Path | None:
        value = text(key)
        return project_root / value if value else None

    layout = path("layout")
    return SiteConfig(
        source=path("source") or project_root / DEFAULT_CONFIG["source"],
        output=path("output") or project_root / DEFAULT_CONFIG["output"],
        layout=layout,
        index_layout=path("index_layout") or layout,
        site_url=text("site_url"),
        title=text("title"),
        description=text("description"),
        twitter=text("twitter"),
        image=text("image"),
        name=text("name"),
        email=text("email"),
        assets=_parse_assets(values.get("assets"), origin),
    )


def _parse_assets(raw: Any, origin: Path) -> AssetList | None:
    """Parse the ``assets`` section.

    Args:
        raw: Value of the ``assets`` key.
        origin: Configuration file path, for error messages.

    Returns:
        AssetList, or None when the section is absent or empty.
    """
    if not raw:
        return None
    if not isinstance(raw, dict):
        raise ConfigError(origin, "'assets' must be a mapping")
    groups: dict[str, tuple[str, ...]] = {}
    for kind in ASSET_KINDS:
        names = raw.get(kind) or []
        if isinstance(names, str):
            names = [names]
        if not isinstance(names, list):
            raise ConfigError(origin, f"'assets.{kind}' must be a list of file names")
        groups[kind] = tuple(str(name) for name in names)
    assets = AssetList(**groups)
    return assets or None
