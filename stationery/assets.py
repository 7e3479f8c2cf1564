"""Asset handling for Stationery.

Stylesheets, scripts and images listed in the site configuration are copied
byte for byte from ``assets/<kind>/`` in the project into ``<output>/<kind>/``.
Pages only reference the copies; the shared "assets" sub-template below emits
one ``<link>`` tag per configured stylesheet.

Key components:
- AssetList: The configured asset file names, grouped by kind.
- AssetPipeline: Copies the configured assets into the output tree.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path

ASSETS_TEMPLATE = """\
{% for name in page.assets.css %}
    <link type="text/css" rel="stylesheet" href="{{ page.href('css/' ~ name) }}">
{%- endfor %}
"""

ASSET_KINDS = ("css", "js", "images")


@dataclass(frozen=True)
class AssetList:
    """Asset file names to publish, grouped by kind.

    Attributes:
        css: Stylesheet names under ``assets/css``.
        js: Script names under ``assets/js``.
        images: Image names under ``assets/images``.
    """

    css: tuple[str, ...] = ()
    js: tuple[str, ...] = ()
    images: tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.css or self.js or self.images)


class AssetPipeline:
    """Copies the configured static assets into the output directory.

    Attributes:
        assets_dir: Directory containing source assets.
        output_dir: Directory where copies are written.
        assets: The asset list to publish, or None.
    """

    def __init__(self, project_root: Path, output_dir: Path, assets: AssetList | None):
        self.assets_dir = project_root / "assets"
        self.output_dir = output_dir
        self.assets = assets

    def run(self) -> list[Path]:
        """Copy every listed asset.

        Returns:
            Paths of the written copies, in configuration order.

        Raises:
            FileNotFoundError: If a listed asset does not exist.
        """
        written: list[Path] = []
        if not self.assets:
            return written
        for kind in ASSET_KINDS:
            names = getattr(self.assets, kind)
            if not names:
                continue
            target = self.output_dir / kind
            target.mkdir(parents=True, exist_ok=True)
            for name in names:
                dest = target / name
                shutil.copyfile(self.assets_dir / kind / name, dest)
                written.append(dest)
        return written
