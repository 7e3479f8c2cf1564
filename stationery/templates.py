"""Template rendering engine for Stationery.

This module uses Jinja2 to wrap rendered page content in a layout and write
the result to disk. Layouts receive the page as ``page`` and may include the
shared ``assets.html`` sub-template, which links every configured stylesheet::

    <head>
      <title>{{ page.title }}</title>
      {% if page.has_assets %}{% include "assets.html" %}{% endif %}
    </head>
    <body>{{ page.content }}</body>

Key class:
- TemplateEngine: Renders aggregate listings and writes pages through layouts.
"""

from __future__ import annotations

from pathlib import Path

from jinja2 import (
    ChoiceLoader,
    DictLoader,
    Environment,
    FileSystemLoader,
    Template,
    select_autoescape,
)
from markupsafe import Markup

from .assets import ASSETS_TEMPLATE
from .config import SiteConfig
from .content import Page

DEFAULT_LAYOUT = """\
<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>{{ page.title }}</title>
  {%- if page.description %}
  <meta name="description" content="{{ page.description }}">
  <meta property="og:description" content="{{ page.description }}">
  {%- endif %}
  <meta property="og:title" content="{{ page.title }}">
  {%- if page.image %}
  <meta property="og:image" content="{{ page.image_url }}">
  {%- endif %}
  {%- if page.twitter_handle %}
  <meta name="twitter:card" content="summary">
  <meta name="twitter:creator" content="{{ page.twitter_handle }}">
  <meta name="twitter:site" content="{{ page.twitter_handle }}">
  <meta name="twitter:title" content="{{ page.title }}">
  {%- if page.image %}
  <meta name="twitter:image" content="{{ page.image_url }}">
  {%- endif %}
  {%- endif %}
  {%- if page.has_assets %}
  {% include "assets.html" %}
  {%- endif %}
</head>
<body>
{{ page.content }}
</body>
</html>
"""

INDEX_TEMPLATE = """\
<div id="index">
  <ul>
  {%- for child in page.children %}
    <li><a href="{{ child.url }}">{{ child.title }}</a> \
<time datetime="{{ child.date.isoformat() }}">{{ child.date.strftime("%Y-%m-%d") }}</time>
    {%- for tag in child.tags %} <a class="tag" href="{{ page.href('tag/' ~ tag ~ '.html') }}">#{{ tag }}</a>{% endfor %}</li>
  {%- endfor %}
  </ul>
</div>
"""


class TemplateEngine:
    """Layout rendering and page output.

    Built-in templates (``default.html``, ``index.html`` and the
    ``assets.html`` sub-template) are always available. User layouts are
    read from their configured paths; templates next to them can be
    included by name.

    Attributes:
        config: Site configuration.
        env: Jinja2 environment.
    """

    def __init__(self, config: SiteConfig):
        self.config = config
        layout_dirs = {
            layout.parent
            for layout in (config.layout, config.index_layout)
            if layout is not None
        }
        self.env = Environment(
            loader=ChoiceLoader(
                [
                    DictLoader(
                        {
                            "assets.html": ASSETS_TEMPLATE,
                            "default.html": DEFAULT_LAYOUT,
                            "index.html": INDEX_TEMPLATE,
                        }
                    ),
                    FileSystemLoader(sorted(layout_dirs)),
                ]
            ),
            autoescape=select_autoescape(["html", "htm", "xml"], default=True),
        )
        self._layouts: dict[Path, Template] = {}

    def _resolve_layout_template(self, layout: Path | None) -> Template:
        """Return the layout template for a page.

        Raises:
            FileNotFoundError: If the layout file does not exist.
            jinja2.TemplateSyntaxError: If the layout does not parse.
        """
        if layout is None:
            return self.env.get_template("default.html")
        if layout not in self._layouts:
            source = layout.read_text(encoding="utf-8")
            self._layouts[layout] = self.env.from_string(source)
        return self._layouts[layout]

    def render_page(self, page: Page) -> str:
        """Render a page with its layout.

        Args:
            page: Page with rendered content.

        Returns:
            The complete HTML document.
        """
        template = self._resolve_layout_template(page.layout)
        return template.render(page=page)

    def render_index(self, page: Page) -> Markup:
        """Render the link listing of an aggregate page into its content."""
        listing = self.env.get_template("index.html").render(page=page)
        page.content = Markup(listing)
        return page.content

    def write_page(self, page: Page) -> Path:
        """Render a page and write it to its destination.

        Directories are created as needed. Nothing is cleaned up on failure.

        Returns:
            The written path.
        """
        rendered = self.render_page(page)
        page.destination.parent.mkdir(parents=True, exist_ok=True)
        with open(page.destination, "w", encoding="utf-8") as f:
            f.write(rendered)
        return page.destination
