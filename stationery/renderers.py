"""Content rendering for Stationery.

A document body goes through two mandatory stages:

1. The body is executed as a Jinja template against a :class:`RenderContext`,
   so authors can call helpers such as ``{{ timestamp("2018-03-24") }}``
   inline in their prose.
2. The template output is converted from Markdown to HTML.

Templating runs first so that a helper's textual output is itself Markdown
and gets formatted along with the rest of the page.

Comments in a body are written ``{{/* like this */}}``. Jinja's usual ``{#``
opener is plain text here, so Markdown such as ``## Title {#anchor}`` passes
through untouched.

Key classes:
- RenderContext: The whitelisted values and helpers visible to a body template.
- MarkdownRenderer: Renders Markdown to HTML with syntax highlighting.
- ContentRenderer: Runs both stages.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import mistune
from jinja2 import StrictUndefined
from jinja2.sandbox import SandboxedEnvironment
from markupsafe import Markup
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

MARKDOWN_PLUGINS = ["strikethrough", "footnotes", "table", "url"]


@dataclass(frozen=True)
class RenderContext:
    """Values a document body can reach from its own template.

    Only these attributes and the helper methods below are exposed; the page
    object itself never enters the template.

    Attributes:
        slug: Page slug.
        title: Resolved page title.
        description: Front matter description.
        tags: Front matter tags.
    """

    slug: str
    title: str
    description: str = ""
    tags: tuple[str, ...] = field(default_factory=tuple)

    def timestamp(self, label: str) -> str:
        """Return a Markdown anchor pointing at itself.

        ``timestamp("2018-03-24")`` gives ``[@ 2018-03-24](#2018-03-24)``.
        """
        return f"[@ {label}](#{label})"

    def template_vars(self) -> dict[str, Any]:
        return {"page": self, "timestamp": self.timestamp}


class _HighlightRenderer(mistune.HTMLRenderer):
    """HTML renderer that passes raw HTML through and highlights code."""

    def __init__(self):
        super().__init__(escape=False)

    def block_code(self, code: str, info: str | None = None) -> str:
        """Render a code block with Pygments syntax highlighting.

        Args:
            code: The code content.
            info: Language identifier (e.g., 'python', 'go').

        Returns:
            HTML string with highlighted code.
        """
        lang = info.split()[0] if info and info.strip() else ""
        if lang:
            try:
                lexer = get_lexer_by_name(lang, stripall=True)
            except ClassNotFound:
                lexer = None
            if lexer is not None:
                return highlight(code, lexer, HtmlFormatter(cssclass="highlight"))
        escaped = code.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
        lang_class = f' class="language-{lang}"' if lang else ""
        return f"<pre><code{lang_class}>{escaped}</code></pre>\n"


class MarkdownRenderer:
    """Renders Markdown content to HTML."""

    def render(self, content: str) -> Markup:
        """Render Markdown content to HTML.

        Args:
            content: Markdown source content.

        Returns:
            Rendered HTML, marked safe for layouts.
        """
        markdown = mistune.create_markdown(
            renderer=_HighlightRenderer(), plugins=MARKDOWN_PLUGINS
        )
        return Markup(markdown(content))


class ContentRenderer:
    """Turns a document body into trusted HTML.

    Attributes:
        env: Sandboxed Jinja environment for body templates.
        markdown: Markdown renderer used after templating.
    """

    def __init__(self, markdown: MarkdownRenderer | None = None):
        self.env = SandboxedEnvironment(
            comment_start_string="{{/*",
            comment_end_string="*/}}",
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )
        self.markdown = markdown or MarkdownRenderer()

    def render_template(self, body: str, context: RenderContext) -> str:
        """Execute the body as a template.

        Raises:
            jinja2.TemplateError: On syntax or execution errors.
        """
        template = self.env.from_string(body)
        return template.render(**context.template_vars())

    def render(self, body: str, context: RenderContext) -> Markup:
        """Run the template stage, then the Markdown stage."""
        return self.markdown.render(self.render_template(body, context))
