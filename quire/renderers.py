"""Markdown rendering for Quire.

Content bodies are converted to HTML with mistune. Headings get stable,
de-duplicated ``id`` attributes so layouts and readers can link to them, and
fenced code blocks with a known language are highlighted with Pygments.

Key classes:
- MarkdownRenderer: Converts a Markdown body into HTML.
"""

from __future__ import annotations

import re

import mistune
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

MARKDOWN_PLUGINS = ["strikethrough", "footnotes", "table", "url"]

_TAG_RE = re.compile(r"<[^>]+>")


def _slugify_heading(html: str) -> str:
    """Turn rendered heading HTML into an anchor slug.

    Inline markup is dropped first, so ``Using <code>sass</code>`` becomes
    ``using-sass``. Headings with no word characters fall back to ``section``.
    """
    text = _TAG_RE.sub("", html).lower()
    words = re.findall(r"[\w-]+", text)
    return re.sub(r"-{2,}", "-", "-".join(words)).strip("-") or "section"


class _HighlightRenderer(mistune.HTMLRenderer):
    """HTML renderer adding heading IDs and Pygments highlighting."""

    def __init__(self):
        super().__init__(escape=False)
        self._used_ids: set[str] = set()

    def _unique_id(self, base: str) -> str:
        candidate, n = base, 0
        while candidate in self._used_ids:
            n += 1
            candidate = f"{base}-{n}"
        self._used_ids.add(candidate)
        return candidate

    def heading(self, text: str, level: int, **attrs) -> str:
        heading_id = self._unique_id(_slugify_heading(text))
        return f'<h{level} id="{heading_id}">{text}</h{level}>\n'

    def block_code(self, code: str, info: str | None = None) -> str:
        """Render a code block, highlighted when the language is known.

        Args:
            code: The code content.
            info: Language identifier (e.g., 'python', 'javascript').

        Returns:
            HTML string with the code block.
        """
        if info:
            try:
                lexer = get_lexer_by_name(info, stripall=True)
            except ClassNotFound:
                lexer = None
            if lexer is not None:
                formatter = HtmlFormatter(nowrap=False, cssclass="highlight")
                return highlight(code, lexer, formatter)
        escaped = code.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
        lang_class = f' class="language-{info}"' if info else ""
        return f"<pre><code{lang_class}>{escaped}</code></pre>\n"


class MarkdownRenderer:
    """Renders Markdown bodies to HTML.

    A fresh mistune renderer is built for every call so heading IDs are
    unique per document, not per process.
    """

    def render(self, body: str) -> str:
        """Render Markdown source to HTML.

        Args:
            body: Markdown source.

        Returns:
            Rendered HTML.
        """
        markdown = mistune.create_markdown(
            renderer=_HighlightRenderer(), plugins=MARKDOWN_PLUGINS
        )
        return markdown(body)


default_markdown_renderer = MarkdownRenderer()
