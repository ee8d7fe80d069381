"""Markdown body rendering for sitesmith.

Post bodies are converted to an HTML fragment with mistune. Raw HTML in the
source is escaped and unsafe link schemes are neutralised, so the fragment is
safe to drop into a theme template unescaped.

Key objects:
- render_markdown: Convert a Markdown body to sanitized HTML.
"""

from __future__ import annotations

import mistune
from markupsafe import Markup
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

_PLUGINS = ["strikethrough", "footnotes", "table", "url"]


class _HighlightRenderer(mistune.HTMLRenderer):
    """HTML renderer that escapes raw HTML and highlights fenced code."""

    def __init__(self):
        super().__init__(escape=True)

    def block_code(self, code: str, info: str | None = None) -> str:
        """Render a code block with Pygments syntax highlighting.

        Unknown languages fall back to a plain escaped block.

        Args:
            code: The code content.
            info: Language identifier (e.g., 'python', 'javascript').

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
                formatter = HtmlFormatter(nowrap=False, cssclass="highlight")
                return highlight(code, lexer, formatter)
        escaped = mistune.escape(code)
        lang_class = f' class="language-{mistune.escape(lang)}"' if lang else ""
        return f"<pre><code{lang_class}>{escaped}</code></pre>\n"


def render_markdown(text: str) -> Markup:
    """Render Markdown to a sanitized HTML fragment.

    Args:
        text: Markdown source (the post body, without metadata).

    Returns:
        HTML fragment, marked safe for templates.
    """
    markdown = mistune.create_markdown(
        renderer=_HighlightRenderer(), plugins=_PLUGINS
    )
    return Markup(markdown(text))
