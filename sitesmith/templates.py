"""Template rendering engine for sitesmith.

This module uses Jinja2 to render the active theme. A theme provides two
templates:

- ``post.html``: rendered once per post with ``post``, ``site`` and ``config``.
- ``index.html``: rendered once with ``site``, ``config`` and ``posts``.

Helpers available to theme authors:

- ``has_cover(post_or_url)``: true when a cover image is set.
- ``sort_by_date(posts)``: posts newest first (also usable as a filter).
- ``now()``: the current local time as a datetime.

Key class:
- TemplateEngine: Loads theme templates and renders posts and the index.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateNotFound,
    TemplateSyntaxError,
    UndefinedError,
    select_autoescape,
)

from .collections import sort_by_date
from .content import Post, Site
from .errors import RenderError

POST_TEMPLATE = "post.html"
INDEX_TEMPLATE = "index.html"

__all__ = ["TemplateEngine", "has_cover", "now"]


def has_cover(value: Any) -> bool:
    """Return True if a post (or a cover image value) has a cover image.

    Args:
        value: A Post, or the cover image string itself.

    Returns:
        True iff the cover image is non-empty.
    """
    if isinstance(value, Post):
        return bool(value.cover_image)
    return bool(value)


def now() -> datetime:
    """Return the current local time."""
    return datetime.now()


def _format_error_message(exc: Exception) -> str:
    """Format a template exception into a user-friendly error message."""
    error_type = type(exc).__name__
    if isinstance(exc, UndefinedError):
        return f"Undefined variable: {exc}"
    if isinstance(exc, TemplateNotFound):
        return f"Template not found: {exc}"
    return f"{error_type}: {exc}"


class TemplateEngine:
    """Template rendering engine using Jinja2.

    Attributes:
        theme_dir: Directory containing the theme templates.
        env: Jinja2 environment.
    """

    def __init__(self, theme_dir: Path):
        """Initialize the template engine.

        Args:
            theme_dir: Directory with post.html and index.html.
        """
        self.theme_dir = theme_dir
        self.env = Environment(
            loader=FileSystemLoader(str(theme_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            undefined=StrictUndefined,
        )
        self._install_globals()

    def _install_globals(self) -> None:
        """Install helper functions in the Jinja environment."""
        self.env.globals["has_cover"] = has_cover
        self.env.globals["sort_by_date"] = sort_by_date
        self.env.globals["now"] = now
        self.env.filters["sort_by_date"] = sort_by_date
        self.env.tests["with_cover"] = has_cover

    def _render(self, name: str, context: dict[str, Any]) -> str:
        """Render a named template, turning Jinja errors into RenderError."""
        try:
            template = self.env.get_template(name)
            return template.render(**context)
        except TemplateSyntaxError as exc:
            raise RenderError(
                f"Template syntax error on line {exc.lineno}: {exc.message}",
                self.theme_dir / name,
                exc,
            ) from exc
        except Exception as exc:
            raise RenderError(
                _format_error_message(exc), self.theme_dir / name, exc
            ) from exc

    def render_post(self, post: Post, site: Site) -> str:
        """Render a single post page.

        Args:
            post: Post to render.
            site: Site the post belongs to.

        Returns:
            Rendered HTML string.

        Raises:
            RenderError: If the template is missing or fails.
        """
        context = {"post": post, "site": site, "config": site.config}
        return self._render(POST_TEMPLATE, context)

    def render_index(self, site: Site) -> str:
        """Render the site index.

        Args:
            site: Site to list.

        Returns:
            Rendered HTML string.

        Raises:
            RenderError: If the template is missing or fails.
        """
        context = {"site": site, "config": site.config, "posts": site.posts}
        return self._render(INDEX_TEMPLATE, context)
