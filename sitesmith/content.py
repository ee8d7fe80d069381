"""Content model for sitesmith.

Key classes:
- Post: One parsed content document.
- Site: The configuration plus every post of one build.

Posts are created fresh on every build and thrown away afterwards. The only
change made after parsing is filling in the author fields from the site
defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .collections import PostCollection
from .config import SiteConfig
from .utils import post_link


@dataclass
class Post:
    """Represents one content document.

    Attributes:
        title: Post title.
        date: Publication date as a sortable string (YYYY-MM-DD).
        author: Author name.
        author_image: Author image URL or path.
        description: Short description.
        cover_image: Cover image URL or path; empty when there is none.
        body: Raw markup text after the metadata block.
        content: Rendered, sanitized HTML of the body.
        source: Path to the source file, if the post came from disk.
    """

    title: str
    date: str
    author: str = ""
    author_image: str = ""
    description: str = ""
    cover_image: str = ""
    body: str = ""
    content: str = ""
    source: Path | None = field(default=None, compare=False)

    @property
    def link(self) -> str:
        """Output filename, e.g. ``2024-01-01-Hello_World.html``."""
        return post_link(self.date, self.title)

    @property
    def has_cover(self) -> bool:
        return bool(self.cover_image)

    def apply_defaults(self, config: SiteConfig) -> Post:
        """Backfill author fields left empty from the site configuration."""
        if not self.author:
            self.author = config.author
        if not self.author_image:
            self.author_image = config.author_image
        return self


@dataclass
class Site:
    """Everything a theme needs for one build.

    Attributes:
        config: Site configuration.
        posts: Posts in the order they were read from disk.
    """

    config: SiteConfig
    posts: PostCollection = field(default_factory=lambda: PostCollection([]))

    def __post_init__(self):
        if not isinstance(self.posts, PostCollection):
            self.posts = PostCollection(self.posts)

    @property
    def title(self) -> str:
        return self.config.title

    @property
    def author(self) -> str:
        return self.config.author

    @property
    def description(self) -> str:
        return self.config.description

    def sorted_posts(self) -> PostCollection:
        """Posts newest first; equal dates keep read order."""
        return self.posts.sorted()
