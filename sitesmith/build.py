"""Site building for sitesmith.

A build runs through fixed stages::

    VALIDATING -> PREPARING -> PARSING -> RENDERING -> DONE

and moves to ERROR from any of them. Every post is parsed before any output
file is written, and every page is rendered in memory before the first page
is written, so a broken post or template never publishes a partial site.

Builds keep no state between runs: each call reads the whole content tree
again and writes the whole output tree again.

Key objects:
- SiteBuilder: Runs one build and tracks its stage.
- build_site: Convenience wrapper returning a BuildResult.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .assets import copy_stylesheet, mirror_assets
from .config import SiteConfig
from .content import Post, Site
from .errors import AssetError, BuildError, ConfigurationError
from .frontmatter import parse_post
from .templates import TemplateEngine
from .utils import ensure_dir, is_markdown, write_atomic

logger = logging.getLogger(__name__)

INDEX_FILENAME = "index.html"


class BuildStage(Enum):
    VALIDATING = "validating"
    PREPARING = "preparing"
    PARSING = "parsing"
    RENDERING = "rendering"
    DONE = "done"
    ERROR = "error"


@dataclass
class BuildResult:
    """Result of a site build.

    Attributes:
        site: The site that was built.
        output_dir: Directory where the site was written.
        written: Every page file written, index last.
    """

    site: Site
    output_dir: Path
    written: list[Path] = field(default_factory=list)

    @property
    def posts(self):
        return self.site.posts


class SiteBuilder:
    """Builds the whole site for one configuration.

    Attributes:
        config: Site configuration.
        stage: Current build stage.
    """

    def __init__(self, config: SiteConfig):
        self.config = config
        self.stage = BuildStage.VALIDATING

    def build(self) -> BuildResult:
        """Run a full build.

        Returns:
            BuildResult for the finished build.

        Raises:
            BuildError: On any configuration, parse, render or I/O failure.
                Unexpected exceptions are wrapped so callers only handle
                BuildError.
        """
        self.stage = BuildStage.VALIDATING
        try:
            self._validate()
            self._advance(BuildStage.PREPARING)
            self._prepare()
            self._advance(BuildStage.PARSING)
            site = Site(self.config, self._parse_posts())
            self._advance(BuildStage.RENDERING)
            written = self._render(site)
        except BuildError:
            self.stage = BuildStage.ERROR
            raise
        except OSError as exc:
            self.stage = BuildStage.ERROR
            raise AssetError(str(exc), _error_path(exc), exc) from exc
        except Exception as exc:
            self.stage = BuildStage.ERROR
            raise BuildError(f"{type(exc).__name__}: {exc}", original_error=exc) from exc
        self._advance(BuildStage.DONE)
        logger.info(
            "Built %d post(s) into %s", len(site.posts), self.config.output_dir
        )
        return BuildResult(site=site, output_dir=self.config.output_dir, written=written)

    def _advance(self, stage: BuildStage) -> None:
        logger.debug("Build stage: %s -> %s", self.stage.value, stage.value)
        self.stage = stage

    def _validate(self) -> None:
        for label, path in (
            ("Theme", self.config.theme_dir),
            ("Content", self.config.content_dir),
        ):
            if not path.is_dir():
                raise ConfigurationError(f"{label} directory missing", path)

    def _prepare(self) -> None:
        for path in (
            self.config.output_dir,
            self.config.output_posts_dir,
            self.config.output_assets_dir,
            self.config.posts_dir,
            self.config.assets_dir,
        ):
            ensure_dir(path)

    def _parse_posts(self) -> list[Post]:
        """Parse every content file in the posts directory.

        Files are read in name order. The first file that fails to parse
        aborts the build.
        """
        files = [
            path
            for path in sorted(self.config.posts_dir.iterdir())
            if path.is_file() and is_markdown(path)
        ]
        if not files:
            logger.warning("No posts found in %s", self.config.posts_dir)
        posts: list[Post] = []
        for path in files:
            post = parse_post(path.read_bytes(), source=path)
            posts.append(post.apply_defaults(self.config))
        return posts

    def _render(self, site: Site) -> list[Path]:
        """Copy assets, render every page in memory, then write them out."""
        config = self.config
        mirror_assets(config.assets_dir, config.output_assets_dir)
        mirror_assets(config.theme_assets_dir, config.output_assets_dir)
        copy_stylesheet(config.stylesheet, config.output_assets_dir)

        engine = TemplateEngine(config.theme_dir)
        pages: list[tuple[Path, str]] = []
        seen: dict[str, Post] = {}
        for post in site.posts:
            if post.link in seen:
                logger.warning(
                    "%s and %s share the link %s; the latter overwrites the former",
                    seen[post.link].source,
                    post.source,
                    post.link,
                )
            seen[post.link] = post
            pages.append((config.output_posts_dir / post.link, engine.render_post(post, site)))
        pages.append((config.output_dir / INDEX_FILENAME, engine.render_index(site)))

        for path, html in pages:
            write_atomic(path, html)
        return [path for path, _ in pages]


def build_site(config: SiteConfig) -> BuildResult:
    """Build the entire static site.

    Args:
        config: Site configuration.

    Returns:
        BuildResult with the site model and written files.
    """
    return SiteBuilder(config).build()


def _error_path(exc: OSError) -> Path | None:
    return Path(exc.filename) if exc.filename else None
