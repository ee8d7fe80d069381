"""Site configuration for sitesmith.

The configuration is loaded once per build or watch session from
``sitesmith.yaml`` and passed explicitly to the builder, the watch loop and
the preview server. It is immutable for the lifetime of a session.

Key objects:
- SiteConfig: Frozen dataclass with site settings and derived paths.
- load_config: Reads sitesmith.yaml and applies defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigurationError

CONFIG_FILENAME = "sitesmith.yaml"

DEFAULT_CONFIG: dict[str, Any] = {
    "title": "My Site",
    "author": "",
    "author_image": "",
    "description": "",
    "favicon": "",
    "github": "",
    "linkedin": "",
    "email": "",
    "theme": "default",
    "themes_dir": "themes",
    "content_dir": "content",
    "output_dir": "public",
    "port": 8080,
}

# Keys accepted in camelCase for configs written by older tooling.
_KEY_ALIASES = {
    "authorImg": "author_image",
    "authorImage": "author_image",
    "contentDir": "content_dir",
    "outputDir": "output_dir",
    "themesDir": "themes_dir",
}

_PATH_KEYS = ("themes_dir", "content_dir", "output_dir")

POSTS_DIRNAME = "posts"
ASSETS_DIRNAME = "assets"
STYLESHEET_NAME = "style.css"


@dataclass(frozen=True)
class SiteConfig:
    """Immutable site settings.

    Attributes:
        title: Site title.
        author: Default author for posts that do not name one.
        author_image: Default author image for posts that do not set one.
        description: Site description.
        favicon: Optional favicon reference used by themes.
        github: GitHub profile URL.
        linkedin: LinkedIn profile URL.
        email: Contact email address.
        theme: Name of the active theme under themes_dir.
        themes_dir: Directory holding themes.
        content_dir: Directory holding posts/ and assets/.
        output_dir: Directory the site is built into.
        port: Port used by the preview server.
    """

    title: str = DEFAULT_CONFIG["title"]
    author: str = ""
    author_image: str = ""
    description: str = ""
    favicon: str = ""
    github: str = ""
    linkedin: str = ""
    email: str = ""
    theme: str = DEFAULT_CONFIG["theme"]
    themes_dir: Path = Path(DEFAULT_CONFIG["themes_dir"])
    content_dir: Path = Path(DEFAULT_CONFIG["content_dir"])
    output_dir: Path = Path(DEFAULT_CONFIG["output_dir"])
    port: int = DEFAULT_CONFIG["port"]

    @property
    def theme_dir(self) -> Path:
        return self.themes_dir / self.theme

    @property
    def theme_assets_dir(self) -> Path:
        return self.theme_dir / ASSETS_DIRNAME

    @property
    def stylesheet(self) -> Path:
        return self.theme_dir / STYLESHEET_NAME

    @property
    def posts_dir(self) -> Path:
        return self.content_dir / POSTS_DIRNAME

    @property
    def assets_dir(self) -> Path:
        return self.content_dir / ASSETS_DIRNAME

    @property
    def output_posts_dir(self) -> Path:
        return self.output_dir / POSTS_DIRNAME

    @property
    def output_assets_dir(self) -> Path:
        return self.output_dir / ASSETS_DIRNAME

    @property
    def social_links(self) -> dict[str, str]:
        """Return the configured social links, skipping empty ones."""
        links = {
            "github": self.github,
            "linkedin": self.linkedin,
            "email": f"mailto:{self.email}" if self.email else "",
        }
        return {name: url for name, url in links.items() if url}

    @classmethod
    def from_mapping(
        cls, values: dict[str, Any], project_root: Path | None = None
    ) -> SiteConfig:
        """Build a config from a raw mapping, applying defaults and aliases.

        Args:
            values: Raw key/value pairs, snake_case or camelCase.
            project_root: Base for relative directory settings.

        Returns:
            A new SiteConfig.
        """
        merged = DEFAULT_CONFIG.copy()
        for key, value in values.items():
            key = _KEY_ALIASES.get(key, key)
            if key in merged and value is not None:
                merged[key] = value

        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {k: v for k, v in merged.items() if k in known}
        for key in _PATH_KEYS:
            path = Path(str(kwargs[key]))
            if project_root is not None and not path.is_absolute():
                path = project_root / path
            kwargs[key] = path
        for key in known - set(_PATH_KEYS) - {"port"}:
            kwargs[key] = str(kwargs[key])
        try:
            kwargs["port"] = int(kwargs["port"])
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(
                f"port must be an integer, got {kwargs['port']!r}"
            ) from exc
        return cls(**kwargs)


def load_config(project_root: Path) -> SiteConfig:
    """Load site configuration from sitesmith.yaml.

    A missing file yields the defaults.

    Args:
        project_root: Root directory of the project.

    Returns:
        SiteConfig with defaults applied and directories resolved.

    Raises:
        ConfigurationError: If the file is not valid YAML or not a mapping.
    """
    config_path = project_root / CONFIG_FILENAME
    loaded: Any = {}
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            try:
                loaded = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise ConfigurationError(
                    f"Invalid YAML: {exc}", config_path, exc
                ) from exc
        if not isinstance(loaded, dict):
            raise ConfigurationError(
                "Expected a mapping of settings", config_path
            )
    return SiteConfig.from_mapping(loaded, project_root)
