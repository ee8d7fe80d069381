"""Command-line interface for sitesmith.

This module defines the CLI commands using the Click framework.

Commands:
- new: Scaffold a new site with the bundled default theme.
- build: Build the site into the output directory.
- watch: Build, serve the output and rebuild on changes.
- post: Create a new post interactively.
"""

from __future__ import annotations

import logging
import shutil
from datetime import date
from pathlib import Path

import click
import questionary
import yaml

from . import __version__
from .config import CONFIG_FILENAME, load_config
from .errors import SitesmithError

# Path to the theme shipped with the package
_THEMES_DIR = Path(__file__).parent / "themes"

_WELCOME_POST = """---
title: Hello World
date: {date}
description: The first post on this site.
---

# Hello World

Edit `content/posts/` to add more posts, then run `sitesmith watch`.
"""


@click.group()
@click.version_option(version=__version__, prog_name="sitesmith")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
def cli(verbose: bool):
    """sitesmith static site generator."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("name")
@click.option("--title", default="My Site", help="Site title")
@click.option("--author", default="", help="Default post author")
@click.option("--description", default="", help="Site description")
@click.option("--author-image", default="", help="Author image URL")
@click.option("--github", default="", help="GitHub profile URL")
@click.option("--linkedin", default="", help="LinkedIn profile URL")
@click.option("--email", default="", help="Contact email address")
def new(
    name: str,
    title: str,
    author: str,
    description: str,
    author_image: str,
    github: str,
    linkedin: str,
    email: str,
):
    """Scaffold a new site."""
    target = Path(name).resolve()
    if target.exists() and any(target.iterdir()):
        raise click.ClickException(
            f"Refusing to initialize into non-empty directory: {target}"
        )
    settings = {
        "title": title,
        "author": author,
        "author_image": author_image,
        "description": description,
        "github": github,
        "linkedin": linkedin,
        "email": email,
    }
    _scaffold(target, settings)
    click.echo(f"New site created at {target}")


@cli.command()
def build():
    """Build the site into the output directory."""
    project_root = Path.cwd()
    from .build import build_site

    try:
        result = build_site(load_config(project_root))
    except SitesmithError as exc:
        _report_failure(exc, project_root)
        raise SystemExit(1) from None
    click.echo(f"Built {len(result.posts)} posts into {result.output_dir}")


@cli.command()
@click.option(
    "--port",
    type=int,
    required=False,
    help="Port to run the preview server (overrides sitesmith.yaml)",
)
def watch(port: int | None):
    """Build, serve and rebuild on changes."""
    project_root = Path.cwd()
    from .build import build_site
    from .server import PreviewServer
    from .watch import WatchLoop

    try:
        config = load_config(project_root)
    except SitesmithError as exc:
        _report_failure(exc, project_root)
        raise SystemExit(1) from None

    try:
        build_site(config)
    except SitesmithError as exc:
        _report_failure(exc, project_root)

    server = PreviewServer(config.output_dir, port=port or config.port)
    try:
        server.start()
    except OSError as exc:
        raise click.ClickException(f"Could not start preview server: {exc}") from exc
    click.echo(f"Visit {server.url} to view your site")

    loop = WatchLoop(config)
    try:
        loop.run()
    except KeyboardInterrupt:
        click.echo("Stopping.")
    except SitesmithError as exc:
        _report_failure(exc, project_root)
        raise SystemExit(1) from None
    finally:
        server.shutdown()


@cli.command()
def post():
    """Create a new post interactively."""
    project_root = Path.cwd()
    config = load_config(project_root)

    title = questionary.text(
        "Title:",
        validate=metadata_validator("Title", required=True, in_filename=True),
        style=_questionary_style(),
    ).ask()
    if title is None:
        raise click.Abort()

    answers = {"title": title.strip()}
    prompts = [
        (
            "date",
            "Date (YYYY-MM-DD):",
            date.today().isoformat(),
            metadata_validator("Date", required=True, in_filename=True),
        ),
        ("author", "Author:", config.author, metadata_validator("Author")),
        ("author_image", "Author image:", config.author_image, None),
        ("description", "Description:", "", metadata_validator("Description")),
    ]
    for key, message, default, validate in prompts:
        answer = questionary.text(
            message, default=default, validate=validate, style=_questionary_style()
        ).ask()
        if answer is None:
            raise click.Abort()
        answers[key] = answer.strip()

    target = config.posts_dir / post_filename(answers["date"], answers["title"])
    if target.exists():
        overwrite = questionary.confirm(
            "Post already exists. Overwrite?",
            default=False,
            style=_questionary_style(),
        ).ask()
        if not overwrite:
            click.echo("Post creation cancelled")
            return

    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(render_post_source(answers), encoding="utf-8")
    click.echo(f"Created {target.relative_to(project_root)}")


def post_filename(post_date: str, title: str) -> str:
    """Return the source filename for a new post."""
    return f"{post_date}-{title.replace(' ', '_')}.md"


def metadata_validator(label: str, required: bool = False, in_filename: bool = False):
    """Return a questionary validator for a plain frontmatter value.

    Plain values may not contain the ``:`` separator. Title and date also
    name the output file, so they may not contain path separators either.
    """
    from .frontmatter import PATH_SEPARATORS, SEPARATOR

    forbidden = [SEPARATOR]
    if in_filename:
        forbidden.extend(PATH_SEPARATORS)

    def validate(value: str):
        if required and not value.strip():
            return f"{label} cannot be empty"
        for char in forbidden:
            if char in value:
                return f"{label} cannot contain {char!r}"
        return True

    return validate


def render_post_source(values: dict[str, str]) -> str:
    """Return the text of a new post file with frontmatter and a stub body."""
    lines = ["---"]
    for key in ("title", "date", "author", "author_image", "description"):
        value = values.get(key, "")
        if value:
            lines.append(f"{key}: {value}")
    lines.append("---")
    lines.append("")
    lines.append("Your post content goes here!")
    lines.append("")
    return "\n".join(lines)


def _report_failure(exc: SitesmithError, project_root: Path) -> None:
    """Display a user-friendly error block."""
    click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
    if exc.source_path is not None:
        try:
            shown = exc.source_path.relative_to(project_root)
        except ValueError:
            shown = exc.source_path
        click.echo(click.style(f"  File: {shown}", fg="yellow"), err=True)
    click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)


def _questionary_style():
    """Return consistent questionary style."""
    return questionary.Style(
        [
            ("qmark", "fg:cyan bold"),
            ("question", "bold"),
            ("answer", "fg:cyan"),
            ("pointer", "fg:cyan bold"),
            ("highlighted", "fg:cyan bold"),
            ("selected", "fg:cyan"),
        ]
    )


def main():
    """Entry point for the CLI application."""
    cli()


def _scaffold(root: Path, settings: dict[str, str]) -> None:
    """Create the directory structure and files for a new site.

    Args:
        root: Root directory for the new site.
        settings: Values written to sitesmith.yaml.
    """
    theme_src = _THEMES_DIR / "default"
    theme_dest = root / "themes" / "default"
    shutil.copytree(theme_src, theme_dest, dirs_exist_ok=True)

    posts = root / "content" / "posts"
    posts.mkdir(parents=True, exist_ok=True)
    (root / "content" / "assets").mkdir(parents=True, exist_ok=True)
    today = date.today().isoformat()
    (posts / post_filename(today, "Hello World")).write_text(
        _WELCOME_POST.format(date=today), encoding="utf-8"
    )

    config = {
        **settings,
        "theme": "default",
        "content_dir": "content",
        "output_dir": "public",
        "port": 8080,
    }
    (root / CONFIG_FILENAME).write_text(
        yaml.safe_dump(config, sort_keys=False), encoding="utf-8"
    )
