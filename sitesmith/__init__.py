"""sitesmith static site generator.

Builds a static blog from a directory of Markdown posts with frontmatter and
a theme of Jinja2 templates, and can keep the output in sync with edits while
serving a local preview.

The main entry point is the CLI module, which provides commands for
scaffolding sites and posts, building, and watching with a preview server.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
