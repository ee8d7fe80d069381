from datetime import datetime

import pytest
from markupsafe import Markup

from sitesmith.config import SiteConfig
from sitesmith.content import Post, Site
from sitesmith.errors import RenderError
from sitesmith.templates import TemplateEngine, has_cover, now


def write_theme(theme, post_tpl, index_tpl):
    theme.mkdir(parents=True, exist_ok=True)
    (theme / "post.html").write_text(post_tpl, encoding="utf-8")
    (theme / "index.html").write_text(index_tpl, encoding="utf-8")


def test_render_post_and_index(tmp_path):
    theme = tmp_path / "theme"
    write_theme(
        theme,
        "<title>{{ post.title }} - {{ site.title }}</title>{{ post.content }}"
        "{% if has_cover(post.cover_image) %}<img src='{{ post.cover_image }}'>{% endif %}",
        "{% for p in sort_by_date(posts) %}[{{ p.link }}]{% endfor %}{{ now().year }}",
    )
    engine = TemplateEngine(theme)
    old = Post(title="Old", date="2024-01-01", content=Markup("<p>old</p>"))
    new = Post(title="New Post", date="2024-01-02", cover_image="/c.png")
    site = Site(SiteConfig(title="Blog"), [old, new])

    html = engine.render_post(old, site)
    assert html.startswith("<title>Old - Blog</title><p>old</p>")
    assert "<img" not in html
    assert "<img src='/c.png'>" in engine.render_post(new, site)

    index = engine.render_index(site)
    assert index.startswith("[2024-01-02-New_Post.html][2024-01-01-Old.html]")
    assert str(datetime.now().year) in index


def test_plain_strings_are_escaped_but_content_is_not(tmp_path):
    theme = tmp_path / "theme"
    write_theme(theme, "{{ post.title }}|{{ post.content }}", "")
    engine = TemplateEngine(theme)
    post = Post(title="<b>", date="2024-01-01", content=Markup("<p>ok</p>"))
    html = engine.render_post(post, Site(SiteConfig(), [post]))
    assert html == "&lt;b&gt;|<p>ok</p>"


def test_sort_by_date_filter(tmp_path):
    theme = tmp_path / "theme"
    write_theme(theme, "", "{% for p in posts | sort_by_date %}{{ p.date }} {% endfor %}")
    posts = [Post(title="a", date="2023-01-01"), Post(title="b", date="2025-01-01")]
    rendered = TemplateEngine(theme).render_index(Site(SiteConfig(), posts))
    assert rendered == "2025-01-01 2023-01-01 "


def test_render_errors_are_wrapped(tmp_path):
    theme = tmp_path / "theme"
    write_theme(theme, "{{ post.nope }}", "{% for %}")
    engine = TemplateEngine(theme)
    post = Post(title="T", date="2024-01-01")
    site = Site(SiteConfig(), [post])

    with pytest.raises(RenderError) as info:
        engine.render_post(post, site)
    assert info.value.source_path == theme / "post.html"

    with pytest.raises(RenderError, match="syntax error"):
        engine.render_index(site)


def test_missing_template(tmp_path):
    engine = TemplateEngine(tmp_path)
    with pytest.raises(RenderError, match="Template not found"):
        engine.render_index(Site(SiteConfig(), []))


def test_has_cover_and_now():
    assert has_cover("/c.png")
    assert not has_cover("")
    assert has_cover(Post(title="t", date="d", cover_image="x"))
    assert not has_cover(Post(title="t", date="d"))
    assert isinstance(now(), datetime)
