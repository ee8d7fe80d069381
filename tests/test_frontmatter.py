from pathlib import Path

import pytest

from sitesmith.content import Post
from sitesmith.errors import (
    FrontmatterError,
    MalformedMetadataError,
    MetadataNotFoundError,
    MissingFieldError,
    RenderError,
)
from sitesmith.frontmatter import parse_post, scan_frontmatter

SAMPLE = (
    "---\n"
    'title: "Hello World"\n'
    "date: 2024-01-01\n"
    "author: Finn\n"
    "description: 'A first post'\n"
    "author_image: https://example.com/finn.png\n"
    "cover_image: http://example.com/cover.jpg\n"
    "---\n"
    "# Hi\n"
    "\n"
    "Some *text*.\n"
)


def test_parse_post_reads_known_fields():
    post = parse_post(SAMPLE.encode("utf-8"))
    assert post.title == "Hello World"
    assert post.date == "2024-01-01"
    assert post.author == "Finn"
    assert post.description == "A first post"
    assert post.author_image == "https://example.com/finn.png"
    assert post.cover_image == "http://example.com/cover.jpg"
    assert post.link == "2024-01-01-Hello_World.html"


def test_body_excludes_metadata_lines():
    post = parse_post(SAMPLE)
    assert post.body == "# Hi\n\nSome *text*.\n"
    assert "<h1>Hi</h1>" in post.content
    assert "<em>text</em>" in post.content
    for line in SAMPLE.split("---\n")[1].splitlines():
        assert line not in post.content
        assert line not in post.body


def test_parse_is_pure():
    raw = SAMPLE.encode("utf-8")
    assert parse_post(raw) == parse_post(raw)


def test_round_trip_of_generated_file():
    values = {
        "title": "Round Trip",
        "date": "2023-12-31",
        "author": "Marceline",
        "description": "Generated",
        "author_image": "https://example.com/m.png",
        "cover_image": "https://example.com/c.png",
    }
    text = "---\n" + "".join(f"{k}: {v}\n" for k, v in values.items()) + "---\nbody\n"
    post = parse_post(text)
    for key, value in values.items():
        assert getattr(post, key) == value


def test_author_img_alias_and_unknown_keys_ignored():
    post = parse_post(
        "---\ntitle: T\ndate: 2024-02-02\nauthorImg: https://x.io/a.png\ntags: misc\n---\n"
    )
    assert post.author_image == "https://x.io/a.png"
    assert post.body == ""


def test_missing_opening_delimiter():
    with pytest.raises(MetadataNotFoundError, match="metadata not found"):
        parse_post("title: T\ndate: 2024-01-01\n\nbody")


def test_missing_closing_delimiter():
    with pytest.raises(MetadataNotFoundError):
        parse_post("---\ntitle: T\ndate: 2024-01-01\n# body never starts\n")


def test_text_before_opening_delimiter_is_not_frontmatter():
    with pytest.raises(MetadataNotFoundError):
        parse_post("intro\n---\ntitle: T\ndate: 2024-01-01\n---\n")


def test_leading_blank_lines_and_crlf_are_tolerated():
    post = parse_post(b"\r\n---\r\ntitle: T\r\ndate: 2024-01-01\r\n---\r\nbody\r\n")
    assert post.title == "T"
    assert post.body.strip() == "body"


def test_line_without_single_separator_is_malformed():
    with pytest.raises(MalformedMetadataError):
        parse_post("---\ntitle: a: b\ndate: 2024-01-01\n---\n")
    with pytest.raises(MalformedMetadataError):
        parse_post("---\ntitle T\ndate: 2024-01-01\n---\n")


def test_url_fields_may_contain_separator():
    metadata, body = scan_frontmatter(
        "---\ncover_image: \"https://cdn.example.com:8443/x.png\"\n---\nrest"
    )
    assert metadata == {"cover_image": "https://cdn.example.com:8443/x.png"}
    assert body == "rest"


def test_missing_required_fields():
    with pytest.raises(MissingFieldError, match="title"):
        parse_post("---\ndate: 2024-01-01\n---\n")
    with pytest.raises(MissingFieldError, match="date"):
        parse_post("---\ntitle: T\ndate: \"\"\n---\n")


def test_errors_carry_source_path():
    source = Path("content/posts/broken.md")
    with pytest.raises(FrontmatterError) as info:
        parse_post("no metadata", source=source)
    assert info.value.source_path == source
    assert str(source) in str(info.value)


def test_raw_html_is_escaped_and_code_highlighted():
    post = parse_post(
        "---\ntitle: T\ndate: 2024-01-01\n---\n"
        "<script>alert(1)</script>\n\n"
        "[x](javascript:alert)\n\n"
        "```python\nprint('hi')\n```\n"
    )
    assert "<script>" not in post.content
    assert "&lt;script&gt;" in post.content
    assert "javascript:" not in post.content
    assert 'class="highlight"' in post.content


def test_blank_and_comment_lines_in_block_are_skipped():
    post = parse_post("---\n# comment\ntitle: T\n\ndate: 2024-01-01\n---\n")
    assert isinstance(post, Post)
    assert post.title == "T"


def test_invalid_utf8_is_a_frontmatter_error():
    with pytest.raises(FrontmatterError, match="UTF-8"):
        parse_post(b"---\ntitle: \xff\xfe\ndate: 2024-01-01\n---\n")


@pytest.mark.parametrize(
    "title, date",
    [("T", "/tmp/x"), ("../../etc", "2024-01-01"), ("a\\b", "2024-01-01")],
)
def test_path_separators_in_link_fields_are_rejected(title, date):
    with pytest.raises(FrontmatterError, match="path separator"):
        parse_post(f"---\ntitle: {title}\ndate: {date}\n---\n")


def test_markdown_failure_is_a_render_error(monkeypatch):
    def explode(body):
        raise ValueError("renderer blew up")

    monkeypatch.setattr("sitesmith.frontmatter.render_markdown", explode)
    source = Path("content/posts/a.md")
    with pytest.raises(RenderError, match="renderer blew up") as info:
        parse_post("---\ntitle: T\ndate: 2024-01-01\n---\nbody", source=source)
    assert info.value.source_path == source
    assert isinstance(info.value.original_error, ValueError)
