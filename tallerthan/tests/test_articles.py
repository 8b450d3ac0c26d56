from __future__ import annotations

import logging
from pathlib import Path

from tallerthan import articles
from tallerthan.schemas import FrontmatterDialect


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_yaml_frontmatter_without_meta_description_defaults_to_empty() -> None:
    article = articles.parse_article(
        '---\ntitle: "X"\n---\n# How Tall Is X?\n',
        filename_slug="x",
    )

    assert article.dialect == FrontmatterDialect.yaml
    assert article.slug == "x"
    assert article.frontmatter.title == "X"
    assert article.frontmatter.meta_description == ""
    assert article.content == "# How Tall Is X?\n"


def test_yaml_frontmatter_slug_overrides_filename() -> None:
    article = articles.parse_article(
        "---\nslug: kevin-hart\nschema:\n  person:\n    name: Kevin Hart\n---\nbody\n",
        filename_slug="kevin-hart-height",
    )

    assert article.slug == "kevin-hart"
    assert article.frontmatter.schema == {"person": {"name": "Kevin Hart"}}


def test_unterminated_yaml_frontmatter_keeps_whole_text_as_body() -> None:
    text = "---\ntitle: X\n# Heading\n"
    article = articles.parse_article(text, filename_slug="x")

    assert article.frontmatter.title == ""
    assert article.content == text


def test_invalid_yaml_frontmatter_is_a_soft_miss() -> None:
    article = articles.parse_article("---\ntitle: [unclosed\n---\nbody\n", filename_slug="x")

    assert article.frontmatter.title == ""
    assert article.slug == "x"
    assert article.content == "body\n"


def test_non_mapping_yaml_frontmatter_is_ignored() -> None:
    article = articles.parse_article("---\n- a\n- b\n---\nbody\n", filename_slug="x")

    assert article.frontmatter.title == ""
    assert article.content == "body\n"


def test_comment_frontmatter_joins_continuation_lines() -> None:
    text = (
        "<!--\n"
        "title: How Tall Is Zendaya?\n"
        "meta_description: Zendaya stands 5'10\"\n"
        "  without heels.\n"
        "slug: zendaya\n"
        "-->\n\n"
        "# How Tall Is Zendaya?\n"
    )
    article = articles.parse_article(text, filename_slug="zendaya-height")

    assert article.dialect == FrontmatterDialect.comment
    assert article.slug == "zendaya"
    assert article.frontmatter.title == "How Tall Is Zendaya?"
    assert article.frontmatter.meta_description == "Zendaya stands 5'10\" without heels."
    assert article.content == "# How Tall Is Zendaya?"


def test_plain_article_has_no_frontmatter() -> None:
    article = articles.parse_article("# Tom Cruise\n", filename_slug="tom-cruise")

    assert article.dialect == FrontmatterDialect.none
    assert article.frontmatter.slug == "tom-cruise"
    assert article.content == "# Tom Cruise\n"


def test_extract_schemas_keeps_only_schema_org_objects() -> None:
    content = (
        "```json\n"
        '{"@context": "https://schema.org", "@type": "Person", "name": "A"}\n'
        "```\n\n"
        "```json\n"
        '{"@context": "https://example.com", "@type": "Person"}\n'
        "```\n\n"
        "```json\n"
        "{not json}\n"
        "```\n\n"
        "```json\n"
        '["https://schema.org"]\n'
        "```\n"
    )

    assert articles.extract_schemas(content) == [
        {"@context": "https://schema.org", "@type": "Person", "name": "A"}
    ]


def test_list_article_slugs_applies_denylist_and_exclusions(tmp_path: Path) -> None:
    _write(tmp_path / "kevin-hart.md", "# Kevin Hart\n")
    _write(tmp_path / "zendaya.md", "# Zendaya\n")
    _write(tmp_path / "homepage.md", "# Home\n")
    _write(tmp_path / "draft-notes.md", "# Draft\n")
    _write(tmp_path / "notes.txt", "not markdown\n")
    (tmp_path / "folder.md").mkdir()

    slugs = articles.list_article_slugs(tmp_path, excluded_substrings=["draft"])

    assert sorted(slugs) == ["kevin-hart", "zendaya"]


def test_list_article_slugs_missing_directory_warns(tmp_path: Path, caplog) -> None:
    caplog.set_level(logging.WARNING, logger="tallerthan.articles")

    assert articles.list_article_slugs(tmp_path / "missing") == []
    assert "Articles directory not found" in caplog.text


def test_load_article_missing_or_unsafe_slug_returns_none(tmp_path: Path) -> None:
    _write(tmp_path / "kevin-hart.md", "# Kevin Hart\n")

    assert articles.load_article(tmp_path, "nobody") is None
    assert articles.load_article(tmp_path, "") is None
    assert articles.load_article(tmp_path, "../kevin-hart") is None

    article = articles.load_article(tmp_path, "kevin-hart")
    assert article is not None
    assert article.source_path == tmp_path / "kevin-hart.md"


def test_load_all_articles_drops_duplicate_logical_slugs(tmp_path: Path, caplog) -> None:
    caplog.set_level(logging.WARNING, logger="tallerthan.articles")
    _write(tmp_path / "kevin-hart.md", "# Kevin Hart\n")
    _write(tmp_path / "kevin-hart-height.md", "---\nslug: kevin-hart\n---\n# Kevin Hart again\n")
    _write(tmp_path / "zendaya.md", "# Zendaya\n")

    loaded = articles.load_all_articles(tmp_path)

    assert sorted(article.slug for article in loaded) == ["kevin-hart", "zendaya"]
    assert "already loaded" in caplog.text


def test_frontmatter_slug_must_be_a_single_path_component(caplog) -> None:
    caplog.set_level(logging.WARNING, logger="tallerthan.articles")

    for unsafe in ("people/kevin-hart", "/etc/kevin-hart", "..", "people\\\\kevin-hart"):
        article = articles.parse_article(f'---\nslug: "{unsafe}"\n---\nbody\n', filename_slug="kevin-hart")
        assert article.slug == "kevin-hart", unsafe

    assert "Ignoring frontmatter slug" in caplog.text
    assert articles.is_safe_slug("kevin-hart")
    assert not articles.is_safe_slug("")
