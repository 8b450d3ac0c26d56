from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml

from tallerthan.config import DEFAULT_IGNORED_FILES
from tallerthan.schemas import SCHEMA_ORG_CONTEXT, Article, ArticleFrontmatter, FrontmatterDialect

logger = logging.getLogger(__name__)

ARTICLE_SUFFIX = ".md"
YAML_FRONTMATTER_RE = re.compile(r"\A---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)", re.DOTALL)
COMMENT_FRONTMATTER_RE = re.compile(r"\A<!--\s*(.*?)\s*-->", re.DOTALL)
COMMENT_KEY_RE = re.compile(r"^(\w+):\s*(.*)$")
JSON_BLOCK_RE = re.compile(r"```json\s*(.*?)```", re.DOTALL)


def detect_dialect(text: str) -> FrontmatterDialect:
    if text.startswith("---"):
        return FrontmatterDialect.yaml
    if COMMENT_FRONTMATTER_RE.match(text):
        return FrontmatterDialect.comment
    return FrontmatterDialect.none


def split_yaml_frontmatter(markdown: str) -> tuple[dict[str, Any], str]:
    match = YAML_FRONTMATTER_RE.match(markdown)
    if not match:
        return {}, markdown
    body = markdown[match.end() :]
    try:
        metadata = yaml.safe_load(match.group(1) or "")
    except yaml.YAMLError as exc:
        logger.debug("Ignoring unparsable YAML frontmatter: %s", exc)
        return {}, body
    if not isinstance(metadata, dict):
        return {}, body
    return metadata, body


def split_comment_frontmatter(markdown: str) -> tuple[dict[str, str], str]:
    """Parse a leading ``<!-- key: value -->`` block.

    A line that does not start with ``key:`` continues the previous value.
    """
    match = COMMENT_FRONTMATTER_RE.match(markdown)
    if not match:
        return {}, markdown

    metadata: dict[str, str] = {}
    current_key: str | None = None
    current_value = ""
    for line in match.group(1).split("\n"):
        key_match = COMMENT_KEY_RE.match(line)
        if key_match:
            if current_key is not None:
                metadata[current_key] = current_value.strip()
            current_key = key_match.group(1)
            current_value = key_match.group(2)
        elif current_key is not None:
            current_value += " " + line.strip()
    if current_key is not None:
        metadata[current_key] = current_value.strip()

    body = markdown[match.end() :].strip()
    return metadata, body


def as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def is_safe_slug(slug: str) -> bool:
    # Slugs name output files, so they must be a single path component.
    if not slug or "/" in slug or "\\" in slug:
        return False
    return slug not in {".", ".."} and Path(slug).name == slug


def build_frontmatter(metadata: dict[str, Any], fallback_slug: str) -> ArticleFrontmatter:
    schema = metadata.get("schema")
    slug = as_text(metadata.get("slug"))
    if slug and not is_safe_slug(slug):
        logger.warning("Ignoring frontmatter slug %r; using %r", slug, fallback_slug)
        slug = ""
    return ArticleFrontmatter(
        title=as_text(metadata.get("title")),
        meta_description=as_text(metadata.get("meta_description")),
        slug=slug or fallback_slug,
        schema=schema if isinstance(schema, dict) else None,
    )


def extract_schemas(content: str) -> list[dict[str, Any]]:
    schemas: list[dict[str, Any]] = []
    for match in JSON_BLOCK_RE.finditer(content):
        try:
            payload = json.loads(match.group(1).strip())
        except json.JSONDecodeError:
            continue
        if isinstance(payload, dict) and payload.get("@context") == SCHEMA_ORG_CONTEXT:
            schemas.append(payload)
    return schemas


def parse_article(text: str, *, filename_slug: str, source_path: Path | None = None) -> Article:
    dialect = detect_dialect(text)
    if dialect == FrontmatterDialect.yaml:
        metadata, content = split_yaml_frontmatter(text)
    elif dialect == FrontmatterDialect.comment:
        metadata, content = split_comment_frontmatter(text)
    else:
        metadata, content = {}, text

    frontmatter = build_frontmatter(metadata, filename_slug)
    return Article(
        slug=frontmatter.slug,
        frontmatter=frontmatter,
        content=content,
        schemas=extract_schemas(content),
        source_path=source_path,
        dialect=dialect,
    )


def read_article_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def is_ignored(filename: str, ignored_files: Iterable[str], excluded_substrings: Iterable[str]) -> bool:
    if filename in set(ignored_files):
        return True
    return any(token in filename for token in excluded_substrings)


def list_article_slugs(
    articles_dir: Path,
    *,
    ignored_files: Iterable[str] = DEFAULT_IGNORED_FILES,
    excluded_substrings: Iterable[str] = (),
) -> list[str]:
    if not articles_dir.is_dir():
        logger.warning("Articles directory not found: %s", articles_dir.as_posix())
        return []

    ignored = list(ignored_files)
    excluded = list(excluded_substrings)
    slugs: list[str] = []
    for path in articles_dir.iterdir():
        if path.suffix != ARTICLE_SUFFIX or not path.is_file():
            continue
        if is_ignored(path.name, ignored, excluded):
            continue
        slugs.append(path.stem)
    return slugs


def load_article(articles_dir: Path, slug: str) -> Article | None:
    if not is_safe_slug(slug):
        return None
    path = articles_dir / f"{slug}{ARTICLE_SUFFIX}"
    if not path.is_file():
        return None
    return parse_article(read_article_text(path), filename_slug=slug, source_path=path)


def load_all_articles(
    articles_dir: Path,
    *,
    ignored_files: Iterable[str] = DEFAULT_IGNORED_FILES,
    excluded_substrings: Iterable[str] = (),
) -> list[Article]:
    articles: list[Article] = []
    seen_slugs: set[str] = set()
    for filename_slug in list_article_slugs(
        articles_dir,
        ignored_files=ignored_files,
        excluded_substrings=excluded_substrings,
    ):
        article = load_article(articles_dir, filename_slug)
        if article is None:
            continue
        if article.slug in seen_slugs:
            logger.warning(
                "Skipping %s%s: slug %r already loaded",
                filename_slug,
                ARTICLE_SUFFIX,
                article.slug,
            )
            continue
        seen_slugs.add(article.slug)
        articles.append(article)
    return articles
