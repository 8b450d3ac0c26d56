#!/usr/bin/env python3
"""Generate JSON data files and rendered article HTML for the site pages."""

from __future__ import annotations

import argparse
import json
import logging
import shutil
from pathlib import Path
from typing import Any

from tallerthan.articles import is_safe_slug
from tallerthan.celebrities import CelebrityIndex
from tallerthan.config import ContentConfig, load_content_config_from_env
from tallerthan.heights import format_height_full, parse_height_slug
from tallerthan.render import markdown_to_html

logger = logging.getLogger(__name__)


def write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False) + "\n", encoding="utf-8")


def render_height_groups(index: CelebrityIndex) -> list[dict[str, Any]]:
    groups = index.get_celebrities_by_height()
    rows: list[dict[str, Any]] = []
    for height_slug in index.get_all_height_slugs():
        cm = parse_height_slug(height_slug)
        rows.append(
            {
                "slug": height_slug,
                "label": format_height_full(cm) if cm is not None else height_slug,
                "celebrities": [celebrity.slug for celebrity in groups[height_slug]],
            }
        )
    return rows


def render_pairs(index: CelebrityIndex) -> list[dict[str, Any]]:
    return [
        {**pair.model_dump(by_alias=True), "comparisonSlug": pair.comparison_slug}
        for pair in index.get_comparison_pairs()
    ]


def build_site_data(
    project_root: Path,
    config: ContentConfig | None = None,
    *,
    index: CelebrityIndex | None = None,
) -> dict[str, Any]:
    config = config or ContentConfig()
    index = index or CelebrityIndex(config, project_root=project_root)

    output_dir = config.site_output_path(project_root)
    if output_dir.exists():
        shutil.rmtree(output_dir)
    articles_output = output_dir / "articles"
    articles_output.mkdir(parents=True, exist_ok=True)

    celebrities = index.get_all_celebrities()
    write_json(
        output_dir / "celebrities.json",
        [celebrity.model_dump(by_alias=True, exclude_none=True) for celebrity in celebrities],
    )
    write_json(output_dir / "heights.json", render_height_groups(index))
    pairs = render_pairs(index)
    write_json(output_dir / "pairs.json", pairs)

    articles_by_slug = {article.slug: article for article in index.get_all_articles()}
    rendered = 0
    for celebrity in celebrities:
        article = articles_by_slug.get(celebrity.slug)
        if article is None:
            logger.warning("No article file for celebrity %s", celebrity.slug)
            continue
        if not is_safe_slug(celebrity.slug):
            logger.warning("Skipping article HTML for unsafe slug %r", celebrity.slug)
            continue
        (articles_output / f"{celebrity.slug}.html").write_text(
            markdown_to_html(article.content) + "\n",
            encoding="utf-8",
        )
        rendered += 1

    return {
        "ok": True,
        "output_dir": output_dir.as_posix(),
        "celebrity_count": len(celebrities),
        "height_group_count": len(index.get_all_height_slugs()),
        "pair_count": len(pairs),
        "rendered_article_count": rendered,
    }


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--project-root",
        default=Path.cwd(),
        type=Path,
        help="Directory that relative config paths resolve against (default: cwd).",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    result = build_site_data(
        project_root=args.project_root.resolve(),
        config=load_content_config_from_env(),
    )
    print(json.dumps(result, sort_keys=True))


if __name__ == "__main__":
    main()
