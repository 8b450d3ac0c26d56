from __future__ import annotations

import argparse
import json
import logging.config
from pathlib import Path
from typing import Any

from tallerthan.articles import list_article_slugs, load_article
from tallerthan.celebrities import CelebrityIndex
from tallerthan.config import ContentConfig, load_content_config_from_env
from tallerthan.render import markdown_to_html
from tallerthan.tools.build_site_data import build_site_data, render_pairs


def configure_logging(level: str) -> None:
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "format": '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                    "stream": "ext://sys.stderr",
                },
            },
            "root": {"level": level, "handlers": ["console"]},
        }
    )


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--project-root",
        type=Path,
        default=None,
        help="Directory that relative paths resolve against (default: cwd).",
    )
    parser.add_argument(
        "--articles-dir",
        default=None,
        help="Article corpus directory (default: TALLERTHAN_ARTICLES_DIR or ../all-articles).",
    )
    parser.add_argument(
        "--image-data",
        default=None,
        help="Image lookup JSON (default: TALLERTHAN_IMAGE_DATA_PATH or data/celebrity-images.json).",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: TALLERTHAN_LOG_LEVEL or INFO).",
    )
    parser.add_argument("--pretty", action="store_true", help="Pretty-print JSON output.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Celebrity height content utilities")
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list-articles", help="List article slugs in the corpus.")
    add_common_arguments(list_parser)

    celebrities_parser = subparsers.add_parser(
        "celebrities",
        help="Extract every celebrity record from the corpus.",
    )
    add_common_arguments(celebrities_parser)
    celebrities_parser.add_argument("--search", default=None, help="Only names containing this text.")
    celebrities_parser.add_argument(
        "--profession",
        default=None,
        help="Only professions containing this text.",
    )

    celebrity_parser = subparsers.add_parser("celebrity", help="Show one celebrity by slug.")
    add_common_arguments(celebrity_parser)
    celebrity_parser.add_argument("slug")

    heights_parser = subparsers.add_parser("heights", help="Group celebrities by height bucket.")
    add_common_arguments(heights_parser)

    pairs_parser = subparsers.add_parser("pairs", help="Rank celebrity comparison pairs.")
    add_common_arguments(pairs_parser)
    pairs_parser.add_argument("--limit", type=int, default=None, help="Maximum pairs to print.")

    render_parser = subparsers.add_parser("render", help="Render one article body to HTML.")
    add_common_arguments(render_parser)
    render_parser.add_argument("slug")

    build_data_parser = subparsers.add_parser(
        "build-site-data",
        help="Write celebrity JSON data and rendered article HTML.",
    )
    add_common_arguments(build_data_parser)
    build_data_parser.add_argument(
        "--output-dir",
        default=None,
        help="Output directory (default: TALLERTHAN_SITE_OUTPUT_DIR or .build/site).",
    )

    return parser


def resolve_config(args: argparse.Namespace) -> ContentConfig:
    config = load_content_config_from_env()
    overrides: dict[str, Any] = {}
    if args.articles_dir:
        overrides["articles_dir"] = args.articles_dir
    if args.image_data:
        overrides["image_data_path"] = args.image_data
    if args.log_level:
        overrides["log_level"] = args.log_level
    if getattr(args, "output_dir", None):
        overrides["site_output_dir"] = args.output_dir
    if not overrides:
        return config
    return ContentConfig.model_validate({**config.model_dump(mode="python"), **overrides})


def project_root_for(args: argparse.Namespace) -> Path:
    return (args.project_root or Path.cwd()).resolve()


def emit(payload: Any, *, pretty: bool) -> None:
    if pretty:
        print(json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False))
    else:
        print(json.dumps(payload, sort_keys=True, ensure_ascii=False))


def run_list_articles(args: argparse.Namespace, config: ContentConfig) -> int:
    slugs = list_article_slugs(
        config.articles_path(project_root_for(args)),
        ignored_files=config.ignored_files,
        excluded_substrings=config.excluded_substrings,
    )
    emit({"ok": True, "slugs": sorted(slugs)}, pretty=args.pretty)
    return 0


def run_celebrities(args: argparse.Namespace, config: ContentConfig) -> int:
    index = CelebrityIndex(config, project_root=project_root_for(args))
    if args.search:
        celebrities = index.search_celebrities(args.search)
    else:
        celebrities = index.get_all_celebrities()
    if args.profession:
        slugs = {celebrity.slug for celebrity in index.get_celebrities_by_profession(args.profession)}
        celebrities = [celebrity for celebrity in celebrities if celebrity.slug in slugs]
    emit(
        {
            "ok": True,
            "count": len(celebrities),
            "celebrities": [celebrity.model_dump(by_alias=True, exclude_none=True) for celebrity in celebrities],
        },
        pretty=args.pretty,
    )
    return 0


def run_celebrity(args: argparse.Namespace, config: ContentConfig) -> int:
    index = CelebrityIndex(config, project_root=project_root_for(args))
    celebrity = index.get_celebrity_by_slug(args.slug)
    if celebrity is None:
        emit({"ok": False, "error": f"celebrity not found: {args.slug}"}, pretty=args.pretty)
        return 1
    emit({"ok": True, "celebrity": celebrity.model_dump(by_alias=True, exclude_none=True)}, pretty=args.pretty)
    return 0


def run_heights(args: argparse.Namespace, config: ContentConfig) -> int:
    index = CelebrityIndex(config, project_root=project_root_for(args))
    groups = index.get_celebrities_by_height()
    emit(
        {
            "ok": True,
            "groups": {
                height_slug: [celebrity.slug for celebrity in groups[height_slug]]
                for height_slug in index.get_all_height_slugs()
            },
        },
        pretty=args.pretty,
    )
    return 0


def run_pairs(args: argparse.Namespace, config: ContentConfig) -> int:
    index = CelebrityIndex(config, project_root=project_root_for(args))
    pairs = render_pairs(index)
    if args.limit is not None:
        pairs = pairs[: max(args.limit, 0)]
    emit(
        {"ok": True, "count": len(pairs), "pairs": pairs},
        pretty=args.pretty,
    )
    return 0


def run_render(args: argparse.Namespace, config: ContentConfig) -> int:
    article = load_article(config.articles_path(project_root_for(args)), args.slug)
    if article is None:
        emit({"ok": False, "error": f"article not found: {args.slug}"}, pretty=args.pretty)
        return 1
    emit({"ok": True, "slug": article.slug, "html": markdown_to_html(article.content)}, pretty=args.pretty)
    return 0


def run_build_site_data(args: argparse.Namespace, config: ContentConfig) -> int:
    result = build_site_data(project_root=project_root_for(args), config=config)
    emit(result, pretty=args.pretty)
    return 0 if result["ok"] else 1


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = resolve_config(args)
    except ValueError as exc:
        parser.error(str(exc))
        return 2
    configure_logging(config.log_level)

    if args.command == "list-articles":
        return run_list_articles(args, config)
    if args.command == "celebrities":
        return run_celebrities(args, config)
    if args.command == "celebrity":
        return run_celebrity(args, config)
    if args.command == "heights":
        return run_heights(args, config)
    if args.command == "pairs":
        return run_pairs(args, config)
    if args.command == "render":
        return run_render(args, config)
    if args.command == "build-site-data":
        return run_build_site_data(args, config)
    parser.error(f"Unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
