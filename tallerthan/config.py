from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator

from tallerthan.schemas import TTBaseModel

DEFAULT_ARTICLES_DIR = "../all-articles"
DEFAULT_IMAGE_DATA_PATH = "data/celebrity-images.json"
DEFAULT_SITE_OUTPUT_DIR = ".build/site"
DEFAULT_MAX_COMPARISON_PAIRS = 500
DEFAULT_IGNORED_FILES = (
    "homepage.md",
    "PROJECT_BRIEF.md",
    "CLAUDE.md",
    "radius-on-google-maps.md",
    "drive-time-map.md",
    "remaining-pages.md",
)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


def _validate_path_token(value: str) -> str:
    path = value.strip()
    if not path:
        raise ValueError("path must be non-empty")
    return path


def _parse_list(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def _parse_positive_int(raw: str, *, env_var: str) -> int:
    try:
        value = int(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{env_var} must be an integer") from exc
    if value < 1:
        raise ValueError(f"{env_var} must be positive")
    return value


def resolve_runtime_path(project_root: Path, raw_path: str | Path) -> Path:
    path = Path(raw_path)
    if path.is_absolute():
        return path
    return (project_root / path).resolve()


class ContentConfig(TTBaseModel):
    articles_dir: str = DEFAULT_ARTICLES_DIR
    image_data_path: str = DEFAULT_IMAGE_DATA_PATH
    site_output_dir: str = DEFAULT_SITE_OUTPUT_DIR
    ignored_files: list[str] = Field(default_factory=lambda: list(DEFAULT_IGNORED_FILES))
    excluded_substrings: list[str] = Field(default_factory=list)
    max_comparison_pairs: int = Field(default=DEFAULT_MAX_COMPARISON_PAIRS, gt=0)
    log_level: LogLevel = "INFO"

    @field_validator("articles_dir", "image_data_path", "site_output_dir")
    @classmethod
    def validate_paths(cls, value: str) -> str:
        return _validate_path_token(value)

    @field_validator("ignored_files", "excluded_substrings")
    @classmethod
    def normalize_names(cls, value: list[str]) -> list[str]:
        return [item.strip() for item in value if item.strip()]

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    def articles_path(self, project_root: Path | None = None) -> Path:
        return resolve_runtime_path(project_root or Path.cwd(), self.articles_dir)

    def image_data_file(self, project_root: Path | None = None) -> Path:
        return resolve_runtime_path(project_root or Path.cwd(), self.image_data_path)

    def site_output_path(self, project_root: Path | None = None) -> Path:
        return resolve_runtime_path(project_root or Path.cwd(), self.site_output_dir)


def load_content_config_from_env(
    environ: Mapping[str, str] | None = None,
    *,
    base_config: ContentConfig | None = None,
) -> ContentConfig:
    env = dict(os.environ if environ is None else environ)
    config = base_config or ContentConfig()
    payload = config.model_dump(mode="python")

    if "TALLERTHAN_ARTICLES_DIR" in env:
        payload["articles_dir"] = env["TALLERTHAN_ARTICLES_DIR"]
    if "TALLERTHAN_IMAGE_DATA_PATH" in env:
        payload["image_data_path"] = env["TALLERTHAN_IMAGE_DATA_PATH"]
    if "TALLERTHAN_SITE_OUTPUT_DIR" in env:
        payload["site_output_dir"] = env["TALLERTHAN_SITE_OUTPUT_DIR"]
    if "TALLERTHAN_IGNORED_FILES" in env:
        payload["ignored_files"] = _parse_list(env["TALLERTHAN_IGNORED_FILES"])
    if "TALLERTHAN_EXCLUDED_SUBSTRINGS" in env:
        payload["excluded_substrings"] = _parse_list(env["TALLERTHAN_EXCLUDED_SUBSTRINGS"])
    if "TALLERTHAN_MAX_COMPARISON_PAIRS" in env:
        payload["max_comparison_pairs"] = _parse_positive_int(
            env["TALLERTHAN_MAX_COMPARISON_PAIRS"],
            env_var="TALLERTHAN_MAX_COMPARISON_PAIRS",
        )
    if "TALLERTHAN_LOG_LEVEL" in env:
        payload["log_level"] = env["TALLERTHAN_LOG_LEVEL"]

    return ContentConfig.model_validate(payload)
