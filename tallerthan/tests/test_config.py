from __future__ import annotations

from pathlib import Path

import pytest

from tallerthan.config import (
    DEFAULT_ARTICLES_DIR,
    DEFAULT_IGNORED_FILES,
    DEFAULT_IMAGE_DATA_PATH,
    DEFAULT_MAX_COMPARISON_PAIRS,
    ContentConfig,
    load_content_config_from_env,
)


def test_default_content_config() -> None:
    config = ContentConfig()

    assert config.articles_dir == DEFAULT_ARTICLES_DIR
    assert config.image_data_path == DEFAULT_IMAGE_DATA_PATH
    assert config.site_output_dir.startswith(".build/")
    assert config.ignored_files == list(DEFAULT_IGNORED_FILES)
    assert config.excluded_substrings == []
    assert config.max_comparison_pairs == DEFAULT_MAX_COMPARISON_PAIRS
    assert config.log_level == "INFO"


def test_runtime_paths_resolve_against_project_root(tmp_path: Path) -> None:
    config = ContentConfig(articles_dir="content/articles", image_data_path=str(tmp_path / "abs.json"))

    assert config.articles_path(tmp_path) == (tmp_path / "content/articles").resolve()
    assert config.image_data_file(tmp_path) == tmp_path / "abs.json"


def test_env_overrides_apply() -> None:
    config = load_content_config_from_env(
        {
            "TALLERTHAN_ARTICLES_DIR": "corpus",
            "TALLERTHAN_IMAGE_DATA_PATH": "images.json",
            "TALLERTHAN_SITE_OUTPUT_DIR": "out",
            "TALLERTHAN_IGNORED_FILES": "index.md, ,about.md",
            "TALLERTHAN_EXCLUDED_SUBSTRINGS": "draft,-old",
            "TALLERTHAN_MAX_COMPARISON_PAIRS": " 25 ",
            "TALLERTHAN_LOG_LEVEL": "debug",
        }
    )

    assert config.articles_dir == "corpus"
    assert config.image_data_path == "images.json"
    assert config.site_output_dir == "out"
    assert config.ignored_files == ["index.md", "about.md"]
    assert config.excluded_substrings == ["draft", "-old"]
    assert config.max_comparison_pairs == 25
    assert config.log_level == "DEBUG"


def test_env_overrides_layer_on_base_config() -> None:
    base = ContentConfig(articles_dir="base-corpus", max_comparison_pairs=10)

    config = load_content_config_from_env({"TALLERTHAN_LOG_LEVEL": "warning"}, base_config=base)

    assert config.articles_dir == "base-corpus"
    assert config.max_comparison_pairs == 10
    assert config.log_level == "WARNING"


def test_env_rejects_invalid_pair_limits() -> None:
    with pytest.raises(ValueError, match="TALLERTHAN_MAX_COMPARISON_PAIRS must be an integer"):
        load_content_config_from_env({"TALLERTHAN_MAX_COMPARISON_PAIRS": "many"})

    with pytest.raises(ValueError, match="TALLERTHAN_MAX_COMPARISON_PAIRS must be positive"):
        load_content_config_from_env({"TALLERTHAN_MAX_COMPARISON_PAIRS": "0"})


def test_content_config_rejects_invalid_values() -> None:
    with pytest.raises(ValueError, match="path must be non-empty"):
        load_content_config_from_env({"TALLERTHAN_ARTICLES_DIR": "   "})

    with pytest.raises(ValueError, match="Input should be 'DEBUG', 'INFO', 'WARNING' or 'ERROR'"):
        ContentConfig(log_level="verbose")

    with pytest.raises(ValueError, match="Extra inputs are not permitted"):
        ContentConfig.model_validate({"articles": "x"})
