from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from tallerthan.celebrities import CelebrityIndex
from tallerthan.config import ContentConfig
from tallerthan.images import load_image_lookup


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_missing_image_table_is_empty(tmp_path: Path, caplog) -> None:
    caplog.set_level(logging.WARNING, logger="tallerthan.images")

    assert load_image_lookup(tmp_path / "missing.json") == {}
    assert "Image data not found" in caplog.text


def test_image_table_loads_camel_case_records(tmp_path: Path) -> None:
    path = tmp_path / "celebrity-images.json"
    _write(
        path,
        json.dumps(
            {
                "kevin-hart": {
                    "imageUrl": "https://img.example/kevin.jpg",
                    "source": "Wikimedia Commons",
                    "license": "CC BY-SA 4.0",
                },
                "zendaya": {"imageUrl": "", "source": "", "license": ""},
                "tom-cruise": {"imageUrl": None},
            }
        ),
    )

    lookup = load_image_lookup(path)

    assert lookup["kevin-hart"].image_url == "https://img.example/kevin.jpg"
    assert lookup["kevin-hart"].license == "CC BY-SA 4.0"
    assert lookup["zendaya"].image_url is None
    assert lookup["tom-cruise"].image_url is None
    assert lookup["tom-cruise"].source == ""


def test_invalid_json_names_the_file(tmp_path: Path) -> None:
    path = tmp_path / "images.json"
    _write(path, "{\n  \"kevin-hart\": \n")

    with pytest.raises(ValueError, match=r"images\.json:\d+ JSON parse error"):
        load_image_lookup(path)


def test_non_object_payload_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "images.json"
    _write(path, "[]")

    with pytest.raises(ValueError, match="must contain a JSON object keyed by slug"):
        load_image_lookup(path)


def test_unknown_record_keys_are_ignored(tmp_path: Path) -> None:
    path = tmp_path / "images.json"
    _write(
        path,
        json.dumps({"kevin-hart": {"imageUrl": "u", "source": "s", "license": "l", "fetchedAt": "2024"}}),
    )

    lookup = load_image_lookup(path)

    assert lookup["kevin-hart"].image_url == "u"
    assert lookup["kevin-hart"].license == "l"


def test_wrongly_typed_record_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "images.json"
    _write(path, json.dumps({"kevin-hart": {"imageUrl": ["not", "a", "string"]}}))

    with pytest.raises(ValueError, match=r"\[kevin-hart\] schema error: Input should be a valid string"):
        load_image_lookup(path)


def test_extra_image_keys_do_not_break_the_index(tmp_path: Path) -> None:
    _write(tmp_path / "articles" / "kevin-hart.md", "# How Tall Is Kevin Hart?\n\n📏 **5'4\" (163 cm)**\n")
    _write(
        tmp_path / "images.json",
        json.dumps({"kevin-hart": {"imageUrl": "u", "source": "s", "license": "l", "fetchedAt": "2024"}}),
    )
    config = ContentConfig(articles_dir="articles", image_data_path="images.json")

    celebrities = CelebrityIndex(config, project_root=tmp_path).get_all_celebrities()

    assert [celebrity.slug for celebrity in celebrities] == ["kevin-hart"]
    assert celebrities[0].image_url == "u"
