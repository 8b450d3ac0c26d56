from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from tallerthan.schemas import ImageRecord

logger = logging.getLogger(__name__)


def load_image_lookup(path: Path) -> dict[str, ImageRecord]:
    """Load the slug-keyed image table written by the image fetch job."""
    if not path.exists():
        logger.warning("Image data not found: %s", path.as_posix())
        return {}

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"{path.as_posix()}:{exc.lineno} JSON parse error: {exc.msg}") from exc
    if not isinstance(payload, dict):
        raise ValueError(f"{path.as_posix()} must contain a JSON object keyed by slug")

    records: dict[str, ImageRecord] = {}
    for slug, item in payload.items():
        try:
            records[str(slug)] = ImageRecord.model_validate(item)
        except ValidationError as exc:
            raise ValueError(
                f"{path.as_posix()} [{slug}] schema error: {exc.errors()[0]['msg']}"
            ) from exc
    return records
