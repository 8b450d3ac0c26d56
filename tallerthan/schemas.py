from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

SCHEMA_ORG_CONTEXT = "https://schema.org"


def comparison_slug_of(slug1: str, slug2: str) -> str:
    # Sorted so a pair has one canonical URL regardless of argument order.
    first, second = sorted((slug1, slug2))
    return f"{first}-vs-{second}"


class TTBaseModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class RecordModel(TTBaseModel):
    """Public records serialize with camelCase keys for the page layer."""

    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)


class FrontmatterDialect(str, Enum):
    yaml = "yaml"
    comment = "comment"
    none = "none"


@dataclass(frozen=True)
class ArticleFrontmatter:
    title: str = ""
    meta_description: str = ""
    slug: str = ""
    schema: dict[str, Any] | None = None


@dataclass(frozen=True)
class Article:
    slug: str
    frontmatter: ArticleFrontmatter
    content: str
    schemas: list[dict[str, Any]] = field(default_factory=list)
    source_path: Path | None = None
    dialect: FrontmatterDialect = FrontmatterDialect.none


class ImageRecord(RecordModel):
    # Fields added by the image fetch job beyond these are ignored.
    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)

    image_url: str | None = None
    source: str = ""
    license: str = ""

    @field_validator("image_url")
    @classmethod
    def normalize_image_url(cls, value: str | None) -> str | None:
        if value is None:
            return None
        text = value.strip()
        return text or None


class Celebrity(RecordModel):
    slug: str
    name: str
    height_cm: float = Field(gt=0)
    height_imperial: str
    height_claimed: str | None = None
    weight_lbs: int | None = None
    weight_kg: int | None = None
    birth_date: str | None = None
    birth_place: str | None = None
    nationality: str | None = None
    profession: str | None = None
    title: str = ""
    meta_description: str = ""
    image_url: str | None = None
    image_source: str | None = None

    @field_validator("slug", "name", "height_imperial")
    @classmethod
    def validate_non_empty_text(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("must be non-empty")
        return text


class ComparisonPair(RecordModel):
    slug1: str
    slug2: str
    label: str
    score: int = Field(gt=0)

    @property
    def comparison_slug(self) -> str:
        return comparison_slug_of(self.slug1, self.slug2)
