"""Pattern rules that turn an article body into a Celebrity record.

Every rule is a pure ``text -> value | None`` function. Rules that have more
than one accepted layout are built with :func:`first_success`, which tries the
alternatives in order and keeps the first match. A rule that finds nothing
returns ``None``; only name and height decide whether a record is produced.

The fact lines are tagged with emoji markers (📏 height, 📋 claims, ⚖️ weight,
🎂 birth, 🌍 nationality). A marker damaged by a bad encoding round-trip no
longer matches, and the fact is treated as missing.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Callable, TypeVar

from tallerthan.heights import HeightMatch, parse_height_with_cm
from tallerthan.schemas import Article, Celebrity, ImageRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")

IMPERIAL = r"\d+'\d+(?:½|\.5)?(?:\"|'')?"
INLINE_SPACE = r"[^\S\n]*"

NAME_QUESTION_RE = re.compile(r"^#\s*How Tall Is ([^?\n]+)\?", re.MULTILINE)
NAME_HEADING_RE = re.compile(r"^#(?!#)[^\S\n]*(.+)$", re.MULTILINE)

HEIGHT_QUICK_ANSWER_RE = re.compile(rf"📏\s*\*\*({IMPERIAL}\s*\([\d.]+\s*cm\))\*\*", re.IGNORECASE)
HEIGHT_BAREFOOT_RE = re.compile(rf"\*\*({IMPERIAL}\s*\([\d.]+\s*cm\))\*\*\s*barefoot", re.IGNORECASE)
HEIGHT_BLOCKQUOTE_RE = re.compile(rf">\s*📏\s*\*\*({IMPERIAL}\s*\([\d.]+\s*cm\))\*\*", re.IGNORECASE)
HEIGHT_GENERIC_RE = re.compile(rf"({IMPERIAL})\s*\(([\d.]+)\s*cm\)")
LEADING_FLOAT_RE = re.compile(r"^\d+(?:\.\d+)?")

CLAIMS_TAGGED_RE = re.compile(rf"📋\s*Claims:{INLINE_SPACE}([^\n]+)", re.IGNORECASE)
CLAIMS_TEXT_RE = re.compile(rf"Claims:{INLINE_SPACE}\*?\*?({IMPERIAL})", re.IGNORECASE)
WEIGHT_RE = re.compile(r"⚖\ufe0f?\s*Weight:\s*~?(\d+)\s*lbs?\s*\((\d+)\s*kg\)", re.IGNORECASE)
BORN_MONTH_DAY_YEAR_RE = re.compile(
    rf"🎂\s*Born:{INLINE_SPACE}([A-Za-z]+\s+\d+,\s+\d{{4}}),?{INLINE_SPACE}(.+)?",
    re.IGNORECASE,
)
BORN_TEXT_YEAR_RE = re.compile(
    rf"🎂\s*Born:{INLINE_SPACE}([^,\n]+),\s*(\d{{4}}),?{INLINE_SPACE}(.+)?",
    re.IGNORECASE,
)
NATIONALITY_RE = re.compile(rf"[🌍🌎🌏🌐]\ufe0f?\s*Nationality:{INLINE_SPACE}([^\n]+)", re.IGNORECASE)
PROFESSION_TABLE_RE = re.compile(r"\|\s*Profession\s*\|\s*([^|]+)\|", re.IGNORECASE)
PROFESSION_JOB_TITLE_RE = re.compile(r"\"jobTitle\":\s*\"([^\"]+)\"")


@dataclass(frozen=True)
class Weight:
    lbs: int
    kg: int


@dataclass(frozen=True)
class BirthInfo:
    date: str | None = None
    place: str | None = None


def first_success(*rules: Callable[[str], T | None]) -> Callable[[str], T | None]:
    def combined(text: str) -> T | None:
        for rule in rules:
            value = rule(text)
            if value is not None:
                return value
        return None

    return combined


def _non_empty(value: str | None) -> str | None:
    if value is None:
        return None
    text = value.strip()
    return text or None


def _leading_float(text: str) -> float | None:
    match = LEADING_FLOAT_RE.match(text)
    if not match:
        return None
    return float(match.group(0))


def _positive(height: HeightMatch | None) -> HeightMatch | None:
    if height is None or not height.cm > 0:
        return None
    return height


# Name


def name_from_question_heading(text: str) -> str | None:
    match = NAME_QUESTION_RE.search(text)
    return _non_empty(match.group(1)) if match else None


def name_from_first_heading(text: str) -> str | None:
    match = NAME_HEADING_RE.search(text)
    return _non_empty(match.group(1)) if match else None


extract_name = first_success(name_from_question_heading, name_from_first_heading)


# Height


def _bold_height_rule(pattern: re.Pattern[str]) -> Callable[[str], HeightMatch | None]:
    def rule(text: str) -> HeightMatch | None:
        match = pattern.search(text)
        if not match:
            return None
        return _positive(parse_height_with_cm(match.group(1)))

    return rule


def height_from_generic(text: str) -> HeightMatch | None:
    match = HEIGHT_GENERIC_RE.search(text)
    if not match:
        return None
    cm = _leading_float(match.group(2))
    if cm is None:
        return None
    return _positive(HeightMatch(imperial=match.group(1), cm=cm))


height_from_quick_answer = _bold_height_rule(HEIGHT_QUICK_ANSWER_RE)
height_from_barefoot = _bold_height_rule(HEIGHT_BAREFOOT_RE)
height_from_blockquote = _bold_height_rule(HEIGHT_BLOCKQUOTE_RE)

extract_height = first_success(
    height_from_quick_answer,
    height_from_barefoot,
    height_from_blockquote,
    height_from_generic,
)


# Optional facts


def _claims_rule(pattern: re.Pattern[str]) -> Callable[[str], str | None]:
    def rule(text: str) -> str | None:
        match = pattern.search(text)
        if not match:
            return None
        return _non_empty(match.group(1).replace("*", ""))

    return rule


extract_claimed_height = first_success(_claims_rule(CLAIMS_TAGGED_RE), _claims_rule(CLAIMS_TEXT_RE))


def extract_weight(text: str) -> Weight | None:
    match = WEIGHT_RE.search(text)
    if not match:
        return None
    return Weight(lbs=int(match.group(1)), kg=int(match.group(2)))


def birth_from_month_day_year(text: str) -> BirthInfo | None:
    match = BORN_MONTH_DAY_YEAR_RE.search(text)
    if not match:
        return None
    return BirthInfo(date=_non_empty(match.group(1)), place=_non_empty(match.group(2)))


def birth_from_text_year(text: str) -> BirthInfo | None:
    match = BORN_TEXT_YEAR_RE.search(text)
    if not match:
        return None
    return BirthInfo(
        date=f"{match.group(1).strip()}, {match.group(2)}",
        place=_non_empty(match.group(3)),
    )


extract_birth_info = first_success(birth_from_month_day_year, birth_from_text_year)


def extract_nationality(text: str) -> str | None:
    match = NATIONALITY_RE.search(text)
    return _non_empty(match.group(1)) if match else None


def profession_from_table(text: str) -> str | None:
    match = PROFESSION_TABLE_RE.search(text)
    return _non_empty(match.group(1)) if match else None


def profession_from_job_title(text: str) -> str | None:
    # Raw scan: the jobTitle may sit in any JSON fragment, valid JSON-LD or not.
    match = PROFESSION_JOB_TITLE_RE.search(text)
    return _non_empty(match.group(1)) if match else None


extract_profession = first_success(profession_from_table, profession_from_job_title)


# Assembly


def extract_celebrity(
    article: Article,
    image_lookup: Mapping[str, ImageRecord] | None = None,
) -> Celebrity | None:
    text = article.content

    name = extract_name(text)
    if name is None:
        logger.debug("Dropping %s: no name heading", article.slug)
        return None

    height = extract_height(text)
    if height is None:
        logger.debug("Dropping %s: no height", article.slug)
        return None

    weight = extract_weight(text)
    birth = extract_birth_info(text) or BirthInfo()
    image = (image_lookup or {}).get(article.slug)

    return Celebrity(
        slug=article.slug,
        name=name,
        height_cm=height.cm,
        height_imperial=height.imperial,
        height_claimed=extract_claimed_height(text),
        weight_lbs=weight.lbs if weight else None,
        weight_kg=weight.kg if weight else None,
        birth_date=birth.date,
        birth_place=birth.place,
        nationality=extract_nationality(text),
        profession=extract_profession(text),
        title=article.frontmatter.title,
        meta_description=article.frontmatter.meta_description,
        image_url=image.image_url if image else None,
        image_source=(image.source or None) if image else None,
    )
