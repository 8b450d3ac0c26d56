"""Height unit conversion, formatting and bucket-slug helpers."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Literal

CM_PER_INCH = 2.54
INCHES_PER_FOOT = 12

IMPERIAL_HEIGHT_RE = re.compile(r"(\d+)'(\d+)(½|\.5)?(?:\"|'')?")
IMPERIAL_TEXT_RE = re.compile(r"(\d+'[\d½.]+(?:\"|'')?)")
CM_IN_PARENS_RE = re.compile(r"\((\d+(?:\.\d+)?)\s*cm\)")
HEIGHT_SLUG_RE = re.compile(r"^(\d+)-ft-(\d+)$")
SLUGIFY_STRIP_RE = re.compile(r"[^\w\s-]", re.ASCII)
SLUGIFY_SPACE_RE = re.compile(r"\s+")
SLUGIFY_DASH_RE = re.compile(r"--+")

Gender = Literal["male", "female"]

# US adult population (mean, standard deviation) in cm.
POPULATION_STATS: dict[str, tuple[float, float]] = {
    "male": (175.3, 7.5),
    "female": (161.8, 6.9),
}


@dataclass(frozen=True)
class HeightMatch:
    imperial: str
    cm: float


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def cm_to_inches(cm: float) -> float:
    return cm / CM_PER_INCH


def inches_to_cm(inches: float) -> float:
    return inches * CM_PER_INCH


def feet_inches_to_total_inches(feet: int, inches: float) -> float:
    return feet * INCHES_PER_FOOT + inches


def total_inches_to_feet_inches(total_inches: float) -> tuple[int, float]:
    feet = math.floor(total_inches / INCHES_PER_FOOT)
    return feet, total_inches - feet * INCHES_PER_FOOT


def cm_to_feet_inches(cm: float) -> tuple[int, float]:
    return total_inches_to_feet_inches(cm_to_inches(cm))


def feet_inches_to_cm(feet: int, inches: float) -> float:
    return inches_to_cm(feet_inches_to_total_inches(feet, inches))


def parse_imperial_height(text: str) -> float | None:
    """Parse ``5'10"``, ``5'10½"`` or ``5'10.5"`` into centimetres."""
    match = IMPERIAL_HEIGHT_RE.search(text)
    if not match:
        return None
    feet = int(match.group(1))
    inches = float(match.group(2))
    if match.group(3):
        inches += 0.5
    return feet_inches_to_cm(feet, inches)


def parse_height_with_cm(text: str) -> HeightMatch | None:
    """Parse ``5'10" (178 cm)``; the centimetre value wins over the imperial one."""
    cm_match = CM_IN_PARENS_RE.search(text)
    imperial_match = IMPERIAL_TEXT_RE.search(text)
    if cm_match:
        cm = float(cm_match.group(1))
        imperial = imperial_match.group(1) if imperial_match else format_cm_to_imperial(cm)
        return HeightMatch(imperial=imperial, cm=cm)

    cm = parse_imperial_height(text)
    if cm is None:
        return None
    return HeightMatch(imperial=imperial_match.group(1) if imperial_match else text, cm=cm)


def format_cm_to_imperial(cm: float) -> str:
    feet, inches = cm_to_feet_inches(cm)
    whole_inches = math.floor(inches)
    fraction = inches - whole_inches
    if 0.25 <= fraction < 0.75:
        return f"{feet}'{whole_inches}½\""
    if fraction >= 0.75:
        whole_inches += 1
        if whole_inches == INCHES_PER_FOOT:
            feet, whole_inches = feet + 1, 0
    return f"{feet}'{whole_inches}\""


def format_height_full(cm: float) -> str:
    return f"{format_cm_to_imperial(cm)} ({round_half_up(cm)} cm)"


def height_difference_inches(cm1: float, cm2: float) -> float:
    return cm_to_inches(cm1) - cm_to_inches(cm2)


def format_height_difference(cm1: float, cm2: float) -> str:
    diff = height_difference_inches(cm1, cm2)
    abs_diff = abs(diff)
    if abs_diff < 0.5:
        return "same height"

    direction = "taller" if diff > 0 else "shorter"
    if abs_diff >= INCHES_PER_FOOT:
        feet = math.floor(abs_diff / INCHES_PER_FOOT)
        inches = round_half_up(abs_diff % INCHES_PER_FOOT)
        if inches == INCHES_PER_FOOT:
            feet, inches = feet + 1, 0
        if inches == 0:
            unit = "foot" if feet == 1 else "feet"
            return f"{feet} {unit} {direction}"
        return f"{feet}'{inches}\" {direction}"

    rounded = round_half_up(abs_diff * 2) / 2
    text = f"{rounded:g}"
    unit = "inch" if rounded == 1 else "inches"
    return f"{text} {unit} {direction}"


def generate_height_slug(cm: float) -> str:
    total_inches = round_half_up(cm_to_inches(cm))
    feet, inches = divmod(total_inches, INCHES_PER_FOOT)
    return f"{feet}-ft-{inches}"


def parse_height_slug(slug: str) -> float | None:
    """Return the centre of a height bucket in cm, or None for a malformed slug."""
    match = HEIGHT_SLUG_RE.match(slug.strip())
    if not match:
        return None
    feet = int(match.group(1))
    inches = int(match.group(2))
    if inches >= INCHES_PER_FOOT:
        return None
    return feet_inches_to_cm(feet, inches)


def height_slug_sort_key(slug: str) -> tuple[float, str]:
    cm = parse_height_slug(slug)
    return (cm if cm is not None else math.inf, slug)


def get_height_percentile(cm: float, gender: Gender) -> float:
    mean, sd = POPULATION_STATS[gender]
    z_score = (cm - mean) / sd
    # Closed-form approximation of the normal CDF.
    spread = math.sqrt(1 - math.exp(-2 * z_score * z_score / math.pi))
    percentile = 50 * (1 + math.copysign(spread, z_score))
    return min(99.9, max(0.1, percentile))


def slugify(text: str) -> str:
    slug = SLUGIFY_STRIP_RE.sub("", text.lower())
    slug = SLUGIFY_SPACE_RE.sub("-", slug)
    slug = SLUGIFY_DASH_RE.sub("-", slug)
    return slug.strip()
