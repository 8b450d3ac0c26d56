from __future__ import annotations

import logging
import re
import threading
import unicodedata
from collections.abc import Callable, Mapping
from pathlib import Path

from tallerthan.articles import load_all_articles
from tallerthan.config import ContentConfig
from tallerthan.extractors import extract_celebrity
from tallerthan.heights import generate_height_slug, height_slug_sort_key
from tallerthan.images import load_image_lookup
from tallerthan.schemas import Article, Celebrity, ComparisonPair, ImageRecord

logger = logging.getLogger(__name__)

COMPARISON_SLUG_RE = re.compile(r"^(.+)-vs-(.+)$")

POPULAR_SLUGS = frozenset(
    {
        "kevin-hart",
        "dwayne-johnson",
        "taylor-swift",
        "tom-cruise",
        "ariana-grande",
        "beyonce",
        "brad-pitt",
        "leonardo-dicaprio",
        "tom-holland",
        "zendaya",
        "shaquille-oneal",
        "danny-devito",
        "peter-dinklage",
        "jason-momoa",
        "chris-hemsworth",
        "scarlett-johansson",
    }
)
PROFESSION_KEYWORDS = ("actor", "singer", "basketball")

POPULAR_BONUS = 10
EXTREME_DIFFERENCE_CM = 30
EXTREME_DIFFERENCE_BONUS = 5
NOTABLE_DIFFERENCE_CM = 15
NOTABLE_DIFFERENCE_BONUS = 3
SHARED_PROFESSION_BONUS = 3

ArticleLoader = Callable[[], list[Article]]


def name_sort_key(name: str) -> tuple[str, str]:
    decomposed = unicodedata.normalize("NFKD", name)
    folded = "".join(char for char in decomposed if not unicodedata.combining(char))
    return (folded.casefold(), name)


def score_pair(first: Celebrity, second: Celebrity) -> int:
    score = 0
    if first.slug in POPULAR_SLUGS:
        score += POPULAR_BONUS
    if second.slug in POPULAR_SLUGS:
        score += POPULAR_BONUS

    difference = abs(first.height_cm - second.height_cm)
    if difference > EXTREME_DIFFERENCE_CM:
        score += EXTREME_DIFFERENCE_BONUS
    if difference > NOTABLE_DIFFERENCE_CM:
        score += NOTABLE_DIFFERENCE_BONUS

    if first.profession and second.profession:
        first_profession = first.profession.lower()
        second_profession = second.profession.lower()
        for keyword in PROFESSION_KEYWORDS:
            if keyword in first_profession and keyword in second_profession:
                score += SHARED_PROFESSION_BONUS
    return score


def parse_comparison_slug(comparison_slug: str) -> tuple[str, str] | None:
    match = COMPARISON_SLUG_RE.match(comparison_slug)
    if not match:
        return None
    return match.group(1), match.group(2)


class CelebrityIndex:
    """Memoized view of every celebrity derivable from the article corpus.

    The corpus is read once, on first access, under a lock so concurrent first
    callers share a single scan. Build one index per process (or per test).
    """

    def __init__(
        self,
        config: ContentConfig | None = None,
        *,
        project_root: Path | None = None,
        article_loader: ArticleLoader | None = None,
        image_lookup: Mapping[str, ImageRecord] | None = None,
    ) -> None:
        self.config = config or ContentConfig()
        self.project_root = project_root or Path.cwd()
        self._article_loader = article_loader or self._load_articles
        self._image_lookup = image_lookup
        self._articles: list[Article] = []
        self._celebrities: list[Celebrity] | None = None
        self._lock = threading.Lock()

    def _load_articles(self) -> list[Article]:
        return load_all_articles(
            self.config.articles_path(self.project_root),
            ignored_files=self.config.ignored_files,
            excluded_substrings=self.config.excluded_substrings,
        )

    def image_lookup(self) -> Mapping[str, ImageRecord]:
        if self._image_lookup is None:
            self._image_lookup = load_image_lookup(self.config.image_data_file(self.project_root))
        return self._image_lookup

    def _build(self) -> list[Celebrity]:
        articles = self._article_loader()
        self._articles = articles
        images = self.image_lookup()
        celebrities: list[Celebrity] = []
        for article in articles:
            celebrity = extract_celebrity(article, images)
            if celebrity is not None:
                celebrities.append(celebrity)
        celebrities.sort(key=lambda celebrity: name_sort_key(celebrity.name))
        logger.info(
            "Extracted %d celebrities from %d articles",
            len(celebrities),
            len(articles),
        )
        return celebrities

    def get_all_celebrities(self) -> list[Celebrity]:
        if self._celebrities is None:
            with self._lock:
                if self._celebrities is None:
                    self._celebrities = self._build()
        return self._celebrities

    def get_all_articles(self) -> list[Article]:
        """Articles the celebrity list was extracted from, in load order."""
        self.get_all_celebrities()
        return self._articles

    def get_celebrity_by_slug(self, slug: str) -> Celebrity | None:
        for celebrity in self.get_all_celebrities():
            if celebrity.slug == slug:
                return celebrity
        return None

    def get_celebrities_by_height(self) -> dict[str, list[Celebrity]]:
        groups: dict[str, list[Celebrity]] = {}
        for celebrity in self.get_all_celebrities():
            groups.setdefault(generate_height_slug(celebrity.height_cm), []).append(celebrity)
        return groups

    def get_all_height_slugs(self) -> list[str]:
        return sorted(self.get_celebrities_by_height(), key=height_slug_sort_key)

    def get_celebrities_at_height(self, height_slug: str) -> list[Celebrity]:
        return self.get_celebrities_by_height().get(height_slug, [])

    def get_celebrities_by_profession(self, profession: str) -> list[Celebrity]:
        needle = profession.lower()
        return [
            celebrity
            for celebrity in self.get_all_celebrities()
            if celebrity.profession and needle in celebrity.profession.lower()
        ]

    def search_celebrities(self, query: str) -> list[Celebrity]:
        needle = query.lower()
        return [celebrity for celebrity in self.get_all_celebrities() if needle in celebrity.name.lower()]

    def get_comparison_pairs(self) -> list[ComparisonPair]:
        celebrities = self.get_all_celebrities()
        pairs: list[ComparisonPair] = []
        for i, first in enumerate(celebrities):
            for second in celebrities[i + 1 :]:
                score = score_pair(first, second)
                if score <= 0:
                    continue
                pairs.append(
                    ComparisonPair(
                        slug1=first.slug,
                        slug2=second.slug,
                        label=f"{first.name} vs {second.name}",
                        score=score,
                    )
                )

        # sorted() is stable: equal scores keep i<j generation order.
        pairs = sorted(pairs, key=lambda pair: -pair.score)
        return pairs[: self.config.max_comparison_pairs]

