"""Descriptor ordering for issue assembly.

Newsletters published inside the issue's window come first, oldest first.
Articles follow, grouped by their primary category in a fixed priority
order. Within a category, articles keep their input order.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone

from schemas.descriptor import ArticleDescriptor, NewsletterDescriptor

logger = logging.getLogger(__name__)

CATEGORY_PRIORITY = (
    "letter-from-the-editor",
    "news",
    "Analysis",
    "Opinion",
    "Sports",
    "Features",
    "data",
    "Prospect",
    "visual essay",
    "other",
    "Humor",
)
FALLBACK_CATEGORY = "other"


def _as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class DateWindow:
    """Half-open publication window ``[start, end)``."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if _as_utc(self.end) <= _as_utc(self.start):
            raise ValueError(f"window end {self.end} must be after start {self.start}")

    def __contains__(self, moment: datetime) -> bool:
        return _as_utc(self.start) <= _as_utc(moment) < _as_utc(self.end)


def categorize(article: ArticleDescriptor) -> str:
    """Return the highest-priority category among an article's tags.

    Examples:
        >>> categorize(ArticleDescriptor(url="u", tags=["Sports", "news"]))
        'news'
        >>> categorize(ArticleDescriptor(url="u", tags=["Weather"]))
        'other'
    """
    tags = set(article.tags)
    for category in CATEGORY_PRIORITY:
        if category in tags:
            return category
    return FALLBACK_CATEGORY


def order_articles(articles: Iterable[ArticleDescriptor]) -> list[ArticleDescriptor]:
    """Order articles by category priority, keeping input order within a category."""
    rank = {category: i for i, category in enumerate(CATEGORY_PRIORITY)}
    return sorted(articles, key=lambda article: rank[categorize(article)])


def select_newsletters(
    newsletters: Iterable[NewsletterDescriptor],
    window: DateWindow | None = None,
) -> list[NewsletterDescriptor]:
    """Keep newsletters published inside the window, oldest first.

    Newsletters without a timestamp are always kept and sort after dated
    ones, in input order.
    """
    kept = [
        newsletter
        for newsletter in newsletters
        if window is None
        or newsletter.published_at is None
        or newsletter.published_at in window
    ]
    undated = [n for n in kept if n.published_at is None]
    dated = sorted(
        (n for n in kept if n.published_at is not None),
        key=lambda n: _as_utc(n.published_at),
    )
    return [*dated, *undated]


def order_descriptors(
    descriptors: Iterable[ArticleDescriptor | NewsletterDescriptor],
    window: DateWindow | None = None,
) -> list[ArticleDescriptor | NewsletterDescriptor]:
    """Produce the issue order: window newsletters, then prioritized articles.

    Args:
        descriptors: Descriptors in source order, articles and newsletters mixed
        window: Newsletter publication window; None keeps every newsletter

    Returns:
        Descriptors in the order they should appear in the issue
    """
    articles: list[ArticleDescriptor] = []
    newsletters: list[NewsletterDescriptor] = []
    for descriptor in descriptors:
        match descriptor:
            case NewsletterDescriptor():
                newsletters.append(descriptor)
            case ArticleDescriptor():
                articles.append(descriptor)
            case _:
                raise TypeError(f"Unsupported descriptor: {descriptor!r}")

    selected = select_newsletters(newsletters, window)
    dropped = len(newsletters) - len(selected)
    if dropped:
        logger.info(f"Dropped {dropped} newsletters outside the publication window")

    ordered = [*selected, *order_articles(articles)]
    logger.debug(f"Ordered {len(selected)} newsletters and {len(articles)} articles")
    return ordered
