"""Tests for descriptor ordering."""

from datetime import datetime, timedelta, timezone

import pytest

from issue_archiver.assembly.ordering import (
    CATEGORY_PRIORITY,
    DateWindow,
    categorize,
    order_articles,
    order_descriptors,
    select_newsletters,
)
from schemas.descriptor import ArticleDescriptor, NewsletterDescriptor

START = datetime(2025, 3, 9, tzinfo=timezone.utc)
END = datetime(2025, 3, 10, tzinfo=timezone.utc)


def article(name: str, *tags: str) -> ArticleDescriptor:
    return ArticleDescriptor(url=f"https://example.com/{name}", tags=list(tags))


def newsletter(name: str, published_at: datetime | None = None) -> NewsletterDescriptor:
    return NewsletterDescriptor(url=f"https://example.com/{name}", published_at=published_at)


def names(descriptors) -> list[str]:
    return [d.url.rsplit("/", 1)[-1] for d in descriptors]


class TestCategorize:
    """Tests for primary category selection."""

    def test_priority_list(self):
        assert CATEGORY_PRIORITY == (
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

    def test_highest_priority_tag_wins(self):
        assert categorize(article("a", "Humor", "Sports", "news")) == "news"

    def test_unmatched_falls_back_to_other(self):
        assert categorize(article("a", "Weather")) == "other"

    def test_no_tags(self):
        assert categorize(article("a")) == "other"

    def test_tags_are_case_sensitive(self):
        assert categorize(article("a", "opinion")) == "other"


class TestOrderArticles:
    """Tests for category ordering of articles."""

    def test_orders_by_category(self):
        articles = [
            article("humor", "Humor"),
            article("sports", "Sports"),
            article("letter", "letter-from-the-editor"),
            article("untagged"),
            article("news", "news"),
        ]

        assert names(order_articles(articles)) == [
            "letter", "news", "sports", "untagged", "humor",
        ]

    def test_stable_within_category(self):
        """Articles in the same category keep their input order."""
        articles = [
            article("n1", "news"),
            article("o1", "Opinion"),
            article("n2", "news"),
            article("o2", "Opinion"),
        ]

        assert names(order_articles(articles)) == ["n1", "n2", "o1", "o2"]

    def test_unmatched_sorts_with_other(self):
        """Unmatched categories sit in the 'other' slot, before Humor."""
        articles = [
            article("humor", "Humor"),
            article("tagged-other", "other"),
            article("weather", "Weather"),
            article("prospect", "Prospect"),
        ]

        assert names(order_articles(articles)) == [
            "prospect", "tagged-other", "weather", "humor",
        ]


class TestDateWindow:
    """Tests for the half-open newsletter window."""

    def test_start_inclusive_end_exclusive(self):
        window = DateWindow(START, END)

        assert START in window
        assert END - timedelta(seconds=1) in window
        assert END not in window

    def test_naive_datetimes_are_utc(self):
        window = DateWindow(START, END)

        assert datetime(2025, 3, 9, 12) in window

    def test_other_timezones_converted(self):
        window = DateWindow(START, END)
        eastern = timezone(timedelta(hours=-5))

        # 20:00 EST on the 9th is 01:00 UTC on the 10th
        assert datetime(2025, 3, 9, 20, tzinfo=eastern) not in window

    def test_end_must_follow_start(self):
        with pytest.raises(ValueError):
            DateWindow(END, START)


class TestSelectNewsletters:
    """Tests for newsletter window filtering."""

    def test_filters_and_sorts(self):
        newsletters = [
            newsletter("late", END - timedelta(hours=1)),
            newsletter("before", START - timedelta(hours=1)),
            newsletter("early", START + timedelta(hours=1)),
            newsletter("after", END),
        ]

        assert names(select_newsletters(newsletters, DateWindow(START, END))) == [
            "early", "late",
        ]

    def test_undated_kept_last(self):
        newsletters = [newsletter("undated"), newsletter("dated", START)]

        assert names(select_newsletters(newsletters, DateWindow(START, END))) == [
            "dated", "undated",
        ]

    def test_no_window_keeps_all(self):
        newsletters = [newsletter("b", END), newsletter("a", START)]

        assert names(select_newsletters(newsletters)) == ["a", "b"]


class TestOrderDescriptors:
    """Tests for the full issue order."""

    def test_newsletters_prepended(self):
        descriptors = [
            article("sports", "Sports"),
            newsletter("nl", START + timedelta(hours=2)),
            article("news", "news"),
        ]

        ordered = order_descriptors(descriptors, DateWindow(START, END))

        assert names(ordered) == ["nl", "news", "sports"]

    def test_out_of_window_newsletters_dropped(self):
        descriptors = [newsletter("old", START - timedelta(days=1)), article("a")]

        ordered = order_descriptors(descriptors, DateWindow(START, END))

        assert names(ordered) == ["a"]

    def test_empty(self):
        assert order_descriptors([]) == []
