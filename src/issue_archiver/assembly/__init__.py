"""Ordering and page layout of content units."""

from .assembler import IssueAssembler, NoContent
from .ordering import (
    CATEGORY_PRIORITY,
    DateWindow,
    categorize,
    order_articles,
    order_descriptors,
    select_newsletters,
)

__all__ = [
    "CATEGORY_PRIORITY",
    "DateWindow",
    "IssueAssembler",
    "NoContent",
    "categorize",
    "order_articles",
    "order_descriptors",
    "select_newsletters",
]
