"""Content descriptor schemas.

Descriptors are the ingestion boundary of the assembly pipeline: one per
article or newsletter that should be captured into the issue. They are a
tagged variant on ``kind`` so downstream stages can match on the kind
instead of probing for fields.
"""

import logging
from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, Field, TypeAdapter, ValidationError, field_validator

logger = logging.getLogger(__name__)


class _DescriptorBase(BaseModel):
    """Fields shared by every content descriptor."""

    url: str
    title: str | None = None
    plain_text: str | None = Field(default=None, alias="content")
    published_at: datetime | None = None
    pdf_path: str | None = None

    model_config = {"populate_by_name": True, "frozen": True}

    @field_validator("url")
    @classmethod
    def _url_not_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("url must not be empty")
        return value


class ArticleDescriptor(_DescriptorBase):
    """A web article to be captured.

    Attributes:
        tags: Tag names from the source CMS; used for category ordering
    """

    kind: Literal["article"] = "article"
    tags: list[str] = []


class NewsletterDescriptor(_DescriptorBase):
    """An email newsletter to be captured and prepended to the issue."""

    kind: Literal["newsletter"] = "newsletter"


ContentDescriptor = Annotated[
    ArticleDescriptor | NewsletterDescriptor,
    Field(discriminator="kind"),
]

DescriptorAdapter = TypeAdapter(ContentDescriptor)


def parse_descriptors(data: list) -> list[ArticleDescriptor | NewsletterDescriptor]:
    """Validate raw descriptor dicts, defaulting ``kind`` to ``article``.

    Malformed entries, such as a missing or empty ``url``, are logged and
    skipped; the remaining descriptors keep their input order.

    Args:
        data: List of descriptor dictionaries (e.g. loaded from JSON)

    Returns:
        List of valid descriptors in input order
    """
    descriptors = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            logger.warning(
                f"Skipping descriptor {index}: expected an object, got {type(item).__name__}"
            )
            continue
        try:
            descriptors.append(DescriptorAdapter.validate_python({"kind": "article", **item}))
        except ValidationError as e:
            logger.warning(f"Skipping descriptor {index}: {e}")

    if len(descriptors) != len(data):
        logger.warning(f"Skipped {len(data) - len(descriptors)} of {len(data)} descriptors")
    return descriptors
