"""Issue assembly.

Captures ordered descriptors one by one through a capture adapter and lays
the successful captures out on contiguous pages. The page counter is an
explicit accumulator threaded through a fold: each capture occupies
``[next_page, next_page + page_count - 1]`` and moves the counter past its
last page. A failed capture is recorded and leaves the counter untouched,
so numbering stays gap-free whatever fails.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from functools import reduce
from typing import NamedTuple

from pydantic import ValidationError

from issue_archiver.capture.adapter import ContentCaptureAdapter
from issue_archiver.config import ArchiveSettings
from issue_archiver.exceptions import CaptureError
from schemas.content_unit import CaptureFailure, ContentUnit
from schemas.descriptor import ArticleDescriptor, NewsletterDescriptor
from schemas.issue import Issue

logger = logging.getLogger(__name__)

DEFAULT_NEWSLETTER_TITLE = "Daily Newsletter"


@dataclass(frozen=True)
class NoContent:
    """Assembly outcome when no descriptor could be captured.

    Not an error: a day with nothing to archive is a valid result.
    """

    message: str
    failures: tuple[CaptureFailure, ...] = field(default_factory=tuple)


class _Layout(NamedTuple):
    next_page: int
    units: tuple[ContentUnit, ...]
    failures: tuple[CaptureFailure, ...]


def _default_title(descriptor: ArticleDescriptor | NewsletterDescriptor) -> str:
    if descriptor.kind == "newsletter":
        return DEFAULT_NEWSLETTER_TITLE
    return ""


class IssueAssembler:
    """Capture descriptors and assign their page ranges.

    Attributes:
        adapter: Capture adapter, already opened by the caller
        settings: Archive settings supplying volume and issue numbers
    """

    def __init__(self, adapter: ContentCaptureAdapter, settings: ArchiveSettings | None = None):
        self.adapter = adapter
        self.settings = settings or ArchiveSettings()

    def assemble(
        self,
        descriptors: Sequence[ArticleDescriptor | NewsletterDescriptor],
        *,
        issue_name: str,
        issue_date: date,
    ) -> Issue | NoContent:
        """Capture descriptors in order and build the issue.

        Args:
            descriptors: Descriptors in issue order
            issue_name: Timestamped issue identifier
            issue_date: Publication date of the issue

        Returns:
            The assembled Issue, or NoContent if every capture failed or
            there was nothing to capture
        """
        last_index = len(descriptors) - 1

        def place(layout: _Layout, item: tuple[int, ArticleDescriptor | NewsletterDescriptor]) -> _Layout:
            index, descriptor = item
            try:
                result = self.adapter.capture(
                    descriptor,
                    is_first=index == 0,
                    is_last=index == last_index,
                )
                unit = ContentUnit(
                    source_url=result.url,
                    kind=descriptor.kind,
                    title=result.title or _default_title(descriptor),
                    plain_text=result.plain_text,
                    pdf_bytes=result.pdf_bytes,
                    page_range=(layout.next_page, layout.next_page + result.page_count - 1),
                )
            except (CaptureError, ValidationError) as e:
                logger.warning(f"Skipping {descriptor.url}: {e}")
                failure = CaptureFailure(url=descriptor.url, kind=descriptor.kind, error=str(e))
                return layout._replace(failures=layout.failures + (failure,))

            logger.info(
                f"Captured {descriptor.url} as pages {unit.start_page}-{unit.end_page}"
            )
            return _Layout(
                next_page=unit.end_page + 1,
                units=layout.units + (unit,),
                failures=layout.failures,
            )

        layout = reduce(place, enumerate(descriptors), _Layout(1, (), ()))

        if not layout.units:
            message = (
                f"No content captured for {issue_name}: "
                f"{len(layout.failures)} of {len(descriptors)} captures failed"
            )
            logger.warning(message)
            return NoContent(message=message, failures=layout.failures)

        if layout.failures:
            logger.warning(
                f"{len(layout.failures)} of {len(descriptors)} captures failed for {issue_name}"
            )

        return Issue(
            name=issue_name,
            date=issue_date,
            volume_number=self.settings.volume_number,
            issue_number=self.settings.issue_number,
            units=layout.units,
            failures=layout.failures,
        )
