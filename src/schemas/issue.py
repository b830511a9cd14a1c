"""Issue domain object."""

from dataclasses import dataclass, field
from datetime import date

from .content_unit import CaptureFailure, ContentUnit


class PageRangeError(ValueError):
    """Content unit page ranges do not tile the issue's pages."""


@dataclass(frozen=True)
class Issue:
    """An assembled archival issue made of ordered content units.

    The units' page ranges must tile ``1..total_pages`` exactly: they start
    at 1, follow each other without gaps, and never overlap. Two units may
    not share a start page.

    Attributes:
        name: Timestamped identifier fixed at run start
            (e.g. "dailyprincetonian_2025-03-10_16-55-56")
        date: Publication date of the issue
        volume_number: Volume number (rendered as Roman numerals)
        issue_number: Issue number within the volume
        units: Successfully captured units in issue order
        failures: Descriptors that could not be captured
    """

    name: str
    date: date
    volume_number: int
    issue_number: int
    units: tuple[ContentUnit, ...]
    failures: tuple[CaptureFailure, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.units:
            raise PageRangeError("an issue needs at least one content unit")
        expected = 1
        for unit in self.units:
            if unit.start_page != expected:
                raise PageRangeError(
                    f"unit {unit.source_url} starts at page {unit.start_page}, "
                    f"expected {expected}"
                )
            expected = unit.end_page + 1

    @property
    def total_pages(self) -> int:
        return self.units[-1].end_page
