"""Pytest fixtures for Issue Archiver tests."""

from datetime import date, datetime, timezone

import fitz  # PyMuPDF
import pytest

from issue_archiver.capture.adapter import ContentCaptureAdapter
from issue_archiver.config import ArchiveSettings
from issue_archiver.exceptions import CaptureError
from schemas.content_unit import CaptureResult, ContentUnit
from schemas.issue import Issue

FIXED_NOW = datetime(2025, 3, 10, 16, 55, 56, tzinfo=timezone.utc)
ISSUE_NAME = "dailyprincetonian_2025-03-10_16-55-56"


def make_pdf(pages: int = 1, label: str = "Page") -> bytes:
    """Build an in-memory PDF with *pages* US Letter pages."""
    doc = fitz.open()
    for i in range(pages):
        page = doc.new_page(width=612, height=792)
        page.insert_text((72, 100), f"{label} {i + 1}")
    content = doc.tobytes()
    doc.close()
    return content


def make_unit(
    start: int,
    pages: int = 1,
    text: str = "",
    url: str | None = None,
    kind: str = "article",
    title: str = "",
) -> ContentUnit:
    """Build a content unit occupying *pages* pages from *start*."""
    return ContentUnit(
        source_url=url or f"https://www.dailyprincetonian.com/article/{start}",
        kind=kind,
        title=title,
        plain_text=text,
        pdf_bytes=make_pdf(pages, label=f"Unit {start}"),
        page_range=(start, start + pages - 1),
    )


class StubCaptureAdapter(ContentCaptureAdapter):
    """Capture adapter serving canned page counts.

    ``pages`` maps a URL to a page count, or to an exception to raise for
    that URL. Every call and the open/close lifecycle are recorded.
    """

    def __init__(self, pages: dict):
        self.pages = pages
        self.calls: list[tuple[str, bool, bool]] = []
        self.opened = False
        self.closed = False

    def open(self) -> None:
        self.opened = True

    def close(self) -> None:
        self.closed = True

    def capture(self, descriptor, *, is_first=False, is_last=False) -> CaptureResult:
        self.calls.append((descriptor.url, is_first, is_last))
        outcome = self.pages.get(descriptor.url)
        if outcome is None:
            raise CaptureError(f"Unknown URL {descriptor.url}", url=descriptor.url)
        if isinstance(outcome, Exception):
            raise outcome
        return CaptureResult(
            url=descriptor.url,
            title=descriptor.title or "",
            plain_text=descriptor.plain_text or "",
            pdf_bytes=make_pdf(outcome),
            page_count=outcome,
        )


@pytest.fixture
def fixed_clock():
    """Clock that always returns 2025-03-10 16:55:56 UTC."""
    return lambda: FIXED_NOW


@pytest.fixture
def settings():
    """Archive settings with a low DPI to keep page images small."""
    return ArchiveSettings(dpi=72, alto_workers=2)


@pytest.fixture
def sample_issue():
    """Issue with unit A on pages 1-2 and unit B on page 3."""
    return Issue(
        name=ISSUE_NAME,
        date=date(2025, 3, 10),
        volume_number=147,
        issue_number=1,
        units=(
            make_unit(1, pages=2, text="Hello World", title="Article A"),
            make_unit(3, pages=1, text="", title="Article B"),
        ),
    )
