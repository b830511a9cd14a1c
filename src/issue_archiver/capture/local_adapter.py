"""Capture adapter for PDFs that were rendered ahead of time."""

import logging
from pathlib import Path

from issue_archiver.exceptions import CaptureError
from issue_archiver.transformers.page_text import strip_html
from issue_archiver.transformers.pdf_merger import count_pages
from schemas.content_unit import CaptureResult
from schemas.descriptor import ArticleDescriptor, NewsletterDescriptor

from .adapter import ContentCaptureAdapter

logger = logging.getLogger(__name__)


class LocalPDFCaptureAdapter(ContentCaptureAdapter):
    """Read each descriptor's ``pdf_path`` from disk.

    Relative paths are resolved against ``base_dir``.
    """

    def __init__(self, base_dir: Path | None = None):
        self.base_dir = base_dir or Path.cwd()

    def capture(
        self,
        descriptor: ArticleDescriptor | NewsletterDescriptor,
        *,
        is_first: bool = False,
        is_last: bool = False,
    ) -> CaptureResult:
        if not descriptor.pdf_path:
            raise CaptureError(f"No pdf_path for {descriptor.url}", url=descriptor.url)

        pdf_path = self.base_dir / descriptor.pdf_path
        try:
            pdf_bytes = pdf_path.read_bytes()
        except OSError as e:
            raise CaptureError(
                f"Cannot read {pdf_path} for {descriptor.url}: {e}", url=descriptor.url
            ) from e

        try:
            page_count = count_pages(pdf_bytes)
        except ValueError as e:
            raise CaptureError(str(e), url=descriptor.url) from e

        logger.debug(f"Loaded {page_count} page(s) for {descriptor.url} from {pdf_path}")
        return CaptureResult(
            url=descriptor.url,
            title=strip_html(descriptor.title or ""),
            plain_text=strip_html(descriptor.plain_text or ""),
            pdf_bytes=pdf_bytes,
            page_count=page_count,
        )
