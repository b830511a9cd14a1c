"""Capture adapter that fetches pages over HTTP and renders them to PDF.

Pages are fetched with PageClient (timeouts and retries) and rendered with
WeasyPrint on a US Letter page. The site header is kept only on the first
unit of the issue and the footer only on the last, so the merged issue reads
as one publication.
"""

import logging

from weasyprint import CSS, HTML

from issue_archiver.clients import ClientError, PageClient
from issue_archiver.exceptions import CaptureError
from issue_archiver.transformers.page_text import strip_html
from issue_archiver.transformers.pdf_merger import count_pages
from schemas.content_unit import CaptureResult
from schemas.descriptor import ArticleDescriptor, NewsletterDescriptor

from .adapter import ContentCaptureAdapter

logger = logging.getLogger(__name__)

PAGE_CSS = """
@page {
  size: 8.5in 11in;
  margin: 1in 0 1in 0;
}
@page :first {
  margin-top: 0.5in;
  margin-bottom: 1in;
}
related, .related, #awesomebar {
  display: none !important;
}
"""

HEADER_CSS = "header, .promo-bar { display: none !important; }"
FOOTER_CSS = "footer { display: none !important; }"


class WebCaptureAdapter(ContentCaptureAdapter):
    """Render web articles and newsletters to PDF one at a time.

    Attributes:
        client_config: Config dict for the PageClient (timeout, retries, headers)
    """

    def __init__(
        self,
        client_config: dict | None = None,
        page_client: PageClient | None = None,
    ):
        self.client_config = client_config or {}
        self._client = page_client
        self._owns_client = page_client is None

    def open(self) -> None:
        if self._client is None:
            self._client = PageClient(self.client_config)
        logger.debug("Web capture adapter opened")

    def close(self) -> None:
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None
        logger.debug("Web capture adapter closed")

    def capture(
        self,
        descriptor: ArticleDescriptor | NewsletterDescriptor,
        *,
        is_first: bool = False,
        is_last: bool = False,
    ) -> CaptureResult:
        if self._client is None:
            raise CaptureError("Adapter is not open", url=descriptor.url)

        try:
            html = self._client.fetch(descriptor.url)
        except ClientError as e:
            raise CaptureError(
                f"Failed to fetch {descriptor.url}: {e}", url=descriptor.url
            ) from e

        try:
            pdf_bytes = self._render(html, descriptor.url, is_first, is_last)
            page_count = count_pages(pdf_bytes)
        except Exception as e:
            raise CaptureError(
                f"Failed to render {descriptor.url}: {e}", url=descriptor.url
            ) from e

        logger.debug(f"Rendered {descriptor.url} to {page_count} page(s)")
        return CaptureResult(
            url=descriptor.url,
            title=strip_html(descriptor.title or ""),
            plain_text=strip_html(descriptor.plain_text or ""),
            pdf_bytes=pdf_bytes,
            page_count=page_count,
        )

    def _render(self, html: str, url: str, is_first: bool, is_last: bool) -> bytes:
        """Render HTML to PDF bytes with the issue page stylesheet."""
        stylesheets = [CSS(string=self.page_css(is_first, is_last))]
        return HTML(string=html, base_url=url).write_pdf(stylesheets=stylesheets)

    @staticmethod
    def page_css(is_first: bool, is_last: bool) -> str:
        """Build the stylesheet for a unit at the given issue position."""
        css = PAGE_CSS
        if not is_first:
            css += HEADER_CSS + "\n"
        if not is_last:
            css += FOOTER_CSS + "\n"
        return css
