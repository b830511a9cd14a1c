"""Capture adapter interface.

A capture adapter turns one content descriptor into a rendered PDF plus the
text and title that go with it. It owns the rendering resource for the whole
run, so it is used as a context manager and must release that resource on
every exit path.
"""

from abc import ABC, abstractmethod

from schemas.content_unit import CaptureResult
from schemas.descriptor import ArticleDescriptor, NewsletterDescriptor


class ContentCaptureAdapter(ABC):
    """Abstract base class for content capture adapters."""

    def __enter__(self) -> "ContentCaptureAdapter":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False

    def open(self) -> None:
        """Acquire the rendering resource."""
        pass

    def close(self) -> None:
        """Release the rendering resource."""
        pass

    @abstractmethod
    def capture(
        self,
        descriptor: ArticleDescriptor | NewsletterDescriptor,
        *,
        is_first: bool = False,
        is_last: bool = False,
    ) -> CaptureResult:
        """Capture a single content unit.

        Args:
            descriptor: The content to capture
            is_first: True for the first unit of the issue (keeps the site header)
            is_last: True for the last unit of the issue (keeps the site footer)

        Returns:
            CaptureResult with the rendered PDF and its page count

        Raises:
            CaptureError: If the unit cannot be captured
        """
        pass
