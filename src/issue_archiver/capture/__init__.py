"""Content capture adapters.

The web adapter depends on WeasyPrint and is imported from its own module
(``issue_archiver.capture.web_adapter``).
"""

from .adapter import ContentCaptureAdapter
from .local_adapter import LocalPDFCaptureAdapter

__all__ = ["ContentCaptureAdapter", "LocalPDFCaptureAdapter"]
