"""Deterministic file names and relative hrefs for issue packages.

Every name is derived from the page number or the issue name, so re-running
the pipeline on identical captures reproduces the same package layout. The
ALTO file and the page image of one page share the same stem.
"""

from datetime import datetime

from issue_archiver.config import DEFAULT_ISSUE_PREFIX

METS_NAME = "mets.xml"
ALTO_DIR = "alto"
IMAGES_DIR = "images"


def page_stem(page_number: int) -> str:
    """Return the file stem for a page, e.g. ``page-0007``."""
    if page_number < 1:
        raise ValueError(f"page numbers are 1-based, got {page_number}")
    return f"page-{page_number:04d}"


def alto_name(page_number: int) -> str:
    return f"{page_stem(page_number)}.xml"


def image_name(page_number: int, extension: str) -> str:
    return f"{page_stem(page_number)}.{extension.lstrip('.')}"


def issue_name(started_at: datetime, prefix: str = DEFAULT_ISSUE_PREFIX) -> str:
    """Build the timestamped issue identifier fixed at run start.

    Examples:
        >>> issue_name(datetime(2025, 3, 10, 16, 55, 56))
        'dailyprincetonian_2025-03-10_16-55-56'
    """
    return f"{prefix}_{started_at.strftime('%Y-%m-%d_%H-%M-%S')}"


def pdf_name(name: str) -> str:
    return f"{name}.pdf"


def alto_path(page_number: int) -> str:
    return f"{ALTO_DIR}/{alto_name(page_number)}"


def image_path(name: str) -> str:
    return f"{IMAGES_DIR}/{name}"


def relative_href(path: str) -> str:
    """Return a storage-agnostic href for a package-relative path."""
    return f"file://./{path}"
