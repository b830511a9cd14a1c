"""PDF merging for issue assembly.

Concatenates the per-unit PDFs into one issue-level PDF with PyMuPDF and
checks the result page for page against the page ranges the assembler
assigned.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import fitz  # PyMuPDF

from issue_archiver.exceptions import MergeInconsistencyError
from schemas.content_unit import ContentUnit

logger = logging.getLogger(__name__)


def count_pages(pdf_bytes: bytes) -> int:
    """Count the pages of an in-memory PDF.

    Raises:
        ValueError: If the bytes are not a readable PDF with at least one page
    """
    try:
        doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    except Exception as e:
        raise ValueError(f"Not a readable PDF: {e}") from e

    try:
        if not doc.is_pdf:
            raise ValueError("Not a readable PDF: content is not PDF data")
        page_count = doc.page_count
    finally:
        doc.close()

    if page_count < 1:
        raise ValueError("PDF has no pages")
    return page_count


@dataclass(frozen=True)
class MergedPDF:
    """The issue-level PDF."""

    content: bytes
    page_count: int


class PDFMerger:
    """Merge content unit PDFs into a single issue PDF.

    The output is written without a generated file ID or timestamps, so
    merging identical inputs yields identical bytes.
    """

    def merge(self, units: Sequence[ContentUnit]) -> MergedPDF:
        """Concatenate unit PDFs in order.

        Args:
            units: Content units in issue order

        Returns:
            MergedPDF whose page count equals the sum of the units' ranges

        Raises:
            MergeInconsistencyError: If an input is not a readable PDF or any
                page count disagrees with the assigned page ranges
        """
        if not units:
            raise MergeInconsistencyError("No content units to merge", expected=0, actual=0)

        expected = sum(unit.page_count for unit in units)
        merged = fitz.open()
        try:
            for unit in units:
                self._append(merged, unit)

            actual = merged.page_count
            if actual != expected:
                raise MergeInconsistencyError(
                    f"Merged PDF has {actual} pages, expected {expected}",
                    expected=expected,
                    actual=actual,
                )

            merged.set_metadata({})
            try:
                content = merged.tobytes(garbage=3, deflate=True, no_new_id=True)
            except RuntimeError as e:
                raise MergeInconsistencyError(f"Cannot write merged PDF: {e}") from e
        finally:
            merged.close()

        logger.info(f"Merged {len(units)} PDFs into {expected} pages")
        return MergedPDF(content=content, page_count=expected)

    def _append(self, merged: fitz.Document, unit: ContentUnit) -> None:
        """Append one unit's pages, checking them against its page range."""
        try:
            src = fitz.open(stream=unit.pdf_bytes, filetype="pdf")
        except Exception as e:
            raise MergeInconsistencyError(
                f"PDF for {unit.source_url} is not readable: {e}"
            ) from e

        try:
            if not src.is_pdf:
                raise MergeInconsistencyError(
                    f"Content for {unit.source_url} is not readable as PDF"
                )
            if src.page_count != unit.page_count:
                raise MergeInconsistencyError(
                    f"PDF for {unit.source_url} has {src.page_count} pages, "
                    f"but pages {unit.start_page}-{unit.end_page} were assigned",
                    expected=unit.page_count,
                    actual=src.page_count,
                )
            try:
                merged.insert_pdf(src)
            except RuntimeError as e:
                raise MergeInconsistencyError(
                    f"Cannot append PDF for {unit.source_url}: {e}"
                ) from e
        finally:
            src.close()
        logger.debug(
            f"Appended {unit.source_url} as pages {unit.start_page}-{unit.end_page}"
        )
