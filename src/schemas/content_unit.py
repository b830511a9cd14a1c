"""Capture results and content units.

A CaptureResult is what a capture adapter hands back for one descriptor.
A ContentUnit is a capture result that has been placed in the issue: it
carries its kind and the page range the assembler assigned to it, and is
immutable from then on.
"""

from typing import Literal

from pydantic import BaseModel, Field, model_validator

ContentKind = Literal["article", "newsletter"]


class CaptureResult(BaseModel):
    """Rendered output for a single content descriptor.

    Attributes:
        url: Source URL that was captured
        title: Display title (may be empty)
        plain_text: Plain text of the content, embedded in the text layer
        pdf_bytes: Rendered PDF
        page_count: Number of pages in pdf_bytes
    """

    url: str
    title: str = ""
    plain_text: str = ""
    pdf_bytes: bytes
    page_count: int = Field(ge=1)

    model_config = {"frozen": True}


class CaptureFailure(BaseModel):
    """A descriptor that could not be captured."""

    url: str
    kind: ContentKind
    error: str


class ContentUnit(BaseModel):
    """One article or newsletter occupying a contiguous page range.

    Attributes:
        source_url: URL the unit was captured from
        kind: "article" or "newsletter"
        title: Display title
        plain_text: Text placed on the unit's start page
        pdf_bytes: The unit's own rendered PDF
        page_range: (start_page, end_page), 1-based and inclusive
    """

    source_url: str
    kind: ContentKind
    title: str = ""
    plain_text: str = ""
    pdf_bytes: bytes = Field(repr=False)
    page_range: tuple[int, int]

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_range(self) -> "ContentUnit":
        start, end = self.page_range
        if start < 1 or end < start:
            raise ValueError(f"invalid page range {self.page_range}")
        return self

    @property
    def start_page(self) -> int:
        return self.page_range[0]

    @property
    def end_page(self) -> int:
        return self.page_range[1]

    @property
    def page_count(self) -> int:
        return self.end_page - self.start_page + 1
