"""Page domain objects."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PhysicalPage:
    """A single page of the merged issue PDF.

    Attributes:
        page_number: 1-based page number within the issue
        text: Text block for the page; empty for blank pages
        image_name: File name of the page image, if images were generated
    """

    page_number: int
    text: str = ""
    image_name: str | None = None

    @property
    def is_blank(self) -> bool:
        return not self.text


@dataclass(frozen=True)
class ALTODocument:
    """Serialized ALTO text layer for one physical page.

    Attributes:
        page_id: Page element ID (e.g. "page_1")
        page_number: 1-based page number
        name: File name within the alto/ directory
        width_px: Page width in pixels
        height_px: Page height in pixels
        measurement_unit: Always "pixel"
        text: Text block content, or None for a blank page
        content: Serialized XML bytes
    """

    page_id: str
    page_number: int
    name: str
    width_px: int
    height_px: int
    content: bytes
    measurement_unit: str = "pixel"
    text: str | None = None


@dataclass(frozen=True)
class PageImage:
    """Rasterized image of one physical page.

    Attributes:
        page_number: 1-based page number
        name: File name within the images/ directory
        mimetype: MIME type of the image
        content: Image bytes
    """

    page_number: int
    name: str
    mimetype: str
    content: bytes
