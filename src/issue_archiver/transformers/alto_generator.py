"""ALTO generation for issue pages.

Emits one ALTO v4 document per physical page. A page carries at most one
TextBlock holding a single String with the page's text; blank pages have a
Page element and nothing inside it.
"""

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed

from lxml import etree

from issue_archiver.exceptions import ALTOGenerationError
from issue_archiver.naming import alto_name
from issue_archiver.xmlns import ALTO_NS, ALTO_NSMAP, serialize
from schemas.page import ALTODocument, PhysicalPage

logger = logging.getLogger(__name__)

MEASUREMENT_UNIT = "pixel"


class ALTOGenerator:
    """Generate ALTO XML documents for the physical pages of an issue.

    Pages are independent of each other, so they are built on a thread
    pool. Results are keyed by page number and returned in page order no
    matter which page finishes first.

    Attributes:
        width_px: Page width in pixels
        height_px: Page height in pixels
        max_workers: Thread pool size
    """

    def __init__(self, width_px: int, height_px: int, max_workers: int = 4):
        self.width_px = width_px
        self.height_px = height_px
        self.max_workers = max_workers

    def generate(self, pages: Sequence[PhysicalPage]) -> list[ALTODocument]:
        """Build the ALTO documents for all pages.

        Args:
            pages: Physical pages of the issue

        Returns:
            One ALTODocument per page, ordered by page number

        Raises:
            ALTOGenerationError: If any page fails to generate
        """
        documents: dict[int, ALTODocument] = {}
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_page = {
                executor.submit(self.build_document, page): page for page in pages
            }
            for future in as_completed(future_to_page):
                page = future_to_page[future]
                try:
                    documents[page.page_number] = future.result()
                except ALTOGenerationError:
                    raise
                except Exception as e:
                    raise ALTOGenerationError(
                        f"Failed to generate ALTO for page {page.page_number}: {e}",
                        page_number=page.page_number,
                    ) from e

        logger.info(f"Generated {len(documents)} ALTO documents")
        return [documents[n] for n in sorted(documents)]

    def build_document(self, page: PhysicalPage) -> ALTODocument:
        """Build and serialize the ALTO document for one page."""
        root = self.build_tree(page)
        content = serialize(root)
        logger.debug(f"Built ALTO for page {page.page_number}")
        return ALTODocument(
            page_id=f"page_{page.page_number}",
            page_number=page.page_number,
            name=alto_name(page.page_number),
            width_px=self.width_px,
            height_px=self.height_px,
            content=content,
            measurement_unit=MEASUREMENT_UNIT,
            text=None if page.is_blank else page.text,
        )

    def build_tree(self, page: PhysicalPage) -> etree._Element:
        """Build the ALTO element tree for one page.

        Args:
            page: The physical page

        Returns:
            Root ``alto:alto`` element
        """
        root = etree.Element(f"{{{ALTO_NS}}}alto", nsmap=ALTO_NSMAP)

        description = etree.SubElement(root, f"{{{ALTO_NS}}}Description")
        measurement = etree.SubElement(description, f"{{{ALTO_NS}}}MeasurementUnit")
        measurement.text = MEASUREMENT_UNIT
        if page.image_name:
            source = etree.SubElement(description, f"{{{ALTO_NS}}}sourceImageInformation")
            file_name = etree.SubElement(source, f"{{{ALTO_NS}}}fileName")
            file_name.text = page.image_name

        layout = etree.SubElement(root, f"{{{ALTO_NS}}}Layout")
        page_el = etree.SubElement(layout, f"{{{ALTO_NS}}}Page")
        page_el.set("ID", f"page_{page.page_number}")
        page_el.set("PHYSICAL_IMG_NR", str(page.page_number))
        page_el.set("WIDTH", str(self.width_px))
        page_el.set("HEIGHT", str(self.height_px))

        if not page.is_blank:
            block = etree.SubElement(page_el, f"{{{ALTO_NS}}}TextBlock")
            block.set("ID", f"block_{page.page_number}")
            string = etree.SubElement(block, f"{{{ALTO_NS}}}String")
            string.text = page.text

        return root
