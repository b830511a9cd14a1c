"""METS generation for assembled issues.

Builds one METS document per issue with inline MODS. The document is
derived in two steps: ``describe`` works out every file ID, href and extent
as a METSPackage, and ``build_tree`` renders that description to XML.

Structure:
    - metsHdr: creation date and creator agent
    - dmdSec: inline MODS with the issue title, label, date, volume and
      number, and one constituent relatedItem per content unit
    - fileSec: IMGGRP (only with images), ALTOGRP, PDFGRP
    - structMap (PHYSICAL): one div per page pointing at its ALTO file and,
      when present, its image
"""

import logging
from collections.abc import Callable, Sequence
from datetime import datetime, timezone

from lxml import etree

from issue_archiver.config import ArchiveSettings
from issue_archiver.exceptions import METSGenerationError
from issue_archiver.naming import alto_path, image_path, pdf_name, relative_href
from issue_archiver.xmlns import (
    METS_NS,
    METS_NSMAP,
    METS_SCHEMA_LOCATION,
    MODS_NS,
    XLINK_NS,
    XSI_NS,
    serialize,
)
from schemas.issue import Issue
from schemas.mets import (
    Bibliographic,
    Constituent,
    FileGroups,
    METSFile,
    METSPackage,
    StructMapEntry,
)
from schemas.page import ALTODocument, PageImage

from .formatting import format_issue_label, format_mets_label

logger = logging.getLogger(__name__)

PDF_FILE_ID = "PDF_ISSUE"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class METSGenerator:
    """Generate the METS document for an issue.

    Attributes:
        settings: Archive settings (publication title, creator agent)
        clock: Returns the current time; used only for CREATEDATE
    """

    def __init__(
        self,
        settings: ArchiveSettings | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.settings = settings or ArchiveSettings()
        self.clock = clock

    def generate(
        self,
        issue: Issue,
        alto_docs: Sequence[ALTODocument],
        images: Sequence[PageImage] | None = None,
    ) -> bytes:
        """Generate serialized METS XML for an issue.

        Args:
            issue: Assembled issue
            alto_docs: One ALTO document per page, in page order
            images: One page image per page, or None when images were not
                generated

        Returns:
            UTF-8 encoded METS document

        Raises:
            METSGenerationError: If the inputs do not describe a consistent
                package or the document cannot be built
        """
        package = self.describe(issue, alto_docs, images)
        try:
            root = self.build_tree(package, self.clock())
            content = serialize(root)
        except METSGenerationError:
            raise
        except Exception as e:
            raise METSGenerationError(f"Failed to build METS for {issue.name}: {e}") from e

        logger.info(
            f"Generated METS for {issue.name}: {len(package.struct_map)} pages, "
            f"{len(package.constituents)} constituents"
        )
        return content

    def describe(
        self,
        issue: Issue,
        alto_docs: Sequence[ALTODocument],
        images: Sequence[PageImage] | None = None,
    ) -> METSPackage:
        """Work out the file groups, page structure and constituents.

        Raises:
            METSGenerationError: If the ALTO documents or images do not
                match the issue's pages one to one
        """
        total = issue.total_pages
        alto_numbers = [doc.page_number for doc in alto_docs]
        if alto_numbers != list(range(1, total + 1)):
            raise METSGenerationError(
                f"Expected ALTO documents for pages 1-{total}, got {len(alto_docs)}"
            )
        if images is not None:
            image_numbers = [image.page_number for image in images]
            if image_numbers != list(range(1, total + 1)):
                raise METSGenerationError(
                    f"Expected images for pages 1-{total}, got {len(images)}"
                )

        try:
            bibliographic = Bibliographic(
                title=self.settings.publication_title,
                issue_label=format_issue_label(
                    issue.volume_number, issue.issue_number, issue.date
                ),
                date=issue.date,
                volume_number=issue.volume_number,
                issue_number=issue.issue_number,
            )
        except ValueError as e:
            raise METSGenerationError(f"Invalid issue metadata: {e}") from e

        alto_files = [
            METSFile(
                id=f"ALTO_{doc.page_number:04d}",
                href=relative_href(alto_path(doc.page_number)),
                mimetype="text/xml",
                group_id=f"pg{doc.page_number}",
            )
            for doc in alto_docs
        ]
        image_files = None
        if images:
            image_files = [
                METSFile(
                    id=f"IMG_{image.page_number:04d}",
                    href=relative_href(image_path(image.name)),
                    mimetype=image.mimetype,
                    group_id=f"pg{image.page_number}",
                )
                for image in images
            ]
        pdf_file = METSFile(
            id=PDF_FILE_ID,
            href=relative_href(pdf_name(issue.name)),
            mimetype="application/pdf",
        )

        struct_map = [
            StructMapEntry(
                page_number=n,
                alto_file_id=alto_files[n - 1].id,
                image_file_id=image_files[n - 1].id if image_files else None,
            )
            for n in range(1, total + 1)
        ]

        constituents = [
            Constituent(
                content_unit_ref=unit.source_url,
                title=unit.title,
                kind=unit.kind,
                start_page=unit.start_page,
                end_page=unit.end_page,
            )
            for unit in issue.units
        ]

        return METSPackage(
            object_id=issue.name,
            label=format_mets_label(self.settings.publication_title, issue.date),
            bibliographic=bibliographic,
            file_groups=FileGroups(pdf=pdf_file, alto=alto_files, images=image_files),
            struct_map=struct_map,
            constituents=constituents,
        )

    def build_tree(self, package: METSPackage, created_at: datetime) -> etree._Element:
        """Render a METSPackage as a METS element tree."""
        root = etree.Element(f"{{{METS_NS}}}mets", nsmap=METS_NSMAP)
        root.set(f"{{{XSI_NS}}}schemaLocation", METS_SCHEMA_LOCATION)
        root.set("TYPE", "Newspaper")
        root.set("OBJID", package.object_id)
        root.set("LABEL", package.label)

        root.append(self._build_mets_hdr(created_at))
        root.append(self._build_dmd_sec(package))
        root.append(self._build_file_sec(package.file_groups))
        root.append(self._build_physical_struct_map(package.struct_map))

        return root

    def _build_mets_hdr(self, created_at: datetime) -> etree._Element:
        """Build the metsHdr element."""
        hdr = etree.Element(f"{{{METS_NS}}}metsHdr")
        hdr.set(
            "CREATEDATE",
            created_at.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
        )

        agent = etree.SubElement(hdr, f"{{{METS_NS}}}agent")
        agent.set("ROLE", "CREATOR")
        agent.set("TYPE", "OTHER")
        agent.set("OTHERTYPE", "SOFTWARE")
        name = etree.SubElement(agent, f"{{{METS_NS}}}name")
        name.text = self.settings.creator_agent
        note = etree.SubElement(agent, f"{{{METS_NS}}}note")
        note.text = f"version {self.settings.creator_version}"

        return hdr

    def _build_dmd_sec(self, package: METSPackage) -> etree._Element:
        """Build the dmdSec with inline MODS for the issue and its constituents."""
        bib = package.bibliographic

        dmd = etree.Element(f"{{{METS_NS}}}dmdSec")
        dmd.set("ID", "dmd1")

        md_wrap = etree.SubElement(dmd, f"{{{METS_NS}}}mdWrap")
        md_wrap.set("MDTYPE", "MODS")

        xml_data = etree.SubElement(md_wrap, f"{{{METS_NS}}}xmlData")

        mods_root = etree.SubElement(xml_data, f"{{{MODS_NS}}}mods")
        mods_root.set("version", "3.8")

        # Title and issue label
        title_info = etree.SubElement(mods_root, f"{{{MODS_NS}}}titleInfo")
        title_el = etree.SubElement(title_info, f"{{{MODS_NS}}}title")
        title_el.text = bib.title
        part_name = etree.SubElement(title_info, f"{{{MODS_NS}}}partName")
        part_name.text = bib.issue_label

        type_el = etree.SubElement(mods_root, f"{{{MODS_NS}}}typeOfResource")
        type_el.text = "text"

        genre = etree.SubElement(mods_root, f"{{{MODS_NS}}}genre")
        genre.text = "newspaper"

        origin_info = etree.SubElement(mods_root, f"{{{MODS_NS}}}originInfo")
        date_issued = etree.SubElement(origin_info, f"{{{MODS_NS}}}dateIssued")
        date_issued.set("encoding", "iso8601")
        date_issued.text = bib.date.isoformat()

        # Volume and issue number
        part = etree.SubElement(mods_root, f"{{{MODS_NS}}}part")
        for detail_type, level, number in (
            ("volume", "1", bib.volume_number),
            ("number", "2", bib.issue_number),
        ):
            detail = etree.SubElement(part, f"{{{MODS_NS}}}detail")
            detail.set("type", detail_type)
            detail.set("level", level)
            number_el = etree.SubElement(detail, f"{{{MODS_NS}}}number")
            number_el.text = str(number)

        for n, constituent in enumerate(package.constituents, start=1):
            mods_root.append(self._build_constituent(n, constituent))

        return dmd

    def _build_constituent(self, n: int, constituent: Constituent) -> etree._Element:
        """Build a relatedItem for one content unit."""
        related = etree.Element(f"{{{MODS_NS}}}relatedItem")
        related.set("type", "constituent")
        related.set("ID", f"c{n:04d}")

        title_info = etree.SubElement(related, f"{{{MODS_NS}}}titleInfo")
        title = etree.SubElement(title_info, f"{{{MODS_NS}}}title")
        title.text = constituent.title or constituent.content_unit_ref

        location = etree.SubElement(related, f"{{{MODS_NS}}}location")
        url = etree.SubElement(location, f"{{{MODS_NS}}}url")
        url.text = constituent.content_unit_ref

        genre = etree.SubElement(related, f"{{{MODS_NS}}}genre")
        genre.text = constituent.kind

        part = etree.SubElement(related, f"{{{MODS_NS}}}part")
        extent = etree.SubElement(part, f"{{{MODS_NS}}}extent")
        extent.set("unit", "page")
        start_el = etree.SubElement(extent, f"{{{MODS_NS}}}start")
        start_el.text = str(constituent.start_page)
        if constituent.end_page != constituent.start_page:
            end_el = etree.SubElement(extent, f"{{{MODS_NS}}}end")
            end_el.text = str(constituent.end_page)
        list_el = etree.SubElement(extent, f"{{{MODS_NS}}}list")
        list_el.text = constituent.extent_label

        return related

    def _build_file_sec(self, groups: FileGroups) -> etree._Element:
        """Build the fileSec with IMGGRP, ALTOGRP and PDFGRP."""
        file_sec = etree.Element(f"{{{METS_NS}}}fileSec")

        if groups.images:
            self._add_file_grp(file_sec, "IMGGRP", "Images", groups.images)
        self._add_file_grp(file_sec, "ALTOGRP", "ALTO", groups.alto)
        self._add_file_grp(file_sec, "PDFGRP", "PDF", [groups.pdf])

        return file_sec

    def _add_file_grp(
        self,
        file_sec: etree._Element,
        grp_id: str,
        use: str,
        files: list[METSFile],
    ) -> None:
        grp = etree.SubElement(file_sec, f"{{{METS_NS}}}fileGrp")
        grp.set("ID", grp_id)
        grp.set("USE", use)
        for mets_file in files:
            file_el = etree.SubElement(grp, f"{{{METS_NS}}}file")
            file_el.set("ID", mets_file.id)
            if mets_file.group_id:
                file_el.set("GROUPID", mets_file.group_id)
            file_el.set("MIMETYPE", mets_file.mimetype)
            flocat = etree.SubElement(file_el, f"{{{METS_NS}}}FLocat")
            flocat.set("LOCTYPE", "URL")
            flocat.set(f"{{{XLINK_NS}}}href", mets_file.href)

    def _build_physical_struct_map(
        self, entries: list[StructMapEntry]
    ) -> etree._Element:
        """Build the physical structMap, one div per page."""
        struct_map = etree.Element(f"{{{METS_NS}}}structMap")
        struct_map.set("LABEL", "Physical Structure")
        struct_map.set("TYPE", "PHYSICAL")

        root_div = etree.SubElement(struct_map, f"{{{METS_NS}}}div")
        root_div.set("TYPE", "Newspaper")
        root_div.set("DMDID", "dmd1")

        for entry in entries:
            n = entry.page_number
            page_div = etree.SubElement(root_div, f"{{{METS_NS}}}div")
            page_div.set("ID", f"DIVP{n}")
            page_div.set("ORDER", str(n))
            page_div.set("TYPE", "page")
            page_div.set("LABEL", f"Page {n}")

            fptr = etree.SubElement(page_div, f"{{{METS_NS}}}fptr")
            par = etree.SubElement(fptr, f"{{{METS_NS}}}par")

            if entry.image_file_id:
                img_area = etree.SubElement(par, f"{{{METS_NS}}}area")
                img_area.set("FILEID", entry.image_file_id)

            alto_area = etree.SubElement(par, f"{{{METS_NS}}}area")
            alto_area.set("FILEID", entry.alto_file_id)
            alto_area.set("BETYPE", "IDREF")
            alto_area.set("BEGIN", f"page_{n}")

        return struct_map
