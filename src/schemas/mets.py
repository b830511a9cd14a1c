"""METS package description.

An intermediate, serializable description of what the METS document will
contain. The METS generator derives it from an Issue and then renders it to
XML, so the cross-references (file IDs, hrefs, extents) can be inspected and
tested without parsing XML.
"""

import datetime

from pydantic import BaseModel


class Bibliographic(BaseModel):
    """Issue-level descriptive metadata."""

    title: str
    issue_label: str
    date: datetime.date
    volume_number: int
    issue_number: int


class METSFile(BaseModel):
    """A file declared in a METS fileGrp.

    Attributes:
        id: File ID referenced from the structMap
        href: Relative, storage-agnostic location (file://./...)
        mimetype: MIME type of the file
        group_id: GROUPID shared by all files of one page
    """

    id: str
    href: str
    mimetype: str
    group_id: str | None = None


class FileGroups(BaseModel):
    """The fileSec contents."""

    pdf: METSFile
    alto: list[METSFile]
    images: list[METSFile] | None = None


class StructMapEntry(BaseModel):
    """One physical page div."""

    page_number: int
    alto_file_id: str
    image_file_id: str | None = None


class Constituent(BaseModel):
    """A content unit described as a MODS constituent relatedItem."""

    content_unit_ref: str
    title: str
    kind: str
    start_page: int
    end_page: int

    @property
    def extent_label(self) -> str:
        if self.start_page == self.end_page:
            return f"p. {self.start_page}"
        return f"p. {self.start_page} - {self.end_page}"


class METSPackage(BaseModel):
    """Everything the METS document declares for one issue."""

    object_id: str
    label: str
    bibliographic: Bibliographic
    file_groups: FileGroups
    struct_map: list[StructMapEntry]
    constituents: list[Constituent]
