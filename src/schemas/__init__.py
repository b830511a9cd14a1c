"""Schema definitions for Issue Archiver."""

from .bundle import ArchiveBundle, ArchiveFile, AssemblyResult
from .content_unit import CaptureFailure, CaptureResult, ContentUnit
from .descriptor import (
    ArticleDescriptor,
    ContentDescriptor,
    NewsletterDescriptor,
    parse_descriptors,
)
from .issue import Issue, PageRangeError
from .mets import (
    Bibliographic,
    Constituent,
    FileGroups,
    METSFile,
    METSPackage,
    StructMapEntry,
)
from .page import ALTODocument, PageImage, PhysicalPage

__all__ = [
    "ALTODocument",
    "ArchiveBundle",
    "ArchiveFile",
    "ArticleDescriptor",
    "AssemblyResult",
    "Bibliographic",
    "CaptureFailure",
    "CaptureResult",
    "Constituent",
    "ContentDescriptor",
    "ContentUnit",
    "FileGroups",
    "Issue",
    "METSFile",
    "METSPackage",
    "NewsletterDescriptor",
    "PageImage",
    "PageRangeError",
    "PhysicalPage",
    "StructMapEntry",
    "parse_descriptors",
]
