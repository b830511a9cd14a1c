"""Compilers for assembling archival packages."""

from .formatting import format_issue_label, format_mets_label, to_roman
from .mets_generator import METSGenerator
from .package_writer import ArchivePackageWriter

__all__ = [
    "ArchivePackageWriter",
    "METSGenerator",
    "format_issue_label",
    "format_mets_label",
    "to_roman",
]
