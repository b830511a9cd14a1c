"""Archive bundle and pipeline result schemas.

The bundle is the transport form of an assembled issue: every file is
base64-encoded under the relative path the METS document refers to it by,
so a caller can zip or upload it without knowing anything about METS.
"""

import base64
from typing import Literal

from pydantic import BaseModel

Stage = Literal["capture", "merge", "images", "text", "alto", "mets", "package"]


class ArchiveFile(BaseModel):
    """A single file in an archive bundle.

    Attributes:
        path: Relative path within the package (e.g. "alto/page-0001.xml")
        data: Base64-encoded file content
    """

    path: str
    data: str

    @classmethod
    def from_bytes(cls, path: str, content: bytes) -> "ArchiveFile":
        return cls(path=path, data=base64.b64encode(content).decode("ascii"))

    def decode(self) -> bytes:
        return base64.b64decode(self.data)

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]


class ArchiveBundle(BaseModel):
    """In-memory, wire-ready archive package for one issue."""

    issue_name: str
    pdf: ArchiveFile
    mets: ArchiveFile
    alto: list[ArchiveFile] = []
    images: list[ArchiveFile] | None = None

    def files(self) -> list[ArchiveFile]:
        """Return every file in package order."""
        files = [self.pdf, self.mets, *self.alto]
        if self.images:
            files.extend(self.images)
        return files


class AssemblyResult(BaseModel):
    """Outcome of one assembly run.

    Distinguishes "nothing to archive" (``ok`` and ``no_content``) from
    "archive generation broke" (not ``ok``, with the failing ``stage``).

    Attributes:
        ok: False only when a stage failed
        no_content: True when no content unit could be captured
        issue_name: Identifier of the assembled issue
        issue_date: ISO date of the issue
        message: Human-readable summary
        stage: Stage that failed, when not ok
        errors: Per-unit capture errors and stage error messages
        total_pages: Page count of the assembled issue
        bundle: The assembled package, when ok and not no_content
    """

    ok: bool
    no_content: bool = False
    issue_name: str | None = None
    issue_date: str | None = None
    message: str = ""
    stage: Stage | None = None
    errors: list[str] = []
    total_pages: int = 0
    bundle: ArchiveBundle | None = None
