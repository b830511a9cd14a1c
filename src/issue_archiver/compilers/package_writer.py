"""Archive package writing.

An issue package is a flat set of files addressed by the relative paths the
METS document uses:

    <issue-name>.pdf
    mets.xml
    alto/page-NNNN.xml
    images/page-NNNN.<ext>      (only when images were generated)

The writer builds the in-memory bundle and can lay it out on disk or in a
ZIP archive. ZIP entries carry a fixed timestamp so identical bundles produce
identical archives.
"""

import logging
import zipfile
from collections.abc import Sequence
from pathlib import Path

from issue_archiver.exceptions import PackageWriteError
from issue_archiver.naming import METS_NAME, alto_path, image_path, pdf_name
from schemas.bundle import ArchiveBundle, ArchiveFile
from schemas.page import ALTODocument, PageImage

logger = logging.getLogger(__name__)

ZIP_TIMESTAMP = (1980, 1, 1, 0, 0, 0)


class ArchivePackageWriter:
    """Bundle and write issue packages."""

    def bundle(
        self,
        issue_name: str,
        pdf: bytes,
        mets: bytes,
        alto_docs: Sequence[ALTODocument],
        images: Sequence[PageImage] | None = None,
    ) -> ArchiveBundle:
        """Build the in-memory bundle for an issue.

        Args:
            issue_name: Timestamped issue identifier
            pdf: Merged issue PDF
            mets: Serialized METS document
            alto_docs: ALTO documents in page order
            images: Page images in page order, if generated

        Returns:
            ArchiveBundle with base64-encoded files
        """
        return ArchiveBundle(
            issue_name=issue_name,
            pdf=ArchiveFile.from_bytes(pdf_name(issue_name), pdf),
            mets=ArchiveFile.from_bytes(METS_NAME, mets),
            alto=[
                ArchiveFile.from_bytes(alto_path(doc.page_number), doc.content)
                for doc in alto_docs
            ],
            images=[
                ArchiveFile.from_bytes(image_path(image.name), image.content)
                for image in images
            ]
            if images
            else None,
        )

    def write_tree(self, bundle: ArchiveBundle, output_dir: Path) -> Path:
        """Write a bundle to ``output_dir/<issue-name>/``.

        Args:
            bundle: The bundle to write
            output_dir: Parent directory for the package

        Returns:
            Path to the package directory

        Raises:
            PackageWriteError: If a file cannot be written
        """
        package_dir = output_dir / bundle.issue_name
        try:
            for archive_file in bundle.files():
                target = package_dir / archive_file.path
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_bytes(archive_file.decode())
        except OSError as e:
            raise PackageWriteError(f"Failed to write package to {package_dir}: {e}") from e

        logger.info(f"Wrote {len(bundle.files())} files to {package_dir}")
        return package_dir

    def write_zip(self, bundle: ArchiveBundle, path: Path) -> Path:
        """Write a bundle as a ZIP archive with the package's relative layout.

        Raises:
            PackageWriteError: If the archive cannot be written
        """
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
                for archive_file in bundle.files():
                    info = zipfile.ZipInfo(archive_file.path, date_time=ZIP_TIMESTAMP)
                    info.compress_type = zipfile.ZIP_DEFLATED
                    zf.writestr(info, archive_file.decode())
        except OSError as e:
            raise PackageWriteError(f"Failed to write ZIP archive {path}: {e}") from e

        logger.info(f"Wrote ZIP archive {path}")
        return path
