"""Page rasterization for issue PDFs.

Two rasterizers produce one image per physical page:

- ImageMagickRasterizer shells out to ImageMagick and writes JPEG 2000
- PyMuPDFRasterizer renders in-process with PyMuPDF and writes JPEG

Both name their output after the page (``page-0001.jp2``), matching the ALTO
file of the same page.
"""

import logging
import re
import subprocess
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

import fitz  # PyMuPDF

from issue_archiver.exceptions import ImageConversionError
from issue_archiver.naming import image_name
from schemas.page import PageImage

logger = logging.getLogger(__name__)

_PAGE_FILE = re.compile(r"page-(\d+)\.")


class Rasterizer(ABC):
    """Abstract base class for page rasterizers.

    Attributes:
        dpi: Rendering resolution
        quality: Lossy compression quality (1-100)
    """

    extension: str = ""
    mimetype: str = ""

    def __init__(self, dpi: int = 400, quality: int = 90):
        self.dpi = dpi
        self.quality = quality

    @abstractmethod
    def rasterize(self, pdf_bytes: bytes, page_count: int) -> list[PageImage]:
        """Render every page of a PDF to an image.

        Args:
            pdf_bytes: The issue PDF
            page_count: Expected number of pages

        Returns:
            One PageImage per page, in page order

        Raises:
            ImageConversionError: If conversion fails or yields the wrong
                number of images
        """
        pass


class ImageMagickRasterizer(Rasterizer):
    """Rasterize with the external ImageMagick ``magick`` tool."""

    extension = "jp2"
    mimetype = "image/jp2"

    def __init__(self, dpi: int = 400, quality: int = 90, executable: str = "magick"):
        super().__init__(dpi=dpi, quality=quality)
        self.executable = executable

    def command(self, pdf_path: Path, out_dir: Path) -> list[str]:
        """Build the ImageMagick command line."""
        return [
            self.executable,
            "-density", str(self.dpi),
            str(pdf_path),
            "-background", "white",
            "-alpha", "remove",
            "-quality", str(self.quality),
            "-scene", "1",
            str(out_dir / f"page-%04d.{self.extension}"),
        ]

    def rasterize(self, pdf_bytes: bytes, page_count: int) -> list[PageImage]:
        with tempfile.TemporaryDirectory(prefix="issue-archiver-") as tmp:
            tmp_dir = Path(tmp)
            pdf_path = tmp_dir / "issue.pdf"
            out_dir = tmp_dir / "images"
            out_dir.mkdir()
            pdf_path.write_bytes(pdf_bytes)

            cmd = self.command(pdf_path, out_dir)
            logger.info(f"Rasterizing {page_count} pages at {self.dpi} DPI with {self.executable}")
            try:
                result = subprocess.run(cmd, capture_output=True, check=False)
            except OSError as e:
                raise ImageConversionError(f"Cannot run {self.executable}: {e}") from e

            if result.returncode != 0:
                stderr_text = result.stderr.decode("utf-8", errors="replace").strip()
                raise ImageConversionError(
                    f"{self.executable} exited with {result.returncode}: {stderr_text}"
                )

            files = sorted(
                out_dir.glob(f"page-*.{self.extension}"),
                key=lambda p: int(_PAGE_FILE.match(p.name).group(1)),
            )
            if len(files) != page_count:
                raise ImageConversionError(
                    f"Expected {page_count} page images, {self.executable} wrote {len(files)}"
                )

            try:
                return [
                    PageImage(
                        page_number=n,
                        name=image_name(n, self.extension),
                        mimetype=self.mimetype,
                        content=path.read_bytes(),
                    )
                    for n, path in enumerate(files, start=1)
                ]
            except OSError as e:
                raise ImageConversionError(f"Cannot read page image: {e}") from e


class PyMuPDFRasterizer(Rasterizer):
    """Rasterize in-process with PyMuPDF."""

    extension = "jpg"
    mimetype = "image/jpeg"

    def rasterize(self, pdf_bytes: bytes, page_count: int) -> list[PageImage]:
        try:
            doc = fitz.open(stream=pdf_bytes, filetype="pdf")
        except Exception as e:
            raise ImageConversionError(f"Cannot open PDF for rasterization: {e}") from e

        images = []
        try:
            if doc.page_count != page_count:
                raise ImageConversionError(
                    f"Expected {page_count} pages, PDF has {doc.page_count}"
                )
            scale = self.dpi / 72
            mat = fitz.Matrix(scale, scale)
            for index, page in enumerate(doc):
                n = index + 1
                try:
                    pix = page.get_pixmap(matrix=mat, alpha=False)
                    content = pix.tobytes(output="jpg", jpg_quality=self.quality)
                except Exception as e:
                    raise ImageConversionError(f"Failed to rasterize page {n}: {e}") from e
                images.append(
                    PageImage(
                        page_number=n,
                        name=image_name(n, self.extension),
                        mimetype=self.mimetype,
                        content=content,
                    )
                )
                logger.debug(f"Rasterized page {n}")
        finally:
            doc.close()

        logger.info(f"Rasterized {len(images)} pages at {self.dpi} DPI")
        return images


def build_rasterizer(name: str, dpi: int, quality: int) -> Rasterizer:
    """Return the rasterizer registered under ``name``."""
    if name == "magick":
        return ImageMagickRasterizer(dpi=dpi, quality=quality)
    if name == "pymupdf":
        return PyMuPDFRasterizer(dpi=dpi, quality=quality)
    raise ValueError(f"Unknown rasterizer: {name}")
