"""Tests for page rasterizers."""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from conftest import make_pdf
from issue_archiver.exceptions import ImageConversionError
from issue_archiver.transformers.rasterizer import (
    ImageMagickRasterizer,
    PyMuPDFRasterizer,
    build_rasterizer,
)


def fake_magick(pages: int, returncode: int = 0, stderr: bytes = b""):
    """Stand-in for subprocess.run that writes *pages* numbered images."""

    def run(cmd, capture_output, check):
        pattern = Path(cmd[-1])
        if returncode == 0:
            for n in range(1, pages + 1):
                (pattern.parent / (pattern.name % n)).write_bytes(f"image {n}".encode())
        return subprocess.CompletedProcess(cmd, returncode, b"", stderr)

    return run


class TestImageMagickRasterizer:
    """Tests for ImageMagickRasterizer with the magick binary mocked."""

    def test_command_line(self, tmp_path):
        rasterizer = ImageMagickRasterizer(dpi=400, quality=90)

        cmd = rasterizer.command(tmp_path / "issue.pdf", tmp_path / "out")

        assert cmd == [
            "magick",
            "-density", "400",
            str(tmp_path / "issue.pdf"),
            "-background", "white",
            "-alpha", "remove",
            "-quality", "90",
            "-scene", "1",
            str(tmp_path / "out" / "page-%04d.jp2"),
        ]

    def test_rasterize_reads_images_in_page_order(self):
        rasterizer = ImageMagickRasterizer()

        with patch(
            "issue_archiver.transformers.rasterizer.subprocess.run",
            side_effect=fake_magick(3),
        ):
            images = rasterizer.rasterize(make_pdf(3), page_count=3)

        assert [i.page_number for i in images] == [1, 2, 3]
        assert [i.name for i in images] == ["page-0001.jp2", "page-0002.jp2", "page-0003.jp2"]
        assert images[1].content == b"image 2"
        assert images[0].mimetype == "image/jp2"

    def test_nonzero_exit(self):
        rasterizer = ImageMagickRasterizer()

        with patch(
            "issue_archiver.transformers.rasterizer.subprocess.run",
            side_effect=fake_magick(0, returncode=1, stderr=b"no decode delegate"),
        ):
            with pytest.raises(ImageConversionError, match="no decode delegate"):
                rasterizer.rasterize(make_pdf(1), page_count=1)

    def test_missing_binary(self):
        rasterizer = ImageMagickRasterizer(executable="definitely-not-magick")

        with patch(
            "issue_archiver.transformers.rasterizer.subprocess.run",
            side_effect=FileNotFoundError("definitely-not-magick"),
        ):
            with pytest.raises(ImageConversionError, match="Cannot run"):
                rasterizer.rasterize(make_pdf(1), page_count=1)

    def test_wrong_image_count(self):
        rasterizer = ImageMagickRasterizer()

        with patch(
            "issue_archiver.transformers.rasterizer.subprocess.run",
            side_effect=fake_magick(2),
        ):
            with pytest.raises(ImageConversionError, match="Expected 3 page images"):
                rasterizer.rasterize(make_pdf(3), page_count=3)

    def test_unreadable_image(self):
        rasterizer = ImageMagickRasterizer()

        with patch(
            "issue_archiver.transformers.rasterizer.subprocess.run",
            side_effect=fake_magick(1),
        ), patch.object(Path, "read_bytes", side_effect=PermissionError("denied")):
            with pytest.raises(ImageConversionError, match="Cannot read page image"):
                rasterizer.rasterize(make_pdf(1), page_count=1)


class TestPyMuPDFRasterizer:
    """Tests for PyMuPDFRasterizer."""

    def test_one_jpeg_per_page(self):
        rasterizer = PyMuPDFRasterizer(dpi=36, quality=50)

        images = rasterizer.rasterize(make_pdf(2), page_count=2)

        assert [i.name for i in images] == ["page-0001.jpg", "page-0002.jpg"]
        assert all(i.mimetype == "image/jpeg" for i in images)
        assert all(i.content.startswith(b"\xff\xd8") for i in images)

    def test_page_count_mismatch(self):
        with pytest.raises(ImageConversionError, match="Expected 3 pages"):
            PyMuPDFRasterizer(dpi=36).rasterize(make_pdf(2), page_count=3)

    def test_invalid_pdf(self):
        with pytest.raises(ImageConversionError):
            PyMuPDFRasterizer(dpi=36).rasterize(b"not a pdf", page_count=1)


class TestBuildRasterizer:
    """Tests for build_rasterizer."""

    def test_magick(self):
        rasterizer = build_rasterizer("magick", dpi=300, quality=80)

        assert isinstance(rasterizer, ImageMagickRasterizer)
        assert rasterizer.dpi == 300
        assert rasterizer.quality == 80

    def test_pymupdf(self):
        assert isinstance(build_rasterizer("pymupdf", dpi=72, quality=90), PyMuPDFRasterizer)

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown rasterizer"):
            build_rasterizer("gimp", dpi=72, quality=90)
