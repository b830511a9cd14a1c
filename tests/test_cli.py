"""Tests for the CLI module."""

import json
import logging
import zipfile
from unittest.mock import patch

import pytest

from conftest import make_pdf
from issue_archiver.cli import load_descriptors, main
from schemas.descriptor import ArticleDescriptor, NewsletterDescriptor


@pytest.fixture
def descriptors_file(tmp_path):
    """Descriptors JSON with pre-rendered PDFs alongside it."""
    (tmp_path / "a.pdf").write_bytes(make_pdf(2))
    (tmp_path / "b.pdf").write_bytes(make_pdf(1))
    data = {
        "newsletters": [],
        "articles": [
            {"url": "https://example.com/b", "title": "B", "tags": ["Sports"], "pdf_path": "b.pdf"},
            {"url": "https://example.com/a", "title": "A", "content": "Hello", "tags": ["news"], "pdf_path": "a.pdf"},
        ],
    }
    path = tmp_path / "descriptors.json"
    path.write_text(json.dumps(data))
    return path


class TestLoadDescriptors:
    """Tests for descriptor file loading."""

    def test_list_form(self, tmp_path):
        path = tmp_path / "d.json"
        path.write_text(json.dumps([
            {"url": "https://example.com/a"},
            {"url": "https://example.com/n", "kind": "newsletter"},
        ]))

        descriptors = load_descriptors(path)

        assert isinstance(descriptors[0], ArticleDescriptor)
        assert isinstance(descriptors[1], NewsletterDescriptor)

    def test_grouped_form(self, tmp_path):
        path = tmp_path / "d.json"
        path.write_text(json.dumps({
            "articles": [{"url": "https://example.com/a"}],
            "newsletters": [{"url": "https://example.com/n"}],
        }))

        descriptors = load_descriptors(path)

        assert [d.kind for d in descriptors] == ["newsletter", "article"]


class TestCLIOrder:
    """Tests for the order command."""

    def test_prints_issue_order(self, descriptors_file, capsys):
        result = main(["order", "--descriptors", str(descriptors_file)])

        assert result == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines == [
            "1. [news] https://example.com/a",
            "2. [Sports] https://example.com/b",
        ]

    def test_partial_window_rejected(self, descriptors_file, caplog):
        result = main(["order", "--descriptors", str(descriptors_file), "--start", "2025-03-09"])

        assert result == 1
        assert "Must specify both --start and --end" in caplog.text


class TestCLIAssemble:
    """Tests for the assemble command."""

    def test_missing_descriptors_file(self, tmp_path, caplog):
        result = main([
            "assemble",
            "--descriptors", str(tmp_path / "nope.json"),
            "--output", str(tmp_path / "out"),
            "--local",
        ])

        assert result == 1
        assert "Descriptors file not found" in caplog.text

    def test_writes_package_tree(self, descriptors_file, tmp_path):
        output = tmp_path / "out"

        result = main([
            "assemble",
            "--descriptors", str(descriptors_file),
            "--output", str(output),
            "--local",
            "--dpi", "72",
        ])

        assert result == 0
        packages = list(output.iterdir())
        assert len(packages) == 1
        package = packages[0]
        assert package.name.startswith("dailyprincetonian_")
        assert (package / "mets.xml").exists()
        assert (package / f"{package.name}.pdf").exists()
        assert sorted(p.name for p in (package / "alto").iterdir()) == [
            "page-0001.xml",
            "page-0002.xml",
            "page-0003.xml",
        ]

    def test_writes_zip_and_bundle_json(self, descriptors_file, tmp_path):
        output = tmp_path / "out"
        bundle_json = tmp_path / "result.json"

        result = main([
            "assemble",
            "--descriptors", str(descriptors_file),
            "--output", str(output),
            "--local",
            "--volume", "148",
            "--date", "2025-03-10",
            "--zip",
            "--bundle-json", str(bundle_json),
        ])

        assert result == 0
        archives = list(output.glob("*.zip"))
        assert len(archives) == 1
        with zipfile.ZipFile(archives[0]) as zf:
            assert "mets.xml" in zf.namelist()
            assert b"CXLVIII" in zf.read("mets.xml")
        data = json.loads(bundle_json.read_text())
        assert data["ok"] is True
        assert data["issue_date"] == "2025-03-10"
        assert data["total_pages"] == 3

    def test_no_content_exits_zero(self, tmp_path, caplog):
        caplog.set_level(logging.INFO)
        path = tmp_path / "d.json"
        path.write_text(json.dumps([{"url": "https://example.com/a", "pdf_path": "missing.pdf"}]))

        result = main([
            "assemble",
            "--descriptors", str(path),
            "--output", str(tmp_path / "out"),
            "--local",
        ])

        assert result == 0
        assert "No content to archive" in caplog.text
        assert not (tmp_path / "out").exists()

    def test_malformed_descriptor_skipped(self, tmp_path, caplog):
        """A descriptor with an empty url is dropped and the rest are assembled."""
        (tmp_path / "a.pdf").write_bytes(make_pdf(2))
        path = tmp_path / "d.json"
        path.write_text(json.dumps([
            {"url": "", "pdf_path": "a.pdf"},
            {"url": "https://example.com/a", "pdf_path": "a.pdf"},
        ]))
        bundle_path = tmp_path / "result.json"

        result = main([
            "assemble",
            "--descriptors", str(path),
            "--output", str(tmp_path / "out"),
            "--local",
            "--bundle-json", str(bundle_path),
        ])

        assert result == 0
        assert "Skipping descriptor 0" in caplog.text
        data = json.loads(bundle_path.read_text())
        assert data["ok"] is True
        assert data["total_pages"] == 2

    def test_only_malformed_descriptors_is_no_content(self, tmp_path, caplog):
        caplog.set_level(logging.INFO)
        path = tmp_path / "d.json"
        path.write_text(json.dumps([{"url": ""}, {"title": "No URL"}]))

        result = main([
            "assemble",
            "--descriptors", str(path),
            "--output", str(tmp_path / "out"),
            "--local",
        ])

        assert result == 0
        assert "No content to archive" in caplog.text

    def test_stage_failure_exits_one(self, descriptors_file, tmp_path, caplog):
        with patch(
            "issue_archiver.transformers.rasterizer.subprocess.run",
            side_effect=FileNotFoundError("magick"),
        ):
            result = main([
                "assemble",
                "--descriptors", str(descriptors_file),
                "--output", str(tmp_path / "out"),
                "--local",
                "--images",
            ])

        assert result == 1
        assert "stage images" in caplog.text


class TestCLIMain:
    """Tests for the top-level parser."""

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "issue-archiver" in capsys.readouterr().out
