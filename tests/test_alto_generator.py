"""Tests for ALTO generation."""

import time
from unittest.mock import patch

import pytest
from lxml import etree

from issue_archiver.exceptions import ALTOGenerationError
from issue_archiver.transformers.alto_generator import ALTOGenerator
from issue_archiver.xmlns import ALTO_NS
from schemas.page import PhysicalPage

NS = {"alto": ALTO_NS}


@pytest.fixture
def generator():
    return ALTOGenerator(width_px=3400, height_px=4400, max_workers=2)


class TestALTODocument:
    """Tests for the structure of a single ALTO document."""

    def test_text_page(self, generator):
        doc = generator.build_document(PhysicalPage(page_number=1, text="Hello World"))

        assert b"<alto:String>Hello World</alto:String>" in doc.content
        root = etree.fromstring(doc.content)
        assert root.tag == f"{{{ALTO_NS}}}alto"
        page = root.find("alto:Layout/alto:Page", NS)
        assert page.get("ID") == "page_1"
        assert page.get("WIDTH") == "3400"
        assert page.get("HEIGHT") == "4400"
        strings = page.findall("alto:TextBlock/alto:String", NS)
        assert [s.text for s in strings] == ["Hello World"]

    def test_blank_page_has_no_text_block(self, generator):
        doc = generator.build_document(PhysicalPage(page_number=2, text=""))

        root = etree.fromstring(doc.content)
        page = root.find("alto:Layout/alto:Page", NS)
        assert page is not None
        assert page.find("alto:TextBlock", NS) is None
        assert doc.text is None

    def test_measurement_unit(self, generator):
        doc = generator.build_document(PhysicalPage(page_number=1))

        root = etree.fromstring(doc.content)
        assert root.findtext("alto:Description/alto:MeasurementUnit", namespaces=NS) == "pixel"
        assert doc.measurement_unit == "pixel"

    def test_alto_prefix_declared(self, generator):
        doc = generator.build_document(PhysicalPage(page_number=1))

        assert b'xmlns:alto="http://www.loc.gov/standards/alto/ns-v4#"' in doc.content
        assert doc.content.startswith(b"<?xml version='1.0' encoding='UTF-8'?>")

    def test_document_name(self, generator):
        doc = generator.build_document(PhysicalPage(page_number=12))

        assert doc.name == "page-0012.xml"
        assert doc.page_id == "page_12"

    def test_source_image_recorded(self, generator):
        doc = generator.build_document(
            PhysicalPage(page_number=1, image_name="page-0001.jp2")
        )

        root = etree.fromstring(doc.content)
        assert root.findtext(
            "alto:Description/alto:sourceImageInformation/alto:fileName", namespaces=NS
        ) == "page-0001.jp2"

    def test_special_characters_escaped(self, generator):
        doc = generator.build_document(PhysicalPage(page_number=1, text="Q&A <live>"))

        root = etree.fromstring(doc.content)
        assert root.findtext(".//alto:String", namespaces=NS) == "Q&A <live>"

    def test_deterministic(self, generator):
        page = PhysicalPage(page_number=3, text="Same text")

        assert generator.build_document(page).content == generator.build_document(page).content


class TestALTOGenerate:
    """Tests for generating all pages of an issue."""

    def test_one_document_per_page_in_order(self, generator):
        pages = [PhysicalPage(page_number=n, text=f"Text {n}" if n == 1 else "") for n in range(1, 6)]

        docs = generator.generate(pages)

        assert [d.page_number for d in docs] == [1, 2, 3, 4, 5]
        assert [d.name for d in docs] == [f"page-{n:04d}.xml" for n in range(1, 6)]

    def test_order_independent_of_completion(self, generator):
        """Pages finishing out of order are still returned by page number."""
        original = generator.build_document

        def slow_first(page):
            if page.page_number == 1:
                time.sleep(0.05)
            return original(page)

        with patch.object(generator, "build_document", side_effect=slow_first):
            docs = generator.generate([PhysicalPage(page_number=n) for n in (1, 2, 3)])

        assert [d.page_number for d in docs] == [1, 2, 3]

    def test_page_failure_raises(self, generator):
        original = generator.build_document

        def fail_on_two(page):
            if page.page_number == 2:
                raise RuntimeError("broken page")
            return original(page)

        with patch.object(generator, "build_document", side_effect=fail_on_two):
            with pytest.raises(ALTOGenerationError, match="page 2") as exc_info:
                generator.generate([PhysicalPage(page_number=n) for n in (1, 2, 3)])
        assert exc_info.value.page_number == 2
