"""Transformers that turn an assembled issue into archival files."""

from .alto_generator import ALTOGenerator
from .page_text import PageTextResolver, filter_newsletter_text, sanitize_text, strip_html
from .pdf_merger import MergedPDF, PDFMerger, count_pages
from .rasterizer import (
    ImageMagickRasterizer,
    PyMuPDFRasterizer,
    Rasterizer,
    build_rasterizer,
)

__all__ = [
    "ALTOGenerator",
    "ImageMagickRasterizer",
    "MergedPDF",
    "PDFMerger",
    "PageTextResolver",
    "PyMuPDFRasterizer",
    "Rasterizer",
    "build_rasterizer",
    "count_pages",
    "filter_newsletter_text",
    "sanitize_text",
    "strip_html",
]
