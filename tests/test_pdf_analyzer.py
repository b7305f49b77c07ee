"""Tests for per-page PDF analysis: text layer vs OCR routing."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import pytest

from conftest import FailingRecognizer, FakeLoader, FakeRecognizer, PAGE_HEIGHT, make_pdf
from docsheet.config import Config
from docsheet.errors import DocumentParseFailure, RecognitionFailure
from docsheet.models import ExtractionMethod, TextFragment
from docsheet.pdf_analyzer import (
    PDFPageAnalyzer,
    is_text_usable,
    ocr_text_to_rows,
    resolve_method,
)
from docsheet.pdf_loader import PDFLoader
from docsheet.progress import ProgressAggregator


TEXT_PAGE = [("A", 10, 100), ("B", 50, 100), ("C", 10, 80)]
BLANK_PAGE = [("  ", 10, 100), ("", 20, 50)]


class TestHelpers:

    def test_text_usable(self):
        assert is_text_usable([TextFragment(" x ", 0, 0)]) is True

    def test_whitespace_only_not_usable(self):
        assert is_text_usable([TextFragment(" \t", 0, 0), TextFragment("", 0, 0)]) is False

    def test_no_fragments_not_usable(self):
        assert is_text_usable([]) is False

    def test_ocr_text_to_rows(self):
        assert ocr_text_to_rows("a b\nc") == [["a b"], ["c"]]

    def test_resolve_method(self):
        assert resolve_method(3, 0) is ExtractionMethod.TEXT_EXTRACTION
        assert resolve_method(3, 3) is ExtractionMethod.OCR
        assert resolve_method(3, 1) is ExtractionMethod.MIXED
        assert resolve_method(0, 0) is ExtractionMethod.TEXT_EXTRACTION


class TestAnalyzerRouting:

    def test_text_page_skips_recognizer(self, recognizer):
        loader = FakeLoader([TEXT_PAGE])
        result = PDFPageAnalyzer(loader=loader, recognizer=recognizer).analyze(b"")
        assert result.tables == [[["A", "B"], ["C"]]]
        assert recognizer.images == []
        assert loader.renders == []
        assert result.method is ExtractionMethod.TEXT_EXTRACTION

    def test_blank_page_renders_and_recognizes_once(self, recognizer):
        loader = FakeLoader([BLANK_PAGE])
        result = PDFPageAnalyzer(loader=loader, recognizer=recognizer).analyze(b"")
        assert loader.renders == [(0, 2.0)]
        assert len(recognizer.images) == 1
        assert result.tables == [[["line one"], ["line two"]]]
        assert result.method is ExtractionMethod.OCR
        assert result.ocr_pages == [1]

    def test_mixed_document(self, recognizer):
        loader = FakeLoader([TEXT_PAGE, BLANK_PAGE])
        result = PDFPageAnalyzer(loader=loader, recognizer=recognizer).analyze(b"")
        assert result.tables == [[["A", "B"], ["C"], ["line one"], ["line two"]]]
        assert result.method is ExtractionMethod.MIXED
        assert result.page_count == 2

    def test_render_scale_from_config(self, recognizer):
        loader = FakeLoader([[]])
        PDFPageAnalyzer(Config(render_scale=3.0), loader=loader, recognizer=recognizer).analyze(b"")
        assert loader.renders == [(0, 3.0)]

    def test_row_tolerance_from_config(self, recognizer):
        loader = FakeLoader([[("a", 10, 100), ("b", 50, 98.6)]])
        analyzer = PDFPageAnalyzer(Config(row_tolerance=2.0), loader=loader, recognizer=recognizer)
        assert analyzer.analyze(b"").tables == [[["a", "b"]]]

    def test_plain_text_view(self, recognizer):
        loader = FakeLoader([TEXT_PAGE])
        result = PDFPageAnalyzer(loader=loader, recognizer=recognizer).analyze(b"")
        assert result.plain_text == "A B\nC"
        assert result.is_table is True
        assert result.message == "Table-like structure extracted from PDF."

    def test_zero_pages(self, recognizer):
        result = PDFPageAnalyzer(loader=FakeLoader([]), recognizer=recognizer).analyze(b"")
        assert result.tables == [[]]
        assert result.method is ExtractionMethod.TEXT_EXTRACTION

    def test_document_closed(self, recognizer):
        loader = FakeLoader([TEXT_PAGE])
        PDFPageAnalyzer(loader=loader, recognizer=recognizer).analyze(b"")
        assert loader.document.closed is True


class TestAnalyzerProgress:

    def test_text_pages(self, recognizer):
        progress = ProgressAggregator()
        progress.reset()
        loader = FakeLoader([TEXT_PAGE, TEXT_PAGE, TEXT_PAGE, TEXT_PAGE])
        PDFPageAnalyzer(loader=loader, recognizer=recognizer).analyze(b"", progress)
        assert progress.history == [0, 25, 50, 75, 100]

    def test_ocr_page_reports_fractions(self):
        progress = ProgressAggregator()
        progress.reset()
        recognizer = FakeRecognizer(fractions=(0.0, 0.5, 1.0))
        loader = FakeLoader([TEXT_PAGE, BLANK_PAGE])
        PDFPageAnalyzer(loader=loader, recognizer=recognizer).analyze(b"", progress)
        assert progress.history == [0, 50, 75, 100]


class TestAnalyzerFailures:

    def test_page_access_failure(self, recognizer):
        loader = FakeLoader([TEXT_PAGE, TEXT_PAGE], broken_page=1)
        with pytest.raises(DocumentParseFailure) as exc:
            PDFPageAnalyzer(loader=loader, recognizer=recognizer).analyze(b"")
        assert "page 2" in exc.value.diagnostic
        assert loader.document.closed is True

    def test_recognizer_failure(self):
        loader = FakeLoader([BLANK_PAGE])
        with pytest.raises(RecognitionFailure) as exc:
            PDFPageAnalyzer(loader=loader, recognizer=FailingRecognizer()).analyze(b"")
        assert exc.value.diagnostic == "OCR error: engine crashed"

    def test_corrupt_pdf(self, recognizer):
        with pytest.raises(DocumentParseFailure) as exc:
            PDFPageAnalyzer(recognizer=recognizer).analyze(b"this is not a pdf")
        assert exc.value.diagnostic.startswith("PDF parsing error")


class TestRealDocuments:

    def test_text_layer_rows(self, recognizer):
        data = make_pdf([[(72, 100, "Invoice"), (72, 200, "Total")]])
        result = PDFPageAnalyzer(recognizer=recognizer).analyze(data)
        assert result.tables == [[["Invoice"], ["Total"]]]
        assert recognizer.images == []

    def test_blank_page_goes_to_ocr(self, recognizer):
        data = make_pdf([[(72, 100, "Header")], []])
        result = PDFPageAnalyzer(recognizer=recognizer).analyze(data)
        assert result.tables == [[["Header"], ["line one"], ["line two"]]]
        assert result.method is ExtractionMethod.MIXED
        # A4 page rendered at scale 2
        assert recognizer.images == [(1190, 1684)]

    def test_render_page_bitmap(self):
        data = make_pdf([[]])
        loader = PDFLoader(Config())
        doc = loader.open(data)
        try:
            image = loader.render_page(doc.load_page(0), 3.0)
        finally:
            doc.close()
        assert image.mode == "RGB"
        assert image.size == (595 * 3, PAGE_HEIGHT * 3)
        assert image.getpixel((0, 0)) == (255, 255, 255)

    def test_fragment_coordinates_are_pdf_space(self):
        data = make_pdf([[(72, 100, "Invoice")]])
        loader = PDFLoader(Config())
        doc = loader.open(data)
        try:
            fragments = loader.text_fragments(doc.load_page(0), 0)
        finally:
            doc.close()
        assert [f.text for f in fragments] == ["Invoice"]
        assert fragments[0].x == pytest.approx(72, abs=0.5)
        assert fragments[0].y == pytest.approx(PAGE_HEIGHT - 100, abs=0.5)
