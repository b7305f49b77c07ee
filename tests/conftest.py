"""Shared fixtures: in-memory PDFs, a fake OCR engine and a fake PDF loader."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import fitz
import pytest
from PIL import Image

from docsheet.config import Config
from docsheet.models import TextFragment


PAGE_WIDTH = 595
PAGE_HEIGHT = 842


def make_pdf(pages: list[list[tuple[float, float, str]]]) -> bytes:
    """Build a PDF where each page is a list of (x, y_from_top, text) insertions."""
    doc = fitz.open()
    for items in pages:
        page = doc.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
        for x, y, text in items:
            page.insert_text((x, y), text, fontsize=11)
    data = doc.tobytes()
    doc.close()
    return data


class FakeRecognizer:
    """Stands in for OCREngine: fixed text, scripted progress fractions."""

    def __init__(self, text: str = "line one\nline two", fractions=(0.0, 0.5, 1.0)):
        self.text = text
        self.fractions = fractions
        self.images = []

    def recognize(self, image, progress=None):
        self.images.append(image.size)
        for fraction in self.fractions:
            if progress:
                progress(fraction)
        return self.text


class FailingRecognizer:
    def recognize(self, image, progress=None):
        raise RuntimeError("engine crashed")


class FakePage:
    def __init__(self, number, fragments):
        self.number = number
        self.fragments = fragments


class FakeDocument:
    def __init__(self, pages, broken_page=None):
        self.pages = pages
        self.broken_page = broken_page
        self.closed = False

    @property
    def page_count(self):
        return len(self.pages)

    def load_page(self, index):
        if index == self.broken_page:
            raise RuntimeError("cannot load page")
        return FakePage(index, self.pages[index])

    def close(self):
        self.closed = True


class FakeLoader:
    """PDFLoader double: pages are lists of (text, x, y) tuples."""

    def __init__(self, pages, broken_page=None):
        self.document = FakeDocument(pages, broken_page)
        self.renders = []

    def open(self, source):
        return self.document

    def text_fragments(self, page, page_index):
        return [TextFragment(t, x, y, page_index) for t, x, y in page.fragments]

    def render_page(self, page, scale=None):
        self.renders.append((page.number, scale))
        return Image.new("RGB", (20, 20), "white")


@pytest.fixture
def config():
    return Config()


@pytest.fixture
def recognizer():
    return FakeRecognizer()
