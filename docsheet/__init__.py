"""
Document to workbook extraction

Pulls tables out of PDF and HTML documents and writes them to an Excel
workbook. PDF pages are reconstructed from their text layer when one exists
and recognized with PaddleOCR otherwise.
"""

from .config import Config, DEFAULT_CONFIG
from .errors import ExtractionError, UnsupportedFileType, DocumentParseFailure, RecognitionFailure
from .models import TextFragment, ExtractionMethod, ExtractionResult
from .pipeline import ExtractionPipeline
from .exporter import WorkbookExporter

__version__ = "1.0.0"
__all__ = [
    "Config", "DEFAULT_CONFIG",
    "ExtractionError", "UnsupportedFileType", "DocumentParseFailure", "RecognitionFailure",
    "TextFragment", "ExtractionMethod", "ExtractionResult",
    "ExtractionPipeline", "WorkbookExporter",
]
