"""
Per-page PDF analysis: text-layer reconstruction with an OCR fallback.
"""

from pathlib import Path
from typing import List, Optional, Union

from .config import Config, DEFAULT_CONFIG
from .errors import DocumentParseFailure, ExtractionError, RecognitionFailure
from .layout import reconstruct_rows
from .models import ExtractionMethod, ExtractionResult, Row, TextFragment, rows_to_text
from .ocr_engine import OCREngine
from .pdf_loader import PDFLoader
from .progress import ProgressAggregator
from .utils import setup_logger


logger = setup_logger(__name__)


def is_text_usable(fragments: List[TextFragment]) -> bool:
    """A page is usable when at least one fragment has non-blank text."""
    return any(f.text.strip() for f in fragments)


def ocr_text_to_rows(text: str) -> List[Row]:
    """One single-cell row per line of recognized text."""
    return [[line] for line in text.split("\n")]


def resolve_method(pages_total: int, pages_ocr: int) -> ExtractionMethod:
    if pages_ocr == 0:
        return ExtractionMethod.TEXT_EXTRACTION
    if pages_ocr == pages_total:
        return ExtractionMethod.OCR
    return ExtractionMethod.MIXED


class PDFPageAnalyzer:
    """
    Builds one aggregate table from all pages of a PDF.
    
    Pages are handled strictly in order. A page whose text layer holds any
    non-blank fragment is reconstructed geometrically; any other page is
    rendered and passed through the recognizer, one row per recognized line.
    """
    
    def __init__(self, config: Optional[Config] = None,
                 loader: Optional[PDFLoader] = None,
                 recognizer=None):
        """
        Initialize analyzer.
        
        Args:
            config: Configuration object (uses DEFAULT_CONFIG if None)
            loader: PDF loader (built from config if None)
            recognizer: Object with ``recognize(image, progress)``; an
                OCREngine is created lazily if None
        """
        self.config = config or DEFAULT_CONFIG
        self.loader = loader or PDFLoader(self.config)
        self._recognizer = recognizer
    
    @property
    def recognizer(self):
        if self._recognizer is None:
            self._recognizer = OCREngine(self.config)
        return self._recognizer
    
    def analyze(self, source: Union[str, Path, bytes],
                progress: Optional[ProgressAggregator] = None,
                file_name: str = "") -> ExtractionResult:
        """
        Extract an aggregate table from a PDF.
        
        Args:
            source: File path or PDF bytes
            progress: Progress aggregator for this session
            file_name: Name reported in the result
            
        Returns:
            ExtractionResult in table mode
            
        Raises:
            DocumentParseFailure: If the PDF or one of its pages cannot be read
            RecognitionFailure: If OCR fails on a page
        """
        progress = progress or ProgressAggregator()
        doc = self.loader.open(source)
        try:
            rows, ocr_pages, page_count = self._process_pages(doc, progress)
        finally:
            doc.close()
        
        method = resolve_method(page_count, len(ocr_pages))
        logger.info(f"Extracted {len(rows)} row(s) from {page_count} page(s) "
                    f"using {method.label}")
        return ExtractionResult(
            tables=[rows],
            plain_text=rows_to_text(rows),
            method=method,
            is_table=True,
            file_name=file_name,
            message="Table-like structure extracted from PDF.",
            page_count=page_count,
            ocr_pages=ocr_pages,
        )
    
    def _process_pages(self, doc, progress: ProgressAggregator):
        page_count = doc.page_count
        all_rows: List[Row] = []
        ocr_pages: List[int] = []
        
        for page_number in range(1, page_count + 1):
            logger.info(f"Processing page {page_number}/{page_count}")
            try:
                page = doc.load_page(page_number - 1)
                fragments = self.loader.text_fragments(page, page_number - 1)
            except ExtractionError:
                raise
            except Exception as e:
                logger.error(f"Failed to read page {page_number}: {e}")
                raise DocumentParseFailure(f"page {page_number}: {e}") from e
            
            if is_text_usable(fragments):
                rows = reconstruct_rows(fragments, self.config.row_tolerance)
            else:
                logger.info(f"Page {page_number} has no usable text layer, running OCR")
                rows = self._recognize_page(page, page_number, page_count, progress)
                ocr_pages.append(page_number)
            
            all_rows.extend(rows)
            progress.page_done(page_number, page_count)
        
        return all_rows, ocr_pages, page_count
    
    def _recognize_page(self, page, page_number: int, page_count: int,
                        progress: ProgressAggregator) -> List[Row]:
        try:
            image = self.loader.render_page(page, self.config.render_scale)
        except Exception as e:
            logger.error(f"Failed to render page {page_number}: {e}")
            raise DocumentParseFailure(f"page {page_number}: {e}") from e
        
        try:
            text = self.recognizer.recognize(
                image, progress.page_callback(page_number, page_count))
        except ExtractionError:
            raise
        except Exception as e:
            raise RecognitionFailure(str(e)) from e
        finally:
            image.close()
        
        return ocr_text_to_rows(text)
