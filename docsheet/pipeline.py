"""
Extraction session: input detection, dispatch and error conversion.
"""

import mimetypes
from pathlib import Path
from typing import Optional, Union

from .config import Config, DEFAULT_CONFIG
from .errors import ExtractionError, UnsupportedFileType
from .exporter import WorkbookExporter
from .html_parser import HTMLTableExtractor
from .models import DocumentKind, ExtractionResult
from .pdf_analyzer import PDFPageAnalyzer
from .progress import ProgressAggregator, ProgressSink
from .utils import setup_logger


logger = setup_logger(__name__)


PDF_MIME = "application/pdf"
HTML_MIME = "text/html"


def detect_kind(file_name: str, mime_type: Optional[str] = None) -> DocumentKind:
    """
    Classify an input by MIME type, falling back to the file name.
    
    Args:
        file_name: Name of the uploaded file
        mime_type: Declared MIME type, guessed from the name when None
        
    Returns:
        Document kind
        
    Raises:
        UnsupportedFileType: For anything other than PDF or HTML
    """
    if mime_type is None:
        mime_type, _ = mimetypes.guess_type(file_name or "")
    mime_type = (mime_type or "").split(";")[0].strip().lower()
    
    if mime_type == PDF_MIME:
        return DocumentKind.PDF
    if mime_type == HTML_MIME or (file_name or "").endswith(".html"):
        return DocumentKind.HTML
    raise UnsupportedFileType(mime_type or file_name)


class ExtractionPipeline:
    """
    Runs one document through the matching extractor.
    
    Each call to ``extract_bytes``/``extract_file`` is a fresh session: the
    progress value restarts at 0 and nothing carries over from earlier files.
    Extraction errors never escape; they come back as an error result whose
    text is a diagnostic message.
    """
    
    def __init__(self, config: Optional[Config] = None,
                 progress: Optional[ProgressSink] = None,
                 recognizer=None):
        """
        Initialize pipeline.
        
        Args:
            config: Configuration object (uses DEFAULT_CONFIG if None)
            progress: Callback receiving integer progress values 0-100
            recognizer: OCR engine override (PaddleOCR when None)
        """
        self.config = config or DEFAULT_CONFIG
        self.progress_sink = progress
        self.pdf_analyzer = PDFPageAnalyzer(self.config, recognizer=recognizer)
        self.html_extractor = HTMLTableExtractor(self.config)
        self.exporter = WorkbookExporter(self.config)
        self.progress = ProgressAggregator(progress)
    
    def extract_bytes(self, data: bytes, file_name: str,
                      mime_type: Optional[str] = None) -> ExtractionResult:
        """
        Extract content from an in-memory document.
        
        Args:
            data: File contents
            file_name: Original file name
            mime_type: Declared MIME type (guessed from file_name if None)
            
        Returns:
            ExtractionResult, in error state if extraction failed
        """
        self.progress = ProgressAggregator(self.progress_sink)
        self.progress.reset()
        logger.info(f"Starting extraction from: {file_name}")
        
        try:
            kind = detect_kind(file_name, mime_type)
            if kind is DocumentKind.PDF:
                result = self.pdf_analyzer.analyze(data, self.progress, file_name=file_name)
            else:
                result = self.html_extractor.extract(data, self.progress, file_name=file_name)
        except ExtractionError as e:
            logger.error(f"Extraction failed for {file_name}: {e.diagnostic}")
            self.progress.fail()
            return ExtractionResult.from_error(e, file_name)
        
        self.progress.complete()
        logger.info(f"Finished {file_name}: {result.message}")
        return result
    
    def extract_file(self, path: Union[str, Path],
                     mime_type: Optional[str] = None) -> ExtractionResult:
        """
        Extract content from a file on disk.
        
        Args:
            path: Path to a PDF or HTML file
            mime_type: Declared MIME type (guessed from the name if None)
            
        Returns:
            ExtractionResult
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Input file not found: {path}")
        return self.extract_bytes(path.read_bytes(), path.name, mime_type)
    
    def export(self, result: ExtractionResult,
               output_path: Optional[Union[str, Path]] = None) -> Path:
        """Write a result to an .xlsx workbook."""
        return self.exporter.save(result, output_path)
