"""
PDF access: opening documents, reading the text layer and rasterizing pages.
"""

from typing import List, Optional, Union
from pathlib import Path
import fitz
from PIL import Image

from .utils import setup_logger
from .config import Config
from .errors import DocumentParseFailure
from .models import TextFragment


logger = setup_logger(__name__)


class PDFLoader:
    """Opens PDFs with PyMuPDF and exposes per-page text and bitmaps."""
    
    def __init__(self, config: Config):
        """
        Initialize PDF loader.
        
        Args:
            config: Configuration object
        """
        self.config = config
        self.scale = config.render_scale
    
    def open(self, source: Union[str, Path, bytes]) -> fitz.Document:
        """
        Open a PDF from a path or from raw bytes.
        
        Args:
            source: File path or PDF bytes
            
        Returns:
            Open PyMuPDF document (caller closes it)
            
        Raises:
            DocumentParseFailure: If the data is not a readable PDF
        """
        try:
            if isinstance(source, (bytes, bytearray)):
                doc = fitz.open(stream=bytes(source), filetype="pdf")
            else:
                doc = fitz.open(str(source), filetype="pdf")
        except Exception as e:
            logger.error(f"Failed to open PDF: {e}")
            raise DocumentParseFailure(str(e) or type(e).__name__) from e
        
        if doc.needs_pass:
            doc.close()
            logger.error("PDF is encrypted")
            raise DocumentParseFailure("document is password protected")
        
        logger.info(f"Opened PDF with {doc.page_count} page(s)")
        return doc
    
    def text_fragments(self, page: fitz.Page, page_index: int) -> List[TextFragment]:
        """
        Read the text spans of a page as positioned fragments.
        
        Span origins (baseline start) are mapped back to PDF user space so
        that y grows upward, as in the page's content stream.
        
        Args:
            page: PyMuPDF page
            page_index: Zero-based page index
            
        Returns:
            Fragments in content order
        """
        to_pdf_space = ~page.transformation_matrix
        fragments = []
        for block in page.get_text("dict")["blocks"]:
            if block.get("type") != 0:
                continue
            for line in block["lines"]:
                for span in line["spans"]:
                    origin = fitz.Point(span["origin"]) * to_pdf_space
                    fragments.append(TextFragment(
                        text=span["text"],
                        x=origin.x,
                        y=origin.y,
                        page_index=page_index,
                    ))
        logger.debug(f"Page {page_index + 1}: {len(fragments)} text fragment(s)")
        return fragments
    
    def render_page(self, page: fitz.Page, scale: Optional[float] = None) -> Image.Image:
        """
        Rasterize a page.
        
        Args:
            page: PyMuPDF page
            scale: Zoom factor (defaults to config.render_scale)
            
        Returns:
            RGB PIL Image
        """
        zoom = scale or self.scale
        mat = fitz.Matrix(zoom, zoom)
        pix = page.get_pixmap(matrix=mat, alpha=False)
        image = Image.frombytes("RGB", (pix.width, pix.height), pix.samples)
        logger.debug(f"Rendered page {page.number + 1} at scale {zoom}: {image.size}")
        return image
