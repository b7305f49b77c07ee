"""
HTML table extraction with a whole-document text fallback.
"""

from typing import List, Optional, Union
from bs4 import BeautifulSoup
from bs4.element import Comment, Declaration, Doctype, NavigableString, ProcessingInstruction, Tag

from .config import Config, DEFAULT_CONFIG
from .errors import DocumentParseFailure
from .models import ExtractionMethod, ExtractionResult, Row, Table, rows_to_text
from .progress import ProgressAggregator
from .utils import setup_logger


logger = setup_logger(__name__)


NON_TEXT_NODES = (Comment, Declaration, Doctype, ProcessingInstruction)


def text_content(node: Tag) -> str:
    """
    Concatenate every descendant text node, like the DOM's ``textContent``.
    
    Unlike ``get_text()``, script and style contents are included.
    """
    return "".join(
        s for s in node.descendants
        if isinstance(s, NavigableString) and not isinstance(s, NON_TEXT_NODES)
    )


def table_rows(table: Tag) -> List[Tag]:
    """Rows belonging to ``table`` itself, excluding those of nested tables."""
    return [tr for tr in table.find_all("tr") if tr.find_parent("table") is table]


def row_cells(row: Tag) -> List[str]:
    """Trimmed text of each direct ``td``/``th`` child of a row."""
    return [text_content(cell).strip() for cell in row.find_all(["td", "th"], recursive=False)]


class HTMLTableExtractor:
    """Parses HTML documents into tables, or into plain text when none exist."""
    
    def __init__(self, config: Optional[Config] = None):
        self.config = config or DEFAULT_CONFIG
    
    def parse(self, html: Union[str, bytes]) -> BeautifulSoup:
        """
        Parse HTML source into a tree.
        
        Raises:
            DocumentParseFailure: If the source cannot be decoded or parsed
        """
        try:
            if isinstance(html, (bytes, bytearray)):
                html = bytes(html).decode(self.config.html_encoding, errors="replace")
            return BeautifulSoup(html, self.config.html_parser)
        except Exception as e:
            logger.error(f"Failed to parse HTML: {e}")
            raise DocumentParseFailure(str(e) or type(e).__name__, kind="HTML") from e
    
    def extract_tables(self, soup: BeautifulSoup) -> List[Table]:
        """
        Collect every ``<table>`` in document order as a row/cell matrix.
        
        Args:
            soup: Parsed document
            
        Returns:
            One table per ``<table>`` element
        """
        tables = []
        for table in soup.find_all("table"):
            rows: List[Row] = [row_cells(tr) for tr in table_rows(table)]
            tables.append(rows)
        return tables
    
    def document_text(self, soup: BeautifulSoup) -> str:
        """
        Text content of ``<body>``.
        
        html5lib always creates a body; other parsers may not, in which case
        the whole document is used.
        """
        root = soup.body if soup.body is not None else soup
        return text_content(root)
    
    def extract(self, html: Union[str, bytes],
                progress: Optional[ProgressAggregator] = None,
                file_name: str = "") -> ExtractionResult:
        """
        Extract tables from an HTML document.
        
        Args:
            html: HTML source
            progress: Progress aggregator for this session
            file_name: Name reported in the result
            
        Returns:
            ExtractionResult in table mode when tables exist, text mode otherwise
        """
        soup = self.parse(html)
        tables = self.extract_tables(soup)
        
        if tables:
            logger.info(f"Found {len(tables)} table(s) in HTML")
            result = ExtractionResult(
                tables=tables,
                plain_text="\n".join(rows_to_text(t) for t in tables),
                method=ExtractionMethod.TEXT_EXTRACTION,
                is_table=True,
                file_name=file_name,
                message="Table(s) extracted from HTML.",
            )
        else:
            logger.warning("No tables found in HTML, falling back to document text")
            text = self.document_text(soup)
            result = ExtractionResult(
                tables=[],
                plain_text=text,
                method=ExtractionMethod.TEXT_EXTRACTION,
                is_table=False,
                file_name=file_name,
                message="Text extracted from HTML.",
            )
        
        if progress:
            progress.complete()
        return result
