"""
Data containers shared by the extraction components.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .errors import ExtractionError


Row = List[str]
Table = List[Row]


class DocumentKind(Enum):
    PDF = "pdf"
    HTML = "html"


class ExtractionMethod(Enum):
    """How the content of a document was obtained."""
    
    TEXT_EXTRACTION = "text_extraction"
    OCR = "ocr"
    MIXED = "mixed"
    NONE = "none"
    
    @property
    def label(self) -> str:
        return {
            ExtractionMethod.TEXT_EXTRACTION: "Text Extraction",
            ExtractionMethod.OCR: "OCR",
            ExtractionMethod.MIXED: "Mixed",
            ExtractionMethod.NONE: "None",
        }[self]


@dataclass(frozen=True)
class TextFragment:
    """A positioned run of text from a PDF page (PDF user space, y grows upward)."""
    text: str
    x: float
    y: float
    page_index: int = 0


def rows_to_text(rows: Table) -> str:
    """Join cells of each row with a space and rows with newlines."""
    return "\n".join(" ".join(row) for row in rows)


@dataclass(frozen=True)
class ExtractionResult:
    """
    Outcome of one extraction session.
    
    ``is_table`` selects which view is authoritative: ``tables`` when True,
    ``plain_text`` otherwise.
    """
    tables: List[Table]
    plain_text: str
    method: ExtractionMethod
    is_table: bool
    file_name: str = ""
    message: str = ""
    page_count: int = 0
    ocr_pages: List[int] = field(default_factory=list)
    error: Optional[ExtractionError] = None
    
    @property
    def failed(self) -> bool:
        return self.error is not None
    
    @property
    def text(self) -> str:
        """Text a viewer shows when no table is rendered."""
        if self.error is not None:
            return self.error.diagnostic
        return self.plain_text
    
    @classmethod
    def from_error(cls, error: ExtractionError, file_name: str = "") -> "ExtractionResult":
        """Build the terminal state of a failed session."""
        return cls(
            tables=[],
            plain_text=error.diagnostic,
            method=ExtractionMethod.NONE,
            is_table=False,
            file_name=file_name,
            message=error.diagnostic,
            error=error,
        )
