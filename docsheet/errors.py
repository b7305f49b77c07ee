"""
Errors raised by the extraction pipeline.

Every error carries a user-facing ``diagnostic`` string. The pipeline turns
caught errors into an error result whose text is that diagnostic.
"""


class ExtractionError(Exception):
    """Base class for errors that end an extraction session."""
    
    prefix = "Extraction error"
    
    def __init__(self, detail: str = ""):
        super().__init__(detail)
        self.detail = detail
    
    @property
    def diagnostic(self) -> str:
        if self.detail:
            return f"{self.prefix}: {self.detail}"
        return f"{self.prefix}."


class UnsupportedFileType(ExtractionError):
    """Input is neither a PDF nor an HTML document."""
    
    @property
    def diagnostic(self) -> str:
        return "Unsupported file type."


class DocumentParseFailure(ExtractionError):
    """A PDF or HTML document could not be opened or parsed."""
    
    def __init__(self, detail: str = "", kind: str = "PDF"):
        super().__init__(detail)
        self.kind = kind
        self.prefix = f"{kind} parsing error"


class RecognitionFailure(ExtractionError):
    """The OCR engine failed on a rasterized page."""
    
    prefix = "OCR error"
