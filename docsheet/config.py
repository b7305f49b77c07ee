"""
Configuration settings for the document extraction pipeline.
"""

from dataclasses import dataclass, fields
from typing import Optional, Mapping
import os


ENV_PREFIX = "DOCSHEET_"

# Excel limits sheet titles to 31 characters
MAX_SHEET_NAME_LEN = 31


@dataclass
class Config:
    """Central configuration for the extraction pipeline."""
    
    # Rasterization settings (pages without a usable text layer)
    render_scale: float = 2.0
    
    # Layout reconstruction: fragments whose y falls in the same
    # 2 * row_tolerance wide bucket share a row
    row_tolerance: float = 0.5
    
    # PaddleOCR settings
    ocr_lang: str = "en"
    ocr_use_angle_cls: bool = True
    
    # HTML settings
    html_parser: str = "html5lib"
    html_encoding: str = "utf-8"
    
    # Output settings
    table_sheet_prefix: str = "Table"
    text_sheet_name: str = "OCR Text"
    output_filename: str = "ocr_result.xlsx"
    
    # Logging
    log_level: str = "INFO"
    
    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.render_scale <= 0:
            raise ValueError("render_scale must be positive")
        if self.row_tolerance <= 0:
            raise ValueError("row_tolerance must be positive")
        if not self.table_sheet_prefix:
            raise ValueError("table_sheet_prefix must not be empty")
        if not self.text_sheet_name or len(self.text_sheet_name) > MAX_SHEET_NAME_LEN:
            raise ValueError(f"text_sheet_name must be 1-{MAX_SHEET_NAME_LEN} characters")
        if not self.output_filename.lower().endswith(".xlsx"):
            raise ValueError("output_filename must end with .xlsx")
        self.log_level = self.log_level.upper()
    
    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Config":
        """
        Build a configuration from DOCSHEET_* environment variables.
        
        Unset variables keep their defaults. DOCSHEET_RENDER_SCALE maps to
        render_scale, DOCSHEET_OCR_USE_ANGLE_CLS to ocr_use_angle_cls, etc.
        
        Args:
            environ: Mapping to read from (defaults to os.environ)
            
        Returns:
            Config instance
        """
        environ = os.environ if environ is None else environ
        values = {}
        for field in fields(cls):
            raw = environ.get(ENV_PREFIX + field.name.upper())
            if raw is None:
                continue
            if field.type in (bool, "bool"):
                values[field.name] = raw.strip().lower() in {"1", "true", "yes", "y", "on"}
            elif field.type in (float, "float"):
                values[field.name] = float(raw)
            else:
                values[field.name] = raw
        return cls(**values)


# Default configuration instance
DEFAULT_CONFIG = Config()
