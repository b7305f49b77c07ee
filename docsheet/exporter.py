"""
Workbook export of extraction results.
"""

from io import BytesIO
from pathlib import Path
from typing import List, Optional, Tuple, Union
import pandas as pd
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE

from .config import Config, DEFAULT_CONFIG, MAX_SHEET_NAME_LEN
from .models import ExtractionResult, Table
from .utils import setup_logger


logger = setup_logger(__name__)


def clean_cell(value: str) -> str:
    """Drop control characters that cannot be stored in an xlsx cell."""
    return ILLEGAL_CHARACTERS_RE.sub("", value)


class WorkbookExporter:
    """
    Writes an ExtractionResult to an .xlsx workbook.
    
    Table results get one sheet per table (Table1, Table2, ...), written as a
    literal grid with no header row and no index. Text results get a single
    sheet holding the whole text in A1.
    """
    
    def __init__(self, config: Optional[Config] = None):
        self.config = config or DEFAULT_CONFIG
    
    def sheets_for(self, result: ExtractionResult) -> List[Tuple[str, Table]]:
        """
        Decide the sheet layout for a result.
        
        Args:
            result: Extraction result
            
        Returns:
            (sheet name, rows) pairs in workbook order
        """
        if result.is_table and result.tables:
            prefix = self.config.table_sheet_prefix
            return [
                (f"{prefix}{idx + 1}"[:MAX_SHEET_NAME_LEN], table)
                for idx, table in enumerate(result.tables)
            ]
        return [(self.config.text_sheet_name, [[result.text]])]
    
    def build(self, result: ExtractionResult) -> bytes:
        """
        Build the workbook in memory.
        
        Args:
            result: Extraction result
            
        Returns:
            xlsx file contents
        """
        buffer = BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            for sheet_name, rows in self.sheets_for(result):
                df = pd.DataFrame([[clean_cell(str(cell)) for cell in row] for row in rows])
                df.to_excel(writer, sheet_name=sheet_name, index=False, header=False)
                self._keep_literal(writer.sheets[sheet_name])
                logger.debug(f"Wrote sheet {sheet_name} with {len(rows)} row(s)")
        return buffer.getvalue()
    
    def save(self, result: ExtractionResult,
             output_path: Optional[Union[str, Path]] = None) -> Path:
        """
        Write the workbook to disk.
        
        Args:
            result: Extraction result
            output_path: Target file (defaults to config.output_filename)
            
        Returns:
            Path of the written file
        """
        output_path = Path(output_path or self.config.output_filename)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        data = self.build(result)
        with open(output_path, "wb") as f:
            f.write(data)
        logger.info(f"Saved workbook: {output_path}")
        return output_path
    
    @staticmethod
    def _keep_literal(worksheet):
        # openpyxl treats strings starting with "=" as formulas
        for row in worksheet.iter_rows():
            for cell in row:
                if isinstance(cell.value, str) and cell.value.startswith("="):
                    cell.data_type = "s"
