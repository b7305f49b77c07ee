"""
OCR engine wrapper for PaddleOCR.
"""

from typing import Any, Callable, List, Optional
import numpy as np
from PIL import Image

from .utils import setup_logger, image_to_numpy
from .config import Config
from .errors import RecognitionFailure


logger = setup_logger(__name__)


ProgressCallback = Callable[[float], None]


class OCREngine:
    """
    Wrapper for PaddleOCR text recognition.
    
    Anything with a ``recognize(image, progress=None) -> str`` method can
    stand in for this class in the PDF analyzer.
    """
    
    def __init__(self, config: Config):
        """
        Initialize OCR engine. PaddleOCR itself is loaded on first use.
        
        Args:
            config: Configuration object
        """
        self.config = config
        self.ocr = None
    
    def _initialize_ocr(self):
        """Initialize PaddleOCR instance."""
        try:
            from paddleocr import PaddleOCR
            
            logger.info("Initializing PaddleOCR engine...")
            # PaddleOCR 3.x: orientation is chosen at construction, not per call
            self.ocr = PaddleOCR(
                use_textline_orientation=self.config.ocr_use_angle_cls,
                lang=self.config.ocr_lang
            )
            logger.info("PaddleOCR engine initialized successfully")
            
        except ImportError as e:
            logger.error("PaddleOCR is not installed. Install with: pip install paddleocr paddlepaddle")
            raise RecognitionFailure("PaddleOCR is not installed") from e
        except Exception as e:
            logger.error(f"Failed to initialize PaddleOCR: {e}")
            raise RecognitionFailure(str(e)) from e
    
    def recognize(self, image: Image.Image,
                  progress: Optional[ProgressCallback] = None) -> str:
        """
        Recognize the text of a page image.
        
        PaddleOCR runs detection and recognition in one call, so progress is
        reported as 0.0 when recognition starts and 1.0 when it is done.
        
        Args:
            image: PIL Image of a rendered page
            progress: Optional callback receiving fractions in [0, 1]
            
        Returns:
            Recognized text, one detected line per output line
            
        Raises:
            RecognitionFailure: If the engine cannot be loaded or fails
        """
        if self.ocr is None:
            self._initialize_ocr()
        
        if progress:
            progress(0.0)
        try:
            result = self.ocr.ocr(to_bgr(image))
        except Exception as e:
            logger.error(f"OCR failed: {e}")
            raise RecognitionFailure(str(e)) from e
        
        lines = parse_ocr_lines(result)
        logger.debug(f"Recognized {len(lines)} line(s)")
        if progress:
            progress(1.0)
        return "\n".join(lines)


def to_bgr(image: Image.Image) -> np.ndarray:
    """PaddleOCR reads numpy input in OpenCV (BGR) channel order."""
    return np.ascontiguousarray(image_to_numpy(image)[:, :, ::-1])


def parse_ocr_lines(result: Any) -> List[str]:
    """Extract the recognized strings from PaddleOCR 3.x results (one per page image)."""
    lines = []
    for res in result or []:
        if not res:
            continue
        texts = res.get("rec_texts") if hasattr(res, "get") else None
        lines.extend(str(t) for t in texts or [])
    return lines
