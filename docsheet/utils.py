"""
Utility functions for the extraction pipeline.
"""

import math
import logging
from typing import Union
import numpy as np
from PIL import Image


def setup_logger(name: str, level: Union[int, str] = logging.INFO) -> logging.Logger:
    """
    Setup logger with consistent formatting.
    
    Args:
        name: Logger name
        level: Logging level
        
    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    
    return logger


def set_log_level(level: Union[int, str]) -> None:
    """Apply a level to every docsheet logger created so far."""
    for name in list(logging.Logger.manager.loggerDict):
        if name == "docsheet" or name.startswith("docsheet."):
            logging.getLogger(name).setLevel(level)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards +inf."""
    return int(math.floor(value + 0.5))


def image_to_numpy(image: Image.Image) -> np.ndarray:
    """
    Convert PIL Image to numpy array.
    
    Args:
        image: PIL Image
        
    Returns:
        Numpy array in RGB format
    """
    if image.mode != 'RGB':
        image = image.convert('RGB')
    return np.array(image)
