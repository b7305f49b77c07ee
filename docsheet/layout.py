"""
Reconstruction of rows and columns from positioned PDF text fragments.
"""

import math
from typing import Dict, Iterable, List

from .models import Row, TextFragment
from .utils import setup_logger


logger = setup_logger(__name__)


def line_key(y: float, tolerance: float = 0.5) -> int:
    """
    Bucket a y coordinate into a line key.
    
    Buckets are ``2 * tolerance`` wide and centred on multiples of that width,
    so the default tolerance of 0.5 rounds ``y`` to the nearest integer
    (halves go up). Fragments a little apart can still land in the same
    bucket and be merged into one row; that is accepted.
    
    Args:
        y: Vertical position in PDF user space
        tolerance: Half width of a bucket
        
    Returns:
        Integer bucket index
    """
    if tolerance <= 0:
        raise ValueError("tolerance must be positive")
    return int(math.floor(y / (2 * tolerance) + 0.5))


def group_lines(fragments: Iterable[TextFragment],
                tolerance: float = 0.5) -> List[List[TextFragment]]:
    """
    Cluster fragments into lines, ordered top to bottom.
    
    Lines are sorted by the raw y of their first fragment (descending, since
    y grows upward). Fragments inside a line are sorted by x ascending; both
    sorts are stable.
    
    Args:
        fragments: Text fragments of one page
        tolerance: Line clustering tolerance
        
    Returns:
        List of lines, each a list of fragments
    """
    lines: Dict[int, List[TextFragment]] = {}
    for fragment in fragments:
        lines.setdefault(line_key(fragment.y, tolerance), []).append(fragment)
    
    ordered = sorted(lines.values(), key=lambda line: line[0].y, reverse=True)
    return [sorted(line, key=lambda f: f.x) for line in ordered]


def reconstruct_rows(fragments: Iterable[TextFragment],
                     tolerance: float = 0.5) -> List[Row]:
    """
    Turn the text fragments of one page into table rows.
    
    Each fragment becomes its own cell; fragments are never concatenated,
    which is what lets independent text runs form columns.
    
    Args:
        fragments: Text fragments of one page
        tolerance: Line clustering tolerance
        
    Returns:
        Rows top to bottom, cells left to right
    """
    rows = [[f.text for f in line] for line in group_lines(fragments, tolerance)]
    logger.debug(f"Reconstructed {len(rows)} row(s)")
    return rows
