"""
ASCII coverage map for GeneScreen reports.
A fixed-width bar showing which part of the reference gene a hit spans.
"""

import numpy as np

MAP_WIDTH = 15
COVERED = "="
UNCOVERED = "."
BREAK = "/"

def render_coverage_map(
    start: int,
    end: int,
    length: int,
    broken: bool = False,
    width: int = MAP_WIDTH,
    on: str = COVERED,
    off: str = UNCOVERED
) -> str:
    """
    Render the covered reference interval [start, end] as a bar of width cells.
    In broken mode one cell is given up for a '/' after the middle cell, so the
    string is still width characters long.

    :param start: Reference start coordinate (sstart after strand normalization).
    :param end: Reference end coordinate.
    :param length: Reference sequence length.
    :param broken: Render a two-part map.
    :return: The coverage map string.
    """
    cells = width - 1 if broken else width
    scale = length / cells
    x = int(start / scale)
    y = int(end / scale)

    idx = np.arange(cells)
    glyphs = np.where((idx >= x) & (idx <= y), on, off).tolist()

    if broken:
        glyphs.insert(cells // 2 + 1, BREAK)
    return "".join(glyphs)
