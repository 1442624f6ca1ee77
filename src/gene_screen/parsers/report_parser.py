"""
Reader for previously rendered GeneScreen hit tables.
"""

import logging
from pathlib import Path
from typing import Iterator, List

from gene_screen.core.errors import UnreadableInputFile

logger = logging.getLogger(__name__)

def iter_report_lines(report_path: str, delimiter: str = "\t") -> Iterator[List[str]]:
    """
    Stream a report file as lists of fields, skipping blank lines.

    :param report_path: Path to a hit table written by GeneScreen.
    :param delimiter: Field separator used in the report.
    :return: An iterator over split lines, header included.
    """
    path = Path(report_path)
    try:
        fh = path.open('r', encoding='utf-8')
    except OSError as e:
        logger.error(f"Failed to open report {report_path}: {e}")
        raise UnreadableInputFile(report_path, e.strerror or str(e)) from e

    with fh:
        for line in fh:
            line = line.rstrip('\r\n')
            if not line:
                continue
            yield line.split(delimiter)
