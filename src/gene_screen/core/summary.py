"""
Cross-report summary for GeneScreen.
Merges hit tables into a gene presence matrix keyed by report file.
"""

import logging
from typing import Dict, Iterable, List, Optional, Set

from gene_screen.core.errors import DuplicateSummaryInput, MalformedReportHeader
from gene_screen.core.models import SummaryMatrix
from gene_screen.parsers.report_parser import iter_report_lines

logger = logging.getLogger(__name__)

FILE_COLUMN = '#FILE'
GENE_COLUMN = 'GENE'
COVERAGE_COLUMN = '%COVERAGE'

class SummaryAggregator:
    """
    Accumulates the gene universe and per-key coverage lists across report files.

    The first line read in the run is taken as the column header for every
    file. Later lines starting with '#' are skipped, so reports with a
    different column layout are read through the first file's header.
    With a single input file ("dutch mode") rows are keyed by their own
    #FILE column, otherwise by the path of the report they came from.
    """

    def __init__(self, single_input: bool):
        self.dutch = single_input
        self.header: Optional[List[str]] = None
        self.matrix = SummaryMatrix()
        self.seen_paths: Set[str] = set()

    def _set_header(self, fields: List[str], report_path: str):
        missing = [c for c in (GENE_COLUMN, COVERAGE_COLUMN) if c not in fields]
        if self.dutch and FILE_COLUMN not in fields:
            missing.append(FILE_COLUMN)
        if missing:
            raise MalformedReportHeader(report_path, missing)
        self.header = fields

    def _row(self, fields: List[str]) -> Dict[str, str]:
        return {name: (fields[i] if i < len(fields) else "") for i, name in enumerate(self.header)}

    def add_report(self, report_path: str, delimiter: str = "\t") -> int:
        """
        Stream one report into the matrix.

        :param report_path: Path of the hit table.
        :param delimiter: Field separator of the hit table.
        :return: Number of data rows consumed (0 for a skipped duplicate).
        """
        if report_path in self.seen_paths:
            logger.warning(str(DuplicateSummaryInput(report_path)))
            return 0
        self.seen_paths.add(report_path)

        if not self.dutch:
            self.matrix.add_key(report_path)

        rows = 0
        for fields in iter_report_lines(report_path, delimiter):
            if self.header is None:
                self._set_header(fields, report_path)
                continue
            if fields[0].startswith('#'):
                continue
            row = self._row(fields)
            key = row[FILE_COLUMN] if self.dutch else report_path
            self.matrix.add(key, row[GENE_COLUMN], row[COVERAGE_COLUMN])
            rows += 1

        logger.debug(f"Read {rows} hits from {report_path}")
        return rows

def summarize_reports(report_paths: Iterable[str], delimiter: str = "\t") -> SummaryMatrix:
    """
    Build the summary matrix for a list of report files.

    :param report_paths: Paths in command-line order; duplicates are skipped.
    :param delimiter: Field separator of the reports.
    :return: The finished SummaryMatrix.
    """
    report_paths = list(report_paths)
    aggregator = SummaryAggregator(single_input=len(report_paths) == 1)
    for path in report_paths:
        aggregator.add_report(path, delimiter)
    return aggregator.matrix
