"""
Core filtering logic for GeneScreen.
Computes reference coverage for each alignment and keeps at most one hit
per (query sequence, query start, query end).
"""

import logging
from typing import Iterable, List, Set, Tuple

from gene_screen.core.models import AlignmentRecord

logger = logging.getLogger(__name__)

def percent_coverage(record: AlignmentRecord) -> float:
    """
    Percentage of the reference spanned by the alignment, net of gap bases.
    Not clamped: malformed input may give values outside [0, 100].

    :param record: A normalized AlignmentRecord.
    :return: 100 * (length - gaps) / slen
    """
    return 100 * (record.length - record.gaps) / record.slen

class HitFilter:
    """
    Coverage filter and first-seen-wins deduplicator for the alignments of one input file.
    A new HitFilter must be created for every file.
    """

    def __init__(self, min_coverage: float):
        self.min_coverage = min_coverage
        self.seen: Set[Tuple[str, int, int]] = set()
        self.rejected_duplicate = 0
        self.rejected_coverage = 0

    def accept(self, record: AlignmentRecord) -> Tuple[bool, float]:
        """
        Decide whether a record survives, recording its key if it does.

        :param record: The next AlignmentRecord in arrival order.
        :return: Tuple (accepted, percent_coverage).
        """
        cov = percent_coverage(record)
        if record.key in self.seen:
            self.rejected_duplicate += 1
            return False, cov
        if cov < self.min_coverage:
            self.rejected_coverage += 1
            return False, cov
        self.seen.add(record.key)
        return True, cov

    def filter(self, records: Iterable[AlignmentRecord]) -> List[Tuple[AlignmentRecord, float]]:
        """
        Run every record through accept() and keep the survivors in arrival order.

        :param records: AlignmentRecords for a single input file.
        :return: List of (record, percent_coverage) tuples.
        """
        accepted = []
        for record in records:
            ok, cov = self.accept(record)
            if ok:
                accepted.append((record, cov))

        logger.debug(
            f"Kept {len(accepted)} alignments; dropped {self.rejected_duplicate} duplicates "
            f"and {self.rejected_coverage} below {self.min_coverage}% coverage"
        )
        return accepted
