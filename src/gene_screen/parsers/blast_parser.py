"""
BLAST tabular output parser for GeneScreen.
Turns each line of -outfmt 6 output into a strand-normalized AlignmentRecord.
"""

import logging
from typing import Iterable, Iterator, List, Sequence

from gene_screen.core.errors import MalformedAlignmentRow
from gene_screen.core.models import AlignmentRecord, Strand

logger = logging.getLogger(__name__)

# Order matters: it is passed verbatim to -outfmt
BLAST_FIELDS: List[str] = [
    'qseqid', 'qstart', 'qend', 'qlen',
    'sseqid', 'sstart', 'send', 'slen', 'sstrand',
    'evalue', 'length', 'pident', 'gaps', 'gapopen',
    'stitle'
]

INT_FIELDS = {'qstart', 'qend', 'qlen', 'sstart', 'send', 'slen', 'length', 'gaps', 'gapopen'}
FLOAT_FIELDS = {'evalue', 'pident'}

def blast_outfmt() -> str:
    """
    The -outfmt argument matching BLAST_FIELDS.
    """
    return "6 " + " ".join(BLAST_FIELDS)

def normalize_row(fields: Sequence[str], source: str, line_number: int = 0) -> AlignmentRecord:
    """
    Convert one split row of aligner output into an AlignmentRecord.
    Minus strand hits are reordered so that sstart <= send.

    :param fields: The tab-split fields of a single row.
    :param source: Name of the input file the row belongs to, used in errors.
    :param line_number: 1-based line number, used in errors.
    :return: The normalized AlignmentRecord.
    """
    if len(fields) != len(BLAST_FIELDS):
        raise MalformedAlignmentRow(
            source, f"found {len(fields)} fields, expected {len(BLAST_FIELDS)}", line_number
        )

    values = {}
    for name, raw in zip(BLAST_FIELDS, fields):
        try:
            if name in INT_FIELDS:
                values[name] = int(raw)
            elif name in FLOAT_FIELDS:
                values[name] = float(raw)
            else:
                values[name] = raw
        except ValueError:
            raise MalformedAlignmentRow(source, f"bad value {raw!r} for {name}", line_number)

    if values['slen'] <= 0:
        raise MalformedAlignmentRow(source, "slen must be positive", line_number)

    values['sstrand'] = Strand.from_blast(values['sstrand'])
    if values['sstrand'] is Strand.MINUS:
        start, end = values['sstart'], values['send']
        values['sstart'], values['send'] = min(start, end), max(start, end)

    return AlignmentRecord(**values)

def parse_blast_rows(lines: Iterable[str], source: str) -> Iterator[AlignmentRecord]:
    """
    Parse a stream of aligner output lines, stopping at the first malformed row.

    :param lines: Lines of -outfmt 6 output, with or without trailing newlines.
    :param source: Name of the input file the alignments were computed for.
    :return: An iterator over normalized AlignmentRecords in arrival order.
    """
    for line_number, line in enumerate(lines, start=1):
        line = line.rstrip('\r\n')
        if not line:
            continue
        yield normalize_row(line.split('\t'), source, line_number)
