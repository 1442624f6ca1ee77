"""
Query sequence reader for GeneScreen.
Accepts FASTA, GenBank or EMBL (optionally gzipped) and produces the
uppercase FASTA text that is piped to the aligner.
"""

import gzip
import io
import logging
from pathlib import Path
from typing import Dict, List

from Bio import SeqIO
from Bio.SeqRecord import SeqRecord

from gene_screen.core.errors import UnreadableInputFile

logger = logging.getLogger(__name__)

def _open_text(path: Path):
    with path.open('rb') as fh:
        magic = fh.read(2)
    if magic == b'\x1f\x8b':
        return gzip.open(path, 'rt', encoding='utf-8')
    return path.open('r', encoding='utf-8')

def detect_format(first_line: str) -> str:
    """
    Guess the Biopython format name from the first non-blank line.

    :param first_line: First non-blank line of the file.
    :return: 'fasta', 'genbank' or 'embl'.
    """
    if first_line.startswith('>'):
        return 'fasta'
    if first_line.startswith('LOCUS'):
        return 'genbank'
    if first_line.startswith('ID '):
        return 'embl'
    raise ValueError(f"unrecognised sequence format starting with {first_line[:20]!r}")

def read_sequences(seq_path: str) -> List[SeqRecord]:
    """
    Read every record from a query sequence file.

    :param seq_path: Path to the query file.
    :return: List of Biopython SeqRecords with uppercase sequences.
    """
    path = Path(seq_path)
    try:
        with _open_text(path) as fh:
            text = fh.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read sequence file {seq_path}: {e}")
        raise UnreadableInputFile(seq_path, str(e)) from e

    first_line = next((l for l in text.splitlines() if l.strip()), "")
    if not first_line:
        raise UnreadableInputFile(seq_path, "file is empty")
    try:
        fmt = detect_format(first_line)
        records = [r.upper() for r in SeqIO.parse(io.StringIO(text), fmt)]
    except ValueError as e:
        raise UnreadableInputFile(seq_path, str(e)) from e

    if not records:
        raise UnreadableInputFile(seq_path, f"no {fmt} records found")

    logger.debug(f"Read {len(records)} {fmt} records from {seq_path}")
    return records

def to_fasta(records: List[SeqRecord]) -> str:
    """
    Serialise records as FASTA text, id-only headers, one sequence line per record.
    """
    out = io.StringIO()
    SeqIO.write([SeqRecord(r.seq, id=r.id, description="") for r in records], out, "fasta-2line")
    return out.getvalue()

def sequence_lengths(records: List[SeqRecord]) -> Dict[str, int]:
    return {record.id: len(record.seq) for record in records}
