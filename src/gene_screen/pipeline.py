"""
Screening pipeline for GeneScreen.
Runs the aligner on each input file and turns its output into report rows.
"""

import logging
from typing import Iterable, List, Sequence, TextIO

from gene_screen.config import ScreenConfig
from gene_screen.core.errors import DatabaseNotFound
from gene_screen.core.filtering import HitFilter
from gene_screen.core.models import AlignmentRecord, GeneHit
from gene_screen.parsers.blast_parser import parse_blast_rows
from gene_screen.parsers.sequence_parser import read_sequences, sequence_lengths, to_fasta
from gene_screen.registry.databases import NUCL, DatabaseInfo, get_database, is_indexed
from gene_screen.runners.blast_runner import run_blast
from gene_screen.visualization.report_generator import HitTableWriter, build_hit, file_label

logger = logging.getLogger(__name__)

def _identity_filter(records: Iterable[AlignmentRecord], min_identity: float) -> Iterable[AlignmentRecord]:
    # blastx has no -perc_identity, so protein hits are cut here
    for record in records:
        if record.pident >= min_identity:
            yield record

def screen_alignments(
    lines: Iterable[str],
    path: str,
    cfg: ScreenConfig,
    *,
    dbtype: str = NUCL,
) -> List[GeneHit]:
    """
    Turn the aligner output for one input file into report rows.

    A fresh HitFilter is used per file, so deduplication never crosses files.
    """
    records = parse_blast_rows(lines, path)
    if dbtype != NUCL:
        records = _identity_filter(records, cfg.min_identity)

    accepted = HitFilter(cfg.min_coverage).filter(records)
    label = file_label(path, cfg.output.nopath)
    hits = [build_hit(record, cov, label, cfg) for record, cov in accepted]

    logger.info(f"Found {len(hits)} genes in {path}")
    return hits

def screen_file(path: str, db: DatabaseInfo, cfg: ScreenConfig) -> List[GeneHit]:
    records = read_sequences(path)
    lengths = sequence_lengths(records)
    logger.info(f"Processing: {path} ({len(lengths)} sequences, {sum(lengths.values())} bp)")
    lines = run_blast(to_fasta(records), db, cfg)
    return screen_alignments(lines, path, cfg, dbtype=db.dbtype)

def run_screen(paths: Sequence[str], cfg: ScreenConfig, out: TextIO) -> int:
    db = get_database(cfg.datadir, cfg.db)
    if not is_indexed(db.path):
        raise DatabaseNotFound(cfg.db, str(cfg.datadir))
    logger.info(f"Using {db.dbtype} database {db.name}: {db.num_sequences} sequences - {db.date}")

    writer = HitTableWriter(out, cfg.output)
    writer.write_header()
    total = 0
    for path in paths:
        total += writer.write_hits(screen_file(path, db, cfg))

    logger.info(f"Done. Found {total} hits in {len(paths)} files")
    return total
