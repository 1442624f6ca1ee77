"""
Report generation module for GeneScreen.
Builds GeneHit rows from accepted alignments and renders the hit table
and the summary matrix as delimited text.
"""

import logging
import os
from typing import List, TextIO

import pandas as pd

from gene_screen.config import OutputConfig, ScreenConfig
from gene_screen.core.identifiers import clean_product, decompose_identifier, resolve_identifier
from gene_screen.core.models import AlignmentRecord, GeneHit, SummaryMatrix
from gene_screen.visualization.coverage_map import render_coverage_map

logger = logging.getLogger(__name__)

HEADER: List[str] = [
    'FILE', 'SEQUENCE', 'START', 'END', 'STRAND', 'GENE', 'COVERAGE',
    'COVERAGE_MAP', 'GAPS', '%COVERAGE', '%IDENTITY', 'DATABASE',
    'ACCESSION', 'PRODUCT', 'RESISTANCE'
]

ABSENT = "."
COVERAGE_JOIN = ";"

def file_label(path: str, nopath: bool) -> str:
    return os.path.basename(path) if nopath else path

def build_hit(record: AlignmentRecord, coverage: float, label: str, config: ScreenConfig) -> GeneHit:
    """
    Enrich an accepted alignment into a report row.

    :param record: Accepted AlignmentRecord.
    :param coverage: Its percent coverage as computed by the filter.
    :param label: File identifier to print in the FILE column.
    :param config: Run configuration (default database, delimiter, map mode).
    :return: A GeneHit.
    """
    database, gene, accession, resistance = resolve_identifier(
        decompose_identifier(record.sseqid), config.db
    )
    broken = config.broken_map_on_gaps and record.gapopen > 0
    return GeneHit(
        file=label,
        sequence=record.qseqid,
        start=record.qstart,
        end=record.qend,
        strand=record.sstrand.symbol,
        gene=gene,
        coverage=f"{record.sstart}-{record.send}/{record.slen}",
        coverage_map=render_coverage_map(record.sstart, record.send, record.slen, broken=broken),
        gaps=f"{record.gapopen}/{record.gaps}",
        percent_coverage=coverage,
        percent_identity=record.pident,
        database=database,
        accession=accession,
        product=clean_product(record.stitle, config.output.delimiter),
        resistance=resistance,
    )

def build_hit_table(hits: List[GeneHit]) -> pd.DataFrame:
    """
    Tabulate hits in HEADER column order, sorted by sequence id then query start.

    :param hits: GeneHits for one input file.
    :return: DataFrame of string cells plus a numeric sort column dropped before return.
    """
    df = pd.DataFrame([h.as_row() for h in hits], columns=HEADER, dtype=object)
    if df.empty:
        return df
    df['_start'] = [h.start for h in hits]
    df = df.sort_values(by=['SEQUENCE', '_start'], ascending=[True, True], kind='mergesort')
    return df.drop(columns='_start').reset_index(drop=True)

class HitTableWriter:
    """
    Writes the hit table for a whole run: the header once, then each file's rows.
    """

    def __init__(self, stream: TextIO, output: OutputConfig):
        self.stream = stream
        self.output = output
        self.header_written = False

    def _write_line(self, fields: List[str]):
        self.stream.write(self.output.delimiter.join(fields) + "\n")

    def write_header(self):
        if self.header_written or not self.output.header:
            return
        self._write_line(['#' + HEADER[0]] + HEADER[1:])
        self.header_written = True

    def write_hits(self, hits: List[GeneHit]) -> int:
        self.write_header()
        table = build_hit_table(hits)
        for row in table.itertuples(index=False):
            self._write_line([str(v) for v in row])
        return len(table)

def build_summary_frame(matrix: SummaryMatrix, nopath: bool = False) -> pd.DataFrame:
    """
    Lay out the summary matrix: one row per report key, one column per gene.

    :param matrix: A finished SummaryMatrix.
    :param nopath: Print basenames of the report keys.
    :return: DataFrame with columns #FILE, NUM_FOUND and the sorted genes.
    """
    genes = matrix.sorted_genes()
    rows = []
    for key in matrix.sorted_keys():
        found = matrix.data[key]
        row = [file_label(key, nopath), str(matrix.num_found(key))]
        row += [COVERAGE_JOIN.join(found[g]) if g in found else ABSENT for g in genes]
        rows.append(row)
    return pd.DataFrame(rows, columns=['#FILE', 'NUM_FOUND'] + genes, dtype=object)

def write_summary(stream: TextIO, matrix: SummaryMatrix, output: OutputConfig):
    df = build_summary_frame(matrix, output.nopath)
    if output.header:
        stream.write(output.delimiter.join(df.columns) + "\n")
    for row in df.itertuples(index=False):
        stream.write(output.delimiter.join(str(v) for v in row) + "\n")
    logger.info(f"Summarised {len(df)} report keys over {len(df.columns) - 2} genes")
