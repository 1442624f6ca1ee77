"""
Main entry point for the GeneScreen command-line tool.
Screens contigs against a gene database and prints a hit table, or merges
existing hit tables into a presence/absence summary.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from gene_screen.config import DEFAULT_DB, OutputConfig, ScreenConfig, default_datadir
from gene_screen.core.errors import ScreenError, UnreadableInputFile
from gene_screen.core.summary import summarize_reports
from gene_screen.pipeline import run_screen
from gene_screen.registry.databases import list_databases, setup_database
from gene_screen.runners.blast_runner import check_dependencies
from gene_screen.utils.logging import setup_logging
from gene_screen.visualization.report_generator import write_summary

logger = logging.getLogger(__name__)

def build_argparser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="GeneScreen: mass screening of contigs for antimicrobial resistance and virulence genes.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    parser.add_argument("files", nargs="*", help="Contig files (FASTA/GenBank/EMBL, may be gzipped), or reports with --summary")

    # Modes
    parser.add_argument("--summary", action="store_true", help="Summarise multiple report files into a presence matrix")
    parser.add_argument("--list", action="store_true", help="List included databases")
    parser.add_argument("--check", action="store_true", help="Check external dependencies are installed")
    parser.add_argument("--setupdb", action="store_true", help="Format all the BLAST databases")

    # Database
    parser.add_argument("--db", default=DEFAULT_DB, help="Database to use")
    parser.add_argument("--datadir", type=Path, default=default_datadir(), help="Databases folder")

    # Thresholds
    parser.add_argument("--minid", type=float, default=80.0, help="Minimum DNA %%identity")
    parser.add_argument("--mincov", type=float, default=80.0, help="Minimum DNA %%coverage")
    parser.add_argument("--threads", type=int, default=1, help="Use this many BLAST+ threads")

    # Output
    parser.add_argument("--fofn", type=Path, help="Run on files listed in this file (one per line)")
    parser.add_argument("--csv", action="store_true", help="Output CSV instead of TSV")
    parser.add_argument("--noheader", action="store_true", help="Suppress column header row")
    parser.add_argument("--nopath", action="store_true", help="Strip filename paths from FILE column")
    parser.add_argument("--broken-map", action="store_true", help="Split the coverage map of gapped hits in two")

    # Logging
    parser.add_argument("--quiet", action="store_true", help="Only print warnings and errors to stderr")
    parser.add_argument("--debug", action="store_true", help="Verbose debug output")
    parser.add_argument("--log-file", type=Path, help="Also write a DEBUG log to this file")
    return parser

def read_fofn(fofn: Path) -> List[str]:
    """
    Read a file of filenames, ignoring blank lines and # comments.
    """
    try:
        with open(fofn, 'r', encoding='utf-8') as f:
            return [line.strip() for line in f if line.strip() and not line.startswith("#")]
    except OSError as e:
        raise UnreadableInputFile(str(fofn), str(e)) from e

def config_from_args(args: argparse.Namespace) -> ScreenConfig:
    output = OutputConfig(
        delimiter="," if args.csv else "\t",
        header=not args.noheader,
        nopath=args.nopath,
    )
    return ScreenConfig(
        db=args.db,
        datadir=args.datadir,
        min_identity=args.minid,
        min_coverage=args.mincov,
        threads=args.threads,
        broken_map_on_gaps=args.broken_map,
        output=output,
    )

def print_databases(cfg: ScreenConfig):
    sep = cfg.output.delimiter
    print(sep.join(["DATABASE", "SEQUENCES", "DBTYPE", "DATE"]))
    for db in list_databases(cfg.datadir):
        print(sep.join([db.name, str(db.num_sequences), db.dbtype, db.date]))

def main(argv: Optional[List[str]] = None):
    parser = build_argparser()
    args = parser.parse_args(argv)

    setup_logging(args.log_file, quiet=args.quiet, debug=args.debug)
    cfg = config_from_args(args)

    files = list(args.files)
    try:
        if args.fofn:
            files += read_fofn(args.fofn)

        if args.check:
            found = check_dependencies()
            if not all(found.values()):
                sys.exit(1)
            logger.info("All dependencies found")
            return

        if args.list:
            print_databases(cfg)
            return

        if args.setupdb:
            for db in list_databases(cfg.datadir):
                setup_database(db)
            return

        if not files:
            parser.error("Please provide some files to process")

        if args.summary:
            matrix = summarize_reports(files, cfg.output.delimiter)
            write_summary(sys.stdout, matrix, cfg.output)
        else:
            logger.info(f"Using minid={cfg.min_identity} mincov={cfg.min_coverage} db={cfg.db}")
            run_screen(files, cfg, sys.stdout)
    except ScreenError as e:
        logger.error(f"Critical failure: {e}")
        sys.exit(1)

if __name__ == "__main__":
    main()
