"""
BLAST+ invocation for GeneScreen.
Builds blastn/blastx command lines and returns the tabular output lines.
"""

import logging
import shutil
import subprocess
from typing import Dict, List

from gene_screen.config import ScreenConfig
from gene_screen.core.errors import AlignerError
from gene_screen.parsers.blast_parser import blast_outfmt
from gene_screen.registry.databases import NUCL, DatabaseInfo

logger = logging.getLogger(__name__)

REQUIRED_TOOLS = ["blastn", "blastx", "makeblastdb"]

EVALUE = "1E-20"
MAX_TARGET_SEQS = "10000"

def build_blast_command(db: DatabaseInfo, cfg: ScreenConfig) -> List[str]:
    """
    Command line for aligning FASTA on stdin against a database.

    :param db: Target database; its type picks blastn or blastx.
    :param cfg: Run configuration.
    :return: argv list.
    """
    if db.dbtype == NUCL:
        cmd = [
            "blastn", "-task", "blastn", "-dust", "no",
            "-perc_identity", str(cfg.min_identity),
        ]
    else:
        cmd = ["blastx", "-task", "blastx-fast", "-seg", "no"]

    cmd += [
        "-db", str(db.path),
        "-outfmt", blast_outfmt(),
        "-num_threads", str(cfg.threads),
        "-evalue", EVALUE,
        "-culling_limit", "1",
        "-max_target_seqs", MAX_TARGET_SEQS,
    ]
    return cmd

def run_blast(fasta_text: str, db: DatabaseInfo, cfg: ScreenConfig) -> List[str]:
    """
    Run the aligner to completion.

    :param fasta_text: Query sequences as FASTA.
    :return: Output lines of -outfmt 6.
    :raises AlignerError: if the aligner exits non-zero.
    """
    cmd = build_blast_command(db, cfg)
    logger.debug(f"Running: {' '.join(cmd)}")
    try:
        proc = subprocess.run(
            cmd,
            input=fasta_text,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
        )
    except FileNotFoundError as e:
        raise AlignerError(cmd[0], 127, str(e)) from e
    if proc.returncode != 0:
        raise AlignerError(cmd[0], proc.returncode, proc.stderr)
    return proc.stdout.splitlines()

def check_dependencies() -> Dict[str, bool]:
    """
    Which external tools are on PATH.
    """
    found = {}
    for tool in REQUIRED_TOOLS:
        path = shutil.which(tool)
        found[tool] = path is not None
        if path:
            logger.info(f"Found '{tool}' => {path}")
        else:
            logger.error(f"Could not find '{tool}' on PATH")
    return found
