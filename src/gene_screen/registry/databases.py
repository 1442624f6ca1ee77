"""
Database registry for GeneScreen.
Each database lives in <datadir>/<name>/sequences, with the BLAST index
built next to it by makeblastdb.
"""

import datetime
import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List

from Bio import SeqIO

from gene_screen.core.errors import AlignerError, DatabaseNotFound

logger = logging.getLogger(__name__)

SEQUENCES = "sequences"
NUCL = "nucl"
PROT = "prot"

_NUCL_LETTERS = set("ACGTUNRYKMSWBDHV-")

@dataclass
class DatabaseInfo:
    name: str
    path: Path
    dbtype: str
    num_sequences: int
    date: str

def sequences_path(datadir: Path, name: str) -> Path:
    return Path(datadir) / name / SEQUENCES

def detect_dbtype(seq_file: Path) -> str:
    """
    Determine whether a database holds nucleotide or protein sequences.
    Uses the makeblastdb index suffix when present, otherwise the alphabet
    of the first record.

    :param seq_file: Path to the database 'sequences' FASTA.
    :return: 'nucl' or 'prot'.
    """
    if seq_file.with_name(seq_file.name + ".nin").exists():
        return NUCL
    if seq_file.with_name(seq_file.name + ".pin").exists():
        return PROT

    for record in SeqIO.parse(str(seq_file), "fasta"):
        letters = set(str(record.seq).upper())
        return NUCL if letters <= _NUCL_LETTERS else PROT
    return NUCL

def is_indexed(seq_file: Path) -> bool:
    return any(seq_file.with_name(seq_file.name + s).exists() for s in (".nin", ".pin", ".nal", ".pal"))

def get_database(datadir: Path, name: str) -> DatabaseInfo:
    """
    Look up a single database.

    :raises DatabaseNotFound: if the sequences file is missing.
    """
    seq_file = sequences_path(datadir, name)
    if not seq_file.is_file():
        raise DatabaseNotFound(name, str(datadir))
    num = sum(1 for _ in SeqIO.parse(str(seq_file), "fasta"))
    date = datetime.date.fromtimestamp(seq_file.stat().st_mtime).isoformat()
    return DatabaseInfo(name=name, path=seq_file, dbtype=detect_dbtype(seq_file), num_sequences=num, date=date)

def list_databases(datadir: Path) -> List[DatabaseInfo]:
    """
    All databases under datadir, sorted by name.
    """
    datadir = Path(datadir)
    if not datadir.is_dir():
        logger.warning(f"Database directory {datadir} does not exist")
        return []
    names = sorted(p.name for p in datadir.iterdir() if (p / SEQUENCES).is_file())
    return [get_database(datadir, n) for n in names]

def setup_database(db: DatabaseInfo, makeblastdb: str = "makeblastdb"):
    """
    Build the BLAST index for one database in place.
    """
    cmd = [
        makeblastdb, "-hash_index", "-parse_seqids",
        "-in", str(db.path),
        "-out", str(db.path),
        "-title", db.name,
        "-dbtype", db.dbtype,
    ]
    logger.info(f"Formatting {db.name} ({db.dbtype}, {db.num_sequences} sequences)")
    proc = subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True)
    if proc.returncode != 0:
        raise AlignerError(makeblastdb, proc.returncode, proc.stderr)
