"""
Configuration objects for GeneScreen.
Default database, data directory, hit thresholds and report formatting.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_DB = "ncbi"
DATADIR_ENV = "GENE_SCREEN_DATADIR"

def default_datadir() -> Path:
    return Path(os.environ.get(DATADIR_ENV, "db")).expanduser()

@dataclass(frozen=True)
class OutputConfig:
    delimiter: str = "\t"
    header: bool = True
    nopath: bool = False       # print basenames instead of full paths

@dataclass(frozen=True)
class ScreenConfig:
    db: str = DEFAULT_DB
    datadir: Path = field(default_factory=default_datadir)

    # hit thresholds (percent)
    min_identity: float = 80.0
    min_coverage: float = 80.0

    threads: int = 1

    # render gapped hits as a two-part coverage map
    broken_map_on_gaps: bool = False

    output: OutputConfig = field(default_factory=OutputConfig)
