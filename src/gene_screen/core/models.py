"""
Data models for GeneScreen.
Defines the normalized alignment record, the accepted GeneHit row,
the tagged reference identifier and the summary matrix.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Set, Tuple, Union

class Strand(Enum):
    """
    Enum representing the reference strand reported by the aligner.
    """
    PLUS = "plus"
    MINUS = "minus"

    @classmethod
    def from_blast(cls, value: str) -> "Strand":
        # blastx reports N/A; anything but an explicit minus reads as plus
        return cls.MINUS if value.strip() == "minus" else cls.PLUS

    @property
    def symbol(self) -> str:
        return "-" if self is Strand.MINUS else "+"

@dataclass
class AlignmentRecord:
    """
    One row of aligner output after strand normalization.
    """
    qseqid: str
    qstart: int
    qend: int
    qlen: int
    sseqid: str
    sstart: int
    send: int
    slen: int
    sstrand: Strand
    evalue: float
    length: int
    pident: float
    gaps: int
    gapopen: int
    stitle: str = ""

    @property
    def key(self) -> Tuple[str, int, int]:
        return self.qseqid, self.qstart, self.qend

@dataclass(frozen=True)
class ComposedIdentifier:
    """
    A reference identifier in the database~~~gene~~~accession~~~resistance form.
    Any field may be empty.
    """
    database: str
    gene: str
    accession: str = ""
    resistance: str = ""

@dataclass(frozen=True)
class BareIdentifier:
    """
    A reference identifier with no ~~~ structure; the whole string is the gene name.
    """
    gene: str

Identifier = Union[ComposedIdentifier, BareIdentifier]

@dataclass
class GeneHit:
    """
    Data class representing an accepted, enriched alignment ready for the report.
    """
    file: str
    sequence: str
    start: int
    end: int
    strand: str
    gene: str
    coverage: str
    coverage_map: str
    gaps: str
    percent_coverage: float
    percent_identity: float
    database: str
    accession: str = ""
    product: str = ""
    resistance: str = ""

    def as_row(self) -> List[str]:
        return [
            self.file,
            self.sequence,
            str(self.start),
            str(self.end),
            self.strand,
            self.gene,
            self.coverage,
            self.coverage_map,
            self.gaps,
            f"{self.percent_coverage:.2f}",
            f"{self.percent_identity:.2f}",
            self.database,
            self.accession,
            self.product,
            self.resistance,
        ]

@dataclass
class SummaryMatrix:
    """
    Gene presence matrix across report keys.
    Values are the %COVERAGE strings of every occurrence of a gene under a key.
    """
    genes: Set[str] = field(default_factory=set)
    data: Dict[str, Dict[str, List[str]]] = field(default_factory=dict)

    def add_key(self, key: str):
        self.data.setdefault(key, {})

    def add(self, key: str, gene: str, coverage: str):
        self.genes.add(gene)
        self.data.setdefault(key, {}).setdefault(gene, []).append(coverage)

    def sorted_genes(self) -> List[str]:
        return sorted(self.genes)

    def sorted_keys(self) -> List[str]:
        return sorted(self.data)

    def num_found(self, key: str) -> int:
        return len(self.data.get(key, {}))
