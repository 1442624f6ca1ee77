"""
Reference identifier handling.
Database FASTA headers are expected as database~~~gene~~~accession~~~resistance.
"""

import re
from typing import Tuple

from gene_screen.core.models import BareIdentifier, ComposedIdentifier, Identifier

SEPARATOR = "~~~"

_LEADING_WORD = re.compile(r'^\S+\s+')

def decompose_identifier(sseqid: str) -> Identifier:
    """
    Split a reference identifier on the ~~~ token.

    :param sseqid: The subject sequence id reported by the aligner.
    :return: ComposedIdentifier if the token is present, otherwise BareIdentifier.
    """
    if SEPARATOR not in sseqid:
        return BareIdentifier(gene=sseqid)

    parts = sseqid.split(SEPARATOR)[:4]
    parts += [""] * (4 - len(parts))
    database, gene, accession, resistance = parts
    return ComposedIdentifier(database, gene, accession, resistance)

def resolve_identifier(identifier: Identifier, default_db: str) -> Tuple[str, str, str, str]:
    """
    :return: Tuple (database, gene, accession, resistance).
    """
    if isinstance(identifier, BareIdentifier):
        # unannotated custom databases: name the gene after the whole id
        return default_db, identifier.gene, "", ""
    return identifier.database, identifier.gene, identifier.accession, identifier.resistance

def clean_product(stitle: str, delimiter: str) -> str:
    """
    Make the subject title safe for a delimited report.
    Titles that still carry the ~~~ identifier lose their first word, which
    is the identifier echoed back by the aligner.
    """
    product = stitle.replace(delimiter, "")
    if SEPARATOR in product:
        product = _LEADING_WORD.sub("", product, count=1)
    return product
