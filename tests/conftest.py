import logging
import pytest
from gene_screen.visualization.report_generator import HEADER

@pytest.fixture(autouse=True)
def restore_root_logger():
    # main() replaces the root handlers; put them back for the next test
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)

def blast_line(qseqid='contig1', qstart=1, qend=861, qlen=5000,
               sseqid='ncbi~~~blaTEM~~~ACC123~~~', sstart=1, send=861, slen=861,
               sstrand='plus', evalue='1e-100', length=861, pident='100.000',
               gaps=0, gapopen=0, stitle='ncbi~~~blaTEM~~~ACC123~~~ class A beta-lactamase TEM'):
    fields = [qseqid, qstart, qend, qlen, sseqid, sstart, send, slen, sstrand,
              evalue, length, pident, gaps, gapopen, stitle]
    return "\t".join(str(f) for f in fields) + "\n"

def write_report(path, rows, sep="\t"):
    """
    Write a hit table with the standard header; rows are (file, gene, coverage) tuples.
    """
    lines = [sep.join(['#' + HEADER[0]] + HEADER[1:])]
    for i, (fname, gene, cov) in enumerate(rows, start=1):
        lines.append(sep.join([
            fname, f'contig{i}', '1', '100', '+', gene, '1-100/100', '===============',
            '0/0', cov, '100.00', 'ncbi', 'ACC', 'product', ''
        ]))
    path.write_text("\n".join(lines) + "\n", encoding='utf-8')
    return str(path)
