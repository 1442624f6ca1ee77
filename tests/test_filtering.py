import pytest
from conftest import blast_line
from gene_screen.config import OutputConfig, ScreenConfig
from gene_screen.core.errors import MalformedAlignmentRow
from gene_screen.core.filtering import HitFilter, percent_coverage
from gene_screen.parsers.blast_parser import parse_blast_rows, normalize_row
from gene_screen.pipeline import screen_alignments
from gene_screen.registry.databases import PROT

def records(*lines):
    return list(parse_blast_rows(lines, 'sample.fa'))

def test_percent_coverage():
    rec = normalize_row(blast_line(length=30, gaps=0, slen=861).rstrip('\n').split('\t'), 'x')
    assert round(percent_coverage(rec), 2) == 3.48

    # gap bases reduce coverage
    rec = normalize_row(blast_line(length=100, gaps=10, slen=200).rstrip('\n').split('\t'), 'x')
    assert percent_coverage(rec) == 45.0

def test_coverage_is_not_clamped():
    rec = normalize_row(blast_line(length=300, gaps=0, slen=200).rstrip('\n').split('\t'), 'x')
    assert percent_coverage(rec) == 150.0
    assert HitFilter(min_coverage=80).filter([rec])[0][1] == 150.0

def test_coverage_threshold_is_inclusive():
    # 160 / 200 = exactly 80%
    recs = records(blast_line(length=160, slen=200))
    assert len(HitFilter(min_coverage=80).filter(recs)) == 1
    assert len(HitFilter(min_coverage=80.01).filter(recs)) == 0

def test_coverage_filter_is_monotone():
    recs = records(
        blast_line(qstart=1, qend=100, length=100, slen=200),
        blast_line(qstart=200, qend=400, length=190, slen=200),
        blast_line(qstart=500, qend=600, length=20, slen=200),
    )
    accepted_at = {t: {r.key for r, _ in HitFilter(t).filter(recs)} for t in (0, 10, 50, 90, 100)}
    thresholds = sorted(accepted_at)
    for low, high in zip(thresholds, thresholds[1:]):
        assert accepted_at[high] <= accepted_at[low]

def test_first_seen_wins():
    recs = records(
        blast_line(sseqid='ncbi~~~geneA~~~A1~~~', pident='90.000'),
        blast_line(sseqid='ncbi~~~geneB~~~B1~~~', pident='100.000'),
        blast_line(sseqid='ncbi~~~geneC~~~C1~~~', pident='99.000'),
    )
    accepted = HitFilter(min_coverage=80).filter(recs)
    assert len(accepted) == 1
    assert accepted[0][0].sseqid == 'ncbi~~~geneA~~~A1~~~'

def test_rejected_record_does_not_claim_key():
    # the first alignment is below threshold so the second one for the same span survives
    recs = records(
        blast_line(sseqid='ncbi~~~short~~~S1~~~', length=10, slen=861),
        blast_line(sseqid='ncbi~~~full~~~F1~~~'),
    )
    f = HitFilter(min_coverage=80)
    accepted = f.filter(recs)
    assert [r.sseqid for r, _ in accepted] == ['ncbi~~~full~~~F1~~~']
    assert f.rejected_coverage == 1
    assert f.rejected_duplicate == 0

def test_dedup_key_uses_query_span():
    recs = records(
        blast_line(qseqid='contig1', qstart=1, qend=861),
        blast_line(qseqid='contig1', qstart=2, qend=861),
        blast_line(qseqid='contig2', qstart=1, qend=861),
    )
    assert len(HitFilter(min_coverage=80).filter(recs)) == 3

def test_screen_alignments_end_to_end():
    cfg = ScreenConfig(db='custom', min_coverage=1.0, output=OutputConfig(nopath=True))
    line = blast_line(qseqid='contig1', qstart=100, qend=130, sstart=35, send=5, slen=861,
                      sstrand='minus', length=30, pident='99.50', gaps=0, gapopen=0)
    hits = screen_alignments([line], '/data/sample.fa', cfg)

    assert len(hits) == 1
    hit = hits[0]
    assert hit.as_row() == [
        'sample.fa', 'contig1', '100', '130', '-', 'blaTEM', '5-35/861', '=..............',
        '0/0', '3.48', '99.50', 'ncbi', 'ACC123', 'class A beta-lactamase TEM', ''
    ]

def test_screen_alignments_minus_strand_ascending_input():
    cfg = ScreenConfig(min_coverage=1.0)
    line = blast_line(qseqid='contig1', qstart=100, qend=130, sstart=5, send=35, slen=861,
                      sstrand='minus', length=30, pident='99.50', gaps=0, gapopen=0)
    rec = normalize_row(line.rstrip('\n').split('\t'), 'sample.fa')
    assert rec.sstart <= rec.send
    assert (rec.sstart, rec.send) == (5, 35)

    hit = screen_alignments([line], 'sample.fa', cfg)[0]
    assert hit.coverage == '5-35/861'
    assert hit.strand == '-'
    assert (hit.gene, hit.accession, hit.database) == ('blaTEM', 'ACC123', 'ncbi')
    assert f"{hit.percent_coverage:.2f}" == '3.48'

def test_screen_alignments_zero_reference_length():
    with pytest.raises(MalformedAlignmentRow) as exc:
        screen_alignments([blast_line(slen=0)], 'a.fa', ScreenConfig())
    assert 'a.fa' in str(exc.value)

def test_screen_alignments_below_mincov():
    cfg = ScreenConfig(min_coverage=80.0)
    line = blast_line(sstart=35, send=5, sstrand='minus', length=30)
    assert screen_alignments([line], 'sample.fa', cfg) == []

def test_each_file_gets_its_own_dedup_set():
    cfg = ScreenConfig()
    line = blast_line()
    assert len(screen_alignments([line], 'a.fa', cfg)) == 1
    assert len(screen_alignments([line], 'b.fa', cfg)) == 1

def test_protein_hits_filtered_on_identity():
    cfg = ScreenConfig(min_identity=90.0)
    lines = [
        blast_line(qstart=1, qend=100, sstrand='N/A', pident='85.000'),
        blast_line(qstart=200, qend=300, sstrand='N/A', pident='95.000'),
    ]
    hits = screen_alignments(lines, 'a.fa', cfg, dbtype=PROT)
    assert [h.start for h in hits] == [200]
    assert hits[0].strand == '+'

    # nucleotide output is trusted to be filtered by the aligner
    assert len(screen_alignments(lines, 'a.fa', cfg)) == 2

def test_fallback_gene_name_uses_selected_db():
    cfg = ScreenConfig(db='mydb')
    hits = screen_alignments([blast_line(sseqid='myGene_1', stitle='myGene_1 some product')], 'a.fa', cfg)
    assert hits[0].gene == 'myGene_1'
    assert hits[0].database == 'mydb'
    assert hits[0].accession == ''
    assert hits[0].product == 'myGene_1 some product'
