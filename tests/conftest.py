import pysam
import pytest

REFERENCES = (("chr1", 1000), ("chr2", 500))


def make_header(read_groups=(), sort_order="coordinate", references=REFERENCES,
                sub_sort=None):
    header = {
        "HD": {"VN": "1.6", "SO": sort_order},
        "SQ": [{"SN": name, "LN": length} for name, length in references],
    }
    if sub_sort:
        header["HD"]["SS"] = sub_sort
    if read_groups:
        header["RG"] = [{"ID": rg, "SM": sm} for rg, sm in read_groups]
    return header


def write_bam(path, reads, read_groups=(), sort_order="coordinate",
              references=REFERENCES, index=True, sub_sort=None):
    """Write (name, contig, pos) reads as 10M alignments; contig None = unmapped."""
    header = make_header(read_groups, sort_order, references, sub_sort)
    with pysam.AlignmentFile(str(path), "wb", header=header) as out:
        for name, contig, pos in reads:
            a = pysam.AlignedSegment(out.header)
            a.query_name = name
            a.query_sequence = "ACGTACGTAC"
            a.query_qualities = pysam.qualitystring_to_array("IIIIIIIIII")
            if contig is None:
                a.flag = 4
                a.reference_id = -1
                a.reference_start = -1
            else:
                a.flag = 0
                a.reference_name = contig
                a.reference_start = pos
                a.mapping_quality = 60
                a.cigarstring = "10M"
            out.write(a)
    if index and sort_order == "coordinate":
        pysam.index(str(path))
    return str(path)


def read_bam(path):
    """Return (header dict, [(name, contig, pos, RG)]) of a BAM."""
    with pysam.AlignmentFile(str(path), "rb", check_sq=False) as f:
        header = f.header.to_dict()
        reads = [
            (r.query_name, r.reference_name, r.reference_start,
             r.get_tag("RG") if r.has_tag("RG") else None)
            for r in f.fetch(until_eof=True)
        ]
    return header, reads


@pytest.fixture
def bam_pair(tmp_path):
    """Two indexed, coordinate-sorted BAMs over the same references."""
    a = write_bam(
        tmp_path / "a.bam",
        [("a1", "chr1", 10), ("a2", "chr1", 100), ("a3", "chr2", 50),
         ("a4", None, -1)],
        read_groups=[("old", "oldsample")],
    )
    b = write_bam(
        tmp_path / "b.bam",
        [("b1", "chr1", 50), ("b2", "chr1", 300), ("b3", "chr2", 20)],
    )
    return a, b
