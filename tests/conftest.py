import gzip
import io

import pytest

from vcf_admatrix.io import RecordSource

HEADER = (
    "##fileformat=VCFv4.2\n"
    "##FORMAT=<ID=AD,Number=R,Type=Integer,Description=\"Allelic depths\">\n"
    "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\tFORMAT\tSAMPLE\n"
)


def vcf_text(calls, fmt="GT:AD:DP", header=True):
    """Build a single-sample VCF from (chrom, pos, sample_field) tuples."""
    lines = [HEADER] if header else []
    for chrom, pos, sample in calls:
        lines.append(f"{chrom}\t{pos}\t.\tA\tG\t50\tPASS\t.\t{fmt}\t{sample}\n")
    return "".join(lines)


def make_source(calls, name="sample", **kwargs):
    return RecordSource.open(io.StringIO(vcf_text(calls, **kwargs)), name)


@pytest.fixture
def source_factory():
    return make_source


@pytest.fixture
def write_vcf(tmp_path):
    """Write a (optionally gzipped) single-sample VCF and return its path."""
    def _write(name, calls, compress=False, **kwargs):
        path = tmp_path / name
        text = vcf_text(calls, **kwargs)
        if compress:
            with gzip.open(path, "wt") as fh:
                fh.write(text)
        else:
            path.write_text(text)
        return path
    return _write
