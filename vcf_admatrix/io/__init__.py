"""I/O subpackage.

Exposes the streaming single-sample VCF sources that feed the merge, the
manifest loader and the matrix writers.
"""

from .vcf_reader import Record, RecordSource, open_source, open_sources  # noqa: F401
from .manifest import read_manifest, sample_names  # noqa: F401
from .matrix_writer import MatrixWriter, open_matrix  # noqa: F401

__all__ = [
	"Record",
	"RecordSource",
	"open_source",
	"open_sources",
	"read_manifest",
	"sample_names",
	"MatrixWriter",
	"open_matrix",
]
