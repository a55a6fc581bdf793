"""vcf_admatrix – allele-depth matrices from single-sample VCFs.

Subpackages:
	io      – single-sample VCF sources, manifest loading, matrix writers
	core    – chromosome ordering, allele-depth extraction, k-way merge
	metrics – per-sample summary of a merge or of a matrix on disk
	plot    – QC visualisations of the merged matrix

The merge itself is available as::

	from vcf_admatrix.core import run_merge
"""

from importlib import import_module as _imp

# Re-export the lightweight namespaces; ``plot`` pulls in matplotlib and is
# imported on demand.
io = _imp("vcf_admatrix.io")  # noqa: E305
core = _imp("vcf_admatrix.core")

__version__ = "0.1.0"
__all__ = ["io", "core", "__version__"]
