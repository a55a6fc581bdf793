"""Configuration constants and settings for vcf_admatrix."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

# Matrix layout
MISSING = "."
DELIMITER = "\t"

DEFAULT_RULES: Tuple[str, ...] = ("ref", "ref_alt")
DEFAULT_CHROM_ORDER = "natural"

# sysexits(3) values, as used by the legacy ad-matrix tool
EX_OK = 0
EX_USAGE = 64
EX_DATAERR = 65
EX_UNAVAILABLE = 69
EX_SOFTWARE = 70
EX_IOERR = 74
EX_INTERRUPTED = 130

# Adaptive progress display: (rows_up_to, interval)
PROGRESS_SCHEDULE: Tuple[Tuple[int, int], ...] = (
    (10_000, 1_000),
    (100_000, 10_000),
)
PROGRESS_FALLBACK_INTERVAL = 50_000


@dataclass
class MergeConfig:
    """Options for one ``build`` run, as collected by the CLI."""

    manifest: Path
    output_prefix: str
    rules: Tuple[str, ...] = DEFAULT_RULES
    chrom_order: str = DEFAULT_CHROM_ORDER
    compress: bool = False
    summary: bool = False
    plot_dir: Optional[Path] = None
    delimiter: str = field(default=DELIMITER)
    missing: str = field(default=MISSING)

    def matrix_path(self, rule: str) -> str:
        suffix = ".tsv.gz" if self.compress else ".tsv"
        return f"{self.output_prefix}.{rule}{suffix}"

    def summary_path(self) -> str:
        return f"{self.output_prefix}.summary.tsv"
