"""Merge core: key ordering, allele-depth extraction and the k-way merge."""

from .chrom_order import KeyComparator, NATURAL, LEXICAL, get_comparator, natural_chrom_key  # noqa: F401
from .extract import ExtractionRule, RULES, extract, extract_value, get_rule, get_rules  # noqa: F401
from .merge import MergeEngine, MergeResult, MergeStats, Row, run_merge  # noqa: F401

__all__ = [
    "KeyComparator",
    "NATURAL",
    "LEXICAL",
    "get_comparator",
    "natural_chrom_key",
    "ExtractionRule",
    "RULES",
    "extract",
    "extract_value",
    "get_rule",
    "get_rules",
    "MergeEngine",
    "MergeResult",
    "MergeStats",
    "Row",
    "run_merge",
]
