"""Sample-level summary of a merged allele-depth matrix.

Two entry points produce the same table: ``compute_sample_metrics`` from
the counters gathered during a merge, and ``matrix_sample_metrics`` from a
matrix already on disk (reloaded with ``load_matrix``).
"""
from __future__ import annotations

from typing import List, Sequence

import pandas as pd

from .. import config
from ..core.merge import MergeStats

__all__ = [
    "compute_sample_metrics",
    "load_matrix",
    "matrix_sample_metrics",
    "row_occupancy",
]

SUMMARY_COLUMNS = ["Sample", "Records", "MissingDepth", "CalledRate", "MissingRate"]


def _summary_frame(samples: Sequence[str], records: Sequence[int], missing_depth: Sequence[int], total_rows: int) -> pd.DataFrame:
    rows = []
    for s, rec, miss in zip(samples, records, missing_depth):
        tot = total_rows or 1  # guard division by zero
        called = rec - miss
        rows.append({
            "Sample": s,
            "Records": rec,
            "MissingDepth": miss,
            "CalledRate": called / tot,
            "MissingRate": 1.0 - called / tot if total_rows else 0.0,
        })
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def compute_sample_metrics(stats: MergeStats) -> pd.DataFrame:
    """Per-sample summary of a finished merge.

    Columns returned:
        Sample, Records, MissingDepth, CalledRate, MissingRate

    Definitions:
        Records      = rows the sample had a record at
        MissingDepth = of those, rows where no depth could be extracted
        CalledRate   = (Records - MissingDepth) / total rows
    """
    return _summary_frame(stats.samples, stats.records, stats.missing_depth, stats.rows)


def load_matrix(path: str, samples: Sequence[str]) -> pd.DataFrame:
    """Read a matrix written by ``MatrixWriter``.

    Cells are kept as strings (``ref,alt`` pairs are not numbers); the
    missing symbol becomes NA. gzip is detected from the file name.
    """
    columns: List[str] = ["Chrom", "Pos", *samples]
    try:
        df = pd.read_csv(
            path,
            sep=config.DELIMITER,
            header=None,
            dtype=str,
            na_values=[config.MISSING],
            keep_default_na=False,
            compression="infer",
        )
    except pd.errors.EmptyDataError:
        return pd.DataFrame(columns=columns)
    if df.shape[1] != len(columns):
        raise ValueError(
            f"{path}: matrix has {df.shape[1] - 2} sample columns but {len(samples)} samples were given"
        )
    df.columns = columns
    df["Pos"] = pd.to_numeric(df["Pos"], errors="raise").astype("int64")
    return df


def _sample_block(df: pd.DataFrame, samples: Sequence[str]) -> pd.DataFrame:
    # sample columns follow Chrom/Pos in manifest order; select by position
    return df.iloc[:, 2:2 + len(samples)]


def row_occupancy(df: pd.DataFrame, samples: Sequence[str]) -> pd.Series:
    """Number of samples with a value in each row."""
    return _sample_block(df, samples).notna().sum(axis=1)


def matrix_sample_metrics(df: pd.DataFrame, samples: Sequence[str]) -> pd.DataFrame:
    """Per-sample summary computed from a loaded matrix.

    A matrix cannot tell an absent record from a record without usable
    depth, so ``Records`` counts non-missing cells and ``MissingDepth`` is 0.
    """
    present = _sample_block(df, samples).notna().sum(axis=0)
    records = [int(v) for v in present.tolist()]
    return _summary_frame(samples, records, [0] * len(samples), len(df))
