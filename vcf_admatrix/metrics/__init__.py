"""Metric computation subpackage."""

from .sample_metrics import compute_sample_metrics, load_matrix, matrix_sample_metrics, row_occupancy  # noqa: F401

__all__ = ["compute_sample_metrics", "load_matrix", "matrix_sample_metrics", "row_occupancy"]
