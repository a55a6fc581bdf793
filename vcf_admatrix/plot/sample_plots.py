"""Per-sample and per-row QC plots for a merged matrix.

Contains implementations for:
 - called rate per sample (multi-panel bar)
 - row occupancy distribution (samples with a value per row)

All functions follow the convention of returning a ``matplotlib.figure.Figure``
when ``output_path`` is not provided; otherwise they save and return ``None``.
"""

from __future__ import annotations

from math import ceil
from typing import Mapping, Optional, Union

import pandas as pd
import seaborn as sns
import matplotlib.pyplot as plt

from .base import set_plot_style, save_figure

__all__ = [
	"plot_called_rate_per_sample",
	"plot_row_occupancy_distribution",
]


def _called_rate_frame(rates: Union[Mapping[str, float], pd.DataFrame]) -> pd.DataFrame:
	"""Sample/CalledRate frame from a summary table or a {sample: rate} map."""
	if isinstance(rates, pd.DataFrame):
		missing = {"Sample", "CalledRate"} - set(rates.columns)
		if missing:
			raise ValueError(f"summary table lacks column(s): {', '.join(sorted(missing))}")
		return rates[["Sample", "CalledRate"]].copy()
	return pd.DataFrame({"Sample": list(rates.keys()), "CalledRate": list(rates.values())})


def _panel_bar_plot(
	df: pd.DataFrame,
	value_col: str,
	title: str,
	ylabel: str,
	*,
	samples_per_panel: int = 100,
	base_color: str = "#4477AA",
	output_path: Optional[str] = None,
	rotation: int = 45,
) -> Optional[plt.Figure]:
	"""Multi-panel bar plot for a per-sample rate in [0, 1].

	Each panel keeps identical height; the final panel is padded with
	blank samples for width consistency.
	"""
	set_plot_style()
	n = len(df)
	panels = ceil(n / samples_per_panel) if n else 1
	fig_width = max(10, min(18, samples_per_panel * 0.18))
	fig, axes = plt.subplots(panels, 1, figsize=(fig_width, panels * 5), sharey=True)
	if panels == 1:
		axes = [axes]  # type: ignore

	for pi in range(panels):
		sub = df.iloc[pi * samples_per_panel:(pi + 1) * samples_per_panel].copy()
		pad_needed = samples_per_panel - len(sub) if panels > 1 else 0
		if pad_needed > 0:
			# distinct blank labels so padded bars do not collapse into one
			sub = pd.concat([
				sub,
				pd.DataFrame({
					"Sample": [" " * (i + 1) for i in range(pad_needed)],
					value_col: [0.0] * pad_needed,
				})
			], ignore_index=True)
		ax = axes[pi]
		if len(sub):
			sns.barplot(data=sub, x="Sample", y=value_col, ax=ax, color=base_color)
		ax.set_xlabel("Sample")
		if pi == 0:
			ax.set_title(title)
		ax.set_ylabel(ylabel if pi == 0 else "")
		for label in ax.get_xticklabels():
			label.set_rotation(rotation)
			label.set_ha("right")
		ax.set_ylim(0, 1)
		ax.set_yticks([0.0, 0.25, 0.5, 0.75, 1.0])
		sns.despine(ax=ax)
	fig.tight_layout(h_pad=0.5)
	return save_figure(fig, output_path)


def plot_called_rate_per_sample(
	called_rates: Union[Mapping[str, float], pd.DataFrame],
	*,
	output_path: Optional[str] = None,
	title: str = "Called rate per sample",
	base_color: str = "#4477AA",
	samples_per_panel: int = 100,
) -> Optional[plt.Figure]:
	"""Fraction of matrix rows with a value, per sample (fixed y 0..1)."""
	df = _called_rate_frame(called_rates)
	df = df.sort_values("CalledRate", ascending=True).reset_index(drop=True)
	return _panel_bar_plot(
		df,
		"CalledRate",
		title,
		"Called rate",
		samples_per_panel=samples_per_panel,
		base_color=base_color,
		output_path=output_path,
	)


def plot_row_occupancy_distribution(
	occupancy_counts: Mapping[int, int],
	n_samples: int,
	*,
	output_path: Optional[str] = None,
	title: str = "Samples with a value per matrix row",
	base_color: str = "#4477AA",
) -> Optional[plt.Figure]:
	"""Bar plot of row counts by number of samples sharing the position.

	``occupancy_counts`` maps samples-with-value (1..n_samples) to the
	number of rows; missing keys are drawn as zero.
	"""
	set_plot_style()
	df = pd.DataFrame({
		"Samples": list(range(1, n_samples + 1)),
		"Rows": [int(occupancy_counts.get(k, 0)) for k in range(1, n_samples + 1)],
	})
	total = int(df["Rows"].sum())
	fig, ax = plt.subplots(figsize=(max(6, min(18, n_samples * 0.4)), 5))
	if n_samples:
		sns.barplot(data=df, x="Samples", y="Rows", ax=ax, color=base_color)
	ax.set_title(f"{title}\n(rows={total:,})")
	ax.set_xlabel("Samples with value")
	ax.set_ylabel("Rows")
	sns.despine(ax=ax)
	fig.tight_layout()
	return save_figure(fig, output_path)
