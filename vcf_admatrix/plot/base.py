"""Figure style and output shared by the matrix QC plots.

Plot helpers return a matplotlib Figure when no ``output_path`` is given;
otherwise the figure is written, closed and ``None`` is returned, so batch
runs do not pile up open figures.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

import matplotlib.pyplot as plt
import seaborn as sns

__all__ = [
	"set_plot_style",
	"save_figure",
]

_STYLE_RC = {
	"axes.titlesize": 13,
	"axes.labelsize": 11,
	"font.size": 10,
	"figure.dpi": 100,
}


def set_plot_style() -> None:
	"""Whitegrid theme with the font sizes used by every matrix plot."""
	sns.set_theme(style="whitegrid", rc=_STYLE_RC)


def save_figure(fig: plt.Figure, output_path: Optional[Union[str, Path]], dpi: int = 150) -> Optional[plt.Figure]:
	"""Write ``fig`` to ``output_path`` (parent directories created) and
	close it, or hand it back untouched when no path is given.
	"""
	if not output_path:
		return fig
	path = Path(output_path)
	path.parent.mkdir(parents=True, exist_ok=True)
	fig.savefig(path, dpi=dpi, bbox_inches="tight")
	plt.close(fig)
	return None
