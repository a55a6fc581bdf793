"""Plotting API for merged-matrix QC.

Import convenience: ``from vcf_admatrix.plot import plot_called_rate_per_sample``.
"""

from .sample_plots import *  # noqa: F401,F403
from .sample_plots import __all__  # noqa: F401
