"""
scoregc
=======

Summarize per-factor enrichment scores (Z-score, Fisher or KS p-value
scores), set a significance threshold at ``mean + sd * sd_fold`` and plot
each score against the GC content of the factor's binding profile, labelling
the factors at or above the threshold. Raw per-factor observations are
persisted between analysis stages as simple tab-delimited value tables.

The top level modules expose the following key components:

``models``
    Immutable records: :class:`PlotType`, :class:`ScoreRecord`,
    :class:`FactorAttributes`, :class:`SummaryStatistics`,
    :class:`RenderRequest` and the :class:`FactorValues` container.

``stats``
    Mean, population standard deviation, threshold and axis rounding.

``plotting``
    Render request construction and the matplotlib renderer.

``io``
    :class:`ValueTableIO` and helpers for the value table format.

``api``
    :class:`PlotConfig` and single-call plotting entry points.

``errors``
    Exception hierarchy.
"""

from scoregc.api import PlotConfig, create_config, run_plot
from scoregc.errors import (
    FormatError,
    InsufficientDataError,
    RenderError,
    ScoreGCError,
    ValidationError,
    ValueTableIOError,
)
from scoregc.io import ValueTableIO, load_value_frame, read_value_table, write_value_table
from scoregc.models import FactorAttributes, FactorValues, PlotType, RenderRequest, ScoreRecord, SummaryStatistics
from scoregc.plotting import build_render_request, plot_score_vs_gc
from scoregc.stats import compute_statistics

__all__ = [
    "FactorAttributes",
    "FactorValues",
    "FormatError",
    "InsufficientDataError",
    "PlotConfig",
    "PlotType",
    "RenderError",
    "RenderRequest",
    "ScoreGCError",
    "ScoreRecord",
    "SummaryStatistics",
    "ValidationError",
    "ValueTableIO",
    "ValueTableIOError",
    "build_render_request",
    "compute_statistics",
    "create_config",
    "load_value_frame",
    "plot_score_vs_gc",
    "read_value_table",
    "run_plot",
    "write_value_table",
]
