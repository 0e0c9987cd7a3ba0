"""
plotting
========

Build and render the score vs. TF profile %GC composition scatter plot.

:func:`build_render_request` turns per-factor score records and factor
attributes into a :class:`~scoregc.models.RenderRequest`: it summarizes the
selected scores, computes the ``mean + sd * sd_fold`` threshold, rounds the
y-axis bounds and collects the factors to label. The request is then drawn
by a renderer; :class:`MatplotlibRenderer` is the default one.
"""

from __future__ import annotations

import logging
import os
from typing import Callable, Iterable, List, Mapping, Optional, Union

import numpy as np
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure

from scoregc.errors import RenderError, ValidationError
from scoregc.models import FactorAttributes, PlotType, RenderRequest, ScoreRecord
from scoregc.stats import compute_statistics, lower_axis_bound, score_bounds, upper_axis_bound, validate_sd_fold

AttributesLookup = Union[Mapping[str, FactorAttributes], Callable[[str], Optional[FactorAttributes]]]

logger = logging.getLogger(__name__)


def _resolve_attributes(attributes: AttributesLookup, factor_id: str) -> FactorAttributes:
    """Look up a factor's attributes, raising ValidationError when it is unknown."""
    try:
        if callable(attributes):
            found = attributes(factor_id)
        else:
            found = attributes.get(factor_id)
    except KeyError:
        found = None
    if found is None:
        raise ValidationError(f"No attributes found for factor {factor_id!r}")
    return found


def build_render_request(
    records: Iterable[ScoreRecord],
    attributes: AttributesLookup,
    plot_type: Union[PlotType, str],
    sd_fold: float,
    output_path: Union[str, os.PathLike],
) -> RenderRequest:
    """
    Prepare the data arrays and style parameters for one plot.

    Parameters
    ----------
    records : iterable of ScoreRecord
        Analysis results, one per factor. Records whose selected score is
        absent are skipped.
    attributes : mapping or callable
        Factor id to :class:`FactorAttributes` lookup.
    plot_type : PlotType or str
        Which score to plot: 'Z', 'Fisher' or 'KS'.
    sd_fold : float
        Multiplier of the standard deviation used for the threshold.
    output_path : str or path-like
        Where the PNG image is written.

    Returns
    -------
    RenderRequest

    Raises
    ------
    ValidationError
        On empty records, a missing attribute lookup, unknown plot type,
        non-positive ``sd_fold``, empty ``output_path``, an unresolved factor
        id or when no record carries the selected score.
    """
    records = list(records) if records is not None else []
    if not records:
        raise ValidationError("No result set provided")
    if attributes is None or not (callable(attributes) or hasattr(attributes, "get")):
        raise ValidationError("No TF set provided")
    kind = PlotType.parse(plot_type)
    fold = validate_sd_fold(sd_fold)
    # Path("") normalizes to "."
    if not output_path or os.fspath(output_path) in ("", "."):
        raise ValidationError("No output plot file name provided")

    scores: List[float] = []
    gc: List[float] = []
    names: List[str] = []
    for record in records:
        score = record.score(kind)
        if score is None:
            continue
        tf = _resolve_attributes(attributes, record.id)
        scores.append(score)
        gc.append(tf.gc_content * 100)
        names.append(tf.name)

    if not scores:
        raise ValidationError(f"No {kind.name} scores present in the result set")
    skipped = len(records) - len(scores)
    if skipped:
        logger.info(f"Skipped {skipped} of {len(records)} records without a {kind.name} score")

    stats = compute_statistics(scores, fold)
    score_all = np.asarray(scores, dtype=np.float64)
    gc_all = np.asarray(gc, dtype=np.float64)

    max_score, min_score, has_inf = score_bounds(score_all)
    y_max = upper_axis_bound(max_score)
    y_min = lower_axis_bound(min_score)

    above = score_all >= stats.threshold
    names_above = [name for name, is_above in zip(names, above, strict=True) if is_above]

    return RenderRequest(
        gc_all=gc_all,
        score_all=score_all,
        gc_above=gc_all[above],
        score_above=score_all[above],
        names_above=names_above,
        title=kind.title,
        ylabel=kind.ylabel,
        legend_text=f"mean + {sd_fold} * sd",
        y_min=y_min,
        y_max=y_max,
        threshold=stats.threshold,
        output_path=os.fspath(output_path),
        statistics=stats,
        has_inf=has_inf,
    )


class MatplotlibRenderer:
    """
    Draw a :class:`RenderRequest` to a PNG file with matplotlib.

    The figure is created when the renderer is entered and released when it
    exits, whatever the outcome of the drawing.
    """

    def __init__(self, width_px: int = 1024, height_px: int = 1024, dpi: int = 100, background: str = "white"):
        self.width_px = width_px
        self.height_px = height_px
        self.dpi = dpi
        self.background = background
        self.figure: Optional[Figure] = None

    def __enter__(self) -> "MatplotlibRenderer":
        self.figure = Figure(
            figsize=(self.width_px / self.dpi, self.height_px / self.dpi), dpi=self.dpi, facecolor=self.background
        )
        FigureCanvasAgg(self.figure)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self.figure is not None:
            self.figure.clear()
            self.figure = None

    def draw(self, request: RenderRequest) -> Optional[str]:
        """Run the drawing directives; return a diagnostic message on failure."""
        if self.figure is None:
            return "Renderer is not open"
        try:
            ax = self.figure.add_subplot(1, 1, 1)
            ax.set_xlim(request.x_min, request.x_max)
            ax.set_ylim(request.y_min, request.y_max)
            # Infinite scores are drawn on the plot edge.
            score_all = np.clip(request.score_all, request.y_min, request.y_max)
            score_above = np.clip(request.score_above, request.y_min, request.y_max)
            ax.scatter(request.gc_all, score_all, s=8, color="black")
            for x, y, label in zip(request.gc_above, score_above, request.names_above, strict=True):
                ax.annotate(
                    label, (x, y), xytext=(0, 4), textcoords="offset points", ha="center", va="bottom", fontsize=8
                )
            if request.has_inf:
                ax.text(request.x_min, request.y_max, "(Inf)", ha="right", va="center", fontsize=9)
            ax.axhline(request.threshold, color="red", linestyle="--", label=request.legend_text)
            ax.legend(loc="upper right", frameon=False, fontsize=8)
            ax.set_title(request.title, fontsize=10)
            ax.set_xlabel(request.xlabel)
            ax.set_ylabel(request.ylabel)
            self.figure.savefig(request.output_path, format="png", facecolor=self.background)
        except (OSError, ValueError, RuntimeError) as exc:
            return f"{type(exc).__name__}: {exc}"
        return None


def render(request: RenderRequest, renderer_factory: Callable[[], MatplotlibRenderer] = MatplotlibRenderer) -> None:
    """Render ``request``; raise RenderError if the renderer reports a diagnostic."""
    with renderer_factory() as renderer:
        diagnostic = renderer.draw(request)
    if diagnostic:
        logger.error(f"Plot rendering failed for {request.output_path}: {diagnostic}")
        raise RenderError(diagnostic)
    logger.debug(f"Wrote plot to {request.output_path}")


def plot_score_vs_gc(
    records: Iterable[ScoreRecord],
    attributes: AttributesLookup,
    plot_type: Union[PlotType, str],
    sd_fold: float,
    output_path: Union[str, os.PathLike],
    renderer_factory: Callable[[], MatplotlibRenderer] = MatplotlibRenderer,
) -> RenderRequest:
    """Build the render request and draw it; return the request that was drawn."""
    request = build_render_request(records, attributes, plot_type, sd_fold, output_path)
    render(request, renderer_factory)
    return request
