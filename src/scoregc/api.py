"""High-level public API for score vs. %GC plots."""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Union

from scoregc.errors import ValidationError
from scoregc.models import PlotType, RenderRequest, ScoreRecord
from scoregc.plotting import AttributesLookup, MatplotlibRenderer, plot_score_vs_gc
from scoregc.stats import validate_sd_fold


@dataclass(frozen=True)
class PlotConfig:
    """Unified configuration object for library usage."""

    plot_type: PlotType
    sd_fold: float = 2.0
    output_path: str = "score_vs_gc.png"
    width_px: int = 1024
    height_px: int = 1024
    dpi: int = 100


def create_config(
    plot_type: Union[PlotType, str],
    sd_fold: float = 2.0,
    output_path: Union[str, Path] = "score_vs_gc.png",
    width_px: int = 1024,
    height_px: int = 1024,
    dpi: int = 100,
) -> PlotConfig:
    """Build a validated plot config."""

    if not output_path or not str(output_path):
        raise ValidationError("No output plot file name provided")
    for label, value in (("width_px", width_px), ("height_px", height_px), ("dpi", dpi)):
        if value <= 0:
            raise ValidationError(f"{label} must be positive, got {value}")

    return PlotConfig(
        plot_type=PlotType.parse(plot_type),
        sd_fold=validate_sd_fold(sd_fold),
        output_path=str(output_path),
        width_px=width_px,
        height_px=height_px,
        dpi=dpi,
    )


def run_plot(records: Iterable[ScoreRecord], attributes: AttributesLookup, config: PlotConfig) -> RenderRequest:
    """Execute a plot using the unified config."""

    def renderer_factory() -> MatplotlibRenderer:
        return MatplotlibRenderer(width_px=config.width_px, height_px=config.height_px, dpi=config.dpi)

    return plot_score_vs_gc(
        records,
        attributes,
        config.plot_type,
        config.sd_fold,
        config.output_path,
        renderer_factory=renderer_factory,
    )
