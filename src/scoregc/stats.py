"""Summary statistics, significance threshold and axis rounding for score plots."""

from __future__ import annotations

import logging
import math
from typing import Iterable, Optional

import numpy as np

from scoregc.errors import InsufficientDataError, ValidationError
from scoregc.models import SummaryStatistics

# Axis bound substitutes for infinite scores.
INF_MAX_BOUND = 500.0
NEG_INF_MIN_BOUND = -100.0

logger = logging.getLogger(__name__)


def finite_scores(scores: Iterable[Optional[float]]) -> np.ndarray:
    """Return the present, finite scores as a float64 array."""
    present = np.array([s for s in scores if s is not None], dtype=np.float64)
    return present[np.isfinite(present)]


def compute_mean(scores: Iterable[Optional[float]]) -> float:
    """Mean of the present finite scores."""
    values = finite_scores(scores)
    if values.size == 0:
        raise InsufficientDataError("Cannot compute mean: no finite scores")
    return float(values.sum() / values.size)


def compute_sd(scores: Iterable[Optional[float]], mean: Optional[float] = None) -> float:
    """Population standard deviation (divisor n) of the present finite scores."""
    values = finite_scores(scores)
    if values.size == 0:
        raise InsufficientDataError("Cannot compute standard deviation: no finite scores")
    if mean is None:
        mean = float(values.sum() / values.size)
    return math.sqrt(float(np.sum((values - mean) ** 2)) / values.size)


def validate_sd_fold(sd_fold) -> float:
    try:
        fold = float(sd_fold)
    except (TypeError, ValueError):
        raise ValidationError(f"SD fold must be a number, got {sd_fold!r}") from None
    if not math.isfinite(fold) or fold <= 0:
        raise ValidationError(f"SD fold must be a positive number, got {sd_fold!r}")
    return fold


def compute_threshold(mean: float, sd: float, sd_fold: float) -> float:
    """Return ``mean + sd * sd_fold``."""
    return mean + sd * validate_sd_fold(sd_fold)


def compute_statistics(scores: Iterable[Optional[float]], sd_fold: float) -> SummaryStatistics:
    """
    Summarize a score sequence.

    Absent (None) and NaN scores are ignored, infinite scores do not take
    part in the mean or the standard deviation.

    Raises
    ------
    InsufficientDataError
        If no finite score is left.
    ValidationError
        If ``sd_fold`` is not a positive number.
    """
    fold = validate_sd_fold(sd_fold)
    values = finite_scores(scores)
    mean = compute_mean(values)
    sd = compute_sd(values, mean)
    threshold = compute_threshold(mean, sd, fold)
    logger.debug(f"Score statistics: n={values.size}, mean={mean:.6g}, sd={sd:.6g}, threshold={threshold:.6g}")
    return SummaryStatistics(n=int(values.size), mean=mean, sd=sd, sd_fold=fold, threshold=threshold)


def upper_axis_bound(max_score: float) -> float:
    """Next multiple of 100 (above 50) or of 10 strictly greater than ``max_score``."""
    step = 100 if max_score > 50 else 10
    return float((math.floor(max_score / step) + 1) * step)


def lower_axis_bound(min_score: float) -> float:
    """Next multiple of 100 (below -50) or of 10 strictly less than ``min_score``."""
    step = 100 if min_score < -50 else 10
    return float((math.ceil(min_score / step) - 1) * step)


def score_bounds(scores: np.ndarray) -> tuple[float, float, bool]:
    """
    Return ``(max_score, min_score, has_inf)`` for axis scaling.

    ``+inf`` counts as 500 and ``-inf`` as -100.
    """
    if scores.size == 0:
        raise InsufficientDataError("Cannot compute score bounds: no scores")
    has_inf = bool(np.any(np.isposinf(scores)))
    bounded = np.where(np.isposinf(scores), INF_MAX_BOUND, scores)
    bounded = np.where(np.isneginf(bounded), NEG_INF_MIN_BOUND, bounded)
    return float(bounded.max()), float(bounded.min()), has_inf
