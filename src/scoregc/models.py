"""
Data containers
===============

Immutable records passed between the statistics, plotting and IO layers.
Plot kinds form a closed set: every :class:`PlotType` member carries the
attribute it reads from a :class:`ScoreRecord` together with its title and
axis label, so an unknown kind is rejected when it is parsed rather than
when it is used.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from dataclasses import field as dc_field
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

import numpy as np

from scoregc.errors import ValidationError


class PlotType(Enum):
    """Score kind selectable per plot invocation."""

    Z = ("zscore", "Z-score vs. TF profile %GC composition", "Z-score")
    FISHER = ("fisher_p_value", "Fisher score vs. TF profile %GC composition", "Fisher score")
    KS = ("ks_p_value", "KS-score vs. TF profile %GC composition", "KS score")

    def __init__(self, score_field: str, title: str, ylabel: str):
        self.score_field = score_field
        self.title = title
        self.ylabel = ylabel

    @classmethod
    def parse(cls, value: Union["PlotType", str]) -> "PlotType":
        """Return the member matching ``value`` ('Z', 'Fisher', 'KS', any case)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            member = cls.__members__.get(value.strip().upper())
            if member is not None:
                return member
        available = ", ".join(member.name for member in cls)
        raise ValidationError(f"Unknown plot type: {value!r}. Available: {available}")


@dataclass(frozen=True)
class ScoreRecord:
    """Per-factor analysis result; any score may be absent."""

    id: str
    zscore: Optional[float] = None
    fisher_p_value: Optional[float] = None
    ks_p_value: Optional[float] = None

    def score(self, plot_type: PlotType) -> Optional[float]:
        """Return the score selected by ``plot_type``, or None when absent or NaN."""
        value = getattr(self, plot_type.score_field)
        if value is None:
            return None
        value = float(value)
        if math.isnan(value):
            return None
        return value


@dataclass(frozen=True)
class FactorAttributes:
    """Factor metadata looked up by id."""

    id: str
    name: str
    gc_content: float


@dataclass(frozen=True)
class SummaryStatistics:
    """Distribution summary of the present scores."""

    n: int
    mean: float
    sd: float
    sd_fold: float
    threshold: float


@dataclass(frozen=True)
class RenderRequest:
    """Engine-agnostic description of one score vs. %GC plot.

    ``gc_above``, ``score_above`` and ``names_above`` are an order-preserving
    subsequence of ``gc_all``/``score_all`` holding the points at or above
    ``threshold``.
    """

    gc_all: np.ndarray = dc_field(hash=False)
    score_all: np.ndarray = dc_field(hash=False)
    gc_above: np.ndarray = dc_field(hash=False)
    score_above: np.ndarray = dc_field(hash=False)
    names_above: List[str] = dc_field(hash=False)
    title: str
    ylabel: str
    legend_text: str
    y_min: float
    y_max: float
    threshold: float
    output_path: str
    statistics: SummaryStatistics
    x_min: float = 0.0
    x_max: float = 100.0
    has_inf: bool = False
    xlabel: str = "TF profile %GC composition"


class FactorValues:
    """
    Ordered collection of raw numeric observations per factor.

    Rows keep their insertion order, so interleaved factors are written back
    exactly as they were read. A per-factor index of row positions serves
    :meth:`values`. Observations are never aggregated.
    """

    def __init__(self, rows: Optional[Iterable[Tuple[str, float]]] = None):
        self._rows: List[Tuple[str, float]] = []
        self._index: Dict[str, List[int]] = {}
        if rows is not None:
            for factor_id, value in rows:
                self.add_value(factor_id, value)

    def add_value(self, factor_id: str, value: float) -> int:
        """Append one observation and return the factor's observation count."""
        if factor_id is None or value is None:
            raise ValidationError("factor_id and value are required")
        factor_id = str(factor_id)
        positions = self._index.setdefault(factor_id, [])
        positions.append(len(self._rows))
        self._rows.append((factor_id, float(value)))
        return len(positions)

    def add_values(self, factor_id: str, values: Iterable[float]) -> int:
        count = 0
        for value in values:
            count = self.add_value(factor_id, value)
        return count

    @property
    def factor_ids(self) -> List[str]:
        return list(self._index)

    def values(self, factor_id: str) -> List[float]:
        """Return the observations recorded for ``factor_id``."""
        return [self._rows[i][1] for i in self._index.get(factor_id, [])]

    def rows(self, factor_id: Optional[str] = None) -> Iterator[Tuple[str, float]]:
        """Yield ``(factor_id, value)`` rows in insertion order, optionally for one factor only."""
        if factor_id is None:
            yield from self._rows
        else:
            for i in self._index.get(factor_id, []):
                yield self._rows[i]

    def __contains__(self, factor_id: object) -> bool:
        return factor_id in self._index

    def __len__(self) -> int:
        return len(self._index)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FactorValues):
            return NotImplemented
        return self._rows == other._rows

    def __repr__(self) -> str:
        return f"FactorValues(factors={len(self)}, rows={len(self._rows)})"
