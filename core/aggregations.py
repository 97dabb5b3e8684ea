"""Pure summary functions over count mappings.

Every KPI and every chart series is derived through these helpers, so the
missing-label policy (substitute 0, warn, keep rendering) lives in one place.
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Tuple

import pandas as pd

from core.data import round_half_up
from core.errors import MissingKeyWarning


logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"


@dataclass(frozen=True)
class ChartSeries:
    labels: List[str] = field(default_factory=list)
    values: List[float] = field(default_factory=list)
    top_n: Optional[int] = None


def top_key(mapping: Mapping[str, float]) -> str:
    if not mapping:
        return NOT_AVAILABLE
    best_label, best_value = None, None
    for label, value in mapping.items():
        if best_value is None or value > best_value:
            best_label, best_value = label, value
    return str(best_label)


def total(mapping: Mapping[str, float]) -> int:
    return int(sum(mapping.values())) if mapping else 0


def percent(part: float, whole: float, ndigits: int = 0) -> float:
    if not whole:
        return 0
    value = round_half_up(part / whole * 100, ndigits)
    return int(value) if ndigits == 0 else value


def top_n(mapping: Mapping[str, float], n: int) -> List[Tuple[str, float]]:
    if not mapping or n <= 0:
        return []
    ranked = pd.Series(dict(mapping)).sort_values(ascending=False, kind="stable").head(n)
    return [(str(label), ranked.iloc[i].item()) for i, label in enumerate(ranked.index)]


def value_of(mapping: Mapping[str, float], label: str, *, context: str = "") -> float:
    if label in mapping:
        return mapping[label]
    where = f" in {context}" if context else ""
    logger.warning("Label %r missing%s; using 0", label, where)
    warnings.warn(f"Label {label!r} missing{where}; using 0", MissingKeyWarning, stacklevel=2)
    return 0


def series(mapping: Mapping[str, float], *, top: Optional[int] = None) -> ChartSeries:
    if top is not None:
        pairs = top_n(mapping, top)
        return ChartSeries(labels=[p[0] for p in pairs], values=[p[1] for p in pairs], top_n=top)
    return ChartSeries(labels=list(mapping.keys()), values=list(mapping.values()))


def ordinal_series(mapping: Mapping[str, float], labels: List[str], *, context: str = "") -> ChartSeries:
    """Values in the fixed order of ``labels``; absent labels count as 0."""
    return ChartSeries(labels=list(labels), values=[value_of(mapping, label, context=context) for label in labels])
