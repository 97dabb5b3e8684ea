from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np

from core.data import Dataset, clone_dataset


logger = logging.getLogger(__name__)

ALL = "all"
DEFAULT_SCALE_RANGE: Tuple[float, float] = (0.5, 0.8)


@dataclass(frozen=True)
class DashboardFilters:
    age_group: str = ALL
    profession: str = ALL

    @property
    def is_all(self) -> bool:
        return self.age_group == ALL and self.profession == ALL


@dataclass(frozen=True)
class FilteredView:
    """The copy of the dataset one render cycle works from."""

    data: Dataset
    filters: DashboardFilters = DashboardFilters()
    scale_factor: Optional[float] = None


def filter_options(dataset: Dataset) -> Dict[str, List[str]]:
    return {
        "age_group": [ALL] + list(dataset.mapping("demographics", "age_groups")),
        "profession": [ALL] + list(dataset.mapping("demographics", "professions")),
    }


def normalize_filters(raw: dict, *, dataset: Optional[Dataset] = None) -> DashboardFilters:
    raw = raw or {}
    options = filter_options(dataset) if dataset is not None else None

    def _choice(key: str) -> str:
        value = raw.get(key)
        value = ALL if value is None else str(value).strip()
        if not value or value.lower() == ALL:
            return ALL
        if options is not None and value not in options[key]:
            logger.warning("Unknown %s filter %r; falling back to %r", key, value, ALL)
            return ALL
        return value

    return DashboardFilters(age_group=_choice("age_group"), profession=_choice("profession"))


def scale_counts(dataset: Dataset, factor: float) -> Dataset:
    scaled = clone_dataset(dataset)
    for _, _, counts in scaled.leaves():
        for label, count in counts.items():
            counts[label] = max(1, math.floor(count * factor))
    return scaled


def apply_filter(
    dataset: Dataset,
    filters: DashboardFilters,
    *,
    rng: Optional[np.random.Generator] = None,
    scale_range: Tuple[float, float] = DEFAULT_SCALE_RANGE,
) -> FilteredView:
    """Approximate a filtered view of the survey.

    The dataset only carries aggregate counts, so there are no rows to filter.
    Any non-"all" selection shrinks every count by a single random factor drawn
    from ``scale_range``, flooring and keeping at least one respondent per
    label. Key sets never change. "all" on every dimension returns an unscaled
    copy.
    """
    if filters.is_all:
        return FilteredView(data=clone_dataset(dataset), filters=filters)

    rng = rng if rng is not None else np.random.default_rng()
    low, high = scale_range
    factor = float(rng.uniform(low, high))
    logger.info("Applying filters %s with scale factor %.3f", filters, factor)
    return FilteredView(data=scale_counts(dataset, factor), filters=filters, scale_factor=factor)
