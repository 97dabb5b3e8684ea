from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Tuple

from pydantic import ValidationError

from core.config import DEFAULT_DATA_PATH
from core.errors import LoadError
from core.schema import DatasetModel


logger = logging.getLogger(__name__)

Counts = Dict[str, int]
Section = Dict[str, Counts]

SECTIONS: Dict[str, Tuple[str, ...]] = {
    "demographics": ("age_groups", "professions", "travel_frequency"),
    "behavior": ("budgets", "travel_preferences", "exploration_methods"),
    "insights": ("problems_faced", "experiences_sought"),
    "satisfaction_metrics": ("satisfaction_scores", "frustration_levels", "missing_experiences", "overspending"),
}


@dataclass(frozen=True)
class Dataset:
    """Survey counts, one mapping of label -> respondents per question."""

    demographics: Section = field(default_factory=dict)
    behavior: Section = field(default_factory=dict)
    insights: Section = field(default_factory=dict)
    satisfaction_metrics: Section = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: object) -> "Dataset":
        if not isinstance(raw, dict):
            raise LoadError(f"Dataset must be a JSON object, got {type(raw).__name__}")
        try:
            model = DatasetModel.model_validate(raw)
        except ValidationError as exc:
            raise LoadError(f"Dataset failed validation: {exc.error_count()} error(s)") from exc
        dumped = model.model_dump()
        return cls(**{name: dumped[name] for name in SECTIONS})

    def to_dict(self) -> Dict[str, Section]:
        return {name: copy.deepcopy(getattr(self, name)) for name in SECTIONS}

    def mapping(self, section: str, name: str) -> Mapping[str, int]:
        """Read-only view; loaded datasets are shared across requests."""
        return MappingProxyType(getattr(self, section).get(name, {}))

    def leaves(self) -> Iterator[Tuple[str, str, Counts]]:
        for section in SECTIONS:
            for name, counts in getattr(self, section).items():
                yield section, name, counts


def clone_dataset(dataset: Dataset) -> Dataset:
    """Fully independent copy; nothing is shared with the source."""
    return copy.deepcopy(dataset)


def round_half_up(value: object, ndigits: int = 0) -> Optional[float]:
    if value is None:
        return None
    q = Decimal(10) ** -ndigits
    return float(Decimal(str(value)).quantize(q, rounding=ROUND_HALF_UP))


def parse_dataset(text: str) -> Dataset:
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise LoadError(f"Dataset is not valid JSON: {exc.msg} (line {exc.lineno})") from exc
    return Dataset.from_dict(raw)


def load_dataset(path: Optional[Path] = None) -> Dataset:
    path = Path(path or DEFAULT_DATA_PATH)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise LoadError(f"Could not read dataset {path}: {exc.strerror or exc}") from exc
    except UnicodeDecodeError as exc:
        raise LoadError(f"Dataset {path} is not valid UTF-8: {exc.reason}") from exc
    dataset = parse_dataset(text)
    logger.info("Loaded dataset from %s (%d responses)", path, sum(dataset.mapping("demographics", "age_groups").values()))
    return dataset


def file_signature(path: Path) -> Tuple[str, float]:
    try:
        return (str(path.resolve()), path.stat().st_mtime)
    except OSError:
        return (str(path), 0.0)


@lru_cache(maxsize=4)
def _load_dashboard_data_cached(signature: Tuple[str, float]) -> Dataset:
    return load_dataset(Path(signature[0]))


def load_dashboard_data(path: Optional[Path] = None) -> Dataset:
    """Load once per file version; edits to the file invalidate the cache."""
    return _load_dashboard_data_cached(file_signature(Path(path or DEFAULT_DATA_PATH)))
