"""Shared fixtures: a small survey payload and zero-delay configuration."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import List

import pytest

from core.config import DashboardConfig
from core.data import Dataset


SAMPLE_PAYLOAD = {
    "demographics": {
        "age_groups": {"18-25 years": 40, "26-35 years": 60},
        "professions": {"Student": 45, "Working professional": 55},
        "travel_frequency": {"Once a year": 30, "2-3 times a year": 70},
    },
    "behavior": {
        "budgets": {"Under $500": 35, "$500 - $1,500": 50, "Above $1,500": 15},
        "travel_preferences": {"Solo": 20, "With friends": 80},
        "exploration_methods": {"Self guided with google maps": 52, "Guides and guided tours": 48},
    },
    "insights": {
        "problems_faced": {
            "Difficulty in finding locations beyond tourist spots": 33,
            "Scams and overcharging": 41,
            "Hard to explore local traditions and culture": 17,
            "Language barriers": 9,
        },
        "experiences_sought": {"Local culture and customs": 58, "Adventure activities": 30, "Nightlife": 12},
    },
    "satisfaction_metrics": {
        "satisfaction_scores": {"Very Poor": 5, "Poor": 10, "Average": 40, "Good": 30, "Excellent": 15},
        "frustration_levels": {"Very Low": 8, "Low": 22, "Moderate": 35, "High": 25, "Very High": 10},
        "missing_experiences": {"None": 12, "Few": 28, "Some": 33, "Many": 20, "Most": 7},
        "overspending": {"Never": 9, "Rarely": 21, "Sometimes": 38, "Often": 24, "Always": 8},
    },
}


@pytest.fixture
def payload() -> dict:
    return copy.deepcopy(SAMPLE_PAYLOAD)


@pytest.fixture
def dataset(payload: dict) -> Dataset:
    return Dataset.from_dict(payload)


@pytest.fixture
def headless_config(tmp_path: Path) -> DashboardConfig:
    return DashboardConfig(data_path=tmp_path / "dashboard_data.json", loading_delay_s=0, chart_delay_s=0)


class RecordingRenderer:
    """Charting collaborator that records every create/destroy call."""

    def __init__(self) -> None:
        self.created: List[str] = []
        self.destroyed: List[str] = []
        self.specs = {}

    def create(self, mount, spec):
        self.created.append(mount)
        self.specs[mount] = spec
        renderer = self

        class _Widget:
            def destroy(self_inner) -> None:
                renderer.destroyed.append(mount)

        return _Widget()


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()
