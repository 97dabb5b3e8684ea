"""Smoke test for the Streamlit page."""

from __future__ import annotations

from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

pytestmark = pytest.mark.unit

APP_PATH = str(Path(__file__).resolve().parents[1] / "app.py")


def test_page_renders_kpis_and_charts(monkeypatch) -> None:
    monkeypatch.setenv("TRAVEL_DASHBOARD_LOADING_DELAY", "0")
    monkeypatch.setenv("TRAVEL_DASHBOARD_CHART_DELAY", "0")
    at = AppTest.from_file(APP_PATH, default_timeout=60).run()
    assert not at.exception
    assert [m.label for m in at.metric] == ["Total Responses", "Primary Age Group", "Top Problem"]
    assert at.metric[0].value == "350"


def test_page_shows_error_when_data_missing(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("TRAVEL_DASHBOARD_DATA", str(tmp_path / "missing.json"))
    monkeypatch.setenv("TRAVEL_DASHBOARD_LOADING_DELAY", "0")
    at = AppTest.from_file(APP_PATH, default_timeout=60).run()
    assert at.error[0].value == "Failed to load data. Please try again later."
