from __future__ import annotations

import enum
import logging
import time
from typing import Callable, Dict, List, Optional, Protocol

from core.binder import ChartRenderer, ViewBinder
from core.config import DashboardConfig
from core.data import Dataset, load_dataset
from core.errors import ExportError
from core.export import ExportArtifact, build_export
from core.filters import DashboardFilters, FilteredView, apply_filter
from core.metrics_overview import KpiSummary, compute_insights, compute_kpis


logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = "Failed to load data. Please try again later."
FILTER_FAILED_MESSAGE = "Could not apply filters. Please try again."


class State(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    RENDERED = "rendered"
    FILTERING = "filtering"
    FAILED = "failed"


TRANSITIONS: Dict[State, frozenset] = {
    State.IDLE: frozenset({State.LOADING}),
    State.LOADING: frozenset({State.LOADED, State.FAILED}),
    State.LOADED: frozenset({State.RENDERED}),
    State.RENDERED: frozenset({State.FILTERING}),
    State.FILTERING: frozenset({State.RENDERED}),
    State.FAILED: frozenset(),
}


class DashboardSurface(Protocol):
    def show_loading(self) -> None: ...
    def show_dashboard(self) -> None: ...
    def show_error(self, message: str) -> None: ...
    def update_kpis(self, kpis: KpiSummary) -> None: ...
    def update_insights(self, insights: Optional[dict]) -> None: ...
    def notify(self, message: str) -> None: ...


class RecordingSurface:
    """Keeps the latest values for a UI that redraws from state."""

    def __init__(self) -> None:
        self.loading = False
        self.error: Optional[str] = None
        self.kpis: Optional[KpiSummary] = None
        self.insights: Optional[dict] = None
        self.notifications: List[str] = []

    def show_loading(self) -> None:
        self.loading = True

    def show_dashboard(self) -> None:
        self.loading = False

    def show_error(self, message: str) -> None:
        self.loading = False
        self.error = message

    def update_kpis(self, kpis: KpiSummary) -> None:
        self.kpis = kpis

    def update_insights(self, insights: Optional[dict]) -> None:
        self.insights = insights

    def notify(self, message: str) -> None:
        self.notifications.append(message)

    def drain_notifications(self) -> List[str]:
        messages, self.notifications = self.notifications, []
        return messages


class DashboardController:
    """Sequences load -> render and re-renders on every filter change."""

    def __init__(
        self,
        renderer: ChartRenderer,
        surface: Optional[DashboardSurface] = None,
        config: Optional[DashboardConfig] = None,
        *,
        fetch: Optional[Callable[[], Dataset]] = None,
        sleep: Callable[[float], None] = time.sleep,
        rng=None,
    ) -> None:
        self.config = config or DashboardConfig()
        self.surface = surface or RecordingSurface()
        self.fetch = fetch or (lambda: load_dataset(self.config.data_path))
        self.sleep = sleep
        self.rng = rng
        self.binder = ViewBinder(renderer, self.config, sleep=sleep)
        self.state = State.IDLE
        self.dataset: Optional[Dataset] = None
        self.view: Optional[FilteredView] = None
        self.kpis: Optional[KpiSummary] = None
        self.insights: Optional[dict] = None

    def _transition(self, target: State) -> None:
        if target not in TRANSITIONS[self.state]:
            raise RuntimeError(f"Invalid transition {self.state.value} -> {target.value}")
        logger.info("Dashboard %s -> %s", self.state.value, target.value)
        self.state = target

    def start(self) -> State:
        self._transition(State.LOADING)
        self.surface.show_loading()
        try:
            self.dataset = self.fetch()
        except Exception:
            logger.exception("dataset load failed")
            self._transition(State.FAILED)
            self.surface.show_error(LOAD_FAILED_MESSAGE)
            return self.state
        self._transition(State.LOADED)

        if self.config.loading_delay_s:
            self.sleep(self.config.loading_delay_s)
        self.surface.show_dashboard()
        self._render(apply_filter(self.dataset, DashboardFilters()))
        self._transition(State.RENDERED)
        return self.state

    def _render(self, view: FilteredView) -> None:
        self.view = view
        self.kpis = compute_kpis(view)
        self.insights = compute_insights(self.kpis)
        self.surface.update_kpis(self.kpis)
        self.surface.update_insights(self.insights)
        self.binder.refresh(view)

    def apply_filters(self, filters: DashboardFilters) -> State:
        if self.state is not State.RENDERED:
            raise RuntimeError(f"Cannot filter while {self.state.value}")
        self._transition(State.FILTERING)
        try:
            view = apply_filter(self.dataset, filters, rng=self.rng, scale_range=self.config.scale_range)
            self._render(view)
        except Exception:
            logger.exception("filter render failed")
            self._transition(State.RENDERED)
            self.surface.notify(FILTER_FAILED_MESSAGE)
            return self.state
        self.surface.notify("Filters applied!")
        self._transition(State.RENDERED)
        return self.state

    def reset_filters(self) -> State:
        return self.apply_filters(DashboardFilters())

    def export(self) -> Optional[ExportArtifact]:
        if self.view is None:
            self.surface.notify("Nothing to export yet.")
            return None
        try:
            artifact = build_export(self.view)
        except ExportError as exc:
            self.surface.notify(f"Export failed: {exc}")
            return None
        self.surface.notify("Data exported successfully!")
        return artifact
