from __future__ import annotations

import logging
import time
from typing import Callable, Dict, List, Optional, Protocol, Tuple

from core.aggregations import ChartSeries, ordinal_series, series, top_n, value_of
from core.charts import (
    CATEGORY,
    COLORS,
    PALETTE,
    PROPORTION,
    STACKED,
    ChartDataset,
    ChartSpec,
    TooltipContext,
    chart_options,
    wrap_label,
)
from core.config import DashboardConfig
from core.data import Dataset
from core.filters import FilteredView


logger = logging.getLogger(__name__)

SELF_GUIDED = "Self guided with google maps"
GUIDED_TOURS = "Guides and guided tours"
DISCOVERY_PROBLEM = "Difficulty in finding locations beyond tourist spots"
SCAMS_PROBLEM = "Scams and overcharging"
CULTURE_PROBLEM = "Hard to explore local traditions and culture"
LOCAL_CULTURE = "Local culture and customs"

RED_TO_GREEN = ["#ff7b72", "#f08a5d", "#e3b341", "#88d8b0", "#56d364"]
GREEN_TO_RED = list(reversed(RED_TO_GREEN))

# mount -> (metric, fixed ordinal labels, colors)
SATISFACTION_SCALES: Dict[str, Tuple[str, List[str], List[str]]] = {
    "satisfaction": ("satisfaction_scores", ["Very Poor", "Poor", "Average", "Good", "Excellent"], RED_TO_GREEN),
    "frustration": ("frustration_levels", ["Very Low", "Low", "Moderate", "High", "Very High"], GREEN_TO_RED),
    "missing": ("missing_experiences", ["None", "Few", "Some", "Many", "Most"], PALETTE[:5]),
    "overspending": ("overspending", ["Never", "Rarely", "Sometimes", "Often", "Always"], GREEN_TO_RED),
}


class ChartWidget(Protocol):
    def destroy(self) -> None: ...


class ChartRenderer(Protocol):
    def create(self, mount: str, spec: ChartSpec) -> ChartWidget: ...


def _single(kind: str, data: ChartSeries, label: str, style: Dict, options: Dict) -> ChartSpec:
    return ChartSpec(kind=kind, labels=list(data.labels), datasets=[ChartDataset(label=label, values=list(data.values), style=style)], options=options)


def paradox_chart(data: Dataset, config: DashboardConfig) -> ChartSpec:
    aspiration = value_of(data.mapping("behavior", "exploration_methods"), SELF_GUIDED, context="exploration_methods")
    friction = value_of(data.mapping("insights", "problems_faced"), DISCOVERY_PROBLEM, context="problems_faced")
    return ChartSpec(
        kind=CATEGORY,
        labels=["Desire for Independence", "Struggle with Discovery"],
        datasets=[
            ChartDataset(
                label="Number of Travelers",
                values=[aspiration, friction],
                style={"color": [COLORS["cyan"], COLORS["red"]], "bar_size": 60, "corner_radius": 5},
            )
        ],
        options=chart_options(CATEGORY, show_legend=False, axis_title="Travelers", animation_ms=config.animation_ms),
    )


def independence_chart(data: Dataset, config: DashboardConfig) -> ChartSpec:
    methods = data.mapping("behavior", "exploration_methods")
    return ChartSpec(
        kind=CATEGORY,
        labels=["Self-Guided", "Guided Tours"],
        datasets=[
            ChartDataset(
                label="Travelers",
                values=[
                    value_of(methods, SELF_GUIDED, context="exploration_methods"),
                    value_of(methods, GUIDED_TOURS, context="exploration_methods"),
                ],
                style={"color": [COLORS["cyan"], COLORS["magenta"]], "bar_size": 50},
            )
        ],
        options=chart_options(CATEGORY, show_legend=False, animation_ms=config.animation_ms),
    )


def authenticity_gap_chart(data: Dataset, config: DashboardConfig) -> ChartSpec:
    experiences = data.mapping("insights", "experiences_sought")
    problems = data.mapping("insights", "problems_faced")
    return ChartSpec(
        kind=STACKED,
        labels=[""],
        datasets=[
            ChartDataset("Seeks Local Culture", [value_of(experiences, LOCAL_CULTURE, context="experiences_sought")], {"color": COLORS["green"]}, "desire"),
            ChartDataset("Faces Scams", [value_of(problems, SCAMS_PROBLEM, context="problems_faced")], {"color": COLORS["red"]}, "barrier"),
            ChartDataset("Faces Cultural Barriers", [value_of(problems, CULTURE_PROBLEM, context="problems_faced")], {"color": COLORS["blue"]}, "barrier"),
        ],
        options=chart_options(STACKED, show_legend=True, horizontal=True, axis_title="Travelers", animation_ms=config.animation_ms),
    )


def desire_vs_fear_chart(data: Dataset, config: DashboardConfig) -> ChartSpec:
    desires = top_n(data.mapping("insights", "experiences_sought"), 3)
    fears = top_n(data.mapping("insights", "problems_faced"), 3)
    names = {"Desires (Top Experiences)": desires, "Fears (Top Problems)": fears}

    def name_the_category(ctx: TooltipContext) -> str:
        ranked = names.get(ctx.dataset_label, [])
        return f"{ctx.dataset_label}: {ranked[ctx.index][0]}" if ctx.index < len(ranked) else ""

    labels = [f"Top {i}" for i in range(1, max(len(desires), len(fears)) + 1)]
    return ChartSpec(
        kind=STACKED,
        labels=labels,
        datasets=[
            ChartDataset("Desires (Top Experiences)", [v for _, v in desires], {"color": COLORS["green"]}, "desire"),
            ChartDataset("Fears (Top Problems)", [v for _, v in fears], {"color": COLORS["red"]}, "fear"),
        ],
        options=chart_options(STACKED, show_legend=True, tooltip_label=name_the_category, animation_ms=config.animation_ms),
    )


def age_chart(data: Dataset, config: DashboardConfig) -> ChartSpec:
    return _single(PROPORTION, series(data.mapping("demographics", "age_groups")), "Respondents", {"color": PALETTE}, chart_options(PROPORTION, animation_ms=config.animation_ms))


def profession_chart(data: Dataset, config: DashboardConfig) -> ChartSpec:
    colors = PALETTE + ["#b1b1b1", "#d1d1d1"]
    return _single(PROPORTION, series(data.mapping("demographics", "professions")), "Respondents", {"color": colors}, chart_options(PROPORTION, animation_ms=config.animation_ms))


def frequency_chart(data: Dataset, config: DashboardConfig) -> ChartSpec:
    return _single(CATEGORY, series(data.mapping("demographics", "travel_frequency")), "Travelers", {"color": COLORS["cyan"]}, chart_options(CATEGORY, animation_ms=config.animation_ms))


def budget_chart(data: Dataset, config: DashboardConfig) -> ChartSpec:
    colors = [COLORS["green"], COLORS["yellow"], COLORS["magenta"], COLORS["red"]]
    return _single(PROPORTION, series(data.mapping("behavior", "budgets")), "Respondents", {"color": colors}, chart_options(PROPORTION, animation_ms=config.animation_ms))


def companions_chart(data: Dataset, config: DashboardConfig) -> ChartSpec:
    return _single(CATEGORY, series(data.mapping("behavior", "travel_preferences")), "Preferences", {"color": COLORS["yellow"]}, chart_options(CATEGORY, animation_ms=config.animation_ms))


def exploration_chart(data: Dataset, config: DashboardConfig) -> ChartSpec:
    shaped = series(data.mapping("behavior", "exploration_methods"))
    spec = _single(CATEGORY, shaped, "Methods", {"color": COLORS["purple"]}, chart_options(CATEGORY, horizontal=True, animation_ms=config.animation_ms))
    spec.labels = [wrap_label(label, config.exploration_wrap) for label in shaped.labels]
    return spec


def experiences_chart(data: Dataset, config: DashboardConfig) -> ChartSpec:
    return _single(CATEGORY, series(data.mapping("insights", "experiences_sought")), "Interest Level", {"color": COLORS["magenta"]}, chart_options(CATEGORY, animation_ms=config.animation_ms))


def problems_chart(data: Dataset, config: DashboardConfig) -> ChartSpec:
    shaped = series(data.mapping("insights", "problems_faced"), top=config.problems_top_n)
    spec = _single(CATEGORY, shaped, "Frequency", {"color": COLORS["red"]}, chart_options(CATEGORY, animation_ms=config.animation_ms))
    spec.labels = [wrap_label(label, config.problems_wrap) for label in shaped.labels]
    return spec


def _satisfaction_chart(mount: str) -> Callable[[Dataset, DashboardConfig], ChartSpec]:
    metric, labels, colors = SATISFACTION_SCALES[mount]

    def build(data: Dataset, config: DashboardConfig) -> ChartSpec:
        shaped = ordinal_series(data.mapping("satisfaction_metrics", metric), labels, context=metric)
        style = {"color": colors, "border_width": 2, "border_color": COLORS["panel"]}
        return _single(PROPORTION, shaped, "Respondents", style, chart_options(PROPORTION, animation_ms=config.animation_ms))

    build.__name__ = f"{mount}_chart"
    return build


# Construction order matches the page layout, insight panels first.
CHART_SLOTS: Dict[str, Callable[[Dataset, DashboardConfig], ChartSpec]] = {
    "paradox": paradox_chart,
    "independence": independence_chart,
    "authenticity_gap": authenticity_gap_chart,
    "desire_vs_fear": desire_vs_fear_chart,
    "age": age_chart,
    "profession": profession_chart,
    "frequency": frequency_chart,
    "budget": budget_chart,
    "companions": companions_chart,
    "exploration": exploration_chart,
    "experiences": experiences_chart,
    "problems": problems_chart,
    **{mount: _satisfaction_chart(mount) for mount in SATISFACTION_SCALES},
}


def build_chart_specs(view: FilteredView, config: Optional[DashboardConfig] = None) -> Dict[str, ChartSpec]:
    config = config or DashboardConfig()
    return {mount: build(view.data, config) for mount, build in CHART_SLOTS.items()}


class ViewBinder:
    """Owns the live chart widgets; every refresh tears all of them down."""

    def __init__(
        self,
        renderer: ChartRenderer,
        config: Optional[DashboardConfig] = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.renderer = renderer
        self.config = config or DashboardConfig()
        self.sleep = sleep
        self.widgets: Dict[str, ChartWidget] = {}

    def destroy_all(self) -> None:
        for widget in self.widgets.values():
            widget.destroy()
        self.widgets = {}

    def refresh(self, view: FilteredView) -> Dict[str, ChartWidget]:
        self.destroy_all()
        if self.config.chart_delay_s:
            self.sleep(self.config.chart_delay_s)
        specs = build_chart_specs(view, self.config)
        self.widgets = {mount: self.renderer.create(mount, spec) for mount, spec in specs.items()}
        logger.info("Rendered %d charts", len(self.widgets))
        return self.widgets
