from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from core.aggregations import NOT_AVAILABLE, percent, top_key, total, value_of
from core.binder import CULTURE_PROBLEM, DISCOVERY_PROBLEM, SCAMS_PROBLEM, SELF_GUIDED, build_chart_specs
from core.charts import render_vega_spec
from core.config import DashboardConfig
from core.filters import FilteredView


@dataclass(frozen=True)
class KpiSummary:
    total_responses: int
    primary_age_group: str
    top_problem: str
    independence_percent: int
    difficulty_percent: int
    top_experience: str
    scam_percent: int
    culture_percent: int


def compute_kpis(view: FilteredView) -> KpiSummary:
    data = view.data
    ages = data.mapping("demographics", "age_groups")
    problems = data.mapping("insights", "problems_faced")
    experiences = data.mapping("insights", "experiences_sought")
    respondents = total(ages)

    primary_age = top_key(ages)
    if primary_age != NOT_AVAILABLE:
        primary_age = primary_age.replace(" years", "")

    # Percentages only make sense against a non-empty sample.
    if respondents == 0:
        independence = difficulty = scams = culture = 0
    else:
        methods = data.mapping("behavior", "exploration_methods")
        independence = percent(value_of(methods, SELF_GUIDED, context="exploration_methods"), respondents)
        difficulty = percent(value_of(problems, DISCOVERY_PROBLEM, context="problems_faced"), respondents)
        scams = percent(value_of(problems, SCAMS_PROBLEM, context="problems_faced"), respondents)
        culture = percent(value_of(problems, CULTURE_PROBLEM, context="problems_faced"), respondents)

    return KpiSummary(
        total_responses=respondents,
        primary_age_group=primary_age,
        top_problem=top_key(problems),
        independence_percent=independence,
        difficulty_percent=difficulty,
        top_experience=top_key(experiences),
        scam_percent=scams,
        culture_percent=culture,
    )


def compute_insights(kpis: KpiSummary) -> Optional[Dict[str, Dict[str, str]]]:
    """Narrative text for the two dilemma panels, or None without respondents."""
    if kpis.total_responses == 0:
        return None
    return {
        "independence": {
            "metric": f"{kpis.independence_percent}%",
            "caption": "Prefer self-guided exploration",
            "detail": (
                f"Yet, {kpis.difficulty_percent}% of these independent travelers struggle to find authentic "
                "locations beyond the typical tourist spots. They have the will, but not the right tools."
            ),
        },
        "authenticity": {
            "metric": "#1",
            "caption": f"Desired Experience: {kpis.top_experience}",
            "detail": (
                "Travelers crave genuine culture and adventure, but their top problems are "
                f"scams ({kpis.scam_percent}%) and the inability to find local culture ({kpis.culture_percent}%), "
                "revealing a massive quality and trust gap."
            ),
        },
    }


def compute_overview(view: FilteredView, config: Optional[DashboardConfig] = None, *, include_charts: bool = True) -> Dict[str, Any]:
    kpis = compute_kpis(view)
    charts: Dict[str, Any] = {}
    if include_charts:
        charts = {mount: render_vega_spec(spec) for mount, spec in build_chart_specs(view, config).items()}
    return {
        "filters": asdict(view.filters),
        "scale_factor": view.scale_factor,
        "kpis": asdict(kpis),
        "insights": compute_insights(kpis),
        "charts": charts,
    }
