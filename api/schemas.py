from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class DashboardFiltersModel(BaseModel):
    age_group: str = "all"
    profession: str = "all"
    seed: Optional[int] = None


class FilterOptionsResponse(BaseModel):
    age_group: List[str]
    profession: List[str]


class KpiModel(BaseModel):
    total_responses: int
    primary_age_group: str
    top_problem: str
    independence_percent: int
    difficulty_percent: int
    top_experience: str
    scam_percent: int
    culture_percent: int


class OverviewResponse(BaseModel):
    filters: Dict[str, str]
    scale_factor: Optional[float] = None
    kpis: KpiModel
    insights: Optional[Dict[str, Dict[str, str]]] = None
    charts: Dict[str, Dict[str, Any]]
