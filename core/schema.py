"""pydantic models describing the survey dataset payload.

Only the shape is checked here: every leaf is a mapping of label -> non-negative
count. Leaves missing from the payload load as empty mappings so the views can
degrade to zero bars instead of failing.
"""

from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt


Counts = Dict[str, NonNegativeInt]


class _Section(BaseModel):
    model_config = ConfigDict(extra="ignore")


class DemographicsModel(_Section):
    age_groups: Counts = Field(default_factory=dict)
    professions: Counts = Field(default_factory=dict)
    travel_frequency: Counts = Field(default_factory=dict)


class BehaviorModel(_Section):
    budgets: Counts = Field(default_factory=dict)
    travel_preferences: Counts = Field(default_factory=dict)
    exploration_methods: Counts = Field(default_factory=dict)


class InsightsModel(_Section):
    problems_faced: Counts = Field(default_factory=dict)
    experiences_sought: Counts = Field(default_factory=dict)


class SatisfactionMetricsModel(_Section):
    satisfaction_scores: Counts = Field(default_factory=dict)
    frustration_levels: Counts = Field(default_factory=dict)
    missing_experiences: Counts = Field(default_factory=dict)
    overspending: Counts = Field(default_factory=dict)


class DatasetModel(_Section):
    demographics: DemographicsModel = Field(default_factory=DemographicsModel)
    behavior: BehaviorModel = Field(default_factory=BehaviorModel)
    insights: InsightsModel = Field(default_factory=InsightsModel)
    satisfaction_metrics: SatisfactionMetricsModel = Field(default_factory=SatisfactionMetricsModel)
