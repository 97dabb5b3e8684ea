"""Core (UI-agnostic) travel survey dashboard logic.

This package contains:
- dataset loading and validation (JSON -> Dataset)
- aggregation helpers and the filter approximation
- KPI / insight compute functions (JSON-serializable payloads)
- chart helpers (ChartSpec -> Altair -> Vega-Lite spec dict)
- the lifecycle controller that sequences load and re-render
"""
