from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Tuple


PROJECT_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_DATA_PATH = PROJECT_ROOT / "dashboard_data.json"

ENV_PREFIX = "TRAVEL_DASHBOARD_"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class DashboardConfig:
    data_path: Path = DEFAULT_DATA_PATH
    # Cosmetic pauses; zero them for headless runs.
    loading_delay_s: float = 1.5
    chart_delay_s: float = 1.0
    exploration_wrap: int = 20
    problems_wrap: int = 25
    problems_top_n: int = 8
    scale_min: float = 0.5
    scale_max: float = 0.8
    animation_ms: int = 1500
    log_level: str = "INFO"

    @property
    def scale_range(self) -> Tuple[float, float]:
        return (self.scale_min, self.scale_max)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DashboardConfig":
        env = os.environ if environ is None else environ
        defaults = cls()

        def _get(name: str) -> Optional[str]:
            value = env.get(ENV_PREFIX + name)
            if value is None or not value.strip():
                return None
            return value.strip()

        def _float(name: str, default: float) -> float:
            raw = _get(name)
            if raw is None:
                return default
            try:
                return max(0.0, float(raw))
            except ValueError:
                return default

        def _int(name: str, default: int) -> int:
            raw = _get(name)
            if raw is None:
                return default
            try:
                return max(1, int(raw))
            except ValueError:
                return default

        scale_min = _float("SCALE_MIN", defaults.scale_min)
        scale_max = _float("SCALE_MAX", defaults.scale_max)
        if not 0 < scale_min <= scale_max <= 1:
            scale_min, scale_max = defaults.scale_min, defaults.scale_max

        data_path = _get("DATA")
        return cls(
            data_path=Path(data_path) if data_path else defaults.data_path,
            loading_delay_s=_float("LOADING_DELAY", defaults.loading_delay_s),
            chart_delay_s=_float("CHART_DELAY", defaults.chart_delay_s),
            exploration_wrap=_int("EXPLORATION_WRAP", defaults.exploration_wrap),
            problems_wrap=_int("PROBLEMS_WRAP", defaults.problems_wrap),
            problems_top_n=_int("PROBLEMS_TOP_N", defaults.problems_top_n),
            scale_min=scale_min,
            scale_max=scale_max,
            animation_ms=_int("ANIMATION_MS", defaults.animation_ms),
            log_level=(_get("LOG_LEVEL") or defaults.log_level).upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
