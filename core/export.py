from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Tuple

from core.data import Dataset
from core.errors import ExportError, LoadError
from core.filters import FilteredView


logger = logging.getLogger(__name__)

EXPORT_MIME = "application/json"


@dataclass(frozen=True)
class ExportArtifact:
    filename: str
    content: bytes
    mime: str = EXPORT_MIME


def iso_timestamp(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_export(view: FilteredView, *, now: Optional[datetime] = None) -> ExportArtifact:
    """Serialize the view's data with a timestamp, ready to offer as a download."""
    moment = now or datetime.now(timezone.utc)
    payload = {"timestamp": iso_timestamp(moment), "data": view.data.to_dict()}
    try:
        content = json.dumps(payload, indent=2, ensure_ascii=False, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as exc:
        logger.exception("export serialization failed")
        raise ExportError(f"Could not serialize export: {exc}") from exc
    filename = f"travel-analytics-{moment.astimezone(timezone.utc).date().isoformat()}.json"
    logger.info("Built export %s (%d bytes)", filename, len(content))
    return ExportArtifact(filename=filename, content=content)


def load_export(content: bytes) -> Tuple[str, Dataset]:
    try:
        payload = json.loads(content.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise LoadError(f"Export is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict) or "timestamp" not in payload or "data" not in payload:
        raise LoadError("Export must contain 'timestamp' and 'data'")
    return str(payload["timestamp"]), Dataset.from_dict(payload["data"])
