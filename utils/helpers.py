"""Helper utility functions."""

import time
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def generate_local_id(prefix: str = "local") -> str:
    """Build a locally unique identifier: epoch milliseconds plus a random suffix."""
    return f"{prefix}-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"


def parse_lift_estimates(raw: Mapping[str, Any]) -> Dict[str, float]:
    """Turn free-form lift inputs into numeric estimates.

    Blank entries are dropped; anything that is not a number is ignored.
    """
    estimates = {}
    for lift, value in raw.items():
        if value is None or (isinstance(value, str) and value.strip() == ""):
            continue
        try:
            estimates[lift] = float(value)
        except (TypeError, ValueError):
            continue
    return estimates


def js_weekday(day: Optional[datetime] = None) -> int:
    """Day of week with Sunday as 0, matching the service's calendar."""
    day = day or utc_now()
    return (day.weekday() + 1) % 7
