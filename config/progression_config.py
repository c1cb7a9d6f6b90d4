"""Progression and plan-mapping configuration."""

from typing import Dict, Any

# Weight progression heuristic
PROGRESSION_CONFIG: Dict[str, Any] = {
    "recent_sessions": 3,
    "heavy_threshold_kg": 60,
    "heavy_increment_kg": 5.0,
    "light_increment_kg": 2.5,
}

# Defaults applied when the remote service omits exercise fields
EXERCISE_DEFAULTS: Dict[str, Any] = {
    "equipment": "any",
    "suggested_reps": 10,
    "suggested_sets": 3,
    "rest_seconds": 90,
    "day_label": "Today",
    "day_index": 1,
}
