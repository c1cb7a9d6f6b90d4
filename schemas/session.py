"""Workout session schemas."""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class ExerciseSetLog(BaseModel):
    """Reps and weight performed for one set of one exercise."""
    exercise_id: str = Field(..., description="Exercise identifier")
    set_index: int = Field(..., ge=0, description="0-based set index, unique per exercise")
    reps_completed: int = Field(0, ge=0, description="Reps performed; 0 means not yet performed")
    weight_kg: Optional[float] = Field(None, description="Weight used")
    timestamp: datetime = Field(..., description="Last update time")

    @property
    def is_complete(self) -> bool:
        return self.reps_completed > 0


class WorkoutSession(BaseModel):
    """One performance of a day plan."""
    id: str = Field(..., description="Server-assigned or locally generated id")
    date: datetime = Field(..., description="Session date")
    day_label: str = Field(..., description="Label of the originating day")
    exercise_logs: List[ExerciseSetLog] = Field(default_factory=list, description="Pre-populated set logs")
    started_at: datetime = Field(..., description="Start time")
    finished_at: datetime = Field(..., description="Finish time; provisional until finished")
    from_backend: bool = Field(False, description="Whether the session is synchronized with the service")


class SessionSummary(BaseModel):
    """Read-time aggregation over a session's set logs."""
    total_sets: int = 0
    total_reps: int = 0
    total_volume: float = 0.0
