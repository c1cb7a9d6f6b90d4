"""Request and response models for the remote service."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class ProgramInitProfile(BaseModel):
    """Profile block of the program initialization request."""
    gender: Optional[str] = None
    age: Optional[int] = None
    height_cm: Optional[float] = None
    weight_kg: Optional[float] = None
    equipment: str = Field(..., description="Equipment class")
    goal: str = Field(..., description="Training goal")
    training_days: int = Field(..., description="Training days per week")


class ProgramInitRequest(BaseModel):
    """Request body for POST /api/program/init."""
    profile: ProgramInitProfile
    strength: Dict[str, Optional[float]] = Field(default_factory=dict, description="Optional lift estimates")


class ProgramInitDay(BaseModel):
    day: int = Field(..., description="Day number")
    label: str = Field(..., description="Day label")
    exercises: List[Dict[str, Any]] = Field(default_factory=list)


class ProgramInitResponse(BaseModel):
    """Response of POST /api/program/init."""
    id: str
    days_per_week: int
    days: List[ProgramInitDay] = Field(default_factory=list)


class TodayWorkoutResponse(BaseModel):
    """Response of GET /api/workout/today."""
    day: Optional[str] = None
    day_label: Optional[str] = None
    exercises: List[Dict[str, Any]] = Field(default_factory=list)
    workout_id: Optional[str] = None


class ExerciseChange(BaseModel):
    """Single change entry of a workout update."""
    exercise_id: str
    action: str = "swap"
    new_exercise: Optional[Dict[str, Any]] = None


class UpdateWorkoutRequest(BaseModel):
    """Request body for PATCH /api/workout/update."""
    workout_id: str = Field(..., description="Workout id or day label")
    changes: List[ExerciseChange] = Field(default_factory=list)


class UpdateWorkoutResponse(BaseModel):
    status: str
    changes: List[Dict[str, Any]] = Field(default_factory=list)


class LogWorkoutRequest(BaseModel):
    """Request body for POST /api/workout/log."""
    workout_id: str
    exercise_id: str
    actual_weight: Optional[float] = None
    target_weight: Optional[float] = None
    sets: int
    reps: str
    completed: bool


class LogWorkoutResponse(BaseModel):
    status: str


class FinishWorkoutResponse(BaseModel):
    """Response of POST /api/workout/finish."""
    message: Optional[str] = None
    progress: Optional[Dict[str, Any]] = None


class HistoryEntry(BaseModel):
    date: str
    weight: float


class ExerciseGuideRequest(BaseModel):
    """Request body for POST /api/exercise/guide."""
    exercise_name: Optional[str] = None
    image_url: Optional[str] = None


class ExerciseGuide(BaseModel):
    """Response of POST /api/exercise/guide."""
    muscles: List[str] = Field(default_factory=list)
    steps: List[str] = Field(default_factory=list)
    mistakes: List[str] = Field(default_factory=list)
    metadata: Optional[Dict[str, Any]] = None
