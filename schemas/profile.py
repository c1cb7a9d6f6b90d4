"""User profile and strength estimate schemas."""

from typing import Dict, Optional
from pydantic import BaseModel, Field
from .enums import EquipmentType, Gender, Goal


class UserProfile(BaseModel):
    """Profile submitted at onboarding; replaced only by re-onboarding."""
    goal: Goal = Field(..., description="Training goal")
    equipment: EquipmentType = Field(..., description="Equipment class available")
    training_days_per_week: int = Field(..., ge=1, le=7, description="Training days per week")
    gender: Optional[Gender] = Field(None, description="Self-reported gender")
    age: Optional[int] = Field(None, description="Age in years")
    height_cm: Optional[float] = Field(None, description="Height in cm")
    weight_kg: Optional[float] = Field(None, description="Body weight in kg")


class StrengthEstimate(BaseModel):
    """Optional self-reported bests used to personalize starting weights."""
    bench_press_kg: Optional[float] = None
    squat_kg: Optional[float] = None
    deadlift_kg: Optional[float] = None
    lat_pulldown_kg: Optional[float] = None
    dumbbell_press_kg: Optional[float] = None
    dumbbell_row_kg: Optional[float] = None
    goblet_squat_kg: Optional[float] = None
    max_pushups: Optional[int] = None
    max_pullups: Optional[int] = None
    plank_seconds: Optional[int] = None

    def as_lifts(self) -> Dict[str, float]:
        """Only the estimates the user actually filled in."""
        return {key: value for key, value in self.model_dump().items() if value is not None}
