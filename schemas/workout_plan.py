"""Editable day plan schemas."""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field
from .enums import Experience, PlanEquipment, PlanGoal


class ExerciseActions(BaseModel):
    """Pending edit flags for a plan exercise."""
    swap: bool = False
    edited: bool = False
    removed: bool = False


class ExercisePlan(BaseModel):
    """Exercise within an editable day plan."""
    id: str = Field(..., description="Exercise identifier")
    name: str = Field(..., description="Display name")
    sets: int = Field(..., description="Number of sets")
    reps: str = Field(..., description="Rep target, e.g. '8' or '8-10'")
    target_weight: float = Field(..., description="Target weight in kg")
    user_weight: Optional[float] = Field(None, description="Weight the user last chose")
    actions: ExerciseActions = Field(default_factory=ExerciseActions)


class PlanPreferences(BaseModel):
    avoid_exercises: List[str] = Field(default_factory=list)
    preferred_equipment: List[str] = Field(default_factory=list)


class WorkoutPlan(BaseModel):
    """Day plan with edit/swap/remove actions."""
    day: str = Field(..., description="Day label")
    goal: PlanGoal = Field(..., description="Plan goal")
    exercises: List[ExercisePlan] = Field(default_factory=list)
    preferences: Optional[PlanPreferences] = None


class WorkoutLog(BaseModel):
    """Per-exercise completion state; None in weights means not completed."""
    exercise_id: str
    total_sets: int
    weights: List[Optional[float]] = Field(default_factory=list)

    @property
    def completed_sets(self) -> int:
        return sum(1 for weight in self.weights if weight is not None)


class PlanProfile(BaseModel):
    """Quick onboarding answers for the editable plan flow."""
    goal: PlanGoal = PlanGoal.HYPERTROPHY
    experience: Experience = Experience.INTERMEDIATE
    equipment: PlanEquipment = PlanEquipment.FULL_GYM
    lifts: Dict[str, float] = Field(default_factory=dict)
