"""Training program schemas."""

from typing import List, Optional, Union
from pydantic import BaseModel, Field
from .enums import EquipmentType


class Exercise(BaseModel):
    """Program-level exercise owned by exactly one day."""
    id: str = Field(..., description="Identifier, unique within a day")
    name: str = Field(..., description="Display name")
    equipment: Union[EquipmentType, str] = Field("any", description="Equipment requirement or 'any'")
    suggested_weight_kg: Optional[float] = Field(None, description="Target weight; None for bodyweight work")
    suggested_reps: int = Field(..., description="Suggested reps per set")
    suggested_sets: int = Field(..., description="Suggested number of sets")
    rest_seconds: int = Field(..., description="Rest between sets in seconds")


class TrainingProgramDay(BaseModel):
    """One day's ordered exercise list."""
    day_index: int = Field(..., description="Ordered day index")
    label: str = Field(..., description="Day label")
    exercises: List[Exercise] = Field(default_factory=list, description="Exercises in display order")

    def get_exercise(self, exercise_id: str) -> Optional[Exercise]:
        for exercise in self.exercises:
            if exercise.id == exercise_id:
                return exercise
        return None


class TrainingProgram(BaseModel):
    """Multi-day program, generated once and progressively adjusted."""
    id: str = Field(..., description="Program identifier")
    days_per_week: int = Field(..., description="Training days per week")
    days: List[TrainingProgramDay] = Field(default_factory=list, description="Ordered days")
