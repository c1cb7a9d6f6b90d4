"""Schemas for profiles, programs, sessions, plans and service payloads."""

from schemas.enums import (
    EquipmentType,
    Experience,
    Gender,
    Goal,
    PlanEquipment,
    PlanGoal,
)
from schemas.profile import StrengthEstimate, UserProfile
from schemas.program import Exercise, TrainingProgram, TrainingProgramDay
from schemas.session import ExerciseSetLog, SessionSummary, WorkoutSession
from schemas.workout_plan import (
    ExerciseActions,
    ExercisePlan,
    PlanPreferences,
    PlanProfile,
    WorkoutLog,
    WorkoutPlan,
)
from schemas.api import (
    ExerciseChange,
    ExerciseGuide,
    ExerciseGuideRequest,
    FinishWorkoutResponse,
    HistoryEntry,
    LogWorkoutRequest,
    LogWorkoutResponse,
    ProgramInitDay,
    ProgramInitProfile,
    ProgramInitRequest,
    ProgramInitResponse,
    TodayWorkoutResponse,
    UpdateWorkoutRequest,
    UpdateWorkoutResponse,
)

__all__ = [
    "EquipmentType",
    "Experience",
    "Gender",
    "Goal",
    "PlanEquipment",
    "PlanGoal",
    "StrengthEstimate",
    "UserProfile",
    "Exercise",
    "TrainingProgram",
    "TrainingProgramDay",
    "ExerciseSetLog",
    "SessionSummary",
    "WorkoutSession",
    "ExerciseActions",
    "ExercisePlan",
    "PlanPreferences",
    "PlanProfile",
    "WorkoutLog",
    "WorkoutPlan",
    "ExerciseChange",
    "ExerciseGuide",
    "ExerciseGuideRequest",
    "FinishWorkoutResponse",
    "HistoryEntry",
    "LogWorkoutRequest",
    "LogWorkoutResponse",
    "ProgramInitDay",
    "ProgramInitProfile",
    "ProgramInitRequest",
    "ProgramInitResponse",
    "TodayWorkoutResponse",
    "UpdateWorkoutRequest",
    "UpdateWorkoutResponse",
]
