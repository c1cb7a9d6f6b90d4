"""Mapping between service payloads and local plan models."""

import re
from typing import Any, Dict, Optional
from pydantic import ValidationError
from config.progression_config import EXERCISE_DEFAULTS
from schemas.api import (
    ProgramInitProfile,
    ProgramInitRequest,
    ProgramInitResponse,
    TodayWorkoutResponse,
)
from schemas.enums import Experience, PlanEquipment, PlanGoal
from schemas.profile import StrengthEstimate, UserProfile
from schemas.program import Exercise, TrainingProgram, TrainingProgramDay
from schemas.workout_plan import ExerciseActions, ExercisePlan, PlanPreferences, PlanProfile, WorkoutPlan
from utils.errors import ServiceError
from utils.helpers import parse_lift_estimates
from utils.logger import setup_logger

logger = setup_logger(__name__)

PLAN_GOAL_TO_GOAL = {
    PlanGoal.HYPERTROPHY: "muscle",
    PlanGoal.STRENGTH: "strength",
    PlanGoal.FAT_LOSS: "fat_loss",
}

PLAN_EQUIPMENT_TO_EQUIPMENT = {
    PlanEquipment.FULL_GYM: "full_gym",
    PlanEquipment.HOME: "dumbbells",
    PlanEquipment.MINIMAL: "bodyweight",
}

EXPERIENCE_TO_TRAINING_DAYS = {
    Experience.BEGINNER: 3,
    Experience.INTERMEDIATE: 4,
    Experience.ADVANCED: 5,
}


def _first(payload: Dict[str, Any], *keys: str) -> Any:
    """First value among keys that is present and not None."""
    for key in keys:
        if payload.get(key) is not None:
            return payload[key]
    return None


def _parse_int(value: Any, default: int) -> int:
    """Leading integer of a value such as 8, '8' or '8-10'."""
    if value is None:
        return default
    if isinstance(value, (int, float)):
        return int(value)
    match = re.match(r"\s*(\d+)", str(value))
    return int(match.group(1)) if match else default


def _unexpected_exercise(payload: Dict[str, Any], error: Exception) -> ServiceError:
    logger.error(f"Unexpected exercise payload {payload!r}: {error}")
    return ServiceError("Unexpected response from service", 200, payload)


def exercise_from_payload(payload: Dict[str, Any], index: int) -> Exercise:
    """Build a program exercise from a loosely shaped service exercise.

    Raises:
        ServiceError: If a field cannot be converted
    """
    try:
        return _build_exercise(payload, index)
    except (TypeError, ValueError, ValidationError) as e:
        raise _unexpected_exercise(payload, e) from e


def _build_exercise(payload: Dict[str, Any], index: int) -> Exercise:
    weight = _first(payload, "target_weight", "suggested_weight_kg", "suggestedWeightKg")
    return Exercise(
        id=str(payload.get("id") or f"exercise-{index}"),
        name=payload.get("name") or f"Exercise {index + 1}",
        equipment=payload.get("equipment") or EXERCISE_DEFAULTS["equipment"],
        suggested_weight_kg=float(weight) if weight is not None else None,
        suggested_reps=_parse_int(
            _first(payload, "reps", "suggested_reps", "suggestedReps"),
            EXERCISE_DEFAULTS["suggested_reps"]
        ),
        suggested_sets=_parse_int(
            _first(payload, "sets", "suggested_sets", "suggestedSets"),
            EXERCISE_DEFAULTS["suggested_sets"]
        ),
        rest_seconds=_parse_int(
            _first(payload, "rest_seconds", "restSeconds"),
            EXERCISE_DEFAULTS["rest_seconds"]
        ),
    )


def day_from_today_response(response: TodayWorkoutResponse) -> TrainingProgramDay:
    return TrainingProgramDay(
        day_index=_parse_int(response.day, EXERCISE_DEFAULTS["day_index"]) or EXERCISE_DEFAULTS["day_index"],
        label=response.day_label or EXERCISE_DEFAULTS["day_label"],
        exercises=[exercise_from_payload(ex, idx) for idx, ex in enumerate(response.exercises)],
    )


def program_from_init_response(response: ProgramInitResponse) -> TrainingProgram:
    return TrainingProgram(
        id=response.id,
        days_per_week=response.days_per_week,
        days=[
            TrainingProgramDay(
                day_index=day.day,
                label=day.label,
                exercises=[exercise_from_payload(ex, idx) for idx, ex in enumerate(day.exercises)],
            )
            for day in response.days
        ],
    )


def build_program_init_request(
    profile: UserProfile,
    strength: Optional[StrengthEstimate] = None
) -> ProgramInitRequest:
    return ProgramInitRequest(
        profile=ProgramInitProfile(
            gender=profile.gender.value if profile.gender else None,
            age=profile.age,
            height_cm=profile.height_cm,
            weight_kg=profile.weight_kg,
            equipment=profile.equipment.value,
            goal=profile.goal.value,
            training_days=profile.training_days_per_week,
        ),
        strength=strength.as_lifts() if strength else {},
    )


def build_plan_init_request(profile: PlanProfile) -> ProgramInitRequest:
    """Translate quick onboarding answers into a program request."""
    return ProgramInitRequest(
        profile=ProgramInitProfile(
            equipment=PLAN_EQUIPMENT_TO_EQUIPMENT[profile.equipment],
            goal=PLAN_GOAL_TO_GOAL[profile.goal],
            training_days=EXPERIENCE_TO_TRAINING_DAYS[profile.experience],
        ),
        strength=dict(profile.lifts),
    )


def exercise_plan_from_payload(payload: Dict[str, Any], index: int) -> ExercisePlan:
    exercise = exercise_from_payload(payload, index)
    reps = payload.get("reps")
    try:
        return ExercisePlan(
            id=exercise.id,
            name=exercise.name,
            sets=exercise.suggested_sets,
            reps=str(reps) if reps is not None else str(exercise.suggested_reps),
            target_weight=exercise.suggested_weight_kg or 0.0,
            user_weight=payload.get("user_weight"),
            actions=ExerciseActions(),
        )
    except ValidationError as e:
        raise _unexpected_exercise(payload, e) from e


def plan_from_init_response(response: ProgramInitResponse, profile: PlanProfile) -> WorkoutPlan:
    """First generated day becomes the editable plan."""
    first_day = response.days[0] if response.days else None
    return WorkoutPlan(
        day=first_day.label if first_day else EXERCISE_DEFAULTS["day_label"],
        goal=profile.goal,
        exercises=[
            exercise_plan_from_payload(ex, idx)
            for idx, ex in enumerate(first_day.exercises if first_day else [])
        ],
        preferences=PlanPreferences(preferred_equipment=[profile.equipment.value]),
    )


def plan_from_today_response(response: TodayWorkoutResponse, goal: PlanGoal) -> WorkoutPlan:
    return WorkoutPlan(
        day=response.day_label or EXERCISE_DEFAULTS["day_label"],
        goal=goal,
        exercises=[exercise_plan_from_payload(ex, idx) for idx, ex in enumerate(response.exercises)],
    )


def build_plan_profile(goal: str, experience: str, equipment: str, raw_lifts: Dict[str, Any]) -> PlanProfile:
    """Quick onboarding answers as entered; blank lift fields are left out."""
    return PlanProfile(
        goal=PlanGoal(goal),
        experience=Experience(experience),
        equipment=PlanEquipment(equipment),
        lifts=parse_lift_estimates(raw_lifts),
    )
