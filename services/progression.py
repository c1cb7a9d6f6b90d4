"""Weight progression heuristic applied to a program after training."""

from typing import Dict, List, Optional
from config.progression_config import PROGRESSION_CONFIG
from schemas.program import TrainingProgram
from schemas.session import WorkoutSession
from utils.logger import setup_logger

logger = setup_logger(__name__)


def _accumulate_logged_weight(sessions: List[WorkoutSession]) -> Dict[str, float]:
    """Sum the logged weight per exercise id across the given sessions."""
    totals: Dict[str, float] = {}
    for session in sessions:
        for log in session.exercise_logs:
            totals[log.exercise_id] = totals.get(log.exercise_id, 0.0) + (log.weight_kg or 0.0)
    return totals


def weight_increment(current_weight: float) -> float:
    """Bump for a suggested weight: bigger jumps once the lift is heavy."""
    if current_weight >= PROGRESSION_CONFIG["heavy_threshold_kg"]:
        return PROGRESSION_CONFIG["heavy_increment_kg"]
    return PROGRESSION_CONFIG["light_increment_kg"]


def update_program_with_progress(
    program: TrainingProgram,
    sessions: Optional[List[WorkoutSession]]
) -> TrainingProgram:
    """Return a copy of the program with suggested weights raised.

    Only the most recent sessions are considered. An exercise is progressed
    when any weight was logged for it in that window and it already has a
    suggested weight; bodyweight work is never touched. The logged amount is
    only a participation signal, its size does not matter.

    Args:
        program: Current training program. Not modified.
        sessions: Session history, oldest first.

    Returns:
        A new TrainingProgram sharing no objects with the input.
    """
    window = PROGRESSION_CONFIG["recent_sessions"]
    recent = list(sessions or [])[-window:]
    totals = _accumulate_logged_weight(recent)

    updated = program.model_copy(deep=True)
    bumped = 0
    for day in updated.days:
        for exercise in day.exercises:
            if not totals.get(exercise.id) or not exercise.suggested_weight_kg:
                continue
            exercise.suggested_weight_kg = exercise.suggested_weight_kg + weight_increment(
                exercise.suggested_weight_kg
            )
            bumped += 1

    logger.info(
        f"Applied progression to program {program.id}: {bumped} exercises raised "
        f"from {len(recent)} recent sessions"
    )
    return updated
