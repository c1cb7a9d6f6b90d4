"""Editable day plan with toggle-style set completion."""

from typing import Callable, List, Optional
from schemas.api import (
    ExerciseChange,
    FinishWorkoutResponse,
    LogWorkoutRequest,
    UpdateWorkoutRequest,
)
from schemas.enums import PlanGoal
from schemas.workout_plan import (
    ExerciseActions,
    ExercisePlan,
    PlanPreferences,
    PlanProfile,
    WorkoutLog,
    WorkoutPlan,
)
from services.api_client import FitnessApiClient
from services.plan_mapper import build_plan_init_request, plan_from_init_response, plan_from_today_response
from services.sync_queue import SyncQueue
from utils.errors import ServiceError
from utils.logger import setup_logger

logger = setup_logger(__name__)

Listener = Callable[["WorkoutPlanStore"], None]


def default_plan() -> WorkoutPlan:
    """Starter push day shown before a plan is loaded."""
    return WorkoutPlan(
        day="Push Day",
        goal=PlanGoal.HYPERTROPHY,
        exercises=[
            ExercisePlan(
                id="bench_press",
                name="Bench Press",
                sets=3,
                reps="8",
                target_weight=60,
                user_weight=62.5,
                actions=ExerciseActions(edited=True),
            ),
            ExercisePlan(id="incline_dumbbell_press", name="Incline Dumbbell Press", sets=3, reps="10", target_weight=24),
            ExercisePlan(id="tricep_pushdown", name="Tricep Pushdown", sets=3, reps="12", target_weight=32),
        ],
        preferences=PlanPreferences(avoid_exercises=["barbell squat"], preferred_equipment=["dumbbell"]),
    )


class WorkoutPlanStore:
    """Plan with per-set completion toggles, mirrored to the service when bound.

    Toggles apply locally first; each one bound to a remote workout queues a
    log request. Sync failures only set plan_error.
    """

    def __init__(self, api_client: Optional[FitnessApiClient] = None):
        self.api = api_client or FitnessApiClient()
        self.profile = PlanProfile()
        self.plan = default_plan()
        self.logs: List[WorkoutLog] = []
        self.workout_id: Optional[str] = None

        self.loading_plan = False
        self.saving_changes = False
        self.finishing = False
        self.plan_error: Optional[str] = None
        self.last_finish_response: Optional[FinishWorkoutResponse] = None

        self.sync_queue = SyncQueue(on_error=self._on_sync_error)
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.error(f"Plan listener failed: {e}", exc_info=True)

    def _on_sync_error(self, key: str, error: ServiceError) -> None:
        self.plan_error = error.message or "Could not sync workout"
        self._notify()

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_exercise(self, exercise_id: str) -> Optional[ExercisePlan]:
        for exercise in self.plan.exercises:
            if exercise.id == exercise_id:
                return exercise
        return None

    def get_log(self, exercise_id: str) -> Optional[WorkoutLog]:
        for log in self.logs:
            if log.exercise_id == exercise_id:
                return log
        return None

    def active_exercises(self) -> List[ExercisePlan]:
        """Exercises not soft-deleted."""
        return [exercise for exercise in self.plan.exercises if not exercise.actions.removed]

    def completed_sets(self, exercise_id: str) -> int:
        log = self.get_log(exercise_id)
        return log.completed_sets if log else 0

    def total_sets(self) -> int:
        return sum(exercise.sets for exercise in self.active_exercises())

    def total_completed_sets(self) -> int:
        return sum(log.completed_sets for log in self.logs)

    def progress(self) -> int:
        """Percent of active sets completed, rounded down."""
        total = self.total_sets()
        if not total:
            return 0
        return (self.total_completed_sets() * 100) // total

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    def toggle_set_completion(self, exercise_id: str, set_index: int, weight: float) -> bool:
        """Flip one set between done (weight recorded) and not done.

        Any non-negative index is accepted; the weight list grows with empty
        sets to reach it.

        Returns:
            True if the set is now complete
        """
        if set_index < 0:
            raise ValueError("set_index cannot be negative")

        log = self.get_log(exercise_id)
        if log is None:
            exercise = self.get_exercise(exercise_id)
            total_sets = exercise.sets if exercise else 0
            log = WorkoutLog(exercise_id=exercise_id, total_sets=total_sets, weights=[None] * total_sets)
            self.logs.append(log)

        if set_index >= len(log.weights):
            log.weights.extend([None] * (set_index + 1 - len(log.weights)))

        completed = log.weights[set_index] is None
        log.weights[set_index] = weight if completed else None
        self._notify()

        if self.workout_id:
            self._queue_log_sync(exercise_id)
        return completed

    def _queue_log_sync(self, exercise_id: str) -> None:
        exercise = self.get_exercise(exercise_id)
        log = self.get_log(exercise_id)
        if not exercise or not log:
            return
        recorded = [weight for weight in log.weights if weight is not None]
        request = LogWorkoutRequest(
            workout_id=self.workout_id,
            exercise_id=exercise_id,
            actual_weight=recorded[-1] if recorded else None,
            target_weight=exercise.target_weight,
            sets=log.completed_sets,
            reps=exercise.reps,
            completed=log.completed_sets >= exercise.sets,
        )

        async def send() -> None:
            await self.api.log_workout(request)

        self.sync_queue.enqueue(f"log:{exercise_id}", send)
        self.sync_queue.schedule()

    async def retry_sync(self) -> int:
        """Re-run queued log requests that failed."""
        self.plan_error = None
        failures = await self.sync_queue.run_pending()
        self._notify()
        return failures

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def update_exercise(self, updated: ExercisePlan) -> None:
        self.plan.exercises = [
            updated.model_copy(deep=True) if exercise.id == updated.id else exercise
            for exercise in self.plan.exercises
        ]
        self._notify()

    def edit_exercise(self, exercise_id: str) -> None:
        """Add a set and flag the exercise as edited."""
        target = self.get_exercise(exercise_id)
        if not target:
            return
        self.update_exercise(target.model_copy(update={
            "sets": target.sets + 1,
            "actions": target.actions.model_copy(update={"edited": True}),
        }))

    def swap_exercise(self, exercise_id: str) -> None:
        target = self.get_exercise(exercise_id)
        if not target:
            return
        self.update_exercise(target.model_copy(update={
            "actions": target.actions.model_copy(update={"swap": True}),
        }))

    def remove_exercise(self, exercise_id: str) -> None:
        """Soft delete: the exercise stays in the plan, hidden from display."""
        target = self.get_exercise(exercise_id)
        if not target:
            return
        self.update_exercise(target.model_copy(update={
            "actions": target.actions.model_copy(update={"removed": True}),
        }))

    def _clear_actions(self) -> None:
        for exercise in self.plan.exercises:
            exercise.actions = ExerciseActions()

    async def persist_changes(self) -> bool:
        """Send swapped exercises as one batch, then clear every exercise's flags."""
        swaps = [exercise for exercise in self.plan.exercises if exercise.actions.swap]
        if not swaps:
            self._clear_actions()
            self._notify()
            return True

        request = UpdateWorkoutRequest(
            workout_id=self.workout_id or self.plan.day,
            changes=[
                ExerciseChange(
                    exercise_id=exercise.id,
                    action="swap",
                    new_exercise=exercise.model_dump(mode="json", exclude={"actions"}),
                )
                for exercise in swaps
            ],
        )

        self.saving_changes = True
        self.plan_error = None
        self._notify()
        try:
            await self.api.update_workout(request)
        except ServiceError as e:
            self.plan_error = e.message or "Could not save changes"
            return False
        finally:
            self.saving_changes = False
            self._notify()

        self._clear_actions()
        logger.info(f"Persisted {len(swaps)} swapped exercises for {request.workout_id}")
        self._notify()
        return True

    # ------------------------------------------------------------------
    # Remote plan lifecycle
    # ------------------------------------------------------------------

    def set_profile(self, profile: PlanProfile) -> None:
        self.profile = profile.model_copy(deep=True)
        self._notify()

    async def load_plan(self, profile: Optional[PlanProfile] = None) -> bool:
        """Generate a program for the profile and use its first day."""
        profile = profile or self.profile
        self.loading_plan = True
        self.plan_error = None
        self._notify()
        try:
            response = await self.api.initialize_program(build_plan_init_request(profile))
            plan = plan_from_init_response(response, profile)
        except ServiceError as e:
            self.plan_error = e.message or "Unable to load plan"
            return False
        finally:
            self.loading_plan = False
            self._notify()

        self.profile = profile.model_copy(deep=True)
        self.plan = plan
        self.logs = []
        self._notify()
        return True

    async def fetch_today_workout(self) -> bool:
        """Load today's workout and bind its id for set syncing."""
        self.loading_plan = True
        self.plan_error = None
        self._notify()
        try:
            response = await self.api.get_todays_workout()
            plan = plan_from_today_response(response, self.profile.goal)
        except ServiceError as e:
            self.plan_error = e.message or "Unable to load today's workout"
            return False
        finally:
            self.loading_plan = False
            self._notify()

        self.plan = plan
        self.workout_id = response.workout_id
        self.logs = []
        self._notify()
        return True

    async def complete_workout(self) -> Optional[FinishWorkoutResponse]:
        """Flush pending set syncs and finish the bound remote workout."""
        self.finishing = True
        self._notify()
        try:
            await self.sync_queue.drain()
            await self.sync_queue.run_pending()
            if not self.workout_id:
                return None
            try:
                self.last_finish_response = await self.api.finish_workout(self.workout_id)
            except ServiceError as e:
                self.plan_error = e.message or "Could not finish workout"
                return None
            return self.last_finish_response
        finally:
            self.finishing = False
            self._notify()

    def reset(self) -> None:
        self.plan = default_plan()
        self.logs = []
        self.workout_id = None
        self.plan_error = None
        self._notify()
