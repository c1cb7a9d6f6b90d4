"""Active workout session state and its lifecycle."""

import asyncio
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Set, Tuple
from pydantic import ValidationError
from schemas.api import FinishWorkoutResponse
from schemas.profile import StrengthEstimate, UserProfile
from schemas.program import Exercise, TrainingProgram, TrainingProgramDay
from schemas.session import ExerciseSetLog, SessionSummary, WorkoutSession
from services.api_client import FitnessApiClient
from services.checkpoint import CheckpointManager
from services.plan_mapper import (
    build_program_init_request,
    day_from_today_response,
    program_from_init_response,
)
from services.progression import update_program_with_progress
from services.sync_queue import SyncQueue
from utils.errors import ServiceError
from utils.helpers import generate_local_id, js_weekday, utc_now
from utils.logger import setup_logger

logger = setup_logger(__name__)

Listener = Callable[["SessionTracker"], None]


def summarize_session(session: Optional[WorkoutSession]) -> SessionSummary:
    """Totals over a session's logs; an unperformed set counts nothing."""
    if not session:
        return SessionSummary()
    logs = session.exercise_logs
    return SessionSummary(
        total_sets=sum(1 for log in logs if log.is_complete),
        total_reps=sum(log.reps_completed for log in logs),
        total_volume=sum((log.weight_kg or 0) * log.reps_completed for log in logs),
    )


class SessionTracker:
    """Owner of the profile, program, active session and session history.

    Local mutations are synchronous and notify subscribers once applied.
    Network-backed operations are coroutines that report failures through
    the error slices instead of raising. Persisted fields are written to the
    checkpoint in the background after each change.
    """

    def __init__(
        self,
        api_client: Optional[FitnessApiClient] = None,
        checkpoint: Optional[CheckpointManager] = None
    ):
        self.api = api_client or FitnessApiClient()
        self.checkpoint = checkpoint or CheckpointManager()

        self._user_profile: Optional[UserProfile] = None
        self._strength_estimate: Optional[StrengthEstimate] = None
        self._training_program: Optional[TrainingProgram] = None
        self._current_session: Optional[WorkoutSession] = None
        self._current_day_plan: Optional[TrainingProgramDay] = None
        self._past_sessions: List[WorkoutSession] = []
        self._onboarding_complete = False

        # Async slices read by the presentation layer
        self.loading_program = False
        self.program_error: Optional[str] = None
        self.loading_today = False
        self.today_error: Optional[str] = None
        self.today_plan: Optional[TrainingProgramDay] = None
        self.today_workout_id: Optional[str] = None
        self.syncing = False
        self.sync_error: Optional[str] = None
        self.last_finish_response: Optional[FinishWorkoutResponse] = None

        self.sync_queue = SyncQueue(on_error=self._on_sync_error)
        self._listeners: List[Listener] = []
        self._pending_writes: Set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def user_profile(self) -> Optional[UserProfile]:
        return self._user_profile

    @property
    def strength_estimate(self) -> Optional[StrengthEstimate]:
        return self._strength_estimate

    @property
    def training_program(self) -> Optional[TrainingProgram]:
        return self._training_program

    @property
    def current_session(self) -> Optional[WorkoutSession]:
        """Copy of the active session; change it through log_set."""
        return self._current_session.model_copy(deep=True) if self._current_session else None

    @property
    def current_day_plan(self) -> Optional[TrainingProgramDay]:
        return self._current_day_plan

    @property
    def past_sessions(self) -> Tuple[WorkoutSession, ...]:
        return tuple(session.model_copy(deep=True) for session in self._past_sessions)

    @property
    def onboarding_complete(self) -> bool:
        return self._onboarding_complete

    @property
    def needs_onboarding(self) -> bool:
        return not self._onboarding_complete or self._training_program is None

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a function that removes it."""
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
                logger.error(f"Session listener failed: {e}", exc_info=True)

    def _changed(self, persist: bool = True) -> None:
        if persist:
            self._persist()
        self._notify()

    # ------------------------------------------------------------------
    # Profile and program
    # ------------------------------------------------------------------

    def set_user_profile(self, profile: UserProfile) -> None:
        self._user_profile = profile.model_copy(deep=True)
        self._changed()

    def set_strength_estimate(self, estimate: Optional[StrengthEstimate]) -> None:
        self._strength_estimate = estimate.model_copy(deep=True) if estimate else None
        self._changed()

    def set_training_program(self, program: TrainingProgram) -> None:
        self._training_program = program.model_copy(deep=True)
        self._changed()

    def mark_onboarding_complete(self) -> None:
        self._onboarding_complete = True
        self._changed()

    def apply_progression(self) -> None:
        """Revise suggested weights from the current history."""
        if not self._training_program:
            return
        self._training_program = update_program_with_progress(self._training_program, self._past_sessions)
        self._changed()

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def start_session(
        self,
        day_plan: TrainingProgramDay,
        external_id: Optional[str] = None,
        from_backend: bool = False
    ) -> WorkoutSession:
        """Start a live session for a day, replacing any unfinished one."""
        if self._current_session:
            logger.info(f"Discarding unfinished session {self._current_session.id}")

        now = utc_now()
        logs = [
            ExerciseSetLog(
                exercise_id=exercise.id,
                set_index=set_index,
                reps_completed=0,
                weight_kg=exercise.suggested_weight_kg,
                timestamp=now,
            )
            for exercise in day_plan.exercises
            for set_index in range(exercise.suggested_sets)
        ]
        session = WorkoutSession(
            id=external_id or generate_local_id(),
            date=now,
            day_label=day_plan.label,
            exercise_logs=logs,
            started_at=now,
            finished_at=now,
            from_backend=from_backend,
        )
        self._current_session = session
        self._current_day_plan = day_plan.model_copy(deep=True)
        logger.info(f"Started session {session.id} for {day_plan.label} with {len(logs)} sets")
        self._changed()
        return session.model_copy(deep=True)

    def log_set(
        self,
        exercise_id: str,
        set_index: int,
        reps_completed: int,
        weight_kg: Optional[float] = None
    ) -> bool:
        """Record reps and weight for one planned set.

        Returns:
            True if a matching log was updated. Without an active session or a
            matching (exercise, set) pair nothing happens.
        """
        if reps_completed < 0:
            raise ValueError("reps_completed cannot be negative")
        if not self._current_session:
            logger.debug("log_set called without an active session")
            return False

        for log in self._current_session.exercise_logs:
            if log.exercise_id == exercise_id and log.set_index == set_index:
                log.reps_completed = reps_completed
                log.weight_kg = weight_kg
                log.timestamp = utc_now()
                self._changed()
                return True

        logger.debug(f"No set {set_index} for exercise {exercise_id} in session {self._current_session.id}")
        return False

    def finish_session(self) -> Optional[WorkoutSession]:
        """Close the active session, append it to history and progress the program."""
        if not self._current_session:
            return None

        finished = self._current_session.model_copy(deep=True)
        finished.finished_at = utc_now()
        self._past_sessions.append(finished)
        self._current_session = None
        self._current_day_plan = None
        logger.info(f"Finished session {finished.id}; {len(self._past_sessions)} sessions in history")

        if self._training_program:
            self._training_program = update_program_with_progress(self._training_program, self._past_sessions)
        self._changed()
        return finished.model_copy(deep=True)

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    def summarize(self, session: Optional[WorkoutSession] = None) -> SessionSummary:
        """Summary of the given session, else the active one, else the last finished."""
        if session is None:
            session = self._current_session or (self._past_sessions[-1] if self._past_sessions else None)
        return summarize_session(session)

    def completed_sets(self, exercise_id: str) -> int:
        if not self._current_session:
            return 0
        return sum(
            1 for log in self._current_session.exercise_logs
            if log.exercise_id == exercise_id and log.is_complete
        )

    def next_exercise(self) -> Optional[Exercise]:
        """First exercise in day order with sets still to perform."""
        if not self._current_session or not self._current_day_plan:
            return None
        for exercise in self._current_day_plan.exercises:
            if self.completed_sets(exercise.id) < exercise.suggested_sets:
                return exercise
        return None

    def is_session_complete(self) -> bool:
        """All planned sets performed; the session still has to be finished."""
        return self._current_session is not None and self.next_exercise() is None

    # ------------------------------------------------------------------
    # Remote operations
    # ------------------------------------------------------------------

    async def initialize_program(
        self,
        profile: UserProfile,
        strength: Optional[StrengthEstimate] = None
    ) -> bool:
        """Submit onboarding answers and store the generated program."""
        self.loading_program = True
        self.program_error = None
        self._changed(persist=False)
        try:
            response = await self.api.initialize_program(build_program_init_request(profile, strength))
            program = program_from_init_response(response)
        except ServiceError as e:
            self.program_error = e.message or "Unable to generate program"
            return False
        finally:
            self.loading_program = False
            self._changed(persist=False)

        self.set_user_profile(profile)
        self.set_strength_estimate(strength)
        self.set_training_program(program)
        self.mark_onboarding_complete()
        return True

    async def load_today_plan(self) -> Optional[TrainingProgramDay]:
        """Fetch today's workout; on failure the program's fallback day applies."""
        self.loading_today = True
        self.today_error = None
        self.today_plan = None
        self.today_workout_id = None
        self._changed(persist=False)
        try:
            response = await self.api.get_todays_workout()
            self.today_plan = day_from_today_response(response)
            self.today_workout_id = response.workout_id
        except ServiceError as e:
            self.today_error = e.message or "Unable to load today's workout"
        finally:
            self.loading_today = False
            self._changed(persist=False)
        return self.todays_plan

    def fallback_day_plan(self, today: Optional[datetime] = None) -> Optional[TrainingProgramDay]:
        """Program day picked by weekday (Sunday first)."""
        if not self._training_program or not self._training_program.days:
            return None
        index = js_weekday(today) % len(self._training_program.days)
        return self._training_program.days[index]

    @property
    def todays_plan(self) -> Optional[TrainingProgramDay]:
        return self.today_plan or self.fallback_day_plan()

    def start_today_session(self) -> Optional[WorkoutSession]:
        """Progress the program, then start today's remote or fallback plan."""
        self.apply_progression()
        if self.today_plan:
            return self.start_session(self.today_plan, self.today_workout_id, from_backend=True)
        fallback = self.fallback_day_plan()
        if not fallback:
            logger.warning("No plan available to start a session")
            return None
        return self.start_session(fallback)

    async def complete_session(self) -> Optional[WorkoutSession]:
        """Finish locally and mirror the finish to the service when synced."""
        session = self._current_session
        if not session:
            return None
        if session.from_backend:
            workout_id = session.id
            self.sync_queue.enqueue(f"finish:{workout_id}", lambda: self._finish_remote(workout_id))
        finished = self.finish_session()
        await self.sync_pending()
        return finished

    async def _finish_remote(self, workout_id: str) -> None:
        self.last_finish_response = await self.api.finish_workout(workout_id)

    def _on_sync_error(self, key: str, error: ServiceError) -> None:
        self.sync_error = error.message or "Could not sync workout"

    async def sync_pending(self) -> int:
        """Run queued remote mirrors once; failures stay queued for a retry."""
        if not self.sync_queue.pending_keys:
            return 0
        self.syncing = True
        self.sync_error = None
        self._changed(persist=False)
        try:
            return await self.sync_queue.run_pending()
        finally:
            self.syncing = False
            self._changed(persist=False)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def snapshot(self) -> Dict[str, Any]:
        """JSON-ready blob of the persisted fields."""

        def dump(model):
            return model.model_dump(mode="json") if model is not None else None

        return {
            "user_profile": dump(self._user_profile),
            "strength_estimate": dump(self._strength_estimate),
            "training_program": dump(self._training_program),
            "current_session": dump(self._current_session),
            "current_day_plan": dump(self._current_day_plan),
            "past_sessions": [dump(session) for session in self._past_sessions],
            "onboarding_complete": self._onboarding_complete,
        }

    def _persist(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; state not persisted")
            return
        task = loop.create_task(self.checkpoint.save_state(self.snapshot()))
        self._pending_writes.add(task)
        task.add_done_callback(self._pending_writes.discard)

    async def flush(self) -> None:
        """Wait for background checkpoint writes."""
        while self._pending_writes:
            await asyncio.gather(*list(self._pending_writes))

    async def rehydrate(self) -> bool:
        """Restore persisted state; False means first run or unreadable data."""
        state = await self.checkpoint.load_state()
        if not state:
            return False

        try:
            profile = state.get("user_profile")
            estimate = state.get("strength_estimate")
            program = state.get("training_program")
            session = state.get("current_session")
            day_plan = state.get("current_day_plan")
            restored = (
                UserProfile.model_validate(profile) if profile else None,
                StrengthEstimate.model_validate(estimate) if estimate else None,
                TrainingProgram.model_validate(program) if program else None,
                WorkoutSession.model_validate(session) if session else None,
                TrainingProgramDay.model_validate(day_plan) if day_plan else None,
                [WorkoutSession.model_validate(item) for item in state.get("past_sessions") or []],
            )
        except ValidationError as e:
            logger.error(f"Discarding unreadable checkpoint: {e}")
            return False

        (
            self._user_profile,
            self._strength_estimate,
            self._training_program,
            self._current_session,
            self._current_day_plan,
            self._past_sessions,
        ) = restored
        self._onboarding_complete = bool(state.get("onboarding_complete", False))

        logger.info(f"Rehydrated state with {len(self._past_sessions)} past sessions")
        self._notify()
        return True

    async def reset(self) -> None:
        """Forget everything, including the persisted blob."""
        self._user_profile = None
        self._strength_estimate = None
        self._training_program = None
        self._current_session = None
        self._current_day_plan = None
        self._past_sessions = []
        self._onboarding_complete = False
        self.today_plan = None
        self.today_workout_id = None
        await self.flush()
        await self.checkpoint.clear_state()
        self._notify()
