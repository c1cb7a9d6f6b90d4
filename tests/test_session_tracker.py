"""Tests for the session lifecycle, summaries and remote-backed operations."""

from datetime import datetime, timezone

import pytest

from conftest import make_exercise
from schemas.enums import EquipmentType, Goal
from schemas.profile import StrengthEstimate, UserProfile
from schemas.program import TrainingProgramDay
from schemas.session import ExerciseSetLog, WorkoutSession
from services.session_tracker import SessionTracker, summarize_session


@pytest.fixture
def tracker(api_client, checkpoint) -> SessionTracker:
    return SessionTracker(api_client=api_client, checkpoint=checkpoint)


@pytest.fixture
def profile() -> UserProfile:
    return UserProfile(goal=Goal.MUSCLE, equipment=EquipmentType.FULL_GYM, training_days_per_week=3, age=30)


def test_start_session_builds_one_log_per_set(tracker, push_day):
    session = tracker.start_session(push_day)

    assert len(session.exercise_logs) == 9
    assert [log.set_index for log in session.exercise_logs[:3]] == [0, 1, 2]
    assert all(log.reps_completed == 0 for log in session.exercise_logs)
    assert session.exercise_logs[0].weight_kg == 60
    assert session.exercise_logs[-1].weight_kg is None
    assert session.id.startswith("local-")
    assert session.day_label == "Push"
    assert session.started_at == session.finished_at
    assert session.from_backend is False


def test_start_session_uses_external_id(tracker, push_day):
    session = tracker.start_session(push_day, external_id="w-42", from_backend=True)

    assert session.id == "w-42"
    assert session.from_backend is True


def test_start_session_replaces_unfinished_session(tracker, push_day):
    tracker.start_session(push_day, external_id="first")
    tracker.log_set("bench_press", 0, 8, 60)

    tracker.start_session(push_day, external_id="second")

    assert tracker.current_session.id == "second"
    assert tracker.summarize().total_sets == 0
    assert tracker.past_sessions == ()


def test_log_set_updates_matching_log_only(tracker, push_day):
    tracker.start_session(push_day)

    assert tracker.log_set("bench_press", 1, 8, 62.5) is True

    logs = tracker.current_session.exercise_logs
    assert logs[1].reps_completed == 8
    assert logs[1].weight_kg == 62.5
    assert logs[0].reps_completed == 0
    assert len(logs) == 9


def test_log_set_ignores_unknown_index_and_exercise(tracker, push_day):
    tracker.start_session(push_day)

    assert tracker.log_set("bench_press", 7, 8, 60) is False
    assert tracker.log_set("deadlift", 0, 5, 100) is False
    assert len(tracker.current_session.exercise_logs) == 9
    assert tracker.summarize().total_reps == 0


def test_log_set_without_session_is_noop(tracker):
    assert tracker.log_set("bench_press", 0, 8, 60) is False
    assert tracker.current_session is None


def test_log_set_rejects_negative_reps(tracker, push_day):
    tracker.start_session(push_day)
    with pytest.raises(ValueError):
        tracker.log_set("bench_press", 0, -1, 60)


def test_summary_totals():
    now = datetime(2024, 5, 1, tzinfo=timezone.utc)
    session = WorkoutSession(
        id="s",
        date=now,
        day_label="Push",
        exercise_logs=[
            ExerciseSetLog(exercise_id="bench_press", set_index=i, reps_completed=reps, weight_kg=60, timestamp=now)
            for i, reps in enumerate([8, 8, 0])
        ],
        started_at=now,
        finished_at=now,
    )

    summary = summarize_session(session)

    assert summary.total_sets == 2
    assert summary.total_reps == 16
    assert summary.total_volume == 960


def test_summary_treats_missing_weight_as_zero(tracker, push_day):
    tracker.start_session(push_day)
    tracker.log_set("push_up", 0, 15)
    tracker.log_set("bench_press", 0, 5, 60)

    summary = tracker.summarize()

    assert summary.total_sets == 2
    assert summary.total_reps == 20
    assert summary.total_volume == 300


def test_summary_without_any_session_is_zero(tracker):
    summary = tracker.summarize()
    assert (summary.total_sets, summary.total_reps, summary.total_volume) == (0, 0, 0)


def test_next_exercise_follows_day_order(tracker, push_day):
    tracker.start_session(push_day)
    assert tracker.next_exercise().id == "bench_press"

    for set_index in range(3):
        tracker.log_set("bench_press", set_index, 8, 60)
    assert tracker.next_exercise().id == "overhead_press"

    for exercise_id in ("overhead_press", "push_up"):
        for set_index in range(3):
            tracker.log_set(exercise_id, set_index, 10)
    assert tracker.next_exercise() is None
    assert tracker.is_session_complete() is True
    assert tracker.current_session is not None


def test_finish_session_moves_session_to_history_once(tracker, push_day, program):
    tracker.set_training_program(program)
    tracker.start_session(push_day)
    tracker.log_set("bench_press", 0, 8, 60)

    finished = tracker.finish_session()

    assert finished is not None
    assert finished.finished_at >= finished.started_at
    assert tracker.current_session is None
    assert tracker.current_day_plan is None
    assert len(tracker.past_sessions) == 1

    assert tracker.finish_session() is None
    assert len(tracker.past_sessions) == 1


def test_finish_session_applies_progression(tracker, push_day, program):
    tracker.set_training_program(program)
    tracker.start_session(push_day)
    tracker.log_set("bench_press", 0, 8, 60)

    tracker.finish_session()

    bench = tracker.training_program.days[0].exercises[0]
    assert bench.suggested_weight_kg == 65
    # pre-filled weights count as a signal even for sets never performed
    assert tracker.training_program.days[0].exercises[1].suggested_weight_kg == 42.5
    assert tracker.training_program.days[1].exercises[0].suggested_weight_kg == 50


def test_summary_falls_back_to_last_finished_session(tracker, push_day):
    tracker.start_session(push_day)
    tracker.log_set("bench_press", 0, 8, 60)
    tracker.finish_session()

    assert tracker.summarize().total_volume == 480


def test_subscribers_are_notified_until_unsubscribed(tracker, push_day):
    seen = []
    unsubscribe = tracker.subscribe(lambda t: seen.append(t.current_session is not None))

    tracker.start_session(push_day)
    unsubscribe()
    tracker.finish_session()

    assert seen == [True]


def test_failing_subscriber_does_not_block_mutation(tracker, push_day):
    def broken(_):
        raise RuntimeError("boom")

    tracker.subscribe(broken)
    tracker.start_session(push_day)

    assert tracker.current_session is not None


def test_fallback_day_plan_uses_weekday(tracker, program):
    assert tracker.fallback_day_plan() is None
    tracker.set_training_program(program)

    sunday = datetime(2024, 5, 5, tzinfo=timezone.utc)
    monday = datetime(2024, 5, 6, tzinfo=timezone.utc)

    assert tracker.fallback_day_plan(sunday).label == "Push"
    assert tracker.fallback_day_plan(monday).label == "Pull"


async def test_initialize_program_stores_generated_program(tracker, service, profile):
    service.reply("POST", "/api/program/init", body={
        "id": "program-9",
        "days_per_week": 3,
        "days": [
            {"day": 1, "label": "Full Body A", "exercises": [
                {"id": "squat", "name": "Squat", "target_weight": 80, "sets": 5, "reps": 5},
                {"name": "Plank"},
            ]},
        ],
    })

    ok = await tracker.initialize_program(profile, StrengthEstimate(squat_kg=100))
    await tracker.flush()

    assert ok is True
    assert tracker.program_error is None
    assert tracker.loading_program is False
    assert tracker.onboarding_complete is True
    assert tracker.needs_onboarding is False
    day = tracker.training_program.days[0]
    assert day.exercises[0].suggested_weight_kg == 80
    assert day.exercises[0].suggested_sets == 5
    assert day.exercises[1].id == "exercise-1"
    assert day.exercises[1].suggested_weight_kg is None
    assert day.exercises[1].rest_seconds == 90

    body = service.bodies("POST", "/api/program/init")[0]
    assert body["profile"]["goal"] == "muscle"
    assert body["profile"]["training_days"] == 3
    assert body["strength"] == {"squat_kg": 100}


async def test_initialize_program_failure_keeps_prior_state(tracker, service, profile, program):
    tracker.set_training_program(program)
    service.reply("POST", "/api/program/init", status=503, body={"message": "Generator offline"})

    ok = await tracker.initialize_program(profile)
    await tracker.flush()

    assert ok is False
    assert tracker.program_error == "Generator offline"
    assert tracker.loading_program is False
    assert tracker.training_program.id == "program-1"
    assert tracker.user_profile is None


async def test_load_today_plan_and_start_remote_session(tracker, service, program):
    tracker.set_training_program(program)
    service.reply("GET", "/api/workout/today", body={
        "day": "2",
        "day_label": "Upper",
        "workout_id": "w-7",
        "exercises": [{"id": "bench_press", "name": "Bench", "target_weight": 60, "sets": 2, "reps": "8-10"}],
    })

    plan = await tracker.load_today_plan()
    session = tracker.start_today_session()
    await tracker.flush()

    assert plan.label == "Upper"
    assert plan.day_index == 2
    assert plan.exercises[0].suggested_reps == 8
    assert session.id == "w-7"
    assert session.from_backend is True
    assert len(session.exercise_logs) == 2


async def test_load_today_plan_failure_falls_back_to_program(tracker, service, program):
    tracker.set_training_program(program)
    service.reply("GET", "/api/workout/today", body={
        "day_label": "Yesterday",
        "workout_id": "w-old",
        "exercises": [{"id": "bench_press", "sets": 2}],
    })
    await tracker.load_today_plan()
    service.reply("GET", "/api/workout/today", status=500, body="upstream exploded")

    plan = await tracker.load_today_plan()
    session = tracker.start_today_session()
    await tracker.flush()

    assert tracker.today_error == "upstream exploded"
    assert tracker.today_plan is None
    assert tracker.today_workout_id is None
    assert plan is not None
    assert plan.label != "Yesterday"
    assert session.from_backend is False
    assert session.id.startswith("local-")


async def test_complete_session_syncs_remote_finish(tracker, service, push_day):
    service.reply("POST", "/api/workout/finish", body={"message": "Great job", "progress": {"bench_press": "+2.5kg"}})
    tracker.start_session(push_day, external_id="w-1", from_backend=True)

    finished = await tracker.complete_session()
    await tracker.flush()

    assert finished.id == "w-1"
    assert tracker.sync_error is None
    assert tracker.last_finish_response.message == "Great job"
    assert service.calls("POST", "/api/workout/finish")[0].url.params["workout_id"] == "w-1"


async def test_complete_session_failure_still_finishes_locally(tracker, service, push_day):
    service.reply("POST", "/api/workout/finish", status=502, body={"detail": "bad gateway"})
    tracker.start_session(push_day, external_id="w-1", from_backend=True)

    finished = await tracker.complete_session()

    assert finished is not None
    assert len(tracker.past_sessions) == 1
    assert tracker.sync_error == "Request failed"
    assert tracker.sync_queue.pending_keys == ["finish:w-1"]

    service.reply("POST", "/api/workout/finish", body={})
    assert await tracker.sync_pending() == 0
    assert tracker.sync_queue.pending_keys == []
    assert tracker.sync_error is None
    await tracker.flush()


async def test_complete_local_session_does_not_call_service(tracker, service, push_day):
    tracker.start_session(push_day)

    await tracker.complete_session()
    await tracker.flush()

    assert service.requests == []
    assert len(tracker.past_sessions) == 1


async def test_complete_session_without_active_session(tracker):
    assert await tracker.complete_session() is None


def test_log_set_never_changes_log_count(tracker):
    day = TrainingProgramDay(
        day_index=1,
        label="Legs",
        exercises=[make_exercise("squat", 100, sets=5), make_exercise("lunge", 20, sets=2)],
    )
    session = tracker.start_session(day)
    tracker.log_set("squat", 4, 5, 100)
    tracker.log_set("lunge", 2, 10, 20)

    assert len(session.exercise_logs) == 7
    assert len(tracker.current_session.exercise_logs) == 7


def test_finished_history_cannot_be_changed_by_callers(tracker, push_day):
    tracker.start_session(push_day)
    finished = tracker.finish_session()

    finished.exercise_logs[0].reps_completed = 99
    tracker.past_sessions[0].day_label = "tampered"

    stored = tracker.past_sessions[0]
    assert stored.exercise_logs[0].reps_completed == 0
    assert stored.day_label == "Push"


def test_active_session_changes_only_through_log_set(tracker, push_day):
    started = tracker.start_session(push_day)

    started.exercise_logs.pop()
    tracker.current_session.exercise_logs.append(started.exercise_logs[0])

    assert len(tracker.current_session.exercise_logs) == 9
    assert tracker.summarize().total_sets == 0


async def test_load_today_plan_with_malformed_exercise_falls_back(tracker, service, program):
    tracker.set_training_program(program)
    service.reply("GET", "/api/workout/today", body={
        "workout_id": "w-7",
        "exercises": [{"id": "bench_press", "target_weight": "heavy"}],
    })

    plan = await tracker.load_today_plan()

    assert tracker.today_error == "Unexpected response from service"
    assert tracker.today_plan is None
    assert tracker.today_workout_id is None
    assert plan == tracker.fallback_day_plan()
    assert tracker.loading_today is False


async def test_initialize_program_with_malformed_exercise_keeps_prior_state(tracker, service, profile, program):
    tracker.set_training_program(program)
    service.reply("POST", "/api/program/init", body={
        "id": "program-2",
        "days_per_week": 3,
        "days": [{"day": 1, "label": "Full body", "exercises": [{"id": "squat", "name": ["Squat"]}]}],
    })

    ok = await tracker.initialize_program(profile)
    await tracker.flush()

    assert ok is False
    assert tracker.program_error == "Unexpected response from service"
    assert tracker.training_program.id == "program-1"
    assert tracker.onboarding_complete is False


def test_local_ids_are_unique_within_the_same_millisecond(tracker, push_day):
    first = tracker.start_session(push_day)
    second = tracker.start_session(push_day)

    assert first.id != second.id
