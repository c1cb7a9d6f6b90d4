"""Shared fixtures for the client tests."""

import json
from typing import Any, Callable, Dict, List, Tuple

import httpx
import pytest

from models.database import MemoryStore
from schemas.program import Exercise, TrainingProgram, TrainingProgramDay
from services.api_client import FitnessApiClient
from services.checkpoint import CheckpointManager

Route = Tuple[str, str]


class FakeService:
    """Scripted responses for the workout service, recording every request."""

    def __init__(self):
        self.routes: Dict[Route, Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: List[httpx.Request] = []

    def reply(self, method: str, path: str, status: int = 200, body: Any = None) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if isinstance(body, str):
                return httpx.Response(status, text=body)
            return httpx.Response(status, json=body if body is not None else {})

        self.routes[(method, path)] = handler

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"message": f"No route for {request.url.path}"})
        return handler(request)

    def bodies(self, method: str, path: str) -> List[Any]:
        return [
            json.loads(request.content)
            for request in self.requests
            if request.method == method and request.url.path == path and request.content
        ]

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]


@pytest.fixture
def service() -> FakeService:
    return FakeService()


@pytest.fixture
def api_client(service) -> FitnessApiClient:
    return FitnessApiClient(
        base_url="http://testserver",
        token="test-token",
        transport=httpx.MockTransport(service.handle),
    )


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def checkpoint(store) -> CheckpointManager:
    return CheckpointManager(store=store, storage_key="test-state")


def make_exercise(exercise_id: str, weight=None, sets: int = 3, reps: int = 8, rest: int = 90) -> Exercise:
    return Exercise(
        id=exercise_id,
        name=exercise_id.replace("_", " ").title(),
        equipment="full_gym" if weight is not None else "bodyweight",
        suggested_weight_kg=weight,
        suggested_reps=reps,
        suggested_sets=sets,
        rest_seconds=rest,
    )


@pytest.fixture
def push_day() -> TrainingProgramDay:
    return TrainingProgramDay(
        day_index=1,
        label="Push",
        exercises=[
            make_exercise("bench_press", 60),
            make_exercise("overhead_press", 40),
            make_exercise("push_up", None),
        ],
    )


@pytest.fixture
def program(push_day) -> TrainingProgram:
    pull_day = TrainingProgramDay(
        day_index=2,
        label="Pull",
        exercises=[make_exercise("barbell_row", 50), make_exercise("pull_up", None)],
    )
    return TrainingProgram(id="program-1", days_per_week=2, days=[push_day, pull_day])
