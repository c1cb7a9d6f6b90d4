"""Client for the GymBuddy workout service."""

import httpx
from typing import Any, Dict, List, Optional, Type, TypeVar
from pydantic import BaseModel, ValidationError
from config.settings import settings
from schemas.api import (
    ExerciseGuide,
    ExerciseGuideRequest,
    FinishWorkoutResponse,
    HistoryEntry,
    LogWorkoutRequest,
    LogWorkoutResponse,
    ProgramInitRequest,
    ProgramInitResponse,
    TodayWorkoutResponse,
    UpdateWorkoutRequest,
    UpdateWorkoutResponse,
)
from utils.errors import ServiceError
from utils.logger import setup_logger

logger = setup_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class FitnessApiClient:
    """Client for the program, workout, history and guide endpoints.

    Every non-2xx response raises ServiceError carrying the status and the
    parsed body. Transport failures are raised as ServiceError with status 0.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.token = token or settings.auth_token
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.token}",
        }

    async def _request(
        self,
        method: str,
        path: str,
        json_body: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """Send a request and return the decoded body."""
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport
            ) as client:
                response = await client.request(
                    method,
                    path,
                    json=json_body,
                    params=params,
                    headers=self._headers()
                )
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise ServiceError(str(e) or "Request failed", 0) from e

        content_type = response.headers.get("content-type", "")
        if "application/json" in content_type:
            try:
                body = response.json()
            except ValueError:
                body = response.text
        else:
            body = response.text

        if not response.is_success:
            if isinstance(body, str):
                message = body or "Request failed"
            elif isinstance(body, dict):
                message = body.get("message") or "Request failed"
            else:
                message = "Request failed"
            logger.warning(f"{method} {path} returned {response.status_code}: {message}")
            raise ServiceError(message, response.status_code, body)

        return body

    @staticmethod
    def _parse(model: Type[ModelT], body: Any) -> ModelT:
        try:
            return model.model_validate(body)
        except ValidationError as e:
            logger.error(f"Unexpected {model.__name__} payload: {e}")
            raise ServiceError("Unexpected response from service", 200, body) from e

    async def initialize_program(self, request: ProgramInitRequest) -> ProgramInitResponse:
        """Ask the service to generate a program for a profile."""
        body = await self._request("POST", "/api/program/init", json_body=request.model_dump(mode="json"))
        return self._parse(ProgramInitResponse, body)

    async def get_todays_workout(self) -> TodayWorkoutResponse:
        body = await self._request("GET", "/api/workout/today")
        return self._parse(TodayWorkoutResponse, body)

    async def update_workout(self, request: UpdateWorkoutRequest) -> UpdateWorkoutResponse:
        body = await self._request("PATCH", "/api/workout/update", json_body=request.model_dump(mode="json"))
        return self._parse(UpdateWorkoutResponse, body)

    async def log_workout(self, request: LogWorkoutRequest) -> LogWorkoutResponse:
        body = await self._request("POST", "/api/workout/log", json_body=request.model_dump(mode="json"))
        return self._parse(LogWorkoutResponse, body)

    async def finish_workout(self, workout_id: str) -> FinishWorkoutResponse:
        body = await self._request("POST", "/api/workout/finish", params={"workout_id": workout_id})
        if not isinstance(body, dict):
            body = {"message": body or None}
        return self._parse(FinishWorkoutResponse, body)

    async def get_history(self, exercise_id: str) -> Dict[str, List[HistoryEntry]]:
        """Fetch the weight history for an exercise, keyed by exercise id."""
        body = await self._request("GET", "/api/history", params={"exercise_id": exercise_id})
        if not isinstance(body, dict):
            raise ServiceError("Unexpected response from service", 200, body)
        return {
            key: [self._parse(HistoryEntry, entry) for entry in entries]
            for key, entries in body.items()
        }

    async def get_exercise_guide(self, request: ExerciseGuideRequest) -> ExerciseGuide:
        body = await self._request("POST", "/api/exercise/guide", json_body=request.model_dump(mode="json"))
        return self._parse(ExerciseGuide, body)
