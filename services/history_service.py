"""Exercise history and guide lookups."""

from typing import Dict, List, Optional
from pydantic import BaseModel
from schemas.api import ExerciseGuide, ExerciseGuideRequest, HistoryEntry
from services.api_client import FitnessApiClient
from utils.errors import ServiceError
from utils.logger import setup_logger

logger = setup_logger(__name__)


class ExerciseTrend(BaseModel):
    """Weight history of one exercise in date order."""
    exercise_id: str
    entries: List[HistoryEntry]
    best_weight: Optional[float] = None
    latest_weight: Optional[float] = None


class HistoryService:
    """Loads weight history and exercise guides, keeping loading/error slices."""

    def __init__(self, api_client: Optional[FitnessApiClient] = None):
        self.api = api_client or FitnessApiClient()
        self.history: Dict[str, List[HistoryEntry]] = {}
        self.guide: Optional[ExerciseGuide] = None
        self.loading = False
        self.error: Optional[str] = None

    async def load_history(self, exercise_id: str) -> Dict[str, List[HistoryEntry]]:
        self.loading = True
        self.error = None
        try:
            history = await self.api.get_history(exercise_id)
        except ServiceError as e:
            self.error = e.message or "Unable to load history"
            return self.history
        finally:
            self.loading = False

        self.history.update(history)
        logger.info(f"Loaded history for {exercise_id}: {len(history.get(exercise_id, []))} entries")
        return self.history

    def trend(self, exercise_id: str) -> ExerciseTrend:
        # ISO dates sort chronologically as strings
        entries = sorted(self.history.get(exercise_id, []), key=lambda entry: entry.date)
        return ExerciseTrend(
            exercise_id=exercise_id,
            entries=entries,
            best_weight=max((entry.weight for entry in entries), default=None),
            latest_weight=entries[-1].weight if entries else None,
        )

    async def load_guide(
        self,
        exercise_name: Optional[str] = None,
        image_url: Optional[str] = None
    ) -> Optional[ExerciseGuide]:
        """Fetch form cues by exercise name or by an uploaded image."""
        if not exercise_name and not image_url:
            raise ValueError("exercise_name or image_url is required")

        self.loading = True
        self.error = None
        try:
            self.guide = await self.api.get_exercise_guide(
                ExerciseGuideRequest(exercise_name=exercise_name, image_url=image_url)
            )
        except ServiceError as e:
            self.error = e.message or "Unable to load exercise guide"
            return None
        finally:
            self.loading = False
        return self.guide
