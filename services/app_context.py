"""Client bootstrap: storage, service client and stores wired together."""

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional
from config.settings import settings
from models.database import KeyValueStore, close_redis_connection, init_storage
from services.api_client import FitnessApiClient
from services.checkpoint import CheckpointManager
from services.history_service import HistoryService
from services.session_tracker import SessionTracker
from services.workout_plan_store import WorkoutPlanStore
from utils.logger import setup_logger

logger = setup_logger(__name__)


@dataclass
class AppContext:
    api: FitnessApiClient
    tracker: SessionTracker
    plan_store: WorkoutPlanStore
    history: HistoryService


@asynccontextmanager
async def app_context(
    api_client: Optional[FitnessApiClient] = None,
    store: Optional[KeyValueStore] = None
) -> AsyncIterator[AppContext]:
    """Open storage, rehydrate persisted state, and close everything on exit."""
    logger.info(f"Starting {settings.app_name} {settings.app_version}...")
    store = store or await init_storage()
    api = api_client or FitnessApiClient()
    tracker = SessionTracker(api_client=api, checkpoint=CheckpointManager(store=store))
    restored = await tracker.rehydrate()
    logger.info("Restored previous state" if restored else "First run: onboarding required")

    try:
        yield AppContext(
            api=api,
            tracker=tracker,
            plan_store=WorkoutPlanStore(api_client=api),
            history=HistoryService(api_client=api),
        )
    finally:
        logger.info("Shutting down...")
        await tracker.flush()
        await close_redis_connection()
        logger.info("Shut down")
