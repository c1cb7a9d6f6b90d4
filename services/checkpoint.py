"""Checkpoint of the persisted app state across restarts."""

import json
from typing import Any, Dict, Optional
from config.settings import settings
from models.database import KeyValueStore, get_store
from utils.logger import setup_logger

logger = setup_logger(__name__)


class CheckpointManager:
    """Reads and writes the single serialized state blob.

    Writes are best effort: failures are logged and reported as False, the
    in-memory state stays authoritative.
    """

    def __init__(self, store: Optional[KeyValueStore] = None, storage_key: Optional[str] = None):
        self._store = store
        self.storage_key = storage_key or settings.storage_key

    @property
    def store(self) -> KeyValueStore:
        return self._store or get_store()

    async def save_state(self, state: Dict[str, Any]) -> bool:
        """Save the state blob.

        Args:
            state: JSON-serializable dictionary

        Returns:
            True if saved successfully
        """
        try:
            await self.store.set_item(self.storage_key, json.dumps(state, default=str))
            logger.debug(f"Saved checkpoint under {self.storage_key}")
            return True
        except Exception as e:
            logger.error(f"Error saving checkpoint: {e}", exc_info=True)
            return False

    async def load_state(self) -> Optional[Dict[str, Any]]:
        """Load the state blob.

        Returns:
            State dictionary, or None on first run or unreadable data
        """
        try:
            raw = await self.store.get_item(self.storage_key)
        except Exception as e:
            logger.error(f"Error loading checkpoint: {e}", exc_info=True)
            return None

        if raw is None:
            logger.info(f"No checkpoint found under {self.storage_key}")
            return None

        try:
            state = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error(f"Corrupt checkpoint under {self.storage_key}: {e}")
            return None

        if not isinstance(state, dict):
            logger.error(f"Checkpoint under {self.storage_key} is not an object")
            return None
        return state

    async def clear_state(self) -> bool:
        """Remove the state blob."""
        try:
            await self.store.remove_item(self.storage_key)
            logger.info(f"Cleared checkpoint under {self.storage_key}")
            return True
        except Exception as e:
            logger.error(f"Error clearing checkpoint: {e}", exc_info=True)
            return False
