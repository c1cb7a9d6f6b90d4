"""Key-value storage backends and connection setup."""

from typing import Dict, Optional
from config.settings import settings
from utils.logger import setup_logger
import redis.asyncio as aioredis

logger = setup_logger(__name__)


class KeyValueStore:
    """Durable string blob store with get/set/remove."""

    async def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    async def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    async def remove_item(self, key: str) -> None:
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    """Process-local store; contents are lost on exit."""

    def __init__(self):
        self._items: Dict[str, str] = {}

    async def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    async def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class RedisStore(KeyValueStore):
    """Store backed by a Redis connection."""

    def __init__(self, client: aioredis.Redis):
        self.client = client

    async def get_item(self, key: str) -> Optional[str]:
        return await self.client.get(key)

    async def set_item(self, key: str, value: str) -> None:
        await self.client.set(key, value)

    async def remove_item(self, key: str) -> None:
        await self.client.delete(key)


class Database:
    """Storage connection manager."""

    redis_client: Optional[aioredis.Redis] = None
    store: Optional[KeyValueStore] = None


db = Database()


async def connect_to_redis():
    """Create Redis connection."""
    db.redis_client = aioredis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True
    )
    db.store = RedisStore(db.redis_client)
    logger.info(f"Connected to Redis: {settings.redis_url}")


async def close_redis_connection():
    """Close Redis connection."""
    if db.redis_client:
        await db.redis_client.aclose()
        db.redis_client = None
        db.store = None
        logger.info("Disconnected from Redis")


async def init_storage() -> KeyValueStore:
    """Initialize the configured storage backend."""
    if settings.storage_backend.lower() == "redis":
        await connect_to_redis()
    else:
        db.store = MemoryStore()
        logger.info("Using in-memory storage")
    return db.store


def get_store() -> KeyValueStore:
    """Get the active store, falling back to memory when none was initialized."""
    if db.store is None:
        db.store = MemoryStore()
    return db.store
