"""
Persistence for the shot collection.

The collection is saved and loaded as one snapshot: a JSON array of shots
with absent fields left out. The import pipeline never touches a store
directly; the session manager is handed one.
"""
import logging
import os
from typing import List, Optional, Protocol

import redis
from pydantic import ValidationError

from global_config import SHOTS_FILE_NAME
from .config import settings
from .export import shots_from_json, shots_to_json
from .models import Shot

logger = logging.getLogger(__name__)


class ShotStore(Protocol):
    """Anything that can load and save a whole shot snapshot"""

    def load(self) -> List[Shot]:
        ...

    def save(self, shots: List[Shot]) -> bool:
        ...


class RedisShotStore:
    """Shot snapshot kept under a single Redis key"""

    def __init__(self, redis_client: Optional[redis.Redis] = None, key: Optional[str] = None):
        """Initialize Redis connection"""
        self.redis_client = redis_client or redis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            password=settings.redis_password,
            decode_responses=True
        )
        self.key = key or settings.redis_shots_key

    def ping(self) -> bool:
        """True when the Redis server answers"""
        try:
            return bool(self.redis_client.ping())
        except redis.RedisError as e:
            logger.error("Redis ping failed: %s", e)
            return False

    def load(self) -> List[Shot]:
        """Load the stored shots

        Returns:
            The stored shots, or an empty list when nothing is stored or the
            stored value cannot be read
        """
        try:
            payload = self.redis_client.get(self.key)
        except redis.RedisError as e:
            logger.error("Error loading shots from Redis: %s", e)
            return []
        if not payload:
            return []
        try:
            return shots_from_json(payload)
        except ValidationError as e:
            logger.error("Stored shots under '%s' are not valid: %s", self.key, e)
            return []

    def save(self, shots: List[Shot]) -> bool:
        """Replace the stored snapshot

        Returns:
            True if stored successfully, False otherwise
        """
        try:
            self.redis_client.set(self.key, shots_to_json(shots))
            return True
        except redis.RedisError as e:
            logger.error("Error saving shots to Redis: %s", e)
            return False


class JsonFileShotStore:
    """Shot snapshot kept in one JSON file"""

    def __init__(self, path: Optional[str] = None):
        self.path = path or os.path.join(settings.data_dir, SHOTS_FILE_NAME)

    def load(self) -> List[Shot]:
        if not os.path.exists(self.path):
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return shots_from_json(f.read())
        except (OSError, ValidationError) as e:
            logger.error("Error loading shots from %s: %s", self.path, e)
            return []

    def save(self, shots: List[Shot]) -> bool:
        try:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            tmp_path = self.path + ".tmp"
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(shots_to_json(shots))
            os.replace(tmp_path, self.path)
            return True
        except OSError as e:
            logger.error("Error saving shots to %s: %s", self.path, e)
            return False


def create_store(backend: Optional[str] = None) -> ShotStore:
    """Store selected by the ``store_backend`` setting ("redis" or "file")"""
    backend = (backend or settings.store_backend).lower()
    if backend == "file":
        return JsonFileShotStore()
    if backend == "redis":
        return RedisShotStore()
    raise ValueError(f"Unknown store backend: {backend}")
