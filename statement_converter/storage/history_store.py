"""Per-user conversion history storage."""

import json
import threading
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import redis

from statement_converter.config.settings import ANONYMOUS_USER_ID, Settings
from statement_converter.utils.logger import get_logger


class HistoryStoreError(Exception):
    """Custom exception for history storage errors."""

    code = "HISTORY_ERROR"


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class ConversionRecord:
    """One stored conversion."""
    user_id: str
    original_filename: str
    converted_filename: str
    csv_data: str
    transaction_count: int
    used_sample_data: bool = False
    conversion_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: str = field(default_factory=_utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConversionRecord":
        return cls(**data)


class HistoryStore:
    """Interface for conversion history backends."""

    def save(self, record: ConversionRecord) -> ConversionRecord:
        raise NotImplementedError

    def list_for_user(self, user_id: str = ANONYMOUS_USER_ID) -> List[ConversionRecord]:
        """Return a user's records, newest first."""
        raise NotImplementedError

    def get(self, user_id: str, conversion_id: str) -> Optional[ConversionRecord]:
        raise NotImplementedError

    def delete(self, user_id: str, conversion_id: str) -> bool:
        """Delete a record. Returns False when it did not exist."""
        raise NotImplementedError


def _newest_first(records: List[ConversionRecord]) -> List[ConversionRecord]:
    # reversed() keeps later saves ahead of earlier ones with the same timestamp
    return sorted(reversed(records), key=lambda record: record.created_at, reverse=True)


class InMemoryHistoryStore(HistoryStore):
    """Process-local history store."""

    def __init__(self) -> None:
        self.logger = get_logger(__name__)
        self._records: Dict[str, Dict[str, ConversionRecord]] = {}
        self._lock = threading.Lock()

    def save(self, record: ConversionRecord) -> ConversionRecord:
        with self._lock:
            self._records.setdefault(record.user_id, {})[record.conversion_id] = record
        self.logger.debug(f"Saved conversion {record.conversion_id} for user {record.user_id}")
        return record

    def list_for_user(self, user_id: str = ANONYMOUS_USER_ID) -> List[ConversionRecord]:
        with self._lock:
            records = list(self._records.get(user_id, {}).values())
        return _newest_first(records)

    def get(self, user_id: str, conversion_id: str) -> Optional[ConversionRecord]:
        with self._lock:
            return self._records.get(user_id, {}).get(conversion_id)

    def delete(self, user_id: str, conversion_id: str) -> bool:
        with self._lock:
            return self._records.get(user_id, {}).pop(conversion_id, None) is not None


class RedisHistoryStore(HistoryStore):
    """History store keeping one Redis hash per user.

    Hash fields are conversion ids and values are JSON encoded records.
    """

    KEY_PREFIX = "conversions"

    def __init__(self, redis_url: str, client: Optional[redis.Redis] = None) -> None:
        """Initialize Redis history store.

        Args:
            redis_url: Connection URL, e.g. ``redis://localhost:6379/1``.
            client: Ready-made client, used instead of connecting to
                ``redis_url``.
        """
        self.logger = get_logger(__name__)
        self.client = client if client is not None else redis.Redis.from_url(redis_url, decode_responses=True)

    def _key(self, user_id: str) -> str:
        return f"{self.KEY_PREFIX}:{user_id}"

    def save(self, record: ConversionRecord) -> ConversionRecord:
        try:
            self.client.hset(self._key(record.user_id), record.conversion_id, json.dumps(record.to_dict()))
        except redis.RedisError as e:
            raise HistoryStoreError(f"Failed to save conversion: {str(e)}")
        self.logger.debug(f"Saved conversion {record.conversion_id} for user {record.user_id}")
        return record

    def list_for_user(self, user_id: str = ANONYMOUS_USER_ID) -> List[ConversionRecord]:
        try:
            values = self.client.hvals(self._key(user_id))
        except redis.RedisError as e:
            raise HistoryStoreError(f"Failed to load history: {str(e)}")
        return _newest_first([ConversionRecord.from_dict(json.loads(value)) for value in values])

    def get(self, user_id: str, conversion_id: str) -> Optional[ConversionRecord]:
        try:
            value = self.client.hget(self._key(user_id), conversion_id)
        except redis.RedisError as e:
            raise HistoryStoreError(f"Failed to load conversion: {str(e)}")
        if value is None:
            return None
        return ConversionRecord.from_dict(json.loads(value))

    def delete(self, user_id: str, conversion_id: str) -> bool:
        try:
            return bool(self.client.hdel(self._key(user_id), conversion_id))
        except redis.RedisError as e:
            raise HistoryStoreError(f"Failed to delete conversion: {str(e)}")


def create_history_store(settings: Optional[Settings] = None) -> HistoryStore:
    """Create the history backend named by ``settings.history_backend``."""
    settings = settings or Settings()
    if settings.history_backend == "redis":
        return RedisHistoryStore(settings.redis_url)
    if settings.history_backend == "memory":
        return InMemoryHistoryStore()
    raise ValueError(f"Unknown history backend: {settings.history_backend}")
