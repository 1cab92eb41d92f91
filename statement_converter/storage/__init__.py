"""Conversion history storage."""

from statement_converter.storage.history_store import (
    ConversionRecord,
    HistoryStore,
    HistoryStoreError,
    InMemoryHistoryStore,
    RedisHistoryStore,
    create_history_store,
)

__all__ = [
    "ConversionRecord",
    "HistoryStore",
    "HistoryStoreError",
    "InMemoryHistoryStore",
    "RedisHistoryStore",
    "create_history_store",
]
