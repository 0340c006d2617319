# Storage Adapters Package
from .json_store import JsonFileCardStore, JsonFileReviewLog
from .memory_store import InMemoryCardStore, InMemoryReviewLog
from .sqlite_store import SqliteCardStore, SqliteReviewLog

__all__ = [
    "JsonFileCardStore",
    "JsonFileReviewLog",
    "SqliteCardStore",
    "SqliteReviewLog",
    "InMemoryCardStore",
    "InMemoryReviewLog",
]
