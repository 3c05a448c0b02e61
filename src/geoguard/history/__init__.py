"""Login history port and backends."""

from geoguard.history.store import HistoryStore, InMemoryHistoryStore

__all__ = ["HistoryStore", "InMemoryHistoryStore"]
