"""History Store - abstraction for login history persistence.

Every record handed to a store is already privacy-safe: masked IP
prefix, coarse location identifiers and hashed fingerprint only.
The engine performs all privacy transforms before a store sees a record.

Design principles:
- ABC interface for testability and extensibility
- "No previous record" (None) is distinct from a backend failure
- Thread-safe operations; last write wins per user
"""

import threading
from abc import ABC, abstractmethod
from typing import Dict, Optional

from geoguard.common.exceptions import HistoryStoreError
from geoguard.data.schemas.login_record import LoginRecord


class HistoryStore(ABC):
    """Abstract base class for login history backends."""

    @abstractmethod
    def fetch_last(self, user_id: str) -> Optional[LoginRecord]:
        """Retrieve the most recent login record for a user.

        Args:
            user_id: User identifier

        Returns:
            The latest LoginRecord, or None for a first-time user

        Raises:
            HistoryStoreError: If the backend fails
        """
        pass

    @abstractmethod
    def store(self, record: LoginRecord) -> None:
        """Persist a login record.

        Raises:
            HistoryStoreError: If the backend fails
        """
        pass


class InMemoryHistoryStore(HistoryStore):
    """Thread-safe in-memory history store.

    Suitable for tests, development and single-instance deployments.
    Keeps only the latest record per user.
    """

    def __init__(self):
        self._records: Dict[str, LoginRecord] = {}
        self._lock = threading.RLock()

    def fetch_last(self, user_id: str) -> Optional[LoginRecord]:
        with self._lock:
            record = self._records.get(user_id)
        return record.model_copy() if record is not None else None

    def store(self, record: LoginRecord) -> None:
        if record is None:
            raise HistoryStoreError("record cannot be None")
        with self._lock:
            self._records[record.user_id] = record.model_copy()

    def clear(self) -> None:
        """Drop all records."""
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
