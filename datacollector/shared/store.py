"""Reading store contract and the in-memory implementation."""

import itertools
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime
from typing import List, Optional

from .models import MAX_DEVICE_ID_LENGTH, Reading, to_utc

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when a reading cannot be written to or read from the store."""

    pass


class ReadingStore(ABC):
    """Base class for all reading stores."""

    @abstractmethod
    def add(self, reading: Reading) -> Reading:
        """Persist a reading and return a copy carrying its assigned id.

        Raises:
            StorageError: If the medium is unavailable or the reading
                violates a constraint.
        """
        pass

    @abstractmethod
    def get_range(self, start: datetime, end: datetime) -> List[Reading]:
        """Get readings with start <= timestamp <= end, oldest first."""
        pass

    @abstractmethod
    def get_latest(self) -> Optional[Reading]:
        """Get the reading with the greatest timestamp, or None if empty."""
        pass

    def close(self) -> None:
        """Release any resources held by the store."""
        pass


def validate_new_reading(reading: Reading) -> None:
    """Check the constraints every store enforces before writing.

    Raises:
        StorageError: If the reading is already persisted or its device id
            does not fit the schema.
    """
    if reading.id is not None:
        raise StorageError(f"Reading already has id {reading.id}")
    if reading.device_id is not None and len(reading.device_id) > MAX_DEVICE_ID_LENGTH:
        raise StorageError(
            f"device_id exceeds {MAX_DEVICE_ID_LENGTH} characters: {reading.device_id[:20]}..."
        )


class InMemoryReadingStore(ReadingStore):
    """Thread-safe store that keeps readings in process memory.

    Nothing survives a restart; meant for tests and local runs without MySQL.
    """

    def __init__(self) -> None:
        self._readings: List[Reading] = []
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def add(self, reading: Reading) -> Reading:
        validate_new_reading(reading)
        with self._lock:
            stored = replace(reading, timestamp=to_utc(reading.timestamp), id=next(self._ids))
            self._readings.append(stored)
        logger.debug(f"Stored reading {stored.id} in memory")
        return stored

    def get_range(self, start: datetime, end: datetime) -> List[Reading]:
        start, end = to_utc(start), to_utc(end)
        with self._lock:
            matches = [r for r in self._readings if start <= r.timestamp <= end]
        return sorted(matches, key=lambda r: (r.timestamp, r.id))

    def get_latest(self) -> Optional[Reading]:
        with self._lock:
            if not self._readings:
                return None
            return max(self._readings, key=lambda r: (r.timestamp, r.id))

    def __len__(self) -> int:
        with self._lock:
            return len(self._readings)
