"""Core data model for temperature/humidity readings."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

# Matches the VARCHAR(50) column in the sensor_readings table
MAX_DEVICE_ID_LENGTH = 50


@dataclass(frozen=True)
class Reading:
    """A single temperature/humidity reading.

    ``id`` stays None until a store persists the reading and hands back a
    copy carrying its assigned identity.
    """
    temperature: float
    humidity: float
    timestamp: datetime
    device_id: Optional[str] = None
    id: Optional[int] = None

    @property
    def is_persisted(self) -> bool:
        """Check if a store has assigned an identity to this reading."""
        return self.id is not None


def to_utc(value: datetime) -> datetime:
    """Normalize a datetime to an aware UTC datetime.

    Naive values are taken to already be in UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
