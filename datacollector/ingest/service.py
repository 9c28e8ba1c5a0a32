"""Ingestion service - turns raw payloads into persisted readings."""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from datacollector.shared.models import Reading
from datacollector.shared.store import ReadingStore
from .parser import KeyValueParser, WireParser

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class IngestionService:
    """Parses payloads and stores the resulting readings.

    Every failure (empty payload, unparseable payload, storage error) ends in
    a log entry and a None result. Nothing is raised to the caller, so one bad
    datagram never affects the next.
    """

    def __init__(
        self,
        store: ReadingStore,
        parser: Optional[WireParser] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize the service.

        Args:
            store: Store that persists accepted readings.
            parser: Payload parser. Defaults to KeyValueParser.
            clock: Returns the current time. Defaults to UTC now.
        """
        self.store = store
        self.parser = parser or KeyValueParser()
        self.clock = clock or utc_now

    def process(self, raw: Optional[str], device_id: Optional[str] = None) -> Optional[Reading]:
        """Process one payload.

        Args:
            raw: Payload text, e.g. "temp=25.50,hum=60.00".
            device_id: Identity of the sender, if known.

        Returns:
            The persisted reading, or None if the payload was rejected or
            could not be stored.
        """
        if raw is None or not raw.strip():
            logger.warning(
                "Received empty or null data",
                extra={"device_id": device_id, "reason": "empty_payload"},
            )
            return None

        parsed = self.parser.try_parse(raw)
        if parsed is None:
            logger.warning(
                f"Failed to parse data: {raw!r}",
                extra={"device_id": device_id, "payload": raw, "reason": "parse_failure"},
            )
            return None

        temperature, humidity = parsed
        reading = Reading(
            temperature=temperature,
            humidity=humidity,
            timestamp=self.clock(),
            device_id=device_id,
        )

        try:
            saved = self.store.add(reading)
        except Exception as e:
            logger.exception(
                f"Failed to store sensor reading: {e}",
                extra={"device_id": device_id, "payload": raw, "reason": "storage_error"},
            )
            return None

        logger.info(
            f"Stored reading: Temp={temperature}°C, Humidity={humidity}%, "
            f"Device={device_id or 'unknown'}",
            extra={"reading_id": saved.id},
        )
        return saved
