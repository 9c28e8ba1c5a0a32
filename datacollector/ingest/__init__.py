"""Payload parsing and ingestion of readings."""

from .parser import KeyValueParser, WireParser, format_payload, try_parse
from .service import IngestionService

__all__ = [
    "IngestionService",
    "KeyValueParser",
    "WireParser",
    "format_payload",
    "try_parse",
]
