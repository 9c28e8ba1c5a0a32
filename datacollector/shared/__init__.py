"""Shared utilities for DataCollector services."""

from .models import Reading, MAX_DEVICE_ID_LENGTH
from .store import ReadingStore, InMemoryReadingStore, StorageError
from .database import DBConfig, ReadingsStorage
from .config import load_settings, load_yaml_config
from .logging import setup_logging

__all__ = [
    "Reading",
    "MAX_DEVICE_ID_LENGTH",
    "ReadingStore",
    "InMemoryReadingStore",
    "StorageError",
    "DBConfig",
    "ReadingsStorage",
    "load_settings",
    "load_yaml_config",
    "setup_logging",
]
