"""Configuration for the UDP listener service."""

import os
from dataclasses import dataclass, field
from typing import Optional

from datacollector.shared.config import load_settings, parse_log_level
from datacollector.shared.database import DBConfig

DEFAULT_PORT = 5000
STORAGE_BACKENDS = ("mysql", "memory")


def _parse_port(value) -> int:
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid UDP listener port: {value!r}")
    if not 0 <= port <= 65535:
        raise ValueError(f"UDP listener port out of range: {port}")
    return port


@dataclass
class ListenerConfig:
    """Configuration for the UDP listener."""

    # Network settings
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    retry_delay: float = 1.0  # seconds to pause after a receive error

    # Storage settings
    storage_backend: str = "mysql"
    db: DBConfig = field(default_factory=DBConfig.from_env)

    # Logging
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict) -> "ListenerConfig":
        """Create config from dictionary."""
        listener_data = data.get("udp_listener", {}) or {}
        storage_data = data.get("storage", {}) or {}

        config = cls(
            host=listener_data.get("host", "0.0.0.0"),
            port=_parse_port(listener_data.get("port", DEFAULT_PORT)),
            retry_delay=float(listener_data.get("retry_delay", 1.0)),
            storage_backend=storage_data.get("backend", "mysql"),
            log_level=parse_log_level(data.get("log_level", "INFO")),
        )
        if config.storage_backend not in STORAGE_BACKENDS:
            raise ValueError(f"Unknown storage backend: {config.storage_backend}")
        return config


def load_config(config_path: Optional[str] = None) -> ListenerConfig:
    """Load configuration from YAML file or environment.

    Args:
        config_path: Path to YAML config file. If not provided,
                    looks for DATACOLLECTOR_CONFIG env var, then
                    config/config-{env}.yaml, then falls back to
                    default config.

    Returns:
        ListenerConfig instance.

    Raises:
        FileNotFoundError: If an explicitly given config file doesn't exist.
        ValueError: If a setting has an invalid value.
    """
    config = ListenerConfig.from_dict(load_settings(config_path))

    # Environment variable overrides
    if port := os.environ.get("UDP_LISTENER_PORT"):
        config.port = _parse_port(port)
    if host := os.environ.get("UDP_LISTENER_HOST"):
        config.host = host
    if backend := os.environ.get("STORAGE_BACKEND"):
        if backend not in STORAGE_BACKENDS:
            raise ValueError(f"Unknown storage backend: {backend}")
        config.storage_backend = backend
    if log_level := os.environ.get("LOG_LEVEL"):
        config.log_level = parse_log_level(log_level)

    return config
