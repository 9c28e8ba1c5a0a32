"""Locating, loading and checking DataCollector settings files.

Settings come from one YAML file per deployment plus the process
environment. Database credentials are kept out of the YAML file and are read
from the environment, which a local ``.env`` file may populate.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# repo_root/config/, next to the package
CONFIG_DIR = Path(__file__).resolve().parent.parent.parent / "config"
CONFIG_PATH_ENV = "DATACOLLECTOR_CONFIG"
DEPLOYMENT_ENV = "DATACOLLECTOR_ENV"
DEFAULT_DEPLOYMENT = "datacollector"

# Top-level keys whose values must be mappings
SECTIONS = ("udp_listener", "storage")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def find_config_file(config_path: Optional[Union[str, Path]] = None) -> Optional[Path]:
    """Work out which settings file to read.

    Lookup order is the given path, then $DATACOLLECTOR_CONFIG, then
    ``config/config-{deployment}.yaml`` where the deployment name comes from
    $DATACOLLECTOR_ENV. Only the last one is optional.

    Returns:
        Path to the settings file, or None when no file is configured.

    Raises:
        FileNotFoundError: If a path given explicitly or via the environment
            does not exist.
    """
    explicit = config_path or os.environ.get(CONFIG_PATH_ENV)
    if explicit:
        path = Path(explicit)
        if not path.is_file():
            raise FileNotFoundError(f"Config file not found: {path}")
        return path

    deployment = os.environ.get(DEPLOYMENT_ENV, DEFAULT_DEPLOYMENT)
    path = CONFIG_DIR / f"config-{deployment}.yaml"
    return path if path.is_file() else None


def load_yaml_config(config_path: Union[str, Path]) -> dict:
    """Parse a settings file and check its shape.

    An empty file is treated as an empty mapping.

    Raises:
        yaml.YAMLError: If the file is not valid YAML.
        ValueError: If the document or one of its sections is not a mapping.
    """
    with open(config_path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{config_path}: expected a mapping at top level, got {type(data).__name__}")

    for name in SECTIONS:
        section = data.get(name)
        if section is not None and not isinstance(section, dict):
            raise ValueError(f"{config_path}: section '{name}' must be a mapping")
    return data


def load_settings(config_path: Optional[Union[str, Path]] = None) -> dict:
    """Load ``.env`` into the environment, then the settings file if any.

    Returns:
        The parsed settings, or an empty dict when no file is configured.
    """
    load_dotenv()

    path = find_config_file(config_path)
    if path is None:
        logger.debug("No config file found, using defaults")
        return {}

    logger.debug(f"Loading config from {path}")
    return load_yaml_config(path)


def parse_log_level(value) -> str:
    """Normalize a log level name such as 'debug' to 'DEBUG'.

    Raises:
        ValueError: If the name is not a standard logging level.
    """
    level = str(value).strip().upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"Unknown log level: {value!r}")
    return level
