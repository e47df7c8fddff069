"""
Configuration constants for anyroute.

Routing constants, paths, and tunable parameters are centralized here.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)


# ---------------- Routing Constants ----------------

NO_ROUTE = -1  # Distance sentinel: unreachable (any negative value qualifies)
ZERO_DISTANCE = 0  # Exact match

DEFAULT_HOP_LIMIT = 16  # HopLimitedPacket budget when none is given
CONTENT_ID_LEN = 16  # Content address length (bytes) = BLAKE3(data)[:16]

# Distance used by topologies that name none
DEFAULT_DISTANCE = "unit"


# ---------------- File Paths ----------------

CONFIG_DIR = os.path.join(os.path.expanduser("~"), ".anyroute")
LOG_DIR = os.path.join(CONFIG_DIR, "logs")
CONFIG_FILE = os.path.join(CONFIG_DIR, "config.yaml")


# ---------------- Logging Configuration ----------------

LOG_FILE = os.path.join(LOG_DIR, "anyroute.log")
LOG_MAX_BYTES = 10 * 1024 * 1024  # 10MB per log file
LOG_BACKUP_COUNT = 5  # Keep 5 rotated log files


@dataclass
class RuntimeConfig:
    """Runtime configuration that can be modified at startup."""

    topology: str = ""
    log_to_file: bool = False
    log_level: str = "INFO"
    default_hop_limit: Optional[int] = None

    def __post_init__(self):
        """Ensure the log directory exists when file logging is on."""
        if self.log_to_file:
            Path(LOG_DIR).mkdir(parents=True, exist_ok=True)


def load_config_file(path: Optional[str] = None) -> dict:
    """
    Load configuration from YAML file.

    Args:
        path: Path to config file (defaults to CONFIG_FILE)

    Returns:
        Configuration dict (empty if file doesn't exist or is unreadable)
    """
    config_path = path or CONFIG_FILE

    if not os.path.exists(config_path):
        return {}

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Ignoring config file {config_path}: {e}")
        return {}

    return data if isinstance(data, dict) else {}


DEFAULT_CONFIG = """\
# anyroute configuration

# Topology file loaded by `python -m anyroute` when --topology is omitted
# topology: ~/.anyroute/network.yaml

# Logging settings
logging:
  # Enable file logging
  to_file: false
  # Log level: DEBUG, INFO, WARNING, ERROR
  level: INFO

# Routing settings
routing:
  # Hop budget attached to packets sent from the CLI (omit for no limit)
  # hop_limit: 16
"""


def save_default_config(path: Optional[str] = None) -> bool:
    """
    Save default configuration file.

    Args:
        path: Path to config file (defaults to CONFIG_FILE)

    Returns:
        True if saved successfully
    """
    config_path = path or CONFIG_FILE

    try:
        Path(config_path).parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w") as f:
            f.write(DEFAULT_CONFIG)
        return True
    except OSError as e:
        logger.error(f"Could not write config file {config_path}: {e}")
        return False


def apply_config_file(runtime_config: RuntimeConfig, file_config: dict) -> None:
    """
    Apply file configuration to runtime config.

    File config values are used as defaults, CLI args take precedence.
    """
    if not runtime_config.topology and "topology" in file_config:
        runtime_config.topology = os.path.expanduser(file_config["topology"])

    logging_config = file_config.get("logging") or {}
    if "to_file" in logging_config:
        runtime_config.log_to_file = bool(logging_config["to_file"])
    if "level" in logging_config:
        runtime_config.log_level = str(logging_config["level"])

    routing_config = file_config.get("routing") or {}
    if runtime_config.default_hop_limit is None and "hop_limit" in routing_config:
        runtime_config.default_hop_limit = int(routing_config["hop_limit"])
