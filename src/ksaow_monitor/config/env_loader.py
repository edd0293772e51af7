"""Configuration file loading."""

import os
from pathlib import Path
from typing import Any

import yaml

HOME_ENV = "KSAOW_MONITOR_HOME"
CONFIG_FILE_NAME = "config.ini"
TUNABLES_FILE_NAME = "config.yml"


def get_monitor_home() -> Path:
    """Directory holding config.ini, config.yml and logs/."""
    override = os.environ.get(HOME_ENV)
    if override:
        return Path(override)
    return Path.home() / ".ksaow-monitor"


def get_config_path(home: Path | None = None) -> Path:
    return (home or get_monitor_home()) / CONFIG_FILE_NAME


def load_env_file(env_path: Path) -> dict[str, str]:
    """Load KEY=VALUE lines; comments and blank lines are skipped."""
    env_vars = {}
    if env_path.exists():
        with open(env_path, encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, value = line.split("=", 1)
                    # Remove quotes if present
                    value = value.strip().strip("\"'")
                    env_vars[key.strip().upper()] = value
    return env_vars


def load_tunables(home: Path | None = None) -> dict[str, Any]:
    """Load optional tunables from config.yml in the monitor home."""
    config_path = (home or get_monitor_home()) / TUNABLES_FILE_NAME
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    return {}
