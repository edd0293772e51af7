"""
Configuration management for the monitor.

The connection settings live in config.ini inside the monitor home
(KSAOW_MONITOR_HOME, default ~/.ksaow-monitor). Tunables are resolved in
order of priority:
1. Environment variables (highest priority)
2. config.yml in the monitor home
3. Default values (lowest priority)
"""

from .env_loader import (
    CONFIG_FILE_NAME,
    HOME_ENV,
    get_config_path,
    get_monitor_home,
    load_env_file,
    load_tunables,
)
from .getters import (
    get_config,
    get_interval_seconds,
    get_log_level,
    get_program_name,
    get_webhook_method,
    get_webhook_timeout,
)
from .interactive import auto_configure, interview
from .settings import (
    CONFIG_KEYS,
    MonitorConfig,
    load_monitor_config,
    read_raw_value,
    rewrite_value,
    save_monitor_config,
)

__all__ = [
    # env_loader
    "CONFIG_FILE_NAME",
    "HOME_ENV",
    "get_config_path",
    "get_monitor_home",
    "load_env_file",
    "load_tunables",
    # getters
    "get_config",
    "get_interval_seconds",
    "get_log_level",
    "get_program_name",
    "get_webhook_method",
    "get_webhook_timeout",
    # interactive
    "auto_configure",
    "interview",
    # settings
    "CONFIG_KEYS",
    "MonitorConfig",
    "load_monitor_config",
    "read_raw_value",
    "rewrite_value",
    "save_monitor_config",
]
