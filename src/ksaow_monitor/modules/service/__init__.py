"""Monitor service."""

from .monitor import DEFAULT_INTERVAL, MonitorService

__all__ = ["DEFAULT_INTERVAL", "MonitorService"]
