"""Exception hierarchy for the monitor."""

from __future__ import annotations


class MonitorError(Exception):
    """Base class for every error raised by the monitor."""


class ConfigurationError(MonitorError):
    """Configuration is missing, unreadable or incomplete."""


class UnsupportedBackendError(MonitorError):
    """The backend token is not one of the supported database engines."""


class DecryptionError(MonitorError):
    """A protected credential could not be revealed on this host."""


class DatabaseConnectionError(MonitorError):
    """The target database could not be reached or refused the login."""


class AllAuthMethodsExhaustedError(DatabaseConnectionError):
    """Every authentication strategy failed for the target database."""

    def __init__(self, message: str, attempts: list | None = None) -> None:
        super().__init__(message)
        self.attempts = list(attempts or [])


class ApplicationTrustBlockedError(MonitorError):
    """An Oracle logon trigger rejected this application by name.

    Retrying does not help; an administrator has to mark the program as
    trusted. ``remediation`` holds the steps to give the operator.
    """

    def __init__(self, message: str, remediation: str, detail: str = "") -> None:
        super().__init__(message)
        self.remediation = remediation
        self.detail = detail


class QueryExecutionError(MonitorError):
    """The connection was opened but the probe query failed."""


class WebhookError(MonitorError):
    """The probe result could not be delivered to the webhook."""
