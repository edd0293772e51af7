"""Connection descriptors and vendor connection strings."""

from .builder import (
    AUTH_PLUGIN_PARAM,
    REDACTED,
    parse_connection_string,
    redact_connection_string,
    render_connection_string,
)
from .models import FIREBIRD_DEFAULT_PORT, BackendKind, ConnectionDescriptor
from .urls import PASSWORD_PLACEHOLDER, descriptor_from_url

__all__ = [
    "AUTH_PLUGIN_PARAM",
    "BackendKind",
    "ConnectionDescriptor",
    "FIREBIRD_DEFAULT_PORT",
    "PASSWORD_PLACEHOLDER",
    "REDACTED",
    "descriptor_from_url",
    "parse_connection_string",
    "redact_connection_string",
    "render_connection_string",
]
