"""Reader for the URI connection form written by earlier releases."""

from __future__ import annotations

from urllib.parse import parse_qsl, unquote, urlsplit

from ksaow_monitor.errors import ConfigurationError

from .models import BackendKind, ConnectionDescriptor

PASSWORD_PLACEHOLDER = "{{PASSWORD}}"

_SCHEMES = {
    "oracle": BackendKind.ORACLE,
    "fb": BackendKind.FIREBIRD,
    "firebird": BackendKind.FIREBIRD,
}


def descriptor_from_url(url: str) -> ConnectionDescriptor:
    """Build a descriptor from an ``oracle://`` or ``fb://`` URI.

    The password segment (normally the ``{{PASSWORD}}`` placeholder) is
    ignored; credentials live in the protected store.
    """
    parts = urlsplit((url or "").strip())
    backend = _SCHEMES.get(parts.scheme.lower())
    if backend is None:
        raise ConfigurationError(f"Unrecognised connection URI scheme: {parts.scheme!r}")
    if not parts.hostname:
        raise ConfigurationError("Connection URI has no host")

    try:
        port = parts.port
    except ValueError as exc:
        raise ConfigurationError(f"Invalid port in connection URI: {exc}") from exc

    user = unquote(parts.username or "")
    if backend is BackendKind.FIREBIRD:
        # fb://host:3050/D:/DATA/FILE.FDB carries a drive path after the slash
        path = unquote(parts.path).lstrip("/")
    else:
        path = unquote(parts.path)

    extra = dict(parse_qsl(parts.query, keep_blank_values=False))
    return ConnectionDescriptor(
        backend=backend,
        server=parts.hostname,
        port=port,
        user=user,
        database_path=path,
        extra_params=extra,
    )
