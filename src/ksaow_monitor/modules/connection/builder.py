"""Rendering of connection descriptors into vendor connection strings.

Both vendors use a semicolon-delimited ``Key=Value`` syntax. Values that
would break the framing are double-quoted with inner quotes doubled, so a
password containing ``;`` survives a render/parse round trip.
"""

from __future__ import annotations

import re

from ksaow_monitor.errors import UnsupportedBackendError

from .models import FIREBIRD_DEFAULT_PORT, BackendKind, ConnectionDescriptor

REDACTED = "***HIDDEN***"
AUTH_PLUGIN_PARAM = "auth_plugin_name"

_PORT_SUFFIX = re.compile(r"^(?P<host>[^:]+):(?P<port>\d+)$")
_NEEDS_QUOTING = re.compile(r"[;=\"']|^\s|\s$")


def quote_value(value: str) -> str:
    """Quote a value when it contains separators or quotes."""
    if value and _NEEDS_QUOTING.search(value):
        return '"' + value.replace('"', '""') + '"'
    return value


def format_pairs(pairs: list[tuple[str, str]]) -> str:
    """Join key/value pairs into a connection string."""
    return "".join(f"{key}={quote_value(value)};" for key, value in pairs)


def split_server_port(server: str, port: int | None) -> tuple[str, int]:
    """Split ``host:port`` into its parts; an embedded port wins."""
    match = _PORT_SUFFIX.match(server.strip())
    if match:
        return match.group("host"), int(match.group("port"))
    return server.strip(), port if port is not None else FIREBIRD_DEFAULT_PORT


def normalize_firebird_path(path: str) -> str:
    """Use backslashes throughout, e.g. ``D:/DATA/FILE.DB`` -> ``D:\\DATA\\FILE.DB``."""
    return path.replace("/", "\\")


def render_oracle(descriptor: ConnectionDescriptor, password: str) -> str:
    """Render ``Data Source=host:port/service;User Id=...;Password=...;``."""
    data_source = descriptor.server
    if descriptor.port is not None:
        data_source = f"{data_source}:{descriptor.port}"
    service = descriptor.database_path
    if not service.startswith("/"):
        service = "/" + service
    return format_pairs(
        [
            ("Data Source", data_source + service),
            ("User Id", descriptor.user),
            ("Password", password),
        ]
    )


def render_firebird(descriptor: ConnectionDescriptor, password: str) -> str:
    """Render the Firebird key/value form with a ``server:path`` database."""
    host, port = split_server_port(descriptor.server, descriptor.port)
    database = f"{host}:{normalize_firebird_path(descriptor.database_path)}"
    pairs = [
        ("User", descriptor.user),
        ("Password", password),
        ("Database", database),
        ("Port", str(port)),
        ("Dialect", "3"),
        ("Charset", "UTF8"),
    ]
    plugin = descriptor.extra(AUTH_PLUGIN_PARAM)
    if plugin:
        pairs.append((AUTH_PLUGIN_PARAM, plugin))
    return format_pairs(pairs)


_RENDERERS = {
    BackendKind.ORACLE: render_oracle,
    BackendKind.FIREBIRD: render_firebird,
}


def render_connection_string(descriptor: ConnectionDescriptor, password: str) -> str:
    """Render a descriptor plus plaintext password into vendor syntax.

    The result contains the secret; pass it through
    :func:`redact_connection_string` before logging.
    """
    renderer = _RENDERERS.get(descriptor.backend)
    if renderer is None:
        raise UnsupportedBackendError(f"Unsupported database type: {descriptor.backend!r}")
    return renderer(descriptor, password)


def _tokenize(text: str) -> list[tuple[str, str]]:
    """Split a connection string into ``(key, value)`` pairs in order."""
    pairs: list[tuple[str, str]] = []
    i = 0
    length = len(text)
    while i < length:
        eq = text.find("=", i)
        if eq == -1:
            break
        key = text[i:eq].strip("; \t")
        i = eq + 1
        while i < length and text[i] == " ":
            i += 1
        if i < length and text[i] in "\"'":
            quote = text[i]
            i += 1
            chars: list[str] = []
            while i < length:
                if text[i] == quote:
                    if i + 1 < length and text[i + 1] == quote:
                        chars.append(quote)
                        i += 2
                        continue
                    i += 1
                    break
                chars.append(text[i])
                i += 1
            value = "".join(chars)
            end = text.find(";", i)
            i = length if end == -1 else end + 1
        else:
            end = text.find(";", i)
            if end == -1:
                end = length
            value = text[i:end].strip()
            i = end + 1
        if key:
            pairs.append((key, value))
    return pairs


def parse_connection_string(text: str) -> dict[str, str]:
    """Parse ``Key=Value;`` pairs into a dict keyed by lower-case name.

    Later keys override earlier ones, so an appended ``auth_plugin_name``
    replaces one rendered from the descriptor.
    """
    return {key.lower(): value for key, value in _tokenize(text)}


def redact_connection_string(text: str) -> str:
    """Replace the password value with a marker, keeping everything else."""
    pairs = _tokenize(text)
    if not any(key.lower() == "password" for key, _ in pairs):
        return text
    return format_pairs(
        [(key, REDACTED if key.lower() == "password" else value) for key, value in pairs]
    )
