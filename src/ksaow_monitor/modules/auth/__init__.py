"""Connection establishment with authentication fallback."""

from .drivers import DatabaseDriver, FirebirdDriver, OracleDriver, default_drivers
from .negotiator import AuthAttempt, AuthNegotiator, NegotiatedConnection, close_quietly
from .strategies import (
    DEFAULT_STRATEGY,
    FIREBIRD_STRATEGIES,
    ORACLE_STRATEGIES,
    AuthStrategy,
    is_auth_negotiation_error,
)
from .trust import DEFAULT_APPLICATION_NAME, classify_trust_block, remediation_steps

__all__ = [
    "AuthAttempt",
    "AuthNegotiator",
    "AuthStrategy",
    "DEFAULT_APPLICATION_NAME",
    "DEFAULT_STRATEGY",
    "DatabaseDriver",
    "FIREBIRD_STRATEGIES",
    "FirebirdDriver",
    "NegotiatedConnection",
    "ORACLE_STRATEGIES",
    "OracleDriver",
    "classify_trust_block",
    "close_quietly",
    "default_drivers",
    "is_auth_negotiation_error",
    "remediation_steps",
]
