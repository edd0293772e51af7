"""Recognition of the Oracle logon trigger that rejects untrusted programs."""

from __future__ import annotations

from ksaow_monitor.errors import ApplicationTrustBlockedError

TRUST_ERROR_CODE = "ORA-04088"
TRUST_TRIGGER_NAME = "TSPY_CONN_APW_USER"
DEFAULT_APPLICATION_NAME = "KsaowMonitor.exe"


def remediation_steps(application_name: str = DEFAULT_APPLICATION_NAME) -> str:
    """Administrative steps that mark the application as trusted."""
    pattern = application_name.upper()
    return "\n".join(
        [
            "1. Open SQL*Plus as a database administrator.",
            "2. Run: UPDATE apw_user.aapp SET trust=1 "
            f"WHERE UPPER(nazwa) LIKE '%{pattern}%';",
            "3. Run: COMMIT;",
            "4. Restart the monitor service.",
        ]
    )


def is_trust_block(exc: BaseException) -> bool:
    message = str(exc)
    return TRUST_ERROR_CODE in message and TRUST_TRIGGER_NAME in message.upper()


def classify_trust_block(
    exc: BaseException,
    application_name: str = DEFAULT_APPLICATION_NAME,
    stage: str = "connection",
) -> ApplicationTrustBlockedError | None:
    """Return an ApplicationTrustBlockedError for a trigger rejection, else None."""
    if not is_trust_block(exc):
        return None
    detail = str(exc)
    return ApplicationTrustBlockedError(
        f"Oracle trigger {TRUST_TRIGGER_NAME} blocks {application_name} ({stage}); "
        f"manual fix by a database administrator is required. Details: {detail}",
        remediation=remediation_steps(application_name),
        detail=detail,
    )
