"""Database probe."""

from .models import ProbeOutcome, ProbeResult
from .runner import PROBE_QUERY, ProbeRunner

__all__ = ["PROBE_QUERY", "ProbeOutcome", "ProbeResult", "ProbeRunner"]
