"""
Coordination pipeline: sessions, signature collection and submission.
"""

from .outcomes import Success, Failed, TimedOut, Cancelled, Outcome
from .session import (
    SessionStatus, TERMINAL_STATUSES, CoordinationSession, evaluate_status, signature_report,
)
from .collector import SignatureCollector
from .submission import SubmissionCoordinator

__all__ = [
    "Success",
    "Failed",
    "TimedOut",
    "Cancelled",
    "Outcome",
    "SessionStatus",
    "TERMINAL_STATUSES",
    "CoordinationSession",
    "evaluate_status",
    "signature_report",
    "SignatureCollector",
    "SubmissionCoordinator",
]
