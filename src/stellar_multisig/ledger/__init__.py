"""
Ledger access interface and its response types.
"""

from .access import (
    LedgerAccess, ResultCodes, SimulationResult, SubmitStatus, SubmitResponse,
    PollStatus, PollResponse,
)

__all__ = [
    "LedgerAccess",
    "ResultCodes",
    "SimulationResult",
    "SubmitStatus",
    "SubmitResponse",
    "PollStatus",
    "PollResponse",
]
