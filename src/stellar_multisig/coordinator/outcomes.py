"""
Terminal outcomes of a submission.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Union

from ..ledger.access import ResultCodes
from ..tx.values import TypedValue


@dataclass(frozen=True)
class Success:
    """Transaction applied in `ledger_sequence`."""
    tx_id: str
    ledger_sequence: Optional[int] = None
    return_value: Optional[TypedValue] = None


@dataclass(frozen=True)
class Failed:
    """Transaction was included but failed; `result_codes` says why."""
    tx_id: str
    result_codes: ResultCodes


@dataclass(frozen=True)
class TimedOut:
    """
    Poll budget exhausted while the transaction was still pending.

    Not a failure: the transaction may still confirm. Keep `tx_id` and look
    it up later; never resubmit the same envelope.
    """
    tx_id: str
    attempts: int


@dataclass(frozen=True)
class Cancelled:
    """Polling stopped by the caller. The transaction may still confirm."""
    tx_id: str
    attempts: int


Outcome = Union[Success, Failed, TimedOut, Cancelled]


__all__ = ["Success", "Failed", "TimedOut", "Cancelled", "Outcome"]
