"""
Coordination session.

A session binds one account snapshot, one envelope, the signatures
collected so far and the weight they must reach. Sessions are immutable
values: every transition returns a new session, so two signing flows can
never observe a half-updated signature set.
"""

from __future__ import annotations
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..account import AccountState
from ..runtime.errors import MultisigError, SessionStateError
from ..signers.signature_set import SignatureSet
from ..tx.envelope import TransactionEnvelope
from ..tx.transaction import SimulationFootprint
from .outcomes import Cancelled, Failed, Outcome, Success, TimedOut


class SessionStatus(str, Enum):
    DRAFT = "draft"
    PARTIALLY_SIGNED = "partially_signed"
    READY_TO_SUBMIT = "ready_to_submit"
    SUBMITTED = "submitted"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"
    ABANDONED = "abandoned"


SIGNING_STATUSES = frozenset({
    SessionStatus.DRAFT,
    SessionStatus.PARTIALLY_SIGNED,
    SessionStatus.READY_TO_SUBMIT,
})

TERMINAL_STATUSES = frozenset({
    SessionStatus.SUCCEEDED,
    SessionStatus.FAILED,
    SessionStatus.TIMED_OUT,
    SessionStatus.CANCELLED,
    SessionStatus.ABANDONED,
})

_OUTCOME_STATUS = {
    Success: SessionStatus.SUCCEEDED,
    Failed: SessionStatus.FAILED,
    TimedOut: SessionStatus.TIMED_OUT,
    Cancelled: SessionStatus.CANCELLED,
}


def evaluate_status(account_state: AccountState, signature_set: SignatureSet,
                    required_weight: int) -> SessionStatus:
    """
    Signing status for a signature set.

    READY_TO_SUBMIT once weight reaches the requirement (a floor, not an
    exact match); PARTIALLY_SIGNED once any account signer has signed;
    DRAFT otherwise. Signatures from non-signers never move the status.
    """
    weight, _ = signature_set.weight_against(account_state)
    if weight >= required_weight:
        return SessionStatus.READY_TO_SUBMIT
    if any(account_state.has_signer(identity) for identity in signature_set.identities):
        return SessionStatus.PARTIALLY_SIGNED
    return SessionStatus.DRAFT


@dataclass(frozen=True)
class CoordinationSession:
    """
    Immutable coordination session.

    Attributes:
        session_id: Registry key
        account_state: Account snapshot the weights are computed against
        envelope: Current envelope, carrying every collected signature
        required_weight: Weight the envelope's operations demand
        signature_set: Signatures collected so far
        status: Current state
        warnings: Observable soft conditions (e.g. zero-weight signers)
        footprint: Simulation footprint for contract call sessions
        outcome: Terminal submission outcome, once known
        error: Submission error that failed the session, if any
    """

    session_id: str
    account_state: AccountState
    envelope: TransactionEnvelope
    required_weight: int
    signature_set: SignatureSet = field(default_factory=SignatureSet)
    status: SessionStatus = SessionStatus.DRAFT
    warnings: Tuple[str, ...] = ()
    footprint: Optional[SimulationFootprint] = None
    outcome: Optional[Outcome] = None
    error: Optional[MultisigError] = None

    @classmethod
    def open(cls, account_state: AccountState, envelope: TransactionEnvelope, required_weight: int,
             footprint: Optional[SimulationFootprint] = None,
             session_id: Optional[str] = None) -> CoordinationSession:
        """Open a session around an envelope; any signatures it already carries count."""
        signature_set = SignatureSet(envelope.signatures)
        return cls(
            session_id=session_id or uuid.uuid4().hex,
            account_state=account_state,
            envelope=envelope,
            required_weight=required_weight,
            signature_set=signature_set,
            status=evaluate_status(account_state, signature_set, required_weight),
            footprint=footprint,
        )

    @property
    def tx_id(self) -> str:
        return self.envelope.id_hex

    @property
    def current_weight(self) -> int:
        return self.signature_set.weight(self.account_state)

    @property
    def missing_weight(self) -> int:
        return max(self.required_weight - self.current_weight, 0)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def can_sign(self) -> bool:
        return self.status in SIGNING_STATUSES

    def with_signatures(self, envelope: TransactionEnvelope, signature_set: SignatureSet,
                        warnings: Tuple[str, ...] = ()) -> CoordinationSession:
        """Transition after a signature was collected."""
        if not self.can_sign:
            raise SessionStateError(f"Session {self.session_id} cannot accept signatures in state {self.status.value}")
        return replace(
            self,
            envelope=envelope,
            signature_set=signature_set,
            status=evaluate_status(self.account_state, signature_set, self.required_weight),
            warnings=self.warnings + tuple(warnings),
        )

    def mark_submitted(self) -> CoordinationSession:
        if self.status != SessionStatus.READY_TO_SUBMIT:
            raise SessionStateError(f"Session {self.session_id} is not ready to submit ({self.status.value})")
        return replace(self, status=SessionStatus.SUBMITTED)

    def with_outcome(self, outcome: Outcome) -> CoordinationSession:
        return replace(self, status=_OUTCOME_STATUS[type(outcome)], outcome=outcome)

    def with_error(self, error: MultisigError) -> CoordinationSession:
        """Record a submission error; the envelope is kept as it was."""
        return replace(self, status=SessionStatus.FAILED, error=error)

    def abandon(self) -> CoordinationSession:
        if self.is_terminal:
            raise SessionStateError(f"Session {self.session_id} already finished ({self.status.value})")
        return replace(self, status=SessionStatus.ABANDONED)

    def __repr__(self) -> str:
        return (f"CoordinationSession(id={self.session_id}, status={self.status.value}, "
                f"weight={self.current_weight}/{self.required_weight}, signatures={len(self.signature_set)})")


def signature_report(session: CoordinationSession,
                     account_state: Optional[AccountState] = None) -> Dict[str, Any]:
    """
    Readiness report for a session.

    Args:
        session: Session to report on
        account_state: Fresher account snapshot to evaluate against; defaults
            to the session's own snapshot

    Returns:
        Dictionary with current, required and missing weight, the signers
        still to sign, and signing identities that carry no weight
    """
    state = account_state or session.account_state
    weight, unknown = session.signature_set.weight_against(state)
    weightless = [identity for identity in session.signature_set.identities
                  if identity in unknown or state.weight_of(identity) == 0]
    pending: List[Dict[str, Any]] = [
        {"identity": s.identity, "weight": s.weight}
        for s in state.signers
        if s.identity not in session.signature_set and s.weight > 0
    ]
    return {
        "sessionId": session.session_id,
        "txId": session.tx_id,
        "status": session.status.value,
        "currentWeight": weight,
        "requiredWeight": session.required_weight,
        "missingWeight": max(session.required_weight - weight, 0),
        "isReady": weight >= session.required_weight,
        "signed": list(session.signature_set.identities),
        "pendingSigners": pending,
        "zeroWeightSigners": weightless,
    }


__all__ = [
    "SessionStatus",
    "SIGNING_STATUSES",
    "TERMINAL_STATUSES",
    "evaluate_status",
    "CoordinationSession",
    "signature_report",
]
