"""
Signature collection.

Drives one signer at a time through a session: hand the current envelope
to the external signer, parse what comes back, check it is the same
transaction with a valid new signature, and recompute the session's
weight and status against the account snapshot.
"""

from __future__ import annotations
import logging
from typing import List

from ..crypto.ed25519 import verify_signature
from ..runtime.errors import (
    DenialReason, EnvelopeMismatchError, InvalidSignatureError, SessionStateError, SigningDenied,
)
from ..signers.signature_set import SignatureSet
from ..signers.signer import ExternalSigner
from ..tx.envelope import TransactionEnvelope
from .session import CoordinationSession

logger = logging.getLogger(__name__)


class SignatureCollector:
    """
    Collects signatures for coordination sessions.

    The collector holds no session state of its own; callers must not run
    two add_signature calls for the same session concurrently (the
    coordinator facade serializes them).
    """

    def __init__(self, signer: ExternalSigner):
        self._signer = signer

    async def add_signature(self, session: CoordinationSession, identity: str) -> CoordinationSession:
        """
        Request a signature from `identity` and fold it into the session.

        Args:
            session: Session to sign
            identity: Account id whose signature is requested

        Returns:
            Updated session (PARTIALLY_SIGNED or READY_TO_SUBMIT, or DRAFT when
            only non-signers have signed)

        Raises:
            SessionStateError: If the session no longer accepts signatures
            SigningDenied: If the signer refused or returned no signature for `identity`
            EnvelopeMismatchError: If the signer returned a different transaction
            InvalidSignatureError: If a returned signature does not verify
            EnvelopeDecodeError: If the returned bytes are malformed
        """
        if not session.can_sign:
            raise SessionStateError(
                f"Session {session.session_id} cannot accept signatures in state {session.status.value}")

        envelope = session.envelope
        logger.debug(f"Requesting signature from {identity} for {session.tx_id}")
        try:
            signed = await self._signer.sign(envelope.encoding, identity, envelope.network_passphrase)
        except SigningDenied as e:
            logger.info(f"Signer {identity} denied session {session.session_id}: {e.reason.value}")
            raise

        returned = TransactionEnvelope.from_encoding(signed, envelope.network_passphrase)
        if returned.transaction_bytes != envelope.transaction_bytes:
            raise EnvelopeMismatchError(details={"sessionId": session.session_id,
                                                 "expected": session.tx_id,
                                                 "received": returned.id_hex})

        signature_set = SignatureSet(returned.signatures)
        if identity not in signature_set:
            raise SigningDenied(identity, DenialReason.NO_SIGNATURE,
                                f"Signer returned no signature for {identity}")

        self._verify_new_signatures(session, signature_set)
        warnings = self._collect_warnings(session, signature_set)

        updated = session.with_signatures(envelope.with_signatures(signature_set.signatures),
                                          signature_set, tuple(warnings))
        logger.info(f"Session {session.session_id}: {identity} signed, weight "
                    f"{updated.current_weight}/{updated.required_weight}, "
                    f"{session.status.value} -> {updated.status.value}")
        return updated

    @staticmethod
    def _verify_new_signatures(session: CoordinationSession, signature_set: SignatureSet) -> None:
        tx_id = session.envelope.id
        for sig in signature_set:
            previous = session.signature_set.get(sig.identity)
            if previous is not None and previous.signature == sig.signature:
                continue
            if not verify_signature(sig.public_key, sig.signature, tx_id):
                raise InvalidSignatureError(f"Signature from {sig.identity} does not verify",
                                            details={"sessionId": session.session_id,
                                                     "identity": sig.identity})

    @staticmethod
    def _collect_warnings(session: CoordinationSession, signature_set: SignatureSet) -> List[str]:
        warnings: List[str] = []
        account_id = session.account_state.account_id

        for identity in signature_set.identities:
            if identity in session.signature_set or session.account_state.has_signer(identity):
                continue
            message = f"{identity} is not a signer on {account_id}; its signature carries no weight"
            logger.warning(f"Session {session.session_id}: {message}")
            warnings.append(message)

        dropped = [i for i in session.signature_set.identities if i not in signature_set]
        if dropped:
            message = f"Signer dropped earlier signatures from {', '.join(dropped)}"
            logger.warning(f"Session {session.session_id}: {message}")
            warnings.append(message)

        return warnings


__all__ = ["SignatureCollector"]
