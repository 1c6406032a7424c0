"""
In-process Ed25519 signer.

Implements the external signer capability with keys the caller already
holds. Used for offline co-signing and as the reference signer in tests.
"""

from __future__ import annotations
import logging
from typing import Dict, Iterable, List

from ..crypto.ed25519 import Ed25519Keypair
from ..runtime.errors import DenialReason, SigningDenied
from ..tx.envelope import TransactionEnvelope
from ..tx.transaction import DecoratedSignature
from .signer import ExternalSigner

logger = logging.getLogger(__name__)


class KeypairSigner(ExternalSigner):
    """
    Signs envelopes with a set of local Ed25519 keys.

    The signer can be locked; a locked signer denies every request.
    """

    def __init__(self, keypairs: Iterable[Ed25519Keypair] = ()):
        self._keys: Dict[str, Ed25519Keypair] = {}
        self._locked = False
        for keypair in keypairs:
            self.add_keypair(keypair)

    @classmethod
    def from_seeds(cls, seeds: Iterable[bytes]) -> KeypairSigner:
        return cls(Ed25519Keypair(seed) for seed in seeds)

    def add_keypair(self, keypair: Ed25519Keypair) -> None:
        self._keys[keypair.account_id] = keypair

    @property
    def identities(self) -> List[str]:
        return list(self._keys)

    @property
    def locked(self) -> bool:
        return self._locked

    def lock(self) -> None:
        self._locked = True

    def unlock(self) -> None:
        self._locked = False

    async def sign(self, encoding: bytes, identity: str, network_passphrase: str) -> bytes:
        if self._locked:
            raise SigningDenied(identity, DenialReason.LOCKED)
        keypair = self._keys.get(identity)
        if keypair is None:
            raise SigningDenied(identity, DenialReason.NOT_AUTHORIZED)

        envelope = TransactionEnvelope.from_encoding(encoding, network_passphrase)
        new_sig = DecoratedSignature(public_key=keypair.public_key, signature=keypair.sign(envelope.id))

        signatures = [new_sig if s.public_key == keypair.public_key else s for s in envelope.signatures]
        replaced = new_sig in signatures
        if not replaced:
            signatures.append(new_sig)

        logger.debug(f"{'Re-signed' if replaced else 'Signed'} {envelope.id_hex} as {identity}")
        return envelope.with_signatures(signatures).encoding


__all__ = ["KeypairSigner"]
