"""
Transaction envelope value.

An envelope is a transaction body plus the signatures collected so far.
It is never mutated: adding signatures produces a new envelope, so a
partially signed envelope can be handed to several signers safely.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from functools import cached_property
from typing import Iterable, Tuple

from .operations import Operation
from .transaction import DecoratedSignature, TimeBounds, Transaction


@dataclass(frozen=True)
class TransactionEnvelope:
    """
    Immutable (possibly signed) transaction envelope.

    Attributes:
        transaction: The unsigned transaction body
        network_passphrase: Network the id and signatures are bound to
        signatures: Signatures in signing order
    """

    transaction: Transaction
    network_passphrase: str
    signatures: Tuple[DecoratedSignature, ...] = ()

    @property
    def source_account(self) -> str:
        return self.transaction.source_account

    @property
    def sequence(self) -> int:
        return self.transaction.sequence

    @property
    def fee(self) -> int:
        return self.transaction.fee

    @property
    def time_bounds(self) -> TimeBounds:
        return self.transaction.time_bounds

    @property
    def operations(self) -> Tuple[Operation, ...]:
        return self.transaction.operations

    @cached_property
    def transaction_bytes(self) -> bytes:
        """Canonical encoding of the unsigned body."""
        # Import here to avoid circular imports
        from ..codec.envelope_codec import encode_transaction
        return encode_transaction(self.transaction)

    @cached_property
    def id(self) -> bytes:
        """32-byte content hash; what every signer signs."""
        from ..codec.hashes import transaction_id
        return transaction_id(self.transaction_bytes, self.network_passphrase)

    @property
    def id_hex(self) -> str:
        return self.id.hex()

    @cached_property
    def encoding(self) -> bytes:
        """Full envelope bytes including signatures."""
        from ..codec.envelope_codec import encode_envelope
        return encode_envelope(self.transaction_bytes, self.signatures)

    def to_base64(self) -> str:
        from ..codec.envelope_codec import to_base64
        return to_base64(self.encoding)

    def with_signatures(self, signatures: Iterable[DecoratedSignature]) -> TransactionEnvelope:
        """Return a copy carrying `signatures` instead of the current ones."""
        return replace(self, signatures=tuple(signatures))

    @classmethod
    def from_encoding(cls, data: bytes, network_passphrase: str) -> TransactionEnvelope:
        """
        Parse envelope bytes.

        Args:
            data: Envelope bytes
            network_passphrase: Network the envelope belongs to

        Returns:
            Decoded envelope

        Raises:
            EnvelopeDecodeError: If the bytes are malformed
        """
        from ..codec.envelope_codec import decode_envelope
        tx, _, signatures = decode_envelope(data)
        return cls(transaction=tx, network_passphrase=network_passphrase, signatures=tuple(signatures))

    @classmethod
    def from_base64(cls, text: str, network_passphrase: str) -> TransactionEnvelope:
        from ..codec.envelope_codec import from_base64
        return cls.from_encoding(from_base64(text), network_passphrase)

    def __repr__(self) -> str:
        return (f"TransactionEnvelope(id={self.id_hex[:16]}..., source='{self.source_account}', "
                f"seq={self.sequence}, ops={len(self.operations)}, signatures={len(self.signatures)})")


__all__ = ["TransactionEnvelope"]
