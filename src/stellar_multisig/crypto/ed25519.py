r"""
Ed25519 operations for envelope signatures.

Thin wrappers over the `cryptography` package: load a key from a caller
supplied 32-byte seed, sign a transaction id, verify a signature against
an account id's public key.
"""

from __future__ import annotations

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey as CryptoEd25519PrivateKey,
    Ed25519PublicKey as CryptoEd25519PublicKey,
)

from ..runtime.strkey import StrKeyError, decode_account_id, encode_account_id


class Ed25519Error(Exception):
    """Base exception for Ed25519 operations."""
    pass


class Ed25519Keypair:
    """
    Ed25519 signing key loaded from an existing seed.

    Key generation is left to wallets; this class only wraps a seed the
    caller already holds.
    """

    def __init__(self, seed: bytes):
        """
        Initialize from a 32-byte seed.

        Args:
            seed: Raw Ed25519 private key seed

        Raises:
            Ed25519Error: If the seed has the wrong length
        """
        if len(seed) != 32:
            raise Ed25519Error(f"Ed25519 seed must be 32 bytes, got {len(seed)}")
        self._key = CryptoEd25519PrivateKey.from_private_bytes(seed)
        self._public_bytes = self._key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )

    @property
    def public_key(self) -> bytes:
        return self._public_bytes

    @property
    def account_id(self) -> str:
        """The 'G...' identity of this key."""
        return encode_account_id(self._public_bytes)

    def sign(self, message: bytes) -> bytes:
        """Sign `message` (a 32-byte transaction id); returns 64 bytes."""
        return self._key.sign(message)

    def __repr__(self) -> str:
        return f"Ed25519Keypair('{self.account_id}')"


def verify_signature(public_key: bytes, signature: bytes, message: bytes) -> bool:
    """
    Verify an Ed25519 signature.

    Args:
        public_key: 32-byte public key
        signature: Signature bytes
        message: Signed message

    Returns:
        True if the signature is valid
    """
    try:
        CryptoEd25519PublicKey.from_public_bytes(public_key).verify(signature, message)
    except (InvalidSignature, ValueError):
        return False
    return True


def verify_for_account(account_id: str, signature: bytes, message: bytes) -> bool:
    """Verify a signature against the public key encoded in an account id."""
    try:
        public_key = decode_account_id(account_id)
    except StrKeyError:
        return False
    return verify_signature(public_key, signature, message)


__all__ = [
    "Ed25519Error",
    "Ed25519Keypair",
    "verify_signature",
    "verify_for_account",
]
