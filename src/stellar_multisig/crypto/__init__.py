"""
Cryptographic primitives.
"""

from .ed25519 import Ed25519Error, Ed25519Keypair, verify_signature, verify_for_account

__all__ = [
    "Ed25519Error",
    "Ed25519Keypair",
    "verify_signature",
    "verify_for_account",
]
