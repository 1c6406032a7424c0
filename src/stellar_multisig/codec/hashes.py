"""
Hash Functions

SHA-256 helpers and the network-bound transaction id.
"""

import hashlib
import struct


ENVELOPE_TYPE_TX = 2


def sha256_bytes(input_bytes: bytes) -> bytes:
    """
    Compute SHA-256 hash of input bytes.

    Args:
        input_bytes: Input bytes to hash

    Returns:
        SHA-256 hash as bytes (32 bytes)
    """
    return hashlib.sha256(input_bytes).digest()


def network_id(network_passphrase: str) -> bytes:
    """Hash of the network passphrase; binds signatures to one network."""
    return sha256_bytes(network_passphrase.encode("utf-8"))


def transaction_id(transaction_bytes: bytes, network_passphrase: str) -> bytes:
    """
    Content-addressed transaction id.

    The id is SHA-256 over the network id, the envelope type and the
    canonical transaction encoding. It is the message every signer signs.

    Args:
        transaction_bytes: Canonical encoding of the unsigned transaction
        network_passphrase: Passphrase of the target network

    Returns:
        32-byte transaction id
    """
    payload = network_id(network_passphrase) + struct.pack(">I", ENVELOPE_TYPE_TX) + transaction_bytes
    return sha256_bytes(payload)
