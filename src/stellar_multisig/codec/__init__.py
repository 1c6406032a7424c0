"""
Canonical Envelope Codec Module

Deterministic binary encoding for transactions and signed envelopes.

Key components:
- writer.py: Big-endian, 4-byte aligned primitive encoding
- reader.py: Matching decoder with strict structural checks
- envelope_codec.py: Transaction / envelope encoding and decoding
- hashes.py: SHA-256 helpers and the network-bound transaction id
"""

from .hashes import sha256_bytes, network_id, transaction_id
from .reader import BinaryReader
from .writer import BinaryWriter
from .envelope_codec import (
    encode_transaction, encode_envelope, decode_envelope, to_base64, from_base64,
)

__all__ = [
    "BinaryReader",
    "BinaryWriter",
    "sha256_bytes",
    "network_id",
    "transaction_id",
    "encode_transaction",
    "encode_envelope",
    "decode_envelope",
    "to_base64",
    "from_base64",
]
